"""Configuration dataclasses for the Newton's third law simulations."""
from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class ContactCfg:
    impact_constant: float = 22.0
    mass_range: tuple[int, int] = (1, 10)
    speed_range: tuple[int, int] = (1, 10)
    default_mass: int = 5
    default_speed: int = 5
    hold_duration: float = 3.0
    contact_frame_limit: int = 32
    depth_cap: float = 32.0
    depth_divisor: float = 55.0
    descent_rate: float = 2.6
    sink_step: float = 1.5
    rise_step: float = 4.0
    reference_height: float = 600.0
    ground_ratio: float = 0.72
    rest_offset: float = 200.0
    diagram_offset: float = 170.0
    ground_clearance: float = 10.0
    target_height: float = 70.0
    target_head_width: float = 28.0
    target_head_height: float = 8.0
    target_shaft_width: float = 10.0
    striker_head_width: float = 70.0
    striker_head_height: float = 40.0
    striker_handle_width: float = 12.0
    striker_handle_height: float = 110.0
    striker_contact_ratio: float = 0.6
    arrow_divisor: float = 9.0
    arrow_cap: float = 140.0
    arrow_offset_x: float = 45.0
    arrow_anchor_offset: float = 10.0

    @property
    def arrow_factor(self) -> float:
        return 1.0 / self.arrow_divisor


@dataclass(frozen=True)
class OrbitCfg:
    gravitational_constant: float = 24_000.0
    force_floor: float = 0.5
    mass_range: tuple[int, int] = (1, 10)
    separation_range: tuple[int, int] = (120, 350)
    separation_step: int = 5
    default_primary_mass: int = 6
    default_secondary_mass: int = 3
    default_separation: int = 220
    base_angular_speed: float = 0.003
    distance_reference: float = 260.0
    distance_gain: float = 0.002
    elapsed_step: float = 0.02
    primary_radius_base: float = 26.0
    primary_radius_per_mass: float = 2.6
    secondary_radius_base: float = 12.0
    secondary_radius_per_mass: float = 1.6
    arrow_base: float = 40.0
    arrow_gain: float = 1.4
    arrow_clearance: float = 6.0
    accel_scale: float = 10.0
    primary_accel_cap: float = 60.0
    secondary_accel_cap: float = 80.0
    star_count: int = 120


@dataclass(frozen=True)
class SchedulerCfg:
    frame_rate: int = 60
    max_frame_delta: float = 0.25


@dataclass(frozen=True)
class RenderCfg:
    min_frame_size: int = 320
    default_frame_size: tuple[int, int] = (960, 600)
    windowed_default_size: tuple[int, int] = (1280, 720)
    panel_width: int = 320
    pixel_ratio: float = 1.0
    arrow_line_width: int = 4
    arrow_head_length: int = 12
    arrow_head_angle_deg: int = 30
    label_font_size: int = 14
    hud_font_size: int = 16
    title_font_size: int = 20
    preferred_fonts: tuple[str, ...] = ("Pretendard", "Segoe UI", "Helvetica", "Arial")
    diagram_frame_margin: int = 18
    diagram_ink_color: tuple[int, int, int] = (15, 23, 42)
    diagram_ink_alpha: int = int(255 * 0.85)
    diagram_frame_color: tuple[int, int, int, int] = (15, 23, 42, int(255 * 0.12))
    contact_diagram_background: tuple[int, int, int] = (255, 255, 255)
    gravity_diagram_background: tuple[int, int, int] = (248, 250, 252)
    contact_sky_stops: tuple[tuple[float, tuple[int, int, int]], ...] = (
        (0.0, (254, 243, 199)),
        (0.55, (254, 249, 195)),
        (1.0, (253, 230, 138)),
    )
    ground_color: tuple[int, int, int] = (217, 119, 6)
    ground_stripe_color: tuple[int, int, int, int] = (120, 53, 15, int(255 * 0.35))
    ground_stripe_spacing: float = 45.0
    nail_shaft_stops: tuple[tuple[float, tuple[int, int, int]], ...] = (
        (0.0, (203, 213, 225)),
        (0.5, (148, 163, 184)),
        (1.0, (100, 116, 139)),
    )
    nail_head_color: tuple[int, int, int] = (100, 116, 139)
    nail_diagram_shaft_color: tuple[int, int, int] = (156, 163, 175)
    nail_diagram_head_color: tuple[int, int, int] = (107, 114, 128)
    hammer_head_stops: tuple[tuple[float, tuple[int, int, int]], ...] = (
        (0.0, (31, 41, 55)),
        (0.55, (71, 85, 105)),
        (1.0, (15, 23, 42)),
    )
    hammer_handle_stops: tuple[tuple[float, tuple[int, int, int]], ...] = (
        (0.0, (146, 64, 14)),
        (0.5, (217, 119, 6)),
        (1.0, (124, 45, 18)),
    )
    hammer_diagram_head_color: tuple[int, int, int] = (71, 85, 105)
    hammer_diagram_handle_color: tuple[int, int, int] = (180, 83, 9)
    contact_ring_color: tuple[int, int, int, int] = (239, 68, 68, int(255 * 0.4))
    contact_ring_radius: float = 26.0
    action_color: tuple[int, int, int] = (239, 68, 68)
    reaction_color: tuple[int, int, int] = (59, 130, 246)
    space_inner_color: tuple[int, int, int] = (16, 27, 58)
    space_outer_color: tuple[int, int, int] = (2, 6, 23)
    star_color: tuple[int, int, int] = (248, 250, 252)
    orbit_path_color: tuple[int, int, int, int] = (148, 163, 184, int(255 * 0.35))
    orbit_path_dash: tuple[int, int] = (6, 10)
    separation_line_color: tuple[int, int, int, int] = (148, 163, 184, int(255 * 0.35))
    separation_diagram_color: tuple[int, int, int, int] = (15, 23, 42, int(255 * 0.25))
    gravity_action_color: tuple[int, int, int] = (248, 113, 113)
    gravity_reaction_color: tuple[int, int, int] = (96, 165, 250)
    primary_stops: tuple[tuple[float, tuple[int, int, int]], ...] = (
        (0.0, (191, 219, 254)),
        (0.45, (96, 165, 250)),
        (1.0, (30, 58, 138)),
    )
    secondary_stops: tuple[tuple[float, tuple[int, int, int]], ...] = (
        (0.0, (241, 245, 249)),
        (0.55, (203, 213, 225)),
        (1.0, (100, 116, 139)),
    )
    primary_diagram_color: tuple[int, int, int] = (207, 227, 247)
    secondary_diagram_color: tuple[int, int, int] = (209, 213, 219)
    primary_glow_color: tuple[int, int, int] = (59, 130, 246)
    secondary_glow_color: tuple[int, int, int] = (248, 250, 252)
    land_color: tuple[int, int, int, int] = (34, 197, 94, int(255 * 0.5))
    crater_color: tuple[int, int, int, int] = (148, 163, 184, int(255 * 0.6))
    night_side_color: tuple[int, int, int, int] = (15, 23, 42, int(255 * 0.18))
    accel_primary_color: tuple[int, int, int, int] = (96, 165, 250, int(255 * 0.45))
    accel_secondary_color: tuple[int, int, int, int] = (248, 113, 113, int(255 * 0.45))
    accel_label_color: tuple[int, int, int] = (226, 232, 240)
    highlight_color: tuple[int, int, int] = (253, 224, 71)
    panel_background: tuple[int, int, int] = (15, 23, 42)
    panel_text_color: tuple[int, int, int] = (226, 232, 240)
    panel_muted_color: tuple[int, int, int] = (148, 163, 184)
    panel_value_color: tuple[int, int, int] = (96, 165, 250)
    panel_action_color: tuple[int, int, int] = (248, 113, 113)
    panel_card_color: tuple[int, int, int, int] = (30, 41, 59, 220)
    button_color: tuple[int, int, int, int] = (8, 32, 64, int(255 * 0.78))
    button_hover_color: tuple[int, int, int, int] = (18, 52, 94, int(255 * 0.88))
    button_text_color: tuple[int, int, int] = (234, 241, 255)
    button_border_color: tuple[int, int, int, int] = (88, 140, 255, int(255 * 0.55))
    button_radius: int = 12
    fps_text_alpha: int = int(255 * 0.6)


CONTACT_CFG = ContactCfg()
ORBIT_CFG = OrbitCfg()
SCHEDULER_CFG = SchedulerCfg()
RENDER_CFG = RenderCfg()


SETTINGS_DIR = Path.home() / ".newton_pairs"
SETTINGS_PATH = SETTINGS_DIR / "settings.json"


def load_user_settings(path: Path = SETTINGS_PATH) -> dict[str, object]:
    """Return persisted display preferences if the JSON file is readable."""

    try:
        with path.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
    except (OSError, json.JSONDecodeError):
        return {}
    if isinstance(data, dict):
        return data
    return {}


def save_user_settings(settings: dict[str, object], path: Path = SETTINGS_PATH) -> None:
    """Persist display preferences, ignoring filesystem errors."""

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as fh:
            json.dump(settings, fh, indent=2, sort_keys=True)
    except OSError:
        # Shutdown continues without saved preferences.
        pass


__all__ = [
    "CONTACT_CFG",
    "ContactCfg",
    "ORBIT_CFG",
    "OrbitCfg",
    "RENDER_CFG",
    "RenderCfg",
    "SCHEDULER_CFG",
    "SETTINGS_PATH",
    "SchedulerCfg",
    "load_user_settings",
    "save_user_settings",
]
