"""Scene renderers for the contact and gravity examples.

Each renderer computes its force pair once per frame and hands it to the
style for the current view mode. Diagram styles are flat schematics with
static annotations; explore styles add gradients, shading and tip labels.
Both kinds share the primitives in :mod:`newton_pairs.render.draw`.
"""
from __future__ import annotations

import math
import random

import pygame

from newton_pairs.core.config import CONTACT_CFG, ORBIT_CFG, RENDER_CFG, ContactCfg, OrbitCfg, RenderCfg
from newton_pairs.core.contact import ContactGeometry, ContactSimulation
from newton_pairs.core.model import ContactPhase, DisplayOptions, ViewMode
from newton_pairs.core.orbit import OrbitSimulation

from .assets import load_font
from .draw import (
    blend,
    draw_arrow,
    draw_dashed_circle,
    draw_diagram_frame,
    draw_disc,
    draw_force_pair,
    draw_glow,
    draw_gradient_rect,
    draw_label,
    draw_starfield,
    draw_translucent_circle,
    draw_translucent_line,
    draw_translucent_rect,
    generate_starfield,
    radial_background,
)
from .vectors import ArrowScale, ForceVectorPair, force_pair


def _label_font(render_cfg: RenderCfg) -> pygame.font.Font:
    return load_font(render_cfg.preferred_fonts, render_cfg.label_font_size, bold=True)


# ---------------------------------------------------------------- contact


class ContactStyle:
    """Drawing strategy for the hammer and nail scene."""

    def __init__(self, render_cfg: RenderCfg, contact_cfg: ContactCfg) -> None:
        self.render_cfg = render_cfg
        self.cfg = contact_cfg

    def background(self, surface: pygame.Surface, g: ContactGeometry) -> None:
        raise NotImplementedError

    def target(self, surface: pygame.Surface, g: ContactGeometry, target_y: float) -> None:
        raise NotImplementedError

    def striker(self, surface: pygame.Surface, g: ContactGeometry, striker_y: float) -> None:
        raise NotImplementedError

    def contact_marker(self, surface: pygame.Surface, g: ContactGeometry, target_y: float) -> None:
        pass

    def force_pair(self, surface: pygame.Surface, pair: ForceVectorPair, g: ContactGeometry, font) -> None:
        raise NotImplementedError

    def _target_rects(self, g: ContactGeometry, target_y: float):
        s, cfg = g.scale, self.cfg
        shaft = (g.target_x - cfg.target_shaft_width / 2 * s, target_y, cfg.target_shaft_width * s, g.target_height)
        head = (g.target_x - cfg.target_head_width / 2 * s, target_y, cfg.target_head_width * s, cfg.target_head_height * s)
        return shaft, head

    def _striker_rects(self, g: ContactGeometry, striker_y: float):
        s, cfg = g.scale, self.cfg
        head_w = cfg.striker_head_width * s
        handle_h = cfg.striker_handle_height * s
        head = (g.target_x - head_w / 2, striker_y, head_w, g.striker_head_height)
        handle = (
            g.target_x - cfg.striker_handle_width / 2 * s,
            striker_y - handle_h,
            cfg.striker_handle_width * s,
            handle_h,
        )
        return head, handle


class ContactDiagramStyle(ContactStyle):
    def background(self, surface, g):
        draw_diagram_frame(surface, self.render_cfg.contact_diagram_background, render_cfg=self.render_cfg)

    def target(self, surface, g, target_y):
        shaft, head = self._target_rects(g, target_y)
        draw_translucent_rect(surface, self.render_cfg.nail_diagram_shaft_color, shaft)
        draw_translucent_rect(surface, self.render_cfg.nail_diagram_head_color, head)

    def striker(self, surface, g, striker_y):
        head, handle = self._striker_rects(g, striker_y)
        draw_translucent_rect(surface, self.render_cfg.hammer_diagram_head_color, head)
        draw_translucent_rect(surface, self.render_cfg.hammer_diagram_handle_color, handle)

    def force_pair(self, surface, pair, g, font):
        cfg = self.render_cfg
        ink = blend(cfg.diagram_ink_color, cfg.contact_diagram_background, cfg.diagram_ink_alpha / 255)
        draw_force_pair(surface, pair, color_a=ink, color_b=ink, render_cfg=cfg)
        s = g.scale
        label_x = pair.origin_a[0] - 14 * s
        draw_label(surface, font, "F_H", (label_x, pair.end_a[1] + 4 * s), ink, anchor="midright")
        draw_label(surface, font, "F_N", (label_x, pair.end_b[1] - 4 * s), ink, anchor="midright")


class ContactExploreStyle(ContactStyle):
    def background(self, surface, g):
        cfg = self.render_cfg
        width, height = surface.get_size()
        draw_gradient_rect(surface, (0, 0, width, height), cfg.contact_sky_stops)
        pygame.draw.rect(surface, cfg.ground_color, (0, int(g.ground_y), width, height - int(g.ground_y) + 1))
        s = g.scale
        step = max(1.0, cfg.ground_stripe_spacing * s)
        x = 0.0
        while x < width:
            draw_translucent_rect(surface, cfg.ground_stripe_color, (x, g.ground_y + 8 * s, 20 * s, 8 * s))
            x += step

    def target(self, surface, g, target_y):
        shaft, head = self._target_rects(g, target_y)
        draw_gradient_rect(surface, shaft, self.render_cfg.nail_shaft_stops, horizontal=True)
        draw_translucent_rect(surface, self.render_cfg.nail_head_color, head)

    def striker(self, surface, g, striker_y):
        cfg = self.render_cfg
        head, handle = self._striker_rects(g, striker_y)
        draw_gradient_rect(surface, head, cfg.hammer_head_stops, horizontal=True)
        s = g.scale
        draw_translucent_rect(surface, (0, 0, 0, 64), (head[0], head[1] + head[3] - 4 * s, head[2], 4 * s))
        draw_gradient_rect(surface, handle, cfg.hammer_handle_stops, horizontal=True)

    def contact_marker(self, surface, g, target_y):
        s = g.scale
        draw_translucent_circle(
            surface,
            self.render_cfg.contact_ring_color,
            (g.target_x, target_y + 5 * s),
            self.render_cfg.contact_ring_radius * s,
            width=4,
        )

    def force_pair(self, surface, pair, g, font):
        cfg = self.render_cfg
        draw_force_pair(
            surface,
            pair,
            color_a=cfg.action_color,
            color_b=cfg.reaction_color,
            render_cfg=cfg,
            font=font,
            labels=("F_H", "F_N"),
        )


class ContactRenderer:
    """Draws the hammer/nail scene and its F_H / F_N pair."""

    def __init__(
        self,
        render_cfg: RenderCfg = RENDER_CFG,
        contact_cfg: ContactCfg = CONTACT_CFG,
        *,
        font: pygame.font.Font | None = None,
    ) -> None:
        self.render_cfg = render_cfg
        self.contact_cfg = contact_cfg
        self._font = font
        self._styles: dict[ViewMode, ContactStyle] = {
            ViewMode.DIAGRAM: ContactDiagramStyle(render_cfg, contact_cfg),
            ViewMode.EXPLORE: ContactExploreStyle(render_cfg, contact_cfg),
        }
        self.last_pair: ForceVectorPair | None = None

    @property
    def font(self) -> pygame.font.Font:
        if self._font is None:
            self._font = _label_font(self.render_cfg)
        return self._font

    def force_pair(self, sim: ContactSimulation) -> ForceVectorPair | None:
        """The F_H (on nail, down) / F_N (on hammer, up) pair while in contact."""

        impact = sim.impact
        if not impact.active:
            return None
        g, cfg = sim.geometry, self.contact_cfg
        anchor = (
            g.target_x - cfg.arrow_offset_x * g.scale,
            sim.state.target_y + cfg.arrow_anchor_offset * g.scale,
        )
        scale = ArrowScale(factor=cfg.arrow_factor, cap=cfg.arrow_cap * g.scale)
        return force_pair(impact.force_magnitude, anchor, (0.0, 1.0), anchor, scale)

    def draw(self, surface: pygame.Surface | None, sim: ContactSimulation) -> None:
        if surface is None:
            return
        style = self._styles[sim.view_mode]
        g = sim.geometry
        state = sim.state
        striker_y = state.striker_y if state.initialized else g.rest_y
        target_y = state.target_y if state.initialized else g.target_rest_y

        style.background(surface, g)
        style.target(surface, g, target_y)
        style.striker(surface, g, striker_y)
        if state.phase is ContactPhase.CONTACT:
            style.contact_marker(surface, g, target_y)
        pair = self.force_pair(sim)
        self.last_pair = pair
        if pair is not None:
            style.force_pair(surface, pair, g, self.font)


# ---------------------------------------------------------------- gravity


class OrbitStyle:
    """Drawing strategy for the Earth/Moon scene."""

    def __init__(self, render_cfg: RenderCfg, orbit_cfg: OrbitCfg) -> None:
        self.render_cfg = render_cfg
        self.cfg = orbit_cfg

    def background(self, surface, sim, starfield) -> None:
        raise NotImplementedError

    def orbit_path(self, surface, sim, options: DisplayOptions) -> None:
        pass

    def separation_line(self, surface, center, moon) -> None:
        raise NotImplementedError

    def force_pair(self, surface, pair, sim, options: DisplayOptions, font) -> None:
        raise NotImplementedError

    def accelerations(self, surface, arrows, font) -> None:
        pass

    def bodies(self, surface, sim, center, moon) -> None:
        raise NotImplementedError


class OrbitDiagramStyle(OrbitStyle):
    def background(self, surface, sim, starfield):
        draw_diagram_frame(surface, self.render_cfg.gravity_diagram_background, render_cfg=self.render_cfg)

    def _ink(self, color=None, alpha=None):
        cfg = self.render_cfg
        rgb = color or cfg.diagram_ink_color
        return blend(rgb, cfg.gravity_diagram_background, (alpha if alpha is not None else cfg.diagram_ink_alpha) / 255)

    def separation_line(self, surface, center, moon):
        color = self.render_cfg.separation_diagram_color
        draw_translucent_line(surface, self._ink(color[:3], color[3]), center, moon, 2)

    def force_pair(self, surface, pair, sim, options, font):
        ink = self._ink()
        draw_force_pair(surface, pair, color_a=ink, color_b=ink, render_cfg=self.render_cfg)
        cx, cy = sim.center()
        moon_x = pair.origin_a[0]
        mid_left_x = (cx + moon_x) / 2 - 20
        mid_y = cy - 18
        draw_label(surface, font, "F_M", (mid_left_x - 35, mid_y), ink)
        draw_label(surface, font, "F_E", (mid_left_x + 45, mid_y), ink)

    def bodies(self, surface, sim, center, moon):
        cfg = self.render_cfg
        draw_disc(surface, center, sim.primary_radius, color=cfg.primary_diagram_color)
        draw_disc(surface, moon, sim.secondary_radius, color=cfg.secondary_diagram_color)


class OrbitExploreStyle(OrbitStyle):
    def background(self, surface, sim, starfield):
        cfg = self.render_cfg
        width, height = surface.get_size()
        cx, cy = width * 0.5, height * 0.5
        surface.blit(
            radial_background(
                (width, height),
                (cx, cy - 180),
                40,
                width * 0.9,
                cfg.space_inner_color,
                cfg.space_outer_color,
            ),
            (0, 0),
        )
        draw_starfield(surface, starfield, render_cfg=cfg)

    def orbit_path(self, surface, sim, options):
        if not options.show_orbit_path:
            return
        cfg = self.render_cfg
        draw_dashed_circle(
            surface, sim.center(), sim.params.separation, cfg.orbit_path_color, dash=cfg.orbit_path_dash, width=2
        )

    def separation_line(self, surface, center, moon):
        draw_translucent_line(surface, self.render_cfg.separation_line_color, center, moon, 1)

    def force_pair(self, surface, pair, sim, options, font):
        cfg = self.render_cfg
        width = cfg.arrow_line_width
        if options.highlight_pair:
            pulse = 0.5 + math.sin(sim.state.elapsed * 2.0) * 0.5
            alpha = int(255 * (0.3 + pulse * 0.4))
            for origin, end in ((pair.origin_a, pair.end_a), (pair.origin_b, pair.end_b)):
                draw_translucent_line(surface, (*cfg.highlight_color, alpha), origin, end, width + 8)
            width += 2
        draw_force_pair(
            surface,
            pair,
            color_a=cfg.gravity_action_color,
            color_b=cfg.gravity_reaction_color,
            render_cfg=cfg,
            font=font,
            labels=("F_E", "F_M"),
            width=width,
        )

    def accelerations(self, surface, arrows, font):
        cfg = self.render_cfg
        (earth_start, earth_end), (moon_start, moon_end) = arrows
        for start, end, color in (
            (earth_start, earth_end, cfg.accel_primary_color),
            (moon_start, moon_end, cfg.accel_secondary_color),
        ):
            draw_arrow(surface, start, end, color, width=2, head_length=8, head_angle_deg=cfg.arrow_head_angle_deg)
        draw_label(surface, font, "a_E", (earth_end[0] - 4, earth_end[1] - 10), cfg.accel_label_color, anchor="midright")
        draw_label(surface, font, "a_M", (moon_end[0] + 4, moon_end[1] - 10), cfg.accel_label_color)

    def bodies(self, surface, sim, center, moon):
        cfg = self.render_cfg
        r_e = sim.primary_radius
        r_m = sim.secondary_radius
        draw_glow(surface, center, r_e, 1.0, color=cfg.primary_glow_color, outer_alpha=40, inner_alpha=70)
        draw_disc(surface, center, r_e, stops=cfg.primary_stops)
        cx, cy = center
        draw_translucent_circle(surface, cfg.land_color, (cx - r_e * 0.2, cy - r_e * 0.2), r_e * 0.35)
        draw_translucent_circle(surface, cfg.land_color, (cx + r_e * 0.3, cy + r_e * 0.1), r_e * 0.25)

        draw_glow(surface, moon, r_m, 0.6, color=cfg.secondary_glow_color, outer_alpha=30, inner_alpha=50)
        draw_disc(surface, moon, r_m, stops=cfg.secondary_stops)
        mx, my = moon
        draw_translucent_circle(surface, cfg.crater_color, (mx - r_m * 0.2, my + r_m * 0.1), r_m * 0.25)
        draw_translucent_circle(surface, cfg.night_side_color, (mx + r_m * 0.25, my + r_m * 0.25), r_m * 0.9)


class OrbitRenderer:
    """Draws the Earth/Moon scene and its F_E / F_M pair."""

    def __init__(
        self,
        render_cfg: RenderCfg = RENDER_CFG,
        orbit_cfg: OrbitCfg = ORBIT_CFG,
        *,
        options: DisplayOptions | None = None,
        font: pygame.font.Font | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.render_cfg = render_cfg
        self.orbit_cfg = orbit_cfg
        self.options = options or DisplayOptions()
        self._font = font
        self._rng = rng or random.Random()
        self._styles: dict[ViewMode, OrbitStyle] = {
            ViewMode.DIAGRAM: OrbitDiagramStyle(render_cfg, orbit_cfg),
            ViewMode.EXPLORE: OrbitExploreStyle(render_cfg, orbit_cfg),
        }
        self._starfield: list[dict[str, object]] = []
        self._starfield_size: tuple[int, int] | None = None
        self.last_pair: ForceVectorPair | None = None

    @property
    def font(self) -> pygame.font.Font:
        if self._font is None:
            self._font = _label_font(self.render_cfg)
        return self._font

    def starfield(self, size: tuple[int, int]) -> list[dict[str, object]]:
        if size != self._starfield_size:
            self._starfield = generate_starfield(self.orbit_cfg.star_count, size=size, rng=self._rng)
            self._starfield_size = size
        return self._starfield

    def force_pair(self, sim: OrbitSimulation) -> ForceVectorPair:
        """F_E acts on the moon towards Earth; F_M acts on Earth towards the moon."""

        cfg = self.orbit_cfg
        center = sim.center()
        moon = sim.secondary_position()
        cap = sim.params.separation - sim.primary_radius - sim.secondary_radius - cfg.arrow_clearance
        scale = ArrowScale(factor=cfg.arrow_gain, cap=cap, offset=cfg.arrow_base)
        direction = (center[0] - moon[0], center[1] - moon[1])
        return force_pair(sim.gravity, moon, direction, center, scale)

    def acceleration_arrows(self, sim: OrbitSimulation):
        cfg = self.orbit_cfg
        accel_primary, accel_secondary = sim.accelerations
        cx, cy = sim.center()
        mx, my = sim.secondary_position()
        earth_len = min(cfg.primary_accel_cap, accel_primary * cfg.accel_scale)
        moon_len = min(cfg.secondary_accel_cap, accel_secondary * cfg.accel_scale)
        earth_start = (cx - sim.primary_radius - 6, cy)
        moon_start = (mx + sim.secondary_radius + 6, my)
        return (
            (earth_start, (earth_start[0] - earth_len, cy)),
            (moon_start, (moon_start[0] + moon_len, my)),
        )

    def draw(self, surface: pygame.Surface | None, sim: OrbitSimulation) -> None:
        if surface is None:
            return
        mode = sim.view_mode
        style = self._styles[mode]
        center = sim.center()
        moon = sim.secondary_position()

        style.background(surface, sim, self.starfield(surface.get_size()))
        style.orbit_path(surface, sim, self.options)
        style.separation_line(surface, center, moon)
        pair = self.force_pair(sim)
        self.last_pair = pair
        style.force_pair(surface, pair, sim, self.options, self.font)
        if mode is ViewMode.EXPLORE and self.options.show_acceleration:
            style.accelerations(surface, self.acceleration_arrows(sim), self.font)
        style.bodies(surface, sim, center, moon)


__all__ = [
    "ContactDiagramStyle",
    "ContactExploreStyle",
    "ContactRenderer",
    "OrbitDiagramStyle",
    "OrbitExploreStyle",
    "OrbitRenderer",
]
