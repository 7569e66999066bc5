"""Interactive window for the two Newton's third law examples.

The left panel holds read-outs and buttons; the scene host on the right is
observed by the size tracker and drawn by whichever example is mounted.
"""
from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path
from typing import Sequence

import pygame
from pygame.locals import DOUBLEBUF, FULLSCREEN, NOFRAME, RESIZABLE

from newton_pairs import __version__
from newton_pairs.core.config import (
    CONTACT_CFG,
    ORBIT_CFG,
    RENDER_CFG,
    SCHEDULER_CFG,
    RenderCfg,
    SchedulerCfg,
    load_user_settings,
    save_user_settings,
)
from newton_pairs.core.contact import ContactSimulation
from newton_pairs.core.logging_utils import RunLogger, SessionRecorder
from newton_pairs.core.model import ContactParams, ContactPhase, DisplayOptions, FrameSize, OrbitParams, ViewMode
from newton_pairs.core.orbit import OrbitSimulation
from newton_pairs.core.runtime import SimulationRuntime
from newton_pairs.core.size import SurfaceSizeTracker
from newton_pairs.core.timekeeping import ClockPacer, FrameScheduler
from newton_pairs.core.view import ViewModeController
from newton_pairs.data.presets import PRESET_FLASH_DURATION, preset_for
from newton_pairs.render import (
    Button,
    ButtonVisualStyle,
    ContactRenderer,
    OrbitRenderer,
    SceneCanvas,
    build_text_panel,
    get_text_surface,
    load_font,
)

logger = logging.getLogger(__name__)

EXAMPLES = ("contact", "gravity")
TITLES = {
    "contact": "Contact force: hammer and nail",
    "gravity": "Non-contact force: Earth and Moon",
}
PRESET_KEYS = {
    pygame.K_1: 0,
    pygame.K_2: 1,
    pygame.K_3: 2,
    pygame.K_4: 3,
    pygame.K_5: 4,
}


def _set_display_mode_with_vsync(size: tuple[int, int], flags: int = 0) -> pygame.Surface:
    """Create the display surface with double buffering and vsync when available."""
    flags |= DOUBLEBUF
    try:
        return pygame.display.set_mode(size, flags, vsync=1)
    except TypeError:
        return pygame.display.set_mode(size, flags)
    except pygame.error as err:
        try:
            return pygame.display.set_mode(size, flags)
        except pygame.error:
            raise err


class NewtonPairsApp:
    """Owns the window, the shared scheduler and size tracker, and both examples."""

    def __init__(
        self,
        window_size: tuple[int, int] = RENDER_CFG.windowed_default_size,
        *,
        example: str = "contact",
        mode: ViewMode | str = ViewMode.DIAGRAM,
        record: bool = False,
        runs_dir: str | Path = "data/runs",
        options: DisplayOptions | None = None,
        render_cfg: RenderCfg = RENDER_CFG,
        scheduler_cfg: SchedulerCfg = SCHEDULER_CFG,
        scheduler: FrameScheduler | None = None,
        pixel_ratio: float | None = None,
    ) -> None:
        if example not in EXAMPLES:
            raise ValueError(f"Unknown example: {example!r}")
        self.render_cfg = render_cfg
        self.window_size = window_size
        self.pixel_ratio = max(1.0, pixel_ratio or render_cfg.pixel_ratio)
        self.options = options or DisplayOptions()
        self.scheduler = scheduler or FrameScheduler(cfg=scheduler_cfg)
        self.running = True
        self.fullscreen = False
        self.record = record
        self.runs_dir = Path(runs_dir)

        self.tracker = SurfaceSizeTracker(self._logical_scene_size(window_size), minimum=render_cfg.min_frame_size)
        self.canvas = SceneCanvas(self.tracker.size, self.pixel_ratio)
        # Registered first so the canvas is resized before any simulation redraws.
        self.tracker.subscribe(self.canvas.resize)

        initial_mode = ViewMode.parse(mode)
        self.simulations = {
            "contact": ContactSimulation(
                self.tracker.size, view=ViewModeController(initial_mode), cfg=CONTACT_CFG
            ),
            "gravity": OrbitSimulation(
                self.tracker.size, view=ViewModeController(initial_mode), cfg=ORBIT_CFG
            ),
        }
        self.renderers = {
            "contact": ContactRenderer(render_cfg, CONTACT_CFG),
            "gravity": OrbitRenderer(render_cfg, ORBIT_CFG, options=self.options),
        }
        self.recorders: dict[str, SessionRecorder] = {}
        self.runtimes = {
            kind: SimulationRuntime(
                self.simulations[kind],
                self.renderers[kind].draw,
                lambda: self.canvas.surface,
                self.scheduler,
                self.tracker,
                on_tick=self._record_tick,
            )
            for kind in EXAMPLES
        }
        self.active = example
        self.preset_flash: str | None = None
        self.preset_flash_remaining = 0.0
        self.buttons: list[Button] = []
        self._fonts: dict[str, pygame.font.Font] = {}
        self.button_style = ButtonVisualStyle.from_cfg(render_cfg)

    # ----------------------------------------------------------------- layout
    def _logical_scene_size(self, window_size: tuple[int, int]) -> tuple[float, float]:
        width, height = window_size
        return (
            max(0, width - self.render_cfg.panel_width) / self.pixel_ratio,
            height / self.pixel_ratio,
        )

    @property
    def scene_rect(self) -> pygame.Rect:
        width, height = self.window_size
        panel = self.render_cfg.panel_width
        return pygame.Rect(panel, 0, max(0, width - panel), height)

    def sync_layout(self, window_size: tuple[int, int]) -> FrameSize:
        """Observe the scene host; a changed size restarts the mounted loop."""

        if window_size != self.window_size:
            self.window_size = window_size
            self._layout_buttons()
        return self.tracker.observe_size(*self._logical_scene_size(window_size))

    # -------------------------------------------------------------- examples
    @property
    def simulation(self) -> ContactSimulation | OrbitSimulation:
        return self.simulations[self.active]

    @property
    def runtime(self) -> SimulationRuntime:
        return self.runtimes[self.active]

    def mount_active(self) -> None:
        if self.record and self.active not in self.recorders:
            self._start_recording(self.active)
        self.runtime.mount()
        logger.info("showing %s example", self.active)

    def switch_example(self, example: str | None = None) -> str:
        if example is None:
            example = EXAMPLES[(EXAMPLES.index(self.active) + 1) % len(EXAMPLES)]
        if example not in EXAMPLES:
            raise ValueError(f"Unknown example: {example!r}")
        if example == self.active and self.runtime.mounted:
            return self.active
        self.runtime.unmount()
        self.active = example
        self.preset_flash = None
        self.mount_active()
        self._layout_buttons()
        return self.active

    def _start_recording(self, kind: str) -> None:
        sim = self.simulations[kind]
        run_logger = RunLogger(kind, self.runs_dir)
        recorder = SessionRecorder(sim, run_logger)
        recorder.write_meta({"pixel_ratio": self.pixel_ratio, "version": __version__})
        self.recorders[kind] = recorder

    def _record_tick(self, sim, dt: float) -> None:
        recorder = self.recorders.get(sim.kind)
        if recorder is not None:
            recorder.on_tick(sim, dt)

    # --------------------------------------------------------------- commands
    def toggle_view_mode(self) -> ViewMode:
        return self.simulation.view.toggle()

    def primary_action(self) -> None:
        sim = self.simulation
        if isinstance(sim, ContactSimulation):
            sim.strike()
        else:
            sim.toggle_pause()

    def continue_after_contact(self) -> None:
        sim = self.simulation
        if isinstance(sim, ContactSimulation):
            sim.continue_after_contact()

    def reset(self) -> None:
        self.simulation.reset()

    def adjust(self, key: int) -> bool:
        """Step a parameter for an arrow or W/S key; returns whether one applied."""

        sim = self.simulation
        if isinstance(sim, ContactSimulation):
            p = sim.params
            steps = {
                pygame.K_LEFT: (-1, 0),
                pygame.K_RIGHT: (1, 0),
                pygame.K_UP: (0, 1),
                pygame.K_DOWN: (0, -1),
                pygame.K_w: (0, 1),
                pygame.K_s: (0, -1),
            }
            if key not in steps:
                return False
            d_mass, d_speed = steps[key]
            return sim.apply_params(ContactParams(p.mass + d_mass, p.speed + d_speed))
        p = sim.params
        step = sim.cfg.separation_step
        steps = {
            pygame.K_LEFT: (-1, 0, 0),
            pygame.K_RIGHT: (1, 0, 0),
            pygame.K_w: (0, 1, 0),
            pygame.K_s: (0, -1, 0),
            pygame.K_UP: (0, 0, step),
            pygame.K_DOWN: (0, 0, -step),
        }
        if key not in steps:
            return False
        d_primary, d_secondary, d_sep = steps[key]
        return sim.apply_params(
            OrbitParams(p.primary_mass + d_primary, p.secondary_mass + d_secondary, p.separation + d_sep)
        )

    def apply_preset(self, index: int) -> bool:
        preset = preset_for(self.active, index)
        applied = self.simulation.apply_params(preset.params(), source=f"preset:{preset.key}")
        if applied:
            self.preset_flash = preset.name
            self.preset_flash_remaining = PRESET_FLASH_DURATION
        return applied

    def toggle_option(self, name: str) -> bool:
        value = not getattr(self.options, name)
        setattr(self.options, name, value)
        return value

    def quit(self) -> None:
        self.running = False

    # ----------------------------------------------------------------- events
    def handle_key(self, key: int) -> None:
        if key == pygame.K_ESCAPE:
            self.quit()
        elif key == pygame.K_F11:
            self.toggle_fullscreen()
        elif key == pygame.K_TAB:
            self.switch_example()
        elif key == pygame.K_d:
            self.toggle_view_mode()
        elif key == pygame.K_SPACE:
            self.primary_action()
        elif key in (pygame.K_RETURN, pygame.K_KP_ENTER):
            self.continue_after_contact()
        elif key == pygame.K_r:
            self.reset()
        elif key in PRESET_KEYS:
            self.apply_preset(PRESET_KEYS[key])
        elif self.active == "gravity" and key == pygame.K_o:
            self.toggle_option("show_orbit_path")
        elif self.active == "gravity" and key == pygame.K_a:
            self.toggle_option("show_acceleration")
        elif self.active == "gravity" and key == pygame.K_h:
            self.toggle_option("highlight_pair")
        else:
            self.adjust(key)

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.QUIT:
            self.quit()
        elif event.type == pygame.KEYDOWN:
            self.handle_key(event.key)
        elif event.type == pygame.MOUSEBUTTONDOWN:
            for btn in list(self.buttons):
                if btn.handle_event(event):
                    break

    # ---------------------------------------------------------------- display
    def font(self, role: str) -> pygame.font.Font:
        if role not in self._fonts:
            cfg = self.render_cfg
            sizes = {"title": cfg.title_font_size, "hud": cfg.hud_font_size, "small": cfg.label_font_size}
            self._fonts[role] = load_font(cfg.preferred_fonts, sizes[role], bold=role == "title")
        return self._fonts[role]

    def _layout_buttons(self) -> None:
        cfg = self.render_cfg
        width = cfg.panel_width - 40
        height = 34
        gap = 8

        def mode_text() -> str:
            return "View: Diagram" if self.simulation.view.is_diagram else "View: Explore"

        entries: list[tuple[str, object, object, object, object]] = [
            ("Switch example", self.switch_example, None, None, None),
            ("View", self.toggle_view_mode, mode_text, None, None),
        ]
        if self.active == "contact":
            contact = self.simulations["contact"]
            entries += [
                (
                    "Strike",
                    self.primary_action,
                    None,
                    None,
                    lambda: not contact.view.is_diagram and contact.phase is ContactPhase.IDLE,
                ),
                ("Continue", self.continue_after_contact, None, None, lambda: contact.holding),
                ("Reset", self.reset, None, None, None),
            ]
        else:
            orbit = self.simulations["gravity"]
            entries += [
                ("Pause", self.primary_action, lambda: "Resume" if orbit.paused else "Pause", None, None),
                ("Reset", self.reset, None, None, None),
                (
                    "Orbit path",
                    lambda: self.toggle_option("show_orbit_path"),
                    None,
                    lambda: self.options.show_orbit_path,
                    None,
                ),
                (
                    "Acceleration",
                    lambda: self.toggle_option("show_acceleration"),
                    None,
                    lambda: self.options.show_acceleration,
                    None,
                ),
                (
                    "Highlight pair",
                    lambda: self.toggle_option("highlight_pair"),
                    None,
                    lambda: self.options.highlight_pair,
                    None,
                ),
            ]
        total_height = len(entries) * height + (len(entries) - 1) * gap
        start_y = self.window_size[1] - total_height - 20
        self.buttons = [
            Button(
                (20, start_y + idx * (height + gap), width, height),
                text,
                callback,
                text_getter,
                style=self.button_style,
                active=active,
                enabled=enabled,
            )
            for idx, (text, callback, text_getter, active, enabled) in enumerate(entries)
        ]

    def panel_lines(self) -> list[tuple[str, tuple[int, int, int]]]:
        cfg = self.render_cfg
        text, muted, value, accent = (
            cfg.panel_text_color,
            cfg.panel_muted_color,
            cfg.panel_value_color,
            cfg.panel_action_color,
        )
        sim = self.simulation
        lines: list[tuple[str, tuple[int, int, int]]] = [
            (f"Mode: {sim.view_mode.value.title()}", muted),
            ("", text),
        ]
        if isinstance(sim, ContactSimulation):
            impact = sim.impact
            lines += [
                (f"Hammer mass: {sim.params.mass} kg", text),
                (f"Hammer speed: {sim.params.speed} m/s", text),
                ("", text),
                (f"F_H = F_N = {impact.force_magnitude} N" if impact.active else "F_H = F_N = -", value),
                (f"Phase: {sim.phase.value}", accent if impact.active else muted),
            ]
            if sim.holding:
                lines.append((f"Holding: {sim.state.hold_remaining:.1f} s (Enter)", accent))
        else:
            accel_primary, accel_secondary = sim.accelerations
            lines += [
                (f"Earth mass: {sim.params.primary_mass}", text),
                (f"Moon mass: {sim.params.secondary_mass}", text),
                (f"Separation: {sim.params.separation} px", text),
                ("", text),
                (f"|F_E| = |F_M| = {sim.gravity:.1f}", value),
                (f"a_E = {accel_primary:.2f}   a_M = {accel_secondary:.2f}", text),
                ("Paused" if sim.paused else "Running", accent if sim.paused else muted),
            ]
        if self.preset_flash:
            lines += [("", text), (f"Preset: {self.preset_flash}", value)]
        lines += [
            ("", text),
            ("Tab example  D view  Space go", muted),
            ("R reset  1-5 presets  F11 full", muted),
        ]
        return lines

    def draw_panel(self, screen: pygame.Surface) -> None:
        cfg = self.render_cfg
        panel_rect = pygame.Rect(0, 0, cfg.panel_width, self.window_size[1])
        pygame.draw.rect(screen, cfg.panel_background, panel_rect)
        title = get_text_surface(self.font("title"), TITLES[self.active], cfg.panel_text_color)
        screen.blit(title, (20, 20))
        card = build_text_panel(
            self.font("hud"),
            self.panel_lines(),
            background_color=cfg.panel_card_color,
            min_width=cfg.panel_width - 40,
        )
        screen.blit(card, (20, 20 + title.get_height() + 12))
        mouse_pos = pygame.mouse.get_pos()
        for btn in self.buttons:
            btn.draw(screen, self.font("hud"), mouse_pos)

    def draw_fps(self, screen: pygame.Surface) -> None:
        pacer = self.scheduler.pacer
        if not isinstance(pacer, ClockPacer):
            return
        fps_text = self.font("small").render(f"FPS: {pacer.fps:.0f}", True, (140, 180, 255))
        fps_text.set_alpha(self.render_cfg.fps_text_alpha)
        screen.blit(fps_text, fps_text.get_rect(topright=(self.window_size[0] - 12, 10)))

    def draw(self, screen: pygame.Surface) -> None:
        screen.fill(self.render_cfg.panel_background)
        self.canvas.present(screen, self.scene_rect.topleft)
        self.draw_panel(screen)
        self.draw_fps(screen)

    # ------------------------------------------------------------------- loop
    def _create_fullscreen_surface(self) -> pygame.Surface:
        info = pygame.display.Info()
        fallback_resolution = (info.current_w or self.window_size[0], info.current_h or self.window_size[1])
        screen_fs: pygame.Surface | None = None
        if info.current_w and info.current_h:
            try:
                os.environ.setdefault("SDL_VIDEO_WINDOW_POS", "0,0")
                screen_fs = _set_display_mode_with_vsync((info.current_w, info.current_h), NOFRAME)
            except pygame.error:
                screen_fs = None
        if screen_fs is None:
            try:
                screen_fs = _set_display_mode_with_vsync((0, 0), FULLSCREEN)
            except pygame.error:
                screen_fs = _set_display_mode_with_vsync(fallback_resolution)
        return screen_fs

    def _create_windowed_surface(self) -> pygame.Surface:
        return _set_display_mode_with_vsync(self.render_cfg.windowed_default_size, RESIZABLE)

    def toggle_fullscreen(self) -> None:
        target_fullscreen = not self.fullscreen
        try:
            screen = self._create_fullscreen_surface() if target_fullscreen else self._create_windowed_surface()
        except pygame.error:
            logger.warning("could not switch fullscreen mode")
            return
        self.fullscreen = target_fullscreen
        self.sync_layout(screen.get_size())

    def run(self) -> None:
        pygame.init()
        pygame.display.set_caption("Newton's Third Law: force pairs")
        screen = _set_display_mode_with_vsync(self.window_size, RESIZABLE)
        self.sync_layout(screen.get_size())
        self._layout_buttons()
        self.mount_active()
        logger.info("started at %sx%s", *screen.get_size())
        try:
            while self.running:
                for event in pygame.event.get():
                    self.handle_event(event)
                if not self.running:
                    break
                screen = pygame.display.get_surface()
                self.sync_layout(screen.get_size())
                dt = self.scheduler.run_frame()
                if self.preset_flash_remaining > 0.0:
                    self.preset_flash_remaining -= dt
                    if self.preset_flash_remaining <= 0.0:
                        self.preset_flash = None
                self.draw(screen)
                pygame.display.flip()
        finally:
            self.shutdown()
            pygame.quit()

    def shutdown(self) -> None:
        self.runtime.unmount()
        self.scheduler.cancel_all()
        for recorder in self.recorders.values():
            recorder.close()
            logger.info("recorded %s session in %s", recorder.simulation.kind, recorder.run_logger.run_dir)
        self.recorders.clear()

    def settings(self) -> dict[str, object]:
        settings: dict[str, object] = {
            "example": self.active,
            "pixel_ratio": self.pixel_ratio,
            "show_orbit_path": self.options.show_orbit_path,
            "show_acceleration": self.options.show_acceleration,
            "highlight_pair": self.options.highlight_pair,
        }
        if not self.fullscreen:
            settings["window_size"] = list(self.window_size)
        return settings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="newton-pairs",
        description="Interactive action-reaction force pairs: hammer and nail, Earth and Moon.",
    )
    parser.add_argument("--width", type=int, help="Window width in pixels")
    parser.add_argument("--height", type=int, help="Window height in pixels")
    parser.add_argument("--example", choices=EXAMPLES, help="Example shown at start")
    parser.add_argument("--explore", action="store_true", help="Start in explore view instead of diagram")
    parser.add_argument("--record", action="store_true", help="Record each example's session to CSV")
    parser.add_argument("--runs-dir", default="data/runs", help="Directory for recorded sessions")
    parser.add_argument("--frame-rate", type=int, default=SCHEDULER_CFG.frame_rate, help="Target frames per second")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="Diagnostic log level",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def app_from_args(args: argparse.Namespace, settings: dict[str, object]) -> NewtonPairsApp:
    default_w, default_h = RENDER_CFG.windowed_default_size
    saved_size = settings.get("window_size")
    if isinstance(saved_size, list) and len(saved_size) == 2:
        default_w, default_h = int(saved_size[0]), int(saved_size[1])
    window_size = (args.width or default_w, args.height or default_h)
    example = args.example or settings.get("example") or "contact"
    if example not in EXAMPLES:
        example = "contact"
    options = DisplayOptions(
        show_orbit_path=bool(settings.get("show_orbit_path", True)),
        show_acceleration=bool(settings.get("show_acceleration", False)),
        highlight_pair=bool(settings.get("highlight_pair", False)),
    )
    pixel_ratio = settings.get("pixel_ratio")
    return NewtonPairsApp(
        window_size,
        example=str(example),
        mode=ViewMode.EXPLORE if args.explore else ViewMode.DIAGRAM,
        record=args.record,
        runs_dir=args.runs_dir,
        options=options,
        scheduler_cfg=SchedulerCfg(frame_rate=args.frame_rate),
        pixel_ratio=float(pixel_ratio) if isinstance(pixel_ratio, (int, float)) else None,
    )


def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.width is not None and args.width <= RENDER_CFG.panel_width:
        parser.error(f"--width must be larger than the {RENDER_CFG.panel_width}px control panel")
    if args.frame_rate <= 0:
        parser.error("--frame-rate must be positive")
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = app_from_args(args, load_user_settings())
    app.run()
    save_user_settings(app.settings())


if __name__ == "__main__":
    main()
