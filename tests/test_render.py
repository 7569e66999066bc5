"""
Test Suite: Scene Rendering
===========================
Headless drawing of both scenes in both view modes, the scene canvas and
the panel widgets.
"""

import random

import pygame
import pytest

from newton_pairs.core.config import RENDER_CFG
from newton_pairs.core.contact import ContactSimulation
from newton_pairs.core.model import ContactPhase, DisplayOptions, FrameSize, ViewMode
from newton_pairs.core.orbit import OrbitSimulation
from newton_pairs.core.view import ViewModeController
from newton_pairs.render import (
    Button,
    ButtonVisualStyle,
    ContactRenderer,
    OrbitRenderer,
    SceneCanvas,
    build_text_panel,
)
from newton_pairs.render.draw import blend, gradient_colors, generate_starfield


def rgb(surface, pos):
    return tuple(surface.get_at(pos))[:3]


class TestContactRenderer:
    def test_diagram_frame(self):
        surface = pygame.Surface((960, 600))
        sim = ContactSimulation(FrameSize(960, 600))
        sim.advance(1 / 60)
        renderer = ContactRenderer()
        renderer.draw(surface, sim)
        assert rgb(surface, (5, 5)) == RENDER_CFG.contact_diagram_background
        assert renderer.last_pair is not None

    @pytest.mark.parametrize("ticks", [0, 5, 12, 40, 60])
    def test_explore_draws_every_phase(self, ticks):
        surface = pygame.Surface((960, 600))
        sim = ContactSimulation(FrameSize(960, 600), view=ViewModeController(ViewMode.EXPLORE))
        sim.advance(1 / 60)
        sim.strike()
        for _ in range(ticks):
            sim.advance(1.0)
        renderer = ContactRenderer()
        renderer.draw(surface, sim)
        assert rgb(surface, (5, 590)) == RENDER_CFG.ground_color
        assert (renderer.last_pair is not None) == (sim.phase is ContactPhase.CONTACT)

    def test_missing_surface_is_skipped(self):
        sim = ContactSimulation(FrameSize(960, 600))
        renderer = ContactRenderer()
        renderer.draw(None, sim)
        assert renderer.last_pair is None

    def test_draws_before_first_tick(self):
        surface = pygame.Surface((640, 400))
        sim = ContactSimulation(FrameSize(640, 400), view=ViewModeController(ViewMode.EXPLORE))
        ContactRenderer().draw(surface, sim)


class TestOrbitRenderer:
    def test_diagram_background(self):
        surface = pygame.Surface((960, 600))
        sim = OrbitSimulation(FrameSize(960, 600))
        OrbitRenderer().draw(surface, sim)
        assert rgb(surface, (5, 5)) == RENDER_CFG.gravity_diagram_background

    def test_explore_with_every_option(self):
        surface = pygame.Surface((960, 600))
        options = DisplayOptions(show_orbit_path=True, show_acceleration=True, highlight_pair=True)
        sim = OrbitSimulation(FrameSize(960, 600), view=ViewModeController(ViewMode.EXPLORE))
        renderer = OrbitRenderer(options=options, rng=random.Random(7))
        for _ in range(10):
            sim.advance(1 / 60)
            renderer.draw(surface, sim)
        assert renderer.last_pair is not None

    def test_acceleration_arrows(self):
        sim = OrbitSimulation(FrameSize(960, 600))
        (e_start, e_end), (m_start, m_end) = OrbitRenderer().acceleration_arrows(sim)
        a_primary, a_secondary = sim.accelerations
        assert e_start[0] - e_end[0] == pytest.approx(min(60.0, a_primary * 10))
        assert m_end[0] - m_start[0] == pytest.approx(min(80.0, a_secondary * 10))

    def test_starfield_regenerated_on_resize(self):
        renderer = OrbitRenderer(rng=random.Random(1))
        first = renderer.starfield((960, 600))
        assert renderer.starfield((960, 600)) is first
        second = renderer.starfield((400, 320))
        assert second is not first
        assert len(second) == 120
        assert all(0 <= s["pos"][0] <= 400 and 0 <= s["pos"][1] <= 320 for s in second)


class TestDrawHelpers:
    def test_blend(self):
        assert blend((255, 0, 0), (0, 0, 255), 1.0) == (255, 0, 0)
        assert blend((255, 0, 0), (0, 0, 255), 0.0) == (0, 0, 255)

    def test_gradient_endpoints(self):
        colors = gradient_colors(((0.0, (0, 0, 0)), (1.0, (200, 100, 50))), 11)
        assert tuple(colors[0]) == (0, 0, 0)
        assert tuple(colors[-1]) == (200, 100, 50)
        assert tuple(colors[5]) == (100, 50, 25)

    def test_starfield_ranges(self):
        stars = generate_starfield(50, size=(100, 100), rng=random.Random(3))
        assert len(stars) == 50
        assert all(51 <= s["alpha"] <= 229 for s in stars)


class TestSceneCanvas:
    def test_resize(self):
        canvas = SceneCanvas(FrameSize(400, 320))
        canvas.resize(FrameSize(500, 400))
        assert canvas.surface.get_size() == (500, 400)

    def test_present_scales_by_pixel_ratio(self):
        canvas = SceneCanvas(FrameSize(320, 320), pixel_ratio=2.0)
        canvas.surface.fill((10, 200, 30))
        target = pygame.Surface((700, 700))
        canvas.present(target, (0, 0))
        assert canvas.backing_size == (640, 640)
        assert rgb(target, (639, 639)) == (10, 200, 30)
        assert rgb(target, (660, 660)) == (0, 0, 0)

    def test_released_canvas_presents_nothing(self):
        canvas = SceneCanvas(FrameSize(320, 320))
        canvas.release()
        assert canvas.surface is None
        canvas.present(pygame.Surface((10, 10)), (0, 0))


class TestWidgets:
    def test_button_click(self):
        clicks = []
        btn = Button((0, 0, 100, 30), "Go", lambda: clicks.append(1), style=ButtonVisualStyle.from_cfg(RENDER_CFG))
        event = pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=1, pos=(10, 10))
        assert btn.handle_event(event)
        miss = pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=1, pos=(200, 10))
        assert not btn.handle_event(miss)
        assert clicks == [1]

    def test_disabled_button_ignores_clicks(self):
        clicks = []
        btn = Button((0, 0, 100, 30), "Go", lambda: clicks.append(1), enabled=lambda: False)
        event = pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=1, pos=(10, 10))
        assert not btn.handle_event(event)
        assert clicks == []

    def test_button_draw_and_text_getter(self):
        surface = pygame.Surface((200, 100))
        font = pygame.font.Font(None, 20)
        btn = Button((0, 0, 100, 30), "Pause", lambda: None, lambda: "Resume", active=lambda: True)
        btn.draw(surface, font, (500, 500), style=ButtonVisualStyle.from_cfg(RENDER_CFG))
        assert btn.get_text() == "Resume"
        assert btn.is_active

    def test_button_fill_color_states(self):
        style = ButtonVisualStyle.from_cfg(RENDER_CFG)
        on = [False]
        btn = Button((0, 0, 100, 30), "Path", lambda: None, active=lambda: on[0])
        assert btn.fill_color(style, (500, 500)) == style.base_color
        assert btn.fill_color(style, (10, 10)) == style.hover_color
        on[0] = True
        assert btn.fill_color(style, (10, 10)) == style.active_color

    def test_button_requires_style(self):
        btn = Button((0, 0, 100, 30), "Go", lambda: None)
        with pytest.raises(ValueError):
            btn.draw(pygame.Surface((10, 10)), pygame.font.Font(None, 20), (0, 0))

    def test_text_panel(self):
        font = pygame.font.Font(None, 20)
        panel = build_text_panel(
            font, [("F_H = F_N = 550 N", (255, 255, 255)), ("", (0, 0, 0))], background_color=(0, 0, 0, 200), min_width=280
        )
        assert panel.get_width() == 280
        assert panel.get_height() == font.get_linesize() * 2 + 28

    def test_text_panel_needs_lines(self):
        with pytest.raises(ValueError):
            build_text_panel(pygame.font.Font(None, 20), [], background_color=(0, 0, 0))
