"""
Test Suite: Hammer and Nail
===========================
Strike state machine, impact sampling, the contact hold and the
diagram pose.
"""

import pytest

from newton_pairs.core.config import CONTACT_CFG
from newton_pairs.core.contact import (
    ContactGeometry,
    ContactSimulation,
    initial_contact_state,
    step_contact,
)
from newton_pairs.core.model import (
    ContactParams,
    ContactPhase,
    ContactState,
    FrameSize,
    ViewMode,
)
from newton_pairs.core.view import ViewModeController

DT = 1 / 60


def explore_sim(size=FrameSize(960, 600), params=None):
    sim = ContactSimulation(size, params, view=ViewModeController(ViewMode.EXPLORE))
    sim.advance(DT)
    return sim


def advance_until(sim, phase, limit=2000, dt=DT):
    for _ in range(limit):
        if sim.phase is phase:
            return
        sim.advance(dt)
    raise AssertionError(f"never reached {phase}")


def run_strike(sim, dt=DT, limit=2000):
    """Strike once and return the phase after every tick until idle again."""
    phases = [sim.phase]
    assert sim.strike()
    phases.append(sim.phase)
    for _ in range(limit):
        sim.advance(dt)
        phases.append(sim.phase)
        assert sim.impact.active == (sim.phase is ContactPhase.CONTACT)
        if sim.phase is ContactPhase.IDLE:
            return phases
    raise AssertionError("strike did not finish")


def collapse(phases):
    out = []
    for phase in phases:
        if not out or out[-1] is not phase:
            out.append(phase)
    return out


class TestContactGeometry:
    def test_reference_height_layout(self):
        g = ContactGeometry.from_size(FrameSize(960, 600))
        assert g.scale == pytest.approx(1.0)
        assert g.ground_y == pytest.approx(432.0)
        assert g.rest_y == pytest.approx(232.0)
        assert g.diagram_striker_y == pytest.approx(262.0)
        assert g.target_rest_y == pytest.approx(362.0)
        assert g.target_x == pytest.approx(480.0)
        assert g.contact_y(362.0) == pytest.approx(338.0)

    def test_scales_with_height(self):
        g = ContactGeometry.from_size(FrameSize(640, 300))
        assert g.scale == pytest.approx(0.5)
        assert g.target_height == pytest.approx(35.0)
        assert g.max_target_y() == pytest.approx(216.0 - 5.0)


class TestStrikeCycle:
    def test_phase_sequence(self):
        sim = explore_sim()
        phases = run_strike(sim)
        assert collapse(phases) == [
            ContactPhase.IDLE,
            ContactPhase.DESCENDING,
            ContactPhase.CONTACT,
            ContactPhase.RISING,
            ContactPhase.IDLE,
        ]

    def test_textbook_force(self):
        sim = explore_sim(params=ContactParams(5, 5))
        sim.strike()
        advance_until(sim, ContactPhase.CONTACT)
        assert sim.impact.active
        assert sim.impact.force_magnitude == 550

    def test_force_sampled_once_at_contact(self):
        sim = explore_sim(params=ContactParams(5, 5))
        sim.strike()
        advance_until(sim, ContactPhase.CONTACT)
        sim.set_mass(10)
        sim.advance(DT)
        assert sim.impact.force_magnitude == 550

    def test_nail_sinks_but_stays_above_ground(self):
        sim = explore_sim(params=ContactParams(10, 10))
        start = sim.state.target_y
        run_strike(sim, dt=1.0)
        assert sim.state.target_y > start
        assert sim.state.target_y <= sim.geometry.max_target_y() + CONTACT_CFG.sink_step

    def test_striker_returns_to_rest(self):
        sim = explore_sim()
        run_strike(sim, dt=1.0)
        assert sim.state.striker_y == pytest.approx(sim.geometry.rest_y)

    def test_strike_ignored_unless_idle(self):
        sim = explore_sim()
        assert sim.strike()
        assert not sim.strike()

    def test_no_force_while_idle_or_descending(self):
        sim = explore_sim()
        assert not sim.impact.active
        assert sim.impact.force_magnitude == 0
        sim.strike()
        sim.advance(DT)
        assert sim.phase is ContactPhase.DESCENDING
        assert not sim.impact.active

    def test_params_locked_during_strike(self):
        sim = explore_sim()
        sim.strike()
        assert not sim.apply_params(ContactParams(9, 9))
        assert sim.params == ContactParams(5, 5)

    def test_params_clamped(self):
        sim = explore_sim()
        assert sim.apply_params(ContactParams(0, 42))
        assert sim.params == ContactParams(1, 10)


class TestContactHold:
    def enter_contact(self):
        sim = explore_sim()
        sim.strike()
        advance_until(sim, ContactPhase.CONTACT)
        return sim

    def test_hold_freezes_positions(self):
        sim = self.enter_contact()
        assert sim.holding
        before = (sim.state.striker_y, sim.state.target_y)
        sim.advance(0.5)
        assert sim.holding
        assert (sim.state.striker_y, sim.state.target_y) == before

    def test_hold_drains_with_frame_time(self):
        sim = self.enter_contact()
        for _ in range(3):
            sim.advance(1.0)
        assert not sim.holding
        assert sim.phase is ContactPhase.CONTACT

    def test_continue_ends_hold_early(self):
        sim = self.enter_contact()
        assert sim.continue_after_contact()
        assert not sim.holding
        assert not sim.continue_after_contact()

    def test_cancel_pending_clears_hold(self):
        sim = self.enter_contact()
        sim.cancel_pending()
        assert sim.state.hold_remaining == 0.0


class TestReset:
    @pytest.mark.parametrize(
        "phase", [ContactPhase.DESCENDING, ContactPhase.CONTACT, ContactPhase.RISING]
    )
    def test_reset_from_any_phase(self, phase):
        sim = explore_sim()
        sim.strike()
        advance_until(sim, phase, dt=1.0)
        sim.reset()
        assert sim.state == initial_contact_state()
        assert not sim.holding
        sim.advance(DT)
        assert sim.phase is ContactPhase.IDLE
        assert sim.state.striker_y == pytest.approx(sim.geometry.rest_y)

    def test_reset_keeps_params(self):
        sim = explore_sim(params=ContactParams(3, 8))
        sim.reset()
        assert sim.params == ContactParams(3, 8)


class TestResize:
    def test_resize_during_contact(self):
        sim = explore_sim()
        sim.strike()
        advance_until(sim, ContactPhase.CONTACT)
        sim.resize(FrameSize(640, 300))
        sim.advance(DT)
        assert sim.state.initialized
        assert sim.phase is ContactPhase.IDLE
        assert sim.geometry.height == 300
        assert sim.state.striker_y == pytest.approx(sim.geometry.rest_y)

    def test_resize_emits_event(self):
        sim = explore_sim()
        events = []
        sim.add_listener(lambda name, details: events.append((name, details)))
        sim.resize(FrameSize(800, 400))
        assert events == [("resize", {"width": 800, "height": 400})]


class TestDiagramMode:
    def test_pinned_to_contact_pose(self):
        sim = ContactSimulation(FrameSize(960, 600))
        assert sim.view_mode is ViewMode.DIAGRAM
        sim.advance(DT)
        assert sim.phase is ContactPhase.CONTACT
        assert sim.impact.active
        assert sim.impact.force_magnitude == 550
        assert sim.state.striker_y == pytest.approx(sim.geometry.diagram_striker_y)
        assert not sim.holding

    def test_force_follows_params(self):
        sim = ContactSimulation(FrameSize(960, 600))
        sim.apply_params(ContactParams(10, 2))
        sim.advance(DT)
        assert sim.impact.force_magnitude == 440

    def test_strike_is_ignored(self):
        sim = ContactSimulation(FrameSize(960, 600))
        sim.advance(DT)
        assert not sim.strike()

    def test_switch_to_explore_starts_at_rest(self):
        sim = ContactSimulation(FrameSize(960, 600), ContactParams(7, 4))
        sim.advance(DT)
        sim.set_view_mode("explore")
        assert sim.state == initial_contact_state()
        sim.advance(DT)
        assert sim.phase is ContactPhase.IDLE
        assert sim.params == ContactParams(7, 4)


class TestEvents:
    def test_strike_and_phase_events(self):
        sim = explore_sim()
        events = []
        sim.add_listener(lambda name, details: events.append(name))
        run_strike(sim, dt=1.0)
        assert events[:2] == ["strike", "phase"]
        assert events.count("phase") == 4

    def test_removed_listener_is_silent(self):
        sim = explore_sim()
        events = []
        listener = lambda name, details: events.append(name)  # noqa: E731
        sim.add_listener(listener)
        sim.remove_listener(listener)
        sim.reset()
        assert events == []

    def test_params_event_only_with_source(self):
        sim = explore_sim()
        events = []
        sim.add_listener(lambda name, details: events.append((name, details)))
        sim.apply_params(ContactParams(2, 2))
        sim.apply_params(ContactParams(3, 3), source="preset:tap")
        assert events == [("params", {"source": "preset:tap", "mass": 3, "speed": 3})]


def test_step_contact_is_pure():
    geometry = ContactGeometry.from_size(FrameSize(960, 600))
    state = ContactState(phase=ContactPhase.DESCENDING)
    nxt = step_contact(state, ContactParams(5, 5), geometry, ViewMode.EXPLORE, DT)
    assert state.striker_y == 0.0
    assert not state.initialized
    assert nxt.initialized
    assert nxt.striker_y == pytest.approx(232.0 + 13.0)
