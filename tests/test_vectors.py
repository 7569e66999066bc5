"""
Test Suite: Force Pair Geometry
===============================
Both arrows of a pair share one length and point in opposite directions.
"""

import numpy as np
import pytest

from newton_pairs.core.config import CONTACT_CFG, ORBIT_CFG
from newton_pairs.core.contact import ContactSimulation
from newton_pairs.core.model import ContactParams, FrameSize, OrbitParams, ViewMode
from newton_pairs.core.orbit import OrbitSimulation
from newton_pairs.core.view import ViewModeController
from newton_pairs.render.scenes import ContactRenderer, OrbitRenderer
from newton_pairs.render.vectors import ArrowScale, arrow_head, force_pair, label_anchor


def assert_equal_and_opposite(pair):
    len_a, len_b = pair.lengths()
    assert len_a == pytest.approx(len_b)
    assert len_a == pytest.approx(pair.length)
    if pair.length > 0:
        np.testing.assert_allclose(pair.direction_a(), -pair.direction_b(), atol=1e-9)


class TestArrowScale:
    def test_linear_below_cap(self):
        assert ArrowScale(factor=1 / 9, cap=140).length(550) == pytest.approx(550 / 9)

    def test_capped(self):
        assert ArrowScale(factor=1 / 9, cap=140).length(2200) == 140

    def test_offset_and_negative_cap(self):
        assert ArrowScale(factor=1.4, cap=100, offset=40).length(10) == pytest.approx(54.0)
        assert ArrowScale(factor=1.4, cap=-5, offset=40).length(10) == 0.0


class TestForcePair:
    def test_opposite_directions(self):
        pair = force_pair(10.0, (0, 0), (3, 4), (100, 100), ArrowScale(1.0, 100))
        np.testing.assert_allclose(pair.end_a, [6.0, 8.0])
        np.testing.assert_allclose(pair.end_b, [94.0, 92.0])
        assert_equal_and_opposite(pair)

    def test_zero_direction_rejected(self):
        with pytest.raises(ValueError):
            force_pair(1.0, (0, 0), (0, 0), (1, 1), ArrowScale(1.0, 10))

    def test_arrow_head_tip_is_end(self):
        tip, left, right = arrow_head((0, 0), (10, 0), 12, 30)
        assert tip == (10.0, 0.0)
        assert left[0] < 10 and right[0] < 10
        assert left[1] == pytest.approx(-right[1])

    def test_label_anchor_beyond_tip(self):
        assert label_anchor((0, 0), (0, 10), 18) == pytest.approx((0.0, 28.0))


class TestContactPair:
    @pytest.mark.parametrize("mass", range(1, 11))
    def test_equal_lengths_for_all_params(self, mass):
        renderer = ContactRenderer()
        for speed in range(1, 11):
            sim = ContactSimulation(FrameSize(960, 600), ContactParams(mass, speed))
            sim.advance(1 / 60)
            pair = renderer.force_pair(sim)
            assert pair is not None
            assert pair.magnitude == round(mass * speed * 22)
            assert pair.length == pytest.approx(min(140.0, pair.magnitude / 9))
            assert_equal_and_opposite(pair)

    def test_hammer_force_points_down(self):
        sim = ContactSimulation(FrameSize(960, 600))
        sim.advance(1 / 60)
        pair = ContactRenderer().force_pair(sim)
        assert pair.direction_a()[1] > 0
        assert pair.direction_b()[1] < 0
        np.testing.assert_allclose(
            pair.origin_a, [480 - CONTACT_CFG.arrow_offset_x, sim.state.target_y + 10]
        )

    def test_no_pair_outside_contact(self):
        sim = ContactSimulation(FrameSize(960, 600), view=ViewModeController(ViewMode.EXPLORE))
        sim.advance(1 / 60)
        assert ContactRenderer().force_pair(sim) is None


class TestGravityPair:
    @pytest.mark.parametrize("m1,m2", [(1, 10), (10, 1), (6, 3), (5, 5)])
    def test_equal_lengths_for_unequal_masses(self, m1, m2):
        sim = OrbitSimulation(FrameSize(960, 600), OrbitParams(m1, m2, 220))
        pair = OrbitRenderer().force_pair(sim)
        assert pair.magnitude == pytest.approx(sim.gravity)
        assert_equal_and_opposite(pair)

    def test_arrows_point_at_each_other(self):
        sim = OrbitSimulation(
            FrameSize(960, 600), OrbitParams(6, 3, 220), view=ViewModeController(ViewMode.EXPLORE)
        )
        for _ in range(37):
            sim.advance(1 / 60)
        pair = OrbitRenderer().force_pair(sim)
        towards_earth = np.asarray(sim.center()) - np.asarray(sim.secondary_position())
        assert np.dot(pair.direction_a(), towards_earth) > 0
        assert np.dot(pair.direction_b(), -towards_earth) > 0
        assert_equal_and_opposite(pair)

    def test_length_capped_by_gap_between_bodies(self):
        sim = OrbitSimulation(FrameSize(960, 600), OrbitParams(10, 10, 120))
        pair = OrbitRenderer().force_pair(sim)
        gap = 120 - sim.primary_radius - sim.secondary_radius - ORBIT_CFG.arrow_clearance
        assert pair.length == pytest.approx(max(0.0, gap))
