"""
Test Suite: Size Tracker and View Mode
======================================
"""

from types import SimpleNamespace

import pytest

from newton_pairs.core.model import FrameSize, ViewMode
from newton_pairs.core.size import SurfaceSizeTracker
from newton_pairs.core.view import ViewModeController


class TestFrameSize:
    def test_floors_and_clamps(self):
        assert FrameSize.from_observed(999.9, 100.2) == FrameSize(999, 320)
        assert FrameSize.from_observed(0, 0) == FrameSize(320, 320)

    def test_as_tuple(self):
        assert FrameSize(640, 480).as_tuple() == (640, 480)


class TestSurfaceSizeTracker:
    def test_notifies_only_on_change(self):
        tracker = SurfaceSizeTracker((960, 600))
        seen = []
        tracker.subscribe(seen.append)
        tracker.observe_size(960.7, 600.2)
        tracker.observe_size(800, 500)
        tracker.observe_size(800, 500)
        assert seen == [FrameSize(800, 500)]

    def test_clamped_changes_collapse(self):
        tracker = SurfaceSizeTracker((320, 320))
        seen = []
        tracker.subscribe(seen.append)
        tracker.observe_size(100, 50)
        assert seen == []
        assert tracker.size == FrameSize(320, 320)

    def test_observe_host_rect(self):
        tracker = SurfaceSizeTracker((960, 600))
        assert tracker.observe(SimpleNamespace(width=700, height=450)) == FrameSize(700, 450)

    def test_missing_host_is_ignored(self):
        tracker = SurfaceSizeTracker((960, 600))
        seen = []
        tracker.subscribe(seen.append)
        assert tracker.observe(None) == FrameSize(960, 600)
        assert seen == []

    def test_unsubscribe(self):
        tracker = SurfaceSizeTracker((960, 600))
        seen = []
        tracker.subscribe(seen.append)
        tracker.unsubscribe(seen.append)
        tracker.unsubscribe(seen.append)
        tracker.observe_size(500, 500)
        assert seen == []


class TestViewModeController:
    def test_defaults_to_diagram(self):
        view = ViewModeController()
        assert view.mode is ViewMode.DIAGRAM
        assert view.is_diagram

    def test_toggle_notifies(self):
        view = ViewModeController()
        seen = []
        view.subscribe(lambda prev, new: seen.append((prev, new)))
        assert view.toggle() is ViewMode.EXPLORE
        assert view.toggle() is ViewMode.DIAGRAM
        assert seen == [
            (ViewMode.DIAGRAM, ViewMode.EXPLORE),
            (ViewMode.EXPLORE, ViewMode.DIAGRAM),
        ]

    def test_same_mode_is_noop(self):
        view = ViewModeController("explore")
        seen = []
        view.subscribe(lambda prev, new: seen.append(new))
        assert not view.set_mode(ViewMode.EXPLORE)
        assert seen == []

    def test_parse(self):
        assert ViewMode.parse("Diagram") is ViewMode.DIAGRAM
        with pytest.raises(ValueError):
            ViewMode.parse("wireframe")
