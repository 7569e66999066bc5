"""
Test Suite: Session Recording
=============================
"""

import csv
import json

import pytest

from newton_pairs.core.contact import ContactSimulation
from newton_pairs.core.logging_utils import (
    CONTACT_TIMESERIES_HEADER,
    ORBIT_TIMESERIES_HEADER,
    RunLogger,
    SessionRecorder,
)
from newton_pairs.core.model import FrameSize, ViewMode
from newton_pairs.core.orbit import OrbitSimulation
from newton_pairs.core.view import ViewModeController


class TestRunLogger:
    def test_creates_run_files(self, tmp_path):
        with RunLogger("contact", tmp_path, run_id="demo") as run_logger:
            run_logger.write_meta({"note": "x"})
        run_dir = tmp_path / "demo"
        assert (run_dir / "timeseries.csv").read_text().splitlines()[0] == ",".join(CONTACT_TIMESERIES_HEADER)
        assert (run_dir / "events.csv").read_text().splitlines()[0] == "tick,t,type,details"
        assert json.loads((run_dir / "meta.json").read_text()) == {"kind": "contact", "note": "x"}
        assert (tmp_path / "last_run.txt").read_text() == "demo"
        assert run_logger.closed

    def test_unique_run_ids(self, tmp_path):
        first = RunLogger("gravity", tmp_path, run_id="same")
        second = RunLogger("gravity", tmp_path, run_id="same")
        first.close()
        second.close()
        assert second.run_id == "same_1"

    def test_unknown_kind(self, tmp_path):
        with pytest.raises(ValueError):
            RunLogger("friction", tmp_path)

    def test_row_length_checked(self, tmp_path):
        with RunLogger("gravity", tmp_path) as run_logger:
            with pytest.raises(ValueError):
                run_logger.log_ts([1, 2, 3])

    def test_event_details_round_trip(self, tmp_path):
        with RunLogger("contact", tmp_path, run_id="ev") as run_logger:
            run_logger.log_event(3, 0.05, "phase", {"previous": "idle", "phase": "descending"})
            run_logger.log_event(4, 0.06, "reset", {})
        with (tmp_path / "ev" / "events.csv").open(newline="") as fh:
            rows = list(csv.DictReader(fh))
        assert json.loads(rows[0]["details"]) == {"previous": "idle", "phase": "descending"}
        assert rows[1]["details"] == ""

    def test_close_is_idempotent(self, tmp_path):
        run_logger = RunLogger("contact", tmp_path)
        run_logger.close()
        run_logger.close()


class TestSessionRecorder:
    def test_records_ticks_and_events(self, tmp_path):
        sim = ContactSimulation(FrameSize(960, 600), view=ViewModeController(ViewMode.EXPLORE))
        recorder = SessionRecorder(sim, RunLogger("contact", tmp_path, run_id="rec"))
        recorder.write_meta()
        sim.strike()
        for _ in range(5):
            sim.advance(0.1)
            recorder.on_tick(sim, 0.1)
        recorder.close()
        with (tmp_path / "rec" / "timeseries.csv").open(newline="") as fh:
            rows = list(csv.DictReader(fh))
        assert len(rows) == 5
        assert rows[-1]["phase"] == "descending"
        assert rows[-1]["mode"] == "explore"
        assert float(rows[-1]["t"]) == pytest.approx(0.5)
        with (tmp_path / "rec" / "events.csv").open(newline="") as fh:
            events = [row["type"] for row in csv.DictReader(fh)]
        assert events == ["strike", "phase"]
        meta = json.loads((tmp_path / "rec" / "meta.json").read_text())
        assert meta["params"] == {"mass": 5, "speed": 5}
        assert meta["frame_size"] == [960, 600]

    def test_close_detaches_listener(self, tmp_path):
        sim = OrbitSimulation(FrameSize(960, 600))
        recorder = SessionRecorder(sim, RunLogger("gravity", tmp_path))
        recorder.close()
        sim.reset()

    def test_orbit_rows_match_header(self, tmp_path):
        sim = OrbitSimulation(FrameSize(960, 600))
        recorder = SessionRecorder(sim, RunLogger("gravity", tmp_path, run_id="orb"))
        sim.advance(1 / 60)
        recorder.on_tick(sim, 1 / 60)
        recorder.close()
        with (tmp_path / "orb" / "timeseries.csv").open(newline="") as fh:
            reader = csv.DictReader(fh)
            assert reader.fieldnames == ORBIT_TIMESERIES_HEADER
            assert len(list(reader)) == 1

    def test_kind_mismatch(self, tmp_path):
        sim = OrbitSimulation(FrameSize(960, 600))
        run_logger = RunLogger("contact", tmp_path)
        with pytest.raises(ValueError):
            SessionRecorder(sim, run_logger)
        run_logger.close()
