"""Session recording for the force-pair simulations."""
from __future__ import annotations

import json
import logging
from dataclasses import asdict
from datetime import datetime
from pathlib import Path
from typing import Mapping, Optional, Sequence

logger = logging.getLogger(__name__)

CONTACT_TIMESERIES_HEADER = [
    "tick",
    "t",
    "mode",
    "mass",
    "speed",
    "phase",
    "striker_y",
    "target_y",
    "force",
    "active",
    "holding",
]
ORBIT_TIMESERIES_HEADER = [
    "tick",
    "t",
    "mode",
    "primary_mass",
    "secondary_mass",
    "separation",
    "angle",
    "elapsed",
    "force",
    "accel_primary",
    "accel_secondary",
    "paused",
]
TIMESERIES_HEADERS = {
    "contact": CONTACT_TIMESERIES_HEADER,
    "gravity": ORBIT_TIMESERIES_HEADER,
}


class RunLogger:
    """Buffered logger that stores one simulation session to CSV files."""

    EVENTS_HEADER = ["tick", "t", "type", "details"]

    def __init__(
        self,
        kind: str,
        root_dir: str | Path = "data/runs",
        run_id: Optional[str] = None,
        *,
        timeseries_flush_threshold: int = 200,
        events_flush_threshold: int = 50,
    ) -> None:
        if kind not in TIMESERIES_HEADERS:
            raise ValueError(f"Unknown simulation kind: {kind!r}")
        self.kind = kind
        self.timeseries_header = TIMESERIES_HEADERS[kind]
        self.root_dir = Path(root_dir)
        self.root_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")

        def make_candidate(suffix: Optional[int] = None) -> str:
            base = run_id or f"{timestamp}_{kind}"
            if suffix is None:
                return base
            if run_id:
                return f"{run_id}_{suffix}"
            return f"{base}_{suffix:02d}"

        candidate_id = make_candidate()
        suffix = 1
        while (self.root_dir / candidate_id).exists():
            candidate_id = make_candidate(suffix)
            suffix += 1

        self.run_id = candidate_id
        self.run_dir = self.root_dir / self.run_id
        self.run_dir.mkdir(parents=True, exist_ok=False)

        self.timeseries_path = self.run_dir / "timeseries.csv"
        self.events_path = self.run_dir / "events.csv"
        self.meta_path = self.run_dir / "meta.json"

        self._ts_file = self.timeseries_path.open("w", newline="")
        self._ts_file.write(",".join(self.timeseries_header) + "\n")
        self._ev_file = self.events_path.open("w", newline="")
        self._ev_file.write(",".join(self.EVENTS_HEADER) + "\n")

        self._ts_buffer: list[str] = []
        self._ev_buffer: list[str] = []
        self._ts_threshold = max(1, timeseries_flush_threshold)
        self._ev_threshold = max(1, events_flush_threshold)
        self._closed = False

        last_run_marker = self.root_dir / "last_run.txt"
        last_run_marker.write_text(self.run_id, encoding="utf-8")
        logger.info("recording %s session to %s", kind, self.run_dir)

    @property
    def closed(self) -> bool:
        return self._closed

    def write_meta(self, meta: dict) -> None:
        with self.meta_path.open("w", encoding="utf-8") as fh:
            json.dump({"kind": self.kind, **meta}, fh, indent=2, sort_keys=True)

    def log_ts(self, values: Sequence[object]) -> None:
        if len(values) != len(self.timeseries_header):
            raise ValueError(
                f"expected {len(self.timeseries_header)} values, got {len(values)}"
            )
        self._ts_buffer.append(",".join(self._format_value(v) for v in values))
        if len(self._ts_buffer) >= self._ts_threshold:
            self._flush_timeseries()

    def log_row(self, row: Mapping[str, object]) -> None:
        self.log_ts([row[name] for name in self.timeseries_header])

    def log_event(self, tick: int, t: float, event_type: str, details: Mapping[str, object]) -> None:
        payload = json.dumps(dict(details), sort_keys=True) if details else ""
        values = [tick, t, event_type, self._quote(payload)]
        self._ev_buffer.append(",".join(self._format_value(v) for v in values))
        if len(self._ev_buffer) >= self._ev_threshold:
            self._flush_events()

    def close(self) -> None:
        if self._closed:
            return
        self._flush_timeseries()
        self._flush_events()
        self._ts_file.close()
        self._ev_file.close()
        self._closed = True

    def _flush_timeseries(self) -> None:
        if self._ts_buffer:
            self._ts_file.write("\n".join(self._ts_buffer) + "\n")
            self._ts_file.flush()
            self._ts_buffer.clear()

    def _flush_events(self) -> None:
        if self._ev_buffer:
            self._ev_file.write("\n".join(self._ev_buffer) + "\n")
            self._ev_file.flush()
            self._ev_buffer.clear()

    @staticmethod
    def _quote(text: str) -> str:
        if not text:
            return text
        return '"' + text.replace('"', '""') + '"'

    @staticmethod
    def _format_value(value: object) -> str:
        if isinstance(value, bool):
            return str(int(value))
        if isinstance(value, (int, float)):
            return f"{value:.10g}"
        return str(value)

    def __enter__(self) -> "RunLogger":
        return self

    def __exit__(self, exc_type, exc, tb) -> Optional[bool]:
        self.close()
        return None


class SessionRecorder:
    """Feeds ticks and events of one simulation into a :class:`RunLogger`."""

    def __init__(self, simulation, run_logger: RunLogger) -> None:
        if simulation.kind != run_logger.kind:
            raise ValueError("simulation and logger kinds differ")
        self.simulation = simulation
        self.run_logger = run_logger
        self.time = 0.0
        simulation.add_listener(self.on_event)

    def write_meta(self, extra: Mapping[str, object] | None = None) -> None:
        sim = self.simulation
        meta: dict[str, object] = {
            "params": asdict(sim.params),
            "frame_size": list(sim.size.as_tuple()),
            "view_mode": sim.view_mode.value,
            "started": datetime.now().isoformat(timespec="seconds"),
        }
        if extra:
            meta.update(extra)
        self.run_logger.write_meta(meta)

    def on_tick(self, simulation, dt: float) -> None:
        self.time += dt
        row = {"tick": simulation.ticks, "t": self.time, "mode": simulation.view_mode.value}
        row.update(simulation.snapshot())
        self.run_logger.log_row(row)

    def on_event(self, event: str, details: dict) -> None:
        self.run_logger.log_event(self.simulation.ticks, self.time, event, details)

    def close(self) -> None:
        self.simulation.remove_listener(self.on_event)
        self.run_logger.close()


__all__ = [
    "CONTACT_TIMESERIES_HEADER",
    "ORBIT_TIMESERIES_HEADER",
    "RunLogger",
    "SessionRecorder",
]
