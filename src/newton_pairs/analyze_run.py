"""Analyze a recorded force-pair session and generate figures."""
from __future__ import annotations

import argparse
import csv
import json
import math
from collections import Counter
from pathlib import Path
from typing import Dict, List, Sequence

import numpy as np

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt

from newton_pairs.core.config import CONTACT_CFG, ORBIT_CFG
from newton_pairs.core.physics import contact_force, gravity_force


TIMESERIES_FILENAME = "timeseries.csv"
EVENTS_FILENAME = "events.csv"
META_FILENAME = "meta.json"
FIGS_SUBDIR = "figs"
PAIR_TOL = 1e-6
NEXT_PHASE = {
    "idle": "descending",
    "descending": "contact",
    "contact": "rising",
    "rising": "idle",
}
PHASE_LEVEL = {"idle": 0, "descending": 1, "contact": 2, "rising": 3}


def load_timeseries(path: Path) -> Dict[str, np.ndarray]:
    """Numeric columns become float arrays; text columns (mode, phase) stay strings."""

    with path.open("r", newline="") as fh:
        reader = csv.DictReader(fh)
        columns: Dict[str, List[str]] = {name: [] for name in reader.fieldnames or []}
        for row in reader:
            for key, value in row.items():
                if key is None:
                    continue
                columns.setdefault(key, []).append(value)
    result: Dict[str, np.ndarray] = {}
    for key, values in columns.items():
        try:
            result[key] = np.asarray([float(v) for v in values], dtype=float)
        except ValueError:
            result[key] = np.asarray(values, dtype=str)
    return result


def load_events(path: Path) -> List[dict]:
    with path.open("r", newline="") as fh:
        reader = csv.DictReader(fh)
        events: List[dict] = []
        for row in reader:
            if not row:
                continue
            event = {
                "tick": int(float(row["tick"])),
                "t": float(row["t"]),
                "type": row["type"],
                "details": {},
            }
            details_raw = row.get("details", "")
            if details_raw:
                try:
                    event["details"] = json.loads(details_raw)
                except json.JSONDecodeError:
                    event["details"] = details_raw
            events.append(event)
    return events


def ensure_fig_dir(run_dir: Path) -> Path:
    fig_dir = run_dir / FIGS_SUBDIR
    fig_dir.mkdir(parents=True, exist_ok=True)
    return fig_dir


def summarize_events(events: List[dict]) -> Dict[str, int]:
    return dict(Counter(event["type"] for event in events))


def phase_sequence(phases: Sequence[str]) -> List[str]:
    """Collapse consecutive repeats: one entry per phase visited."""

    sequence: List[str] = []
    for phase in phases:
        if not sequence or sequence[-1] != phase:
            sequence.append(str(phase))
    return sequence


def phase_cycle_ok(sequence: Sequence[str]) -> bool:
    """Every transition is the next phase of the strike, or a return to idle."""

    for previous, current in zip(sequence, sequence[1:]):
        if current != NEXT_PHASE.get(previous) and current != "idle":
            return False
    return True


def count_strikes(sequence: Sequence[str]) -> int:
    return sum(1 for a, b in zip(sequence, sequence[1:]) if a == "descending" and b == "contact")


def contact_summary(ts: Dict[str, np.ndarray]) -> dict:
    explore = ts["mode"] == "explore"
    sequence = phase_sequence(ts["phase"][explore])
    active = ts["active"] > 0.5
    expected = np.array(
        [contact_force(m, s, CONTACT_CFG) for m, s in zip(ts["mass"], ts["speed"])], dtype=float
    )
    # The force is frozen at contact entry, so only rows where the parameters
    # could not have changed since then are compared.
    mismatches = int(np.count_nonzero(active & ~explore & (ts["force"] != expected)))
    return {
        "ticks": int(ts["tick"].size),
        "strikes": count_strikes(sequence),
        "cycle_ok": phase_cycle_ok(sequence),
        "max_force": float(ts["force"].max()) if ts["force"].size else 0.0,
        "contact_ticks": int(np.count_nonzero(active)),
        "hold_ticks": int(np.count_nonzero(ts["holding"] > 0.5)),
        "force_mismatches": mismatches,
    }


def orbit_summary(ts: Dict[str, np.ndarray]) -> dict:
    m1, m2, r = ts["primary_mass"], ts["secondary_mass"], ts["separation"]
    expected = np.array([gravity_force(a, b, c, ORBIT_CFG) for a, b, c in zip(m1, m2, r)], dtype=float)
    on_primary = ts["accel_primary"] * m1
    on_secondary = ts["accel_secondary"] * m2
    pair_error = float(np.max(np.abs(on_primary - on_secondary))) if m1.size else 0.0
    force_error = float(np.max(np.abs(ts["force"] - expected))) if m1.size else 0.0
    angle = ts["angle"]
    revolutions = float((angle[-1] - angle[0]) / (2.0 * math.pi)) if angle.size else 0.0
    return {
        "ticks": int(ts["tick"].size),
        "revolutions": revolutions,
        "min_force": float(ts["force"].min()) if ts["force"].size else 0.0,
        "max_force": float(ts["force"].max()) if ts["force"].size else 0.0,
        "pair_error": pair_error,
        "force_error": force_error,
        "paused_ticks": int(np.count_nonzero(ts["paused"] > 0.5)),
    }


def plot_contact_force(fig_dir: Path, ts: Dict[str, np.ndarray]) -> None:
    fig, ax = plt.subplots(figsize=(7, 4))
    ax.plot(ts["tick"], ts["force"], color="#ef4444", lw=1.5, label="|F_H| = |F_N|")
    levels = np.array([PHASE_LEVEL.get(str(p), 0) for p in ts["phase"]], dtype=float)
    ax2 = ax.twinx()
    ax2.step(ts["tick"], levels, where="post", color="#3b82f6", alpha=0.5, label="Phase")
    ax2.set_yticks(list(PHASE_LEVEL.values()))
    ax2.set_yticklabels(list(PHASE_LEVEL.keys()))
    ax.set_xlabel("tick")
    ax.set_ylabel("Force [N]")
    ax.set_title("Impact force and strike phase")
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    fig.savefig(fig_dir / "contact_force.png", dpi=150)
    plt.close(fig)


def plot_contact_positions(fig_dir: Path, ts: Dict[str, np.ndarray]) -> None:
    fig, ax = plt.subplots(figsize=(7, 4))
    ax.plot(ts["tick"], ts["striker_y"], color="#475569", label="Hammer")
    ax.plot(ts["tick"], ts["target_y"], color="#94a3b8", label="Nail")
    ax.invert_yaxis()
    ax.set_xlabel("tick")
    ax.set_ylabel("y [px]")
    ax.set_title("Hammer and nail positions")
    ax.legend()
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    fig.savefig(fig_dir / "contact_positions.png", dpi=150)
    plt.close(fig)


def plot_orbit_angle(fig_dir: Path, ts: Dict[str, np.ndarray]) -> None:
    fig, ax = plt.subplots(figsize=(7, 4))
    ax.plot(ts["tick"], ts["angle"], color="#6bc5c0")
    ax.set_xlabel("tick")
    ax.set_ylabel("angle [rad]")
    ax.set_title("Moon angle")
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    fig.savefig(fig_dir / "orbit_angle.png", dpi=150)
    plt.close(fig)


def plot_orbit_forces(fig_dir: Path, ts: Dict[str, np.ndarray]) -> None:
    fig, (ax_f, ax_a) = plt.subplots(2, 1, figsize=(7, 6), sharex=True)
    ax_f.plot(ts["tick"], ts["force"], color="#f87171", label="|F_E| = |F_M|")
    ax_f.set_ylabel("Force")
    ax_f.legend()
    ax_f.grid(True, alpha=0.3)
    ax_a.plot(ts["tick"], ts["accel_primary"], color="#60a5fa", label="a_E")
    ax_a.plot(ts["tick"], ts["accel_secondary"], color="#f87171", label="a_M")
    ax_a.set_xlabel("tick")
    ax_a.set_ylabel("Acceleration")
    ax_a.legend()
    ax_a.grid(True, alpha=0.3)
    ax_f.set_title("Equal forces, unequal accelerations")
    fig.tight_layout()
    fig.savefig(fig_dir / "orbit_forces.png", dpi=150)
    plt.close(fig)


def print_summary(run_dir: Path, meta: dict, summary: dict, event_summary: Dict[str, int]) -> None:
    kind = meta.get("kind", "unknown")
    print(f"Run: {run_dir.name}")
    print(f" Example: {kind}")
    print(f" Ticks: {summary['ticks']}")
    if kind == "contact":
        print(f" Strikes: {summary['strikes']}")
        print(f" Phase sequence valid: {'yes' if summary['cycle_ok'] else 'NO'}")
        print(f" Max force |F_H| = |F_N| = {summary['max_force']:.0f} N")
        print(f" Ticks in contact: {summary['contact_ticks']} (held: {summary['hold_ticks']})")
        print(f" Diagram force mismatches: {summary['force_mismatches']}")
    else:
        print(f" Revolutions: {summary['revolutions']:.2f}")
        print(f" Force range: {summary['min_force']:.2f} .. {summary['max_force']:.2f}")
        pair_ok = summary["pair_error"] <= PAIR_TOL * max(1.0, summary["max_force"])
        print(f" m_E a_E = m_M a_M: {'yes' if pair_ok else 'NO'} (max error {summary['pair_error']:.2e})")
        print(f" Paused ticks: {summary['paused_ticks']}")
    if event_summary:
        print(" Events:" + ",".join(f" {etype}: {count}" for etype, count in sorted(event_summary.items())))
    else:
        print(" Events: none")


def main(argv: Sequence[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Analyze a recorded session and create figures.")
    parser.add_argument("run_dir", nargs="?", help="Path to, or id of, a specific run directory")
    parser.add_argument("--runs-dir", default="data/runs", help="Directory holding recorded runs")
    args = parser.parse_args(argv)

    base_runs_dir = Path(args.runs_dir)
    if args.run_dir:
        run_path = Path(args.run_dir)
        if not run_path.is_dir():
            run_path = base_runs_dir / args.run_dir
    else:
        last_run_file = base_runs_dir / "last_run.txt"
        if not last_run_file.exists():
            parser.error("No run given and last_run.txt is missing.")
        run_id = last_run_file.read_text(encoding="utf-8").strip()
        run_path = base_runs_dir / run_id

    if not run_path.is_dir():
        parser.error(f"Could not find run directory: {run_path}")

    meta_path = run_path / META_FILENAME
    ts_path = run_path / TIMESERIES_FILENAME
    ev_path = run_path / EVENTS_FILENAME

    if not meta_path.exists() or not ts_path.exists() or not ev_path.exists():
        parser.error("Run directory lacks required files (meta/timeseries/events).")

    with meta_path.open("r", encoding="utf-8") as fh:
        meta = json.load(fh)

    ts = load_timeseries(ts_path)
    events = load_events(ev_path)

    if not ts or ts["tick"].size == 0:
        parser.error("timeseries.csv is empty, nothing to analyze.")

    fig_dir = ensure_fig_dir(run_path)

    if meta.get("kind") == "contact":
        summary = contact_summary(ts)
        plot_contact_force(fig_dir, ts)
        plot_contact_positions(fig_dir, ts)
    elif meta.get("kind") == "gravity":
        summary = orbit_summary(ts)
        plot_orbit_angle(fig_dir, ts)
        plot_orbit_forces(fig_dir, ts)
    else:
        parser.error(f"Unknown run kind: {meta.get('kind')!r}")

    print_summary(run_path, meta, summary, summarize_events(events))


if __name__ == "__main__":
    main()
