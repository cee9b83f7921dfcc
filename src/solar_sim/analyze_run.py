"""Analyze a recorded viewer run and generate diagnostic figures."""
from __future__ import annotations

import argparse
import csv
import json
import math
from pathlib import Path
from typing import Dict, List

import numpy as np

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt


TIMESERIES_FILENAME = "timeseries.csv"
EVENTS_FILENAME = "events.csv"
META_FILENAME = "meta.json"
FIGS_SUBDIR = "figs"
NUMERIC_COLUMNS = ("t", "x", "y", "z", "rotation")


def load_tracks(path: Path) -> Dict[str, Dict[str, np.ndarray]]:
    """Per-body columns from ``timeseries.csv``."""

    with path.open("r", newline="") as fh:
        reader = csv.DictReader(fh)
        columns: Dict[str, Dict[str, List[float]]] = {}
        for row in reader:
            body = row.get("body")
            if not body:
                continue
            track = columns.setdefault(body, {name: [] for name in NUMERIC_COLUMNS})
            for name in NUMERIC_COLUMNS:
                track[name].append(float(row[name]))
    return {
        body: {name: np.asarray(values) for name, values in track.items()}
        for body, track in columns.items()
    }


def load_events(path: Path) -> List[dict]:
    with path.open("r", newline="") as fh:
        reader = csv.DictReader(fh)
        events: List[dict] = []
        for row in reader:
            if not row or not row.get("type"):
                continue
            event = {
                "t": float(row["t"]),
                "type": row["type"],
                "body": row.get("body") or None,
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


def relative_angle(track: Dict[str, np.ndarray], parent: Dict[str, np.ndarray] | None) -> np.ndarray:
    """Unwrapped orbital angle of *track* around *parent* (the origin if ``None``)."""

    dx = track["x"] - (parent["x"] if parent is not None else 0.0)
    dz = track["z"] - (parent["z"] if parent is not None else 0.0)
    return np.unwrap(np.arctan2(dz, dx))


def estimate_period(t: np.ndarray, angle: np.ndarray) -> float | None:
    """Period in days from a straight-line fit of angle against time.

    Needs samples spanning a nonzero time and a nonzero angular rate; the
    samples must be dense enough that no more than half a turn passes
    between consecutive rows, otherwise unwrapping aliases.
    """

    if t.size < 2 or float(t[-1] - t[0]) <= 0.0:
        return None
    slope, _ = np.polyfit(t, angle, 1)
    if abs(slope) < 1e-12:
        return None
    return float(2.0 * math.pi / slope)


def summarize_events(events: List[dict]) -> Dict[str, int]:
    summary: Dict[str, int] = {}
    for event in events:
        summary[event["type"]] = summary.get(event["type"], 0) + 1
    return summary


def plot_tracks(fig_dir: Path, tracks: Dict[str, Dict[str, np.ndarray]]) -> None:
    fig, ax = plt.subplots(figsize=(7, 7))
    for body, track in tracks.items():
        ax.plot(track["x"], track["z"], lw=1.2, label=body)
    ax.set_aspect("equal", "box")
    ax.set_xlabel("x")
    ax.set_ylabel("z")
    ax.set_title("Body tracks (orbital plane)")
    ax.legend(fontsize="small")
    fig.tight_layout()
    fig.savefig(fig_dir / "tracks_xz.png", dpi=150)
    plt.close(fig)


def plot_angles(fig_dir: Path, angles: Dict[str, tuple[np.ndarray, np.ndarray]]) -> None:
    fig, ax = plt.subplots(figsize=(7, 4))
    for body, (t, angle) in angles.items():
        ax.plot(t, angle, lw=1.2, label=body)
    ax.set_xlabel("t [days]")
    ax.set_ylabel("angle [rad]")
    ax.set_title("Orbital angle over time")
    ax.grid(True, alpha=0.3)
    ax.legend(fontsize="small")
    fig.tight_layout()
    fig.savefig(fig_dir / "orbital_angle.png", dpi=150)
    plt.close(fig)


def print_summary(
    run_dir: Path,
    periods: Dict[str, float | None],
    catalog: Dict[str, dict],
    event_summary: Dict[str, int],
) -> None:
    print(f"Run: {run_dir.name}")
    for body, period in periods.items():
        expected = catalog.get(body, {}).get("orbit_period_days")
        if period is None:
            print(f" {body}: period not measurable")
        elif expected:
            error = (period - expected) / expected
            print(f" {body}: period {period:.2f} days (catalog {expected:.2f}, error {error:.2e})")
        else:
            print(f" {body}: period {period:.2f} days")
    if event_summary:
        print(
            " Events:" + ",".join(f" {etype}: {count}" for etype, count in sorted(event_summary.items()))
        )


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Analyze a recorded run and create figures.")
    parser.add_argument("run_dir", nargs="?", help="path to a specific run directory")
    parser.add_argument("--runs-dir", default="data/runs", help="directory holding recorded runs")
    args = parser.parse_args(argv)

    base_runs_dir = Path(args.runs_dir)
    if args.run_dir:
        run_path = Path(args.run_dir)
        if not run_path.is_dir():
            run_path = base_runs_dir / args.run_dir
    else:
        last_run_file = base_runs_dir / "last_run.txt"
        if not last_run_file.exists():
            parser.error("no run given and last_run.txt is missing")
        run_path = base_runs_dir / last_run_file.read_text(encoding="utf-8").strip()

    if not run_path.is_dir():
        parser.error(f"run directory not found: {run_path}")

    meta_path = run_path / META_FILENAME
    ts_path = run_path / TIMESERIES_FILENAME
    ev_path = run_path / EVENTS_FILENAME
    if not meta_path.exists() or not ts_path.exists() or not ev_path.exists():
        parser.error("run directory is missing meta/timeseries/events files")

    with meta_path.open("r", encoding="utf-8") as fh:
        meta = json.load(fh)
    tracks = load_tracks(ts_path)
    events = load_events(ev_path)
    if not tracks:
        parser.error("timeseries.csv is empty, nothing to analyze")

    catalog: Dict[str, dict] = meta.get("bodies", {})
    angles: Dict[str, tuple[np.ndarray, np.ndarray]] = {}
    periods: Dict[str, float | None] = {}
    for body, track in tracks.items():
        parent_name = catalog.get(body, {}).get("parent")
        if parent_name is None:
            continue
        parent = tracks.get(parent_name)
        if parent is not None and parent["t"].size != track["t"].size:
            parent = None
        angle = relative_angle(track, parent)
        angles[body] = (track["t"], angle)
        periods[body] = estimate_period(track["t"], angle)

    fig_dir = ensure_fig_dir(run_path)
    plot_tracks(fig_dir, tracks)
    if angles:
        plot_angles(fig_dir, angles)
    print_summary(run_path, periods, catalog, summarize_events(events))


if __name__ == "__main__":
    main()
