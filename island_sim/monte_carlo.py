"""Batch runner: many autopiloted sessions on different seeds, summarized."""

from __future__ import annotations

import csv
import os
import time
from dataclasses import asdict, dataclass, fields

import numpy as np


@dataclass
class RunResult:
    """Outcome of one autopiloted session."""
    seed: int
    survived: bool
    survival_seconds: float
    final_energy: float
    min_energy: float
    final_score: int
    items_eaten: int
    items_crafted: int
    sickness_onsets: int
    rain_events: int
    npc_spawns: int
    npc_deaths: int
    final_trees: int
    elapsed_seconds: float


def run_single(seed: int, seconds: float, respawn_policy: str = "fish_only") -> RunResult:
    """Run one autopiloted session and return its summary."""
    from island_sim.simulation.autopilot import Autopilot
    from island_sim.simulation.engine import GamePhase, SimulationEngine
    from island_sim.viz.logger import SimLogger

    engine = SimulationEngine(
        seed=seed,
        respawn_policy=respawn_policy,
        logger=SimLogger(verbosity=-1, stdout=False),
    )

    t0 = time.time()
    engine.run(seconds * 1000.0, autopilot=Autopilot())
    elapsed = time.time() - t0

    metrics = engine.metrics
    samples = metrics.samples
    return RunResult(
        seed=seed,
        survived=engine.phase is not GamePhase.GAMEOVER,
        survival_seconds=engine.clock.elapsed_ms / 1000.0,
        final_energy=engine.player.energy,
        min_energy=min((s.energy for s in samples), default=engine.player.energy),
        final_score=engine.player.score,
        items_eaten=metrics.items_eaten,
        items_crafted=metrics.items_crafted,
        sickness_onsets=metrics.sickness_onsets,
        rain_events=metrics.rain_events,
        npc_spawns=metrics.npc_spawns,
        npc_deaths=metrics.npc_deaths,
        final_trees=len(engine.trees.trees),
        elapsed_seconds=elapsed,
    )


SECTIONS = {
    "survival": [
        ("Seconds survived", "survival_seconds"),
        ("Final energy", "final_energy"),
        ("Lowest energy", "min_energy"),
    ],
    "player": [
        ("Final score", "final_score"),
        ("Items eaten", "items_eaten"),
        ("Sickness onsets", "sickness_onsets"),
    ],
    "world": [
        ("Rain events", "rain_events"),
        ("Trees at end", "final_trees"),
        ("Castaways arrived", "npc_spawns"),
        ("Castaways died", "npc_deaths"),
    ],
}


def describe(values: list[float]) -> dict[str, float]:
    """Mean, median, sample std and range of a column of run results."""
    arr = np.asarray(values, dtype=float)
    return {
        "mean": float(arr.mean()),
        "median": float(np.median(arr)),
        "std": float(arr.std(ddof=1)) if arr.size > 1 else 0.0,
        "min": float(arr.min()),
        "max": float(arr.max()),
    }


def _format_row(label: str, values: list[float]) -> str:
    if not values:
        return f"  {label}: no data"
    stats = describe(values)
    cells = "  ".join(f"{k}={v:.1f}" for k, v in stats.items())
    return f"  {label:<30s}  {cells}"


def print_aggregate(results: list[RunResult]) -> None:
    survived = sum(r.survived for r in results)
    total = max(1, len(results))
    print(f"\n{'-' * 70}\nAcross {len(results)} sessions\n{'-' * 70}")
    print(f"  Survived {survived} of {len(results)} ({100.0 * survived / total:.0f}%)")
    for section, rows in SECTIONS.items():
        print(f"\n{section.upper()}")
        for label, attr in rows:
            print(_format_row(label, [getattr(r, attr) for r in results]))


def write_csv(results: list[RunResult], path: str) -> None:
    """One row per session, columns named after RunResult fields."""
    with open(path, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=[fld.name for fld in fields(RunResult)])
        writer.writeheader()
        for r in results:
            row = asdict(r)
            row["survived"] = int(r.survived)
            writer.writerow(row)


def monte_carlo(
    n_runs: int = 20,
    seconds: float = 900.0,
    respawn_policy: str = "fish_only",
    output_dir: str = "results/monte_carlo",
) -> list[RunResult]:
    """Play n_runs autopiloted sessions on generated seeds and summarize them."""
    os.makedirs(output_dir, exist_ok=True)
    seeds = np.random.default_rng(0).integers(0, 100_000, size=n_runs).tolist()

    print(f"Monte Carlo: {n_runs} sessions of {seconds:.0f}s, respawn={respawn_policy}")

    started = time.time()
    results: list[RunResult] = []
    for i, seed in enumerate(seeds, start=1):
        r = run_single(seed, seconds, respawn_policy)
        results.append(r)
        outcome = "ok" if r.survived else "collapsed"
        print(
            f"  [{i:>3}/{n_runs}] seed {seed:>5}: {r.survival_seconds:>6.0f}s, "
            f"energy {r.final_energy:>5.1f}, score {r.final_score:>5}, "
            f"{r.sickness_onsets} sick, {outcome} ({r.elapsed_seconds:.1f}s wall)"
        )
    print(f"Finished in {time.time() - started:.1f}s wall time")

    print_aggregate(results)

    csv_path = os.path.join(output_dir, "monte_carlo_results.csv")
    write_csv(results, csv_path)
    print(f"\nPer-run table: {csv_path}")
    return results


def _parse_args(argv=None):
    import argparse

    parser = argparse.ArgumentParser(description="Batch autopiloted island sessions")
    parser.add_argument("--runs", type=int, default=20)
    parser.add_argument("--seconds", type=float, default=900.0, help="Simulated seconds per session")
    parser.add_argument("--respawn-policy", choices=["fish_only", "all"], default="fish_only")
    parser.add_argument("--output-dir", default="results/monte_carlo")
    return parser.parse_args(argv)


if __name__ == "__main__":
    opts = _parse_args()
    monte_carlo(opts.runs, opts.seconds, opts.respawn_policy, opts.output_dir)
