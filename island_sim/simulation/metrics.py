"""Time-series collection of player vitals and world counts, with export."""

from __future__ import annotations

import csv
import os
from dataclasses import dataclass
from typing import Optional

from island_sim.core.config import METRICS_SAMPLE_INTERVAL_MS


@dataclass
class VitalsSample:
    """State of the run at one sample point."""

    time_ms: float = 0.0
    time_of_day: float = 0.0
    energy: float = 0.0
    wetness: float = 0.0
    sick: bool = False
    raining: bool = False
    rain_intensity: float = 0.0
    score: int = 0
    inventory_used: int = 0
    resources_visible: int = 0
    trees: int = 0
    avg_tree_scale: float = 0.0
    planted_seeds: int = 0
    campfires: int = 0
    npcs: int = 0
    npcs_awake: int = 0


class MetricsCollector:
    """Samples the engine at a fixed interval of simulated time."""

    def __init__(self, interval_ms: float = METRICS_SAMPLE_INTERVAL_MS) -> None:
        self.interval_ms = interval_ms
        self.samples: list[VitalsSample] = []
        self._next_sample_ms: float = 0.0
        self.sickness_onsets: int = 0
        self.items_eaten: int = 0
        self.items_crafted: int = 0
        self.campfires_built: int = 0
        self.npc_spawns: int = 0
        self.npc_deaths: int = 0
        self.rain_events: int = 0

    def record_sickness(self) -> None:
        self.sickness_onsets += 1

    def record_eat(self) -> None:
        self.items_eaten += 1

    def record_craft(self) -> None:
        self.items_crafted += 1

    def record_campfire(self) -> None:
        self.campfires_built += 1

    def record_npc_spawn(self) -> None:
        self.npc_spawns += 1

    def record_npc_death(self) -> None:
        self.npc_deaths += 1

    def record_rain(self) -> None:
        self.rain_events += 1

    def maybe_sample(self, engine: "SimulationEngine") -> Optional[VitalsSample]:  # noqa: F821
        """Take a sample if the interval has elapsed since the last one."""
        now = engine.clock.elapsed_ms
        if now < self._next_sample_ms:
            return None
        self._next_sample_ms = now + self.interval_ms
        return self.collect(engine)

    def collect(self, engine: "SimulationEngine") -> VitalsSample:  # noqa: F821
        player = engine.player
        trees = engine.trees.trees
        npcs = engine.npcs.npcs
        sample = VitalsSample(
            time_ms=engine.clock.elapsed_ms,
            time_of_day=engine.clock.time_of_day,
            energy=player.energy,
            wetness=player.wetness,
            sick=player.sick,
            raining=engine.climate.is_raining,
            rain_intensity=engine.climate.intensity,
            score=player.score,
            inventory_used=player.inventory.occupied_count(),
            resources_visible=len(engine.resources.visible()),
            trees=len(trees),
            avg_tree_scale=sum(t.scale for t in trees) / len(trees) if trees else 0.0,
            planted_seeds=len(engine.planting.seeds),
            campfires=len(engine.structures.campfires),
            npcs=len(npcs),
            npcs_awake=sum(1 for n in npcs if n.is_conscious),
        )
        self.samples.append(sample)
        return sample

    def export_csv(self, filepath: str) -> None:
        """Export all samples to CSV."""
        os.makedirs(os.path.dirname(filepath) if os.path.dirname(filepath) else ".", exist_ok=True)
        with open(filepath, "w", newline="") as f:
            writer = csv.writer(f)
            writer.writerow([
                "time_s", "time_of_day", "energy", "wetness", "sick", "raining",
                "rain_intensity", "score", "inventory_used", "resources_visible",
                "trees", "avg_tree_scale", "planted_seeds", "campfires", "npcs",
                "npcs_awake",
            ])
            for s in self.samples:
                writer.writerow([
                    f"{s.time_ms / 1000.0:.1f}", f"{s.time_of_day:.2f}",
                    f"{s.energy:.2f}", f"{s.wetness:.1f}", int(s.sick),
                    int(s.raining), f"{s.rain_intensity:.2f}", s.score,
                    s.inventory_used, s.resources_visible, s.trees,
                    f"{s.avg_tree_scale:.2f}", s.planted_seeds, s.campfires,
                    s.npcs, s.npcs_awake,
                ])

    def summary_report(self) -> str:
        """Human-readable summary of the run."""
        if not self.samples:
            return "No data available."

        first = self.samples[0]
        last = self.samples[-1]
        duration_s = (last.time_ms - first.time_ms) / 1000.0
        sick_share = sum(1 for s in self.samples if s.sick) / len(self.samples)
        rain_share = sum(1 for s in self.samples if s.raining) / len(self.samples)
        min_energy = min(s.energy for s in self.samples)

        lines = [
            f"=== Island Summary: {first.time_ms / 1000.0:.0f}s to {last.time_ms / 1000.0:.0f}s ===",
            f"Duration: {duration_s:.0f}s simulated",
            f"",
            f"Player:",
            f"  Energy: {first.energy:.1f} -> {last.energy:.1f} (min {min_energy:.1f})",
            f"  Final score: {last.score}",
            f"  Items eaten: {self.items_eaten}",
            f"  Items crafted: {self.items_crafted}",
            f"  Sickness onsets: {self.sickness_onsets}",
            f"  Time spent sick: {sick_share:.1%}",
            f"",
            f"World:",
            f"  Rain events: {self.rain_events} (raining {rain_share:.1%} of samples)",
            f"  Trees: {first.trees} -> {last.trees} (avg scale {last.avg_tree_scale:.2f})",
            f"  Campfires built: {self.campfires_built}",
            f"  Visible resources at end: {last.resources_visible}",
            f"",
            f"Castaways:",
            f"  Arrived: {self.npc_spawns}",
            f"  Died: {self.npc_deaths}",
            f"  Present at end: {last.npcs} ({last.npcs_awake} awake)",
        ]
        return "\n".join(lines)
