"""Static matplotlib reports of a finished run."""

from __future__ import annotations

import os

import matplotlib
matplotlib.use("Agg")  # Headless backend
import matplotlib.pyplot as plt
import numpy as np

from island_sim.core.config import NIGHT_END_HOUR, NIGHT_START_HOUR, SICKNESS_WETNESS_THRESHOLD


class Dashboard:
    """Overview figure with four panels, built from collected samples."""

    def __init__(self) -> None:
        self._fig = None
        self._axes = None

    def render(self, metrics: "MetricsCollector") -> bool:  # noqa: F821
        """Draw the overview. Returns False when there is nothing to plot."""
        samples = metrics.samples
        if not samples:
            return False

        t = np.array([s.time_ms for s in samples]) / 1000.0
        self._fig, axes = plt.subplots(2, 2, figsize=(14, 8))
        self._fig.suptitle("Island Survival Overview", fontsize=14)
        self._axes = {
            "vitals": axes[0, 0],
            "weather": axes[0, 1],
            "world": axes[1, 0],
            "npcs": axes[1, 1],
        }
        for ax in axes.flat:
            ax.grid(True, alpha=0.3)
            ax.set_xlabel("Time (s)")

        ax = self._axes["vitals"]
        ax.plot(t, [s.energy for s in samples], "g-", label="Energy")
        ax.plot(t, [s.wetness for s in samples], "b-", label="Wetness")
        sick = np.array([s.sick for s in samples])
        if sick.any():
            ax.fill_between(t, 0, 100, where=sick, color="r", alpha=0.1, label="Sick")
        ax.set_ylim(0, 105)
        ax.set_title("Player Vitals")
        ax.legend(loc="upper right")

        ax = self._axes["weather"]
        ax.plot(t, [s.rain_intensity for s in samples], "c-", label="Rain intensity")
        ax2 = ax.twinx()
        ax2.plot(t, [s.time_of_day for s in samples], "k:", alpha=0.5, label="Hour")
        ax2.axhspan(NIGHT_START_HOUR, 24, color="navy", alpha=0.05)
        ax2.axhspan(0, NIGHT_END_HOUR, color="navy", alpha=0.05)
        ax2.set_ylim(0, 24)
        ax.set_ylim(0, 1.05)
        ax.set_title("Weather & Time of Day")

        ax = self._axes["world"]
        ax.plot(t, [s.resources_visible for s in samples], label="Visible resources")
        ax.plot(t, [s.trees for s in samples], label="Trees")
        ax.plot(t, [s.planted_seeds for s in samples], label="Planted seeds")
        ax.plot(t, [s.campfires for s in samples], label="Campfires")
        ax.set_title("World")
        ax.legend(loc="upper right", fontsize=8)

        ax = self._axes["npcs"]
        ax.step(t, [s.npcs for s in samples], where="post", label="Present")
        ax.step(t, [s.npcs_awake for s in samples], where="post", label="Awake")
        ax.set_title("Castaways")
        ax.legend(loc="upper right")

        plt.tight_layout()
        return True

    def save(self, filepath: str) -> None:
        if self._fig:
            self._fig.savefig(filepath, dpi=150, bbox_inches="tight")

    def close(self) -> None:
        if self._fig:
            plt.close(self._fig)
            self._fig = None

    # ------------------------------------------------------------------
    # Post-hoc static plots
    # ------------------------------------------------------------------

    @staticmethod
    def comprehensive_report(metrics: "MetricsCollector", output_dir: str) -> None:  # noqa: F821
        """Generate all plots and save to output directory."""
        os.makedirs(output_dir, exist_ok=True)

        samples = metrics.samples
        if not samples:
            return

        t = np.array([s.time_ms for s in samples]) / 1000.0

        # Energy
        fig, ax = plt.subplots(figsize=(10, 5))
        ax.plot(t, [s.energy for s in samples], "g-")
        ax.set_title("Energy Over Time")
        ax.set_xlabel("Time (s)")
        ax.set_ylabel("Energy")
        ax.set_ylim(0, 105)
        ax.grid(True, alpha=0.3)
        fig.savefig(os.path.join(output_dir, "energy.png"), dpi=150)
        plt.close(fig)

        # Wetness
        fig, ax = plt.subplots(figsize=(10, 5))
        ax.plot(t, [s.wetness for s in samples], "b-")
        ax.axhline(y=SICKNESS_WETNESS_THRESHOLD, color="r", linestyle="--", alpha=0.5)
        ax.set_title("Wetness Over Time")
        ax.set_xlabel("Time (s)")
        ax.set_ylabel("Wetness (0-100)")
        ax.set_ylim(0, 105)
        ax.grid(True, alpha=0.3)
        fig.savefig(os.path.join(output_dir, "wetness.png"), dpi=150)
        plt.close(fig)

        # Score
        fig, ax = plt.subplots(figsize=(10, 5))
        ax.plot(t, [s.score for s in samples], "m-")
        ax.set_title("Score Over Time")
        ax.set_xlabel("Time (s)")
        ax.set_ylabel("Score")
        ax.grid(True, alpha=0.3)
        fig.savefig(os.path.join(output_dir, "score.png"), dpi=150)
        plt.close(fig)

        # Tree growth
        fig, ax = plt.subplots(figsize=(10, 5))
        ax.plot(t, [s.avg_tree_scale for s in samples], "-", color="darkgreen")
        ax.set_title("Average Tree Scale")
        ax.set_xlabel("Time (s)")
        ax.set_ylabel("Scale")
        ax.grid(True, alpha=0.3)
        fig.savefig(os.path.join(output_dir, "tree_scale.png"), dpi=150)
        plt.close(fig)

        dashboard = Dashboard()
        if dashboard.render(metrics):
            dashboard.save(os.path.join(output_dir, "overview.png"))
        dashboard.close()

        print(f"Plots saved to {output_dir}/")
