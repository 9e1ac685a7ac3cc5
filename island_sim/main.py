"""Entry point for a headless island survival session."""

from __future__ import annotations

import argparse
import os
import time

from island_sim.core.config import MAX_TICK_DELTA_S


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(
        description="Island Survival Simulation (headless)",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--seconds", type=float, default=600.0, help="Simulated seconds to run")
    parser.add_argument("--seed", type=int, default=42, help="Random seed for reproducibility")
    parser.add_argument("--tick-ms", type=int, default=100,
                        help="Tick interval in milliseconds, 1 to 200 (longer ticks are clamped)")
    parser.add_argument("--respawn-policy", choices=["fish_only", "all"], default="fish_only",
                        help="Which collected resources may respawn")
    parser.add_argument("--growth-mode", choices=["continuous", "stepped"], default="continuous",
                        help="Tree growth model")
    parser.add_argument("--no-rain", action="store_true", help="Disable rain")
    parser.add_argument("--autopilot", action="store_true", help="Let a scripted survivor play")
    parser.add_argument("--verbosity", type=int, default=1, choices=[0, 1, 2, 3], help="Log verbosity level")
    parser.add_argument("--output-dir", type=str, default="results", help="Output directory for results")
    parser.add_argument("--no-plots", action="store_true", help="Skip matplotlib reports")
    parser.add_argument("--log-file", type=str, default=None, help="Path to log file")

    args = parser.parse_args(argv)
    if not 0 < args.tick_ms <= MAX_TICK_DELTA_S * 1000:
        parser.error(f"--tick-ms must be between 1 and {MAX_TICK_DELTA_S * 1000:.0f}")

    # deferred so --help stays fast
    from island_sim.simulation.autopilot import Autopilot
    from island_sim.simulation.engine import SimulationEngine
    from island_sim.viz.logger import SimLogger

    print(f"Island session: seed {args.seed}, {args.seconds:.0f}s simulated, {args.tick_ms}ms ticks -> {args.output_dir}")

    logger = SimLogger(
        verbosity=args.verbosity,
        log_file=args.log_file or os.path.join(args.output_dir, "simulation.log"),
        stdout=(args.verbosity > 0),
    )
    engine = SimulationEngine(
        seed=args.seed,
        respawn_policy=args.respawn_policy,
        growth_mode=args.growth_mode,
        logger=logger,
        rain_enabled=not args.no_rain,
    )
    engine.start_game()
    print(f"World ready: {len(engine.trees.trees)} trees, {len(engine.resources.visible())} resources on the ground")

    autopilot = Autopilot() if args.autopilot else None

    wall_start = time.time()
    try:
        engine.run(args.seconds * 1000.0, autopilot=autopilot, interval_ms=args.tick_ms)
    except KeyboardInterrupt:
        print("\nStopped early")
    elapsed = time.time() - wall_start

    sim_s = engine.clock.elapsed_ms / 1000.0
    print(f"\n{sim_s:.0f}s simulated in {elapsed:.2f}s wall, day {engine.clock.day}, phase {engine.phase.value}")
    print(f"Inventory: {engine.describe_inventory()}")
    if autopilot is not None:
        print(f"Autopilot actions: {autopilot.actions}")

    os.makedirs(args.output_dir, exist_ok=True)
    engine.metrics.export_csv(os.path.join(args.output_dir, "metrics.csv"))

    if not args.no_plots:
        from island_sim.viz.dashboard import Dashboard
        Dashboard.comprehensive_report(engine.metrics, args.output_dir)

    print("\n" + engine.metrics.summary_report())

    engine.logger.export_json(os.path.join(args.output_dir, "events.json"))
    engine.logger.close()

    print(f"\nMetrics, plots and events.json written to {args.output_dir}/")


if __name__ == "__main__":
    main()
