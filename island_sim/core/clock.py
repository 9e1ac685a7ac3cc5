"""Time system for the simulation: simulated clock, day/night, tick driver."""

from __future__ import annotations

from island_sim.core.config import (
    DAY_LENGTH_MS,
    MAX_TICK_DELTA_S,
    NIGHT_END_HOUR,
    NIGHT_START_HOUR,
    RESOURCE_SWEEP_INTERVAL_MS,
    START_TIME_OF_DAY,
    TICK_INTERVAL_MS,
)


def clamp_delta_ms(delta_ms: float) -> float:
    """Bound a raw elapsed interval to [0, MAX_TICK_DELTA_S] in milliseconds."""
    return max(0.0, min(float(delta_ms), MAX_TICK_DELTA_S * 1000.0))


class WorldClock:
    """Simulated time: elapsed milliseconds and the 0-24 time of day."""

    def __init__(self, time_of_day: float = START_TIME_OF_DAY) -> None:
        self.elapsed_ms: float = 0.0
        self.time_of_day: float = time_of_day % 24.0

    @property
    def now_ms(self) -> float:
        return self.elapsed_ms

    @property
    def day(self) -> int:
        return int(self.elapsed_ms // DAY_LENGTH_MS)

    def advance(self, delta_ms: float) -> None:
        """Advance simulated time by an already clamped delta."""
        self.elapsed_ms += delta_ms
        self.time_of_day = advance_time_of_day(self.time_of_day, delta_ms)

    def is_night(self) -> bool:
        return self.time_of_day >= NIGHT_START_HOUR or self.time_of_day < NIGHT_END_HOUR

    def reset(self, time_of_day: float = START_TIME_OF_DAY) -> None:
        self.elapsed_ms = 0.0
        self.time_of_day = time_of_day % 24.0


def advance_time_of_day(time_of_day: float, delta_ms: float) -> float:
    """Step the 24h clock by delta_ms, wrapping into [0, 24)."""
    step = (delta_ms / DAY_LENGTH_MS) * 24.0
    return (time_of_day + step) % 24.0


class TickDriver:
    """Fixed-interval driver turning wall-clock time into simulation ticks.

    Two independent timers are kept: the main tick, which advances every
    subsystem, and the resource sweep. Outside the active phase the driver
    still records when it fired so that resuming does not produce a
    catch-up delta.
    """

    def __init__(
        self,
        engine: "SimulationEngine",  # noqa: F821
        interval_ms: int = TICK_INTERVAL_MS,
        sweep_interval_ms: int = RESOURCE_SWEEP_INTERVAL_MS,
        start_wall_ms: float = 0.0,
    ) -> None:
        if interval_ms <= 0 or sweep_interval_ms <= 0:
            raise ValueError("tick and sweep intervals must be positive")
        self.engine = engine
        self.interval_ms = interval_ms
        self.sweep_interval_ms = sweep_interval_ms
        self._last_fire_ms: float = start_wall_ms
        self._last_sweep_ms: float = start_wall_ms
        self.wall_ms: float = start_wall_ms

    def fire(self, wall_ms: float) -> float:
        """Main timer callback. Returns the clamped delta applied (0 when inactive)."""
        raw_delta = wall_ms - self._last_fire_ms
        self._last_fire_ms = wall_ms
        if not self.engine.is_active:
            return 0.0
        delta_ms = clamp_delta_ms(raw_delta)
        self.engine.tick(delta_ms)
        return delta_ms

    def fire_sweep(self, wall_ms: float) -> bool:
        """Resource sweep timer callback."""
        self._last_sweep_ms = wall_ms
        if not self.engine.is_active:
            return False
        self.engine.sweep_resources()
        return True

    def advance_to(self, wall_ms: float) -> int:
        """Fire every timer whose interval has elapsed up to wall_ms. Returns ticks fired."""
        fired = 0
        next_tick = self._last_fire_ms + self.interval_ms
        next_sweep = self._last_sweep_ms + self.sweep_interval_ms
        while min(next_tick, next_sweep) <= wall_ms:
            if next_tick <= next_sweep:
                self.fire(next_tick)
                fired += 1
                next_tick += self.interval_ms
            else:
                self.fire_sweep(next_sweep)
                next_sweep += self.sweep_interval_ms
        self.wall_ms = wall_ms
        return fired

    def run_for(self, duration_ms: float, stop_when_inactive: bool = True) -> int:
        """Headless helper: advance wall time by duration_ms."""
        target = self.wall_ms + duration_ms
        fired = 0
        while self.wall_ms < target:
            step_to = min(target, self.wall_ms + self.interval_ms)
            fired += self.advance_to(step_to)
            if stop_when_inactive and not self.engine.is_active:
                break
        return fired
