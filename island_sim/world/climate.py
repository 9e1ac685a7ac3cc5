"""Rain process: scheduled onset, randomized intensity and duration."""

from __future__ import annotations

from typing import Optional

from numpy.random import Generator

from island_sim.core.config import (
    HEAVY_RAIN_THRESHOLD,
    MIN_TIME_BETWEEN_RAINS_MS,
    RAIN_DURATION_MAX_MS,
    RAIN_DURATION_MIN_MS,
    RAIN_INTENSITY_RANGE,
)


class Climate:
    """Two-state rain process driven by simulated time."""

    def __init__(self, rng: Generator, now_ms: float = 0.0) -> None:
        self._rng = rng
        self.is_raining: bool = False
        self.intensity: float = 0.0
        self.duration_remaining: float = 0.0
        self.next_rain_time: float = now_ms + MIN_TIME_BETWEEN_RAINS_MS
        self.rain_count: int = 0

    @property
    def is_heavy(self) -> bool:
        return self.is_raining and self.intensity > HEAVY_RAIN_THRESHOLD

    def reset(self, now_ms: float = 0.0) -> None:
        self.is_raining = False
        self.intensity = 0.0
        self.duration_remaining = 0.0
        self.next_rain_time = now_ms + MIN_TIME_BETWEEN_RAINS_MS
        self.rain_count = 0

    def advance(self, delta_ms: float, now_ms: float) -> Optional[str]:
        """Step the process. Returns a message on onset or end of rain."""
        if self.is_raining:
            self.duration_remaining -= delta_ms
            if self.duration_remaining <= 0:
                self.stop(now_ms)
                return "The rain has stopped."
            return None

        if now_ms > self.next_rain_time:
            self.start(
                self._rng.uniform(*RAIN_INTENSITY_RANGE),
                self._rng.uniform(RAIN_DURATION_MIN_MS, RAIN_DURATION_MAX_MS),
            )
            if self.is_heavy:
                return "A storm is brewing! Heavy rain!"
            return "It started raining."
        return None

    def start(self, intensity: float, duration_ms: float) -> None:
        self.is_raining = True
        self.intensity = intensity
        self.duration_remaining = duration_ms
        self.rain_count += 1

    def stop(self, now_ms: float) -> None:
        """End the rain and schedule the next one with added spacing."""
        self.is_raining = False
        self.intensity = 0.0
        self.duration_remaining = 0.0
        self.next_rain_time = (
            now_ms + MIN_TIME_BETWEEN_RAINS_MS + self._rng.random() * MIN_TIME_BETWEEN_RAINS_MS
        )

    def suppress(self) -> None:
        """Stop any rain and push the schedule out of reach (headless scenarios)."""
        self.is_raining = False
        self.intensity = 0.0
        self.duration_remaining = 0.0
        self.next_rain_time = float("inf")
