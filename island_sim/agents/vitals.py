"""Per-tick player condition: wetness, torch fuel, energy and sickness."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from numpy.random import Generator

from island_sim.core.config import (
    FIRE_DRYING_MULTIPLIER,
    HEALTH_DECAY_IDLE,
    HEALTH_DECAY_MOVING,
    HEALTH_DECAY_SWIMMING,
    HEAVY_RAIN_SICKNESS_MULTIPLIER,
    HEAVY_RAIN_THRESHOLD,
    MAX_ENERGY,
    MAX_WETNESS,
    RAIN_WETNESS_BASE,
    REFERENCE_TICK_MS,
    SICKNESS_CHANCE_FROM_WETNESS,
    SICKNESS_WETNESS_THRESHOLD,
    SWIM_WETNESS_MULTIPLIER,
    WETNESS_DRY_RATE,
    WETNESS_GAIN_RATE,
)


@dataclass(frozen=True)
class Exposure:
    """What the player is exposed to this tick, read from the tick inputs."""

    is_swimming: bool
    is_moving: bool
    sheltered: bool
    near_fire: bool
    is_raining: bool
    rain_intensity: float


class TickMessage:
    """Single message slot for the vitals stage: the last one set wins."""

    def __init__(self) -> None:
        self.text: Optional[str] = None
        self.severity: str = "info"
        self.category: str = "PLAYER"

    def set(self, text: str, severity: str = "info", category: str = "PLAYER") -> None:
        self.text = text
        self.severity = severity
        self.category = category

    def __bool__(self) -> bool:
        return self.text is not None


def wetness_rate(exposure: Exposure) -> float:
    """Wetness change per second. Fire proximity overrides rain and swimming."""
    rate = -WETNESS_DRY_RATE
    if exposure.is_swimming:
        rate = WETNESS_GAIN_RATE * SWIM_WETNESS_MULTIPLIER
    elif exposure.is_raining and not exposure.sheltered:
        rate = WETNESS_GAIN_RATE * (RAIN_WETNESS_BASE + exposure.rain_intensity)
    if exposure.near_fire:
        rate = -WETNESS_GAIN_RATE * FIRE_DRYING_MULTIPLIER
    return rate


def energy_decay_rate(exposure: Exposure) -> float:
    """Energy lost per second."""
    if exposure.is_swimming:
        return HEALTH_DECAY_SWIMMING
    if exposure.is_moving:
        return HEALTH_DECAY_MOVING
    return HEALTH_DECAY_IDLE


def update_vitals(
    player: "Player",  # noqa: F821
    exposure: Exposure,
    delta_ms: float,
    rng: Generator,
    message: TickMessage,
) -> bool:
    """
    Advance the player's condition by one tick.

    Order: wetness, torch, energy decay, sickness onset, sickness recovery.
    Onset and recovery both look at the sickness flag as it was before the
    tick, so a cold caught this tick starts counting down on the next.
    Returns True when energy ran out.
    """
    delta_s = delta_ms / 1000.0
    was_sick = player.sick

    # 1. Wetness
    player.wetness += wetness_rate(exposure) * delta_s
    player.wetness = max(0.0, min(MAX_WETNESS, player.wetness))

    # 2. Torch
    if player.holding_torch:
        if exposure.is_swimming:
            player.holding_torch = False
            player.torch_remaining = 0.0
            message.set("The water extinguished your torch!", "warning")
        else:
            player.torch_remaining -= delta_ms
            if player.torch_remaining <= 0:
                player.holding_torch = False
                player.torch_remaining = 0.0
                message.set("Your torch burned out.")

    # 3. Energy
    player.energy -= energy_decay_rate(exposure) * delta_s
    game_over = player.energy <= 0
    player.energy = max(0.0, min(MAX_ENERGY, player.energy))

    # 4. Sickness onset
    if not was_sick and player.wetness > SICKNESS_WETNESS_THRESHOLD:
        multiplier = 1.0
        if exposure.is_raining and exposure.rain_intensity > HEAVY_RAIN_THRESHOLD:
            multiplier = HEAVY_RAIN_SICKNESS_MULTIPLIER
        chance = SICKNESS_CHANCE_FROM_WETNESS * multiplier * (delta_ms / REFERENCE_TICK_MS)
        if rng.random() < chance:
            player.fall_sick()
            message.set("You caught a cold from the dampness!", "danger")

    # 5. Sickness recovery
    if was_sick:
        player.sickness_remaining -= delta_ms
        if player.sickness_remaining <= 0:
            player.sick = False
            player.sickness_remaining = 0.0
            message.set("You feel better.", "success")

    return game_over
