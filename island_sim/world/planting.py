"""Planted seeds maturing into new trees."""

from __future__ import annotations

from dataclasses import dataclass

from numpy.random import Generator

from island_sim.core.config import (
    SAPLING_SCALE,
    TREE_GROWTH_CHANCE,
    TREE_GROWTH_TIME_MAX_MS,
    TREE_GROWTH_TIME_MIN_MS,
)
from island_sim.core.ids import IdAllocator
from island_sim.world.map import Vec2


@dataclass
class PlantedSeed:
    """An apple seed in the ground."""

    seed_id: int
    position: Vec2
    planted_at: float
    growth_duration: float

    def is_due(self, now_ms: float) -> bool:
        return now_ms - self.planted_at > self.growth_duration


class PlantingManager:
    """Manages all planted seeds."""

    def __init__(self, ids: IdAllocator) -> None:
        self._ids = ids
        self.seeds: list[PlantedSeed] = []

    def plant(self, position: Vec2, now_ms: float, rng: Generator) -> PlantedSeed:
        """Put a seed in the ground with a randomized growth duration."""
        seed = PlantedSeed(
            seed_id=self._ids.next("seed"),
            position=position,
            planted_at=now_ms,
            growth_duration=rng.uniform(TREE_GROWTH_TIME_MIN_MS, TREE_GROWTH_TIME_MAX_MS),
        )
        self.seeds.append(seed)
        return seed

    def update(self, now_ms: float, rng: Generator) -> list[tuple[Vec2, float]]:
        """
        Remove every seed whose duration elapsed. Each one sprouts with
        TREE_GROWTH_CHANCE; returns (position, sapling scale) per sprout.
        """
        sprouts: list[tuple[Vec2, float]] = []
        still_growing: list[PlantedSeed] = []
        for seed in self.seeds:
            if not seed.is_due(now_ms):
                still_growing.append(seed)
                continue
            if rng.random() < TREE_GROWTH_CHANCE:
                sprouts.append((seed.position, rng.uniform(*SAPLING_SCALE)))
        self.seeds = still_growing
        return sprouts

    def clear(self) -> None:
        self.seeds.clear()
