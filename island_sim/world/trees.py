"""Trees: growth, shake-and-drop yield, recovery and autonomous apple drops."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from numpy.random import Generator

from island_sim.core.config import (
    INITIAL_TREE_COUNT,
    ISLAND_RADIUS,
    MAX_TREE_SCALE,
    TREE_AUTO_DROP_INTERVAL_MS,
    TREE_AUTO_DROP_SCATTER,
    TREE_CLEARING_RADIUS,
    TREE_DECAY_FACTOR,
    TREE_DROP_CHANCE,
    TREE_DROP_SCATTER,
    TREE_GROWTH_MODE,
    TREE_GROWTH_STEP_INCREMENT,
    TREE_GROWTH_STEP_INTERVAL_MS,
    TREE_INITIAL_SCALE,
    TREE_PASSIVE_GROWTH_RATE,
    TREE_PLACEMENT_MIN_RADIUS,
    TREE_RECOVERY_TIME_MS,
)
from island_sim.core.ids import IdAllocator
from island_sim.economy.inventory import ItemType
from island_sim.world.map import Vec2, distance, random_point_in_annulus, scatter

_GROWTH_MODES = ("continuous", "stepped")


@dataclass
class TreeData:
    """A tree on the island."""

    tree_id: int
    position: Vec2
    scale: float
    next_drop_time: float
    shake_count: int = 0
    last_shake_time: float = 0.0

    def drop_probability(self) -> float:
        """Diminishing-yield chance that a shake drops something."""
        return (TREE_DROP_CHANCE * self.scale) / (1.0 + self.shake_count * TREE_DECAY_FACTOR)

    def recover(self, now_ms: float) -> bool:
        """Forget one shake once the recovery window has passed."""
        if self.shake_count > 0 and now_ms - self.last_shake_time > TREE_RECOVERY_TIME_MS:
            self.shake_count -= 1
            # Rewind by half a window so the next recovery comes sooner
            self.last_shake_time = now_ms - TREE_RECOVERY_TIME_MS * 0.5
            return True
        return False

    def grow(self, amount: float) -> None:
        """Grow by amount / scale, never past MAX_TREE_SCALE."""
        if self.scale >= MAX_TREE_SCALE:
            return
        self.scale = min(MAX_TREE_SCALE, self.scale + amount / self.scale)


def schedule_next_drop(now_ms: float, rng: Generator) -> float:
    lo, hi = TREE_AUTO_DROP_INTERVAL_MS
    return now_ms + rng.uniform(lo, hi)


class TreeManager:
    """Manages all trees in the world."""

    def __init__(self, ids: IdAllocator, growth_mode: str = TREE_GROWTH_MODE) -> None:
        if growth_mode not in _GROWTH_MODES:
            raise ValueError(f"unknown tree growth mode: {growth_mode!r}")
        self._ids = ids
        self._trees: dict[int, TreeData] = {}
        self.growth_mode = growth_mode
        self._growth_accumulator_ms: float = 0.0

    @property
    def trees(self) -> list[TreeData]:
        return list(self._trees.values())

    def get(self, tree_id: int) -> Optional[TreeData]:
        return self._trees.get(tree_id)

    def clear(self) -> None:
        self._trees.clear()
        self._growth_accumulator_ms = 0.0

    def find_at(self, position: Vec2, tolerance: float = 1e-6) -> Optional[TreeData]:
        """Tree standing at an exact ground position."""
        for tree in self._trees.values():
            if distance(tree.position, position) <= tolerance:
                return tree
        return None

    def plant(self, position: Vec2, scale: float, now_ms: float, rng: Generator) -> TreeData:
        """Register a new tree with a freshly scheduled auto-drop."""
        tree = TreeData(
            tree_id=self._ids.next("tree"),
            position=position,
            scale=min(scale, MAX_TREE_SCALE),
            next_drop_time=schedule_next_drop(now_ms, rng),
        )
        self._trees[tree.tree_id] = tree
        return tree

    def generate(self, rng: Generator, now_ms: float, count: int = INITIAL_TREE_COUNT) -> None:
        """Place the starting trees, keeping the workbench clearing empty."""
        for _ in range(count):
            position = random_point_in_annulus(rng, TREE_PLACEMENT_MIN_RADIUS, ISLAND_RADIUS)
            if math.hypot(*position) <= TREE_CLEARING_RADIUS:
                continue
            self.plant(position, rng.uniform(*TREE_INITIAL_SCALE), now_ms, rng)

    # ------------------------------------------------------------------
    # Per-tick update
    # ------------------------------------------------------------------

    def update(self, delta_ms: float, now_ms: float, rng: Generator) -> list[tuple[ItemType, Vec2]]:
        """Recover, grow and auto-drop. Returns the drops to spawn."""
        step_due = False
        if self.growth_mode == "stepped":
            self._growth_accumulator_ms += delta_ms
            if self._growth_accumulator_ms >= TREE_GROWTH_STEP_INTERVAL_MS:
                self._growth_accumulator_ms -= TREE_GROWTH_STEP_INTERVAL_MS
                step_due = True

        drops: list[tuple[ItemType, Vec2]] = []
        for tree in self._trees.values():
            tree.recover(now_ms)

            if self.growth_mode == "continuous":
                tree.grow(TREE_PASSIVE_GROWTH_RATE * (delta_ms / 1000.0))
            elif step_due:
                tree.grow(TREE_GROWTH_STEP_INCREMENT)

            if now_ms >= tree.next_drop_time:
                drops.append((ItemType.APPLE, scatter(rng, tree.position, TREE_AUTO_DROP_SCATTER)))
                tree.next_drop_time = schedule_next_drop(now_ms, rng)
        return drops

    # ------------------------------------------------------------------
    # Shaking
    # ------------------------------------------------------------------

    def shake(self, tree: TreeData, now_ms: float, rng: Generator) -> Optional[tuple[ItemType, Vec2]]:
        """
        Shake a tree. The chance is computed before the shake counter moves;
        the counter and timestamp are updated whatever the outcome. On
        success a coin flip picks wood or an apple near the trunk.
        """
        chance = tree.drop_probability()
        tree.shake_count += 1
        tree.last_shake_time = now_ms

        if rng.random() >= chance:
            return None
        item = ItemType.WOOD if rng.random() > 0.5 else ItemType.APPLE
        return item, scatter(rng, tree.position, TREE_DROP_SCATTER)
