"""Scripted survivor for headless runs.

Stands in for the input layer: it reads the world snapshot and issues the
same intents a player would (move, collect, shake, eat). It never touches
engine internals.
"""

from __future__ import annotations

from typing import Optional

from island_sim.core.config import (
    AUTOPILOT_EAT_THRESHOLD,
    AUTOPILOT_SHAKE_INTERVAL_MS,
    TREE_SHAKE_DISTANCE,
)
from island_sim.economy.inventory import ItemType, food_items
from island_sim.world.map import Vec2, distance
from island_sim.world.resources import interaction_radius

# Land items worth walking to
_GATHER_TYPES = {ItemType.APPLE, ItemType.WOOD, ItemType.SEED}


def _first_slot(inventory: tuple, candidates: list[ItemType]) -> Optional[int]:
    for i, item in enumerate(inventory):
        if item is not None and item in candidates:
            return i
    return None


class Autopilot:
    """Eat when hungry, otherwise gather the nearest land item or shake a tree."""

    def __init__(self, eat_threshold: float = AUTOPILOT_EAT_THRESHOLD) -> None:
        self.eat_threshold = eat_threshold
        self._next_shake_ms: float = 0.0
        self.actions: dict[str, int] = {"eat": 0, "plant": 0, "collect": 0, "shake": 0, "move": 0}

    def _count(self, action: str) -> str:
        self.actions[action] += 1
        return action

    def act(self, engine: "SimulationEngine") -> Optional[str]:  # noqa: F821
        """Issue at most one intent. Returns the action taken, if any."""
        if not engine.is_active:
            return None
        snap = engine.snapshot()
        player = snap.player
        inventory = snap.inventory

        if player.energy < self.eat_threshold:
            slot = _first_slot(inventory, food_items())
            if slot is not None and engine.eat(slot):
                return self._count("eat")

        if all(item is not None for item in inventory):
            slot = _first_slot(inventory, [ItemType.SEED])
            if slot is not None and engine.eat(slot):
                return self._count("plant")
            return None

        target = self._nearest_item(snap.resources, player.position)
        if target is not None:
            if distance(target.position, player.position) < interaction_radius(target.item_type):
                if engine.collect(target.resource_id):
                    return self._count("collect")
                return None
            return self._walk(engine, player.target, target.position)

        tree = self._nearest_tree(snap.trees, player.position)
        if tree is None:
            return None
        if distance(tree.position, player.position) <= TREE_SHAKE_DISTANCE:
            if snap.elapsed_ms >= self._next_shake_ms:
                self._next_shake_ms = snap.elapsed_ms + AUTOPILOT_SHAKE_INTERVAL_MS
                if engine.shake_tree(tree.position):
                    return self._count("shake")
            return None
        return self._walk(engine, player.target, tree.position)

    def _walk(self, engine: "SimulationEngine", current: Optional[Vec2], destination: Vec2) -> Optional[str]:  # noqa: F821
        if current == destination:
            return None
        if engine.move_to(destination):
            return self._count("move")
        return None

    @staticmethod
    def _nearest_item(resources: tuple, position: Vec2):
        candidates = [r for r in resources if not r.eaten and r.item_type in _GATHER_TYPES]
        if not candidates:
            return None
        return min(candidates, key=lambda r: distance(r.position, position))

    @staticmethod
    def _nearest_tree(trees: tuple, position: Vec2):
        if not trees:
            return None
        return min(trees, key=lambda t: distance(t.position, position))
