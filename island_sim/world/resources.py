"""Collectible resources: initial placement, collection, despawn and respawn."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from numpy.random import Generator

from island_sim.core.config import (
    APPLE_SPAWN_ANNULUS,
    FISH_DEPTH,
    FISH_INTERACTION_DISTANCE,
    FISH_SPAWN_ANNULUS,
    INTERACTION_DISTANCE,
    ITEM_DESPAWN_TIME_MS,
    RESPAWN_CHANCE,
    RESPAWN_POLICY,
    TOTAL_APPLES,
    TOTAL_FISH,
)
from island_sim.core.ids import IdAllocator
from island_sim.economy.inventory import ItemType
from island_sim.world.map import Vec2, distance, random_point_in_annulus

# Types that persist indefinitely and live in the sea
_SEA_TYPES = {ItemType.FISH}

# Respawn eligibility by policy; wood and seeds never respawn
_RESPAWN_ELIGIBLE: dict[str, set[ItemType]] = {
    "fish_only": {ItemType.FISH},
    "all": {ItemType.FISH, ItemType.APPLE},
}

_SPAWN_ANNULUS: dict[ItemType, tuple[float, float]] = {
    ItemType.APPLE: APPLE_SPAWN_ANNULUS,
    ItemType.FISH: FISH_SPAWN_ANNULUS,
}


@dataclass
class Resource:
    """A collectible item lying in the world."""

    resource_id: str
    item_type: ItemType
    position: Vec2
    created_at: float
    eaten: bool = False

    @property
    def height(self) -> float:
        return FISH_DEPTH if self.item_type in _SEA_TYPES else 0.0

    @property
    def is_sea_resource(self) -> bool:
        return self.item_type in _SEA_TYPES


def interaction_radius(item_type: ItemType) -> float:
    """Collection radius: tight for land items, forgiving for fish."""
    if item_type in _SEA_TYPES:
        return FISH_INTERACTION_DISTANCE
    return INTERACTION_DISTANCE


class ResourceManager:
    """Manages every collectible resource in the world."""

    def __init__(self, ids: IdAllocator, respawn_policy: str = RESPAWN_POLICY) -> None:
        if respawn_policy not in _RESPAWN_ELIGIBLE:
            raise ValueError(f"unknown respawn policy: {respawn_policy!r}")
        self._ids = ids
        self._resources: dict[str, Resource] = {}
        self.respawn_policy = respawn_policy

    @property
    def resources(self) -> list[Resource]:
        return list(self._resources.values())

    def get(self, resource_id: str) -> Optional[Resource]:
        return self._resources.get(resource_id)

    def visible(self, item_type: Optional[ItemType] = None) -> list[Resource]:
        """Uncollected resources, optionally filtered by type."""
        return [
            r for r in self._resources.values()
            if not r.eaten and (item_type is None or r.item_type == item_type)
        ]

    def clear(self) -> None:
        self._resources.clear()

    # ------------------------------------------------------------------
    # Placement
    # ------------------------------------------------------------------

    def generate_initial(self, rng: Generator, now_ms: float) -> None:
        """Scatter the starting apples on land and fish in the sea."""
        for i in range(TOTAL_APPLES):
            self._add(Resource(
                resource_id=f"apple-{i}",
                item_type=ItemType.APPLE,
                position=random_point_in_annulus(rng, *APPLE_SPAWN_ANNULUS),
                created_at=now_ms,
            ))
        for i in range(TOTAL_FISH):
            self._add(Resource(
                resource_id=f"fish-{i}",
                item_type=ItemType.FISH,
                position=random_point_in_annulus(rng, *FISH_SPAWN_ANNULUS),
                created_at=now_ms,
            ))

    def spawn(self, item_type: ItemType, position: Vec2, now_ms: float, tag: str = "drop") -> Resource:
        """Create a new collectible (tree drop, seed dropped after eating, ...)."""
        resource = Resource(
            resource_id=self._ids.next_tag(tag),
            item_type=item_type,
            position=position,
            created_at=now_ms,
        )
        self._add(resource)
        return resource

    # ------------------------------------------------------------------
    # Collection
    # ------------------------------------------------------------------

    def in_reach(self, resource: Resource, position: Vec2) -> bool:
        return distance(resource.position, position) < interaction_radius(resource.item_type)

    def collect(self, resource_id: str) -> Optional[ItemType]:
        """Mark a resource consumed. Returns its type, or None if unavailable."""
        resource = self._resources.get(resource_id)
        if resource is None or resource.eaten:
            return None
        resource.eaten = True
        return resource.item_type

    # ------------------------------------------------------------------
    # Periodic sweep
    # ------------------------------------------------------------------

    def sweep(self, now_ms: float, rng: Generator) -> Optional[Resource]:
        """
        Despawn stale land items and maybe respawn one collected placeholder.

        Uncollected land resources older than the despawn window disappear.
        Fish and collected placeholders are exempt; placeholders that can
        never respawn under the active policy are dropped. With
        RESPAWN_CHANCE one eligible placeholder is relocated inside its
        spawn annulus and becomes collectible again. Returns it, if any.
        """
        eligible_types = _RESPAWN_ELIGIBLE[self.respawn_policy]
        kept: dict[str, Resource] = {}
        for rid, r in self._resources.items():
            if r.eaten:
                if r.item_type in eligible_types:
                    kept[rid] = r
                continue
            if r.is_sea_resource or now_ms - r.created_at < ITEM_DESPAWN_TIME_MS:
                kept[rid] = r
        self._resources = kept

        placeholders = [r for r in kept.values() if r.eaten]
        if not placeholders:
            return None
        if rng.random() >= RESPAWN_CHANCE:
            return None

        chosen = placeholders[int(rng.integers(0, len(placeholders)))]
        chosen.position = random_point_in_annulus(rng, *_SPAWN_ANNULUS[chosen.item_type])
        chosen.eaten = False
        chosen.created_at = now_ms
        return chosen

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _add(self, resource: Resource) -> None:
        self._resources[resource.resource_id] = resource
