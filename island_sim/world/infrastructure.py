"""Campfires and the central workbench shelter."""

from __future__ import annotations

from dataclasses import dataclass

from island_sim.core.config import (
    CAMPFIRE_DURATION_MS,
    CAMPFIRE_LIGHT_RADIUS,
    CAMPFIRE_WARMTH_RADIUS,
    COOKING_DISTANCE,
    LARGE_CAMPFIRE_DURATION_MS,
    LARGE_CAMPFIRE_LIGHT_RADIUS,
    LARGE_CAMPFIRE_WARMTH_RADIUS,
    WORKBENCH_POSITION,
    WORKBENCH_SHELTER_RADIUS,
)
from island_sim.core.ids import IdAllocator
from island_sim.world.map import Vec2, distance


@dataclass
class Campfire:
    """A fire placed by the player. Only the absolute expiry is stored."""

    campfire_id: int
    position: Vec2
    expires_at: float
    is_large: bool = False

    @property
    def light_radius(self) -> float:
        return LARGE_CAMPFIRE_LIGHT_RADIUS if self.is_large else CAMPFIRE_LIGHT_RADIUS

    @property
    def warmth_radius(self) -> float:
        return LARGE_CAMPFIRE_WARMTH_RADIUS if self.is_large else CAMPFIRE_WARMTH_RADIUS

    def is_active(self, now_ms: float) -> bool:
        return now_ms < self.expires_at

    def remaining_ms(self, now_ms: float) -> float:
        return max(0.0, self.expires_at - now_ms)


def fire_duration(is_large: bool) -> float:
    return LARGE_CAMPFIRE_DURATION_MS if is_large else CAMPFIRE_DURATION_MS


def warms(campfires: list[Campfire], position: Vec2, now_ms: float) -> bool:
    """Position lies inside the warmth radius of an unexpired fire."""
    return any(
        c.is_active(now_ms) and distance(c.position, position) < c.warmth_radius
        for c in campfires
    )


def can_cook(campfires: list[Campfire], position: Vec2, now_ms: float) -> bool:
    """Position is close enough to an unexpired fire to grill fish."""
    return any(
        c.is_active(now_ms) and distance(c.position, position) < COOKING_DISTANCE
        for c in campfires
    )


def near_workbench(position: Vec2) -> bool:
    return distance(position, WORKBENCH_POSITION) < WORKBENCH_SHELTER_RADIUS


class StructureManager:
    """Manages all campfires in the world."""

    def __init__(self, ids: IdAllocator) -> None:
        self._ids = ids
        self.campfires: list[Campfire] = []

    def build_campfire(self, position: Vec2, now_ms: float, is_large: bool = False) -> Campfire:
        fire = Campfire(
            campfire_id=self._ids.next("campfire"),
            position=position,
            expires_at=now_ms + fire_duration(is_large),
            is_large=is_large,
        )
        self.campfires.append(fire)
        return fire

    def prune_expired(self, now_ms: float) -> list[Campfire]:
        """Drop expired fires and return them."""
        expired = [c for c in self.campfires if not c.is_active(now_ms)]
        self.campfires = [c for c in self.campfires if c.is_active(now_ms)]
        return expired

    def clear(self) -> None:
        self.campfires.clear()
