"""Circular island geometry: land disc, beach, sea annulus and helpers."""

from __future__ import annotations

import math

from numpy.random import Generator

from island_sim.core.config import (
    ISLAND_RADIUS,
    NPC_FISHING_ZONE,
    SAND_RADIUS,
    SWIM_THRESHOLD,
    SWIM_VERTICAL_OFFSET,
    WATER_MOVEMENT_LIMIT,
    WORLD_CENTER,
)

Vec2 = tuple[float, float]

_COMPASS_POINTS: list[str] = [
    "north", "north-east", "east", "south-east",
    "south", "south-west", "west", "north-west",
]


# ---------------------------------------------------------------------------
# Vector helpers (ground plane, x east / z south)
# ---------------------------------------------------------------------------

def distance(a: Vec2, b: Vec2) -> float:
    return math.hypot(a[0] - b[0], a[1] - b[1])


def length(v: Vec2) -> float:
    return math.hypot(v[0], v[1])


def normalize(v: Vec2) -> Vec2:
    n = length(v)
    if n == 0:
        return (0.0, 0.0)
    return (v[0] / n, v[1] / n)


def rotate(v: Vec2, angle: float) -> Vec2:
    c, s = math.cos(angle), math.sin(angle)
    return (v[0] * c - v[1] * s, v[0] * s + v[1] * c)


def direction_to(start: Vec2, end: Vec2) -> Vec2:
    return normalize((end[0] - start[0], end[1] - start[1]))


def random_unit_vector(rng: Generator) -> Vec2:
    angle = rng.uniform(0.0, 2.0 * math.pi)
    return (math.cos(angle), math.sin(angle))


def random_point_in_annulus(
    rng: Generator, inner: float, outer: float, center: Vec2 = WORLD_CENTER
) -> Vec2:
    """Uniform angle, uniform radius between inner and outer."""
    angle = rng.uniform(0.0, 2.0 * math.pi)
    r = rng.uniform(inner, outer)
    return (center[0] + math.cos(angle) * r, center[1] + math.sin(angle) * r)


def scatter(rng: Generator, origin: Vec2, spread: float) -> Vec2:
    """Point offset from origin by up to +/- spread on each axis."""
    return (
        origin[0] + rng.uniform(-spread, spread),
        origin[1] + rng.uniform(-spread, spread),
    )


def compass_direction(position: Vec2, center: Vec2 = WORLD_CENTER) -> str:
    """8-point compass bearing of position seen from center (north is -z)."""
    dx = position[0] - center[0]
    dz = position[1] - center[1]
    bearing = math.degrees(math.atan2(dx, -dz)) % 360.0
    return _COMPASS_POINTS[int((bearing + 22.5) // 45.0) % 8]


# ---------------------------------------------------------------------------
# Island zones
# ---------------------------------------------------------------------------

class IslandMap:
    """Zone partition of the world: land disc inside a traversable sea."""

    def __init__(
        self,
        island_radius: float = ISLAND_RADIUS,
        sand_radius: float = SAND_RADIUS,
        swim_threshold: float = SWIM_THRESHOLD,
        water_limit: float = WATER_MOVEMENT_LIMIT,
        center: Vec2 = WORLD_CENTER,
    ) -> None:
        self.island_radius = island_radius
        self.sand_radius = sand_radius
        self.swim_threshold = swim_threshold
        self.water_limit = water_limit
        self.center = center
        self.fishing_zone: tuple[float, float] = NPC_FISHING_ZONE

    def distance_from_center(self, position: Vec2) -> float:
        return distance(position, self.center)

    def is_on_land(self, position: Vec2) -> bool:
        return self.distance_from_center(position) <= self.island_radius

    def is_swimming(self, position: Vec2) -> bool:
        return self.distance_from_center(position) > self.swim_threshold

    def in_bounds(self, position: Vec2) -> bool:
        """Inside the overall traversable bound."""
        return self.distance_from_center(position) <= self.water_limit

    def in_fishing_zone(self, position: Vec2) -> bool:
        inner, outer = self.fishing_zone
        return inner <= self.distance_from_center(position) <= outer

    def vertical_offset(self, position: Vec2) -> float:
        return SWIM_VERTICAL_OFFSET if self.is_swimming(position) else 0.0

    def toward_center(self, position: Vec2) -> Vec2:
        return direction_to(position, self.center)

    def away_from_center(self, position: Vec2) -> Vec2:
        heading = direction_to(self.center, position)
        if heading == (0.0, 0.0):
            return (1.0, 0.0)
        return heading
