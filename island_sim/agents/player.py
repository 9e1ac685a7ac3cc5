"""The survivor: position, movement and condition."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from island_sim.core.config import (
    ARRIVAL_DISTANCE,
    INVENTORY_SIZE,
    MAX_ENERGY,
    MOVEMENT_SPEED,
    MOVEMENT_SPEED_SICK_MULTIPLIER,
    SICKNESS_DURATION_MS,
    WORLD_CENTER,
)
from island_sim.economy.inventory import ItemType, SlotInventory
from island_sim.world.map import Vec2, distance, direction_to


@dataclass
class Player:
    """Player condition and inventory. Created at game start, replaced on restart."""

    position: Vec2 = WORLD_CENTER
    target: Optional[Vec2] = None
    energy: float = MAX_ENERGY
    wetness: float = 0.0
    sick: bool = False
    sickness_remaining: float = 0.0
    holding_torch: bool = False
    torch_remaining: float = 0.0
    last_food_type: Optional[ItemType] = None
    consecutive_food_count: int = 0
    score: int = 0
    inventory: SlotInventory = field(default_factory=lambda: SlotInventory(INVENTORY_SIZE))

    @property
    def is_moving(self) -> bool:
        return self.target is not None

    @property
    def speed(self) -> float:
        if self.sick:
            return MOVEMENT_SPEED * MOVEMENT_SPEED_SICK_MULTIPLIER
        return MOVEMENT_SPEED

    def set_target(self, destination: Vec2) -> None:
        self.target = (float(destination[0]), float(destination[1]))

    def stop(self) -> None:
        self.target = None

    def step(self, delta_ms: float) -> None:
        """Walk toward the target, clearing it on arrival."""
        if self.target is None:
            return
        remaining = distance(self.position, self.target)
        travel = self.speed * (delta_ms / 1000.0)
        if remaining < ARRIVAL_DISTANCE or travel >= remaining:
            self.position = self.target
            self.target = None
            return
        dx, dz = direction_to(self.position, self.target)
        self.position = (self.position[0] + dx * travel, self.position[1] + dz * travel)

    def heal(self, amount: float) -> None:
        self.energy = min(MAX_ENERGY, self.energy + amount)

    def fall_sick(self) -> None:
        self.sick = True
        self.sickness_remaining = SICKNESS_DURATION_MS
