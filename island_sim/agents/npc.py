"""Castaway NPCs: state, task, skills and spawning."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from numpy.random import Generator

from island_sim.core.config import NPC_MAX_ENERGY, NPC_NAMES, NPC_SPAWN_RING
from island_sim.economy.inventory import ItemType, is_food
from island_sim.world.map import Vec2, direction_to, random_point_in_annulus


class NPCState(Enum):
    UNCONSCIOUS = "unconscious"
    IDLE = "idle"
    MOVING = "moving"
    WORKING = "working"


class NPCTask(Enum):
    GATHER_WOOD = "gather_wood"
    GATHER_APPLE = "gather_apple"
    FISH = "fish"


_BUSY_STATES = {NPCState.MOVING, NPCState.WORKING}


@dataclass
class NPC:
    """A castaway sharing the island with the player."""

    npc_id: int
    name: str
    position: Vec2
    heading: Vec2
    created_at: float
    state: NPCState = NPCState.UNCONSCIOUS
    target: Optional[Vec2] = None
    energy: float = NPC_MAX_ENERGY / 2
    inventory: list[ItemType] = field(default_factory=list)
    task: Optional[NPCTask] = None
    skills: dict[str, float] = field(default_factory=lambda: {"wood": 0.0, "apple": 0.0, "fish": 0.0})
    action_timer: float = 0.0
    starving: bool = False
    last_player_pause_time: float = 0.0
    ignore_player_until: float = 0.0

    @property
    def is_conscious(self) -> bool:
        return self.state is not NPCState.UNCONSCIOUS

    @property
    def is_busy(self) -> bool:
        return self.state in _BUSY_STATES

    def food_index(self) -> Optional[int]:
        """Index of the first edible item carried, if any."""
        for i, item in enumerate(self.inventory):
            if is_food(item):
                return i
        return None

    def has_food(self) -> bool:
        return self.food_index() is not None

    def set_state(self, state: NPCState) -> None:
        # Busy states are reachable only once awake
        if state in _BUSY_STATES and self.state is NPCState.UNCONSCIOUS:
            return
        self.state = state


def spawn_npc(npc_id: int, rng: Generator, now_ms: float) -> NPC:
    """A new castaway lying unconscious near the island edge, facing inland."""
    position = random_point_in_annulus(rng, *NPC_SPAWN_RING)
    heading = direction_to(position, (0.0, 0.0))
    if heading == (0.0, 0.0):
        heading = (1.0, 0.0)
    return NPC(
        npc_id=npc_id,
        name=str(rng.choice(NPC_NAMES)),
        position=position,
        heading=heading,
        created_at=now_ms,
        energy=NPC_MAX_ENERGY / 2,
    )
