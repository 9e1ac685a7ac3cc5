"""Immutable views of the world: tick inputs and the UI-facing snapshot."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from island_sim.economy.inventory import ItemType
from island_sim.world.map import Vec2


@dataclass(frozen=True)
class ResourceView:
    resource_id: str
    item_type: ItemType
    position: Vec2
    eaten: bool
    created_at: float
    height: float = 0.0

    @classmethod
    def of(cls, resource: "Resource") -> "ResourceView":  # noqa: F821
        return cls(
            resource_id=resource.resource_id,
            item_type=resource.item_type,
            position=resource.position,
            eaten=resource.eaten,
            created_at=resource.created_at,
            height=resource.height,
        )


@dataclass(frozen=True)
class TreeView:
    tree_id: int
    position: Vec2
    scale: float
    shake_count: int
    last_shake_time: float
    next_drop_time: float

    @classmethod
    def of(cls, tree: "TreeData") -> "TreeView":  # noqa: F821
        return cls(
            tree_id=tree.tree_id,
            position=tree.position,
            scale=tree.scale,
            shake_count=tree.shake_count,
            last_shake_time=tree.last_shake_time,
            next_drop_time=tree.next_drop_time,
        )


@dataclass(frozen=True)
class SeedView:
    seed_id: int
    position: Vec2
    planted_at: float
    growth_duration: float


@dataclass(frozen=True)
class CampfireView:
    campfire_id: int
    position: Vec2
    expires_at: float
    remaining_ms: float
    is_large: bool
    light_radius: float
    warmth_radius: float


@dataclass(frozen=True)
class NPCView:
    npc_id: int
    name: str
    position: Vec2
    state: str
    target: Optional[Vec2]
    heading: Vec2
    energy: float
    inventory: tuple[ItemType, ...]
    task: Optional[str]
    skills: tuple[tuple[str, float], ...]
    starving: bool

    @classmethod
    def of(cls, npc: "NPC") -> "NPCView":  # noqa: F821
        return cls(
            npc_id=npc.npc_id,
            name=npc.name,
            position=npc.position,
            state=npc.state.value,
            target=npc.target,
            heading=npc.heading,
            energy=npc.energy,
            inventory=tuple(npc.inventory),
            task=npc.task.value if npc.task is not None else None,
            skills=tuple(sorted(npc.skills.items())),
            starving=npc.starving,
        )


@dataclass(frozen=True)
class PlayerView:
    position: Vec2
    vertical_offset: float
    target: Optional[Vec2]
    is_moving: bool
    is_swimming: bool
    energy: float
    wetness: float
    sick: bool
    sickness_remaining: float
    holding_torch: bool
    torch_remaining: float
    last_food_type: Optional[ItemType]
    consecutive_food_count: int
    score: int


@dataclass(frozen=True)
class LogView:
    entry_id: int
    message: str
    severity: str


@dataclass(frozen=True)
class WorldSnapshot:
    """Everything the rendering layer may read. Holds copies only."""

    phase: str
    elapsed_ms: float
    time_of_day: float
    day: int
    is_night: bool
    is_raining: bool
    rain_intensity: float
    heavy_rain: bool
    player: PlayerView
    inventory: tuple[Optional[ItemType], ...]
    storage: tuple[Optional[ItemType], ...]
    resources: tuple[ResourceView, ...]
    trees: tuple[TreeView, ...]
    planted_seeds: tuple[SeedView, ...]
    campfires: tuple[CampfireView, ...]
    npcs: tuple[NPCView, ...]
    selected_npc_id: Optional[int]
    log: tuple[LogView, ...]


@dataclass(frozen=True)
class TickInputs:
    """
    Cross-subsystem state captured once at the start of a tick.

    Later stages read from here instead of from containers that earlier
    stages of the same tick may already have changed.
    """

    now_ms: float
    player_position: Vec2
    is_moving: bool
    is_swimming: bool
    sheltered: bool
    near_fire: bool
    can_cook: bool
    visible_resources: tuple[ResourceView, ...]
