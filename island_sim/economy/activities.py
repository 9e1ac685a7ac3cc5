"""NPC work tasks: what each one gathers, where, and how skill improves it."""

from __future__ import annotations

from dataclasses import dataclass

from island_sim.agents.npc import NPC, NPCTask
from island_sim.core.config import (
    NPC_ACTION_REFERENCE_S,
    NPC_BASE_COLLECT_CHANCE,
    NPC_SKILL_GAIN,
)
from island_sim.economy.inventory import ItemType


@dataclass(frozen=True)
class TaskSpec:
    """A gathering task an NPC can be assigned."""

    task: NPCTask
    item_type: ItemType
    zone: str          # "land" or "sea"
    skill: str
    label: str
    base_chance: float = NPC_BASE_COLLECT_CHANCE

    def success_chance(self, npc: NPC) -> float:
        """Per-second chance: base rate plus the NPC's skill, capped at 1."""
        return min(1.0, self.base_chance + npc.skills.get(self.skill, 0.0))

    def tick_chance(self, npc: NPC, delta_s: float) -> float:
        """Chance for a tick of delta_s seconds, independent of tick length."""
        p = self.success_chance(npc)
        if p >= 1.0:
            return 1.0
        return 1.0 - (1.0 - p) ** (delta_s / NPC_ACTION_REFERENCE_S)

    def improve(self, npc: NPC) -> None:
        npc.skills[self.skill] = min(1.0, npc.skills.get(self.skill, 0.0) + NPC_SKILL_GAIN)


TASKS: dict[NPCTask, TaskSpec] = {
    NPCTask.GATHER_WOOD: TaskSpec(
        task=NPCTask.GATHER_WOOD,
        item_type=ItemType.WOOD,
        zone="land",
        skill="wood",
        label="gathering wood",
    ),
    NPCTask.GATHER_APPLE: TaskSpec(
        task=NPCTask.GATHER_APPLE,
        item_type=ItemType.APPLE,
        zone="land",
        skill="apple",
        label="gathering apples",
    ),
    NPCTask.FISH: TaskSpec(
        task=NPCTask.FISH,
        item_type=ItemType.FISH,
        zone="sea",
        skill="fish",
        label="fishing",
    ),
}
