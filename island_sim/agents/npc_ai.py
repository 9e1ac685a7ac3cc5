"""NPC behaviour: energy, starvation, player deference, wandering and task work."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from numpy.random import Generator

from island_sim.agents.npc import NPC, NPCState, NPCTask, spawn_npc
from island_sim.core.config import (
    ISLAND_RADIUS,
    NPC_ARRIVAL_DISTANCE,
    NPC_BOUNCE_ANGLE,
    NPC_BUSY_DECAY_MULTIPLIER,
    NPC_ENERGY_DECAY,
    NPC_IDLE_LONG_WAIT_MS,
    NPC_IDLE_SHORT_WAIT_MS,
    NPC_IGNORE_PLAYER_MS,
    NPC_LOOKAHEAD_DISTANCE,
    NPC_MAX_ENERGY,
    NPC_PLAYER_PAUSE_RADIUS,
    NPC_SELF_FEED_THRESHOLD,
    NPC_SPAWN_CHANCE_PER_SECOND,
    NPC_SPEED,
    NPC_UNCONSCIOUS_DESPAWN_MS,
    NPC_WAKE_ENERGY_FRACTION,
    NPC_WANDER_CHANCE,
    NPC_WANDER_RADIUS,
    NPC_WANDER_SPEED_FACTOR,
    NPC_WOBBLE_ANGLE,
    NPC_WOBBLE_CHANCE_PER_SECOND,
    NPC_ZONE_MARGIN,
)
from island_sim.core.ids import IdAllocator
from island_sim.economy.activities import TASKS, TaskSpec
from island_sim.economy.inventory import ItemType, SlotInventory, display_name, food_items, heal_value
from island_sim.world.map import (
    IslandMap,
    Vec2,
    compass_direction,
    direction_to,
    distance,
    random_point_in_annulus,
    random_unit_vector,
    rotate,
)
from island_sim.world.resources import interaction_radius


@dataclass
class NPCTickReport:
    """What happened to the NPC population during one tick."""

    spawned: list[int] = field(default_factory=list)
    died: list[int] = field(default_factory=list)
    despawned: list[int] = field(default_factory=list)
    collected: list[tuple[int, str]] = field(default_factory=list)

    @property
    def removed(self) -> list[int]:
        return self.died + self.despawned


class NPCController:
    """Owns the NPC population and runs each NPC's state machine."""

    def __init__(
        self,
        ids: IdAllocator,
        island: IslandMap,
        rng: Generator,
        logger: Optional["SimLogger"] = None,  # noqa: F821
    ) -> None:
        self._ids = ids
        self._island = island
        self._rng = rng
        self._logger = logger
        self._npcs: dict[int, NPC] = {}

    @property
    def npcs(self) -> list[NPC]:
        return list(self._npcs.values())

    def get(self, npc_id: int) -> Optional[NPC]:
        return self._npcs.get(npc_id)

    def add(self, npc: NPC) -> NPC:
        self._npcs[npc.npc_id] = npc
        return npc

    def clear(self) -> None:
        self._npcs.clear()

    def _log(self, message: str, severity: str, now_ms: float, npc: Optional[NPC] = None) -> None:
        if self._logger is None:
            return
        npc_ids = [npc.npc_id] if npc is not None else []
        self._logger.log("NPC", message, severity=severity, time_ms=now_ms, npc_ids=npc_ids)

    # ------------------------------------------------------------------
    # Per-tick update
    # ------------------------------------------------------------------

    def update(
        self,
        delta_ms: float,
        now_ms: float,
        player_position: Vec2,
        visible_resources: list["Resource"],  # noqa: F821
        resources: "ResourceManager",  # noqa: F821
    ) -> NPCTickReport:
        """
        Spawn roll, then every NPC in insertion order.

        visible_resources is the pre-tick view used for scanning; claims go
        through the live resource manager so two NPCs can never collect the
        same item.
        """
        report = NPCTickReport()
        self._roll_spawn(delta_ms, now_ms, report)

        for npc in list(self._npcs.values()):
            if npc.state is NPCState.UNCONSCIOUS:
                if now_ms - npc.created_at > NPC_UNCONSCIOUS_DESPAWN_MS:
                    del self._npcs[npc.npc_id]
                    report.despawned.append(npc.npc_id)
                    self._log(f"{npc.name} was swept back out to sea.", "warning", now_ms, npc)
                continue

            if not self._update_energy(npc, delta_ms, now_ms):
                del self._npcs[npc.npc_id]
                report.died.append(npc.npc_id)
                continue

            self._update_behaviour(npc, delta_ms, now_ms, player_position, visible_resources, resources, report)
        return report

    def _roll_spawn(self, delta_ms: float, now_ms: float, report: NPCTickReport) -> None:
        if self._npcs:
            return
        if self._rng.random() >= NPC_SPAWN_CHANCE_PER_SECOND * (delta_ms / 1000.0):
            return
        npc = self.add(spawn_npc(self._ids.next("npc"), self._rng, now_ms))
        report.spawned.append(npc.npc_id)
        self._log(
            f"Someone washed ashore on the {compass_direction(npc.position)} beach!",
            "info", now_ms, npc,
        )

    def _update_energy(self, npc: NPC, delta_ms: float, now_ms: float) -> bool:
        """Decay, self-feed and death check. Returns False if the NPC died."""
        rate = NPC_ENERGY_DECAY
        if npc.is_busy:
            rate *= NPC_BUSY_DECAY_MULTIPLIER
        npc.energy -= rate * (delta_ms / 1000.0)

        if npc.energy < NPC_SELF_FEED_THRESHOLD:
            idx = npc.food_index()
            if idx is not None:
                item = npc.inventory.pop(idx)
                npc.energy = min(NPC_MAX_ENERGY, npc.energy + heal_value(item))
                npc.starving = False
                self._log(f"{npc.name} ate some {display_name(item)}.", "info", now_ms, npc)

        if npc.energy <= 0:
            npc.energy = 0.0
            self._log(f"{npc.name} has died of starvation.", "danger", now_ms, npc)
            return False
        return True

    def _update_behaviour(
        self,
        npc: NPC,
        delta_ms: float,
        now_ms: float,
        player_position: Vec2,
        visible_resources: list["Resource"],  # noqa: F821
        resources: "ResourceManager",  # noqa: F821
        report: NPCTickReport,
    ) -> None:
        # Starvation override
        if npc.energy < NPC_SELF_FEED_THRESHOLD and not npc.has_food():
            if not npc.starving:
                npc.starving = True
                self._log(f"{npc.name} is starving and heading inland!", "warning", now_ms, npc)
        if npc.starving:
            if self._island.is_on_land(npc.position):
                npc.set_state(NPCState.IDLE)
                npc.target = None
                return
            npc.heading = self._island.toward_center(npc.position)
            npc.set_state(NPCState.MOVING)
            self._advance(npc, delta_ms, NPC_SPEED)
            return

        # Player deference
        if (
            distance(npc.position, player_position) < NPC_PLAYER_PAUSE_RADIUS
            and now_ms >= npc.ignore_player_until
        ):
            npc.set_state(NPCState.IDLE)
            npc.target = None
            npc.last_player_pause_time = now_ms
            return

        if npc.task is None and npc.state is NPCState.IDLE:
            self._wander(npc, delta_ms)
            return

        if npc.task is None:
            # Busy without a task: settle back down
            npc.set_state(NPCState.IDLE)
            npc.target = None
            return

        plan = TASKS[npc.task]
        self._collect_nearby(npc, plan, delta_ms, now_ms, visible_resources, resources, report)
        self._steer(npc, plan, delta_ms)
        self._advance(npc, delta_ms, NPC_SPEED)

    # ------------------------------------------------------------------
    # Idle wandering
    # ------------------------------------------------------------------

    def _wander(self, npc: NPC, delta_ms: float) -> None:
        if npc.target is not None:
            if distance(npc.position, npc.target) < NPC_ARRIVAL_DISTANCE:
                npc.target = None
                npc.action_timer = self._rng.uniform(*NPC_IDLE_LONG_WAIT_MS)
                return
            npc.heading = direction_to(npc.position, npc.target)
            step = NPC_SPEED * NPC_WANDER_SPEED_FACTOR * (delta_ms / 1000.0)
            remaining = distance(npc.position, npc.target)
            if step >= remaining:
                npc.position = npc.target
            else:
                npc.position = (
                    npc.position[0] + npc.heading[0] * step,
                    npc.position[1] + npc.heading[1] * step,
                )
            return

        npc.action_timer -= delta_ms
        if npc.action_timer > 0:
            return
        if self._rng.random() < NPC_WANDER_CHANCE:
            npc.target = random_point_in_annulus(self._rng, 0.0, NPC_WANDER_RADIUS)
        else:
            npc.action_timer = self._rng.uniform(*NPC_IDLE_SHORT_WAIT_MS)

    # ------------------------------------------------------------------
    # Task execution
    # ------------------------------------------------------------------

    def _collect_nearby(
        self,
        npc: NPC,
        plan: TaskSpec,
        delta_ms: float,
        now_ms: float,
        visible_resources: list["Resource"],  # noqa: F821
        resources: "ResourceManager",  # noqa: F821
        report: NPCTickReport,
    ) -> None:
        reach = interaction_radius(plan.item_type)
        for seen in visible_resources:
            if seen.item_type != plan.item_type:
                continue
            if distance(seen.position, npc.position) >= reach:
                continue
            if self._rng.random() >= plan.tick_chance(npc, delta_ms / 1000.0):
                continue
            item = resources.collect(seen.resource_id)
            if item is None:
                continue
            npc.inventory.append(item)
            plan.improve(npc)
            report.collected.append((npc.npc_id, seen.resource_id))
            self._log(f"{npc.name} collected some {display_name(item)}.", "info", now_ms, npc)

    def _steer(self, npc: NPC, plan: TaskSpec, delta_ms: float) -> None:
        """Keep the NPC inside its task's zone, bouncing at the edges."""
        delta_s = delta_ms / 1000.0
        step = NPC_SPEED * delta_s
        dist = self._island.distance_from_center(npc.position)

        if plan.zone == "land":
            inner, outer = 0.0, ISLAND_RADIUS - NPC_ZONE_MARGIN
            inside = dist <= outer
        else:
            inner, outer = self._island.fishing_zone
            inside = self._island.in_fishing_zone(npc.position)

        # Outside the zone: head straight back using the same bounds the bounce uses
        if not inside:
            if dist > outer:
                npc.heading = self._island.toward_center(npc.position)
            else:
                npc.heading = self._island.away_from_center(npc.position)
            npc.set_state(NPCState.MOVING)
            return

        npc.set_state(NPCState.WORKING)
        probe = (npc.position[0] + npc.heading[0] * step, npc.position[1] + npc.heading[1] * step)
        probe_dist = self._island.distance_from_center(probe)
        if probe_dist > outer or (inner > 0 and probe_dist < inner):
            bounced = (-npc.heading[0], -npc.heading[1])
            npc.heading = rotate(bounced, self._rng.uniform(-NPC_BOUNCE_ANGLE, NPC_BOUNCE_ANGLE))
        elif self._rng.random() < NPC_WOBBLE_CHANCE_PER_SECOND * delta_s:
            npc.heading = rotate(npc.heading, self._rng.uniform(-NPC_WOBBLE_ANGLE, NPC_WOBBLE_ANGLE))

    def _advance(self, npc: NPC, delta_ms: float, speed: float) -> None:
        step = speed * (delta_ms / 1000.0)
        npc.position = (
            npc.position[0] + npc.heading[0] * step,
            npc.position[1] + npc.heading[1] * step,
        )
        npc.target = (
            npc.position[0] + npc.heading[0] * NPC_LOOKAHEAD_DISTANCE,
            npc.position[1] + npc.heading[1] * NPC_LOOKAHEAD_DISTANCE,
        )

    # ------------------------------------------------------------------
    # Intents
    # ------------------------------------------------------------------

    def wake(self, npc: NPC, now_ms: float) -> bool:
        if npc.state is not NPCState.UNCONSCIOUS:
            return False
        npc.state = NPCState.IDLE
        npc.heading = random_unit_vector(self._rng)
        npc.energy = max(npc.energy, NPC_MAX_ENERGY * NPC_WAKE_ENERGY_FRACTION)
        npc.action_timer = self._rng.uniform(*NPC_IDLE_SHORT_WAIT_MS)
        self._log(f"{npc.name} woke up! They look grateful.", "success", now_ms, npc)
        return True

    def assign(self, npc: NPC, task: Optional[NPCTask], now_ms: float) -> bool:
        """Give an awake NPC a task, or clear it with None."""
        if not npc.is_conscious:
            return False
        npc.task = task
        npc.ignore_player_until = now_ms + NPC_IGNORE_PLAYER_MS
        npc.target = None
        if task is None:
            npc.state = NPCState.IDLE
            npc.action_timer = self._rng.uniform(*NPC_IDLE_SHORT_WAIT_MS)
            self._log(f"{npc.name} is taking a break.", "info", now_ms, npc)
        else:
            npc.state = NPCState.MOVING
            self._log(f"{npc.name} started {TASKS[task].label}.", "info", now_ms, npc)
        return True

    def collect_from(self, npc: NPC, inventory: SlotInventory, now_ms: float) -> int:
        """Move carried items into the player's free slots. Partial transfers allowed."""
        moved = 0
        while npc.inventory and not inventory.is_full:
            inventory.add(npc.inventory.pop(0))
            moved += 1
        if npc.inventory and inventory.is_full:
            self._log("Backpack is full!", "warning", now_ms, npc)
        if moved:
            self._log(f"Took {moved} item(s) from {npc.name}.", "success", now_ms, npc)
        return moved

    def feed(self, npc: NPC, inventory: SlotInventory, now_ms: float) -> Optional[ItemType]:
        """Hand the NPC the first food item in the player's backpack."""
        if not npc.is_conscious:
            return None
        idx = inventory.first_of(food_items())
        if idx is None:
            return None
        item = inventory.remove_at(idx)
        npc.energy = min(NPC_MAX_ENERGY, npc.energy + heal_value(item))
        npc.starving = False
        self._log(f"You fed {npc.name} some {display_name(item)}.", "success", now_ms, npc)
        return item
