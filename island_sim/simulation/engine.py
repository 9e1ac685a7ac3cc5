"""Main simulation loop: game phases, player intents and the per-tick update order."""

from __future__ import annotations

from enum import Enum
from typing import Optional

import numpy as np
from numpy.random import Generator

from island_sim.agents.npc import NPCState, NPCTask
from island_sim.agents.npc_ai import NPCController
from island_sim.agents.player import Player
from island_sim.agents.vitals import Exposure, TickMessage, update_vitals
from island_sim.core.clock import TickDriver, WorldClock, clamp_delta_ms
from island_sim.core.config import (
    RESPAWN_POLICY,
    SHELTER_DISTANCE,
    START_TIME_OF_DAY,
    TICK_INTERVAL_MS,
    TREE_GROWTH_MODE,
    TREE_SHAKE_DISTANCE,
)
from island_sim.core.ids import IdAllocator
from island_sim.economy.consumption import consume_item
from island_sim.economy.crafting import execute_craft
from island_sim.economy.inventory import ItemType, WorkbenchStorage, deposit, display_name, is_food, withdraw
from island_sim.simulation.metrics import MetricsCollector
from island_sim.simulation.snapshot import (
    CampfireView,
    LogView,
    NPCView,
    PlayerView,
    ResourceView,
    SeedView,
    TickInputs,
    TreeView,
    WorldSnapshot,
)
from island_sim.viz.logger import SimLogger
from island_sim.world.climate import Climate
from island_sim.world.generation import generate_world
from island_sim.world.infrastructure import StructureManager, can_cook, near_workbench, warms
from island_sim.world.map import IslandMap, Vec2, distance
from island_sim.world.planting import PlantingManager
from island_sim.world.resources import Resource, ResourceManager
from island_sim.world.trees import TreeManager


class GamePhase(Enum):
    MENU = "MENU"
    PLAYING = "PLAYING"
    PAUSED = "PAUSED"
    GAMEOVER = "GAMEOVER"
    WORKBENCH = "WORKBENCH"
    NPC_MENU = "NPC_MENU"


class SimulationEngine:
    """Orchestrates the island simulation.

    Each tick runs the subsystems in a fixed order:

    1. clock advance and the player's step toward their move target
    2. capture of the tick inputs (position, exposure, visible resources)
    3. expired campfires pruned
    4. tree recovery, growth and auto-drops
    5. seed maturation
    6. NPC spawn roll and NPC state updates
    7. weather, then player vitals
    8. metrics sample and log flush
    """

    def __init__(
        self,
        seed: int = 42,
        respawn_policy: str = RESPAWN_POLICY,
        growth_mode: str = TREE_GROWTH_MODE,
        logger: Optional[SimLogger] = None,
        rain_enabled: bool = True,
    ) -> None:
        self.rng: Generator = np.random.default_rng(seed)
        self.ids = IdAllocator()
        self.rain_enabled = rain_enabled

        # World
        self.clock = WorldClock()
        self.island = IslandMap()
        self.resources = ResourceManager(self.ids, respawn_policy)
        self.trees = TreeManager(self.ids, growth_mode)
        self.planting = PlantingManager(self.ids)
        self.structures = StructureManager(self.ids)
        self.climate = Climate(self.rng)

        # Observability
        self.logger = logger if logger is not None else SimLogger()
        self.metrics = MetricsCollector()

        # Agents
        self.player = Player()
        self.storage = WorkbenchStorage()
        self.npcs = NPCController(self.ids, self.island, self.rng, self.logger)
        self.selected_npc_id: Optional[int] = None

        self.phase = GamePhase.MENU

    @property
    def is_active(self) -> bool:
        return self.phase is GamePhase.PLAYING

    @property
    def now_ms(self) -> float:
        return self.clock.elapsed_ms

    def _log(self, category: str, message: str, severity: str = "info", **data) -> None:
        self.logger.log(category, message, severity=severity, time_ms=self.clock.elapsed_ms, **data)

    # ------------------------------------------------------------------
    # Phase transitions
    # ------------------------------------------------------------------

    def start_game(self) -> bool:
        """Discard all state, regenerate the world and start playing."""
        self.ids.reset()
        self.clock.reset(START_TIME_OF_DAY)
        self.climate.reset(self.clock.elapsed_ms)
        if not self.rain_enabled:
            self.climate.suppress()
        generate_world(self.trees, self.resources, self.planting, self.structures, self.rng)
        self.npcs.clear()
        self.player = Player()
        self.storage = WorkbenchStorage()
        self.selected_npc_id = None
        self.metrics = MetricsCollector(self.metrics.interval_ms)
        self.logger.clear_recent()
        self.phase = GamePhase.PLAYING
        self._log(SimLogger.SYSTEM, "Welcome survivor. Find Apples and catch fish!")
        self.logger.flush_tick()
        return True

    def toggle_pause(self) -> bool:
        if self.phase is GamePhase.PLAYING:
            self.phase = GamePhase.PAUSED
            return True
        if self.phase is GamePhase.PAUSED:
            self.phase = GamePhase.PLAYING
            return True
        return False

    def resume(self) -> bool:
        if self.phase is not GamePhase.PAUSED:
            return False
        self.phase = GamePhase.PLAYING
        return True

    def quit_to_menu(self) -> bool:
        """Back to the menu. Entities are kept until the next start_game."""
        if self.phase is GamePhase.MENU:
            return False
        self.phase = GamePhase.MENU
        self.selected_npc_id = None
        return True

    def open_workbench(self) -> bool:
        if self.phase is not GamePhase.PLAYING:
            return False
        self.player.stop()
        self.phase = GamePhase.WORKBENCH
        return True

    def close_workbench(self) -> bool:
        if self.phase is not GamePhase.WORKBENCH:
            return False
        self.phase = GamePhase.PLAYING
        return True

    def close_npc_menu(self) -> bool:
        if self.phase is not GamePhase.NPC_MENU:
            return False
        self.phase = GamePhase.PLAYING
        self.selected_npc_id = None
        return True

    # ------------------------------------------------------------------
    # Player intents
    # ------------------------------------------------------------------

    def move_to(self, destination: Vec2) -> bool:
        if self.phase is not GamePhase.PLAYING:
            return False
        if not self.island.in_bounds(destination):
            return False
        self.player.set_target(destination)
        return True

    def collect(self, resource_id: str) -> bool:
        """Pick up a resource within reach of the player."""
        if self.phase is not GamePhase.PLAYING:
            return False
        resource = self.resources.get(resource_id)
        if resource is None or resource.eaten:
            return False
        if not self.resources.in_reach(resource, self.player.position):
            return False
        if self.player.inventory.is_full:
            self._log(SimLogger.PLAYER, "Backpack is full!", "warning")
            return False
        item = self.resources.collect(resource_id)
        self.player.inventory.add(item)
        return True

    def shake_tree(self, position: Vec2) -> bool:
        """Shake the tree standing at position, if the player is close enough."""
        if self.phase is not GamePhase.PLAYING:
            return False
        tree = self.trees.find_at(position)
        if tree is None:
            return False
        if distance(tree.position, self.player.position) > TREE_SHAKE_DISTANCE:
            return False

        drop = self.trees.shake(tree, self.clock.elapsed_ms, self.rng)
        if drop is None:
            self._log(SimLogger.WORLD, "Nothing fell.")
            return True
        item, drop_position = drop
        self.resources.spawn(item, drop_position, self.clock.elapsed_ms, tag="drop")
        if item is ItemType.WOOD:
            self._log(SimLogger.WORLD, "A log fell from the tree.")
        else:
            self._log(SimLogger.WORLD, "An apple fell from the tree.")
        return True

    def eat(self, slot_index: int) -> bool:
        """Use the item in an inventory slot."""
        if self.phase is not GamePhase.PLAYING:
            return False
        now = self.clock.elapsed_ms
        item = self.player.inventory.get(slot_index)
        was_sick = self.player.sick
        fires_before = len(self.structures.campfires)

        done = consume_item(
            self.player,
            slot_index,
            now,
            self.rng,
            can_cook(self.structures.campfires, self.player.position, now),
            self.planting,
            self.structures,
            self.resources,
            self.logger,
        )
        if not done:
            return False

        if item is not None and is_food(item):
            self.metrics.record_eat()
        if len(self.structures.campfires) > fires_before:
            self.metrics.record_campfire()
        if self.player.sick and not was_sick:
            self.metrics.record_sickness()
        return True

    # ------------------------------------------------------------------
    # Workbench intents
    # ------------------------------------------------------------------

    def craft(self, output: ItemType) -> bool:
        if self.phase is not GamePhase.WORKBENCH:
            return False
        recipe = execute_craft(output, self.player.inventory)
        if recipe is None:
            return False
        self.metrics.record_craft()
        self._log(SimLogger.CRAFT, recipe.message, "success")
        return True

    def deposit(self, slot_index: int) -> bool:
        if self.phase is not GamePhase.WORKBENCH:
            return False
        if self.player.inventory.get(slot_index) is not None and self.storage.is_full:
            self._log(SimLogger.PLAYER, "Storage is full!", "warning")
            return False
        return deposit(self.player.inventory, self.storage, slot_index)

    def withdraw(self, slot_index: int) -> bool:
        if self.phase is not GamePhase.WORKBENCH:
            return False
        if self.storage.get(slot_index) is not None and self.player.inventory.is_full:
            self._log(SimLogger.PLAYER, "Backpack is full!", "warning")
            return False
        return withdraw(self.player.inventory, self.storage, slot_index)

    # ------------------------------------------------------------------
    # NPC intents
    # ------------------------------------------------------------------

    def _selected_npc(self):
        if self.selected_npc_id is None:
            return None
        return self.npcs.get(self.selected_npc_id)

    def interact_npc(self, npc_id: int) -> bool:
        """Wake an unconscious NPC, or open the command menu for an awake one."""
        if self.phase is not GamePhase.PLAYING:
            return False
        npc = self.npcs.get(npc_id)
        if npc is None:
            return False
        if npc.state is NPCState.UNCONSCIOUS:
            return self.npcs.wake(npc, self.clock.elapsed_ms)
        self.player.stop()
        self.selected_npc_id = npc_id
        self.phase = GamePhase.NPC_MENU
        return True

    def command_npc(self, task: Optional[NPCTask]) -> bool:
        if self.phase is not GamePhase.NPC_MENU:
            return False
        npc = self._selected_npc()
        if npc is None:
            return False
        return self.npcs.assign(npc, task, self.clock.elapsed_ms)

    def collect_from_npc(self) -> bool:
        if self.phase is not GamePhase.NPC_MENU:
            return False
        npc = self._selected_npc()
        if npc is None:
            return False
        return self.npcs.collect_from(npc, self.player.inventory, self.clock.elapsed_ms) > 0

    def feed_npc(self) -> bool:
        if self.phase is not GamePhase.NPC_MENU:
            return False
        npc = self._selected_npc()
        if npc is None:
            return False
        return self.npcs.feed(npc, self.player.inventory, self.clock.elapsed_ms) is not None

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------

    def capture_inputs(self, was_moving: Optional[bool] = None) -> TickInputs:
        """Freeze the cross-subsystem state the rest of the tick reads."""
        now = self.clock.elapsed_ms
        position = self.player.position
        campfires = self.structures.campfires
        sheltered = near_workbench(position) or any(
            distance(t.position, position) < SHELTER_DISTANCE for t in self.trees.trees
        )
        return TickInputs(
            now_ms=now,
            player_position=position,
            is_moving=self.player.is_moving if was_moving is None else was_moving,
            is_swimming=self.island.is_swimming(position),
            sheltered=sheltered,
            near_fire=warms(campfires, position, now),
            can_cook=can_cook(campfires, position, now),
            visible_resources=tuple(ResourceView.of(r) for r in self.resources.visible()),
        )

    def tick(self, delta_ms: float) -> Optional[TickInputs]:
        """Advance every subsystem by one clamped delta. No-op outside PLAYING."""
        if not self.is_active:
            return None
        delta_ms = clamp_delta_ms(delta_ms)

        # 1. Clock and player movement
        self.clock.advance(delta_ms)
        now = self.clock.elapsed_ms
        was_moving = self.player.is_moving
        self.player.step(delta_ms)

        # 2. Inputs for the rest of the tick
        inputs = self.capture_inputs(was_moving)

        # 3. Structures
        self.structures.prune_expired(now)

        # 4. Trees
        for item, drop_position in self.trees.update(delta_ms, now, self.rng):
            self.resources.spawn(item, drop_position, now, tag="drop")

        # 5. Planted seeds
        sprouts = self.planting.update(now, self.rng)
        for position, scale in sprouts:
            self.trees.plant(position, scale, now, self.rng)
        if sprouts:
            self._log(SimLogger.WORLD, f"{len(sprouts)} saplings grew into trees.", "success")

        # 6. NPCs
        report = self.npcs.update(
            delta_ms, now, inputs.player_position, list(inputs.visible_resources), self.resources,
        )
        for _ in report.spawned:
            self.metrics.record_npc_spawn()
        for _ in report.died:
            self.metrics.record_npc_death()
        if self.selected_npc_id in report.removed:
            self.selected_npc_id = None

        # 7. Weather and vitals
        message = TickMessage()
        was_raining = self.climate.is_raining
        weather_message = self.climate.advance(delta_ms, now)
        if weather_message:
            message.set(weather_message, category=SimLogger.WEATHER)
        if self.climate.is_raining and not was_raining:
            self.metrics.record_rain()

        exposure = Exposure(
            is_swimming=inputs.is_swimming,
            is_moving=inputs.is_moving,
            sheltered=inputs.sheltered,
            near_fire=inputs.near_fire,
            is_raining=self.climate.is_raining,
            rain_intensity=self.climate.intensity,
        )
        was_sick = self.player.sick
        game_over = update_vitals(self.player, exposure, delta_ms, self.rng, message)
        if message:
            self._log(message.category, message.text, message.severity)
        if self.player.sick and not was_sick:
            self.metrics.record_sickness()
        if game_over:
            self.phase = GamePhase.GAMEOVER
            self.player.stop()
            self._log(SimLogger.SYSTEM, "You collapsed from exhaustion.", "danger", score=self.player.score)

        # 8. Metrics and log
        self.metrics.maybe_sample(self)
        self.logger.flush_tick()
        return inputs

    def run(
        self,
        duration_ms: float,
        autopilot: Optional["Autopilot"] = None,  # noqa: F821
        interval_ms: int = TICK_INTERVAL_MS,
    ) -> TickDriver:
        """
        Headless session: drive the tick and sweep timers for duration_ms of
        wall time, letting the autopilot act before every tick. Stops early
        on game over. Starts a game first if none is running.
        """
        if self.phase is GamePhase.MENU:
            self.start_game()
        driver = TickDriver(self, interval_ms=interval_ms)
        while driver.wall_ms < duration_ms and self.is_active:
            if autopilot is not None:
                autopilot.act(self)
            driver.run_for(min(interval_ms, duration_ms - driver.wall_ms))
        return driver

    def sweep_resources(self) -> Optional[Resource]:
        """Despawn and respawn pass, driven by its own timer."""
        if not self.is_active:
            return None
        return self.resources.sweep(self.clock.elapsed_ms, self.rng)

    # ------------------------------------------------------------------
    # Snapshot
    # ------------------------------------------------------------------

    def snapshot(self) -> WorldSnapshot:
        """Frozen copy of everything the rendering layer may show."""
        now = self.clock.elapsed_ms
        p = self.player
        player_view = PlayerView(
            position=p.position,
            vertical_offset=self.island.vertical_offset(p.position),
            target=p.target,
            is_moving=p.is_moving,
            is_swimming=self.island.is_swimming(p.position),
            energy=p.energy,
            wetness=p.wetness,
            sick=p.sick,
            sickness_remaining=p.sickness_remaining,
            holding_torch=p.holding_torch,
            torch_remaining=p.torch_remaining,
            last_food_type=p.last_food_type,
            consecutive_food_count=p.consecutive_food_count,
            score=p.score,
        )
        return WorldSnapshot(
            phase=self.phase.value,
            elapsed_ms=now,
            time_of_day=self.clock.time_of_day,
            day=self.clock.day,
            is_night=self.clock.is_night(),
            is_raining=self.climate.is_raining,
            rain_intensity=self.climate.intensity,
            heavy_rain=self.climate.is_heavy,
            player=player_view,
            inventory=p.inventory.as_tuple(),
            storage=self.storage.as_tuple(),
            resources=tuple(ResourceView.of(r) for r in self.resources.resources),
            trees=tuple(TreeView.of(t) for t in self.trees.trees),
            planted_seeds=tuple(
                SeedView(s.seed_id, s.position, s.planted_at, s.growth_duration)
                for s in self.planting.seeds
            ),
            campfires=tuple(
                CampfireView(
                    campfire_id=c.campfire_id,
                    position=c.position,
                    expires_at=c.expires_at,
                    remaining_ms=c.remaining_ms(now),
                    is_large=c.is_large,
                    light_radius=c.light_radius,
                    warmth_radius=c.warmth_radius,
                )
                for c in self.structures.campfires
            ),
            npcs=tuple(NPCView.of(n) for n in self.npcs.npcs),
            selected_npc_id=self.selected_npc_id,
            log=tuple(LogView(e.entry_id, e.message, e.severity) for e in self.logger.recent),
        )

    def describe_inventory(self) -> str:
        """One-line inventory listing for headless output."""
        items = self.player.inventory.items()
        if not items:
            return "empty"
        return ", ".join(display_name(i) for i in items)
