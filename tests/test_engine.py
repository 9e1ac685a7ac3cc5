"""Headless verification of the engine: phases, intents, snapshots."""

from __future__ import annotations

import dataclasses

import pytest

from island_sim.agents.npc import NPCState, NPCTask, spawn_npc
from island_sim.economy.inventory import ItemType
from island_sim.simulation.engine import GamePhase, SimulationEngine

from conftest import messages


# ---------------------------------------------------------------------------
# Phases
# ---------------------------------------------------------------------------

def test_new_engine_waits_in_menu():
    engine = SimulationEngine(seed=1)
    assert engine.phase is GamePhase.MENU
    assert engine.tick(100.0) is None
    assert engine.clock.elapsed_ms == 0.0


def test_start_game_greets_player(engine):
    assert engine.phase is GamePhase.PLAYING
    assert engine.trees.trees
    assert engine.snapshot().log[-1].message == "Welcome survivor. Find Apples and catch fish!"


def test_pause_freezes_time(engine):
    engine.tick(100.0)
    assert engine.toggle_pause()
    assert engine.phase is GamePhase.PAUSED
    assert engine.tick(100.0) is None
    assert engine.sweep_resources() is None
    assert engine.clock.elapsed_ms == 100.0
    assert engine.resume()
    assert not engine.resume()
    engine.tick(100.0)
    assert engine.clock.elapsed_ms == 200.0


def test_restart_regenerates_world(engine):
    engine.player.inventory.add(ItemType.WOOD)
    engine.tick(100.0)
    assert engine.quit_to_menu()
    assert not engine.quit_to_menu()
    assert engine.player.inventory.count(ItemType.WOOD) == 1

    engine.start_game()
    assert engine.clock.elapsed_ms == 0.0
    assert engine.player.inventory.occupied_count() == 0
    assert engine.trees.trees[0].tree_id == 0


def test_huge_delta_is_clamped(engine):
    engine.tick(1e9)
    assert engine.clock.elapsed_ms == 200.0
    assert 0.0 <= engine.player.energy <= 100.0


def test_exhaustion_is_game_over(engine):
    engine.player.energy = 0.01
    engine.tick(100.0)
    assert engine.phase is GamePhase.GAMEOVER
    assert "You collapsed from exhaustion." in messages(engine.logger)
    assert not engine.move_to((1.0, 1.0))
    assert engine.tick(100.0) is None


# ---------------------------------------------------------------------------
# Player intents
# ---------------------------------------------------------------------------

def test_move_to_respects_bounds(engine):
    assert not engine.move_to((100.0, 0.0))
    assert engine.move_to((3.0, 4.0))
    for _ in range(10):
        engine.tick(100.0)
    assert engine.player.position == (3.0, 4.0)
    assert not engine.player.is_moving


def test_collect_requires_reach(engine):
    far = engine.resources.spawn(ItemType.APPLE, (20.0, 0.0), engine.now_ms)
    near = engine.resources.spawn(ItemType.APPLE, (1.0, 0.0), engine.now_ms)
    assert not engine.collect(far.resource_id)
    assert not far.eaten
    assert engine.collect(near.resource_id)
    assert near.eaten
    assert engine.player.inventory.count(ItemType.APPLE) == 1
    assert not engine.collect(near.resource_id)


def test_collect_with_full_backpack_warns(engine):
    while not engine.player.inventory.is_full:
        engine.player.inventory.add(ItemType.WOOD)
    apple = engine.resources.spawn(ItemType.APPLE, (1.0, 0.0), engine.now_ms)
    assert not engine.collect(apple.resource_id)
    assert not apple.eaten
    last = engine.logger.recent[-1]
    assert last.message == "Backpack is full!"
    assert last.severity == "warning"


def test_shake_tree_needs_proximity(engine):
    tree = engine.trees.trees[0]
    assert not engine.shake_tree(tree.position)
    assert tree.shake_count == 0

    engine.player.position = (tree.position[0] + 1.0, tree.position[1])
    assert engine.shake_tree(tree.position)
    assert tree.shake_count == 1
    assert engine.logger.recent[-1].message in (
        "Nothing fell.", "A log fell from the tree.", "An apple fell from the tree.",
    )
    assert not engine.shake_tree((tree.position[0] + 0.5, tree.position[1]))


def test_eat_records_metrics(engine):
    engine.player.energy = 50.0
    engine.player.inventory.add(ItemType.APPLE_JUICE)
    assert engine.eat(0)
    assert engine.player.energy == 100.0
    assert engine.metrics.items_eaten == 1
    assert not engine.eat(0)


# ---------------------------------------------------------------------------
# Workbench
# ---------------------------------------------------------------------------

def test_workbench_intents_need_workbench_phase(engine):
    for _ in range(3):
        engine.player.inventory.add(ItemType.APPLE)
    assert not engine.craft(ItemType.APPLE_JUICE)
    assert not engine.deposit(0)

    assert engine.open_workbench()
    assert not engine.move_to((1.0, 0.0))
    assert engine.craft(ItemType.APPLE_JUICE)
    assert engine.player.inventory.count(ItemType.APPLE_JUICE) == 1
    assert engine.metrics.items_crafted == 1
    assert not engine.craft(ItemType.APPLE_JUICE)

    slot = engine.player.inventory.indices_of(ItemType.APPLE_JUICE)[0]
    assert engine.deposit(slot)
    assert engine.storage.get(0) is ItemType.APPLE_JUICE
    assert engine.withdraw(0)
    assert engine.player.inventory.count(ItemType.APPLE_JUICE) == 1
    assert engine.close_workbench()
    assert engine.phase is GamePhase.PLAYING


def test_time_stands_still_at_workbench(engine):
    engine.open_workbench()
    assert engine.tick(100.0) is None
    assert engine.clock.elapsed_ms == 0.0


def test_full_storage_warns(engine):
    engine.open_workbench()
    engine.storage.slots = [ItemType.WOOD] * engine.storage.size
    engine.player.inventory.add(ItemType.FISH)
    assert not engine.deposit(0)
    assert engine.player.inventory.get(0) is ItemType.FISH
    assert engine.logger.recent[-1].message == "Storage is full!"


def test_withdraw_into_full_backpack_warns(engine):
    engine.open_workbench()
    engine.storage.add(ItemType.FISH)
    while not engine.player.inventory.is_full:
        engine.player.inventory.add(ItemType.SEED)
    assert not engine.withdraw(0)
    assert engine.storage.get(0) is ItemType.FISH
    assert engine.logger.recent[-1].message == "Backpack is full!"


# ---------------------------------------------------------------------------
# NPCs
# ---------------------------------------------------------------------------

def test_npc_interaction_flow(engine):
    npc = engine.npcs.add(spawn_npc(99, engine.rng, engine.now_ms))

    assert engine.interact_npc(99)
    assert npc.state is NPCState.IDLE
    assert engine.phase is GamePhase.PLAYING

    assert engine.interact_npc(99)
    assert engine.phase is GamePhase.NPC_MENU
    assert engine.selected_npc_id == 99
    assert engine.snapshot().selected_npc_id == 99

    assert engine.command_npc(NPCTask.FISH)
    assert npc.task is NPCTask.FISH
    assert not engine.feed_npc()
    assert not engine.collect_from_npc()

    engine.player.inventory.add(ItemType.APPLE)
    assert engine.feed_npc()
    assert engine.player.inventory.occupied_count() == 0

    assert engine.close_npc_menu()
    assert engine.selected_npc_id is None
    assert not engine.command_npc(None)
    assert not engine.interact_npc(12345)


# ---------------------------------------------------------------------------
# Snapshot and tick inputs
# ---------------------------------------------------------------------------

def test_snapshot_is_a_frozen_copy(engine):
    snap = engine.snapshot()
    with pytest.raises(dataclasses.FrozenInstanceError):
        snap.phase = "MENU"
    with pytest.raises(dataclasses.FrozenInstanceError):
        snap.player.energy = 1.0

    engine.player.inventory.add(ItemType.WOOD)
    engine.tick(100.0)
    assert snap.inventory[0] is None
    assert snap.elapsed_ms == 0.0
    assert engine.snapshot().inventory[0] is ItemType.WOOD


def test_snapshot_log_keeps_last_five(engine):
    for i in range(8):
        engine.logger.log("SYSTEM", f"event {i}")
    log = engine.snapshot().log
    assert [e.message for e in log] == [f"event {i}" for i in range(3, 8)]


def test_tick_inputs_are_captured_before_updates(engine):
    apple = engine.resources.spawn(ItemType.APPLE, (1.0, 0.0), engine.now_ms)
    inputs = engine.tick(100.0)
    assert inputs.now_ms == 100.0
    assert inputs.sheltered
    assert not inputs.is_swimming
    assert apple.resource_id in {r.resource_id for r in inputs.visible_resources}


def test_sweep_removes_stale_drops(engine):
    drop = engine.resources.spawn(ItemType.WOOD, (10.0, 0.0), -60_000.0)
    engine.sweep_resources()
    assert engine.resources.get(drop.resource_id) is None


def test_describe_inventory(engine):
    assert engine.describe_inventory() == "empty"
    engine.player.inventory.add(ItemType.BIG_FISH)
    assert engine.describe_inventory() == "big fish"
