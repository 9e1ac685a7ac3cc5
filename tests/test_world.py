from __future__ import annotations

import math

import numpy as np
import pytest

from island_sim.core.config import (
    CAMPFIRE_DURATION_MS,
    ISLAND_RADIUS,
    LARGE_CAMPFIRE_DURATION_MS,
    MAX_TREE_SCALE,
    TOTAL_APPLES,
    TOTAL_FISH,
    TREE_CLEARING_RADIUS,
    TREE_GROWTH_STEP_INTERVAL_MS,
)
from island_sim.core.ids import IdAllocator
from island_sim.economy.inventory import ItemType
from island_sim.world.climate import Climate
from island_sim.world.generation import generate_world
from island_sim.world.infrastructure import StructureManager, can_cook, near_workbench, warms
from island_sim.world.map import IslandMap, compass_direction, distance
from island_sim.world.planting import PlantingManager
from island_sim.world.resources import ResourceManager
from island_sim.world.trees import TreeData, TreeManager


# ---------------------------------------------------------------------------
# Map
# ---------------------------------------------------------------------------

def test_island_zones():
    island = IslandMap()
    assert island.is_on_land((30.0, 0.0))
    assert not island.is_swimming((51.0, 0.0))
    assert island.is_swimming((53.0, 0.0))
    assert island.vertical_offset((60.0, 0.0)) < 0
    assert island.in_fishing_zone((0.0, 65.0))
    assert not island.in_bounds((90.0, 0.0))


def test_compass_direction():
    assert compass_direction((0.0, -20.0)) == "north"
    assert compass_direction((20.0, 0.0)) == "east"
    assert compass_direction((-20.0, 20.0)) == "south-west"


def test_id_allocator_is_per_instance():
    a, b = IdAllocator(), IdAllocator()
    assert a.next("tree") == 0
    assert a.next("tree") == 1
    assert b.next("tree") == 0
    assert a.next_tag("drop") == "drop-0"


# ---------------------------------------------------------------------------
# Trees
# ---------------------------------------------------------------------------

def _tree(scale: float = 1.0) -> TreeData:
    return TreeData(tree_id=0, position=(10.0, 0.0), scale=scale, next_drop_time=math.inf)


def test_shaking_has_diminishing_returns(rng):
    manager = TreeManager(IdAllocator())
    tree = _tree()
    probabilities = [tree.drop_probability()]
    for i in range(4):
        manager.shake(tree, now_ms=float(i), rng=rng)
        probabilities.append(tree.drop_probability())
    assert tree.shake_count == 4
    assert all(a > b for a, b in zip(probabilities, probabilities[1:]))


def test_tree_recovers_after_cooldown():
    tree = _tree()
    tree.shake_count = 3
    tree.last_shake_time = 0.0
    shaken = tree.drop_probability()

    assert not tree.recover(5_000.0)
    assert tree.recover(10_001.0)
    assert tree.shake_count == 2
    assert tree.drop_probability() > shaken
    # Next recovery needs half a window more
    assert not tree.recover(10_002.0)
    assert tree.recover(15_002.0)


def test_growth_is_capped():
    tree = _tree(scale=2.4)
    tree.grow(10.0)
    assert tree.scale == MAX_TREE_SCALE
    tree.grow(1.0)
    assert tree.scale == MAX_TREE_SCALE


def test_generate_keeps_workbench_clearing(rng):
    manager = TreeManager(IdAllocator())
    manager.generate(rng, 0.0, count=200)
    assert 0 < len(manager.trees) <= 200
    for tree in manager.trees:
        assert TREE_CLEARING_RADIUS < math.hypot(*tree.position) <= ISLAND_RADIUS


def test_auto_drop_and_reschedule(rng):
    manager = TreeManager(IdAllocator())
    tree = manager.plant((20.0, 0.0), 1.0, 0.0, rng)
    tree.next_drop_time = 50.0
    drops = manager.update(100.0, 100.0, rng)
    assert len(drops) == 1
    item, position = drops[0]
    assert item is ItemType.APPLE
    assert distance(position, tree.position) < 2.2
    assert tree.next_drop_time > 100.0


def test_stepped_growth_waits_for_interval(rng):
    manager = TreeManager(IdAllocator(), growth_mode="stepped")
    tree = manager.plant((20.0, 0.0), 1.0, 0.0, rng)
    tree.next_drop_time = math.inf
    manager.update(TREE_GROWTH_STEP_INTERVAL_MS - 1, 0.0, rng)
    assert tree.scale == 1.0
    manager.update(1.0, 0.0, rng)
    assert tree.scale > 1.0


def test_unknown_growth_mode():
    with pytest.raises(ValueError):
        TreeManager(IdAllocator(), growth_mode="sideways")


def test_find_at_requires_exact_position(rng):
    manager = TreeManager(IdAllocator())
    tree = manager.plant((12.5, -3.0), 1.0, 0.0, rng)
    assert manager.find_at((12.5, -3.0)) is tree
    assert manager.find_at((12.6, -3.0)) is None


# ---------------------------------------------------------------------------
# Planting
# ---------------------------------------------------------------------------

def test_seeds_are_removed_once_due(rng):
    planting = PlantingManager(IdAllocator())
    for _ in range(50):
        planting.plant((5.0, 5.0), 0.0, rng)
    assert planting.update(1_000.0, rng) == []
    sprouts = planting.update(60_001.0, rng)
    assert planting.seeds == []
    # Each seed sprouts with a 70% chance
    assert 20 < len(sprouts) < 50
    for position, scale in sprouts:
        assert position == (5.0, 5.0)
        assert 0.6 <= scale <= 1.0


# ---------------------------------------------------------------------------
# Resources
# ---------------------------------------------------------------------------

def test_initial_resources(rng):
    resources = ResourceManager(IdAllocator())
    resources.generate_initial(rng, 0.0)
    assert len(resources.visible(ItemType.APPLE)) == TOTAL_APPLES
    assert len(resources.visible(ItemType.FISH)) == TOTAL_FISH
    for fish in resources.visible(ItemType.FISH):
        assert math.hypot(*fish.position) >= ISLAND_RADIUS


def test_reach_depends_on_item_type():
    resources = ResourceManager(IdAllocator())
    apple = resources.spawn(ItemType.APPLE, (7.0, 0.0), 0.0)
    fish = resources.spawn(ItemType.FISH, (7.0, 0.0), 0.0)
    assert not resources.in_reach(apple, (0.0, 0.0))
    assert resources.in_reach(fish, (0.0, 0.0))


def test_collect_only_once():
    resources = ResourceManager(IdAllocator())
    apple = resources.spawn(ItemType.APPLE, (1.0, 0.0), 0.0)
    assert resources.collect(apple.resource_id) is ItemType.APPLE
    assert resources.collect(apple.resource_id) is None
    assert resources.collect("missing") is None


def test_sweep_despawns_stale_land_items(rng):
    resources = ResourceManager(IdAllocator())
    old_apple = resources.spawn(ItemType.APPLE, (10.0, 0.0), 0.0)
    fresh_wood = resources.spawn(ItemType.WOOD, (10.0, 0.0), 50_000.0)
    fish = resources.spawn(ItemType.FISH, (60.0, 0.0), 0.0)

    resources.sweep(61_000.0, rng)

    assert resources.get(old_apple.resource_id) is None
    assert resources.get(fresh_wood.resource_id) is not None
    assert resources.get(fish.resource_id) is not None


def test_fish_only_policy_respawns_fish(rng):
    resources = ResourceManager(IdAllocator(), respawn_policy="fish_only")
    apple = resources.spawn(ItemType.APPLE, (10.0, 0.0), 0.0)
    fish = resources.spawn(ItemType.FISH, (60.0, 0.0), 0.0)
    resources.collect(apple.resource_id)
    resources.collect(fish.resource_id)

    respawned = None
    for i in range(60):
        respawned = resources.sweep(1_000.0 * i, rng)
        if respawned is not None:
            break

    assert resources.get(apple.resource_id) is None
    assert respawned is fish
    assert not fish.eaten
    assert 50.0 <= math.hypot(*fish.position) <= 80.0


def test_all_policy_keeps_apple_placeholder(rng):
    resources = ResourceManager(IdAllocator(), respawn_policy="all")
    apple = resources.spawn(ItemType.APPLE, (10.0, 0.0), 0.0)
    wood = resources.spawn(ItemType.WOOD, (10.0, 0.0), 0.0)
    resources.collect(apple.resource_id)
    resources.collect(wood.resource_id)
    resources.sweep(100.0, np.random.default_rng(0))
    assert resources.get(apple.resource_id) is not None
    assert resources.get(wood.resource_id) is None


def test_unknown_respawn_policy():
    with pytest.raises(ValueError):
        ResourceManager(IdAllocator(), respawn_policy="everything")


# ---------------------------------------------------------------------------
# Structures
# ---------------------------------------------------------------------------

def test_campfire_lifetime_and_reach():
    structures = StructureManager(IdAllocator())
    small = structures.build_campfire((10.0, 0.0), 0.0)
    large = structures.build_campfire((-10.0, 0.0), 0.0, is_large=True)
    assert small.expires_at == CAMPFIRE_DURATION_MS
    assert large.expires_at == LARGE_CAMPFIRE_DURATION_MS
    assert large.light_radius > small.light_radius

    assert can_cook(structures.campfires, (12.0, 0.0), 1_000.0)
    assert not can_cook(structures.campfires, (15.0, 0.0), 1_000.0)
    assert warms(structures.campfires, (-20.0, 0.0), 1_000.0)

    expired = structures.prune_expired(LARGE_CAMPFIRE_DURATION_MS)
    assert expired == [large]
    assert structures.campfires == [small]
    assert small.remaining_ms(CAMPFIRE_DURATION_MS + 1) == 0.0
    assert not warms(structures.campfires, (10.0, 0.0), CAMPFIRE_DURATION_MS)


def test_workbench_shelter():
    assert near_workbench((2.0, 2.0))
    assert not near_workbench((10.0, 0.0))


# ---------------------------------------------------------------------------
# Climate
# ---------------------------------------------------------------------------

def test_first_rain_waits_two_minutes(rng):
    climate = Climate(rng)
    assert climate.advance(100.0, 60_000.0) is None
    assert not climate.is_raining

    message = climate.advance(100.0, 120_100.0)
    assert message in ("It started raining.", "A storm is brewing! Heavy rain!")
    assert climate.is_raining
    assert 0.2 <= climate.intensity <= 1.0
    assert 30_000.0 <= climate.duration_remaining <= 60_000.0
    assert climate.rain_count == 1


def test_rain_stops_and_reschedules(rng):
    climate = Climate(rng)
    climate.start(0.9, 1_000.0)
    assert climate.is_heavy
    assert climate.advance(500.0, 10_000.0) is None
    assert climate.advance(500.0, 10_500.0) == "The rain has stopped."
    assert not climate.is_raining
    assert climate.intensity == 0.0
    assert 130_500.0 <= climate.next_rain_time <= 250_500.0


def test_suppressed_climate_stays_dry(rng):
    climate = Climate(rng)
    climate.start(0.5, 10_000.0)
    climate.suppress()
    assert not climate.is_raining
    assert climate.advance(100.0, 1e12) is None


def test_generate_world_resets_everything(rng):
    ids = IdAllocator()
    trees = TreeManager(ids)
    resources = ResourceManager(ids)
    planting = PlantingManager(ids)
    structures = StructureManager(ids)
    planting.plant((1.0, 1.0), 0.0, rng)
    structures.build_campfire((0.0, 0.0), 0.0)

    generate_world(trees, resources, planting, structures, rng, tree_count=10)

    assert planting.seeds == []
    assert structures.campfires == []
    assert 0 < len(trees.trees) <= 10
    assert len(resources.visible()) == TOTAL_APPLES + TOTAL_FISH
