from __future__ import annotations

import pytest

from island_sim.agents.player import Player
from island_sim.core.config import LARGE_CAMPFIRE_DURATION_MS, SEED_DROP_OFFSET, TORCH_DURATION_MS
from island_sim.core.ids import IdAllocator
from island_sim.economy.consumption import consume_item
from island_sim.economy.inventory import ItemType
from island_sim.viz.logger import SimLogger
from island_sim.world.map import distance
from island_sim.world.planting import PlantingManager
from island_sim.world.resources import ResourceManager
from island_sim.world.infrastructure import StructureManager

from conftest import messages


class World:
    def __init__(self) -> None:
        ids = IdAllocator()
        self.player = Player(position=(10.0, 0.0), energy=50.0)
        self.planting = PlantingManager(ids)
        self.structures = StructureManager(ids)
        self.resources = ResourceManager(ids)
        self.logger = SimLogger(verbosity=0)

    def use(self, slot: int, rng, can_cook: bool = False, now_ms: float = 1_000.0) -> bool:
        return consume_item(
            self.player, slot, now_ms, rng, can_cook,
            self.planting, self.structures, self.resources, self.logger,
        )


@pytest.fixture
def world():
    return World()


def test_empty_slot_is_rejected(world, rng):
    assert not world.use(0, rng)
    assert not world.use(42, rng)


def test_wood_becomes_torch_in_place(world, rng):
    world.player.inventory.add(ItemType.APPLE)
    world.player.inventory.add(ItemType.WOOD)
    assert world.use(1, rng)
    assert world.player.inventory.get(1) is ItemType.TORCH
    assert "Crafted a Torch from Wood." in messages(world.logger)


def test_lighting_a_torch(world, rng):
    world.player.inventory.add(ItemType.TORCH)
    assert world.use(0, rng)
    assert world.player.holding_torch
    assert world.player.torch_remaining == TORCH_DURATION_MS
    assert world.player.inventory.get(0) is None


def test_three_torches_build_campfire(world, rng):
    world.player.holding_torch = True
    for _ in range(3):
        world.player.inventory.add(ItemType.TORCH)
    assert world.use(2, rng)
    assert world.player.inventory.count(ItemType.TORCH) == 0
    assert len(world.structures.campfires) == 1
    assert world.structures.campfires[0].position == (10.0, 0.0)
    assert "Built a Campfire!" in messages(world.logger)


def test_wood_stand_builds_large_campfire(world, rng):
    world.player.inventory.add(ItemType.WOOD_STAND)
    assert world.use(0, rng, now_ms=5_000.0)
    fire = world.structures.campfires[0]
    assert fire.is_large
    assert fire.expires_at == 5_000.0 + LARGE_CAMPFIRE_DURATION_MS


def test_planting_a_seed(world, rng):
    world.player.inventory.add(ItemType.SEED)
    assert world.use(0, rng)
    assert len(world.planting.seeds) == 1
    assert world.planting.seeds[0].position == (10.0, 0.0)
    assert world.player.inventory.occupied_count() == 0


def test_eating_an_apple_drops_a_seed(world, rng):
    world.player.inventory.add(ItemType.APPLE)
    assert world.use(0, rng)
    assert world.player.energy == 65.0
    assert world.player.score == 10
    seeds = world.resources.visible(ItemType.SEED)
    assert len(seeds) == 1
    assert distance(seeds[0].position, world.player.position) == pytest.approx(SEED_DROP_OFFSET)
    assert seeds[0].resource_id.startswith("seed-")


def test_grilled_fish(world, rng):
    world.player.inventory.add(ItemType.FISH)
    assert world.use(0, rng, can_cook=True)
    assert world.player.energy == 100.0
    assert world.player.score == 100
    assert not world.player.sick
    assert "Ate delicious Grilled Fish! +60 Energy" in messages(world.logger)


def test_same_food_streak_warns(world, rng):
    for _ in range(5):
        world.player.inventory.add(ItemType.APPLE)
    for slot in range(4):
        world.use(slot, rng)
    assert "Warning: Need balanced diet." not in messages(world.logger)
    world.use(4, rng)
    assert world.player.consecutive_food_count == 5
    assert "Warning: Need balanced diet." in messages(world.logger)


def test_cooked_fish_counts_but_never_warns(world, rng):
    for _ in range(6):
        world.player.inventory.add(ItemType.FISH)
    for slot in range(6):
        world.use(slot, rng, can_cook=True)
    assert world.player.last_food_type is ItemType.FISH
    assert world.player.consecutive_food_count == 6
    assert "Warning: Need balanced diet." not in messages(world.logger)
    assert not world.player.sick


def test_switching_food_resets_streak(world, rng):
    world.player.inventory.add(ItemType.APPLE)
    world.player.inventory.add(ItemType.APPLE)
    world.player.inventory.add(ItemType.APPLE_JUICE)
    world.player.inventory.add(ItemType.FISH)
    for slot in range(4):
        world.use(slot, rng, can_cook=True)
    assert world.player.last_food_type is ItemType.FISH
    assert world.player.consecutive_food_count == 1
