from __future__ import annotations

from collections import Counter

from island_sim.economy.crafting import execute_craft, get_craftable_recipes
from island_sim.economy.inventory import (
    ItemType,
    SlotInventory,
    WorkbenchStorage,
    deposit,
    food_items,
    heal_value,
    withdraw,
)


def test_add_fills_first_empty_slot():
    inv = SlotInventory(3)
    assert inv.add(ItemType.APPLE) == 0
    inv.remove_at(0)
    assert inv.add(ItemType.FISH) == 0
    assert inv.add(ItemType.WOOD) == 1
    assert inv.add(ItemType.WOOD) == 2
    assert inv.is_full
    assert inv.add(ItemType.SEED) is None


def test_deposit_then_withdraw_conserves_items():
    inv = SlotInventory()
    storage = WorkbenchStorage()
    inv.add(ItemType.APPLE)
    inv.add(ItemType.FISH)
    before = Counter(inv.items())

    assert deposit(inv, storage, 1)
    assert storage.get(0) is ItemType.FISH
    assert inv.get(1) is None

    assert withdraw(inv, storage, 0)
    assert Counter(inv.items()) == before
    assert storage.occupied_count() == 0


def test_deposit_into_full_storage_is_noop():
    inv = SlotInventory()
    storage = WorkbenchStorage()
    storage.slots = [ItemType.WOOD] * storage.size
    inv.add(ItemType.APPLE)
    inv_before = inv.as_tuple()
    storage_before = storage.as_tuple()

    assert not deposit(inv, storage, 0)
    assert inv.as_tuple() == inv_before
    assert storage.as_tuple() == storage_before


def test_withdraw_empty_slot_is_noop():
    inv = SlotInventory()
    storage = WorkbenchStorage()
    assert not withdraw(inv, storage, 5)
    assert not withdraw(inv, storage, 99)
    assert inv.occupied_count() == 0


def test_remove_count_is_all_or_nothing():
    inv = SlotInventory()
    inv.add(ItemType.FISH)
    inv.add(ItemType.FISH)
    assert not inv.remove_count(ItemType.FISH, 3)
    assert inv.count(ItemType.FISH) == 2


def test_cooked_fish_heals_more():
    assert heal_value(ItemType.FISH, cooked=True) > heal_value(ItemType.FISH)
    assert heal_value(ItemType.APPLE, cooked=True) == heal_value(ItemType.APPLE)
    assert ItemType.WOOD not in food_items()


def test_craft_apple_juice():
    inv = SlotInventory()
    for _ in range(3):
        inv.add(ItemType.APPLE)
    inv.add(ItemType.WOOD)
    occupied = inv.occupied_count()

    recipe = execute_craft(ItemType.APPLE_JUICE, inv)

    assert recipe is not None
    assert inv.count(ItemType.APPLE) == 0
    assert inv.count(ItemType.APPLE_JUICE) == 1
    assert inv.occupied_count() == occupied - 2


def test_craft_with_missing_ingredients_is_noop():
    inv = SlotInventory()
    inv.add(ItemType.APPLE)
    inv.add(ItemType.APPLE)
    before = inv.as_tuple()
    assert execute_craft(ItemType.APPLE_JUICE, inv) is None
    assert inv.as_tuple() == before


def test_craft_in_full_backpack_uses_freed_slot():
    inv = SlotInventory()
    for _ in range(3):
        inv.add(ItemType.WOOD)
    while not inv.is_full:
        inv.add(ItemType.SEED)
    assert execute_craft(ItemType.WOOD_STAND, inv) is not None
    assert inv.count(ItemType.WOOD_STAND) == 1


def test_craftable_recipes():
    inv = SlotInventory()
    for _ in range(3):
        inv.add(ItemType.FISH)
    names = [r.name for r in get_craftable_recipes(inv)]
    assert names == ["big_fish"]
    assert execute_craft(ItemType.TORCH, inv) is None
