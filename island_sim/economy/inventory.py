"""Item definitions and fixed-capacity slot inventories."""

from __future__ import annotations

from enum import Enum
from typing import Iterator, Optional

from island_sim.core.config import (
    APPLE_HEAL_AMOUNT,
    APPLE_JUICE_HEAL_AMOUNT,
    APPLE_JUICE_SCORE,
    APPLE_SCORE,
    BIG_FISH_HEAL_AMOUNT,
    BIG_FISH_SCORE,
    FISH_COOKED_HEAL_AMOUNT,
    FISH_COOKED_SCORE,
    FISH_HEAL_AMOUNT,
    FISH_SCORE,
    INVENTORY_SIZE,
    WORKBENCH_STORAGE_SIZE,
)


class ItemType(Enum):
    APPLE = "APPLE"
    FISH = "FISH"
    WOOD = "WOOD"
    TORCH = "TORCH"
    SEED = "SEED"
    APPLE_JUICE = "APPLE_JUICE"
    BIG_FISH = "BIG_FISH"
    WOOD_STAND = "WOOD_STAND"


# =============================================================================
# Item catalog: food values and tags
# =============================================================================

ITEM_CATALOG: dict[ItemType, dict] = {
    ItemType.APPLE: {"heal": APPLE_HEAL_AMOUNT, "score": APPLE_SCORE, "simple_food": True},
    ItemType.FISH: {
        "heal": FISH_HEAL_AMOUNT,
        "score": FISH_SCORE,
        "cooked_heal": FISH_COOKED_HEAL_AMOUNT,
        "cooked_score": FISH_COOKED_SCORE,
        "simple_food": True,
    },
    ItemType.APPLE_JUICE: {"heal": APPLE_JUICE_HEAL_AMOUNT, "score": APPLE_JUICE_SCORE},
    ItemType.BIG_FISH: {"heal": BIG_FISH_HEAL_AMOUNT, "score": BIG_FISH_SCORE},
    ItemType.WOOD: {},
    ItemType.TORCH: {},
    ItemType.SEED: {},
    ItemType.WOOD_STAND: {},
}


def food_items() -> list[ItemType]:
    """Return all item types that restore energy when eaten."""
    return [k for k, v in ITEM_CATALOG.items() if "heal" in v]


def is_food(item: ItemType) -> bool:
    return "heal" in ITEM_CATALOG.get(item, {})


def heal_value(item: ItemType, cooked: bool = False) -> float:
    entry = ITEM_CATALOG.get(item, {})
    if cooked and "cooked_heal" in entry:
        return entry["cooked_heal"]
    return entry.get("heal", 0.0)


def score_value(item: ItemType, cooked: bool = False) -> int:
    entry = ITEM_CATALOG.get(item, {})
    if cooked and "cooked_score" in entry:
        return entry["cooked_score"]
    return entry.get("score", 0)


def display_name(item: ItemType) -> str:
    return item.value.replace("_", " ").lower()


class SlotInventory:
    """Fixed-length array of nullable item slots.

    Every mutator declines silently (returns False/None) when its slot or
    capacity precondition is not met, leaving the slots untouched.
    """

    def __init__(self, size: int = INVENTORY_SIZE) -> None:
        self.size = size
        self.slots: list[Optional[ItemType]] = [None] * size

    def __iter__(self) -> Iterator[Optional[ItemType]]:
        return iter(self.slots)

    def __len__(self) -> int:
        return self.size

    def get(self, index: int) -> Optional[ItemType]:
        if not 0 <= index < self.size:
            return None
        return self.slots[index]

    def first_empty(self) -> Optional[int]:
        for i, item in enumerate(self.slots):
            if item is None:
                return i
        return None

    def empty_count(self) -> int:
        return sum(1 for item in self.slots if item is None)

    def occupied_count(self) -> int:
        return self.size - self.empty_count()

    @property
    def is_full(self) -> bool:
        return self.first_empty() is None

    def count(self, item_type: ItemType) -> int:
        return sum(1 for item in self.slots if item == item_type)

    def indices_of(self, item_type: ItemType) -> list[int]:
        return [i for i, item in enumerate(self.slots) if item == item_type]

    def add(self, item_type: ItemType) -> Optional[int]:
        """Place an item in the first empty slot. Returns the slot or None if full."""
        idx = self.first_empty()
        if idx is None:
            return None
        self.slots[idx] = item_type
        return idx

    def remove_at(self, index: int) -> Optional[ItemType]:
        item = self.get(index)
        if item is None:
            return None
        self.slots[index] = None
        return item

    def replace_at(self, index: int, item_type: ItemType) -> bool:
        """Swap the item in an occupied slot for another type in place."""
        if self.get(index) is None:
            return False
        self.slots[index] = item_type
        return True

    def remove_count(self, item_type: ItemType, quantity: int) -> bool:
        """Remove exactly quantity items of a type, lowest slots first, or nothing."""
        indices = self.indices_of(item_type)
        if len(indices) < quantity:
            return False
        for idx in indices[:quantity]:
            self.slots[idx] = None
        return True

    def first_of(self, candidates: list[ItemType]) -> Optional[int]:
        """Slot of the first item whose type is in candidates."""
        for i, item in enumerate(self.slots):
            if item is not None and item in candidates:
                return i
        return None

    def items(self) -> list[ItemType]:
        return [item for item in self.slots if item is not None]

    def as_tuple(self) -> tuple[Optional[ItemType], ...]:
        return tuple(self.slots)

    def clear(self) -> None:
        self.slots = [None] * self.size


class WorkbenchStorage(SlotInventory):
    """Storage container at the central workbench."""

    def __init__(self) -> None:
        super().__init__(size=WORKBENCH_STORAGE_SIZE)


def deposit(inventory: SlotInventory, storage: SlotInventory, slot_index: int) -> bool:
    """Move an item from an inventory slot into the first empty storage slot."""
    item = inventory.get(slot_index)
    target = storage.first_empty()
    if item is None or target is None:
        return False
    inventory.remove_at(slot_index)
    storage.slots[target] = item
    return True


def withdraw(inventory: SlotInventory, storage: SlotInventory, slot_index: int) -> bool:
    """Move an item from a storage slot into the first empty inventory slot."""
    return deposit(storage, inventory, slot_index)
