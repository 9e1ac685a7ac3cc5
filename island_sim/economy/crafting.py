"""Workbench crafting recipes: fixed-count inputs into a single output."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from island_sim.core.config import RECIPE_INPUT_COUNT
from island_sim.economy.inventory import ItemType, SlotInventory


@dataclass(frozen=True)
class Recipe:
    """A crafting recipe consuming a fixed count of one input type."""

    name: str
    input_type: ItemType
    input_count: int
    output: ItemType
    message: str

    def can_craft(self, inventory: SlotInventory) -> bool:
        """All ingredients present. The freed slots always leave room for the output."""
        return inventory.count(self.input_type) >= self.input_count


# =============================================================================
# Recipe definitions
# =============================================================================

RECIPES: dict[ItemType, Recipe] = {
    ItemType.APPLE_JUICE: Recipe(
        name="apple_juice",
        input_type=ItemType.APPLE,
        input_count=RECIPE_INPUT_COUNT,
        output=ItemType.APPLE_JUICE,
        message="Crafted Apple Juice!",
    ),
    ItemType.BIG_FISH: Recipe(
        name="big_fish",
        input_type=ItemType.FISH,
        input_count=RECIPE_INPUT_COUNT,
        output=ItemType.BIG_FISH,
        message="Crafted Big Fish!",
    ),
    ItemType.WOOD_STAND: Recipe(
        name="wood_stand",
        input_type=ItemType.WOOD,
        input_count=RECIPE_INPUT_COUNT,
        output=ItemType.WOOD_STAND,
        message="Crafted Wooden Stand!",
    ),
}


def get_craftable_recipes(inventory: SlotInventory) -> list[Recipe]:
    """Return all recipes whose ingredients are currently in the inventory."""
    return [recipe for recipe in RECIPES.values() if recipe.can_craft(inventory)]


def execute_craft(output: ItemType, inventory: SlotInventory) -> Optional[Recipe]:
    """
    Consume the recipe inputs and place the output in the first empty slot.

    Returns the recipe on success. Unknown outputs and missing ingredients
    leave the inventory untouched and return None.
    """
    recipe = RECIPES.get(output)
    if recipe is None or not recipe.can_craft(inventory):
        return None

    inventory.remove_count(recipe.input_type, recipe.input_count)
    inventory.add(recipe.output)
    return recipe
