"""Using an inventory item: torches, campfires, planting and eating."""

from __future__ import annotations

import math
from typing import Optional

from numpy.random import Generator

from island_sim.core.config import (
    MALNUTRITION_THRESHOLD,
    SEED_DROP_OFFSET,
    SICKNESS_CHANCE_MALNUTRITION,
    SICKNESS_CHANCE_RAW_FISH,
    TORCH_DURATION_MS,
    TORCHES_PER_CAMPFIRE,
)
from island_sim.economy.inventory import ItemType, display_name, heal_value, is_food, score_value

# Foods tracked for malnutrition
_SIMPLE_FOODS = {ItemType.APPLE, ItemType.FISH}


def seed_drop_position(position: tuple[float, float], rng: Generator) -> tuple[float, float]:
    angle = rng.uniform(0.0, 2.0 * math.pi)
    return (
        position[0] + math.cos(angle) * SEED_DROP_OFFSET,
        position[1] + math.sin(angle) * SEED_DROP_OFFSET,
    )


def consume_item(
    player: "Player",  # noqa: F821
    slot_index: int,
    now_ms: float,
    rng: Generator,
    can_cook: bool,
    planting: "PlantingManager",  # noqa: F821
    structures: "StructureManager",  # noqa: F821
    resources: "ResourceManager",  # noqa: F821
    logger: Optional["SimLogger"] = None,  # noqa: F821
) -> bool:
    """
    Apply the effect of the item in slot_index. Returns False for an empty
    or out-of-range slot, leaving everything untouched.

    can_cook tells whether an active campfire is within cooking range of
    the player; it only matters for fish.
    """
    inventory = player.inventory
    item = inventory.get(slot_index)
    if item is None:
        return False

    def note(message: str, severity: str = "info", category: str = "PLAYER") -> None:
        if logger is not None:
            logger.log(category, message, severity=severity, time_ms=now_ms)

    if item is ItemType.WOOD:
        inventory.replace_at(slot_index, ItemType.TORCH)
        note("Crafted a Torch from Wood.", category="CRAFT")
        return True

    if item is ItemType.SEED:
        inventory.remove_at(slot_index)
        planting.plant(player.position, now_ms, rng)
        note("Planted an apple seed.", category="WORLD")
        return True

    if item is ItemType.TORCH:
        if player.holding_torch and inventory.count(ItemType.TORCH) >= TORCHES_PER_CAMPFIRE:
            inventory.remove_count(ItemType.TORCH, TORCHES_PER_CAMPFIRE)
            structures.build_campfire(player.position, now_ms)
            note("Built a Campfire!", "success", "CRAFT")
            return True
        inventory.remove_at(slot_index)
        player.holding_torch = True
        player.torch_remaining = TORCH_DURATION_MS
        note("Lit a torch.")
        return True

    if item is ItemType.WOOD_STAND:
        inventory.remove_at(slot_index)
        structures.build_campfire(player.position, now_ms, is_large=True)
        note("Built a Large Campfire! Lasts all night.", "success", "CRAFT")
        return True

    if not is_food(item):
        return False

    cooked = item is ItemType.FISH and can_cook
    was_sick = player.sick
    heal = heal_value(item, cooked)

    inventory.remove_at(slot_index)
    player.heal(heal)
    player.score += score_value(item, cooked)
    if cooked:
        note(f"Ate delicious Grilled Fish! +{heal:g} Energy", "success")
    else:
        note(f"Ate {display_name(item)}. +{heal:g} Energy")

    if item is ItemType.APPLE:
        resources.spawn(ItemType.SEED, seed_drop_position(player.position, rng), now_ms, tag="seed")
        note("Dropped an Apple Seed.", category="WORLD")

    if item in _SIMPLE_FOODS:
        if player.last_food_type is item:
            # Cooked fish still counts toward the streak but never triggers it
            player.consecutive_food_count += 1
            if player.consecutive_food_count > MALNUTRITION_THRESHOLD and not cooked:
                note("Warning: Need balanced diet.", "warning")
                if rng.random() < SICKNESS_CHANCE_MALNUTRITION and not was_sick:
                    player.fall_sick()
                    note("Sick from malnutrition!", "danger")
        else:
            player.last_food_type = item
            player.consecutive_food_count = 1

    if item is ItemType.FISH and not cooked and not was_sick:
        if rng.random() < SICKNESS_CHANCE_RAW_FISH:
            player.fall_sick()
            note("Raw fish made you sick!", "danger")

    return True
