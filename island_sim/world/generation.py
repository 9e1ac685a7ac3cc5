"""Initial world: trees and scattered resources for a fresh game."""

from __future__ import annotations

from numpy.random import Generator

from island_sim.core.config import INITIAL_TREE_COUNT


def generate_world(
    trees: "TreeManager",  # noqa: F821
    resources: "ResourceManager",  # noqa: F821
    planting: "PlantingManager",  # noqa: F821
    structures: "StructureManager",  # noqa: F821
    rng: Generator,
    now_ms: float = 0.0,
    tree_count: int = INITIAL_TREE_COUNT,
) -> None:
    """Discard every entity and place the starting trees, apples and fish."""
    trees.clear()
    resources.clear()
    planting.clear()
    structures.clear()

    trees.generate(rng, now_ms, tree_count)
    resources.generate_initial(rng, now_ms)
