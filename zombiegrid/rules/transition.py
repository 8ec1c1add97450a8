"""Transition — the per-cell state update applied every tick.

``next_state`` is a pure function of a cell and its neighbours from the
previous snapshot.  It runs in a fixed order:

1. Gather incoming and resident forces
2. Resolve combat (defender advantages, infection)
3. Human birth rate
4. Scent diffusion
5. Movement intent for the next tick
"""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

from zombiegrid.rules.combat import gather_forces, resolve
from zombiegrid.rules.movement import choose_direction
from zombiegrid.scent.diffusion import diffuse
from zombiegrid.scent.fields import ScentType
from zombiegrid.world.cell import STAY, Cell, Status

if TYPE_CHECKING:
    from collections.abc import Sequence

# Humans grow by 1% per tick (floored)
BIRTH_RATE_PERCENT = 1


def grow(population: int) -> int:
    """Apply the human birth rate to ``population``."""
    return population * (100 + BIRTH_RATE_PERCENT) // 100


def next_state(cell: Cell, neighbours: Sequence[Cell]) -> Cell:
    """Compute the state ``cell`` will have next tick.

    Args:
        cell: The cell from the previous snapshot.
        neighbours: Its Moore neighbours from the same snapshot.

    Returns:
        A new Cell; ``cell`` itself is never modified.

    Raises:
        ValueError: If ``neighbours`` is empty.
        TopologyError: If a neighbour is not adjacent to ``cell``.
    """
    forces = gather_forces(cell, neighbours)
    status, population = resolve(cell.status, forces)

    if status is Status.HUMAN:
        population = grow(population)

    updated = replace(
        cell,
        status=status,
        population=population,
        direction=STAY,
        smell_human=diffuse(cell, neighbours, ScentType.HUMAN),
        smell_zombie=diffuse(cell, neighbours, ScentType.ZOMBIE),
    )
    direction = choose_direction(cell, updated, neighbours)
    if direction == STAY:
        return updated
    return replace(updated, direction=direction)
