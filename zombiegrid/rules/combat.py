"""Combat — reinforcement tally and battle resolution for one cell.

Every tick, populations that neighbours sent toward a cell meet whatever
stayed behind in it.  Holders get an advantage: humans defending a cell
need only a third of the attacking zombie count, and zombies that win
recruit a third of the humans they fought.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from zombiegrid.world.cell import STAY, Cell, Status

if TYPE_CHECKING:
    from collections.abc import Sequence

logger = logging.getLogger(__name__)

# Humans need only 1/3 of the zombie count to hold their cell; zombies
# convert 1/3 of the humans they beat.
DEFENDER_RATIO = 3
INFECTION_RATIO = 3


@dataclass(frozen=True)
class Forces:
    """Head counts that will fight over a cell this tick.

    Attributes:
        humans: Incoming humans plus any resident humans that stayed.
        zombies: Incoming zombies plus any resident zombies that stayed.
    """

    humans: int = 0
    zombies: int = 0


def gather_forces(cell: Cell, neighbours: Sequence[Cell]) -> Forces:
    """Tally everything that will be present in ``cell`` this tick.

    A neighbour contributes only if its direction points at ``cell``.
    The resident population counts only if it declared "stay" last tick,
    since a faction that moved out cannot also defend.

    Args:
        cell: The cell being resolved.
        neighbours: Its Moore neighbours from the same snapshot.

    Raises:
        TopologyError: If a neighbour is not adjacent to ``cell``.
    """
    humans = 0
    zombies = 0
    for neighbour in neighbours:
        if not neighbour.targets(cell):
            continue
        if neighbour.is_zombie:
            zombies += neighbour.population
        elif neighbour.is_human:
            humans += neighbour.population

    if cell.direction == STAY:
        if cell.is_human:
            humans += cell.population
        elif cell.is_zombie:
            zombies += cell.population
    return Forces(humans=humans, zombies=zombies)


def _resolve_open(forces: Forces) -> tuple[Status, int]:
    h, z = forces.humans, forces.zombies
    if h > z:
        return Status.HUMAN, h - z
    if h < z:
        return Status.ZOMBIE, z - h
    return Status.EMPTY, 0


def _resolve_zombie_held(forces: Forces) -> tuple[Status, int]:
    h, z = forces.humans, forces.zombies
    if h > z:
        return Status.HUMAN, h - z
    if h < z:
        return Status.ZOMBIE, z - h + h // INFECTION_RATIO
    return Status.EMPTY, 0


def _resolve_human_held(forces: Forces) -> tuple[Status, int]:
    h, z = forces.humans, forces.zombies
    threshold = z // DEFENDER_RATIO
    if h > threshold:
        return Status.HUMAN, h - threshold
    if h < threshold:
        return Status.ZOMBIE, z - h * DEFENDER_RATIO + h // INFECTION_RATIO
    return Status.EMPTY, 0


_RESOLVERS = {
    Status.EMPTY: _resolve_open,
    Status.ZOMBIE: _resolve_zombie_held,
    Status.HUMAN: _resolve_human_held,
}


def resolve(holder: Status, forces: Forces) -> tuple[Status, int]:
    """Decide who holds a cell after the fight and how many survive.

    Args:
        holder: Status of the cell before the fight.
        forces: Combatants present this tick.

    Returns:
        ``(status, population)`` after combat, normalised so that a
        population of zero (or, on an invariant breach, below zero)
        always means an empty cell.
    """
    status, population = _RESOLVERS[holder](forces)
    if population < 0:
        logger.warning(
            f"Negative population {population} after combat "
            f"(holder={holder.name}, humans={forces.humans}, "
            f"zombies={forces.zombies}); clearing cell"
        )
        return Status.EMPTY, 0
    if population == 0:
        return Status.EMPTY, 0
    return status, population
