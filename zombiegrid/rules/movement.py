"""Movement — pick each faction's target neighbour for the next tick.

Zombies chase the strongest human scent, preferring cold, low ground on
ties.  Humans look for the weakest zombie scent, preferring warm, high
ground on ties, and only go there if they can win or it is safer than
where they stand.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from zombiegrid.world.cell import STAY, Cell

if TYPE_CHECKING:
    from collections.abc import Sequence

# Humans attack when a third of their number outnumbers the defenders
ATTACK_RATIO = 3


def zombie_target(neighbours: Sequence[Cell]) -> Cell:
    """Neighbour with the most human scent, then coldest, then lowest.

    Remaining ties go to the first neighbour in scan order.
    """
    return max(
        neighbours,
        key=lambda n: (n.smell_human, -n.temperature, -n.altitude),
    )


def human_target(neighbours: Sequence[Cell]) -> Cell:
    """Neighbour with the least zombie scent, then warmest, then highest.

    Remaining ties go to the first neighbour in scan order.
    """
    return min(
        neighbours,
        key=lambda n: (n.smell_zombie, -n.temperature, -n.altitude),
    )


def choose_direction(
    origin: Cell,
    updated: Cell,
    neighbours: Sequence[Cell],
) -> int:
    """Movement intent for ``updated`` given the prior-tick neighbours.

    Args:
        origin: The cell as it was at the start of the tick (for position).
        updated: The cell after combat, growth and scent diffusion.
        neighbours: Moore neighbours from the start-of-tick snapshot.

    Returns:
        A direction code 0-7, or ``STAY``.
    """
    if not neighbours:
        return STAY

    if updated.is_zombie:
        return origin.direction_to(zombie_target(neighbours))

    if updated.is_human:
        target = human_target(neighbours)
        # Attacks only target zombie-held cells; any other cell must
        # smell of fewer zombies than this one.
        if target.is_zombie:
            should_move = updated.population // ATTACK_RATIO > target.population
        else:
            should_move = target.smell_zombie < updated.smell_zombie
        if should_move:
            return origin.direction_to(target)

    return STAY
