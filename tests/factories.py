"""Cell builders shared by the rule and engine tests."""

from __future__ import annotations

from zombiegrid.world.cell import STAY, Cell, Status
from zombiegrid.world.world import World


def ring(x: int, y: int, width: int = 3, height: int = 3) -> list[Cell]:
    """Empty, scentless Moore neighbours of ``(x, y)`` on a small grid."""
    world = World(width=width, height=height)
    return world.neighbours(x, y)


def human(x: int, y: int, population: int, direction: int = STAY, **kw) -> Cell:
    return Cell(
        x=x, y=y, status=Status.HUMAN, population=population, direction=direction, **kw
    )


def zombie(x: int, y: int, population: int, direction: int = STAY, **kw) -> Cell:
    return Cell(
        x=x, y=y, status=Status.ZOMBIE, population=population, direction=direction, **kw
    )


def replace_at(cells: list[Cell], cell: Cell) -> list[Cell]:
    """Swap the neighbour at ``cell``'s position for ``cell``."""
    return [cell if c.position == cell.position else c for c in cells]
