"""Diffusion logic for scent channels.

Each tick a cell's scent becomes the integer mean of its neighbours'
scent plus whatever its own population emits.  Separated from the
combat rules so the averaging kernel can be tested on its own.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from zombiegrid.scent.fields import ScentType, emission, read

if TYPE_CHECKING:
    from collections.abc import Sequence

    from zombiegrid.world.cell import Cell


def average_scent(neighbours: Sequence[Cell], kind: ScentType) -> int:
    """Floor of the mean ``kind`` scent over the actual neighbours.

    Boundary cells average over the neighbours they have (3 at a corner,
    5 on an edge); nothing is padded or wrapped.

    Args:
        neighbours: The cell's Moore neighbours.
        kind: Which scent to average.

    Raises:
        ValueError: If ``neighbours`` is empty.
    """
    if not neighbours:
        msg = "cannot average scent over zero neighbours"
        raise ValueError(msg)
    return sum(read(n, kind) for n in neighbours) // len(neighbours)


def diffuse(cell: Cell, neighbours: Sequence[Cell], kind: ScentType) -> int:
    """Next-tick value of one scent channel for ``cell``.

    Args:
        cell: The cell as it was at the start of the tick.
        neighbours: Its neighbours from the same snapshot.
        kind: Which scent.
    """
    return average_scent(neighbours, kind) + emission(cell, kind)
