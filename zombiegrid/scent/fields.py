"""Scent fields — the two diffused faction-presence layers.

Scent values live on each ``Cell`` (so the transition rules stay purely
local).  This module names the two channels and extracts them as NumPy
arrays for overlays and analysis.
"""

from __future__ import annotations

from enum import Enum, auto
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from zombiegrid.world.cell import Cell, Status

if TYPE_CHECKING:
    from zombiegrid.world.world import World


class ScentType(Enum):
    """Distinct scent channels, one per faction."""

    HUMAN = auto()
    ZOMBIE = auto()

    @property
    def source(self) -> Status:
        """The faction that emits this scent."""
        return Status.HUMAN if self is ScentType.HUMAN else Status.ZOMBIE


def read(cell: Cell, kind: ScentType) -> int:
    """Read one scent channel from a cell.

    Args:
        cell: The cell to read.
        kind: Which scent.

    Returns:
        Current scent value.
    """
    return cell.smell_human if kind is ScentType.HUMAN else cell.smell_zombie


def emission(cell: Cell, kind: ScentType) -> int:
    """Scent a cell adds to itself: its population if it emits ``kind``."""
    return cell.population if cell.status is kind.source else 0


def scent_layer(world: World, kind: ScentType) -> NDArray[np.int64]:
    """Return one scent channel of the whole grid.

    Args:
        world: The grid to read.
        kind: Which scent.

    Returns:
        2D array of shape ``(height, width)``.
    """
    layer = np.zeros((world.height, world.width), dtype=np.int64)
    for cell in world.iter_cells():
        layer[cell.y, cell.x] = read(cell, kind)
    return layer
