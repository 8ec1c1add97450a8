"""Cell — a single tile in the world grid.

Each cell holds immutable terrain properties (altitude, temperature) and
the faction state that the transition rules replace every tick.  Cells
are frozen: a tick produces new ``Cell`` objects rather than mutating
the previous snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Status(Enum):
    """Which faction (if any) holds a cell."""

    EMPTY = 0
    ZOMBIE = 1
    HUMAN = 2


class TopologyError(ValueError):
    """Raised when a coordinate delta is not a Moore-neighbour offset."""


# Compass offsets indexed by direction code, clockwise from North.
# ``y`` grows southward, so North is (0, -1).
DIRECTION_DELTAS: tuple[tuple[int, int], ...] = (
    (0, -1),
    (1, -1),
    (1, 0),
    (1, 1),
    (0, 1),
    (-1, 1),
    (-1, 0),
    (-1, -1),
)

STAY = 8

_DELTA_TO_DIRECTION: dict[tuple[int, int], int] = {
    delta: code for code, delta in enumerate(DIRECTION_DELTAS)
}
_DELTA_TO_DIRECTION[(0, 0)] = STAY


def delta_to_direction(dx: int, dy: int) -> int:
    """Return the direction code for the offset ``(dx, dy)``.

    Args:
        dx: Column offset.
        dy: Row offset.

    Raises:
        TopologyError: If the offset is not adjacent (or zero).
    """
    try:
        return _DELTA_TO_DIRECTION[(dx, dy)]
    except KeyError:
        msg = f"({dx}, {dy}) is not a Moore-neighbour offset"
        raise TopologyError(msg) from None


def direction_to_delta(direction: int) -> tuple[int, int]:
    """Return the ``(dx, dy)`` offset for a direction code (8 -> (0, 0))."""
    if direction == STAY:
        return (0, 0)
    if not 0 <= direction < len(DIRECTION_DELTAS):
        msg = f"direction {direction} outside 0..8"
        raise TopologyError(msg)
    return DIRECTION_DELTAS[direction]


@dataclass(frozen=True)
class Cell:
    """A single tile in the world grid.

    Attributes:
        x: Column position.
        y: Row position.
        altitude: Terrain height (fixed at initialisation).
        temperature: Terrain temperature (fixed at initialisation).
        status: Faction holding the cell.
        population: Head count of the holding faction (0 when empty).
        direction: Movement intent for the next tick (0-7, or 8 to stay).
        smell_human: Diffused human scent.
        smell_zombie: Diffused zombie scent.
    """

    x: int
    y: int
    altitude: int = 0
    temperature: int = 0
    status: Status = Status.EMPTY
    population: int = 0
    direction: int = STAY
    smell_human: int = 0
    smell_zombie: int = 0

    @property
    def position(self) -> tuple[int, int]:
        return (self.x, self.y)

    @property
    def is_empty(self) -> bool:
        return self.status is Status.EMPTY

    @property
    def is_human(self) -> bool:
        return self.status is Status.HUMAN

    @property
    def is_zombie(self) -> bool:
        return self.status is Status.ZOMBIE

    def direction_to(self, other: Cell) -> int:
        """Direction code pointing from this cell toward ``other``."""
        return delta_to_direction(other.x - self.x, other.y - self.y)

    def targets(self, other: Cell) -> bool:
        """Return True if this cell's movement intent points at ``other``."""
        return self.direction == self.direction_to(other)
