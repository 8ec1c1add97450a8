"""World grid — the cell store for the simulation.

The World owns cells arranged in a 2D grid and provides the Moore
neighbourhood queries used by the transition rules, random initial
placement of both factions, and read-only array views for rendering.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

if TYPE_CHECKING:
    from collections.abc import Iterator

    from numpy.random import Generator

from zombiegrid.world.cell import DIRECTION_DELTAS, Cell, Status

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Census:
    """Cell and head counts per faction at one moment.

    Attributes:
        empty_cells: Number of unoccupied cells.
        human_cells: Number of human-held cells.
        zombie_cells: Number of zombie-held cells.
        humans: Total human population.
        zombies: Total zombie population.
    """

    empty_cells: int
    human_cells: int
    zombie_cells: int
    humans: int
    zombies: int


@dataclass(frozen=True)
class GridSnapshot:
    """Read-only per-cell arrays for a host to render.

    All arrays have shape ``(height, width)`` and are not writeable.
    ``status`` holds ``Status.value`` codes.
    """

    status: NDArray[np.int8]
    population: NDArray[np.int64]
    smell_human: NDArray[np.int64]
    smell_zombie: NDArray[np.int64]


@dataclass
class World:
    """A 2D grid of cells.

    Attributes:
        width: Number of columns in the grid.
        height: Number of rows in the grid.
        cells: 2D list of Cell objects indexed as ``cells[y][x]``.
    """

    width: int
    height: int
    cells: list[list[Cell]] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Initialise the grid with empty cells.

        Raises:
            ValueError: If the grid has fewer than two cells, since a lone
                cell has no neighbours to average scent over.
        """
        if self.width < 1 or self.height < 1:
            msg = f"grid dimensions must be positive, got {self.width}x{self.height}"
            raise ValueError(msg)
        if self.width * self.height < 2:
            msg = "a single-cell grid is not supported"
            raise ValueError(msg)
        self.cells = [
            [Cell(x=x, y=y) for x in range(self.width)] for y in range(self.height)
        ]
        logger.debug(f"Created world grid {self.width}x{self.height}")

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def cell_at(self, x: int, y: int) -> Cell:
        """Return the cell at grid coordinates ``(x, y)``.

        Args:
            x: Column index.
            y: Row index.

        Raises:
            IndexError: If coordinates are out of bounds.
        """
        if not self.in_bounds(x, y):
            msg = f"({x}, {y}) out of bounds for {self.width}x{self.height}"
            raise IndexError(msg)
        return self.cells[y][x]

    get = cell_at

    def set_cell(self, cell: Cell) -> None:
        """Store ``cell`` in the slot given by its own coordinates.

        Raises:
            IndexError: If the cell's coordinates are out of bounds.
        """
        if not self.in_bounds(cell.x, cell.y):
            msg = f"({cell.x}, {cell.y}) out of bounds for {self.width}x{self.height}"
            raise IndexError(msg)
        self.cells[cell.y][cell.x] = cell

    def neighbours(self, x: int, y: int) -> list[Cell]:
        """Return the Moore neighbours of ``(x, y)``.

        Neighbours are listed clockwise from North; positions outside the
        grid are skipped (no wraparound), so corners yield 3 cells, edges
        5, and interior cells 8.

        Args:
            x: Column index.
            y: Row index.
        """
        result: list[Cell] = []
        for dx, dy in DIRECTION_DELTAS:
            nx, ny = x + dx, y + dy
            if 0 <= nx < self.width and 0 <= ny < self.height:
                result.append(self.cells[ny][nx])
        return result

    def iter_cells(self) -> Iterator[Cell]:
        """Yield every cell in row-major order."""
        for row in self.cells:
            yield from row

    def populate(
        self,
        rng: Generator,
        terrain: NDArray[np.int64],
        *,
        status_weights: dict[Status, float] | None = None,
        human_population: tuple[int, int] = (50, 150),
        zombie_population: tuple[int, int] = (1, 10),
    ) -> None:
        """Assign terrain and a random starting faction to every cell.

        Args:
            rng: Seeded random generator.
            terrain: Array of shape ``(height, width, 2)`` holding
                altitude and temperature.
            status_weights: Relative odds of each starting status.
                Defaults to Empty 2, Zombie 1, Human 1.
            human_population: Inclusive (min, max) for human cells.
            zombie_population: Inclusive (min, max) for zombie cells.

        Raises:
            ValueError: If the terrain shape does not match the grid.
        """
        if terrain.shape[:2] != (self.height, self.width):
            msg = (
                f"terrain shape {terrain.shape[:2]} does not match "
                f"grid {self.height}x{self.width}"
            )
            raise ValueError(msg)

        if status_weights is None:
            status_weights = {Status.EMPTY: 2, Status.ZOMBIE: 1, Status.HUMAN: 1}
        statuses = list(status_weights)
        weights = np.array([status_weights[s] for s in statuses], dtype=np.float64)
        probabilities = weights / weights.sum()

        ranges = {
            Status.HUMAN: human_population,
            Status.ZOMBIE: zombie_population,
        }

        for y in range(self.height):
            for x in range(self.width):
                status = statuses[int(rng.choice(len(statuses), p=probabilities))]
                population = 0
                if status is not Status.EMPTY:
                    lo, hi = ranges[status]
                    population = int(rng.integers(lo, hi, endpoint=True))
                self.cells[y][x] = Cell(
                    x=x,
                    y=y,
                    altitude=int(terrain[y, x, 0]),
                    temperature=int(terrain[y, x, 1]),
                    status=status,
                    population=population,
                )

    def census(self) -> Census:
        """Count cells and population per faction."""
        counts = {status: 0 for status in Status}
        heads = {status: 0 for status in Status}
        for cell in self.iter_cells():
            counts[cell.status] += 1
            heads[cell.status] += cell.population
        return Census(
            empty_cells=counts[Status.EMPTY],
            human_cells=counts[Status.HUMAN],
            zombie_cells=counts[Status.ZOMBIE],
            humans=heads[Status.HUMAN],
            zombies=heads[Status.ZOMBIE],
        )

    def snapshot(self) -> GridSnapshot:
        """Copy the renderable state into read-only NumPy arrays."""
        shape = (self.height, self.width)
        status = np.zeros(shape, dtype=np.int8)
        population = np.zeros(shape, dtype=np.int64)
        smell_human = np.zeros(shape, dtype=np.int64)
        smell_zombie = np.zeros(shape, dtype=np.int64)
        for y, row in enumerate(self.cells):
            for x, cell in enumerate(row):
                status[y, x] = cell.status.value
                population[y, x] = cell.population
                smell_human[y, x] = cell.smell_human
                smell_zombie[y, x] = cell.smell_zombie
        for arr in (status, population, smell_human, smell_zombie):
            arr.flags.writeable = False
        return GridSnapshot(
            status=status,
            population=population,
            smell_human=smell_human,
            smell_zombie=smell_zombie,
        )

    def copy(self) -> World:
        """Return a new World sharing this grid's (immutable) cells."""
        other = World(width=self.width, height=self.height)
        other.cells = [list(row) for row in self.cells]
        return other
