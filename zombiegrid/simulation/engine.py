"""SimulationEngine — the synchronous tick loop.

Owns two World buffers and advances them one tick at a time:

1. Freeze the front buffer (the last published tick)
2. Evaluate ``next_state`` for every cell against the front buffer,
   writing each result into its own slot of the back buffer
3. Wait for every cell to finish
4. Swap front and back in one step so readers only ever see whole ticks

Cells can be evaluated inline or in row batches on a thread pool; both
produce identical grids because no cell reads another's new value.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

import numpy as np
from numpy.random import Generator

from zombiegrid.rules.transition import next_state
from zombiegrid.simulation.config import SimulationConfig
from zombiegrid.world.terrain import TerrainGenerator
from zombiegrid.world.world import Census, GridSnapshot, World

logger = logging.getLogger(__name__)


@dataclass
class SimulationEngine:
    """Drives the simulation forward tick by tick.

    Attributes:
        config: Loaded simulation configuration.
        rng: Seeded random generator (used only at initialisation).
        tick: Number of completed ticks.
    """

    config: SimulationConfig
    rng: Generator = field(init=False)
    tick: int = 0
    _buffers: tuple[World, World] = field(init=False, repr=False)
    _front: int = field(init=False, default=0, repr=False)
    _swap_lock: threading.Lock = field(
        init=False, default_factory=threading.Lock, repr=False
    )
    _step_lock: threading.Lock = field(
        init=False, default_factory=threading.Lock, repr=False
    )
    _executor: ThreadPoolExecutor | None = field(init=False, default=None, repr=False)

    def __post_init__(self) -> None:
        """Build terrain, both buffers, and the worker pool from config."""
        self.config.validate()
        cfg = self.config
        self.rng = np.random.default_rng(cfg.seed)

        terrain = TerrainGenerator(
            seed=cfg.seed,
            max_altitude=cfg.max_altitude,
            min_temperature=cfg.min_temperature,
            max_temperature=cfg.max_temperature,
            lapse_rate=cfg.lapse_rate,
        ).generate(
            cfg.world_width,
            cfg.world_height,
            cfg.terrain_octaves,
            cfg.terrain_scale,
        )

        world = World(width=cfg.world_width, height=cfg.world_height)
        world.populate(
            self.rng,
            terrain,
            status_weights=cfg.weights_by_status,
            human_population=cfg.human_population,
            zombie_population=cfg.zombie_population,
        )
        self._buffers = (world, world.copy())

        if cfg.workers > 1:
            self._executor = ThreadPoolExecutor(
                max_workers=cfg.workers,
                thread_name_prefix="zombiegrid-tick",
            )

        census = world.census()
        logger.info(
            f"Simulation ready: {cfg.world_width}x{cfg.world_height} grid, "
            f"seed={cfg.seed}, workers={cfg.workers}, "
            f"humans={census.humans}, zombies={census.zombies}"
        )

    @property
    def current(self) -> World:
        """The most recently published tick.

        Treat as read-only.  The buffer is reused two ticks later, so
        hosts on another thread should call ``snapshot()`` instead.
        """
        with self._swap_lock:
            return self._buffers[self._front]

    def snapshot(self) -> GridSnapshot:
        """Read-only arrays of the published tick for rendering."""
        with self._step_lock:
            return self._buffers[self._front].snapshot()

    def census(self) -> Census:
        with self._step_lock:
            return self._buffers[self._front].census()

    def step(self) -> None:
        """Advance the simulation by one tick.

        If any cell fails, the partially written back buffer is discarded:
        the published grid and tick counter stay as they were and the
        exception propagates.
        """
        with self._step_lock:
            front = self._buffers[self._front]
            back = self._buffers[1 - self._front]

            try:
                if self._executor is None:
                    self._evaluate_rows(front, back, 0, front.height)
                else:
                    self._evaluate_parallel(front, back)
            except Exception:
                logger.exception(
                    f"Tick {self.tick + 1} aborted; keeping tick {self.tick}"
                )
                raise

            with self._swap_lock:
                self._front = 1 - self._front
                self.tick += 1

            if logger.isEnabledFor(logging.DEBUG):
                census = back.census()
                logger.debug(
                    f"Tick {self.tick}: humans={census.humans} "
                    f"({census.human_cells} cells), zombies={census.zombies} "
                    f"({census.zombie_cells} cells)"
                )

    def run(self, ticks: int) -> None:
        """Run the simulation for a fixed number of ticks.

        Args:
            ticks: Number of ticks to advance.
        """
        for _ in range(ticks):
            self.step()

    def close(self) -> None:
        """Shut down the worker pool, if any."""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def __enter__(self) -> SimulationEngine:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @staticmethod
    def _evaluate_rows(front: World, back: World, start: int, stop: int) -> None:
        """Compute rows ``[start, stop)`` of ``back`` from ``front``."""
        for y in range(start, stop):
            for x in range(front.width):
                cell = front.cells[y][x]
                back.set_cell(next_state(cell, front.neighbours(x, y)))

    def _evaluate_parallel(self, front: World, back: World) -> None:
        """Split the grid into row batches and wait for all of them."""
        assert self._executor is not None
        batch = self.config.batch_rows
        futures = [
            self._executor.submit(
                self._evaluate_rows,
                front,
                back,
                start,
                min(start + batch, front.height),
            )
            for start in range(0, front.height, batch)
        ]
        # Barrier: surface the first failure only after every batch settled
        errors = [f.exception() for f in futures]
        for error in errors:
            if error is not None:
                raise error
