"""Shared fixtures for the Zombiegrid test suite."""

from __future__ import annotations

import numpy as np
import pytest
from numpy.random import Generator

from zombiegrid.simulation.config import SimulationConfig
from zombiegrid.world.world import World


@pytest.fixture
def rng() -> Generator:
    """A deterministic random generator for reproducible tests."""
    return np.random.default_rng(seed=12345)


@pytest.fixture
def small_world() -> World:
    """A small 8x8 world of empty cells for fast tests."""
    return World(width=8, height=8)


@pytest.fixture
def flat_terrain() -> np.ndarray:
    """8x8 terrain with altitude 10 and temperature 20 everywhere."""
    terrain = np.zeros((8, 8, 2), dtype=np.int64)
    terrain[..., 0] = 10
    terrain[..., 1] = 20
    return terrain


@pytest.fixture
def small_config() -> SimulationConfig:
    """A 12x10 config that runs quickly."""
    return SimulationConfig(
        seed=777,
        world_width=12,
        world_height=10,
        terrain_octaves=3,
        terrain_scale=8.0,
    )

