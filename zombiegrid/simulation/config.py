"""Config — load simulation parameters from YAML files.

All tunable constants (grid size, terrain noise, starting population
ranges, worker pool size) live in YAML and are parsed into a typed
dataclass here.  The combat and movement rules themselves are fixed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from zombiegrid.world.cell import Status


def _default_status_weights() -> dict[str, float]:
    return {"empty": 2.0, "zombie": 1.0, "human": 1.0}


@dataclass
class SimulationConfig:
    """Top-level simulation configuration.

    Attributes:
        seed: RNG seed for terrain and initial placement.
        world_width: Number of grid columns.
        world_height: Number of grid rows.
        terrain_octaves: Noise octaves for the terrain generator.
        terrain_scale: Base terrain feature size in cells.
        max_altitude: Highest altitude the terrain can reach.
        min_temperature: Coldest sea-level temperature.
        max_temperature: Warmest sea-level temperature.
        lapse_rate: Temperature drop per unit altitude.
        status_weights: Relative odds of each starting status, keyed by
            lower-case status name.
        human_population: Inclusive (min, max) for starting human cells.
        zombie_population: Inclusive (min, max) for starting zombie cells.
        workers: Threads used per tick (1 evaluates cells inline).
        batch_rows: Grid rows handed to a worker at a time.
    """

    seed: int = 42
    world_width: int = 150
    world_height: int = 100

    # Terrain
    terrain_octaves: int = 5
    terrain_scale: float = 100.0
    max_altitude: int = 100
    min_temperature: int = -10
    max_temperature: int = 40
    lapse_rate: float = 0.2

    # Initial placement
    status_weights: dict[str, float] = field(default_factory=_default_status_weights)
    human_population: tuple[int, int] = (50, 150)
    zombie_population: tuple[int, int] = (1, 10)

    # Scheduling
    workers: int = 1
    batch_rows: int = 8

    def __post_init__(self) -> None:
        self.human_population = tuple(self.human_population)
        self.zombie_population = tuple(self.zombie_population)

    @property
    def weights_by_status(self) -> dict[Status, float]:
        """``status_weights`` keyed by ``Status`` in canonical order."""
        return {
            status: float(self.status_weights.get(status.name.lower(), 0.0))
            for status in Status
        }

    def validate(self) -> None:
        """Check that every value is usable.

        Raises:
            ValueError: Describing the first invalid setting found.
        """
        if self.world_width < 1 or self.world_height < 1:
            msg = (
                "world must be at least 1x1, "
                f"got {self.world_width}x{self.world_height}"
            )
            raise ValueError(msg)
        if self.world_width * self.world_height < 2:
            msg = "world must contain at least two cells"
            raise ValueError(msg)
        if self.terrain_octaves < 1:
            msg = f"terrain_octaves must be >= 1, got {self.terrain_octaves}"
            raise ValueError(msg)
        if self.terrain_scale <= 0:
            msg = f"terrain_scale must be > 0, got {self.terrain_scale}"
            raise ValueError(msg)
        if self.min_temperature > self.max_temperature:
            msg = "min_temperature must not exceed max_temperature"
            raise ValueError(msg)
        unknown = set(self.status_weights) - {s.name.lower() for s in Status}
        if unknown:
            msg = f"unknown status_weights keys: {sorted(unknown)}"
            raise ValueError(msg)
        weights = self.weights_by_status.values()
        if any(w < 0 for w in weights) or sum(weights) <= 0:
            msg = "status_weights must be non-negative with a positive total"
            raise ValueError(msg)
        for name, (lo, hi) in (
            ("human_population", self.human_population),
            ("zombie_population", self.zombie_population),
        ):
            if lo < 1 or hi < lo:
                msg = f"{name} must satisfy 1 <= min <= max, got ({lo}, {hi})"
                raise ValueError(msg)
        if self.workers < 1:
            msg = f"workers must be >= 1, got {self.workers}"
            raise ValueError(msg)
        if self.batch_rows < 1:
            msg = f"batch_rows must be >= 1, got {self.batch_rows}"
            raise ValueError(msg)

    @classmethod
    def from_yaml(cls, path: str | Path) -> SimulationConfig:
        """Load configuration from a YAML file.

        Args:
            path: Path to the YAML config file.

        Returns:
            A populated SimulationConfig instance.

        Raises:
            FileNotFoundError: If the config file does not exist.
        """
        path = Path(path)
        with path.open("r") as f:
            data = yaml.safe_load(f) or {}

        return cls(
            seed=data.get("seed", cls.seed),
            world_width=data.get("world_width", cls.world_width),
            world_height=data.get("world_height", cls.world_height),
            terrain_octaves=data.get("terrain_octaves", cls.terrain_octaves),
            terrain_scale=data.get("terrain_scale", cls.terrain_scale),
            max_altitude=data.get("max_altitude", cls.max_altitude),
            min_temperature=data.get("min_temperature", cls.min_temperature),
            max_temperature=data.get("max_temperature", cls.max_temperature),
            lapse_rate=data.get("lapse_rate", cls.lapse_rate),
            status_weights=data.get("status_weights", _default_status_weights()),
            human_population=data.get("human_population", cls.human_population),
            zombie_population=data.get(
                "zombie_population",
                cls.zombie_population,
            ),
            workers=data.get("workers", cls.workers),
            batch_rows=data.get("batch_rows", cls.batch_rows),
        )
