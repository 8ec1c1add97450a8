"""Terrain — deterministic altitude and temperature maps.

Builds fractal Perlin noise with NumPy and turns it into the two static
attributes every cell carries.  The output is a plain integer array so
the grid can be populated without knowing how the noise was made.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

logger = logging.getLogger(__name__)

# Temperature noise is drawn from an independent seed stream
_TEMPERATURE_SEED_OFFSET = 0x5EED


def _fade(t: NDArray[np.float64]) -> NDArray[np.float64]:
    return t * t * t * (t * (t * 6 - 15) + 10)


def perlin(
    xs: NDArray[np.float64],
    ys: NDArray[np.float64],
    seed: int,
) -> NDArray[np.float64]:
    """Sample single-octave 2D Perlin noise at the given coordinates.

    Gradients live on the integer lattice and are drawn from a seeded
    permutation table, so the result depends only on ``seed`` and the
    sample positions.

    Args:
        xs: Sample x positions (any shape).
        ys: Sample y positions (same shape as ``xs``).
        seed: Seed for the gradient table.

    Returns:
        Noise values in roughly ``[-1, 1]`` with the shape of ``xs``.
    """
    rng = np.random.default_rng(seed)
    perm = rng.permutation(256)
    perm = np.concatenate([perm, perm])
    angles = rng.uniform(0.0, 2.0 * np.pi, 256)
    gradients = np.stack([np.cos(angles), np.sin(angles)], axis=-1)

    x0 = np.floor(xs).astype(np.int64)
    y0 = np.floor(ys).astype(np.int64)
    fx = xs - x0
    fy = ys - y0
    xi = x0 & 255
    yi = y0 & 255

    def corner(ox: int, oy: int) -> NDArray[np.float64]:
        g = gradients[perm[perm[xi + ox] + ((yi + oy) & 255)] & 255]
        return g[..., 0] * (fx - ox) + g[..., 1] * (fy - oy)

    u = _fade(fx)
    v = _fade(fy)
    top = corner(0, 0) + u * (corner(1, 0) - corner(0, 0))
    bottom = corner(0, 1) + u * (corner(1, 1) - corner(0, 1))
    return top + v * (bottom - top)


def fractal_noise(
    width: int,
    height: int,
    seed: int,
    *,
    octaves: int,
    scale: float,
    persistence: float = 0.5,
    lacunarity: float = 2.0,
) -> NDArray[np.float64]:
    """Sum ``octaves`` layers of Perlin noise, normalised to ``[0, 1]``.

    Args:
        width: Number of columns.
        height: Number of rows.
        seed: Base seed; octave ``i`` uses ``seed + i``.
        octaves: Number of noise layers.
        scale: Feature size in cells for the first octave.
        persistence: Amplitude multiplier per octave.
        lacunarity: Frequency multiplier per octave.

    Returns:
        Array of shape ``(height, width)``.
    """
    ys, xs = np.mgrid[0:height, 0:width].astype(np.float64)
    total = np.zeros((height, width), dtype=np.float64)
    amplitude = 1.0
    frequency = 1.0 / scale
    max_amplitude = 0.0
    for i in range(octaves):
        total += perlin(xs * frequency, ys * frequency, seed + i) * amplitude
        max_amplitude += amplitude
        amplitude *= persistence
        frequency *= lacunarity
    return np.clip((total / max_amplitude + 1.0) / 2.0, 0.0, 1.0)


@dataclass
class TerrainGenerator:
    """Produces ``(altitude, temperature)`` pairs for every grid cell.

    Attributes:
        seed: Seed for all noise layers.
        max_altitude: Altitude assigned to the highest noise value.
        min_temperature: Temperature at the coldest sea-level noise value.
        max_temperature: Temperature at the warmest sea-level noise value.
        lapse_rate: Degrees lost per unit of altitude.
    """

    seed: int
    max_altitude: int = 100
    min_temperature: int = -10
    max_temperature: int = 40
    lapse_rate: float = 0.2

    def generate(
        self,
        width: int,
        height: int,
        octaves: int,
        scale: float,
    ) -> NDArray[np.int64]:
        """Build the terrain for a ``width`` x ``height`` grid.

        Args:
            width: Number of columns.
            height: Number of rows.
            octaves: Noise octaves (detail layers).
            scale: Base feature size in cells.

        Returns:
            Integer array of shape ``(height, width, 2)`` where
            ``[..., 0]`` is altitude and ``[..., 1]`` is temperature.

        Raises:
            ValueError: On non-positive dimensions, octaves, or scale.
        """
        if width < 1 or height < 1:
            msg = f"terrain dimensions must be positive, got {width}x{height}"
            raise ValueError(msg)
        if octaves < 1:
            msg = f"octaves must be >= 1, got {octaves}"
            raise ValueError(msg)
        if scale <= 0:
            msg = f"scale must be > 0, got {scale}"
            raise ValueError(msg)

        elevation = fractal_noise(
            width, height, self.seed, octaves=octaves, scale=scale
        )
        climate = fractal_noise(
            width,
            height,
            self.seed + _TEMPERATURE_SEED_OFFSET,
            octaves=octaves,
            scale=scale,
        )

        altitude = np.floor(elevation * self.max_altitude)
        span = self.max_temperature - self.min_temperature
        temperature = np.floor(
            self.min_temperature + climate * span - altitude * self.lapse_rate
        )

        terrain = np.stack([altitude, temperature], axis=-1).astype(np.int64)
        logger.debug(
            f"Generated {width}x{height} terrain (seed={self.seed}, "
            f"octaves={octaves}, scale={scale})"
        )
        return terrain
