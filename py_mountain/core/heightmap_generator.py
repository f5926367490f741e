"""
Heightmap generation for the resort mountain.

A single radial massif centred on the grid is roughened with three layers
of gradient noise. Heights are normalised to [0, 1] and stored row-major
(``heights[y, x]``) in a NumPy array.
"""

from dataclasses import dataclass
from typing import Optional, Tuple, Union

import numpy as np
import structlog

from .noise import NoiseField

logger = structlog.get_logger()

NoiseLayer = Tuple[float, float]


def _lim(value: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
    """Limit values to the 0-1 range."""
    return np.clip(value, 0.0, 1.0)


class Heightmap:
    """
    Dense square grid of normalised elevations.

    Every write is clamped to [0, 1]. Once generation is over the map is
    frozen and the backing array becomes read-only, so later writes raise
    ``ValueError``.
    """

    def __init__(self, heights: np.ndarray):
        heights = np.asarray(heights, dtype=np.float64)
        if heights.ndim != 2 or heights.shape[0] != heights.shape[1]:
            raise ValueError(f"Heightmap must be square, got shape {heights.shape}")
        self.heights = _lim(heights).astype(np.float64, copy=True)

    @classmethod
    def flat(cls, size: int, level: float = 0.0) -> "Heightmap":
        """Create a constant heightmap."""
        return cls(np.full((size, size), level, dtype=np.float64))

    @property
    def size(self) -> int:
        return self.heights.shape[0]

    @property
    def frozen(self) -> bool:
        return not self.heights.flags.writeable

    def freeze(self) -> "Heightmap":
        """Make the heightmap read-only."""
        self.heights.flags.writeable = False
        return self

    def copy(self) -> "Heightmap":
        """Writable copy of this heightmap."""
        return Heightmap(self.heights.copy())

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.size and 0 <= y < self.size

    def min_height(self) -> float:
        return float(self.heights.min())

    def max_height(self) -> float:
        return float(self.heights.max())

    def height_at(self, x: float, y: float) -> float:
        """Height of the cell containing (x, y); 0.0 outside the grid."""
        cx, cy = int(np.floor(x)), int(np.floor(y))
        if not self.in_bounds(cx, cy):
            return 0.0
        return float(self.heights[cy, cx])

    def set_height(self, x: int, y: int, value: float) -> None:
        """Write a single cell, clamped to [0, 1]."""
        self.heights[y, x] = _lim(value)

    def lower(self, x: int, y: int, amount: float) -> float:
        """
        Lower a cell by a non-negative amount, clamped at 0.

        Returns:
            The new height
        """
        if amount < 0:
            raise ValueError("Lowering amount must be non-negative")
        new_height = max(0.0, float(self.heights[y, x]) - amount)
        self.set_height(x, y, new_height)
        return new_height

    def gradient_x(self, x: float, y: float) -> float:
        """Central difference along x; 0 on the left/right border."""
        cx, cy = int(np.floor(x)), int(np.floor(y))
        if cx <= 0 or cx >= self.size - 1:
            return 0.0
        return self.height_at(cx + 1, cy) - self.height_at(cx - 1, cy)

    def gradient_y(self, x: float, y: float) -> float:
        """Central difference along y; 0 on the top/bottom border."""
        cx, cy = int(np.floor(x)), int(np.floor(y))
        if cy <= 0 or cy >= self.size - 1:
            return 0.0
        return self.height_at(cx, cy + 1) - self.height_at(cx, cy - 1)


@dataclass
class TerrainConfig:
    """Configuration for terrain generation."""

    size: int = 200
    falloff: float = 1.5  # radial falloff multiplier
    sharpness: float = 1.5  # exponent applied to the radial base
    noise_layers: Tuple[NoiseLayer, ...] = (
        (0.05, 0.15),
        (0.02, 0.10),
        (0.01, 0.05),
    )

    def __post_init__(self):
        if self.size < 1:
            raise ValueError(f"Terrain size must be positive, got {self.size}")


class TerrainGenerator:
    """Builds the mountain heightmap from a radial falloff and octave noise."""

    def __init__(self, noise: NoiseField, config: Optional[TerrainConfig] = None):
        """
        Initialize the terrain generator.

        Args:
            noise: Noise field providing roughness
            config: Terrain configuration
        """
        self.noise = noise
        self.config = config or TerrainConfig()

    def base_shape(self) -> np.ndarray:
        """Radial massif without noise, indexed [y, x]."""
        size = self.config.size
        half = size / 2
        ys, xs = np.mgrid[0:size, 0:size].astype(np.float64)
        distance = np.sqrt((xs - half) ** 2 + (ys - half) ** 2)
        max_distance = np.sqrt(half**2 + half**2)
        normalized = distance / max_distance

        base = _lim(1.0 - normalized * self.config.falloff)
        return base**self.config.sharpness

    def generate(self) -> Heightmap:
        """
        Generate the heightmap.

        Returns:
            New writable Heightmap of shape (size, size)
        """
        size = self.config.size
        logger.info("Generating terrain", size=size)

        ys, xs = np.mgrid[0:size, 0:size].astype(np.float64)
        heights = self.base_shape() + self.noise.octaves(
            xs, ys, self.config.noise_layers
        )
        heightmap = Heightmap(_lim(heights))

        logger.info(
            "Terrain generated",
            min_height=round(heightmap.min_height(), 3),
            max_height=round(heightmap.max_height(), 3),
        )
        return heightmap
