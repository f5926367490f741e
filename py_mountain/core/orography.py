"""
Peak detection on the finished heightmap.

A peak is a cell strictly higher than the 24 other cells of its 5x5
neighbourhood and above an absolute height threshold. Only the highest
few are kept and named.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np
import structlog
from scipy.ndimage import maximum_filter

from .alea_prng import AleaPRNG
from .heightmap_generator import Heightmap
from .name_generator import EntityType, GameMode, NamePool

logger = structlog.get_logger()


def elevation_feet(height: float) -> int:
    """Convert a normalised height to displayed elevation in feet."""
    return int(round(height * 8000 + 2000))


@dataclass(frozen=True)
class Peak:
    """A named summit."""

    x: int
    y: int
    height: float
    name: str

    @property
    def position(self) -> Tuple[int, int]:
        return (self.x, self.y)

    @property
    def elevation_feet(self) -> int:
        return elevation_feet(self.height)


@dataclass
class OrographyOptions:
    """Peak detection options."""

    radius: int = 2  # Neighbourhood half-width (5x5)
    min_height: float = 0.8
    max_count: int = 5


class OrographyAnalyzer:
    """Finds and names the dominant peaks of a heightmap."""

    def __init__(
        self,
        prng: AleaPRNG,
        options: Optional[OrographyOptions] = None,
        names: Optional[NamePool] = None,
        mode: GameMode = GameMode.FUTURISTIC,
    ):
        self.prng = prng
        self.options = options or OrographyOptions()
        self.names = names or NamePool.for_entity(EntityType.PEAK, prng, mode)

    def local_maxima(self, heightmap: Heightmap) -> np.ndarray:
        """
        Mask of cells strictly higher than every neighbour in the window.

        Cells closer than ``radius`` to the border are never maxima since
        their window is incomplete.
        """
        r = self.options.radius
        heights = heightmap.heights
        span = 2 * r + 1

        footprint = np.ones((span, span), dtype=bool)
        footprint[r, r] = False
        neighbour_max = maximum_filter(
            heights, footprint=footprint, mode="constant", cval=np.inf
        )

        mask = heights > neighbour_max
        if r > 0:
            mask[:r, :] = False
            mask[-r:, :] = False
            mask[:, :r] = False
            mask[:, -r:] = False
        return mask

    def find_peaks(
        self, heightmap: Heightmap, max_count: Optional[int] = None
    ) -> List[Peak]:
        """
        Detect peaks, highest first.

        Args:
            heightmap: Finished (post-carve) heightmap
            max_count: Cap on returned peaks; defaults to options

        Returns:
            Up to ``max_count`` named peaks sorted by descending height
        """
        limit = self.options.max_count if max_count is None else max_count
        if limit < 0:
            raise ValueError(f"max_count must be non-negative, got {limit}")

        heights = heightmap.heights
        mask = self.local_maxima(heightmap) & (heights > self.options.min_height)
        ys, xs = np.nonzero(mask)

        candidates = sorted(
            zip(xs.tolist(), ys.tolist()),
            key=lambda cell: (-heights[cell[1], cell[0]], cell[1], cell[0]),
        )

        peaks = [
            Peak(x=x, y=y, height=float(heights[y, x]), name=self.names.draw())
            for x, y in candidates[:limit]
        ]

        logger.info("Peaks found", candidates=len(candidates), kept=len(peaks))
        return peaks
