"""
Campsite placement on the generated mountain.

Campsites are the settlements routes and day hikes start from. They are
sited at random inside the central part of the map, kept apart from each
other, and take their elevation from the terrain underneath.
"""

import math
from dataclasses import dataclass
from typing import List, Optional, Protocol, Tuple

import structlog
from pydantic import BaseModel, ConfigDict, Field

from .alea_prng import AleaPRNG
from .heightmap_generator import Heightmap
from .name_generator import EntityType, GameMode, NamePool
from .orography import elevation_feet

logger = structlog.get_logger()


class PointOfInterest(Protocol):
    """Anything with a grid position: settlements, lakes, peaks."""

    x: float
    y: float


def distance(a: PointOfInterest, b: PointOfInterest) -> float:
    """Euclidean distance between two points of interest in grid units."""
    return math.hypot(a.x - b.x, a.y - b.y)


@dataclass(frozen=True)
class Settlement:
    """A campsite on the mountain."""

    id: int
    name: str
    x: float
    y: float
    elevation: int

    @property
    def position(self) -> Tuple[float, float]:
        return (self.x, self.y)


class SettlementOptions(BaseModel):
    """Campsite placement options."""

    model_config = ConfigDict(frozen=True)

    min_count: int = Field(default=6, ge=0, description="Minimum number of campsites")
    max_count: int = Field(default=8, ge=0, description="Maximum number of campsites")
    min_spacing: float = Field(default=15.0, description="Minimum distance between campsites")
    max_attempts: int = Field(default=100, ge=1, description="Siting attempts per campsite")
    margin_ratio: float = Field(
        default=0.1, ge=0.0, lt=0.5, description="Map fraction kept free on each side"
    )


class SettlementPlanner:
    """Places campsites on a heightmap."""

    def __init__(
        self,
        prng: AleaPRNG,
        options: Optional[SettlementOptions] = None,
        names: Optional[NamePool] = None,
        mode: GameMode = GameMode.FUTURISTIC,
    ):
        self.prng = prng
        self.options = options or SettlementOptions()
        self.names = names or NamePool.for_entity(EntityType.CAMPSITE, prng, mode)

    def place(self, heightmap: Heightmap, count: Optional[int] = None) -> List[Settlement]:
        """
        Place campsites.

        After ``max_attempts`` crowded samples the last sample is accepted
        anyway, so the requested count is always met.

        Args:
            heightmap: Finished heightmap
            count: Exact number of campsites; random within options if omitted

        Returns:
            Placed campsites
        """
        opts = self.options
        if count is None:
            if opts.max_count < opts.min_count:
                raise ValueError(
                    f"Invalid campsite count range: {opts.min_count}..{opts.max_count}"
                )
            count = self.prng.randint(opts.min_count, opts.max_count)

        size = heightmap.size
        low = size * opts.margin_ratio
        high = size * (1 - opts.margin_ratio)

        settlements: List[Settlement] = []
        for index in range(count):
            for _ in range(opts.max_attempts):
                x = self.prng.uniform(low, high)
                y = self.prng.uniform(low, high)
                crowded = any(
                    math.hypot(s.x - x, s.y - y) < opts.min_spacing for s in settlements
                )
                if not crowded:
                    break

            settlements.append(
                Settlement(
                    id=index,
                    name=self.names.draw(),
                    x=x,
                    y=y,
                    elevation=elevation_feet(heightmap.height_at(x, y)),
                )
            )

        logger.info("Campsites placed", count=len(settlements))
        return settlements
