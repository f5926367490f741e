"""
Lake placement and basin carving.

This module implements:
- Low-ground site selection with a minimum lake separation
- Oval and irregular lake outlines with shape parameters fixed at creation
- Basin carving that lowers terrain under each lake, once per lake
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Tuple

import numpy as np
import structlog

from .alea_prng import AleaPRNG
from .heightmap_generator import Heightmap
from .name_generator import EntityType, GameMode, NamePool

logger = structlog.get_logger()


class LakeShape(Enum):
    """Outline variant of a lake."""

    OVAL = "oval"
    IRREGULAR = "irregular"


@dataclass
class HydrologyOptions:
    """Lake placement options."""

    lake_count_range: Tuple[int, int] = (2, 4)
    max_attempts: int = 100  # Random sites tried per lake
    min_separation: float = 15.0  # Centre-to-centre distance between lakes
    height_threshold_ratio: float = 0.3  # Fraction of the height range counted as low ground
    base_size_range: Tuple[int, int] = (2, 5)
    extra_radius_max: int = 2  # Carving reach beyond the base radius
    basin_depth: float = 0.25  # Depth at the lake centre
    stretch_range: Tuple[float, float] = (0.7, 1.3)
    jitter_range: Tuple[float, float] = (0.8, 1.2)


@dataclass(frozen=True)
class Lake:
    """A placed lake with its outline parameters."""

    x: int
    y: int
    base_size: int
    max_radius: int
    shape: LakeShape
    name: str
    stretch: float = 1.0
    angle: float = 0.0
    # Distance multipliers for irregular lakes, indexed [dy + r, dx + r]
    jitter: Optional[np.ndarray] = field(default=None, compare=False, repr=False)

    @property
    def position(self) -> Tuple[int, int]:
        return (self.x, self.y)

    def shape_distance(self, dx: int, dy: int) -> float:
        """
        Shape-adjusted distance of an offset from the lake centre.

        Args:
            dx: X offset from the centre
            dy: Y offset from the centre

        Returns:
            Distance to compare against ``base_size``; inf beyond ``max_radius``
        """
        r = self.max_radius
        if abs(dx) > r or abs(dy) > r:
            return math.inf

        if self.shape is LakeShape.OVAL:
            cos_a = math.cos(self.angle)
            sin_a = math.sin(self.angle)
            dx_rot = dx * cos_a + dy * sin_a
            dy_rot = -dx * sin_a + dy * cos_a
            return math.sqrt((dx_rot / self.stretch) ** 2 + (dy_rot * self.stretch) ** 2)

        base_distance = math.sqrt(dx * dx + dy * dy)
        if self.jitter is None:
            return base_distance
        return base_distance * float(self.jitter[dy + r, dx + r])

    def contains(self, x: int, y: int) -> bool:
        """Whether a grid cell lies inside the lake outline."""
        return self.shape_distance(x - self.x, y - self.y) <= self.base_size

    def cells(self, size: Optional[int] = None) -> List[Tuple[int, int]]:
        """Cells inside the outline, optionally limited to a grid of ``size``."""
        r = self.max_radius
        result = []
        for dy in range(-r, r + 1):
            for dx in range(-r, r + 1):
                nx, ny = self.x + dx, self.y + dy
                if size is not None and not (0 <= nx < size and 0 <= ny < size):
                    continue
                if self.shape_distance(dx, dy) <= self.base_size:
                    result.append((nx, ny))
        return result


class HydrologyPlanner:
    """Places lakes on low ground and carves their basins."""

    def __init__(
        self,
        prng: AleaPRNG,
        options: Optional[HydrologyOptions] = None,
        names: Optional[NamePool] = None,
        mode: GameMode = GameMode.FUTURISTIC,
    ):
        """
        Initialize the planner.

        Args:
            prng: Random source for siting and shapes
            options: Lake placement options
            names: Lake name pool; a themed pool is built when omitted
            mode: Naming theme used when building the default pool
        """
        self.prng = prng
        self.options = options or HydrologyOptions()
        self.names = names or NamePool.for_entity(EntityType.LAKE, prng, mode)

    def place(
        self, heightmap: Heightmap, count_range: Optional[Tuple[int, int]] = None
    ) -> List[Lake]:
        """
        Place lakes and carve their basins into ``heightmap``.

        Args:
            heightmap: Writable heightmap, lowered in place
            count_range: Inclusive (min, max) lake count; defaults to options

        Returns:
            Accepted lakes, possibly fewer than requested
        """
        low, high = count_range or self.options.lake_count_range
        if low < 0 or high < low:
            raise ValueError(f"Invalid lake count range: {low}..{high}")

        target = self.prng.randint(low, high)
        min_height = heightmap.min_height()
        max_height = heightmap.max_height()
        threshold = min_height + (max_height - min_height) * self.options.height_threshold_ratio

        logger.info(
            "Placing lakes",
            target=target,
            min_height=round(min_height, 3),
            max_height=round(max_height, 3),
            threshold=round(threshold, 3),
        )

        lakes: List[Lake] = []
        for index in range(target):
            site = self._find_site(heightmap, threshold, lakes)
            if site is None:
                logger.info(
                    "No suitable lake site",
                    lake=index + 1,
                    attempts=self.options.max_attempts,
                )
                continue

            lake = self._create_lake(*site)
            self.carve(heightmap, lake)
            lakes.append(lake)
            logger.debug(
                "Lake created",
                name=lake.name,
                x=lake.x,
                y=lake.y,
                base_size=lake.base_size,
                shape=lake.shape.value,
            )

        logger.info("Lakes placed", count=len(lakes), requested=target)
        return lakes

    def _find_site(
        self, heightmap: Heightmap, threshold: float, lakes: Sequence[Lake]
    ) -> Optional[Tuple[int, int]]:
        size = heightmap.size
        for _ in range(self.options.max_attempts):
            x = self.prng.randint(0, size - 1)
            y = self.prng.randint(0, size - 1)
            if heightmap.height_at(x, y) >= threshold:
                continue
            if self._too_close(x, y, lakes):
                continue
            return x, y
        return None

    def _too_close(self, x: int, y: int, lakes: Sequence[Lake]) -> bool:
        return any(
            math.hypot(lake.x - x, lake.y - y) < self.options.min_separation
            for lake in lakes
        )

    def _create_lake(self, x: int, y: int) -> Lake:
        opts = self.options
        base_size = self.prng.randint(*opts.base_size_range)
        shape = LakeShape.OVAL if self.prng.random() > 0.5 else LakeShape.IRREGULAR
        max_radius = base_size + self.prng.randint(0, opts.extra_radius_max)

        stretch, angle, jitter = 1.0, 0.0, None
        if shape is LakeShape.OVAL:
            stretch = self.prng.uniform(*opts.stretch_range)
            angle = self.prng.uniform(0.0, 2 * math.pi)
        else:
            span = 2 * max_radius + 1
            jitter = np.array(
                [self.prng.uniform(*opts.jitter_range) for _ in range(span * span)],
                dtype=np.float64,
            ).reshape(span, span)
            jitter.flags.writeable = False

        return Lake(
            x=x,
            y=y,
            base_size=base_size,
            max_radius=max_radius,
            shape=shape,
            name=self.names.draw(),
            stretch=stretch,
            angle=angle,
            jitter=jitter,
        )

    def carve(self, heightmap: Heightmap, lake: Lake) -> int:
        """
        Lower the terrain inside a lake outline.

        Depth falls off linearly from ``basin_depth`` at the centre to 0 at
        the outline. Heights never go below 0.

        Returns:
            Number of cells lowered
        """
        touched = 0
        for nx, ny in lake.cells(heightmap.size):
            distance = lake.shape_distance(nx - lake.x, ny - lake.y)
            depth = max(
                0.0, (lake.base_size - distance) / lake.base_size * self.options.basin_depth
            )
            heightmap.lower(nx, ny, depth)
            touched += 1
        return touched
