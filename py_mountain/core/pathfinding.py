"""
Terrain-aware A* pathfinding on the 8-connected heightmap grid.

Step costs grow with the elevation change between neighbouring cells and
jump sharply above a steepness threshold; steps that end up too expensive
are treated as impassable. The frontier is a binary heap keyed by
``f = g + h`` with stale entries skipped on pop.
"""

import heapq
import math
import time
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple

import numpy as np
import structlog

from .heightmap_generator import Heightmap

logger = structlog.get_logger()

Cell = Tuple[int, int]

SQRT2 = math.sqrt(2.0)

# (dx, dy, step length)
NEIGHBOURS = (
    (1, 0, 1.0),
    (-1, 0, 1.0),
    (0, 1, 1.0),
    (0, -1, 1.0),
    (1, 1, SQRT2),
    (1, -1, SQRT2),
    (-1, 1, SQRT2),
    (-1, -1, SQRT2),
)


class PathStatus(Enum):
    """Outcome of a path query."""

    FOUND = "found"
    AT_DESTINATION = "at_destination"
    UNREACHABLE = "unreachable"


@dataclass
class PathOptions:
    """Cost model and search limits."""

    slope_weight: float = 30.0
    steep_threshold: float = 0.15  # Elevation change that triggers the steep penalty
    steep_penalty: float = 100.0
    max_step_cost: float = 50.0  # Steps above this are impassable
    max_expansions: Optional[int] = None  # None: number of grid cells
    time_budget: Optional[float] = None  # Seconds; None: unbounded


@dataclass(frozen=True)
class PathResult:
    """Result of a path query."""

    status: PathStatus
    cells: Tuple[Cell, ...] = ()
    cost: float = 0.0
    expanded: int = 0
    budget_exhausted: bool = False

    @property
    def found(self) -> bool:
        return self.status is not PathStatus.UNREACHABLE

    def __len__(self) -> int:
        return len(self.cells)


def step_cost(
    from_height: float,
    to_height: float,
    length: float = 1.0,
    options: Optional[PathOptions] = None,
) -> float:
    """
    Cost of stepping between two adjacent cells.

    The base term is the step length rather than a flat 1, so diagonal
    steps cost sqrt 2 and the Euclidean heuristic stays admissible. With
    slope weights this large the same edges end up impassable either way.

    Args:
        from_height: Height of the cell left
        to_height: Height of the cell entered
        length: Geometric step length (1 or sqrt 2)
        options: Cost model

    Returns:
        length + slope_weight * |dh|, plus steep_penalty when |dh| exceeds
        the steepness threshold
    """
    opts = options or PathOptions()
    diff = abs(to_height - from_height)
    cost = length + diff * opts.slope_weight
    if diff > opts.steep_threshold:
        cost += opts.steep_penalty
    return cost


def path_cost(
    heightmap: Heightmap, cells: Sequence[Cell], options: Optional[PathOptions] = None
) -> float:
    """Total step cost along a sequence of adjacent cells."""
    total = 0.0
    for (x1, y1), (x2, y2) in zip(cells, cells[1:]):
        length = SQRT2 if x1 != x2 and y1 != y2 else 1.0
        total += step_cost(
            heightmap.height_at(x1, y1), heightmap.height_at(x2, y2), length, options
        )
    return total


def straight_line(start: Cell, end: Cell) -> List[Cell]:
    """
    Direct 8-adjacent connector between two cells (Bresenham).

    Used by callers as the fallback when no passable route exists.
    """
    x0, y0 = start
    x1, y1 = end
    dx = abs(x1 - x0)
    dy = -abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    err = dx + dy

    cells = [(x0, y0)]
    while (x0, y0) != (x1, y1):
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x0 += sx
        if e2 <= dx:
            err += dx
            y0 += sy
        cells.append((x0, y0))
    return cells


def octile_distance(start: Cell, end: Cell) -> float:
    """Shortest 8-connected distance on flat ground."""
    dx = abs(end[0] - start[0])
    dy = abs(end[1] - start[1])
    return (SQRT2 - 1.0) * min(dx, dy) + max(dx, dy)


class PathPlanner:
    """
    A* search over a read-only heightmap.

    Holds no state between queries; every ``find_path`` call allocates its
    own cost, parent and closed tables.
    """

    def __init__(self, heightmap: Heightmap, options: Optional[PathOptions] = None):
        self.heightmap = heightmap
        self.options = options or PathOptions()

    def _cell(self, point: Sequence[float]) -> Cell:
        x, y = int(round(point[0])), int(round(point[1]))
        if not self.heightmap.in_bounds(x, y):
            raise ValueError(
                f"Cell ({x}, {y}) is outside the {self.heightmap.size}x{self.heightmap.size} grid"
            )
        return x, y

    def find_path(self, start: Sequence[float], end: Sequence[float]) -> PathResult:
        """
        Find the cheapest passable path between two cells.

        Args:
            start: (x, y) start cell
            end: (x, y) goal cell

        Returns:
            PathResult; ``UNREACHABLE`` with no cells when the goal cannot be
            reached within the search budget
        """
        sx, sy = self._cell(start)
        ex, ey = self._cell(end)
        if (sx, sy) == (ex, ey):
            return PathResult(status=PathStatus.AT_DESTINATION, cells=((sx, sy),))

        opts = self.options
        size = self.heightmap.size
        heights = self.heightmap.heights.tolist()
        budget = opts.max_expansions or size * size
        deadline = (
            time.perf_counter() + opts.time_budget if opts.time_budget else None
        )

        g_score = np.full((size, size), np.inf)
        parent = np.full((size, size), -1, dtype=np.int64)
        closed = np.zeros((size, size), dtype=bool)

        def heuristic(x: int, y: int) -> float:
            return math.hypot(ex - x, ey - y)

        g_score[sy, sx] = 0.0
        counter = 0
        open_heap = [(heuristic(sx, sy), 0.0, counter, sx, sy)]
        expanded = 0

        while open_heap:
            _, g, _, x, y = heapq.heappop(open_heap)
            if closed[y, x] or g > g_score[y, x]:
                continue

            if x == ex and y == ey:
                cells = self._reconstruct(parent, ex, ey, size)
                logger.debug(
                    "Path found", start=(sx, sy), end=(ex, ey), cost=g, expanded=expanded
                )
                return PathResult(
                    status=PathStatus.FOUND, cells=cells, cost=g, expanded=expanded
                )

            if expanded >= budget or (
                deadline is not None
                and expanded % 512 == 0
                and time.perf_counter() > deadline
            ):
                logger.warning(
                    "Path search budget exhausted",
                    start=(sx, sy),
                    end=(ex, ey),
                    expanded=expanded,
                )
                return PathResult(
                    status=PathStatus.UNREACHABLE,
                    expanded=expanded,
                    budget_exhausted=True,
                )

            closed[y, x] = True
            expanded += 1
            here = heights[y][x]

            for dx, dy, length in NEIGHBOURS:
                nx, ny = x + dx, y + dy
                if nx < 0 or ny < 0 or nx >= size or ny >= size:
                    continue
                if closed[ny, nx]:
                    continue

                cost = step_cost(here, heights[ny][nx], length, opts)
                if cost > opts.max_step_cost:
                    continue

                tentative = g + cost
                if tentative < g_score[ny, nx]:
                    g_score[ny, nx] = tentative
                    parent[ny, nx] = y * size + x
                    counter += 1
                    heapq.heappush(
                        open_heap,
                        (tentative + heuristic(nx, ny), tentative, counter, nx, ny),
                    )

        logger.debug("No passable path", start=(sx, sy), end=(ex, ey), expanded=expanded)
        return PathResult(status=PathStatus.UNREACHABLE, expanded=expanded)

    @staticmethod
    def _reconstruct(parent: np.ndarray, x: int, y: int, size: int) -> Tuple[Cell, ...]:
        cells = [(x, y)]
        node = int(parent[y, x])
        while node != -1:
            y, x = divmod(node, size)
            cells.append((x, y))
            node = int(parent[y, x])
        cells.reverse()
        return tuple(cells)

    def find_path_or_direct(
        self, start: Sequence[float], end: Sequence[float]
    ) -> Tuple[PathResult, List[Cell]]:
        """
        Path query with the straight-line fallback applied.

        Returns:
            The raw result and the cells to use (the path, or a direct
            connector when unreachable)
        """
        result = self.find_path(start, end)
        if result.found:
            return result, list(result.cells)
        return result, straight_line(self._cell(start), self._cell(end))
