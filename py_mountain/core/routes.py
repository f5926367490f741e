"""
Trail routes and day-hike recommendations.

Both sit on top of path queries: a route between two campsites follows the
A* trail (or a direct connector when the terrain is impassable) and turns
its grid length into miles; a day hike pairs each campsite with its nearest
lake or peak when it is close enough for a day out.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple, Union

import structlog

from .hydrology import Lake
from .orography import Peak
from .pathfinding import Cell, PathPlanner, PathStatus, straight_line
from .settlements import PointOfInterest, Settlement, distance

logger = structlog.get_logger()

# 200 grid units span roughly 5.5 miles diagonally; trails are stretched 3x
MILES_PER_UNIT = 0.019 * 3

MIN_ROUTE_MILES = 1.5
MAX_ROUTE_MILES = 36.0


class TrailDifficulty(Enum):
    """Trail difficulty grades and their winding multipliers."""

    EASY = "easy"
    MODERATE = "moderate"
    DIFFICULT = "difficult"
    EXPERT = "expert"

    @property
    def multiplier(self) -> float:
        return _DIFFICULTY_MULTIPLIERS[self]


_DIFFICULTY_MULTIPLIERS = {
    TrailDifficulty.EASY: 1.2,
    TrailDifficulty.MODERATE: 1.4,
    TrailDifficulty.DIFFICULT: 1.8,
    TrailDifficulty.EXPERT: 2.2,
}


def path_length(cells: Sequence[Cell]) -> float:
    """Geometric length of a cell path in grid units."""
    total = 0.0
    for (x1, y1), (x2, y2) in zip(cells, cells[1:]):
        total += math.hypot(x2 - x1, y2 - y1)
    return total


def units_to_miles(units: float) -> float:
    return units * MILES_PER_UNIT


def round_miles(miles: float) -> float:
    """Round to one decimal with halves rounded up."""
    return math.floor(miles * 10 + 0.5) / 10


def trail_miles(
    units: float, difficulty: Union[TrailDifficulty, str] = TrailDifficulty.MODERATE
) -> float:
    """
    Real-world trail length for a grid distance.

    Args:
        units: Distance in grid units
        difficulty: Trail grade

    Returns:
        Miles rounded to one decimal, clamped to the bookable range
    """
    grade = TrailDifficulty(difficulty)
    miles = round_miles(units_to_miles(units) * grade.multiplier)
    return max(MIN_ROUTE_MILES, min(MAX_ROUTE_MILES, miles))


@dataclass(frozen=True)
class Route:
    """A trail between two campsites."""

    origin: str
    destination: str
    difficulty: TrailDifficulty
    cells: Tuple[Cell, ...]
    status: PathStatus
    units: float
    miles: float

    @property
    def direct(self) -> bool:
        """True when the trail is the straight fallback connector."""
        return self.status is PathStatus.UNREACHABLE


@dataclass(frozen=True)
class DayHike:
    """A recommended out-and-back hike from a campsite."""

    origin: str
    destination: str
    kind: str  # "lake" or "peak"
    distance: float  # Straight-line grid units
    cells: Tuple[Cell, ...]

    @property
    def name(self) -> str:
        return f"{self.origin} to {self.destination}"

    @property
    def miles(self) -> float:
        return round_miles(units_to_miles(self.distance))


def _name_of(point: PointOfInterest) -> str:
    return getattr(point, "name", f"({point.x:.0f}, {point.y:.0f})")


def _cell_of(point: PointOfInterest) -> Tuple[int, int]:
    return int(round(point.x)), int(round(point.y))


class RoutePlanner:
    """Builds trails between points of interest."""

    def __init__(self, planner: PathPlanner):
        self.planner = planner

    def plan(
        self,
        origin: PointOfInterest,
        destination: PointOfInterest,
        difficulty: Union[TrailDifficulty, str] = TrailDifficulty.MODERATE,
    ) -> Route:
        """
        Plan a trail; falls back to a direct connector when unreachable.
        """
        grade = TrailDifficulty(difficulty)
        result, cells = self.planner.find_path_or_direct(
            _cell_of(origin), _cell_of(destination)
        )
        if not result.found:
            logger.info(
                "Route falls back to direct connector",
                origin=_name_of(origin),
                destination=_name_of(destination),
            )

        units = path_length(cells)
        return Route(
            origin=_name_of(origin),
            destination=_name_of(destination),
            difficulty=grade,
            cells=tuple(cells),
            status=result.status,
            units=units,
            miles=trail_miles(units, grade),
        )


def _nearest(origin: PointOfInterest, targets: Sequence[PointOfInterest]):
    if not targets:
        return None, math.inf
    best = min(targets, key=lambda target: distance(origin, target))
    return best, distance(origin, best)


class DayHikeRecommender:
    """Pairs campsites with a nearby lake or peak."""

    def __init__(
        self,
        planner: Optional[PathPlanner] = None,
        max_miles: float = 10.0,
        lake_preference: float = 1.2,
    ):
        """
        Args:
            planner: Path planner used to lay out the hike trail; when omitted
                hikes carry a straight connector
            max_miles: Longest acceptable hike
            lake_preference: A lake wins while it is at most this many times
                farther than the nearest peak
        """
        self.planner = planner
        self.max_miles = max_miles
        self.lake_preference = lake_preference

    def recommend(
        self,
        settlements: Sequence[Settlement],
        lakes: Sequence[Lake],
        peaks: Sequence[Peak],
    ) -> List[DayHike]:
        """At most one hike per campsite."""
        hikes = []
        for settlement in settlements:
            hike = self.recommend_for(settlement, lakes, peaks)
            if hike is not None:
                hikes.append(hike)
        logger.info("Day hikes generated", count=len(hikes), campsites=len(settlements))
        return hikes

    def recommend_for(
        self,
        settlement: PointOfInterest,
        lakes: Sequence[Lake],
        peaks: Sequence[Peak],
    ) -> Optional[DayHike]:
        lake, lake_distance = _nearest(settlement, lakes)
        peak, peak_distance = _nearest(settlement, peaks)

        lake_ok = lake is not None and units_to_miles(lake_distance) <= self.max_miles
        peak_ok = peak is not None and units_to_miles(peak_distance) <= self.max_miles

        if lake_ok and peak_ok:
            if lake_distance <= peak_distance * self.lake_preference:
                return self._hike(settlement, lake, "lake", lake_distance)
            return self._hike(settlement, peak, "peak", peak_distance)
        if lake_ok:
            return self._hike(settlement, lake, "lake", lake_distance)
        if peak_ok:
            return self._hike(settlement, peak, "peak", peak_distance)

        logger.debug(
            "No suitable day hike",
            campsite=_name_of(settlement),
            lake_miles=round(units_to_miles(lake_distance), 1) if lake else None,
            peak_miles=round(units_to_miles(peak_distance), 1) if peak else None,
        )
        return None

    def _hike(
        self,
        settlement: PointOfInterest,
        target: PointOfInterest,
        kind: str,
        units: float,
    ) -> DayHike:
        start, end = _cell_of(settlement), _cell_of(target)
        if self.planner is not None:
            _, cells = self.planner.find_path_or_direct(start, end)
        else:
            cells = straight_line(start, end)

        return DayHike(
            origin=_name_of(settlement),
            destination=_name_of(target),
            kind=kind,
            distance=units,
            cells=tuple(cells),
        )
