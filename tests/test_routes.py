"""Tests for trail routes and day-hike recommendations."""

from dataclasses import dataclass

import numpy as np
import pytest

from py_mountain.core.heightmap_generator import Heightmap
from py_mountain.core.hydrology import Lake, LakeShape
from py_mountain.core.orography import Peak
from py_mountain.core.pathfinding import PathPlanner, PathStatus
from py_mountain.core.routes import (
    MILES_PER_UNIT,
    DayHikeRecommender,
    RoutePlanner,
    TrailDifficulty,
    path_length,
    round_miles,
    trail_miles,
)
from py_mountain.core.settlements import Settlement


@dataclass
class Spot:
    x: float
    y: float
    name: str = "Spot"


def campsite(x, y, name="Base Camp"):
    return Settlement(id=0, name=name, x=x, y=y, elevation=2000)


def lake(x, y, name="Blue Lake"):
    return Lake(x=x, y=y, base_size=3, max_radius=3, shape=LakeShape.OVAL, name=name)


def peak(x, y, name="High Point"):
    return Peak(x=x, y=y, height=0.9, name=name)


class TestTrailMiles:
    """Test grid distance to trail mile conversion."""

    def test_moderate(self):
        assert trail_miles(100, "moderate") == pytest.approx(8.0)

    def test_multipliers(self):
        assert TrailDifficulty.EASY.multiplier == 1.2
        assert TrailDifficulty.MODERATE.multiplier == 1.4
        assert TrailDifficulty.DIFFICULT.multiplier == 1.8
        assert TrailDifficulty.EXPERT.multiplier == 2.2
        assert trail_miles(100, TrailDifficulty.EXPERT) == pytest.approx(12.5)

    def test_clamped(self):
        assert trail_miles(1, "easy") == 1.5
        assert trail_miles(0, "expert") == 1.5
        assert trail_miles(1000, "expert") == 36.0

    def test_halves_round_up(self):
        assert round_miles(0.25) == 0.3
        assert round_miles(1.25) == 1.3
        assert round_miles(7.98) == 8.0
        assert round_miles(0.24) == 0.2

    def test_unknown_difficulty(self):
        with pytest.raises(ValueError):
            trail_miles(10, "extreme")

    def test_path_length(self):
        assert path_length([(0, 0), (1, 0), (2, 1)]) == pytest.approx(1 + np.sqrt(2))
        assert path_length([(3, 3)]) == 0.0


class TestRoutePlanner:
    """Test routes between campsites."""

    def test_flat_route(self):
        planner = RoutePlanner(PathPlanner(Heightmap.flat(40, 0.4)))
        route = planner.plan(campsite(5, 5, "A"), campsite(35, 5, "B"), "easy")
        assert route.status is PathStatus.FOUND
        assert not route.direct
        assert route.units == pytest.approx(30.0)
        assert route.miles == trail_miles(30.0, "easy")
        assert route.origin == "A"
        assert route.destination == "B"
        assert route.difficulty is TrailDifficulty.EASY

    def test_blocked_route_is_direct(self):
        heights = np.zeros((30, 30))
        heights[:, 15] = 1.0
        planner = RoutePlanner(PathPlanner(Heightmap(heights)))
        route = planner.plan(campsite(5, 10), campsite(25, 10))
        assert route.direct
        assert route.cells[0] == (5, 10)
        assert route.cells[-1] == (25, 10)
        assert route.units == pytest.approx(20.0)


class TestDayHikes:
    """Test destination choice for day hikes."""

    def test_prefers_lake_within_margin(self):
        hike = DayHikeRecommender().recommend_for(campsite(50, 50), [lake(70, 50)], [peak(50, 68)])
        assert hike.kind == "lake"
        assert hike.destination == "Blue Lake"
        assert hike.name == "Base Camp to Blue Lake"

    def test_prefers_much_closer_peak(self):
        hike = DayHikeRecommender().recommend_for(campsite(50, 50), [lake(80, 50)], [peak(50, 70)])
        assert hike.kind == "peak"
        assert hike.distance == pytest.approx(20.0)
        assert hike.miles == round(20 * MILES_PER_UNIT, 1)

    def test_only_lake(self):
        hike = DayHikeRecommender().recommend_for(campsite(0, 0), [lake(3, 4)], [])
        assert hike.kind == "lake"
        assert hike.distance == pytest.approx(5.0)

    def test_too_far(self):
        far = 10.0 / MILES_PER_UNIT + 10
        recommender = DayHikeRecommender()
        assert recommender.recommend_for(campsite(0, 0), [lake(far, 0)], [peak(0, far)]) is None
        assert recommender.recommend_for(campsite(0, 0), [], []) is None

    def test_far_lake_near_peak(self):
        far = 10.0 / MILES_PER_UNIT + 10
        hike = DayHikeRecommender().recommend_for(campsite(0, 0), [lake(far, 0)], [peak(0, 100)])
        assert hike.kind == "peak"

    def test_one_hike_per_campsite(self):
        camps = [campsite(10, 10, "A"), campsite(90, 90, "B"), campsite(50, 50, "C")]
        hikes = DayHikeRecommender().recommend(camps, [lake(20, 10)], [peak(80, 85)])
        assert [hike.origin for hike in hikes] == ["A", "B", "C"]
        assert hikes[0].destination == "Blue Lake"
        assert hikes[1].destination == "High Point"

    def test_hike_trail_cells(self):
        planner = PathPlanner(Heightmap.flat(30, 0.2))
        hike = DayHikeRecommender(planner).recommend_for(campsite(2, 2), [lake(12, 7)], [])
        assert hike.cells[0] == (2, 2)
        assert hike.cells[-1] == (12, 7)

    def test_any_point_of_interest(self):
        hike = DayHikeRecommender().recommend_for(Spot(0, 0, "Trailhead"), [], [peak(6, 8)])
        assert hike.origin == "Trailhead"
        assert hike.kind == "peak"
