"""Tests for lake placement and basin carving."""

import math

import numpy as np
import pytest

from py_mountain.core.alea_prng import AleaPRNG
from py_mountain.core.heightmap_generator import Heightmap, TerrainConfig, TerrainGenerator
from py_mountain.core.hydrology import HydrologyOptions, HydrologyPlanner, Lake, LakeShape
from py_mountain.core.noise import NoiseField


@pytest.fixture
def terrain():
    prng = AleaPRNG("lakes")
    heightmap = TerrainGenerator(NoiseField(prng), TerrainConfig(size=120)).generate()
    return prng, heightmap


def bowl(size=60):
    """Heightmap rising linearly away from the centre."""
    ys, xs = np.mgrid[0:size, 0:size]
    distance = np.hypot(xs - size / 2, ys - size / 2)
    return Heightmap(distance / distance.max())


class TestLakePlacement:
    """Test lake siting rules."""

    def test_count_within_range(self, terrain):
        prng, heightmap = terrain
        lakes = HydrologyPlanner(prng).place(heightmap, (3, 3))
        assert len(lakes) <= 3

    def test_min_separation(self, terrain):
        prng, heightmap = terrain
        lakes = HydrologyPlanner(prng).place(heightmap, (4, 4))
        for i, a in enumerate(lakes):
            for b in lakes[i + 1:]:
                assert math.hypot(a.x - b.x, a.y - b.y) >= 15

    def test_sites_on_low_ground(self, terrain):
        """Sites sit below 30% of the pre-carving height range."""
        prng, heightmap = terrain
        before = heightmap.copy()
        low, high = before.min_height(), before.max_height()
        threshold = low + 0.3 * (high - low)

        lakes = HydrologyPlanner(prng).place(heightmap, (4, 4))
        for lake in lakes:
            assert before.height_at(lake.x, lake.y) < threshold

    def test_names_unique(self, terrain):
        prng, heightmap = terrain
        lakes = HydrologyPlanner(prng).place(heightmap, (4, 4))
        names = [lake.name for lake in lakes]
        assert len(set(names)) == len(names)

    def test_flat_map_has_no_lakes(self):
        """No cell is strictly below the threshold of a flat map."""
        heightmap = Heightmap.flat(50, 0.5)
        lakes = HydrologyPlanner(AleaPRNG("flat")).place(heightmap, (2, 4))
        assert lakes == []
        assert np.all(heightmap.heights == 0.5)

    def test_zero_lakes_requested(self):
        heightmap = bowl()
        before = heightmap.heights.copy()
        assert HydrologyPlanner(AleaPRNG("none")).place(heightmap, (0, 0)) == []
        assert np.array_equal(heightmap.heights, before)

    def test_invalid_range(self):
        planner = HydrologyPlanner(AleaPRNG("bad"))
        with pytest.raises(ValueError):
            planner.place(Heightmap.flat(10), (4, 2))
        with pytest.raises(ValueError):
            planner.place(Heightmap.flat(10), (-1, 2))

    def test_deterministic(self):
        a = HydrologyPlanner(AleaPRNG("same")).place(bowl(), (3, 3))
        b = HydrologyPlanner(AleaPRNG("same")).place(bowl(), (3, 3))
        assert a == b


class TestBasinCarving:
    """Test terrain lowering under lakes."""

    def test_carving_only_lowers(self, terrain):
        prng, heightmap = terrain
        before = heightmap.heights.copy()
        HydrologyPlanner(prng).place(heightmap, (4, 4))
        assert np.all(heightmap.heights <= before)
        assert heightmap.min_height() >= 0.0

    def test_centre_depth(self):
        heightmap = Heightmap.flat(30, 0.6)
        lake = Lake(x=15, y=15, base_size=4, max_radius=5, shape=LakeShape.IRREGULAR, name="Test")
        HydrologyPlanner(AleaPRNG("carve")).carve(heightmap, lake)
        assert heightmap.height_at(15, 15) == pytest.approx(0.35)

    def test_centre_depth_clamped_at_zero(self):
        heightmap = Heightmap.flat(30, 0.1)
        lake = Lake(x=15, y=15, base_size=3, max_radius=3, shape=LakeShape.IRREGULAR, name="Test")
        HydrologyPlanner(AleaPRNG("carve")).carve(heightmap, lake)
        assert heightmap.height_at(15, 15) == 0.0

    def test_carve_only_inside_outline(self):
        heightmap = Heightmap.flat(30, 0.6)
        lake = Lake(x=15, y=15, base_size=3, max_radius=5, shape=LakeShape.IRREGULAR, name="Test")
        touched = HydrologyPlanner(AleaPRNG("carve")).carve(heightmap, lake)

        cells = set(lake.cells(30))
        assert touched == len(cells)
        changed = set(zip(*np.nonzero(heightmap.heights < 0.6)))
        assert {(x, y) for y, x in changed} <= cells

    def test_carve_near_border(self):
        heightmap = Heightmap.flat(20, 0.6)
        lake = Lake(x=0, y=0, base_size=3, max_radius=4, shape=LakeShape.IRREGULAR, name="Edge")
        HydrologyPlanner(AleaPRNG("edge")).carve(heightmap, lake)
        assert heightmap.height_at(0, 0) == pytest.approx(0.35)


class TestLakeShape:
    """Test lake outline membership."""

    def test_membership_is_stable(self):
        """Repeated membership queries agree."""
        heightmap = bowl(80)
        lakes = HydrologyPlanner(AleaPRNG("shapes")).place(heightmap, (4, 4))
        assert lakes
        for lake in lakes:
            first = lake.cells()
            assert lake.cells() == first
            for x, y in first:
                assert lake.contains(x, y)

    def test_centre_always_inside(self):
        for seed in range(10):
            lakes = HydrologyPlanner(AleaPRNG(seed)).place(bowl(80), (2, 2))
            for lake in lakes:
                assert lake.contains(lake.x, lake.y)

    def test_outside_max_radius(self):
        lake = Lake(x=10, y=10, base_size=5, max_radius=5, shape=LakeShape.OVAL, name="Oval")
        assert lake.shape_distance(6, 0) == math.inf
        assert not lake.contains(16, 10)

    def test_round_oval(self):
        lake = Lake(x=10, y=10, base_size=3, max_radius=4, shape=LakeShape.OVAL, name="Round")
        assert lake.contains(13, 10)
        assert not lake.contains(13, 13)

    def test_shape_parameters_in_range(self):
        lakes = HydrologyPlanner(AleaPRNG("params")).place(bowl(100), (4, 4))
        for lake in lakes:
            assert 2 <= lake.base_size <= 5
            assert lake.base_size <= lake.max_radius <= lake.base_size + 2
            if lake.shape is LakeShape.OVAL:
                assert 0.7 <= lake.stretch <= 1.3
                assert lake.jitter is None
            else:
                span = 2 * lake.max_radius + 1
                assert lake.jitter.shape == (span, span)
                assert np.all((lake.jitter >= 0.8) & (lake.jitter <= 1.2))
