"""Tests for terrain generation and the heightmap container."""

import numpy as np
import pytest

from py_mountain.core.alea_prng import AleaPRNG
from py_mountain.core.heightmap_generator import Heightmap, TerrainConfig, TerrainGenerator
from py_mountain.core.noise import NoiseField


def make_generator(seed="terrain", size=64):
    noise = NoiseField(AleaPRNG(seed))
    return TerrainGenerator(noise, TerrainConfig(size=size))


class TestTerrainGenerator:
    """Test the radial massif with noise."""

    def test_shape_and_range(self):
        heightmap = make_generator(size=80).generate()
        assert heightmap.heights.shape == (80, 80)
        assert heightmap.min_height() >= 0.0
        assert heightmap.max_height() <= 1.0

    def test_deterministic(self):
        a = make_generator("same").generate()
        b = make_generator("same").generate()
        assert np.array_equal(a.heights, b.heights)

    def test_seed_changes_terrain(self):
        a = make_generator("one").generate()
        b = make_generator("two").generate()
        assert not np.array_equal(a.heights, b.heights)

    def test_base_shape_peaks_in_centre(self):
        """The radial base is 1 at the centre and 0 at the corners."""
        base = make_generator(size=100).base_shape()
        assert base[50, 50] == pytest.approx(1.0)
        assert base[0, 0] == 0.0
        assert base[99, 99] == 0.0
        assert base[50, 50] > base[50, 70] > base[50, 90]

    def test_centre_higher_than_edges(self):
        """Noise roughens the massif but keeps it a mountain."""
        heightmap = make_generator(size=100).generate()
        centre = heightmap.heights[45:55, 45:55].mean()
        corners = heightmap.heights[:10, :10].mean()
        assert centre > corners

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            TerrainConfig(size=0)


class TestHeightmap:
    """Test heightmap access and mutation rules."""

    def test_requires_square(self):
        with pytest.raises(ValueError):
            Heightmap(np.zeros((4, 5)))

    def test_input_clamped_and_copied(self):
        source = np.array([[-1.0, 0.5], [2.0, 0.25]])
        heightmap = Heightmap(source)
        assert heightmap.heights.tolist() == [[0.0, 0.5], [1.0, 0.25]]
        source[0, 1] = 0.9
        assert heightmap.heights[0, 1] == 0.5

    def test_row_major_indexing(self):
        """height_at(x, y) reads heights[y, x]."""
        heights = np.zeros((3, 3))
        heights[0, 2] = 0.7
        heightmap = Heightmap(heights)
        assert heightmap.height_at(2, 0) == 0.7
        assert heightmap.height_at(0, 2) == 0.0

    def test_height_outside_grid(self):
        heightmap = Heightmap.flat(4, 0.5)
        assert heightmap.height_at(-1, 0) == 0.0
        assert heightmap.height_at(0, 4) == 0.0
        assert heightmap.height_at(3.9, 3.9) == 0.5

    def test_set_height_clamps(self):
        heightmap = Heightmap.flat(4)
        heightmap.set_height(1, 1, 1.7)
        heightmap.set_height(2, 2, -0.3)
        assert heightmap.height_at(1, 1) == 1.0
        assert heightmap.height_at(2, 2) == 0.0

    def test_lower(self):
        heightmap = Heightmap.flat(4, 0.3)
        assert heightmap.lower(1, 1, 0.1) == pytest.approx(0.2)
        assert heightmap.lower(1, 1, 0.5) == 0.0
        with pytest.raises(ValueError):
            heightmap.lower(1, 1, -0.1)

    def test_frozen_rejects_writes(self):
        heightmap = Heightmap.flat(4, 0.3).freeze()
        assert heightmap.frozen
        with pytest.raises(ValueError):
            heightmap.set_height(0, 0, 0.5)
        assert heightmap.height_at(0, 0) == 0.3

    def test_copy_is_writable(self):
        frozen = Heightmap.flat(4, 0.3).freeze()
        copy = frozen.copy()
        assert not copy.frozen
        copy.set_height(0, 0, 0.9)
        assert frozen.height_at(0, 0) == 0.3

    def test_gradients(self):
        heights = np.tile(np.linspace(0.0, 0.4, 5), (5, 1))
        heightmap = Heightmap(heights)
        assert heightmap.gradient_x(2, 2) == pytest.approx(0.2)
        assert heightmap.gradient_y(2, 2) == pytest.approx(0.0)

    def test_gradients_zero_on_border(self):
        heightmap = make_generator(size=32).generate()
        assert heightmap.gradient_x(0, 10) == 0.0
        assert heightmap.gradient_x(31, 10) == 0.0
        assert heightmap.gradient_y(10, 0) == 0.0
        assert heightmap.gradient_y(10, 31) == 0.0
