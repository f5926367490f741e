"""Tests for themed name pools."""

import pytest

from py_mountain.core.alea_prng import AleaPRNG
from py_mountain.core.name_generator import (
    CAMPSITE_NAMES,
    EARTH_LAKE_NAMES,
    FUTURISTIC_LAKE_NAMES,
    FUTURISTIC_PEAK_NAMES,
    EntityType,
    GameMode,
    NamePool,
    parse_game_mode,
)


class TestNamePool:
    """Test drawing names without replacement."""

    def test_draws_are_unique(self):
        pool = NamePool.for_entity(EntityType.LAKE, AleaPRNG("names"))
        names = [pool.draw() for _ in range(30)]
        assert len(set(names)) == 30
        assert set(names) <= set(FUTURISTIC_LAKE_NAMES)

    def test_earth_theme(self):
        pool = NamePool.for_entity(EntityType.LAKE, AleaPRNG("earth"), GameMode.EARTH)
        assert pool.draw() in EARTH_LAKE_NAMES

    def test_fallback_after_exhaustion(self):
        pool = NamePool(["Alpha", "Beta"], "Lake", AleaPRNG("small"))
        names = [pool.draw() for _ in range(4)]
        assert set(names[:2]) == {"Alpha", "Beta"}
        assert names[2:] == ["Lake 3", "Lake 4"]

    def test_duplicates_removed(self):
        pool = NamePool(["Alpha", "Alpha", "Beta"], "Peak", AleaPRNG("dup"))
        assert pool.names == ["Alpha", "Beta"]

    def test_reset(self):
        pool = NamePool(["Alpha"], "Campsite", AleaPRNG("reset"))
        assert pool.draw() == "Alpha"
        assert pool.draw() == "Campsite 2"
        pool.reset()
        assert pool.draw() == "Alpha"

    def test_deterministic(self):
        a = NamePool.for_entity(EntityType.PEAK, AleaPRNG("same"))
        b = NamePool.for_entity(EntityType.PEAK, AleaPRNG("same"))
        assert [a.draw() for _ in range(5)] == [b.draw() for _ in range(5)]

    def test_themed_pools_disjoint(self):
        assert not set(FUTURISTIC_LAKE_NAMES) & set(FUTURISTIC_PEAK_NAMES)

    def test_campsite_pool(self):
        pool = NamePool.for_entity(EntityType.CAMPSITE, AleaPRNG("camp"))
        assert pool.draw() in CAMPSITE_NAMES


class TestGameMode:
    def test_parse(self):
        assert parse_game_mode("earth") is GameMode.EARTH
        assert parse_game_mode("FUTURISTIC") is GameMode.FUTURISTIC
        assert parse_game_mode(None) is GameMode.FUTURISTIC

    def test_unknown(self):
        with pytest.raises(ValueError):
            parse_game_mode("medieval")
