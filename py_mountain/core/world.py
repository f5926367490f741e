"""
World generation pipeline.

One synchronous pass builds everything a session needs:

1. PRNG from the world seed
2. NoiseField (permutation table)
3. TerrainGenerator -> heightmap
4. HydrologyPlanner -> lakes, basins carved into the heightmap
5. Heightmap frozen; no writes after this point
6. OrographyAnalyzer -> peaks
7. SettlementPlanner -> campsites

The resulting World is read-only, so path queries against it can run
concurrently.
"""

from dataclasses import dataclass, field
from functools import cached_property
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import structlog

from .heightmap_generator import Heightmap, TerrainConfig, TerrainGenerator
from .hydrology import HydrologyOptions, HydrologyPlanner, Lake
from .name_generator import GameMode, parse_game_mode
from .noise import NoiseField
from .orography import OrographyAnalyzer, OrographyOptions, Peak
from .pathfinding import PathOptions, PathPlanner, PathResult
from .routes import DayHike, DayHikeRecommender, Route, RoutePlanner, TrailDifficulty
from .settlements import PointOfInterest, Settlement, SettlementOptions, SettlementPlanner
from ..utils.random import Seed, make_prng, resolve_seed

logger = structlog.get_logger()


@dataclass
class WorldConfig:
    """All knobs of a world generation pass."""

    terrain: TerrainConfig = field(default_factory=TerrainConfig)
    hydrology: HydrologyOptions = field(default_factory=HydrologyOptions)
    orography: OrographyOptions = field(default_factory=OrographyOptions)
    settlements: SettlementOptions = field(default_factory=SettlementOptions)
    paths: PathOptions = field(default_factory=PathOptions)
    game_mode: GameMode = GameMode.FUTURISTIC

    @classmethod
    def from_settings(cls, settings: Any) -> "WorldConfig":
        """Build a config from application settings."""
        return cls(
            terrain=TerrainConfig(size=settings.grid_size),
            hydrology=HydrologyOptions(
                lake_count_range=(settings.lake_count_min, settings.lake_count_max)
            ),
            orography=OrographyOptions(max_count=settings.max_peaks),
            paths=PathOptions(
                max_expansions=settings.path_max_expansions or None,
                time_budget=settings.path_time_budget_seconds or None,
            ),
            game_mode=parse_game_mode(settings.game_mode),
        )


@dataclass(frozen=True)
class World:
    """A generated world; immutable once built."""

    seed: str
    config: WorldConfig
    heightmap: Heightmap
    lakes: Tuple[Lake, ...]
    peaks: Tuple[Peak, ...]
    settlements: Tuple[Settlement, ...] = ()

    @property
    def size(self) -> int:
        return self.heightmap.size

    @cached_property
    def planner(self) -> PathPlanner:
        return PathPlanner(self.heightmap, self.config.paths)

    def height_at(self, x: float, y: float) -> float:
        return self.heightmap.height_at(x, y)

    def gradient_x(self, x: float, y: float) -> float:
        return self.heightmap.gradient_x(x, y)

    def gradient_y(self, x: float, y: float) -> float:
        return self.heightmap.gradient_y(x, y)

    def find_path(self, start: Sequence[float], end: Sequence[float]) -> PathResult:
        return self.planner.find_path(start, end)

    def plan_route(
        self,
        origin: PointOfInterest,
        destination: PointOfInterest,
        difficulty: Union[TrailDifficulty, str] = TrailDifficulty.MODERATE,
    ) -> Route:
        return RoutePlanner(self.planner).plan(origin, destination, difficulty)

    def day_hikes(
        self, settlements: Optional[Sequence[Settlement]] = None
    ) -> List[DayHike]:
        """Day hikes for the given campsites, or the world's own."""
        campsites = self.settlements if settlements is None else settlements
        return DayHikeRecommender(self.planner).recommend(campsites, self.lakes, self.peaks)

    def lake_at(self, x: int, y: int) -> Optional[Lake]:
        """The lake covering a cell, if any."""
        for lake in self.lakes:
            if lake.contains(x, y):
                return lake
        return None

    def summary(self) -> Dict[str, Any]:
        return {
            "seed": self.seed,
            "size": self.size,
            "min_height": self.heightmap.min_height(),
            "max_height": self.heightmap.max_height(),
            "lakes": len(self.lakes),
            "peaks": len(self.peaks),
            "settlements": len(self.settlements),
        }


class WorldGenerator:
    """Runs the generation pipeline for one seed."""

    def __init__(self, config: Optional[WorldConfig] = None, seed: Optional[Seed] = None):
        """
        Initialize the generator.

        Args:
            config: Generation configuration
            seed: World seed; a fresh random seed is used when omitted
        """
        self.config = config or WorldConfig()
        self.seed = resolve_seed(seed)

    def generate(self, with_settlements: bool = True) -> World:
        """
        Generate a world.

        Args:
            with_settlements: Also site campsites on the finished terrain

        Returns:
            Frozen World
        """
        config = self.config
        prng = make_prng(self.seed)
        logger.info("Generating world", seed=self.seed, size=config.terrain.size)

        noise = NoiseField(prng)
        heightmap = TerrainGenerator(noise, config.terrain).generate()

        hydrology = HydrologyPlanner(prng, config.hydrology, mode=config.game_mode)
        lakes = hydrology.place(heightmap)
        heightmap.freeze()

        orography = OrographyAnalyzer(prng, config.orography, mode=config.game_mode)
        peaks = orography.find_peaks(heightmap)

        settlements: List[Settlement] = []
        if with_settlements:
            planner = SettlementPlanner(prng, config.settlements, mode=config.game_mode)
            settlements = planner.place(heightmap)

        world = World(
            seed=self.seed,
            config=config,
            heightmap=heightmap,
            lakes=tuple(lakes),
            peaks=tuple(peaks),
            settlements=tuple(settlements),
        )
        logger.info("World generated", **world.summary())
        return world


def generate_world(
    seed: Optional[Seed] = None, config: Optional[WorldConfig] = None
) -> World:
    """Convenience wrapper around WorldGenerator."""
    return WorldGenerator(config, seed).generate()
