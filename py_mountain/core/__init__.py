"""
Core world generation functionality.
"""

from .alea_prng import AleaPRNG
from .noise import NoiseField
from .heightmap_generator import Heightmap, TerrainConfig, TerrainGenerator
from .hydrology import HydrologyOptions, HydrologyPlanner, Lake, LakeShape
from .orography import OrographyAnalyzer, OrographyOptions, Peak
from .pathfinding import PathOptions, PathPlanner, PathResult, PathStatus
from .world import World, WorldConfig, WorldGenerator, generate_world

__all__ = ['AleaPRNG', 'NoiseField', 'Heightmap', 'TerrainConfig', 'TerrainGenerator',
           'HydrologyOptions', 'HydrologyPlanner', 'Lake', 'LakeShape',
           'OrographyAnalyzer', 'OrographyOptions', 'Peak',
           'PathOptions', 'PathPlanner', 'PathResult', 'PathStatus',
           'World', 'WorldConfig', 'WorldGenerator', 'generate_world']
