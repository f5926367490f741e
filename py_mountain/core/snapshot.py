"""
JSON snapshot of a generated world.

The heightmap is stored as a dense row-major list of floats next to the
named lakes, peaks and campsites. Lake outline parameters are included so a
restored world answers lake membership exactly like the generated one.
"""

from typing import List, Optional

import numpy as np
from pydantic import BaseModel, Field

from .heightmap_generator import Heightmap, TerrainConfig
from .hydrology import Lake, LakeShape
from .orography import Peak
from .settlements import Settlement
from .world import World, WorldConfig

SNAPSHOT_VERSION = 1


class LakeRecord(BaseModel):
    """Serialized lake."""

    x: int
    y: int
    base_size: int
    max_radius: int
    shape: LakeShape
    name: str
    stretch: float = 1.0
    angle: float = 0.0
    jitter: Optional[List[List[float]]] = None


class PeakRecord(BaseModel):
    """Serialized peak."""

    x: int
    y: int
    height: float
    name: str


class SettlementRecord(BaseModel):
    """Serialized campsite."""

    id: int
    name: str
    x: float
    y: float
    elevation: int


class WorldSnapshot(BaseModel):
    """Complete world state."""

    version: int = Field(default=SNAPSHOT_VERSION, description="Snapshot format version")
    seed: str
    size: int = Field(gt=0, description="Grid edge length")
    heights: List[float] = Field(description="Row-major heights, size * size values")
    lakes: List[LakeRecord] = Field(default_factory=list)
    peaks: List[PeakRecord] = Field(default_factory=list)
    settlements: List[SettlementRecord] = Field(default_factory=list)


def to_snapshot(world: World) -> WorldSnapshot:
    """Serialize a world."""
    return WorldSnapshot(
        seed=world.seed,
        size=world.size,
        heights=world.heightmap.heights.ravel().tolist(),
        lakes=[
            LakeRecord(
                x=lake.x,
                y=lake.y,
                base_size=lake.base_size,
                max_radius=lake.max_radius,
                shape=lake.shape,
                name=lake.name,
                stretch=lake.stretch,
                angle=lake.angle,
                jitter=lake.jitter.tolist() if lake.jitter is not None else None,
            )
            for lake in world.lakes
        ],
        peaks=[
            PeakRecord(x=peak.x, y=peak.y, height=peak.height, name=peak.name)
            for peak in world.peaks
        ],
        settlements=[
            SettlementRecord(
                id=s.id, name=s.name, x=s.x, y=s.y, elevation=s.elevation
            )
            for s in world.settlements
        ],
    )


def _lake_from_record(record: LakeRecord) -> Lake:
    jitter = None
    if record.jitter is not None:
        jitter = np.array(record.jitter, dtype=np.float64)
        jitter.flags.writeable = False
    return Lake(
        x=record.x,
        y=record.y,
        base_size=record.base_size,
        max_radius=record.max_radius,
        shape=record.shape,
        name=record.name,
        stretch=record.stretch,
        angle=record.angle,
        jitter=jitter,
    )


def from_snapshot(
    snapshot: WorldSnapshot, config: Optional[WorldConfig] = None
) -> World:
    """
    Restore a world from a snapshot.

    Raises:
        ValueError: If the height list does not match the grid size
    """
    size = snapshot.size
    if len(snapshot.heights) != size * size:
        raise ValueError(
            f"Snapshot has {len(snapshot.heights)} heights, expected {size * size}"
        )

    heightmap = Heightmap(np.array(snapshot.heights, dtype=np.float64).reshape(size, size))
    heightmap.freeze()

    config = config or WorldConfig(terrain=TerrainConfig(size=size))
    return World(
        seed=snapshot.seed,
        config=config,
        heightmap=heightmap,
        lakes=tuple(_lake_from_record(record) for record in snapshot.lakes),
        peaks=tuple(
            Peak(x=p.x, y=p.y, height=p.height, name=p.name) for p in snapshot.peaks
        ),
        settlements=tuple(
            Settlement(id=s.id, name=s.name, x=s.x, y=s.y, elevation=s.elevation)
            for s in snapshot.settlements
        ),
    )
