"""FastAPI main application."""

import logging
import threading
import time
import uuid
from collections import OrderedDict
from datetime import datetime, timezone
from typing import List, Optional, Tuple

import structlog
from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from ..config import settings
from ..core.heightmap_generator import TerrainConfig
from ..core.hydrology import HydrologyOptions
from ..core.name_generator import parse_game_mode
from ..core.orography import OrographyOptions, elevation_feet
from ..core.pathfinding import PathOptions, straight_line
from ..core.routes import TrailDifficulty, path_length
from ..core.settlements import Settlement
from ..core.snapshot import WorldSnapshot, to_snapshot
from ..core.world import World, WorldConfig, WorldGenerator


def configure_logging(level: str = "INFO", fmt: str = "json") -> None:
    """Configure stdlib logging and structlog."""
    logging.basicConfig(format="%(message)s", level=level.upper())
    renderer = (
        structlog.processors.JSONRenderer()
        if fmt == "json"
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


configure_logging(settings.log_level, settings.log_format)

logger = structlog.get_logger()

# Initialize FastAPI app
app = FastAPI(
    title="Mountain World API",
    description="Procedural mountain terrain, lakes, peaks and trails",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class WorldStore:
    """In-memory cache of generated worlds, least recently used evicted first."""

    def __init__(self, capacity: int):
        self.capacity = capacity
        self._worlds: "OrderedDict[str, Tuple[World, datetime, float]]" = OrderedDict()
        self._lock = threading.Lock()

    def add(self, world: World, elapsed: float) -> str:
        world_id = str(uuid.uuid4())
        with self._lock:
            self._worlds[world_id] = (world, datetime.now(timezone.utc), elapsed)
            while len(self._worlds) > self.capacity:
                evicted, _ = self._worlds.popitem(last=False)
                logger.info("World evicted from cache", world_id=evicted)
        return world_id

    def get(self, world_id: str) -> Tuple[World, datetime, float]:
        with self._lock:
            entry = self._worlds.get(world_id)
            if entry is not None:
                self._worlds.move_to_end(world_id)
        if entry is None:
            raise HTTPException(status_code=404, detail="World not found")
        return entry

    def clear(self) -> None:
        with self._lock:
            self._worlds.clear()

    def __len__(self) -> int:
        return len(self._worlds)


store = WorldStore(settings.max_cached_worlds)


# Request/Response models
class WorldGenerationRequest(BaseModel):
    """Request to generate a new world."""

    seed: Optional[str] = Field(None, description="Seed for reproducible generation")
    size: int = Field(settings.grid_size, ge=16, le=settings.max_grid_size, description="Grid edge length")
    lake_count_min: int = Field(settings.lake_count_min, ge=0, le=20, description="Minimum lakes")
    lake_count_max: int = Field(settings.lake_count_max, ge=0, le=20, description="Maximum lakes")
    max_peaks: int = Field(settings.max_peaks, ge=0, le=50, description="Peaks to keep")
    game_mode: str = Field(settings.game_mode, description="Naming theme (earth or futuristic)")
    with_settlements: bool = Field(True, description="Also place campsites")


class LakeInfo(BaseModel):
    name: str
    x: int
    y: int
    base_size: int
    shape: str


class PeakInfo(BaseModel):
    name: str
    x: int
    y: int
    height: float
    elevation_feet: int


class SettlementInfo(BaseModel):
    id: int
    name: str
    x: float
    y: float
    elevation: int


class WorldSummary(BaseModel):
    """Summary information about a generated world."""

    id: str
    seed: str
    size: int
    min_height: float
    max_height: float
    lakes: List[LakeInfo]
    peaks: List[PeakInfo]
    settlements: List[SettlementInfo]
    created_at: datetime
    generation_time_seconds: float


class TerrainSample(BaseModel):
    """Height and slope at a cell."""

    x: int
    y: int
    height: float
    gradient_x: float
    gradient_y: float
    lake: Optional[str] = None


class PathRequest(BaseModel):
    start: Tuple[int, int]
    end: Tuple[int, int]
    fallback: bool = Field(False, description="Return a direct connector when unreachable")


class PathResponse(BaseModel):
    status: str
    cells: List[Tuple[int, int]]
    cost: float
    length: float
    expanded: int
    budget_exhausted: bool
    direct: bool = False


class RouteRequest(BaseModel):
    origin: str = Field(description="Campsite name")
    destination: str = Field(description="Campsite name")
    difficulty: TrailDifficulty = TrailDifficulty.MODERATE


class RouteResponse(BaseModel):
    name: str
    origin: str
    destination: str
    difficulty: TrailDifficulty
    status: str
    miles: float
    cells: List[Tuple[int, int]]


class SettlementIn(BaseModel):
    name: str
    x: float
    y: float


class DayHikeRequest(BaseModel):
    settlements: Optional[List[SettlementIn]] = Field(
        None, description="Campsites to plan for; defaults to the world's own"
    )


class DayHikeInfo(BaseModel):
    name: str
    origin: str
    destination: str
    kind: str
    distance: float
    miles: float
    cells: List[Tuple[int, int]]


def _summary(world_id: str, world: World, created_at: datetime, elapsed: float) -> WorldSummary:
    return WorldSummary(
        id=world_id,
        seed=world.seed,
        size=world.size,
        min_height=world.heightmap.min_height(),
        max_height=world.heightmap.max_height(),
        lakes=[
            LakeInfo(name=l.name, x=l.x, y=l.y, base_size=l.base_size, shape=l.shape.value)
            for l in world.lakes
        ],
        peaks=[
            PeakInfo(name=p.name, x=p.x, y=p.y, height=p.height, elevation_feet=p.elevation_feet)
            for p in world.peaks
        ],
        settlements=[
            SettlementInfo(id=s.id, name=s.name, x=s.x, y=s.y, elevation=s.elevation)
            for s in world.settlements
        ],
        created_at=created_at,
        generation_time_seconds=elapsed,
    )


def _check_cell(world: World, x: int, y: int) -> None:
    if not world.heightmap.in_bounds(x, y):
        raise HTTPException(
            status_code=400,
            detail=f"Cell ({x}, {y}) is outside the {world.size}x{world.size} grid",
        )


# Event handlers
@app.on_event("startup")
async def startup_event():
    logger.info("Starting Mountain World API")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Shutting down Mountain World API")
    store.clear()


# API endpoints
@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Mountain World API",
        "version": "0.1.0",
        "status": "running",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "cached_worlds": len(store)}


@app.post("/worlds", response_model=WorldSummary)
def generate_world(request: WorldGenerationRequest):
    """
    Generate a world synchronously and cache it.

    Generation is a single pass over a few tens of thousands of cells, so
    the response carries the finished world summary.
    """
    logger.info("World generation requested", request=request.model_dump())

    try:
        config = WorldConfig(
            terrain=TerrainConfig(size=request.size),
            hydrology=HydrologyOptions(
                lake_count_range=(request.lake_count_min, request.lake_count_max)
            ),
            orography=OrographyOptions(max_count=request.max_peaks),
            paths=PathOptions(
                max_expansions=settings.path_max_expansions or None,
                time_budget=settings.path_time_budget_seconds or None,
            ),
            game_mode=parse_game_mode(request.game_mode),
        )
        started = time.perf_counter()
        world = WorldGenerator(config, request.seed).generate(
            with_settlements=request.with_settlements
        )
        elapsed = time.perf_counter() - started
    except ValueError as e:
        logger.error("World generation failed", error=str(e))
        raise HTTPException(status_code=400, detail=str(e))

    world_id = store.add(world, elapsed)
    logger.info("World generation completed", world_id=world_id, seconds=round(elapsed, 3))
    _, created_at, _ = store.get(world_id)
    return _summary(world_id, world, created_at, elapsed)


@app.get("/worlds/{world_id}", response_model=WorldSummary)
async def get_world(world_id: str):
    """Get world details."""
    world, created_at, elapsed = store.get(world_id)
    return _summary(world_id, world, created_at, elapsed)


@app.get("/worlds/{world_id}/terrain", response_model=TerrainSample)
async def get_terrain(world_id: str, x: int = Query(...), y: int = Query(...)):
    """Height and slope at a cell."""
    world, _, _ = store.get(world_id)
    _check_cell(world, x, y)
    lake = world.lake_at(x, y)
    return TerrainSample(
        x=x,
        y=y,
        height=world.height_at(x, y),
        gradient_x=world.gradient_x(x, y),
        gradient_y=world.gradient_y(x, y),
        lake=lake.name if lake else None,
    )


@app.post("/worlds/{world_id}/paths", response_model=PathResponse)
def find_path(world_id: str, request: PathRequest):
    """Terrain-aware path between two cells."""
    world, _, _ = store.get(world_id)
    _check_cell(world, *request.start)
    _check_cell(world, *request.end)

    result = world.find_path(request.start, request.end)
    cells = list(result.cells)
    direct = False
    if not result.found and request.fallback:
        cells = straight_line(request.start, request.end)
        direct = True

    return PathResponse(
        status=result.status.value,
        cells=cells,
        cost=result.cost,
        length=path_length(cells),
        expanded=result.expanded,
        budget_exhausted=result.budget_exhausted,
        direct=direct,
    )


@app.post("/worlds/{world_id}/routes", response_model=RouteResponse)
def plan_route(world_id: str, request: RouteRequest):
    """Trail between two of the world's campsites."""
    world, _, _ = store.get(world_id)
    by_name = {s.name: s for s in world.settlements}
    missing = [n for n in (request.origin, request.destination) if n not in by_name]
    if missing:
        raise HTTPException(status_code=404, detail=f"Campsite not found: {', '.join(missing)}")

    route = world.plan_route(by_name[request.origin], by_name[request.destination], request.difficulty)
    return RouteResponse(
        name=f"{route.origin} to {route.destination}",
        origin=route.origin,
        destination=route.destination,
        difficulty=route.difficulty,
        status=route.status.value,
        miles=route.miles,
        cells=list(route.cells),
    )


@app.post("/worlds/{world_id}/day-hikes", response_model=List[DayHikeInfo])
def get_day_hikes(world_id: str, request: Optional[DayHikeRequest] = None):
    """Day hikes from campsites to nearby lakes and peaks."""
    world, _, _ = store.get(world_id)

    settlements = None
    if request is not None and request.settlements is not None:
        settlements = []
        for index, s in enumerate(request.settlements):
            _check_cell(world, int(round(s.x)), int(round(s.y)))
            settlements.append(
                Settlement(
                    id=index,
                    name=s.name,
                    x=s.x,
                    y=s.y,
                    elevation=elevation_feet(world.height_at(s.x, s.y)),
                )
            )

    return [
        DayHikeInfo(
            name=hike.name,
            origin=hike.origin,
            destination=hike.destination,
            kind=hike.kind,
            distance=hike.distance,
            miles=hike.miles,
            cells=list(hike.cells),
        )
        for hike in world.day_hikes(settlements)
    ]


@app.get("/worlds/{world_id}/snapshot", response_model=WorldSnapshot)
async def get_snapshot(world_id: str):
    """Full world state: row-major heights plus named features."""
    world, _, _ = store.get(world_id)
    return to_snapshot(world)


def main() -> None:
    import uvicorn

    uvicorn.run(app, host=settings.api_host, port=settings.api_port)


if __name__ == "__main__":
    main()
