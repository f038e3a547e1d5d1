"""FastAPI main application."""

from typing import Dict, List, Optional, Tuple

import structlog
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from .. import __version__
from ..config import MapGeneratorOptions, settings
from ..core.biomes import TERRAIN_NAMES, TerrainType
from ..core.errors import MapGenerationError, RegionPartitionError
from ..core.map_generator import HexMapGenerator
from ..core.map_statistics import summarize_map
from ..utils.logging_config import configure_logging

# Configure logging
configure_logging(settings.log_level, settings.log_format)

logger = structlog.get_logger()

# Initialize FastAPI app
app = FastAPI(
    title="Hex Map Generator API",
    description="Procedural hexagonal terrain, climate and river generation",
    version=__version__,
    debug=settings.debug,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request/Response models
class MapGenerationRequest(BaseModel):
    """Request to generate a new map."""

    width: int = Field(settings.default_map_width, ge=1, le=settings.max_map_width, description="Cells per row")
    height: int = Field(settings.default_map_height, ge=1, le=settings.max_map_height, description="Number of rows")
    options: MapGeneratorOptions = Field(default_factory=MapGeneratorOptions)
    include_cells: bool = Field(False, description="Return per-cell arrays")


class RegionInfo(BaseModel):
    """Land region rectangle in offset coordinates (max exclusive)."""

    x_min: int
    x_max: int
    z_min: int
    z_max: int


class RiverInfo(BaseModel):
    """Information about a river."""

    origin: int
    mouth: int
    terminus: str
    length: int
    cell_count: int


class MapStatisticsResponse(BaseModel):
    """Summary statistics about a generated map."""

    total_cells: int
    land_cells: int
    underwater_cells: int
    river_cells: int
    river_origins: int
    erodible_cells: int
    elevation_range: Tuple[int, int]
    terrain_distribution: Dict[str, int]
    mean_moisture: Optional[float] = None


class CellArrays(BaseModel):
    """Per-cell output, indexed by cell index (row-major offset coordinates)."""

    elevation: List[int]
    water_level: List[int]
    terrain_type_index: List[int]
    incoming_river: List[int]
    outgoing_river: List[int]
    moisture: List[float]


class MapGenerationResponse(BaseModel):
    """Result of a generation run."""

    seed: int
    width: int
    height: int
    generation_time_seconds: float
    statistics: MapStatisticsResponse
    regions: List[RegionInfo]
    rivers: List[RiverInfo]
    warnings: List[str]
    cells: Optional[CellArrays] = None


# API endpoints
@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Hex Map Generator API",
        "version": __version__,
        "status": "running"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/terrain-types")
async def list_terrain_types():
    """Terrain indices written to ``terrain_type_index``."""
    return [{"index": int(t), "name": TERRAIN_NAMES[t]} for t in TerrainType]


@app.post("/maps/generate", response_model=MapGenerationResponse)
def generate_map(request: MapGenerationRequest):
    """Generate a map synchronously and return its summary."""
    logger.info("Map generation requested", width=request.width, height=request.height)

    generator = HexMapGenerator()
    try:
        result = generator.generate_map(request.width, request.height, request.options)
    except RegionPartitionError as e:
        logger.warning("Map generation rejected", error=str(e))
        raise HTTPException(status_code=422, detail=str(e))
    except MapGenerationError as e:
        logger.error("Map generation failed", error=str(e))
        raise HTTPException(status_code=500, detail="Map generation failed")

    grid = generator.grid
    stats = summarize_map(grid, result.moisture)

    cells = None
    if request.include_cells:
        arrays = grid.to_arrays()
        cells = CellArrays(
            **{name: values.tolist() for name, values in arrays.items()},
            moisture=result.moisture.tolist(),
        )

    return MapGenerationResponse(
        seed=result.seed,
        width=request.width,
        height=request.height,
        generation_time_seconds=result.elapsed_seconds,
        statistics=MapStatisticsResponse(
            total_cells=stats.total_cells,
            land_cells=stats.land_cells,
            underwater_cells=stats.underwater_cells,
            river_cells=stats.river_cells,
            river_origins=stats.river_origins,
            erodible_cells=stats.erodible_cells,
            elevation_range=stats.elevation_range,
            terrain_distribution=stats.terrain_distribution,
            mean_moisture=stats.mean_moisture,
        ),
        regions=[
            RegionInfo(x_min=r.x_min, x_max=r.x_max, z_min=r.z_min, z_max=r.z_max)
            for r in result.regions
        ],
        rivers=[
            RiverInfo(
                origin=river.origin,
                mouth=river.mouth,
                terminus=river.terminus,
                length=river.length,
                cell_count=len(river.cells),
            )
            for river in result.rivers.rivers
        ],
        warnings=result.warnings,
        cells=cells,
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
