"""
Hex map generation pipeline.

Runs region partitioning, land sculpting, erosion, climate, rivers and terrain
classification over one grid, drawing every random number from a single PRNG
owned by the run.
"""

import time
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np
import structlog

from ..config.generator_settings import MapGeneratorOptions
from ..utils.random import create_prng, derive_seed
from .biomes import TerrainClassifier
from .climate import ClimateOptions, ClimateSimulator
from .erosion import ErosionResult, ErosionSimulator
from .hex_grid import HexGrid
from .hydrology import HydrologyOptions, RiverResult, RiverSynthesizer
from .land import LandResult, LandSculptor
from .priority_queue import SearchFrontier
from .regions import MapRegion, create_regions

logger = structlog.get_logger()


@dataclass
class GenerationResult:
    """Everything a run produced besides the grid fields themselves."""

    seed: int
    options: MapGeneratorOptions
    regions: List[MapRegion]
    land: LandResult
    erosion: ErosionResult
    rivers: RiverResult
    moisture: np.ndarray
    elapsed_seconds: float = 0.0
    warnings: List[str] = field(default_factory=list)


class HexMapGenerator:
    """Generates terrain, climate and rivers on a caller-owned HexGrid."""

    def __init__(self, grid: Optional[HexGrid] = None):
        self.grid = grid if grid is not None else HexGrid()

    def generate_map(
        self, x: int, z: int, options: Optional[MapGeneratorOptions] = None
    ) -> GenerationResult:
        """
        Generate a complete map of ``x`` by ``z`` cells.

        Args:
            x: Cells per row
            z: Number of rows
            options: Generation parameters; defaults when omitted

        Returns:
            GenerationResult with the seed used and per-stage outcomes

        Raises:
            MapGenerationError: On a broken precondition. The grid contents
                are undefined afterwards.
        """
        options = options or MapGeneratorOptions()
        seed = options.seed if options.use_fixed_seed else derive_seed()
        prng = create_prng(seed)
        start_time = time.perf_counter()

        log = logger.bind(seed=seed, cells_x=x, cells_z=z)
        log.info("Generating hex map")

        grid = self.grid
        grid.create_map(x, z)
        grid.water_level.fill(options.water_level)

        frontier = SearchFrontier(grid)

        regions = create_regions(
            grid.cell_count_x,
            grid.cell_count_z,
            options.map_border_x,
            options.map_border_z,
            options.region_border,
            options.region_count,
            prng,
        )

        land = LandSculptor(grid, frontier, prng, options).create_land(regions)
        erosion = ErosionSimulator(grid, prng, options.erosion_percentage).erode_land()
        moisture = ClimateSimulator(
            grid, ClimateOptions.from_generator_options(options)
        ).run()
        rivers = RiverSynthesizer(
            grid, prng, HydrologyOptions.from_generator_options(options)
        ).create_rivers(moisture, land.land_cells)
        TerrainClassifier(grid).set_terrain_types(moisture)

        grid.reset_search_state()

        elapsed = time.perf_counter() - start_time
        result = GenerationResult(
            seed=seed,
            options=options,
            regions=regions,
            land=land,
            erosion=erosion,
            rivers=rivers,
            moisture=moisture,
            elapsed_seconds=elapsed,
            warnings=land.warnings + rivers.warnings,
        )
        log.info(
            "Hex map generated",
            land_cells=land.land_cells,
            rivers=len(rivers.rivers),
            warnings=len(result.warnings),
            elapsed_seconds=round(elapsed, 3),
        )
        return result


def generate_map(
    x: int, z: int, options: Optional[MapGeneratorOptions] = None
) -> Tuple[HexGrid, GenerationResult]:
    """Generate a map on a fresh grid."""
    generator = HexMapGenerator()
    result = generator.generate_map(x, z, options)
    return generator.grid, result
