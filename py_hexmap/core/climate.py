"""
Climate simulation for moisture and cloud transport.

This module implements a stylized cellular simulation:
- Evaporation from water and wet land into clouds
- Precipitation, plus forced rain where clouds exceed the terrain ceiling
- Cloud dispersal with a prevailing wind
- Moisture runoff to lower cells and seepage to level cells

Every cycle reads the current buffer and writes only to the next one, so all
cells of a cycle are evolved together with NumPy.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Optional

import numpy as np
import structlog

from .hex_grid import DIRECTIONS, NO_NEIGHBOR, HexDirection, HexGrid

if TYPE_CHECKING:
    from ..config.generator_settings import MapGeneratorOptions

logger = structlog.get_logger()

CLIMATE_CYCLES = 40


@dataclass
class ClimateOptions:
    """Climate simulation factors."""

    starting_moisture: float = 0.1
    evaporation_factor: float = 0.5
    precipitation_factor: float = 0.25
    runoff_factor: float = 0.25
    seepage_factor: float = 0.125
    wind_direction: HexDirection = HexDirection.NW
    wind_strength: float = 4.0
    elevation_maximum: int = 8
    cycles: int = CLIMATE_CYCLES

    @classmethod
    def from_generator_options(cls, options: "MapGeneratorOptions") -> "ClimateOptions":
        return cls(
            starting_moisture=options.starting_moisture,
            evaporation_factor=options.evaporation_factor,
            precipitation_factor=options.precipitation_factor,
            runoff_factor=options.runoff_factor,
            seepage_factor=options.seepage_factor,
            wind_direction=HexDirection(options.wind_direction),
            wind_strength=options.wind_strength,
            elevation_maximum=options.elevation_maximum,
        )


class ClimateBuffer:
    """Clouds and moisture for every cell."""

    def __init__(self, n_cells: int, moisture: float = 0.0):
        self.clouds = np.zeros(n_cells, dtype=np.float64)
        self.moisture = np.full(n_cells, moisture, dtype=np.float64)

    def clear(self) -> None:
        self.clouds.fill(0.0)
        self.moisture.fill(0.0)


class ClimateSimulator:
    """Runs the fixed-length moisture and cloud simulation over a grid."""

    def __init__(self, grid: HexGrid, options: Optional[ClimateOptions] = None):
        """
        Initialize climate simulator.

        Args:
            grid: HexGrid with elevation and water levels populated
            options: Climate factors
        """
        self.grid = grid
        self.options = options or ClimateOptions()

        n_cells = grid.cell_count
        self.climate = ClimateBuffer(n_cells, self.options.starting_moisture)
        self.next_climate = ClimateBuffer(n_cells)

    def run(
        self, cycle_callback: Optional[Callable[[int, np.ndarray], None]] = None
    ) -> np.ndarray:
        """
        Run all climate cycles.

        Args:
            cycle_callback: Called after every cycle with the cycle index and
                the moisture buffer that the next cycle will read

        Returns:
            Final per-cell moisture in [0, 1]
        """
        logger.info("Simulating climate", cycles=self.options.cycles)

        underwater = self.grid.underwater_mask()
        view_elevation = self.grid.view_elevations().astype(np.float64)

        for cycle in range(self.options.cycles):
            self.evolve_climate(underwater, view_elevation)
            self.climate, self.next_climate = self.next_climate, self.climate
            self.next_climate.clear()
            if cycle_callback is not None:
                cycle_callback(cycle, self.climate.moisture)

        moisture = self.climate.moisture.copy()
        logger.info(
            "Climate simulation completed",
            mean_moisture=float(moisture.mean()) if len(moisture) else 0.0,
        )
        return moisture

    def evolve_climate(self, underwater: np.ndarray, view_elevation: np.ndarray) -> None:
        """Advance every cell one cycle, writing into ``next_climate``."""
        opts = self.options
        neighbors = self.grid.neighbors
        current = self.climate
        target = self.next_climate

        moisture = current.moisture.copy()
        clouds = current.clouds.copy()

        # Evaporation
        evaporation = moisture * opts.evaporation_factor
        moisture = np.where(underwater, 1.0, moisture - evaporation)
        clouds += np.where(underwater, opts.evaporation_factor, evaporation)

        # Precipitation
        precipitation = clouds * opts.precipitation_factor
        clouds -= precipitation
        moisture += precipitation

        # Clouds cannot hold more than the terrain ceiling allows
        cloud_maximum = 1.0 - view_elevation / (opts.elevation_maximum + 1.0)
        overflow = np.maximum(clouds - cloud_maximum, 0.0)
        moisture += overflow
        clouds -= overflow

        # Dispersal
        main_dispersal_direction = HexDirection(opts.wind_direction).opposite()
        cloud_dispersal = clouds * (1.0 / (5.0 + opts.wind_strength))
        runoff = moisture * opts.runoff_factor * (1.0 / 6.0)
        seepage = moisture * opts.seepage_factor * (1.0 / 6.0)

        for direction in DIRECTIONS:
            neighbor = neighbors[:, direction]
            has_neighbor = neighbor != NO_NEIGHBOR
            sources = np.nonzero(has_neighbor)[0]
            destinations = neighbor[has_neighbor]

            if direction == main_dispersal_direction:
                np.add.at(target.clouds, destinations, cloud_dispersal[sources] * opts.wind_strength)
            else:
                np.add.at(target.clouds, destinations, cloud_dispersal[sources])

            delta = view_elevation[destinations] - view_elevation[sources]
            transfer = np.where(
                delta < 0,
                runoff[sources],
                np.where(delta == 0, seepage[sources], 0.0),
            )
            np.subtract.at(moisture, sources, transfer)
            np.add.at(target.moisture, destinations, transfer)

        target.moisture += moisture
        np.clip(target.moisture, 0.0, 1.0, out=target.moisture)
