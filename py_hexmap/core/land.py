"""
Land sculpting by randomized blob growth.

Each blob starts at a random cell inside a region and spreads outward through
the search frontier, ordered by hex distance to the start cell plus a little
random jitter, raising (or sinking) every cell it reaches until the blob's
chunk size is used up. Blobs are added until enough cells sit at or above
the water level.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List

import structlog

from .alea_prng import AleaPRNG
from .hex_grid import HexGrid
from .priority_queue import SearchFrontier
from .regions import MapRegion

if TYPE_CHECKING:
    from ..config.generator_settings import MapGeneratorOptions

logger = structlog.get_logger()

# Outer iterations before giving up on an unreachable land budget
LAND_GUARD_LIMIT = 10000


@dataclass
class LandResult:
    """Outcome of land sculpting."""

    land_cells: int
    land_budget: int
    remaining_budget: int
    iterations: int
    warnings: List[str] = field(default_factory=list)


class LandSculptor:
    """Grows raise and sink blobs until the land budget is spent."""

    def __init__(
        self,
        grid: HexGrid,
        frontier: SearchFrontier,
        prng: AleaPRNG,
        options: "MapGeneratorOptions",
    ):
        self.grid = grid
        self.frontier = frontier
        self.prng = prng
        self.options = options

    def create_land(self, regions: List[MapRegion]) -> LandResult:
        """
        Raise and sink blobs across ``regions`` until the land budget is used.

        Returns:
            LandResult with the number of land cells later stages should
            assume, reduced by any budget left over when the guard ran out
        """
        opts = self.options
        land_budget = round(self.grid.cell_count * opts.land_percentage / 100)
        result = LandResult(
            land_cells=land_budget,
            land_budget=land_budget,
            remaining_budget=land_budget,
            iterations=0,
        )
        if land_budget <= 0:
            return result

        logger.info("Creating land", land_budget=land_budget, regions=len(regions))
        budget = land_budget

        for guard in range(LAND_GUARD_LIMIT):
            result.iterations = guard + 1
            sink = self.prng.chance(opts.sink_probability)

            for region in regions:
                chunk_size = self.prng.range(opts.chunk_size_min, opts.chunk_size_max + 1)
                if sink:
                    budget = self.sink_terrain(chunk_size, budget, region)
                else:
                    budget = self.raise_terrain(chunk_size, budget, region)
                    if budget == 0:
                        result.remaining_budget = 0
                        logger.info("Land created", iterations=result.iterations)
                        return result

        result.remaining_budget = budget
        if budget > 0:
            message = f"Failed to use up {budget} land budget."
            logger.warning(message, remaining_budget=budget, iterations=result.iterations)
            result.warnings.append(message)
            result.land_cells -= budget

        return result

    def get_random_cell(self, region: MapRegion) -> int:
        x = self.prng.range(region.x_min, region.x_max)
        z = self.prng.range(region.z_min, region.z_max)
        return self.grid.get_cell_index(x, z)

    def raise_terrain(self, chunk_size: int, budget: int, region: MapRegion) -> int:
        """
        Raise one blob of up to ``chunk_size`` cells.

        Returns:
            The land budget left after cells crossing the water level
        """
        grid = self.grid
        frontier = self.frontier
        max_elevation = self.options.elevation_maximum
        water_level = self.options.water_level

        first = self._start_blob(region)
        rise = 2 if self.prng.chance(self.options.high_rise_probability) else 1
        size = 0

        while size < chunk_size and frontier.count > 0:
            current = frontier.dequeue()
            original = int(grid.elevation[current])
            new_elevation = original + rise
            if new_elevation > max_elevation:
                continue

            grid.elevation[current] = new_elevation
            if original < water_level <= new_elevation:
                budget -= 1
                if budget == 0:
                    break
            size += 1
            self._expand(current, first)

        frontier.clear()
        return budget

    def sink_terrain(self, chunk_size: int, budget: int, region: MapRegion) -> int:
        """
        Sink one blob of up to ``chunk_size`` cells.

        Returns:
            The land budget plus one unit for every cell that went under water
        """
        grid = self.grid
        frontier = self.frontier
        min_elevation = self.options.elevation_minimum
        water_level = self.options.water_level

        first = self._start_blob(region)
        sink = 2 if self.prng.chance(self.options.high_rise_probability) else 1
        size = 0

        while size < chunk_size and frontier.count > 0:
            current = frontier.dequeue()
            original = int(grid.elevation[current])
            new_elevation = original - sink
            if new_elevation < min_elevation:
                continue

            grid.elevation[current] = new_elevation
            if new_elevation < water_level <= original:
                budget += 1
            size += 1
            self._expand(current, first)

        frontier.clear()
        return budget

    def _start_blob(self, region: MapRegion) -> int:
        self.frontier.begin_phase()
        first = self.get_random_cell(region)
        self.frontier.visit(first, 0, 0)
        return first

    def _expand(self, cell: int, center: int) -> None:
        """Queue the unvisited neighbors of ``cell``, keyed by distance to ``center``."""
        grid = self.grid
        frontier = self.frontier
        jitter = self.options.jitter_probability
        for neighbor in grid.neighbors[cell]:
            if neighbor < 0 or not frontier.is_unvisited(neighbor):
                continue
            neighbor = int(neighbor)
            heuristic = 1 if self.prng.chance(jitter) else 0
            frontier.visit(neighbor, grid.distance_between(neighbor, center), heuristic)
