"""
River generation and lake formation.

This module implements:
- Weighted selection of river origins from moisture and height
- Single-thread river growth downhill, with meandering across level ground
- Termination in the sea, a merge into another river, or a new lake
- Optional lakes carved mid-river in local hollows
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterator, List, Optional

import numpy as np
import structlog

from .alea_prng import AleaPRNG
from .hex_grid import DIRECTIONS, HexDirection, HexGrid

if TYPE_CHECKING:
    from ..config.generator_settings import MapGeneratorOptions

logger = structlog.get_logger()

TERMINUS_OCEAN = "ocean"
TERMINUS_LAKE = "lake"
TERMINUS_MERGE = "merge"
TERMINUS_END = "end"


@dataclass
class HydrologyOptions:
    """River generation options."""

    water_level: int = 3
    elevation_maximum: int = 8
    river_percentage: int = 10
    extra_lake_probability: float = 0.25

    @classmethod
    def from_generator_options(cls, options: "MapGeneratorOptions") -> "HydrologyOptions":
        return cls(
            water_level=options.water_level,
            elevation_maximum=options.elevation_maximum,
            river_percentage=options.river_percentage,
            extra_lake_probability=options.extra_lake_probability,
        )


@dataclass
class River:
    """
    One grown river.

    ``cells`` runs from the origin to the cell the river ends in: the first
    underwater cell, the new lake, a dead end whose lower neighbors are all
    taken, or the cell that flows into another river (``mouth`` is then that
    river's cell). ``length`` is what the river
    charges against the river budget.
    """

    origin: int
    cells: List[int]
    terminus: str
    length: int
    mouth: int


@dataclass
class RiverResult:
    """Rivers created by one run and how much of the budget they used."""

    river_budget: int
    remaining_budget: int
    rivers: List[River] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


def iter_river_origins(grid: HexGrid) -> Iterator[int]:
    """Cells with outgoing but no incoming river."""
    for cell in range(grid.cell_count):
        if grid.has_outgoing_river(cell) and not grid.has_incoming_river(cell):
            yield cell


def trace_river(grid: HexGrid, origin: int) -> List[int]:
    """
    Follow committed outgoing flow from ``origin``.

    Returns:
        Every cell on the flow chain, ending with the first cell that has no
        outgoing river
    """
    path = [origin]
    seen = {origin}
    cell = origin
    while grid.has_outgoing_river(cell):
        cell = grid.get_neighbor(cell, HexDirection(int(grid.outgoing_river[cell])))
        if cell in seen:
            raise ValueError(f"River from cell {origin} loops back into cell {cell}")
        seen.add(cell)
        path.append(cell)
    return path


class RiverSynthesizer:
    """Grows rivers from weighted origin candidates until the river budget is used."""

    def __init__(self, grid: HexGrid, prng: AleaPRNG, options: Optional[HydrologyOptions] = None):
        """
        Initialize river synthesizer.

        Args:
            grid: HexGrid after land creation and erosion
            prng: Run PRNG
            options: River generation options
        """
        self.grid = grid
        self.prng = prng
        self.options = options or HydrologyOptions()
        self._flow_directions: List[HexDirection] = []

    def collect_origin_candidates(self, moisture: np.ndarray) -> List[int]:
        """
        Weight land cells by moisture and height above water.

        A cell appears up to four times, so wetter, higher cells are more
        likely to be picked.
        """
        grid = self.grid
        water_level = self.options.water_level
        span = self.options.elevation_maximum - water_level

        candidates = []
        for cell in range(grid.cell_count):
            if grid.is_underwater(cell):
                continue
            weight = moisture[cell] * (int(grid.elevation[cell]) - water_level) / span
            if weight > 0.75:
                candidates.append(cell)
                candidates.append(cell)
            if weight > 0.5:
                candidates.append(cell)
            if weight > 0.25:
                candidates.append(cell)
        return candidates

    def create_rivers(self, moisture: np.ndarray, land_cells: int) -> RiverResult:
        """
        Create rivers until the budget of river cells is spent.

        Args:
            moisture: Final climate moisture per cell
            land_cells: Land cell count from land sculpting

        Returns:
            RiverResult with the grown rivers
        """
        grid = self.grid
        origins = self.collect_origin_candidates(moisture)
        river_budget = round(land_cells * self.options.river_percentage / 100)
        result = RiverResult(river_budget=river_budget, remaining_budget=river_budget)

        logger.info("Creating rivers", river_budget=river_budget, candidates=len(origins))

        budget = river_budget
        while budget > 0 and origins:
            index = self.prng.range(0, len(origins))
            origin = origins[index]
            origins[index] = origins[-1]
            origins.pop()

            if grid.has_river(origin) or not self.is_valid_origin(origin):
                continue

            river = self.create_river(origin)
            if river is not None:
                budget -= river.length
                result.rivers.append(river)

        result.remaining_budget = budget
        if budget > 0:
            message = f"Failed to use up {budget} river budget."
            logger.warning(message, remaining_budget=budget)
            result.warnings.append(message)

        logger.info("Rivers created", count=len(result.rivers))
        return result

    def is_valid_origin(self, cell: int) -> bool:
        """Rivers do not start next to water or another river."""
        grid = self.grid
        for neighbor in grid.cell_neighbors[cell]:
            if grid.has_river(neighbor) or grid.is_underwater(neighbor):
                return False
        return True

    def create_river(self, origin: int) -> Optional[River]:
        """
        Grow one river from ``origin``.

        Returns:
            The river, or None when the origin had nowhere to flow
        """
        grid = self.grid
        flow_directions = self._flow_directions
        cells = [origin]
        length = 1
        cell = origin
        direction = HexDirection.NE

        while not grid.is_underwater(cell):
            elevation = int(grid.elevation[cell])
            min_neighbor_elevation = None
            flow_directions.clear()

            for d in DIRECTIONS:
                neighbor = grid.get_neighbor(cell, d)
                if neighbor is None:
                    continue

                neighbor_elevation = int(grid.elevation[neighbor])
                if min_neighbor_elevation is None or neighbor_elevation < min_neighbor_elevation:
                    min_neighbor_elevation = neighbor_elevation

                if neighbor == origin or grid.has_incoming_river(neighbor):
                    continue

                delta = neighbor_elevation - elevation
                if delta > 0:
                    continue

                # The neighbor starts another river: join it
                if grid.has_outgoing_river(neighbor):
                    grid.set_outgoing_river(cell, d)
                    return River(origin, cells, TERMINUS_MERGE, length, mouth=neighbor)

                if delta < 0:
                    flow_directions.extend((d, d, d))
                if length == 1 or (d != direction.next2() and d != direction.previous2()):
                    flow_directions.append(d)
                flow_directions.append(d)

            if not flow_directions:
                if length == 1:
                    return None

                if min_neighbor_elevation >= elevation:
                    grid.water_level[cell] = min_neighbor_elevation
                    if min_neighbor_elevation == elevation:
                        grid.elevation[cell] = min_neighbor_elevation - 1
                    return River(origin, cells, TERMINUS_LAKE, length, mouth=cell)
                # Lower ground exists but is already taken by other rivers
                return River(origin, cells, TERMINUS_END, length, mouth=cell)

            direction = flow_directions[self.prng.range(0, len(flow_directions))]
            grid.set_outgoing_river(cell, direction)
            length += 1

            if (
                min_neighbor_elevation >= elevation
                and self.prng.chance(self.options.extra_lake_probability)
            ):
                grid.water_level[cell] = elevation
                grid.elevation[cell] = elevation - 1

            cell = grid.get_neighbor(cell, direction)
            cells.append(cell)

        return River(origin, cells, TERMINUS_OCEAN, length, mouth=cell)
