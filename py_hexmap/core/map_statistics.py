"""Summary statistics over a generated hex map."""

from dataclasses import dataclass, field
from typing import Dict, Optional

import numpy as np

from .biomes import TERRAIN_NAMES, TerrainType
from .erosion import count_erodible
from .hex_grid import NO_RIVER, HexGrid
from .hydrology import iter_river_origins


@dataclass
class MapStatistics:
    """Cell counts and ranges for one map."""

    total_cells: int
    land_cells: int
    underwater_cells: int
    river_cells: int
    river_origins: int
    erodible_cells: int
    elevation_range: tuple
    terrain_distribution: Dict[str, int] = field(default_factory=dict)
    mean_moisture: Optional[float] = None

    @property
    def land_fraction(self) -> float:
        return self.land_cells / self.total_cells if self.total_cells else 0.0


def summarize_map(grid: HexGrid, moisture: Optional[np.ndarray] = None) -> MapStatistics:
    """
    Count land, water, river and terrain cells.

    Args:
        grid: Generated grid
        moisture: Optional final climate moisture

    Returns:
        MapStatistics for the grid
    """
    underwater = grid.underwater_mask()
    has_river = (grid.incoming_river != NO_RIVER) | (grid.outgoing_river != NO_RIVER)
    counts = np.bincount(grid.terrain_type_index, minlength=len(TerrainType))

    return MapStatistics(
        total_cells=grid.cell_count,
        land_cells=int(np.count_nonzero(~underwater)),
        underwater_cells=int(np.count_nonzero(underwater)),
        river_cells=int(np.count_nonzero(has_river)),
        river_origins=sum(1 for _ in iter_river_origins(grid)),
        erodible_cells=count_erodible(grid),
        elevation_range=(int(grid.elevation.min()), int(grid.elevation.max())),
        terrain_distribution={
            TERRAIN_NAMES[t]: int(counts[t]) for t in TerrainType
        },
        mean_moisture=float(moisture.mean()) if moisture is not None else None,
    )
