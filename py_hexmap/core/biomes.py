"""
Terrain classification from final moisture.

Land cells climb a fixed moisture ladder from driest to wettest; every
submerged cell gets the same terrain regardless of moisture.
"""

from enum import IntEnum

import numpy as np
import structlog

from .hex_grid import HexGrid

logger = structlog.get_logger()


class TerrainType(IntEnum):
    """Terrain texture indices consumed by the renderer."""

    SAND = 0
    GRASS = 1
    MUD = 2
    STONE = 3
    SNOW = 4


TERRAIN_NAMES = {
    TerrainType.SAND: "Sand",
    TerrainType.GRASS: "Grass",
    TerrainType.MUD: "Mud",
    TerrainType.STONE: "Stone",
    TerrainType.SNOW: "Snow",
}

SUBMERGED_TERRAIN = TerrainType.MUD

# (upper moisture bound, terrain), driest first
MOISTURE_LADDER = (
    (0.05, TerrainType.SNOW),
    (0.12, TerrainType.SAND),
    (0.28, TerrainType.STONE),
    (0.85, TerrainType.GRASS),
)
WETTEST_TERRAIN = TerrainType.MUD


def classify_terrain(is_underwater: bool, moisture: float) -> TerrainType:
    if is_underwater:
        return SUBMERGED_TERRAIN
    for upper_bound, terrain in MOISTURE_LADDER:
        if moisture < upper_bound:
            return terrain
    return WETTEST_TERRAIN


class TerrainClassifier:
    """Writes a terrain index to every cell of a grid."""

    def __init__(self, grid: HexGrid):
        self.grid = grid

    def set_terrain_types(self, moisture: np.ndarray) -> np.ndarray:
        """
        Classify every cell.

        Args:
            moisture: Final climate moisture per cell

        Returns:
            The grid's terrain index array
        """
        grid = self.grid
        underwater = grid.underwater_mask()
        for cell in range(grid.cell_count):
            grid.terrain_type_index[cell] = classify_terrain(
                bool(underwater[cell]), float(moisture[cell])
            )

        counts = np.bincount(grid.terrain_type_index, minlength=len(TerrainType))
        logger.info(
            "Terrain classified",
            distribution={TERRAIN_NAMES[t]: int(counts[t]) for t in TerrainType},
        )
        return grid.terrain_type_index
