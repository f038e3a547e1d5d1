"""Hexagonal grid store for map generation.

Cells are addressed by integer index (row-major over offset coordinates) and
every per-cell field lives in its own NumPy array. Neighbors are stored as
index slots, one per direction, with -1 marking the map boundary.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, List, Optional

import numpy as np
import structlog

from .errors import RiverStateError

logger = structlog.get_logger()

NO_RIVER = -1
NO_NEIGHBOR = -1


class HexDirection(IntEnum):
    """The six hex directions, clockwise from north-east."""

    NE = 0
    E = 1
    SE = 2
    SW = 3
    W = 4
    NW = 5

    def opposite(self) -> "HexDirection":
        return HexDirection((self + 3) % 6)

    def previous(self) -> "HexDirection":
        return HexDirection((self - 1) % 6)

    def next(self) -> "HexDirection":
        return HexDirection((self + 1) % 6)

    def previous2(self) -> "HexDirection":
        return HexDirection((self - 2) % 6)

    def next2(self) -> "HexDirection":
        return HexDirection((self + 2) % 6)


DIRECTIONS = tuple(HexDirection)


@dataclass(frozen=True)
class HexCoordinates:
    """Axial hex coordinates. The implicit third axis is ``y = -x - z``."""

    x: int
    z: int

    @property
    def y(self) -> int:
        return -self.x - self.z

    @classmethod
    def from_offset_coordinates(cls, x: int, z: int) -> "HexCoordinates":
        return cls(x - z // 2, z)

    def distance_to(self, other: "HexCoordinates") -> int:
        return (
            abs(self.x - other.x) + abs(self.y - other.y) + abs(self.z - other.z)
        ) // 2

    def __str__(self) -> str:
        return f"({self.x}, {self.y}, {self.z})"


class HexGrid:
    """
    Fixed-size hex map of ``cell_count_x * cell_count_z`` cells.

    The generator owns nothing here: it mutates these arrays in place and
    downstream renderers read them back through ``to_arrays()``.
    """

    def __init__(self, cell_count_x: int = 0, cell_count_z: int = 0):
        self.cell_count_x = 0
        self.cell_count_z = 0
        self._allocate(0, 0)
        if cell_count_x or cell_count_z:
            self.create_map(cell_count_x, cell_count_z)

    def create_map(self, x: int, z: int) -> None:
        """
        (Re)build a flat map of ``x`` by ``z`` cells.

        Args:
            x: Cells per row
            z: Number of rows
        """
        if x <= 0 or z <= 0:
            raise ValueError(f"Unsupported map size {x}x{z}")

        self._allocate(x, z)
        logger.debug("Created hex grid", cells_x=x, cells_z=z, cells=self.cell_count)

    def _allocate(self, x: int, z: int) -> None:
        self.cell_count_x = x
        self.cell_count_z = z
        n_cells = x * z

        self.elevation = np.zeros(n_cells, dtype=np.int32)
        self.water_level = np.zeros(n_cells, dtype=np.int32)
        self.terrain_type_index = np.zeros(n_cells, dtype=np.int8)
        self.incoming_river = np.full(n_cells, NO_RIVER, dtype=np.int8)
        self.outgoing_river = np.full(n_cells, NO_RIVER, dtype=np.int8)

        # Search bookkeeping, owned by whichever frontier search is running
        self.search_phase = np.zeros(n_cells, dtype=np.int64)
        self.distance = np.zeros(n_cells, dtype=np.int32)
        self.search_heuristic = np.zeros(n_cells, dtype=np.int32)

        offset_x = np.tile(np.arange(x, dtype=np.int32), z)
        offset_z = np.repeat(np.arange(z, dtype=np.int32), x)
        self.coord_x = offset_x - offset_z // 2
        self.coord_z = offset_z

        self.neighbors = self._build_neighbors(x, z)
        self.cell_neighbors: List[List[int]] = [
            [int(n) for n in row if n != NO_NEIGHBOR] for row in self.neighbors
        ]

    @staticmethod
    def _build_neighbors(x: int, z: int) -> np.ndarray:
        """Link each cell to its W, SW and SE neighbors and mirror the links back."""
        neighbors = np.full((x * z, 6), NO_NEIGHBOR, dtype=np.int32)

        def link(cell: int, direction: HexDirection, other: int) -> None:
            neighbors[cell, direction] = other
            neighbors[other, direction.opposite()] = cell

        i = 0
        for row in range(z):
            for col in range(x):
                if col > 0:
                    link(i, HexDirection.W, i - 1)
                if row > 0:
                    if row & 1 == 0:
                        link(i, HexDirection.SE, i - x)
                        if col > 0:
                            link(i, HexDirection.SW, i - x - 1)
                    else:
                        link(i, HexDirection.SW, i - x)
                        if col < x - 1:
                            link(i, HexDirection.SE, i - x + 1)
                i += 1

        return neighbors

    @property
    def cell_count(self) -> int:
        return self.cell_count_x * self.cell_count_z

    def get_cell_index(self, x: int, z: int) -> int:
        """Index of the cell at offset coordinates (x, z)."""
        if not (0 <= x < self.cell_count_x and 0 <= z < self.cell_count_z):
            raise IndexError(
                f"Offset coordinates ({x}, {z}) outside "
                f"{self.cell_count_x}x{self.cell_count_z} map"
            )
        return x + z * self.cell_count_x

    def get_coordinates(self, cell: int) -> HexCoordinates:
        """Axial coordinates of ``cell``."""
        z, x = divmod(int(cell), self.cell_count_x)
        return HexCoordinates.from_offset_coordinates(x, z)

    def get_neighbor(self, cell: int, direction: HexDirection) -> Optional[int]:
        neighbor = self.neighbors[cell, direction]
        if neighbor == NO_NEIGHBOR:
            return None
        return int(neighbor)

    def distance_between(self, a: int, b: int) -> int:
        """Hex distance between two cells."""
        dx = int(self.coord_x[a]) - int(self.coord_x[b])
        dz = int(self.coord_z[a]) - int(self.coord_z[b])
        return (abs(dx) + abs(dx + dz) + abs(dz)) // 2

    def is_underwater(self, cell: int) -> bool:
        return bool(self.water_level[cell] > self.elevation[cell])

    def view_elevation(self, cell: int) -> int:
        return int(max(self.elevation[cell], self.water_level[cell]))

    def view_elevations(self) -> np.ndarray:
        """``max(elevation, water_level)`` for every cell."""
        return np.maximum(self.elevation, self.water_level)

    def underwater_mask(self) -> np.ndarray:
        return self.water_level > self.elevation

    # Rivers

    def has_incoming_river(self, cell: int) -> bool:
        return bool(self.incoming_river[cell] != NO_RIVER)

    def has_outgoing_river(self, cell: int) -> bool:
        return bool(self.outgoing_river[cell] != NO_RIVER)

    def has_river(self, cell: int) -> bool:
        return self.has_incoming_river(cell) or self.has_outgoing_river(cell)

    def has_river_begin_or_end(self, cell: int) -> bool:
        return self.has_incoming_river(cell) != self.has_outgoing_river(cell)

    def is_valid_river_destination(self, cell: int, neighbor: int) -> bool:
        """Water may flow level or downhill, or out of a lake at the neighbor's height."""
        return bool(
            self.elevation[cell] >= self.elevation[neighbor]
            or self.water_level[cell] == self.elevation[neighbor]
        )

    def set_outgoing_river(self, cell: int, direction: HexDirection) -> int:
        """
        Commit a flow edge from ``cell`` towards ``direction``.

        Args:
            cell: Source cell index
            direction: Flow direction

        Returns:
            Index of the neighbor that now has the incoming river

        Raises:
            RiverStateError: If the edge is off the map, flows uphill, or
                either end already holds a different river
        """
        direction = HexDirection(direction)
        neighbor = self.get_neighbor(cell, direction)
        if neighbor is None:
            raise RiverStateError(f"Cell {cell} has no neighbor towards {direction.name}")
        if not self.is_valid_river_destination(cell, neighbor):
            raise RiverStateError(
                f"River from cell {cell} to {neighbor} would flow uphill"
            )
        if self.outgoing_river[cell] not in (NO_RIVER, direction):
            raise RiverStateError(f"Cell {cell} already has an outgoing river")
        if self.incoming_river[cell] == direction:
            raise RiverStateError(
                f"Cell {cell} already receives a river from {direction.name}"
            )
        opposite = direction.opposite()
        if self.incoming_river[neighbor] not in (NO_RIVER, opposite):
            raise RiverStateError(f"Cell {neighbor} already has an incoming river")

        self.outgoing_river[cell] = direction
        self.incoming_river[neighbor] = opposite
        return neighbor

    def remove_outgoing_river(self, cell: int) -> None:
        if not self.has_outgoing_river(cell):
            return
        neighbor = self.get_neighbor(cell, HexDirection(int(self.outgoing_river[cell])))
        self.outgoing_river[cell] = NO_RIVER
        if neighbor is not None:
            self.incoming_river[neighbor] = NO_RIVER

    def remove_incoming_river(self, cell: int) -> None:
        if not self.has_incoming_river(cell):
            return
        neighbor = self.get_neighbor(cell, HexDirection(int(self.incoming_river[cell])))
        self.incoming_river[cell] = NO_RIVER
        if neighbor is not None:
            self.outgoing_river[neighbor] = NO_RIVER

    def remove_river(self, cell: int) -> None:
        self.remove_outgoing_river(cell)
        self.remove_incoming_river(cell)

    def reset_search_state(self) -> None:
        """Zero the search bookkeeping so no phase stamps leak into the next run."""
        self.search_phase.fill(0)
        self.distance.fill(0)
        self.search_heuristic.fill(0)

    def to_arrays(self) -> Dict[str, np.ndarray]:
        """Copies of the fields downstream renderers consume."""
        return {
            "elevation": self.elevation.copy(),
            "water_level": self.water_level.copy(),
            "terrain_type_index": self.terrain_type_index.copy(),
            "incoming_river": self.incoming_river.copy(),
            "outgoing_river": self.outgoing_river.copy(),
        }
