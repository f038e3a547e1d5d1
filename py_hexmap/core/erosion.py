"""
Erosion simulation.

Steep cells shed one elevation unit at a time to a lower neighbor until only
the configured share of the initially erodible cells remains erodible.
"""

from dataclasses import dataclass
from typing import Dict, List

import structlog

from .alea_prng import AleaPRNG
from .hex_grid import HexGrid
from ..utils.pools import erosion_candidates

logger = structlog.get_logger()


def is_erodible(grid: HexGrid, cell: int) -> bool:
    """A cell is erodible when some neighbor sits at least two levels lower."""
    erodible_elevation = grid.elevation[cell] - 2
    elevation = grid.elevation
    for neighbor in grid.cell_neighbors[cell]:
        if elevation[neighbor] <= erodible_elevation:
            return True
    return False


def count_erodible(grid: HexGrid) -> int:
    return sum(1 for cell in range(grid.cell_count) if is_erodible(grid, cell))


@dataclass
class ErosionResult:
    """Erodible cell counts before and after erosion."""

    initial_erodible: int
    target_erodible: int
    final_erodible: int
    steps: int


class ErodibleSet:
    """Unordered cell set with O(1) random pick and swap-with-last removal."""

    def __init__(self):
        self.cells: List[int] = []
        self._positions: Dict[int, int] = {}

    def __len__(self) -> int:
        return len(self.cells)

    def __contains__(self, cell: int) -> bool:
        return cell in self._positions

    def add(self, cell: int) -> None:
        if cell in self._positions:
            return
        self._positions[cell] = len(self.cells)
        self.cells.append(cell)

    def discard(self, cell: int) -> None:
        index = self._positions.pop(cell, None)
        if index is None:
            return
        last = self.cells.pop()
        if last != cell:
            self.cells[index] = last
            self._positions[last] = index


class ErosionSimulator:
    """Moves elevation from erodible cells to their low neighbors."""

    def __init__(self, grid: HexGrid, prng: AleaPRNG, erosion_percentage: int):
        self.grid = grid
        self.prng = prng
        self.erosion_percentage = erosion_percentage

    def erode_land(self) -> ErosionResult:
        grid = self.grid
        erodible = ErodibleSet()
        for cell in range(grid.cell_count):
            if is_erodible(grid, cell):
                erodible.add(cell)

        initial = len(erodible)
        target = round(initial * (100 - self.erosion_percentage) / 100)
        logger.info("Eroding land", erodible_cells=initial, target=target)

        steps = 0
        while len(erodible) > target:
            cell = erodible.cells[self.prng.range(0, len(erodible))]
            target_cell = self.get_erosion_target(cell)

            grid.elevation[cell] -= 1
            grid.elevation[target_cell] += 1
            steps += 1

            self._refresh(erodible, cell)
            self._refresh(erodible, target_cell)
            for neighbor in grid.cell_neighbors[cell]:
                self._refresh(erodible, neighbor)
            for neighbor in grid.cell_neighbors[target_cell]:
                if neighbor != cell:
                    self._refresh(erodible, neighbor)

        logger.info("Erosion completed", steps=steps, erodible_cells=len(erodible))
        return ErosionResult(
            initial_erodible=initial,
            target_erodible=target,
            final_erodible=len(erodible),
            steps=steps,
        )

    def get_erosion_target(self, cell: int) -> int:
        """Pick a random neighbor at least two levels below ``cell``."""
        grid = self.grid
        candidates = erosion_candidates.get()
        try:
            erodible_elevation = grid.elevation[cell] - 2
            for neighbor in grid.cell_neighbors[cell]:
                if grid.elevation[neighbor] <= erodible_elevation:
                    candidates.append(neighbor)
            return candidates[self.prng.range(0, len(candidates))]
        finally:
            erosion_candidates.release(candidates)

    def _refresh(self, erodible: ErodibleSet, cell: int) -> None:
        if is_erodible(self.grid, cell):
            erodible.add(cell)
        else:
            erodible.discard(cell)
