"""Tests for erosion."""

import numpy as np
import pytest

from py_hexmap.core.alea_prng import AleaPRNG
from py_hexmap.core.erosion import (
    ErodibleSet,
    ErosionSimulator,
    count_erodible,
    is_erodible,
)
from py_hexmap.core.hex_grid import HexGrid
from py_hexmap.utils.pools import ListPool, erosion_candidates


@pytest.fixture
def rugged_grid():
    """Grid with a random elevation field full of steep steps."""
    grid = HexGrid(20, 15)
    prng = AleaPRNG("rugged")
    for cell in range(grid.cell_count):
        grid.elevation[cell] = prng.range(-2, 9)
    return grid


class TestErodible:
    """Test the erodibility predicate."""

    def test_two_level_drop_is_erodible(self):
        """Test a neighbor two levels lower makes a cell erodible."""
        grid = HexGrid(3, 3)
        center = grid.get_cell_index(1, 1)
        low = grid.cell_neighbors[center][0]
        grid.elevation[:] = 4
        grid.elevation[low] = 2

        assert is_erodible(grid, center)
        assert not is_erodible(grid, low)
        assert count_erodible(grid) == len(grid.cell_neighbors[low])

    def test_one_level_drop_is_not_erodible(self):
        """Test a one-level step is not erodible."""
        grid = HexGrid(3, 3)
        grid.elevation[:] = 4
        grid.elevation[0] = 3

        assert count_erodible(grid) == 0

    def test_flat_grid(self):
        """Test a flat grid has nothing to erode."""
        grid = HexGrid(5, 5)
        assert count_erodible(grid) == 0


class TestErodibleSet:
    """Test swap-remove bookkeeping."""

    def test_add_and_discard(self):
        """Test swap-remove keeps membership consistent."""
        cells = ErodibleSet()
        for cell in (4, 8, 15, 16):
            cells.add(cell)
        cells.add(8)
        assert len(cells) == 4

        cells.discard(8)
        cells.discard(99)

        assert len(cells) == 3
        assert 8 not in cells
        assert sorted(cells.cells) == [4, 15, 16]
        cells.discard(16)
        cells.discard(4)
        assert cells.cells == [15]


class TestErosionSimulator:
    """Test the erosion loop."""

    def test_reaches_target(self, rugged_grid):
        """Test erosion stops at or below the target count."""
        initial = count_erodible(rugged_grid)
        result = ErosionSimulator(rugged_grid, AleaPRNG("erode"), 50).erode_land()

        assert result.initial_erodible == initial
        assert result.target_erodible == round(initial * 0.5)
        assert result.final_erodible <= result.target_erodible
        assert result.final_erodible == count_erodible(rugged_grid)
        assert result.steps > 0

    def test_mass_is_conserved(self, rugged_grid):
        """Test erosion moves elevation without creating or losing any."""
        total = int(rugged_grid.elevation.sum())
        ErosionSimulator(rugged_grid, AleaPRNG("erode"), 50).erode_land()
        assert int(rugged_grid.elevation.sum()) == total

    def test_zero_percent_is_noop(self, rugged_grid):
        """Test zero erosion leaves the grid and PRNG untouched."""
        before = rugged_grid.elevation.copy()
        prng = AleaPRNG("erode")

        result = ErosionSimulator(rugged_grid, prng, 0).erode_land()

        assert result.steps == 0
        assert prng.call_count == 0
        np.testing.assert_array_equal(rugged_grid.elevation, before)

    def test_full_erosion_leaves_nothing_erodible(self, rugged_grid):
        """Test full erosion wears down every steep step."""
        result = ErosionSimulator(rugged_grid, AleaPRNG("erode"), 100).erode_land()

        assert result.target_erodible == 0
        assert result.final_erodible == 0
        assert count_erodible(rugged_grid) == 0

    def test_erosion_target_is_two_levels_lower(self):
        """Test the only low neighbor is picked as target."""
        grid = HexGrid(3, 3)
        grid.elevation[:] = 4
        center = grid.get_cell_index(1, 1)
        low = grid.cell_neighbors[center][1]
        grid.elevation[low] = 1

        simulator = ErosionSimulator(grid, AleaPRNG("target"), 50)
        assert simulator.get_erosion_target(center) == low
        assert len(erosion_candidates) >= 1

    def test_deterministic(self):
        """Test the same seeds erode the same way."""
        grids = []
        for _ in range(2):
            grid = HexGrid(20, 15)
            prng = AleaPRNG("rugged")
            for cell in range(grid.cell_count):
                grid.elevation[cell] = prng.range(-2, 9)
            ErosionSimulator(grid, AleaPRNG("erode"), 70).erode_land()
            grids.append(grid.elevation.copy())

        np.testing.assert_array_equal(grids[0], grids[1])


class TestListPool:
    """Test scratch list reuse."""

    def test_released_list_is_cleared_and_reused(self):
        """Test released lists come back empty."""
        pool = ListPool()
        scratch = pool.get()
        scratch.extend([1, 2, 3])
        pool.release(scratch)

        assert len(pool) == 1
        again = pool.get()
        assert again is scratch
        assert again == []

    def test_pool_is_bounded(self):
        """Test the pool keeps at most max_size lists."""
        pool = ListPool(max_size=2)
        for _ in range(4):
            pool.release([])
        assert len(pool) == 2
