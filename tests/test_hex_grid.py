"""Tests for the hex grid store."""

import numpy as np
import pytest

from py_hexmap.core.errors import RiverStateError
from py_hexmap.core.hex_grid import (
    DIRECTIONS,
    NO_RIVER,
    HexCoordinates,
    HexDirection,
    HexGrid,
)


class TestHexDirection:
    """Test direction helpers."""

    def test_opposite(self):
        """Test opposite directions are three steps apart."""
        assert HexDirection.NE.opposite() == HexDirection.SW
        assert HexDirection.E.opposite() == HexDirection.W
        assert HexDirection.NW.opposite() == HexDirection.SE

    def test_rotations_wrap(self):
        """Test next/previous rotations wrap around NE and NW."""
        assert HexDirection.NW.next() == HexDirection.NE
        assert HexDirection.NE.previous() == HexDirection.NW
        assert HexDirection.NE.next2() == HexDirection.SE
        assert HexDirection.NE.previous2() == HexDirection.W
        assert HexDirection.W.next2() == HexDirection.NE


class TestHexCoordinates:
    """Test axial coordinates."""

    def test_from_offset_coordinates(self):
        """Test odd rows shift the axial x coordinate."""
        coords = HexCoordinates.from_offset_coordinates(0, 2)
        assert (coords.x, coords.y, coords.z) == (-1, -1, 2)

        coords = HexCoordinates.from_offset_coordinates(3, 1)
        assert (coords.x, coords.z) == (3, 1)

    def test_distance(self):
        """Test hex distance between offset positions."""
        origin = HexCoordinates.from_offset_coordinates(0, 0)
        assert origin.distance_to(origin) == 0
        assert origin.distance_to(HexCoordinates.from_offset_coordinates(3, 0)) == 3
        assert origin.distance_to(HexCoordinates.from_offset_coordinates(0, 4)) == 4
        assert origin.distance_to(HexCoordinates.from_offset_coordinates(4, 4)) == 6


class TestHexGrid:
    """Test grid construction and cell queries."""

    @pytest.fixture
    def grid(self):
        """Create a 6x5 grid."""
        return HexGrid(6, 5)

    def test_dimensions(self, grid):
        """Test array shapes follow the cell count."""
        assert grid.cell_count == 30
        assert grid.elevation.shape == (30,)
        assert grid.neighbors.shape == (30, 6)

    def test_invalid_size(self):
        """Test empty maps are rejected."""
        with pytest.raises(ValueError):
            HexGrid().create_map(0, 4)

    def test_neighbors_are_reciprocal(self, grid):
        """Test every neighbor link points back through the opposite direction."""
        for cell in range(grid.cell_count):
            for direction in DIRECTIONS:
                neighbor = grid.get_neighbor(cell, direction)
                if neighbor is not None:
                    assert grid.get_neighbor(neighbor, direction.opposite()) == cell
                    assert grid.distance_between(cell, neighbor) == 1

    def test_corner_cell_neighbors(self, grid):
        """Test the first cell only has E and NE neighbors."""
        assert grid.get_neighbor(0, HexDirection.E) == 1
        assert grid.get_neighbor(0, HexDirection.NE) == grid.cell_count_x
        assert grid.get_neighbor(0, HexDirection.W) is None
        assert grid.get_neighbor(0, HexDirection.NW) is None
        assert grid.get_neighbor(0, HexDirection.SE) is None
        assert len(grid.cell_neighbors[0]) == 2

    def test_interior_cell_has_six_neighbors(self, grid):
        """Test interior cells on odd and even rows are fully linked."""
        for z in (1, 2):
            cell = grid.get_cell_index(2, z)
            assert len(grid.cell_neighbors[cell]) == 6

    def test_coordinates_match_coordinate_arrays(self, grid):
        """Test get_coordinates agrees with the stored axial arrays."""
        for cell in range(grid.cell_count):
            coords = grid.get_coordinates(cell)
            assert coords.x == grid.coord_x[cell]
            assert coords.z == grid.coord_z[cell]
        assert grid.get_coordinates(grid.get_cell_index(1, 3)) == (
            HexCoordinates.from_offset_coordinates(1, 3)
        )

    def test_distance_matches_coordinates(self, grid):
        """Test distance_between matches HexCoordinates.distance_to."""
        a = grid.get_cell_index(1, 0)
        b = grid.get_cell_index(4, 3)
        expected = grid.get_coordinates(a).distance_to(grid.get_coordinates(b))
        assert grid.distance_between(a, b) == expected
        assert grid.distance_between(b, a) == expected

    def test_out_of_range_lookup(self, grid):
        """Test offset lookups outside the map raise IndexError."""
        with pytest.raises(IndexError):
            grid.get_cell_index(6, 0)
        with pytest.raises(IndexError):
            grid.get_cell_index(0, -1)

    def test_underwater_and_view_elevation(self, grid):
        """Test submerged cells report the water surface as view elevation."""
        grid.water_level[:] = 3
        grid.elevation[0] = 1
        grid.elevation[1] = 5

        assert grid.is_underwater(0)
        assert not grid.is_underwater(1)
        assert grid.view_elevation(0) == 3
        assert grid.view_elevation(1) == 5
        assert grid.view_elevations()[0] == 3

    def test_reset_search_state(self, grid):
        """Test search bookkeeping is zeroed."""
        grid.search_phase[:] = 7
        grid.distance[:] = 3
        grid.search_heuristic[:] = 1

        grid.reset_search_state()

        assert not grid.search_phase.any()
        assert not grid.distance.any()
        assert not grid.search_heuristic.any()

    def test_to_arrays_returns_copies(self, grid):
        """Test exported arrays do not alias grid storage."""
        arrays = grid.to_arrays()
        arrays["elevation"][0] = 99
        assert grid.elevation[0] == 0
        assert set(arrays) == {
            "elevation", "water_level", "terrain_type_index",
            "incoming_river", "outgoing_river",
        }


class TestRivers:
    """Test river edge bookkeeping."""

    @pytest.fixture
    def grid(self):
        """Create a flat land grid above the water level."""
        grid = HexGrid(5, 5)
        grid.elevation[:] = 4
        grid.water_level[:] = 3
        return grid

    def test_set_outgoing_river(self, grid):
        """Test an outgoing edge writes the matching incoming edge."""
        cell = grid.get_cell_index(2, 2)
        neighbor = grid.set_outgoing_river(cell, HexDirection.E)

        assert neighbor == grid.get_neighbor(cell, HexDirection.E)
        assert grid.outgoing_river[cell] == HexDirection.E
        assert grid.incoming_river[neighbor] == HexDirection.W
        assert grid.has_river(cell) and grid.has_river(neighbor)
        assert grid.has_river_begin_or_end(cell)
        assert grid.has_river_begin_or_end(neighbor)

    def test_river_through_cell_is_not_begin_or_end(self, grid):
        """Test a cell with both edges is a river middle."""
        cell = grid.get_cell_index(1, 2)
        middle = grid.set_outgoing_river(cell, HexDirection.E)
        grid.set_outgoing_river(middle, HexDirection.E)

        assert grid.has_incoming_river(middle) and grid.has_outgoing_river(middle)
        assert not grid.has_river_begin_or_end(middle)

    def test_uphill_river_rejected(self, grid):
        """Test rivers cannot climb to a higher neighbor."""
        cell = grid.get_cell_index(2, 2)
        grid.elevation[grid.get_neighbor(cell, HexDirection.E)] = 6

        with pytest.raises(RiverStateError):
            grid.set_outgoing_river(cell, HexDirection.E)
        assert grid.outgoing_river[cell] == NO_RIVER

    def test_lake_outflow_at_water_level_allowed(self, grid):
        """Test a lake may drain into a neighbor at its water level."""
        cell = grid.get_cell_index(2, 2)
        neighbor = grid.get_neighbor(cell, HexDirection.E)
        grid.elevation[cell] = 3
        grid.water_level[cell] = 5
        grid.elevation[neighbor] = 5

        grid.set_outgoing_river(cell, HexDirection.E)
        assert grid.has_outgoing_river(cell)

    def test_off_map_river_rejected(self, grid):
        """Test rivers cannot leave the map."""
        with pytest.raises(RiverStateError):
            grid.set_outgoing_river(0, HexDirection.W)

    def test_outgoing_written_once(self, grid):
        """Test a second, different outgoing edge is rejected."""
        cell = grid.get_cell_index(2, 2)
        grid.set_outgoing_river(cell, HexDirection.E)

        with pytest.raises(RiverStateError):
            grid.set_outgoing_river(cell, HexDirection.W)
        assert grid.outgoing_river[cell] == HexDirection.E

    def test_incoming_written_once(self, grid):
        """Test a cell cannot receive two rivers."""
        target = grid.get_cell_index(2, 2)
        west = grid.get_neighbor(target, HexDirection.W)
        east = grid.get_neighbor(target, HexDirection.E)
        grid.set_outgoing_river(west, HexDirection.E)

        with pytest.raises(RiverStateError):
            grid.set_outgoing_river(east, HexDirection.W)

    def test_remove_river(self, grid):
        """Test removing a river clears both ends of both edges."""
        cell = grid.get_cell_index(2, 2)
        downstream = grid.set_outgoing_river(cell, HexDirection.E)
        upstream = grid.get_neighbor(cell, HexDirection.W)
        grid.set_outgoing_river(upstream, HexDirection.E)

        grid.remove_river(cell)

        assert not grid.has_river(cell)
        assert not grid.has_incoming_river(downstream)
        assert not grid.has_outgoing_river(upstream)
        assert np.all(grid.outgoing_river == NO_RIVER)
        assert np.all(grid.incoming_river == NO_RIVER)
