"""Tests for the Grid module."""

import numpy as np
import pytest

from wrapsnake.grid import CellType, Grid, grid_size_for_viewport
from wrapsnake.snake import Direction


class TestGridInit:
    def test_default_dimensions(self):
        grid = Grid()
        assert grid.rows == 15
        assert grid.cols == 15

    def test_square_by_default(self):
        grid = Grid(12)
        assert (grid.rows, grid.cols) == (12, 12)

    def test_custom_dimensions(self):
        grid = Grid(rows=8, cols=10)
        assert grid.rows == 8
        assert grid.cols == 10
        assert grid.cell_count == 80

    def test_positive_size_enforced(self):
        with pytest.raises(ValueError, match="positive"):
            Grid(rows=0, cols=4)
        with pytest.raises(ValueError, match="positive"):
            Grid(rows=4, cols=-1)

    def test_center(self):
        assert Grid(10, 10).center == (5, 5)
        assert Grid(15, 9).center == (7, 4)
        assert Grid(1, 1).center == (1, 1)

    def test_equality(self):
        assert Grid(5, 6) == Grid(5, 6)
        assert Grid(5, 6) != Grid(6, 5)


class TestGridOperations:
    def test_contains_is_one_based(self):
        grid = Grid(rows=5, cols=5)
        assert grid.contains(1, 1)
        assert grid.contains(5, 5)
        assert not grid.contains(0, 1)
        assert not grid.contains(1, 6)
        assert not grid.contains(6, 1)

    def test_wrap(self):
        grid = Grid(rows=5, cols=5)
        assert grid.wrap(0, 1) == (5, 1)
        assert grid.wrap(1, 0) == (1, 5)
        assert grid.wrap(6, 6) == (1, 1)
        assert grid.wrap(3, 3) == (3, 3)

    def test_step(self):
        grid = Grid(rows=5, cols=7)
        assert grid.step((1, 4), Direction.UP) == (5, 4)
        assert grid.step((3, 7), Direction.RIGHT) == (3, 1)

    def test_occupancy(self):
        grid = Grid(rows=4, cols=3)
        mask = grid.occupancy([(1, 1), (4, 3)])
        assert mask.shape == (4, 3)
        assert mask[0, 0]
        assert mask[3, 2]
        assert mask.sum() == 2

    def test_free_cells(self):
        grid = Grid(rows=4, cols=4)
        assert len(grid.free_cells([])) == 16
        free = grid.free_cells([(1, 1), (2, 2)])
        assert len(free) == 14
        assert (1, 1) not in free
        assert free[0] == (1, 2)

    def test_paint(self):
        grid = Grid(rows=3, cols=3)
        cells = grid.paint([(1, 1), (1, 2)], food=(3, 3))
        assert cells[0, 0] == CellType.SNAKE
        assert cells[0, 1] == CellType.SNAKE
        assert cells[2, 2] == CellType.FOOD
        assert np.count_nonzero(cells == CellType.EMPTY) == 6


class TestViewportSizing:
    def test_clamped_to_minimum(self):
        assert grid_size_for_viewport(100, 100) == 10

    def test_clamped_to_maximum(self):
        assert grid_size_for_viewport(1920, 1080) == 15

    def test_uses_smaller_side(self):
        assert grid_size_for_viewport(1000, 240) == 12

    def test_custom_bounds(self):
        assert grid_size_for_viewport(500, 500, min_cells=10, max_cells=25) == 25

    def test_grid_for_viewport(self):
        grid = Grid.for_viewport(260, 800)
        assert (grid.rows, grid.cols) == (13, 13)

    def test_invalid_bounds(self):
        with pytest.raises(ValueError):
            grid_size_for_viewport(500, 500, min_cells=10, max_cells=5)


class TestGridSerialization:
    def test_to_dict(self):
        assert Grid(rows=6, cols=9).to_dict() == {"rows": 6, "cols": 9}
