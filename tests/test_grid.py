"""Tests for the GridModel module."""

import numpy as np
import pytest

from canvas_snake.grid import CellType, GridModel


class TestGridInit:
    def test_dimensions(self):
        grid = GridModel(cols=32, rows=24, cell_size=20)
        assert grid.width == 640
        assert grid.height == 480
        assert grid.size == 32 * 24

    def test_minimum_size_enforced(self):
        with pytest.raises(ValueError, match="at least 1x1"):
            GridModel(cols=0, rows=4)
        with pytest.raises(ValueError, match="at least 1x1"):
            GridModel(cols=4, rows=0)
        with pytest.raises(ValueError, match="cell_size"):
            GridModel(cols=4, rows=4, cell_size=0)

    def test_center(self):
        assert GridModel(cols=10, rows=7).center == (5, 3)


class TestWrap:
    def test_in_range_unchanged(self):
        grid = GridModel(cols=5, rows=4)
        assert grid.wrap(2, 3) == (2, 3)

    def test_wraps_each_axis(self):
        grid = GridModel(cols=5, rows=4)
        assert grid.wrap(-1, 0) == (4, 0)
        assert grid.wrap(0, -1) == (0, 3)
        assert grid.wrap(5, 4) == (0, 0)
        assert grid.wrap(11, -9) == (1, 3)


class TestOccupancy:
    def test_classify(self):
        grid = GridModel(cols=4, rows=4)
        path = [(0, 0), (1, 0)]
        apples = [(3, 3)]
        assert grid.classify((1, 0), path, apples) == CellType.SNAKE
        assert grid.classify((3, 3), path, apples) == CellType.APPLE
        assert grid.classify((2, 2), path, apples) == CellType.EMPTY

    def test_occupancy_array_is_row_major(self):
        grid = GridModel(cols=3, rows=2)
        cells = grid.occupancy([(2, 0)], [(0, 1)])
        assert cells.shape == (2, 3)
        assert cells[0, 2] == CellType.SNAKE
        assert cells[1, 0] == CellType.APPLE

    def test_empty_cells(self):
        grid = GridModel(cols=4, rows=4)
        assert len(grid.empty_cells([], [])) == 16
        empty = grid.empty_cells([(0, 0)], [(1, 1)])
        assert len(empty) == 14
        assert (0, 0) not in empty
        assert (1, 1) not in empty
        assert (3, 2) in empty


class TestRandomEmptyCell:
    def test_returns_an_empty_cell(self):
        grid = GridModel(cols=3, rows=3)
        rng = np.random.default_rng(0)
        path = [(0, 0), (1, 0), (2, 0)]
        for _ in range(50):
            cell = grid.random_empty_cell(path, [], rng)
            assert cell is not None
            assert cell not in path

    def test_full_grid_returns_none(self):
        grid = GridModel(cols=2, rows=1)
        rng = np.random.default_rng(0)
        assert grid.random_empty_cell([(0, 0)], [(1, 0)], rng) is None

    def test_only_one_choice(self):
        grid = GridModel(cols=2, rows=2)
        rng = np.random.default_rng(0)
        cell = grid.random_empty_cell([(0, 0), (1, 0)], [(0, 1)], rng)
        assert cell == (1, 1)

    def test_deterministic_with_seed(self):
        grid = GridModel(cols=10, rows=10)
        a = [grid.random_empty_cell([], [], np.random.default_rng(7)) for _ in range(3)]
        b = [grid.random_empty_cell([], [], np.random.default_rng(7)) for _ in range(3)]
        assert a == b
