"""Grid geometry and occupancy queries for the snake board."""

from __future__ import annotations

import enum
from collections.abc import Collection, Iterable

import numpy as np

Cell = tuple[int, int]


class CellType(enum.IntEnum):
    """Integer codes used when classifying a cell."""

    EMPTY = 0
    SNAKE = 1
    APPLE = 2


class GridModel:
    """Toroidal grid of ``cols`` x ``rows`` square cells.

    The model holds no game state. Every query takes the snake path and
    the apple collection explicitly, so the engine stays the only owner
    of both. Coordinates are ``(x, y)`` with ``y`` growing downward, the
    same orientation the drawing surface uses.
    """

    def __init__(self, cols: int, rows: int, cell_size: int = 20) -> None:
        if cols < 1 or rows < 1:
            raise ValueError("Grid dimensions must be at least 1x1.")
        if cell_size < 1:
            raise ValueError("cell_size must be at least 1.")
        self.cols = cols
        self.rows = rows
        self.cell_size = cell_size

    @property
    def width(self) -> int:
        """Surface width in pixels."""
        return self.cols * self.cell_size

    @property
    def height(self) -> int:
        """Surface height in pixels."""
        return self.rows * self.cell_size

    @property
    def size(self) -> int:
        """Total number of cells."""
        return self.cols * self.rows

    @property
    def center(self) -> Cell:
        return self.cols // 2, self.rows // 2

    def wrap(self, x: int, y: int) -> Cell:
        """Wrap coordinates around the grid edges."""
        return x % self.cols, y % self.rows

    def classify(
        self,
        cell: Cell,
        path: Iterable[Cell],
        apples: Iterable[Cell],
    ) -> CellType:
        """Return what currently occupies *cell*."""
        if any(seg == cell for seg in path):
            return CellType.SNAKE
        if any(apple == cell for apple in apples):
            return CellType.APPLE
        return CellType.EMPTY

    def occupancy(
        self, path: Iterable[Cell], apples: Iterable[Cell],
    ) -> np.ndarray:
        """Build a ``(rows, cols)`` array of :class:`CellType` codes."""
        cells = np.full((self.rows, self.cols), CellType.EMPTY, dtype=np.int8)
        for x, y in apples:
            cells[y, x] = CellType.APPLE
        for x, y in path:
            cells[y, x] = CellType.SNAKE
        return cells

    def empty_cells(
        self, path: Iterable[Cell], apples: Iterable[Cell],
    ) -> list[Cell]:
        """Return every empty cell in row-major order."""
        ys, xs = np.where(self.occupancy(path, apples) == CellType.EMPTY)
        return list(zip(xs.tolist(), ys.tolist(), strict=True))

    def random_empty_cell(
        self,
        path: Collection[Cell],
        apples: Collection[Cell],
        rng: np.random.Generator,
    ) -> Cell | None:
        """Pick an empty cell uniformly at random.

        Returns ``None`` when the board is full.
        """
        empty = self.empty_cells(path, apples)
        if not empty:
            return None
        return empty[int(rng.integers(len(empty)))]
