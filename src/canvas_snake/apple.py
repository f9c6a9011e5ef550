"""Apple placement and consumption."""

from __future__ import annotations

import logging
from collections.abc import Collection
from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from canvas_snake.grid import Cell, GridModel

logger = logging.getLogger(__name__)


class AppleSet:
    """Apples currently on the board, kept topped up to :attr:`target`.

    Apples are only ever placed on empty cells, so positions stay unique
    and never overlap the snake. Uses a NumPy RNG for reproducible
    placement.
    """

    def __init__(
        self,
        grid: GridModel,
        target: int = 1,
        rng: np.random.Generator | None = None,
    ) -> None:
        if target < 0:
            raise ValueError("target must be >= 0.")
        self.grid = grid
        self.target = target
        self.rng = rng if rng is not None else np.random.default_rng()
        self.positions: list[Cell] = []

    def __len__(self) -> int:
        return len(self.positions)

    def __contains__(self, cell: object) -> bool:
        return cell in self.positions

    def __iter__(self):
        return iter(self.positions)

    def replenish(self, path: Collection[Cell]) -> list[Cell]:
        """Add apples on random empty cells until the target is reached.

        Stops early when the board has no empty cell left. Returns the
        newly placed positions.
        """
        placed: list[Cell] = []
        while len(self.positions) < self.target:
            cell = self.grid.random_empty_cell(path, self.positions, self.rng)
            if cell is None:
                logger.debug(
                    "No empty cell for apple %d of %d.",
                    len(self.positions) + 1, self.target,
                )
                break
            self.positions.append(cell)
            placed.append(cell)
        return placed

    def consume(self, cell: Cell) -> bool:
        """Remove the apple at *cell*. Returns True if one was there."""
        if cell in self.positions:
            self.positions.remove(cell)
            return True
        return False

    def clear(self) -> None:
        self.positions.clear()

    def to_dict(self) -> dict:
        """Serialize apple state to a dictionary."""
        return {
            "positions": [list(p) for p in self.positions],
            "target": self.target,
        }
