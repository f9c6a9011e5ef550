"""Snake path representation and head/tail bookkeeping."""

from __future__ import annotations

import enum
from collections import deque

from canvas_snake.grid import Cell


class Direction(enum.Enum):
    """Cardinal movement directions with (dx, dy) values.

    Screen ``y`` grows downward, so ``UP`` decreases ``y``.
    """

    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]


class Snake:
    """A snake represented as a deque of distinct ``(x, y)`` cells.

    ``head_is_tail`` picks which end of :attr:`path` is the head: when
    true the head is ``path[-1]``, otherwise ``path[0]``. Flipping the
    flag reverses travel without touching the deque, and both ends
    support O(1) push/pop.
    """

    def __init__(self, start: Cell) -> None:
        self.path: deque[Cell] = deque([start])
        self.head_is_tail = True

    def __len__(self) -> int:
        return len(self.path)

    def __contains__(self, cell: object) -> bool:
        return cell in self.path

    @property
    def head(self) -> Cell:
        return self.path[-1] if self.head_is_tail else self.path[0]

    @property
    def tail(self) -> Cell:
        """The end opposite the head."""
        return self.path[0] if self.head_is_tail else self.path[-1]

    def body(self) -> list[Cell]:
        """Cells strictly between tail and head, in path order."""
        return list(self.path)[1:-1]

    def push_head(self, cell: Cell) -> None:
        """Add *cell* as the new head."""
        if self.head_is_tail:
            self.path.append(cell)
        else:
            self.path.appendleft(cell)

    def pop_tail(self) -> Cell:
        """Remove and return the end opposite the head."""
        if self.head_is_tail:
            return self.path.popleft()
        return self.path.pop()

    def reverse(self) -> None:
        """Swap the head and tail roles."""
        self.head_is_tail = not self.head_is_tail

    def reseed(self, start: Cell) -> None:
        """Shrink back to a single cell at *start*."""
        self.path.clear()
        self.path.append(start)
        self.head_is_tail = True

    def to_dict(self) -> dict:
        """Serialize snake state to a dictionary."""
        return {
            "path": [list(seg) for seg in self.path],
            "head": list(self.head),
            "tail": list(self.tail),
            "head_is_tail": self.head_is_tail,
        }
