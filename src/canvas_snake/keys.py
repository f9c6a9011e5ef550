"""Key names understood by the engine and the bounded input buffer."""

from __future__ import annotations

from collections import deque

from canvas_snake.snake import Direction

KEY_RESET = "r"
KEY_PAUSE = "Enter"
KEY_REVERSE = " "
KEY_ADD_APPLE = "a"
KEY_SLOWER = "s"
KEY_FASTER = "f"

ARROW_DIRECTIONS: dict[str, Direction] = {
    "ArrowUp": Direction.UP,
    "ArrowDown": Direction.DOWN,
    "ArrowLeft": Direction.LEFT,
    "ArrowRight": Direction.RIGHT,
}


class KeyBuffer:
    """FIFO of raw key names with a fixed capacity.

    Unlike ``deque(maxlen=...)``, a full buffer rejects the *new* key and
    keeps the ones already queued.
    """

    def __init__(self, capacity: int = 3) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1.")
        self.capacity = capacity
        self._keys: deque[str] = deque()

    def __len__(self) -> int:
        return len(self._keys)

    @property
    def full(self) -> bool:
        return len(self._keys) >= self.capacity

    def push(self, key: str) -> bool:
        """Queue *key*. Returns False if it was dropped."""
        if self.full:
            return False
        self._keys.append(key)
        return True

    def peek(self) -> str | None:
        return self._keys[0] if self._keys else None

    def pop(self) -> str | None:
        return self._keys.popleft() if self._keys else None

    def clear(self) -> None:
        self._keys.clear()

    def to_list(self) -> list[str]:
        return list(self._keys)
