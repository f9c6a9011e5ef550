"""Tick-driven snake engine composing grid, snake, apples and key input."""

from __future__ import annotations

import enum
import logging

import numpy as np

from canvas_snake.apple import AppleSet
from canvas_snake.config import EngineConfig
from canvas_snake.grid import GridModel
from canvas_snake.keys import (
    ARROW_DIRECTIONS,
    KEY_ADD_APPLE,
    KEY_FASTER,
    KEY_PAUSE,
    KEY_RESET,
    KEY_REVERSE,
    KEY_SLOWER,
    KeyBuffer,
)
from canvas_snake.render import DEFAULT_PALETTE, Palette, Surface, draw_frame
from canvas_snake.snake import Direction, Snake

logger = logging.getLogger(__name__)


class EngineStatus(str, enum.Enum):
    """Exclusive play states. Lost focus is reported separately."""

    RUNNING = "running"
    PAUSED = "paused"
    GAME_OVER = "game_over"
    WON = "won"


class SnakeEngine:
    """Single-player snake state machine driven by an external tick.

    The host calls :meth:`tick` at a fixed rate and forwards raw key
    names through :meth:`handle_key` and focus changes through
    :meth:`show_focus_banner` / :meth:`hide_focus_banner`. Keys only take
    effect at the next tick. A simulation step happens once every
    :attr:`frames_between_updates` ticks, so game speed is independent of
    the tick rate.

    Edges wrap around. Running into the snake's own body does not end the
    game; the move is simply blocked for that step. The game ends, won,
    once no empty cell remains for a new apple.
    """

    def __init__(
        self,
        config: EngineConfig | None = None,
        palette: Palette = DEFAULT_PALETTE,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.config = config if config is not None else EngineConfig()
        self.palette = palette
        self.rng = rng if rng is not None else np.random.default_rng(self.config.seed)
        self.grid = GridModel(
            self.config.cols, self.config.rows, self.config.cell_size,
        )

        start = self.grid.random_empty_cell((), (), self.rng)
        assert start is not None  # noqa: S101
        self.snake = Snake(start)
        self.direction = Direction.RIGHT
        self.apples = AppleSet(self.grid, self.config.num_apples, rng=self.rng)
        self.keys = KeyBuffer(self.config.key_buffer_size)

        self.frames_between_updates = self.config.min_speed_frames
        self.frames_until_update = 0

        self.score = 0
        self.is_growing = False
        self.is_paused = False
        self.is_game_over = False
        self.did_win = False
        self.should_show_focus_banner = False

        self.tick_count = 0
        self.step_count = 0

    # -- derived state ------------------------------------------------------

    @property
    def effectively_paused(self) -> bool:
        """True while focus is lost, the game is paused, or it is over."""
        return self.should_show_focus_banner or self.is_paused or self.is_game_over

    @property
    def status(self) -> EngineStatus:
        if self.is_game_over:
            return EngineStatus.WON if self.did_win else EngineStatus.GAME_OVER
        if self.is_paused:
            return EngineStatus.PAUSED
        return EngineStatus.RUNNING

    @property
    def num_apples(self) -> int:
        """Number of apples the board is kept topped up to."""
        return self.apples.target

    @num_apples.setter
    def num_apples(self, value: int) -> None:
        self.apples.target = max(0, value)

    # -- host inputs --------------------------------------------------------

    def handle_key(self, key: str) -> None:
        """Queue a raw key name. Dropped silently when the buffer is full."""
        if self.keys.push(key):
            logger.debug("Received key %r.", key)
        else:
            logger.debug("Key buffer full, dropped %r.", key)

    def show_focus_banner(self) -> None:
        if not self.should_show_focus_banner:
            logger.info("Lost focus.")
            self.should_show_focus_banner = True

    def hide_focus_banner(self) -> None:
        if self.should_show_focus_banner:
            logger.info("Regained focus.")
            self.should_show_focus_banner = False

    # -- tick ---------------------------------------------------------------

    def tick(self, surface: Surface | None = None) -> dict:
        """Process one frame and return the resulting state.

        The frame is painted onto *surface* when one is given.
        """
        self.tick_count += 1
        self._preprocess_keys()

        if not self.effectively_paused:
            if self.frames_until_update == 0:
                key = self.keys.pop()
                if key is not None:
                    self._apply_command(key)
                self.update()
                self.frames_until_update = self.frames_between_updates
            else:
                self.frames_until_update -= 1

        if surface is not None:
            self.render(surface)
        return self.get_state()

    def _preprocess_keys(self) -> None:
        """Handle reset and pause keys at the front of the buffer."""
        front = self.keys.peek()
        if front == KEY_RESET:
            self.keys.pop()
            self.reset()
        elif front == KEY_PAUSE:
            self.keys.pop()
            if self.is_game_over:
                self.reset()
            else:
                self.is_paused = not self.is_paused
                logger.info("Paused." if self.is_paused else "Resumed.")

        # Keys pressed while paused must not leak into resumed play.
        if self.effectively_paused:
            self.keys.clear()

    def _apply_command(self, key: str) -> None:
        direction = ARROW_DIRECTIONS.get(key)
        if direction is not None:
            self.direction = direction
        elif key == KEY_ADD_APPLE:
            self.num_apples += 1
        elif key == KEY_REVERSE:
            self.snake.reverse()
        elif key == KEY_SLOWER:
            self.frames_between_updates = min(
                self.frames_between_updates + 1, self.config.min_speed_frames,
            )
        elif key == KEY_FASTER:
            self.frames_between_updates = max(
                self.frames_between_updates - 1, self.config.max_speed_frames,
            )

    # -- simulation ---------------------------------------------------------

    def update(self) -> None:
        """Advance the simulation by one step."""
        self.step_count += 1
        hx, hy = self.snake.head
        candidate = self.grid.wrap(hx + self.direction.dx, hy + self.direction.dy)

        if candidate in self.snake:
            logger.debug("Move into %s blocked by own body.", candidate)
        else:
            if self.is_growing:
                self.is_growing = False
            else:
                self.snake.pop_tail()
            self.snake.push_head(candidate)

        if self.apples.consume(self.snake.head):
            self.is_growing = True
            self.score += 1

        self.apples.replenish(self.snake.path)

        if not self.apples.positions and self.apples.target > 0:
            self.is_game_over = True
            self.did_win = True
            logger.info(
                "Board full after %d steps, won with score %d.",
                self.step_count, self.score,
            )

    def reset(self) -> None:
        """Start a new game from the centre of the board."""
        self.is_game_over = False
        self.did_win = False
        self.is_growing = False
        self.is_paused = False
        self.apples.clear()
        self.apples.target = self.config.num_apples
        self.snake.reseed(self.grid.center)
        self.direction = Direction.RIGHT
        self.score = 0
        self.frames_between_updates = self.config.min_speed_frames
        self.frames_until_update = 0
        logger.info("Game reset.")

    # -- output -------------------------------------------------------------

    def render(self, surface: Surface) -> None:
        """Paint the current state onto *surface*."""
        draw_frame(surface, self, self.palette)

    def get_state(self) -> dict:
        """Return the full, serializable game state."""
        return {
            "tick": self.tick_count,
            "step": self.step_count,
            "score": self.score,
            "status": self.status.value,
            "paused": self.is_paused,
            "game_over": self.is_game_over,
            "won": self.did_win,
            "focus_lost": self.should_show_focus_banner,
            "growing": self.is_growing,
            "direction": list(self.direction.value),
            "snake": self.snake.to_dict(),
            "apples": self.apples.to_dict(),
            "frames_between_updates": self.frames_between_updates,
            "frames_until_update": self.frames_until_update,
            "keys": self.keys.to_list(),
            "grid": {
                "cols": self.grid.cols,
                "rows": self.grid.rows,
                "cell_size": self.grid.cell_size,
                "width": self.grid.width,
                "height": self.grid.height,
            },
        }
