"""Canvas Snake: tick-driven snake engine and session server."""

from canvas_snake.apple import AppleSet
from canvas_snake.config import EngineConfig
from canvas_snake.engine import EngineStatus, SnakeEngine
from canvas_snake.grid import CellType, GridModel
from canvas_snake.keys import KeyBuffer
from canvas_snake.render import Palette, RecordingSurface, Surface
from canvas_snake.snake import Direction, Snake

__all__ = [
    "AppleSet",
    "CellType",
    "Direction",
    "EngineConfig",
    "EngineStatus",
    "GridModel",
    "KeyBuffer",
    "Palette",
    "RecordingSurface",
    "Snake",
    "SnakeEngine",
    "Surface",
]
