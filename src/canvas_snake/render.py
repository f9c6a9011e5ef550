"""Frame painting against an abstract 2D drawing surface."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from canvas_snake.engine import SnakeEngine

Point = tuple[float, float]

BANNER_PAUSED = "PAUSED"
BANNER_GAME_OVER = "GAME OVER"
BANNER_WON = "YOU WON!!!"
BANNER_LOST_FOCUS = "LOST FOCUS"


class Surface(Protocol):
    """The subset of a canvas 2D context the painter needs.

    Colours are CSS colour strings. ``fill_text`` centres the text on
    ``(x, y)`` both horizontally and vertically.
    """

    def clear(self, color: str) -> None: ...

    def fill_rect(
        self, x: float, y: float, w: float, h: float, color: str,
    ) -> None: ...

    def fill_circle(self, cx: float, cy: float, r: float, color: str) -> None: ...

    def fill_polygon(self, points: list[Point], color: str) -> None: ...

    def fill_text(
        self,
        text: str,
        x: float,
        y: float,
        color: str,
        font: str,
        max_width: float | None = None,
    ) -> None: ...


@dataclass(frozen=True)
class Palette:
    """Colours used for each layer of a frame."""

    background: str = "black"
    apple: str = "#e53935"
    body: str = "#43a047"
    tail: str = "#2e7d32"
    head: str = "#a5d6a7"
    marker: str = "black"
    banner: str = "rgba(255, 255, 255, 0.35)"
    banner_text: str = "white"
    font: str = "bold 32px sans-serif"


DEFAULT_PALETTE = Palette()


class RecordingSurface:
    """Surface that records draw calls as JSON-serializable dicts.

    Used to ship frames to a remote canvas and to inspect frames in tests.
    """

    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self.commands: list[dict] = []

    def clear(self, color: str) -> None:
        self.commands.append({
            "op": "clear", "color": color,
            "w": self.width, "h": self.height,
        })

    def fill_rect(
        self, x: float, y: float, w: float, h: float, color: str,
    ) -> None:
        self.commands.append({
            "op": "rect", "x": x, "y": y, "w": w, "h": h, "color": color,
        })

    def fill_circle(self, cx: float, cy: float, r: float, color: str) -> None:
        self.commands.append({
            "op": "circle", "x": cx, "y": cy, "r": r, "color": color,
        })

    def fill_polygon(self, points: list[Point], color: str) -> None:
        self.commands.append({
            "op": "polygon",
            "points": [[round(px, 2), round(py, 2)] for px, py in points],
            "color": color,
        })

    def fill_text(
        self,
        text: str,
        x: float,
        y: float,
        color: str,
        font: str,
        max_width: float | None = None,
    ) -> None:
        self.commands.append({
            "op": "text", "text": text, "x": x, "y": y,
            "color": color, "font": font, "max_width": max_width,
        })

    def ops(self) -> list[str]:
        """Return just the op names, in draw order."""
        return [cmd["op"] for cmd in self.commands]


def banner_text(engine: SnakeEngine) -> str | None:
    """Pick the single banner to show: paused, then game over, then focus."""
    if engine.is_paused:
        return BANNER_PAUSED
    if engine.is_game_over:
        return BANNER_WON if engine.did_win else BANNER_GAME_OVER
    if engine.should_show_focus_banner:
        return BANNER_LOST_FOCUS
    return None


def heading_marker(
    cx: float, cy: float, size: float, dx: int, dy: int,
) -> list[Point]:
    """Triangle centred on ``(cx, cy)`` pointing along ``(dx, dy)``."""
    angle = math.atan2(dy, dx)
    cos_a, sin_a = math.cos(angle), math.sin(angle)
    # Right-pointing triangle, rotated into place.
    base = [(0.3 * size, 0.0), (-0.2 * size, -0.25 * size), (-0.2 * size, 0.25 * size)]
    return [
        (cx + px * cos_a - py * sin_a, cy + px * sin_a + py * cos_a)
        for px, py in base
    ]


def draw_frame(
    surface: Surface,
    engine: SnakeEngine,
    palette: Palette = DEFAULT_PALETTE,
) -> None:
    """Paint the full engine state onto *surface*. Never mutates *engine*."""
    grid = engine.grid
    size = grid.cell_size
    half = size / 2

    surface.clear(palette.background)

    for x, y in engine.apples:
        surface.fill_circle(x * size + half, y * size + half, half * 0.8, palette.apple)

    snake = engine.snake
    for x, y in snake.body():
        surface.fill_rect(x * size, y * size, size, size, palette.body)

    if len(snake) > 1:
        tx, ty = snake.tail
        surface.fill_rect(tx * size, ty * size, size, size, palette.tail)

    hx, hy = snake.head
    surface.fill_rect(hx * size, hy * size, size, size, palette.head)
    surface.fill_polygon(
        heading_marker(
            hx * size + half, hy * size + half, size,
            engine.direction.dx, engine.direction.dy,
        ),
        palette.marker,
    )

    text = banner_text(engine)
    if text is not None:
        strip = size * 3
        top = (grid.height - strip) / 2
        surface.fill_rect(0, top, grid.width, strip, palette.banner)
        surface.fill_text(
            text, grid.width / 2, grid.height / 2,
            palette.banner_text, palette.font, max_width=grid.width,
        )
