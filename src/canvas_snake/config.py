"""Engine and session configuration."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EngineConfig:
    """Everything needed to build a :class:`~canvas_snake.engine.SnakeEngine`.

    Speeds are expressed in ticks per simulation step, so the *minimum*
    speed is the *largest* frame count and the maximum speed the smallest.
    The defaults give a 640x480 board driven at 40 Hz.
    """

    cols: int = 32
    rows: int = 24
    cell_size: int = 20
    num_apples: int = 1
    min_speed_frames: int = 8
    max_speed_frames: int = 1
    key_buffer_size: int = 3
    tick_rate_ms: int = 25
    seed: int | None = None

    def __post_init__(self) -> None:
        if self.cols < 1 or self.rows < 1:
            raise ValueError("cols and rows must each be at least 1.")
        if self.cell_size < 1:
            raise ValueError("cell_size must be at least 1.")
        if self.num_apples < 0:
            raise ValueError("num_apples must be >= 0.")
        if self.max_speed_frames < 0:
            raise ValueError("max_speed_frames must be >= 0.")
        if self.min_speed_frames < self.max_speed_frames:
            raise ValueError(
                "min_speed_frames must be >= max_speed_frames "
                "(both count ticks between simulation steps).",
            )
        if self.key_buffer_size < 1:
            raise ValueError("key_buffer_size must be at least 1.")
        if self.tick_rate_ms < 1:
            raise ValueError("tick_rate_ms must be at least 1.")

    @property
    def width(self) -> int:
        return self.cols * self.cell_size

    @property
    def height(self) -> int:
        return self.rows * self.cell_size

    def to_dict(self) -> dict:
        """Serialize to a plain dict."""
        return asdict(self)

    def save(self, path: str | Path) -> None:
        """Write config to a JSON file."""
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(json.dumps(self.to_dict(), indent=2))
        logger.info("Config saved to %s", p)

    @classmethod
    def load(cls, path: str | Path) -> EngineConfig:
        """Load config from a JSON file."""
        raw = json.loads(Path(path).read_text())
        return cls(**raw)
