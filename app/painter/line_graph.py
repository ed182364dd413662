"""Line graph rendering.

Draws a 53-point curve (one value per week column, 0 = bottom, 1 = top) as a
band of lit cells. The band is brightest on the curve and fades by one level
per row away from it.
"""

import math
import random
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from app.painter.constants import GRID_COLS, GRID_ROWS, MAX_LEVEL
from app.painter.types import Grid


class LineGraphConfig(BaseModel):
    """Line graph parameters.

    Attributes:
        curve: 53 values in [0, 1], one per week column
        thickness: Band half-height in rows (1 = single row)
        smoothing: Moving-average radius applied to the curve (0 = raw)
        jitter: Maximum random vertical offset, as a fraction of the height
    """

    curve: list[float]
    thickness: int = Field(default=1, ge=1, le=GRID_ROWS)
    smoothing: int = Field(default=0, ge=0, le=GRID_COLS // 2)
    jitter: float = Field(default=0.0, ge=0.0, le=0.2)

    @field_validator("curve")
    @classmethod
    def validate_curve(cls, value: list[float]) -> list[float]:
        if len(value) != GRID_COLS:
            raise ValueError(f"curve must have exactly {GRID_COLS} points, got {len(value)}")
        for i, point in enumerate(value):
            if not 0.0 <= point <= 1.0:
                raise ValueError(f"curve point {i} must be between 0 and 1, got {point}")
        return value


class LineGraphPreset(BaseModel):
    type: Literal["LINE_GRAPH"] = "LINE_GRAPH"
    config: LineGraphConfig


def default_line_graph_config() -> LineGraphConfig:
    """Return a gentle two-period wave."""
    curve = [round(0.5 + 0.4 * math.sin(2 * math.pi * c / 26), 4) for c in range(GRID_COLS)]
    return LineGraphConfig(curve=curve, thickness=2, smoothing=1, jitter=0.05)


def smooth_curve(curve: list[float], radius: int) -> list[float]:
    """Apply a centered moving average of the given radius."""
    if radius <= 0:
        return list(curve)
    smoothed = []
    for c in range(len(curve)):
        window = curve[max(0, c - radius) : min(len(curve), c + radius + 1)]
        smoothed.append(sum(window) / len(window))
    return smoothed


def render_line_graph(config: LineGraphConfig, seed: int | None = 0) -> Grid:
    """Render a line graph onto an empty grid.

    Args:
        config: Curve and rendering parameters
        seed: Seed for the jitter generator; None draws a fresh one

    Returns:
        7x53 grid
    """
    rng = random.Random(seed)
    grid = [[0] * GRID_COLS for _ in range(GRID_ROWS)]

    for col, value in enumerate(smooth_curve(config.curve, config.smoothing)):
        if config.jitter:
            value += rng.uniform(-config.jitter, config.jitter)
        value = max(0.0, min(1.0, value))

        # Row 0 is the top of the graph
        center = round((1.0 - value) * (GRID_ROWS - 1))
        for distance in range(config.thickness):
            level = max(1, MAX_LEVEL - distance)
            for row in {center - distance, center + distance}:
                if 0 <= row < GRID_ROWS:
                    grid[row][col] = max(grid[row][col], level)
    return grid
