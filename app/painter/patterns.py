"""Procedural grid generators.

Every generator returns a fresh 7x53 grid with values in [0, 4]. Random
presets take an optional seed so the same request yields the same grid.
"""

import math
import random

from app.painter.constants import COMMITS_PER_LEVEL, GRID_COLS, GRID_ROWS, MAX_LEVEL, PRESETS, GradientDirection
from app.painter.font import render_text_to_grid
from app.painter.line_graph import default_line_graph_config, render_line_graph
from app.painter.types import Grid
from app.painter.validators import clamp_level

CENTER_COL = GRID_COLS // 2
CENTER_ROW = GRID_ROWS // 2

# (rows above center, column offset)
HEART_COORDS = [
    (1, -1), (1, 1),
    (0, -2), (0, -1), (0, 0), (0, 1), (0, 2),
    (-1, -2), (-1, -1), (-1, 0), (-1, 1), (-1, 2),
    (-2, -1), (-2, 0), (-2, 1),
    (-3, 0),
]

# (row offset from row 1, column offset)
INVADER_COORDS = [
    (0, 0), (0, -1), (0, 1),
    (1, -1), (1, 1),
    (2, -2), (2, 2), (2, -1), (2, 1), (2, 0),
    (3, -1), (3, 1), (3, -2), (3, 2),
    (4, -2), (4, 2), (4, -1), (4, 1),
]

# (row, column offset from center)
SMILEY_EYES = [(1, -2), (2, -2), (1, 2), (2, 2)]
SMILEY_MOUTH = [(4, -3), (4, 3), (5, -2), (5, -1), (5, 0), (5, 1), (5, 2)]

# (row offset from row 1, column offset from CENTER_COL - 3)
HI_COORDS = [
    (0, 0), (1, 0), (2, 0), (3, 0), (4, 0), (2, 1), (0, 2), (1, 2), (2, 2), (3, 2), (4, 2),
    (0, 4), (4, 4), (0, 5), (4, 5), (0, 6), (1, 6), (2, 6), (3, 6), (4, 6),
]


def create_empty_grid() -> Grid:
    return [[0] * GRID_COLS for _ in range(GRID_ROWS)]


def calculate_estimated_commits(grid: Grid, intensity: int = 1) -> int:
    """Estimate how many commits painting `grid` creates."""
    return sum(cell * intensity * COMMITS_PER_LEVEL for row in grid for cell in row)


def _plot(grid: Grid, cells: list[tuple[int, int]], level: int) -> None:
    for row, col in cells:
        if 0 <= row < GRID_ROWS and 0 <= col < GRID_COLS:
            grid[row][col] = level


def _dither_noise(row: int, col: int) -> float:
    """Deterministic pseudo-random value in [0, 1) for a cell."""
    x = math.sin((row + 1) * 9283 + (col + 1) * 5471) * 43758.5453
    return x - math.floor(x)


def generate_gradient_grid(direction: GradientDirection, max_level: float) -> Grid:
    """Generate a dithered linear gradient from 0 to `max_level`.

    Fractional levels are dithered with stable per-cell noise so the gradient
    does not show hard steps.
    """
    clamped_max = clamp_level(max_level)
    col_max = max(GRID_COLS - 1, 1)
    row_max = max(GRID_ROWS - 1, 1)

    grid = create_empty_grid()
    for r in range(GRID_ROWS):
        for c in range(GRID_COLS):
            if direction == "RIGHT_TO_LEFT":
                progress = 1 - c / col_max
            elif direction == "TOP_TO_BOTTOM":
                progress = r / row_max
            elif direction == "BOTTOM_TO_TOP":
                progress = 1 - r / row_max
            else:
                progress = c / col_max

            float_level = progress * clamped_max
            base = math.floor(float_level)
            value = base + (1 if _dither_noise(r, c) < float_level - base else 0)
            grid[r][c] = min(clamped_max, max(0, value))
    return grid


def _random_scatter(rng: random.Random) -> Grid:
    grid = create_empty_grid()
    for r in range(GRID_ROWS):
        for c in range(GRID_COLS):
            if rng.random() > 0.7:
                grid[r][c] = rng.randint(1, MAX_LEVEL)
    return grid


def _chaos_wave(rng: random.Random) -> Grid:
    """Dense "sustained activity" band concentrated on the middle rows."""
    grid = create_empty_grid()
    mid_rows = [2, 3, 4]
    edge_rows = [1, 5]

    for c in range(GRID_COLS):
        # rare breathing columns
        if rng.random() < 0.005:
            continue

        center = rng.choice(mid_rows)
        height = rng.randint(1, 3)

        for r in range(GRID_ROWS):
            in_band = abs(r - center) <= height
            is_edge = r in edge_rows and rng.random() < 0.75
            if (in_band and rng.random() > 0.03) or is_edge:
                grid[r][c] = max(grid[r][c], rng.randint(1, MAX_LEVEL))

        # occasional spikes on the top or bottom row
        if rng.random() < 0.08:
            strength = rng.randint(2, MAX_LEVEL)
            target_row = 0 if rng.random() < 0.5 else GRID_ROWS - 1
            grid[target_row][c] = max(grid[target_row][c], strength - 1)

    for r in range(GRID_ROWS):
        for c in range(GRID_COLS):
            if grid[r][c] == 0 and rng.random() < 0.45:
                grid[r][c] = rng.randint(1, 3)
    return grid


def generate_preset_grid(name: str, seed: int | None = None) -> Grid:
    """Generate a named preset pattern.

    Args:
        name: One of the PRESETS keys
        seed: Seed for random presets (RANDOM_SCATTER, CHAOS_WAVE, LINE_GRAPH)

    Raises:
        ValueError: If the preset name is unknown
    """
    if name not in PRESETS:
        raise ValueError(f"Unknown preset: {name}. Valid presets: {', '.join(PRESETS)}")

    rng = random.Random(seed)
    grid = create_empty_grid()

    if name == "HEART":
        _plot(grid, [(CENTER_ROW - r, CENTER_COL + c) for r, c in HEART_COORDS], 3)
    elif name == "SPACE_INVADER":
        _plot(grid, [(1 + r, CENTER_COL + c) for r, c in INVADER_COORDS], MAX_LEVEL)
    elif name == "SMILEY":
        _plot(grid, [(r, CENTER_COL + c) for r, c in SMILEY_EYES], MAX_LEVEL)
        _plot(grid, [(r, CENTER_COL + c) for r, c in SMILEY_MOUTH], 3)
    elif name == "HI":
        _plot(grid, [(1 + r, CENTER_COL - 3 + c) for r, c in HI_COORDS], MAX_LEVEL)
    elif name == "RIP":
        grid = render_text_to_grid("RIP")
    elif name == "CHECKERBOARD":
        _plot(grid, [(r, c) for r in range(GRID_ROWS) for c in range(GRID_COLS) if (r + c) % 2 == 0], 2)
    elif name == "RANDOM_SCATTER":
        grid = _random_scatter(rng)
    elif name == "CHAOS_WAVE":
        grid = _chaos_wave(rng)
    elif name == "LINE_GRAPH":
        grid = render_line_graph(default_line_graph_config(), seed=seed)
    return grid
