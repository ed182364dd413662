"""Grid validators with hard guardrails.

Two flavours:
- validate_grid: strict, used for generation requests (rejects anything off)
- normalize_grid: lenient, used for file import (clamps values into range)

Both enforce the exact 7x53 shape.
"""

import math

from app.painter.constants import GRID_COLS, GRID_ROWS, MAX_LEVEL, MIN_LEVEL
from app.painter.errors import GridFormatError, GridShapeError, InvalidRequestError
from app.painter.types import Grid


def validate_grid_shape(grid: object) -> None:
    """Validate that `grid` is a list of 7 rows of 53 cells.

    Raises:
        GridShapeError: If the row or column count is wrong
    """
    if not isinstance(grid, list):
        raise GridShapeError(f"Grid must be a list of {GRID_ROWS} rows")
    if len(grid) != GRID_ROWS:
        raise GridShapeError(f"Grid must have exactly {GRID_ROWS} rows, got {len(grid)}")
    for r, row in enumerate(grid):
        if not isinstance(row, list):
            raise GridShapeError(f"Row {r} must be a list of {GRID_COLS} cells")
        if len(row) != GRID_COLS:
            raise GridShapeError(f"Row {r} must have exactly {GRID_COLS} columns, got {len(row)}")


def _is_number(value: object) -> bool:
    # bool is an int subclass but never a valid intensity
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def validate_grid(grid: object) -> Grid:
    """Validate a grid for commit generation.

    Enforces:
    - exactly 7 rows of 53 columns
    - every cell is an integer
    - every cell is within [0, 4]

    Returns:
        The grid, unchanged

    Raises:
        GridShapeError: If the shape is wrong
        InvalidRequestError: If a cell is not an integer in range
    """
    validate_grid_shape(grid)
    for r, row in enumerate(grid):  # type: ignore[arg-type]
        for c, value in enumerate(row):
            if not isinstance(value, int) or isinstance(value, bool):
                raise InvalidRequestError(f"Cell ({r}, {c}) must be an integer, got {value!r}")
            if not MIN_LEVEL <= value <= MAX_LEVEL:
                raise InvalidRequestError(f"Cell ({r}, {c}) must be between {MIN_LEVEL} and {MAX_LEVEL}, got {value}")
    return grid  # type: ignore[return-value]


def clamp_level(value: float) -> int:
    """Round and clamp a numeric value into the valid intensity range."""
    return max(MIN_LEVEL, min(MAX_LEVEL, round(value)))


def normalize_grid(grid: object) -> Grid:
    """Return a copy of `grid` with every cell rounded and clamped into [0, 4].

    Raises:
        GridShapeError: If the shape is wrong
        GridFormatError: If a cell is not a number
    """
    validate_grid_shape(grid)
    normalized: Grid = []
    for r, row in enumerate(grid):  # type: ignore[arg-type]
        out_row = []
        for c, value in enumerate(row):
            if not _is_number(value):
                raise GridFormatError(f"Cell ({r}, {c}) must be a number, got {value!r}")
            out_row.append(clamp_level(value))
        normalized.append(out_row)
    return normalized
