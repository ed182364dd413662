"""Grid file import/export.

Exported files are versioned documents:

    {"version": 1, "grid": [[...], ...], "preset": {"type": "LINE_GRAPH", "config": {...}}}

Import also accepts a bare 7x53 matrix (the legacy export format). Shapes are
checked exactly; cell values are rounded and clamped into [0, 4].
"""

import json

from pydantic import BaseModel, ValidationError

from app.painter.constants import GRID_DOCUMENT_VERSION
from app.painter.errors import GridFormatError
from app.painter.line_graph import LineGraphPreset
from app.painter.types import Grid
from app.painter.validators import normalize_grid


class GridDocument(BaseModel):
    version: int = GRID_DOCUMENT_VERSION
    grid: Grid
    preset: LineGraphPreset | None = None


def serialize_grid_document(document: GridDocument) -> dict:
    """Serialize a GridDocument to a JSON-serializable dict (preset omitted when absent)."""
    return document.model_dump(mode="json", exclude_none=True)


def export_grid_to_json(grid: Grid, preset: LineGraphPreset | None = None) -> str:
    """Export a grid (and optional line graph preset) as a versioned JSON document."""
    document = GridDocument(grid=normalize_grid(grid), preset=preset)
    return json.dumps(serialize_grid_document(document))


def parse_grid_document(data: object) -> GridDocument:
    """Build a GridDocument from already-decoded JSON.

    Args:
        data: Bare matrix or versioned document

    Returns:
        GridDocument with a normalized grid

    Raises:
        GridShapeError: If the grid is not exactly 7x53
        GridFormatError: If the document is malformed
    """
    if isinstance(data, list):
        return GridDocument(grid=normalize_grid(data))

    if not isinstance(data, dict):
        raise GridFormatError("Grid file must contain a matrix or a grid document")

    version = data.get("version", GRID_DOCUMENT_VERSION)
    if version != GRID_DOCUMENT_VERSION:
        raise GridFormatError(f"Unsupported grid document version: {version}")
    if "grid" not in data:
        raise GridFormatError("Grid document is missing the 'grid' field")

    grid = normalize_grid(data["grid"])

    preset = None
    if data.get("preset") is not None:
        try:
            preset = LineGraphPreset.model_validate(data["preset"])
        except ValidationError as e:
            raise GridFormatError(f"Invalid preset: {e}") from e

    return GridDocument(version=version, grid=grid, preset=preset)


def import_grid_from_json(text: str | bytes) -> GridDocument:
    """Parse a grid file.

    Raises:
        GridShapeError: If the grid is not exactly 7x53
        GridFormatError: If the text is not valid JSON or the document is malformed
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise GridFormatError(f"Grid file is not valid JSON: {e}") from e
    return parse_grid_document(data)
