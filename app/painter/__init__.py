"""Painter module - grids, commit plans and pattern generators.

This module provides:
- Pattern compiler turning a 7x53 intensity grid into dated commits
- Grid validation (strict for generation, clamping for import)
- Versioned JSON import/export
- Procedural patterns (presets, gradients, text, line graphs)
"""

from app.painter.compiler import base_date, cell_date, commit_timestamp, compile_plan, count_commits, week_start
from app.painter.errors import GridFormatError, GridShapeError, InvalidRequestError, PainterError
from app.painter.font import render_text_to_grid
from app.painter.grid_io import GridDocument, export_grid_to_json, import_grid_from_json, parse_grid_document
from app.painter.line_graph import LineGraphConfig, LineGraphPreset, render_line_graph
from app.painter.patterns import (
    calculate_estimated_commits,
    create_empty_grid,
    generate_gradient_grid,
    generate_preset_grid,
)
from app.painter.types import CommitOp, CommitPlan, Grid
from app.painter.validators import normalize_grid, validate_grid

__all__ = [
    "CommitOp",
    "CommitPlan",
    "Grid",
    "GridDocument",
    "GridFormatError",
    "GridShapeError",
    "InvalidRequestError",
    "LineGraphConfig",
    "LineGraphPreset",
    "PainterError",
    "base_date",
    "calculate_estimated_commits",
    "cell_date",
    "commit_timestamp",
    "compile_plan",
    "count_commits",
    "create_empty_grid",
    "export_grid_to_json",
    "generate_gradient_grid",
    "generate_preset_grid",
    "import_grid_from_json",
    "normalize_grid",
    "parse_grid_document",
    "render_line_graph",
    "render_text_to_grid",
    "validate_grid",
    "week_start",
]
