"""Pattern tool endpoints.

Stateless grid generators for the editor: presets, gradients, text, line
graphs, commit estimates and grid file import/export.
"""

from typing import Any

from fastapi import APIRouter, Body, HTTPException
from loguru import logger

from app.api.schemas.painter import (
    EstimateRequest,
    EstimateResponse,
    ExportRequest,
    GradientRequest,
    GridResponse,
    LineGraphRequest,
    PresetInfo,
    PresetRequest,
    TextRequest,
)
from app.painter.constants import PRESETS
from app.painter.errors import PainterError
from app.painter.font import render_text_to_grid
from app.painter.grid_io import GridDocument, parse_grid_document, serialize_grid_document
from app.painter.line_graph import LineGraphConfig, render_line_graph
from app.painter.patterns import calculate_estimated_commits, generate_gradient_grid, generate_preset_grid
from app.painter.types import Grid

router = APIRouter(prefix="/api/patterns", tags=["patterns"])


def _grid_response(grid: Grid) -> GridResponse:
    return GridResponse(grid=grid, estimated_commits=calculate_estimated_commits(grid))


@router.get("/presets", response_model=list[PresetInfo])
def list_presets() -> list[PresetInfo]:
    return [PresetInfo(id=key, name=info["name"], description=info["description"]) for key, info in PRESETS.items()]


@router.post("/preset", response_model=GridResponse)
def preset(req: PresetRequest) -> GridResponse:
    return _grid_response(generate_preset_grid(req.name, seed=req.seed))


@router.post("/gradient", response_model=GridResponse)
def gradient(req: GradientRequest) -> GridResponse:
    return _grid_response(generate_gradient_grid(req.direction, req.max_level))


@router.post("/text", response_model=GridResponse)
def text(req: TextRequest) -> GridResponse:
    return _grid_response(render_text_to_grid(req.text, level=req.level))


@router.post("/line-graph", response_model=GridResponse)
def line_graph(req: LineGraphRequest) -> GridResponse:
    config = LineGraphConfig.model_validate(req.model_dump(exclude={"seed"}))
    return _grid_response(render_line_graph(config, seed=req.seed))


@router.post("/estimate", response_model=EstimateResponse)
def estimate(req: EstimateRequest) -> EstimateResponse:
    return EstimateResponse(estimated_commits=calculate_estimated_commits(req.grid, req.intensity))


@router.post("/export")
def export_grid(req: ExportRequest) -> dict:
    """Return the versioned grid document for download."""
    return serialize_grid_document(GridDocument(grid=req.grid, preset=req.preset))


@router.post("/import")
def import_grid(document: Any = Body(...)) -> dict:
    """Validate an uploaded grid file (bare matrix or versioned document).

    Cell values are clamped into range; a wrong shape is rejected.
    """
    try:
        parsed = parse_grid_document(document)
    except PainterError as e:
        logger.info(f"[API] Rejected grid import: {e}")
        raise HTTPException(status_code=422, detail=str(e)) from e
    return serialize_grid_document(parsed)
