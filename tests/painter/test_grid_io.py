"""Grid import/export and validation tests."""

import json

import pytest

from app.painter.errors import GridFormatError, GridShapeError, InvalidRequestError
from app.painter.grid_io import export_grid_to_json, import_grid_from_json, parse_grid_document
from app.painter.line_graph import LineGraphConfig, LineGraphPreset
from app.painter.patterns import generate_preset_grid
from app.painter.validators import normalize_grid, validate_grid


def test_round_trip_reproduces_grid():
    grid = generate_preset_grid("CHAOS_WAVE", seed=3)
    assert import_grid_from_json(export_grid_to_json(grid)).grid == grid


def test_export_writes_versioned_document(single_cell_grid):
    document = json.loads(export_grid_to_json(single_cell_grid))
    assert document["version"] == 1
    assert document["grid"] == single_cell_grid
    assert "preset" not in document


def test_round_trip_keeps_line_graph_preset(empty_grid):
    preset = LineGraphPreset(config=LineGraphConfig(curve=[0.5] * 53, thickness=2, smoothing=1, jitter=0.1))
    document = import_grid_from_json(export_grid_to_json(empty_grid, preset=preset))
    assert document.preset == preset


def test_import_accepts_bare_matrix(single_cell_grid):
    document = import_grid_from_json(json.dumps(single_cell_grid))
    assert document.grid == single_cell_grid
    assert document.preset is None


def test_import_rejects_six_rows(empty_grid):
    with pytest.raises(GridShapeError, match="7 rows"):
        import_grid_from_json(json.dumps(empty_grid[:6]))


def test_import_rejects_54_columns(empty_grid):
    grid = [row + [0] for row in empty_grid]
    with pytest.raises(GridShapeError, match="53 columns"):
        import_grid_from_json(json.dumps({"version": 1, "grid": grid}))


def test_import_clamps_out_of_range_values(empty_grid):
    empty_grid[0][0] = 9
    empty_grid[1][1] = -3
    empty_grid[2][2] = 2.6
    document = import_grid_from_json(json.dumps(empty_grid))
    assert document.grid[0][0] == 4
    assert document.grid[1][1] == 0
    assert document.grid[2][2] == 3


def test_import_rejects_non_numeric_cells(empty_grid):
    empty_grid[0][0] = "4"
    with pytest.raises(GridFormatError):
        import_grid_from_json(json.dumps(empty_grid))


def test_import_rejects_unknown_version(empty_grid):
    with pytest.raises(GridFormatError, match="version"):
        parse_grid_document({"version": 2, "grid": empty_grid})


def test_import_rejects_invalid_preset(empty_grid):
    preset = {"type": "LINE_GRAPH", "config": {"curve": [0.5] * 10, "thickness": 1, "smoothing": 0, "jitter": 0}}
    with pytest.raises(GridFormatError, match="preset"):
        parse_grid_document({"version": 1, "grid": empty_grid, "preset": preset})


def test_import_rejects_invalid_json():
    with pytest.raises(GridFormatError):
        import_grid_from_json("{not json")


def test_import_rejects_document_without_grid():
    with pytest.raises(GridFormatError, match="grid"):
        parse_grid_document({"version": 1})


def test_validate_grid_accepts_valid_grid(single_cell_grid):
    assert validate_grid(single_cell_grid) is single_cell_grid


@pytest.mark.parametrize("bad_value", [5, -1, 1.5, True])
def test_validate_grid_rejects_bad_cells(empty_grid, bad_value):
    empty_grid[3][3] = bad_value
    with pytest.raises(InvalidRequestError):
        validate_grid(empty_grid)


def test_validate_grid_rejects_wrong_shape(empty_grid):
    with pytest.raises(GridShapeError):
        validate_grid(empty_grid[:-1])
    with pytest.raises(GridShapeError):
        validate_grid("not a grid")


def test_normalize_grid_returns_copy(single_cell_grid):
    normalized = normalize_grid(single_cell_grid)
    assert normalized == single_cell_grid
    assert normalized is not single_cell_grid
