"""Pattern compiler tests.

Tests enforce:
1. Commit count equals the sum of 2*v over all cells
2. A single cell expands to 2*v commits on base + 7*col + row days
3. Plans are ordered chronologically (column, row, index within day)
4. Column 0 starts on the Sunday on or before January 1
"""

import random
from datetime import date, datetime, timedelta, timezone

import pytest

from app.painter.compiler import base_date, cell_date, commit_timestamp, compile_plan, count_commits, week_start
from app.painter.constants import GRID_COLS, GRID_ROWS, MAX_YEAR, MIN_YEAR
from app.painter.errors import InvalidRequestError


def _random_grid(seed: int) -> list[list[int]]:
    rng = random.Random(seed)
    return [[rng.randint(0, 4) for _ in range(GRID_COLS)] for _ in range(GRID_ROWS)]


def test_week_start_is_previous_or_same_sunday():
    assert week_start(date(2024, 1, 1)) == date(2023, 12, 31)  # Monday
    assert week_start(date(2023, 1, 1)) == date(2023, 1, 1)  # Sunday
    assert week_start(date(2022, 1, 1)) == date(2021, 12, 26)  # Saturday


def test_base_date_anchors_week_containing_january_first():
    for year in range(2015, 2031):
        base = base_date(year)
        assert base.weekday() == 6
        assert base <= date(year, 1, 1) < base + timedelta(days=7)


@pytest.mark.parametrize("seed", [0, 1, 2, 3])
def test_total_matches_sum_of_twice_values(seed: int):
    grid = _random_grid(seed)
    plan = compile_plan(grid, 2024)

    expected = sum(2 * v for row in grid for v in row)
    assert plan.total == expected
    assert len(plan.ops) == expected
    assert count_commits(grid) == expected


@pytest.mark.parametrize(("row", "col", "value"), [(0, 0, 1), (3, 10, 4), (6, 52, 2), (2, 26, 3)])
def test_single_cell_expands_on_one_date(empty_grid, row: int, col: int, value: int):
    empty_grid[row][col] = value
    plan = compile_plan(empty_grid, 2024)

    assert plan.total == 2 * value
    expected_date = base_date(2024) + timedelta(days=7 * col + row)
    assert {op.target_date for op in plan.ops} == {expected_date}
    assert [op.sequence_index for op in plan.ops] == list(range(2 * value))
    assert all((op.row, op.col) == (row, col) for op in plan.ops)


def test_plan_is_chronological():
    plan = compile_plan(_random_grid(7), 2025)

    dates = [op.target_date for op in plan.ops]
    assert dates == sorted(dates)

    keys = [(op.col, op.row, op.sequence_index) for op in plan.ops]
    assert keys == sorted(keys)


def test_same_day_ops_are_distinguishable(empty_grid):
    empty_grid[4][5] = 4
    plan = compile_plan(empty_grid, 2024)

    messages = [op.message for op in plan.ops]
    assert len(set(messages)) == len(messages)
    assert messages[0] == "Art 5-4-0"


def test_zero_grid_compiles_to_empty_plan(empty_grid):
    plan = compile_plan(empty_grid, 2024)
    assert plan.total == 0
    assert plan.ops == ()


def test_compile_is_deterministic():
    grid = _random_grid(11)
    assert compile_plan(grid, 2023) == compile_plan(grid, 2023)


def test_year_defaults_to_current(single_cell_grid):
    current = date.today().year
    assert compile_plan(single_cell_grid).year == current
    assert compile_plan(single_cell_grid, 0).year == current
    assert compile_plan(single_cell_grid, None).base_date == base_date(current)


def test_end_to_end_plan_for_2024(single_cell_grid):
    plan = compile_plan(single_cell_grid, 2024)

    assert plan.total == 8
    assert plan.base_date == date(2023, 12, 31)
    assert all(op.target_date == date(2023, 12, 31) for op in plan.ops)


def test_cell_date_spans_53_weeks():
    base = base_date(2024)
    assert cell_date(base, 0, 0) == base
    assert cell_date(base, 6, 52) == base + timedelta(days=52 * 7 + 6)


def test_commit_timestamp_is_midnight_utc():
    assert commit_timestamp(date(2024, 1, 1)) == 1704067200
    assert commit_timestamp(date(2023, 12, 31)) == 1703980800
    moment = datetime.fromtimestamp(commit_timestamp(date(2024, 7, 4)), tz=timezone.utc)
    assert (moment.hour, moment.minute, moment.second) == (0, 0, 0)


def test_negative_values_are_not_validated_by_compiler(empty_grid):
    empty_grid[0][0] = -2
    assert count_commits(empty_grid) == -4
    assert compile_plan(empty_grid, 2024).total == 0


def test_last_supported_year_fits_calendar(empty_grid):
    empty_grid[6][52] = 1
    plan = compile_plan(empty_grid, MAX_YEAR)
    assert plan.total == 2
    assert plan.ops[-1].target_date == cell_date(base_date(MAX_YEAR), 6, 52)


@pytest.mark.parametrize("year", [MIN_YEAR - 1, MAX_YEAR + 1, -5])
def test_unsupported_year_raises(empty_grid, year: int):
    empty_grid[6][52] = 1
    with pytest.raises(InvalidRequestError, match="Year must be between"):
        compile_plan(empty_grid, year)
