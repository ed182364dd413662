"""Pattern compiler.

Expands a 7x53 intensity grid into the ordered list of dated commits that
makes the contribution graph render it. Column 0 is the week (Sunday start)
containing January 1 of the target year, matching how the graph anchors its
first rendered week.
"""

from datetime import date, datetime, time, timedelta, timezone

from app.painter.constants import COMMITS_PER_LEVEL, GRID_COLS, GRID_ROWS, MAX_YEAR, MIN_YEAR
from app.painter.errors import InvalidRequestError
from app.painter.types import CommitOp, CommitPlan, Grid


def week_start(day: date) -> date:
    """Return the Sunday on or before `day`."""
    # weekday(): Mon=0..Sun=6
    return day - timedelta(days=(day.weekday() + 1) % 7)


def base_date(year: int) -> date:
    """Return the first rendered day (column 0, row 0) of `year`'s graph."""
    return week_start(date(year, 1, 1))


def cell_date(base: date, row: int, col: int) -> date:
    """Return the calendar day rendered at (row, col) for a graph starting at `base`."""
    return base + timedelta(days=7 * col + row)


def commit_timestamp(day: date) -> int:
    """Return epoch seconds of `day` at midnight UTC."""
    return int(datetime.combine(day, time(0, 0), tzinfo=timezone.utc).timestamp())


def count_commits(grid: Grid) -> int:
    """Return the number of commits a grid expands to.

    Values are not validated here; out-of-range cells contribute via the same
    formula and must be rejected by the caller.
    """
    return sum(COMMITS_PER_LEVEL * value for row in grid for value in row)


def compile_plan(grid: Grid, year: int | None = None) -> CommitPlan:
    """Compile a grid into an ordered CommitPlan.

    Args:
        grid: 7x53 matrix of intensities (0-4)
        year: Target year; defaults to the current year when None or 0

    Returns:
        CommitPlan with 2*v commits per cell, ordered column-major, then by
        row, then by index within the day

    Raises:
        InvalidRequestError: If the year is outside the supported range
    """
    target_year = year or date.today().year
    if not MIN_YEAR <= target_year <= MAX_YEAR:
        raise InvalidRequestError(f"Year must be between {MIN_YEAR} and {MAX_YEAR}, got {target_year}")
    base = base_date(target_year)

    ops: list[CommitOp] = []
    for col in range(GRID_COLS):
        for row in range(GRID_ROWS):
            value = grid[row][col]
            if value <= 0:
                continue
            day = cell_date(base, row, col)
            ops.extend(CommitOp(target_date=day, sequence_index=i, row=row, col=col) for i in range(COMMITS_PER_LEVEL * value))

    return CommitPlan(year=target_year, base_date=base, ops=tuple(ops))
