"""Commit plan types.

A CommitPlan is the ordered list of dated commits derived from a grid.
Plans are immutable: the runner consumes each CommitOp exactly once and
nothing is persisted.
"""

from dataclasses import dataclass
from datetime import date

Grid = list[list[int]]


@dataclass(frozen=True)
class CommitOp:
    """One planned commit.

    Attributes:
        target_date: Calendar day the commit is dated on
        sequence_index: Position among the commits of the same day (0-based)
        row: Grid row (day of week) the commit comes from
        col: Grid column (week index) the commit comes from
    """

    target_date: date
    sequence_index: int
    row: int
    col: int

    @property
    def message(self) -> str:
        return f"Art {self.col}-{self.row}-{self.sequence_index}"


@dataclass(frozen=True)
class CommitPlan:
    """Ordered commits for one grid and year.

    Ops are ordered by column, then row, then sequence index, which is
    chronological by target date.
    """

    year: int
    base_date: date
    ops: tuple[CommitOp, ...]

    @property
    def total(self) -> int:
        return len(self.ops)

    def __iter__(self):
        return iter(self.ops)

    def __len__(self) -> int:
        return len(self.ops)
