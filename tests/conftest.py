"""Root conftest for all tests.

Provides settings pointed at a per-test work directory and an in-memory
version-control backend, so deployment tests never touch the network.
"""

from pathlib import Path

import pytest

from app.core.settings import Settings
from app.deploy.vcs import CommitIdentity
from app.painter.constants import GRID_COLS, GRID_ROWS


class FakeWorkingCopy:
    """Records what the runner does to a working copy."""

    def __init__(self, path: Path, branch: str | None = "main", push_error: Exception | None = None) -> None:
        self.path = path
        self.branch = branch
        self.push_error = push_error
        self.staged: list[str] = []
        self.commits: list[dict] = []
        self.pushed: list[str] = []

    def stage(self, relative_path: str) -> None:
        self.staged.append(relative_path)

    def commit(self, message: str, identity: CommitIdentity, timestamp: int) -> str:
        self.commits.append(
            {
                "message": message,
                "identity": identity,
                "timestamp": timestamp,
                "content": (self.path / "README.md").read_text(encoding="utf-8"),
            }
        )
        return f"{len(self.commits):040x}"

    def current_branch(self) -> str | None:
        return self.branch

    def push(self, branch: str) -> None:
        if self.push_error is not None:
            raise self.push_error
        self.pushed.append(branch)


class FakeBackend:
    """VCS backend whose clone/init outcomes are set per test."""

    def __init__(
        self,
        clone_error: Exception | None = None,
        init_error: Exception | None = None,
        branch: str | None = "main",
        push_error: Exception | None = None,
        existing_readme: str | None = None,
    ) -> None:
        self.clone_error = clone_error
        self.init_error = init_error
        self.branch = branch
        self.push_error = push_error
        self.existing_readme = existing_readme
        self.calls: list[tuple] = []
        self.copy: FakeWorkingCopy | None = None

    def clone(self, remote_url: str, path: Path, token: str, depth: int = 1) -> FakeWorkingCopy:
        self.calls.append(("clone", remote_url, token, depth))
        if self.clone_error is not None:
            # a failed clone may leave partial content behind
            (path / "partial").write_text("x", encoding="utf-8")
            raise self.clone_error
        if self.existing_readme is not None:
            (path / "README.md").write_text(self.existing_readme, encoding="utf-8")
        self.copy = FakeWorkingCopy(path, branch=self.branch, push_error=self.push_error)
        return self.copy

    def init(self, path: Path, remote_url: str, token: str, initial_branch: str) -> FakeWorkingCopy:
        self.calls.append(("init", remote_url, token, initial_branch))
        if self.init_error is not None:
            raise self.init_error
        self.copy = FakeWorkingCopy(path, branch=self.branch, push_error=self.push_error)
        return self.copy


@pytest.fixture
def work_root(tmp_path: Path) -> Path:
    return tmp_path / "work"


@pytest.fixture
def test_settings(work_root: Path) -> Settings:
    return Settings(work_root=str(work_root), progress_every=10, status_file=None)


@pytest.fixture
def make_backend() -> type[FakeBackend]:
    """Factory for backends with custom clone/init/push outcomes."""
    return FakeBackend


@pytest.fixture
def fake_backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def empty_grid() -> list[list[int]]:
    return [[0] * GRID_COLS for _ in range(GRID_ROWS)]


@pytest.fixture
def single_cell_grid(empty_grid: list[list[int]]) -> list[list[int]]:
    """All zeros except the first cell at full intensity (8 commits)."""
    empty_grid[0][0] = 4
    return empty_grid
