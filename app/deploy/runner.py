"""Deployment runner.

Realizes a commit plan against a temporary working copy of the target
repository, one real commit per planned op, then pushes. Phases, in order:

1. setup       - generating (0/0)
2. acquisition - shallow clone, or init + remote registration on failure
3. compile     - generating (0/total)
4. replay      - one commit per op, generating every `progress_every` ops
5. push        - pushing
6. completion  - done (commitCount)

Any failure outside the clone ends the run with a single error event. The
working directory is removed on every exit path, so a failed run leaves
nothing behind.
"""

import asyncio
import shutil
import tempfile
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Protocol

from loguru import logger

from app.core.settings import Settings
from app.deploy.errors import AcquisitionError
from app.deploy.events import DoneEvent, ErrorEvent, GeneratingEvent, ProgressEvent, PushingEvent
from app.deploy.vcs import CommitIdentity, GitWorkingCopy, redact
from app.painter.compiler import commit_timestamp, compile_plan
from app.painter.types import CommitOp, CommitPlan, Grid

WORK_DIR_PREFIX = "git-painter-"

Emit = Callable[[ProgressEvent], Awaitable[None]]


class WorkingCopy(Protocol):
    def stage(self, relative_path: str) -> None: ...

    def commit(self, message: str, identity: CommitIdentity, timestamp: int) -> str: ...

    def current_branch(self) -> str | None: ...

    def push(self, branch: str) -> None: ...


class VcsBackend(Protocol):
    def clone(self, remote_url: str, path: Path, token: str, depth: int = 1) -> WorkingCopy: ...

    def init(self, path: Path, remote_url: str, token: str, initial_branch: str) -> WorkingCopy: ...


@dataclass(frozen=True)
class DeploymentRequest:
    """A validated request to paint `grid` onto `username/repo`."""

    grid: Grid
    token: str
    username: str
    repo: str
    year: int | None = None

    @property
    def slug(self) -> str:
        return f"{self.username}/{self.repo}"


class DeploymentRunner:
    """Runs one deployment per `run` call.

    Args:
        settings: Runtime settings (cadence, branch fallback, paths)
        backend: Version-control backend providing `clone` and `init`
    """

    def __init__(self, settings: Settings, backend: VcsBackend = GitWorkingCopy) -> None:
        self.settings = settings
        self.backend = backend

    async def run(self, request: DeploymentRequest, emit: Emit) -> int | None:
        """Run the deployment, reporting every phase through `emit`.

        Returns:
            Number of commits pushed, or None if the run failed
        """
        work_dir: Path | None = None
        logger.info(f"[DEPLOY] Starting run for {request.slug} (year={request.year or 'current'})")
        try:
            await emit(GeneratingEvent(current=0, total=0, message="Cloning repository..."))
            work_dir = await asyncio.to_thread(self._make_work_dir)

            working_copy = await self._acquire(work_dir, request)

            plan = compile_plan(request.grid, request.year)
            logger.info(f"[DEPLOY] Compiled {plan.total} commits for {request.slug}, base date {plan.base_date}")
            await emit(GeneratingEvent(current=0, total=plan.total))

            await self._replay(working_copy, work_dir, plan, request, emit)

            await emit(PushingEvent())
            branch = await asyncio.to_thread(working_copy.current_branch) or self.settings.default_branch
            logger.info(f"[DEPLOY] Pushing {plan.total} commits to {request.slug} ({branch})")
            await asyncio.to_thread(working_copy.push, branch)

            await emit(DoneEvent(commit_count=plan.total))
            logger.info(f"[DEPLOY] Run for {request.slug} completed")
            return plan.total
        except Exception as e:
            message = redact(str(e) or type(e).__name__, request.token)
            logger.error(f"[DEPLOY] Run for {request.slug} failed: {type(e).__name__}: {message}")
            await emit(ErrorEvent(error=message))
            return None
        finally:
            if work_dir is not None:
                await asyncio.to_thread(self._cleanup, work_dir)

    def remote_url(self, request: DeploymentRequest) -> str:
        return self.settings.remote_url_template.format(username=request.username, repo=request.repo)

    def identity(self, request: DeploymentRequest) -> CommitIdentity:
        return CommitIdentity(name=request.username, email=f"{request.username}@{self.settings.commit_email_domain}")

    def _make_work_dir(self) -> Path:
        if self.settings.work_root:
            Path(self.settings.work_root).mkdir(parents=True, exist_ok=True)
        return Path(tempfile.mkdtemp(prefix=WORK_DIR_PREFIX, dir=self.settings.work_root))

    async def _acquire(self, work_dir: Path, request: DeploymentRequest) -> WorkingCopy:
        remote_url = self.remote_url(request)
        try:
            return await asyncio.to_thread(self.backend.clone, remote_url, work_dir, request.token, self.settings.clone_depth)
        except Exception as e:
            logger.warning(f"[DEPLOY] Clone of {request.slug} failed, falling back to init: {redact(str(e), request.token)}")

        try:
            await asyncio.to_thread(_reset_dir, work_dir)
            return await asyncio.to_thread(
                self.backend.init, work_dir, remote_url, request.token, self.settings.default_branch
            )
        except Exception as e:
            raise AcquisitionError(f"Could not initialize working copy: {e}") from e

    async def _replay(
        self,
        working_copy: WorkingCopy,
        work_dir: Path,
        plan: CommitPlan,
        request: DeploymentRequest,
        emit: Emit,
    ) -> None:
        tracked = self.settings.tracked_file
        tracked_path = work_dir / tracked
        identity = self.identity(request)

        await asyncio.to_thread(_prepare_tracked_file, tracked_path, request.repo)

        current = 0
        for op in plan:
            await asyncio.to_thread(_append_marker, tracked_path, op)
            await asyncio.to_thread(working_copy.stage, tracked)
            await asyncio.to_thread(working_copy.commit, op.message, identity, commit_timestamp(op.target_date))
            current += 1
            if current % self.settings.progress_every == 0:
                await emit(GeneratingEvent(current=current, total=plan.total))

    def _cleanup(self, work_dir: Path) -> None:
        try:
            shutil.rmtree(work_dir)
            logger.debug(f"[DEPLOY] Removed working directory {work_dir}")
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.error(f"[DEPLOY] Failed to clean up working directory {work_dir}: {e}")


def _reset_dir(path: Path) -> None:
    """Empty `path` after a failed clone may have left partial content."""
    shutil.rmtree(path, ignore_errors=True)
    path.mkdir(parents=True, exist_ok=True)


def _prepare_tracked_file(path: Path, repo: str) -> None:
    if not path.exists():
        path.write_text(f"# Commit Art: {repo}\n\nGenerated with GitPainter.", encoding="utf-8")
    else:
        with path.open("a", encoding="utf-8") as f:
            f.write(f"\n\n## Update: {datetime.now(timezone.utc).isoformat()}")


def _append_marker(path: Path, op: CommitOp) -> None:
    # One distinct line per op so every commit gets its own tree
    with path.open("a", encoding="utf-8") as f:
        f.write(f"\n<!-- {op.target_date.isoformat()}-{op.sequence_index} -->")
