"""Job status store.

Holds the shared progress/outcome record that pollers read to resume
observing a run. Two views are kept:
- the latest record, whatever run wrote it (last writer wins)
- a bounded per-run map keyed by run id

The latest record can be mirrored to a JSON file so it survives restarts and
is visible to other workers. Writes are not locked.
"""

import time
from collections import OrderedDict
from pathlib import Path
from typing import Literal

from loguru import logger
from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from app.deploy.events import DoneEvent, ErrorEvent, GeneratingEvent, ProgressEvent, PushingEvent

JobState = Literal["idle", "generating", "pushing", "done", "error"]

TERMINAL_STATES: frozenset[str] = frozenset({"done", "error"})
IN_FLIGHT_STATES: frozenset[str] = frozenset({"generating", "pushing"})

INTERRUPTED_MESSAGE = "Run interrupted before completion"


def now_ms() -> int:
    return int(time.time() * 1000)


class JobStatus(BaseModel):
    """Progress/outcome record for a run.

    Attributes:
        state: Current phase
        current: Commits created so far
        total: Commits planned (0 until the plan is compiled)
        message: Optional human-readable detail (error text on failure)
        repo: Target repository as "username/repo"
        run_id: Run that wrote this record
        commit_count: Commits pushed (done only)
        timestamp: Last update, epoch milliseconds
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    state: JobState
    current: int | None = None
    total: int | None = None
    message: str | None = None
    repo: str | None = None
    run_id: str | None = None
    commit_count: int | None = None
    timestamp: int

    @classmethod
    def idle(cls) -> "JobStatus":
        return cls(state="idle", timestamp=now_ms())

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES


def status_from_event(
    event: ProgressEvent,
    *,
    run_id: str,
    repo: str | None = None,
    previous: JobStatus | None = None,
) -> JobStatus:
    """Convert a progress event into the status record it implies.

    Counters not carried by the event (pushing, error) are kept from the
    previous record of the same run.
    """
    current = previous.current if previous else None
    total = previous.total if previous else None
    base: dict[str, object] = {"run_id": run_id, "repo": repo, "timestamp": now_ms()}

    if isinstance(event, GeneratingEvent):
        return JobStatus(state="generating", current=event.current, total=event.total, message=event.message, **base)
    if isinstance(event, PushingEvent):
        return JobStatus(state="pushing", current=current, total=total, **base)
    if isinstance(event, DoneEvent):
        return JobStatus(
            state="done",
            current=event.commit_count,
            total=event.commit_count,
            commit_count=event.commit_count,
            **base,
        )
    if isinstance(event, ErrorEvent):
        return JobStatus(state="error", current=current, total=total, message=event.error, **base)
    raise TypeError(f"Unsupported progress event: {type(event).__name__}")


class StatusStore:
    """Process-wide status records.

    Args:
        max_runs: Maximum number of per-run records kept
        status_file: Optional JSON file mirroring the latest record
    """

    def __init__(self, max_runs: int = 32, status_file: str | Path | None = None) -> None:
        self.max_runs = max_runs
        self.status_file = Path(status_file) if status_file else None
        self._runs: OrderedDict[str, JobStatus] = OrderedDict()
        self._latest = JobStatus.idle()

    def latest(self) -> JobStatus:
        return self._latest

    def get(self, run_id: str) -> JobStatus | None:
        return self._runs.get(run_id)

    def update(self, status: JobStatus) -> bool:
        """Record a status.

        Returns:
            False if the record was dropped because its run already finished
        """
        if status.run_id is not None:
            existing = self._runs.get(status.run_id)
            if existing is not None and existing.is_terminal:
                logger.debug(f"[STATUS] Ignoring {status.state} for finished run {status.run_id}")
                return False
            self._runs[status.run_id] = status
            self._runs.move_to_end(status.run_id)
            self._evict()

        self._latest = status
        self._persist(status)
        return True

    def _evict(self) -> None:
        while len(self._runs) > self.max_runs:
            victim = next((run_id for run_id, s in self._runs.items() if s.is_terminal), None)
            if victim is None:
                victim = next(iter(self._runs))
                logger.warning(f"[STATUS] Evicting in-flight run {victim}: more than {self.max_runs} runs tracked")
            del self._runs[victim]

    def _persist(self, status: JobStatus) -> None:
        if self.status_file is None:
            return
        tmp_path = self.status_file.with_suffix(self.status_file.suffix + ".tmp")
        try:
            self.status_file.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(status.model_dump_json(by_alias=True, exclude_none=True), encoding="utf-8")
            tmp_path.replace(self.status_file)
        except OSError as e:
            logger.error(f"[STATUS] Failed to write status file {self.status_file}: {e}")

    def load(self) -> JobStatus:
        """Load the latest record from the status file.

        A persisted record left in an in-flight state belongs to a run that
        died with its process; it is rewritten as an error.
        """
        if self.status_file is None or not self.status_file.exists():
            return self._latest

        try:
            status = JobStatus.model_validate_json(self.status_file.read_text(encoding="utf-8"))
        except (OSError, ValidationError) as e:
            logger.warning(f"[STATUS] Ignoring unreadable status file {self.status_file}: {e}")
            return self._latest

        if status.state in IN_FLIGHT_STATES:
            logger.warning(f"[STATUS] Run {status.run_id} was left in '{status.state}'; marking as interrupted")
            status = status.model_copy(update={"state": "error", "message": INTERRUPTED_MESSAGE, "timestamp": now_ms()})
            self._persist(status)

        self._latest = status
        if status.run_id is not None:
            self._runs[status.run_id] = status
        return status
