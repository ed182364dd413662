"""Background deployment jobs.

Each run is an asyncio task detached from the request that started it. The
HTTP stream is only a subscriber: dropping it removes one queue from the
run's channel and never touches the task. Every event is written to the
status store before it is published, so pollers see it even when nobody is
subscribed.
"""

import asyncio
import uuid
from collections.abc import AsyncIterator
from dataclasses import dataclass
from functools import partial

from loguru import logger

from app.deploy.events import ProgressEvent
from app.deploy.runner import DeploymentRequest, DeploymentRunner
from app.deploy.status import JobStatus, StatusStore, now_ms, status_from_event


class ProgressChannel:
    """Fan-out of one run's events to any number of subscriber queues.

    A None item marks the end of the stream.
    """

    def __init__(self) -> None:
        self._subscribers: list[asyncio.Queue[ProgressEvent | None]] = []
        self.closed = False

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self) -> asyncio.Queue[ProgressEvent | None]:
        queue: asyncio.Queue[ProgressEvent | None] = asyncio.Queue()
        if self.closed:
            queue.put_nowait(None)
        else:
            self._subscribers.append(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue[ProgressEvent | None]) -> None:
        if queue in self._subscribers:
            self._subscribers.remove(queue)

    def publish(self, event: ProgressEvent) -> None:
        for queue in self._subscribers:
            queue.put_nowait(event)

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        for queue in self._subscribers:
            queue.put_nowait(None)
        self._subscribers.clear()


@dataclass
class JobHandle:
    """A started run plus one subscription to its events."""

    run_id: str
    task: asyncio.Task
    channel: ProgressChannel
    queue: asyncio.Queue

    async def events(self) -> AsyncIterator[ProgressEvent]:
        """Yield events until the run ends; unsubscribes when the consumer stops."""
        try:
            while True:
                event = await self.queue.get()
                if event is None:
                    break
                yield event
        finally:
            self.channel.unsubscribe(self.queue)


class JobManager:
    """Starts deployment runs and mirrors their progress into the status store."""

    def __init__(self, store: StatusStore, runner: DeploymentRunner) -> None:
        self.store = store
        self.runner = runner
        # Strong references; the event loop only keeps weak ones to tasks
        self._tasks: dict[str, asyncio.Task] = {}
        self._channels: dict[str, ProgressChannel] = {}

    @property
    def active_runs(self) -> list[str]:
        return list(self._channels)

    def start(self, request: DeploymentRequest) -> JobHandle:
        """Start a run in the background and subscribe to it.

        Must be called from a running event loop.
        """
        run_id = uuid.uuid4().hex
        self.store.update(
            JobStatus(state="generating", current=0, total=0, repo=request.slug, run_id=run_id, timestamp=now_ms())
        )
        channel = ProgressChannel()
        queue = channel.subscribe()
        self._channels[run_id] = channel

        task = asyncio.create_task(self._run(run_id, request, channel), name=f"deploy-{run_id}")
        self._tasks[run_id] = task
        task.add_done_callback(partial(self._on_task_done, run_id))

        logger.info(f"[JOBS] Started run {run_id} for {request.slug}")
        return JobHandle(run_id=run_id, task=task, channel=channel, queue=queue)

    def subscribe(self, run_id: str) -> JobHandle | None:
        """Attach a new subscriber to a live run, or None if it is not running."""
        channel = self._channels.get(run_id)
        task = self._tasks.get(run_id)
        if channel is None or task is None:
            return None
        return JobHandle(run_id=run_id, task=task, channel=channel, queue=channel.subscribe())

    async def _run(self, run_id: str, request: DeploymentRequest, channel: ProgressChannel) -> int | None:
        async def emit(event: ProgressEvent) -> None:
            status = status_from_event(event, run_id=run_id, repo=request.slug, previous=self.store.get(run_id))
            self.store.update(status)
            channel.publish(event)

        try:
            return await self.runner.run(request, emit)
        finally:
            channel.close()
            self._channels.pop(run_id, None)

    def _on_task_done(self, run_id: str, task: asyncio.Task) -> None:
        self._tasks.pop(run_id, None)
        if task.cancelled():
            logger.warning(f"[JOBS] Task {task.get_name()} was cancelled")
            return
        error = task.exception()
        if error is not None:
            logger.error(f"[JOBS] Task {task.get_name()} crashed: {error!r}")

    async def join(self) -> None:
        """Wait for every running task to finish."""
        if self._tasks:
            await asyncio.gather(*self._tasks.values(), return_exceptions=True)
