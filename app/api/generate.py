"""Commit generation and status endpoints.

POST /api/generate answers immediately with an event stream and keeps the run
going in the background even if the client goes away. GET /api/status lets a
client that reconnects pick the run back up.
"""

import json
from collections.abc import AsyncIterator

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import StreamingResponse
from loguru import logger

from app.api.dependencies.jobs import get_job_manager, get_status_store
from app.api.schemas.painter import parse_generate_request
from app.deploy.events import ErrorEvent, format_sse
from app.deploy.jobs import JobHandle, JobManager
from app.deploy.runner import DeploymentRequest
from app.deploy.status import JobStatus, StatusStore
from app.painter.errors import InvalidRequestError

router = APIRouter(prefix="/api", tags=["generate"])

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


async def _single_frame(event: ErrorEvent) -> AsyncIterator[str]:
    yield format_sse(event)


async def _stream_run(handle: JobHandle) -> AsyncIterator[str]:
    try:
        async for event in handle.events():
            yield format_sse(event)
    finally:
        if not handle.task.done():
            logger.info(f"[API] Client left run {handle.run_id}; continuing in background")


def _event_stream(body: AsyncIterator[str], run_id: str | None = None) -> StreamingResponse:
    headers = dict(SSE_HEADERS)
    if run_id:
        headers["X-Run-Id"] = run_id
    return StreamingResponse(body, media_type="text/event-stream", headers=headers)


@router.post("/generate")
async def generate(request: Request, jobs: JobManager = Depends(get_job_manager)) -> StreamingResponse:
    """Start painting a grid onto a repository and stream progress.

    Frames: generating (current/total), pushing, done (commitCount), or a
    single error frame. Invalid requests get one error frame and start nothing.
    """
    try:
        try:
            payload = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise InvalidRequestError("Request body must be valid JSON") from e
        body = parse_generate_request(payload)
    except InvalidRequestError as e:
        logger.warning(f"[API] Rejected generate request: {e}")
        return _event_stream(_single_frame(ErrorEvent(error=str(e))))

    handle = jobs.start(
        DeploymentRequest(
            grid=body.grid,
            token=body.token,
            username=body.username,
            repo=body.repo,
            year=body.year,
        )
    )
    return _event_stream(_stream_run(handle), run_id=handle.run_id)


@router.get("/generate/{run_id}/events")
async def follow_run(run_id: str, jobs: JobManager = Depends(get_job_manager)) -> StreamingResponse:
    """Re-attach to the event stream of a run that is still in progress."""
    handle = jobs.subscribe(run_id)
    if handle is None:
        raise HTTPException(status_code=404, detail=f"Run {run_id} is not in progress")
    return _event_stream(_stream_run(handle), run_id=run_id)


@router.get("/status", response_model=JobStatus, response_model_exclude_none=True)
def get_status(store: StatusStore = Depends(get_status_store)) -> JobStatus:
    """Return the most recently written job status (idle if nothing has run)."""
    return store.latest()


@router.get("/status/{run_id}", response_model=JobStatus, response_model_exclude_none=True)
def get_run_status(run_id: str, store: StatusStore = Depends(get_status_store)) -> JobStatus:
    """Return the status of one run."""
    status = store.get(run_id)
    if status is None:
        raise HTTPException(status_code=404, detail=f"Unknown run: {run_id}")
    return status
