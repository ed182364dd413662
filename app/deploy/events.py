"""Progress event contracts and the event-stream wire format.

Each event is sent as one frame: ``data: <json>`` followed by a blank line.
The stream ends after a done or error event.
"""

import json
from typing import Literal

from pydantic import BaseModel, Field


class GeneratingEvent(BaseModel):
    status: Literal["generating"] = "generating"
    current: int
    total: int
    message: str | None = None


class PushingEvent(BaseModel):
    status: Literal["pushing"] = "pushing"


class DoneEvent(BaseModel):
    status: Literal["done"] = "done"
    commit_count: int = Field(serialization_alias="commitCount")


class ErrorEvent(BaseModel):
    error: str


ProgressEvent = GeneratingEvent | PushingEvent | DoneEvent | ErrorEvent


def event_payload(event: ProgressEvent) -> dict[str, object]:
    """Return the wire payload for an event (camelCase keys, unset fields omitted)."""
    return event.model_dump(by_alias=True, exclude_none=True)


def format_sse(event: ProgressEvent) -> str:
    """Encode an event as a single event-stream frame."""
    return f"data: {json.dumps(event_payload(event))}\n\n"
