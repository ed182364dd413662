"""Deploy module - replaying commit plans onto a remote repository.

This module provides:
- DeploymentRunner: clone-or-init, replay, push, with streamed progress
- JobManager: background runs decoupled from their HTTP streams
- StatusStore: shared job status for pollers
- GitWorkingCopy: GitPython-backed working copy
"""

from app.deploy.errors import AcquisitionError, DeploymentError, PushError
from app.deploy.events import DoneEvent, ErrorEvent, GeneratingEvent, ProgressEvent, PushingEvent, format_sse
from app.deploy.jobs import JobHandle, JobManager, ProgressChannel
from app.deploy.runner import DeploymentRequest, DeploymentRunner
from app.deploy.status import JobStatus, StatusStore, status_from_event
from app.deploy.vcs import CommitIdentity, GitWorkingCopy

__all__ = [
    "AcquisitionError",
    "CommitIdentity",
    "DeploymentError",
    "DeploymentRequest",
    "DeploymentRunner",
    "DoneEvent",
    "ErrorEvent",
    "GeneratingEvent",
    "GitWorkingCopy",
    "JobHandle",
    "JobManager",
    "JobStatus",
    "ProgressChannel",
    "ProgressEvent",
    "PushError",
    "PushingEvent",
    "StatusStore",
    "format_sse",
    "status_from_event",
]
