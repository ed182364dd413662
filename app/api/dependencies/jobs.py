"""Deployment job dependencies.

Provides the process-wide status store and job manager. Both are created
lazily from settings; tests swap them through `app.dependency_overrides`.
"""

from __future__ import annotations

from functools import lru_cache

from fastapi import Depends

from app.core.settings import settings
from app.deploy.jobs import JobManager
from app.deploy.runner import DeploymentRunner
from app.deploy.status import StatusStore


@lru_cache(maxsize=1)
def get_status_store() -> StatusStore:
    """Return the shared status store, loading any persisted record once."""
    store = StatusStore(max_runs=settings.status_max_runs, status_file=settings.status_file)
    store.load()
    return store


@lru_cache(maxsize=1)
def _job_manager(store: StatusStore) -> JobManager:
    return JobManager(store=store, runner=DeploymentRunner(settings))


def get_job_manager(store: StatusStore = Depends(get_status_store)) -> JobManager:
    """FastAPI dependency returning the shared job manager."""
    return _job_manager(store)
