"""Processing jobs: model, storage, lifecycle engine and change events."""

from rcb.jobs.events import JobEventBroker
from rcb.jobs.models import (
    ALLOWED_TRANSITIONS,
    TERMINAL_STATUSES,
    JobProgress,
    JobStatus,
    ProcessingError,
    ProcessingJob,
    ProgressUpdate,
    can_transition,
)
from rcb.jobs.store import InMemoryJobStore, JobStore, PostgresJobStore, build_job_store

__all__ = [
    "ALLOWED_TRANSITIONS",
    "TERMINAL_STATUSES",
    "InMemoryJobStore",
    "JobEventBroker",
    "JobProgress",
    "JobStatus",
    "JobStore",
    "PostgresJobStore",
    "ProcessingError",
    "ProcessingJob",
    "ProgressUpdate",
    "build_job_store",
    "can_transition",
]
