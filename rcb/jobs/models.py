"""Processing job schema, status state machine and progress accounting."""

from __future__ import annotations

import uuid
from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import Field

from rcb.errors import InvalidTransition
from rcb.schemas.base import CamelModel, utcnow
from rcb.schemas.catalog import Product
from rcb.schemas.content import ContentConfig

ErrorType = Literal["ai-generation", "validation", "deployment", "network"]


class JobStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


TERMINAL_STATUSES = frozenset({JobStatus.COMPLETED, JobStatus.FAILED, JobStatus.CANCELLED})

ALLOWED_TRANSITIONS: dict[JobStatus, frozenset[JobStatus]] = {
    JobStatus.PENDING: frozenset({JobStatus.RUNNING}),
    JobStatus.RUNNING: frozenset(
        {JobStatus.PAUSED, JobStatus.CANCELLED, JobStatus.COMPLETED, JobStatus.FAILED}
    ),
    JobStatus.PAUSED: frozenset({JobStatus.RUNNING, JobStatus.CANCELLED}),
    JobStatus.COMPLETED: frozenset(),
    JobStatus.FAILED: frozenset(),
    JobStatus.CANCELLED: frozenset(),
}


def can_transition(current: JobStatus, new: JobStatus) -> bool:
    return new in ALLOWED_TRANSITIONS[current]


class JobProgress(CamelModel):
    total: int = Field(default=0, ge=0)
    completed: int = Field(default=0, ge=0)
    failed: int = Field(default=0, ge=0)
    percentage: int = Field(default=0, ge=0, le=100)

    @staticmethod
    def percent(completed: int, total: int) -> int:
        if total == 0:
            return 0
        # Integer half-up: 1/8 is 13, not 12
        return (200 * completed + total) // (2 * total)

    def advanced(self, completed: int, failed: int) -> "JobProgress":
        """Return a new progress with the tick's outcome folded in."""
        new_completed = self.completed + completed
        new_failed = self.failed + failed
        if new_completed + new_failed > self.total:
            raise ValueError(
                f"progress overflow: {new_completed} + {new_failed} > {self.total}"
            )
        return JobProgress(
            total=self.total,
            completed=new_completed,
            failed=new_failed,
            percentage=self.percent(new_completed, self.total),
        )


class ProcessingError(CamelModel):
    """One failed product attempt."""

    product_id: int
    product_name: str
    error_type: ErrorType
    message: str
    timestamp: datetime = Field(default_factory=utcnow)
    retry_count: int = 0
    max_retries: int = 3


class ProgressUpdate(CamelModel):
    """Per-tick progress event (what is being worked on, time remaining)."""

    job_id: str
    current_product: str | None = None
    estimated_time_remaining: int | None = None  # seconds
    message: str = ""
    created_at: datetime = Field(default_factory=utcnow)


class ProcessingJob(CamelModel):
    """Bulk content-generation job over a fixed product set."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    categories: list[str] = Field(default_factory=list)
    products: list[Product] = Field(default_factory=list)
    config: ContentConfig = Field(default_factory=ContentConfig)
    batch_size: int = Field(default=25, ge=1)
    concurrent: int = Field(default=5, ge=1)
    status: JobStatus = JobStatus.PENDING
    progress: JobProgress = Field(default_factory=JobProgress)
    cursor: int = Field(default=0, ge=0)
    errors: list[ProcessingError] = Field(default_factory=list)
    started_at: datetime = Field(default_factory=utcnow)
    completed_at: datetime | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def next_batch(self) -> list[Product]:
        """Next unprocessed slice, in resolved order."""
        size = min(self.batch_size, self.progress.total - self.cursor)
        if size <= 0:
            return []
        return self.products[self.cursor:self.cursor + size]

    def transition(self, new_status: JobStatus) -> None:
        """Apply a status change in place or raise InvalidTransition."""
        if not can_transition(self.status, new_status):
            raise InvalidTransition(self.id, self.status.value, new_status.value)
        self.status = new_status
        if new_status in TERMINAL_STATUSES and self.completed_at is None:
            self.completed_at = utcnow()
