"""Time estimates and the end-of-job generation report."""

from __future__ import annotations

from collections import Counter
from datetime import datetime

from pydantic import Field

from rcb.jobs.models import ProcessingJob
from rcb.schemas.base import CamelModel, round_half_up, utcnow


def calculate_eta(processed: int, total: int, started_at: datetime, now: datetime | None = None) -> int | None:
    """Seconds left at the observed rate; None before anything was processed."""
    if processed <= 0:
        return None
    elapsed = ((now or utcnow()) - started_at).total_seconds()
    if elapsed <= 0:
        return None
    rate = processed / elapsed
    return round_half_up(max(total - processed, 0) / rate)


def format_duration(seconds: float) -> str:
    if seconds < 60:
        return f"{round_half_up(seconds)}s"
    minutes, secs = divmod(seconds, 60)
    minutes = int(minutes)
    if minutes < 60:
        return f"{minutes}m {round_half_up(secs)}s" if secs > 0 else f"{minutes}m"
    hours, minutes = divmod(minutes, 60)
    return f"{hours}h {minutes}m" if minutes else f"{hours}h"


class JobReport(CamelModel):
    job_id: str
    status: str
    categories: list[str] = Field(default_factory=list)
    total: int
    completed: int
    failed: int
    success_rate: int
    errors_by_type: dict[str, int] = Field(default_factory=dict)
    started_at: datetime
    completed_at: datetime | None = None
    duration_seconds: float
    duration: str
    products_per_minute: float | None = None


def build_report(job: ProcessingJob, now: datetime | None = None) -> JobReport:
    end = job.completed_at or now or utcnow()
    duration = max((end - job.started_at).total_seconds(), 0.0)
    processed = job.progress.completed + job.progress.failed
    return JobReport(
        job_id=job.id,
        status=job.status.value,
        categories=job.categories,
        total=job.progress.total,
        completed=job.progress.completed,
        failed=job.progress.failed,
        success_rate=round_half_up(100 * job.progress.completed / processed) if processed else 0,
        errors_by_type=dict(Counter(e.error_type for e in job.errors)),
        started_at=job.started_at,
        completed_at=job.completed_at,
        duration_seconds=round(duration, 3),
        duration=format_duration(duration),
        products_per_minute=round(processed / duration * 60, 2) if duration > 0 and processed else None,
    )
