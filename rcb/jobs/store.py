"""Processing job storage: Postgres (production) or in-process map (dev/tests)."""

from __future__ import annotations

import json
import logging
import threading
from typing import Protocol

from rcb.config import Settings
from rcb.jobs.models import JobProgress, JobStatus, ProcessingError, ProcessingJob, ProgressUpdate
from rcb.schemas.catalog import Product
from rcb.schemas.content import ContentConfig

logger = logging.getLogger(__name__)


class JobStore(Protocol):
    def create(self, job: ProcessingJob) -> ProcessingJob: ...
    def get(self, job_id: str) -> ProcessingJob | None: ...
    def list(self) -> list[ProcessingJob]: ...
    def update(self, job: ProcessingJob) -> None: ...
    def delete(self, job_id: str) -> bool: ...
    def add_progress_update(self, update: ProgressUpdate) -> None: ...
    def latest_progress_update(self, job_id: str) -> ProgressUpdate | None: ...


# ---------------------------------------------------------------------------
# In-memory implementation
# ---------------------------------------------------------------------------

class InMemoryJobStore:
    """Jobs held in a dict. Every read and write copies, so callers never share
    a mutable job with the store and a reader never sees a half-applied update."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._jobs: dict[str, ProcessingJob] = {}
        self._updates: dict[str, list[ProgressUpdate]] = {}

    def create(self, job: ProcessingJob) -> ProcessingJob:
        with self._lock:
            self._jobs[job.id] = job.model_copy(deep=True)
        return job

    def get(self, job_id: str) -> ProcessingJob | None:
        with self._lock:
            job = self._jobs.get(job_id)
            return job.model_copy(deep=True) if job else None

    def list(self) -> list[ProcessingJob]:
        with self._lock:
            jobs = [j.model_copy(deep=True) for j in self._jobs.values()]
        return sorted(jobs, key=lambda j: j.started_at, reverse=True)

    def update(self, job: ProcessingJob) -> None:
        with self._lock:
            if job.id not in self._jobs:
                raise KeyError(job.id)
            self._jobs[job.id] = job.model_copy(deep=True)

    def delete(self, job_id: str) -> bool:
        with self._lock:
            self._updates.pop(job_id, None)
            return self._jobs.pop(job_id, None) is not None

    def add_progress_update(self, update: ProgressUpdate) -> None:
        with self._lock:
            self._updates.setdefault(update.job_id, []).append(update.model_copy())

    def latest_progress_update(self, job_id: str) -> ProgressUpdate | None:
        with self._lock:
            updates = self._updates.get(job_id)
            return updates[-1].model_copy() if updates else None


# ---------------------------------------------------------------------------
# Postgres implementation
# ---------------------------------------------------------------------------

class PostgresJobStore:
    """Persist jobs, their errors and progress events in Postgres."""

    def __init__(self, database_url: str):
        self._url = database_url
        self._conn = self._connect()

    def _connect(self):
        try:
            import psycopg
        except ImportError:
            raise ImportError(
                "psycopg required for Postgres job store. pip install 'psycopg[binary]'"
            )
        conn = psycopg.connect(self._url, autocommit=True)
        conn.execute("""
            CREATE TABLE IF NOT EXISTS rcb_processing_jobs (
                id TEXT PRIMARY KEY,
                categories JSONB NOT NULL DEFAULT '[]',
                products JSONB NOT NULL DEFAULT '[]',
                config JSONB NOT NULL,
                batch_size INT NOT NULL DEFAULT 25,
                concurrent INT NOT NULL DEFAULT 5,
                status TEXT NOT NULL CHECK (status IN
                    ('pending', 'running', 'paused', 'completed', 'failed', 'cancelled')),
                progress JSONB NOT NULL,
                cursor_pos INT NOT NULL DEFAULT 0,
                started_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
                completed_at TIMESTAMPTZ,
                updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
            )
        """)
        conn.execute("""
            CREATE TABLE IF NOT EXISTS rcb_processing_errors (
                id BIGSERIAL PRIMARY KEY,
                job_id TEXT NOT NULL REFERENCES rcb_processing_jobs(id) ON DELETE CASCADE,
                product_id INT NOT NULL,
                product_name TEXT NOT NULL,
                error_type TEXT NOT NULL CHECK (error_type IN
                    ('ai-generation', 'validation', 'deployment', 'network')),
                message TEXT NOT NULL,
                retry_count INT NOT NULL DEFAULT 0,
                max_retries INT NOT NULL DEFAULT 3,
                created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
            )
        """)
        conn.execute("""
            CREATE TABLE IF NOT EXISTS rcb_job_progress_updates (
                id BIGSERIAL PRIMARY KEY,
                job_id TEXT NOT NULL REFERENCES rcb_processing_jobs(id) ON DELETE CASCADE,
                current_product TEXT,
                estimated_time_remaining INT,
                message TEXT,
                created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
            )
        """)
        conn.execute("""
            CREATE INDEX IF NOT EXISTS idx_rcb_processing_errors_job
            ON rcb_processing_errors (job_id, id)
        """)
        conn.execute("""
            CREATE INDEX IF NOT EXISTS idx_rcb_job_progress_updates_job
            ON rcb_job_progress_updates (job_id, created_at DESC)
        """)
        return conn

    def create(self, job: ProcessingJob) -> ProcessingJob:
        with self._conn.transaction():
            self._conn.execute(
                """
                INSERT INTO rcb_processing_jobs
                (id, categories, products, config, batch_size, concurrent, status,
                 progress, cursor_pos, started_at, completed_at)
                VALUES (%s, %s::jsonb, %s::jsonb, %s::jsonb, %s, %s, %s, %s::jsonb, %s, %s, %s)
                """,
                (
                    job.id,
                    json.dumps(job.categories),
                    json.dumps([p.to_wire() for p in job.products]),
                    json.dumps(job.config.to_wire()),
                    job.batch_size,
                    job.concurrent,
                    job.status.value,
                    json.dumps(job.progress.to_wire()),
                    job.cursor,
                    job.started_at,
                    job.completed_at,
                ),
            )
            self._insert_errors(job.id, job.errors)
        return job

    def get(self, job_id: str) -> ProcessingJob | None:
        row = self._conn.execute(
            """
            SELECT id, categories, products, config, batch_size, concurrent, status,
                   progress, cursor_pos, started_at, completed_at
            FROM rcb_processing_jobs WHERE id = %s
            """,
            (job_id,),
        ).fetchone()
        if not row:
            return None
        return self._row_to_job(row, self._load_errors(job_id))

    def list(self) -> list[ProcessingJob]:
        rows = self._conn.execute(
            """
            SELECT id, categories, products, config, batch_size, concurrent, status,
                   progress, cursor_pos, started_at, completed_at
            FROM rcb_processing_jobs ORDER BY started_at DESC
            """
        ).fetchall()
        return [self._row_to_job(row, self._load_errors(row[0])) for row in rows]

    def update(self, job: ProcessingJob) -> None:
        """Write status/progress/cursor and append errors not yet stored, atomically."""
        with self._conn.transaction():
            cur = self._conn.execute(
                """
                UPDATE rcb_processing_jobs SET
                    status = %s, progress = %s::jsonb, cursor_pos = %s,
                    completed_at = %s, updated_at = NOW()
                WHERE id = %s
                """,
                (
                    job.status.value,
                    json.dumps(job.progress.to_wire()),
                    job.cursor,
                    job.completed_at,
                    job.id,
                ),
            )
            if cur.rowcount == 0:
                raise KeyError(job.id)
            stored = self._conn.execute(
                "SELECT COUNT(*) FROM rcb_processing_errors WHERE job_id = %s",
                (job.id,),
            ).fetchone()[0]
            self._insert_errors(job.id, job.errors[stored:])

    def delete(self, job_id: str) -> bool:
        cur = self._conn.execute("DELETE FROM rcb_processing_jobs WHERE id = %s", (job_id,))
        return cur.rowcount > 0

    def add_progress_update(self, update: ProgressUpdate) -> None:
        self._conn.execute(
            """
            INSERT INTO rcb_job_progress_updates
            (job_id, current_product, estimated_time_remaining, message, created_at)
            VALUES (%s, %s, %s, %s, %s)
            """,
            (
                update.job_id,
                update.current_product,
                update.estimated_time_remaining,
                update.message,
                update.created_at,
            ),
        )

    def latest_progress_update(self, job_id: str) -> ProgressUpdate | None:
        row = self._conn.execute(
            """
            SELECT job_id, current_product, estimated_time_remaining, message, created_at
            FROM rcb_job_progress_updates
            WHERE job_id = %s ORDER BY created_at DESC, id DESC LIMIT 1
            """,
            (job_id,),
        ).fetchone()
        if not row:
            return None
        return ProgressUpdate(
            job_id=row[0],
            current_product=row[1],
            estimated_time_remaining=row[2],
            message=row[3] or "",
            created_at=row[4],
        )

    def _insert_errors(self, job_id: str, errors: list[ProcessingError]) -> None:
        for err in errors:
            self._conn.execute(
                """
                INSERT INTO rcb_processing_errors
                (job_id, product_id, product_name, error_type, message,
                 retry_count, max_retries, created_at)
                VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
                """,
                (
                    job_id,
                    err.product_id,
                    err.product_name,
                    err.error_type,
                    err.message,
                    err.retry_count,
                    err.max_retries,
                    err.timestamp,
                ),
            )

    def _load_errors(self, job_id: str) -> list[ProcessingError]:
        rows = self._conn.execute(
            """
            SELECT product_id, product_name, error_type, message, retry_count,
                   max_retries, created_at
            FROM rcb_processing_errors WHERE job_id = %s ORDER BY id
            """,
            (job_id,),
        ).fetchall()
        return [
            ProcessingError(
                product_id=r[0],
                product_name=r[1],
                error_type=r[2],
                message=r[3],
                retry_count=r[4],
                max_retries=r[5],
                timestamp=r[6],
            )
            for r in rows
        ]

    def _row_to_job(self, row, errors: list[ProcessingError]) -> ProcessingJob:
        def _json(v):
            return v if isinstance(v, (dict, list)) else json.loads(v)

        return ProcessingJob(
            id=row[0],
            categories=_json(row[1]),
            products=[Product.model_validate(p) for p in _json(row[2])],
            config=ContentConfig.model_validate(_json(row[3])),
            batch_size=row[4],
            concurrent=row[5],
            status=JobStatus(row[6]),
            progress=JobProgress.model_validate(_json(row[7])),
            cursor=row[8],
            started_at=row[9],
            completed_at=row[10],
            errors=errors,
        )


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------

def build_job_store(settings: Settings) -> JobStore:
    """Postgres job store if configured, else in-memory."""
    if settings.rcb_database_url:
        try:
            store = PostgresJobStore(settings.rcb_database_url)
            logger.info("Using Postgres job store")
            return store
        except Exception as e:
            logger.warning("Postgres job store failed (%s), falling back to in-memory store", e)
    else:
        logger.info("Using in-memory job store (RCB_DATABASE_URL not set)")
    return InMemoryJobStore()
