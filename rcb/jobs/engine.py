"""Job lifecycle engine.

Each running job has one scheduler task that processes one batch per tick.
Within a tick, products fan out to the generator and publisher up to the
job's ``concurrent`` limit. A per-job lock keeps ticks from overlapping, and
the tick's outcome is committed in one synchronous store update, so readers
only ever see whole ticks. The commit re-reads the job first: if it was
cancelled or deleted while the batch was in flight, the results are dropped.
"""

from __future__ import annotations

import asyncio
import logging

import httpx

from rcb.catalog.base import ProductSource, resolve_products
from rcb.content.library import ContentLibrary
from rcb.errors import (
    DeploymentFailure,
    GenerationFailure,
    InvalidTransition,
    NotFound,
    SourceUnavailable,
)
from rcb.generate.base import ContentGenerator
from rcb.jobs.events import JobEventBroker
from rcb.jobs.models import (
    JobProgress,
    JobStatus,
    ProcessingError,
    ProcessingJob,
    ProgressUpdate,
    can_transition,
)
from rcb.jobs.report import JobReport, build_report, calculate_eta
from rcb.jobs.store import JobStore
from rcb.publish import Publisher
from rcb.schemas.catalog import Product
from rcb.schemas.content import ContentConfig

logger = logging.getLogger(__name__)

_NETWORK_ERRORS = (httpx.TransportError, ConnectionError)

# Statuses a caller may request; completed and failed are reached by the engine only
REQUESTABLE_STATUSES = frozenset({JobStatus.RUNNING, JobStatus.PAUSED, JobStatus.CANCELLED})


class JobEngine:
    def __init__(
        self,
        store: JobStore,
        source: ProductSource,
        generator: ContentGenerator,
        publisher: Publisher,
        *,
        library: ContentLibrary | None = None,
        events: JobEventBroker | None = None,
        tick_interval: float = 3.0,
        start_delay: float = 1.0,
        source_timeout: float = 60.0,
        generation_timeout: float = 120.0,
        max_retries: int = 3,
    ):
        self.store = store
        self.source = source
        self.generator = generator
        self.publisher = publisher
        self.library = library
        self.events = events or JobEventBroker()
        self.tick_interval = tick_interval
        self.start_delay = start_delay
        self.source_timeout = source_timeout
        self.generation_timeout = generation_timeout
        self.max_retries = max_retries
        self._tasks: dict[str, asyncio.Task] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get(self, job_id: str) -> ProcessingJob:
        job = self.store.get(job_id)
        if job is None:
            raise NotFound(f"Job {job_id} not found")
        return job

    def list(self) -> list[ProcessingJob]:
        return self.store.list()

    def latest_progress(self, job_id: str) -> ProgressUpdate | None:
        self.get(job_id)
        return self.store.latest_progress_update(job_id)

    def report(self, job_id: str) -> JobReport:
        return build_report(self.get(job_id))

    def is_scheduled(self, job_id: str) -> bool:
        task = self._tasks.get(job_id)
        return task is not None and not task.done()

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def create(
        self,
        categories: list[str] | None,
        batch_size: int = 25,
        concurrent: int = 5,
        config: ContentConfig | None = None,
    ) -> ProcessingJob:
        """Resolve products and persist a pending job; processing starts after the start delay.

        Raises SourceUnavailable (and persists nothing) if resolution fails or times out.
        """
        categories = list(categories or [])
        try:
            products = await asyncio.wait_for(
                resolve_products(self.source, categories), self.source_timeout
            )
        except SourceUnavailable:
            raise
        except asyncio.TimeoutError as e:
            raise SourceUnavailable(
                f"Product source timed out after {self.source_timeout:g}s"
            ) from e
        except Exception as e:
            logger.exception("Product resolution failed for categories %s", categories)
            raise SourceUnavailable(f"Product resolution failed: {e}") from e

        job = ProcessingJob(
            categories=categories,
            products=products,
            config=config or ContentConfig(),
            batch_size=batch_size,
            concurrent=concurrent,
            progress=JobProgress(total=len(products)),
        )
        self.store.create(job)
        logger.info(
            "Created job %s: %d products from %s", job.id, len(products), categories or "all categories"
        )
        self.events.publish(job)
        self._ensure_scheduled(job.id, self.start_delay)
        return job

    async def set_status(self, job_id: str, status: JobStatus | str) -> ProcessingJob:
        """Apply a caller-requested status change.

        Raises NotFound, or InvalidTransition leaving the job unchanged.
        """
        job = self.get(job_id)
        try:
            new_status = JobStatus(status)
        except ValueError:
            raise InvalidTransition(job_id, job.status.value, str(status)) from None
        if new_status not in REQUESTABLE_STATUSES:
            raise InvalidTransition(job_id, job.status.value, new_status.value)

        job.transition(new_status)
        self.store.update(job)
        logger.info("Job %s -> %s", job_id, new_status.value)
        self.events.publish(job)
        if job.is_terminal:
            self._drop_lock(job_id)
        if new_status is JobStatus.RUNNING:
            self._ensure_scheduled(job_id, 0)
        return job

    async def delete(self, job_id: str) -> None:
        """Remove the job and its errors; stops its scheduler."""
        if not self.store.delete(job_id):
            raise NotFound(f"Job {job_id} not found")
        task = self._tasks.pop(job_id, None)
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()
        self._locks.pop(job_id, None)
        logger.info("Deleted job %s", job_id)

    async def advance(self, job_id: str) -> ProcessingJob | None:
        """Run one tick: process the next batch and commit its outcome.

        No-op unless the job is running. Returns the job as committed, or None
        if it no longer exists.
        """
        async with self._lock_for(job_id):
            job = await self._tick(job_id)
        if job is None or job.is_terminal:
            self._drop_lock(job_id)
        return job

    async def _tick(self, job_id: str) -> ProcessingJob | None:
        job = self.store.get(job_id)
        if job is None or job.status is not JobStatus.RUNNING:
            return job

        batch = job.next_batch()
        if not batch:
            job.transition(JobStatus.COMPLETED)
            self.store.update(job)
            logger.info("Job %s completed", job_id)
            self.events.publish(job)
            return job

        start = job.cursor
        logger.info(
            "Job %s: processing products %d-%d of %d",
            job_id, start + 1, start + len(batch), job.progress.total,
        )
        outcomes = await self._process_batch(job, batch)
        return self._commit_tick(job_id, start, batch, outcomes)

    async def shutdown(self) -> None:
        tasks = [t for t in self._tasks.values() if not t.done()]
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()

    async def wait(self, job_id: str) -> None:
        """Block until the job's scheduler stops (terminal, paused or deleted)."""
        task = self._tasks.get(job_id)
        if task is not None:
            await asyncio.gather(task, return_exceptions=True)

    # ------------------------------------------------------------------
    # Scheduling
    # ------------------------------------------------------------------

    def _lock_for(self, job_id: str) -> asyncio.Lock:
        lock = self._locks.get(job_id)
        if lock is None:
            lock = self._locks[job_id] = asyncio.Lock()
        return lock

    def _drop_lock(self, job_id: str) -> None:
        # A held lock is dropped by the tick that holds it
        lock = self._locks.get(job_id)
        if lock is not None and not lock.locked():
            del self._locks[job_id]

    def _ensure_scheduled(self, job_id: str, delay: float) -> None:
        if self.is_scheduled(job_id):
            return
        task = asyncio.create_task(self._drive(job_id, delay), name=f"job-{job_id}")
        self._tasks[job_id] = task

        def _forget(t: asyncio.Task) -> None:
            if self._tasks.get(job_id) is t:
                del self._tasks[job_id]

        task.add_done_callback(_forget)

    async def _drive(self, job_id: str, delay: float) -> None:
        try:
            if delay > 0:
                await asyncio.sleep(delay)
            job = self.store.get(job_id)
            if job is None:
                return
            if job.status is JobStatus.PENDING:
                job.transition(JobStatus.RUNNING)
                self.store.update(job)
                logger.info("Job %s started", job_id)
                self.events.publish(job)
            while True:
                job = await self.advance(job_id)
                if job is None or job.status is not JobStatus.RUNNING:
                    return
                await asyncio.sleep(self.tick_interval)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.exception("Job %s cannot continue", job_id)
            self._fail(job_id, e)

    def _fail(self, job_id: str, cause: Exception) -> None:
        try:
            job = self.store.get(job_id)
            if job is None or not can_transition(job.status, JobStatus.FAILED):
                return
            job.transition(JobStatus.FAILED)
            self.store.update(job)
        except Exception:
            logger.exception("Could not mark job %s failed after: %s", job_id, cause)
            return
        self.events.publish(job)
        self._drop_lock(job_id)

    # ------------------------------------------------------------------
    # Tick internals
    # ------------------------------------------------------------------

    async def _process_batch(
        self, job: ProcessingJob, batch: list[Product]
    ) -> list[ProcessingError | None]:
        semaphore = asyncio.Semaphore(job.concurrent)

        async def _bounded(product: Product) -> ProcessingError | None:
            async with semaphore:
                return await self._process_product(job, product)

        return await asyncio.gather(*(_bounded(p) for p in batch))

    async def _process_product(self, job: ProcessingJob, product: Product) -> ProcessingError | None:
        """Generate then publish one product. Returns the error, or None on success."""
        try:
            content = await asyncio.wait_for(
                self.generator.generate(product, job.config), self.generation_timeout
            )
        except GenerationFailure as e:
            return self._error(job, product, e.error_type, str(e))
        except asyncio.TimeoutError:
            return self._error(
                job, product, "ai-generation",
                f"Generation timed out after {self.generation_timeout:g}s",
            )
        except _NETWORK_ERRORS as e:
            return self._error(job, product, "network", str(e) or type(e).__name__)
        except Exception as e:
            logger.exception("Unexpected generator error for product %s", product.product_id)
            return self._error(job, product, "ai-generation", str(e) or type(e).__name__)

        if self.library is not None:
            try:
                self.library.record(content, product, validation_level=job.config.validation)
            except Exception:
                logger.exception("Could not record content for product %s", product.product_id)

        try:
            published = await self.publisher.publish(content, product)
        except DeploymentFailure as e:
            return self._error(job, product, "deployment", str(e))
        except Exception as e:
            logger.exception("Unexpected publisher error for product %s", product.product_id)
            return self._error(job, product, "deployment", str(e) or type(e).__name__)
        if not published:
            return self._error(job, product, "deployment", "Publisher reported failure")
        return None

    def _error(self, job: ProcessingJob, product: Product, error_type: str, message: str) -> ProcessingError:
        logger.warning(
            "Job %s: product %s (%s) failed [%s]: %s",
            job.id, product.product_id, product.name, error_type, message,
        )
        return ProcessingError(
            product_id=product.product_id,
            product_name=product.name,
            error_type=error_type,
            message=message,
            max_retries=self.max_retries,
        )

    def _commit_tick(
        self,
        job_id: str,
        start: int,
        batch: list[Product],
        outcomes: list[ProcessingError | None],
    ) -> ProcessingJob | None:
        """Fold a tick's outcomes into the stored job. No suspension points."""
        job = self.store.get(job_id)
        if job is None:
            logger.info("Job %s deleted during tick; discarding results", job_id)
            return None
        if job.is_terminal or job.cursor != start:
            logger.info("Job %s is %s; discarding tick results", job_id, job.status.value)
            return job

        errors = [e for e in outcomes if e is not None]
        job.progress = job.progress.advanced(len(batch) - len(errors), len(errors))
        job.errors.extend(errors)
        job.cursor = start + len(batch)
        if job.cursor >= job.progress.total and job.status is JobStatus.RUNNING:
            job.transition(JobStatus.COMPLETED)
        self.store.update(job)

        processed = job.progress.completed + job.progress.failed
        next_product = job.products[job.cursor].name if job.cursor < job.progress.total else None
        self.store.add_progress_update(
            ProgressUpdate(
                job_id=job_id,
                current_product=next_product,
                estimated_time_remaining=calculate_eta(processed, job.progress.total, job.started_at),
                message=(
                    f"Processed {processed}/{job.progress.total} products "
                    f"({job.progress.completed} succeeded, {job.progress.failed} failed)"
                ),
            )
        )
        if job.status is JobStatus.COMPLETED:
            logger.info(
                "Job %s completed: %d succeeded, %d failed",
                job_id, job.progress.completed, job.progress.failed,
            )
        self.events.publish(job)
        return job
