"""In-process fan-out of job snapshots to stream subscribers.

The engine publishes a snapshot after every committed change; each
subscriber gets its own bounded queue. When a slow subscriber's queue is
full the oldest snapshot is dropped, so the latest state always arrives and
order is preserved.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Iterator
from contextlib import contextmanager

from rcb.jobs.models import ProcessingJob

logger = logging.getLogger(__name__)


class Subscription:
    def __init__(self, job_ids: frozenset[str], maxsize: int):
        self.job_ids = job_ids
        self.queue: asyncio.Queue[ProcessingJob] = asyncio.Queue(maxsize=maxsize)

    def wants(self, job_id: str) -> bool:
        return not self.job_ids or job_id in self.job_ids

    def offer(self, job: ProcessingJob) -> None:
        if self.queue.full():
            self.queue.get_nowait()
        self.queue.put_nowait(job)

    async def get(self) -> ProcessingJob:
        return await self.queue.get()


class JobEventBroker:
    def __init__(self, queue_size: int = 100):
        self._queue_size = queue_size
        self._subscriptions: list[Subscription] = []

    @contextmanager
    def subscribe(self, job_ids: Iterable[str] = ()) -> Iterator[Subscription]:
        """Receive snapshots for ``job_ids`` (all jobs when empty)."""
        sub = Subscription(frozenset(job_ids), self._queue_size)
        self._subscriptions.append(sub)
        try:
            yield sub
        finally:
            self._subscriptions.remove(sub)

    def publish(self, job: ProcessingJob) -> None:
        for sub in list(self._subscriptions):
            if sub.wants(job.id):
                sub.offer(job.model_copy(deep=True))

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)
