"""Tests for job snapshot fan-out."""

from rcb.jobs import JobEventBroker, JobStatus, ProcessingJob


def test_subscription_filters_by_job_id():
    broker = JobEventBroker()
    a, b = ProcessingJob(), ProcessingJob()
    with broker.subscribe([a.id]) as only_a, broker.subscribe() as everything:
        broker.publish(a)
        broker.publish(b)
        assert only_a.queue.qsize() == 1
        assert only_a.queue.get_nowait().id == a.id
        assert [everything.queue.get_nowait().id for _ in range(2)] == [a.id, b.id]


def test_published_snapshot_is_a_copy():
    broker = JobEventBroker()
    job = ProcessingJob()
    with broker.subscribe() as sub:
        broker.publish(job)
        job.status = JobStatus.RUNNING
        assert sub.queue.get_nowait().status is JobStatus.PENDING


def test_full_queue_drops_oldest_snapshot():
    broker = JobEventBroker(queue_size=2)
    job = ProcessingJob()
    with broker.subscribe() as sub:
        for cursor in range(4):
            job.cursor = cursor
            broker.publish(job)
        assert [sub.queue.get_nowait().cursor for _ in range(sub.queue.qsize())] == [2, 3]


def test_subscription_removed_on_exit():
    broker = JobEventBroker()
    with broker.subscribe():
        assert broker.subscriber_count == 1
    assert broker.subscriber_count == 0
    broker.publish(ProcessingJob())
