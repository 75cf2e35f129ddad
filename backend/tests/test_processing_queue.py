import asyncio

import pytest

from talkpdf.api.exceptions import ServiceUnavailableError
from talkpdf.services.processing_queue import JobStatus, ProcessingQueue


@pytest.mark.asyncio
async def test_submit_requires_running_workers():
    queue = ProcessingQueue(max_workers=1)

    with pytest.raises(ServiceUnavailableError):
        queue.submit("doc-1", "alice", "en")
    assert queue.get_stats()["rejected"] == 1


@pytest.mark.asyncio
async def test_jobs_are_processed_and_counted():
    processed = []

    async def processor(job):
        processed.append((job.document_id, job.user_id, job.language))
        if job.document_id == "bad":
            return {"status": "error", "error": "extraction failed"}
        if job.document_id == "crash":
            raise RuntimeError("unexpected")
        return {"status": "success"}

    queue = ProcessingQueue(max_workers=2, max_size=10)
    await queue.start(processor)
    jobs = [queue.submit(doc_id, "alice", "en") for doc_id in ("doc-1", "bad", "crash", "doc-2")]
    await queue.join()

    assert sorted(processed) == sorted((j.document_id, "alice", "en") for j in jobs)
    assert [j.status for j in jobs] == [JobStatus.SUCCESS, JobStatus.FAILED, JobStatus.FAILED, JobStatus.SUCCESS]
    assert jobs[1].error == "extraction failed"
    assert jobs[2].error == "RuntimeError: unexpected"
    stats = queue.get_stats()
    assert stats["completed"] == 2
    assert stats["failed"] == 2
    assert stats["total_jobs"] == 4

    await queue.stop()
    assert not queue.is_running
    assert queue.get_stats()["worker_count"] == 0


@pytest.mark.asyncio
async def test_full_queue_rejects_new_jobs():
    started = asyncio.Event()
    release = asyncio.Event()

    async def processor(job):
        started.set()
        await release.wait()
        return {"status": "success"}

    queue = ProcessingQueue(max_workers=1, max_size=1)
    await queue.start(processor)
    queue.submit("doc-1", "alice", "en")
    await started.wait()
    queue.submit("doc-2", "alice", "en")

    with pytest.raises(ServiceUnavailableError):
        queue.submit("doc-3", "alice", "en")

    release.set()
    await queue.stop()
    assert queue.get_stats()["completed"] == 2


@pytest.mark.asyncio
async def test_stop_drains_queued_jobs():
    done = []

    async def processor(job):
        await asyncio.sleep(0)
        done.append(job.document_id)
        return {"status": "success"}

    queue = ProcessingQueue(max_workers=1, max_size=10)
    await queue.start(processor)
    for i in range(5):
        queue.submit(f"doc-{i}", "alice", "en")
    await queue.stop()

    assert done == [f"doc-{i}" for i in range(5)]

    with pytest.raises(ServiceUnavailableError):
        queue.submit("late", "alice", "en")
