"""
Processing Queue with a fixed asyncio worker pool.

Admitted documents are queued as ProcessingJob entries and picked up by
workers that call the pipeline processor. A job is never retried here:
re-processing a document is a new admitted request.
"""
import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Awaitable, Callable, Dict, List, Optional

from ..api.exceptions import ServiceUnavailableError
from ..core.logging_config import get_logger

logger = get_logger(__name__)


class JobStatus(Enum):
    """Processing job status."""
    PENDING = "pending"
    PROCESSING = "processing"
    SUCCESS = "success"
    FAILED = "failed"


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ProcessingJob:
    """A single admitted processing run."""
    document_id: str
    user_id: str
    language: str
    status: JobStatus = JobStatus.PENDING
    error: Optional[str] = None
    result: Optional[Dict] = None
    created_at: datetime = field(default_factory=_now)
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    def mark_processing(self):
        self.status = JobStatus.PROCESSING
        self.started_at = _now()

    def mark_success(self, result: Dict):
        self.status = JobStatus.SUCCESS
        self.result = result
        self.completed_at = _now()

    def mark_failed(self, error: str):
        self.status = JobStatus.FAILED
        self.error = error
        self.completed_at = _now()


Processor = Callable[[ProcessingJob], Awaitable[Dict]]


class ProcessingQueue:
    """
    Bounded job queue drained by max_workers worker coroutines.
    """

    def __init__(self, max_workers: int = 4, max_size: int = 100):
        """
        Initialize processing queue.

        Args:
            max_workers: Number of worker coroutines
            max_size: Maximum number of queued (not yet started) jobs
        """
        self.max_workers = max(1, max_workers)
        self.max_size = max_size
        self.job_queue: Optional[asyncio.Queue] = None
        self.workers: List[asyncio.Task] = []
        self.is_running = False

        self.stats = {
            "total_jobs": 0,
            "completed": 0,
            "failed": 0,
            "rejected": 0,
        }
        self._active = 0

    async def start(self, processor: Processor):
        """Start the worker pool."""
        if self.is_running:
            logger.warning("Processing workers already running, skipping start")
            return

        # Created here so the queue binds to the running event loop
        self.job_queue = asyncio.Queue(maxsize=self.max_size)
        self.is_running = True
        for i in range(self.max_workers):
            self.workers.append(asyncio.create_task(self._worker(i + 1, processor)))
        logger.info(f"✅ Processing worker pool started with {self.max_workers} workers")

    def submit(self, document_id: str, user_id: str, language: str) -> ProcessingJob:
        """
        Queue a job without waiting for it.

        Raises:
            ServiceUnavailableError: If the pool is not running or the queue is full
        """
        if not self.is_running or self.job_queue is None:
            self.stats["rejected"] += 1
            raise ServiceUnavailableError("Processing workers are not running")

        job = ProcessingJob(document_id=document_id, user_id=user_id, language=language)
        try:
            self.job_queue.put_nowait(job)
        except asyncio.QueueFull:
            self.stats["rejected"] += 1
            raise ServiceUnavailableError("Processing queue is full, try again shortly")

        self.stats["total_jobs"] += 1
        logger.debug(f"Queued document {document_id} (queue size: {self.job_queue.qsize()})")
        return job

    async def _worker(self, worker_id: int, processor: Processor):
        logger.debug(f"Processing worker {worker_id} started")
        while True:
            job = await self.job_queue.get()
            try:
                await self._run_job(job, processor)
            finally:
                self.job_queue.task_done()

    async def _run_job(self, job: ProcessingJob, processor: Processor):
        job.mark_processing()
        self._active += 1
        try:
            result = await processor(job)
            if result.get("status") == "success":
                job.mark_success(result)
                self.stats["completed"] += 1
                logger.info(f"Job for document {job.document_id} completed")
            else:
                job.mark_failed(result.get("error", "Unknown error"))
                self.stats["failed"] += 1
                logger.warning(f"Job for document {job.document_id} failed: {job.error}")
        except Exception as e:
            job.mark_failed(f"{type(e).__name__}: {e}")
            self.stats["failed"] += 1
            logger.error(f"Job for document {job.document_id} raised: {job.error}", exc_info=True)
        finally:
            self._active -= 1

    async def join(self):
        """Wait until every queued job has been processed."""
        if self.job_queue is not None:
            await self.job_queue.join()

    def get_stats(self) -> Dict:
        return {
            **self.stats,
            "queue_size": self.job_queue.qsize() if self.job_queue is not None else 0,
            "active": self._active,
            "worker_count": len(self.workers),
            "is_running": self.is_running,
        }

    async def stop(self):
        """Drain queued jobs, then cancel the workers."""
        if not self.is_running:
            return
        logger.info(
            f"Stopping processing workers ({len(self.workers)} workers, "
            f"{self.job_queue.qsize()} jobs queued)"
        )
        self.is_running = False
        await self.job_queue.join()

        for worker in self.workers:
            worker.cancel()
        await asyncio.gather(*self.workers, return_exceptions=True)

        self.workers.clear()
        logger.info("Processing worker pool stopped")
