"""Cleanup Queue — retrying worker pool that removes a deleted article's blobs, index rows and likes.

Invariants:
    - enqueue() never blocks and never raises on behalf of the job; callers do not await cleanup
    - A job records the steps still to do; a step that succeeds is dropped, so a retry
      only repeats failed steps (every step is idempotent)
    - Per key: blob deleted first, then its index row (a failed blob delete keeps the row
      pointing at the blob for the next attempt)
    - Failed passes retry with exponential backoff (±25% jitter) up to max_retries,
      then the job is abandoned with an error log listing what is left
    - Job failures are logged, never surfaced; a failing job never stops a worker

Design Decisions:
    - asyncio.Queue + fixed worker tasks owned by the FastAPI lifespan: bounded
      concurrency and an explicit shutdown, unlike detached background tasks
    - In-process queue: jobs pending at shutdown are logged and dropped
"""

import asyncio
import logging
import random
from dataclasses import dataclass, field

from article_service.core.domain_types import ArticleId, StorageKey
from article_service.core.errors import ArticleServiceError
from article_service.core.repository_protocols import (
    AttachmentIndex, LikeCleanup, ObjectStore,
)

logger = logging.getLogger(__name__)

_TASK = "article_cleanup"


@dataclass
class CleanupJob:
    """Remaining cleanup steps for one deleted article."""
    article_id: ArticleId
    storage_keys: list[StorageKey] = field(default_factory=list)
    likes_removed: bool = False
    attempts: int = 0

    @property
    def done(self) -> bool:
        return not self.storage_keys and self.likes_removed


class CleanupQueue:
    """Background cleanup for deleted articles."""

    def __init__(
        self,
        objects: ObjectStore,
        index: AttachmentIndex,
        likes: LikeCleanup,
        workers: int = 2,
        max_retries: int = 5,
        base_delay_ms: int = 500,
        max_delay_ms: int = 30_000,
    ):
        self._objects = objects
        self._index = index
        self._likes = likes
        self._worker_count = workers
        self.max_retries = max_retries
        self.base_delay_ms = base_delay_ms
        self.max_delay_ms = max_delay_ms
        self._queue: asyncio.Queue[CleanupJob] = asyncio.Queue()
        self._workers: list[asyncio.Task] = []

    @property
    def running(self) -> bool:
        return bool(self._workers)

    def start(self) -> None:
        if self._workers:
            return
        self._workers = [
            asyncio.create_task(self._worker(), name=f"{_TASK}-{i}")
            for i in range(self._worker_count)
        ]
        logger.info(f"Cleanup queue started with {self._worker_count} workers")

    async def stop(self, drain_timeout: float = 5.0) -> None:
        """Give pending jobs drain_timeout seconds, then cancel the workers."""
        if not self._workers:
            return
        try:
            await asyncio.wait_for(self._queue.join(), timeout=drain_timeout)
        except asyncio.TimeoutError:
            logger.error(
                f"Cleanup queue stopped with {self._queue.qsize()} pending jobs",
                extra={"task": _TASK},
            )
        for worker in self._workers:
            worker.cancel()
        await asyncio.gather(*self._workers, return_exceptions=True)
        self._workers = []

    def enqueue(self, job: CleanupJob) -> None:
        self._queue.put_nowait(job)
        logger.info(
            f"Cleanup scheduled for {len(job.storage_keys)} attachments",
            extra={"task": _TASK, "article_id": job.article_id},
        )

    async def join(self) -> None:
        """Wait until every enqueued job has finished or been abandoned."""
        await self._queue.join()

    async def _worker(self) -> None:
        while True:
            job = await self._queue.get()
            try:
                await self.process(job)
            except Exception:
                logger.error(
                    "Cleanup worker crashed on job",
                    exc_info=True,
                    extra={"task": _TASK, "article_id": job.article_id},
                )
            finally:
                self._queue.task_done()

    async def process(self, job: CleanupJob) -> bool:
        """Run a job to completion or abandonment. Returns True when fully cleaned."""
        while True:
            job.attempts += 1
            if await self.run_once(job):
                logger.info(
                    "Article cleanup complete",
                    extra={
                        "task": _TASK, "article_id": job.article_id,
                        "attempt": job.attempts,
                    },
                )
                return True
            if job.attempts > self.max_retries:
                logger.error(
                    f"Article cleanup abandoned after {job.attempts} attempts; "
                    f"remaining keys={job.storage_keys} "
                    f"likes_removed={job.likes_removed}",
                    extra={
                        "task": _TASK, "article_id": job.article_id,
                        "attempt": job.attempts,
                    },
                )
                return False
            delay = self._backoff(job.attempts - 1)
            logger.warning(
                f"Article cleanup incomplete, retry after {delay}ms",
                extra={
                    "task": _TASK, "article_id": job.article_id,
                    "attempt": job.attempts,
                },
            )
            await asyncio.sleep(delay / 1000)

    async def run_once(self, job: CleanupJob) -> bool:
        """One pass over the remaining steps. Returns job.done."""
        for key in list(job.storage_keys):
            try:
                await self._objects.delete(key)
                await self._index.remove(key)
            except Exception as e:
                self._log_step_failure(job, e, storage_key=key)
                continue
            job.storage_keys.remove(key)

        if not job.likes_removed:
            try:
                removed = await self._likes.remove_likes(job.article_id)
            except Exception as e:
                self._log_step_failure(job, e)
            else:
                job.likes_removed = True
                logger.debug(
                    f"Removed {removed} likes",
                    extra={"task": _TASK, "article_id": job.article_id},
                )
        return job.done

    def _log_step_failure(
        self, job: CleanupJob, e: Exception, storage_key: StorageKey | None = None,
    ) -> None:
        logger.warning(
            f"Cleanup step failed: {e}",
            exc_info=not isinstance(e, ArticleServiceError),
            extra={
                "task": _TASK,
                "article_id": job.article_id,
                "storage_key": storage_key,
                "attempt": job.attempts,
                "error_code": getattr(e, "code", None),
            },
        )

    def _backoff(self, attempt: int) -> int:
        """Exponential backoff with ±25% jitter."""
        delay = min(self.max_delay_ms, (2 ** attempt) * self.base_delay_ms)
        return int(delay * random.uniform(0.75, 1.25))  # nosec B311
