"""Job manager with in-memory tracking and bounded concurrency."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone
from typing import TypeVar

from tubefetch.jobs.models import Job, JobStatus
from tubefetch.models.quality import Quality

logger = logging.getLogger(__name__)

T = TypeVar("T")


class JobManager:
    """Runs download jobs with a fixed concurrency limit.

    Jobs beyond the limit wait on an asyncio.Semaphore. A job is only
    tracked while it is pending or running; finished jobs are dropped so
    nothing outlives the request that created it.
    """

    def __init__(self, max_concurrent: int = 2) -> None:
        if max_concurrent < 1:
            raise ValueError("max_concurrent must be at least 1")
        self._jobs: dict[str, Job] = {}
        self._semaphore = asyncio.Semaphore(max_concurrent)
        self.max_concurrent = max_concurrent

    def create_job(self, url: str, quality: Quality) -> Job:
        """Create and register a pending job."""
        job = Job(url=url, quality=quality)
        self._jobs[job.id] = job
        return job

    def list_jobs(self) -> list[Job]:
        """List in-flight jobs, oldest first."""
        return sorted(self._jobs.values(), key=lambda j: j.created_at)

    def active_ids(self) -> set[str]:
        """IDs of jobs that are pending or running."""
        return set(self._jobs)

    @property
    def running_count(self) -> int:
        return sum(1 for j in self._jobs.values() if j.status == JobStatus.RUNNING)

    @property
    def pending_count(self) -> int:
        return sum(1 for j in self._jobs.values() if j.status == JobStatus.PENDING)

    async def run(self, job: Job, work: Callable[[Job], Awaitable[T]]) -> T:
        """Run ``work(job)`` once a slot is free and return its result.

        Exceptions from ``work`` mark the job failed and propagate.
        """
        self._jobs[job.id] = job
        try:
            async with self._semaphore:
                job.status = JobStatus.RUNNING
                job.started_at = datetime.now(timezone.utc)
                logger.info("Job %s started (%s, %s)", job.id, job.url, job.quality.value)
                try:
                    result = await work(job)
                except Exception as e:
                    job.status = JobStatus.FAILED
                    job.error = str(e)
                    logger.warning("Job %s failed: %s", job.id, e)
                    raise
                job.status = JobStatus.COMPLETED
                return result
        finally:
            job.completed_at = datetime.now(timezone.utc)
            self._jobs.pop(job.id, None)
