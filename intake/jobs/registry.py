"""In-process job registry.

Owns every job record and the asyncio task advancing it. All public methods
except aclose() are synchronous, so each one runs to completion on the event
loop without interleaving with a scheduler tick; tasks only touch their own
record between awaits. The registry must be used from the loop its tasks run
on.
"""

import asyncio
from functools import partial
from typing import Callable, Dict, Iterable, List, Mapping, Tuple, Union

import structlog

from intake.jobs.errors import InvalidStateError, NotFoundError
from intake.jobs.models import FileDescriptor, JobRecord, JobStatus, JobView
from intake.jobs.scheduler import PhaseScheduler

logger = structlog.get_logger(__name__)

JobListener = Callable[[JobView], None]
FileInput = Union[FileDescriptor, Mapping[str, object]]


class JobRegistry:
    """Authoritative store of ingestion jobs and their scheduler tasks."""

    def __init__(self, scheduler: PhaseScheduler):
        # dicts keep insertion order, which is the snapshot order
        self._jobs: Dict[str, JobRecord] = {}
        self._tasks: Dict[str, asyncio.Task] = {}
        self._listeners: List[JobListener] = []
        self._scheduler = scheduler

    def submit(self, files: Iterable[FileInput]) -> List[str]:
        """Create one job per file and start its task. Returns the new ids in order."""
        # Validate the whole batch before touching the registry
        descriptors = [
            f if isinstance(f, FileDescriptor) else FileDescriptor.model_validate(f)
            for f in files
        ]

        job_ids = []
        for descriptor in descriptors:
            job = JobRecord.from_file(descriptor)
            self._jobs[job.id] = job
            self._start(job)
            job_ids.append(job.id)
            logger.info(
                "job_submitted",
                job_id=job.id,
                name=job.name,
                size_bytes=job.size_bytes,
            )
            self._publish(job)
        return job_ids

    def remove(self, job_id: str) -> None:
        """Cancel the job's task and drop the job."""
        if job_id not in self._jobs:
            raise NotFoundError(job_id)
        self._cancel(job_id)
        del self._jobs[job_id]
        logger.info("job_removed", job_id=job_id)

    def retry(self, job_id: str) -> JobView:
        """Restart a failed job from the beginning."""
        job = self._jobs.get(job_id)
        if job is None:
            raise NotFoundError(job_id)
        if job.status != JobStatus.ERROR:
            raise InvalidStateError(job_id, job.status.value, JobStatus.ERROR.value)

        self._cancel(job_id)
        job.status = JobStatus.UPLOADING
        job.progress = 0.0
        job.error_message = None
        job.completed_at = None
        job.attempt += 1
        self._start(job)
        logger.info("job_retried", job_id=job_id, attempt=job.attempt)
        self._publish(job)
        return job.view()

    def clear_all(self) -> None:
        """Cancel every task and empty the registry."""
        for job_id in list(self._tasks):
            self._cancel(job_id)
        count = len(self._jobs)
        self._jobs.clear()
        if count:
            logger.info("jobs_cleared", count=count)

    def snapshot(self) -> Tuple[JobView, ...]:
        """Read-only copies of every job, in submission order."""
        return tuple(job.view() for job in self._jobs.values())

    def get(self, job_id: str) -> JobView:
        job = self._jobs.get(job_id)
        if job is None:
            raise NotFoundError(job_id)
        return job.view()

    def active_count(self) -> int:
        return sum(1 for task in self._tasks.values() if not task.done())

    def subscribe(self, listener: JobListener) -> Callable[[], None]:
        """Call listener with a fresh view after every change. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def aclose(self) -> None:
        """Cancel all tasks, wait for them to unwind, then empty the registry."""
        tasks = list(self._tasks.values())
        self.clear_all()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    def _start(self, job: JobRecord) -> None:
        task = asyncio.create_task(
            self._scheduler.run(job, on_change=self._publish),
            name=f"intake-job-{job.id}",
        )
        self._tasks[job.id] = task
        task.add_done_callback(partial(self._forget_task, job.id))

    def _cancel(self, job_id: str) -> None:
        task = self._tasks.pop(job_id, None)
        if task is not None and not task.done():
            task.cancel()

    def _forget_task(self, job_id: str, task: asyncio.Task) -> None:
        # A retried job already has a newer task under the same id
        if self._tasks.get(job_id) is task:
            del self._tasks[job_id]

    def _publish(self, job: JobRecord) -> None:
        if not self._listeners:
            return
        view = job.view()
        for listener in list(self._listeners):
            try:
                listener(view)
            except Exception:
                logger.exception("job_listener_failed", job_id=job.id)
