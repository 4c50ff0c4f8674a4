"""Per-job phase scheduler.

Drives one job from uploading through processing to a terminal state.
Each tick waits a fixed delay, then advances progress by one increment.
The transfer phase ends at UPLOAD_THRESHOLD and the extraction phase at
COMPLETE_PROGRESS; both are clamped so a run always terminates.
"""

import asyncio
import random
from datetime import datetime
from typing import Awaitable, Callable, Dict, Optional, Tuple

import structlog

from intake.extraction.base import ExtractionResultProvider
from intake.jobs.errors import ExtractionProviderError
from intake.jobs.models import JobRecord, JobStatus, JobView

logger = structlog.get_logger(__name__)

UPLOAD_THRESHOLD = 30.0
COMPLETE_PROGRESS = 100.0

# fn(status) -> progress points to add on this tick
IncrementSource = Callable[[JobStatus], float]
# fn(job) -> error message to fail the job with, or None to carry on
FailureHook = Callable[[JobView], Optional[str]]
SleepFn = Callable[[float], Awaitable[None]]
ChangeCallback = Callable[[JobRecord], None]


class RandomIncrements:
    """Uniform random increments per phase, each drawn from [low, high)."""

    def __init__(
        self,
        upload_range: Tuple[float, float] = (5.0, 20.0),
        processing_range: Tuple[float, float] = (3.0, 15.0),
        rng: Optional[random.Random] = None,
    ):
        for low, high in (upload_range, processing_range):
            if not 0 < low <= high:
                raise ValueError(
                    f"increment range must satisfy 0 < low <= high, got [{low}, {high})"
                )
        self._ranges: Dict[JobStatus, Tuple[float, float]] = {
            JobStatus.UPLOADING: upload_range,
            JobStatus.PROCESSING: processing_range,
        }
        self._rng = rng or random.Random()

    def __call__(self, status: JobStatus) -> float:
        low, high = self._ranges[status]
        return low + self._rng.random() * (high - low)


class PhaseScheduler:
    """Advances a single JobRecord until it completes or fails.

    The scheduler holds no per-job state, so one instance serves every task
    the registry starts. It mutates only the record passed to run(), and only
    between suspension points; a cancelled task raises CancelledError at its
    next await and never touches the record again.
    """

    def __init__(
        self,
        provider: ExtractionResultProvider,
        increments: Optional[IncrementSource] = None,
        failure_hook: Optional[FailureHook] = None,
        upload_tick: float = 0.15,
        processing_tick: float = 0.2,
        sleep: Optional[SleepFn] = None,
    ):
        self._provider = provider
        self._increments = increments or RandomIncrements()
        self._failure_hook = failure_hook
        self._ticks = {
            JobStatus.UPLOADING: upload_tick,
            JobStatus.PROCESSING: processing_tick,
        }
        self._sleep = sleep or asyncio.sleep

    async def run(self, job: JobRecord, on_change: Optional[ChangeCallback] = None) -> None:
        """Tick the job until it reaches complete or error."""
        notify = on_change or _ignore
        try:
            while not job.status.is_terminal:
                await self._sleep(self._ticks[job.status])
                await self._tick(job)
                notify(job)
        except Exception as e:
            # CancelledError is a BaseException and passes straight through
            logger.exception("job_task_crashed", job_id=job.id)
            self._fail(job, f"{type(e).__name__}: {e}")
            notify(job)

    async def _tick(self, job: JobRecord) -> None:
        if self._failure_hook is not None:
            message = self._failure_hook(job.view())
            if message:
                self._fail(job, message)
                return

        step = float(self._increments(job.status))
        # NaN fails the comparison too
        if not step > 0:
            step = 0.0
        progress = job.progress + step

        if job.status == JobStatus.UPLOADING:
            if progress >= UPLOAD_THRESHOLD:
                job.progress = UPLOAD_THRESHOLD
                job.status = JobStatus.PROCESSING
                logger.info("job_phase_changed", job_id=job.id, status=job.status.value)
            else:
                job.progress = progress
            return

        if progress < COMPLETE_PROGRESS:
            job.progress = progress
            return

        # Readers keep seeing the last processing progress until the text arrives
        try:
            text = await self._provider.extract(job.id)
        except ExtractionProviderError as e:
            self._fail(job, e.message)
            return
        except Exception as e:
            logger.warning("extraction_provider_error", job_id=job.id, exc_info=True)
            self._fail(job, f"Extraction failed: {e}")
            return

        if not text:
            self._fail(job, "Extraction returned no text")
            return

        job.progress = COMPLETE_PROGRESS
        job.extracted_text = text
        job.status = JobStatus.COMPLETE
        job.completed_at = datetime.utcnow()
        logger.info("job_completed", job_id=job.id, attempt=job.attempt)

    def _fail(self, job: JobRecord, message: str) -> None:
        job.status = JobStatus.ERROR
        job.error_message = message
        job.extracted_text = None
        job.completed_at = datetime.utcnow()
        logger.warning("job_failed", job_id=job.id, error_message=message)


def _ignore(job: JobRecord) -> None:
    pass
