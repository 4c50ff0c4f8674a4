"""Fakes and clock helpers shared by the unit tests."""

import asyncio
from typing import List, Optional

from intake.extraction.base import ExtractionResultProvider
from intake.jobs.errors import ExtractionProviderError
from intake.jobs.models import JobStatus


async def settle(rounds: int = 10) -> None:
    """Let every ready task run until it blocks again."""
    for _ in range(rounds):
        await asyncio.sleep(0)


class ManualClock:
    """Replacement for asyncio.sleep that only wakes sleepers on advance()."""

    def __init__(self):
        self._waiters: List[asyncio.Future] = []
        self.delays: List[float] = []

    async def sleep(self, delay: float) -> None:
        fut = asyncio.get_running_loop().create_future()
        self._waiters.append(fut)
        self.delays.append(delay)
        await fut

    @property
    def sleeping(self) -> int:
        return sum(1 for fut in self._waiters if not fut.done())

    async def advance(self, ticks: int = 1) -> None:
        """Release every sleeper once per tick and let them run."""
        for _ in range(ticks):
            await settle()
            waiters, self._waiters = self._waiters, []
            for fut in waiters:
                if not fut.done():
                    fut.set_result(None)
            await settle()


class StepIncrements:
    """Deterministic increments: a fixed step per phase."""

    def __init__(self, upload: float = 10.0, processing: float = 10.0):
        self.upload = upload
        self.processing = processing

    def __call__(self, status: JobStatus) -> float:
        return self.upload if status == JobStatus.UPLOADING else self.processing


class StaticProvider(ExtractionResultProvider):
    def __init__(self, text: str = "Lab Results: HbA1c 7.2%"):
        self.text = text
        self.calls: List[str] = []

    async def extract(self, job_id: str) -> str:
        self.calls.append(job_id)
        return self.text


class FailingProvider(ExtractionResultProvider):
    """Fails the first `failures` calls, then returns text."""

    def __init__(self, failures: int = 1, message: str = "OCR backend unavailable"):
        self.failures = failures
        self.message = message
        self.calls: List[str] = []

    async def extract(self, job_id: str) -> str:
        self.calls.append(job_id)
        if len(self.calls) <= self.failures:
            raise ExtractionProviderError(self.message)
        return "Imaging Report: Lungs are clear."


class GatedProvider(ExtractionResultProvider):
    """Blocks inside extract() until release() is called."""

    def __init__(self, text: str = "Referral Letter"):
        self.text = text
        self.calls: List[str] = []
        self._gate: Optional[asyncio.Event] = None

    @property
    def gate(self) -> asyncio.Event:
        if self._gate is None:
            self._gate = asyncio.Event()
        return self._gate

    async def extract(self, job_id: str) -> str:
        self.calls.append(job_id)
        await self.gate.wait()
        return self.text

    def release(self) -> None:
        self.gate.set()


