"""Extraction provider interface."""

from abc import ABC, abstractmethod


class ExtractionResultProvider(ABC):
    """Supplies the extracted text for a job whose pipeline has finished.

    Implementations may raise ExtractionProviderError (or any other
    exception); the scheduler turns it into an error on that job only.
    Blocking backends should hand their work to a thread themselves.
    """

    @abstractmethod
    async def extract(self, job_id: str) -> str:
        """Return the extracted text for job_id."""
        ...
