"""Job record data model for file ingestion."""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, model_validator
import uuid


class JobStatus(str, Enum):
    UPLOADING = "uploading"
    PROCESSING = "processing"
    COMPLETE = "complete"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.COMPLETE, JobStatus.ERROR)


class FileDescriptor(BaseModel):
    """A file offered for ingestion. Only metadata, never content."""
    name: str = Field(min_length=1)
    size_bytes: int = Field(ge=0)


class _JobFields(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str
    size_bytes: int
    status: JobStatus = JobStatus.UPLOADING
    progress: float = 0.0
    extracted_text: Optional[str] = None
    error_message: Optional[str] = None
    attempt: int = 1
    created_at: datetime = Field(default_factory=datetime.utcnow)
    completed_at: Optional[datetime] = None


class JobRecord(_JobFields):
    """Mutable job state, owned by the registry and written by one scheduler task."""

    @classmethod
    def from_file(cls, file: FileDescriptor) -> "JobRecord":
        return cls(name=file.name, size_bytes=file.size_bytes)

    def view(self) -> "JobView":
        return JobView(**self.model_dump())


class JobView(_JobFields):
    """Read-only copy of a job handed to callers and listeners."""

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_outcome(self) -> "JobView":
        if (self.extracted_text is not None) != (self.status == JobStatus.COMPLETE):
            raise ValueError("extracted_text must be set exactly when status is complete")
        if (self.error_message is not None) != (self.status == JobStatus.ERROR):
            raise ValueError("error_message must be set exactly when status is error")
        return self
