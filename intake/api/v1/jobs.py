"""Job management API — submit files, poll progress, remove or retry jobs."""

from fastapi import APIRouter, HTTPException, Response
from pydantic import BaseModel
from typing import List, Optional

from intake.api.errors import http_error_from_intake
from intake.jobs.errors import IntakeError
from intake.jobs.models import FileDescriptor, JobStatus, JobView
from intake.jobs.registry import JobRegistry

router = APIRouter()

# Set by main.py during lifespan
_registry: Optional[JobRegistry] = None


def set_registry(registry: Optional[JobRegistry]):
    global _registry
    _registry = registry


def get_registry() -> Optional[JobRegistry]:
    return _registry


def _require_registry() -> JobRegistry:
    if _registry is None:
        raise HTTPException(status_code=503, detail="Job registry not initialized")
    return _registry


class JobSubmitRequest(BaseModel):
    files: List[FileDescriptor]


class JobSubmitResponse(BaseModel):
    job_ids: List[str]
    message: str


@router.post("/jobs", response_model=JobSubmitResponse, status_code=201)
async def submit_jobs(request: JobSubmitRequest):
    """Start ingestion for each described file."""
    registry = _require_registry()
    job_ids = registry.submit(request.files)
    return JobSubmitResponse(
        job_ids=job_ids,
        message=f"{len(job_ids)} job(s) submitted. Poll GET /api/v1/jobs for progress.",
    )


@router.get("/jobs")
async def list_jobs():
    """All jobs in submission order."""
    registry = _require_registry()
    jobs = [_serialize(view) for view in registry.snapshot()]
    return {"jobs": jobs, "count": len(jobs)}


@router.delete("/jobs", status_code=204)
async def clear_jobs():
    """Cancel and drop every job."""
    _require_registry().clear_all()
    return Response(status_code=204)


@router.get("/jobs/{job_id}")
async def get_job(job_id: str):
    registry = _require_registry()
    try:
        return _serialize(registry.get(job_id))
    except IntakeError as err:
        raise http_error_from_intake(err)


@router.delete("/jobs/{job_id}", status_code=204)
async def remove_job(job_id: str):
    """Cancel a job's processing and drop it."""
    registry = _require_registry()
    try:
        registry.remove(job_id)
    except IntakeError as err:
        raise http_error_from_intake(err)
    return Response(status_code=204)


@router.post("/jobs/{job_id}/retry")
async def retry_job(job_id: str):
    """Restart a failed job from zero."""
    registry = _require_registry()
    try:
        return _serialize(registry.retry(job_id))
    except IntakeError as err:
        raise http_error_from_intake(err)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _serialize(job: JobView) -> dict:
    response = {
        "job_id": job.id,
        "name": job.name,
        "size_bytes": job.size_bytes,
        "status": job.status.value,
        "progress": round(job.progress, 1),
        "message": _status_message(job),
        "attempt": job.attempt,
        "created_at": job.created_at.isoformat(),
        "completed_at": job.completed_at.isoformat() if job.completed_at else None,
    }

    if job.status == JobStatus.COMPLETE:
        response["extracted_text"] = job.extracted_text

    if job.status == JobStatus.ERROR:
        response["error"] = job.error_message

    return response


def _status_message(job: JobView) -> str:
    if job.status == JobStatus.COMPLETE:
        return _format_size(job.size_bytes)
    if job.status == JobStatus.ERROR:
        return job.error_message or "Processing failed"
    return {
        JobStatus.UPLOADING:  "Uploading...",
        JobStatus.PROCESSING: "Processing OCR...",
    }.get(job.status, "")


def _format_size(size_bytes: int) -> str:
    if size_bytes < 1024:
        return f"{size_bytes} B"
    if size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    return f"{size_bytes / (1024 * 1024):.1f} MB"
