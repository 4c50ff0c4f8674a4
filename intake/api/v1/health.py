"""Health check endpoint."""

from fastapi import APIRouter
import platform
import sys

from intake.api.v1 import jobs as jobs_api

router = APIRouter()


@router.get("/health")
async def health_check():
    """Service health and job counts."""
    registry = jobs_api.get_registry()
    return {
        "status": "healthy" if registry is not None else "starting",
        "jobs_total": len(registry.snapshot()) if registry is not None else 0,
        "jobs_active": registry.active_count() if registry is not None else 0,
        "python_version": sys.version,
        "platform": platform.platform(),
    }
