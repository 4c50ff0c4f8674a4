"""Document intake service - FastAPI application."""

import random
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from intake.config import Settings, settings
from intake.core.logging import configure_logging
from intake.api.v1.router import v1_router
from intake.api.v1.health import router as health_root_router
from intake.api.v1 import jobs as jobs_api
from intake.extraction.factory import get_provider
from intake.jobs.registry import JobRegistry
from intake.jobs.scheduler import PhaseScheduler, RandomIncrements

logger = structlog.get_logger(__name__)


def build_registry(config: Settings) -> JobRegistry:
    """Wire a registry and its scheduler from configuration."""
    increments = RandomIncrements(
        upload_range=(config.upload_increment_min, config.upload_increment_max),
        processing_range=(config.processing_increment_min, config.processing_increment_max),
        rng=random.Random(config.random_seed),
    )
    scheduler = PhaseScheduler(
        provider=get_provider(config=config),
        increments=increments,
        upload_tick=config.upload_tick_seconds,
        processing_tick=config.processing_tick_seconds,
    )
    return JobRegistry(scheduler)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown logic."""
    configure_logging(settings.log_level, json=settings.log_json)
    logger.info(
        "intake_starting",
        port=settings.service_port,
        extraction_provider=settings.extraction_provider,
    )

    registry = build_registry(settings)
    jobs_api.set_registry(registry)

    yield

    logger.info("intake_stopping", active_jobs=registry.active_count())
    await registry.aclose()
    jobs_api.set_registry(None)


app = FastAPI(
    title="Document Intake Service",
    description="Tracks file ingestion jobs through transfer and text extraction",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173", "http://localhost:3000", "*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Mount routers
app.include_router(health_root_router, tags=["health"])  # GET /health at root
app.include_router(v1_router)  # All /api/v1/* endpoints
