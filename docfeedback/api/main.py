"""
FastAPI application with assembled routers.

Initializes FastAPI app with all API routers and configures uvicorn server.

Dependencies: fastapi, docfeedback.api.routers, uvicorn
System role: API entry point with router assembly and server launch
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from docfeedback.api.deps.dependencies import get_service_cache
from docfeedback.application.services import FeedbackJobService
from docfeedback.boundary.db import get_async_session_factory
from docfeedback.configs import get_settings
from docfeedback.observability import configure_logging
from docfeedback.observability.middleware import CorrelationMiddleware, RequestLoggingMiddleware

from .routers import feedback_jobs_router, health_router

logger = logging.getLogger(__name__)


async def recover_stale_jobs_on_startup() -> None:
    """Fail jobs left PROCESSING by a previous process."""
    job_settings = get_settings().feedback_job
    SessionFactory = get_async_session_factory()
    async with SessionFactory() as session:
        recovered = await FeedbackJobService(session).recover_stale_jobs(
            job_settings.stale_job_threshold_seconds
        )
    logger.info(f"Stale job recovery finished, {len(recovered)} job(s) marked FAILED")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Startup: configure logging, recover stuck jobs.
    Shutdown: cancel in-flight job runs and mark their jobs FAILED.
    """
    settings = get_settings()
    configure_logging(settings.log_level)

    if settings.feedback_job.recover_on_startup:
        try:
            await recover_stale_jobs_on_startup()
        except Exception:
            logger.exception("Stale job recovery failed at startup; continuing")

    yield

    cache = get_service_cache()
    await cache.shutdown()
    cache.clear()
    logger.info("Feedback job scheduler stopped")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application with routers.

    Returns:
        FastAPI: Configured application instance with all routers registered
    """
    app = FastAPI(
        title="Document Feedback API",
        description="AI feedback on Google Docs via background feedback jobs",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    # Register all routers with /api/v1 prefix for versioning
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(feedback_jobs_router, prefix="/api/v1")

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "docfeedback.api.main:app",
        host="0.0.0.0",
        port=8000,
    )
