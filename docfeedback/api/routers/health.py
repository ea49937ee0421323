"""
Health check API endpoints.

Routes: GET /health, GET /health/db

Dependencies: docfeedback.boundary.db
System role: Health check HTTP API
"""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from docfeedback.api.deps import ServiceCache, get_service_cache
from docfeedback.boundary.db import get_async_db
from docfeedback.models.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health_check(cache: ServiceCache = Depends(get_service_cache)) -> HealthResponse:
    """Basic health check."""
    active_jobs = cache.scheduler.active_count if cache.has_scheduler else 0
    return HealthResponse(status="healthy", message="Server Healthy", active_jobs=active_jobs)


@router.get("/db", response_model=HealthResponse)
async def health_check_db(db: AsyncSession = Depends(get_async_db)):
    """Database health check."""
    try:
        await db.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(f"{__name__}:health_check_db - {type(e).__name__}: {e}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=HealthResponse(status="unhealthy", message="Database unreachable").model_dump(),
        )
    return HealthResponse(status="healthy", message="Database connection OK")
