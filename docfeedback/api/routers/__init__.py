"""API routers."""

from .feedback_jobs import router as feedback_jobs_router
from .health import router as health_router

__all__ = [
    "feedback_jobs_router",
    "health_router",
]
