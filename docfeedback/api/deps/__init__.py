"""FastAPI dependencies."""

from docfeedback.api.deps.dependencies import (
    ServiceCache,
    get_current_user_id,
    get_feedback_job_service,
    get_scheduler,
    get_service_cache,
)

__all__ = [
    "ServiceCache",
    "get_current_user_id",
    "get_feedback_job_service",
    "get_scheduler",
    "get_service_cache",
]
