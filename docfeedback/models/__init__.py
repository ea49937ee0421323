"""API request/response schemas."""

from docfeedback.models.common import ErrorResponse, HealthResponse
from docfeedback.models.feedback_job import (
    CreateFeedbackJobRequest,
    CreateFeedbackJobResponse,
    FeedbackJobListResponse,
    FeedbackJobStatusResponse,
    FeedbackJobSummary,
    RetryFeedbackJobResponse,
)

__all__ = [
    "CreateFeedbackJobRequest",
    "CreateFeedbackJobResponse",
    "ErrorResponse",
    "FeedbackJobListResponse",
    "FeedbackJobStatusResponse",
    "FeedbackJobSummary",
    "HealthResponse",
    "RetryFeedbackJobResponse",
]
