"""
Document feedback job API endpoints.

Routes:
    POST /docs/feedback                   submit a document for feedback
    GET  /docs/feedback                   list the requester's recent jobs
    GET  /docs/feedback/status/{job_id}   poll job status
    POST /docs/feedback/retry/{job_id}    retry a failed job

Dependencies: docfeedback.application.services, docfeedback.api.deps
System role: Feedback job HTTP API
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query

from docfeedback.api.deps import get_current_user_id, get_feedback_job_service
from docfeedback.api.routers.feedback_error_handling import handle_feedback_errors
from docfeedback.application.services import FeedbackJobService
from docfeedback.core.exceptions import JobNotFoundError
from docfeedback.models.feedback_job import (
    CreateFeedbackJobRequest,
    CreateFeedbackJobResponse,
    FeedbackJobListResponse,
    FeedbackJobStatusResponse,
    RetryFeedbackJobResponse,
)

router = APIRouter(prefix="/docs/feedback", tags=["document-feedback"])


def parse_job_id(job_id: str) -> UUID:
    """Malformed ids cannot exist, so they are reported as not found."""
    try:
        return UUID(job_id)
    except ValueError as e:
        raise JobNotFoundError(job_id) from e


@router.post("", response_model=CreateFeedbackJobResponse)
@handle_feedback_errors
async def create_feedback_job(
    request: CreateFeedbackJobRequest,
    user_id: str = Depends(get_current_user_id),
    service: FeedbackJobService = Depends(get_feedback_job_service),
) -> CreateFeedbackJobResponse:
    """Validate the document URL, create a PENDING job and start processing."""
    return await service.create_job(
        user_id=user_id,
        genre=request.genre,
        document_url=request.document_url,
    )


@router.get("", response_model=FeedbackJobListResponse)
@handle_feedback_errors
async def list_feedback_jobs(
    limit: int = Query(default=20, ge=1, le=100),
    user_id: str = Depends(get_current_user_id),
    service: FeedbackJobService = Depends(get_feedback_job_service),
) -> FeedbackJobListResponse:
    """List the requester's most recent jobs."""
    return await service.list_jobs(user_id, limit=limit)


@router.get("/status/{job_id}", response_model=FeedbackJobStatusResponse)
@handle_feedback_errors
async def get_feedback_job_status(
    job_id: str,
    user_id: str = Depends(get_current_user_id),
    service: FeedbackJobService = Depends(get_feedback_job_service),
) -> FeedbackJobStatusResponse:
    """Poll job progress; includes a success message once COMPLETED."""
    return await service.get_job_status(parse_job_id(job_id), user_id)


@router.post("/retry/{job_id}", response_model=RetryFeedbackJobResponse)
@handle_feedback_errors
async def retry_feedback_job(
    job_id: str,
    user_id: str = Depends(get_current_user_id),
    service: FeedbackJobService = Depends(get_feedback_job_service),
) -> RetryFeedbackJobResponse:
    """Reset a FAILED job to PENDING and process it again under the same id."""
    return await service.retry_job(parse_job_id(job_id), user_id)
