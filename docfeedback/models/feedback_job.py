"""
Feedback job request/response schemas.

Wire format uses camelCase field names (jobId, documentUrl, stepDetails...)
for the existing web client; Python code uses snake_case.

Dependencies: pydantic
System role: Feedback job API contracts
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from docfeedback.core.document_feedback.models.job_state import JobStatus, StepDetails


class CamelModel(BaseModel):
    """Base schema serializing with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CreateFeedbackJobRequest(CamelModel):
    """Request body for submitting a document for feedback."""

    genre: str = Field(min_length=1, max_length=100, description="Document genre, e.g. 워크시트")
    document_url: str = Field(min_length=1, description="Google Docs URL or document id")


class CreateFeedbackJobResponse(CamelModel):
    """Response for a newly created job."""

    job_id: uuid.UUID
    status: JobStatus
    progress: int
    estimated_time: int = Field(description="Estimated total processing time in minutes")
    message: str


class RetryFeedbackJobResponse(CamelModel):
    """Response for a retried job."""

    job_id: uuid.UUID
    status: JobStatus
    progress: int
    message: str


class FeedbackJobStatusResponse(CamelModel):
    """Polled status view of a job."""

    job_id: uuid.UUID
    status: JobStatus
    progress: int = Field(ge=0, le=100)
    current_step: str | None = None
    total_steps: int
    step_details: StepDetails
    error: str | None = None
    genre: str
    document_id: str
    document_url: str
    started_at: datetime | None = None
    completed_at: datetime | None = None
    estimated_total_time: int | None = Field(default=None, description="Total estimate in minutes")
    estimated_time_remaining: int = Field(description="Minutes remaining (0 when terminal)")
    comments_added: int = 0
    success_message: str | None = None
    created_at: datetime
    updated_at: datetime


class FeedbackJobSummary(CamelModel):
    """Compact job entry for listings."""

    job_id: uuid.UUID
    status: JobStatus
    progress: int
    current_step: str | None = None
    genre: str
    document_url: str
    error: str | None = None
    created_at: datetime
    completed_at: datetime | None = None


class FeedbackJobListResponse(CamelModel):
    """Requester's recent jobs, newest first."""

    jobs: list[FeedbackJobSummary]
    total: int
