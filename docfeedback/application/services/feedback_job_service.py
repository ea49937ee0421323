"""
Feedback job service orchestrator.

Coordinates job submission, status queries, retries and stale-job
recovery. Validation and authorization errors are raised to the caller and
never written onto a job.

Dependencies: docfeedback.boundary.db.CRUD, docfeedback.core.document_feedback
System role: Feedback job use case orchestration
"""

import logging
from datetime import datetime, timedelta, timezone
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from docfeedback.boundary.db.CRUD.feedback_job_crud import feedback_job_crud
from docfeedback.boundary.db.models.feedback_job_model import FeedbackJobModel
from docfeedback.core.document_feedback.estimation import (
    build_success_message,
    estimate_remaining_minutes,
)
from docfeedback.core.document_feedback.genres import estimate_minutes
from docfeedback.core.document_feedback.models.job_state import STALE_JOB_LABEL, JobStatus
from docfeedback.core.document_feedback.scheduler import FeedbackJobScheduler
from docfeedback.core.document_feedback.url_parser import require_document_id
from docfeedback.core.exceptions import (
    InvalidJobStateError,
    JobAccessDeniedError,
    JobNotFoundError,
    ValidationError,
)
from docfeedback.models.feedback_job import (
    CreateFeedbackJobResponse,
    FeedbackJobListResponse,
    FeedbackJobStatusResponse,
    FeedbackJobSummary,
    RetryFeedbackJobResponse,
)

logger = logging.getLogger(__name__)

JOB_STARTED_MESSAGE = "문서 피드백 작업이 시작되었습니다. 진행 상황을 확인하세요."
JOB_RETRIED_MESSAGE = "작업을 다시 시작합니다."
STALE_JOB_ERROR = "System timeout: job did not finish and was marked failed"


def to_status_view(job: FeedbackJobModel, now: datetime | None = None) -> FeedbackJobStatusResponse:
    """Project a job record into the polled status view."""
    return FeedbackJobStatusResponse(
        job_id=job.id,
        status=job.status,
        progress=job.progress,
        current_step=job.current_step,
        total_steps=job.total_steps,
        step_details=job.step_details,
        error=job.error,
        genre=job.genre,
        document_id=job.document_id,
        document_url=job.document_url,
        started_at=job.started_at,
        completed_at=job.completed_at,
        estimated_total_time=job.estimated_time,
        estimated_time_remaining=estimate_remaining_minutes(
            job.status, job.progress, job.estimated_time, job.started_at, now
        ),
        comments_added=job.comments_added,
        success_message=build_success_message(job.status, job.document_id, job.comments_added),
        created_at=job.created_at,
        updated_at=job.updated_at,
    )


def to_summary(job: FeedbackJobModel) -> FeedbackJobSummary:
    return FeedbackJobSummary(
        job_id=job.id,
        status=job.status,
        progress=job.progress,
        current_step=job.current_step,
        genre=job.genre,
        document_url=job.document_url,
        error=job.error,
        created_at=job.created_at,
        completed_at=job.completed_at,
    )


class FeedbackJobService:
    """
    Feedback job service orchestrator.

    Request-scoped: wraps the request's session. The scheduler is shared
    across requests and only needed by operations that start runs.
    """

    def __init__(self, db: AsyncSession, scheduler: FeedbackJobScheduler | None = None) -> None:
        """
        Initialize feedback job service.

        Args:
            db: AsyncSession for database operations
            scheduler: Background run scheduler (required for create/retry)
        """
        self.db = db
        self.scheduler = scheduler

    async def create_job(
        self,
        user_id: str,
        genre: str,
        document_url: str,
    ) -> CreateFeedbackJobResponse:
        """
        Validate the submission, persist a PENDING job and schedule it.

        Args:
            user_id: Requester id
            genre: Genre label
            document_url: Google Docs URL or bare id

        Returns:
            CreateFeedbackJobResponse: New job id, PENDING status, estimate

        Raises:
            ValidationError: Missing genre or unresolvable URL
        """
        genre = genre.strip()
        if not genre:
            raise ValidationError("Genre is required", field="genre")
        document_id = require_document_id(document_url)

        try:
            job = await feedback_job_crud.create_job(
                self.db,
                user_id=user_id,
                document_id=document_id,
                document_url=document_url.strip(),
                genre=genre,
                estimated_time=estimate_minutes(genre),
            )
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(
                "Failed to create feedback job",
                extra={"error": str(e), "user_id": user_id, "document_id": document_id},
            )
            raise

        logger.info(
            "Feedback job created",
            extra={"job_id": str(job.id), "user_id": user_id, "genre": genre},
        )
        self._schedule(job.id)

        return CreateFeedbackJobResponse(
            job_id=job.id,
            status=job.status,
            progress=job.progress,
            estimated_time=job.estimated_time or estimate_minutes(genre),
            message=JOB_STARTED_MESSAGE,
        )

    async def get_job_status(self, job_id: UUID, user_id: str) -> FeedbackJobStatusResponse:
        """
        Read-only status view for the job's owner.

        Raises:
            JobNotFoundError: Unknown job id
            JobAccessDeniedError: Job belongs to another user
        """
        job = await self._get_owned_job(job_id, user_id)
        return to_status_view(job)

    async def list_jobs(self, user_id: str, limit: int = 20) -> FeedbackJobListResponse:
        """The requester's most recent jobs, newest first."""
        jobs = await feedback_job_crud.list_recent_by_user(self.db, user_id, limit=limit)
        return FeedbackJobListResponse(jobs=[to_summary(job) for job in jobs], total=len(jobs))

    async def retry_job(self, job_id: UUID, user_id: str) -> RetryFeedbackJobResponse:
        """
        Reset a FAILED job to PENDING (same id) and schedule it again.

        Raises:
            JobNotFoundError: Unknown job id
            JobAccessDeniedError: Job belongs to another user
            InvalidJobStateError: Job is not FAILED (record left unchanged)
        """
        job = await self._get_owned_job(job_id, user_id)
        if job.status is not JobStatus.FAILED:
            raise InvalidJobStateError(
                "Only failed jobs can be retried",
                current_status=job.status.value,
            )

        try:
            reset = await feedback_job_crud.reset_for_retry(self.db, job_id)
            if reset is None:
                raise InvalidJobStateError("Only failed jobs can be retried")
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        logger.info("Feedback job reset for retry", extra={"job_id": str(job_id), "user_id": user_id})
        self._schedule(job_id)

        return RetryFeedbackJobResponse(
            job_id=reset.id,
            status=reset.status,
            progress=reset.progress,
            message=JOB_RETRIED_MESSAGE,
        )

    async def recover_stale_jobs(
        self,
        threshold_seconds: float,
        now: datetime | None = None,
    ) -> list[UUID]:
        """
        Fail PROCESSING jobs whose record has not moved within the threshold.

        Args:
            threshold_seconds: Age of last update after which a job is stuck
            now: Reference time, defaults to the current UTC time

        Returns:
            list[UUID]: Ids of jobs marked FAILED
        """
        now = now or datetime.now(timezone.utc)
        cutoff = now - timedelta(seconds=threshold_seconds)
        stale = await feedback_job_crud.get_stale_processing(self.db, cutoff)

        recovered: list[UUID] = []
        try:
            for job in stale:
                updated = await feedback_job_crud.mark_failed(
                    self.db,
                    job.id,
                    error=STALE_JOB_ERROR,
                    current_step=STALE_JOB_LABEL,
                    from_statuses=(JobStatus.PROCESSING,),
                )
                if updated is not None:
                    recovered.append(job.id)
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error("Failed to recover stale jobs", extra={"error": str(e)})
            raise

        if recovered:
            logger.warning(
                "Stale feedback jobs marked as FAILED",
                extra={"count": len(recovered), "job_ids": [str(job_id) for job_id in recovered]},
            )
        return recovered

    async def _get_owned_job(self, job_id: UUID, user_id: str) -> FeedbackJobModel:
        job = await feedback_job_crud.get_by_id(self.db, job_id)
        if job is None:
            raise JobNotFoundError(job_id)
        if not job.is_owned_by(user_id):
            logger.warning(
                "Job access denied",
                extra={"job_id": str(job_id), "user_id": user_id},
            )
            raise JobAccessDeniedError(job_id)
        return job

    def _schedule(self, job_id: UUID) -> None:
        if self.scheduler is None:
            logger.warning("No scheduler configured; job left PENDING", extra={"job_id": str(job_id)})
            return
        self.scheduler.schedule(job_id)
