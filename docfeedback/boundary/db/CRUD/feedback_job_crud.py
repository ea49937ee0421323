"""
Feedback job CRUD operations.

Provides lifecycle transitions for FeedbackJobModel. Every transition is a
single conditional UPDATE guarded on the current status, so a lost race
returns None instead of corrupting the record.

Dependencies: sqlalchemy, docfeedback.boundary.db.models
System role: Job record store operations for the feedback pipeline
"""

from datetime import datetime
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from docfeedback.boundary.db.base import utc_now
from docfeedback.boundary.db.CRUD.base_crud import BaseCRUD
from docfeedback.boundary.db.models.feedback_job_model import FeedbackJobModel
from docfeedback.core.document_feedback.models.job_state import (
    COMPLETED_LABEL,
    COMPLETED_PROGRESS,
    PREPARING_LABEL,
    RETRY_PREPARING_LABEL,
    STAGE_LABELS,
    STAGE_START_PROGRESS,
    JobStatus,
    PipelineStage,
    StepDetails,
)

MAX_ERROR_LENGTH = 2000
ACTIVE_STATUSES = (JobStatus.PENDING, JobStatus.PROCESSING)


class FeedbackJobCRUD(BaseCRUD[FeedbackJobModel]):
    """
    CRUD operations for FeedbackJobModel.

    Extends BaseCRUD with ownership-scoped queries and the state machine
    transitions used by the runner, scheduler and retry controller.
    """

    def __init__(self) -> None:
        """Initialize FeedbackJobCRUD with FeedbackJobModel."""
        super().__init__(FeedbackJobModel)

    async def create_job(
        self,
        session: AsyncSession,
        *,
        user_id: str,
        document_id: str,
        document_url: str,
        genre: str,
        estimated_time: int,
    ) -> FeedbackJobModel:
        """
        Create a PENDING job with all step details pending.

        Args:
            session: Async database session
            user_id: Owner id
            document_id: Resolved Google Docs id
            document_url: URL as submitted
            genre: Genre label
            estimated_time: Total estimate in minutes

        Returns:
            Created FeedbackJobModel
        """
        return await self.create(
            session,
            user_id=user_id,
            document_id=document_id,
            document_url=document_url,
            genre=genre,
            status=JobStatus.PENDING,
            progress=0,
            current_step=PREPARING_LABEL,
            step_details=StepDetails.all_pending(),
            estimated_time=estimated_time,
            started_at=utc_now(),
        )

    async def list_recent_by_user(
        self,
        session: AsyncSession,
        user_id: str,
        limit: int = 20,
    ) -> Sequence[FeedbackJobModel]:
        """
        Retrieve a user's most recent jobs, newest first.

        Args:
            session: Async database session
            user_id: Owner id
            limit: Maximum number of jobs to return

        Returns:
            Sequence of FeedbackJobModels
        """
        stmt = (
            select(FeedbackJobModel)
            .where(FeedbackJobModel.user_id == user_id)
            .order_by(FeedbackJobModel.created_at.desc())
            .limit(limit)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def list_recent(
        self,
        session: AsyncSession,
        limit: int = 20,
    ) -> Sequence[FeedbackJobModel]:
        """Retrieve the most recent jobs across all users (maintenance use)."""
        stmt = select(FeedbackJobModel).order_by(FeedbackJobModel.created_at.desc()).limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def get_stale_processing(
        self,
        session: AsyncSession,
        updated_before: datetime,
    ) -> Sequence[FeedbackJobModel]:
        """
        Retrieve PROCESSING jobs whose record has not changed since a cutoff.

        Args:
            session: Async database session
            updated_before: Cutoff timestamp (UTC)

        Returns:
            Sequence of stuck FeedbackJobModels
        """
        stmt = select(FeedbackJobModel).where(
            FeedbackJobModel.status == JobStatus.PROCESSING,
            FeedbackJobModel.updated_at < updated_before,
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def start_processing(self, session: AsyncSession, id: UUID) -> FeedbackJobModel | None:
        """
        Claim a PENDING job for the runner.

        Returns:
            Updated FeedbackJobModel, or None if the job is not PENDING
        """
        first_stage = PipelineStage.DOCUMENT_ACCESS
        return await self.update_where(
            session,
            id,
            (FeedbackJobModel.status == JobStatus.PENDING,),
            status=JobStatus.PROCESSING,
            progress=STAGE_START_PROGRESS[first_stage],
            current_step=STAGE_LABELS[first_stage],
        )

    async def complete_stage(
        self,
        session: AsyncSession,
        id: UUID,
        next_stage: PipelineStage,
        step_details: StepDetails,
        **fields: Any,
    ) -> FeedbackJobModel | None:
        """
        Persist a stage checkpoint and move the label to the next stage.

        Args:
            session: Async database session
            id: Job UUID
            next_stage: Stage about to start
            step_details: Step details with the finished stage completed
            **fields: Stage outputs to persist (e.g. initial_revision)

        Returns:
            Updated FeedbackJobModel, or None if the job is no longer PROCESSING
        """
        return await self.update_where(
            session,
            id,
            (
                FeedbackJobModel.status == JobStatus.PROCESSING,
                FeedbackJobModel.progress <= STAGE_START_PROGRESS[next_stage],
            ),
            progress=STAGE_START_PROGRESS[next_stage],
            current_step=STAGE_LABELS[next_stage],
            step_details=step_details,
            **fields,
        )

    async def mark_completed(
        self,
        session: AsyncSession,
        id: UUID,
        *,
        step_details: StepDetails,
        comments_added: int,
        final_revision: str | None,
    ) -> FeedbackJobModel | None:
        """
        Mark a PROCESSING job COMPLETED.

        Returns:
            Updated FeedbackJobModel, or None if the job is not PROCESSING
        """
        return await self.update_where(
            session,
            id,
            (FeedbackJobModel.status == JobStatus.PROCESSING,),
            status=JobStatus.COMPLETED,
            progress=COMPLETED_PROGRESS,
            current_step=COMPLETED_LABEL,
            step_details=step_details,
            comments_added=comments_added,
            final_revision=final_revision,
            error=None,
            completed_at=utc_now(),
        )

    async def mark_failed(
        self,
        session: AsyncSession,
        id: UUID,
        *,
        error: str,
        current_step: str,
        step_details: StepDetails | None = None,
        from_statuses: Sequence[JobStatus] = ACTIVE_STATUSES,
    ) -> FeedbackJobModel | None:
        """
        Mark an active job FAILED with an error and failure label.

        Progress is left as is. Terminal jobs are never overwritten.

        Args:
            session: Async database session
            id: Job UUID
            error: Error message (truncated to fit the column budget)
            current_step: Failure label
            step_details: Step details with the failed stage marked, if known
            from_statuses: Statuses the job may currently be in

        Returns:
            Updated FeedbackJobModel, or None if the job was not active
        """
        fields: dict[str, Any] = {
            "status": JobStatus.FAILED,
            "error": error[:MAX_ERROR_LENGTH],
            "current_step": current_step,
            "completed_at": utc_now(),
        }
        if step_details is not None:
            fields["step_details"] = step_details
        return await self.update_where(
            session,
            id,
            (FeedbackJobModel.status.in_(list(from_statuses)),),
            **fields,
        )

    async def reset_for_retry(self, session: AsyncSession, id: UUID) -> FeedbackJobModel | None:
        """
        Reset a FAILED job to PENDING in place (same id).

        Returns:
            Updated FeedbackJobModel, or None if the job is not FAILED
        """
        return await self.update_where(
            session,
            id,
            (FeedbackJobModel.status == JobStatus.FAILED,),
            status=JobStatus.PENDING,
            progress=0,
            current_step=RETRY_PREPARING_LABEL,
            step_details=StepDetails.all_pending(),
            error=None,
            completed_at=None,
            comments_added=0,
            final_revision=None,
            started_at=utc_now(),
        )


feedback_job_crud = FeedbackJobCRUD()
