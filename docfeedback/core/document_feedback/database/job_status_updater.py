"""
Feedback job status updater.

Persists job state transitions from background code (runner, scheduler,
stale recovery). Each call runs in its own short session and commits
immediately, so pollers observe every checkpoint as soon as it happens:
PENDING → PROCESSING → COMPLETED (or FAILED with error message)

Dependencies: sqlalchemy, docfeedback.boundary.db
System role: Job record store writer for background tasks
"""

import logging
from typing import Any, Awaitable, Callable, TypeVar
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from docfeedback.boundary.db.CRUD.feedback_job_crud import FeedbackJobCRUD, feedback_job_crud
from docfeedback.boundary.db.models.feedback_job_model import FeedbackJobModel
from docfeedback.core.document_feedback.models.job_state import (
    JobStatus,
    PipelineStage,
    StepDetails,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class FeedbackJobStatusUpdater:
    """Update feedback job status in the database during processing."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        crud: FeedbackJobCRUD = feedback_job_crud,
    ) -> None:
        """
        Initialize with a session factory.

        Args:
            session_factory: Factory for short-lived sessions
            crud: Job CRUD operations
        """
        self._session_factory = session_factory
        self._crud = crud

    async def _write(
        self,
        operation: str,
        job_id: UUID,
        action: Callable[[AsyncSession], Awaitable[T]],
    ) -> T:
        async with self._session_factory() as session:
            try:
                result = await action(session)
                await session.commit()
                return result
            except Exception as e:
                logger.error(
                    f"{__name__}:{operation} - {type(e).__name__}: {e}",
                    extra={"job_id": str(job_id)},
                )
                await session.rollback()
                raise

    async def get_job(self, job_id: UUID) -> FeedbackJobModel | None:
        async with self._session_factory() as session:
            return await self._crud.get_by_id(session, job_id)

    async def mark_processing(self, job_id: UUID) -> FeedbackJobModel | None:
        """
        Claim a PENDING job.

        Returns:
            The job, or None when it was not PENDING
        """
        job = await self._write(
            "mark_processing",
            job_id,
            lambda session: self._crud.start_processing(session, job_id),
        )
        if job is not None:
            logger.info(
                f"{__name__}:mark_processing - Job marked as PROCESSING",
                extra={"job_id": str(job_id)},
            )
        return job

    async def complete_stage(
        self,
        job_id: UUID,
        next_stage: PipelineStage,
        step_details: StepDetails,
        **fields: Any,
    ) -> FeedbackJobModel | None:
        """Persist a finished stage and move on to ``next_stage``."""
        job = await self._write(
            "complete_stage",
            job_id,
            lambda session: self._crud.complete_stage(
                session, job_id, next_stage, step_details, **fields
            ),
        )
        logger.info(
            f"{__name__}:complete_stage - Stage checkpoint saved",
            extra={"job_id": str(job_id), "next_stage": next_stage.value},
        )
        return job

    async def mark_completed(
        self,
        job_id: UUID,
        step_details: StepDetails,
        comments_added: int,
        final_revision: str | None,
    ) -> FeedbackJobModel | None:
        job = await self._write(
            "mark_completed",
            job_id,
            lambda session: self._crud.mark_completed(
                session,
                job_id,
                step_details=step_details,
                comments_added=comments_added,
                final_revision=final_revision,
            ),
        )
        logger.info(
            f"{__name__}:mark_completed - Job marked as COMPLETED",
            extra={"job_id": str(job_id), "comments_added": comments_added},
        )
        return job

    async def mark_failed(
        self,
        job_id: UUID,
        error: str,
        current_step: str,
        step_details: StepDetails | None = None,
        from_statuses: tuple[JobStatus, ...] = (JobStatus.PENDING, JobStatus.PROCESSING),
    ) -> FeedbackJobModel | None:
        """
        Mark an active job FAILED.

        Returns:
            The job, or None when it was already terminal (nothing written)
        """
        job = await self._write(
            "mark_failed",
            job_id,
            lambda session: self._crud.mark_failed(
                session,
                job_id,
                error=error,
                current_step=current_step,
                step_details=step_details,
                from_statuses=from_statuses,
            ),
        )
        if job is None:
            logger.info(
                f"{__name__}:mark_failed - Job no longer active, failure not recorded",
                extra={"job_id": str(job_id), "error_message": error},
            )
        else:
            logger.info(
                f"{__name__}:mark_failed - Job marked as FAILED",
                extra={"job_id": str(job_id), "error_message": error, "current_step": current_step},
            )
        return job
