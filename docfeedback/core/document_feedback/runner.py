"""
Feedback job runner.

Drives one job through the five pipeline stages:
document access → content analysis → feedback generation →
document update → change confirmation

Each stage's checkpoint is persisted before the next stage starts, so a
crash mid-pipeline leaves an accurate last-known step. Any stage failure
is converted into a persisted FAILED state with a stage-specific label.

Dependencies: docfeedback.core.document_feedback (tasks, database, interfaces)
System role: Job Runner for the document feedback pipeline
"""

import logging
import time
from typing import Any
from uuid import UUID

from docfeedback.configs.feedback_job import FeedbackJobSettings
from docfeedback.core.document_feedback.database.job_status_updater import FeedbackJobStatusUpdater
from docfeedback.core.document_feedback.interfaces import DocumentSource, FeedbackContentGenerator
from docfeedback.core.document_feedback.models.job_state import (
    STAGE_FAILURE_LABELS,
    PipelineStage,
    StepDetails,
    StepStatus,
)
from docfeedback.core.document_feedback.tasks import (
    ChangeConfirmationTask,
    ContentAnalysisTask,
    DocumentAccessTask,
    DocumentUpdateTask,
    FeedbackGenerationTask,
)
from docfeedback.core.exceptions import DocFeedbackException, InvalidJobStateError
from docfeedback.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)


def error_message(exc: BaseException) -> str:
    """Message persisted on the job for a failure."""
    if isinstance(exc, DocFeedbackException):
        return exc.message
    return str(exc) or type(exc).__name__


class FeedbackJobRunner:
    """
    Run the document feedback pipeline for a single job.

    The runner does not guard against concurrent runs of the same job
    beyond the PENDING claim; the scheduler keeps at most one run per id.
    """

    def __init__(
        self,
        status_updater: FeedbackJobStatusUpdater,
        document_source: DocumentSource,
        content_generator: FeedbackContentGenerator,
        settings: FeedbackJobSettings | None = None,
        change_confirmation: ChangeConfirmationTask | None = None,
    ) -> None:
        """
        Initialize runner with its collaborators.

        Args:
            status_updater: Job record writer
            document_source: Document backend adapter
            content_generator: Feedback text generator
            settings: Pipeline tuning (defaults from environment)
            change_confirmation: Override for the polling stage (tests)
        """
        settings = settings or FeedbackJobSettings()
        self._updater = status_updater
        self._access = DocumentAccessTask(document_source)
        self._analysis = ContentAnalysisTask(min_meaningful_chars=settings.min_meaningful_chars)
        self._generation = FeedbackGenerationTask(
            content_generator,
            max_section_feedbacks=settings.max_section_feedbacks,
            max_concurrent_generations=settings.max_concurrent_generations,
            min_section_length=settings.min_section_length,
        )
        self._update = DocumentUpdateTask(document_source)
        self._confirmation = change_confirmation or ChangeConfirmationTask(
            document_source,
            poll_interval_seconds=settings.change_poll_interval_seconds,
            max_wait_seconds=settings.change_max_wait_seconds,
        )

    async def advance(self, job_id: UUID) -> None:
        """
        Run a PENDING job to COMPLETED or FAILED.

        No-op (logged) if the job is missing or not PENDING. Stage failures
        are persisted and swallowed; only a failure to persist the FAILED
        state itself propagates.

        Args:
            job_id: Job UUID
        """
        job = await self._updater.mark_processing(job_id)
        if job is None:
            logger.warning(
                f"{__name__}:advance - Job is not PENDING, skipping",
                extra={"job_id": str(job_id)},
            )
            return

        started = time.perf_counter()
        step_details = job.step_details
        stage = PipelineStage.DOCUMENT_ACCESS

        try:
            snapshot = await self._access.fetch(job.document_id)
            step_details = step_details.with_stage(stage, StepStatus.COMPLETED)
            await self._checkpoint(
                job_id,
                PipelineStage.CONTENT_ANALYSIS,
                step_details,
                initial_revision=snapshot.revision.revision_id,
            )
            stage = PipelineStage.CONTENT_ANALYSIS

            analysis = self._analysis.analyze(snapshot)
            step_details = step_details.with_stage(stage, StepStatus.COMPLETED)
            await self._checkpoint(job_id, PipelineStage.FEEDBACK_GENERATION, step_details)
            stage = PipelineStage.FEEDBACK_GENERATION

            items = await self._generation.generate(job.genre, snapshot, analysis)
            step_details = step_details.with_stage(stage, StepStatus.COMPLETED)
            await self._checkpoint(job_id, PipelineStage.DOCUMENT_UPDATE, step_details)
            stage = PipelineStage.DOCUMENT_UPDATE

            await self._update.apply(job.document_id, items)
            step_details = step_details.with_stage(stage, StepStatus.COMPLETED)
            await self._checkpoint(job_id, PipelineStage.CHANGE_CONFIRMATION, step_details)
            stage = PipelineStage.CHANGE_CONFIRMATION

            confirmation = await self._confirmation.confirm(job.document_id, snapshot.revision)
            comments_added = max(
                0,
                confirmation.final_revision.annotation_count - snapshot.revision.annotation_count,
            )
            await self._updater.mark_completed(
                job_id,
                step_details,
                comments_added=comments_added,
                final_revision=confirmation.final_revision.revision_id,
            )

        except Exception as e:
            await self._fail(job_id, stage, step_details, e)
            return

        logger.info(
            f"{__name__}:advance - Job completed",
            extra={
                "job_id": str(job_id),
                "comments_added": comments_added,
                "change_detected": confirmation.changed,
                "duration_ms": round((time.perf_counter() - started) * 1000, 2),
            },
        )

    async def _checkpoint(
        self,
        job_id: UUID,
        next_stage: PipelineStage,
        step_details: StepDetails,
        **fields: Any,
    ) -> None:
        job = await self._updater.complete_stage(job_id, next_stage, step_details, **fields)
        if job is None:
            raise InvalidJobStateError("Job is no longer PROCESSING; run abandoned")

    async def _fail(
        self,
        job_id: UUID,
        stage: PipelineStage,
        step_details: StepDetails,
        exc: Exception,
    ) -> None:
        log_exception_with_context(
            logger,
            f"{__name__}:advance - Stage failed",
            exc,
            job_id=str(job_id),
            stage=stage.value,
        )
        await self._updater.mark_failed(
            job_id,
            error=error_message(exc),
            current_step=STAGE_FAILURE_LABELS[stage],
            step_details=step_details.with_stage(stage, StepStatus.FAILED),
        )
