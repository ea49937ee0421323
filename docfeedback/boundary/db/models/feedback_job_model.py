"""
Document feedback job ORM model.

Tracks one user-initiated request to annotate a Google Doc with AI
feedback, from submission through the five pipeline stages to a terminal
state. Polled by the status endpoint.

Dependencies: sqlalchemy, docfeedback.boundary.db.base
System role: Job record store for the feedback pipeline
"""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Enum, Index, Integer, String, Text
from sqlalchemy.engine import Dialect
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import TypeDecorator

from docfeedback.boundary.db.base import Base, TimestampMixin, UUIDMixin, utc_now
from docfeedback.core.document_feedback.models.job_state import TOTAL_STEPS, JobStatus, StepDetails


class StepDetailsType(TypeDecorator):
    """
    JSON column holding a validated StepDetails record.

    Values are validated on write and parsed into the frozen model on
    read, so callers never see a free-form dict.
    """

    impl = JSON
    cache_ok = True

    def process_bind_param(self, value: Any, dialect: Dialect) -> dict[str, str] | None:
        if value is None:
            return None
        if not isinstance(value, StepDetails):
            value = StepDetails.model_validate(value)
        return value.to_json()

    def process_result_value(self, value: Any, dialect: Dialect) -> StepDetails:
        if value is None:
            return StepDetails.all_pending()
        return StepDetails.model_validate(value)


class FeedbackJobModel(Base, UUIDMixin, TimestampMixin):
    """
    Feedback job ORM model.

    Attributes:
        id: UUID primary key (auto-generated), exposed as jobId
        user_id: Owner; only this user may poll or retry the job
        document_id: Google Docs document id resolved from the URL
        document_url: URL exactly as submitted
        genre: Genre label selecting the rubric
        status: Lifecycle state (PENDING/PROCESSING/COMPLETED/FAILED)
        progress: Percentage complete (0-100), checkpointed per stage
        current_step: Human-readable label of the current or failed stage
        total_steps: Number of tracked stages (fixed)
        step_details: Per-stage sub-status record
        error: Failure message (FAILED only)
        started_at: Start of the current run (reset on retry)
        completed_at: Set iff status is COMPLETED or FAILED
        estimated_time: Total estimate in minutes, from genre
        comments_added: Feedback blocks observed after the update
        initial_revision: Revision token before the update
        final_revision: Revision token after change confirmation

    Workflow:
        1. API validates the URL and creates the job (PENDING, progress 0)
        2. Scheduler launches the runner, which claims the job (PROCESSING)
        3. Each stage persists its checkpoint before the next one starts
        4. Runner writes COMPLETED, or FAILED with error and label
        5. Owner may retry a FAILED job; it is reset to PENDING in place
    """

    __tablename__ = "document_feedback_jobs"
    __table_args__ = (
        Index("ix_document_feedback_jobs_user_created", "user_id", "created_at"),
        Index("ix_document_feedback_jobs_status_updated", "status", "updated_at"),
    )

    user_id: Mapped[str] = mapped_column(String(255), nullable=False)
    document_id: Mapped[str] = mapped_column(String(255), nullable=False)
    document_url: Mapped[str] = mapped_column(Text, nullable=False)
    genre: Mapped[str] = mapped_column(String(100), nullable=False)

    status: Mapped[JobStatus] = mapped_column(
        Enum(JobStatus, native_enum=False, length=20),
        nullable=False,
        default=JobStatus.PENDING,
    )
    progress: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        doc="Progress percentage (0-100)",
    )
    current_step: Mapped[str | None] = mapped_column(String(255), nullable=True)
    total_steps: Mapped[int] = mapped_column(Integer, nullable=False, default=TOTAL_STEPS)
    step_details: Mapped[StepDetails] = mapped_column(
        StepDetailsType,
        nullable=False,
        default=lambda: StepDetails.all_pending(),
    )

    error: Mapped[str | None] = mapped_column(Text, nullable=True)
    started_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    estimated_time: Mapped[int | None] = mapped_column(Integer, nullable=True, doc="Minutes")

    comments_added: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    initial_revision: Mapped[str | None] = mapped_column(String(255), nullable=True)
    final_revision: Mapped[str | None] = mapped_column(String(255), nullable=True)

    def is_owned_by(self, user_id: str) -> bool:
        return self.user_id == user_id

    def __repr__(self) -> str:
        return f"<FeedbackJobModel id={self.id} status={self.status.value} progress={self.progress}>"


__all__ = ["FeedbackJobModel", "StepDetailsType"]
