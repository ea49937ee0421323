"""
Status projection helpers.

Remaining-time estimate and the denormalized success message shown on the
status view.

Dependencies: datetime (stdlib)
System role: Read-side computations for the status query
"""

import math
from datetime import datetime, timezone

from docfeedback.core.document_feedback.models.job_state import JobStatus
from docfeedback.core.document_feedback.url_parser import document_edit_url


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes (SQLite) as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def estimate_remaining_minutes(
    status: JobStatus,
    progress: int,
    estimated_total_minutes: int | None,
    started_at: datetime | None,
    now: datetime | None = None,
) -> int:
    """
    Estimate minutes remaining for a job.

    Takes the smaller of an elapsed-time estimate and a progress-based
    estimate, floored at zero. Progress can stall during change confirmation
    while wall-clock time keeps moving, so neither signal is used alone.

    Args:
        status: Current job status
        progress: Progress percentage (0-100)
        estimated_total_minutes: Estimate fixed at creation from the genre
        started_at: When the current run was started (reset on retry)
        now: Reference time, defaults to the current UTC time

    Returns:
        int: Whole minutes remaining
    """
    if not estimated_total_minutes or status.is_terminal:
        return 0

    progress_based = math.floor(estimated_total_minutes * (100 - progress) / 100)
    if started_at is None:
        return max(0, progress_based)

    now = now or datetime.now(timezone.utc)
    elapsed_minutes = math.floor((as_utc(now) - as_utc(started_at)).total_seconds() / 60)
    time_based = estimated_total_minutes - elapsed_minutes
    return max(0, min(progress_based, time_based))


def build_success_message(
    status: JobStatus,
    document_id: str,
    comments_added: int | None,
) -> str | None:
    """Human-readable completion message; None unless the job is COMPLETED."""
    if status is not JobStatus.COMPLETED:
        return None
    added = comments_added or 0
    return (
        f"AI 피드백이 문서에 추가되었습니다 (추가된 피드백: {added}개). "
        f"문서에서 확인하세요: {document_edit_url(document_id)}"
    )
