"""
Tests for the change confirmation stage.

Polling is best-effort: a timeout is reported, never raised, and poll
errors are tolerated.
"""

from unittest.mock import AsyncMock

import pytest

from docfeedback.core.document_feedback.models.document import RevisionSnapshot
from docfeedback.core.document_feedback.tasks import ChangeConfirmationTask

BASELINE = RevisionSnapshot(revision_id="rev-1", annotation_count=2)


def source_returning(*results) -> AsyncMock:
    source = AsyncMock()
    source.get_revision = AsyncMock(side_effect=list(results))
    return source


class TestChangeConfirmationTask:
    """Test suite for ChangeConfirmationTask.confirm."""

    @pytest.mark.asyncio
    async def test_change_detected_on_first_poll(self) -> None:
        # Arrange
        changed = RevisionSnapshot(revision_id="rev-2", annotation_count=5)
        source = source_returning(changed)
        task = ChangeConfirmationTask(source, poll_interval_seconds=0.01, max_wait_seconds=1)

        # Act
        result = await task.confirm("doc-1", BASELINE)

        # Assert
        assert result.changed is True
        assert result.final_revision == changed
        assert result.polls == 1

    @pytest.mark.asyncio
    async def test_annotation_count_alone_counts_as_change(self) -> None:
        changed = RevisionSnapshot(revision_id="rev-1", annotation_count=3)
        task = ChangeConfirmationTask(source_returning(changed), max_wait_seconds=1)

        result = await task.confirm("doc-1", BASELINE)

        assert result.changed is True

    @pytest.mark.asyncio
    async def test_keeps_polling_until_change(self) -> None:
        changed = RevisionSnapshot(revision_id="rev-2", annotation_count=2)
        source = source_returning(BASELINE, BASELINE, changed)
        sleep = AsyncMock()
        task = ChangeConfirmationTask(source, poll_interval_seconds=5, max_wait_seconds=60, sleep=sleep)

        result = await task.confirm("doc-1", BASELINE)

        assert result.changed is True
        assert result.polls == 3
        assert sleep.await_count == 2

    @pytest.mark.asyncio
    async def test_timeout_reports_unchanged(self) -> None:
        source = AsyncMock()
        source.get_revision = AsyncMock(return_value=BASELINE)
        task = ChangeConfirmationTask(source, poll_interval_seconds=0.01, max_wait_seconds=0.05)

        result = await task.confirm("doc-1", BASELINE)

        assert result.changed is False
        assert result.final_revision == BASELINE
        assert result.polls >= 1

    @pytest.mark.asyncio
    async def test_zero_wait_polls_once(self) -> None:
        source = AsyncMock()
        source.get_revision = AsyncMock(return_value=BASELINE)
        task = ChangeConfirmationTask(source, max_wait_seconds=0)

        result = await task.confirm("doc-1", BASELINE)

        assert result.polls == 1
        assert result.changed is False

    @pytest.mark.asyncio
    async def test_poll_errors_are_tolerated(self) -> None:
        changed = RevisionSnapshot(revision_id="rev-2", annotation_count=4)
        source = source_returning(RuntimeError("503 backend error"), changed)
        task = ChangeConfirmationTask(source, poll_interval_seconds=0.01, max_wait_seconds=1)

        result = await task.confirm("doc-1", BASELINE)

        assert result.changed is True
        assert result.polls == 2

    @pytest.mark.asyncio
    async def test_poll_errors_until_deadline_return_baseline(self) -> None:
        source = AsyncMock()
        source.get_revision = AsyncMock(side_effect=RuntimeError("unavailable"))
        task = ChangeConfirmationTask(source, poll_interval_seconds=0.01, max_wait_seconds=0.03)

        result = await task.confirm("doc-1", BASELINE)

        assert result.changed is False
        assert result.final_revision == BASELINE
