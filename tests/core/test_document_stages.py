"""
Tests for the document access and document update stages.

Tests error wrapping around the document backend and the batched,
back-to-front write.
"""

import pytest

from conftest import FakeDocumentSource
from docfeedback.core.document_feedback.models.document import FeedbackItem
from docfeedback.core.document_feedback.tasks import DocumentAccessTask, DocumentUpdateTask
from docfeedback.core.exceptions import DocumentAccessError, DocumentUpdateError


class TestDocumentAccessTask:
    """Test suite for DocumentAccessTask."""

    @pytest.mark.asyncio
    async def test_fetch_returns_snapshot(self, fake_source: FakeDocumentSource) -> None:
        task = DocumentAccessTask(fake_source)

        snapshot = await task.fetch("doc-1")

        assert snapshot.document_id == "doc-1"
        assert snapshot.revision.revision_id == "rev-1"
        assert len(snapshot.blocks) == 7

    @pytest.mark.asyncio
    async def test_unexpected_error_is_wrapped(self, make_source) -> None:
        task = DocumentAccessTask(make_source(fetch_error=ConnectionError("reset by peer")))

        with pytest.raises(DocumentAccessError) as exc_info:
            await task.fetch("doc-1")

        assert "reset by peer" in exc_info.value.message
        assert exc_info.value.details["document_id"] == "doc-1"

    @pytest.mark.asyncio
    async def test_access_error_passes_through(self, make_source, not_found_error) -> None:
        task = DocumentAccessTask(make_source(fetch_error=not_found_error))

        with pytest.raises(DocumentAccessError) as exc_info:
            await task.fetch("doc-1")

        assert exc_info.value is not_found_error


class TestDocumentUpdateTask:
    """Test suite for DocumentUpdateTask."""

    @pytest.mark.asyncio
    async def test_single_batch_back_to_front(self, fake_source: FakeDocumentSource) -> None:
        # Arrange
        task = DocumentUpdateTask(fake_source)
        items = [
            FeedbackItem(type="전체 평가", content="A", insert_at=1),
            FeedbackItem(type="섹션 피드백", content="B", insert_at=80),
        ]

        # Act
        written = await task.apply("doc-1", items)

        # Assert
        assert written == 2
        assert len(fake_source.insert_calls) == 1
        assert [insertion.index for insertion in fake_source.insert_calls[0]] == [80, 1]

    @pytest.mark.asyncio
    async def test_no_items_rejected(self, fake_source: FakeDocumentSource) -> None:
        task = DocumentUpdateTask(fake_source)

        with pytest.raises(DocumentUpdateError):
            await task.apply("doc-1", [])

        assert fake_source.insert_calls == []

    @pytest.mark.asyncio
    async def test_backend_error_is_wrapped(self, make_source) -> None:
        task = DocumentUpdateTask(make_source(insert_error=RuntimeError("batchUpdate rejected")))
        items = [FeedbackItem(type="전체 평가", content="A", insert_at=1)]

        with pytest.raises(DocumentUpdateError) as exc_info:
            await task.apply("doc-1", items)

        assert "batchUpdate rejected" in exc_info.value.message
