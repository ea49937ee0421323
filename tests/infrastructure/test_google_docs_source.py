"""
Tests for the Google Docs document source.

Uses a mocked Docs API resource; no network access.
"""

from unittest.mock import MagicMock

import httplib2
import pytest
from googleapiclient.errors import HttpError

from docfeedback.boundary.google.docs_source import (
    GoogleDocsSource,
    build_insert_requests,
    count_feedback_blocks,
    parse_blocks,
    utf16_length,
)
from docfeedback.configs.google_docs import GoogleDocsSettings
from docfeedback.core.document_feedback.models.document import FeedbackInsertion
from docfeedback.core.exceptions import DocumentAccessError, DocumentUpdateError

DOCUMENT = {
    "title": "탐구 보고서",
    "revisionId": "ALm37BV-rev",
    "body": {
        "content": [
            {"sectionBreak": {}, "startIndex": 0, "endIndex": 1},
            {
                "startIndex": 1,
                "endIndex": 8,
                "paragraph": {"elements": [{"textRun": {"content": "1단계 문제\n"}}]},
            },
            {
                "startIndex": 8,
                "endIndex": 9,
                "paragraph": {"elements": [{"textRun": {"content": "\n"}}]},
            },
            {
                "startIndex": 9,
                "endIndex": 30,
                "paragraph": {
                    "elements": [
                        {"textRun": {"content": "바다 쓰레기를 "}},
                        {"textRun": {"content": "조사했습니다.\n"}},
                    ]
                },
            },
            {
                "startIndex": 30,
                "endIndex": 45,
                "paragraph": {"elements": [{"textRun": {"content": "[AI 평가 - 전체 평가]\n"}}]},
            },
            {"startIndex": 45, "endIndex": 46, "table": {}},
        ]
    },
}


def http_error(status: int) -> HttpError:
    return HttpError(httplib2.Response({"status": status}), b'{"error": {}}')


def mock_service(document=None, get_error=None, update_error=None) -> MagicMock:
    service = MagicMock()
    get_request = service.documents.return_value.get.return_value
    if get_error is not None:
        get_request.execute.side_effect = get_error
    else:
        get_request.execute.return_value = document or DOCUMENT
    update_request = service.documents.return_value.batchUpdate.return_value
    if update_error is not None:
        update_request.execute.side_effect = update_error
    return service


def make_source(service: MagicMock) -> GoogleDocsSource:
    return GoogleDocsSource(settings=GoogleDocsSettings(request_attempts=1), service=service)


class TestParsing:
    """Test suite for documents.get parsing helpers."""

    def test_parse_blocks_keeps_non_blank_paragraphs(self) -> None:
        blocks = parse_blocks(DOCUMENT)

        assert [block.text for block in blocks] == [
            "1단계 문제\n",
            "바다 쓰레기를 조사했습니다.\n",
            "[AI 평가 - 전체 평가]\n",
        ]
        assert (blocks[1].start, blocks[1].end) == (9, 30)

    def test_parse_blocks_on_empty_document(self) -> None:
        assert parse_blocks({}) == []

    def test_count_feedback_blocks(self) -> None:
        assert count_feedback_blocks(parse_blocks(DOCUMENT)) == 1

    def test_utf16_length_counts_surrogate_pairs(self) -> None:
        assert utf16_length("평가") == 2
        assert utf16_length("📝") == 2


class TestBuildInsertRequests:
    """Test suite for batchUpdate request building."""

    def test_insert_then_style_each_block(self) -> None:
        # Arrange
        insertions = [FeedbackInsertion(index=30, text="\n\n좋아요 📝\n")]

        # Act
        requests = build_insert_requests(insertions)

        # Assert
        assert requests[0] == {"insertText": {"location": {"index": 30}, "text": "\n\n좋아요 📝\n"}}
        style = requests[1]["updateTextStyle"]
        assert style["range"] == {"startIndex": 30, "endIndex": 30 + 9}
        assert style["textStyle"]["italic"] is True

    def test_order_is_preserved(self) -> None:
        insertions = [FeedbackInsertion(index=50, text="b"), FeedbackInsertion(index=10, text="a")]

        requests = build_insert_requests(insertions)

        assert [r["insertText"]["location"]["index"] for r in requests[::2]] == [50, 10]


class TestGoogleDocsSource:
    """Test suite for GoogleDocsSource."""

    @pytest.mark.asyncio
    async def test_fetch_snapshot(self) -> None:
        source = make_source(mock_service())

        snapshot = await source.fetch("doc-1")

        assert snapshot.title == "탐구 보고서"
        assert snapshot.revision.revision_id == "ALm37BV-rev"
        assert snapshot.revision.annotation_count == 1
        assert len(snapshot.blocks) == 3

    @pytest.mark.asyncio
    async def test_get_revision(self) -> None:
        service = mock_service()
        source = make_source(service)

        revision = await source.get_revision("doc-1")

        assert revision.revision_id == "ALm37BV-rev"
        service.documents.return_value.get.assert_called_with(documentId="doc-1")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status, fragment",
        [
            (404, "Document not found"),
            (403, "Permission denied"),
            (401, "Permission denied"),
            (503, "HTTP 503"),
        ],
    )
    async def test_fetch_errors_are_mapped(self, status: int, fragment: str) -> None:
        source = make_source(mock_service(get_error=http_error(status)))

        with pytest.raises(DocumentAccessError) as exc_info:
            await source.fetch("doc-1")

        assert fragment in exc_info.value.message
        assert exc_info.value.details["status"] == status

    @pytest.mark.asyncio
    async def test_insert_annotations_single_batch(self) -> None:
        # Arrange
        service = mock_service()
        source = make_source(service)
        insertions = [FeedbackInsertion(index=30, text="B"), FeedbackInsertion(index=1, text="A")]

        # Act
        await source.insert_annotations("doc-1", insertions)

        # Assert
        batch_update = service.documents.return_value.batchUpdate
        batch_update.assert_called_once()
        body = batch_update.call_args.kwargs["body"]
        assert len(body["requests"]) == 4

    @pytest.mark.asyncio
    async def test_insert_nothing_skips_api(self) -> None:
        service = mock_service()

        await make_source(service).insert_annotations("doc-1", [])

        service.documents.return_value.batchUpdate.assert_not_called()

    @pytest.mark.asyncio
    async def test_insert_permission_error(self) -> None:
        source = make_source(mock_service(update_error=http_error(403)))

        with pytest.raises(DocumentUpdateError) as exc_info:
            await source.insert_annotations("doc-1", [FeedbackInsertion(index=1, text="A")])

        assert "grant edit access" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_missing_credentials(self) -> None:
        source = GoogleDocsSource(settings=GoogleDocsSettings(service_account=None))

        with pytest.raises(DocumentAccessError) as exc_info:
            await source.fetch("doc-1")

        assert "service account" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_invalid_credentials_json(self) -> None:
        source = GoogleDocsSource(settings=GoogleDocsSettings(service_account="{not json"))

        with pytest.raises(DocumentAccessError):
            await source.fetch("doc-1")
