"""
Google Docs document source.

Implements DocumentSource with the Google Docs v1 API using a service
account. The client library is blocking, so every call runs in a worker
thread via asyncio.to_thread; transient errors (429, 5xx) are retried with
tenacity.

Dependencies: googleapiclient, google.oauth2, tenacity
System role: Document Source adapter for the feedback pipeline
"""

import asyncio
import json
import logging
from typing import Any

from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from tenacity import (
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential_jitter,
)

from docfeedback.configs.google_docs import GoogleDocsSettings
from docfeedback.core.document_feedback.interfaces import DocumentSource
from docfeedback.core.document_feedback.models.document import (
    ContentBlock,
    DocumentSnapshot,
    FeedbackInsertion,
    RevisionSnapshot,
)
from docfeedback.core.document_feedback.tasks.document_update_task import FEEDBACK_MARKER
from docfeedback.core.exceptions import DocumentAccessError, DocumentUpdateError

logger = logging.getLogger(__name__)

UNTITLED_DOCUMENT = "제목 없음"
RETRYABLE_STATUSES = {429, 500, 502, 503, 504}
FEEDBACK_FOREGROUND = {"red": 0.0, "green": 0.0, "blue": 0.8}
FEEDBACK_BACKGROUND = {"red": 0.95, "green": 0.95, "blue": 1.0}


def _is_transient(exc: BaseException) -> bool:
    return isinstance(exc, HttpError) and exc.resp.status in RETRYABLE_STATUSES


def _status_of(exc: HttpError) -> int:
    return int(getattr(exc.resp, "status", 0) or 0)


def utf16_length(text: str) -> int:
    """Length in UTF-16 code units, which is how the Docs API counts offsets."""
    return len(text.encode("utf-16-le")) // 2


def parse_blocks(document: dict[str, Any]) -> list[ContentBlock]:
    """
    Extract non-blank paragraphs with their start/end offsets.

    Args:
        document: documents.get response body

    Returns:
        list[ContentBlock]: Paragraphs in document order
    """
    blocks: list[ContentBlock] = []
    for element in document.get("body", {}).get("content", []):
        paragraph = element.get("paragraph")
        if not paragraph:
            continue
        runs = [
            run["textRun"]["content"]
            for run in paragraph.get("elements", [])
            if run.get("textRun", {}).get("content", "").strip()
        ]
        if runs:
            blocks.append(
                ContentBlock(
                    text="".join(runs),
                    start=element.get("startIndex", 0),
                    end=element.get("endIndex", 0),
                )
            )
    return blocks


def count_feedback_blocks(blocks: list[ContentBlock]) -> int:
    return sum(1 for block in blocks if block.text.lstrip().startswith(FEEDBACK_MARKER))


def build_insert_requests(insertions: list[FeedbackInsertion]) -> list[dict[str, Any]]:
    """Build batchUpdate requests: insert text, then style the inserted range."""
    requests: list[dict[str, Any]] = []
    for insertion in insertions:
        requests.append(
            {"insertText": {"location": {"index": insertion.index}, "text": insertion.text}}
        )
        requests.append(
            {
                "updateTextStyle": {
                    "range": {
                        "startIndex": insertion.index,
                        "endIndex": insertion.index + utf16_length(insertion.text),
                    },
                    "textStyle": {
                        "foregroundColor": {"color": {"rgbColor": FEEDBACK_FOREGROUND}},
                        "backgroundColor": {"color": {"rgbColor": FEEDBACK_BACKGROUND}},
                        "italic": True,
                    },
                    "fields": "foregroundColor,backgroundColor,italic",
                }
            }
        )
    return requests


class GoogleDocsSource(DocumentSource):
    """Read and annotate Google Docs as the service account."""

    def __init__(self, settings: GoogleDocsSettings | None = None, service: Any = None) -> None:
        """
        Initialize adapter.

        Args:
            settings: Google configuration (defaults from environment)
            service: Prebuilt Docs API resource; built lazily when omitted
        """
        self._settings = settings or GoogleDocsSettings()
        self._service = service
        self._attempts = self._settings.request_attempts

    def _get_service(self) -> Any:
        if self._service is None:
            if not self._settings.service_account:
                raise DocumentAccessError("Google service account information is missing")
            try:
                info = json.loads(self._settings.service_account)
            except json.JSONDecodeError as e:
                raise DocumentAccessError("Google service account JSON is invalid") from e
            credentials = service_account.Credentials.from_service_account_info(
                info, scopes=self._settings.scopes
            )
            self._service = build("docs", "v1", credentials=credentials, cache_discovery=False)
        return self._service

    def _call(self, operation: str, fn: Any) -> Any:
        """Run a blocking API call with retries on transient errors."""
        retrying = retry(
            retry=retry_if_exception(_is_transient),
            stop=stop_after_attempt(self._attempts),
            wait=wait_exponential_jitter(initial=1, max=10, jitter=2),
            reraise=True,
            before_sleep=lambda retry_state: logger.warning(
                f"{__name__}:{operation} - Retry {retry_state.attempt_number}/{self._attempts} "
                "after transient Google API error"
            ),
        )
        return retrying(fn)()

    async def _get_document(self, document_id: str) -> dict[str, Any]:
        def fetch() -> dict[str, Any]:
            service = self._get_service()
            return self._call(
                "get_document",
                lambda: service.documents().get(documentId=document_id).execute(),
            )

        try:
            return await asyncio.to_thread(fetch)
        except HttpError as e:
            raise self._access_error(document_id, e) from e

    async def fetch(self, document_id: str) -> DocumentSnapshot:
        document = await self._get_document(document_id)
        blocks = parse_blocks(document)
        return DocumentSnapshot(
            document_id=document_id,
            title=document.get("title") or UNTITLED_DOCUMENT,
            blocks=blocks,
            revision=RevisionSnapshot(
                revision_id=document.get("revisionId"),
                annotation_count=count_feedback_blocks(blocks),
            ),
        )

    async def get_revision(self, document_id: str) -> RevisionSnapshot:
        document = await self._get_document(document_id)
        return RevisionSnapshot(
            revision_id=document.get("revisionId"),
            annotation_count=count_feedback_blocks(parse_blocks(document)),
        )

    async def insert_annotations(
        self,
        document_id: str,
        insertions: list[FeedbackInsertion],
    ) -> None:
        requests = build_insert_requests(insertions)
        if not requests:
            return

        def write() -> None:
            service = self._get_service()
            self._call(
                "insert_annotations",
                lambda: service.documents()
                .batchUpdate(documentId=document_id, body={"requests": requests})
                .execute(),
            )

        try:
            await asyncio.to_thread(write)
        except HttpError as e:
            status = _status_of(e)
            if status in (403, 404):
                raise DocumentUpdateError(
                    "Cannot write to the document. Please grant edit access to the service account.",
                    document_id=document_id,
                    details={"status": status},
                ) from e
            raise DocumentUpdateError(
                f"Failed to insert feedback into document (HTTP {status})",
                document_id=document_id,
                details={"status": status},
            ) from e

        logger.info(
            f"{__name__}:insert_annotations - Batch update applied",
            extra={"document_id": document_id, "requests": len(requests)},
        )

    @staticmethod
    def _access_error(document_id: str, exc: HttpError) -> DocumentAccessError:
        status = _status_of(exc)
        if status == 404:
            message = "Document not found. Check the URL and share the document with the service account."
        elif status in (401, 403):
            message = "Permission denied. Please grant edit access to the document for the service account."
        else:
            message = f"Failed to read document (HTTP {status})"
        return DocumentAccessError(message, document_id=document_id, details={"status": status})
