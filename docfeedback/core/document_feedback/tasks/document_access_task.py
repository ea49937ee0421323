"""
Document access stage.

Fetches the document's text blocks with their character offsets and the
baseline revision snapshot used later for change confirmation.

Dependencies: docfeedback.core.document_feedback.interfaces
System role: First stage of the document feedback pipeline
"""

import logging

from docfeedback.core.document_feedback.interfaces import DocumentSource
from docfeedback.core.document_feedback.models.document import DocumentSnapshot
from docfeedback.core.exceptions import DocFeedbackException, DocumentAccessError

logger = logging.getLogger(__name__)


class DocumentAccessTask:
    """Read the document and snapshot its revision."""

    def __init__(self, document_source: DocumentSource) -> None:
        self._source = document_source

    async def fetch(self, document_id: str) -> DocumentSnapshot:
        """
        Fetch document content and baseline revision.

        Args:
            document_id: External document id

        Returns:
            DocumentSnapshot: Blocks, title and baseline revision

        Raises:
            DocumentAccessError: When the document cannot be read
        """
        try:
            snapshot = await self._source.fetch(document_id)
        except DocFeedbackException:
            raise
        except Exception as e:
            raise DocumentAccessError(
                f"Failed to read document: {e}",
                document_id=document_id,
            ) from e

        logger.info(
            f"{__name__}:fetch - Document fetched",
            extra={
                "document_id": document_id,
                "block_count": len(snapshot.blocks),
                "revision_id": snapshot.revision.revision_id,
            },
        )
        return snapshot
