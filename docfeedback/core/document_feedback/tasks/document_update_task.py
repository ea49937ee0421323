"""
Document update stage.

Formats feedback items as marked text blocks and writes them back-to-front
in one batched call, so earlier offsets stay valid while later ones shift.

Dependencies: docfeedback.core.document_feedback.interfaces
System role: Fourth stage of the document feedback pipeline
"""

import logging

from docfeedback.core.document_feedback.interfaces import DocumentSource
from docfeedback.core.document_feedback.models.document import FeedbackInsertion, FeedbackItem
from docfeedback.core.exceptions import DocFeedbackException, DocumentUpdateError

logger = logging.getLogger(__name__)

FEEDBACK_MARKER = "[AI 평가"
SEPARATOR = "─" * 50


def format_feedback_block(item: FeedbackItem) -> str:
    return f"\n\n{FEEDBACK_MARKER} - {item.type}]\n{item.content}\n{SEPARATOR}\n"


def order_back_to_front(items: list[FeedbackItem]) -> list[FeedbackInsertion]:
    """
    Order items by descending offset.

    Items sharing an offset are written last-generated first, which leaves
    them in generation order in the final document.
    """
    indexed = sorted(
        enumerate(items),
        key=lambda pair: (pair[1].insert_at, pair[0]),
        reverse=True,
    )
    return [
        FeedbackInsertion(index=item.insert_at, text=format_feedback_block(item))
        for _, item in indexed
    ]


class DocumentUpdateTask:
    """Write feedback items into the document."""

    def __init__(self, document_source: DocumentSource) -> None:
        self._source = document_source

    async def apply(self, document_id: str, items: list[FeedbackItem]) -> int:
        """
        Insert all feedback items in a single batched write.

        Args:
            document_id: External document id
            items: Items from the feedback generation stage

        Returns:
            int: Number of blocks written

        Raises:
            DocumentUpdateError: Nothing to write, or the write was rejected
        """
        if not items:
            raise DocumentUpdateError("No feedback to insert into document", document_id=document_id)

        insertions = order_back_to_front(items)
        try:
            await self._source.insert_annotations(document_id, insertions)
        except DocFeedbackException:
            raise
        except Exception as e:
            raise DocumentUpdateError(
                f"Failed to insert feedback into document: {e}",
                document_id=document_id,
            ) from e

        logger.info(
            f"{__name__}:apply - Feedback inserted",
            extra={"document_id": document_id, "insertions": len(insertions)},
        )
        return len(insertions)
