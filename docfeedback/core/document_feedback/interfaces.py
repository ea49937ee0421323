"""
Capability interfaces consumed by the feedback pipeline.

The runner only talks to the document backend and the content generator
through these abstractions, so tests substitute in-memory fakes and
production wires the Google Docs and LangChain adapters.

Dependencies: abc (stdlib)
System role: Seams between core pipeline logic and boundary adapters
"""

from abc import ABC, abstractmethod

from docfeedback.core.document_feedback.genres import GenreRubric
from docfeedback.core.document_feedback.models.document import (
    DocumentSection,
    DocumentSnapshot,
    FeedbackInsertion,
    RevisionSnapshot,
)


class DocumentSource(ABC):
    """Read and annotate an external document."""

    @abstractmethod
    async def fetch(self, document_id: str) -> DocumentSnapshot:
        """
        Fetch the document's text blocks and its current revision snapshot.

        Raises:
            DocumentAccessError: Document missing, not shared, or permission denied
        """

    @abstractmethod
    async def get_revision(self, document_id: str) -> RevisionSnapshot:
        """Return the document's current revision token and annotation count."""

    @abstractmethod
    async def insert_annotations(
        self,
        document_id: str,
        insertions: list[FeedbackInsertion],
    ) -> None:
        """
        Insert styled text blocks in a single batched write.

        Insertions arrive already ordered back-to-front; the adapter must
        apply them in the given order.

        Raises:
            DocumentUpdateError: The write was rejected
        """


class FeedbackContentGenerator(ABC):
    """Produce natural-language feedback for a document or one of its sections."""

    @abstractmethod
    async def overall_feedback(
        self,
        genre: str,
        rubric: GenreRubric,
        full_text: str,
        is_template: bool,
    ) -> str:
        """Whole-document feedback (or a where-to-start hint for templates)."""

    @abstractmethod
    async def key_improvements(self, genre: str, full_text: str) -> str:
        """The most urgent improvement points for the whole document."""

    @abstractmethod
    async def section_guide(self, genre: str, section: DocumentSection) -> str:
        """Guidance on how to fill in an empty section."""

    @abstractmethod
    async def section_feedback(
        self,
        genre: str,
        rubric: GenreRubric,
        section: DocumentSection,
    ) -> str:
        """Evaluative feedback on a populated section against the genre rubric."""
