"""
Feedback generation stage.

Produces the whole-document feedback, the key improvement points and one
item per non-trivial section (a fill-in guide for empty sections, rubric
feedback for populated ones). Section calls run concurrently under a
semaphore.

Dependencies: asyncio, docfeedback.core.document_feedback.interfaces
System role: Third stage of the document feedback pipeline
"""

import asyncio
import logging

from docfeedback.core.document_feedback.genres import get_rubric
from docfeedback.core.document_feedback.interfaces import FeedbackContentGenerator
from docfeedback.core.document_feedback.models.document import (
    DocumentAnalysis,
    DocumentSection,
    DocumentSnapshot,
    FeedbackItem,
)
from docfeedback.core.exceptions import DocFeedbackException, FeedbackGenerationError

logger = logging.getLogger(__name__)

OVERALL_FEEDBACK_TYPE = "전체 평가"
KEY_IMPROVEMENTS_TYPE = "핵심 개선점"
SECTION_GUIDE_TYPE = "작성 가이드"
SECTION_FEEDBACK_TYPE = "섹션 피드백"


def section_insert_index(section: DocumentSection) -> int:
    """Offset just before the section's final paragraph break."""
    return max(section.start, section.end - 1)


class FeedbackGenerationTask:
    """Generate feedback items for an analyzed document."""

    def __init__(
        self,
        generator: FeedbackContentGenerator,
        max_section_feedbacks: int = 8,
        max_concurrent_generations: int = 3,
        min_section_length: int = 10,
    ) -> None:
        self._generator = generator
        self._max_section_feedbacks = max_section_feedbacks
        self._max_concurrent = max_concurrent_generations
        self._min_section_length = min_section_length

    async def generate(
        self,
        genre: str,
        snapshot: DocumentSnapshot,
        analysis: DocumentAnalysis,
    ) -> list[FeedbackItem]:
        """
        Generate all feedback items for the document.

        Args:
            genre: Genre label selecting the rubric
            snapshot: Document blocks with offsets
            analysis: Section classification

        Returns:
            list[FeedbackItem]: Items in generation order

        Raises:
            FeedbackGenerationError: Generator failed or produced nothing
        """
        blocks = snapshot.blocks
        if not blocks:
            raise FeedbackGenerationError(
                "Document has no text to review",
                document_id=snapshot.document_id,
            )

        rubric = get_rubric(genre)
        items: list[FeedbackItem] = []

        try:
            overall = await self._generator.overall_feedback(
                genre, rubric, analysis.full_text, analysis.is_template
            )
            self._append(items, OVERALL_FEEDBACK_TYPE, overall, blocks[0].start)

            if len(blocks) > 1:
                key_points = await self._generator.key_improvements(genre, analysis.full_text)
                self._append(items, KEY_IMPROVEMENTS_TYPE, key_points, blocks[len(blocks) // 2].start)

            items.extend(await self._generate_section_items(genre, analysis))

        except DocFeedbackException:
            raise
        except Exception as e:
            raise FeedbackGenerationError(
                f"Feedback generation failed: {e}",
                document_id=snapshot.document_id,
            ) from e

        if not items:
            raise FeedbackGenerationError(
                "Feedback generator returned no content",
                document_id=snapshot.document_id,
            )

        logger.info(
            f"{__name__}:generate - Feedback generated",
            extra={"document_id": snapshot.document_id, "item_count": len(items)},
        )
        return items

    def select_sections(self, analysis: DocumentAnalysis) -> list[DocumentSection]:
        """
        Pick the sections that receive their own feedback.

        Sections shorter than the minimum length are skipped. Populated
        sections are preferred over empty ones when the cap applies; the
        result stays in document order.
        """
        candidates = [
            section
            for section in analysis.sections
            if len(section.text.strip()) >= self._min_section_length
        ]
        populated = [section for section in candidates if not section.is_empty]
        empty = [section for section in candidates if section.is_empty]
        chosen = (populated + empty)[: self._max_section_feedbacks]
        return sorted(chosen, key=lambda section: section.start)

    async def _generate_section_items(
        self,
        genre: str,
        analysis: DocumentAnalysis,
    ) -> list[FeedbackItem]:
        sections = self.select_sections(analysis)
        if not sections:
            return []

        rubric = get_rubric(genre)
        semaphore = asyncio.Semaphore(self._max_concurrent)

        async def generate_one(section: DocumentSection) -> FeedbackItem | None:
            async with semaphore:
                if section.is_empty:
                    content = await self._generator.section_guide(genre, section)
                    feedback_type = SECTION_GUIDE_TYPE
                else:
                    content = await self._generator.section_feedback(genre, rubric, section)
                    feedback_type = SECTION_FEEDBACK_TYPE
            content = content.strip()
            if not content:
                return None
            return FeedbackItem(
                type=feedback_type,
                content=content,
                insert_at=section_insert_index(section),
            )

        # The first failing section cancels the ones still in flight.
        try:
            async with asyncio.TaskGroup() as group:
                tasks = [group.create_task(generate_one(section)) for section in sections]
        except ExceptionGroup as errors:
            raise errors.exceptions[0]
        results = [task.result() for task in tasks]
        return [item for item in results if item is not None]

    @staticmethod
    def _append(items: list[FeedbackItem], feedback_type: str, content: str, insert_at: int) -> None:
        content = content.strip()
        if content:
            items.append(FeedbackItem(type=feedback_type, content=content, insert_at=insert_at))
