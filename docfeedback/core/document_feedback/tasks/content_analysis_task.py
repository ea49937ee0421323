"""
Content analysis stage.

Groups the document's blocks into sections (headings and step markers start
a new section) and classifies each section as empty or populated. Also
decides whether the whole document is still an unfilled template.

Dependencies: re (stdlib)
System role: Second stage of the document feedback pipeline
"""

import logging
import re

from docfeedback.core.document_feedback.models.document import (
    ContentBlock,
    DocumentAnalysis,
    DocumentSection,
    DocumentSnapshot,
)

logger = logging.getLogger(__name__)

# A run of this many underscores is a fill-in blank left by the template.
FILLER_RUN_LENGTH = 10
TEMPLATE_FILLER_RUN_LENGTH = 31
TEMPLATE_MIN_MEANINGFUL_CHARS = 100
SHORT_HEADING_MAX_CHARS = 30

_FILLER_RUN = re.compile(r"_{%d,}" % FILLER_RUN_LENGTH)
_NON_MEANINGFUL = re.compile(r"[\s_]+")

_HEADING_PATTERNS = (
    re.compile(r"^\d+\s*단계"),
    re.compile(r"^(?:step|STEP|Step)\s*\d+"),
    re.compile(r"^\d{1,2}[.)]\s*\S"),
    re.compile(r"^[■□▶●◆◇▣]"),
    re.compile(r"^\[[^\]]+\]$"),
    re.compile(r"^[IVX]+\.\s"),
)


def meaningful_char_count(text: str) -> int:
    """Characters left after removing whitespace and underscores."""
    return len(_NON_MEANINGFUL.sub("", text))


def has_filler_run(text: str) -> bool:
    return bool(_FILLER_RUN.search(text))


def is_section_empty(text: str, min_meaningful_chars: int = 20) -> bool:
    """
    Classify section text as empty.

    A section is empty when fewer than ``min_meaningful_chars`` characters
    remain after stripping whitespace and underscores, or when it still
    contains a fill-in underscore run.
    """
    return meaningful_char_count(text) < min_meaningful_chars or has_filler_run(text)


def is_heading(text: str) -> bool:
    """Whether a block looks like a heading or step marker."""
    line = text.strip()
    if not line:
        return False
    if any(pattern.match(line) for pattern in _HEADING_PATTERNS):
        return True
    # Short standalone lines without sentence punctuation read as titles.
    return (
        len(line) <= SHORT_HEADING_MAX_CHARS
        and "\n" not in line
        and not line.endswith((".", "?", "!", "다", "요"))
        and not has_filler_run(line)
        and meaningful_char_count(line) > 0
    )


def is_template_document(full_text: str) -> bool:
    """Whether the document is mostly an unfilled template."""
    meaningful = _NON_MEANINGFUL.sub(" ", full_text).strip()
    return (
        len(meaningful) < TEMPLATE_MIN_MEANINGFUL_CHARS
        or "_" * TEMPLATE_FILLER_RUN_LENGTH in full_text
    )


class ContentAnalysisTask:
    """Split a document snapshot into classified sections."""

    def __init__(self, min_meaningful_chars: int = 20) -> None:
        self._min_meaningful_chars = min_meaningful_chars

    def analyze(self, snapshot: DocumentSnapshot) -> DocumentAnalysis:
        """
        Analyze document structure.

        Args:
            snapshot: Output of the document access stage

        Returns:
            DocumentAnalysis: Sections in document order plus template flag
        """
        full_text = snapshot.full_text
        sections = self.identify_sections(snapshot.blocks)
        analysis = DocumentAnalysis(
            full_text=full_text,
            sections=sections,
            is_template=is_template_document(full_text),
        )

        logger.info(
            f"{__name__}:analyze - Document analyzed",
            extra={
                "document_id": snapshot.document_id,
                "section_count": len(sections),
                "empty_sections": analysis.empty_section_count,
                "is_template": analysis.is_template,
            },
        )
        return analysis

    def identify_sections(self, blocks: list[ContentBlock]) -> list[DocumentSection]:
        """Group blocks into sections; a heading block opens a new section."""
        groups: list[tuple[bool, list[ContentBlock]]] = []
        for block in blocks:
            if not block.text.strip():
                continue
            if is_heading(block.text) or not groups:
                groups.append((is_heading(block.text), [block]))
            else:
                groups[-1][1].append(block)

        return [self._build_section(has_heading, group) for has_heading, group in groups]

    def _build_section(self, has_heading: bool, group: list[ContentBlock]) -> DocumentSection:
        title = group[0].text.strip()
        body = "\n".join(block.text.strip() for block in group[1:])
        # Without a heading, the first block is content too.
        classified = body if has_heading else "\n".join(block.text for block in group)
        return DocumentSection(
            title=title,
            start=group[0].start,
            end=group[-1].end,
            body=body,
            has_heading=has_heading,
            is_empty=is_section_empty(classified, self._min_meaningful_chars),
            block_count=len(group),
        )
