"""
Document and feedback data passed between pipeline stages.

Dependencies: dataclasses (stdlib)
System role: Stage input/output types for the feedback pipeline
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ContentBlock:
    """A non-blank paragraph of the document with its character offsets."""

    text: str
    start: int
    end: int


@dataclass(frozen=True)
class RevisionSnapshot:
    """
    Opaque change-detection tokens for a document.

    revision_id is only ever compared for equality. annotation_count counts
    feedback blocks/comments currently present in the document.
    """

    revision_id: str | None
    annotation_count: int = 0

    def differs_from(self, other: "RevisionSnapshot") -> bool:
        return (
            self.revision_id != other.revision_id
            or self.annotation_count != other.annotation_count
        )


@dataclass(frozen=True)
class DocumentSnapshot:
    """Output of the document access stage."""

    document_id: str
    title: str
    blocks: list[ContentBlock]
    revision: RevisionSnapshot

    @property
    def full_text(self) -> str:
        return "\n".join(block.text for block in self.blocks)


@dataclass
class DocumentSection:
    """A heading (or leading text) plus the blocks that follow it."""

    title: str
    start: int
    end: int
    body: str = ""
    has_heading: bool = False
    is_empty: bool = False
    block_count: int = 1

    @property
    def text(self) -> str:
        if self.body:
            return f"{self.title}\n{self.body}"
        return self.title


@dataclass
class DocumentAnalysis:
    """Output of the content analysis stage."""

    full_text: str
    sections: list[DocumentSection] = field(default_factory=list)
    is_template: bool = False

    @property
    def empty_section_count(self) -> int:
        return sum(1 for section in self.sections if section.is_empty)


@dataclass(frozen=True)
class FeedbackItem:
    """A block of feedback text and the document offset it belongs at."""

    type: str
    content: str
    insert_at: int


@dataclass(frozen=True)
class FeedbackInsertion:
    """A fully formatted text block ready to be written at ``index``."""

    index: int
    text: str


@dataclass(frozen=True)
class ChangeConfirmation:
    """Output of the change confirmation stage."""

    final_revision: RevisionSnapshot
    changed: bool
    polls: int
