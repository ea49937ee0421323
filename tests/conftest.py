"""
Shared test fixtures and configuration for entire test suite.

Provides: in-memory SQLite database, job status updater, fake document
source and fake content generator, job factory
Dependencies: pytest, pytest-asyncio, sqlalchemy, aiosqlite
System role: Test infrastructure and fixture management
"""

import uuid
from typing import Any

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from docfeedback.boundary.db.base import Base
from docfeedback.boundary.db.CRUD.feedback_job_crud import feedback_job_crud
from docfeedback.boundary.db.models.feedback_job_model import FeedbackJobModel
from docfeedback.configs.feedback_job import FeedbackJobSettings
from docfeedback.core.document_feedback.database import FeedbackJobStatusUpdater
from docfeedback.core.document_feedback.genres import GenreRubric
from docfeedback.core.document_feedback.interfaces import DocumentSource, FeedbackContentGenerator
from docfeedback.core.document_feedback.models.document import (
    ContentBlock,
    DocumentSection,
    DocumentSnapshot,
    FeedbackInsertion,
    RevisionSnapshot,
)
from docfeedback.core.exceptions import DocumentAccessError

WORKSHEET_TEXTS = [
    "프로젝트 워크시트\n",
    "1단계: 문제 인식\n",
    "우리 지역 바닷가에 해양 쓰레기가 많아 주민들이 불편을 겪고 있다는 점에 주목했습니다.\n",
    "2단계: 탐구 계획\n",
    "________________________________\n",
    "3단계: 탐구 수행\n",
    "설문조사를 통해 주민 120명의 의견을 모았고 쓰레기 종류별 비율을 분석했습니다.\n",
]


def make_blocks(texts: list[str]) -> list[ContentBlock]:
    """Lay out paragraphs back to back starting at index 1, like the Docs API."""
    blocks = []
    index = 1
    for text in texts:
        blocks.append(ContentBlock(text=text, start=index, end=index + len(text)))
        index += len(text)
    return blocks


class FakeDocumentSource(DocumentSource):
    """In-memory document backend."""

    def __init__(
        self,
        texts: list[str] | None = None,
        fetch_error: Exception | None = None,
        insert_error: Exception | None = None,
        reflect_writes: bool = True,
    ) -> None:
        self.blocks = make_blocks(WORKSHEET_TEXTS if texts is None else texts)
        self.fetch_error = fetch_error
        self.insert_error = insert_error
        self.reflect_writes = reflect_writes
        self.revision = RevisionSnapshot(revision_id="rev-1", annotation_count=0)
        self.insert_calls: list[list[FeedbackInsertion]] = []
        self.revision_polls = 0

    async def fetch(self, document_id: str) -> DocumentSnapshot:
        if self.fetch_error is not None:
            raise self.fetch_error
        return DocumentSnapshot(
            document_id=document_id,
            title="워크시트",
            blocks=list(self.blocks),
            revision=self.revision,
        )

    async def get_revision(self, document_id: str) -> RevisionSnapshot:
        self.revision_polls += 1
        return self.revision

    async def insert_annotations(self, document_id: str, insertions: list[FeedbackInsertion]) -> None:
        if self.insert_error is not None:
            raise self.insert_error
        self.insert_calls.append(list(insertions))
        if self.reflect_writes:
            self.revision = RevisionSnapshot(
                revision_id="rev-2",
                annotation_count=self.revision.annotation_count + len(insertions),
            )


class FakeFeedbackGenerator(FeedbackContentGenerator):
    """Deterministic feedback text; records every call."""

    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.calls: list[tuple[str, Any]] = []

    async def overall_feedback(self, genre: str, rubric: GenreRubric, full_text: str, is_template: bool) -> str:
        self._check()
        self.calls.append(("overall", is_template))
        return "전체적으로 문제 인식이 분명합니다."

    async def key_improvements(self, genre: str, full_text: str) -> str:
        self._check()
        self.calls.append(("key_improvements", genre))
        return "■ 개선점 1: 탐구 계획을 구체화하세요."

    async def section_guide(self, genre: str, section: DocumentSection) -> str:
        self._check()
        self.calls.append(("guide", section.title))
        return f"{section.title}에 조사 방법을 적어 보세요."

    async def section_feedback(self, genre: str, rubric: GenreRubric, section: DocumentSection) -> str:
        self._check()
        self.calls.append(("feedback", section.title))
        return f"{section.title}의 근거를 보강하세요."

    def _check(self) -> None:
        if self.error is not None:
            raise self.error


@pytest.fixture
async def session_factory():
    """
    Create in-memory SQLite async database for testing.

    Yields:
        async_sessionmaker: Factory bound to a fresh schema
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_async_db(session_factory):
    """
    Session on the in-memory database.

    Yields:
        AsyncSession: Test database session
    """
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def status_updater(session_factory) -> FeedbackJobStatusUpdater:
    return FeedbackJobStatusUpdater(session_factory)


@pytest.fixture
def fake_source() -> FakeDocumentSource:
    return FakeDocumentSource()


@pytest.fixture
def fake_generator() -> FakeFeedbackGenerator:
    return FakeFeedbackGenerator()


@pytest.fixture
def fast_job_settings() -> FeedbackJobSettings:
    """Pipeline settings with sub-second change polling."""
    return FeedbackJobSettings(
        change_poll_interval_seconds=0.01,
        change_max_wait_seconds=0.05,
        pipeline_timeout_seconds=5,
    )


@pytest.fixture
def create_job(session_factory):
    """
    Factory fixture persisting a PENDING job.

    Returns:
        Callable: async (user_id="user-1", genre="워크시트") -> FeedbackJobModel
    """

    async def _create(user_id: str = "user-1", genre: str = "워크시트") -> FeedbackJobModel:
        async with session_factory() as session:
            job = await feedback_job_crud.create_job(
                session,
                user_id=user_id,
                document_id="doc-abc123",
                document_url="https://docs.google.com/document/d/doc-abc123/edit",
                genre=genre,
                estimated_time=15,
            )
            await session.commit()
            return job

    return _create


@pytest.fixture
def get_job(session_factory):
    """Factory fixture reading a job back in a fresh session."""

    async def _get(job_id: uuid.UUID) -> FeedbackJobModel | None:
        async with session_factory() as session:
            return await feedback_job_crud.get_by_id(session, job_id)

    return _get


@pytest.fixture
def not_found_error() -> DocumentAccessError:
    return DocumentAccessError("Document not found. Check the URL and share the document with the service account.")


@pytest.fixture
def make_source():
    """Factory fixture for configured fake document sources."""

    def _make(**kwargs: Any) -> FakeDocumentSource:
        return FakeDocumentSource(**kwargs)

    return _make


@pytest.fixture
def make_generator():
    """Factory fixture for configured fake feedback generators."""

    def _make(**kwargs: Any) -> FakeFeedbackGenerator:
        return FakeFeedbackGenerator(**kwargs)

    return _make
