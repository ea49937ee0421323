"""
Dependency injection container.

Factory functions for FastAPI dependencies. Long-lived collaborators
(document source, content generator, scheduler) are created lazily once
per process; services are request-scoped around the request's session.

Dependencies: docfeedback.configs, docfeedback.application, docfeedback.boundary
System role: DI container for service injection
"""

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from docfeedback.application.services import FeedbackJobService
from docfeedback.boundary.db import get_async_db, get_async_session_factory
from docfeedback.configs import get_settings
from docfeedback.core.document_feedback.database import FeedbackJobStatusUpdater
from docfeedback.core.document_feedback.interfaces import DocumentSource, FeedbackContentGenerator
from docfeedback.core.document_feedback.runner import FeedbackJobRunner
from docfeedback.core.document_feedback.scheduler import FeedbackJobScheduler


class ServiceCache:
    """Container for cached service instances."""

    def __init__(self) -> None:
        self._document_source: DocumentSource | None = None
        self._content_generator: FeedbackContentGenerator | None = None
        self._status_updater: FeedbackJobStatusUpdater | None = None
        self._scheduler: FeedbackJobScheduler | None = None

    @property
    def document_source(self) -> DocumentSource:
        """Get cached Google Docs source."""
        if self._document_source is None:
            from docfeedback.boundary.google import GoogleDocsSource

            self._document_source = GoogleDocsSource(get_settings().google_docs)
        return self._document_source

    @property
    def content_generator(self) -> FeedbackContentGenerator:
        """Get cached LLM feedback generator."""
        if self._content_generator is None:
            from docfeedback.boundary.llm import LangChainFeedbackGenerator

            self._content_generator = LangChainFeedbackGenerator(settings=get_settings().llm)
        return self._content_generator

    @property
    def status_updater(self) -> FeedbackJobStatusUpdater:
        """Get cached job status updater."""
        if self._status_updater is None:
            self._status_updater = FeedbackJobStatusUpdater(get_async_session_factory())
        return self._status_updater

    @property
    def scheduler(self) -> FeedbackJobScheduler:
        """Get cached job scheduler (wires the runner on first use)."""
        if self._scheduler is None:
            job_settings = get_settings().feedback_job
            runner = FeedbackJobRunner(
                status_updater=self.status_updater,
                document_source=self.document_source,
                content_generator=self.content_generator,
                settings=job_settings,
            )
            self._scheduler = FeedbackJobScheduler(
                runner=runner,
                status_updater=self.status_updater,
                timeout_seconds=job_settings.pipeline_timeout_seconds,
            )
        return self._scheduler

    @property
    def has_scheduler(self) -> bool:
        return self._scheduler is not None

    async def shutdown(self) -> None:
        """Cancel in-flight job runs; the scheduler marks their jobs FAILED."""
        if self._scheduler is not None:
            await self._scheduler.shutdown()

    def clear(self) -> None:
        """Clear all cached instances."""
        self._document_source = None
        self._content_generator = None
        self._status_updater = None
        self._scheduler = None


# Global service cache
_service_cache = ServiceCache()


def get_service_cache() -> ServiceCache:
    """Get service cache singleton."""
    return _service_cache


def get_scheduler() -> FeedbackJobScheduler:
    """Get the process-wide job scheduler."""
    return get_service_cache().scheduler


def get_current_user_id(x_user_id: str | None = Header(default=None, alias="X-User-Id")) -> str:
    """
    Resolve the requester id.

    Authentication happens upstream; the gateway forwards the user id in
    the X-User-Id header.

    Raises:
        HTTPException: 401 when the header is missing or blank
    """
    if x_user_id is None or not x_user_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    return x_user_id.strip()


def get_feedback_job_service(
    db: AsyncSession = Depends(get_async_db),
    scheduler: FeedbackJobScheduler = Depends(get_scheduler),
) -> FeedbackJobService:
    """
    Get feedback job service instance.

    Args:
        db: Async database session (injected via Depends)
        scheduler: Job scheduler (injected via Depends)

    Returns:
        FeedbackJobService: Request-scoped service
    """
    return FeedbackJobService(db=db, scheduler=scheduler)
