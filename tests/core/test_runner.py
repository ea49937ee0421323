"""
Tests for FeedbackJobRunner.

Runs the full pipeline against the in-memory database with fake document
and content backends, then checks the persisted job record.
"""

import uuid
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from conftest import FakeDocumentSource, FakeFeedbackGenerator
from docfeedback.core.document_feedback.models.job_state import (
    COMPLETED_LABEL,
    STAGE_FAILURE_LABELS,
    JobStatus,
    PipelineStage,
    StepDetails,
    StepStatus,
)
from docfeedback.core.document_feedback.runner import FeedbackJobRunner, error_message
from docfeedback.core.exceptions import DocumentAccessError, FeedbackGenerationError


@pytest.fixture
def make_runner(status_updater, fast_job_settings):
    """Factory fixture wiring a runner to the test database."""

    def _make(source: FakeDocumentSource, generator: FakeFeedbackGenerator) -> FeedbackJobRunner:
        return FeedbackJobRunner(
            status_updater=status_updater,
            document_source=source,
            content_generator=generator,
            settings=fast_job_settings,
        )

    return _make


class TestRunnerSuccess:
    """Test suite for a job that runs to completion."""

    @pytest.mark.asyncio
    async def test_job_completes(
        self, create_job, get_job, make_runner, fake_source, fake_generator
    ) -> None:
        # Arrange
        job = await create_job()
        runner = make_runner(fake_source, fake_generator)

        # Act
        await runner.advance(job.id)

        # Assert
        stored = await get_job(job.id)
        assert stored.status is JobStatus.COMPLETED
        assert stored.progress == 100
        assert stored.current_step == COMPLETED_LABEL
        assert stored.error is None
        assert stored.completed_at is not None
        assert all(
            status == "completed" for status in stored.step_details.to_json().values()
        )

    @pytest.mark.asyncio
    async def test_revisions_and_comment_count_recorded(
        self, create_job, get_job, make_runner, fake_source, fake_generator
    ) -> None:
        job = await create_job()

        await make_runner(fake_source, fake_generator).advance(job.id)

        stored = await get_job(job.id)
        written = len(fake_source.insert_calls[0])
        assert stored.initial_revision == "rev-1"
        assert stored.final_revision == "rev-2"
        assert stored.comments_added == written == 5

    @pytest.mark.asyncio
    async def test_unobserved_change_still_completes(
        self, create_job, get_job, make_runner, make_source, fake_generator
    ) -> None:
        # Write succeeds but the revision never moves within the wait budget.
        source = make_source(reflect_writes=False)
        job = await create_job()

        await make_runner(source, fake_generator).advance(job.id)

        stored = await get_job(job.id)
        assert stored.status is JobStatus.COMPLETED
        assert stored.comments_added == 0
        assert stored.final_revision == "rev-1"
        assert source.revision_polls >= 1

    @pytest.mark.asyncio
    async def test_progress_checkpoints_are_monotonic(
        self, create_job, status_updater, make_runner, fake_source, fake_generator
    ) -> None:
        # Arrange
        job = await create_job()
        observed: list[int] = []
        complete_stage = status_updater.complete_stage

        async def recording_complete_stage(*args, **kwargs):
            result = await complete_stage(*args, **kwargs)
            observed.append(result.progress)
            return result

        status_updater.complete_stage = recording_complete_stage

        # Act
        await make_runner(fake_source, fake_generator).advance(job.id)

        # Assert
        assert observed == [25, 50, 75, 90]
        assert (await status_updater.get_job(job.id)).progress == 100


class TestRunnerFailures:
    """Test suite for stage failures."""

    @pytest.mark.asyncio
    async def test_document_access_failure(
        self, create_job, get_job, make_runner, make_source, fake_generator, not_found_error
    ) -> None:
        # Arrange
        source = make_source(fetch_error=not_found_error)
        job = await create_job()

        # Act
        await make_runner(source, fake_generator).advance(job.id)

        # Assert
        stored = await get_job(job.id)
        assert stored.status is JobStatus.FAILED
        assert stored.progress == 10
        assert stored.error == not_found_error.message
        assert stored.current_step == STAGE_FAILURE_LABELS[PipelineStage.DOCUMENT_ACCESS]
        assert stored.step_details.document_access is StepStatus.FAILED
        assert stored.step_details.content_analysis is StepStatus.PENDING
        assert stored.completed_at is not None
        assert fake_generator.calls == []

    @pytest.mark.asyncio
    async def test_generation_failure_keeps_earlier_checkpoints(
        self, create_job, get_job, make_runner, fake_source, make_generator
    ) -> None:
        generator = make_generator(error=RuntimeError("model overloaded"))
        job = await create_job()

        await make_runner(fake_source, generator).advance(job.id)

        stored = await get_job(job.id)
        assert stored.status is JobStatus.FAILED
        assert stored.progress == 50
        assert stored.current_step == STAGE_FAILURE_LABELS[PipelineStage.FEEDBACK_GENERATION]
        assert stored.step_details.document_access is StepStatus.COMPLETED
        assert stored.step_details.content_analysis is StepStatus.COMPLETED
        assert stored.step_details.feedback_generation is StepStatus.FAILED
        assert "model overloaded" in stored.error
        assert fake_source.insert_calls == []

    @pytest.mark.asyncio
    async def test_update_failure(
        self, create_job, get_job, make_runner, make_source, fake_generator
    ) -> None:
        source = make_source(insert_error=RuntimeError("The caller does not have permission"))
        job = await create_job()

        await make_runner(source, fake_generator).advance(job.id)

        stored = await get_job(job.id)
        assert stored.status is JobStatus.FAILED
        assert stored.progress == 75
        assert stored.current_step == STAGE_FAILURE_LABELS[PipelineStage.DOCUMENT_UPDATE]
        assert stored.step_details.document_update is StepStatus.FAILED

    @pytest.mark.asyncio
    async def test_empty_document_fails_generation(
        self, create_job, get_job, make_runner, make_source, fake_generator
    ) -> None:
        job = await create_job()

        await make_runner(make_source(texts=[]), fake_generator).advance(job.id)

        stored = await get_job(job.id)
        assert stored.status is JobStatus.FAILED
        assert stored.current_step == STAGE_FAILURE_LABELS[PipelineStage.FEEDBACK_GENERATION]


class TestRunnerGuards:
    """Test suite for runs that must not touch the job."""

    @pytest.mark.asyncio
    async def test_non_pending_job_is_left_alone(
        self, create_job, get_job, status_updater, make_runner, fake_source, fake_generator
    ) -> None:
        # Arrange
        job = await create_job()
        await status_updater.mark_processing(job.id)

        # Act
        await make_runner(fake_source, fake_generator).advance(job.id)

        # Assert
        stored = await get_job(job.id)
        assert stored.status is JobStatus.PROCESSING
        assert stored.progress == 10
        assert fake_generator.calls == []

    @pytest.mark.asyncio
    async def test_failure_persist_error_propagates(
        self, make_source, fake_generator, not_found_error
    ) -> None:
        updater = AsyncMock()
        updater.mark_processing.return_value = SimpleNamespace(
            document_id="doc-1", genre="워크시트", step_details=StepDetails.all_pending()
        )
        updater.mark_failed.side_effect = ConnectionError("database is gone")
        runner = FeedbackJobRunner(updater, make_source(fetch_error=not_found_error), fake_generator)

        with pytest.raises(ConnectionError):
            await runner.advance(uuid.uuid4())

    @pytest.mark.asyncio
    async def test_checkpoint_write_failure_blames_finished_stage(
        self, fake_source, fake_generator
    ) -> None:
        # Arrange
        updater = AsyncMock()
        updater.mark_processing.return_value = SimpleNamespace(
            document_id="doc-1", genre="워크시트", step_details=StepDetails.all_pending()
        )
        updater.complete_stage.side_effect = ConnectionError("database is gone")
        runner = FeedbackJobRunner(updater, fake_source, fake_generator)

        # Act
        await runner.advance(uuid.uuid4())

        # Assert
        failure = updater.mark_failed.await_args.kwargs
        assert failure["current_step"] == STAGE_FAILURE_LABELS[PipelineStage.DOCUMENT_ACCESS]
        assert failure["step_details"].content_analysis is StepStatus.PENDING
        assert failure["error"] == "database is gone"
        assert fake_generator.calls == []


class TestErrorMessage:
    """Test suite for error_message."""

    def test_domain_error_uses_message_without_details(self) -> None:
        exc = DocumentAccessError("Permission denied", document_id="doc-1")

        assert error_message(exc) == "Permission denied"

    def test_plain_exception(self) -> None:
        assert error_message(ValueError("bad value")) == "bad value"

    def test_exception_without_message(self) -> None:
        assert error_message(TimeoutError()) == "TimeoutError"

    def test_generation_error(self) -> None:
        assert error_message(FeedbackGenerationError("empty")) == "empty"
