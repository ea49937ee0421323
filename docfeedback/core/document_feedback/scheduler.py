"""
Feedback job scheduler.

Launches the runner as a fire-and-forget asyncio task raced against a
wall-clock timeout. If the timeout wins, the job is written FAILED with a
timeout-specific message and label. Nothing raised inside a scheduled run
escapes the task.

Blocking Google API calls run in worker threads via asyncio.to_thread.
Cancelling a run abandons the awaiting coroutine, but a thread already in
flight finishes in the background and its result is discarded.

Dependencies: asyncio
System role: Job Scheduler for the document feedback pipeline
"""

import asyncio
import logging
from uuid import UUID

from docfeedback.core.document_feedback.database.job_status_updater import FeedbackJobStatusUpdater
from docfeedback.core.document_feedback.models.job_state import (
    INTERRUPTED_LABEL,
    PROCESSING_FAILED_LABEL,
    TIMED_OUT_LABEL,
)
from docfeedback.core.document_feedback.runner import FeedbackJobRunner, error_message
from docfeedback.core.exceptions import PipelineTimeoutError
from docfeedback.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)

INTERRUPTED_MESSAGE = "Document processing was interrupted by a server shutdown. Please retry."


class FeedbackJobScheduler:
    """Run feedback jobs in the background with a timeout safety net."""

    def __init__(
        self,
        runner: FeedbackJobRunner,
        status_updater: FeedbackJobStatusUpdater,
        timeout_seconds: float = 900.0,
    ) -> None:
        """
        Initialize scheduler.

        Args:
            runner: Pipeline runner
            status_updater: Job record writer for timeout failures
            timeout_seconds: Wall-clock budget per run
        """
        self._runner = runner
        self._updater = status_updater
        self._timeout = timeout_seconds
        self._tasks: dict[UUID, asyncio.Task[None]] = {}

    @property
    def timeout_seconds(self) -> float:
        return self._timeout

    @property
    def active_count(self) -> int:
        return sum(1 for task in self._tasks.values() if not task.done())

    def is_running(self, job_id: UUID) -> bool:
        task = self._tasks.get(job_id)
        return task is not None and not task.done()

    def schedule(self, job_id: UUID) -> asyncio.Task[None]:
        """
        Start processing a job without waiting for it.

        Must be called from a running event loop. A run requested while a
        previous run of the same job is still in flight waits for it first.

        Args:
            job_id: Job UUID (expected to be PENDING)

        Returns:
            asyncio.Task: Handle of the background run
        """
        previous = self._tasks.get(job_id)
        task = asyncio.create_task(
            self._run(job_id, previous),
            name=f"feedback-job-{job_id}",
        )
        self._tasks[job_id] = task
        task.add_done_callback(lambda done: self._forget(job_id, done))
        logger.info(
            f"{__name__}:schedule - Job scheduled",
            extra={"job_id": str(job_id), "timeout_seconds": self._timeout},
        )
        return task

    async def shutdown(self) -> None:
        """
        Cancel all in-flight runs and mark their jobs FAILED.

        Interrupted jobs end up retryable instead of stuck in PENDING or
        PROCESSING. Jobs that already reached a terminal state are left as is.
        """
        in_flight = {job_id: task for job_id, task in self._tasks.items() if not task.done()}
        for task in in_flight.values():
            task.cancel()
        if in_flight:
            await asyncio.gather(*in_flight.values(), return_exceptions=True)
            for job_id in in_flight:
                await self._record_failure(job_id, INTERRUPTED_MESSAGE, INTERRUPTED_LABEL)
            logger.info(
                f"{__name__}:shutdown - Cancelled in-flight jobs",
                extra={"count": len(in_flight)},
            )
        self._tasks.clear()

    async def _run(self, job_id: UUID, previous: asyncio.Task[None] | None) -> None:
        if previous is not None and not previous.done():
            await asyncio.wait({previous})

        try:
            await asyncio.wait_for(self._runner.advance(job_id), timeout=self._timeout)
        except asyncio.TimeoutError:
            timeout_error = PipelineTimeoutError(self._timeout)
            logger.error(
                f"{__name__}:_run - Job timed out",
                extra={"job_id": str(job_id), "timeout_seconds": self._timeout},
            )
            await self._record_failure(job_id, timeout_error.message, TIMED_OUT_LABEL)
        except Exception as e:
            log_exception_with_context(
                logger,
                f"{__name__}:_run - Unexpected error in background run",
                e,
                job_id=str(job_id),
            )
            await self._record_failure(job_id, error_message(e), PROCESSING_FAILED_LABEL)

    async def _record_failure(self, job_id: UUID, message: str, label: str) -> None:
        try:
            await self._updater.mark_failed(job_id, error=message, current_step=label)
        except Exception as e:
            log_exception_with_context(
                logger,
                f"{__name__}:_record_failure - Failed to persist FAILED state",
                e,
                job_id=str(job_id),
            )

    def _forget(self, job_id: UUID, task: asyncio.Task[None]) -> None:
        if self._tasks.get(job_id) is task:
            del self._tasks[job_id]
