"""
Change confirmation stage.

Polls the document's revision snapshot until it differs from the baseline
or the wait budget runs out. Best-effort: never raises, and a timeout is
reported as ``changed=False`` rather than a failure.

Dependencies: asyncio, docfeedback.core.document_feedback.interfaces
System role: Final stage of the document feedback pipeline
"""

import asyncio
import logging
from typing import Awaitable, Callable

from docfeedback.core.document_feedback.interfaces import DocumentSource
from docfeedback.core.document_feedback.models.document import ChangeConfirmation, RevisionSnapshot

logger = logging.getLogger(__name__)


class ChangeConfirmationTask:
    """Wait for the document update to become visible."""

    def __init__(
        self,
        document_source: DocumentSource,
        poll_interval_seconds: float = 5.0,
        max_wait_seconds: float = 300.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._source = document_source
        self._poll_interval = poll_interval_seconds
        self._max_wait = max_wait_seconds
        self._sleep = sleep

    async def confirm(self, document_id: str, baseline: RevisionSnapshot) -> ChangeConfirmation:
        """
        Poll until the revision or annotation count moves off the baseline.

        Args:
            document_id: External document id
            baseline: Snapshot taken during document access

        Returns:
            ChangeConfirmation: Last observed snapshot and whether it changed
        """
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self._max_wait
        latest = baseline
        polls = 0

        while True:
            polls += 1
            try:
                latest = await self._source.get_revision(document_id)
            except Exception as e:
                logger.warning(
                    f"{__name__}:confirm - Revision poll failed: {type(e).__name__}: {e}",
                    extra={"document_id": document_id, "poll": polls},
                )
            else:
                if latest.differs_from(baseline):
                    logger.info(
                        f"{__name__}:confirm - Document change detected",
                        extra={"document_id": document_id, "polls": polls},
                    )
                    return ChangeConfirmation(final_revision=latest, changed=True, polls=polls)

            remaining = deadline - loop.time()
            if remaining <= 0:
                break
            await self._sleep(min(self._poll_interval, remaining))

        logger.warning(
            f"{__name__}:confirm - No document change observed before deadline",
            extra={"document_id": document_id, "polls": polls},
        )
        return ChangeConfirmation(final_revision=latest, changed=False, polls=polls)
