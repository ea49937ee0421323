"""Feedback pipeline models."""

from .document import (
    ChangeConfirmation,
    ContentBlock,
    DocumentAnalysis,
    DocumentSection,
    DocumentSnapshot,
    FeedbackInsertion,
    FeedbackItem,
    RevisionSnapshot,
)
from .job_state import (
    COMPLETED_PROGRESS,
    STAGE_FAILURE_LABELS,
    STAGE_LABELS,
    STAGE_ORDER,
    STAGE_START_PROGRESS,
    TOTAL_STEPS,
    JobStatus,
    PipelineStage,
    StepDetails,
    StepStatus,
)

__all__ = [
    "COMPLETED_PROGRESS",
    "STAGE_FAILURE_LABELS",
    "STAGE_LABELS",
    "STAGE_ORDER",
    "STAGE_START_PROGRESS",
    "TOTAL_STEPS",
    "ChangeConfirmation",
    "ContentBlock",
    "DocumentAnalysis",
    "DocumentSection",
    "DocumentSnapshot",
    "FeedbackInsertion",
    "FeedbackItem",
    "JobStatus",
    "PipelineStage",
    "RevisionSnapshot",
    "StepDetails",
    "StepStatus",
]
