"""
Feedback job state machine types.

Job status, per-stage sub-status, the fixed stage order with its progress
checkpoints, and the user-facing step labels.

Dependencies: pydantic
System role: Shared vocabulary of the job runner, scheduler and record store
"""

import enum

from pydantic import BaseModel, ConfigDict, Field


class JobStatus(str, enum.Enum):
    """
    Feedback job lifecycle states.

    PENDING: Created (or reset by retry), waiting for the runner
    PROCESSING: Runner is advancing the pipeline
    COMPLETED: Feedback written into the document
    FAILED: A stage failed or the run timed out; check error
    CANCELLED: Reserved; never emitted by the pipeline
    """

    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.COMPLETED, JobStatus.FAILED, JobStatus.CANCELLED)


class StepStatus(str, enum.Enum):
    """Sub-status of one tracked pipeline stage."""

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class PipelineStage(str, enum.Enum):
    """The five pipeline stages, in execution order."""

    DOCUMENT_ACCESS = "documentAccess"
    CONTENT_ANALYSIS = "contentAnalysis"
    FEEDBACK_GENERATION = "feedbackGeneration"
    DOCUMENT_UPDATE = "documentUpdate"
    CHANGE_CONFIRMATION = "changeConfirmation"

    @property
    def is_tracked(self) -> bool:
        """Whether the stage has its own entry in StepDetails."""
        return self is not PipelineStage.CHANGE_CONFIRMATION

    @property
    def field_name(self) -> str:
        return _FIELD_NAMES[self]


STAGE_ORDER: tuple[PipelineStage, ...] = tuple(PipelineStage)

TOTAL_STEPS = 4

# Progress reached when the stage starts running.
STAGE_START_PROGRESS: dict[PipelineStage, int] = {
    PipelineStage.DOCUMENT_ACCESS: 10,
    PipelineStage.CONTENT_ANALYSIS: 25,
    PipelineStage.FEEDBACK_GENERATION: 50,
    PipelineStage.DOCUMENT_UPDATE: 75,
    PipelineStage.CHANGE_CONFIRMATION: 90,
}
COMPLETED_PROGRESS = 100

STAGE_LABELS: dict[PipelineStage, str] = {
    PipelineStage.DOCUMENT_ACCESS: "Checking document access",
    PipelineStage.CONTENT_ANALYSIS: "Analyzing document content",
    PipelineStage.FEEDBACK_GENERATION: "Generating AI feedback",
    PipelineStage.DOCUMENT_UPDATE: "Adding feedback to document",
    PipelineStage.CHANGE_CONFIRMATION: "Confirming document changes",
}
STAGE_FAILURE_LABELS: dict[PipelineStage, str] = {
    PipelineStage.DOCUMENT_ACCESS: "Document access failed",
    PipelineStage.CONTENT_ANALYSIS: "Content analysis failed",
    PipelineStage.FEEDBACK_GENERATION: "Feedback generation failed",
    PipelineStage.DOCUMENT_UPDATE: "Document update failed",
    PipelineStage.CHANGE_CONFIRMATION: "Change confirmation failed",
}

PREPARING_LABEL = "Preparing job"
RETRY_PREPARING_LABEL = "Preparing retry"
COMPLETED_LABEL = "Completed"
PROCESSING_FAILED_LABEL = "Processing failed"
TIMED_OUT_LABEL = "Processing timed out"
STALE_JOB_LABEL = "System timeout"
INTERRUPTED_LABEL = "Processing interrupted"


class StepDetails(BaseModel):
    """
    Fixed-shape record of the four tracked stage sub-statuses.

    Immutable; produce changed copies with ``with_stage``.
    Serialized with camelCase keys (documentAccess, contentAnalysis, ...).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    document_access: StepStatus = Field(default=StepStatus.PENDING, alias="documentAccess")
    content_analysis: StepStatus = Field(default=StepStatus.PENDING, alias="contentAnalysis")
    feedback_generation: StepStatus = Field(default=StepStatus.PENDING, alias="feedbackGeneration")
    document_update: StepStatus = Field(default=StepStatus.PENDING, alias="documentUpdate")

    @classmethod
    def all_pending(cls) -> "StepDetails":
        return cls()

    def get(self, stage: PipelineStage) -> StepStatus:
        return getattr(self, stage.field_name)

    def with_stage(self, stage: PipelineStage, status: StepStatus) -> "StepDetails":
        """Return a copy with ``stage`` set to ``status`` (untracked stages are ignored)."""
        if not stage.is_tracked:
            return self
        return self.model_copy(update={stage.field_name: status})

    def to_json(self) -> dict[str, str]:
        return self.model_dump(mode="json", by_alias=True)


_FIELD_NAMES: dict[PipelineStage, str] = {
    PipelineStage.DOCUMENT_ACCESS: "document_access",
    PipelineStage.CONTENT_ANALYSIS: "content_analysis",
    PipelineStage.FEEDBACK_GENERATION: "feedback_generation",
    PipelineStage.DOCUMENT_UPDATE: "document_update",
    PipelineStage.CHANGE_CONFIRMATION: "",
}
