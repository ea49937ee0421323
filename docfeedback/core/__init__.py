"""
Core business logic module.

Contains the document feedback pipeline and the exception hierarchy.
"""

from docfeedback.core.exceptions import (
    DocFeedbackException,
    DocumentAccessError,
    DocumentUpdateError,
    FeedbackGenerationError,
    InvalidDocumentUrlError,
    InvalidJobStateError,
    JobAccessDeniedError,
    JobNotFoundError,
    PipelineStageError,
    PipelineTimeoutError,
    ValidationError,
)

__all__ = [
    "DocFeedbackException",
    "DocumentAccessError",
    "DocumentUpdateError",
    "FeedbackGenerationError",
    "InvalidDocumentUrlError",
    "InvalidJobStateError",
    "JobAccessDeniedError",
    "JobNotFoundError",
    "PipelineStageError",
    "PipelineTimeoutError",
    "ValidationError",
]
