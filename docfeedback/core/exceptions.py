"""
Exception hierarchy for the document feedback application.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class DocFeedbackException(Exception):
    """Base exception for all document feedback application errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(DocFeedbackException):
    """Raised when input validation fails (before any job record exists)."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class InvalidDocumentUrlError(ValidationError):
    """Raised when a document URL cannot be resolved to a document ID."""

    def __init__(self, url: str) -> None:
        super().__init__("Invalid Google Docs URL", field="documentUrl", details={"url": url})


class JobNotFoundError(DocFeedbackException):
    """Raised when a feedback job cannot be found."""

    def __init__(self, job_id: Any) -> None:
        super().__init__(f"Job not found: {job_id}", {"job_id": str(job_id)})
        self.job_id = job_id


class JobAccessDeniedError(DocFeedbackException):
    """Raised when a user accesses a job owned by someone else."""

    def __init__(self, job_id: Any) -> None:
        # Details deliberately omit the owner so nothing about the job leaks.
        super().__init__("Unauthorized access to job")
        self.job_id = job_id


class InvalidJobStateError(DocFeedbackException):
    """Raised when an operation is not allowed in the job's current status."""

    def __init__(self, message: str, current_status: str | None = None) -> None:
        details = {"current_status": current_status} if current_status else None
        super().__init__(message, details)
        self.current_status = current_status


class PipelineStageError(DocFeedbackException):
    """Base class for failures inside a feedback pipeline stage."""

    def __init__(
        self,
        message: str,
        document_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if document_id:
            details["document_id"] = document_id
        super().__init__(message, details)


class DocumentAccessError(PipelineStageError):
    """Raised when the document cannot be read (not shared, not found, no permission)."""

    pass


class DocumentUpdateError(PipelineStageError):
    """Raised when feedback cannot be written back into the document."""

    pass


class FeedbackGenerationError(PipelineStageError):
    """Raised when the content generator fails or returns nothing usable."""

    pass


class PipelineTimeoutError(DocFeedbackException):
    """Raised when a job run exceeds the scheduler's wall-clock budget."""

    def __init__(self, timeout_seconds: float) -> None:
        super().__init__(
            f"Document processing timed out after {timeout_seconds:g}s",
            {"timeout_seconds": timeout_seconds},
        )
        self.timeout_seconds = timeout_seconds
