"""ORM models."""

from docfeedback.boundary.db.models.feedback_job_model import FeedbackJobModel, StepDetailsType

__all__ = ["FeedbackJobModel", "StepDetailsType"]
