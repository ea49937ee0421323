"""
Application services.

Exports: FeedbackJobService
"""

from docfeedback.application.services.feedback_job_service import FeedbackJobService

__all__ = ["FeedbackJobService"]
