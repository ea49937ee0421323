"""Job record persistence for background pipeline code."""

from .job_status_updater import FeedbackJobStatusUpdater

__all__ = ["FeedbackJobStatusUpdater"]
