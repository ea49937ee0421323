"""
Stage modules for the document feedback pipeline.

Exports: DocumentAccessTask, ContentAnalysisTask, FeedbackGenerationTask,
DocumentUpdateTask, ChangeConfirmationTask
"""

from .change_confirmation_task import ChangeConfirmationTask
from .content_analysis_task import ContentAnalysisTask, is_section_empty
from .document_access_task import DocumentAccessTask
from .document_update_task import DocumentUpdateTask, order_back_to_front
from .feedback_generation_task import FeedbackGenerationTask

__all__ = [
    "ChangeConfirmationTask",
    "ContentAnalysisTask",
    "DocumentAccessTask",
    "DocumentUpdateTask",
    "FeedbackGenerationTask",
    "is_section_empty",
    "order_back_to_front",
]
