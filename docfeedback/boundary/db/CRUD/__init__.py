"""CRUD operations for ORM models."""

from docfeedback.boundary.db.CRUD.base_crud import BaseCRUD
from docfeedback.boundary.db.CRUD.feedback_job_crud import FeedbackJobCRUD, feedback_job_crud

__all__ = ["BaseCRUD", "FeedbackJobCRUD", "feedback_job_crud"]
