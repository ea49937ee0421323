"""
Database boundary.

Exports the declarative base, async connection helpers and the feedback
job model.
"""

from docfeedback.boundary.db.base import Base, TimestampMixin, UUIDMixin
from docfeedback.boundary.db.connection import (
    get_async_db,
    get_async_engine,
    get_async_session_factory,
)
from docfeedback.boundary.db.models import FeedbackJobModel

__all__ = [
    "Base",
    "FeedbackJobModel",
    "TimestampMixin",
    "UUIDMixin",
    "get_async_db",
    "get_async_engine",
    "get_async_session_factory",
]
