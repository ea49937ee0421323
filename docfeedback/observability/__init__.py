"""
Observability module.

Provides logging configuration, correlation ID tracking and request
logging middleware.
"""

from docfeedback.observability.correlation import get_correlation_id, set_correlation_id
from docfeedback.observability.logger import configure_logging

__all__ = [
    "configure_logging",
    "get_correlation_id",
    "set_correlation_id",
]
