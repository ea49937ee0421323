"""
Feedback job error handling utilities.

Provides a decorator for consistent error handling across feedback job
API endpoints: domain exceptions are logged with context and mapped to
HTTPExceptions.
"""

import functools
import logging
from typing import Any, Callable, TypeVar

from fastapi import HTTPException, status

from docfeedback.core.exceptions import (
    DocFeedbackException,
    InvalidJobStateError,
    JobAccessDeniedError,
    JobNotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Type for the decorated function
F = TypeVar("F", bound=Callable[..., Any])


def handle_feedback_errors(func: F) -> F:
    """
    Decorator to handle feedback job errors and transform them into HTTPExceptions.

    Mapping:
    - ValidationError, InvalidJobStateError -> 400
    - JobAccessDeniedError -> 403 (no job content in the response)
    - JobNotFoundError -> 404
    - anything else -> 500
    """

    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)

        except HTTPException:
            raise

        except JobNotFoundError as e:
            logger.warning("Feedback job not found", extra={"job_id": str(e.job_id)})
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)

        except JobAccessDeniedError as e:
            logger.warning("Feedback job access denied", extra={"job_id": str(e.job_id)})
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=e.message)

        except (ValidationError, InvalidJobStateError) as e:
            logger.warning(
                "Invalid feedback job request",
                extra={"error": e.message, "details": e.details},
            )
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)

        except DocFeedbackException as e:
            logger.exception("Feedback job operation failed", extra={"error": str(e)})
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=e.message,
            )

        except Exception as e:
            logger.exception(
                "Unexpected failure in feedback job operation",
                extra={"error": str(e)},
            )
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="An internal error occurred while processing the feedback job",
            )

    return wrapper  # type: ignore
