"""
Common response models.

Error and health schemas shared by all routers.

Dependencies: pydantic
System role: Common API response structures
"""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Error response schema."""

    success: bool = False
    error: str = Field(description="Error message")
    details: dict | None = Field(default=None, description="Additional error context")


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    message: str
    active_jobs: int | None = Field(default=None, description="Feedback jobs running in this process")
