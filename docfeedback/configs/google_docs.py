"""
Google Docs configuration settings.

Service account credentials and API scopes for the document source adapter.

Dependencies: pydantic, pydantic_settings
System role: Google Docs API configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from docfeedback.configs.base import BaseSettings


class GoogleDocsSettings(BaseSettings):
    """Google Docs API configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="GOOGLE_",
        case_sensitive=False,
        extra="ignore",
    )

    service_account: str | None = Field(
        default=None,
        description="Service account key as a JSON string",
    )
    scopes: list[str] = Field(
        default=[
            "https://www.googleapis.com/auth/documents",
            "https://www.googleapis.com/auth/drive.file",
        ],
        description="OAuth scopes requested for the service account",
    )
    request_attempts: int = Field(
        default=3,
        ge=1,
        description="Attempts per Google API call for transient (429/5xx) errors",
    )
