"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.
Provides dependency injection factory for FastAPI.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from docfeedback.configs.base import BaseSettings
from docfeedback.configs.database import DatabaseSettings
from docfeedback.configs.feedback_job import FeedbackJobSettings
from docfeedback.configs.google_docs import GoogleDocsSettings
from docfeedback.configs.llm import LLMSettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    database: DatabaseSettings = DatabaseSettings()
    feedback_job: FeedbackJobSettings = FeedbackJobSettings()
    google_docs: GoogleDocsSettings = GoogleDocsSettings()
    llm: LLMSettings = LLMSettings()


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns Settings instance, cached for dependency injection.
    Environment variables loaded once at startup.

    Returns:
        Settings: Application settings instance

    Usage:
        from docfeedback.configs import get_settings
        settings = get_settings()
    """
    return Settings()
