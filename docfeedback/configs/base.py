"""
Shared settings base for the feedback service.

Every concern-specific settings class reads the same .env file and ignores
variables it does not declare, so one environment can feed all of them.

Dependencies: pydantic_settings
System role: Common root of the configuration classes
"""

from pydantic import Field
from pydantic_settings import BaseSettings as PydanticBaseSettings, SettingsConfigDict


class BaseSettings(PydanticBaseSettings):
    """Settings root: .env loading plus the log level."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: str = Field(
        default="INFO",
        description="Root log level for configure_logging (DEBUG, INFO, WARNING, ERROR)",
    )
