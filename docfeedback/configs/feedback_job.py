"""
Feedback job pipeline configuration.

Timeouts, polling cadence and content heuristics for the document
feedback job runner and scheduler.

Dependencies: pydantic, pydantic_settings
System role: Pipeline tuning knobs
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from docfeedback.configs.base import BaseSettings


class FeedbackJobSettings(BaseSettings):
    """Document feedback pipeline configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="FEEDBACK_JOB_",
        case_sensitive=False,
        extra="ignore",
    )

    pipeline_timeout_seconds: float = Field(
        default=900.0,
        gt=0,
        description="Wall-clock budget for one job run before the scheduler marks it FAILED",
    )
    change_poll_interval_seconds: float = Field(
        default=5.0,
        gt=0,
        description="Interval between revision polls while confirming the document update",
    )
    change_max_wait_seconds: float = Field(
        default=300.0,
        ge=0,
        description="Maximum time spent waiting for the document change to show up",
    )
    stale_job_threshold_seconds: float = Field(
        default=3600.0,
        gt=0,
        description="PROCESSING jobs not updated for this long are considered stuck",
    )
    recover_on_startup: bool = Field(
        default=True,
        description="Fail stuck PROCESSING jobs when the API starts",
    )

    max_section_feedbacks: int = Field(
        default=8,
        ge=0,
        description="Upper bound on per-section feedback items",
    )
    max_concurrent_generations: int = Field(
        default=3,
        ge=1,
        description="Concurrent section feedback generations per job",
    )
    min_meaningful_chars: int = Field(
        default=20,
        ge=1,
        description="Sections with fewer meaningful characters are treated as empty",
    )
    min_section_length: int = Field(
        default=10,
        ge=0,
        description="Sections shorter than this (title + body) get no section feedback",
    )
