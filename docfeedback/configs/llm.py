"""
LLM configuration settings.

Model selection and sampling parameters for feedback generation.

Dependencies: pydantic, pydantic_settings
System role: Feedback content generator configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from docfeedback.configs.base import BaseSettings


class LLMSettings(BaseSettings):
    """Chat model configuration for feedback generation."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="FEEDBACK_LLM_",
        case_sensitive=False,
        extra="ignore",
    )

    model_id: str = Field(default="gemini-2.5-flash", description="Chat model identifier")
    temperature: float = Field(default=0.7, ge=0.0, le=2.0, description="Sampling temperature")
    max_output_tokens: int = Field(default=400, gt=0, description="Maximum tokens per feedback")
    max_retries: int = Field(default=2, ge=0, description="Client-level retries per call")
    document_excerpt_chars: int = Field(
        default=3000,
        gt=0,
        description="Characters of document text included in whole-document prompts",
    )
