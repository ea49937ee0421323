"""
LangChain feedback content generator.

Implements FeedbackContentGenerator on top of any LangChain chat model.
Production uses Gemini via ChatGoogleGenerativeAI; tests pass a fake chat
model.

Dependencies: langchain_core, langchain_google_genai
System role: Feedback Content Generator adapter
"""

import logging
import re

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.prompts import ChatPromptTemplate
from langchain_google_genai import ChatGoogleGenerativeAI

from docfeedback.boundary.llm.feedback_prompts import (
    get_key_improvements_prompt,
    get_overall_prompt,
    get_section_prompt,
)
from docfeedback.configs.llm import LLMSettings
from docfeedback.core.document_feedback.genres import GenreRubric
from docfeedback.core.document_feedback.interfaces import FeedbackContentGenerator
from docfeedback.core.document_feedback.models.document import DocumentSection
from docfeedback.core.exceptions import FeedbackGenerationError

logger = logging.getLogger(__name__)

SECTION_EXCERPT_CHARS = 1500

# Markdown the model sometimes emits despite instructions.
_MARKDOWN_NOISE = re.compile(r"(\*\*|__|`|^#+\s*)", re.MULTILINE)


def clean_feedback_text(text: str) -> str:
    return _MARKDOWN_NOISE.sub("", text).strip()


def create_chat_model(settings: LLMSettings | None = None) -> BaseChatModel:
    """
    Build the production chat model.

    Args:
        settings: LLM configuration (defaults from environment)

    Returns:
        BaseChatModel: Gemini chat model
    """
    settings = settings or LLMSettings()
    return ChatGoogleGenerativeAI(
        model=settings.model_id,
        temperature=settings.temperature,
        max_output_tokens=settings.max_output_tokens,
        max_retries=settings.max_retries,
    )


class LangChainFeedbackGenerator(FeedbackContentGenerator):
    """Generate feedback text with a LangChain chat model."""

    def __init__(
        self,
        model: BaseChatModel | None = None,
        settings: LLMSettings | None = None,
    ) -> None:
        """
        Initialize generator.

        Args:
            model: Chat model; built from settings when omitted
            settings: LLM configuration
        """
        self._settings = settings or LLMSettings()
        self._model = model or create_chat_model(self._settings)

    async def overall_feedback(
        self,
        genre: str,
        rubric: GenreRubric,
        full_text: str,
        is_template: bool,
    ) -> str:
        return await self._ask(
            "overall_feedback",
            get_overall_prompt(is_template),
            genre=genre,
            description=rubric.description,
            structure=", ".join(rubric.structure),
            criteria=rubric.criteria,
            document_text=self._excerpt(full_text, self._settings.document_excerpt_chars),
        )

    async def key_improvements(self, genre: str, full_text: str) -> str:
        return await self._ask(
            "key_improvements",
            get_key_improvements_prompt(),
            genre=genre,
            document_text=self._excerpt(full_text, self._settings.document_excerpt_chars),
        )

    async def section_guide(self, genre: str, section: DocumentSection) -> str:
        return await self._ask(
            "section_guide",
            get_section_prompt(is_empty=True),
            genre=genre,
            title=section.title,
            body=self._excerpt(section.body or "(비어 있음)", SECTION_EXCERPT_CHARS),
        )

    async def section_feedback(
        self,
        genre: str,
        rubric: GenreRubric,
        section: DocumentSection,
    ) -> str:
        return await self._ask(
            "section_feedback",
            get_section_prompt(is_empty=False),
            genre=genre,
            criteria=rubric.criteria,
            title=section.title,
            body=self._excerpt(section.body or section.title, SECTION_EXCERPT_CHARS),
        )

    async def _ask(self, operation: str, prompt: ChatPromptTemplate, **variables: str) -> str:
        """
        Format the prompt, call the model and return cleaned text.

        Raises:
            FeedbackGenerationError: Model call failed or returned no text
        """
        try:
            messages = prompt.format_messages(**variables)
            response = await self._model.ainvoke(messages)
        except Exception as e:
            logger.error(f"{__name__}:{operation} - {type(e).__name__}: {e}")
            raise FeedbackGenerationError(f"AI feedback generation failed: {e}") from e

        content = response.content
        if isinstance(content, list):
            content = "".join(
                part.get("text", "") if isinstance(part, dict) else str(part) for part in content
            )
        text = clean_feedback_text(content)
        if not text:
            raise FeedbackGenerationError(f"AI model returned an empty response ({operation})")

        logger.debug(
            f"{__name__}:{operation} - Feedback generated",
            extra={"chars": len(text)},
        )
        return text

    @staticmethod
    def _excerpt(text: str, limit: int) -> str:
        if len(text) <= limit:
            return text
        return text[:limit] + "..."
