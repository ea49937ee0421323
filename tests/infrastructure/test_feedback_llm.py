"""
Tests for the LangChain feedback content generator.

Uses langchain_core fake chat models and AsyncMock; no network access.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from langchain_core.language_models.fake_chat_models import FakeListChatModel
from langchain_core.messages import AIMessage

from docfeedback.boundary.llm.feedback_llm import LangChainFeedbackGenerator, clean_feedback_text
from docfeedback.configs.llm import LLMSettings
from docfeedback.core.document_feedback.genres import get_rubric
from docfeedback.core.document_feedback.models.document import DocumentSection
from docfeedback.core.exceptions import FeedbackGenerationError

SECTION = DocumentSection(
    title="2단계: 탐구 계획",
    start=10,
    end=60,
    body="________________",
    has_heading=True,
    is_empty=True,
)


def capturing_model(content="탐구 계획을 구체적으로 적어 보세요.") -> MagicMock:
    model = MagicMock()
    model.ainvoke = AsyncMock(return_value=AIMessage(content=content))
    return model


def prompt_text(model: MagicMock) -> str:
    messages = model.ainvoke.call_args.args[0]
    return "\n".join(message.content for message in messages)


class TestCleanFeedbackText:
    """Test suite for markdown cleanup."""

    def test_strips_markdown(self) -> None:
        assert clean_feedback_text("## 제목\n**강조** 와 `코드`") == "제목\n강조 와 코드"

    def test_keeps_plain_text(self) -> None:
        assert clean_feedback_text("  ■ 개선점 1: 근거 보강  ") == "■ 개선점 1: 근거 보강"


class TestLangChainFeedbackGenerator:
    """Test suite for LangChainFeedbackGenerator."""

    @pytest.mark.asyncio
    async def test_overall_feedback_with_fake_model(self) -> None:
        # Arrange
        model = FakeListChatModel(responses=["**결론**을 보강하세요."])
        generator = LangChainFeedbackGenerator(model=model, settings=LLMSettings())

        # Act
        text = await generator.overall_feedback("보고서", get_rubric("보고서"), "본문", is_template=False)

        # Assert
        assert text == "결론을 보강하세요."

    @pytest.mark.asyncio
    async def test_template_prompt_used_for_unfilled_documents(self) -> None:
        model = capturing_model()
        generator = LangChainFeedbackGenerator(model=model, settings=LLMSettings())

        await generator.overall_feedback("워크시트", get_rubric("워크시트"), "____", is_template=True)

        assert "템플릿" in prompt_text(model)

    @pytest.mark.asyncio
    async def test_review_prompt_includes_rubric(self) -> None:
        model = capturing_model()
        rubric = get_rubric("논설문")
        generator = LangChainFeedbackGenerator(model=model, settings=LLMSettings())

        await generator.overall_feedback("논설문", rubric, "주장과 근거", is_template=False)

        text = prompt_text(model)
        assert rubric.criteria in text
        assert "주장과 근거" in text

    @pytest.mark.asyncio
    async def test_document_excerpt_is_truncated(self) -> None:
        model = capturing_model()
        generator = LangChainFeedbackGenerator(
            model=model, settings=LLMSettings(document_excerpt_chars=10)
        )

        await generator.key_improvements("보고서", "가" * 50)

        text = prompt_text(model)
        assert "가" * 10 + "..." in text
        assert "가" * 11 not in text

    @pytest.mark.asyncio
    async def test_section_guide_and_feedback_prompts(self) -> None:
        model = capturing_model()
        generator = LangChainFeedbackGenerator(model=model, settings=LLMSettings())

        await generator.section_guide("워크시트", SECTION)
        guide_prompt = prompt_text(model)
        await generator.section_feedback("워크시트", get_rubric("워크시트"), SECTION)
        feedback_prompt = prompt_text(model)

        assert "아직 내용이 작성되지 않았습니다" in guide_prompt
        assert SECTION.title in feedback_prompt
        assert "평가 초점" in feedback_prompt

    @pytest.mark.asyncio
    async def test_list_content_is_joined(self) -> None:
        model = capturing_model(content=[{"type": "text", "text": "첫 문장. "}, "둘째 문장."])
        generator = LangChainFeedbackGenerator(model=model, settings=LLMSettings())

        text = await generator.key_improvements("보고서", "본문")

        assert text == "첫 문장. 둘째 문장."

    @pytest.mark.asyncio
    async def test_model_error_is_wrapped(self) -> None:
        model = MagicMock()
        model.ainvoke = AsyncMock(side_effect=RuntimeError("429 Resource exhausted"))
        generator = LangChainFeedbackGenerator(model=model, settings=LLMSettings())

        with pytest.raises(FeedbackGenerationError) as exc_info:
            await generator.key_improvements("보고서", "본문")

        assert "429 Resource exhausted" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_empty_response_rejected(self) -> None:
        generator = LangChainFeedbackGenerator(model=capturing_model(content="  ** "), settings=LLMSettings())

        with pytest.raises(FeedbackGenerationError):
            await generator.section_guide("워크시트", SECTION)
