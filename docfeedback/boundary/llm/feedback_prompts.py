"""Feedback prompt templates.

Korean mentor-style prompts for whole-document, key-improvement and
per-section feedback. Output is plain text: the result is inserted
verbatim into a Google Doc, so markdown is explicitly forbidden.

Dependencies: langchain_core.prompts
System role: Prompt templates for the feedback content generator
"""

from langchain_core.prompts import ChatPromptTemplate

FEEDBACK_SYSTEM_PROMPT = """당신은 고등학교 프로젝트 학습의 전문 멘토입니다.

역할:
- 학생들이 작성 중인 워크시트와 글을 검토
- 단계별 과정에 따른 체계적 피드백 제공

피드백 원칙:
1. 매우 간결하게 1-2줄로 핵심만 전달
2. 가장 중요한 개선점 한 가지만 제시
3. 구체적이고 실행 가능한 제안 중심

중요한 형식 규칙:
- 마크다운 문법을 사용하지 마세요 (**, *, #, ` 등 사용 금지)
- 일반 텍스트로만 작성하세요
- 강조가 필요한 부분은 "강조: 내용" 형태로 작성하세요
- 목록은 "- 항목1", "- 항목2" 형태로 작성하세요
- 제목은 "■ 제목:" 형태로 작성하세요"""

OVERALL_TEMPLATE_PROMPT = """다음은 {genre} 템플릿입니다. 현재 대부분의 내용이 작성되지 않았습니다.

문서 내용:
{document_text}

아직 내용이 작성되지 않았습니다. 가장 먼저 작성해야 할 부분을 1-2줄로 안내해주세요."""

OVERALL_REVIEW_PROMPT = """다음은 {genre}입니다. {genre}의 일반적인 구조적 원리에 따라 평가해주세요.

글의 성격: {description}
평가 기준:
구조: {structure}
초점: {criteria}

문서 전체 내용:
{document_text}

위 {genre}에 대해 가장 중요한 개선점 한 가지를 1-2줄로 간단명료하게 제시해주세요."""

KEY_IMPROVEMENTS_PROMPT = """문서를 전체적으로 분석한 결과, 가장 중요한 개선점 2가지를 제시해주세요.
각 개선점은 1-2줄로 간결하게 작성하고, 가장 시급한 순서대로 제시해주세요.

글의 종류: {genre}
문서 내용:
{document_text}

다음 형식으로 작성해주세요:
■ 개선점 1: (구체적인 내용)
■ 개선점 2: (구체적인 내용)"""

SECTION_GUIDE_PROMPT = """다음은 {genre}의 한 부분으로, 아직 내용이 작성되지 않았습니다.

섹션 제목: {title}
현재 내용:
{body}

이 섹션에 무엇을 어떻게 작성하면 좋을지 1-2줄로 구체적으로 안내해주세요."""

SECTION_FEEDBACK_PROMPT = """다음은 {genre}의 한 부분입니다.

평가 초점: {criteria}

섹션 제목: {title}
내용:
{body}

이 섹션에서 가장 중요한 개선점 한 가지를 1-2줄로 제시해주세요."""


def _build(user_prompt: str) -> ChatPromptTemplate:
    return ChatPromptTemplate.from_messages(
        [
            ("system", FEEDBACK_SYSTEM_PROMPT),
            ("human", user_prompt),
        ]
    )


def get_overall_prompt(is_template: bool) -> ChatPromptTemplate:
    """Whole-document prompt; templates get a where-to-start hint instead of a review."""
    return _build(OVERALL_TEMPLATE_PROMPT if is_template else OVERALL_REVIEW_PROMPT)


def get_key_improvements_prompt() -> ChatPromptTemplate:
    return _build(KEY_IMPROVEMENTS_PROMPT)


def get_section_prompt(is_empty: bool) -> ChatPromptTemplate:
    return _build(SECTION_GUIDE_PROMPT if is_empty else SECTION_FEEDBACK_PROMPT)
