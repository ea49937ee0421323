"""
Genre catalogue.

Rubric (description, expected structure, evaluation focus) and base
processing-time estimate for each supported document genre. Unknown genres
fall back to a generic rubric so that submission never fails on the label.

Dependencies: dataclasses (stdlib)
System role: Prompt inputs for feedback generation, estimate for job creation
"""

from dataclasses import dataclass, field

DEFAULT_ESTIMATED_MINUTES = 15


@dataclass(frozen=True)
class GenreRubric:
    """Evaluation rubric for one document genre."""

    name: str
    description: str
    structure: tuple[str, ...] = field(default_factory=tuple)
    criteria: str = ""
    estimated_minutes: int = DEFAULT_ESTIMATED_MINUTES


GENRES: dict[str, GenreRubric] = {
    "워크시트": GenreRubric(
        name="워크시트",
        description="단계별 활동 과제를 채워 나가는 프로젝트 워크시트",
        structure=(
            "문제 인식: 주제 선정 이유와 배경",
            "탐구 계획: 조사 방법과 역할 분담",
            "탐구 수행: 자료 수집과 분석 결과",
            "성찰: 배운 점과 개선할 점",
        ),
        criteria="단계별 내용의 충실성, 근거 자료의 구체성, 단계 간 연결성",
        estimated_minutes=15,
    ),
    "감상문": GenreRubric(
        name="감상문",
        description="독서감상문, 영화감상문 등 작품에 대한 개인적 감상을 표현하는 글",
        structure=(
            "도입부: 작품 소개와 첫인상",
            "전개부: 인상 깊은 장면/내용과 개인적 감상",
            "결론부: 작품이 주는 교훈이나 의미",
        ),
        criteria="개인적 감상의 진정성, 구체적 근거 제시, 감정 표현의 적절성",
        estimated_minutes=10,
    ),
    "비평문": GenreRubric(
        name="비평문",
        description="문학작품, 예술작품 등을 객관적으로 분석하고 평가하는 글",
        structure=(
            "서론: 작품 소개와 비평의 관점 제시",
            "본론: 작품의 특징 분석과 평가",
            "결론: 종합적 평가와 의의",
        ),
        criteria="분석의 객관성, 평가 기준의 명확성, 논리적 일관성",
        estimated_minutes=12,
    ),
    "보고서": GenreRubric(
        name="보고서",
        description="조사, 실험, 관찰 등의 결과를 체계적으로 정리한 글",
        structure=(
            "서론: 목적과 배경 설명",
            "방법: 조사/실험 방법 설명",
            "결과: 데이터와 발견사항 제시",
            "논의: 결과 해석과 의미 분석",
            "결론: 요약과 제언",
        ),
        criteria="객관성, 정확성, 체계성, 데이터의 신뢰성",
        estimated_minutes=12,
    ),
    "발표자료": GenreRubric(
        name="발표자료",
        description="발표를 위해 핵심 내용을 구조화한 자료",
        structure=(
            "도입: 발표 주제와 목적",
            "본문: 핵심 내용과 근거 자료",
            "마무리: 요약과 질의 대비",
        ),
        criteria="핵심 메시지의 명확성, 자료의 시각적 구성, 흐름의 자연스러움",
        estimated_minutes=10,
    ),
    "소논문": GenreRubric(
        name="소논문",
        description="특정 주제에 대한 학술적 연구를 담은 글",
        structure=(
            "서론: 연구 배경, 목적, 연구 문제",
            "이론적 배경: 선행연구 검토",
            "연구 방법: 연구 설계와 방법론",
            "연구 결과: 분석 결과 제시",
            "논의 및 결론: 시사점과 한계",
        ),
        criteria="학술적 엄밀성, 논리적 타당성, 독창성, 인용의 정확성",
        estimated_minutes=20,
    ),
    "논설문": GenreRubric(
        name="논설문",
        description="특정 주제에 대한 주장과 논거를 제시하는 글",
        structure=(
            "서론: 논제 제시와 주장 예고",
            "본론: 논거 제시와 반박 고려",
            "결론: 주장 강조와 설득",
        ),
        criteria="주장의 명확성, 논거의 타당성, 반박 고려, 설득력",
        estimated_minutes=8,
    ),
}


def get_rubric(genre: str) -> GenreRubric:
    """
    Look up the rubric for a genre.

    Args:
        genre: Genre label as submitted by the client

    Returns:
        GenreRubric: Catalogue entry, or a generic rubric for unknown labels
    """
    rubric = GENRES.get(genre.strip())
    if rubric is not None:
        return rubric
    return GenreRubric(
        name=genre,
        description=f"{genre} 형식의 글",
        structure=("서론", "본론", "결론"),
        criteria="내용의 충실성, 구성의 논리성, 표현의 정확성",
        estimated_minutes=DEFAULT_ESTIMATED_MINUTES,
    )


def estimate_minutes(genre: str) -> int:
    """Base processing-time estimate in minutes for a genre."""
    return get_rubric(genre).estimated_minutes
