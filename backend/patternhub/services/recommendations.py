import json
from typing import Iterable, List

from patternhub.catalog.records import PatternRecord
from patternhub.errors import LLMServiceError
from patternhub.llm.base import LLMClient
from patternhub.llm.parser import parse_recommendations
from patternhub.llm.prompts import (
    EXPLAIN_SYSTEM_PROMPT,
    EXPLAIN_USER_PROMPT,
    RECOMMENDATION_SYSTEM_PROMPT,
    RECOMMENDATION_USER_PROMPT,
)
from patternhub.schemas import Recommendation, RecommendationRequest


RECOMMENDATION_TEMPERATURE = 0.3
EXPLAIN_TEMPERATURE = 0.5


def _pattern_summary(patterns: Iterable[PatternRecord]) -> str:
    summary = [
        {
            "slug": p.slug,
            "name": p.name,
            "category": p.category,
            "difficulty": p.difficulty,
            "description": p.description,
            "languages": sorted(p.languages),
            "frameworks": sorted(p.frameworks),
            "architectures": sorted(p.architectures),
            "tags": list(p.tags),
        }
        for p in patterns
    ]
    return json.dumps(summary, indent=2)


def _or_any(values: List[str]) -> str:
    return ", ".join(values) if values else "Any"


def get_pattern_recommendations(
    request: RecommendationRequest,
    patterns: List[PatternRecord],
    client: LLMClient,
) -> List[Recommendation]:
    """
    Ask the LLM for patterns suited to a project description.

    Returns at most 5 recommendations, each referencing a slug present in
    `patterns`; anything else the model invents is discarded.
    """
    messages = [
        {
            "role": "system",
            "content": RECOMMENDATION_SYSTEM_PROMPT.format(pattern_summary=_pattern_summary(patterns)),
        },
        {
            "role": "user",
            "content": RECOMMENDATION_USER_PROMPT.format(
                project_description=request.project_description.strip(),
                languages=_or_any(request.preferred_languages),
                frameworks=_or_any(request.preferred_frameworks),
                architectures=_or_any(request.preferred_architectures),
                experience_level=request.experience_level or "Not specified",
                project_type=request.project_type or "Not specified",
                team_size=request.team_size or "Not specified",
            ),
        },
    ]

    raw = client.generate(messages, temperature=RECOMMENDATION_TEMPERATURE, json_mode=True)
    recommendations = parse_recommendations(raw, {p.slug for p in patterns})
    print(f"[RECOMMEND] {len(recommendations)} recommendations: {[r.pattern_slug for r in recommendations]}")
    return recommendations


def explain_pattern_choice(pattern: PatternRecord, project_context: str, client: LLMClient) -> str:
    messages = [
        {"role": "system", "content": EXPLAIN_SYSTEM_PROMPT},
        {
            "role": "user",
            "content": EXPLAIN_USER_PROMPT.format(
                name=pattern.name,
                description=pattern.description,
                project_context=project_context.strip(),
            ),
        },
    ]

    explanation = client.generate(messages, temperature=EXPLAIN_TEMPERATURE).strip()
    if not explanation:
        raise LLMServiceError(f"Empty explanation for pattern '{pattern.slug}'")
    return explanation
