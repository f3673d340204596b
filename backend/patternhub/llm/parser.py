import json
import re
from typing import Any, Collection, Dict, List

from patternhub.schemas import GeneratedCode, Recommendation


MAX_RECOMMENDATIONS = 5
MIN_SCORE = 1
MAX_SCORE = 10

FALLBACK_CODE = "// Code generation failed"
FALLBACK_EXPLANATION = "No explanation could be generated"


# ============================================================
# SAFE JSON LOADER (LLM TRUST BOUNDARY)
# ============================================================

def safe_load_json(json_text: str) -> Dict[str, Any]:
    """
    Safely extract and parse JSON from LLM output.

    Strategy:
    1. Try direct json.loads (fast path)
    2. Fallback to extracting first JSON object
    3. Fail gracefully with empty dict

    NEVER throws.
    """

    if not json_text or not isinstance(json_text, str):
        return {}

    # Fast path
    try:
        data = json.loads(json_text)
        return data if isinstance(data, dict) else {}
    except ValueError:
        pass

    # Fallback: extract first JSON object
    match = re.search(r"\{.*\}", json_text, re.DOTALL)
    if not match:
        return {}

    try:
        data = json.loads(match.group(0))
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


# ============================================================
# RECOMMENDATIONS PARSER
# ============================================================

def _clamp_score(value) -> int:
    score = int(round(float(value)))
    return max(MIN_SCORE, min(MAX_SCORE, score))


def parse_recommendations(
    json_text: str,
    known_slugs: Collection[str],
    limit: int = MAX_RECOMMENDATIONS,
) -> List[Recommendation]:
    """
    Keep recommendations that point at a known pattern, in model order.
    Entries with a missing slug or a non-numeric score are dropped.
    """
    data = safe_load_json(json_text)

    results: List[Recommendation] = []
    seen = set()
    for entry in data.get("recommendations", []) or []:
        if not isinstance(entry, dict):
            continue

        slug = entry.get("patternSlug")
        if not isinstance(slug, str) or slug not in known_slugs or slug in seen:
            continue

        try:
            score = _clamp_score(entry.get("relevanceScore"))
        except (TypeError, ValueError, OverflowError):
            continue

        results.append(
            Recommendation(
                pattern_slug=slug,
                pattern_name=str(entry.get("patternName") or slug),
                relevance_score=score,
                reason=str(entry.get("reason") or ""),
                use_case=str(entry.get("useCase") or ""),
            )
        )
        seen.add(slug)

        if len(results) >= limit:
            break

    return results


# ============================================================
# CODE GENERATION PARSER
# ============================================================

def parse_generated_code(json_text: str) -> GeneratedCode:
    data = safe_load_json(json_text)

    code = data.get("code")
    explanation = data.get("explanation")

    return GeneratedCode(
        code=code if isinstance(code, str) and code.strip() else FALLBACK_CODE,
        explanation=explanation if isinstance(explanation, str) and explanation.strip() else FALLBACK_EXPLANATION,
    )
