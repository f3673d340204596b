from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import List, Literal, Optional


class CamelModel(BaseModel):
    """Accepts and emits the camelCase keys used by the REST payloads"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---- Favorites ----

class FavoriteCreate(CamelModel):
    pattern_id: Optional[int] = None
    user_id: Optional[str] = None


class FavoriteDelete(CamelModel):
    user_id: Optional[str] = None


# ---- AI features ----

class RecommendationRequest(CamelModel):
    project_description: str = ""
    preferred_languages: List[str] = []
    preferred_frameworks: List[str] = []
    preferred_architectures: List[str] = []
    experience_level: Optional[Literal["beginner", "intermediate", "advanced"]] = None
    project_type: Optional[str] = None
    team_size: Optional[str] = None


class Recommendation(CamelModel):
    pattern_slug: str
    pattern_name: str
    relevance_score: int  # 1-10
    reason: str = ""
    use_case: str = ""


class GenerateCodeRequest(CamelModel):
    language: Optional[str] = None
    context: Optional[str] = None


class GeneratedCode(CamelModel):
    code: str
    explanation: str


class ExplainRequest(CamelModel):
    project_context: Optional[str] = None
