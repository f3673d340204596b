from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from patternhub.api.serializers import (
    architecture_to_record,
    favorite_to_record,
    pattern_to_record,
    serialize,
)
from patternhub.catalog.filters import FilterState
from patternhub.catalog.registry import PatternRegistry
from patternhub.db.session import get_db
from patternhub.db.storage import DatabaseStorage
from patternhub.errors import LLMServiceError, NotFoundError
from patternhub.llm.base import LLMClient
from patternhub.llm.client import get_llm_client
from patternhub.schemas import (
    ExplainRequest,
    FavoriteCreate,
    FavoriteDelete,
    GenerateCodeRequest,
    RecommendationRequest,
)
from patternhub.services.code_generator import generate_code_snippet
from patternhub.services.recommendations import explain_pattern_choice, get_pattern_recommendations

router = APIRouter(prefix="/api")

MIN_CONTEXT_LENGTH = 10


def get_storage(db: Session = Depends(get_db)) -> DatabaseStorage:
    return DatabaseStorage(db)


def _load_registry(storage: DatabaseStorage) -> PatternRegistry:
    return PatternRegistry(pattern_to_record(row) for row in storage.get_all_patterns())


def _require_pattern(storage: DatabaseStorage, slug: str):
    pattern = storage.get_pattern_by_slug(slug)
    if pattern is None:
        raise NotFoundError("Pattern not found")
    return pattern


# ============================================================
# PATTERN ENDPOINTS
# ============================================================

@router.get("/patterns")
def list_patterns(
    category: Optional[str] = None,
    architecture: List[str] = Query(default=[]),
    language: List[str] = Query(default=[]),
    framework: List[str] = Query(default=[]),
    difficulty: Optional[str] = None,
    search: Optional[str] = None,
    sort: Optional[str] = None,
    favorites_only: bool = Query(default=False, alias="favoritesOnly"),
    user_id: Optional[str] = Query(default=None, alias="userId"),
    storage: DatabaseStorage = Depends(get_storage),
):
    """
    List patterns in catalog order.

    Optional query parameters run the catalog filter engine; repeat
    architecture/language/framework to match any of several slugs.
    """
    registry = _load_registry(storage)

    state = FilterState.from_params(
        category=category,
        architectures=architecture,
        languages=language,
        frameworks=framework,
        difficulty=difficulty,
        favorites_only=favorites_only,
        search=search,
        sort=sort,
    )
    favorite_ids = ()
    if state.favorites_only and user_id:
        favorite_ids = [f.pattern_id for f in storage.get_favorites(user_id)]

    return [record.to_dict() for record in registry.filter(state, favorite_ids)]


@router.get("/patterns/category/{category}")
def list_patterns_by_category(category: str, storage: DatabaseStorage = Depends(get_storage)):
    return [pattern_to_record(row).to_dict() for row in storage.get_patterns_by_category(category)]


@router.get("/patterns/{slug}")
def get_pattern(slug: str, storage: DatabaseStorage = Depends(get_storage)):
    return pattern_to_record(_require_pattern(storage, slug)).to_dict()


@router.get("/patterns/{slug}/related")
def get_related_patterns(slug: str, storage: DatabaseStorage = Depends(get_storage)):
    """Related patterns that exist in the catalog; dangling slugs are skipped"""
    _require_pattern(storage, slug)
    return [related.to_dict() for related in _load_registry(storage).related(slug)]


@router.get("/patterns/{slug}/snippets")
def list_generated_snippets(slug: str, storage: DatabaseStorage = Depends(get_storage)):
    pattern = _require_pattern(storage, slug)
    return serialize(storage.get_generated_snippets(pattern.id))


# ============================================================
# ARCHITECTURE ENDPOINTS
# ============================================================

@router.get("/architectures")
def list_architectures(storage: DatabaseStorage = Depends(get_storage)):
    return [architecture_to_record(row).to_dict() for row in storage.get_all_architectures()]


@router.get("/architectures/{slug}")
def get_architecture(slug: str, storage: DatabaseStorage = Depends(get_storage)):
    architecture = storage.get_architecture_by_slug(slug)
    if architecture is None:
        raise NotFoundError("Architecture not found")
    return architecture_to_record(architecture).to_dict()


# ============================================================
# FAVORITES ENDPOINTS
# ============================================================

@router.get("/favorites")
def list_favorites(
    user_id: Optional[str] = Query(default=None, alias="userId"),
    storage: DatabaseStorage = Depends(get_storage),
):
    if not user_id:
        raise HTTPException(status_code=400, detail="userId is required")
    return [favorite_to_record(row).to_dict() for row in storage.get_favorites(user_id)]


@router.post("/favorites")
def add_favorite(request: FavoriteCreate, storage: DatabaseStorage = Depends(get_storage)):
    if not request.pattern_id or not request.user_id:
        raise HTTPException(status_code=400, detail="patternId and userId are required")
    if storage.get_pattern(request.pattern_id) is None:
        raise NotFoundError("Pattern not found")

    favorite = storage.add_favorite(request.pattern_id, request.user_id)
    return favorite_to_record(favorite).to_dict()


@router.delete("/favorites/{pattern_id}")
def remove_favorite(
    pattern_id: int,
    request: Optional[FavoriteDelete] = None,
    user_id_param: Optional[str] = Query(default=None, alias="userId"),
    storage: DatabaseStorage = Depends(get_storage),
):
    # Some HTTP clients drop DELETE bodies, so userId may also come as a query parameter
    user_id = (request.user_id if request else None) or user_id_param
    if not user_id:
        raise HTTPException(status_code=400, detail="userId is required")

    storage.remove_favorite(pattern_id, user_id)
    return {"success": True}


# ============================================================
# AI ENDPOINTS - Recommendations, Explanations, Code Generation
# ============================================================

@router.post("/recommendations")
def recommend_patterns(
    request: RecommendationRequest,
    storage: DatabaseStorage = Depends(get_storage),
    llm: LLMClient = Depends(get_llm_client),
):
    """Recommend up to 5 catalog patterns for a project description"""
    if len(request.project_description.strip()) < MIN_CONTEXT_LENGTH:
        raise HTTPException(
            status_code=400,
            detail=f"Project description must be at least {MIN_CONTEXT_LENGTH} characters",
        )

    patterns = _load_registry(storage).list_all()
    try:
        recommendations = get_pattern_recommendations(request, patterns, llm)
    except LLMServiceError as e:
        print(f"[ROUTES] Recommendations failed: {e}")
        raise HTTPException(status_code=500, detail="Error generating recommendations")

    return {"recommendations": [r.model_dump(by_alias=True) for r in recommendations]}


@router.post("/patterns/{slug}/generate-code")
def generate_code(
    slug: str,
    request: GenerateCodeRequest,
    storage: DatabaseStorage = Depends(get_storage),
    llm: LLMClient = Depends(get_llm_client),
):
    if not request.language or not request.context:
        raise HTTPException(status_code=400, detail="language and context are required")

    pattern = _require_pattern(storage, slug)
    try:
        generated = generate_code_snippet(pattern_to_record(pattern), request.language, request.context, llm)
    except LLMServiceError as e:
        print(f"[ROUTES] Code generation failed for '{slug}': {e}")
        raise HTTPException(status_code=500, detail="Failed to generate code")

    snippet = storage.save_generated_snippet(
        pattern_id=pattern.id,
        language=request.language,
        context=request.context,
        code=generated.code,
        explanation=generated.explanation,
    )
    return serialize(snippet)


@router.post("/patterns/{slug}/explain")
def explain_pattern(
    slug: str,
    request: ExplainRequest,
    storage: DatabaseStorage = Depends(get_storage),
    llm: LLMClient = Depends(get_llm_client),
):
    project_context = (request.project_context or "").strip()
    if len(project_context) < MIN_CONTEXT_LENGTH:
        raise HTTPException(
            status_code=400,
            detail=f"Project context must be at least {MIN_CONTEXT_LENGTH} characters",
        )

    pattern = _require_pattern(storage, slug)
    try:
        explanation = explain_pattern_choice(pattern_to_record(pattern), project_context, llm)
    except LLMServiceError as e:
        print(f"[ROUTES] Explanation failed for '{slug}': {e}")
        raise HTTPException(status_code=500, detail="Error generating explanation")

    return {"explanation": explanation}
