"""
Catalog records - the immutable shapes the filter engine works on
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Mapping, Optional, Tuple, Union


PatternId = Union[int, str]


class PatternCategory(str, Enum):
    """Closed set of pattern categories"""
    CREATIONAL = "creational"
    STRUCTURAL = "structural"
    BEHAVIORAL = "behavioral"
    ARCHITECTURAL = "architectural"


def _pick(data: Mapping[str, Any], camel: str, snake: str, default=None):
    if camel in data:
        return data[camel]
    return data.get(snake, default)


def _as_tuple(value) -> Tuple[str, ...]:
    if not value:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(str(v) for v in value)


@dataclass(frozen=True)
class PatternRecord:
    """
    One catalog entry describing a design pattern.

    Set-like taxonomy fields are frozensets: only membership matters.
    related_patterns keeps its order and may name slugs that do not exist.
    """
    id: PatternId
    slug: str
    name: str
    description: str = ""
    category: str = ""
    difficulty: int = 1
    content: str = ""
    tags: Tuple[str, ...] = ()
    architectures: FrozenSet[str] = frozenset()
    languages: FrozenSet[str] = frozenset()
    frameworks: FrozenSet[str] = frozenset()
    related_patterns: Tuple[str, ...] = ()
    icon: str = ""
    color: str = ""
    examples: Mapping[str, str] = field(default_factory=dict, compare=False, hash=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PatternRecord":
        """Build a record from a REST payload (camelCase) or ORM row dict (snake_case)"""
        category = data.get("category", "")
        if isinstance(category, PatternCategory):
            category = category.value

        return cls(
            id=data["id"],
            slug=data["slug"],
            name=data.get("name", ""),
            description=data.get("description", "") or "",
            category=category or "",
            difficulty=data.get("difficulty", 1),
            content=data.get("content", "") or "",
            tags=_as_tuple(data.get("tags")),
            architectures=frozenset(_as_tuple(data.get("architectures"))),
            languages=frozenset(_as_tuple(data.get("languages"))),
            frameworks=frozenset(_as_tuple(data.get("frameworks"))),
            related_patterns=_as_tuple(_pick(data, "relatedPatterns", "related_patterns")),
            icon=data.get("icon", "") or "",
            color=data.get("color", "") or "",
            examples=dict(data.get("examples") or {}),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "slug": self.slug,
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "difficulty": self.difficulty,
            "icon": self.icon,
            "color": self.color,
            "tags": list(self.tags),
            "architectures": sorted(self.architectures),
            "languages": sorted(self.languages),
            "frameworks": sorted(self.frameworks),
            "content": self.content,
            "examples": dict(self.examples),
            "relatedPatterns": list(self.related_patterns),
        }


@dataclass(frozen=True)
class Architecture:
    """An architecture taxonomy entry"""
    id: PatternId
    slug: str
    name: str
    description: str = ""
    icon: str = ""
    color: str = ""
    pattern_count: int = 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Architecture":
        return cls(
            id=data["id"],
            slug=data["slug"],
            name=data.get("name", ""),
            description=data.get("description", "") or "",
            icon=data.get("icon", "") or "",
            color=data.get("color", "") or "",
            pattern_count=int(_pick(data, "patternCount", "pattern_count", 0) or 0),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "slug": self.slug,
            "name": self.name,
            "description": self.description,
            "icon": self.icon,
            "color": self.color,
            "patternCount": self.pattern_count,
        }


@dataclass(frozen=True)
class Favorite:
    id: PatternId
    pattern_id: PatternId
    session_id: str
    created_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Favorite":
        return cls(
            id=data["id"],
            pattern_id=_pick(data, "patternId", "pattern_id"),
            session_id=_pick(data, "userId", "session_id") or data.get("sessionId", ""),
            created_at=_pick(data, "createdAt", "created_at"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "patternId": self.pattern_id,
            "userId": self.session_id,
            "createdAt": self.created_at,
        }
