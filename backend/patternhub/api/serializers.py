from datetime import datetime
from typing import Any, Dict

from patternhub.catalog.records import Architecture as ArchitectureRecord
from patternhub.catalog.records import Favorite as FavoriteRecord
from patternhub.catalog.records import PatternRecord


PRIMITIVE_TYPES = (str, int, float, bool, type(None))


def _snake_to_camel(key: str) -> str:
    head, *rest = key.split("_")
    return head + "".join(part.title() for part in rest)


def serialize(obj: Any):
    """
    Serialize ORM rows and plain objects into JSON-compatible structures.
    Keys become camelCase to match the REST payloads.
    """

    if isinstance(obj, PRIMITIVE_TYPES):
        return obj

    if isinstance(obj, datetime):
        return obj.isoformat()

    if isinstance(obj, (list, tuple, set, frozenset)):
        items = sorted(obj) if isinstance(obj, (set, frozenset)) else obj
        return [serialize(item) for item in items]

    if isinstance(obj, dict):
        return {k: serialize(v) for k, v in obj.items()}

    if hasattr(obj, "to_dict"):
        return obj.to_dict()

    if hasattr(obj, "__table__"):
        return {
            _snake_to_camel(column.name): serialize(getattr(obj, column.name))
            for column in obj.__table__.columns
        }

    if hasattr(obj, "__dict__"):
        return {
            _snake_to_camel(key): serialize(value)
            for key, value in obj.__dict__.items()
            if not key.startswith("_")
        }

    return str(obj)


def pattern_to_record(row) -> PatternRecord:
    return PatternRecord.from_dict(_columns(row))


def architecture_to_record(row) -> ArchitectureRecord:
    return ArchitectureRecord.from_dict(_columns(row))


def favorite_to_record(row) -> FavoriteRecord:
    data = _columns(row)
    return FavoriteRecord(
        id=data["id"],
        pattern_id=data["pattern_id"],
        session_id=data["user_id"],
        created_at=serialize(data.get("created_at")),
    )


def _columns(row) -> Dict[str, Any]:
    return {column.name: getattr(row, column.name) for column in row.__table__.columns}
