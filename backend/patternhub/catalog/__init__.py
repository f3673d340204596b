# backend/patternhub/catalog/__init__.py
"""
Design Pattern Catalog

Provides the pattern data model, the filter/search/sort engine and an
in-memory registry over a loaded collection.
"""

from patternhub.catalog.records import (
    Architecture,
    Favorite,
    PatternCategory,
    PatternRecord,
)
from patternhub.catalog.filters import (
    FilterState,
    SortKey,
    build_predicate,
    filter_and_sort,
    resolve_related,
    sort_records,
)
from patternhub.catalog.registry import PatternRegistry

__all__ = [
    "Architecture",
    "Favorite",
    "PatternCategory",
    "PatternRecord",
    "FilterState",
    "SortKey",
    "build_predicate",
    "filter_and_sort",
    "resolve_related",
    "sort_records",
    "PatternRegistry",
]
