# backend/patternhub/catalog/registry.py
"""
Pattern Registry - In-memory index over a loaded pattern collection
"""

from typing import Collection, Dict, Iterable, List, Optional

from patternhub.catalog.filters import FilterState, filter_and_sort, resolve_related
from patternhub.catalog.records import PatternCategory, PatternRecord


class PatternRegistry:
    """
    Central index for catalog patterns

    Keeps records in registration (source) order and provides lookup by
    slug plus taxonomy indexes for the category, architecture, language
    and framework pages.
    """

    def __init__(self, records: Optional[Iterable[PatternRecord]] = None):
        self.patterns: Dict[str, PatternRecord] = {}
        self._category_index: Dict[str, List[str]] = {cat.value: [] for cat in PatternCategory}
        self._architecture_index: Dict[str, List[str]] = {}
        self._language_index: Dict[str, List[str]] = {}
        self._framework_index: Dict[str, List[str]] = {}

        for record in records or ():
            self.register(record)

    def register(self, pattern: PatternRecord) -> None:
        """Register a pattern; re-registering a slug replaces the earlier record"""
        if pattern.slug in self.patterns:
            self._unindex(self.patterns[pattern.slug])
        self.patterns[pattern.slug] = pattern

        self._category_index.setdefault(pattern.category, []).append(pattern.slug)
        for slug in sorted(pattern.architectures):
            self._architecture_index.setdefault(slug, []).append(pattern.slug)
        for slug in sorted(pattern.languages):
            self._language_index.setdefault(slug, []).append(pattern.slug)
        for slug in sorted(pattern.frameworks):
            self._framework_index.setdefault(slug, []).append(pattern.slug)

    def _unindex(self, pattern: PatternRecord) -> None:
        indexes = [
            (self._category_index, [pattern.category]),
            (self._architecture_index, pattern.architectures),
            (self._language_index, pattern.languages),
            (self._framework_index, pattern.frameworks),
        ]
        for index, keys in indexes:
            for key in keys:
                if pattern.slug in index.get(key, []):
                    index[key].remove(pattern.slug)

    def get(self, slug: str) -> Optional[PatternRecord]:
        """Get a pattern by slug"""
        return self.patterns.get(slug)

    def _lookup(self, index: Dict[str, List[str]], key: str) -> List[PatternRecord]:
        return [self.patterns[slug] for slug in index.get(key, []) if slug in self.patterns]

    def get_by_category(self, category) -> List[PatternRecord]:
        """Get all patterns in a category"""
        key = category.value if isinstance(category, PatternCategory) else category
        return self._lookup(self._category_index, key)

    def get_by_architecture(self, slug: str) -> List[PatternRecord]:
        return self._lookup(self._architecture_index, slug)

    def get_by_language(self, slug: str) -> List[PatternRecord]:
        return self._lookup(self._language_index, slug)

    def get_by_framework(self, slug: str) -> List[PatternRecord]:
        return self._lookup(self._framework_index, slug)

    def related(self, slug: str) -> List[PatternRecord]:
        """Resolved related patterns of a slug; dangling references are skipped"""
        pattern = self.get(slug)
        if pattern is None:
            return []
        return resolve_related(pattern, self.patterns.values())

    def known_slugs(self) -> set:
        return set(self.patterns)

    def list_all(self) -> List[PatternRecord]:
        """List all registered patterns in source order"""
        return list(self.patterns.values())

    def filter(self, state: FilterState, favorite_ids: Collection = ()) -> List[PatternRecord]:
        return filter_and_sort(self.list_all(), state, favorite_ids)

    def __len__(self) -> int:
        return len(self.patterns)
