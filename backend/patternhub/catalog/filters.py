"""
Catalog Filter Engine

Pure functions that turn (collection, FilterState, favorite ids) into the
visible, ordered list of patterns. Nothing here performs I/O, mutates its
inputs, or raises on malformed filter values: bad values either constrain
nothing or match nothing.
"""

import unicodedata
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Collection, FrozenSet, Iterable, List, Optional, Sequence

from patternhub.catalog.records import PatternCategory, PatternRecord


class SortKey(str, Enum):
    """
    Orderings offered by the catalog.

    POPULARITY is a placeholder: there is no popularity metric, it keeps the
    source collection order. RECENCY sorts by descending id, assuming ids are
    assigned monotonically at creation time.
    """
    POPULARITY = "popularity"
    ALPHABETICAL = "alphabetical"
    DIFFICULTY = "difficulty"
    RECENCY = "recency"

    @classmethod
    def parse(cls, value) -> "SortKey":
        if isinstance(value, SortKey):
            return value
        if not isinstance(value, str):
            return cls.POPULARITY
        key = value.strip().lower()
        key = _SORT_ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            return cls.POPULARITY


# Labels used by the original catalog UI
_SORT_ALIASES = {
    "popular": "popularity",
    "recent": "recency",
    "name": "alphabetical",
}


Predicate = Callable[[PatternRecord], bool]


def _toggled(current: FrozenSet[str], value: str) -> FrozenSet[str]:
    if value in current:
        return current - {value}
    return current | {value}


def _as_selection(value) -> FrozenSet[str]:
    if value is None:
        return frozenset()
    if isinstance(value, str):
        value = [value]
    try:
        return frozenset(str(v).strip() for v in value if v is not None and str(v).strip())
    except TypeError:
        return frozenset()


def _as_difficulty(value) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class FilterState:
    """
    The combined filter/search/sort selection of one catalog view.

    Every dimension is an explicit field. Taxonomy dimensions are sets: an
    empty set does not constrain, a non-empty set matches records having any
    of the selected slugs. Each action returns a new state with exactly one
    field replaced or toggled.
    """
    category: Optional[str] = None
    architectures: FrozenSet[str] = frozenset()
    languages: FrozenSet[str] = frozenset()
    frameworks: FrozenSet[str] = frozenset()
    difficulty: Optional[int] = None
    favorites_only: bool = False
    search_query: str = ""
    sort_key: SortKey = SortKey.POPULARITY

    # ---- single-field actions ----

    def with_category(self, category: Optional[str]) -> "FilterState":
        return replace(self, category=category or None)

    def toggle_architecture(self, slug: str) -> "FilterState":
        return replace(self, architectures=_toggled(self.architectures, slug))

    def toggle_language(self, slug: str) -> "FilterState":
        return replace(self, languages=_toggled(self.languages, slug))

    def toggle_framework(self, slug: str) -> "FilterState":
        return replace(self, frameworks=_toggled(self.frameworks, slug))

    def with_difficulty(self, difficulty: Optional[int]) -> "FilterState":
        return replace(self, difficulty=_as_difficulty(difficulty))

    def with_favorites_only(self, enabled: bool) -> "FilterState":
        return replace(self, favorites_only=bool(enabled))

    def with_search(self, query: str) -> "FilterState":
        return replace(self, search_query=query or "")

    def with_sort(self, sort_key) -> "FilterState":
        return replace(self, sort_key=SortKey.parse(sort_key))

    def cleared(self) -> "FilterState":
        return FilterState()

    @property
    def is_empty(self) -> bool:
        """True when no dimension constrains the result"""
        return (
            not self.category
            and not self.architectures
            and not self.languages
            and not self.frameworks
            and self.difficulty is None
            and not self.favorites_only
            and not (self.search_query or "").strip()
        )

    @classmethod
    def from_params(
        cls,
        category=None,
        architectures=None,
        languages=None,
        frameworks=None,
        difficulty=None,
        favorites_only=False,
        search=None,
        sort=None,
    ) -> "FilterState":
        """
        Build a state from loosely typed input such as query parameters.

        Absent or unparseable values become "no constraint". An unknown
        category string is kept as-is so that it matches nothing.
        """
        if isinstance(category, PatternCategory):
            category = category.value
        category = str(category).strip() if category is not None else ""

        return cls(
            category=category or None,
            architectures=_as_selection(architectures),
            languages=_as_selection(languages),
            frameworks=_as_selection(frameworks),
            difficulty=_as_difficulty(difficulty),
            favorites_only=bool(favorites_only),
            search_query=search if isinstance(search, str) else "",
            sort_key=SortKey.parse(sort),
        )


# ============================================================
# PREDICATE BUILDER
# ============================================================

def _category_matcher(category) -> Predicate:
    wanted = category.value if isinstance(category, PatternCategory) else category
    return lambda record: record.category == wanted


def _intersects(attribute: str, selection: FrozenSet[str]) -> Predicate:
    return lambda record: not selection.isdisjoint(getattr(record, attribute, ()) or ())


def _difficulty_matcher(difficulty: int) -> Predicate:
    return lambda record: record.difficulty == difficulty


def _favorite_matcher(favorite_ids: Iterable) -> Predicate:
    # Ids are compared by string form: REST payloads and ORM rows disagree on 1 vs "1"
    wanted = frozenset(str(i) for i in favorite_ids or ())
    return lambda record: str(record.id) in wanted


def _search_matcher(query: str) -> Predicate:
    def matches(record: PatternRecord) -> bool:
        if query in (record.name or "").lower():
            return True
        if query in (record.description or "").lower():
            return True
        return any(query in str(tag).lower() for tag in record.tags or ())

    return matches


def build_predicate(state: FilterState, favorite_ids: Collection = ()) -> Predicate:
    """
    Translate a FilterState into one predicate over PatternRecord.

    Active dimensions are ANDed; an unset dimension is vacuously true.
    favorite_ids is only consulted when state.favorites_only is set.
    """
    checks: List[Predicate] = []

    if state.category:
        checks.append(_category_matcher(state.category))
    if state.architectures:
        checks.append(_intersects("architectures", frozenset(state.architectures)))
    if state.languages:
        checks.append(_intersects("languages", frozenset(state.languages)))
    if state.frameworks:
        checks.append(_intersects("frameworks", frozenset(state.frameworks)))
    if state.difficulty is not None:
        checks.append(_difficulty_matcher(state.difficulty))
    if state.favorites_only:
        checks.append(_favorite_matcher(favorite_ids))

    query = (state.search_query or "").strip().lower()
    if query:
        checks.append(_search_matcher(query))

    def matches(record: PatternRecord) -> bool:
        return all(check(record) for check in checks)

    return matches


# ============================================================
# ORDERING
# ============================================================

def collation_key(text: str) -> str:
    """Accent- and case-insensitive key approximating a locale-aware compare"""
    decomposed = unicodedata.normalize("NFKD", text or "")
    stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
    return stripped.casefold()


def _difficulty_key(record: PatternRecord):
    difficulty = record.difficulty
    if isinstance(difficulty, int) and not isinstance(difficulty, bool):
        return (0, difficulty)
    # Malformed difficulty sorts last instead of failing the comparison
    return (1, 0)


def _recency_key(record: PatternRecord):
    record_id = record.id
    if isinstance(record_id, int) and not isinstance(record_id, bool):
        return (1, record_id, "")
    text = str(record_id)
    if text.isdigit():
        return (1, int(text), "")
    return (0, 0, text)


def sort_records(records: Sequence[PatternRecord], sort_key=SortKey.POPULARITY) -> List[PatternRecord]:
    """Return a new, stably sorted list. The input sequence is never touched."""
    key = SortKey.parse(sort_key)

    if key == SortKey.ALPHABETICAL:
        return sorted(records, key=lambda r: (collation_key(r.name), r.slug))
    if key == SortKey.DIFFICULTY:
        return sorted(records, key=lambda r: (_difficulty_key(r), collation_key(r.name)))
    if key == SortKey.RECENCY:
        # reverse=True keeps equal keys in source order
        return sorted(records, key=_recency_key, reverse=True)

    return list(records)


# ============================================================
# ENTRY POINT
# ============================================================

def filter_and_sort(
    records: Iterable[PatternRecord],
    state: Optional[FilterState] = None,
    favorite_ids: Collection = (),
) -> List[PatternRecord]:
    """
    Compute the visible, ordered subset of the catalog.

    Pure and deterministic: identical inputs give identical output, so the
    caller may memoize. Cheap enough to call on every search keystroke.
    """
    state = state or FilterState()
    predicate = build_predicate(state, favorite_ids)
    matched = [record for record in records if predicate(record)]
    return sort_records(matched, state.sort_key)


def resolve_related(record: PatternRecord, records: Iterable[PatternRecord]) -> List[PatternRecord]:
    """Resolve related_patterns slugs in order, omitting slugs not in the collection"""
    by_slug = {r.slug: r for r in records}
    return [by_slug[slug] for slug in record.related_patterns if slug in by_slug]
