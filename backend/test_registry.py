"""
Pattern registry and bundled catalog tests
Run with: pytest backend/test_registry.py
"""

import json

import pytest

from patternhub.catalog import FilterState, PatternCategory, PatternRecord, PatternRegistry, SortKey
from patternhub.catalog.seed_data import (
    ARCHITECTURE_CATALOG,
    PATTERN_CATALOG,
    count_patterns_by_architecture,
    load_catalog_file,
    register_all_patterns,
)


@pytest.fixture
def registry():
    registry = PatternRegistry()
    register_all_patterns(registry)
    return registry


def test_catalog_slugs_are_unique():
    slugs = [p.slug for p in PATTERN_CATALOG]
    assert len(slugs) == len(set(slugs))


def test_catalog_uses_known_categories_and_difficulties():
    categories = {c.value for c in PatternCategory}
    for pattern in PATTERN_CATALOG:
        assert pattern.category in categories
        assert 1 <= pattern.difficulty <= 3


def test_catalog_covers_every_category():
    assert {p.category for p in PATTERN_CATALOG} == {c.value for c in PatternCategory}


def test_architecture_slugs_referenced_by_patterns_exist():
    known = {a.slug for a in ARCHITECTURE_CATALOG}
    for pattern in PATTERN_CATALOG:
        assert pattern.architectures <= known, pattern.slug


def test_registry_keeps_source_order(registry):
    assert [p.slug for p in registry.list_all()] == [p.slug for p in PATTERN_CATALOG]
    assert len(registry) == len(PATTERN_CATALOG)


def test_lookup_by_slug(registry):
    assert registry.get("singleton").name == "Singleton"
    assert registry.get("nonexistent") is None
    assert registry.known_slugs() == {p.slug for p in PATTERN_CATALOG}


def test_get_by_category(registry):
    creational = registry.get_by_category(PatternCategory.CREATIONAL)
    assert [p.slug for p in creational] == ["singleton", "factory-method", "builder"]
    assert registry.get_by_category("functional") == []


def test_taxonomy_indexes(registry):
    assert all("python" in p.languages for p in registry.get_by_language("python"))
    assert all("spring" in p.frameworks for p in registry.get_by_framework("spring"))
    assert {p.slug for p in registry.get_by_architecture("cqrs")} == {"command", "cqrs"}
    assert registry.get_by_language("cobol") == []


def test_related_skips_dangling_slugs(registry):
    # observer lists "mediator", which the bundled catalog does not include
    assert [p.slug for p in registry.related("observer")] == ["command"]
    assert registry.related("missing") == []


def test_reregistering_replaces_record_and_indexes(registry):
    original = registry.get("adapter")
    updated = PatternRecord(
        id=original.id,
        slug="adapter",
        name="Adapter",
        category=PatternCategory.BEHAVIORAL.value,
        languages=frozenset({"go"}),
    )
    registry.register(updated)

    assert registry.get("adapter") is updated
    assert "adapter" not in [p.slug for p in registry.get_by_category("structural")]
    assert [p.slug for p in registry.get_by_language("go")] == ["adapter"]
    assert "adapter" not in [p.slug for p in registry.get_by_language("python")]


def test_registry_filter_delegates_to_engine(registry):
    state = FilterState(category="architectural", sort_key=SortKey.ALPHABETICAL)
    assert [p.slug for p in registry.filter(state)] == ["cqrs", "mvc", "repository"]


def test_count_patterns_by_architecture():
    counts = count_patterns_by_architecture(PATTERN_CATALOG)
    assert counts["cqrs"] == 2
    assert sum(counts.values()) == sum(len(p.architectures) for p in PATTERN_CATALOG)


def test_load_catalog_file(tmp_path):
    export = {
        "patterns": [
            {
                "slug": "proxy",
                "name": "Proxy",
                "description": "Placeholder for another object",
                "category": "structural",
                "difficulty": 2,
                "tags": ["surrogate"],
                "languages": ["java"],
                "architectures": [],
                "frameworks": [],
                "relatedPatterns": ["adapter"],
            }
        ],
        "architectures": [
            {"id": 7, "slug": "serverless", "name": "Serverless", "description": "FaaS", "patternCount": 3}
        ],
    }
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps(export), encoding="utf-8")

    patterns, architectures = load_catalog_file(path)

    assert patterns[0].id == "proxy"
    assert patterns[0].related_patterns == ("adapter",)
    assert patterns[0].languages == frozenset({"java"})
    assert architectures[0].pattern_count == 3


def test_record_dict_round_trip_uses_camel_case():
    record = PATTERN_CATALOG[0]
    data = record.to_dict()
    assert "relatedPatterns" in data
    assert PatternRecord.from_dict(data) == record
