"""
Seed the catalog tables.

Usage:
    python -m patternhub.seed                  # bundled catalog, replaces existing rows
    python -m patternhub.seed --file data.json # exported catalog
"""

import argparse
import sys
from dataclasses import replace
from typing import List, Optional

from patternhub.catalog.records import Architecture, PatternRecord
from patternhub.catalog.seed_data import (
    ARCHITECTURE_CATALOG,
    count_patterns_by_architecture,
    load_catalog_file,
    register_all_patterns,
)
from patternhub.catalog.registry import PatternRegistry
from patternhub.db.storage import DatabaseStorage


def seed_database(
    storage: DatabaseStorage,
    patterns: Optional[List[PatternRecord]] = None,
    architectures: Optional[List[Architecture]] = None,
    reset: bool = True,
) -> None:
    # Duplicate slugs collapse to the last record, keeping the first position
    if patterns is None:
        registry = PatternRegistry()
        register_all_patterns(registry)
    else:
        registry = PatternRegistry(patterns)
    patterns = registry.list_all()
    architectures = ARCHITECTURE_CATALOG if architectures is None else architectures

    if reset:
        storage.clear_catalog()

    counts = count_patterns_by_architecture(patterns)
    for architecture in architectures:
        storage.create_architecture(
            replace(architecture, pattern_count=counts.get(architecture.slug, architecture.pattern_count))
        )
    print(f"[SEED] Inserted {len(architectures)} architectures")

    # Ids are assigned by the database in insertion order, which keeps catalog order
    for pattern in patterns:
        storage.create_pattern(pattern)
    print(f"[SEED] Inserted {len(patterns)} patterns")


def seed_if_empty(storage: DatabaseStorage) -> bool:
    if storage.count_patterns() > 0:
        return False
    seed_database(storage, reset=False)
    return True


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Seed the PatternHub catalog")
    parser.add_argument("--file", help="JSON export with 'patterns' and 'architectures' lists")
    parser.add_argument("--keep", action="store_true", help="do not delete existing catalog rows first")
    args = parser.parse_args(argv)

    from patternhub.db.session import SessionLocal, init_db

    patterns = architectures = None
    if args.file:
        patterns, architectures = load_catalog_file(args.file)

    init_db()
    session = SessionLocal()
    try:
        seed_database(DatabaseStorage(session), patterns, architectures, reset=not args.keep)
    except Exception as e:
        print(f"[SEED] Error seeding database: {e}")
        return 1
    finally:
        session.close()

    print("[SEED] Database seeded successfully")
    return 0


if __name__ == "__main__":
    sys.exit(main())
