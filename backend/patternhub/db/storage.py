"""
Relational storage for patterns, architectures, favorites and generated snippets.
"""

from typing import List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from patternhub.catalog.records import Architecture as ArchitectureRecord
from patternhub.catalog.records import PatternRecord
from patternhub.db.models import Architecture, Favorite, GeneratedSnippet, Pattern
from patternhub.errors import TransportError, ValidationError


def _pattern_row(record: PatternRecord) -> Pattern:
    return Pattern(
        name=record.name,
        slug=record.slug,
        description=record.description,
        category=record.category,
        difficulty=record.difficulty,
        icon=record.icon,
        color=record.color,
        tags=list(record.tags),
        architectures=sorted(record.architectures),
        languages=sorted(record.languages),
        frameworks=sorted(record.frameworks),
        content=record.content,
        examples=dict(record.examples),
        related_patterns=list(record.related_patterns),
    )


def _architecture_row(record: ArchitectureRecord) -> Architecture:
    return Architecture(
        name=record.name,
        slug=record.slug,
        description=record.description,
        icon=record.icon,
        color=record.color,
        pattern_count=record.pattern_count,
    )


class DatabaseStorage:
    """
    Storage operations over one SQLAlchemy session.

    Database failures are rolled back and re-raised as TransportError so
    callers never see driver-specific exceptions.
    """

    def __init__(self, session: Session):
        self.session = session

    def _fail(self, action: str, exc: Exception):
        self.session.rollback()
        print(f"[STORAGE] {action} failed: {exc}")
        raise TransportError(f"{action} failed") from exc

    # ---- Pattern operations ----

    def get_all_patterns(self) -> List[Pattern]:
        try:
            return self.session.query(Pattern).order_by(Pattern.id).all()
        except SQLAlchemyError as e:
            self._fail("Fetching patterns", e)

    def get_pattern_by_slug(self, slug: str) -> Optional[Pattern]:
        try:
            return self.session.query(Pattern).filter(Pattern.slug == slug).first()
        except SQLAlchemyError as e:
            self._fail("Fetching pattern", e)

    def get_pattern(self, pattern_id: int) -> Optional[Pattern]:
        try:
            return self.session.get(Pattern, pattern_id)
        except SQLAlchemyError as e:
            self._fail("Fetching pattern", e)

    def get_patterns_by_category(self, category: str) -> List[Pattern]:
        try:
            return (
                self.session.query(Pattern)
                .filter(Pattern.category == category)
                .order_by(Pattern.id)
                .all()
            )
        except SQLAlchemyError as e:
            self._fail("Fetching patterns by category", e)

    def create_pattern(self, record: PatternRecord) -> Pattern:
        row = _pattern_row(record)
        try:
            self.session.add(row)
            self.session.commit()
            self.session.refresh(row)
            return row
        except SQLAlchemyError as e:
            self._fail(f"Creating pattern '{record.slug}'", e)

    # ---- Architecture operations ----

    def get_all_architectures(self) -> List[Architecture]:
        try:
            return self.session.query(Architecture).order_by(Architecture.id).all()
        except SQLAlchemyError as e:
            self._fail("Fetching architectures", e)

    def get_architecture_by_slug(self, slug: str) -> Optional[Architecture]:
        try:
            return self.session.query(Architecture).filter(Architecture.slug == slug).first()
        except SQLAlchemyError as e:
            self._fail("Fetching architecture", e)

    def create_architecture(self, record: ArchitectureRecord) -> Architecture:
        row = _architecture_row(record)
        try:
            self.session.add(row)
            self.session.commit()
            self.session.refresh(row)
            return row
        except SQLAlchemyError as e:
            self._fail(f"Creating architecture '{record.slug}'", e)

    # ---- Favorites operations ----

    def get_favorites(self, user_id: str) -> List[Favorite]:
        if not user_id:
            raise ValidationError("userId is required")
        try:
            return (
                self.session.query(Favorite)
                .filter(Favorite.user_id == user_id)
                .order_by(Favorite.id)
                .all()
            )
        except SQLAlchemyError as e:
            self._fail("Fetching favorites", e)

    def _find_favorite(self, pattern_id: int, user_id: str) -> Optional[Favorite]:
        return (
            self.session.query(Favorite)
            .filter(Favorite.pattern_id == pattern_id, Favorite.user_id == user_id)
            .first()
        )

    def add_favorite(self, pattern_id: int, user_id: str) -> Favorite:
        """Add a favorite; adding one that already exists returns the existing row"""
        if not pattern_id or not user_id:
            raise ValidationError("patternId and userId are required")
        try:
            existing = self._find_favorite(pattern_id, user_id)
            if existing is not None:
                return existing

            favorite = Favorite(pattern_id=pattern_id, user_id=user_id)
            self.session.add(favorite)
            self.session.commit()
            self.session.refresh(favorite)
            return favorite
        except IntegrityError as e:
            # Lost a race against a concurrent insert of the same pair
            self.session.rollback()
            existing = self._find_favorite(pattern_id, user_id)
            if existing is None:
                self._fail("Adding favorite", e)
            return existing
        except SQLAlchemyError as e:
            self._fail("Adding favorite", e)

    def remove_favorite(self, pattern_id: int, user_id: str) -> None:
        """Remove a favorite; removing one that does not exist is a no-op"""
        if not user_id:
            raise ValidationError("userId is required")
        try:
            (
                self.session.query(Favorite)
                .filter(Favorite.pattern_id == pattern_id, Favorite.user_id == user_id)
                .delete(synchronize_session=False)
            )
            self.session.commit()
        except SQLAlchemyError as e:
            self._fail("Removing favorite", e)

    # ---- Generated snippets operations ----

    def save_generated_snippet(
        self,
        pattern_id: int,
        language: str,
        context: str,
        code: str,
        explanation: str,
    ) -> GeneratedSnippet:
        snippet = GeneratedSnippet(
            pattern_id=pattern_id,
            language=language,
            context=context,
            code=code,
            explanation=explanation,
        )
        try:
            self.session.add(snippet)
            self.session.commit()
            self.session.refresh(snippet)
            return snippet
        except SQLAlchemyError as e:
            self._fail("Saving generated snippet", e)

    def get_generated_snippets(self, pattern_id: int) -> List[GeneratedSnippet]:
        try:
            return (
                self.session.query(GeneratedSnippet)
                .filter(GeneratedSnippet.pattern_id == pattern_id)
                .order_by(GeneratedSnippet.id)
                .all()
            )
        except SQLAlchemyError as e:
            self._fail("Fetching generated snippets", e)

    # ---- Seeding ----

    def clear_catalog(self) -> None:
        """Delete every catalog row, including favorites and snippets that reference them"""
        try:
            self.session.query(GeneratedSnippet).delete(synchronize_session=False)
            self.session.query(Favorite).delete(synchronize_session=False)
            self.session.query(Pattern).delete(synchronize_session=False)
            self.session.query(Architecture).delete(synchronize_session=False)
            self.session.commit()
        except SQLAlchemyError as e:
            self._fail("Clearing catalog", e)

    def count_patterns(self) -> int:
        try:
            return self.session.query(Pattern).count()
        except SQLAlchemyError as e:
            self._fail("Counting patterns", e)
