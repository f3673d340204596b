from sqlalchemy import Column, DateTime, ForeignKey, Integer, JSON, Text, UniqueConstraint
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class Pattern(Base):
    __tablename__ = "patterns"

    id = Column(Integer, primary_key=True)
    name = Column(Text, nullable=False)
    slug = Column(Text, nullable=False, unique=True)
    description = Column(Text, nullable=False)
    category = Column(Text, nullable=False, index=True)  # creational, structural, behavioral, architectural
    difficulty = Column(Integer, nullable=False)  # 1-3
    icon = Column(Text, nullable=False, default="")
    color = Column(Text, nullable=False, default="")
    # JSON lists so SQLite and PostgreSQL share one schema
    tags = Column(JSON, nullable=False, default=list)
    architectures = Column(JSON, nullable=False, default=list)
    languages = Column(JSON, nullable=False, default=list)
    frameworks = Column(JSON, nullable=False, default=list)
    content = Column(Text, nullable=False, default="")
    examples = Column(JSON, nullable=False, default=dict)  # language -> code
    related_patterns = Column(JSON, nullable=False, default=list)


class Architecture(Base):
    __tablename__ = "architectures"

    id = Column(Integer, primary_key=True)
    name = Column(Text, nullable=False)
    slug = Column(Text, nullable=False, unique=True)
    description = Column(Text, nullable=False)
    icon = Column(Text, nullable=False, default="")
    color = Column(Text, nullable=False, default="")
    pattern_count = Column(Integer, nullable=False, default=0)


class Favorite(Base):
    __tablename__ = "favorites"
    __table_args__ = (UniqueConstraint("pattern_id", "user_id", name="uq_favorite_pattern_user"),)

    id = Column(Integer, primary_key=True)
    pattern_id = Column(Integer, ForeignKey("patterns.id"), nullable=False)
    user_id = Column(Text, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class GeneratedSnippet(Base):
    __tablename__ = "generated_snippets"

    id = Column(Integer, primary_key=True)
    pattern_id = Column(Integer, ForeignKey("patterns.id"), nullable=False, index=True)
    language = Column(Text, nullable=False)
    context = Column(Text, nullable=False)
    code = Column(Text, nullable=False)
    explanation = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
