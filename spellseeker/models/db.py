"""
SQLAlchemy ORM models for persistent storage.

Two tables back the translation service: curated phrase rules that
short-circuit translation, and a shared cache of earlier translations.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, Float, Integer, String, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class TranslationRuleDB(Base):
    """
    A curated natural-language pattern with a fixed grammar translation.

    Patterns are matched order-insensitively against normalized input.
    """

    __tablename__ = "translation_rules"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    pattern: Mapped[str] = mapped_column(String(500), index=True)
    grammar_query: Mapped[str] = mapped_column(Text)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)
    confidence: Mapped[float] = mapped_column(Float, default=0.9)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self) -> str:
        return f"<TranslationRuleDB(id={self.id}, pattern={self.pattern!r})>"


class CachedTranslationDB(Base):
    """
    A stored translation, shared across server instances.

    Rows are keyed by a hash of the cache key and expire after a fixed TTL.
    """

    __tablename__ = "cached_translations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    query_hash: Mapped[str] = mapped_column(String(64), unique=True, index=True)
    normalized_query: Mapped[str] = mapped_column(String(500))
    grammar_query: Mapped[str] = mapped_column(Text)
    explanation: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict)
    confidence: Mapped[float] = mapped_column(Float)
    show_affiliate: Mapped[bool] = mapped_column(Boolean, default=False)
    hit_count: Mapped[int] = mapped_column(Integer, default=1)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True)
    last_hit_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self) -> str:
        return (
            f"<CachedTranslationDB(hash={self.query_hash}, "
            f"query={self.normalized_query!r}, hits={self.hit_count})>"
        )
