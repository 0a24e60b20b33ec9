"""SQLAlchemy ORM models for persisted learner state.

Lesson and phase metadata are not stored: they are rediscovered from
the content tree on every request and joined to these rows by
``lesson_id``.
"""

import uuid
from datetime import date, datetime
from typing import Any

import uuid_utils as uuid7_lib
from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    Float,
    Index,
    Integer,
    String,
    Text,
    Uuid,
    func,
    text,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def _uuid7() -> uuid.UUID:
    """Generate a UUIDv7 (time-ordered) for use as default PK value."""
    return uuid.UUID(bytes=uuid7_lib.uuid7().bytes)


class Base(DeclarativeBase):
    """Base class for all ORM models."""


# ──────────────────────────────────────────────
# Progress
# ──────────────────────────────────────────────


class UserProgress(Base):
    """Completion record for one lesson.

    A row is created the first time a lesson is toggled; after that
    ``completed_at`` flips between a timestamp and NULL.
    """

    __tablename__ = "user_progress"
    __table_args__ = (
        CheckConstraint(
            "confidence_level IS NULL OR confidence_level BETWEEN 1 AND 5",
            name="ck_user_progress_confidence_range",
        ),
        Index(
            "ix_user_progress_completed_at",
            "completed_at",
            postgresql_where=text("completed_at IS NOT NULL"),
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=_uuid7)
    lesson_id: Mapped[str] = mapped_column(String(512), unique=True, index=True)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    confidence_level: Mapped[int | None] = mapped_column(Integer)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    @property
    def completed(self) -> bool:
        return self.completed_at is not None


class UserStats(Base):
    """Aggregate study statistics (single row)."""

    __tablename__ = "user_stats"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=_uuid7)
    current_streak: Mapped[int] = mapped_column(Integer, default=0)
    longest_streak: Mapped[int] = mapped_column(Integer, default=0)
    total_lessons_completed: Mapped[int] = mapped_column(Integer, default=0)
    total_hours_studied: Mapped[float] = mapped_column(Float, default=0)
    last_study_date: Mapped[date | None] = mapped_column(Date)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )


# ──────────────────────────────────────────────
# Notes
# ──────────────────────────────────────────────


class Note(Base):
    """Free-form annotation attached to a substring of a lesson."""

    __tablename__ = "notes"

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, lesson_id='{self.lesson_id}')>"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=_uuid7)
    lesson_id: Mapped[str] = mapped_column(String(512), index=True)
    selected_text: Mapped[str] = mapped_column(Text)
    note_content: Mapped[str] = mapped_column(Text)
    # Client-side selection details (DOM offsets etc.), stored verbatim.
    position_data: Mapped[dict[str, Any] | None] = mapped_column(JSONB)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
