"""CRUD repositories for database operations."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from study_tracker.storage.orm import Note, UserProgress, UserStats

DEFAULT_CONFIDENCE = 3


class ProgressRepository:
    """Repository for per-lesson completion records."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, lesson_id: str) -> UserProgress | None:
        """Get the progress row for a lesson, if one exists."""
        stmt = select(UserProgress).where(UserProgress.lesson_id == lesson_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(
        self,
        lesson_id: str,
        *,
        completed_at: datetime | None,
        confidence_level: int | None = DEFAULT_CONFIDENCE,
    ) -> UserProgress:
        """Insert a progress row for a lesson seen for the first time."""
        progress = UserProgress(
            lesson_id=lesson_id,
            completed_at=completed_at,
            confidence_level=confidence_level,
        )
        self._session.add(progress)
        await self._session.flush()
        return progress

    async def list_all(self) -> list[UserProgress]:
        """All progress rows (completed or not)."""
        result = await self._session.execute(select(UserProgress))
        return list(result.scalars().all())

    async def list_completed(
        self, *, since: datetime | None = None
    ) -> list[UserProgress]:
        """Rows with a completion timestamp, optionally at or after *since*.

        Args:
            since: Lower bound on ``completed_at`` (inclusive).

        Returns:
            Completed rows, most recent first.
        """
        stmt = select(UserProgress).where(UserProgress.completed_at.is_not(None))
        if since is not None:
            stmt = stmt.where(UserProgress.completed_at >= since)
        stmt = stmt.order_by(UserProgress.completed_at.desc())
        result = await self._session.execute(stmt)
        return list(result.scalars().all())


class StatsRepository:
    """Repository for the single UserStats row."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self) -> UserStats | None:
        result = await self._session.execute(select(UserStats).limit(1))
        return result.scalar_one_or_none()

    async def get_or_create(self) -> UserStats:
        """Return the stats row, inserting a zeroed one on first use."""
        stats = await self.get()
        if stats is not None:
            return stats
        stats = UserStats(
            current_streak=0,
            longest_streak=0,
            total_lessons_completed=0,
            total_hours_studied=0,
        )
        self._session.add(stats)
        await self._session.flush()
        return stats


class NoteRepository:
    """Repository for lesson notes."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_for_lesson(self, lesson_id: str) -> list[Note]:
        """Notes of a lesson, newest first."""
        stmt = (
            select(Note)
            .where(Note.lesson_id == lesson_id)
            .order_by(Note.created_at.desc())
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_id(self, note_id: uuid.UUID) -> Note | None:
        return await self._session.get(Note, note_id)

    async def create(
        self,
        *,
        lesson_id: str,
        selected_text: str,
        note_content: str,
        position_data: dict[str, Any] | None = None,
    ) -> Note:
        """Create a note anchored to *selected_text* of a lesson."""
        note = Note(
            lesson_id=lesson_id,
            selected_text=selected_text,
            note_content=note_content,
            position_data=position_data,
        )
        self._session.add(note)
        await self._session.flush()
        await self._session.refresh(note)
        return note

    async def update_content(
        self, note_id: uuid.UUID, note_content: str
    ) -> Note | None:
        """Replace a note's body. Returns None if the note does not exist."""
        note = await self.get_by_id(note_id)
        if note is None:
            return None
        note.note_content = note_content
        await self._session.flush()
        await self._session.refresh(note)
        return note

    async def delete(self, note_id: uuid.UUID) -> bool:
        """Delete a note. Returns False if it did not exist."""
        stmt = delete(Note).where(Note.id == note_id).returning(Note.id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none() is not None
