"""Lesson completion toggling and aggregate study statistics.

Completion state is keyed by ``lesson_id`` only; titles and hours come
from the discovered content tree, so a lesson removed from disk keeps
its progress row but contributes no hours.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import UTC, datetime

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from study_tracker.models.content import (
    ContentFile,
    LessonProgress,
    Phase,
    PhaseProgress,
)
from study_tracker.notifications import templates
from study_tracker.notifications.notifier import Notifier
from study_tracker.storage.orm import UserProgress, UserStats
from study_tracker.storage.repositories import ProgressRepository, StatsRepository
from study_tracker.streaks import completion_dates, compute_streak

logger = structlog.get_logger()

MIN_CONFIDENCE = 1
MAX_CONFIDENCE = 5


@dataclass(frozen=True, slots=True)
class Milestone:
    achievement: str
    message: str


FIRST_TEN_LESSONS = Milestone(
    "First 10 Lessons Complete!",
    "You've completed your first 10 lessons! This shows real dedication to "
    "mastering system design and coding skills.",
)
WEEK_STREAK = Milestone(
    "Week-Long Streak Master!",
    "Seven days in a row! You're building the kind of consistent study "
    "habits that lead to FAANG success.",
)
MONTH_STREAK = Milestone(
    "Monthly Consistency Champion!",
    "Thirty days of consistent learning! You're in the top 1% of dedicated "
    "learners. FAANG companies will love this commitment!",
)


def milestone_for(total_completed: int, streak: int) -> Milestone | None:
    """At most one milestone per completion; lesson count wins over streaks."""
    if total_completed == 10:
        return FIRST_TEN_LESSONS
    if streak == 7:
        return WEEK_STREAK
    if streak == 30:
        return MONTH_STREAK
    return None


@dataclass(frozen=True, slots=True)
class ToggleResult:
    """Outcome of ``ProgressTracker.toggle``.

    Attributes:
        lesson_id: Toggled lesson.
        completed: State after the toggle.
        current_streak: Streak after recomputing stats.
        total_completed: Completed lessons after recomputing stats.
    """

    lesson_id: str
    completed: bool
    current_streak: int
    total_completed: int


def merge_progress(
    phases: Iterable[Phase], progress: Iterable[UserProgress]
) -> list[PhaseProgress]:
    """Attach completion flags to discovered lessons.

    Progress rows for lessons that are no longer discovered are
    ignored; lessons without a row are reported as not completed.
    """
    by_lesson = {row.lesson_id: row for row in progress}
    merged: list[PhaseProgress] = []
    for phase in phases:
        lessons: list[LessonProgress] = []
        for lesson in phase.lessons:
            row = by_lesson.get(lesson.id)
            lessons.append(
                LessonProgress(
                    **lesson.model_dump(),
                    completed=row is not None and row.completed,
                    confidence_level=row.confidence_level if row else None,
                )
            )
        merged.append(
            PhaseProgress(
                **phase.model_dump(exclude={"lessons", "completed"}),
                lessons=lessons,
                completed=sum(1 for lesson in lessons if lesson.completed),
            )
        )
    return merged


class ProgressTracker:
    """Toggles lesson completion and keeps ``UserStats`` in sync.

    Args:
        session: Request-scoped session; the tracker commits it.
        notifier: Used for best-effort emails after a commit.
        lessons: Discovered lessons by id, for titles and hours.
    """

    def __init__(
        self,
        session: AsyncSession,
        notifier: Notifier,
        lessons: Mapping[str, ContentFile],
    ) -> None:
        self._session = session
        self._notifier = notifier
        self._lessons = lessons
        self._progress = ProgressRepository(session)
        self._stats = StatsRepository(session)

    async def toggle(
        self, lesson_id: str, *, now: datetime | None = None
    ) -> ToggleResult:
        """Flip completion for *lesson_id* and recompute stats.

        A lesson seen for the first time is created as completed with
        the default confidence. Emails are sent only after the commit
        and only when the lesson became completed.
        """
        now = now or datetime.now(UTC)
        progress = await self._progress.get(lesson_id)
        if progress is None:
            progress = await self._progress.create(lesson_id, completed_at=now)
        elif progress.completed_at is None:
            progress.completed_at = now
        else:
            progress.completed_at = None
        completed = progress.completed_at is not None
        await self._session.flush()

        stats = await self._recompute_stats(now, record_study_day=completed)
        await self._session.commit()

        logger.info(
            "progress_toggled",
            lesson_id=lesson_id,
            completed=completed,
            streak=stats.current_streak,
            total_completed=stats.total_lessons_completed,
        )

        result = ToggleResult(
            lesson_id=lesson_id,
            completed=completed,
            current_streak=stats.current_streak,
            total_completed=stats.total_lessons_completed,
        )
        if completed:
            await self._send_completion_emails(result)
        return result

    async def set_confidence(self, lesson_id: str, level: int) -> UserProgress:
        """Record a 1-5 self-assessment without changing completion.

        Raises:
            ValueError: If *level* is outside 1..5.
        """
        if not MIN_CONFIDENCE <= level <= MAX_CONFIDENCE:
            raise ValueError(
                f"confidence_level must be between {MIN_CONFIDENCE} "
                f"and {MAX_CONFIDENCE}, got {level}"
            )
        progress = await self._progress.get(lesson_id)
        if progress is None:
            progress = await self._progress.create(
                lesson_id, completed_at=None, confidence_level=level
            )
        else:
            progress.confidence_level = level
        await self._session.commit()
        logger.info("confidence_set", lesson_id=lesson_id, level=level)
        return progress

    async def get_stats(self) -> UserStats:
        """Current stats, creating the zeroed row on first access."""
        stats = await self._stats.get_or_create()
        await self._session.commit()
        return stats

    async def _recompute_stats(
        self, now: datetime, *, record_study_day: bool
    ) -> UserStats:
        completed_rows = await self._progress.list_completed()
        stats = await self._stats.get_or_create()
        today = now.astimezone(UTC).date()

        streak = compute_streak(
            completion_dates(
                row.completed_at
                for row in completed_rows
                if row.completed_at is not None
            ),
            today,
        )
        stats.total_lessons_completed = len(completed_rows)
        stats.total_hours_studied = sum(
            self._hours(row.lesson_id) for row in completed_rows
        )
        stats.current_streak = streak
        stats.longest_streak = max(stats.longest_streak or 0, streak)
        if record_study_day:
            stats.last_study_date = today
        await self._session.flush()
        return stats

    def _hours(self, lesson_id: str) -> float:
        lesson = self._lessons.get(lesson_id)
        return lesson.estimated_hours if lesson is not None else 0

    async def _send_completion_emails(self, result: ToggleResult) -> None:
        lesson = self._lessons.get(result.lesson_id)
        if lesson is None:
            logger.warning("completion_email_skipped", lesson_id=result.lesson_id)
            return

        app_url = self._notifier.app_url
        await self._notifier.notify(
            templates.lesson_completed(lesson.title, result.current_streak, app_url)
        )
        milestone = milestone_for(result.total_completed, result.current_streak)
        if milestone is not None:
            await self._notifier.notify(
                templates.congratulations(
                    milestone.achievement, milestone.message, app_url
                )
            )
