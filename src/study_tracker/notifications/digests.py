"""Periodic notification checks: streak reminders and weekly digests.

Both run from the ``/cron/*`` routes and from the ARQ worker's cron
schedule. Each performs a few reads and at most one email send.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime, timedelta

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from study_tracker.notifications import templates
from study_tracker.notifications.notifier import Notifier
from study_tracker.storage.repositories import ProgressRepository, StatsRepository
from study_tracker.streaks import days_since

logger = structlog.get_logger()

WEEKLY_WINDOW = timedelta(days=7)


@dataclass(frozen=True)
class StreakReminderOutcome:
    message: str
    sent: bool = False
    streak: int = 0


@dataclass(frozen=True)
class WeeklyProgressOutcome:
    message: str
    lessons_this_week: int = 0
    hours_this_week: float = 0
    sent: bool = False


async def run_streak_reminder(
    session: AsyncSession,
    notifier: Notifier,
    *,
    today: date,
) -> StreakReminderOutcome:
    """Remind the learner when an active streak is at risk.

    A reminder goes out when the streak is positive and nothing has
    been studied yet today.
    """
    stats = await StatsRepository(session).get()
    if stats is None:
        return StreakReminderOutcome(message="No user stats found")

    idle_days = days_since(stats.last_study_date, today)
    at_risk = idle_days is not None and idle_days >= 1 and stats.current_streak > 0
    sent = False
    if at_risk:
        result = await notifier.notify(
            templates.streak_reminder(stats.current_streak, notifier.app_url)
        )
        sent = result is not None and result.success
        logger.info("streak_reminder_checked", streak=stats.current_streak, sent=sent)

    return StreakReminderOutcome(
        message="Streak reminder check completed",
        sent=sent,
        streak=stats.current_streak,
    )


async def run_weekly_progress(
    session: AsyncSession,
    notifier: Notifier,
    *,
    lesson_hours: Mapping[str, float],
    now: datetime,
) -> WeeklyProgressOutcome:
    """Send a digest of the last seven days if anything was completed.

    Args:
        lesson_hours: ``lesson_id -> estimated_hours`` from discovery;
            completions of lessons no longer on disk add no hours.
        now: End of the reporting window.
    """
    stats = await StatsRepository(session).get()
    if stats is None:
        return WeeklyProgressOutcome(message="No user stats found")

    completed = await ProgressRepository(session).list_completed(
        since=now - WEEKLY_WINDOW
    )
    lessons = len(completed)
    hours = sum(lesson_hours.get(p.lesson_id, 0) for p in completed)

    sent = False
    if lessons > 0:
        result = await notifier.notify(
            templates.weekly_progress(
                lessons, hours, stats.current_streak, notifier.app_url
            )
        )
        sent = result is not None and result.success
        logger.info("weekly_progress_checked", lessons=lessons, hours=hours, sent=sent)

    return WeeklyProgressOutcome(
        message="Weekly progress check completed",
        lessons_this_week=lessons,
        hours_this_week=hours,
        sent=sent,
    )
