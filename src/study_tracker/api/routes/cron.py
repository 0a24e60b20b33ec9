"""Scheduled notification triggers.

Routes
------
- ``GET /cron/streak-reminder``  -- Remind when the streak is at risk
- ``GET /cron/weekly-progress``  -- Send the 7-day digest
- ``GET /cron/test-email``       -- Send a sample lesson-completed email

Meant for an external scheduler (Vercel cron, systemd timer, ...).
The ARQ worker runs the same checks on its own schedule. When
``CRON_SECRET`` is set every route requires it as a bearer token.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from study_tracker.api.deps import (
    get_notifier,
    get_phases,
    get_session,
    verify_cron_secret,
)
from study_tracker.api.schemas import (
    EmailCheckResponse,
    StreakReminderResponse,
    WeeklyProgressResponse,
)
from study_tracker.content.discovery import all_lessons
from study_tracker.models.content import Phase
from study_tracker.notifications import templates
from study_tracker.notifications.digests import run_streak_reminder, run_weekly_progress
from study_tracker.notifications.notifier import Notifier

logger = structlog.get_logger()

router = APIRouter(
    prefix="/cron", tags=["cron"], dependencies=[Depends(verify_cron_secret)]
)

SessionDep = Annotated[AsyncSession, Depends(get_session)]
PhasesDep = Annotated[list[Phase], Depends(get_phases)]
NotifierDep = Annotated[Notifier, Depends(get_notifier)]

SAMPLE_LESSON_TITLE = "System Design Fundamentals"
SAMPLE_STREAK = 5


@router.get("/streak-reminder")
async def streak_reminder(
    session: SessionDep, notifier: NotifierDep
) -> StreakReminderResponse:
    outcome = await run_streak_reminder(
        session, notifier, today=datetime.now(UTC).date()
    )
    return StreakReminderResponse(
        message=outcome.message,
        streak_reminder_sent=outcome.sent,
        current_streak=outcome.streak,
    )


@router.get("/weekly-progress")
async def weekly_progress(
    session: SessionDep, notifier: NotifierDep, phases: PhasesDep
) -> WeeklyProgressResponse:
    """Digest of lessons completed in the last 7 days, sent only if any."""
    lesson_hours = {
        lesson.id: lesson.estimated_hours for lesson in all_lessons(phases)
    }
    outcome = await run_weekly_progress(
        session, notifier, lesson_hours=lesson_hours, now=datetime.now(UTC)
    )
    return WeeklyProgressResponse(
        message=outcome.message,
        lessons_this_week=outcome.lessons_this_week,
        hours_this_week=outcome.hours_this_week,
        email_sent=outcome.sent,
    )


@router.get("/test-email")
async def test_email(notifier: NotifierDep) -> EmailCheckResponse:
    """Send a sample email to check the Brevo setup end to end.

    Raises:
        HTTPException 503: Email is not configured.
        HTTPException 502: Brevo rejected the message.
    """
    if not notifier.enabled:
        raise HTTPException(status_code=503, detail="Email is not configured")

    result = await notifier.notify(
        templates.lesson_completed(
            SAMPLE_LESSON_TITLE, SAMPLE_STREAK, notifier.app_url
        )
    )
    if result is None or not result.success:
        error = result.error if result is not None else None
        logger.warning("test_email_failed", error=error)
        raise HTTPException(
            status_code=502, detail=f"Failed to send test email: {error}"
        )
    return EmailCheckResponse(
        message="Test email sent successfully!", message_id=result.message_id
    )
