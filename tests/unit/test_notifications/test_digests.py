"""Tests for the streak reminder and weekly digest checks."""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta
from unittest.mock import AsyncMock, patch

import pytest

from study_tracker.notifications.digests import (
    WEEKLY_WINDOW,
    run_streak_reminder,
    run_weekly_progress,
)
from study_tracker.notifications.email import EmailResult
from study_tracker.notifications.notifier import Notifier
from study_tracker.storage.orm import UserProgress, UserStats

TODAY = date(2024, 5, 10)
NOW = datetime(2024, 5, 10, 9, 0, tzinfo=UTC)


def make_stats(streak: int, last: date | None) -> UserStats:
    return UserStats(
        current_streak=streak,
        longest_streak=streak,
        total_lessons_completed=streak,
        total_hours_studied=0,
        last_study_date=last,
    )


@pytest.fixture()
def mailer() -> AsyncMock:
    mailer = AsyncMock()
    mailer.send.return_value = EmailResult(success=True, message_id="m1")
    return mailer


@pytest.fixture()
def notifier(mailer: AsyncMock) -> Notifier:
    return Notifier(mailer, "me@example.com", "http://app")


def patch_stats(stats: UserStats | None):  # type: ignore[no-untyped-def]
    repo = AsyncMock()
    repo.get.return_value = stats
    return patch(
        "study_tracker.notifications.digests.StatsRepository", return_value=repo
    )


def patch_progress(rows: list[UserProgress]):  # type: ignore[no-untyped-def]
    repo = AsyncMock()
    repo.list_completed.return_value = rows
    return patch(
        "study_tracker.notifications.digests.ProgressRepository", return_value=repo
    )


class TestStreakReminder:
    async def test_no_stats(self, notifier: Notifier, mailer: AsyncMock) -> None:
        with patch_stats(None):
            outcome = await run_streak_reminder(AsyncMock(), notifier, today=TODAY)
        assert outcome.message == "No user stats found"
        assert outcome.sent is False
        mailer.send.assert_not_awaited()

    async def test_sent_when_idle_today(
        self, notifier: Notifier, mailer: AsyncMock
    ) -> None:
        stats = make_stats(5, TODAY - timedelta(days=1))
        with patch_stats(stats):
            outcome = await run_streak_reminder(AsyncMock(), notifier, today=TODAY)

        assert outcome.sent is True
        assert outcome.streak == 5
        assert outcome.message == "Streak reminder check completed"
        message = mailer.send.await_args.args[1]
        assert message.subject == "🔥 Don't break your 5-day streak!"

    async def test_not_sent_after_studying_today(
        self, notifier: Notifier, mailer: AsyncMock
    ) -> None:
        with patch_stats(make_stats(5, TODAY)):
            outcome = await run_streak_reminder(AsyncMock(), notifier, today=TODAY)
        assert outcome.sent is False
        mailer.send.assert_not_awaited()

    async def test_not_sent_without_streak(
        self, notifier: Notifier, mailer: AsyncMock
    ) -> None:
        with patch_stats(make_stats(0, TODAY - timedelta(days=3))):
            outcome = await run_streak_reminder(AsyncMock(), notifier, today=TODAY)
        assert outcome.sent is False
        mailer.send.assert_not_awaited()

    async def test_not_sent_when_never_studied(
        self, notifier: Notifier, mailer: AsyncMock
    ) -> None:
        with patch_stats(make_stats(2, None)):
            outcome = await run_streak_reminder(AsyncMock(), notifier, today=TODAY)
        assert outcome.sent is False

    async def test_failed_delivery_not_reported_as_sent(
        self, notifier: Notifier, mailer: AsyncMock
    ) -> None:
        mailer.send.return_value = EmailResult(success=False, error="HTTP 500")
        with patch_stats(make_stats(5, TODAY - timedelta(days=1))):
            outcome = await run_streak_reminder(AsyncMock(), notifier, today=TODAY)
        assert outcome.sent is False

    async def test_email_disabled(self) -> None:
        notifier = Notifier(None, None, "http://app")
        with patch_stats(make_stats(5, TODAY - timedelta(days=1))):
            outcome = await run_streak_reminder(AsyncMock(), notifier, today=TODAY)
        assert outcome.sent is False
        assert outcome.streak == 5


class TestWeeklyProgress:
    async def test_no_stats(self, notifier: Notifier) -> None:
        with patch_stats(None), patch_progress([]):
            outcome = await run_weekly_progress(
                AsyncMock(), notifier, lesson_hours={}, now=NOW
            )
        assert outcome.message == "No user stats found"
        assert outcome.lessons_this_week == 0

    async def test_digest_sent(self, notifier: Notifier, mailer: AsyncMock) -> None:
        rows = [
            UserProgress(lesson_id="a", completed_at=NOW - timedelta(days=1)),
            UserProgress(lesson_id="b", completed_at=NOW - timedelta(days=2)),
            UserProgress(lesson_id="gone", completed_at=NOW - timedelta(days=3)),
        ]
        with patch_stats(make_stats(2, TODAY)), patch_progress(rows) as progress:
            outcome = await run_weekly_progress(
                AsyncMock(),
                notifier,
                lesson_hours={"a": 1.5, "b": 3},
                now=NOW,
            )

        assert outcome.lessons_this_week == 3
        assert outcome.hours_this_week == 4.5
        assert outcome.sent is True
        assert outcome.message == "Weekly progress check completed"
        progress.return_value.list_completed.assert_awaited_once_with(
            since=NOW - WEEKLY_WINDOW
        )
        message = mailer.send.await_args.args[1]
        assert ">4.5h</div>" in message.html

    async def test_quiet_week(self, notifier: Notifier, mailer: AsyncMock) -> None:
        with patch_stats(make_stats(0, None)), patch_progress([]):
            outcome = await run_weekly_progress(
                AsyncMock(), notifier, lesson_hours={}, now=NOW
            )
        assert outcome.lessons_this_week == 0
        assert outcome.sent is False
        mailer.send.assert_not_awaited()
