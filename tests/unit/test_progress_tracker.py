"""Tests for ProgressTracker, milestones and progress merging."""

from __future__ import annotations

from datetime import UTC, date, datetime, timedelta
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from study_tracker.content.lesson_ids import lesson_id_for_path
from study_tracker.models.content import ContentFile, Phase
from study_tracker.notifications.email import EmailResult
from study_tracker.notifications.notifier import Notifier
from study_tracker.progress_tracker import (
    FIRST_TEN_LESSONS,
    MONTH_STREAK,
    WEEK_STREAK,
    ProgressTracker,
    merge_progress,
    milestone_for,
)
from study_tracker.storage.orm import UserProgress, UserStats

NOW = datetime(2024, 5, 10, 12, 0, tzinfo=UTC)


def make_lesson(path: str, title: str, hours: float = 2) -> ContentFile:
    return ContentFile(
        id=lesson_id_for_path(path),
        title=title,
        estimated_hours=hours,
        order_index=1,
        file_path=path,
        full_path=f"/content/{path}",
        phase_id="phase-1",
        phase_name="Basics",
        week_start=1,
        week_end=4,
    )


class FakeProgressRepository:
    """In-memory stand-in for ProgressRepository."""

    def __init__(self, rows: dict[str, UserProgress]) -> None:
        self.rows = rows

    async def get(self, lesson_id: str) -> UserProgress | None:
        return self.rows.get(lesson_id)

    async def create(
        self,
        lesson_id: str,
        *,
        completed_at: datetime | None,
        confidence_level: int | None = 3,
    ) -> UserProgress:
        row = UserProgress(
            lesson_id=lesson_id,
            completed_at=completed_at,
            confidence_level=confidence_level,
        )
        self.rows[lesson_id] = row
        return row

    async def list_completed(self, *, since: datetime | None = None) -> list[Any]:
        return [row for row in self.rows.values() if row.completed_at is not None]


class FakeStatsRepository:
    def __init__(self, holder: dict[str, UserStats]) -> None:
        self.holder = holder

    async def get_or_create(self) -> UserStats:
        if "stats" not in self.holder:
            self.holder["stats"] = UserStats(
                current_streak=0,
                longest_streak=0,
                total_lessons_completed=0,
                total_hours_studied=0,
            )
        return self.holder["stats"]


@pytest.fixture()
def rows() -> dict[str, UserProgress]:
    return {}


@pytest.fixture()
def stats_holder() -> dict[str, UserStats]:
    return {}


@pytest.fixture()
def mock_session() -> AsyncMock:
    session = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture()
def mailer() -> AsyncMock:
    mailer = AsyncMock()
    mailer.send.return_value = EmailResult(success=True, message_id="m-1")
    return mailer


@pytest.fixture()
def lessons() -> dict[str, ContentFile]:
    items = [
        make_lesson("Phase 1 - Basics/01-intro/main.md", "Intro", hours=1.5),
        make_lesson("Phase 1 - Basics/02-arrays/main.md", "Arrays", hours=3),
    ]
    return {lesson.id: lesson for lesson in items}


@pytest.fixture()
def tracker(
    mock_session: AsyncMock,
    mailer: AsyncMock,
    lessons: dict[str, ContentFile],
    rows: dict[str, UserProgress],
    stats_holder: dict[str, UserStats],
) -> Any:
    notifier = Notifier(mailer, "me@example.com", "https://study.example.com")
    with (
        patch(
            "study_tracker.progress_tracker.ProgressRepository",
            lambda session: FakeProgressRepository(rows),
        ),
        patch(
            "study_tracker.progress_tracker.StatsRepository",
            lambda session: FakeStatsRepository(stats_holder),
        ),
    ):
        yield ProgressTracker(mock_session, notifier, lessons)


def intro_id() -> str:
    return lesson_id_for_path("Phase 1 - Basics/01-intro/main.md")


class TestToggle:
    async def test_first_toggle_completes(
        self,
        tracker: ProgressTracker,
        rows: dict[str, UserProgress],
        stats_holder: dict[str, UserStats],
        mock_session: AsyncMock,
    ) -> None:
        result = await tracker.toggle(intro_id(), now=NOW)

        assert result.completed is True
        assert result.current_streak == 1
        assert result.total_completed == 1
        row = rows[intro_id()]
        assert row.completed_at == NOW
        assert row.confidence_level == 3

        stats = stats_holder["stats"]
        assert stats.total_lessons_completed == 1
        assert stats.total_hours_studied == 1.5
        assert stats.longest_streak == 1
        assert stats.last_study_date == date(2024, 5, 10)
        mock_session.commit.assert_awaited_once()

    async def test_second_toggle_uncompletes(
        self,
        tracker: ProgressTracker,
        rows: dict[str, UserProgress],
        stats_holder: dict[str, UserStats],
    ) -> None:
        await tracker.toggle(intro_id(), now=NOW)
        result = await tracker.toggle(intro_id(), now=NOW + timedelta(minutes=5))

        assert result.completed is False
        assert result.total_completed == 0
        assert result.current_streak == 0
        assert rows[intro_id()].completed_at is None
        stats = stats_holder["stats"]
        assert stats.total_hours_studied == 0
        assert stats.longest_streak == 1
        # uncompleting is not studying
        assert stats.last_study_date == date(2024, 5, 10)

    async def test_third_toggle_completes_again(
        self, tracker: ProgressTracker, rows: dict[str, UserProgress]
    ) -> None:
        for _ in range(3):
            result = await tracker.toggle(intro_id(), now=NOW)
        assert result.completed is True
        assert rows[intro_id()].completed_at == NOW

    async def test_streak_counts_previous_days(
        self, tracker: ProgressTracker, rows: dict[str, UserProgress]
    ) -> None:
        arrays_id = lesson_id_for_path("Phase 1 - Basics/02-arrays/main.md")
        rows[arrays_id] = UserProgress(
            lesson_id=arrays_id,
            completed_at=NOW - timedelta(days=1),
            confidence_level=3,
        )
        result = await tracker.toggle(intro_id(), now=NOW)
        assert result.current_streak == 2
        assert result.total_completed == 2

    async def test_sends_completion_email(
        self, tracker: ProgressTracker, mailer: AsyncMock
    ) -> None:
        await tracker.toggle(intro_id(), now=NOW)

        mailer.send.assert_awaited_once()
        to, message = mailer.send.await_args.args
        assert to == "me@example.com"
        assert message.subject == "🎉 Lesson Complete: Intro"
        assert "1 Day Streak!" in message.html

    async def test_no_email_when_uncompleting(
        self, tracker: ProgressTracker, mailer: AsyncMock
    ) -> None:
        await tracker.toggle(intro_id(), now=NOW)
        mailer.send.reset_mock()
        await tracker.toggle(intro_id(), now=NOW)
        mailer.send.assert_not_awaited()

    async def test_unknown_lesson_tracked_without_email(
        self,
        tracker: ProgressTracker,
        mailer: AsyncMock,
        stats_holder: dict[str, UserStats],
    ) -> None:
        result = await tracker.toggle("ghost", now=NOW)

        assert result.completed is True
        assert stats_holder["stats"].total_hours_studied == 0
        mailer.send.assert_not_awaited()

    async def test_tenth_lesson_sends_milestone(
        self,
        tracker: ProgressTracker,
        rows: dict[str, UserProgress],
        mailer: AsyncMock,
    ) -> None:
        for i in range(9):
            rows[f"old-{i}"] = UserProgress(
                lesson_id=f"old-{i}",
                completed_at=NOW - timedelta(days=30 + i),
            )
        result = await tracker.toggle(intro_id(), now=NOW)

        assert result.total_completed == 10
        subjects = [call.args[1].subject for call in mailer.send.await_args_list]
        assert subjects == [
            "🎉 Lesson Complete: Intro",
            "🏆 Achievement Unlocked: First 10 Lessons Complete!",
        ]

    async def test_email_failure_does_not_raise(
        self, tracker: ProgressTracker, mailer: AsyncMock
    ) -> None:
        mailer.send.return_value = EmailResult(success=False, error="HTTP 500")
        result = await tracker.toggle(intro_id(), now=NOW)
        assert result.completed is True


class TestSetConfidence:
    async def test_updates_existing_row(
        self, tracker: ProgressTracker, rows: dict[str, UserProgress]
    ) -> None:
        await tracker.toggle(intro_id(), now=NOW)
        row = await tracker.set_confidence(intro_id(), 5)
        assert row.confidence_level == 5
        assert row.completed_at == NOW

    async def test_creates_uncompleted_row(
        self, tracker: ProgressTracker, rows: dict[str, UserProgress]
    ) -> None:
        row = await tracker.set_confidence(intro_id(), 2)
        assert row.confidence_level == 2
        assert row.completed_at is None
        assert rows[intro_id()] is row

    @pytest.mark.parametrize("level", [0, 6, -1])
    async def test_out_of_range(self, tracker: ProgressTracker, level: int) -> None:
        with pytest.raises(ValueError, match="between 1 and 5"):
            await tracker.set_confidence(intro_id(), level)


class TestGetStats:
    async def test_creates_zeroed_row(
        self, tracker: ProgressTracker, mock_session: AsyncMock
    ) -> None:
        stats = await tracker.get_stats()
        assert stats.current_streak == 0
        assert stats.total_lessons_completed == 0
        assert stats.last_study_date is None
        mock_session.commit.assert_awaited_once()


class TestMilestoneFor:
    def test_ten_lessons(self) -> None:
        assert milestone_for(10, 7) is FIRST_TEN_LESSONS

    def test_week(self) -> None:
        assert milestone_for(3, 7) is WEEK_STREAK

    def test_month(self) -> None:
        assert milestone_for(40, 30) is MONTH_STREAK

    def test_none(self) -> None:
        assert milestone_for(11, 8) is None


class TestMergeProgress:
    def test_flags_and_counts(self) -> None:
        intro = make_lesson("Phase 1 - Basics/01-intro/main.md", "Intro")
        arrays = make_lesson("Phase 1 - Basics/02-arrays/main.md", "Arrays")
        phase = Phase(
            id="phase-1",
            name="Basics",
            description="Master basics for FAANG interviews",
            week_start=1,
            week_end=4,
            lessons=[intro, arrays],
            total=2,
        )
        progress = [
            UserProgress(lesson_id=intro.id, completed_at=NOW, confidence_level=4),
            UserProgress(lesson_id=arrays.id, completed_at=None, confidence_level=2),
            UserProgress(lesson_id="removed", completed_at=NOW),
        ]

        [merged] = merge_progress([phase], progress)

        assert merged.completed == 1
        assert merged.total == 2
        assert [lesson.completed for lesson in merged.lessons] == [True, False]
        assert [lesson.confidence_level for lesson in merged.lessons] == [4, 2]
        # discovery output is left untouched
        assert phase.completed == 0

    def test_no_progress(self) -> None:
        phase = Phase(
            id="phase-1",
            name="Basics",
            description="d",
            week_start=1,
            week_end=4,
            lessons=[make_lesson("Phase 1 - Basics/01-intro/main.md", "Intro")],
        )
        [merged] = merge_progress([phase], [])
        assert merged.completed == 0
        assert merged.lessons[0].completed is False
        assert merged.lessons[0].confidence_level is None
