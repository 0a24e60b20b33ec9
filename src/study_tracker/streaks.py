"""Streak arithmetic over completion dates."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, date, datetime, timedelta, tzinfo


def completion_dates(timestamps: Iterable[datetime], tz: tzinfo = UTC) -> set[date]:
    """Calendar days (in *tz*) on which at least one lesson was completed.

    Naive timestamps are taken to be UTC.
    """
    days: set[date] = set()
    for ts in timestamps:
        if ts.tzinfo is None:
            ts = ts.replace(tzinfo=UTC)
        days.add(ts.astimezone(tz).date())
    return days


def compute_streak(days: Iterable[date], today: date) -> int:
    """Number of consecutive days ending *today* with a completion.

    A streak that ended yesterday counts as zero: studying today is
    what keeps it alive.

    Examples:
        >>> from datetime import date
        >>> compute_streak({date(2024, 5, 3), date(2024, 5, 2)}, date(2024, 5, 3))
        2
        >>> compute_streak({date(2024, 5, 2)}, date(2024, 5, 3))
        0
    """
    day_set = set(days)
    streak = 0
    current = today
    while current in day_set:
        streak += 1
        current -= timedelta(days=1)
    return streak


def days_since(last: date | None, today: date) -> int | None:
    """Whole days between *last* and *today*, or None if never studied."""
    if last is None:
        return None
    return (today - last).days
