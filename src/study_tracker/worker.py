"""ARQ worker running the scheduled notification checks.

Run with::

    arq study_tracker.worker.WorkerSettings

The worker is optional: the same checks are exposed as ``/cron/*``
routes for deployments that use an external scheduler instead.
"""

import asyncio
from datetime import UTC, datetime
from typing import Any, ClassVar

import structlog
from arq.connections import RedisSettings
from arq.cron import CronJob, cron

from study_tracker.config import get_settings
from study_tracker.content.discovery import all_lessons, discover
from study_tracker.logging_config import configure_logging
from study_tracker.notifications.digests import run_streak_reminder, run_weekly_progress

WorkerCtx = dict[str, Any]

logger = structlog.get_logger()


async def streak_reminder_job(ctx: WorkerCtx) -> dict[str, Any]:
    """Send the streak reminder if today's study is still missing."""
    async with ctx["session_factory"]() as session:
        outcome = await run_streak_reminder(
            session, ctx["notifier"], today=datetime.now(UTC).date()
        )
    logger.info("cron_streak_reminder", sent=outcome.sent, streak=outcome.streak)
    return {"message": outcome.message, "sent": outcome.sent}


async def weekly_progress_job(ctx: WorkerCtx) -> dict[str, Any]:
    """Send the weekly digest when anything was completed."""
    phases = await asyncio.to_thread(discover, ctx["content_dir"])
    lesson_hours = {
        lesson.id: lesson.estimated_hours for lesson in all_lessons(phases)
    }
    async with ctx["session_factory"]() as session:
        outcome = await run_weekly_progress(
            session,
            ctx["notifier"],
            lesson_hours=lesson_hours,
            now=datetime.now(UTC),
        )
    logger.info(
        "cron_weekly_progress",
        sent=outcome.sent,
        lessons=outcome.lessons_this_week,
    )
    return {"message": outcome.message, "sent": outcome.sent}


async def startup(ctx: WorkerCtx) -> None:
    """Initialize worker resources on startup.

    Creates an async engine, session factory and the Notifier, storing
    them in the worker context for use by the cron jobs.
    """
    from sqlalchemy.ext.asyncio import (
        AsyncSession,
        async_sessionmaker,
        create_async_engine,
    )

    from study_tracker.notifications.notifier import Notifier, create_mailer

    s = get_settings()
    configure_logging(
        environment=str(s.environment),
        log_level=s.log_level,
        service="worker",
    )

    engine = create_async_engine(s.database_url, pool_size=2, max_overflow=0)
    session_factory = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    mailer = create_mailer(s)

    ctx["engine"] = engine
    ctx["session_factory"] = session_factory
    ctx["mailer"] = mailer
    ctx["notifier"] = Notifier(mailer, s.notification_email, s.app_url)
    ctx["content_dir"] = s.content_dir

    logger.info(
        "worker_started",
        redis_url=s.redis_url,
        email_enabled=ctx["notifier"].enabled,
    )


async def shutdown(ctx: WorkerCtx) -> None:
    """Clean up worker resources on shutdown."""
    mailer = ctx.get("mailer")
    if mailer is not None:
        await mailer.close()

    engine = ctx.get("engine")
    if engine is not None:
        await engine.dispose()

    logger.info("worker_stopped")


def build_cron_jobs() -> list[CronJob]:
    """Daily streak reminder and weekly digest, times in UTC."""
    s = get_settings()
    return [
        cron(
            streak_reminder_job,
            hour=s.streak_reminder_hour,
            minute=0,
        ),
        cron(
            weekly_progress_job,
            weekday=s.weekly_progress_weekday,
            hour=s.weekly_progress_hour,
            minute=0,
        ),
    ]


class WorkerSettings:
    """ARQ worker settings -- consumed by ``arq`` CLI."""

    _settings = get_settings()

    redis_settings: RedisSettings = RedisSettings.from_dsn(
        _settings.redis_url,
    )
    functions: ClassVar[list[Any]] = []
    cron_jobs: ClassVar[list[CronJob]] = build_cron_jobs()
    on_startup = startup
    on_shutdown = shutdown

    keep_result: int = 3600
