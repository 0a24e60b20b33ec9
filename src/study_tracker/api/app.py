"""FastAPI application with lifespan management."""

import asyncio
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from study_tracker.agents.assistant import create_assistant
from study_tracker.api.middleware import RequestLoggingMiddleware
from study_tracker.api.routes.ai import router as ai_router
from study_tracker.api.routes.content import router as content_router
from study_tracker.api.routes.cron import router as cron_router
from study_tracker.api.routes.notes import router as notes_router
from study_tracker.api.routes.progress import router as progress_router
from study_tracker.config import settings
from study_tracker.errors import ContentRootError
from study_tracker.logging_config import configure_logging
from study_tracker.notifications.notifier import Notifier, create_mailer
from study_tracker.storage.database import async_session, engine

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application startup and shutdown.

    Startup:
        - Create the Brevo mailer and the Notifier (no-op without a key).
        - Create the StudyAssistant (None without a Gemini key).
    Shutdown:
        - Close the mailer's HTTP client.
        - Dispose database engine (close connection pool).
    """
    configure_logging(
        environment=str(settings.environment),
        log_level=settings.log_level,
    )
    mailer = create_mailer(settings)
    app.state.notifier = Notifier(
        mailer, settings.notification_email, settings.app_url
    )
    app.state.assistant = create_assistant(settings)

    logger.info(
        "app_started",
        environment=str(settings.environment),
        content_dir=str(settings.content_dir),
        email_enabled=app.state.notifier.enabled,
        assistant_enabled=app.state.assistant is not None,
    )
    yield

    if mailer is not None:
        await mailer.close()
    await engine.dispose()
    logger.info("app_stopped")


app = FastAPI(
    title="Study Tracker",
    description="Markdown-driven study plan with progress, notes and AI help",
    version="0.1.0",
    lifespan=lifespan,
    debug=settings.is_dev,
)

app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allowed_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allowed_methods,
    allow_headers=settings.cors_allowed_headers,
)


HEALTH_CHECK_TIMEOUT = 5.0


@app.get("/health")
async def health() -> JSONResponse:
    """Deep health check: verifies DB connectivity."""
    checks: dict[str, str] = {}
    overall = "ok"

    try:
        async with async_session() as session:
            await asyncio.wait_for(
                session.execute(text("SELECT 1")),
                timeout=HEALTH_CHECK_TIMEOUT,
            )
        checks["db"] = "ok"
    except (TimeoutError, OperationalError, SQLAlchemyError) as e:
        logger.warning("health_check_db_error", error=type(e).__name__)
        checks["db"] = f"error: {type(e).__name__}"
        overall = "degraded"
    except Exception as e:
        logger.error("health_check_db_unexpected", error=str(e), exc_info=True)
        checks["db"] = f"error: {type(e).__name__}"
        overall = "degraded"

    checks["content"] = "ok" if settings.content_dir.is_dir() else "missing"

    status_code = 200 if overall == "ok" else 503
    return JSONResponse(
        status_code=status_code,
        content={
            "status": overall,
            "checks": checks,
            "timestamp": datetime.now(UTC).isoformat(timespec="seconds"),
        },
    )


@app.exception_handler(ContentRootError)
async def content_root_exception_handler(
    request: Request,
    exc: ContentRootError,
) -> JSONResponse:
    """An unreadable content root must not look like an empty study plan."""
    logger.error(
        "content_root_unreadable",
        root=str(exc.root),
        error=str(exc.__cause__),
        path=request.url.path,
    )
    return JSONResponse(
        status_code=503,
        content={"detail": "Content directory is unavailable"},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Catch-all handler for unhandled exceptions."""
    logger.error("unhandled_exception", exc_info=exc, path=request.url.path)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )


app.include_router(content_router, prefix="/api/v1")
app.include_router(progress_router, prefix="/api/v1")
app.include_router(notes_router, prefix="/api/v1")
app.include_router(ai_router, prefix="/api/v1")
app.include_router(cron_router, prefix="/api/v1")
