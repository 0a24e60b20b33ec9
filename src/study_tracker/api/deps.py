"""FastAPI dependency injection."""

from __future__ import annotations

import asyncio
import secrets
from pathlib import Path
from typing import Annotated, cast

from fastapi import Depends, Header, HTTPException, Request

from study_tracker.agents.assistant import StudyAssistant
from study_tracker.config import settings
from study_tracker.content.discovery import discover
from study_tracker.models.content import Phase
from study_tracker.notifications.notifier import Notifier
from study_tracker.storage.database import get_session

__all__ = [
    "get_assistant",
    "get_content_root",
    "get_notifier",
    "get_phases",
    "get_session",
    "verify_cron_secret",
]


def get_content_root() -> Path:
    """Directory scanned for lessons."""
    return settings.content_dir


async def get_phases(
    root: Annotated[Path, Depends(get_content_root)],
) -> list[Phase]:
    """Run discovery for this request.

    The scan is synchronous file I/O, so it runs in a worker thread.

    Raises:
        ContentRootError: Propagated to the app-level 503 handler.
    """
    return await asyncio.to_thread(discover, root)


async def get_notifier(request: Request) -> Notifier:
    """Retrieve the Notifier from app state.

    Initialized during lifespan startup.
    """
    return cast(Notifier, request.app.state.notifier)


async def get_assistant(request: Request) -> StudyAssistant:
    """Retrieve the StudyAssistant from app state.

    Raises:
        HTTPException 503: No Gemini API key is configured.
    """
    assistant = cast(StudyAssistant | None, request.app.state.assistant)
    if assistant is None:
        raise HTTPException(status_code=503, detail="AI assistant is not configured")
    return assistant


async def verify_cron_secret(
    authorization: Annotated[str | None, Header()] = None,
) -> None:
    """Require ``Authorization: Bearer <CRON_SECRET>`` when a secret is set.

    Without ``CRON_SECRET`` the cron routes are open, which suits local
    development and schedulers on a private network.

    Raises:
        HTTPException 401: Header missing or wrong.
    """
    if settings.cron_secret is None:
        return
    expected = f"Bearer {settings.cron_secret.get_secret_value()}"
    if authorization is None or not secrets.compare_digest(
        authorization.encode(), expected.encode()
    ):
        raise HTTPException(status_code=401, detail="Unauthorized")
