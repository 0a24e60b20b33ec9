"""Lesson content API endpoints.

Routes
------
- ``GET /phases``                   -- Phase tree with completion flags
- ``GET /lessons/search?q=``        -- Search lessons
- ``GET /lessons/{id}``             -- Single lesson with completion flags
- ``GET /lessons/{id}/content``     -- Markdown body with notes anchored
- ``GET /files``                    -- Markdown tree listing
- ``GET /files/content?path=``      -- Raw file below the content root

Every request re-scans the content root; nothing is cached.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from study_tracker.api.deps import get_content_root, get_phases, get_session
from study_tracker.api.schemas import (
    FileContentResponse,
    FileEntryResponse,
    FileListResponse,
    LessonContentResponse,
    NoteAnchorResponse,
)
from study_tracker.content.anchoring import anchor_notes, highlight
from study_tracker.content.discovery import (
    lesson_in,
    match_lessons,
    read_lesson_content,
)
from study_tracker.content.files import list_markdown_tree, read_content_file
from study_tracker.errors import ContentPathError
from study_tracker.models.content import (
    ContentFile,
    LessonProgress,
    Phase,
    PhaseProgress,
)
from study_tracker.progress_tracker import merge_progress
from study_tracker.storage.repositories import NoteRepository, ProgressRepository

logger = structlog.get_logger()

router = APIRouter(tags=["content"])

SessionDep = Annotated[AsyncSession, Depends(get_session)]
PhasesDep = Annotated[list[Phase], Depends(get_phases)]
ContentRootDep = Annotated[Path, Depends(get_content_root)]


def _require_lesson(phases: list[Phase], lesson_id: str) -> ContentFile:
    """Find a discovered lesson by id.

    Raises:
        HTTPException 404: No discovered lesson has this id.
    """
    lesson = lesson_in(phases, lesson_id)
    if lesson is None:
        raise HTTPException(status_code=404, detail="Lesson not found")
    return lesson


@router.get("/phases")
async def list_phases(
    phases: PhasesDep, session: SessionDep
) -> list[PhaseProgress]:
    """Discovered phases with per-lesson completion and per-phase counts."""
    progress = await ProgressRepository(session).list_all()
    return merge_progress(phases, progress)


@router.get("/lessons/search")
async def search_lessons(
    phases: PhasesDep,
    q: Annotated[str, Query(min_length=1)],
) -> list[ContentFile]:
    """Case-insensitive match on title, description and phase name."""
    return match_lessons(phases, q)


@router.get("/lessons/{lesson_id}")
async def get_lesson(
    lesson_id: str, phases: PhasesDep, session: SessionDep
) -> LessonProgress:
    """Lesson metadata with its completion state."""
    lesson = _require_lesson(phases, lesson_id)
    progress = await ProgressRepository(session).get(lesson_id)
    return LessonProgress(
        **lesson.model_dump(),
        completed=progress is not None and progress.completed,
        confidence_level=progress.confidence_level if progress else None,
    )


@router.get("/lessons/{lesson_id}/content")
async def get_lesson_content(
    lesson_id: str, phases: PhasesDep, session: SessionDep
) -> LessonContentResponse:
    """Markdown body of a lesson, with saved notes located in it."""
    lesson = _require_lesson(phases, lesson_id)
    content = await asyncio.to_thread(read_lesson_content, lesson)
    notes = await NoteRepository(session).list_for_lesson(lesson_id)

    anchors = anchor_notes(content, notes)
    if len(anchors) < len(notes):
        logger.debug(
            "notes_not_anchored",
            lesson_id=lesson_id,
            notes=len(notes),
            anchored=len(anchors),
        )
    return LessonContentResponse(
        lesson_id=lesson_id,
        title=lesson.title,
        content=content,
        highlighted_content=highlight(content, anchors),
        anchors=[NoteAnchorResponse.model_validate(a) for a in anchors],
    )


@router.get("/files")
async def list_files(root: ContentRootDep) -> FileListResponse:
    """Directories and markdown files under the content root."""
    entries = await asyncio.to_thread(list_markdown_tree, root)
    return FileListResponse(
        files=[FileEntryResponse.model_validate(e) for e in entries]
    )


@router.get("/files/content")
async def get_file_content(
    root: ContentRootDep,
    path: Annotated[str, Query(min_length=1)],
) -> FileContentResponse:
    """Raw text of one file below the content root.

    Raises:
        HTTPException 400: The path escapes the content root.
        HTTPException 404: The file does not exist.
    """
    try:
        content = await asyncio.to_thread(read_content_file, root, path)
    except ContentPathError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except FileNotFoundError as exc:
        raise HTTPException(status_code=404, detail="File not found") from exc
    return FileContentResponse(path=path, content=content)
