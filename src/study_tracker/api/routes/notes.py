"""Lesson notes API endpoints.

Routes
------
- ``GET    /notes?lesson_id=``  -- Notes of a lesson, newest first
- ``POST   /notes``             -- Create a note on a text selection
- ``PUT    /notes/{note_id}``   -- Replace a note's content
- ``DELETE /notes/{note_id}``   -- Delete a note

Notes are keyed by ``lesson_id`` only and are kept when the lesson
file changes or disappears; anchoring happens at read time.
"""

from __future__ import annotations

import uuid
from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from study_tracker.api.deps import get_session
from study_tracker.api.schemas import (
    NoteCreateRequest,
    NoteDeleteResponse,
    NoteListResponse,
    NoteResponse,
    NoteUpdateRequest,
)
from study_tracker.storage.repositories import NoteRepository

logger = structlog.get_logger()

router = APIRouter(tags=["notes"])

SessionDep = Annotated[AsyncSession, Depends(get_session)]


@router.get("/notes")
async def list_notes(
    session: SessionDep,
    lesson_id: Annotated[str, Query(min_length=1)],
) -> NoteListResponse:
    notes = await NoteRepository(session).list_for_lesson(lesson_id)
    return NoteListResponse(notes=[NoteResponse.model_validate(n) for n in notes])


@router.post("/notes", status_code=201)
async def create_note(body: NoteCreateRequest, session: SessionDep) -> NoteResponse:
    """Attach a note to ``selected_text`` of a lesson."""
    note = await NoteRepository(session).create(
        lesson_id=body.lesson_id,
        selected_text=body.selected_text,
        note_content=body.note_content,
        position_data=body.position_data,
    )
    await session.commit()

    logger.info("note_created", note_id=str(note.id), lesson_id=note.lesson_id)
    return NoteResponse.model_validate(note)


@router.put("/notes/{note_id}")
async def update_note(
    note_id: uuid.UUID,
    body: NoteUpdateRequest,
    session: SessionDep,
) -> NoteResponse:
    """Replace the content of a note; the anchored selection is unchanged.

    Raises:
        HTTPException 404: Note not found.
    """
    note = await NoteRepository(session).update_content(note_id, body.note_content)
    if note is None:
        raise HTTPException(status_code=404, detail="Note not found")
    await session.commit()

    logger.info("note_updated", note_id=str(note_id))
    return NoteResponse.model_validate(note)


@router.delete("/notes/{note_id}")
async def delete_note(note_id: uuid.UUID, session: SessionDep) -> NoteDeleteResponse:
    """Delete a note.

    Raises:
        HTTPException 404: Note not found.
    """
    deleted = await NoteRepository(session).delete(note_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Note not found")
    await session.commit()

    logger.info("note_deleted", note_id=str(note_id))
    return NoteDeleteResponse()
