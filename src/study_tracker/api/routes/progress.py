"""Progress and statistics API endpoints.

Routes
------
- ``POST /progress``                          -- Toggle lesson completion
- ``PUT  /progress/{lesson_id}/confidence``   -- Set 1-5 self-assessment
- ``GET  /stats``                             -- Aggregate study statistics
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from study_tracker.api.deps import get_notifier, get_phases, get_session
from study_tracker.api.schemas import (
    ConfidenceUpdateRequest,
    ProgressResponse,
    ProgressToggleRequest,
    ProgressToggleResponse,
    StatsResponse,
)
from study_tracker.content.discovery import all_lessons
from study_tracker.models.content import Phase
from study_tracker.notifications.notifier import Notifier
from study_tracker.progress_tracker import ProgressTracker

router = APIRouter(tags=["progress"])

SessionDep = Annotated[AsyncSession, Depends(get_session)]
PhasesDep = Annotated[list[Phase], Depends(get_phases)]
NotifierDep = Annotated[Notifier, Depends(get_notifier)]


def _tracker(
    session: AsyncSession, notifier: Notifier, phases: list[Phase]
) -> ProgressTracker:
    lessons = {lesson.id: lesson for lesson in all_lessons(phases)}
    return ProgressTracker(session, notifier, lessons)


@router.post("/progress")
async def toggle_progress(
    body: ProgressToggleRequest,
    session: SessionDep,
    notifier: NotifierDep,
    phases: PhasesDep,
) -> ProgressToggleResponse:
    """Mark a lesson completed, or back to not completed.

    The first toggle of a lesson creates its record as completed.
    Emails (lesson completed, milestones) are sent after the write is
    committed; a failed send does not fail the request.
    """
    result = await _tracker(session, notifier, phases).toggle(body.lesson_id)
    return ProgressToggleResponse(
        lesson_id=result.lesson_id,
        completed=result.completed,
        current_streak=result.current_streak,
        total_lessons_completed=result.total_completed,
    )


@router.put("/progress/{lesson_id}/confidence")
async def set_confidence(
    lesson_id: str,
    body: ConfidenceUpdateRequest,
    session: SessionDep,
    notifier: NotifierDep,
    phases: PhasesDep,
) -> ProgressResponse:
    """Store the learner's confidence for a lesson (1 = shaky, 5 = solid)."""
    tracker = _tracker(session, notifier, phases)
    try:
        progress = await tracker.set_confidence(lesson_id, body.confidence_level)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return ProgressResponse.model_validate(progress)


@router.get("/stats")
async def get_stats(session: SessionDep, notifier: NotifierDep) -> StatsResponse:
    """Aggregate stats; a zeroed row is created on first access."""
    stats = await ProgressTracker(session, notifier, {}).get_stats()
    return StatsResponse.model_validate(stats)
