"""Request/response schemas for the API layer."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from study_tracker.agents.assistant import ChatMessage

# --- Lessons ---


class NoteAnchorResponse(BaseModel):
    """Character span of the lesson body claimed by a note."""

    model_config = ConfigDict(from_attributes=True)

    note_id: str
    start: int
    length: int


class LessonContentResponse(BaseModel):
    """Markdown body of a lesson with its notes anchored.

    ``highlighted_content`` is ``content`` with every anchored span
    wrapped in ``<mark class="note-highlight" data-note-id="...">``.
    Notes whose selection no longer occurs in the text are absent
    from ``anchors``.
    """

    lesson_id: str
    title: str
    content: str
    highlighted_content: str
    anchors: list[NoteAnchorResponse]


# --- Files ---


class FileEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    path: str
    name: str
    is_directory: bool


class FileListResponse(BaseModel):
    files: list[FileEntryResponse]


class FileContentResponse(BaseModel):
    path: str
    content: str


# --- Progress ---


class ProgressToggleRequest(BaseModel):
    """Request body for POST /progress."""

    lesson_id: str = Field(..., min_length=1, max_length=512)


class ProgressToggleResponse(BaseModel):
    success: bool = True
    lesson_id: str
    completed: bool
    current_streak: int
    total_lessons_completed: int


class ConfidenceUpdateRequest(BaseModel):
    """Request body for PUT /progress/{lesson_id}/confidence."""

    confidence_level: int = Field(..., ge=1, le=5)


class ProgressResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    lesson_id: str
    completed: bool
    completed_at: datetime | None
    confidence_level: int | None


class StatsResponse(BaseModel):
    """Aggregate study statistics."""

    model_config = ConfigDict(from_attributes=True)

    current_streak: int
    longest_streak: int
    total_lessons_completed: int
    total_hours_studied: float
    last_study_date: date | None


# --- Notes ---


class NoteCreateRequest(BaseModel):
    """Request body for POST /notes."""

    lesson_id: str = Field(..., min_length=1, max_length=512)
    selected_text: str = Field(..., min_length=1)
    note_content: str = Field(..., min_length=1)
    position_data: dict[str, Any] | None = None


class NoteUpdateRequest(BaseModel):
    """Request body for PUT /notes/{note_id}."""

    note_content: str = Field(..., min_length=1)


class NoteResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    lesson_id: str
    selected_text: str
    note_content: str
    position_data: dict[str, Any] | None
    created_at: datetime
    updated_at: datetime


class NoteListResponse(BaseModel):
    notes: list[NoteResponse]


class NoteDeleteResponse(BaseModel):
    message: str = "Note deleted successfully"


# --- AI ---


class ChatContext(BaseModel):
    """Extra inputs for the ``hint`` and ``feedback`` request types."""

    problem: str | None = None
    user_attempt: str | None = None
    user_stats: dict[str, Any] | None = None
    current_topic: str | None = None


class ChatRequest(BaseModel):
    """Request body for POST /ai/chat."""

    messages: list[ChatMessage]
    type: Literal["chat", "hint", "feedback"] = "chat"
    context: ChatContext | None = None


class ChatResponse(BaseModel):
    message: str
    timestamp: int = Field(description="Unix time in milliseconds.")


# --- Cron ---


class StreakReminderResponse(BaseModel):
    message: str
    streak_reminder_sent: bool = False
    current_streak: int = 0


class WeeklyProgressResponse(BaseModel):
    message: str
    lessons_this_week: int = 0
    hours_this_week: float = 0
    email_sent: bool = False


class EmailCheckResponse(BaseModel):
    message: str
    message_id: str | None = None
