"""Pydantic schemas for study-tracker domain models."""

from study_tracker.models.content import (
    ContentFile,
    Difficulty,
    LessonProgress,
    Phase,
    PhaseProgress,
)

__all__ = [
    "ContentFile",
    "Difficulty",
    "LessonProgress",
    "Phase",
    "PhaseProgress",
]
