"""Schemas for discovered lesson content."""

from typing import Literal

from pydantic import BaseModel, Field

Difficulty = Literal["easy", "medium", "hard"]


class ContentFile(BaseModel):
    """A single markdown lesson file found under the content root.

    Only metadata is held here; the markdown body is read on demand
    via ``read_lesson_content``.
    """

    id: str
    title: str
    description: str | None = None
    estimated_hours: float = 2
    difficulty: Difficulty = "medium"
    order_index: int
    file_path: str  # relative to the content root, '/'-separated
    full_path: str
    phase_id: str
    phase_name: str
    week_start: int
    week_end: int


class Phase(BaseModel):
    """Top-level grouping of lessons, one per ``Phase N - <name>`` directory.

    ``completed`` is left at zero by discovery and filled in by the
    progress store when completion records are merged in.
    """

    id: str
    name: str
    description: str
    week_start: int
    week_end: int
    lessons: list[ContentFile] = Field(default_factory=list)
    completed: int = 0
    total: int = 0

    @property
    def number(self) -> int:
        """Numeric suffix of ``id`` (``phase-10`` -> 10)."""
        return int(self.id.rsplit("-", maxsplit=1)[-1])


class LessonProgress(ContentFile):
    """A lesson with the learner's completion state merged in."""

    completed: bool = False
    confidence_level: int | None = None


class PhaseProgress(Phase):
    lessons: list[LessonProgress] = Field(default_factory=list)  # type: ignore[assignment]
