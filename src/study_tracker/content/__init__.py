"""Lesson content: discovery, identifiers, note anchoring, file access."""

from study_tracker.content.anchoring import NoteAnchor, anchor_notes, highlight
from study_tracker.content.discovery import (
    DEFAULT_CONFIG,
    DiscoveryConfig,
    FileSystemSource,
    all_lessons,
    discover,
    find_lesson_by_id,
    lesson_in,
    match_lessons,
    read_lesson_content,
    search,
)
from study_tracker.content.lesson_ids import lesson_id_for_path, lesson_path_from_id

__all__ = [
    "DEFAULT_CONFIG",
    "DiscoveryConfig",
    "FileSystemSource",
    "NoteAnchor",
    "all_lessons",
    "anchor_notes",
    "discover",
    "find_lesson_by_id",
    "highlight",
    "lesson_id_for_path",
    "lesson_in",
    "lesson_path_from_id",
    "match_lessons",
    "read_lesson_content",
    "search",
]
