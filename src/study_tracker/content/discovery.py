"""Content discovery: build the phase/lesson tree from a markdown directory.

Expected layout::

    content/
        Phase 1 - Basics/
            01-intro/
                main.md
                solution-notes.md
        Phase 10 - Advanced/
            ...

Discovery runs in two steps. ``enumerate_lesson_files`` lists candidate
files (directory I/O only) and ``parse_lesson_file`` turns one file's
text into a ``ContentFile`` (no I/O). ``discover`` glues them together
through a ``ContentSource`` so tests can substitute the filesystem.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Any, Protocol, get_args

import structlog
from pydantic import ValidationError

from study_tracker.content.frontmatter import split_front_matter
from study_tracker.content.lesson_ids import lesson_id_for_path, lesson_path_from_id
from study_tracker.errors import ContentRootError, FrontMatterError
from study_tracker.models.content import ContentFile, Difficulty, Phase

logger = structlog.get_logger()

DEFAULT_WEEK_RANGES: Mapping[int, tuple[int, int]] = {
    1: (1, 4),
    2: (5, 8),
    3: (9, 16),
    4: (17, 24),
    5: (25, 36),
    6: (37, 44),
    7: (45, 52),
    8: (53, 56),
}

_PHASE_DIR_RE = re.compile(r"Phase (\d+)\s*-\s*(.+)")
_LESSON_PREFIX_RE = re.compile(r"^(\d+)-")
_WORD_SEPARATORS_RE = re.compile(r"[-_]")


@dataclass(frozen=True)
class DiscoveryConfig:
    """Naming conventions and defaults applied during discovery."""

    week_ranges: Mapping[int, tuple[int, int]] = field(
        default_factory=lambda: dict(DEFAULT_WEEK_RANGES)
    )
    default_week_range: tuple[int, int] = (1, 4)
    default_phase_number: int = 1
    default_order: int = 1
    default_estimated_hours: float = 2
    default_difficulty: Difficulty = "medium"
    markdown_suffix: str = ".md"
    phase_description_template: str = "Master {name} for FAANG interviews"

    def week_range(self, phase_number: int) -> tuple[int, int]:
        return self.week_ranges.get(phase_number, self.default_week_range)


DEFAULT_CONFIG = DiscoveryConfig()


# ──────────────────────────────────────────────
# Content source (filesystem access)
# ──────────────────────────────────────────────


class ContentSource(Protocol):
    """Read-only view of a content root."""

    @property
    def root(self) -> Path: ...

    def exists(self) -> bool: ...

    def list_dirs(self, relative: PurePosixPath) -> list[str]: ...

    def list_files(self, relative: PurePosixPath, suffix: str) -> list[str]: ...

    def read_text(self, relative: PurePosixPath) -> str: ...


class FileSystemSource:
    """ContentSource backed by a local directory.

    Listings are sorted by name so discovery output does not depend
    on the order the OS returns directory entries in.
    """

    def __init__(self, root: Path) -> None:
        self._root = root

    @property
    def root(self) -> Path:
        return self._root

    def exists(self) -> bool:
        return self._root.is_dir()

    def list_dirs(self, relative: PurePosixPath) -> list[str]:
        base = self._root / relative
        return sorted(entry.name for entry in base.iterdir() if entry.is_dir())

    def list_files(self, relative: PurePosixPath, suffix: str) -> list[str]:
        base = self._root / relative
        return sorted(
            entry.name
            for entry in base.iterdir()
            if entry.is_file() and entry.name.endswith(suffix)
        )

    def read_text(self, relative: PurePosixPath) -> str:
        return (self._root / relative).read_text(encoding="utf-8")


# ──────────────────────────────────────────────
# Path conventions
# ──────────────────────────────────────────────


@dataclass(frozen=True)
class LessonFileRef:
    """Location of one candidate lesson file, relative to the root."""

    phase_dir: str
    lesson_dir: str
    filename: str

    @property
    def relative_path(self) -> PurePosixPath:
        return PurePosixPath(self.phase_dir, self.lesson_dir, self.filename)


@dataclass(frozen=True)
class PathInfo:
    """Metadata inferred from directory names."""

    phase_number: int
    phase_name: str
    lesson_order: int
    week_start: int
    week_end: int

    @property
    def phase_id(self) -> str:
        return f"phase-{self.phase_number}"


def parse_content_path(
    phase_dir: str,
    lesson_dir: str,
    config: DiscoveryConfig = DEFAULT_CONFIG,
) -> PathInfo:
    """Infer phase number/name and lesson order from directory names.

    ``"Phase 3 - Core Data Structures"`` gives phase 3 named
    ``"Core Data Structures"``; a directory that does not follow the
    pattern falls back to the default phase number and keeps its own
    name. ``"09-arrays"`` gives lesson order 9.
    """
    phase_match = _PHASE_DIR_RE.search(phase_dir)
    if phase_match:
        phase_number = int(phase_match.group(1))
        phase_name = phase_match.group(2).strip()
    else:
        phase_number = config.default_phase_number
        phase_name = phase_dir

    lesson_match = _LESSON_PREFIX_RE.match(lesson_dir)
    lesson_order = int(lesson_match.group(1)) if lesson_match else config.default_order

    week_start, week_end = config.week_range(phase_number)
    return PathInfo(
        phase_number=phase_number,
        phase_name=phase_name,
        lesson_order=lesson_order,
        week_start=week_start,
        week_end=week_end,
    )


def _capitalize_words(words: Iterable[str]) -> str:
    return " ".join(word[0].upper() + word[1:] for word in words if word)


def lesson_base_name(lesson_dir: str) -> str:
    """Human-readable lesson name: ``"18-two-pointers"`` -> ``"Two Pointers"``."""
    stripped = _LESSON_PREFIX_RE.sub("", lesson_dir, count=1)
    return _capitalize_words(stripped.split("-"))


def lesson_title(filename: str, base_name: str, suffix: str = ".md") -> str:
    """Title for a file inside a lesson directory without a front-matter title.

    ``main.md`` takes the lesson's base name; any other file appends
    its own name, e.g. ``solution-notes.md`` -> ``"<base> - Solution Notes"``.
    """
    stem = filename.removesuffix(suffix)
    if stem == "main":
        return base_name
    return f"{base_name} - {_capitalize_words(_WORD_SEPARATORS_RE.split(stem))}"


# ──────────────────────────────────────────────
# Enumeration and parsing
# ──────────────────────────────────────────────


def enumerate_lesson_files(
    source: ContentSource,
    suffix: str = ".md",
) -> list[LessonFileRef]:
    """List markdown files two levels below the root (phase/lesson/file).

    Files directly inside a phase directory, and anything deeper than
    the lesson directory, are not lessons and are ignored.

    Raises:
        ContentRootError: If the root itself cannot be listed.
    """
    root = PurePosixPath()
    try:
        phase_dirs = source.list_dirs(root)
    except OSError as exc:
        raise ContentRootError(source.root, exc) from exc

    refs: list[LessonFileRef] = []
    for phase_dir in phase_dirs:
        try:
            lesson_dirs = source.list_dirs(PurePosixPath(phase_dir))
        except OSError as exc:
            logger.error("phase_dir_unreadable", phase_dir=phase_dir, error=str(exc))
            continue

        for lesson_dir in lesson_dirs:
            try:
                filenames = source.list_files(
                    PurePosixPath(phase_dir, lesson_dir), suffix
                )
            except OSError as exc:
                logger.error(
                    "lesson_dir_unreadable",
                    phase_dir=phase_dir,
                    lesson_dir=lesson_dir,
                    error=str(exc),
                )
                continue

            refs.extend(
                LessonFileRef(phase_dir, lesson_dir, filename) for filename in filenames
            )
    return refs


_DIFFICULTIES: frozenset[str] = frozenset(get_args(Difficulty))


def _difficulty(
    value: Any, relative_path: str, config: DiscoveryConfig
) -> Difficulty:
    """Normalize a header difficulty; unknown values fall back to the default."""
    if value is None or value == "":
        return config.default_difficulty
    normalized = str(value).strip().lower()
    if normalized in _DIFFICULTIES:
        return normalized  # type: ignore[return-value]
    logger.warning(
        "lesson_difficulty_unknown",
        file=relative_path,
        difficulty=str(value),
        fallback=config.default_difficulty,
    )
    return config.default_difficulty


def parse_lesson_file(
    ref: LessonFileRef,
    text: str,
    *,
    full_path: str,
    config: DiscoveryConfig = DEFAULT_CONFIG,
) -> ContentFile:
    """Build a ContentFile from one file's text and location.

    Front-matter values win over everything inferred from paths.

    Raises:
        FrontMatterError: Malformed YAML header.
        ValidationError: Header values that cannot be coerced (e.g. a
            non-numeric ``order``). Difficulty is case-insensitive and an
            unknown value falls back to the configured default.
    """
    meta, _ = split_front_matter(text)
    info = parse_content_path(ref.phase_dir, ref.lesson_dir, config)
    relative_path = ref.relative_path.as_posix()

    title = meta.get("title")
    if not title:
        title = lesson_title(
            ref.filename, lesson_base_name(ref.lesson_dir), config.markdown_suffix
        )

    estimated_hours = meta.get("estimated_hours")
    if estimated_hours is None:
        estimated_hours = meta.get("estimatedHours")
    if estimated_hours is None:
        estimated_hours = config.default_estimated_hours

    order = meta.get("order")
    description = meta.get("description")

    return ContentFile(
        id=lesson_id_for_path(relative_path),
        title=str(title),
        description=None if description is None else str(description),
        estimated_hours=estimated_hours,
        difficulty=_difficulty(meta.get("difficulty"), relative_path, config),
        order_index=info.lesson_order if order is None else order,
        file_path=relative_path,
        full_path=full_path,
        phase_id=info.phase_id,
        phase_name=info.phase_name,
        week_start=info.week_start,
        week_end=info.week_end,
    )


def discover(
    root_directory: str | Path,
    *,
    config: DiscoveryConfig = DEFAULT_CONFIG,
    source: ContentSource | None = None,
) -> list[Phase]:
    """Scan the content root and return phases with their lessons.

    A missing root is not an error: it is logged and yields an empty
    list so the rest of the application keeps working. A file that
    cannot be read or parsed is logged and skipped.

    Args:
        root_directory: Content root (absolute or relative to the CWD).
        config: Naming conventions and defaults.
        source: Filesystem access; defaults to the local directory.

    Returns:
        Phases sorted by phase number, lessons sorted by ``order_index``.

    Raises:
        ContentRootError: The root exists but cannot be listed.
    """
    if source is None:
        source = FileSystemSource(Path(root_directory).resolve())

    if not source.exists():
        logger.warning("content_root_missing", root=str(source.root))
        return []

    phases: dict[str, Phase] = {}
    for ref in enumerate_lesson_files(source, config.markdown_suffix):
        relative = ref.relative_path
        try:
            text = source.read_text(relative)
            lesson = parse_lesson_file(
                ref,
                text,
                full_path=str(source.root / relative),
                config=config,
            )
        except (OSError, UnicodeDecodeError, FrontMatterError, ValidationError) as exc:
            logger.error(
                "lesson_file_skipped",
                file_path=relative.as_posix(),
                error=str(exc),
            )
            continue

        phase = phases.get(lesson.phase_id)
        if phase is None:
            phase = Phase(
                id=lesson.phase_id,
                name=lesson.phase_name,
                description=config.phase_description_template.format(
                    name=lesson.phase_name.lower()
                ),
                week_start=lesson.week_start,
                week_end=lesson.week_end,
            )
            phases[lesson.phase_id] = phase
        phase.lessons.append(lesson)

    for phase in phases.values():
        phase.lessons.sort(key=lambda lesson: lesson.order_index)
        phase.total = len(phase.lessons)

    result = sorted(phases.values(), key=lambda phase: phase.number)
    logger.debug(
        "content_discovered",
        root=str(source.root),
        phases=len(result),
        lessons=sum(phase.total for phase in result),
    )
    return result


def all_lessons(phases: Iterable[Phase]) -> list[ContentFile]:
    """Flatten phases into their lessons, in discovery order."""
    return [lesson for phase in phases for lesson in phase.lessons]


def find_lesson_by_id(
    lesson_id: str,
    root_directory: str | Path,
    *,
    config: DiscoveryConfig = DEFAULT_CONFIG,
    source: ContentSource | None = None,
) -> ContentFile | None:
    """Re-run discovery and return the lesson with *lesson_id*, if any.

    Strings that are not valid lesson ids are rejected without scanning.
    """
    if lesson_path_from_id(lesson_id) is None:
        return None
    phases = discover(root_directory, config=config, source=source)
    return lesson_in(phases, lesson_id)


def lesson_in(phases: Iterable[Phase], lesson_id: str) -> ContentFile | None:
    for lesson in all_lessons(phases):
        if lesson.id == lesson_id:
            return lesson
    return None


def search(
    query: str,
    root_directory: str | Path,
    *,
    config: DiscoveryConfig = DEFAULT_CONFIG,
    source: ContentSource | None = None,
) -> list[ContentFile]:
    """Case-insensitive substring search over title, description and phase name.

    Results keep discovery order; there is no relevance ranking.
    """
    phases = discover(root_directory, config=config, source=source)
    return match_lessons(phases, query)


def match_lessons(phases: Iterable[Phase], query: str) -> list[ContentFile]:
    """Filter already-discovered lessons the way ``search`` does."""
    needle = query.lower()
    return [
        lesson
        for lesson in all_lessons(phases)
        if needle in lesson.title.lower()
        or needle in (lesson.description or "").lower()
        or needle in lesson.phase_name.lower()
    ]


def read_lesson_content(lesson: ContentFile) -> str:
    """Read a lesson's markdown body (front-matter removed).

    Unreadable files yield an empty string; a header that no longer
    parses yields the raw text.
    """
    try:
        text = Path(lesson.full_path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.error(
            "lesson_content_unreadable",
            file_path=lesson.file_path,
            error=str(exc),
        )
        return ""

    try:
        _, body = split_front_matter(text)
    except FrontMatterError as exc:
        logger.warning(
            "lesson_front_matter_invalid",
            file_path=lesson.file_path,
            error=str(exc),
        )
        return text
    return body
