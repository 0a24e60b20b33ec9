"""Raw access to markdown files under the content root."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import structlog

from study_tracker.errors import ContentPathError

logger = structlog.get_logger()


@dataclass(frozen=True)
class ContentEntry:
    """One entry of the content tree listing."""

    path: str  # relative, '/'-separated
    name: str
    is_directory: bool


def list_markdown_tree(root: Path, suffix: str = ".md") -> list[ContentEntry]:
    """Recursively list directories and markdown files under *root*.

    Hidden entries (leading dot) are skipped. Each directory is listed
    before its contents; siblings are sorted by name. A missing root
    yields an empty list.
    """
    if not root.is_dir():
        logger.warning("content_root_missing", root=str(root))
        return []

    entries: list[ContentEntry] = []

    def _walk(directory: Path) -> None:
        for item in sorted(directory.iterdir(), key=lambda p: p.name):
            if item.name.startswith("."):
                continue
            relative = item.relative_to(root).as_posix()
            if item.is_dir():
                entries.append(ContentEntry(relative, item.name, is_directory=True))
                _walk(item)
            elif item.name.endswith(suffix):
                entries.append(ContentEntry(relative, item.name, is_directory=False))

    _walk(root)
    return entries


def resolve_content_path(root: Path, relative: str) -> Path:
    """Resolve *relative* against *root*, refusing anything outside it.

    Raises:
        ContentPathError: Absolute paths, ``..`` escapes and symlinks
            leading out of the root.
    """
    resolved_root = root.resolve()
    candidate = (resolved_root / relative).resolve()
    if not candidate.is_relative_to(resolved_root) or candidate == resolved_root:
        raise ContentPathError(f"Invalid file path: {relative}")
    return candidate


def read_content_file(root: Path, relative: str) -> str:
    """Read a file below the content root as UTF-8 text.

    Raises:
        ContentPathError: The path escapes the root.
        FileNotFoundError: The file does not exist.
    """
    path = resolve_content_path(root, relative)
    if not path.is_file():
        raise FileNotFoundError(relative)
    return path.read_text(encoding="utf-8")
