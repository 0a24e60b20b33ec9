"""Domain-specific exceptions for study-tracker."""

from __future__ import annotations

from pathlib import Path


class ContentRootError(Exception):
    """Content root exists but cannot be listed (permissions, I/O).

    Unlike a missing root, this is fatal: callers must refuse to serve
    lesson listings instead of returning a silently truncated tree.
    """

    def __init__(self, root: Path, cause: OSError) -> None:
        self.root = root
        super().__init__(f"Cannot read content root {root}: {cause}")
        self.__cause__ = cause


class FrontMatterError(ValueError):
    """Raised when a markdown file's YAML header cannot be parsed."""


class ContentPathError(ValueError):
    """Requested file path resolves outside the content root."""

