"""YAML front-matter extraction for markdown lesson files."""

from __future__ import annotations

import re
from typing import Any

import yaml

from study_tracker.errors import FrontMatterError

_FRONT_MATTER_RE = re.compile(
    r"\A---[ \t]*\r?\n(?:(.*?)\r?\n)?---[ \t]*(?:\r?\n|\Z)",
    re.DOTALL,
)


def split_front_matter(text: str) -> tuple[dict[str, Any], str]:
    """Split a markdown document into its YAML header and body.

    A header is a ``---`` line at the very start of the file, followed
    by YAML, closed by another ``---`` line. Files without a header
    yield an empty mapping and the text unchanged.

    Args:
        text: Full file contents.

    Returns:
        Tuple of (metadata, body).

    Raises:
        FrontMatterError: If the header is not valid YAML or is not
            a mapping.
    """
    text = text.removeprefix("\ufeff")
    match = _FRONT_MATTER_RE.match(text)
    if match is None:
        return {}, text

    try:
        data = yaml.safe_load(match.group(1) or "")
    except yaml.YAMLError as exc:
        raise FrontMatterError(f"Invalid YAML front-matter: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        msg = f"Front-matter must be a mapping, got {type(data).__name__}"
        raise FrontMatterError(msg)

    return data, text[match.end() :]
