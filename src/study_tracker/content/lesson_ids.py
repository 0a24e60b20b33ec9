"""Stable lesson identifiers derived from relative file paths.

An id is the base32 encoding of the UTF-8 relative path, lowercased,
with ``=`` padding dropped. The alphabet is alphanumeric, so the id is
safe in URLs and file names, and padding is implied by the length, so
the encoding stays reversible: distinct paths can never share an id.
"""

from __future__ import annotations

import base64
import binascii


def lesson_id_for_path(relative_path: str) -> str:
    """Encode a ``/``-separated relative path as a lesson id."""
    encoded = base64.b32encode(relative_path.encode("utf-8")).decode("ascii")
    return encoded.rstrip("=").lower()


def lesson_path_from_id(lesson_id: str) -> str | None:
    """Decode a lesson id back to its relative path.

    Returns:
        The relative path, or ``None`` if *lesson_id* is not a valid id.
    """
    if not lesson_id or not (lesson_id.isascii() and lesson_id.isalnum()):
        return None
    padded = lesson_id.upper() + "=" * (-len(lesson_id) % 8)
    try:
        path = base64.b32decode(padded).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None
    # b32decode ignores non-zero trailing bits; only the canonical form is valid.
    if lesson_id_for_path(path) != lesson_id:
        return None
    return path
