"""Re-locate saved note selections inside a lesson's current text.

Each note stores the exact text the user selected. On every render the
selections are searched for again: longer selections first, each one
claiming the first occurrence that does not overlap a span already
claimed in the same pass. A selection that cannot be placed (the
lesson changed, or every occurrence is taken) is simply not anchored.

Matching runs against the raw markdown source, not the rendered page.
A selection that spans inline markup (``**binary** search`` rendered
as "binary search") finds no match; one that falls inside a single
run of plain text anchors normally.
"""

from __future__ import annotations

import html
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Protocol


class AnchorableNote(Protocol):
    @property
    def id(self) -> object: ...

    @property
    def selected_text(self) -> str: ...


@dataclass(frozen=True)
class NoteAnchor:
    """A claimed span ``text[start:end]`` belonging to one note."""

    note_id: str
    start: int
    length: int

    @property
    def end(self) -> int:
        return self.start + self.length

    def overlaps(self, start: int, end: int) -> bool:
        return start < self.end and self.start < end


def _find_unclaimed(
    text: str,
    needle: str,
    claimed: Sequence[NoteAnchor],
) -> int:
    """Offset of the first occurrence of *needle* clear of all claims, or -1."""
    pos = text.find(needle)
    while pos != -1:
        end = pos + len(needle)
        if not any(anchor.overlaps(pos, end) for anchor in claimed):
            return pos
        pos = text.find(needle, pos + 1)
    return -1


def anchor_notes(text: str, notes: Iterable[AnchorableNote]) -> list[NoteAnchor]:
    """Place each note's selection in *text*.

    Args:
        text: The lesson text as currently rendered.
        notes: Notes with ``id`` and ``selected_text``.

    Returns:
        Anchors for the notes that could be placed, ordered by offset.
        Anchors never overlap.
    """
    ordered = sorted(notes, key=lambda n: len(n.selected_text.strip()), reverse=True)

    claimed: list[NoteAnchor] = []
    for note in ordered:
        needle = note.selected_text.strip()
        if not needle:
            continue
        start = _find_unclaimed(text, needle, claimed)
        if start == -1:
            continue
        claimed.append(
            NoteAnchor(note_id=str(note.id), start=start, length=len(needle))
        )

    return sorted(claimed, key=lambda a: a.start)


def highlight(text: str, anchors: Iterable[NoteAnchor]) -> str:
    """Wrap every anchored span in a ``<mark>`` tag carrying the note id.

    *anchors* must not overlap (``anchor_notes`` guarantees this).
    """
    parts: list[str] = []
    cursor = 0
    for anchor in sorted(anchors, key=lambda a: a.start):
        parts.append(text[cursor : anchor.start])
        note_id = html.escape(anchor.note_id, quote=True)
        parts.append(
            f'<mark class="note-highlight" data-note-id="{note_id}">'
            f"{text[anchor.start : anchor.end]}</mark>"
        )
        cursor = anchor.end
    parts.append(text[cursor:])
    return "".join(parts)
