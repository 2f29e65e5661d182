"""Edit instructions produced by replace commands."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from .document import TextDocument


@dataclass(frozen=True, slots=True)
class Change:
    """Replace ``[start, end)`` of the pre-edit document with ``insert``."""

    start: int
    end: int
    insert: str = ""


def apply_changes(doc: TextDocument, changes: Iterable[Change]) -> TextDocument:
    """Apply disjoint changes given in pre-edit coordinates.

    Changes are applied from the end of the document toward its start so
    earlier offsets stay valid.
    """

    ordered = sorted(changes, key=lambda c: (c.start, c.end))
    for before, after in zip(ordered, ordered[1:]):
        if after.start < before.end:
            raise ValueError(f"Overlapping changes {before} and {after}")
    for change in reversed(ordered):
        doc = doc.replace(change.start, change.end, change.insert)
    return doc


def map_position(pos: int, changes: Iterable[Change]) -> int:
    """Map a pre-edit offset lying outside every change to post-edit coordinates."""

    delta = 0
    for change in changes:
        if change.end <= pos:
            delta += len(change.insert) - (change.end - change.start)
    return pos + delta


__all__ = ["Change", "apply_changes", "map_position"]
