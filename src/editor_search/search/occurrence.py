"""Grow a multi-range selection one occurrence at a time."""

from __future__ import annotations

from typing import Optional

from editor_search.runtime import telemetry
from editor_search.text import (
    Categorizer,
    Document,
    EditorSelection,
    SelectionRange,
    default_categorizer,
    word_at,
)

from .commands import CommandResult
from .cursor import Match, SearchCursor


def select_word(
    doc: Document,
    selection: EditorSelection,
    categorize: Categorizer = default_categorizer,
) -> CommandResult:
    """Expand every empty range to the word around it."""

    ranges = [
        (word_at(doc, item.head, categorize) or item) if item.empty else item
        for item in selection.ranges
    ]
    updated = EditorSelection.create(ranges, selection.main_index)
    if updated == selection:
        return CommandResult(applied=False, status="no_word")
    return CommandResult(applied=True, selection=updated, status="select_word")


def find_next_occurrence(
    doc: Document, selection: EditorSelection, text: str
) -> Optional[Match]:
    """Next occurrence of ``text`` after the last range, wrapping to the first range."""

    ranges = selection.ranges
    ahead = SearchCursor(doc, text, ranges[-1].end).next()
    if not ahead.done:
        return ahead.value
    starts = {item.start for item in ranges}
    for found in SearchCursor(doc, text, 0, ranges[0].start):
        if found.start not in starts:
            return found
    return None


def select_next_occurrence(
    doc: Document,
    selection: EditorSelection,
    categorize: Categorizer = default_categorizer,
) -> CommandResult:
    """Add the next occurrence of the selected text as a new main range.

    A selection holding a bare cursor is first expanded to the words at its
    cursors; ranges with differing text make the command a no-op.
    """

    with telemetry.span(
        "search::select_next_occurrence",
        component="search",
        metadata={"ranges": len(selection.ranges)},
    ) as handle:
        ranges = selection.ranges
        if any(item.empty for item in ranges):
            result = select_word(doc, selection, categorize)
        else:
            text = doc.slice(ranges[0].start, ranges[0].end)
            if any(doc.slice(item.start, item.end) != text for item in ranges):
                result = CommandResult(applied=False, status="mixed_selection")
            else:
                found = find_next_occurrence(doc, selection, text)
                if found is None:
                    result = CommandResult(applied=False, status="no_match")
                else:
                    result = CommandResult(
                        applied=True,
                        selection=selection.add_range(SelectionRange(found.start, found.end)),
                        match=found,
                        scroll_into_view=True,
                        status="added",
                    )
        handle.add_metadata("status", result.status)
        return result


__all__ = ["find_next_occurrence", "select_next_occurrence", "select_word"]
