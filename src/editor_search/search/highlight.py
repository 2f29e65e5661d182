"""Decorations for every visible match of the session's query."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from editor_search.runtime import telemetry
from editor_search.runtime.config import LIMITS, SearchLimits
from editor_search.text import Document, EditorSelection

from .session import SearchSession

VisibleRange = Tuple[int, int]


@dataclass(frozen=True, slots=True)
class Decoration:
    """A range to style; ``selected`` marks the match under the main selection."""

    start: int
    end: int
    selected: bool = False


def merge_visible_ranges(
    ranges: Iterable[VisibleRange], margin: int
) -> List[VisibleRange]:
    """Join visible ranges separated by less than ``margin`` into one scan window."""

    items = list(ranges)
    merged: List[VisibleRange] = []
    index = 0
    while index < len(items):
        start, end = items[index]
        while index < len(items) - 1 and end > items[index + 1][0] - margin:
            index += 1
            end = items[index][1]
        merged.append((start, end))
        index += 1
    return merged


def search_decorations(
    session: SearchSession,
    doc: Document,
    selection: EditorSelection,
    visible_ranges: Sequence[VisibleRange],
    *,
    limits: Optional[SearchLimits] = None,
) -> Tuple[Decoration, ...]:
    """Decorate every match intersecting the visible ranges.

    Nothing is produced while the panel is closed or the query is invalid.
    """

    engine = session.engine
    if not session.panel_open or not engine.valid:
        return ()
    margin = (limits or LIMITS).regexp_highlight_margin
    main = selection.main
    found: List[Decoration] = []

    def add(start: int, end: int) -> None:
        # Padded windows may overlap; keep the set sorted and disjoint.
        if found and start < found[-1].end:
            return
        found.append(Decoration(start, end, main.same_span(start, end)))

    for start, end in merge_visible_ranges(visible_ranges, margin):
        engine.highlight(doc, start, end, add)
    return tuple(found)


class SearchHighlighter:
    """Keeps the decoration set for one view, recomputed when its inputs change."""

    def __init__(self, *, limits: Optional[SearchLimits] = None) -> None:
        self._limits = limits
        self._doc: Optional[Document] = None
        self._inputs: Optional[tuple] = None
        self.decorations: Tuple[Decoration, ...] = ()

    def update(
        self,
        session: SearchSession,
        doc: Document,
        selection: EditorSelection,
        visible_ranges: Sequence[VisibleRange],
    ) -> Tuple[Decoration, ...]:
        inputs = (session, selection, tuple(visible_ranges))
        if doc is self._doc and inputs == self._inputs:
            return self.decorations
        with telemetry.span(
            "highlight::search",
            component="highlight",
            metadata={"windows": len(inputs[2]), "panel_open": session.panel_open},
        ) as handle:
            self.decorations = search_decorations(
                session, doc, selection, visible_ranges, limits=self._limits
            )
            handle.add_metadata("count", len(self.decorations))
        self._doc = doc
        self._inputs = inputs
        return self.decorations


__all__ = [
    "Decoration",
    "SearchHighlighter",
    "VisibleRange",
    "merge_visible_ranges",
    "search_decorations",
]
