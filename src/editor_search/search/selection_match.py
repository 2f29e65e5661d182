"""Highlight other occurrences of the selected text (or the word at the cursor)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from editor_search.runtime import telemetry
from editor_search.runtime.config import LIMITS, SearchLimits
from editor_search.text import (
    Categorizer,
    Document,
    EditorSelection,
    default_categorizer,
    word_at,
)

from .cursor import SearchCursor
from .highlight import Decoration, VisibleRange
from .words import is_whole_word


@dataclass(frozen=True, slots=True)
class HighlightOptions:
    # Highlight the word around an empty cursor.
    highlight_word_around_cursor: bool = False
    # Shortest selection that gets its matches highlighted.
    min_selection_length: int = 1
    # Matches (per pass) above which highlighting is switched off.
    max_matches: int = 100


def combine_highlight_options(*options: HighlightOptions) -> HighlightOptions:
    """Merge option sets from several sources: flags are OR-ed, numbers take the minimum."""

    if not options:
        return HighlightOptions()
    return HighlightOptions(
        highlight_word_around_cursor=any(o.highlight_word_around_cursor for o in options),
        min_selection_length=min(o.min_selection_length for o in options),
        max_matches=min(o.max_matches for o in options),
    )


def selection_match_decorations(
    doc: Document,
    selection: EditorSelection,
    visible_ranges: Sequence[VisibleRange],
    options: Optional[HighlightOptions] = None,
    *,
    categorize: Categorizer = default_categorizer,
    limits: Optional[SearchLimits] = None,
) -> Tuple[Decoration, ...]:
    options = options or HighlightOptions()
    if len(selection.ranges) > 1:
        return ()
    main = selection.main
    check: Optional[Categorizer] = None
    if main.empty:
        if not options.highlight_word_around_cursor:
            return ()
        word = word_at(doc, main.head, categorize)
        if word is None:
            return ()
        check = categorize
        text = doc.slice(word.start, word.end)
    else:
        length = main.end - main.start
        max_length = (limits or LIMITS).selection_match_max_length
        if length < options.min_selection_length or length > max_length:
            return ()
        text = doc.slice(main.start, main.end).strip()
        if not text:
            return ()

    decorations: List[Decoration] = []
    for start, end in visible_ranges:
        for found in SearchCursor(doc, text, start, end).overlapping():
            if check is not None and not is_whole_word(check, doc, found.start, found.end):
                continue
            if found.start <= main.start and found.end >= main.end:
                decorations.append(Decoration(found.start, found.end, selected=True))
            elif found.start >= main.end or found.end <= main.start:
                decorations.append(Decoration(found.start, found.end))
            else:
                continue
            if len(decorations) > options.max_matches:
                return ()
    return tuple(decorations)


class SelectionMatchHighlighter:
    """Caches selection-match decorations until the document, selection or viewport changes."""

    def __init__(
        self,
        options: Optional[HighlightOptions] = None,
        *,
        categorize: Categorizer = default_categorizer,
        limits: Optional[SearchLimits] = None,
    ) -> None:
        self.options = options or HighlightOptions()
        self._categorize = categorize
        self._limits = limits
        self._doc: Optional[Document] = None
        self._inputs: Optional[tuple] = None
        self.decorations: Tuple[Decoration, ...] = ()

    def update(
        self,
        doc: Document,
        selection: EditorSelection,
        visible_ranges: Sequence[VisibleRange],
    ) -> Tuple[Decoration, ...]:
        inputs = (selection, tuple(visible_ranges))
        if doc is self._doc and inputs == self._inputs:
            return self.decorations
        with telemetry.span(
            "highlight::selection_match",
            component="highlight",
            metadata={"ranges": len(selection.ranges)},
        ) as handle:
            self.decorations = selection_match_decorations(
                doc,
                selection,
                visible_ranges,
                self.options,
                categorize=self._categorize,
                limits=self._limits,
            )
            handle.add_metadata("count", len(self.decorations))
        self._doc = doc
        self._inputs = inputs
        return self.decorations


__all__ = [
    "HighlightOptions",
    "SelectionMatchHighlighter",
    "combine_highlight_options",
    "selection_match_decorations",
]
