"""Minimal Textual adapter that runs search commands against a TextArea's text."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional, Sequence, Tuple

from textual.widgets.text_area import Selection

from editor_search.runtime.config import SearchLimits
from editor_search.search import (
    CommandResult,
    Decoration,
    HighlightOptions,
    SearchHighlighter,
    SearchQuery,
    SearchSession,
    SelectionMatchHighlighter,
    close_search_panel,
    find_next,
    find_previous,
    open_search_panel,
    replace_all,
    replace_next,
    select_matches,
    select_next_occurrence,
    select_selection_matches,
    select_word,
    set_search_query,
)
from editor_search.search.highlight import VisibleRange
from editor_search.text import (
    Document,
    EditorSelection,
    SelectionRange,
    TextDocument,
    apply_changes,
    map_position,
)


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


def _location(doc: Document, offset: int) -> Tuple[int, int]:
    line = doc.line_at(offset)
    return line.number - 1, offset - line.start


def _offset(doc: Document, location: Tuple[int, int]) -> int:
    row, column = location
    row = min(max(row, 0), doc.lines - 1)
    line = doc.line(row + 1)
    return line.start + min(max(column, 0), line.end - line.start)


def to_textual_selection(doc: Document, item: SelectionRange) -> Selection:
    """Convert an offset range into Textual's ``(row, column)`` selection."""

    return Selection(_location(doc, item.anchor), _location(doc, item.head))


def from_textual_selection(doc: Document, selection: Selection) -> SelectionRange:
    """Convert a Textual selection into an offset range, clamping out-of-range locations."""

    return SelectionRange(_offset(doc, selection.start), _offset(doc, selection.end))


@dataclass(slots=True)
class TextualSearchHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    update_document: Callable[[str], None]
    update_selection: Callable[[Selection], None] = _noop
    update_decorations: Callable[[Tuple[Decoration, ...], Tuple[Decoration, ...]], None] = _noop
    update_status: Callable[[str], None] = _noop
    # Optional realtime log callback a host may use to surface debug lines
    log: Callable[[str], None] = _noop


SearchRunner = Callable[["TextualSearchAdapter"], CommandResult]

_COMMANDS: Dict[str, SearchRunner] = {
    "open_search_panel": lambda a: open_search_panel(a.session),
    "close_search_panel": lambda a: close_search_panel(a.session),
    "find_next": lambda a: find_next(a.session, a.document, a.selection, limits=a.limits),
    "find_previous": lambda a: find_previous(a.session, a.document, a.selection, limits=a.limits),
    "select_matches": lambda a: select_matches(a.session, a.document, a.selection, limits=a.limits),
    "replace_next": lambda a: replace_next(a.session, a.document, a.selection, limits=a.limits),
    "replace_all": lambda a: replace_all(a.session, a.document, a.selection, limits=a.limits),
    "select_selection_matches": lambda a: select_selection_matches(
        a.document, a.selection, limits=a.limits
    ),
    "select_word": lambda a: select_word(a.document, a.selection),
    "select_next_occurrence": lambda a: select_next_occurrence(a.document, a.selection),
}


class TextualSearchAdapter:
    """Owns document, selection and search session for one Textual editor.

    Every command result is folded back into that state; the host is told
    about new text, selection, decorations and status through the hooks.
    """

    def __init__(
        self,
        text: str,
        hooks: TextualSearchHooks,
        *,
        limits: Optional[SearchLimits] = None,
        highlight_options: Optional[HighlightOptions] = None,
    ) -> None:
        self.hooks = hooks
        self.limits = limits
        self.document = TextDocument.from_text(text)
        self.selection = EditorSelection.cursor(0)
        self.session = SearchSession()
        self.visible_ranges: Tuple[VisibleRange, ...] = ((0, self.document.length),)
        self._search_highlighter = SearchHighlighter(limits=limits)
        self._match_highlighter = SelectionMatchHighlighter(highlight_options, limits=limits)
        self._refresh_decorations()

    @property
    def commands(self) -> Tuple[str, ...]:
        return tuple(_COMMANDS)

    def set_text(self, text: str) -> None:
        """Adopt text edited directly in the widget."""

        self.document = TextDocument.from_text(text)
        self.selection = EditorSelection.cursor(min(self.selection.main.head, self.document.length))
        self.visible_ranges = ((0, self.document.length),)
        self._refresh_decorations()

    def set_textual_selection(self, selection: Selection) -> None:
        self.selection = EditorSelection.create([from_textual_selection(self.document, selection)])
        self._log_state("selection ->")
        self._refresh_decorations()

    def set_visible_rows(self, first_row: int, last_row: int) -> None:
        """Restrict highlighting to the rows the widget currently shows."""

        start = _offset(self.document, (first_row, 0))
        end_line = self.document.line(min(max(last_row, first_row), self.document.lines - 1) + 1)
        self.visible_ranges = ((start, max(start, end_line.end)),)
        self._refresh_decorations()

    def set_query(self, query: SearchQuery) -> CommandResult:
        result = set_search_query(self.session, query)
        self._after_result("set_search_query", result)
        return result

    def run(self, name: str) -> CommandResult:
        """Run a named command and fold its result into the adapter state."""

        runner = _COMMANDS.get(name)
        if runner is None:
            raise KeyError(f"Unknown search command '{name}'")
        self._log_state("command ->", command=name)
        result = runner(self)
        self._after_result(name, result)
        return result

    def _after_result(self, name: str, result: CommandResult) -> None:
        if result.session is not None:
            self.session = result.session
        if result.changes:
            before = self.document
            self.document = apply_changes(before, result.changes)
            self.hooks.update_document(self.document.to_text())
            if result.selection is None:
                self.selection = self._map_selection(result)
            self.visible_ranges = ((0, self.document.length),)
        if result.selection is not None:
            self.selection = result.selection
        if result.applied and (result.selection is not None or result.changes):
            self.hooks.update_selection(to_textual_selection(self.document, self.selection.main))
        self.hooks.update_status(f"{name}:{result.status}")
        self._log_state(
            "result <-",
            applied=result.applied,
            status=result.status,
            changes=len(result.changes) or None,
        )
        self._refresh_decorations()

    def _map_selection(self, result: CommandResult) -> EditorSelection:
        length = self.document.length

        def move(pos: int) -> int:
            return min(map_position(pos, result.changes), length)

        ranges: Sequence[SelectionRange] = [
            SelectionRange(move(item.anchor), move(item.head)) for item in self.selection.ranges
        ]
        return EditorSelection.create(ranges, self.selection.main_index)

    def _refresh_decorations(self) -> None:
        search = self._search_highlighter.update(
            self.session, self.document, self.selection, self.visible_ranges
        )
        matches = self._match_highlighter.update(
            self.document, self.selection, self.visible_ranges
        )
        self.hooks.update_decorations(search, matches)

    def _log_state(self, prefix: str, **fields: object) -> None:
        snapshot: Dict[str, object] = {
            "query": self.session.query.search,
            "panel": self.session.panel_open,
            "ranges": len(self.selection.ranges),
            "main": (self.selection.main.anchor, self.selection.main.head),
        }
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        parts = [prefix]
        for key, value in snapshot.items():
            parts.append(f"{key}={value!r}")
        self.hooks.log(" ".join(parts))


__all__ = [
    "TextualSearchAdapter",
    "TextualSearchHooks",
    "from_textual_selection",
    "to_textual_selection",
]
