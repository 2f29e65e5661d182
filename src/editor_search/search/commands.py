"""Navigation and replace commands driven by the session's query.

Commands never mutate their inputs: each returns a ``CommandResult`` with
the selection, edits and session the host should adopt.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import wraps
from typing import Callable, List, Optional, Tuple

from editor_search.runtime import telemetry
from editor_search.runtime.config import LIMITS, SearchLimits
from editor_search.text import (
    Change,
    Document,
    EditorSelection,
    SelectionRange,
    map_position,
)

from .cursor import Match, SearchCursor
from .query import Query, SearchQuery
from .session import SearchSession


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Outcome of a command; ``applied`` is ``False`` when nothing changed."""

    applied: bool
    session: Optional[SearchSession] = None
    selection: Optional[EditorSelection] = None
    changes: Tuple[Change, ...] = ()
    match: Optional[Match] = None
    scroll_into_view: bool = False
    status: str = "ok"


SearchHandler = Callable[
    [SearchSession, Query, Document, EditorSelection, SearchLimits], CommandResult
]
SearchCommand = Callable[..., CommandResult]


def open_search_panel(session: SearchSession) -> CommandResult:
    return CommandResult(applied=True, session=session.with_panel(True), status="open_panel")


def close_search_panel(session: SearchSession) -> CommandResult:
    if not session.panel_open:
        return CommandResult(applied=False, session=session, status="panel_closed")
    return CommandResult(applied=True, session=session.with_panel(False), status="close_panel")


def set_search_query(session: SearchSession, query: SearchQuery) -> CommandResult:
    updated = session.with_query(query)
    status = "query_unchanged" if updated is session else "query_set"
    return CommandResult(applied=updated is not session, session=updated, status=status)


def search_command(name: str) -> Callable[[SearchHandler], SearchCommand]:
    """Wrap a handler so it only runs with a valid query.

    With an invalid query the wrapped command opens the search panel
    instead, mirroring what a user expects from pressing "find next" on an
    empty search field.
    """

    def decorate(handler: SearchHandler) -> SearchCommand:
        @wraps(handler)
        def run(
            session: SearchSession,
            doc: Document,
            selection: EditorSelection,
            *,
            limits: Optional[SearchLimits] = None,
        ) -> CommandResult:
            with telemetry.span(
                f"search::{name}",
                component="search",
                metadata={"kind": session.query.kind.value, "doc_length": doc.length},
            ) as handle:
                engine = session.engine
                if not engine.valid:
                    handle.add_metadata("status", "open_panel")
                    return open_search_panel(session)
                result = handler(session, engine, doc, selection, limits or LIMITS)
                handle.add_metadata("status", result.status)
                return result

        return run

    return decorate


def _select(match: Match) -> EditorSelection:
    return EditorSelection.single(match.start, match.end)


@search_command("find_next")
def find_next(
    session: SearchSession,
    engine: Query,
    doc: Document,
    selection: EditorSelection,
    limits: SearchLimits,
) -> CommandResult:
    main = selection.main
    found = engine.next_match(doc, main.start, main.end)
    if found is None or main.same_span(found.start, found.end):
        return CommandResult(applied=False, session=session, status="no_match")
    return CommandResult(
        applied=True,
        session=session,
        selection=_select(found),
        match=found,
        scroll_into_view=True,
        status="found",
    )


@search_command("find_previous")
def find_previous(
    session: SearchSession,
    engine: Query,
    doc: Document,
    selection: EditorSelection,
    limits: SearchLimits,
) -> CommandResult:
    main = selection.main
    found = engine.prev_match(doc, main.start, main.end)
    if found is None:
        return CommandResult(applied=False, session=session, status="no_match")
    return CommandResult(
        applied=True,
        session=session,
        selection=_select(found),
        match=found,
        scroll_into_view=True,
        status="found",
    )


@search_command("select_matches")
def select_matches(
    session: SearchSession,
    engine: Query,
    doc: Document,
    selection: EditorSelection,
    limits: SearchLimits,
) -> CommandResult:
    matches = engine.match_all(doc, limits.select_matches_limit)
    if not matches:
        status = "no_match" if matches is not None else "too_many"
        return CommandResult(applied=False, session=session, status=status)
    ranges = [SelectionRange(m.start, m.end) for m in matches]
    return CommandResult(
        applied=True,
        session=session,
        selection=EditorSelection.create(ranges),
        status="selected",
    )


@search_command("replace_next")
def replace_next(
    session: SearchSession,
    engine: Query,
    doc: Document,
    selection: EditorSelection,
    limits: SearchLimits,
) -> CommandResult:
    main = selection.main
    target = engine.next_match(doc, main.start, main.start)
    if target is None:
        return CommandResult(applied=False, session=session, status="no_match")
    changes: List[Change] = []
    following: Optional[Match] = target
    if main.same_span(target.start, target.end):
        changes.append(Change(target.start, target.end, engine.get_replacement(target)))
        following = engine.next_match(doc, target.start, target.end)
    new_selection = None
    if following is not None:
        new_selection = EditorSelection.single(
            map_position(following.start, changes), map_position(following.end, changes)
        )
    elif changes:
        # Last match replaced; park the cursor after the inserted text.
        new_selection = EditorSelection.cursor(map_position(target.end, changes))
    return CommandResult(
        applied=True,
        session=session,
        selection=new_selection,
        changes=tuple(changes),
        match=following,
        scroll_into_view=new_selection is not None,
        status="replaced" if changes else "found",
    )


@search_command("replace_all")
def replace_all(
    session: SearchSession,
    engine: Query,
    doc: Document,
    selection: EditorSelection,
    limits: SearchLimits,
) -> CommandResult:
    matches = engine.match_all(doc, limits.replace_all_limit)
    if not matches:
        status = "no_match" if matches is not None else "too_many"
        return CommandResult(applied=False, session=session, status=status)
    changes = tuple(Change(m.start, m.end, engine.get_replacement(m)) for m in matches)
    return CommandResult(
        applied=True, session=session, changes=changes, status="replaced_all"
    )


def select_selection_matches(
    doc: Document,
    selection: EditorSelection,
    *,
    limits: Optional[SearchLimits] = None,
) -> CommandResult:
    """Select every occurrence of the (single, non-empty) selected text."""

    limit = (limits or LIMITS).select_matches_limit
    main = selection.main
    if len(selection.ranges) > 1 or main.empty:
        return CommandResult(applied=False, status="needs_single_selection")
    ranges: List[SelectionRange] = []
    main_index = 0
    for found in SearchCursor(doc, doc.slice(main.start, main.end)):
        if len(ranges) >= limit:
            return CommandResult(applied=False, status="too_many")
        if found.start == main.start:
            main_index = len(ranges)
        ranges.append(SelectionRange(found.start, found.end))
    return CommandResult(
        applied=True,
        selection=EditorSelection.create(ranges, main_index),
        status="selected",
    )


__all__ = [
    "CommandResult",
    "close_search_panel",
    "find_next",
    "find_previous",
    "open_search_panel",
    "replace_all",
    "replace_next",
    "search_command",
    "select_matches",
    "select_selection_matches",
    "set_search_query",
]
