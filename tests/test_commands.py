from __future__ import annotations

from editor_search.runtime import SearchLimits
from editor_search.search import (
    SearchQuery,
    SearchSession,
    close_search_panel,
    find_next,
    find_previous,
    open_search_panel,
    replace_all,
    replace_next,
    select_matches,
    select_selection_matches,
    set_search_query,
)
from editor_search.text import (
    Change,
    EditorSelection,
    SelectionRange,
    TextDocument,
    apply_changes,
)


def make_session(search: str, **options: object) -> SearchSession:
    return SearchSession(query=SearchQuery(search, **options), panel_open=True)  # type: ignore[arg-type]


def make_doc(text: str) -> TextDocument:
    return TextDocument.from_text(text)


def test_find_next_selects_following_match() -> None:
    doc = make_doc("one two one two")
    session = make_session("two")

    first = find_next(session, doc, EditorSelection.cursor(0))
    assert first.applied
    assert first.selection == EditorSelection.single(4, 7)
    assert first.scroll_into_view is True

    second = find_next(session, doc, first.selection)
    assert second.selection == EditorSelection.single(12, 15)

    wrapped = find_next(session, doc, second.selection)
    assert wrapped.selection == EditorSelection.single(4, 7)


def test_find_next_is_noop_when_only_match_is_selected() -> None:
    result = find_next(make_session("two"), make_doc("two"), EditorSelection.single(0, 3))

    assert result.applied is False
    assert result.status == "no_match"


def test_invalid_query_opens_panel() -> None:
    session = SearchSession(query=SearchQuery(""))

    result = find_next(session, make_doc("abc"), EditorSelection.cursor(0))

    assert result.status == "open_panel"
    assert result.session is not None and result.session.panel_open


def test_find_previous_selects_preceding_match() -> None:
    result = find_previous(make_session("ab"), make_doc("ab ab ab"), EditorSelection.single(6, 8))

    assert result.selection == EditorSelection.single(3, 5)


def test_select_matches_selects_every_match() -> None:
    doc = make_doc("ab ab")
    session = make_session("ab")

    result = select_matches(session, doc, EditorSelection.cursor(0))
    assert result.selection is not None
    assert result.selection.ranges == (SelectionRange(0, 2), SelectionRange(3, 5))

    limited = select_matches(
        session, doc, EditorSelection.cursor(0), limits=SearchLimits(select_matches_limit=1)
    )
    assert limited.applied is False
    assert limited.status == "too_many"

    missing = select_matches(make_session("zz"), doc, EditorSelection.cursor(0))
    assert missing.status == "no_match"


def test_replace_next_first_selects_then_replaces() -> None:
    doc = make_doc("foo foo foo")
    session = make_session("foo", replace="barbar")

    found = replace_next(session, doc, EditorSelection.cursor(0))
    assert found.status == "found"
    assert found.changes == ()
    assert found.selection == EditorSelection.single(0, 3)

    replaced = replace_next(session, doc, found.selection)
    assert replaced.changes == (Change(0, 3, "barbar"),)
    assert replaced.selection == EditorSelection.single(7, 10)

    updated = apply_changes(doc, replaced.changes)
    assert updated.to_text() == "barbar foo foo"
    assert updated.slice(7, 10) == "foo"


def test_replace_next_on_last_match_leaves_cursor_after_insert() -> None:
    doc = make_doc("foo")
    session = make_session("foo", replace="barbar")

    result = replace_next(session, doc, EditorSelection.single(0, 3))

    assert result.changes == (Change(0, 3, "barbar"),)
    assert result.match is None
    assert result.selection == EditorSelection.cursor(6)


def test_replace_all_replaces_every_match() -> None:
    doc = make_doc("a-a")

    result = replace_all(make_session("a", replace="bb"), doc, EditorSelection.cursor(0))

    assert result.status == "replaced_all"
    assert len(result.changes) == 2
    assert apply_changes(doc, result.changes).to_text() == "bb-bb"


def test_replace_all_expands_regexp_templates() -> None:
    doc = make_doc("x=1 y=2")
    session = make_session(r"(\w)=(\d)", replace="$2=$1", regexp=True)

    result = replace_all(session, doc, EditorSelection.cursor(0))

    assert apply_changes(doc, result.changes).to_text() == "1=x 2=y"


def test_select_selection_matches_keeps_main_on_selected_text() -> None:
    doc = make_doc("ab x ab")

    result = select_selection_matches(doc, EditorSelection.single(5, 7))

    assert result.selection is not None
    assert result.selection.ranges == (SelectionRange(0, 2), SelectionRange(5, 7))
    assert result.selection.main == SelectionRange(5, 7)
    assert select_selection_matches(doc, EditorSelection.cursor(1)).applied is False


def test_panel_and_query_commands() -> None:
    session = SearchSession()

    assert close_search_panel(session).applied is False
    opened = open_search_panel(session).session
    assert opened is not None and opened.panel_open
    closed = close_search_panel(opened).session
    assert closed is not None and not closed.panel_open

    updated = set_search_query(session, SearchQuery("x"))
    assert updated.applied and updated.session is not None
    assert updated.session.query.search == "x"
    assert set_search_query(updated.session, SearchQuery("x")).applied is False
