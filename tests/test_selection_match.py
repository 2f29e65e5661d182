from __future__ import annotations

from editor_search.runtime import SearchLimits
from editor_search.search import (
    Decoration,
    HighlightOptions,
    SelectionMatchHighlighter,
    combine_highlight_options,
    selection_match_decorations,
)
from editor_search.text import EditorSelection, SelectionRange, TextDocument


def make_doc(text: str = "foo bar foo") -> TextDocument:
    return TextDocument.from_text(text)


def visible(doc: TextDocument) -> list[tuple[int, int]]:
    return [(0, doc.length)]


def test_selected_text_is_highlighted_elsewhere() -> None:
    doc = make_doc()

    found = selection_match_decorations(doc, EditorSelection.single(0, 3), visible(doc))

    assert found == (Decoration(0, 3, selected=True), Decoration(8, 11))


def test_multiple_ranges_disable_highlighting() -> None:
    doc = make_doc()
    selection = EditorSelection.create([SelectionRange(0, 3), SelectionRange(8, 11)])

    assert selection_match_decorations(doc, selection, visible(doc)) == ()


def test_word_around_cursor_requires_whole_words() -> None:
    doc = make_doc("foo food foo")
    cursor = EditorSelection.cursor(1)

    assert selection_match_decorations(doc, cursor, visible(doc)) == ()

    options = HighlightOptions(highlight_word_around_cursor=True)
    found = selection_match_decorations(doc, cursor, visible(doc), options)
    assert found == (Decoration(0, 3, selected=True), Decoration(9, 12))


def test_selection_length_bounds() -> None:
    doc = make_doc()
    selection = EditorSelection.single(0, 3)

    short = HighlightOptions(min_selection_length=4)
    assert selection_match_decorations(doc, selection, visible(doc), short) == ()

    limits = SearchLimits(selection_match_max_length=2)
    assert selection_match_decorations(doc, selection, visible(doc), limits=limits) == ()


def test_too_many_matches_disable_highlighting() -> None:
    doc = make_doc()
    options = HighlightOptions(max_matches=1)

    assert selection_match_decorations(doc, EditorSelection.single(0, 3), visible(doc), options) == ()


def test_selection_text_is_stripped() -> None:
    doc = make_doc("a  b")
    assert selection_match_decorations(doc, EditorSelection.single(1, 3), visible(doc)) == ()

    doc = make_doc(" foo x foo")
    found = selection_match_decorations(doc, EditorSelection.single(0, 4), visible(doc))
    assert found == (Decoration(7, 10),)


def test_combine_highlight_options() -> None:
    combined = combine_highlight_options(
        HighlightOptions(min_selection_length=3, max_matches=50),
        HighlightOptions(highlight_word_around_cursor=True, min_selection_length=2),
    )

    assert combined == HighlightOptions(
        highlight_word_around_cursor=True, min_selection_length=2, max_matches=50
    )
    assert combine_highlight_options() == HighlightOptions()


def test_highlighter_caches_until_selection_changes() -> None:
    doc = make_doc()
    highlighter = SelectionMatchHighlighter()

    first = highlighter.update(doc, EditorSelection.single(0, 3), visible(doc))
    assert highlighter.update(doc, EditorSelection.single(0, 3), visible(doc)) is first
    assert highlighter.update(doc, EditorSelection.cursor(0), visible(doc)) == ()
