from __future__ import annotations

from editor_search.search import find_next_occurrence, select_next_occurrence, select_word
from editor_search.text import EditorSelection, SelectionRange, TextDocument


def make_doc(text: str = "foo bar foo baz foo") -> TextDocument:
    return TextDocument.from_text(text)


def test_cursor_expands_to_word_then_adds_occurrences() -> None:
    doc = make_doc()

    seeded = select_next_occurrence(doc, EditorSelection.cursor(1))
    assert seeded.status == "select_word"
    assert seeded.selection == EditorSelection.single(0, 3)

    second = select_next_occurrence(doc, seeded.selection)
    assert second.status == "added"
    assert second.selection is not None
    assert second.selection.ranges == (SelectionRange(0, 3), SelectionRange(8, 11))
    assert second.selection.main == SelectionRange(8, 11)
    assert second.scroll_into_view is True

    third = select_next_occurrence(doc, second.selection)
    assert third.selection is not None
    assert len(third.selection.ranges) == 3
    assert third.selection.main == SelectionRange(16, 19)

    done = select_next_occurrence(doc, third.selection)
    assert done.applied is False
    assert done.status == "no_match"


def test_search_wraps_before_first_range() -> None:
    doc = make_doc()
    selection = EditorSelection.create([SelectionRange(8, 11), SelectionRange(16, 19)])

    result = select_next_occurrence(doc, selection)

    assert result.selection is not None
    assert result.selection.main == SelectionRange(0, 3)
    assert len(result.selection.ranges) == 3


def test_mixed_selection_is_noop() -> None:
    selection = EditorSelection.create([SelectionRange(0, 3), SelectionRange(4, 7)])

    result = select_next_occurrence(make_doc(), selection)

    assert result.applied is False
    assert result.status == "mixed_selection"


def test_find_next_occurrence_looks_past_last_range() -> None:
    doc = make_doc()

    found = find_next_occurrence(doc, EditorSelection.single(0, 3), "foo")

    assert found is not None
    assert (found.start, found.end) == (8, 11)


def test_select_word_without_word_is_noop() -> None:
    result = select_word(make_doc("a  b"), EditorSelection.cursor(2))

    assert result.applied is False
    assert result.status == "no_word"
