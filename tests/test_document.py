from __future__ import annotations

import pytest

from editor_search.text import (
    Change,
    EditorSelection,
    Line,
    RangeValidationError,
    SelectionRange,
    TextDocument,
    apply_changes,
    make_categorizer,
    map_position,
    word_at,
)


def make_doc(text: str = "one\ntwo") -> TextDocument:
    return TextDocument.from_text(text)


def test_document_reports_length_and_lines() -> None:
    doc = make_doc()

    assert doc.length == 7
    assert doc.lines == 2
    assert doc.line_at(4) == Line(start=4, end=7, number=2, text="two")
    assert doc.line_at(3).number == 1
    assert doc.line(1).text == "one"


def test_slice_spans_line_breaks() -> None:
    doc = make_doc()

    assert doc.slice(2, 5) == "e\nt"
    assert doc.slice(4, 4) == ""
    assert doc.to_text() == "one\ntwo"


def test_iter_range_yields_line_sized_chunks() -> None:
    doc = make_doc()

    assert list(doc.iter_range(0, 7)) == ["one", "\n", "two"]
    assert list(doc.iter_range(3, 4)) == ["\n"]
    assert list(doc.iter_range(1, 5)) == ["ne", "\n", "t"]


def test_out_of_range_offsets_raise() -> None:
    doc = make_doc()

    with pytest.raises(RangeValidationError) as excinfo:
        doc.slice(2, 20)
    assert excinfo.value.span == (2, 20)
    with pytest.raises(RangeValidationError):
        doc.line_at(-1)
    with pytest.raises(IndexError):
        doc.line(3)


def test_replace_returns_new_version() -> None:
    doc = make_doc()

    updated = doc.replace(1, 5, "X")

    assert updated.to_text() == "oXwo"
    assert updated.version == doc.version + 1
    assert doc.to_text() == "one\ntwo"


def test_apply_changes_uses_pre_edit_offsets() -> None:
    doc = make_doc("a-a-a")
    changes = [Change(0, 1, "bb"), Change(4, 5, "cc"), Change(2, 3, "")]

    assert apply_changes(doc, changes).to_text() == "bb--cc"
    assert map_position(4, changes[:1]) == 5


def test_apply_changes_rejects_overlap() -> None:
    with pytest.raises(ValueError):
        apply_changes(make_doc("abcdef"), [Change(0, 3, "x"), Change(2, 4, "y")])


def test_selection_create_sorts_and_merges() -> None:
    selection = EditorSelection.create(
        [SelectionRange(5, 8), SelectionRange(0, 2), SelectionRange(6, 10)]
    )

    assert selection.ranges == (SelectionRange(0, 2), SelectionRange(5, 10))
    assert selection.main_index == 1


def test_add_range_makes_new_range_main() -> None:
    selection = EditorSelection.single(4, 7).add_range(SelectionRange(0, 3))

    assert selection.ranges == (SelectionRange(0, 3), SelectionRange(4, 7))
    assert selection.main == SelectionRange(0, 3)


def test_word_at_finds_surrounding_word() -> None:
    doc = make_doc("foo bar-baz")

    assert word_at(doc, 5) == SelectionRange(4, 7)
    assert word_at(doc, 3) == SelectionRange(0, 3)
    assert word_at(doc, 7) == SelectionRange(4, 7)
    assert word_at(make_doc("a  b"), 2) is None
    assert word_at(doc, 7, make_categorizer("-")) == SelectionRange(4, 11)
