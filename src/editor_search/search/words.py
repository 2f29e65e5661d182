"""Word-boundary predicates for whole-word matching."""

from __future__ import annotations

from editor_search.text import Categorizer, CharCategory, Document


def _is_word(categorize: Categorizer, doc: Document, start: int, end: int) -> bool:
    return categorize(doc.slice(start, end)) is CharCategory.WORD


def inside_word_boundaries(
    categorize: Categorizer, doc: Document, start: int, end: int
) -> bool:
    """Whether the characters directly outside ``[start, end)`` are non-word characters."""

    return (start == 0 or not _is_word(categorize, doc, start - 1, start)) and (
        end == doc.length or not _is_word(categorize, doc, end, end + 1)
    )


def inside_word(categorize: Categorizer, doc: Document, start: int, end: int) -> bool:
    """Whether the first and last characters of ``[start, end)`` are word characters."""

    if start >= end:
        return False
    return _is_word(categorize, doc, start, start + 1) and _is_word(
        categorize, doc, end - 1, end
    )


def is_whole_word(categorize: Categorizer, doc: Document, start: int, end: int) -> bool:
    return inside_word_boundaries(categorize, doc, start, end) and inside_word(
        categorize, doc, start, end
    )


__all__ = ["inside_word_boundaries", "inside_word", "is_whole_word"]
