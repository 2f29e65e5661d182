"""Character classification used for word-boundary decisions."""

from __future__ import annotations

import enum
from typing import Callable, Optional

from .document import Document
from .selection import SelectionRange


class CharCategory(enum.Enum):
    WORD = "word"
    SPACE = "space"
    OTHER = "other"


Categorizer = Callable[[str], CharCategory]


def make_categorizer(word_chars: str = "") -> Categorizer:
    """Return a classifier treating alphanumerics, ``_`` and ``word_chars`` as word characters."""

    extra = frozenset(word_chars)

    def categorize(char: str) -> CharCategory:
        if not char:
            return CharCategory.SPACE
        if char.isalnum() or char == "_" or char in extra:
            return CharCategory.WORD
        if char.isspace():
            return CharCategory.SPACE
        return CharCategory.OTHER

    return categorize


default_categorizer = make_categorizer()


def word_at(
    doc: Document, pos: int, categorize: Categorizer = default_categorizer
) -> Optional[SelectionRange]:
    """Range of the word touching ``pos`` on its line, or ``None``."""

    line = doc.line_at(pos)
    text = line.text
    start = end = pos - line.start
    while start > 0 and categorize(text[start - 1]) is CharCategory.WORD:
        start -= 1
    while end < len(text) and categorize(text[end]) is CharCategory.WORD:
        end += 1
    if start == end:
        return None
    return SelectionRange(line.start + start, line.start + end)


__all__ = [
    "CharCategory",
    "Categorizer",
    "make_categorizer",
    "default_categorizer",
    "word_at",
]
