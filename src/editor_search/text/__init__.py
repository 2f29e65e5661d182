"""Document, selection, and character abstractions consumed by the search engine."""

from .changes import Change, apply_changes, map_position
from .chars import (
    Categorizer,
    CharCategory,
    default_categorizer,
    make_categorizer,
    word_at,
)
from .document import Document, Line, TextDocument
from .selection import EditorSelection, SelectionRange
from .validation import RangeValidationError, ensure_offset, ensure_range

__all__ = [
    "Categorizer",
    "Change",
    "CharCategory",
    "Document",
    "EditorSelection",
    "Line",
    "RangeValidationError",
    "SelectionRange",
    "TextDocument",
    "apply_changes",
    "default_categorizer",
    "ensure_offset",
    "ensure_range",
    "make_categorizer",
    "map_position",
    "word_at",
]
