"""Textual bindings for the search engine."""

from .controller import (
    TextualSearchAdapter,
    TextualSearchHooks,
    from_textual_selection,
    to_textual_selection,
)

__all__ = [
    "TextualSearchAdapter",
    "TextualSearchHooks",
    "from_textual_selection",
    "to_textual_selection",
]
