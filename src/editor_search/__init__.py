"""Text search engine for editors: queries, cursors, highlighters, and commands."""

__all__ = [
    "adapters",
    "runtime",
    "search",
    "text",
]

__version__ = "0.1.0"
