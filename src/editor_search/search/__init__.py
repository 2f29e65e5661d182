"""Matching engine: cursors, queries, highlighters, and search commands."""

from .commands import (
    CommandResult,
    close_search_panel,
    find_next,
    find_previous,
    open_search_panel,
    replace_all,
    replace_next,
    search_command,
    select_matches,
    select_selection_matches,
    set_search_query,
)
from .cursor import Match, SearchCursor, fold_case
from .highlight import (
    Decoration,
    SearchHighlighter,
    merge_visible_ranges,
    search_decorations,
)
from .occurrence import find_next_occurrence, select_next_occurrence, select_word
from .query import (
    Query,
    QueryKind,
    RegExpQuery,
    SearchQuery,
    StringQuery,
    expand_replacement,
    unquote,
)
from .regexp import RegExpCursor, valid_regexp
from .selection_match import (
    HighlightOptions,
    SelectionMatchHighlighter,
    combine_highlight_options,
    selection_match_decorations,
)
from .session import SearchSession
from .words import inside_word, inside_word_boundaries, is_whole_word

__all__ = [
    "CommandResult",
    "Decoration",
    "HighlightOptions",
    "Match",
    "Query",
    "QueryKind",
    "RegExpCursor",
    "RegExpQuery",
    "SearchCursor",
    "SearchHighlighter",
    "SearchQuery",
    "SearchSession",
    "SelectionMatchHighlighter",
    "StringQuery",
    "close_search_panel",
    "combine_highlight_options",
    "expand_replacement",
    "find_next",
    "find_next_occurrence",
    "find_previous",
    "fold_case",
    "inside_word",
    "inside_word_boundaries",
    "is_whole_word",
    "merge_visible_ranges",
    "open_search_panel",
    "replace_all",
    "replace_next",
    "search_command",
    "search_decorations",
    "select_matches",
    "select_next_occurrence",
    "select_selection_matches",
    "select_word",
    "selection_match_decorations",
    "set_search_query",
    "unquote",
    "valid_regexp",
]
