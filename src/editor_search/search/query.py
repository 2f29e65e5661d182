"""Search queries: one construction surface, two matching variants.

``SearchQuery`` is the immutable value a host builds from its search
fields. ``SearchQuery.create()`` turns it into the engine for its kind,
``StringQuery`` for literal text or ``RegExpQuery`` for regular
expressions. Both engines expose the same operations:

``next_match(doc, cur_from, cur_to)`` -- first match from ``cur_to``, wrapping to ``[0, cur_from)``
``prev_match(doc, cur_from, cur_to)`` -- last match before ``cur_from``, wrapping to ``[cur_to, end)``
``match_all(doc, limit)`` -- every non-overlapping match, or ``None`` past ``limit``
``get_replacement(match)`` -- text to insert in place of ``match``
``highlight(doc, start, end, add)`` -- report matches intersecting a visible window

Callers check ``valid`` before running any of them.
"""

from __future__ import annotations

import enum
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Dict, Iterator, List, Optional, Sequence, Type, Union

from editor_search.runtime import telemetry
from editor_search.runtime.config import LIMITS, SearchLimits
from editor_search.text import Categorizer, Document, default_categorizer

from .cursor import Match, MatchTest, SearchCursor, fold_case
from .regexp import RegExpCursor, valid_regexp
from .words import is_whole_word

AddMatch = Callable[[int, int], None]

_ESCAPE = re.compile(r"\\([nrt\\])")
_ESCAPES = {"n": "\n", "r": "\r", "t": "\t", "\\": "\\"}
_TEMPLATE = re.compile(r"\$([$&\d])")


class QueryKind(enum.Enum):
    LITERAL = "literal"
    REGEXP = "regexp"


def unquote(text: str) -> str:
    """Resolve ``\\n``, ``\\r``, ``\\t`` and ``\\\\`` escapes typed into a search field."""

    return _ESCAPE.sub(lambda m: _ESCAPES[m.group(1)], text)


def expand_replacement(template: str, groups: Sequence[str]) -> str:
    """Expand ``$&``, ``$$`` and ``$1``-``$9`` against ``groups``.

    References to groups that do not exist, and ``$0``, are left as typed.
    """

    def substitute(found: "re.Match[str]") -> str:
        key = found.group(1)
        if key == "$":
            return "$"
        if key == "&":
            return groups[0] if groups else found.group(0)
        index = int(key)
        if index != 0 and index < len(groups):
            return groups[index]
        return found.group(0)

    return _TEMPLATE.sub(substitute, template)


@dataclass(frozen=True, slots=True)
class SearchQuery:
    """Immutable description of what to search for and what to replace it with."""

    search: str = ""
    replace: str = ""
    case_sensitive: bool = False
    regexp: bool = False
    whole_word: bool = False
    literal: bool = False

    @property
    def kind(self) -> QueryKind:
        return QueryKind.REGEXP if self.regexp else QueryKind.LITERAL

    @property
    def unquoted(self) -> str:
        return self.search if self.literal else unquote(self.search)

    @property
    def valid(self) -> bool:
        return self.create().valid

    def eq(self, other: "SearchQuery") -> bool:
        return self == other

    def create(
        self,
        *,
        limits: Optional[SearchLimits] = None,
        categorize: Categorizer = default_categorizer,
    ) -> "Query":
        return _QUERY_TYPES[self.kind](self, limits=limits, categorize=categorize)

    def get_cursor(
        self, doc: Document, start: int = 0, end: Optional[int] = None
    ) -> Iterator[Match]:
        return self.create().get_cursor(doc, start, end)


class _QueryBase(ABC):
    kind: QueryKind

    def __init__(
        self,
        settings: SearchQuery,
        *,
        limits: Optional[SearchLimits] = None,
        categorize: Categorizer = default_categorizer,
    ) -> None:
        self.settings = settings
        self.limits = limits or LIMITS
        self.categorize = categorize
        self.valid = False

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.settings!r}, valid={self.valid})"

    def eq(self, other: "Query") -> bool:
        return type(self) is type(other) and self.settings == other.settings

    def _word_test(self, doc: Document) -> Optional[MatchTest]:
        if not self.settings.whole_word:
            return None
        categorize = self.categorize
        return lambda start, end: is_whole_word(categorize, doc, start, end)

    @abstractmethod
    def _cursor(self, doc: Document, start: int = 0, end: Optional[int] = None):
        """Cursor over ``[start, end)`` applying this query's match test."""

    @abstractmethod
    def prev_match(self, doc: Document, cur_from: int, cur_to: int) -> Optional[Match]:
        """Last match before ``cur_from``, wrapping to ``[cur_to, end)``."""

    @abstractmethod
    def get_replacement(self, match: Match) -> str:
        """Text to insert in place of ``match``."""

    @abstractmethod
    def highlight(self, doc: Document, start: int, end: int, add: AddMatch) -> None:
        """Report matches intersecting ``[start, end)`` through ``add``."""

    def _settle(self, cursor):
        return cursor

    def get_cursor(
        self, doc: Document, start: int = 0, end: Optional[int] = None
    ) -> Iterator[Match]:
        if not self.valid:
            return iter(())
        return self._cursor(doc, start, end)

    def next_match(self, doc: Document, cur_from: int, cur_to: int) -> Optional[Match]:
        if not self.valid:
            return None
        cursor = self._settle(self._cursor(doc, cur_to).next())
        if cursor.done and self.valid:
            cursor = self._settle(self._cursor(doc, 0, cur_from).next())
        return None if cursor.done else cursor.value

    def match_all(self, doc: Document, limit: int) -> Optional[List[Match]]:
        if not self.valid:
            return None
        cursor = self._cursor(doc)
        ranges: List[Match] = []
        while not cursor.next().done:
            if len(ranges) >= limit:
                telemetry.record_event(
                    "query.limit",
                    level="debug",
                    data={"search": self.settings.search, "limit": limit},
                    logger_name="editor_search.query",
                )
                return None
            ranges.append(cursor.value)
        self._settle(cursor)
        return ranges if self.valid else []

    def _highlight_with(
        self, doc: Document, start: int, end: int, pad: int, add: AddMatch
    ) -> None:
        if not self.valid:
            return
        cursor = self._cursor(doc, max(0, start - pad), min(end + pad, doc.length))
        while not cursor.next().done:
            add(cursor.value.start, cursor.value.end)
        self._settle(cursor)


class StringQuery(_QueryBase):
    """Literal search; escapes are resolved unless the query is ``literal``."""

    kind = QueryKind.LITERAL

    def __init__(
        self,
        settings: SearchQuery,
        *,
        limits: Optional[SearchLimits] = None,
        categorize: Categorizer = default_categorizer,
    ) -> None:
        super().__init__(settings, limits=limits, categorize=categorize)
        self.search = settings.unquoted
        self.valid = bool(self.search)
        self._normalize = None if settings.case_sensitive else fold_case
        needle = self._normalize(self.search) if self._normalize else self.search
        # Widest stretch of document text a single match can cover.
        self._reach = max(len(self.search), len(needle))

    def _cursor(self, doc: Document, start: int = 0, end: Optional[int] = None) -> SearchCursor:
        return SearchCursor(
            doc,
            self.search,
            start,
            end,
            normalize=self._normalize,
            test=self._word_test(doc),
        )

    def _prev_match_in_range(self, doc: Document, start: int, end: int) -> Optional[Match]:
        # Scanning backwards is done chunk by chunk, forward inside each chunk.
        chunk_size = self.limits.find_prev_chunk_size
        pos = end
        while True:
            begin = max(start, pos - chunk_size - self._reach)
            cursor = self._cursor(doc, begin, pos)
            found: Optional[Match] = None
            while not cursor.next_overlapping().done:
                found = cursor.value
            if found is not None:
                return found
            if begin == start:
                return None
            pos -= chunk_size

    def prev_match(self, doc: Document, cur_from: int, cur_to: int) -> Optional[Match]:
        if not self.valid:
            return None
        return self._prev_match_in_range(doc, 0, cur_from) or self._prev_match_in_range(
            doc, cur_to, doc.length
        )

    def get_replacement(self, match: Match) -> str:
        del match
        return self.settings.replace

    def highlight(self, doc: Document, start: int, end: int, add: AddMatch) -> None:
        self._highlight_with(doc, start, end, self._reach, add)


class RegExpQuery(_QueryBase):
    """Regular-expression search with ``$``-template replacements.

    ``valid`` turns ``False`` if the regex engine faults during a scan so
    callers stop issuing further searches with it.
    """

    kind = QueryKind.REGEXP

    def __init__(
        self,
        settings: SearchQuery,
        *,
        limits: Optional[SearchLimits] = None,
        categorize: Categorizer = default_categorizer,
    ) -> None:
        super().__init__(settings, limits=limits, categorize=categorize)
        self.valid = valid_regexp(settings.search)

    def _cursor(self, doc: Document, start: int = 0, end: Optional[int] = None) -> RegExpCursor:
        return RegExpCursor(
            doc,
            self.settings.search,
            ignore_case=not self.settings.case_sensitive,
            start=start,
            end=end,
            test=self._word_test(doc),
            limits=self.limits,
        )

    def _settle(self, cursor: RegExpCursor) -> RegExpCursor:
        if cursor.error is not None:
            self.valid = False
        return cursor

    def prev_match(self, doc: Document, cur_from: int, cur_to: int) -> Optional[Match]:
        # Backward regex search is not supported.
        del doc, cur_from, cur_to
        return None

    def get_replacement(self, match: Match) -> str:
        return expand_replacement(self.settings.replace, match.groups)

    def highlight(self, doc: Document, start: int, end: int, add: AddMatch) -> None:
        self._highlight_with(doc, start, end, self.limits.regexp_highlight_margin, add)


Query = Union[StringQuery, RegExpQuery]

_QUERY_TYPES: Dict[QueryKind, Type[_QueryBase]] = {
    QueryKind.LITERAL: StringQuery,
    QueryKind.REGEXP: RegExpQuery,
}


__all__ = [
    "AddMatch",
    "Query",
    "QueryKind",
    "RegExpQuery",
    "SearchQuery",
    "StringQuery",
    "expand_replacement",
    "unquote",
]
