"""Forward, single-pass literal search over a document range."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Tuple

from editor_search.text import Document, ensure_range

Normalize = Callable[[str], str]
MatchTest = Callable[[int, int], bool]


@dataclass(frozen=True, slots=True)
class Match:
    """A match ``[start, end)``; regex matches carry ``groups`` (``groups[0]`` is the whole match)."""

    start: int
    end: int
    groups: Tuple[str, ...] = ()


def fold_case(text: str) -> str:
    return text.casefold()


class SearchCursor:
    """Lazily scans ``[start, end)`` of ``doc`` for ``query``.

    The document is read through ``Document.iter_range`` one line-sized
    chunk at a time and compared character by character, so the range is
    never copied into a single string. ``normalize`` is applied to the
    query once and to every document character as it is read.

    The cursor only moves forward. ``next()`` finds the next match starting
    at or after the previous match end; ``next_overlapping()`` also reports
    matches that begin inside the previous one. Both set ``value`` or flip
    ``done`` and return the cursor itself. Iterating the cursor yields the
    non-overlapping matches.
    """

    def __init__(
        self,
        doc: Document,
        query: str,
        start: int = 0,
        end: Optional[int] = None,
        normalize: Optional[Normalize] = None,
        test: Optional[MatchTest] = None,
    ) -> None:
        end = doc.length if end is None else end
        ensure_range(doc.length, start, end)
        self.doc = doc
        self.start = start
        self.end = end
        self._normalize = normalize
        self.query = normalize(query) if normalize else query
        if not self.query:
            raise ValueError("SearchCursor requires a non-empty query")
        self._test = test
        self._codes = self._scan()
        # (index of the next query char to match, offset where the partial match began)
        self._partials: List[Tuple[int, int]] = []
        self._matched = False
        self.done = False
        self.value = Match(start, start)

    def _scan(self) -> Iterator[Tuple[int, str]]:
        pos = self.start
        normalize = self._normalize
        for chunk in self.doc.iter_range(self.start, self.end):
            for char in chunk:
                for code in normalize(char) if normalize else char:
                    yield pos, code
                pos += 1

    def next(self) -> "SearchCursor":
        self._partials.clear()
        return self._advance(self.value.end if self._matched else self.start)

    def next_overlapping(self) -> "SearchCursor":
        return self._advance(self.value.start + 1 if self._matched else self.start)

    def _advance(self, floor: int) -> "SearchCursor":
        if self.done:
            return self
        for pos, code in self._codes:
            found = self._feed(code, pos)
            if found is None or found.start < floor:
                continue
            if self._test is None or self._test(found.start, found.end):
                self.value = found
                self._matched = True
                return self
        self.done = True
        return self

    def _feed(self, code: str, pos: int) -> Optional[Match]:
        query = self.query
        last = len(query) - 1
        found: Optional[Match] = None
        kept: List[Tuple[int, int]] = []
        for index, begin in self._partials:
            if query[index] != code:
                continue
            if index == last:
                if found is None or begin < found.start:
                    found = Match(begin, pos + 1)
            else:
                kept.append((index + 1, begin))
        if query[0] == code:
            if last == 0:
                if found is None:
                    found = Match(pos, pos + 1)
            else:
                kept.append((1, pos))
        self._partials = kept
        return found

    def overlapping(self) -> Iterator[Match]:
        while not self.next_overlapping().done:
            yield self.value

    def __iter__(self) -> "SearchCursor":
        return self

    def __next__(self) -> Match:
        if self.next().done:
            raise StopIteration
        return self.value


__all__ = ["Match", "MatchTest", "Normalize", "SearchCursor", "fold_case"]
