"""Regular-expression search over a buffered window of the document."""

from __future__ import annotations

import re
from typing import Optional, Pattern

from editor_search.runtime import telemetry
from editor_search.runtime.config import LIMITS, SearchLimits
from editor_search.text import Document, ensure_range

from .cursor import Match, MatchTest

# A match ending this close to the end of a partial buffer might extend
# further once more text is loaded, so the buffer grows before accepting it.
GROW_SLACK = 10

REGEXP_FAULTS = (re.error, RecursionError, OverflowError)


def compile_pattern(pattern: str, *, ignore_case: bool = False) -> Pattern[str]:
    flags = re.MULTILINE
    if ignore_case:
        flags |= re.IGNORECASE
    return re.compile(pattern, flags)


def valid_regexp(pattern: str) -> bool:
    """Whether ``pattern`` compiles and cannot match the empty string."""

    if not pattern:
        return False
    try:
        compiled = compile_pattern(pattern)
        return compiled.fullmatch("") is None
    except REGEXP_FAULTS:
        return False


class RegExpCursor:
    """Lazily scans ``[start, end)`` of ``doc`` for a regular expression.

    The regex engine only runs against in-memory strings, so the cursor
    keeps a window ``[buffer_from, buffer_to)`` of document text. The window
    starts at the line holding ``start`` (so ``^`` and look-behind see real
    context), ends on a line end, and doubles whenever no acceptable match
    fits inside it. Once it reaches ``regexp_chunk_limit`` characters it
    slides forward instead and never holds more than the limit. A match that
    would run past a full window is cut at the window end, so matches longer
    than the limit are truncated.

    ``next()`` resumes after the previous match; ``next_overlapping()``
    resumes one character after the previous match start. An engine fault
    sets ``error`` and ends the scan.
    """

    def __init__(
        self,
        doc: Document,
        pattern: str,
        *,
        ignore_case: bool = False,
        start: int = 0,
        end: Optional[int] = None,
        test: Optional[MatchTest] = None,
        limits: Optional[SearchLimits] = None,
    ) -> None:
        end = doc.length if end is None else end
        ensure_range(doc.length, start, end)
        self.doc = doc
        self.pattern = pattern
        self.start = start
        self.end = end
        self._test = test
        self._limits = limits or LIMITS
        self._matched = False
        self._match_pos = start
        self.error: Optional[BaseException] = None
        self.done = False
        self.value = Match(start, start)

        self._buffer_from = max(doc.line_at(start).start, start - self._limits.regexp_chunk_base)
        self._buffer_to = self._chunk_end(start + self._limits.regexp_chunk_base)
        self._buffer = doc.slice(self._buffer_from, self._buffer_to)
        try:
            self._re: Optional[Pattern[str]] = compile_pattern(pattern, ignore_case=ignore_case)
        except REGEXP_FAULTS as exc:
            self._re = None
            self._fail(exc)

    @property
    def buffered_range(self) -> tuple[int, int]:
        return self._buffer_from, self._buffer_to

    def _chunk_end(self, pos: int) -> int:
        if pos >= self.end:
            return self.end
        line_end = self.doc.line_at(pos).end
        return min(self.end, line_end, pos + self._limits.regexp_chunk_base)

    def _fail(self, exc: BaseException) -> None:
        self.error = exc
        self.done = True
        telemetry.record_event(
            "regexp.fault",
            level="warning",
            data={"pattern": self.pattern, "error": f"{type(exc).__name__}: {exc}"},
            logger_name="editor_search.regexp",
        )

    def next(self) -> "RegExpCursor":
        if self._matched:
            value = self.value
            self._match_pos = value.end if value.end > value.start else value.start + 1
        return self._advance()

    def next_overlapping(self) -> "RegExpCursor":
        if self._matched:
            self._match_pos = self.value.start + 1
        return self._advance()

    def _accept(self, found: "re.Match[str]") -> bool:
        start = self._buffer_from + found.start()
        end = self._buffer_from + found.end()
        if self._test is not None and not self._test(start, end):
            self._match_pos = start + 1
            return False
        groups = (found.group(0),) + tuple(
            group if group is not None else "" for group in found.groups()
        )
        self.value = Match(start, end, groups)
        self._matched = True
        return True

    def _advance(self) -> "RegExpCursor":
        if self.done or self._re is None:
            return self
        while self._match_pos <= self.end:
            offset = self._match_pos - self._buffer_from
            try:
                found = self._re.search(self._buffer, offset, len(self._buffer))
            except REGEXP_FAULTS as exc:
                self._fail(exc)
                return self
            complete = self._buffer_to >= self.end
            if found is not None and (complete or found.end() <= len(self._buffer) - GROW_SLACK):
                if self._accept(found):
                    return self
                continue
            if complete:
                break
            pending = None if found is None else self._buffer_from + found.start()
            if self._grow(pending):
                continue
            if found is None:
                break
            # The window is full from the candidate's start; take the match as it stands.
            if self._accept(found):
                return self
        self.done = True
        return self

    def _grow(self, pending: Optional[int] = None) -> bool:
        """Double the window, or slide it once it holds ``regexp_chunk_limit`` characters.

        The window never exceeds the limit. Returns ``False`` when no more
        text fits without dropping ``pending``.
        """

        limit = self._limits.regexp_chunk_limit
        size = self._buffer_to - self._buffer_from
        if size * 2 <= limit:
            new_from = anchor = self._buffer_from
            target = self._buffer_from + max(size * 2, 1)
        else:
            anchor = max(self._match_pos, self._buffer_to - limit // 2)
            if pending is not None:
                # Keep a candidate that was only rejected for ending too close to the buffer end.
                anchor = min(anchor, pending)
            line_start = self.doc.line_at(anchor).start
            new_from = line_start if anchor - line_start <= limit // 4 else anchor
            new_from = max(new_from, self._buffer_from)
            target = new_from + limit
        new_to = min(self._chunk_end(target), new_from + limit)
        if new_to <= self._buffer_to:
            return False
        self._match_pos = max(self._match_pos, anchor)
        kept = self._buffer[new_from - self._buffer_from :]
        self._buffer = kept + self.doc.slice(self._buffer_to, new_to)
        self._buffer_from = new_from
        self._buffer_to = new_to
        return True

    def __iter__(self) -> "RegExpCursor":
        return self

    def __next__(self) -> Match:
        if self.next().done:
            raise StopIteration
        return self.value


__all__ = ["RegExpCursor", "compile_pattern", "valid_regexp", "GROW_SLACK"]
