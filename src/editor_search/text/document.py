"""Immutable line-addressable document used by the search engine."""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Protocol, Tuple

from .validation import ensure_offset, ensure_range


@dataclass(frozen=True, slots=True)
class Line:
    """A single line: ``[start, end)`` offsets, 1-based ``number`` and text."""

    start: int
    end: int
    number: int
    text: str


class Document(Protocol):
    """Operations the engine requires from a host document."""

    @property
    def length(self) -> int: ...

    @property
    def lines(self) -> int: ...

    def line_at(self, offset: int) -> Line: ...

    def line(self, number: int) -> Line: ...

    def slice(self, start: int, end: int) -> str: ...

    def iter_range(self, start: int, end: int) -> Iterator[str]: ...


@dataclass(frozen=True, slots=True, eq=False)
class TextDocument:
    """Tuple-of-lines storage; edits return a new document.

    Lines are stored without their terminating ``"\\n"``. Offsets count one
    character per line break. Two documents compare by identity: a holder of
    an older value keeps observing the pre-edit text.
    """

    _lines: Tuple[str, ...] = ("",)
    version: int = 0
    _starts: Tuple[int, ...] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if not self._lines:
            object.__setattr__(self, "_lines", ("",))
        starts = []
        running = 0
        for text in self._lines:
            starts.append(running)
            running += len(text) + 1
        object.__setattr__(self, "_starts", tuple(starts))

    @classmethod
    def from_text(cls, text: str) -> "TextDocument":
        return cls(_lines=tuple(text.split("\n")))

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> "TextDocument":
        return cls(_lines=tuple(lines))

    @property
    def length(self) -> int:
        return self._starts[-1] + len(self._lines[-1])

    @property
    def lines(self) -> int:
        return len(self._lines)

    def to_text(self) -> str:
        return "\n".join(self._lines)

    def _line_index(self, offset: int) -> int:
        return bisect_right(self._starts, offset) - 1

    def _make_line(self, index: int) -> Line:
        start = self._starts[index]
        text = self._lines[index]
        return Line(start=start, end=start + len(text), number=index + 1, text=text)

    def line_at(self, offset: int) -> Line:
        ensure_offset(self.length, offset)
        return self._make_line(self._line_index(offset))

    def line(self, number: int) -> Line:
        if number < 1 or number > len(self._lines):
            raise IndexError(f"Line {number} out of range 1..{len(self._lines)}")
        return self._make_line(number - 1)

    def slice(self, start: int, end: int) -> str:
        ensure_range(self.length, start, end)
        if start == end:
            return ""
        first = self._make_line(self._line_index(start))
        if end <= first.end:
            return first.text[start - first.start : end - first.start]
        return "".join(self.iter_range(start, end))

    def iter_range(self, start: int, end: int) -> Iterator[str]:
        """Yield the text of ``[start, end)`` in line-sized chunks.

        Line breaks come out as separate ``"\\n"`` chunks, so no chunk is
        ever larger than one line of the document.
        """

        ensure_range(self.length, start, end)
        index = self._line_index(start)
        pos = start
        while pos < end:
            line_start = self._starts[index]
            text = self._lines[index]
            stop = min(end, line_start + len(text))
            if stop > pos:
                yield text[pos - line_start : stop - line_start]
                pos = stop
            if pos < end:
                yield "\n"
                pos += 1
                index += 1

    def replace(self, start: int, end: int, text: str) -> "TextDocument":
        """Return a document with ``[start, end)`` replaced by ``text``."""

        ensure_range(self.length, start, end)
        first = self._line_index(start)
        last = self._line_index(end)
        head = self._lines[first][: start - self._starts[first]]
        tail = self._lines[last][end - self._starts[last] :]
        middle = (head + text + tail).split("\n")
        lines = self._lines[:first] + tuple(middle) + self._lines[last + 1 :]
        return TextDocument(_lines=lines, version=self.version + 1)


__all__ = ["Document", "Line", "TextDocument"]
