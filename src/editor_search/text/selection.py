"""Selection values owned by the host and read by the search engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence, Tuple


@dataclass(frozen=True, slots=True)
class SelectionRange:
    """A directed range; ``anchor`` stays put while ``head`` moves."""

    anchor: int
    head: int

    @property
    def start(self) -> int:
        return min(self.anchor, self.head)

    @property
    def end(self) -> int:
        return max(self.anchor, self.head)

    @property
    def empty(self) -> bool:
        return self.anchor == self.head

    @classmethod
    def cursor(cls, pos: int) -> "SelectionRange":
        return cls(pos, pos)

    def same_span(self, start: int, end: int) -> bool:
        return self.start == start and self.end == end


@dataclass(frozen=True, slots=True)
class EditorSelection:
    """Ordered, disjoint ranges with one designated main range.

    Build through :meth:`create` so ranges are sorted and overlapping ones
    merged; every update returns a new value.
    """

    ranges: Tuple[SelectionRange, ...]
    main_index: int = 0

    def __post_init__(self) -> None:
        if not self.ranges:
            raise ValueError("EditorSelection requires at least one range")
        if not 0 <= self.main_index < len(self.ranges):
            raise ValueError(f"main_index {self.main_index} out of range")

    @classmethod
    def create(
        cls, ranges: Iterable[SelectionRange], main_index: int = 0
    ) -> "EditorSelection":
        items = list(ranges)
        if not items:
            raise ValueError("EditorSelection requires at least one range")
        main = items[main_index]
        ordered = sorted(items, key=lambda r: (r.start, r.end))
        merged: list[SelectionRange] = []
        main_at = 0
        for current in ordered:
            prev = merged[-1] if merged else None
            if prev is not None and (
                current.start < prev.end or (current.start == prev.end and (current.empty or prev.empty))
            ):
                start = prev.start
                end = max(prev.end, current.end)
                forward = prev.head >= prev.anchor
                merged[-1] = SelectionRange(start, end) if forward else SelectionRange(end, start)
            else:
                merged.append(current)
            if current is main:
                main_at = len(merged) - 1
        return cls(ranges=tuple(merged), main_index=main_at)

    @classmethod
    def single(cls, anchor: int, head: int | None = None) -> "EditorSelection":
        return cls(ranges=(SelectionRange(anchor, anchor if head is None else head),))

    @classmethod
    def cursor(cls, pos: int) -> "EditorSelection":
        return cls.single(pos)

    @property
    def main(self) -> SelectionRange:
        return self.ranges[self.main_index]

    def add_range(self, item: SelectionRange, *, main: bool = True) -> "EditorSelection":
        ranges: Sequence[SelectionRange] = (item,) + self.ranges
        return EditorSelection.create(ranges, 0 if main else self.main_index + 1)


__all__ = ["SelectionRange", "EditorSelection"]
