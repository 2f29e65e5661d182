"""Validation helpers shared across text services."""

from __future__ import annotations

from typing import Optional, Tuple


class RangeValidationError(RuntimeError):
    """Raised when a caller passes offsets outside the document."""

    def __init__(self, message: str, *, span: Optional[Tuple[int, int]] = None) -> None:
        super().__init__(message)
        self.span = span


def ensure_range(length: int, start: int, end: int) -> Tuple[int, int]:
    if start < 0 or end > length:
        raise RangeValidationError(
            f"Range {start}..{end} outside document of length {length}", span=(start, end)
        )
    if start > end:
        raise RangeValidationError(f"Range start {start} after end {end}", span=(start, end))
    return start, end


def ensure_offset(length: int, offset: int) -> int:
    if offset < 0 or offset > length:
        raise RangeValidationError(
            f"Offset {offset} outside document of length {length}", span=(offset, offset)
        )
    return offset
