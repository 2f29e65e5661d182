"""Named limits bounding the cost of a single synchronous search call.

Every operation in the engine runs to completion on the calling thread with
no cancellation, so each scan is capped by one of these values. Hosts may
override them through ``EDITOR_SEARCH_*`` environment variables or by
passing their own ``SearchLimits`` instance.
"""

from __future__ import annotations

from dataclasses import dataclass, fields

from .telemetry import env


@dataclass(frozen=True, slots=True)
class SearchLimits:
    # Window scanned per step when searching backwards for a literal.
    find_prev_chunk_size: int = 10_000
    # Padding around each visible range handed to a regex highlight pass.
    regexp_highlight_margin: int = 250
    # Maximum ranges produced by "select all matches".
    select_matches_limit: int = 1_000
    # Maximum edits produced by "replace all".
    replace_all_limit: int = 1_000_000_000
    # Longest selection the selection-match highlighter reacts to.
    selection_match_max_length: int = 200
    # Initial buffered window of the regex cursor.
    regexp_chunk_base: int = 5_000
    # Largest window the regex cursor buffers before it starts sliding.
    regexp_chunk_limit: int = 1_000_000

    def __post_init__(self) -> None:
        for item in fields(self):
            value = getattr(self, item.name)
            if value <= 0:
                raise ValueError(f"{item.name} must be positive, got {value}")
        if self.regexp_chunk_limit < self.regexp_chunk_base:
            raise ValueError("regexp_chunk_limit must not be below regexp_chunk_base")


def load_limits() -> SearchLimits:
    """Build limits from defaults overridden by ``EDITOR_SEARCH_<FIELD>`` variables."""

    overrides: dict[str, int] = {}
    for item in fields(SearchLimits):
        raw = env(item.name.upper())
        if raw is None:
            continue
        try:
            overrides[item.name] = int(raw.replace("_", ""))
        except ValueError as exc:
            raise ValueError(f"EDITOR_SEARCH_{item.name.upper()}={raw!r} is not an integer") from exc
    return SearchLimits(**overrides)


LIMITS = load_limits()

__all__ = ["SearchLimits", "load_limits", "LIMITS"]
