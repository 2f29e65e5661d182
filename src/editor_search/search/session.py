"""Search state threaded explicitly through command handlers."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Optional

from editor_search.runtime import telemetry

from .query import Query, SearchQuery


@dataclass(frozen=True, slots=True)
class SearchSession:
    """Current query plus whether the search panel is open.

    Updates return a new record; an update that changes nothing returns the
    same instance so hosts can skip re-rendering on identity. Each session
    builds its own engine for ``query``, so a regex fault recorded while
    searching stays with the session that hit it.
    """

    query: SearchQuery = field(default_factory=SearchQuery)
    panel_open: bool = False
    _engine: Optional[Query] = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        if self._engine is None:
            object.__setattr__(self, "_engine", self.query.create())

    @property
    def engine(self) -> Query:
        assert self._engine is not None
        return self._engine

    def with_query(self, query: SearchQuery) -> "SearchSession":
        if query.eq(self.query):
            return self
        session = replace(self, query=query, _engine=None)
        telemetry.record_event(
            "session.query",
            level="debug",
            data={"kind": query.kind.value, "valid": session.engine.valid},
            logger_name="editor_search.session",
        )
        return session

    def with_panel(self, panel_open: bool) -> "SearchSession":
        if panel_open == self.panel_open:
            return self
        telemetry.record_event(
            "session.panel",
            level="debug",
            data={"open": panel_open},
            logger_name="editor_search.session",
        )
        return replace(self, panel_open=panel_open)


__all__ = ["SearchSession"]
