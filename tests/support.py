"""Shared test doubles: a fixed clock, a recording dispatcher and sample models."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from bystar.finders import ByStarModel
from bystar.sql.builder import BuiltQuery

# A Thursday; 2025-05-15 is day 135 of the year.
NOW = datetime(2025, 5, 15, 12, 0, tzinfo=UTC)


class RecordingDispatcher:
    """In-memory dispatcher: records every query and returns canned rows."""

    def __init__(self, rows: list[dict[str, Any]] | None = None) -> None:
        self.rows = rows or []
        self.queries: list[BuiltQuery] = []

    def fetch_all(self, query: BuiltQuery) -> list[dict[str, Any]]:
        self.queries.append(query)
        return [dict(row) for row in self.rows]

    @property
    def last(self) -> BuiltQuery:
        return self.queries[-1]


class Post(ByStarModel):
    __tablename__ = "posts"
    __columns__ = ("id", "text", "created_at", "updated_at")


class Event(ByStarModel):
    __tablename__ = "events"
    __columns__ = ("id", "name", "created_at", "start_time", "end_time")
