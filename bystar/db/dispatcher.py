"""Query dispatchers.

A dispatcher executes a `BuiltQuery` and returns rows as dicts. Models only depend on the
`QueryDispatcher` protocol, so tests can substitute an in-memory dispatcher for Postgres.
"""

from __future__ import annotations

import logging
from time import monotonic
from typing import Any, Protocol

from psycopg_pool import ConnectionPool

from bystar.db.pool import get_conn
from bystar.db.query import fetch_rows
from bystar.sql.builder import BuiltQuery

logger = logging.getLogger(__name__)


class QueryDispatcher(Protocol):
    """Anything that can execute a parameterized query and return rows."""

    def fetch_all(self, query: BuiltQuery) -> list[dict[str, Any]]: ...


class PostgresDispatcher:
    """Execute queries on connections borrowed from a psycopg pool."""

    def __init__(self, pool: ConnectionPool) -> None:
        self.pool = pool

    def fetch_all(self, query: BuiltQuery) -> list[dict[str, Any]]:
        started = monotonic()
        with get_conn(self.pool) as conn:
            rows = fetch_rows(conn, query.sql, query.params)

        latency_ms = int((monotonic() - started) * 1000)
        logger.info("dispatched rows=%d latency_ms=%d", len(rows), latency_ms)
        return rows

    def close(self) -> None:
        self.pool.close()
