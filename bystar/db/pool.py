"""Postgres connection pool.

Finder queries borrow a connection per call from a psycopg3 pool. Every connection is configured to
use UTC at the session level.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from psycopg import Connection
from psycopg_pool import ConnectionPool

from bystar.db.connection import require_database_url
from bystar.db.session import ensure_utc


def create_pool(
        database_url: str | None = None,
        *,
        min_size: int = 1,
        max_size: int | None = None,
        timeout: float = 30.0,
) -> ConnectionPool:
    """Create a DB pool.

    Notes:
        - The returned pool is created with `open=False`. Call `pool.open()` at startup.
        - If `database_url` is omitted, the function loads `.env` and reads `DATABASE_URL`.
    """

    if database_url is None:
        database_url = require_database_url()

    return ConnectionPool(
        conninfo=database_url,
        min_size=min_size,
        max_size=max_size,
        timeout=timeout,
        open=False,
        configure=ensure_utc,
    )


@contextmanager
def get_conn(pool: ConnectionPool) -> Iterator[Connection]:
    """Acquire a connection from the pool with UTC session timezone enforced."""

    with pool.connection() as conn:
        ensure_utc(conn)
        yield conn
