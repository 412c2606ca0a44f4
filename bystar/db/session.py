"""DB session configuration helpers.

Boundary pairs are computed as UTC instants; for `BETWEEN` comparisons against `timestamp` columns to
be reliable, every DB session must be locked to the UTC timezone.
"""

from __future__ import annotations

from psycopg import Connection


def ensure_utc(conn: Connection) -> None:
    """Ensure the current Postgres session timezone is set to UTC."""

    with conn.cursor() as cur:
        cur.execute("SET TIME ZONE 'UTC'", prepare=False)
    # `SET` starts a transaction when autocommit is disabled; commit so the pool doesn't see INTRANS.
    conn.commit()
