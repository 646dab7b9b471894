"""
Base repository with shared SQL helpers.

Repositories receive an open ``sqlite3.Connection`` (managed by the caller via
``get_connection()``), speak record models rather than dicts, and keep all SQL
explicit in their methods. Rows are returned in insertion (rowid) order so a
SQLite snapshot reads back in the same order it was imported.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Any, Optional

logger = logging.getLogger(__name__)

Params = tuple[Any, ...] | dict[str, Any]


class BaseRepository:
    """Shared SQL execution helpers.

    Attributes:
        conn: The active ``sqlite3.Connection``.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    def execute(self, sql: str, params: Params = ()) -> sqlite3.Cursor:
        logger.debug("SQL: %s | params: %s", sql.strip(), params)
        return self.conn.execute(sql, params)

    def executemany(self, sql: str, params_list: list[Params]) -> sqlite3.Cursor:
        logger.debug("SQL (many): %s | count: %d", sql.strip(), len(params_list))
        return self.conn.executemany(sql, params_list)

    def fetchall(self, sql: str, params: Params = ()) -> list[sqlite3.Row]:
        return self.execute(sql, params).fetchall()

    def count(self, table: str) -> int:
        """Row count of ``table`` (a trusted, module-level table name)."""
        row = self.execute(f"SELECT COUNT(*) AS n FROM {table};").fetchone()
        return int(row["n"])

    def last_insert_rowid(self) -> int:
        row = self.execute("SELECT last_insert_rowid() AS rowid;").fetchone()
        assert row is not None
        return int(row["rowid"])


def build_where(conditions: list[tuple[str, Optional[Any]]]) -> tuple[str, tuple[Any, ...]]:
    """Assemble a WHERE clause from ``(sql_fragment, value)`` pairs.

    Pairs whose value is ``None`` are skipped, so optional filters can be
    passed straight through::

        build_where([("status = ?", "active"), ("health_score >= ?", None)])
        # → (" WHERE status = ?", ("active",))

    Returns:
        ``(clause, params)``; ``clause`` is empty when no filter applies.
    """
    fragments = [sql for sql, value in conditions if value is not None]
    params = tuple(value for _, value in conditions if value is not None)
    if not fragments:
        return "", ()
    return " WHERE " + " AND ".join(fragments), params
