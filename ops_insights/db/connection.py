"""
SQLite connection management for the record store.

``get_connection()`` yields a connection that:
  - uses ``sqlite3.Row`` so repositories can read columns by name,
  - runs in WAL mode (optional) so imports do not block analytics reads,
  - waits ``busy_timeout_ms`` on a locked database instead of failing fast,
  - commits on clean exit and rolls back on exception.

Usage::

    from ops_insights.db.connection import get_connection

    with get_connection(config.database.db_path) as conn:
        ClientRepository(conn).fetch(status="active")
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

logger = logging.getLogger(__name__)

MEMORY_DB = ":memory:"


@contextmanager
def get_connection(
    db_path: str,
    wal_mode: bool = True,
    busy_timeout_ms: int = 5000,
) -> Generator[sqlite3.Connection, None, None]:
    """Open, configure, and clean up one SQLite connection.

    The parent directory of ``db_path`` is created on first use.

    Args:
        db_path: Database file path, or ``":memory:"``.
        wal_mode: Switch the journal to WAL.
        busy_timeout_ms: Lock wait before ``OperationalError`` is raised.

    Yields:
        A configured ``sqlite3.Connection``.
    """
    if db_path != MEMORY_DB:
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(db_path, timeout=busy_timeout_ms / 1000)
    conn.row_factory = sqlite3.Row
    try:
        conn.execute(f"PRAGMA busy_timeout = {int(busy_timeout_ms)};")
        if wal_mode and db_path != MEMORY_DB:
            conn.execute("PRAGMA journal_mode = WAL;")
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()
