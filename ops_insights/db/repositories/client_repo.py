"""
Repository for client records.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Iterable, Optional

from ops_insights.db.repositories.base import BaseRepository, build_where
from ops_insights.models.records import ClientRecord

logger = logging.getLogger(__name__)

_INSERT_SQL = """
INSERT OR REPLACE INTO clients (
    client_id, name, industry, status, health_score, sla_compliance,
    satisfaction_score, monthly_revenue, cost_to_serve
) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?);
"""


class ClientRepository(BaseRepository):
    """Read/write access to the ``clients`` table."""

    def insert(self, client: ClientRecord) -> None:
        """Insert or replace one client, keyed by ``client_id``."""
        self.execute(_INSERT_SQL, _client_params(client))

    def insert_many(self, clients: Iterable[ClientRecord]) -> int:
        """Bulk insert; returns the number of rows written."""
        params = [_client_params(c) for c in clients]
        if params:
            self.executemany(_INSERT_SQL, params)
        return len(params)

    def fetch(
        self,
        *,
        status: Optional[str] = None,
        min_health: Optional[float] = None,
        max_health: Optional[float] = None,
    ) -> list[ClientRecord]:
        """Fetch clients, optionally filtered.

        Args:
            status:     Exact status match.
            min_health: Inclusive lower bound on ``health_score``.
            max_health: Exclusive upper bound on ``health_score``.

        Returns:
            Matching clients in insertion order.
        """
        where, params = build_where([
            ("status = ?", status),
            ("health_score >= ?", min_health),
            ("health_score < ?", max_health),
        ])
        rows = self.fetchall(f"SELECT * FROM clients{where} ORDER BY rowid;", params)
        return [_row_to_client(r) for r in rows]


def _client_params(c: ClientRecord) -> tuple:
    return (
        c.client_id,
        c.name,
        c.industry,
        c.status,
        c.health_score,
        c.sla_compliance,
        c.satisfaction_score,
        c.monthly_revenue,
        c.cost_to_serve,
    )


def _row_to_client(row: sqlite3.Row) -> ClientRecord:
    return ClientRecord(
        client_id=row["client_id"],
        name=row["name"],
        industry=row["industry"],
        status=row["status"],
        health_score=row["health_score"],
        sla_compliance=row["sla_compliance"],
        satisfaction_score=row["satisfaction_score"],
        monthly_revenue=row["monthly_revenue"],
        cost_to_serve=row["cost_to_serve"],
    )
