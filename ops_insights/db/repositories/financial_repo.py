"""
Repository for monthly financial records.

``period`` is stored as an ISO date string (always the first of the month), so
range filters compare lexicographically in chronological order.
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import date
from typing import Iterable, Optional

from ops_insights.db.repositories.base import BaseRepository, build_where
from ops_insights.models.records import FinancialDataRecord

logger = logging.getLogger(__name__)

_INSERT_SQL = """
INSERT INTO financial_data (
    period, department, revenue, operational_costs, software_costs,
    personnel_costs, infrastructure_costs, budget, actual_spend
) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?);
"""


class FinancialRepository(BaseRepository):
    """Read/write access to the ``financial_data`` table."""

    def insert(self, record: FinancialDataRecord) -> int:
        """Insert one record and return its new ``record_id``.

        Any ``record_id`` already on the model is ignored.
        """
        self.execute(_INSERT_SQL, _financial_params(record))
        return self.last_insert_rowid()

    def insert_many(self, records: Iterable[FinancialDataRecord]) -> int:
        params = [_financial_params(r) for r in records]
        if params:
            self.executemany(_INSERT_SQL, params)
        return len(params)

    def fetch(
        self,
        *,
        since: Optional[date] = None,
        until: Optional[date] = None,
    ) -> list[FinancialDataRecord]:
        """Fetch records with ``since <= period <= until`` in insertion order."""
        where, params = build_where([
            ("period >= ?", since.isoformat() if since else None),
            ("period <= ?", until.isoformat() if until else None),
        ])
        rows = self.fetchall(f"SELECT * FROM financial_data{where} ORDER BY record_id;", params)
        return [_row_to_financial(r) for r in rows]


def _financial_params(r: FinancialDataRecord) -> tuple:
    return (
        r.period.isoformat(),
        r.department,
        r.revenue,
        r.operational_costs,
        r.software_costs,
        r.personnel_costs,
        r.infrastructure_costs,
        r.budget,
        r.actual_spend,
    )


def _row_to_financial(row: sqlite3.Row) -> FinancialDataRecord:
    return FinancialDataRecord(
        record_id=row["record_id"],
        period=date.fromisoformat(row["period"]),
        department=row["department"],
        revenue=row["revenue"],
        operational_costs=row["operational_costs"],
        software_costs=row["software_costs"],
        personnel_costs=row["personnel_costs"],
        infrastructure_costs=row["infrastructure_costs"],
        budget=row["budget"],
        actual_spend=row["actual_spend"],
    )
