"""
Repository for software license records.
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import date
from typing import Iterable, Optional

from ops_insights.db.repositories.base import BaseRepository, build_where
from ops_insights.models.records import SoftwareLicenseRecord

logger = logging.getLogger(__name__)

_INSERT_SQL = """
INSERT OR REPLACE INTO software_licenses (
    license_id, name, vendor, department, category, cost, users,
    utilization, renewal_date, status
) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?);
"""


class LicenseRepository(BaseRepository):
    """Read/write access to the ``software_licenses`` table."""

    def insert(self, lic: SoftwareLicenseRecord) -> None:
        self.execute(_INSERT_SQL, _license_params(lic))

    def insert_many(self, licenses: Iterable[SoftwareLicenseRecord]) -> int:
        params = [_license_params(lic) for lic in licenses]
        if params:
            self.executemany(_INSERT_SQL, params)
        return len(params)

    def fetch(
        self,
        *,
        max_utilization: Optional[float] = None,
        min_cost: Optional[float] = None,
    ) -> list[SoftwareLicenseRecord]:
        """Fetch licenses with ``utilization < max_utilization`` and
        ``cost > min_cost`` (both optional, both exclusive), in insertion order.
        """
        where, params = build_where([
            ("utilization < ?", max_utilization),
            ("cost > ?", min_cost),
        ])
        rows = self.fetchall(f"SELECT * FROM software_licenses{where} ORDER BY rowid;", params)
        return [_row_to_license(r) for r in rows]


def _license_params(lic: SoftwareLicenseRecord) -> tuple:
    return (
        lic.license_id,
        lic.name,
        lic.vendor,
        lic.department,
        lic.category,
        lic.cost,
        lic.users,
        lic.utilization,
        lic.renewal_date.isoformat() if lic.renewal_date else None,
        lic.status,
    )


def _row_to_license(row: sqlite3.Row) -> SoftwareLicenseRecord:
    renewal = row["renewal_date"]
    return SoftwareLicenseRecord(
        license_id=row["license_id"],
        name=row["name"],
        vendor=row["vendor"],
        department=row["department"],
        category=row["category"],
        cost=row["cost"],
        users=row["users"],
        utilization=row["utilization"],
        renewal_date=date.fromisoformat(renewal) if renewal else None,
        status=row["status"],
    )
