"""
Record stores: the read-only storage boundary the engine queries.

``RecordStore`` is the protocol; two implementations ship:

  - ``InMemoryRecordStore`` — plain lists, built from a ``RecordBundle`` or a
    JSON snapshot. Used by ``--records`` on the CLI and throughout the tests.
  - ``SqliteRecordStore``   — one short-lived connection per fetch, so fetches
    can run concurrently on worker threads.

Filter semantics (identical in both)
------------------------------------
    fetch_clients        status ==, min_health inclusive, max_health exclusive
    fetch_licenses       utilization < max_utilization, cost > min_cost
    fetch_financials     since <= period <= until
    fetch_financials_by_department
                         same range, grouped into {department: records},
                         departments in name order

Every fetch returns records in snapshot (insertion) order.
"""

from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import Iterable, Optional, Protocol

from ops_insights.config import DatabaseConfig
from ops_insights.db.connection import get_connection
from ops_insights.db.repositories.client_repo import ClientRepository
from ops_insights.db.repositories.financial_repo import FinancialRepository
from ops_insights.db.repositories.license_repo import LicenseRepository
from ops_insights.ingestion.record_loader import RecordBundle, load_records_json
from ops_insights.models.records import (
    ClientRecord,
    FinancialDataRecord,
    SoftwareLicenseRecord,
)

logger = logging.getLogger(__name__)


class RecordStore(Protocol):
    """Read operations the engine issues. Implementations must be thread-safe
    for concurrent reads."""

    def fetch_clients(
        self,
        *,
        status: Optional[str] = None,
        min_health: Optional[float] = None,
        max_health: Optional[float] = None,
    ) -> list[ClientRecord]: ...

    def fetch_licenses(
        self,
        *,
        max_utilization: Optional[float] = None,
        min_cost: Optional[float] = None,
    ) -> list[SoftwareLicenseRecord]: ...

    def fetch_financials(
        self,
        *,
        since: Optional[date] = None,
        until: Optional[date] = None,
    ) -> list[FinancialDataRecord]: ...

    def fetch_financials_by_department(
        self,
        *,
        since: Optional[date] = None,
        until: Optional[date] = None,
    ) -> dict[str, list[FinancialDataRecord]]: ...


def group_by_department(
    records: Iterable[FinancialDataRecord],
) -> dict[str, list[FinancialDataRecord]]:
    """Group records by department; keys in name order, records in input order."""
    grouped: dict[str, list[FinancialDataRecord]] = {}
    for rec in records:
        grouped.setdefault(rec.department, []).append(rec)
    return {dept: grouped[dept] for dept in sorted(grouped)}


# ── In-memory ─────────────────────────────────────────────────────────────────


class InMemoryRecordStore:
    """``RecordStore`` over immutable tuples of records."""

    def __init__(
        self,
        clients: Iterable[ClientRecord] = (),
        licenses: Iterable[SoftwareLicenseRecord] = (),
        financials: Iterable[FinancialDataRecord] = (),
    ) -> None:
        self._clients = tuple(clients)
        self._licenses = tuple(licenses)
        self._financials = tuple(financials)

    @classmethod
    def from_bundle(cls, bundle: RecordBundle) -> "InMemoryRecordStore":
        return cls(bundle.clients, bundle.licenses, bundle.financials)

    @classmethod
    def from_json(cls, path: Path) -> "InMemoryRecordStore":
        return cls.from_bundle(load_records_json(path))

    def fetch_clients(
        self,
        *,
        status: Optional[str] = None,
        min_health: Optional[float] = None,
        max_health: Optional[float] = None,
    ) -> list[ClientRecord]:
        return [
            c for c in self._clients
            if (status is None or c.status == status)
            and (min_health is None or c.health_score >= min_health)
            and (max_health is None or c.health_score < max_health)
        ]

    def fetch_licenses(
        self,
        *,
        max_utilization: Optional[float] = None,
        min_cost: Optional[float] = None,
    ) -> list[SoftwareLicenseRecord]:
        return [
            lic for lic in self._licenses
            if (max_utilization is None or lic.utilization < max_utilization)
            and (min_cost is None or lic.cost > min_cost)
        ]

    def fetch_financials(
        self,
        *,
        since: Optional[date] = None,
        until: Optional[date] = None,
    ) -> list[FinancialDataRecord]:
        return [
            r for r in self._financials
            if (since is None or r.period >= since)
            and (until is None or r.period <= until)
        ]

    def fetch_financials_by_department(
        self,
        *,
        since: Optional[date] = None,
        until: Optional[date] = None,
    ) -> dict[str, list[FinancialDataRecord]]:
        return group_by_department(self.fetch_financials(since=since, until=until))


# ── SQLite ────────────────────────────────────────────────────────────────────


class SqliteRecordStore:
    """``RecordStore`` backed by the SQLite schema in ``ops_insights.db``.

    Each fetch opens its own connection; ``sqlite3`` connections must not be
    shared across the worker threads the engine fans out to.
    """

    def __init__(
        self,
        db_path: str,
        wal_mode: bool = True,
        busy_timeout_ms: int = 5000,
    ) -> None:
        self.db_path = db_path
        self.wal_mode = wal_mode
        self.busy_timeout_ms = busy_timeout_ms

    @classmethod
    def from_config(
        cls,
        config: DatabaseConfig,
        db_path: Optional[str] = None,
    ) -> "SqliteRecordStore":
        """Build from ``[database]`` settings; ``db_path`` overrides the configured path."""
        return cls(db_path or config.db_path, config.wal_mode, config.busy_timeout_ms)

    def _connect(self):
        return get_connection(self.db_path, self.wal_mode, self.busy_timeout_ms)

    def fetch_clients(
        self,
        *,
        status: Optional[str] = None,
        min_health: Optional[float] = None,
        max_health: Optional[float] = None,
    ) -> list[ClientRecord]:
        with self._connect() as conn:
            return ClientRepository(conn).fetch(
                status=status, min_health=min_health, max_health=max_health
            )

    def fetch_licenses(
        self,
        *,
        max_utilization: Optional[float] = None,
        min_cost: Optional[float] = None,
    ) -> list[SoftwareLicenseRecord]:
        with self._connect() as conn:
            return LicenseRepository(conn).fetch(
                max_utilization=max_utilization, min_cost=min_cost
            )

    def fetch_financials(
        self,
        *,
        since: Optional[date] = None,
        until: Optional[date] = None,
    ) -> list[FinancialDataRecord]:
        with self._connect() as conn:
            return FinancialRepository(conn).fetch(since=since, until=until)

    def fetch_financials_by_department(
        self,
        *,
        since: Optional[date] = None,
        until: Optional[date] = None,
    ) -> dict[str, list[FinancialDataRecord]]:
        return group_by_department(self.fetch_financials(since=since, until=until))

    def import_bundle(self, bundle: RecordBundle) -> int:
        """Write every record in ``bundle`` in one transaction.

        Returns:
            Number of rows written.
        """
        with self._connect() as conn:
            written = ClientRepository(conn).insert_many(bundle.clients)
            written += LicenseRepository(conn).insert_many(bundle.licenses)
            written += FinancialRepository(conn).insert_many(bundle.financials)
        logger.info("Imported %d records into %s", written, self.db_path)
        return written
