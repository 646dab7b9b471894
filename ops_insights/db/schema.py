"""
SQLite schema for the record store.

Three independent tables, one per record kind. There are no foreign keys:
licenses and financial rows reference departments by name only.

Column constraints mirror the record models (score ranges, status values), so
rows that would fail model validation are rejected at insert time too.
Currency columns are unconstrained.

Every statement uses ``IF NOT EXISTS``; ``apply_schema()`` is idempotent.
"""

from __future__ import annotations

import logging
import sqlite3

logger = logging.getLogger(__name__)

_DDL_CLIENTS = """
CREATE TABLE IF NOT EXISTS clients (
    client_id           TEXT    PRIMARY KEY,
    name                TEXT    NOT NULL,
    industry            TEXT,
    status              TEXT    NOT NULL DEFAULT 'active'
                                CHECK (status IN ('active', 'inactive', 'pending')),
    health_score        REAL    NOT NULL DEFAULT 75 CHECK (health_score BETWEEN 0 AND 100),
    sla_compliance      REAL    NOT NULL DEFAULT 95 CHECK (sla_compliance BETWEEN 0 AND 100),
    satisfaction_score  REAL    NOT NULL DEFAULT 80 CHECK (satisfaction_score BETWEEN 0 AND 100),
    monthly_revenue     REAL,
    cost_to_serve       REAL
);
CREATE INDEX IF NOT EXISTS idx_clients_status_health ON clients (status, health_score);
"""

_DDL_SOFTWARE_LICENSES = """
CREATE TABLE IF NOT EXISTS software_licenses (
    license_id      TEXT    PRIMARY KEY,
    name            TEXT    NOT NULL,
    vendor          TEXT,
    department      TEXT,
    category        TEXT,
    cost            REAL    NOT NULL,
    users           INTEGER,
    utilization     REAL    NOT NULL DEFAULT 0 CHECK (utilization BETWEEN 0 AND 100),
    renewal_date    TEXT,
    status          TEXT    NOT NULL DEFAULT 'active'
                            CHECK (status IN ('active', 'expired', 'pending_renewal'))
);
CREATE INDEX IF NOT EXISTS idx_licenses_utilization ON software_licenses (utilization, cost);
"""

_DDL_FINANCIAL_DATA = """
CREATE TABLE IF NOT EXISTS financial_data (
    record_id               INTEGER PRIMARY KEY AUTOINCREMENT,
    period                  TEXT    NOT NULL,
    department              TEXT    NOT NULL,
    revenue                 REAL    NOT NULL,
    operational_costs       REAL    NOT NULL,
    software_costs          REAL,
    personnel_costs         REAL,
    infrastructure_costs    REAL,
    budget                  REAL,
    actual_spend            REAL
);
CREATE INDEX IF NOT EXISTS idx_financial_period ON financial_data (period);
CREATE INDEX IF NOT EXISTS idx_financial_department ON financial_data (department, period);
"""

_ALL_DDL = [_DDL_CLIENTS, _DDL_SOFTWARE_LICENSES, _DDL_FINANCIAL_DATA]

ALL_TABLE_NAMES: tuple[str, ...] = ("clients", "software_licenses", "financial_data")


def apply_schema(conn: sqlite3.Connection) -> None:
    """Create all tables and indexes on ``conn`` (idempotent)."""
    for ddl in _ALL_DDL:
        for statement in _split_ddl(ddl):
            conn.execute(statement)
    conn.commit()
    logger.info("Schema applied: %d tables verified.", len(ALL_TABLE_NAMES))


def _split_ddl(ddl: str) -> list[str]:
    return [s.strip() for s in ddl.split(";") if s.strip()]
