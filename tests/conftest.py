"""
Shared pytest fixtures for the Ops Insight Engine test suite.

Provides:
  - ``in_memory_db``: a fresh in-memory SQLite connection with the schema
    applied, created anew for each test that requests it.
  - Record factories (``make_client``, ``make_license``, ``make_financial``)
    returning valid records with overridable defaults.
  - ``scenario_records``: a small mixed snapshot exercising every analyzer.
"""

from __future__ import annotations

import sqlite3
from datetime import date
from typing import Callable, Generator

import pytest

from ops_insights.db.schema import apply_schema
from ops_insights.ingestion.record_loader import RecordBundle
from ops_insights.models.records import (
    ClientRecord,
    FinancialDataRecord,
    SoftwareLicenseRecord,
)


# ── Database fixture ──────────────────────────────────────────────────────────

@pytest.fixture
def in_memory_db() -> Generator[sqlite3.Connection, None, None]:
    """Yield a fresh in-memory SQLite connection with the schema applied."""
    conn = sqlite3.connect(":memory:")
    conn.row_factory = sqlite3.Row
    apply_schema(conn)
    yield conn
    conn.close()


# ── Record factories ──────────────────────────────────────────────────────────

def build_client(client_id: str = "c-1", **overrides) -> ClientRecord:
    fields = {
        "client_id": client_id,
        "name": f"Client {client_id}",
        "industry": "Retail",
        "status": "active",
        "health_score": 75.0,
        "sla_compliance": 95.0,
        "satisfaction_score": 80.0,
        "monthly_revenue": 3000.0,
        "cost_to_serve": 2000.0,
    }
    fields.update(overrides)
    return ClientRecord(**fields)


def build_license(license_id: str = "l-1", **overrides) -> SoftwareLicenseRecord:
    fields = {
        "license_id": license_id,
        "name": f"License {license_id}",
        "vendor": "Acme Software",
        "department": "Engineering",
        "cost": 200.0,
        "users": 10,
        "utilization": 80.0,
    }
    fields.update(overrides)
    return SoftwareLicenseRecord(**fields)


def build_financial(
    period: date = date(2024, 3, 1),
    department: str = "Sales",
    **overrides,
) -> FinancialDataRecord:
    fields = {
        "period": period,
        "department": department,
        "revenue": 10_000.0,
        "operational_costs": 5_000.0,
    }
    fields.update(overrides)
    return FinancialDataRecord(**fields)


@pytest.fixture
def make_client() -> Callable[..., ClientRecord]:
    return build_client


@pytest.fixture
def make_license() -> Callable[..., SoftwareLicenseRecord]:
    return build_license


@pytest.fixture
def make_financial() -> Callable[..., FinancialDataRecord]:
    return build_financial


# ── Scenario snapshot ─────────────────────────────────────────────────────────

@pytest.fixture
def scenario_records() -> RecordBundle:
    """Mixed snapshot: one at-risk client, one upsell client, one wasteful
    license, one inefficient department, one healthy department."""
    return RecordBundle(
        clients=[
            build_client(
                "c-risk", name="Borealis Ltd", health_score=55, sla_compliance=90,
                satisfaction_score=70, monthly_revenue=4000, cost_to_serve=3500,
            ),
            build_client(
                "c-star", name="Zenith Corp", industry="Finance", health_score=92,
                sla_compliance=99, satisfaction_score=95, monthly_revenue=12_000,
                cost_to_serve=6000,
            ),
            build_client("c-mid", name="Midway Inc", health_score=70, monthly_revenue=2500),
        ],
        licenses=[
            build_license("l-waste", name="CRM Suite", cost=1000, utilization=30,
                          renewal_date=date(2024, 6, 10)),
            build_license("l-ok", name="Chat Tool", cost=150, utilization=90),
        ],
        financials=[
            build_financial(date(2024, 1, 1), "Operations", revenue=10_000, operational_costs=8_000),
            build_financial(date(2024, 2, 1), "Operations", revenue=10_000, operational_costs=9_000),
            build_financial(date(2024, 1, 1), "Sales", revenue=20_000, operational_costs=6_000),
            build_financial(date(2024, 2, 1), "Sales", revenue=22_000, operational_costs=6_600),
        ],
    )
