"""
Source record models: clients, software licenses, and monthly financial data.

These are read-only snapshots handed to the engine by a ``RecordStore``.
Field constraints (score ranges, status enumerations) are enforced here, once,
when a record is constructed at the storage boundary; the analyzers never
re-validate. Currency fields are passed through exactly as stored.

All models are frozen — a computation must see an immutable snapshot.
"""

from __future__ import annotations

from datetime import date
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ops_insights.metrics import derivation

ClientStatus = Literal["active", "inactive", "pending"]
LicenseStatus = Literal["active", "expired", "pending_renewal"]


class ClientRecord(BaseModel):
    """A client account and its relationship scores.

    Attributes:
        client_id: Stable identifier assigned by the storage layer.
        name: Client display name.
        industry: Industry label used for breakdowns, or ``None``.
        status: Account lifecycle status.
        health_score: Relationship health rating, 0–100.
        sla_compliance: Percentage of SLA commitments met, 0–100.
        satisfaction_score: Latest satisfaction rating, 0–100.
        monthly_revenue: Recurring monthly revenue, or ``None`` if unknown.
        cost_to_serve: Monthly cost of servicing the account, or ``None``.
    """

    model_config = ConfigDict(frozen=True)

    client_id: str
    name: str
    industry: Optional[str] = None
    status: ClientStatus = "active"
    health_score: float = Field(default=75.0, ge=0.0, le=100.0)
    sla_compliance: float = Field(default=95.0, ge=0.0, le=100.0)
    satisfaction_score: float = Field(default=80.0, ge=0.0, le=100.0)
    monthly_revenue: Optional[float] = None
    cost_to_serve: Optional[float] = None

    @property
    def profitability(self) -> float:
        """Monthly revenue minus cost to serve (missing values count as 0)."""
        return derivation.profitability(self.monthly_revenue, self.cost_to_serve)


class SoftwareLicenseRecord(BaseModel):
    """A software subscription and how much of it is actually used.

    Attributes:
        license_id: Stable identifier assigned by the storage layer.
        name: Product name.
        vendor: Vendor name, or ``None``.
        department: Owning department, or ``None``.
        category: Free-form product category, or ``None``.
        cost: Cost per month.
        users: Licensed seat count, or ``None``.
        utilization: Percentage of licensed capacity in use, 0–100.
        renewal_date: Next renewal date, or ``None`` for open-ended terms.
        status: Subscription status.
    """

    model_config = ConfigDict(frozen=True)

    license_id: str
    name: str
    vendor: Optional[str] = None
    department: Optional[str] = None
    category: Optional[str] = None
    cost: float
    users: Optional[int] = None
    utilization: float = Field(default=0.0, ge=0.0, le=100.0)
    renewal_date: Optional[date] = None
    status: LicenseStatus = "active"


class FinancialDataRecord(BaseModel):
    """One department's financials for one calendar month.

    ``period`` is normalised to the first day of its month on construction.

    Attributes:
        record_id: Storage PK, or ``None`` for in-memory fixtures.
        period: Month the figures belong to (day is always 1).
        department: Department name.
        revenue: Revenue booked in the month.
        operational_costs: Operating costs for the month.
        software_costs: Software spend, or ``None`` if not broken out.
        personnel_costs: Personnel spend, or ``None``.
        infrastructure_costs: Infrastructure spend, or ``None``.
        budget: Budgeted spend, or ``None``.
        actual_spend: Actual spend against budget, or ``None``.
    """

    model_config = ConfigDict(frozen=True)

    record_id: Optional[int] = None
    period: date
    department: str
    revenue: float
    operational_costs: float
    software_costs: Optional[float] = None
    personnel_costs: Optional[float] = None
    infrastructure_costs: Optional[float] = None
    budget: Optional[float] = None
    actual_spend: Optional[float] = None

    @field_validator("period")
    @classmethod
    def normalise_to_month(cls, v: date) -> date:
        return v.replace(day=1)

    @field_validator("department")
    @classmethod
    def validate_department_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("department must not be empty.")
        return v.strip()

    @property
    def total_costs(self) -> float:
        """Sum of the four cost components; absent components count as 0."""
        return derivation.total_costs(
            self.operational_costs,
            self.software_costs,
            self.personnel_costs,
            self.infrastructure_costs,
        )
