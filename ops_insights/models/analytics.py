"""
Aggregate views: grouped summaries, histograms, and the per-entity analytics
reports built from them.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ops_insights.models.insight import SummaryStatus


class GroupSummary(BaseModel):
    """Count plus per-field sum and mean for one group of records.

    Attributes:
        key: Group key (status, industry, department, ...); ``None`` for
            records that had no value for the grouping field.
        count: Number of records in the group.
        sums: Field name → sum over the group.
        means: Field name → mean over the group.
    """

    model_config = ConfigDict(frozen=True)

    key: Optional[str]
    count: int
    sums: dict[str, float] = Field(default_factory=dict)
    means: dict[str, float] = Field(default_factory=dict)


class HistogramBucket(BaseModel):
    """One half-open ``[lower, upper)`` bucket, or the catch-all bucket.

    The catch-all bucket has ``lower`` and ``upper`` set to ``None``.
    """

    model_config = ConfigDict(frozen=True)

    label: str
    lower: Optional[float] = None
    upper: Optional[float] = None
    count: int = 0
    total: Optional[float] = None


# ── Clients ───────────────────────────────────────────────────────────────────


class ClientHealthMetrics(BaseModel):
    model_config = ConfigDict(frozen=True)

    avg_health_score: float = 0.0
    avg_sla_compliance: float = 0.0
    high_risk_clients: int = 0
    top_performers: int = 0


class ProfitabilitySummary(BaseModel):
    """Profitability over clients with positive monthly revenue."""

    model_config = ConfigDict(frozen=True)

    clients_counted: int = 0
    total_revenue: float = 0.0
    total_profit: float = 0.0
    avg_margin: float = 0.0
    highly_profitable: int = 0
    low_profitability: int = 0


class ClientProfitability(BaseModel):
    model_config = ConfigDict(frozen=True)

    client_id: str
    name: str
    health_score: float
    monthly_revenue: float
    cost_to_serve: float
    profitability: float
    margin: float


class ClientAnalytics(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_clients: int = 0
    active_clients: int = 0
    status_distribution: list[GroupSummary] = Field(default_factory=list)
    industry_breakdown: list[GroupSummary] = Field(default_factory=list)
    health_metrics: ClientHealthMetrics = Field(default_factory=ClientHealthMetrics)
    health_distribution: list[HistogramBucket] = Field(default_factory=list)
    profitability: ProfitabilitySummary = Field(default_factory=ProfitabilitySummary)
    top_clients: list[ClientProfitability] = Field(default_factory=list)


# ── Licenses ──────────────────────────────────────────────────────────────────


class LicenseOverview(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_cost: float = 0.0
    avg_utilization: float = 0.0
    underutilized_count: int = 0
    expiring_soon_count: int = 0


class LicenseAnalytics(BaseModel):
    model_config = ConfigDict(frozen=True)

    overview: LicenseOverview = Field(default_factory=LicenseOverview)
    cost_by_department: list[GroupSummary] = Field(default_factory=list)
    utilization_distribution: list[HistogramBucket] = Field(default_factory=list)


# ── Financials ────────────────────────────────────────────────────────────────


class MonthlyTrendPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    period: date
    revenue: float
    costs: float
    profit: float


class CostBreakdown(BaseModel):
    """Spend by cost category; ``total`` is the sum of the four categories."""

    model_config = ConfigDict(frozen=True)

    operational: float = 0.0
    software: float = 0.0
    personnel: float = 0.0
    infrastructure: float = 0.0
    total: float = 0.0


class DepartmentBudget(BaseModel):
    model_config = ConfigDict(frozen=True)

    department: str
    total_budget: float
    total_spend: float
    utilization: float


class DepartmentEfficiency(BaseModel):
    """Mean operational cost over mean revenue for one department."""

    model_config = ConfigDict(frozen=True)

    department: str
    avg_operational_cost: float
    avg_revenue: float
    efficiency: float


class FinancialAnalytics(BaseModel):
    model_config = ConfigDict(frozen=True)

    monthly_trend: list[MonthlyTrendPoint] = Field(default_factory=list)
    cost_breakdown: CostBreakdown = Field(default_factory=CostBreakdown)
    budget_utilization: list[DepartmentBudget] = Field(default_factory=list)
    department_efficiency: list[DepartmentEfficiency] = Field(default_factory=list)


class BusinessAnalytics(BaseModel):
    """Combined analytics response; failed sections stay ``None``."""

    model_config = ConfigDict(frozen=True)

    clients: Optional[ClientAnalytics] = None
    licenses: Optional[LicenseAnalytics] = None
    financials: Optional[FinancialAnalytics] = None
    generated_at: datetime
    status: SummaryStatus = "success"
    failed_sources: list[str] = Field(default_factory=list)
