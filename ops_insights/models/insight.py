"""
Analyzer findings and the business-insight summary.

Per-entity findings (``ChurnRisk``, ``GrowthOpportunity``, ``CostOpportunity``
and the license findings) are what the analyzers return; ``InsightSummary``
is what ``InsightEngine.compute_business_insights()`` hands to the API layer.

All models are frozen and transient: rebuilt from the current snapshot on each
call, never persisted by the engine.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from ops_insights.taxonomy.recommendation_taxonomy import Priority

SummaryStatus = Literal["success", "partial"]


# ── Client findings ───────────────────────────────────────────────────────────


class ChurnRisk(BaseModel):
    """A client whose composite churn risk crossed the eligibility threshold."""

    model_config = ConfigDict(frozen=True)

    client_id: str
    name: str
    health_score: float
    sla_compliance: float
    satisfaction_score: float
    churn_risk: float


class GrowthOpportunity(BaseModel):
    """A healthy active client ranked by upsell attractiveness.

    ``growth_score`` is not capped at 100; see ``metrics.derivation``.
    """

    model_config = ConfigDict(frozen=True)

    client_id: str
    name: str
    health_score: float
    monthly_revenue: float
    upsell_potential: float
    growth_score: float


class RiskFactor(BaseModel):
    """A client flagged by the direct health-threshold alert."""

    model_config = ConfigDict(frozen=True)

    client_id: str
    client: str
    score: float
    issues: list[str] = Field(default_factory=list)


class ClientHealthInsight(BaseModel):
    """Portfolio-level health overview.

    Attributes:
        avg_health: Mean health score over all clients (0 with no clients).
        trend: Mean of the per-client trend signal (+1 healthy, 0 fair,
            −1 poor), so the range is −1 to +1.
        risk_factors: Clients with health below 60, in snapshot order.
    """

    model_config = ConfigDict(frozen=True)

    avg_health: float = 0.0
    trend: float = 0.0
    risk_factors: list[RiskFactor] = Field(default_factory=list)


# ── License findings ──────────────────────────────────────────────────────────


class CostOpportunity(BaseModel):
    """A license whose unused capacity is worth reclaiming."""

    model_config = ConfigDict(frozen=True)

    license_id: str
    software: str
    current_utilization: float
    monthly_cost: float
    potential_savings: float
    recommendation: str


class CostOptimizationReport(BaseModel):
    """Broad waste scan: total waste plus the ranked opportunities behind it."""

    model_config = ConfigDict(frozen=True)

    total_waste: float = 0.0
    opportunities: list[CostOpportunity] = Field(default_factory=list)


class UnderutilizedLicense(BaseModel):
    """A license used below half capacity, with a severity for triage."""

    model_config = ConfigDict(frozen=True)

    license_id: str
    name: str
    utilization: float
    cost: float
    severity: Priority
    potential_savings: int


class InefficientLicense(BaseModel):
    """A high-cost license at moderate utilization.

    ``potential_savings`` is a coarse negotiation/alternative-vendor estimate
    (30% of cost), not reclaimed capacity.
    """

    model_config = ConfigDict(frozen=True)

    license_id: str
    name: str
    utilization: float
    cost: float
    potential_savings: float


class ExpiringLicense(BaseModel):
    """A license renewing inside the review window."""

    model_config = ConfigDict(frozen=True)

    license_id: str
    name: str
    renewal_date: date
    days_until_renewal: int
    cost: float


# ── Financial findings ────────────────────────────────────────────────────────


class RevenueForecast(BaseModel):
    """Coarse forward revenue projection from recent financial records.

    Attributes:
        periods_used: Number of recent records averaged.
        avg_revenue: Mean revenue over those records.
        growth_rate: Mean operating margin % over those records.
        next_month: ``avg_revenue × 1.05``.
        next_quarter: ``avg_revenue × 1.15``.
    """

    model_config = ConfigDict(frozen=True)

    periods_used: int
    avg_revenue: float
    growth_rate: float
    next_month: float
    next_quarter: float


# ── Summary ───────────────────────────────────────────────────────────────────


class InsightSummary(BaseModel):
    """Business-insight response combining every analyzer's view.

    Sections whose source query failed are left at their empty default and
    the source is named in ``failed_sources``; ``status`` is then "partial".
    """

    model_config = ConfigDict(frozen=True)

    churn_risks: list[ChurnRisk] = Field(default_factory=list)
    cost_optimization: CostOptimizationReport = Field(default_factory=CostOptimizationReport)
    growth_opportunities: list[GrowthOpportunity] = Field(default_factory=list)
    client_health: Optional[ClientHealthInsight] = None
    forecast: Optional[RevenueForecast] = None
    generated_at: datetime
    status: SummaryStatus = "success"
    failed_sources: list[str] = Field(default_factory=list)
