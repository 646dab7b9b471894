"""
Business analytics views: client portfolio, license spend, and financial
trend summaries, plus the simple revenue forecast.

Each ``build_*`` function takes a plain record snapshot and returns a frozen
analytics model. The engine is responsible for fetching (and, for the monthly
trend, restricting the look-back window); nothing here touches storage.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable, Optional

from ops_insights.metrics.derivation import (
    budget_utilization_pct,
    cost_to_revenue_ratio,
    margin,
    operating_margin_pct,
    profitability,
)
from ops_insights.models.analytics import (
    ClientAnalytics,
    ClientHealthMetrics,
    ClientProfitability,
    CostBreakdown,
    DepartmentBudget,
    DepartmentEfficiency,
    FinancialAnalytics,
    LicenseAnalytics,
    LicenseOverview,
    MonthlyTrendPoint,
    ProfitabilitySummary,
)
from ops_insights.models.insight import RevenueForecast
from ops_insights.models.records import (
    ClientRecord,
    FinancialDataRecord,
    SoftwareLicenseRecord,
)
from ops_insights.summaries.aggregate import (
    HEALTH_SCORE_BOUNDARIES,
    UTILIZATION_BOUNDARIES,
    bucket_histogram,
    group_records,
    group_summaries,
)

HIGH_RISK_BELOW = 60.0
TOP_PERFORMER_MIN = 90.0
HIGHLY_PROFITABLE_MARGIN = 30.0
LOW_PROFITABILITY_MARGIN = 15.0
TOP_CLIENTS_LIMIT = 10

UNDERUTILIZED_BELOW = 50.0

FORECAST_NEXT_MONTH_MULTIPLIER = 1.05
FORECAST_NEXT_QUARTER_MULTIPLIER = 1.15


# ── Clients ───────────────────────────────────────────────────────────────────

def build_client_analytics(clients: Iterable[ClientRecord]) -> ClientAnalytics:
    """Portfolio view over every client regardless of status.

    Profitability figures only count clients with positive monthly revenue;
    a client with no revenue has no meaningful margin.
    """
    snapshot = list(clients)
    if not snapshot:
        return ClientAnalytics()

    n = len(snapshot)
    status_distribution = group_summaries(
        snapshot,
        key=lambda c: c.status,
        fields={"monthly_revenue": lambda c: c.monthly_revenue},
    )
    industry_breakdown = group_summaries(
        snapshot,
        key=lambda c: c.industry,
        fields={
            "health_score": lambda c: c.health_score,
            "monthly_revenue": lambda c: c.monthly_revenue,
        },
    )
    health_metrics = ClientHealthMetrics(
        avg_health_score=sum(c.health_score for c in snapshot) / n,
        avg_sla_compliance=sum(c.sla_compliance for c in snapshot) / n,
        high_risk_clients=sum(1 for c in snapshot if c.health_score < HIGH_RISK_BELOW),
        top_performers=sum(1 for c in snapshot if c.health_score >= TOP_PERFORMER_MIN),
    )
    health_distribution = bucket_histogram(
        snapshot,
        value=lambda c: c.health_score,
        boundaries=HEALTH_SCORE_BOUNDARIES,
    )

    earning = [_client_profitability(c) for c in snapshot if (c.monthly_revenue or 0) > 0]
    top_clients = sorted(earning, key=lambda p: (-p.profitability, p.name))[:TOP_CLIENTS_LIMIT]

    return ClientAnalytics(
        total_clients=n,
        active_clients=sum(1 for c in snapshot if c.status == "active"),
        status_distribution=status_distribution,
        industry_breakdown=industry_breakdown,
        health_metrics=health_metrics,
        health_distribution=health_distribution,
        profitability=_summarize_profitability(earning),
        top_clients=top_clients,
    )


def _client_profitability(client: ClientRecord) -> ClientProfitability:
    revenue = client.monthly_revenue or 0.0
    cost = client.cost_to_serve or 0.0
    return ClientProfitability(
        client_id=client.client_id,
        name=client.name,
        health_score=client.health_score,
        monthly_revenue=revenue,
        cost_to_serve=cost,
        profitability=profitability(revenue, cost),
        margin=margin(revenue, cost),
    )


def _summarize_profitability(rows: list[ClientProfitability]) -> ProfitabilitySummary:
    if not rows:
        return ProfitabilitySummary()
    return ProfitabilitySummary(
        clients_counted=len(rows),
        total_revenue=sum(r.monthly_revenue for r in rows),
        total_profit=sum(r.profitability for r in rows),
        avg_margin=sum(r.margin for r in rows) / len(rows),
        highly_profitable=sum(1 for r in rows if r.margin >= HIGHLY_PROFITABLE_MARGIN),
        low_profitability=sum(1 for r in rows if r.margin < LOW_PROFITABILITY_MARGIN),
    )


# ── Licenses ──────────────────────────────────────────────────────────────────

def build_license_analytics(
    licenses: Iterable[SoftwareLicenseRecord],
    today: date,
    window_days: int = 30,
) -> LicenseAnalytics:
    """Spend overview, per-department cost, and the utilization histogram.

    ``expiring_soon_count`` counts every license with a renewal date before
    ``today + window_days``, including renewals already past.
    """
    snapshot = list(licenses)
    if not snapshot:
        return LicenseAnalytics()

    horizon = today + timedelta(days=window_days)
    overview = LicenseOverview(
        total_cost=sum(lic.cost for lic in snapshot),
        avg_utilization=sum(lic.utilization for lic in snapshot) / len(snapshot),
        underutilized_count=sum(1 for lic in snapshot if lic.utilization < UNDERUTILIZED_BELOW),
        expiring_soon_count=sum(
            1 for lic in snapshot
            if lic.renewal_date is not None and lic.renewal_date < horizon
        ),
    )
    cost_by_department = group_summaries(
        snapshot,
        key=lambda lic: lic.department,
        fields={
            "cost": lambda lic: lic.cost,
            "utilization": lambda lic: lic.utilization,
        },
    )
    utilization_distribution = bucket_histogram(
        snapshot,
        value=lambda lic: lic.utilization,
        boundaries=UTILIZATION_BOUNDARIES,
        weight=lambda lic: lic.cost,
    )
    return LicenseAnalytics(
        overview=overview,
        cost_by_department=cost_by_department,
        utilization_distribution=utilization_distribution,
    )


# ── Financials ────────────────────────────────────────────────────────────────

def build_financial_analytics(financials: Iterable[FinancialDataRecord]) -> FinancialAnalytics:
    """Monthly trend, cost breakdown, budget use, and department efficiency.

    Every view covers exactly the records passed in; the engine passes the
    trend look-back window.
    """
    snapshot = list(financials)
    if not snapshot:
        return FinancialAnalytics()

    monthly_trend = [
        MonthlyTrendPoint(
            period=period,
            revenue=sum(r.revenue for r in rows),
            costs=sum(r.operational_costs for r in rows),
            profit=sum(r.revenue - r.operational_costs for r in rows),
        )
        for period, rows in sorted(group_records(snapshot, lambda r: r.period).items())
    ]

    operational = sum(r.operational_costs for r in snapshot)
    software = sum(r.software_costs or 0.0 for r in snapshot)
    personnel = sum(r.personnel_costs or 0.0 for r in snapshot)
    infrastructure = sum(r.infrastructure_costs or 0.0 for r in snapshot)
    cost_breakdown = CostBreakdown(
        operational=operational,
        software=software,
        personnel=personnel,
        infrastructure=infrastructure,
        total=operational + software + personnel + infrastructure,
    )

    by_department = sorted(group_records(snapshot, lambda r: r.department).items())
    budget_utilization = [
        DepartmentBudget(
            department=dept,
            total_budget=sum(r.budget or 0.0 for r in rows),
            total_spend=sum(r.actual_spend or 0.0 for r in rows),
            utilization=sum(budget_utilization_pct(r.actual_spend, r.budget) for r in rows) / len(rows),
        )
        for dept, rows in by_department
    ]
    efficiencies = [department_efficiency(dept, rows) for dept, rows in by_department]

    return FinancialAnalytics(
        monthly_trend=monthly_trend,
        cost_breakdown=cost_breakdown,
        budget_utilization=budget_utilization,
        department_efficiency=efficiencies,
    )


def department_efficiency(
    department: str,
    records: list[FinancialDataRecord],
) -> DepartmentEfficiency:
    """Mean operational cost over mean revenue (0 when mean revenue is 0)."""
    n = len(records)
    avg_cost = sum(r.operational_costs for r in records) / n if n else 0.0
    avg_revenue = sum(r.revenue for r in records) / n if n else 0.0
    return DepartmentEfficiency(
        department=department,
        avg_operational_cost=avg_cost,
        avg_revenue=avg_revenue,
        efficiency=cost_to_revenue_ratio(avg_cost, avg_revenue),
    )


def build_revenue_forecast(
    financials: Iterable[FinancialDataRecord],
    periods: int = 6,
) -> Optional[RevenueForecast]:
    """Project revenue from the ``periods`` most recent financial records.

    Records are ordered newest period first (snapshot order on ties) before
    truncation. ``growth_rate`` is the mean operating margin of those records,
    and the projections apply fixed 5% and 15% uplifts to the mean revenue.

    Returns:
        ``RevenueForecast``, or ``None`` when there are no records.
    """
    recent = sorted(financials, key=lambda r: r.period, reverse=True)[:periods]
    if not recent:
        return None

    avg_revenue = sum(r.revenue for r in recent) / len(recent)
    growth_rate = sum(operating_margin_pct(r.revenue, r.operational_costs) for r in recent) / len(recent)
    return RevenueForecast(
        periods_used=len(recent),
        avg_revenue=avg_revenue,
        growth_rate=growth_rate,
        next_month=avg_revenue * FORECAST_NEXT_MONTH_MULTIPLIER,
        next_quarter=avg_revenue * FORECAST_NEXT_QUARTER_MULTIPLIER,
    )
