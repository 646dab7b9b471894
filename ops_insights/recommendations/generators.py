"""
Recommendation generators: turn analyzer findings into ``Recommendation``
objects.

Cross-entity sub-generators (merged by ``compute_recommendations``)
--------------------------------------------------------------------
    client_retention_recommendations     at-risk clients      HIGH    value = monthly revenue
    cost_saving_recommendations          material waste       MEDIUM  value = −cost × 0.5
    revenue_growth_recommendations       upsell candidates    MEDIUM  value = revenue × 0.3
    operational_efficiency_recommendations  costly departments LOW    value = −1000

License portfolio sections (``compute_license_recommendations``)
----------------------------------------------------------------
    underutilized_recommendations        priority = severity  value = −potential savings
    renewal_recommendations              MEDIUM               value = 0
    cost_optimization_recommendations    HIGH                 value = −round(cost × 0.3)

Every function here is pure: it receives the records its paired store query
returned and applies the analyzer's selector itself, so an in-memory list and
a pre-filtered SQL result produce the same output.
"""

from __future__ import annotations

from typing import Iterable, Mapping

from ops_insights.analyzers.churn import select_at_risk_clients
from ops_insights.analyzers.cost import select_material_waste
from ops_insights.analyzers.growth import select_upsell_candidates
from ops_insights.metrics.derivation import round_half_up, upsell_potential
from ops_insights.models.insight import (
    ExpiringLicense,
    InefficientLicense,
    UnderutilizedLicense,
)
from ops_insights.models.recommendation import Recommendation
from ops_insights.models.records import (
    ClientRecord,
    FinancialDataRecord,
    SoftwareLicenseRecord,
)
from ops_insights.summaries.analytics import department_efficiency
from ops_insights.taxonomy.recommendation_taxonomy import (
    Impact,
    Priority,
    RecommendationType,
)

COST_SAVING_RATE = 0.5
EFFICIENCY_RATIO_THRESHOLD = 0.7
EFFICIENCY_ESTIMATED_SAVINGS = -1000.0

# License sections carry no impact of their own; it mirrors the priority.
_IMPACT_FOR_PRIORITY: dict[Priority, Impact] = {
    Priority.HIGH:   Impact.HIGH,
    Priority.MEDIUM: Impact.MEDIUM,
    Priority.LOW:    Impact.LOW,
}


# ── Cross-entity sub-generators ───────────────────────────────────────────────

def client_retention_recommendations(
    clients: Iterable[ClientRecord],
    limit: int = 5,
) -> list[Recommendation]:
    """One HIGH recommendation per active client with health below 60."""
    return [
        Recommendation(
            type=RecommendationType.CLIENT_RETENTION,
            priority=Priority.HIGH,
            title=f"Client at Risk: {c.name}",
            description=f"Health score of {fmt_number(c.health_score)}% indicates potential churn risk",
            suggested_action="Schedule health check and review service delivery",
            impact=Impact.HIGH,
            estimated_value=c.monthly_revenue or 0.0,
            source_entity_id=c.client_id,
        )
        for c in select_at_risk_clients(clients, limit=limit)
    ]


def cost_saving_recommendations(
    licenses: Iterable[SoftwareLicenseRecord],
    limit: int = 3,
) -> list[Recommendation]:
    """MEDIUM recommendations for the most expensive barely-used licenses."""
    return [
        Recommendation(
            type=RecommendationType.COST_SAVING,
            priority=Priority.MEDIUM,
            title=f"Underutilized License: {lic.name}",
            description=(
                f"Only {fmt_number(lic.utilization)}% utilization "
                f"costing ${fmt_number(lic.cost)}/month"
            ),
            suggested_action="Consider downgrading license tier or reallocating seats",
            impact=Impact.MEDIUM,
            estimated_value=-lic.cost * COST_SAVING_RATE,
            source_entity_id=lic.license_id,
        )
        for lic in select_material_waste(licenses, limit=limit)
    ]


def revenue_growth_recommendations(
    clients: Iterable[ClientRecord],
    limit: int = 3,
) -> list[Recommendation]:
    return [
        Recommendation(
            type=RecommendationType.REVENUE_GROWTH,
            priority=Priority.MEDIUM,
            title=f"Upsell Opportunity: {c.name}",
            description="High satisfaction client with potential for service expansion",
            suggested_action="Propose additional services or upgraded plans",
            impact=Impact.HIGH,
            estimated_value=upsell_potential(c.monthly_revenue),
            source_entity_id=c.client_id,
        )
        for c in select_upsell_candidates(clients, limit=limit)
    ]


def operational_efficiency_recommendations(
    financials_by_department: Mapping[str, list[FinancialDataRecord]],
) -> list[Recommendation]:
    """LOW recommendations for departments spending > 70% of revenue.

    Departments are visited in name order. The estimated value is a fixed
    placeholder, not derived from the department's figures.
    """
    recs: list[Recommendation] = []
    for dept in sorted(financials_by_department):
        eff = department_efficiency(dept, financials_by_department[dept])
        if eff.efficiency <= EFFICIENCY_RATIO_THRESHOLD:
            continue
        recs.append(
            Recommendation(
                type=RecommendationType.OPERATIONAL_EFFICIENCY,
                priority=Priority.LOW,
                title=f"Efficiency Improvement: {dept}",
                description=f"High cost-to-revenue ratio of {eff.efficiency * 100:.1f}%",
                suggested_action="Review operational processes and resource allocation",
                impact=Impact.MEDIUM,
                estimated_value=EFFICIENCY_ESTIMATED_SAVINGS,
                source_entity_id=dept,
            )
        )
    return recs


# ── License portfolio sections ────────────────────────────────────────────────

def underutilized_recommendations(findings: Iterable[UnderutilizedLicense]) -> list[Recommendation]:
    return [
        Recommendation(
            type=RecommendationType.UNDERUTILIZED,
            priority=f.severity,
            title=f"Underutilized License: {f.name}",
            description=(
                f"Utilization is only {fmt_number(f.utilization)}% "
                f"costing ${fmt_number(f.cost)}/month"
            ),
            suggested_action="Consider downgrading license tier or reallocating licenses",
            impact=_IMPACT_FOR_PRIORITY[f.severity],
            estimated_value=-float(f.potential_savings),
            source_entity_id=f.license_id,
        )
        for f in findings
    ]


def renewal_recommendations(findings: Iterable[ExpiringLicense]) -> list[Recommendation]:
    return [
        Recommendation(
            type=RecommendationType.RENEWAL,
            priority=Priority.MEDIUM,
            title=f"License Expiring: {f.name}",
            description=f"Renews on {f.renewal_date.isoformat()}",
            suggested_action="Review usage and negotiate renewal terms",
            impact=_IMPACT_FOR_PRIORITY[Priority.MEDIUM],
            estimated_value=0.0,
            source_entity_id=f.license_id,
        )
        for f in findings
    ]


def cost_optimization_recommendations(findings: Iterable[InefficientLicense]) -> list[Recommendation]:
    return [
        Recommendation(
            type=RecommendationType.COST_OPTIMIZATION,
            priority=Priority.HIGH,
            title=f"Cost Optimization: {f.name}",
            description=(
                f"High cost (${fmt_number(f.cost)}) with moderate utilization "
                f"({fmt_number(f.utilization)}%)"
            ),
            suggested_action="Research alternative solutions or negotiate better pricing",
            impact=_IMPACT_FOR_PRIORITY[Priority.HIGH],
            estimated_value=-float(round_half_up(f.potential_savings)),
            source_entity_id=f.license_id,
        )
        for f in findings
    ]


# ── Formatting ────────────────────────────────────────────────────────────────

def fmt_number(value: float) -> str:
    """Render a figure the way it was entered: ``1200.0`` → ``"1200"``, ``12.5`` → ``"12.5"``."""
    v = float(value)
    return str(int(v)) if v.is_integer() else str(v)
