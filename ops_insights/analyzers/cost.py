"""
Cost optimization analyzer: scans software licenses for paid-but-unused
capacity and renegotiation candidates.

Thresholds
----------
Four deliberately different filters serve four different consumers:

    broad waste scan      utilization < 50  and cost > 100    → total waste report
    material waste        utilization < 40  and cost > 500    → COST_SAVING recs
    cost inefficient      utilization < 70  and cost > 1000   → COST_OPTIMIZATION recs
    underutilized         utilization < 50                    → UNDERUTILIZED recs

The broad scan aggregates everything worth knowing about; the stricter filters
select only the few licenses material enough to act on.

Savings estimates
-----------------
    waste / underutilized  cost × (1 − utilization / 100)   (reclaimable capacity)
    cost inefficient       cost × 0.3                       (negotiation estimate)

Ordering
--------
Opportunity lists are sorted by cost descending (``order_by="cost"``) or by
potential savings descending (``order_by="savings"``); ties are broken by
license name ascending so output is stable across runs.

All functions are pure — no store access, no I/O.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Callable, Iterable, Literal, TypeVar

from ops_insights.metrics.derivation import license_waste, round_half_up
from ops_insights.models.insight import (
    CostOpportunity,
    CostOptimizationReport,
    ExpiringLicense,
    InefficientLicense,
    UnderutilizedLicense,
)
from ops_insights.models.records import SoftwareLicenseRecord
from ops_insights.taxonomy.recommendation_taxonomy import Priority

OrderBy = Literal["cost", "savings"]

WASTE_MAX_UTILIZATION = 50.0
WASTE_MIN_COST = 100.0

MATERIAL_MAX_UTILIZATION = 40.0
MATERIAL_MIN_COST = 500.0

INEFFICIENT_MAX_UTILIZATION = 70.0
INEFFICIENT_MIN_COST = 1000.0
INEFFICIENT_SAVINGS_RATE = 0.3

UNDERUTILIZED_MAX_UTILIZATION = 50.0
UNDERUTILIZED_HIGH_SEVERITY_BELOW = 25.0

WASTE_RECOMMENDATION = "Consider license downgrade or reallocation"

T = TypeVar("T")


def is_waste_eligible(lic: SoftwareLicenseRecord) -> bool:
    return lic.utilization < WASTE_MAX_UTILIZATION and lic.cost > WASTE_MIN_COST


def is_material_waste(lic: SoftwareLicenseRecord) -> bool:
    return lic.utilization < MATERIAL_MAX_UTILIZATION and lic.cost > MATERIAL_MIN_COST


def is_cost_inefficient(lic: SoftwareLicenseRecord) -> bool:
    return lic.utilization < INEFFICIENT_MAX_UTILIZATION and lic.cost > INEFFICIENT_MIN_COST


def analyze_license_waste(
    licenses: Iterable[SoftwareLicenseRecord],
    order_by: OrderBy = "cost",
) -> CostOptimizationReport:
    """Broad waste scan over all licenses.

    Args:
        licenses: License snapshot.
        order_by: ``"cost"`` (default) or ``"savings"`` for the primary sort key.

    Returns:
        ``CostOptimizationReport`` with total waste over eligible licenses and
        one ``CostOpportunity`` per eligible license. Empty input → zero waste.
    """
    opportunities = [
        CostOpportunity(
            license_id=lic.license_id,
            software=lic.name,
            current_utilization=lic.utilization,
            monthly_cost=lic.cost,
            potential_savings=license_waste(lic.cost, lic.utilization),
            recommendation=WASTE_RECOMMENDATION,
        )
        for lic in licenses
        if is_waste_eligible(lic)
    ]
    total_waste = sum(o.potential_savings for o in opportunities)

    if order_by == "savings":
        ranked = _rank(opportunities, lambda o: o.potential_savings, lambda o: o.software)
    else:
        ranked = _rank(opportunities, lambda o: o.monthly_cost, lambda o: o.software)

    return CostOptimizationReport(total_waste=total_waste, opportunities=ranked)


def select_material_waste(
    licenses: Iterable[SoftwareLicenseRecord],
    limit: int = 3,
) -> list[SoftwareLicenseRecord]:
    """Return the most expensive licenses under the stricter waste filter.

    Sorted by cost descending, ties by name; truncated to ``limit``.
    """
    eligible = [lic for lic in licenses if is_material_waste(lic)]
    return _rank(eligible, lambda lic: lic.cost, lambda lic: lic.name)[:limit]


def find_cost_inefficient(
    licenses: Iterable[SoftwareLicenseRecord],
    order_by: OrderBy = "cost",
) -> list[InefficientLicense]:
    """Flag high-cost licenses at moderate utilization.

    Savings are estimated at 30% of cost (renegotiation or alternative vendor),
    not from unused capacity.
    """
    findings = [
        InefficientLicense(
            license_id=lic.license_id,
            name=lic.name,
            utilization=lic.utilization,
            cost=lic.cost,
            potential_savings=lic.cost * INEFFICIENT_SAVINGS_RATE,
        )
        for lic in licenses
        if is_cost_inefficient(lic)
    ]
    primary = (lambda f: f.potential_savings) if order_by == "savings" else (lambda f: f.cost)
    return _rank(findings, primary, lambda f: f.name)


def find_underutilized(
    licenses: Iterable[SoftwareLicenseRecord],
    limit: int = 5,
) -> list[UnderutilizedLicense]:
    """Licenses below 50% utilization, most expensive first.

    Severity is HIGH below 25% utilization, MEDIUM otherwise. Savings are the
    reclaimable capacity rounded to whole currency units.
    """
    eligible = [lic for lic in licenses if lic.utilization < UNDERUTILIZED_MAX_UTILIZATION]
    ranked = _rank(eligible, lambda lic: lic.cost, lambda lic: lic.name)[:limit]
    return [
        UnderutilizedLicense(
            license_id=lic.license_id,
            name=lic.name,
            utilization=lic.utilization,
            cost=lic.cost,
            severity=(
                Priority.HIGH
                if lic.utilization < UNDERUTILIZED_HIGH_SEVERITY_BELOW
                else Priority.MEDIUM
            ),
            potential_savings=round_half_up(license_waste(lic.cost, lic.utilization)),
        )
        for lic in ranked
    ]


def find_expiring(
    licenses: Iterable[SoftwareLicenseRecord],
    today: date,
    window_days: int = 30,
) -> list[ExpiringLicense]:
    """Licenses renewing between ``today`` and ``today + window_days`` inclusive.

    Sorted by renewal date ascending, ties by name. Licenses without a renewal
    date, or already past it, are skipped.
    """
    horizon = today + timedelta(days=window_days)
    expiring = [
        lic for lic in licenses
        if lic.renewal_date is not None and today <= lic.renewal_date <= horizon
    ]
    expiring.sort(key=lambda lic: (lic.renewal_date, lic.name))
    return [
        ExpiringLicense(
            license_id=lic.license_id,
            name=lic.name,
            renewal_date=lic.renewal_date,
            days_until_renewal=(lic.renewal_date - today).days,
            cost=lic.cost,
        )
        for lic in expiring
    ]


# ── Helper ────────────────────────────────────────────────────────────────────

def _rank(
    items: list[T],
    value: Callable[[T], float],
    name: Callable[[T], str],
) -> list[T]:
    """Sort by ``value`` descending, then ``name`` ascending."""
    return sorted(items, key=lambda x: (-value(x), name(x)))
