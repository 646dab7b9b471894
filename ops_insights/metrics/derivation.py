"""
Metric derivation: the scoring formulas every analyzer builds on.

All functions are pure and total over their numeric domain. ``None`` inputs
(missing revenue, unknown cost, ...) are treated as 0 before computation, and
no function divides by zero.

Formulas
--------
    profitability  = revenue − cost
    margin         = (revenue − cost) / revenue × 100          (0 when revenue == 0)
    churn_risk     = 0.4 × (100 − health)
                   + 0.3 × (100 − sla)
                   + 0.3 × (100 − satisfaction)                 (range 0–100)
    growth_score   = 0.6 × health + 0.4 × (monthly_revenue / 1000)
    upsell         = monthly_revenue × 0.3
    license_waste  = cost × (1 − utilization / 100)

``growth_score`` is unbounded above: the revenue term keeps growing with
revenue, so a client billing 200k/month scores 0.6 × health + 80. Callers that
need a 0–100 scale must not assume one here.

This module has NO imports from any other ``ops_insights`` package.
"""

from __future__ import annotations

import math
from typing import Optional

Number = Optional[float]

# ── Weights ───────────────────────────────────────────────────────────────────

# Weights in points per 100 so integer scores give exact results
CHURN_HEALTH_WEIGHT       = 40
CHURN_SLA_WEIGHT          = 30
CHURN_SATISFACTION_WEIGHT = 30

GROWTH_HEALTH_WEIGHT  = 0.6
GROWTH_REVENUE_WEIGHT = 0.4
GROWTH_REVENUE_SCALE  = 1000.0

UPSELL_RATE = 0.3

HEALTH_TREND_GOOD = 80.0
HEALTH_TREND_FAIR = 60.0


def _num(value: Number) -> float:
    return float(value) if value is not None else 0.0


# ── Client metrics ────────────────────────────────────────────────────────────

def profitability(revenue: Number, cost: Number) -> float:
    """Revenue minus cost."""
    return _num(revenue) - _num(cost)


def margin(revenue: Number, cost: Number) -> float:
    """Profit margin as a percentage of revenue; 0 when revenue is 0."""
    rev = _num(revenue)
    if rev == 0:
        return 0.0
    return (rev - _num(cost)) / rev * 100.0


def churn_risk(health: Number, sla: Number, satisfaction: Number) -> float:
    """Composite attrition risk, 0 (safe) to 100 (certain churn).

    Each input is a 0–100 score; the weighted shortfalls from 100 contribute at
    most 40, 30 and 30 points respectively. Non-increasing in every argument.
    """
    return (
        CHURN_HEALTH_WEIGHT         * (100.0 - _num(health))
        + CHURN_SLA_WEIGHT          * (100.0 - _num(sla))
        + CHURN_SATISFACTION_WEIGHT * (100.0 - _num(satisfaction))
    ) / 100.0


def growth_score(health: Number, monthly_revenue: Number) -> float:
    """Upsell attractiveness. Unbounded above for high-revenue clients."""
    return (
        GROWTH_HEALTH_WEIGHT * _num(health)
        + GROWTH_REVENUE_WEIGHT * (_num(monthly_revenue) / GROWTH_REVENUE_SCALE)
    )


def upsell_potential(monthly_revenue: Number) -> float:
    """Expansion revenue assumed available from a healthy client."""
    return _num(monthly_revenue) * UPSELL_RATE


def health_trend_signal(health: Number) -> int:
    """+1 for a healthy client (≥ 80), 0 for fair (≥ 60), −1 otherwise."""
    h = _num(health)
    if h >= HEALTH_TREND_GOOD:
        return 1
    if h >= HEALTH_TREND_FAIR:
        return 0
    return -1


# ── License metrics ───────────────────────────────────────────────────────────

def license_waste(cost: Number, utilization: Number) -> float:
    """Share of a license's cost paid for unused capacity.

    Equals ``cost`` at 0% utilization and 0 at 100%.
    """
    return _num(cost) * (100.0 - _num(utilization)) / 100.0


# ── Financial metrics ─────────────────────────────────────────────────────────

def total_costs(
    operational: Number,
    software: Number = None,
    personnel: Number = None,
    infrastructure: Number = None,
) -> float:
    """Sum of the four cost components; missing components count as 0."""
    return _num(operational) + _num(software) + _num(personnel) + _num(infrastructure)


def cost_to_revenue_ratio(cost: Number, revenue: Number) -> float:
    """Cost as a fraction of revenue; 0 when revenue is 0."""
    rev = _num(revenue)
    if rev == 0:
        return 0.0
    return _num(cost) / rev


def operating_margin_pct(revenue: Number, operational_costs: Number) -> float:
    """Operating margin percentage; 0 unless revenue is positive."""
    rev = _num(revenue)
    if rev <= 0:
        return 0.0
    return (rev - _num(operational_costs)) / rev * 100.0


def budget_utilization_pct(actual_spend: Number, budget: Number) -> float:
    """Actual spend as a percentage of budget; 0 when budget is 0 or missing."""
    bud = _num(budget)
    if bud == 0:
        return 0.0
    return _num(actual_spend) / bud * 100.0


# ── Rounding ──────────────────────────────────────────────────────────────────

def round_half_up(value: float) -> int:
    """Round to the nearest whole unit, .5 going up (not banker's rounding)."""
    return int(math.floor(value + 0.5))
