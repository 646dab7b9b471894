"""
Recommendation taxonomy.

Three dimensions describe every recommendation:
  - ``RecommendationType`` — the *what*: which analyzer finding produced it?
  - ``Priority``           — the *when*: how urgently should it be acted on?
  - ``Impact``             — the *how much*: expected business effect.

``PRIORITY_RANK`` is the ordinal weight used as the primary sort key when
recommendations from different generators are merged.

This module has NO imports from any other ``ops_insights`` package.
"""

from enum import StrEnum


class RecommendationType(StrEnum):
    """Kind of finding a recommendation was generated from."""

    # ── Cross-entity recommendations ──────────────────────────────────────────
    CLIENT_RETENTION = "CLIENT_RETENTION"
    """Active client whose health score signals churn."""

    COST_SAVING = "COST_SAVING"
    """Expensive license with very low utilization."""

    REVENUE_GROWTH = "REVENUE_GROWTH"
    """Healthy high-revenue client with upsell room."""

    OPERATIONAL_EFFICIENCY = "OPERATIONAL_EFFICIENCY"
    """Department whose operational cost eats most of its revenue."""

    # ── License portfolio recommendations ─────────────────────────────────────
    UNDERUTILIZED = "UNDERUTILIZED"
    """License used at less than half of capacity."""

    RENEWAL = "RENEWAL"
    """License renewing inside the review window."""

    COST_OPTIMIZATION = "COST_OPTIMIZATION"
    """High-cost license at moderate utilization; renegotiate or replace."""


class Priority(StrEnum):
    """Action urgency."""

    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class Impact(StrEnum):
    """Expected business effect of acting on a recommendation."""

    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


PRIORITY_RANK: dict[Priority, int] = {
    Priority.HIGH:   3,
    Priority.MEDIUM: 2,
    Priority.LOW:    1,
}
