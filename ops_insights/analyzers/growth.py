"""
Growth opportunity ranker: which healthy clients are worth an upsell push.

Eligibility: ``status == "active"`` and ``health_score >= 80``.

Ranking: growth score descending; ties broken by monthly revenue descending,
then name ascending. Truncated to top-N (default 5).

A separate, stricter selector (``select_upsell_candidates``) feeds the
REVENUE_GROWTH recommendations: health ≥ 85 and monthly revenue > 5000,
with no status filter and in snapshot order.
"""

from __future__ import annotations

from typing import Iterable

from ops_insights.metrics.derivation import growth_score, upsell_potential
from ops_insights.models.insight import GrowthOpportunity
from ops_insights.models.records import ClientRecord

GROWTH_MIN_HEALTH = 80.0

UPSELL_MIN_HEALTH = 85.0
UPSELL_MIN_REVENUE = 5000.0


def is_growth_eligible(client: ClientRecord) -> bool:
    return client.status == "active" and client.health_score >= GROWTH_MIN_HEALTH


def rank_growth_opportunities(
    clients: Iterable[ClientRecord],
    top_n: int = 5,
) -> list[GrowthOpportunity]:
    """Rank eligible clients by growth score.

    Args:
        clients: Client snapshot.
        top_n:   Maximum number of opportunities to return.

    Returns:
        Up to ``top_n`` ``GrowthOpportunity`` objects, best first.
    """
    opportunities = [
        GrowthOpportunity(
            client_id=c.client_id,
            name=c.name,
            health_score=c.health_score,
            monthly_revenue=c.monthly_revenue or 0.0,
            upsell_potential=upsell_potential(c.monthly_revenue),
            growth_score=growth_score(c.health_score, c.monthly_revenue),
        )
        for c in clients
        if is_growth_eligible(c)
    ]
    opportunities.sort(key=lambda o: (-o.growth_score, -o.monthly_revenue, o.name))
    return opportunities[:top_n]


def select_upsell_candidates(
    clients: Iterable[ClientRecord],
    limit: int = 3,
) -> list[ClientRecord]:
    """High-value, very healthy clients for revenue-growth recommendations."""
    candidates = [
        c for c in clients
        if c.health_score >= UPSELL_MIN_HEALTH
        and (c.monthly_revenue or 0.0) > UPSELL_MIN_REVENUE
    ]
    return candidates[:limit]
