"""
Churn risk analyzer.

Two independent lenses on client risk are kept as separate code paths:

  - ``rank_churn_risks``       — composite predictive risk (health, SLA and
                                 satisfaction weighted), threshold risk > 30,
                                 sorted by risk desc then name, top-N (10).
  - ``select_at_risk_clients`` — direct health alert: active clients with
                                 health < 60, snapshot order, first N (5).

A client can appear in one list and not the other (e.g. health 55 with
perfect SLA and satisfaction has composite risk 18).

``summarize_client_health`` gives the portfolio view used in the business
insight summary: mean health, trend, and the health-alert risk factors.
"""

from __future__ import annotations

from typing import Iterable

from ops_insights.metrics.derivation import churn_risk, health_trend_signal
from ops_insights.models.insight import ChurnRisk, ClientHealthInsight, RiskFactor
from ops_insights.models.records import ClientRecord

CHURN_RISK_THRESHOLD = 30.0
AT_RISK_MAX_HEALTH = 60.0

LOW_HEALTH_ISSUE = "Low health score"


def rank_churn_risks(
    clients: Iterable[ClientRecord],
    top_n: int = 10,
) -> list[ChurnRisk]:
    """Rank clients by composite churn risk.

    Args:
        clients: Client snapshot (every status is considered).
        top_n:   Maximum number of risks to return.

    Returns:
        Up to ``top_n`` ``ChurnRisk`` objects with risk > 30, highest first.
    """
    risks = [
        ChurnRisk(
            client_id=c.client_id,
            name=c.name,
            health_score=c.health_score,
            sla_compliance=c.sla_compliance,
            satisfaction_score=c.satisfaction_score,
            churn_risk=churn_risk(c.health_score, c.sla_compliance, c.satisfaction_score),
        )
        for c in clients
    ]
    eligible = [r for r in risks if r.churn_risk > CHURN_RISK_THRESHOLD]
    eligible.sort(key=lambda r: (-r.churn_risk, r.name))
    return eligible[:top_n]


def is_at_risk(client: ClientRecord) -> bool:
    return client.status == "active" and client.health_score < AT_RISK_MAX_HEALTH


def select_at_risk_clients(
    clients: Iterable[ClientRecord],
    limit: int = 5,
) -> list[ClientRecord]:
    """First ``limit`` active clients with health below 60, in snapshot order."""
    return [c for c in clients if is_at_risk(c)][:limit]


def summarize_client_health(clients: Iterable[ClientRecord]) -> ClientHealthInsight:
    """Mean health, trend signal, and low-health risk factors.

    Risk factors include every client under 60 regardless of status.
    Empty input → zeros and no risk factors.
    """
    snapshot = list(clients)
    if not snapshot:
        return ClientHealthInsight()

    avg_health = sum(c.health_score for c in snapshot) / len(snapshot)
    trend = sum(health_trend_signal(c.health_score) for c in snapshot) / len(snapshot)
    risk_factors = [
        RiskFactor(
            client_id=c.client_id,
            client=c.name,
            score=c.health_score,
            issues=[LOW_HEALTH_ISSUE],
        )
        for c in snapshot
        if c.health_score < AT_RISK_MAX_HEALTH
    ]
    return ClientHealthInsight(avg_health=avg_health, trend=trend, risk_factors=risk_factors)
