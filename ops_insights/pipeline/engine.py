"""
Insight engine: the orchestrator behind every public computation.

Each operation declares its sources as named tasks (one store query plus the
pure analyzer that consumes it), fans them out with ``gather_sources``, and
joins the results:

  - every source succeeded          → status "success"
  - some sources failed             → status "partial"; failed sections are
                                      absent/empty and named in
                                      ``failed_sources``; one WARNING per failure
  - every source failed             → ``AllSourcesFailedError``

Operations
----------
    compute_business_insights()          → InsightSummary
    compute_recommendations()            → list[Recommendation]  (ranked, deduplicated)
    compute_license_recommendations()    → list[Recommendation]  (section order)
    compute_business_analytics()         → BusinessAnalytics

Each has an ``async`` twin prefixed with ``a``; the sync forms wrap it with
``asyncio.run`` and so must not be called from a running event loop.

The engine holds no state between calls. Two calls over an unchanged store
return identical output (apart from ``generated_at``).
"""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import date
from typing import Optional

from ops_insights.analyzers.churn import (
    AT_RISK_MAX_HEALTH,
    rank_churn_risks,
    summarize_client_health,
)
from ops_insights.analyzers.cost import (
    INEFFICIENT_MAX_UTILIZATION,
    INEFFICIENT_MIN_COST,
    MATERIAL_MAX_UTILIZATION,
    MATERIAL_MIN_COST,
    UNDERUTILIZED_MAX_UTILIZATION,
    WASTE_MAX_UTILIZATION,
    WASTE_MIN_COST,
    analyze_license_waste,
    find_cost_inefficient,
    find_expiring,
    find_underutilized,
)
from ops_insights.analyzers.growth import (
    GROWTH_MIN_HEALTH,
    UPSELL_MIN_HEALTH,
    rank_growth_opportunities,
)
from ops_insights.config import AppConfig
from ops_insights.errors import AllSourcesFailedError
from ops_insights.models.analytics import BusinessAnalytics
from ops_insights.models.insight import CostOptimizationReport, InsightSummary, SummaryStatus
from ops_insights.models.recommendation import Recommendation
from ops_insights.pipeline.fanout import SourceResult, failed, gather_sources
from ops_insights.recommendations.generators import (
    client_retention_recommendations,
    cost_optimization_recommendations,
    cost_saving_recommendations,
    operational_efficiency_recommendations,
    renewal_recommendations,
    revenue_growth_recommendations,
    underutilized_recommendations,
)
from ops_insights.recommendations.ranker import rank_recommendations
from ops_insights.store import RecordStore
from ops_insights.summaries.analytics import (
    build_client_analytics,
    build_financial_analytics,
    build_license_analytics,
    build_revenue_forecast,
)
from ops_insights.utils.time_utils import add_months, month_start, today_utc, utcnow

logger = logging.getLogger(__name__)


class InsightEngine:
    """Computes insights, recommendations, and analytics from a record store.

    Args:
        store:  Any ``RecordStore``; its fetches run on worker threads.
        config: Application config. Only ``config.engine`` is read.
    """

    def __init__(self, store: RecordStore, config: Optional[AppConfig] = None) -> None:
        self.store = store
        self.config = config or AppConfig()

    # ── Business insights ────────────────────────────────────────────────────

    async def acompute_business_insights(self) -> InsightSummary:
        cfg = self.config.engine
        store = self.store
        results = await self._run("business_insights", {
            "churn_risks": lambda: rank_churn_risks(
                store.fetch_clients(), top_n=cfg.churn_top_n,
            ),
            "cost_optimization": lambda: analyze_license_waste(
                store.fetch_licenses(max_utilization=WASTE_MAX_UTILIZATION, min_cost=WASTE_MIN_COST),
            ),
            "growth_opportunities": lambda: rank_growth_opportunities(
                store.fetch_clients(status="active", min_health=GROWTH_MIN_HEALTH),
                top_n=cfg.growth_top_n,
            ),
            "client_health": lambda: summarize_client_health(store.fetch_clients()),
            "forecast": lambda: build_revenue_forecast(
                store.fetch_financials(), periods=cfg.forecast_periods,
            ),
        })
        status, failed_sources = _join_status("business_insights", results)
        values = _values(results)

        return InsightSummary(
            churn_risks=values.get("churn_risks") or [],
            cost_optimization=values.get("cost_optimization") or CostOptimizationReport(),
            growth_opportunities=values.get("growth_opportunities") or [],
            client_health=values.get("client_health"),
            forecast=values.get("forecast"),
            generated_at=utcnow(),
            status=status,
            failed_sources=failed_sources,
        )

    def compute_business_insights(self) -> InsightSummary:
        return asyncio.run(self.acompute_business_insights())

    # ── Recommendations ──────────────────────────────────────────────────────

    async def acompute_recommendations(self) -> list[Recommendation]:
        """Merge all four sub-generators into one ranked, deduplicated list.

        A failed sub-generator contributes nothing; the remaining ones are
        still ranked and returned.
        """
        cfg = self.config.engine
        store = self.store
        results = await self._run("recommendations", {
            "client_retention": lambda: client_retention_recommendations(
                store.fetch_clients(status="active", max_health=AT_RISK_MAX_HEALTH),
                limit=cfg.retention_limit,
            ),
            "cost_saving": lambda: cost_saving_recommendations(
                store.fetch_licenses(max_utilization=MATERIAL_MAX_UTILIZATION, min_cost=MATERIAL_MIN_COST),
                limit=cfg.cost_saving_limit,
            ),
            "revenue_growth": lambda: revenue_growth_recommendations(
                store.fetch_clients(min_health=UPSELL_MIN_HEALTH),
                limit=cfg.revenue_growth_limit,
            ),
            "operational_efficiency": lambda: operational_efficiency_recommendations(
                store.fetch_financials_by_department(),
            ),
        })
        _join_status("recommendations", results)
        merged = [rec for r in results if r.success for rec in r.value]
        return rank_recommendations(merged)

    def compute_recommendations(self) -> list[Recommendation]:
        return asyncio.run(self.acompute_recommendations())

    async def acompute_license_recommendations(
        self,
        today: Optional[date] = None,
    ) -> list[Recommendation]:
        """License portfolio recommendations in section order.

        Sections: UNDERUTILIZED (cost desc), RENEWAL (renewal date asc),
        COST_OPTIMIZATION (cost desc). No cross-section re-sorting.
        """
        cfg = self.config.engine
        store = self.store
        as_of = today or today_utc()
        results = await self._run("license_recommendations", {
            "underutilized": lambda: underutilized_recommendations(find_underutilized(
                store.fetch_licenses(max_utilization=UNDERUTILIZED_MAX_UTILIZATION),
                limit=cfg.underutilized_limit,
            )),
            "renewal": lambda: renewal_recommendations(find_expiring(
                store.fetch_licenses(), as_of, window_days=cfg.renewal_window_days,
            )),
            "cost_optimization": lambda: cost_optimization_recommendations(find_cost_inefficient(
                store.fetch_licenses(
                    max_utilization=INEFFICIENT_MAX_UTILIZATION, min_cost=INEFFICIENT_MIN_COST,
                ),
            )),
        })
        _join_status("license_recommendations", results)
        return [rec for r in results if r.success for rec in r.value]

    def compute_license_recommendations(self, today: Optional[date] = None) -> list[Recommendation]:
        return asyncio.run(self.acompute_license_recommendations(today))

    # ── Analytics ────────────────────────────────────────────────────────────

    async def acompute_business_analytics(self, today: Optional[date] = None) -> BusinessAnalytics:
        """Client, license, and financial analytics.

        The monthly financial trend covers ``trend_lookback_months`` calendar
        months back from the start of the current month.
        """
        cfg = self.config.engine
        store = self.store
        as_of = today or today_utc()
        trend_since = add_months(month_start(as_of), -cfg.trend_lookback_months)
        results = await self._run("business_analytics", {
            "clients": lambda: build_client_analytics(store.fetch_clients()),
            "licenses": lambda: build_license_analytics(
                store.fetch_licenses(), as_of, window_days=cfg.renewal_window_days,
            ),
            "financials": lambda: build_financial_analytics(
                store.fetch_financials(since=trend_since),
            ),
        })
        status, failed_sources = _join_status("business_analytics", results)
        values = _values(results)

        return BusinessAnalytics(
            clients=values.get("clients"),
            licenses=values.get("licenses"),
            financials=values.get("financials"),
            generated_at=utcnow(),
            status=status,
            failed_sources=failed_sources,
        )

    def compute_business_analytics(self, today: Optional[date] = None) -> BusinessAnalytics:
        return asyncio.run(self.acompute_business_analytics(today))

    # ── Internal ─────────────────────────────────────────────────────────────

    async def _run(self, operation: str, tasks: dict) -> list[SourceResult]:
        logger.info("%s: starting %d sources", operation, len(tasks))
        t0 = time.monotonic()
        results = await gather_sources(tasks, operation=operation)
        logger.info(
            "%s: %d/%d sources succeeded in %.3fs",
            operation,
            sum(1 for r in results if r.success),
            len(results),
            time.monotonic() - t0,
        )
        return results


def _join_status(operation: str, results: list[SourceResult]) -> tuple[SummaryStatus, list[str]]:
    """Collapse per-source outcomes into (status, failed source names).

    Raises:
        AllSourcesFailedError: If every source failed.
    """
    errors = failed(results)
    if results and len(errors) == len(results):
        raise AllSourcesFailedError(operation, errors)
    if errors:
        logger.warning("%s: partial result, failed sources: %s", operation, ", ".join(errors))
        return "partial", list(errors)
    return "success", []


def _values(results: list[SourceResult]) -> dict:
    return {r.name: r.value for r in results if r.success}
