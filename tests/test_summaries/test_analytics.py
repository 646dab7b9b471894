"""
Tests for ops_insights/summaries/analytics.py.

What we test
------------
build_client_analytics():
  - Totals, status/industry groups, health metrics and health histogram.
  - Profitability summary only counts clients with positive revenue.
  - Top clients by profitability, ties by name, capped at 10.

build_license_analytics():
  - Overview counts (underutilized, expiring soon incl. past renewals).
  - Cost by department and utilization histogram with cost totals.

build_financial_analytics():
  - Chronological monthly trend summed across departments.
  - Cost breakdown totals; budget utilization and efficiency per department.

build_revenue_forecast():
  - Uses the N most recent records; fixed 1.05 / 1.15 multipliers.
  - None on empty input.
"""

from __future__ import annotations

from datetime import date

import pytest

from ops_insights.summaries.analytics import (
    build_client_analytics,
    build_financial_analytics,
    build_license_analytics,
    build_revenue_forecast,
    department_efficiency,
)


class TestClientAnalytics:
    def test_overview(self, scenario_records):
        analytics = build_client_analytics(scenario_records.clients)
        assert analytics.total_clients == 3
        assert analytics.active_clients == 3
        assert analytics.health_metrics.high_risk_clients == 1
        assert analytics.health_metrics.top_performers == 1
        assert analytics.health_metrics.avg_health_score == pytest.approx((55 + 92 + 70) / 3)

    def test_health_distribution(self, scenario_records):
        analytics = build_client_analytics(scenario_records.clients)
        counts = {b.label: b.count for b in analytics.health_distribution}
        assert counts == {"0-60": 1, "60-80": 1, "80-90": 0, "90-101": 1}

    def test_industry_breakdown(self, scenario_records):
        analytics = build_client_analytics(scenario_records.clients)
        keys = [g.key for g in analytics.industry_breakdown]
        assert keys == ["Finance", "Retail"]
        assert analytics.industry_breakdown[1].count == 2

    def test_profitability_excludes_zero_revenue(self, make_client):
        clients = [
            make_client("a", monthly_revenue=1000, cost_to_serve=600),   # margin 40
            make_client("b", monthly_revenue=1000, cost_to_serve=900),   # margin 10
            make_client("c", monthly_revenue=0, cost_to_serve=500),
            make_client("d", monthly_revenue=None, cost_to_serve=None),
        ]
        prof = build_client_analytics(clients).profitability
        assert prof.clients_counted == 2
        assert prof.total_revenue == pytest.approx(2000.0)
        assert prof.total_profit == pytest.approx(500.0)
        assert prof.avg_margin == pytest.approx(25.0)
        assert prof.highly_profitable == 1
        assert prof.low_profitability == 1

    def test_top_clients_order(self, make_client):
        clients = [
            make_client("a", name="Beta", monthly_revenue=2000, cost_to_serve=1000),
            make_client("b", name="Alpha", monthly_revenue=3000, cost_to_serve=2000),
            make_client("c", name="Gamma", monthly_revenue=9000, cost_to_serve=1000),
        ]
        top = build_client_analytics(clients).top_clients
        assert [t.name for t in top] == ["Gamma", "Alpha", "Beta"]

    def test_top_clients_capped(self, make_client):
        clients = [make_client(f"c{i:02d}", monthly_revenue=1000 + i) for i in range(15)]
        assert len(build_client_analytics(clients).top_clients) == 10

    def test_empty(self):
        analytics = build_client_analytics([])
        assert analytics.total_clients == 0
        assert analytics.health_distribution == []


class TestLicenseAnalytics:
    TODAY = date(2024, 6, 1)

    def test_overview(self, make_license):
        licenses = [
            make_license("a", cost=100, utilization=20, renewal_date=date(2024, 5, 1)),
            make_license("b", cost=300, utilization=60, renewal_date=date(2024, 6, 30)),
            make_license("c", cost=600, utilization=100, renewal_date=date(2024, 7, 1)),
        ]
        overview = build_license_analytics(licenses, self.TODAY, window_days=30).overview
        assert overview.total_cost == pytest.approx(1000.0)
        assert overview.avg_utilization == pytest.approx(60.0)
        assert overview.underutilized_count == 1
        # past renewal counts, today + 30 does not
        assert overview.expiring_soon_count == 2

    def test_cost_by_department(self, make_license):
        licenses = [
            make_license("a", department="IT", cost=100, utilization=50),
            make_license("b", department="IT", cost=300, utilization=70),
            make_license("c", department=None, cost=50),
        ]
        groups = build_license_analytics(licenses, self.TODAY).cost_by_department
        assert [g.key for g in groups] == ["IT", None]
        assert groups[0].sums["cost"] == pytest.approx(400.0)
        assert groups[0].means["utilization"] == pytest.approx(60.0)

    def test_utilization_distribution_has_cost(self, make_license):
        licenses = [make_license("a", cost=120, utilization=100)]
        dist = build_license_analytics(licenses, self.TODAY).utilization_distribution
        top = [b for b in dist if b.label == "75-101"][0]
        assert top.count == 1
        assert top.total == pytest.approx(120.0)

    def test_empty(self):
        analytics = build_license_analytics([], self.TODAY)
        assert analytics.overview.total_cost == 0.0


class TestFinancialAnalytics:
    def test_monthly_trend_chronological(self, scenario_records):
        trend = build_financial_analytics(scenario_records.financials).monthly_trend
        assert [p.period for p in trend] == [date(2024, 1, 1), date(2024, 2, 1)]
        assert trend[0].revenue == pytest.approx(30_000.0)
        assert trend[0].costs == pytest.approx(14_000.0)
        assert trend[0].profit == pytest.approx(16_000.0)

    def test_cost_breakdown(self, make_financial):
        records = [
            make_financial(operational_costs=100, software_costs=10, personnel_costs=20),
            make_financial(operational_costs=200, infrastructure_costs=5),
        ]
        breakdown = build_financial_analytics(records).cost_breakdown
        assert breakdown.operational == pytest.approx(300.0)
        assert breakdown.software == pytest.approx(10.0)
        assert breakdown.personnel == pytest.approx(20.0)
        assert breakdown.infrastructure == pytest.approx(5.0)
        assert breakdown.total == pytest.approx(335.0)

    def test_budget_utilization(self, make_financial):
        records = [
            make_financial(department="IT", budget=1000, actual_spend=900),
            make_financial(department="IT", budget=0, actual_spend=50),
        ]
        [budget] = build_financial_analytics(records).budget_utilization
        assert budget.total_budget == pytest.approx(1000.0)
        assert budget.total_spend == pytest.approx(950.0)
        assert budget.utilization == pytest.approx(45.0)

    def test_department_efficiency_name_order(self, scenario_records):
        eff = build_financial_analytics(scenario_records.financials).department_efficiency
        assert [e.department for e in eff] == ["Operations", "Sales"]
        assert eff[0].efficiency == pytest.approx(0.85)

    def test_single_department_efficiency(self, make_financial):
        analytics = build_financial_analytics([
            make_financial(department="Ops", revenue=1000, operational_costs=800),
        ])
        [eff] = analytics.department_efficiency
        assert eff.department == "Ops"
        assert eff.efficiency == pytest.approx(0.8)

    def test_cost_breakdown_spans_every_period_given(self, make_financial):
        records = [
            make_financial(date(2024, 1, 1), operational_costs=100),
            make_financial(date(2024, 5, 1), operational_costs=300),
        ]
        assert build_financial_analytics(records).cost_breakdown.operational == pytest.approx(400.0)

    def test_department_efficiency_zero_revenue(self, make_financial):
        eff = department_efficiency("X", [make_financial(revenue=0, operational_costs=500)])
        assert eff.efficiency == 0.0

    def test_empty(self):
        analytics = build_financial_analytics([])
        assert analytics.monthly_trend == []


class TestRevenueForecast:
    def test_uses_most_recent_periods(self, make_financial):
        records = [
            make_financial(date(2024, m, 1), revenue=1000 * m, operational_costs=0)
            for m in range(1, 9)
        ]
        forecast = build_revenue_forecast(records, periods=6)
        # months 3..8 → mean 5500
        assert forecast.periods_used == 6
        assert forecast.avg_revenue == pytest.approx(5500.0)
        assert forecast.next_month == pytest.approx(5500.0 * 1.05)
        assert forecast.next_quarter == pytest.approx(5500.0 * 1.15)
        assert forecast.growth_rate == pytest.approx(100.0)

    def test_growth_rate_is_mean_operating_margin(self, make_financial):
        records = [
            make_financial(revenue=1000, operational_costs=600),   # 40%
            make_financial(revenue=0, operational_costs=600),      # 0%
        ]
        assert build_revenue_forecast(records).growth_rate == pytest.approx(20.0)

    def test_empty_returns_none(self):
        assert build_revenue_forecast([]) is None
