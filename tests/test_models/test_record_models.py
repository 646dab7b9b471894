"""
Tests for ops_insights/models and ops_insights/taxonomy.

What we test
------------
Records:
  - Score fields are bounded to 0–100; statuses are enumerated.
  - Financial period is normalised to the first of the month.
  - Derived properties (client profitability, financial total_costs).
  - Models are frozen.

Recommendation:
  - Empty title or suggested_action is rejected.
  - priority_rank follows HIGH=3, MEDIUM=2, LOW=1.
  - JSON dump uses the enum string values.
"""

from __future__ import annotations

from datetime import date

import pytest
from pydantic import ValidationError

from ops_insights.models.recommendation import Recommendation
from ops_insights.models.records import ClientRecord, FinancialDataRecord, SoftwareLicenseRecord
from ops_insights.taxonomy.recommendation_taxonomy import (
    PRIORITY_RANK,
    Impact,
    Priority,
    RecommendationType,
)


class TestRecordModels:
    @pytest.mark.parametrize("score", [-0.1, 100.1])
    def test_client_score_bounds(self, score):
        with pytest.raises(ValidationError):
            ClientRecord(client_id="c", name="C", satisfaction_score=score)

    def test_license_utilization_bounds(self):
        with pytest.raises(ValidationError):
            SoftwareLicenseRecord(license_id="l", name="L", cost=1, utilization=120)

    def test_license_status(self):
        with pytest.raises(ValidationError):
            SoftwareLicenseRecord(license_id="l", name="L", cost=1, status="cancelled")

    def test_period_normalised(self):
        rec = FinancialDataRecord(
            period=date(2024, 5, 31), department="Ops", revenue=1, operational_costs=1,
        )
        assert rec.period == date(2024, 5, 1)

    def test_client_profitability(self, make_client):
        assert make_client(monthly_revenue=5000, cost_to_serve=3200).profitability == 1800
        assert make_client(monthly_revenue=None, cost_to_serve=None).profitability == 0

    def test_total_costs(self, make_financial):
        rec = make_financial(operational_costs=100, software_costs=20, personnel_costs=None,
                             infrastructure_costs=5)
        assert rec.total_costs == 125

    def test_frozen(self, make_client):
        client = make_client()
        with pytest.raises(ValidationError):
            client.health_score = 10


class TestRecommendationModel:
    def _rec(self, **overrides) -> Recommendation:
        fields = dict(
            type=RecommendationType.RENEWAL,
            priority=Priority.LOW,
            title="License Expiring: VPN",
            description="Renews soon",
            suggested_action="Review usage",
            impact=Impact.LOW,
        )
        fields.update(overrides)
        return Recommendation(**fields)

    @pytest.mark.parametrize("field", ["title", "suggested_action"])
    def test_blank_text_rejected(self, field):
        with pytest.raises(ValidationError):
            self._rec(**{field: "   "})

    def test_priority_rank(self):
        assert self._rec(priority=Priority.HIGH).priority_rank == 3
        assert PRIORITY_RANK == {Priority.HIGH: 3, Priority.MEDIUM: 2, Priority.LOW: 1}

    def test_json_dump(self):
        dumped = self._rec(impact=Impact.MEDIUM).model_dump(mode="json")
        assert dumped["type"] == "RENEWAL"
        assert dumped["priority"] == "LOW"
        assert dumped["impact"] == "Medium"
        assert dumped["estimated_value"] == 0.0
        assert dumped["source_entity_id"] is None
