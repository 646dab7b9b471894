"""
Tests for ops_insights/summaries/aggregate.py.

What we test
------------
group_summaries():
  - Count, sum and mean per requested field.
  - None field values count as 0 but still count toward the mean.
  - Groups sorted by key with the None group last.
  - Empty input → empty list.

bucket_histogram():
  - A value equal to a boundary lands in the bucket starting at it.
  - The last boundary is an exclusive upper bound.
  - Out-of-range and None values go to the catch-all bucket, which is only
    emitted when non-empty.
  - Weighted totals per bucket.
  - Invalid boundaries raise ValueError.
"""

from __future__ import annotations

import pytest

from ops_insights.summaries.aggregate import (
    HEALTH_SCORE_BOUNDARIES,
    UTILIZATION_BOUNDARIES,
    bucket_histogram,
    group_summaries,
)


def _identity(x):
    return x


class TestGroupSummaries:
    def test_counts_sums_means(self, make_client):
        clients = [
            make_client("a", industry="Retail", health_score=80, monthly_revenue=1000),
            make_client("b", industry="Retail", health_score=60, monthly_revenue=3000),
            make_client("c", industry="Finance", health_score=90, monthly_revenue=5000),
        ]
        groups = group_summaries(
            clients,
            key=lambda c: c.industry,
            fields={
                "health_score": lambda c: c.health_score,
                "monthly_revenue": lambda c: c.monthly_revenue,
            },
        )
        assert [g.key for g in groups] == ["Finance", "Retail"]
        retail = groups[1]
        assert retail.count == 2
        assert retail.sums["monthly_revenue"] == pytest.approx(4000.0)
        assert retail.means["health_score"] == pytest.approx(70.0)

    def test_none_values_count_as_zero(self, make_client):
        clients = [
            make_client("a", monthly_revenue=None),
            make_client("b", monthly_revenue=1000),
        ]
        [group] = group_summaries(
            clients,
            key=lambda c: c.status,
            fields={"monthly_revenue": lambda c: c.monthly_revenue},
        )
        assert group.sums["monthly_revenue"] == pytest.approx(1000.0)
        assert group.means["monthly_revenue"] == pytest.approx(500.0)

    def test_none_key_sorted_last(self, make_client):
        clients = [
            make_client("a", industry=None),
            make_client("b", industry="Zoo"),
            make_client("c", industry="Art"),
        ]
        groups = group_summaries(clients, key=lambda c: c.industry)
        assert [g.key for g in groups] == ["Art", "Zoo", None]
        assert all(g.sums == {} for g in groups)

    def test_empty(self):
        assert group_summaries([], key=_identity) == []


class TestBucketHistogram:
    def test_boundary_value_goes_to_upper_bucket(self):
        buckets = bucket_histogram([60, 80, 90], value=_identity, boundaries=HEALTH_SCORE_BOUNDARIES)
        counts = {b.label: b.count for b in buckets}
        assert counts == {"0-60": 0, "60-80": 1, "80-90": 1, "90-101": 1}

    def test_last_boundary_is_exclusive(self):
        buckets = bucket_histogram([100, 101], value=_identity, boundaries=UTILIZATION_BOUNDARIES)
        assert buckets[-2].label == "75-101"
        assert buckets[-2].count == 1
        assert buckets[-1].label == "Other"
        assert buckets[-1].count == 1
        assert buckets[-1].lower is None

    def test_catch_all_omitted_when_empty(self):
        buckets = bucket_histogram([10, 30], value=_identity, boundaries=UTILIZATION_BOUNDARIES)
        assert [b.label for b in buckets] == ["0-25", "25-50", "50-75", "75-101"]

    def test_none_and_negative_go_to_catch_all(self):
        buckets = bucket_histogram(
            [None, -1, 5], value=_identity, boundaries=[0, 10], default_label="Unknown",
        )
        assert [(b.label, b.count) for b in buckets] == [("0-10", 1), ("Unknown", 2)]

    def test_weighted_totals(self, make_license):
        licenses = [
            make_license("a", utilization=10, cost=100),
            make_license("b", utilization=20, cost=250),
            make_license("c", utilization=90, cost=400),
        ]
        buckets = bucket_histogram(
            licenses,
            value=lambda lic: lic.utilization,
            boundaries=UTILIZATION_BOUNDARIES,
            weight=lambda lic: lic.cost,
        )
        totals = {b.label: b.total for b in buckets}
        assert totals == {"0-25": 350.0, "25-50": 0.0, "50-75": 0.0, "75-101": 400.0}

    def test_unweighted_total_is_none(self):
        buckets = bucket_histogram([1], value=_identity, boundaries=[0, 10])
        assert buckets[0].total is None

    @pytest.mark.parametrize("boundaries", [[], [5], [0, 10, 10], [10, 0]])
    def test_invalid_boundaries(self, boundaries):
        with pytest.raises(ValueError):
            bucket_histogram([1], value=_identity, boundaries=boundaries)

    def test_fractional_labels(self):
        buckets = bucket_histogram([0.3], value=_identity, boundaries=[0, 0.5, 1])
        assert [b.label for b in buckets] == ["0-0.5", "0.5-1"]
