"""
Aggregate summary builder: generic grouping reducer and bucketed histograms.

group_summaries()
-----------------
Partitions records by a key function and reduces each group to a count plus
the sum and mean of each requested numeric field::

    group_summaries(
        clients,
        key=lambda c: c.industry,
        fields={"health_score": lambda c: c.health_score,
                "monthly_revenue": lambda c: c.monthly_revenue},
    )

``None`` field values count as 0 (the mean still divides by the group size).
Groups come back sorted by key, with the ``None`` group last.

bucket_histogram()
------------------
Assigns values to half-open buckets ``[b[i], b[i+1])`` — lower bound
inclusive, upper bound exclusive — so a value equal to a boundary lands in the
bucket *starting* at that boundary. Values outside ``[b[0], b[-1])`` go to a
catch-all bucket, emitted only when something landed in it::

    bucket_histogram([10, 25, 100, 150], value=float, boundaries=[0, 25, 50, 75, 101])
    # "0-25": 1, "25-50": 1, "50-75": 0, "75-101": 1, "Other": 1
"""

from __future__ import annotations

from bisect import bisect_right
from collections import defaultdict
from typing import Callable, Hashable, Iterable, Mapping, Optional, Sequence, TypeVar

from ops_insights.models.analytics import GroupSummary, HistogramBucket

T = TypeVar("T")

DEFAULT_BUCKET_LABEL = "Other"

HEALTH_SCORE_BOUNDARIES: tuple[float, ...] = (0, 60, 80, 90, 101)
UTILIZATION_BOUNDARIES: tuple[float, ...] = (0, 25, 50, 75, 101)


def group_records(
    records: Iterable[T],
    key: Callable[[T], Optional[Hashable]],
) -> dict[Optional[Hashable], list[T]]:
    """Partition records by ``key``, preserving snapshot order inside groups."""
    groups: dict[Optional[Hashable], list[T]] = defaultdict(list)
    for rec in records:
        groups[key(rec)].append(rec)
    return dict(groups)


def group_summaries(
    records: Iterable[T],
    key: Callable[[T], Optional[Hashable]],
    fields: Mapping[str, Callable[[T], Optional[float]]] | None = None,
) -> list[GroupSummary]:
    """Reduce each group to count, per-field sum, and per-field mean.

    Args:
        records: Records to group.
        key:     Key extraction function; may return ``None``.
        fields:  Output field name → numeric extractor. Omit for counts only.

    Returns:
        One ``GroupSummary`` per distinct key, sorted by key (``None`` last).
        Empty input → empty list.
    """
    fields = fields or {}
    summaries: list[GroupSummary] = []

    for group_key, members in group_records(records, key).items():
        n = len(members)
        sums = {
            name: sum((extract(m) or 0.0) for m in members)
            for name, extract in fields.items()
        }
        means = {name: total / n for name, total in sums.items()}
        summaries.append(
            GroupSummary(
                key=None if group_key is None else str(group_key),
                count=n,
                sums=sums,
                means=means,
            )
        )

    summaries.sort(key=lambda s: (s.key is None, s.key or ""))
    return summaries


def bucket_histogram(
    records: Iterable[T],
    value: Callable[[T], Optional[float]],
    boundaries: Sequence[float],
    weight: Callable[[T], Optional[float]] | None = None,
    default_label: str = DEFAULT_BUCKET_LABEL,
) -> list[HistogramBucket]:
    """Count records into half-open buckets defined by ``boundaries``.

    Args:
        records:       Records to bucket.
        value:         Extracts the bucketed value; ``None`` goes to the
                       catch-all bucket.
        boundaries:    Strictly increasing bucket edges, at least two.
        weight:        Optional extractor summed per bucket into ``total``
                       (e.g. license cost). ``None`` weights count as 0.
        default_label: Label of the catch-all bucket.

    Returns:
        One bucket per ``[b[i], b[i+1])`` interval in boundary order (empty
        buckets included), followed by the catch-all bucket if non-empty.

    Raises:
        ValueError: If ``boundaries`` has fewer than two entries or is not
            strictly increasing.
    """
    edges = [float(b) for b in boundaries]
    if len(edges) < 2:
        raise ValueError("bucket_histogram needs at least two boundaries.")
    if any(lo >= hi for lo, hi in zip(edges, edges[1:])):
        raise ValueError(f"Boundaries must be strictly increasing, got {list(boundaries)}.")

    n_buckets = len(edges) - 1
    counts = [0] * n_buckets
    totals = [0.0] * n_buckets
    other_count = 0
    other_total = 0.0

    for rec in records:
        v = value(rec)
        w = (weight(rec) or 0.0) if weight is not None else 0.0
        idx = _bucket_index(v, edges)
        if idx is None:
            other_count += 1
            other_total += w
        else:
            counts[idx] += 1
            totals[idx] += w

    buckets = [
        HistogramBucket(
            label=f"{_fmt_edge(edges[i])}-{_fmt_edge(edges[i + 1])}",
            lower=edges[i],
            upper=edges[i + 1],
            count=counts[i],
            total=totals[i] if weight is not None else None,
        )
        for i in range(n_buckets)
    ]
    if other_count:
        buckets.append(
            HistogramBucket(
                label=default_label,
                count=other_count,
                total=other_total if weight is not None else None,
            )
        )
    return buckets


# ── Helpers ───────────────────────────────────────────────────────────────────

def _bucket_index(v: Optional[float], edges: list[float]) -> Optional[int]:
    """Index of the bucket holding ``v``, or ``None`` for out-of-range values."""
    if v is None or v < edges[0] or v >= edges[-1]:
        return None
    # bisect_right puts a value equal to an edge after it → bucket starting there
    return bisect_right(edges, v) - 1


def _fmt_edge(edge: float) -> str:
    return str(int(edge)) if edge.is_integer() else f"{edge:g}"
