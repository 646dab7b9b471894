"""
Recommendation ranker: merges sub-generator output into one ordered list.

Usage flow
----------
1. sort_recommendations(recs)
   -> list[Recommendation]  (priority rank desc, then |estimated_value| desc)

2. deduplicate(sorted_recs)
   -> list[Recommendation]  (first occurrence per (type, source_entity_id))

``rank_recommendations`` runs both steps. The sort is stable, so on an exact
tie the order the sub-generators emitted is preserved; dedup runs after the
sort so the surviving copy is always the highest-ranked one.
"""

from __future__ import annotations

from typing import Iterable, Optional

from ops_insights.models.recommendation import Recommendation
from ops_insights.taxonomy.recommendation_taxonomy import RecommendationType


def sort_recommendations(recs: Iterable[Recommendation]) -> list[Recommendation]:
    return sorted(recs, key=lambda r: (-r.priority_rank, -abs(r.estimated_value)))


def deduplicate(recs: Iterable[Recommendation]) -> list[Recommendation]:
    """Drop repeats of the same (type, source entity), keeping the first.

    Recommendations without a source entity are never considered duplicates.
    """
    seen: set[tuple[RecommendationType, Optional[str]]] = set()
    unique: list[Recommendation] = []
    for rec in recs:
        if rec.source_entity_id is not None:
            key = (rec.type, rec.source_entity_id)
            if key in seen:
                continue
            seen.add(key)
        unique.append(rec)
    return unique


def rank_recommendations(recs: Iterable[Recommendation]) -> list[Recommendation]:
    return deduplicate(sort_recommendations(recs))
