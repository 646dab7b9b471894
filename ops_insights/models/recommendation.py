"""
Recommendation output model.

A ``Recommendation`` is the normalized form every generator converts its
findings into, so recommendations from unrelated analyzers (client health,
license waste, department efficiency) can be merged into one ordered list.

Sign convention for ``estimated_value``:
  - positive → revenue at stake or an upsell opportunity
  - negative → spend that could be cut

Recommendations are frozen and carry no identity across calls; they are
rebuilt from the current record snapshot on every invocation.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from ops_insights.taxonomy.recommendation_taxonomy import (
    PRIORITY_RANK,
    Impact,
    Priority,
    RecommendationType,
)


class Recommendation(BaseModel):
    """An actionable, prioritized finding with an estimated financial effect.

    Attributes:
        type: Which kind of finding produced this recommendation.
        priority: Action urgency (HIGH, MEDIUM, LOW).
        title: Short headline naming the affected entity.
        description: One-sentence explanation with the triggering figures.
        suggested_action: What the operator should do about it.
        impact: Expected business effect (High, Medium, Low).
        estimated_value: Signed currency estimate (see module docstring).
        source_entity_id: Client id, license id or department name the
            recommendation is about, or ``None``.
    """

    model_config = ConfigDict(frozen=True)

    type: RecommendationType
    priority: Priority
    title: str
    description: str
    suggested_action: str
    impact: Impact
    estimated_value: float = 0.0
    source_entity_id: Optional[str] = None

    @field_validator("title", "suggested_action")
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("title and suggested_action must not be empty.")
        return v.strip()

    @property
    def priority_rank(self) -> int:
        """Ordinal weight of ``priority`` (HIGH=3, MEDIUM=2, LOW=1)."""
        return PRIORITY_RANK[self.priority]
