"""Aggregation configuration model."""

from pydantic import BaseModel, Field

from h_eval.metrics.domain.policy import AggregationPolicy


class AggregationConfig(BaseModel, frozen=True):
    """How snapshots are computed and cached.

    policy has no default: whether re-submissions supersede earlier records is a
    deployment decision, not something to guess.
    """

    policy: AggregationPolicy
    max_staleness_seconds: float = Field(ge=0)
    metadata_timeout_seconds: float = Field(gt=0)
