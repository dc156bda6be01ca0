"""MetricSnapshot — point-in-time aggregate metrics for one model or one prompt."""

from datetime import datetime
from typing import Any, Literal

from pydantic import AwareDatetime, BaseModel, Field

from h_eval.metrics.domain.policy import AggregationPolicy
from h_eval.metrics.domain.value import MetricValue
from h_eval.records.domain.score import Criterion


class SnapshotScope(BaseModel, frozen=True):
    kind: Literal["model", "prompt"]
    key: str = Field(min_length=1)


class CriterionStats(BaseModel, frozen=True):
    """Mean and sample standard deviation of one criterion's scores."""

    mean: MetricValue
    stddev: MetricValue
    count: int = Field(ge=0)


class MetricSnapshot(BaseModel, frozen=True):
    """Immutable aggregation result. Not a source of truth; safe to cache and discard.

    Every derived field is a MetricValue: "not enough data" is carried as
    an explicit Undefined rather than a numeric default.
    """

    scope: SnapshotScope
    policy: AggregationPolicy
    win_rate: MetricValue
    model_win_rates: dict[str, MetricValue]
    mean_scores: dict[Criterion, CriterionStats]
    inter_rater_agreement: MetricValue
    mean_latency_ms: MetricValue
    mean_response_length: MetricValue
    sample_size: int = Field(ge=0)
    record_set_version: int = Field(ge=0)
    as_of: AwareDatetime | None = None
    computed_at: datetime

    def metric_fields(self) -> dict[str, Any]:
        """Everything except computed_at — equal for equal record sets."""
        return self.model_dump(exclude={"computed_at"})
