"""Tests for config domain models."""

import pytest
from pydantic import ValidationError

from h_eval.config.domain.aggregation import AggregationConfig
from h_eval.config.domain.export import ExportConfig
from h_eval.metrics.domain.policy import AggregationPolicy


class TestAggregationConfig:
    def test_policy_is_required(self) -> None:
        with pytest.raises(ValidationError):
            AggregationConfig.model_validate(
                {"max_staleness_seconds": 5, "metadata_timeout_seconds": 1}
            )

    def test_policy_parses_from_string(self) -> None:
        cfg = AggregationConfig.model_validate(
            {
                "policy": "all_records",
                "max_staleness_seconds": 0,
                "metadata_timeout_seconds": 1,
            }
        )

        assert cfg.policy is AggregationPolicy.ALL_RECORDS

    def test_negative_staleness_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            AggregationConfig(
                policy=AggregationPolicy.ALL_RECORDS,
                max_staleness_seconds=-1,
                metadata_timeout_seconds=1,
            )

    def test_zero_metadata_timeout_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            AggregationConfig(
                policy=AggregationPolicy.ALL_RECORDS,
                max_staleness_seconds=0,
                metadata_timeout_seconds=0,
            )


class TestExportConfig:
    def test_defaults(self) -> None:
        cfg = ExportConfig()

        assert cfg.batch_size == 100
        assert cfg.require_rater_overlap is False

    def test_batch_size_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            ExportConfig(batch_size=0)
