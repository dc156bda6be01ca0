"""Tests for select_records under each AggregationPolicy."""

from h_eval.metrics.domain.policy import AggregationPolicy, select_records
from h_eval.records.domain.record import StoredRecord
from tests.records.builders import make_record, make_stored


def _history() -> list[StoredRecord]:
    return [
        make_stored("c", make_record(evaluator_id="e1", ranked_order=["r1"], minutes=9)),
        make_stored("a", make_record(evaluator_id="e1", ranked_order=["r1"], minutes=0)),
        make_stored("b", make_record(evaluator_id="e2", ranked_order=["r1"], minutes=3)),
        make_stored(
            "d", make_record(evaluator_id="e1", ranked_order=["r4"], prompt_id="p2", minutes=1)
        ),
    ]


class TestSelectRecords:
    def test_all_records_keeps_everything_in_time_order(self) -> None:
        selected = select_records(_history(), AggregationPolicy.ALL_RECORDS)

        assert [s.record_id for s in selected] == ["a", "d", "b", "c"]

    def test_latest_keeps_one_record_per_prompt_and_evaluator(self) -> None:
        selected = select_records(_history(), AggregationPolicy.LATEST_PER_EVALUATOR)

        assert [s.record_id for s in selected] == ["d", "b", "c"]

    def test_same_instant_tie_is_broken_by_record_id(self) -> None:
        records = [
            make_stored("z", make_record(evaluator_id="e1", ranked_order=["r1"])),
            make_stored("y", make_record(evaluator_id="e1", ranked_order=["r2"])),
        ]

        selected = select_records(records, AggregationPolicy.LATEST_PER_EVALUATOR)

        assert [s.record_id for s in selected] == ["z"]

    def test_input_order_does_not_matter(self) -> None:
        history = _history()

        forward = select_records(history, AggregationPolicy.LATEST_PER_EVALUATOR)
        backward = select_records(history[::-1], AggregationPolicy.LATEST_PER_EVALUATOR)

        assert forward == backward

    def test_empty_input(self) -> None:
        assert select_records([], AggregationPolicy.ALL_RECORDS) == []
