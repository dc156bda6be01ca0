"""AggregationPolicy — which records qualify when an evaluator re-submits."""

from enum import StrEnum

from h_eval.records.domain.record import StoredRecord


class AggregationPolicy(StrEnum):
    LATEST_PER_EVALUATOR = "latest_per_evaluator"
    ALL_RECORDS = "all_records"


def select_records(
    records: list[StoredRecord], policy: AggregationPolicy
) -> list[StoredRecord]:
    """
    Apply policy and return the qualifying records in (submitted_at, record_id) order.

    LATEST_PER_EVALUATOR keeps, per (prompt, evaluator), only the record that
    sorts last; earlier records are treated as superseded corrections.
    """
    ordered = sorted(records, key=lambda s: s.sort_key)
    if policy is AggregationPolicy.ALL_RECORDS:
        return ordered

    latest: dict[tuple[str, str], StoredRecord] = {}
    for stored in ordered:
        latest[(stored.record.prompt_id, stored.record.evaluator_id)] = stored
    return sorted(latest.values(), key=lambda s: s.sort_key)
