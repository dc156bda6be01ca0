"""Inter-rater agreement — consensus among evaluators scoring the same response.

Per criterion, agreement is ``1 - s / s_max(n)`` where ``s`` is the sample
standard deviation of the n evaluators' ratings and ``s_max(n)`` is the largest
sample standard deviation n ratings can reach on the fixed 1-5 scale (as close
to half at 1 and half at 5 as n allows). Identical ratings give exactly 1.0 and
a maximal split gives exactly 0.0. The ratio is formed on exact variances with
Fractions and only the final square root is done in floating point, so equal
inputs always produce bit-identical results.
"""

import math
import statistics
from collections.abc import Iterable
from dataclasses import dataclass
from fractions import Fraction

from h_eval.metrics.domain.value import Defined, Undefined
from h_eval.records.domain.record import StoredRecord
from h_eval.records.domain.score import SCORE_MAX, SCORE_MIN, Criterion, ResponseScore

SCALE_WIDTH = SCORE_MAX - SCORE_MIN

SINGLE_EVALUATOR = "fewer than 2 evaluators scored this response"
NO_OVERLAP = "fewer than 2 evaluators scored any response"


@dataclass(frozen=True)
class ResponseAgreement:
    """Agreement for one response: per criterion and overall."""

    response_id: str
    evaluator_count: int
    per_criterion: dict[Criterion, Defined | Undefined]
    overall: Defined | Undefined


def criterion_agreement(ratings: list[int]) -> Defined | Undefined:
    """Agreement for one criterion given one rating per evaluator."""
    n = len(ratings)
    if n < 2:
        return Undefined(reason=SINGLE_EVALUATOR)

    variance = statistics.variance([Fraction(r) for r in ratings])
    ratio = math.sqrt(variance / _max_variance(n))
    return Defined(value=min(1.0, max(0.0, 1.0 - ratio)))


def response_agreement(
    response_id: str, scores_by_evaluator: dict[str, ResponseScore]
) -> ResponseAgreement:
    """Agreement for one response; overall is the mean across the four criteria."""
    evaluators = sorted(scores_by_evaluator)
    per_criterion: dict[Criterion, Defined | Undefined] = {}
    for criterion in Criterion:
        ratings = [scores_by_evaluator[e].score_for(criterion) for e in evaluators]
        per_criterion[criterion] = criterion_agreement(ratings=ratings)

    if len(evaluators) < 2:
        overall: Defined | Undefined = Undefined(reason=SINGLE_EVALUATOR)
    else:
        values = [v.value for v in per_criterion.values() if isinstance(v, Defined)]
        overall = Defined(value=sum(values) / len(values))

    return ResponseAgreement(
        response_id=response_id,
        evaluator_count=len(evaluators),
        per_criterion=per_criterion,
        overall=overall,
    )


def group_latest_scores(
    records: Iterable[StoredRecord], response_ids: set[str] | None = None
) -> dict[str, dict[str, ResponseScore]]:
    """
    Group scores as response_id -> evaluator_id -> score.

    When an evaluator scored a response more than once, the record that sorts
    last in (submitted_at, record_id) order wins: agreement compares raters, so
    each rater contributes one rating per response. response_ids, when given,
    restricts the grouping to those responses.
    """
    grouped: dict[str, dict[str, ResponseScore]] = {}
    for stored in sorted(records, key=lambda s: s.sort_key):
        for score in stored.record.response_scores:
            if response_ids is not None and score.response_id not in response_ids:
                continue
            grouped.setdefault(score.response_id, {})[stored.record.evaluator_id] = (
                score
            )
    return grouped


def agreement_by_response(
    records: Iterable[StoredRecord], response_ids: set[str] | None = None
) -> list[ResponseAgreement]:
    grouped = group_latest_scores(records=records, response_ids=response_ids)
    return [
        response_agreement(response_id=rid, scores_by_evaluator=grouped[rid])
        for rid in sorted(grouped)
    ]


def overall_agreement(
    records: Iterable[StoredRecord], response_ids: set[str] | None = None
) -> Defined | Undefined:
    """Mean agreement over responses with at least 2 evaluators, else Undefined."""
    qualifying = [
        a.overall.value
        for a in agreement_by_response(records=records, response_ids=response_ids)
        if isinstance(a.overall, Defined)
    ]
    if not qualifying:
        return Undefined(reason=NO_OVERLAP)
    return Defined(value=sum(qualifying) / len(qualifying))


def _max_variance(n: int) -> Fraction:
    """Largest sample variance of n ratings on the scale: floor(n/2) at each end."""
    low = n // 2
    high = n - low
    return Fraction(SCALE_WIDTH**2 * low * high, n * (n - 1))
