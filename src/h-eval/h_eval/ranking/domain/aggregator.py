"""Ranking aggregation — pairwise win/loss tallies derived from ranked orders."""

from collections.abc import Callable, Iterable
from dataclasses import dataclass

from h_eval.metrics.domain.value import Defined, Undefined
from h_eval.records.domain.record import EvaluationRecord

type ModelName = str
type ModelOf = Callable[[str], ModelName]  # response_id -> model name

NO_COMPARISONS = "no pairwise comparisons against another model"


@dataclass(frozen=True)
class WinLossTally:
    """Pairwise outcomes for one model across every ranking it appeared in."""

    wins: int = 0
    losses: int = 0

    @property
    def participations(self) -> int:
        return self.wins + self.losses

    def win_rate(self) -> Defined | Undefined:
        """wins / (wins + losses); Undefined when the model was never compared."""
        if self.participations == 0:
            return Undefined(reason=NO_COMPARISONS)
        return Defined(value=self.wins / self.participations)


def tally_pairwise(
    records: Iterable[EvaluationRecord], model_of: ModelOf
) -> dict[ModelName, WinLossTally]:
    """
    Expand each ranked_order into pairwise preferences and tally them per model.

    Every position in a ranking is strict: for each i < j the model of the i-th
    response beats the model of the j-th. Pairs of responses from the same model
    are skipped, and a ranking with a single response contributes nothing. Every
    model that appears in a ranking gets a tally, even if it is all zeros.
    """
    wins: dict[ModelName, int] = {}
    losses: dict[ModelName, int] = {}

    for record in records:
        models = [model_of(response_id) for response_id in record.ranked_order]
        for model in models:
            wins.setdefault(model, 0)
            losses.setdefault(model, 0)
        for i, winner in enumerate(models):
            for loser in models[i + 1 :]:
                if winner == loser:
                    continue
                wins[winner] += 1
                losses[loser] += 1

    return {
        model: WinLossTally(wins=wins[model], losses=losses[model])
        for model in sorted(wins)
    }


def win_rates(
    records: Iterable[EvaluationRecord], model_of: ModelOf
) -> dict[ModelName, Defined | Undefined]:
    """Return each ranked model's win rate, Undefined for models never compared."""
    tallies = tally_pairwise(records=records, model_of=model_of)
    return {model: tally.win_rate() for model, tally in tallies.items()}
