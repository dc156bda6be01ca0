"""EvaluationRecord — one evaluator's judgment of the responses to one prompt."""

from datetime import datetime

from pydantic import (
    AwareDatetime,
    BaseModel,
    Field,
    ValidationInfo,
    field_validator,
)

from h_eval.records.domain.score import ResponseScore

type RecordId = str
type RecordIdentity = tuple[str, str, datetime]  # (prompt_id, evaluator_id, submitted_at)


class EvaluationRecord(BaseModel, frozen=True):
    """Immutable evaluator judgment.

    Corrections are new records with a later submitted_at; nothing is edited in
    place. ranked_order is a strict best-first order over exactly the responses
    scored in response_scores.
    """

    prompt_id: str = Field(min_length=1)
    evaluator_id: str = Field(min_length=1)
    response_scores: list[ResponseScore] = Field(min_length=1)
    ranked_order: list[str] = Field(min_length=1)
    rationale: str | None = None
    submitted_at: AwareDatetime

    @field_validator("prompt_id", "evaluator_id")
    @classmethod
    def _reject_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value

    @field_validator("response_scores")
    @classmethod
    def _unique_scored_ids(cls, value: list[ResponseScore]) -> list[ResponseScore]:
        duplicates = _duplicates([s.response_id for s in value])
        if duplicates:
            raise ValueError(f"duplicate response ids: {', '.join(duplicates)}")
        return value

    @field_validator("ranked_order")
    @classmethod
    def _same_response_set(cls, value: list[str], info: ValidationInfo) -> list[str]:
        duplicates = _duplicates(value)
        if duplicates:
            raise ValueError(f"duplicate response ids: {', '.join(duplicates)}")

        scores: list[ResponseScore] | None = info.data.get("response_scores")
        if scores is None:
            # response_scores failed its own validation; that error is reported.
            return value

        scored_ids = {s.response_id for s in scores}
        unscored = [rid for rid in value if rid not in scored_ids]
        if unscored:
            raise ValueError(
                f"response ids not in response_scores: {', '.join(unscored)}"
            )
        ranked_ids = set(value)
        unranked = [s.response_id for s in scores if s.response_id not in ranked_ids]
        if unranked:
            raise ValueError(f"missing scored response ids: {', '.join(unranked)}")
        return value

    @property
    def identity(self) -> RecordIdentity:
        return (self.prompt_id, self.evaluator_id, self.submitted_at)

    @property
    def response_ids(self) -> list[str]:
        return [s.response_id for s in self.response_scores]


class StoredRecord(BaseModel, frozen=True):
    """An EvaluationRecord together with the id assigned by the store."""

    record_id: RecordId = Field(min_length=1)
    record: EvaluationRecord

    @property
    def sort_key(self) -> tuple[datetime, str]:
        """Export order: submitted_at ascending, record_id as tie-break."""
        return (self.record.submitted_at, self.record_id)


def _duplicates(ids: list[str]) -> list[str]:
    seen: set[str] = set()
    dupes: list[str] = []
    for rid in ids:
        if rid in seen and rid not in dupes:
            dupes.append(rid)
        seen.add(rid)
    return dupes
