"""ResponseScore — one evaluator's 1-5 ratings of a single response."""

from enum import StrEnum

from pydantic import BaseModel, Field

SCORE_MIN = 1
SCORE_MAX = 5


class Criterion(StrEnum):
    CORRECTNESS = "correctness"
    CLARITY = "clarity"
    RELEVANCE = "relevance"
    HALLUCINATION_RISK = "hallucination_risk"


class ResponseScore(BaseModel, frozen=True):
    """Immutable per-response scores, each on the fixed 1-5 scale."""

    response_id: str = Field(min_length=1)
    correctness: int = Field(ge=SCORE_MIN, le=SCORE_MAX, strict=True)
    clarity: int = Field(ge=SCORE_MIN, le=SCORE_MAX, strict=True)
    relevance: int = Field(ge=SCORE_MIN, le=SCORE_MAX, strict=True)
    hallucination_risk: int = Field(ge=SCORE_MIN, le=SCORE_MAX, strict=True)
    comment: str | None = None

    def score_for(self, criterion: Criterion) -> int:
        return int(getattr(self, criterion.value))
