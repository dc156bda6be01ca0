"""ExportFilter — which records a dataset export includes."""

from pydantic import AwareDatetime, BaseModel, Field, model_validator

from h_eval.records.domain.record import EvaluationRecord


class ExportFilter(BaseModel, frozen=True):
    """Optional constraints, combined with AND.

    The date range is half-open: submitted_from <= submitted_at < submitted_to.
    """

    prompt_id: str | None = Field(default=None, min_length=1)
    model_name: str | None = Field(default=None, min_length=1)
    submitted_from: AwareDatetime | None = None
    submitted_to: AwareDatetime | None = None

    @model_validator(mode="after")
    def _ordered_range(self) -> "ExportFilter":
        if (
            self.submitted_from is not None
            and self.submitted_to is not None
            and self.submitted_from >= self.submitted_to
        ):
            raise ValueError("submitted_from must be earlier than submitted_to")
        return self

    def matches(
        self, record: EvaluationRecord, model_response_ids: set[str] | None
    ) -> bool:
        """model_response_ids is the resolved response set of model_name, if any."""
        if self.prompt_id is not None and record.prompt_id != self.prompt_id:
            return False
        if self.submitted_from is not None and record.submitted_at < self.submitted_from:
            return False
        if self.submitted_to is not None and record.submitted_at >= self.submitted_to:
            return False
        if model_response_ids is not None and not any(
            rid in model_response_ids for rid in record.response_ids
        ):
            return False
        return True
