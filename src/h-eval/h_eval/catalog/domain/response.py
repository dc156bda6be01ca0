"""Response identity and metadata as consumed from the external prompt/response store."""

from pydantic import BaseModel, Field


class ResponseRef(BaseModel, frozen=True):
    """Which prompt a response answers and which model produced it."""

    response_id: str = Field(min_length=1)
    prompt_id: str = Field(min_length=1)
    model_name: str = Field(min_length=1)


class ResponseMetadata(BaseModel, frozen=True):
    """Per-response measurements joined into metric snapshots. None means not recorded."""

    response_id: str = Field(min_length=1)
    latency_ms: float | None = Field(default=None, ge=0)
    length: int | None = Field(default=None, ge=0)
