"""Export configuration model."""

from pydantic import BaseModel, Field


class ExportConfig(BaseModel, frozen=True):
    batch_size: int = Field(default=100, ge=1)
    require_rater_overlap: bool = False
