"""ExportCursor — a restart point in submitted_at order."""

from datetime import datetime

from pydantic import AwareDatetime, BaseModel, Field


class ExportCursor(BaseModel, frozen=True):
    """Position after which iteration resumes.

    With a record_id the cursor is exact: iteration resumes at the first record
    whose (submitted_at, record_id) sorts after it. Without one, every record
    submitted at exactly submitted_at is treated as already consumed.
    """

    submitted_at: AwareDatetime
    record_id: str | None = Field(default=None, min_length=1)

    @property
    def key(self) -> tuple[datetime, str] | None:
        if self.record_id is None:
            return None
        return (self.submitted_at, self.record_id)
