"""Observer port for the export domain — defines events in domain language."""

from typing import Protocol


class ExportObserver(Protocol):
    def export_started(self, path: str, resumed: bool) -> None: ...

    def export_prompt_skipped(self, prompt_id: str, reason: str) -> None: ...

    def export_completed(self, path: str, total_records: int) -> None: ...
