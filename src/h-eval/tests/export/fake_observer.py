"""Fake ExportObserver for use in tests — records events without mocking."""


class FakeExportObserver:
    def __init__(self) -> None:
        self.started: list[dict[str, object]] = []
        self.skipped: list[dict[str, str]] = []
        self.completed: list[dict[str, object]] = []

    def export_started(self, path: str, resumed: bool) -> None:
        self.started.append({"path": path, "resumed": resumed})

    def export_prompt_skipped(self, prompt_id: str, reason: str) -> None:
        self.skipped.append({"prompt_id": prompt_id, "reason": reason})

    def export_completed(self, path: str, total_records: int) -> None:
        self.completed.append({"path": path, "total_records": total_records})
