"""Structlog implementation of the ExportObserver port."""

import structlog


class StructlogExportObserver:
    """Delegates export domain events to structlog.

    Satisfies the ExportObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def export_started(self, path: str, resumed: bool) -> None:
        self._log.info("export.started", path=path, resumed=resumed)

    def export_prompt_skipped(self, prompt_id: str, reason: str) -> None:
        self._log.info("export.prompt_skipped", prompt_id=prompt_id, reason=reason)

    def export_completed(self, path: str, total_records: int) -> None:
        self._log.info("export.completed", path=path, total_records=total_records)
