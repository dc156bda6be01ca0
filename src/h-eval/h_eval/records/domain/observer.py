"""Observer port for the records domain — defines events in domain language."""

from typing import Protocol


class RecordObserver(Protocol):
    """Observer port emitting structured events for record ingestion and storage.

    Implementations may log to structlog or record for tests.
    """

    def record_submitted(
        self, record_id: str, prompt_id: str, evaluator_id: str, version: int
    ) -> None: ...

    def record_rejected(self, prompt_id: str, field: str, reason: str) -> None: ...

    def record_conflicted(
        self, prompt_id: str, evaluator_id: str, submitted_at: str
    ) -> None: ...

    def store_replayed(self, path: str, total_records: int) -> None: ...

    def store_tail_truncated(self, path: str, dropped_bytes: int) -> None: ...
