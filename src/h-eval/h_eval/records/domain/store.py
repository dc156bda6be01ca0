"""RecordStore Protocol — append-only store of evaluator judgments."""

from collections.abc import Iterator
from typing import Protocol

from h_eval.records.domain.cursor import ExportCursor
from h_eval.records.domain.record import EvaluationRecord, RecordId, StoredRecord


class RecordStore(Protocol):
    """Durable, append-only collection of EvaluationRecords.

    Records become visible atomically and are never mutated. Reads return the
    records visible when the read started.
    """

    def submit(self, record: EvaluationRecord) -> RecordId: ...

    def query_by_prompt(self, prompt_id: str) -> list[StoredRecord]: ...

    def query_by_model(self, model_name: str) -> list[StoredRecord]: ...

    def version(self, prompt_id: str) -> int: ...

    def iter_records(
        self, after: ExportCursor | None = None, batch_size: int = 100
    ) -> Iterator[StoredRecord]: ...
