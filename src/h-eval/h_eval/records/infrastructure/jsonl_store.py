"""JsonlRecordStore — InMemoryRecordStore that appends every record to a JSONL file."""

import json
from collections.abc import Callable
from pathlib import Path

from pydantic import ValidationError

from h_eval.catalog.domain.catalog import ResponseCatalog
from h_eval.core.jsonl import drop_partial_tail
from h_eval.records.domain.observer import RecordObserver
from h_eval.records.domain.record import StoredRecord
from h_eval.records.infrastructure.errors import RecordStoreLoadError
from h_eval.records.infrastructure.memory_store import InMemoryRecordStore


class JsonlRecordStore(InMemoryRecordStore):
    """Durable record store backed by an append-only JSONL file.

    On construction the file (if present) is replayed into the in-memory index.
    Each submit writes and flushes one line before the record becomes visible,
    so a crash can lose at most the record being submitted, never expose half of
    one. Replayed records are trusted: they passed validation when first stored.
    """

    def __init__(
        self,
        path: Path,
        catalog: ResponseCatalog,
        observer: RecordObserver,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        super().__init__(catalog=catalog, observer=observer, id_factory=id_factory)
        self._path = path
        replayed = self._replay()
        with self._lock:
            for stored in replayed:
                self._index(stored=stored)
        self._observer.store_replayed(path=str(path), total_records=len(replayed))

    def _persist(self, stored: StoredRecord) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with open(self._path, "a", encoding="utf-8") as fh:
            fh.write(stored.model_dump_json() + "\n")
            fh.flush()

    def _replay(self) -> list[StoredRecord]:
        """
        Read every persisted record, collecting ALL bad lines before raising.

        A final line without its newline is the remains of an interrupted
        append; it is truncated away before reading.

        Raises:
            RecordStoreLoadError: if any complete line is not a valid StoredRecord.
        """
        if not self._path.exists():
            return []

        dropped = drop_partial_tail(path=self._path)
        if dropped:
            self._observer.store_tail_truncated(
                path=str(self._path), dropped_bytes=dropped
            )

        with open(self._path, encoding="utf-8") as fh:
            lines = [line for line in fh if line.strip()]

        records: list[StoredRecord] = []
        errors: list[str] = []
        for index, line in enumerate(lines):
            try:
                records.append(StoredRecord.model_validate(json.loads(line)))
            except json.JSONDecodeError as exc:
                errors.append(f"line {index}: invalid JSON: {exc}")
            except ValidationError as exc:
                errors.append(f"line {index}: invalid record: {exc.error_count()} error(s)")

        if errors:
            raise RecordStoreLoadError(reason="; ".join(errors))
        return records
