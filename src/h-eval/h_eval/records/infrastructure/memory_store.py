"""InMemoryRecordStore — thread-safe, append-only RecordStore implementation."""

import bisect
import threading
import uuid
from collections.abc import Callable, Iterator
from datetime import datetime

from h_eval.catalog.domain.catalog import ResponseCatalog
from h_eval.records.domain.cursor import ExportCursor
from h_eval.records.domain.observer import RecordObserver
from h_eval.records.domain.record import (
    EvaluationRecord,
    RecordId,
    RecordIdentity,
    StoredRecord,
)
from h_eval.records.infrastructure.errors import (
    RecordConflictError,
    RecordValidationError,
)


class InMemoryRecordStore:
    """Keeps every submitted record in memory, indexed by prompt and by export order.

    Appenders hold the lock only long enough to index one already-built record,
    so a reader never observes a partially written record. Reads copy the
    relevant index under the lock and return that copy.

    Satisfies the RecordStore protocol structurally.
    """

    def __init__(
        self,
        catalog: ResponseCatalog,
        observer: RecordObserver,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self._catalog = catalog
        self._observer = observer
        self._id_factory = id_factory or (lambda: str(uuid.uuid4()))
        self._lock = threading.Lock()
        self._by_prompt: dict[str, list[StoredRecord]] = {}
        self._ordered: list[StoredRecord] = []
        self._keys: list[tuple[datetime, str]] = []
        self._identities: set[RecordIdentity] = set()
        self._versions: dict[str, int] = {}

    def submit(self, record: EvaluationRecord) -> RecordId:
        """
        Validate references against the catalog, then persist the record.

        Raises:
            RecordValidationError: if the prompt is unknown or a response id does
                not resolve to a response of this prompt.
            RecordConflictError: if the record's identity was already stored.
        """
        try:
            self._check_references(record=record)
        except RecordValidationError as exc:
            self._observer.record_rejected(
                prompt_id=record.prompt_id, field=exc.field, reason=exc.reason
            )
            raise

        stored = StoredRecord(record_id=self._id_factory(), record=record)
        with self._lock:
            if record.identity in self._identities:
                submitted_at = record.submitted_at.isoformat()
                self._observer.record_conflicted(
                    prompt_id=record.prompt_id,
                    evaluator_id=record.evaluator_id,
                    submitted_at=submitted_at,
                )
                raise RecordConflictError(
                    prompt_id=record.prompt_id,
                    evaluator_id=record.evaluator_id,
                    submitted_at=submitted_at,
                )
            self._persist(stored=stored)
            version = self._index(stored=stored)

        self._observer.record_submitted(
            record_id=stored.record_id,
            prompt_id=record.prompt_id,
            evaluator_id=record.evaluator_id,
            version=version,
        )
        return stored.record_id

    def query_by_prompt(self, prompt_id: str) -> list[StoredRecord]:
        with self._lock:
            return list(self._by_prompt.get(prompt_id, []))

    def query_by_model(self, model_name: str) -> list[StoredRecord]:
        """Return records that reference at least one response produced by model_name."""
        refs = self._catalog.responses_for_model(model_name)
        response_ids = {r.response_id for r in refs}
        prompt_ids = sorted({r.prompt_id for r in refs})

        with self._lock:
            candidates = [
                stored
                for prompt_id in prompt_ids
                for stored in self._by_prompt.get(prompt_id, [])
            ]
        return [
            stored
            for stored in candidates
            if any(rid in response_ids for rid in stored.record.response_ids)
        ]

    def version(self, prompt_id: str) -> int:
        with self._lock:
            return self._versions.get(prompt_id, 0)

    def iter_records(
        self, after: ExportCursor | None = None, batch_size: int = 100
    ) -> Iterator[StoredRecord]:
        """Lazily yield records in (submitted_at, record_id) order, one page at a time.

        Each page is located by bisecting on the last key yielded, so records
        appended behind the read position are not replayed and nothing beyond
        one page is copied at a time.
        """
        with self._lock:
            start = self._start_index(after=after)
            batch = self._ordered[start : start + batch_size]

        while batch:
            yield from batch
            last_key = batch[-1].sort_key
            with self._lock:
                start = bisect.bisect_right(self._keys, last_key)
                batch = self._ordered[start : start + batch_size]

    def _start_index(self, after: ExportCursor | None) -> int:
        if after is None:
            return 0
        key = after.key
        if key is not None:
            return bisect.bisect_right(self._keys, key)
        return bisect.bisect_right(self._keys, after.submitted_at, key=lambda k: k[0])

    def _check_references(self, record: EvaluationRecord) -> None:
        if not self._catalog.prompt_exists(record.prompt_id):
            raise RecordValidationError(
                field="prompt_id", reason=f"unknown prompt '{record.prompt_id}'"
            )
        for index, response_id in enumerate(record.response_ids):
            ref = self._catalog.get_response(response_id)
            if ref is None:
                raise RecordValidationError(
                    field=f"response_scores.{index}.response_id",
                    reason=f"unknown response '{response_id}'",
                )
            if ref.prompt_id != record.prompt_id:
                raise RecordValidationError(
                    field=f"response_scores.{index}.response_id",
                    reason=(
                        f"response '{response_id}' belongs to prompt "
                        f"'{ref.prompt_id}', not '{record.prompt_id}'"
                    ),
                )

    def _persist(self, stored: StoredRecord) -> None:
        """Durability hook, called under the lock before the record becomes visible."""

    def _index(self, stored: StoredRecord) -> int:
        """Make stored visible to readers. Must be called with the lock held."""
        record = stored.record
        self._by_prompt.setdefault(record.prompt_id, []).append(stored)
        position = bisect.bisect_right(self._keys, stored.sort_key)
        self._keys.insert(position, stored.sort_key)
        self._ordered.insert(position, stored)
        self._identities.add(record.identity)
        self._versions[record.prompt_id] = self._versions.get(record.prompt_id, 0) + 1
        return self._versions[record.prompt_id]
