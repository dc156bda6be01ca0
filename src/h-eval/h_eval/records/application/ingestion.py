"""EvaluationIngestor — turns raw evaluation payloads into stored records."""

from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from pydantic import ValidationError

from h_eval.records.domain.observer import RecordObserver
from h_eval.records.domain.record import EvaluationRecord, RecordId
from h_eval.records.domain.store import RecordStore
from h_eval.records.infrastructure.errors import RecordValidationError


class EvaluationIngestor:
    """Ingestion interface: accepts one evaluation payload, returns its record id.

    submitted_at is always stamped here from the clock; a client-supplied value
    is rejected.
    """

    def __init__(
        self,
        store: RecordStore,
        observer: RecordObserver,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = store
        self._observer = observer
        self._clock = clock or (lambda: datetime.now(UTC))

    def ingest(self, payload: dict[str, Any]) -> RecordId:
        """
        Validate payload, stamp it and submit it to the store.

        Raises:
            RecordValidationError: naming the first offending field.
            RecordConflictError: if the identity already exists in the store.
        """
        record = self.parse(payload=payload)
        return self._store.submit(record)

    def parse(self, payload: dict[str, Any]) -> EvaluationRecord:
        prompt_id = str(payload.get("prompt_id", ""))
        if "submitted_at" in payload:
            reason = "set by the server at submission time"
            self._observer.record_rejected(
                prompt_id=prompt_id, field="submitted_at", reason=reason
            )
            raise RecordValidationError(field="submitted_at", reason=reason)

        try:
            return EvaluationRecord.model_validate(
                {**payload, "submitted_at": self._clock()}
            )
        except ValidationError as exc:
            first = exc.errors()[0]
            field = ".".join(str(part) for part in first["loc"]) or "record"
            self._observer.record_rejected(
                prompt_id=prompt_id, field=field, reason=first["msg"]
            )
            raise RecordValidationError(field=field, reason=first["msg"]) from exc
