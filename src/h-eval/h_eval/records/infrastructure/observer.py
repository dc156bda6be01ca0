"""Structlog implementation of the RecordObserver port."""

import structlog


class StructlogRecordObserver:
    """Delegates records domain events to structlog.

    Satisfies the RecordObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def record_submitted(
        self, record_id: str, prompt_id: str, evaluator_id: str, version: int
    ) -> None:
        self._log.info(
            "records.submitted",
            record_id=record_id,
            prompt_id=prompt_id,
            evaluator_id=evaluator_id,
            version=version,
        )

    def record_rejected(self, prompt_id: str, field: str, reason: str) -> None:
        self._log.warning(
            "records.rejected", prompt_id=prompt_id, field=field, reason=reason
        )

    def record_conflicted(
        self, prompt_id: str, evaluator_id: str, submitted_at: str
    ) -> None:
        self._log.warning(
            "records.conflicted",
            prompt_id=prompt_id,
            evaluator_id=evaluator_id,
            submitted_at=submitted_at,
        )

    def store_replayed(self, path: str, total_records: int) -> None:
        self._log.info("records.store_replayed", path=path, total_records=total_records)

    def store_tail_truncated(self, path: str, dropped_bytes: int) -> None:
        self._log.warning(
            "records.store_tail_truncated", path=path, dropped_bytes=dropped_bytes
        )
