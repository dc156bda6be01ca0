"""Fake RecordObserver for use in tests — records events without mocking."""

from dataclasses import dataclass


@dataclass(frozen=True)
class SubmittedEvent:
    record_id: str
    prompt_id: str
    evaluator_id: str
    version: int


@dataclass(frozen=True)
class RejectedEvent:
    prompt_id: str
    field: str
    reason: str


@dataclass(frozen=True)
class ConflictedEvent:
    prompt_id: str
    evaluator_id: str
    submitted_at: str


@dataclass(frozen=True)
class ReplayedEvent:
    path: str
    total_records: int


@dataclass(frozen=True)
class TailTruncatedEvent:
    path: str
    dropped_bytes: int


class FakeRecordObserver:
    def __init__(self) -> None:
        self.submitted: list[SubmittedEvent] = []
        self.rejected: list[RejectedEvent] = []
        self.conflicted: list[ConflictedEvent] = []
        self.replayed: list[ReplayedEvent] = []
        self.truncated: list[TailTruncatedEvent] = []

    def record_submitted(
        self, record_id: str, prompt_id: str, evaluator_id: str, version: int
    ) -> None:
        self.submitted.append(
            SubmittedEvent(
                record_id=record_id,
                prompt_id=prompt_id,
                evaluator_id=evaluator_id,
                version=version,
            )
        )

    def record_rejected(self, prompt_id: str, field: str, reason: str) -> None:
        self.rejected.append(RejectedEvent(prompt_id=prompt_id, field=field, reason=reason))

    def record_conflicted(
        self, prompt_id: str, evaluator_id: str, submitted_at: str
    ) -> None:
        self.conflicted.append(
            ConflictedEvent(
                prompt_id=prompt_id, evaluator_id=evaluator_id, submitted_at=submitted_at
            )
        )

    def store_replayed(self, path: str, total_records: int) -> None:
        self.replayed.append(ReplayedEvent(path=path, total_records=total_records))

    def store_tail_truncated(self, path: str, dropped_bytes: int) -> None:
        self.truncated.append(TailTruncatedEvent(path=path, dropped_bytes=dropped_bytes))
