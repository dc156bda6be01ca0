"""Tests for InMemoryRecordStore — validation, identity, versions, paging, concurrency."""

import itertools
import threading

import pytest

from h_eval.records.domain.cursor import ExportCursor
from h_eval.records.infrastructure.errors import (
    RecordConflictError,
    RecordValidationError,
)
from h_eval.records.infrastructure.memory_store import InMemoryRecordStore
from tests.records.builders import at, make_catalog, make_record
from tests.records.fake_observer import FakeRecordObserver


def _make_store(observer: FakeRecordObserver | None = None) -> InMemoryRecordStore:
    counter = itertools.count(1)
    return InMemoryRecordStore(
        catalog=make_catalog(extra_prompts=["p-empty"]),
        observer=observer or FakeRecordObserver(),
        id_factory=lambda: f"rec-{next(counter):04d}",
    )


class TestSubmit:
    """submit() validates references, assigns an id and makes the record visible."""

    def test_returns_assigned_record_id(self) -> None:
        store = _make_store()

        record_id = store.submit(make_record(evaluator_id="e1", ranked_order=["r1", "r2"]))

        assert record_id == "rec-0001"

    def test_submitted_record_is_visible_by_prompt(self) -> None:
        store = _make_store()
        record = make_record(evaluator_id="e1", ranked_order=["r1", "r2"])

        store.submit(record)

        stored = store.query_by_prompt("p1")
        assert [s.record for s in stored] == [record]

    def test_emits_submitted_event_with_version(self) -> None:
        observer = FakeRecordObserver()
        store = _make_store(observer=observer)

        store.submit(make_record(evaluator_id="e1", ranked_order=["r1"]))
        store.submit(make_record(evaluator_id="e2", ranked_order=["r1"]))

        assert [e.version for e in observer.submitted] == [1, 2]

    def test_unknown_prompt_raises_naming_prompt_id(self) -> None:
        store = _make_store()

        with pytest.raises(RecordValidationError) as exc_info:
            store.submit(
                make_record(evaluator_id="e1", ranked_order=["r1"], prompt_id="nope")
            )

        assert exc_info.value.field == "prompt_id"

    def test_unknown_response_raises_and_persists_nothing(self) -> None:
        observer = FakeRecordObserver()
        store = _make_store(observer=observer)

        with pytest.raises(RecordValidationError) as exc_info:
            store.submit(make_record(evaluator_id="e1", ranked_order=["r1", "r-missing"]))

        assert exc_info.value.field == "response_scores.1.response_id"
        assert store.query_by_prompt("p1") == []
        assert store.version("p1") == 0
        assert len(observer.rejected) == 1

    def test_response_of_other_prompt_is_rejected(self) -> None:
        store = _make_store()

        with pytest.raises(RecordValidationError) as exc_info:
            store.submit(make_record(evaluator_id="e1", ranked_order=["r1", "r4"]))

        assert "belongs to prompt 'p2'" in exc_info.value.reason


class TestIdentityConflicts:
    """(prompt_id, evaluator_id, submitted_at) identifies a record."""

    def test_same_identity_twice_raises_conflict(self) -> None:
        observer = FakeRecordObserver()
        store = _make_store(observer=observer)
        store.submit(make_record(evaluator_id="e1", ranked_order=["r1"]))

        with pytest.raises(RecordConflictError):
            store.submit(make_record(evaluator_id="e1", ranked_order=["r1", "r2"]))

        assert len(store.query_by_prompt("p1")) == 1
        assert len(observer.conflicted) == 1

    def test_resubmission_with_later_timestamp_is_a_new_record(self) -> None:
        store = _make_store()
        store.submit(make_record(evaluator_id="e1", ranked_order=["r1"]))
        store.submit(make_record(evaluator_id="e1", ranked_order=["r1"], minutes=5))

        assert len(store.query_by_prompt("p1")) == 2


class TestQueries:
    def test_query_by_prompt_for_prompt_without_records_is_empty(self) -> None:
        assert _make_store().query_by_prompt("p-empty") == []

    def test_query_by_model_returns_records_touching_model_responses(self) -> None:
        store = _make_store()
        store.submit(make_record(evaluator_id="e1", ranked_order=["r1", "r2"]))
        store.submit(make_record(evaluator_id="e2", ranked_order=["r5", "r4"], prompt_id="p2"))

        model_b = store.query_by_model("model-b")
        model_a = store.query_by_model("model-a")

        assert [s.record.prompt_id for s in model_b] == ["p1"]
        assert sorted(s.record.prompt_id for s in model_a) == ["p1", "p2"]

    def test_query_by_unknown_model_is_empty(self) -> None:
        assert _make_store().query_by_model("model-z") == []

    def test_query_returns_a_copy(self) -> None:
        store = _make_store()
        store.submit(make_record(evaluator_id="e1", ranked_order=["r1"]))

        snapshot = store.query_by_prompt("p1")
        store.submit(make_record(evaluator_id="e2", ranked_order=["r1"]))

        assert len(snapshot) == 1


class TestVersions:
    def test_version_starts_at_zero(self) -> None:
        assert _make_store().version("p1") == 0

    def test_version_counts_submissions_per_prompt(self) -> None:
        store = _make_store()
        store.submit(make_record(evaluator_id="e1", ranked_order=["r1"]))
        store.submit(make_record(evaluator_id="e2", ranked_order=["r1"]))
        store.submit(make_record(evaluator_id="e1", ranked_order=["r4"], prompt_id="p2"))

        assert store.version("p1") == 2
        assert store.version("p2") == 1


class TestIterRecords:
    """iter_records() pages through records in (submitted_at, record_id) order."""

    def _populate(self, store: InMemoryRecordStore) -> None:
        # Submitted out of time order on purpose.
        store.submit(make_record(evaluator_id="e3", ranked_order=["r1"], minutes=3))
        store.submit(make_record(evaluator_id="e1", ranked_order=["r1"], minutes=1))
        store.submit(make_record(evaluator_id="e2", ranked_order=["r1"], minutes=1))
        store.submit(make_record(evaluator_id="e4", ranked_order=["r4"], prompt_id="p2", minutes=2))

    def test_yields_in_timestamp_order(self) -> None:
        store = _make_store()
        self._populate(store)

        records = list(store.iter_records(batch_size=2))

        assert [s.record.evaluator_id for s in records] == ["e1", "e2", "e4", "e3"]

    def test_batch_size_does_not_change_sequence(self) -> None:
        store = _make_store()
        self._populate(store)

        small = [s.record_id for s in store.iter_records(batch_size=1)]
        large = [s.record_id for s in store.iter_records(batch_size=100)]

        assert small == large

    def test_resume_from_exact_cursor_yields_remaining(self) -> None:
        store = _make_store()
        self._populate(store)
        full = list(store.iter_records(batch_size=2))

        consumed = full[:2]
        cursor = ExportCursor(
            submitted_at=consumed[-1].record.submitted_at,
            record_id=consumed[-1].record_id,
        )
        resumed = list(store.iter_records(after=cursor, batch_size=2))

        assert resumed == full[2:]

    def test_bare_timestamp_cursor_skips_that_instant(self) -> None:
        store = _make_store()
        self._populate(store)

        resumed = list(store.iter_records(after=ExportCursor(submitted_at=at(1))))

        assert [s.record.evaluator_id for s in resumed] == ["e4", "e3"]

    def test_iteration_is_lazy(self) -> None:
        store = _make_store()
        iterator = store.iter_records()
        store.submit(make_record(evaluator_id="e1", ranked_order=["r1"]))

        assert len(list(iterator)) == 1


class TestConcurrentSubmission:
    """Concurrent appenders never lose or duplicate records."""

    def test_parallel_submissions_are_all_visible(self) -> None:
        counter = itertools.count(1)
        lock = threading.Lock()

        def next_id() -> str:
            with lock:
                return f"rec-{next(counter):04d}"

        store = InMemoryRecordStore(
            catalog=make_catalog(), observer=FakeRecordObserver(), id_factory=next_id
        )
        errors: list[Exception] = []

        def submit_many(worker: int) -> None:
            try:
                for i in range(25):
                    store.submit(
                        make_record(
                            evaluator_id=f"e{worker}",
                            ranked_order=["r1", "r2"],
                            minutes=i,
                        )
                    )
            except Exception as exc:  # noqa: BLE001
                errors.append(exc)

        threads = [threading.Thread(target=submit_many, args=(w,)) for w in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert errors == []
        assert len(store.query_by_prompt("p1")) == 200
        assert store.version("p1") == 200
        ids = [s.record_id for s in store.iter_records(batch_size=7)]
        assert len(ids) == len(set(ids)) == 200
