"""Dataset JSONL serialization — one training/analysis example per evaluation record."""

import json
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from h_eval.catalog.domain.catalog import ResponseCatalog
from h_eval.core.errors import NotFoundError
from h_eval.core.jsonl import drop_partial_tail
from h_eval.export.domain.observer import ExportObserver
from h_eval.records.domain.cursor import ExportCursor
from h_eval.records.domain.record import StoredRecord
from h_eval.records.domain.score import Criterion

type JsonDict = dict[str, Any]


@dataclass(frozen=True)
class ExportSummary:
    """What one write pass produced; last_cursor resumes a later pass."""

    path: Path
    total_records: int
    last_cursor: ExportCursor | None


def build_dataset_line(stored: StoredRecord, catalog: ResponseCatalog) -> JsonDict:
    """Build one JSON-serializable dataset line for a stored record.

    Responses are listed in ranked order with their 1-based rank and the model
    that produced them. The cursor fields let a consumer resume an export from
    the last line it read.

    Raises:
        NotFoundError: if a response no longer resolves in the catalog.
    """
    record = stored.record
    scores = {s.response_id: s for s in record.response_scores}

    responses: list[JsonDict] = []
    for rank, response_id in enumerate(record.ranked_order, start=1):
        ref = catalog.get_response(response_id)
        if ref is None:
            raise NotFoundError(kind="response", key=response_id)
        score = scores[response_id]
        responses.append(
            {
                "response_id": response_id,
                "model_name": ref.model_name,
                "rank": rank,
                "scores": {c.value: score.score_for(c) for c in Criterion},
                "comment": score.comment,
            }
        )

    return {
        "record_id": stored.record_id,
        "prompt_id": record.prompt_id,
        "evaluator_id": record.evaluator_id,
        "submitted_at": record.submitted_at.isoformat(),
        "rationale": record.rationale,
        "responses": responses,
        "cursor": {
            "submitted_at": record.submitted_at.isoformat(),
            "record_id": stored.record_id,
        },
    }


class JsonlDatasetWriter:
    """Streams records into a JSONL file, one line at a time."""

    def __init__(self, catalog: ResponseCatalog, observer: ExportObserver) -> None:
        self._catalog = catalog
        self._observer = observer

    def write(
        self, records: Iterable[StoredRecord], path: Path, append: bool = False
    ) -> ExportSummary:
        """Write records to path; append=True continues a resumed export."""
        self._observer.export_started(path=str(path), resumed=append)
        path.parent.mkdir(parents=True, exist_ok=True)
        if append:
            drop_partial_tail(path=path)

        total = 0
        last: StoredRecord | None = None
        with open(path, "a" if append else "w", encoding="utf-8") as fh:
            for stored in records:
                line = build_dataset_line(stored=stored, catalog=self._catalog)
                fh.write(json.dumps(line) + "\n")
                total += 1
                last = stored

        self._observer.export_completed(path=str(path), total_records=total)
        last_cursor = (
            ExportCursor(submitted_at=last.record.submitted_at, record_id=last.record_id)
            if last is not None
            else None
        )
        return ExportSummary(path=path, total_records=total, last_cursor=last_cursor)


def read_last_cursor(path: Path) -> ExportCursor | None:
    """Return the cursor of the last complete line of an existing export, if any."""
    if not path.exists():
        return None
    cursor: ExportCursor | None = None
    with open(path, encoding="utf-8") as fh:
        for line in fh:
            if not line.endswith("\n"):
                break  # interrupted mid-line; that record is re-exported
            if not line.strip():
                continue
            cursor = ExportCursor.model_validate(json.loads(line)["cursor"])
    return cursor

