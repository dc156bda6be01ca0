"""RecordExporter — lazy, restartable iteration over stored records for bulk export."""

from collections.abc import Iterator

from h_eval.agreement.domain.calculator import overall_agreement
from h_eval.catalog.domain.catalog import ResponseCatalog
from h_eval.core.errors import NotFoundError
from h_eval.export.domain.filter import ExportFilter
from h_eval.export.domain.observer import ExportObserver
from h_eval.metrics.domain.policy import AggregationPolicy, select_records
from h_eval.metrics.domain.value import Undefined
from h_eval.records.domain.cursor import ExportCursor
from h_eval.records.domain.record import StoredRecord
from h_eval.records.domain.store import RecordStore


class RecordExporter:
    """Export interface: yields records in (submitted_at, record_id) ascending order.

    Records are pulled from the store one page at a time, so an export never
    holds the full record set in memory. Passing the cursor of the last record
    consumed resumes exactly where an interrupted export stopped.

    With require_rater_overlap, records of prompts whose inter-rater agreement
    is Undefined (no response scored by two evaluators) are skipped; the check
    uses the same policy the metrics use.
    """

    def __init__(
        self,
        store: RecordStore,
        catalog: ResponseCatalog,
        observer: ExportObserver,
        policy: AggregationPolicy,
        batch_size: int = 100,
        require_rater_overlap: bool = False,
    ) -> None:
        self._store = store
        self._catalog = catalog
        self._observer = observer
        self._policy = policy
        self._batch_size = batch_size
        self._require_rater_overlap = require_rater_overlap

    def iter_records(
        self,
        export_filter: ExportFilter | None = None,
        after: ExportCursor | None = None,
    ) -> Iterator[StoredRecord]:
        """
        Return a lazy iterator over matching records, strictly after `after`.

        Raises:
            NotFoundError: if the filter names a prompt or model the catalog
                does not know. Raised here, before iteration starts.
        """
        export_filter = export_filter or ExportFilter()
        if export_filter.prompt_id is not None and not self._catalog.prompt_exists(
            export_filter.prompt_id
        ):
            raise NotFoundError(kind="prompt", key=export_filter.prompt_id)

        model_response_ids: set[str] | None = None
        if export_filter.model_name is not None:
            refs = self._catalog.responses_for_model(export_filter.model_name)
            if not refs:
                raise NotFoundError(kind="model", key=export_filter.model_name)
            model_response_ids = {r.response_id for r in refs}

        return self._iterate(
            export_filter=export_filter,
            model_response_ids=model_response_ids,
            after=after,
        )

    def _iterate(
        self,
        export_filter: ExportFilter,
        model_response_ids: set[str] | None,
        after: ExportCursor | None,
    ) -> Iterator[StoredRecord]:
        overlap: dict[str, bool] = {}
        for stored in self._store.iter_records(after=after, batch_size=self._batch_size):
            if not export_filter.matches(stored.record, model_response_ids):
                continue
            if self._require_rater_overlap and not self._has_overlap(
                prompt_id=stored.record.prompt_id, seen=overlap
            ):
                continue
            yield stored

    def _has_overlap(self, prompt_id: str, seen: dict[str, bool]) -> bool:
        if prompt_id not in seen:
            qualifying = select_records(
                records=self._store.query_by_prompt(prompt_id), policy=self._policy
            )
            agreement = overall_agreement(records=qualifying)
            seen[prompt_id] = not isinstance(agreement, Undefined)
            if not seen[prompt_id]:
                self._observer.export_prompt_skipped(
                    prompt_id=prompt_id, reason="insufficient rater overlap"
                )
        return seen[prompt_id]
