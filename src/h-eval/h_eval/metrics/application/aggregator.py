"""MetricAggregator — computes MetricSnapshots for a model or a prompt."""

import asyncio
import statistics
import time
from collections.abc import Callable
from datetime import UTC, datetime

from h_eval.agreement.domain.calculator import overall_agreement
from h_eval.catalog.domain.catalog import ResponseCatalog
from h_eval.catalog.domain.response import ResponseMetadata
from h_eval.config.domain.aggregation import AggregationConfig
from h_eval.core.errors import DependencyTimeoutError, NotFoundError
from h_eval.metrics.domain.observer import MetricsObserver
from h_eval.metrics.domain.policy import select_records
from h_eval.metrics.domain.snapshot import CriterionStats, MetricSnapshot, SnapshotScope
from h_eval.metrics.domain.value import Defined, Undefined, mean_of
from h_eval.metrics.infrastructure.cache import SnapshotCache, SlotKey
from h_eval.ranking.domain.aggregator import NO_COMPARISONS, win_rates
from h_eval.records.domain.record import StoredRecord
from h_eval.records.domain.score import Criterion
from h_eval.records.domain.store import RecordStore

NO_RECORDS = "no qualifying evaluation records"
TOO_FEW_SCORES = "fewer than 2 scores"
PROMPT_SCOPE_WIN_RATE = "win rate is reported per model; see model_win_rates"
METADATA_TIMEOUT = "response metadata lookup timed out"
NO_LATENCY = "no latency recorded for scored responses"
NO_LENGTH = "no length recorded for scored responses"


class MetricAggregator:
    """Query interface over the record store.

    Snapshots are a pure function of the qualifying record set plus the
    response metadata join. The only awaited call is that join, bounded by
    metadata_timeout_seconds; on timeout the two dependent fields become
    Undefined and the rest of the snapshot is still returned.
    """

    def __init__(
        self,
        store: RecordStore,
        catalog: ResponseCatalog,
        config: AggregationConfig,
        observer: MetricsObserver,
        cache: SnapshotCache | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = store
        self._catalog = catalog
        self._config = config
        self._observer = observer
        self._cache = cache or SnapshotCache(
            max_staleness_seconds=config.max_staleness_seconds
        )
        self._clock = clock or (lambda: datetime.now(UTC))

    async def metrics_for_prompt(
        self, prompt_id: str, as_of: datetime | None = None
    ) -> MetricSnapshot:
        """
        Compute (or serve from cache) the snapshot for every response to one prompt.

        Raises:
            NotFoundError: if the catalog does not know prompt_id.
        """
        if not self._catalog.prompt_exists(prompt_id):
            raise NotFoundError(kind="prompt", key=prompt_id)

        scope = SnapshotScope(kind="prompt", key=prompt_id)
        # Version is read before the records: a record landing in between is
        # included but cached under the older version, so it is never missed.
        version = self._store.version(prompt_id)
        slot = self._slot(scope=scope, as_of=as_of)
        cached = self._cache.get(slot=slot, version=version)
        if cached is not None:
            self._observer.snapshot_cache_hit(
                scope_kind=scope.kind, scope_key=scope.key, version=version
            )
            return cached

        records = self._store.query_by_prompt(prompt_id)
        snapshot = await self._compute(
            scope=scope, records=records, version=version, as_of=as_of
        )
        self._cache.put(slot=slot, version=version, snapshot=snapshot)
        return snapshot

    async def metrics_for_model(
        self, model_name: str, as_of: datetime | None = None
    ) -> MetricSnapshot:
        """
        Compute (or serve from cache) the snapshot for one model's responses.

        Raises:
            NotFoundError: if the catalog has no responses from model_name.
        """
        refs = self._catalog.responses_for_model(model_name)
        if not refs:
            raise NotFoundError(kind="model", key=model_name)

        scope = SnapshotScope(kind="model", key=model_name)
        prompt_ids = sorted({r.prompt_id for r in refs})
        version = sum(self._store.version(p) for p in prompt_ids)
        slot = self._slot(scope=scope, as_of=as_of)
        cached = self._cache.get(slot=slot, version=version)
        if cached is not None:
            self._observer.snapshot_cache_hit(
                scope_kind=scope.kind, scope_key=scope.key, version=version
            )
            return cached

        # Policy runs over each prompt's full history, before narrowing to the model.
        records = [
            stored
            for prompt_id in prompt_ids
            for stored in self._store.query_by_prompt(prompt_id)
        ]
        snapshot = await self._compute(
            scope=scope,
            records=records,
            version=version,
            as_of=as_of,
            response_ids={r.response_id for r in refs},
        )
        self._cache.put(slot=slot, version=version, snapshot=snapshot)
        return snapshot

    def _slot(self, scope: SnapshotScope, as_of: datetime | None) -> SlotKey:
        return (scope.kind, scope.key, self._config.policy, as_of)

    async def _compute(
        self,
        scope: SnapshotScope,
        records: list[StoredRecord],
        version: int,
        as_of: datetime | None,
        response_ids: set[str] | None = None,
    ) -> MetricSnapshot:
        """
        Window by as_of, apply the policy, then keep records that touch
        response_ids (all records when None).
        """
        started = time.monotonic()
        window = [
            s for s in records if as_of is None or s.record.submitted_at <= as_of
        ]
        qualifying = select_records(records=window, policy=self._config.policy)
        if response_ids is not None:
            qualifying = [
                s
                for s in qualifying
                if any(rid in response_ids for rid in s.record.response_ids)
            ]

        if not qualifying:
            snapshot = self._empty_snapshot(scope=scope, version=version, as_of=as_of)
        else:
            snapshot = await self._snapshot_from(
                scope=scope, qualifying=qualifying, version=version, as_of=as_of
            )

        self._observer.snapshot_computed(
            scope_kind=scope.kind,
            scope_key=scope.key,
            sample_size=snapshot.sample_size,
            version=version,
            duration_ms=int((time.monotonic() - started) * 1000),
        )
        return snapshot

    async def _snapshot_from(
        self,
        scope: SnapshotScope,
        qualifying: list[StoredRecord],
        version: int,
        as_of: datetime | None,
    ) -> MetricSnapshot:
        models = self._resolve_models(qualifying=qualifying)
        if scope.kind == "model":
            in_scope = {rid for rid, model in models.items() if model == scope.key}
        else:
            in_scope = set(models)

        rates = win_rates(
            records=[s.record for s in qualifying], model_of=models.__getitem__
        )
        if scope.kind == "model":
            win_rate = rates.get(scope.key, Undefined(reason=NO_COMPARISONS))
            model_win_rates = {scope.key: win_rate}
        else:
            win_rate = Undefined(reason=PROMPT_SCOPE_WIN_RATE)
            model_win_rates = rates

        latency, length = await self._join_metadata(
            scope=scope, response_ids=sorted(in_scope)
        )

        return MetricSnapshot(
            scope=scope,
            policy=self._config.policy,
            win_rate=win_rate,
            model_win_rates=model_win_rates,
            mean_scores=_criterion_stats(qualifying=qualifying, in_scope=in_scope),
            inter_rater_agreement=overall_agreement(
                records=qualifying, response_ids=in_scope
            ),
            mean_latency_ms=latency,
            mean_response_length=length,
            sample_size=len(qualifying),
            record_set_version=version,
            as_of=as_of,
            computed_at=self._clock(),
        )

    def _empty_snapshot(
        self, scope: SnapshotScope, version: int, as_of: datetime | None
    ) -> MetricSnapshot:
        undefined = Undefined(reason=NO_RECORDS)
        return MetricSnapshot(
            scope=scope,
            policy=self._config.policy,
            win_rate=undefined,
            model_win_rates={},
            mean_scores={
                c: CriterionStats(mean=undefined, stddev=undefined, count=0)
                for c in Criterion
            },
            inter_rater_agreement=undefined,
            mean_latency_ms=undefined,
            mean_response_length=undefined,
            sample_size=0,
            record_set_version=version,
            as_of=as_of,
            computed_at=self._clock(),
        )

    def _resolve_models(self, qualifying: list[StoredRecord]) -> dict[str, str]:
        """
        Map every response id referenced by qualifying records to its model.

        Raises:
            NotFoundError: if the catalog no longer knows a stored response.
        """
        models: dict[str, str] = {}
        for stored in qualifying:
            for response_id in stored.record.response_ids:
                if response_id in models:
                    continue
                ref = self._catalog.get_response(response_id)
                if ref is None:
                    raise NotFoundError(kind="response", key=response_id)
                models[response_id] = ref.model_name
        return models

    async def _join_metadata(
        self, scope: SnapshotScope, response_ids: list[str]
    ) -> tuple[Defined | Undefined, Defined | Undefined]:
        """Mean latency and mean length over response_ids; Undefined on timeout."""
        try:
            metadata = await self._fetch_metadata(response_ids=response_ids)
        except DependencyTimeoutError as exc:
            self._observer.metadata_timed_out(
                scope_kind=scope.kind,
                scope_key=scope.key,
                timeout_seconds=exc.timeout_seconds,
            )
            timed_out = Undefined(reason=METADATA_TIMEOUT)
            return timed_out, timed_out

        rows = [metadata[rid] for rid in response_ids if rid in metadata]
        latencies = [m.latency_ms for m in rows if m.latency_ms is not None]
        lengths = [float(m.length) for m in rows if m.length is not None]
        return mean_of(latencies, reason=NO_LATENCY), mean_of(lengths, reason=NO_LENGTH)

    async def _fetch_metadata(
        self, response_ids: list[str]
    ) -> dict[str, ResponseMetadata]:
        timeout = self._config.metadata_timeout_seconds
        try:
            return await asyncio.wait_for(
                self._catalog.fetch_metadata(response_ids), timeout=timeout
            )
        except TimeoutError as exc:
            raise DependencyTimeoutError(
                dependency="response metadata", timeout_seconds=timeout
            ) from exc


def _criterion_stats(
    qualifying: list[StoredRecord], in_scope: set[str]
) -> dict[Criterion, CriterionStats]:
    """Per-criterion mean and sample stddev over every in-scope response score."""
    scores = [
        score
        for stored in qualifying
        for score in stored.record.response_scores
        if score.response_id in in_scope
    ]
    stats: dict[Criterion, CriterionStats] = {}
    for criterion in Criterion:
        values = [score.score_for(criterion) for score in scores]
        if not values:
            mean: Defined | Undefined = Undefined(reason=NO_RECORDS)
        else:
            mean = Defined(value=float(statistics.mean(values)))
        if len(values) < 2:
            stddev: Defined | Undefined = Undefined(reason=TOO_FEW_SCORES)
        else:
            stddev = Defined(value=statistics.stdev(values))
        stats[criterion] = CriterionStats(mean=mean, stddev=stddev, count=len(values))
    return stats
