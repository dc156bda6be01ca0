"""Observer port for the metrics domain — defines events in domain language."""

from typing import Protocol


class MetricsObserver(Protocol):
    """Observer port emitting structured events while computing snapshots.

    Implementations may log to structlog, record for tests, or emit metrics.
    """

    def snapshot_cache_hit(self, scope_kind: str, scope_key: str, version: int) -> None: ...

    def snapshot_computed(
        self,
        scope_kind: str,
        scope_key: str,
        sample_size: int,
        version: int,
        duration_ms: int,
    ) -> None: ...

    def metadata_timed_out(
        self, scope_kind: str, scope_key: str, timeout_seconds: float
    ) -> None: ...
