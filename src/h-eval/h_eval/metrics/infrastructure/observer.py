"""Structlog implementation of the MetricsObserver port."""

import structlog


class StructlogMetricsObserver:
    """Logs metrics domain events to structlog.

    Does NOT inherit from MetricsObserver (structural typing via Protocol).
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def snapshot_cache_hit(self, scope_kind: str, scope_key: str, version: int) -> None:
        self._log.debug(
            "metrics.cache_hit",
            scope_kind=scope_kind,
            scope_key=scope_key,
            version=version,
        )

    def snapshot_computed(
        self,
        scope_kind: str,
        scope_key: str,
        sample_size: int,
        version: int,
        duration_ms: int,
    ) -> None:
        self._log.info(
            "metrics.snapshot_computed",
            scope_kind=scope_kind,
            scope_key=scope_key,
            sample_size=sample_size,
            version=version,
            duration_ms=duration_ms,
        )

    def metadata_timed_out(
        self, scope_kind: str, scope_key: str, timeout_seconds: float
    ) -> None:
        self._log.warning(
            "metrics.metadata_timed_out",
            scope_kind=scope_kind,
            scope_key=scope_key,
            timeout_seconds=timeout_seconds,
            message="Latency and length omitted from snapshot",
        )
