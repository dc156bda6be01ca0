"""SnapshotCache — version-keyed, staleness-bounded side table of MetricSnapshots."""

import threading
import time
from collections.abc import Callable
from datetime import datetime

from h_eval.metrics.domain.policy import AggregationPolicy
from h_eval.metrics.domain.snapshot import MetricSnapshot

type SlotKey = tuple[str, str, AggregationPolicy, datetime | None]  # kind, key, policy, as_of


class SnapshotCache:
    """Holds at most one snapshot per (scope, policy, as_of) slot.

    An entry is served only while the slot's record-set version is unchanged
    and the entry is younger than max_staleness_seconds. A max staleness of 0
    disables caching entirely.
    """

    def __init__(
        self,
        max_staleness_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._max_staleness = max_staleness_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: dict[SlotKey, tuple[int, float, MetricSnapshot]] = {}

    @property
    def enabled(self) -> bool:
        return self._max_staleness > 0

    def get(self, slot: SlotKey, version: int) -> MetricSnapshot | None:
        if not self.enabled:
            return None
        with self._lock:
            entry = self._entries.get(slot)
            if entry is None:
                return None
            cached_version, stored_at, snapshot = entry
            if cached_version != version or self._clock() - stored_at > self._max_staleness:
                del self._entries[slot]
                return None
            return snapshot

    def put(self, slot: SlotKey, version: int, snapshot: MetricSnapshot) -> None:
        if not self.enabled:
            return
        with self._lock:
            current = self._entries.get(slot)
            # A slower computation over an older record set must not replace a newer one.
            if current is not None and current[0] > version:
                return
            self._entries[slot] = (version, self._clock(), snapshot)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
