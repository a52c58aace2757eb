"""
Memoized recomputation of analytics.

Results are derived values: they only change when the log snapshot, the
selected period or the reference day changes.  ``AnalyticsCache`` keys them
on a content fingerprint of the snapshot so that re-rendering a view does not
re-run the aggregations.
"""

import hashlib
from datetime import date
from typing import Callable, Generic, Sequence, TypeVar

from .models import WorkoutLog

T = TypeVar("T")


def fingerprint(workouts: Sequence[WorkoutLog]) -> str:
    """
    Content hash of a log snapshot.

    Two snapshots with equal workouts in the same order share a fingerprint.
    """
    digest = hashlib.sha256()
    for workout in workouts:
        digest.update(repr(workout).encode("utf-8"))
        digest.update(b"\n")
    return digest.hexdigest()


class AnalyticsCache(Generic[T]):
    """
    Cache of computed results keyed by (snapshot fingerprint, period id, day).

    Only entries of the most recent snapshot are kept: seeing a new
    fingerprint drops everything computed for the previous one.  A value is
    stored only after it has been computed in full.
    """

    def __init__(self) -> None:
        self._fingerprint: str | None = None
        self._entries: dict[tuple[str, date], T] = {}
        self.hits = 0
        self.misses = 0

    def get_or_compute(
        self,
        snapshot_fingerprint: str,
        period_id: str,
        reference_day: date,
        compute: Callable[[], T],
    ) -> T:
        """
        Return the cached value or compute and store it.

        Args:
            snapshot_fingerprint: ``fingerprint()`` of the log snapshot
            period_id: ``Period.period_id`` of the selected period
            reference_day: Day the result is computed for
            compute: Zero-argument function producing the value

        Returns:
            Cached or freshly computed value
        """
        if snapshot_fingerprint != self._fingerprint:
            self._entries = {}
            self._fingerprint = snapshot_fingerprint

        key = (period_id, reference_day)
        if key in self._entries:
            self.hits += 1
            return self._entries[key]

        self.misses += 1
        value = compute()
        self._entries[key] = value
        return value

    def invalidate(self) -> None:
        """Drop every cached entry."""
        self._entries = {}
        self._fingerprint = None

    def __len__(self) -> int:
        return len(self._entries)
