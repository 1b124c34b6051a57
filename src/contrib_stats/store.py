"""Concurrency-safe aggregate of contributor statistics for one run."""

from __future__ import annotations

import threading
from collections.abc import Iterable, Mapping
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from types import MappingProxyType

from .models import ContributorRecord, WeeklySample

WEEK = timedelta(hours=168)
MONTH = timedelta(hours=720)
YEAR = timedelta(hours=8760)


class StatsStore:
    """Mapping of contributor login to :class:`ContributorRecord`.

    All mutation goes through :meth:`merge` and the counter methods, which
    share one lock. Windows are computed against ``reference_time``, fixed
    when the store is created, so every merge of a run uses the same instant.
    """

    def __init__(self, reference_time: datetime | None = None) -> None:
        self.reference_time = reference_time or datetime.now(timezone.utc)
        self._records: dict[str, ContributorRecord] = {}
        self._lock = threading.Lock()
        self.total_repositories = 0
        self.repositories_completed = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __contains__(self, identity: object) -> bool:
        with self._lock:
            return identity in self._records

    def merge(self, identity: str, samples: Iterable[WeeklySample]) -> None:
        if not identity:
            raise ValueError("contributor identity must be a non-empty string")

        samples = list(samples)
        with self._lock:
            record = self._records.get(identity)
            if record is None:
                record = ContributorRecord(identity=identity)
                self._records[identity] = record

            for sample in samples:
                window = sample.as_window()
                age = self.reference_time - sample.week_start

                record.totals += window
                if age < WEEK:
                    record.window_7d += window
                if age < MONTH:
                    record.window_30d += window
                if age < YEAR:
                    record.window_365d += window

                if record.earliest_commit_week is None or sample.week_start < record.earliest_commit_week:
                    record.earliest_commit_week = sample.week_start
                if record.latest_commit_week is None or sample.week_start > record.latest_commit_week:
                    record.latest_commit_week = sample.week_start

    def set_total_repositories(self, count: int) -> None:
        with self._lock:
            self.total_repositories = count

    def mark_repository_completed(self) -> int:
        """Increment the completed-repository counter and return the new value."""
        with self._lock:
            self.repositories_completed += 1
            return self.repositories_completed

    def snapshot(self) -> Mapping[str, ContributorRecord]:
        with self._lock:
            return MappingProxyType({k: replace(v) for k, v in self._records.items()})
