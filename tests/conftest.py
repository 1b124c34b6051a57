"""Shared fixtures."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from contrib_stats.models import WeeklySample


@pytest.fixture
def reference_time() -> datetime:
    return datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def make_sample(reference_time):
    """Build a WeeklySample whose week started ``days_ago`` before the reference time."""

    def _make(days_ago: float, additions: int = 0, deletions: int = 0, commits: int = 0) -> WeeklySample:
        return WeeklySample(
            week_start=reference_time - timedelta(days=days_ago),
            additions=additions,
            deletions=deletions,
            commits=commits,
        )

    return _make
