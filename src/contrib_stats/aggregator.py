"""Turn a finished :class:`StatsStore` into an :class:`OrgReport`."""

from __future__ import annotations

from collections.abc import Callable

from .models import ContributorRecord, OrgReport
from .store import StatsStore

SORT_FIELDS = ("commits", "additions", "deletions", "lines")


def _sort_key(sort_by: str) -> Callable[[ContributorRecord], int]:
    """Return a key function for sorting contributors by the given field."""
    if sort_by == "additions":
        return lambda c: c.totals.additions
    if sort_by == "deletions":
        return lambda c: c.totals.deletions
    if sort_by == "lines":
        return lambda c: c.totals.lines
    return lambda c: c.totals.commits


def build_report(org: str, store: StatsStore, sort_by: str = "commits") -> OrgReport:
    key = _sort_key(sort_by)
    contributors = sorted(
        store.snapshot().values(),
        key=lambda c: (-key(c), c.identity.lower()),
    )
    return OrgReport(
        org=org,
        reference_time=store.reference_time,
        total_repositories=store.total_repositories,
        repositories_completed=store.repositories_completed,
        contributors=contributors,
    )
