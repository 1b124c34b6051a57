"""Tests for the data models."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from contrib_stats.models import ContributionWindow, ContributorRecord, RepositoryRef, WeeklySample


def test_window_addition():
    total = ContributionWindow(1, 2, 3) + ContributionWindow(10, 20, 30)
    assert total == ContributionWindow(additions=11, deletions=22, commits=33)
    assert total.lines == 33


def test_weekly_sample_from_api():
    s = WeeklySample.from_api({"w": 1717200000, "a": 5, "d": 1, "c": 2})
    assert s.week_start == datetime(2024, 6, 1, tzinfo=timezone.utc)
    assert s.as_window() == ContributionWindow(5, 1, 2)


def test_repository_ref_from_api():
    ref = RepositoryRef.from_api({"name": "repo1", "owner": {"login": "org"}})
    assert ref == RepositoryRef("org", "repo1")
    assert ref.full_name == "org/repo1"
    assert str(ref) == "org/repo1"


def test_rates_undefined_without_weeks():
    record = ContributorRecord(identity="alice")
    assert record.per_day is None
    assert record.per_year is None


def test_rates_undefined_for_single_week():
    week = datetime(2024, 1, 1, tzinfo=timezone.utc)
    record = ContributorRecord(
        identity="alice",
        totals=ContributionWindow(commits=7),
        earliest_commit_week=week,
        latest_commit_week=week,
    )
    assert record.per_day is None
    assert record.per_week is None


def test_rates_scale_with_span():
    start = datetime(2024, 1, 1, tzinfo=timezone.utc)
    record = ContributorRecord(
        identity="alice",
        totals=ContributionWindow(commits=14),
        earliest_commit_week=start,
        latest_commit_week=start + timedelta(days=7),
    )
    assert record.per_day == pytest.approx(2.0)
    assert record.per_week == pytest.approx(14.0)
    assert record.per_month == pytest.approx(60.0)
    assert record.per_year == pytest.approx(730.0)
