"""Data models for contrib-stats."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

_HOURS_PER_DAY = 24
_HOURS_PER_WEEK = 168
_HOURS_PER_MONTH = 720
_HOURS_PER_YEAR = 8760


@dataclass(frozen=True)
class ContributionWindow:
    additions: int = 0
    deletions: int = 0
    commits: int = 0

    def __add__(self, other: ContributionWindow) -> ContributionWindow:
        return ContributionWindow(
            additions=self.additions + other.additions,
            deletions=self.deletions + other.deletions,
            commits=self.commits + other.commits,
        )

    @property
    def lines(self) -> int:
        return self.additions + self.deletions


@dataclass(frozen=True)
class WeeklySample:
    """One week of one contributor's activity on one repository."""

    week_start: datetime
    additions: int = 0
    deletions: int = 0
    commits: int = 0

    @classmethod
    def from_api(cls, week: dict) -> WeeklySample:
        return cls(
            week_start=datetime.fromtimestamp(int(week["w"]), tz=timezone.utc),
            additions=int(week.get("a", 0)),
            deletions=int(week.get("d", 0)),
            commits=int(week.get("c", 0)),
        )

    def as_window(self) -> ContributionWindow:
        return ContributionWindow(self.additions, self.deletions, self.commits)


@dataclass(frozen=True)
class RepositoryRef:
    owner: str
    name: str

    @classmethod
    def from_api(cls, repo: dict) -> RepositoryRef:
        return cls(owner=repo["owner"]["login"], name=repo["name"])

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    def __str__(self) -> str:
        return self.full_name


@dataclass
class ContributorRecord:
    """Running aggregate for a single contributor across all repositories.

    Windows hold the samples whose week started within 7, 30 and 365 days
    of the reference instant used at merge time.
    """

    identity: str
    totals: ContributionWindow = field(default_factory=ContributionWindow)
    window_7d: ContributionWindow = field(default_factory=ContributionWindow)
    window_30d: ContributionWindow = field(default_factory=ContributionWindow)
    window_365d: ContributionWindow = field(default_factory=ContributionWindow)
    earliest_commit_week: datetime | None = None
    latest_commit_week: datetime | None = None

    @property
    def span_hours(self) -> float:
        if self.earliest_commit_week is None or self.latest_commit_week is None:
            return 0.0
        return (self.latest_commit_week - self.earliest_commit_week).total_seconds() / 3600

    def _rate(self, hours: int) -> float | None:
        span = self.span_hours
        if span <= 0:
            return None
        return self.totals.commits / span * hours

    @property
    def per_day(self) -> float | None:
        return self._rate(_HOURS_PER_DAY)

    @property
    def per_week(self) -> float | None:
        return self._rate(_HOURS_PER_WEEK)

    @property
    def per_month(self) -> float | None:
        return self._rate(_HOURS_PER_MONTH)

    @property
    def per_year(self) -> float | None:
        return self._rate(_HOURS_PER_YEAR)


@dataclass
class OrgReport:
    org: str
    reference_time: datetime
    total_repositories: int
    repositories_completed: int
    contributors: list[ContributorRecord] = field(default_factory=list)
