"""Retrieval of per-repository weekly contributor statistics.

GitHub computes contributor statistics lazily: the first request for a
repository usually answers ``202 Accepted`` while a background job runs, and
the caller is expected to poll until the data is ready. This module owns that
polling loop, plus the backoff on rate limiting. It returns data only; merging
into the aggregate is the collector's job.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from .github.client import GitHubAPIError, GitHubClient
from .models import RepositoryRef, WeeklySample

logger = logging.getLogger(__name__)

STATUS_OK = 200
STATUS_PENDING = 202
STATUS_NO_CONTENT = 204
THROTTLED_STATUSES = frozenset({403, 429})

ContributorWeeks = list[tuple[str, list[WeeklySample]]]


class RepositoryStatsError(GitHubAPIError):
    """Statistics for a repository could not be retrieved."""

    def __init__(self, repo: RepositoryRef, status_code: int, body: str = "", message: str | None = None) -> None:
        super().__init__(
            message or f"Failed to get stats for repository: {repo.full_name} ({status_code}): {body}",
            status_code,
            body,
        )
        self.repo = repo


class RetryExhaustedError(RepositoryStatsError):
    """The statistics never became available within ``max_attempts``."""


class MalformedStatsError(RepositoryStatsError):
    """The statistics payload did not have the expected shape."""


@dataclass(frozen=True)
class RetryPolicy:
    """Polling configuration for the statistics endpoint.

    ``max_attempts=None`` polls until the endpoint resolves.
    """

    pending_interval: float = 2.0
    throttled_interval: float = 10.0
    max_attempts: int | None = None


class RepositoryStatsFetcher:
    def __init__(
        self,
        client: GitHubClient,
        policy: RetryPolicy | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.client = client
        self.policy = policy or RetryPolicy()
        self._sleep = sleep

    async def fetch(self, repo: RepositoryRef) -> ContributorWeeks:
        logger.info("Getting stats for repository: %s", repo.full_name)

        attempt = 0
        while True:
            attempt += 1
            response = await self.client.get_contributor_stats(repo.owner, repo.name)
            status = response.status_code

            if status == STATUS_OK:
                contributors = _parse_contributors(repo, response.json())
                logger.info("Received stats for repository: %s (%d contributors)", repo.full_name, len(contributors))
                return contributors

            if status == STATUS_NO_CONTENT:
                logger.info("No stats for repository: %s", repo.full_name)
                return []

            if status == STATUS_PENDING:
                delay = self.policy.pending_interval
                logger.info("Stats still being computed for %s, retrying in %.0fs", repo.full_name, delay)
            elif status in THROTTLED_STATUSES:
                delay = self.policy.throttled_interval
                logger.info("Rate limited, waiting %.0f seconds on repository: %s", delay, repo.full_name)
            else:
                raise RepositoryStatsError(repo, status, response.text)

            if self.policy.max_attempts is not None and attempt >= self.policy.max_attempts:
                raise RetryExhaustedError(
                    repo,
                    status,
                    response.text,
                    message=f"Stats for repository {repo.full_name} not available after {attempt} attempts ({status})",
                )
            await self._sleep(delay)


def _parse_contributors(repo: RepositoryRef, payload: object) -> ContributorWeeks:
    if not isinstance(payload, list):
        raise MalformedStatsError(repo, STATUS_OK, str(payload), message=f"Unexpected stats payload for {repo.full_name}")

    contributors: ContributorWeeks = []
    for entry in payload:
        try:
            author = entry.get("author")
            if author is None:
                # GitHub reports deleted accounts with a null author.
                logger.warning("Skipping contributor without author on repository: %s", repo.full_name)
                continue
            login = author.get("login")
            weeks = [WeeklySample.from_api(w) for w in entry.get("weeks") or []]
        except (KeyError, TypeError, ValueError, AttributeError, OverflowError, OSError) as e:
            raise MalformedStatsError(
                repo, STATUS_OK, str(entry), message=f"Malformed stats entry on repository {repo.full_name}: {e!r}"
            ) from e
        if not isinstance(login, str) or not login:
            raise MalformedStatsError(
                repo, STATUS_OK, str(entry), message=f"Contributor without login on repository {repo.full_name}"
            )
        contributors.append((login, weeks))
    return contributors
