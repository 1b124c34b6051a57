"""Organization-wide collection: list repositories, fan out, merge."""

from __future__ import annotations

import asyncio
import logging

from .fetcher import RepositoryStatsFetcher
from .github.client import PAGE_SIZE, GitHubClient
from .models import RepositoryRef
from .store import StatsStore

logger = logging.getLogger(__name__)

MIN_WORKERS = 10
MAX_WORKERS = 30


class OrganizationCollector:
    """Drive one collection run for an organization into a :class:`StatsStore`.

    Any repository failure aborts the whole run: the remaining workers are
    cancelled and the error is re-raised from :meth:`run`. There is no
    partial-report mode.
    """

    def __init__(
        self,
        client: GitHubClient,
        fetcher: RepositoryStatsFetcher,
        store: StatsStore,
        min_workers: int = MIN_WORKERS,
        max_workers: int = MAX_WORKERS,
    ) -> None:
        if min_workers < 1 or max_workers < min_workers:
            raise ValueError(f"invalid worker bounds: min={min_workers}, max={max_workers}")
        self.client = client
        self.fetcher = fetcher
        self.store = store
        self.min_workers = min_workers
        self.max_workers = max_workers

    async def list_repositories(self, org: str) -> list[RepositoryRef]:
        repos: list[RepositoryRef] = []
        page: int | None = 1
        while page:
            logger.info("Getting page: %d of organization: %s", page, org)
            batch, page = await self.client.list_repos_page(org, page, per_page=PAGE_SIZE)
            repos.extend(batch)
        return repos

    def worker_count(self, queued: int) -> int:
        return max(self.min_workers, min(self.max_workers, queued))

    async def run(self, org: str) -> None:
        repos = await self.list_repositories(org)
        self.store.set_total_repositories(len(repos))
        logger.info("Found %d repositories in organization: %s", len(repos), org)

        queue: asyncio.Queue[RepositoryRef] = asyncio.Queue()
        for repo in repos:
            queue.put_nowait(repo)

        try:
            async with asyncio.TaskGroup() as group:
                for _ in range(self.worker_count(len(repos))):
                    group.create_task(self._worker(queue))
        except BaseExceptionGroup as errors:
            # Surface the first failure itself rather than the group.
            raise errors.exceptions[0] from None

    async def _worker(self, queue: asyncio.Queue[RepositoryRef]) -> None:
        while True:
            try:
                repo = queue.get_nowait()
            except asyncio.QueueEmpty:
                return
            await self._collect(repo)

    async def _collect(self, repo: RepositoryRef) -> None:
        contributors = await self.fetcher.fetch(repo)
        for identity, samples in contributors:
            self.store.merge(identity, samples)

        done = self.store.mark_repository_completed()
        total = self.store.total_repositories
        logger.info(
            "Got stats for repository: %s (%d/%d) (%.2f%%)",
            repo.full_name,
            done,
            total,
            done / total * 100.0,
        )
