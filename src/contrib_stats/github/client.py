"""Async GitHub REST client used by the collector."""

from __future__ import annotations

import logging

import httpx

from ..models import RepositoryRef
from .rate_limit import RateLimitMonitor

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"
PAGE_SIZE = 100


class GitHubAPIError(Exception):
    """Raised when the GitHub API answers with an unrecoverable status.

    Transport failures (connection errors, timeouts) carry ``status_code`` 0.
    """

    def __init__(self, message: str, status_code: int, body: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class GitHubClient:
    """Thin wrapper over :class:`httpx.AsyncClient` for the endpoints we need.

    Use as an async context manager so the underlying connection pool is
    closed when the run ends.
    """

    def __init__(
        self,
        token: str,
        base_url: str | None = None,
        verify_ssl: bool = True,
        timeout: float = 30.0,
        rate_limit: RateLimitMonitor | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url or DEFAULT_API_URL,
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
            },
            timeout=timeout,
            verify=verify_ssl,
            transport=transport,
        )
        self._rate_limit = rate_limit or RateLimitMonitor()

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    async def _get(self, path: str, params: dict | None = None) -> httpx.Response:
        await self._rate_limit.wait_if_needed()
        try:
            response = await self._client.get(path, params=params)
        except httpx.HTTPError as e:
            raise GitHubAPIError(f"Request to {path} failed: {e!r}", status_code=0) from e
        self._rate_limit.update(response)
        return response

    async def list_repos_page(
        self, org: str, page: int, per_page: int = PAGE_SIZE
    ) -> tuple[list[RepositoryRef], int | None]:
        """Fetch one page of an organization's repositories.

        Returns the repositories and the next page number, or ``None`` when
        the listing has no further pages.
        """
        response = await self._get(f"/orgs/{org}/repos", params={"per_page": per_page, "page": page})
        if response.status_code != 200:
            raise GitHubAPIError(
                f"Failed to list repositories of {org} (page {page}, {response.status_code}): {response.text}",
                response.status_code,
                response.text,
            )
        repos = [RepositoryRef.from_api(r) for r in response.json()]
        return repos, _next_page(response)

    async def get_contributor_stats(self, owner: str, repo: str) -> httpx.Response:
        """Return the raw response of the contributor statistics endpoint.

        Status interpretation (202 pending, 403/429 throttled, 204 empty) is
        left to the caller.
        """
        return await self._get(f"/repos/{owner}/{repo}/stats/contributors")


def _next_page(response: httpx.Response) -> int | None:
    link = response.links.get("next")
    if not link:
        return None
    page = httpx.URL(link["url"]).params.get("page")
    if not page:
        return None
    return int(page) or None
