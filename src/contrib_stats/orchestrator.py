"""Orchestrator: wires together client, collector, and renderer."""

from __future__ import annotations

from .aggregator import build_report
from .collector import MAX_WORKERS, MIN_WORKERS, OrganizationCollector
from .fetcher import RepositoryStatsFetcher, RetryPolicy
from .github.client import GitHubClient
from .renderer import render_csv, render_json, render_report
from .store import StatsStore


async def run(
    org: str,
    token: str,
    top_n: int = 10,
    output_format: str = "table",
    sort_by: str = "commits",
    output_file: str | None = None,
    min_workers: int = MIN_WORKERS,
    max_workers: int = MAX_WORKERS,
    max_attempts: int | None = None,
    api_url: str | None = None,
    verify_ssl: bool = True,
) -> None:
    """Main pipeline: collect, aggregate, render.

    A collection failure propagates before anything is rendered.
    """
    store = StatsStore()
    async with GitHubClient(token=token, base_url=api_url, verify_ssl=verify_ssl) as client:
        fetcher = RepositoryStatsFetcher(client, RetryPolicy(max_attempts=max_attempts))
        collector = OrganizationCollector(
            client, fetcher, store, min_workers=min_workers, max_workers=max_workers
        )
        await collector.run(org)

    report = build_report(org, store, sort_by=sort_by)

    if output_format == "json":
        render_json(report, output_file=output_file)
    elif output_format == "csv":
        render_csv(report, output_file=output_file)
    else:
        render_report(report, top_n=top_n, sort_by=sort_by, output_file=output_file)
