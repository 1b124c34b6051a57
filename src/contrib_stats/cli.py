"""Command-line entry point."""

from __future__ import annotations

import asyncio
import logging

import click
import httpx
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from . import __version__
from .aggregator import SORT_FIELDS
from .collector import MAX_WORKERS, MIN_WORKERS
from .github.client import GitHubAPIError


def _configure_logging(verbose: bool, quiet: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING if quiet else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )
    # httpx logs every request at INFO.
    logging.getLogger("httpx").setLevel(logging.WARNING)


@click.command()
@click.argument("org")
@click.option("--token", envvar="GITHUB_TOKEN", required=True, help="GitHub token (or set GITHUB_TOKEN).")
@click.option(
    "--format", "output_format",
    type=click.Choice(["table", "json", "csv"]), default="table", show_default=True,
    help="Output format.",
)
@click.option("--output", "-o", "output_file", default=None, help="Write the report to a file.")
@click.option("--top", "top_n", type=int, default=10, show_default=True, help="Contributors shown in the table.")
@click.option(
    "--sort-by", type=click.Choice(SORT_FIELDS), default="commits", show_default=True,
    help="Sort contributors by this field.",
)
@click.option("--min-workers", type=click.IntRange(min=1), default=MIN_WORKERS, show_default=True)
@click.option("--max-workers", type=click.IntRange(min=1), default=MAX_WORKERS, show_default=True)
@click.option(
    "--max-attempts", type=click.IntRange(min=1), default=None,
    help="Give up on a repository after this many polls (default: poll until ready).",
)
@click.option("--api-url", default=None, help="GitHub API base URL (for GitHub Enterprise).")
@click.option("--no-verify-ssl", is_flag=True, default=False, help="Disable TLS certificate verification.")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Show debug logging.")
@click.option("--quiet", "-q", is_flag=True, default=False, help="Only log warnings and errors.")
@click.version_option(version=__version__, prog_name="contrib-stats")
def main(
    org: str,
    token: str,
    output_format: str,
    output_file: str | None,
    top_n: int,
    sort_by: str,
    min_workers: int,
    max_workers: int,
    max_attempts: int | None,
    api_url: str | None,
    no_verify_ssl: bool,
    verbose: bool,
    quiet: bool,
) -> None:
    """Collect contributor statistics for every repository of ORG."""
    if not token:
        raise click.UsageError("A GitHub token is required (--token or GITHUB_TOKEN).")
    if max_workers < min_workers:
        raise click.BadParameter("must be >= --min-workers", param_hint="--max-workers")

    _configure_logging(verbose, quiet)

    from .orchestrator import run

    try:
        asyncio.run(run(
            org=org,
            token=token,
            top_n=top_n,
            output_format=output_format,
            sort_by=sort_by,
            output_file=output_file,
            min_workers=min_workers,
            max_workers=max_workers,
            max_attempts=max_attempts,
            api_url=api_url,
            verify_ssl=not no_verify_ssl,
        ))
    except (GitHubAPIError, httpx.HTTPError) as e:
        Console(stderr=True).print(f"[bold red]Error:[/bold red] {escape(str(e) or repr(e))}", highlight=False)
        raise SystemExit(1) from e
