"""Tests for the CLI module."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import httpx
from click.testing import CliRunner

from contrib_stats.cli import main
from contrib_stats.fetcher import RepositoryStatsError
from contrib_stats.models import RepositoryRef


@patch("contrib_stats.cli.asyncio.run")
@patch("contrib_stats.orchestrator.run", new_callable=MagicMock)
def test_main_org_target(mock_run, mock_asyncio_run):
    """CLI should pass the org and defaults to the orchestrator."""
    runner = CliRunner()
    result = runner.invoke(main, ["myorg", "--token", "fake-token"])
    assert result.exit_code == 0, result.output
    mock_asyncio_run.assert_called_once()
    kwargs = mock_run.call_args.kwargs
    assert kwargs["org"] == "myorg"
    assert kwargs["token"] == "fake-token"
    assert kwargs["output_format"] == "table"
    assert kwargs["min_workers"] == 10
    assert kwargs["max_workers"] == 30
    assert kwargs["max_attempts"] is None
    assert kwargs["verify_ssl"] is True


@patch("contrib_stats.cli.asyncio.run")
@patch("contrib_stats.orchestrator.run", new_callable=MagicMock)
def test_main_with_all_options(mock_run, mock_asyncio_run):
    """CLI should accept all options."""
    runner = CliRunner()
    result = runner.invoke(main, [
        "myorg", "--token", "fake-token",
        "--format", "json",
        "--output", "/tmp/test-output.json",
        "--top", "25",
        "--sort-by", "lines",
        "--min-workers", "2",
        "--max-workers", "8",
        "--max-attempts", "60",
        "--api-url", "https://ghe.example.com/api/v3",
        "--no-verify-ssl",
        "--quiet",
    ])
    assert result.exit_code == 0, result.output
    kwargs = mock_run.call_args.kwargs
    assert kwargs["output_format"] == "json"
    assert kwargs["output_file"] == "/tmp/test-output.json"
    assert kwargs["top_n"] == 25
    assert kwargs["sort_by"] == "lines"
    assert kwargs["min_workers"] == 2
    assert kwargs["max_workers"] == 8
    assert kwargs["max_attempts"] == 60
    assert kwargs["api_url"] == "https://ghe.example.com/api/v3"
    assert kwargs["verify_ssl"] is False


@patch("contrib_stats.cli.asyncio.run")
@patch("contrib_stats.orchestrator.run", new_callable=MagicMock)
def test_main_token_from_env(mock_run, mock_asyncio_run):
    runner = CliRunner(env={"GITHUB_TOKEN": "env-token"})
    result = runner.invoke(main, ["myorg"])
    assert result.exit_code == 0, result.output
    assert mock_run.call_args.kwargs["token"] == "env-token"


def test_main_missing_token():
    """CLI should fail without token."""
    runner = CliRunner(env={"GITHUB_TOKEN": ""})
    result = runner.invoke(main, ["myorg"])
    assert result.exit_code != 0


def test_main_rejects_inverted_worker_bounds():
    runner = CliRunner()
    result = runner.invoke(main, ["myorg", "--token", "t", "--min-workers", "10", "--max-workers", "5"])
    assert result.exit_code != 0
    assert "--max-workers" in result.output


@patch("contrib_stats.cli.asyncio.run")
@patch("contrib_stats.orchestrator.run", new_callable=MagicMock)
def test_main_reports_collection_failure(mock_run, mock_asyncio_run):
    mock_asyncio_run.side_effect = RepositoryStatsError(RepositoryRef("myorg", "broken"), 500, "boom")
    runner = CliRunner()
    result = runner.invoke(main, ["myorg", "--token", "fake-token"])
    assert result.exit_code == 1
    assert "myorg/broken" in result.output


def test_main_version():
    """CLI should show version."""
    runner = CliRunner()
    result = runner.invoke(main, ["--version"])
    assert result.exit_code == 0
    assert "0.1.0" in result.output


@patch("contrib_stats.cli.asyncio.run")
@patch("contrib_stats.orchestrator.run", new_callable=MagicMock)
def test_main_reports_transport_failure(mock_run, mock_asyncio_run):
    mock_asyncio_run.side_effect = httpx.ConnectError("connection refused")
    runner = CliRunner()
    result = runner.invoke(main, ["myorg", "--token", "fake-token"])
    assert result.exit_code == 1
    assert not isinstance(result.exception, httpx.HTTPError)
    assert "Error:" in result.output
    assert "connection refused" in result.output
