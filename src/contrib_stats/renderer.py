"""Rich-based terminal report renderer with JSON/CSV support."""

from __future__ import annotations

import csv
import io
import json
from datetime import datetime

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import ContributionWindow, ContributorRecord, OrgReport

_SORT_LABELS = {
    "commits": "Commits",
    "additions": "Additions",
    "deletions": "Deletions",
    "lines": "Lines",
}

_COMPACT_SUFFIXES = ((1_000_000_000, "B"), (1_000_000, "M"), (1_000, "K"))


def _format_number(n: int) -> str:
    return f"{n:,}"


def _compact(n: int) -> str:
    for scale, suffix in _COMPACT_SUFFIXES:
        if abs(n) >= scale:
            value = f"{n / scale:.1f}".rstrip("0").rstrip(".")
            return f"{value}{suffix}"
    return str(n)


def _format_rate(rate: float | None) -> str:
    return "-" if rate is None else f"{rate:.2f}"


def _format_week(week: datetime | None) -> str:
    return week.strftime("%Y-%m-%d") if week else "-"


def _format_window(w: ContributionWindow) -> str:
    return f"{_compact(w.commits)} (+{_compact(w.additions)}/-{_compact(w.deletions)})"


def _write_to_file(content: str, output_file: str) -> None:
    """Write content to a file and print confirmation."""
    with open(output_file, "w", encoding="utf-8") as f:
        f.write(content)
    Console().print(f"Saved to {output_file}")


def render_report(
    report: OrgReport,
    top_n: int = 10,
    sort_by: str = "commits",
    output_file: str | None = None,
) -> None:
    """Render an OrgReport to the terminal using rich."""
    if output_file:
        string_io = io.StringIO()
        console = Console(file=string_io, force_terminal=False, width=160)
    else:
        console = Console(width=160)

    console.print(Panel(
        Text(
            f"contrib-stats: {report.org}\nAs of {report.reference_time:%Y-%m-%d %H:%M} UTC",
            justify="center",
        ),
        style="bold cyan",
    ))
    console.print()

    totals = sum((c.totals for c in report.contributors), ContributionWindow())

    console.print("[bold]Summary[/bold]")
    summary = Table(show_header=False, box=None, padding=(0, 2))
    summary.add_column("label", style="dim")
    summary.add_column("value", style="bold")
    summary.add_row("Repositories", _format_number(report.total_repositories))
    summary.add_row("Contributors", _format_number(len(report.contributors)))
    summary.add_row("Total Commits", _format_number(totals.commits))
    summary.add_row("Additions", _format_number(totals.additions))
    summary.add_row("Deletions", _format_number(totals.deletions))
    console.print(summary)
    console.print()

    if report.contributors:
        console.print(f"[bold]Top Contributors (top {top_n})[/bold]")
        contrib_table = Table(show_header=True, header_style="bold")
        contrib_table.add_column("#", justify="right")
        contrib_table.add_column("Username")

        # Add sort indicator
        sort_label = _SORT_LABELS.get(sort_by, "Commits")
        for col in ("Commits", "Additions", "Deletions"):
            label = f"{col} ▼" if col == sort_label else col
            contrib_table.add_column(label, justify="right")
        if sort_by == "lines":
            contrib_table.add_column("Lines ▼", justify="right")

        contrib_table.add_column("Last 7d", justify="right")
        contrib_table.add_column("Last 30d", justify="right")
        contrib_table.add_column("Last 365d", justify="right")
        contrib_table.add_column("Commits/Week", justify="right")
        contrib_table.add_column("Active")

        for i, c in enumerate(report.contributors[:top_n], 1):
            row = [
                str(i),
                c.identity,
                _format_number(c.totals.commits),
                _format_number(c.totals.additions),
                _format_number(c.totals.deletions),
            ]
            if sort_by == "lines":
                row.append(_format_number(c.totals.lines))
            row.extend([
                _format_window(c.window_7d),
                _format_window(c.window_30d),
                _format_window(c.window_365d),
                _format_rate(c.per_week),
                f"{_format_week(c.earliest_commit_week)} ~ {_format_week(c.latest_commit_week)}",
            ])
            contrib_table.add_row(*row)
        console.print(contrib_table)
        console.print()

    if output_file:
        _write_to_file(string_io.getvalue(), output_file)


def _window_dict(w: ContributionWindow) -> dict:
    return {"additions": w.additions, "deletions": w.deletions, "commits": w.commits}


def _contributor_dict(c: ContributorRecord) -> dict:
    return {
        "username": c.identity,
        "totals": _window_dict(c.totals),
        "last_7_days": _window_dict(c.window_7d),
        "last_30_days": _window_dict(c.window_30d),
        "last_365_days": _window_dict(c.window_365d),
        "earliest_commit_week": c.earliest_commit_week.isoformat() if c.earliest_commit_week else None,
        "latest_commit_week": c.latest_commit_week.isoformat() if c.latest_commit_week else None,
        "commits_per_day": c.per_day,
        "commits_per_week": c.per_week,
        "commits_per_month": c.per_month,
        "commits_per_year": c.per_year,
    }


def render_json(report: OrgReport, output_file: str | None = None) -> None:
    """Render an OrgReport as JSON."""
    data = {
        "org": report.org,
        "reference_time": report.reference_time.isoformat(),
        "total_repositories": report.total_repositories,
        "repositories_completed": report.repositories_completed,
        "contributors": [_contributor_dict(c) for c in report.contributors],
    }
    content = json.dumps(data, indent=2, ensure_ascii=False)
    if output_file:
        _write_to_file(content, output_file)
    else:
        print(content)


def _window_row(w: ContributionWindow) -> list[int]:
    return [w.commits, w.additions, w.deletions]


def render_csv(report: OrgReport, output_file: str | None = None) -> None:
    """Render contributor data as CSV."""
    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\n")
    writer.writerow([
        "username", "commits", "additions", "deletions",
        "commits_7d", "additions_7d", "deletions_7d",
        "commits_30d", "additions_30d", "deletions_30d",
        "commits_365d", "additions_365d", "deletions_365d",
        "earliest_commit_week", "latest_commit_week",
    ])
    for c in report.contributors:
        writer.writerow([
            c.identity, c.totals.commits, c.totals.additions, c.totals.deletions,
            *_window_row(c.window_7d), *_window_row(c.window_30d), *_window_row(c.window_365d),
            _format_week(c.earliest_commit_week), _format_week(c.latest_commit_week),
        ])
    content = output.getvalue()
    if output_file:
        _write_to_file(content, output_file)
    else:
        print(content, end="")
