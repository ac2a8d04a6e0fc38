"""Human-readable rendering of reconciliation results."""

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from repotend.core.actions import ActionFailed, ReconcileSummary, RepositoryReport
from repotend.output import user_output


@dataclass(frozen=True)
class StatusRow:
    """One repository as shown by ``repos status``."""

    name: str
    path: str
    state: str
    head: str | None
    pending: tuple[str, ...]
    error: str | None


@dataclass(frozen=True)
class WorktreeRow:
    """One worktree as shown by ``worktree status``."""

    name: str
    path: Path
    branch: str | None
    upstream: str | None
    missing: bool


def _console() -> Console:
    # Use width=200 to prevent truncation in terminal environments with narrow defaults
    return Console(stderr=True, force_terminal=True, width=200)


def _report_status(report: RepositoryReport) -> str:
    if report.error_kind is not None:
        return f"[red]{report.error_kind}[/red]"
    failed = report.failed_result
    if failed is not None:
        return f"[red]{failed.error_kind}[/red]"
    if not report.plan:
        return "[dim]up to date[/dim]"
    return "[green]updated[/green]"


def render_report_actions(report: RepositoryReport) -> None:
    """Print what was done to one repository, one line per planned action."""
    if report.error_kind is not None:
        user_output(f"{click.style(report.name, bold=True)}: {report.message}")
        return
    if not report.plan:
        return
    user_output(click.style(report.name, bold=True))
    for result in report.results:
        if isinstance(result, ActionFailed):
            mark = click.style("✗", fg="red")
            user_output(f"  {mark} {result.action.describe()}: {result.message}")
        else:
            user_output(f"  {click.style('✓', fg='green')} {result.action.describe()}")
    for action in report.skipped_actions:
        user_output(click.style(f"  - {action.describe()} (skipped)", dim=True))


def render_summary(summary: ReconcileSummary) -> None:
    for report in summary.reports:
        render_report_actions(report)

    table = Table(show_header=True, header_style="bold", box=None)
    table.add_column("Repository", style="cyan", no_wrap=True)
    table.add_column("Status", no_wrap=True)
    table.add_column("Actions", justify="right", no_wrap=True)
    for report in summary.reports:
        done = sum(1 for result in report.results if result.success)
        table.add_row(report.name, _report_status(report), f"{done}/{len(report.plan)}")
    for name in summary.skipped:
        table.add_row(name, "[yellow]skipped[/yellow]", "-")

    console = _console()
    console.print(table)

    failed = len(summary.failed_reports)
    if failed or summary.skipped:
        user_output(
            click.style(
                f"{failed} failed, {len(summary.skipped)} skipped, "
                f"{len(summary.reports) - failed} ok",
                fg="red",
            )
        )
    else:
        user_output(click.style(f"All {len(summary.reports)} repositories in sync", fg="green"))


def render_status(rows: Sequence[StatusRow]) -> None:
    table = Table(show_header=True, header_style="bold", box=None)
    table.add_column("Repository", style="cyan", no_wrap=True)
    table.add_column("State", no_wrap=True)
    table.add_column("Head", style="yellow", no_wrap=True)
    table.add_column("Pending")
    for row in rows:
        if row.error is not None:
            state = f"[red]{row.state}[/red]"
            pending = row.error
        elif row.pending:
            state = f"[yellow]{row.state}[/yellow]"
            pending = "\n".join(row.pending)
        else:
            state = f"[green]{row.state}[/green]"
            pending = "-"
        table.add_row(row.name, state, row.head or "-", pending)

    _console().print(table)


def render_worktrees(rows: Sequence[WorktreeRow]) -> None:
    table = Table(show_header=True, header_style="bold", box=None)
    table.add_column("Worktree", style="cyan", no_wrap=True)
    table.add_column("Branch", style="yellow", no_wrap=True)
    table.add_column("Upstream", no_wrap=True)
    table.add_column("State", no_wrap=True)
    for row in rows:
        state = "[red]directory missing[/red]" if row.missing else "[green]ok[/green]"
        table.add_row(row.name, row.branch or "[dim](detached)[/dim]", row.upstream or "-", state)

    _console().print(table)
