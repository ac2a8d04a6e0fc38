"""Pull command - bring every worktree up to date with its upstream."""

import click

from repotend.cli.commands.repos.common import exit_with_error
from repotend.cli.commands.worktree.common import collect_worktree_rows, discover_repository_root
from repotend.context import RepotendContext
from repotend.output import user_output
from repotend.subprocess_utils import CommandError


@click.command("pull")
@click.option("--rebase", is_flag=True, help="Rebase local commits instead of fast-forwarding")
@click.pass_obj
def worktree_pull(ctx: RepotendContext, rebase: bool) -> None:
    """Pull the upstream of each worktree's branch.

    Worktrees without an upstream, detached ones and ones whose directory is
    gone are skipped. Without --rebase, diverged branches fail rather than
    merge. Exits with status 1 if any pull failed.
    """
    root = discover_repository_root(ctx)
    try:
        rows = collect_worktree_rows(ctx.git, root)
    except CommandError as e:
        exit_with_error(str(e))

    failed = 0
    for row in rows:
        if row.missing or row.branch is None or row.upstream is None:
            user_output(click.style(f"  - {row.name}: nothing to pull (skipped)", dim=True))
            continue
        try:
            ctx.git.worktrees.pull_worktree(row.path, rebase=rebase)
        except CommandError as e:
            failed += 1
            user_output(f"  {click.style('✗', fg='red')} {row.name}: {e}")
            continue
        user_output(f"  {click.style('✓', fg='green')} {row.name} ({row.upstream})")

    if failed:
        raise SystemExit(1)
