"""Fetch command - update remote-tracking branches from every remote."""

import click

from repotend.cli.commands.repos.common import exit_with_error
from repotend.cli.commands.worktree.common import discover_repository_root
from repotend.context import RepotendContext
from repotend.output import user_output
from repotend.subprocess_utils import CommandError


@click.command("fetch")
@click.pass_obj
def worktree_fetch(ctx: RepotendContext) -> None:
    """Fetch all remotes of the current repository.

    Every remote is attempted; exits with status 1 if any fetch failed.
    """
    root = discover_repository_root(ctx)
    try:
        remotes = ctx.git.remotes.list_remotes(root)
    except CommandError as e:
        exit_with_error(str(e))

    if not remotes:
        user_output("No remotes configured")
        return

    failed = 0
    for name in sorted(remotes):
        try:
            ctx.git.remotes.fetch_remote(root, name)
        except CommandError as e:
            failed += 1
            user_output(f"  {click.style('✗', fg='red')} Fetch {name}: {e}")
            continue
        user_output(f"  {click.style('✓', fg='green')} Fetch {name}")

    if failed:
        raise SystemExit(1)
