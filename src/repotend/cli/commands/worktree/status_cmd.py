"""Status command - list the worktrees of the current repository."""

import click

from repotend.cli.commands.repos.common import exit_with_error
from repotend.cli.commands.worktree.common import collect_worktree_rows, discover_repository_root
from repotend.cli.render import render_worktrees
from repotend.context import RepotendContext
from repotend.subprocess_utils import CommandError


def show_current_repository(ctx: RepotendContext) -> None:
    root = discover_repository_root(ctx)
    try:
        rows = collect_worktree_rows(ctx.git, root)
    except CommandError as e:
        exit_with_error(str(e))
    render_worktrees(rows)


@click.command("status")
@click.pass_obj
def worktree_status(ctx: RepotendContext) -> None:
    """Show each worktree with its branch and upstream."""
    show_current_repository(ctx)
