"""Delete command - remove a linked worktree."""

import click

from repotend.cli.commands.repos.common import exit_with_error
from repotend.cli.commands.worktree.common import discover_repository_root, worktree_name
from repotend.context import RepotendContext
from repotend.output import user_output
from repotend.subprocess_utils import CommandError


@click.command("delete")
@click.argument("name")
@click.option("-f", "--force", is_flag=True, help="Delete even with uncommitted changes")
@click.pass_obj
def worktree_delete(ctx: RepotendContext, name: str, force: bool) -> None:
    """Remove the worktree NAME. Its branch is kept."""
    root = discover_repository_root(ctx)
    try:
        worktrees = ctx.git.worktrees.list_worktrees(root)
    except CommandError as e:
        exit_with_error(str(e))

    wanted = name.strip("/")
    target = next(
        (wt for wt in worktrees if not wt.is_root and worktree_name(root, wt.path) == wanted),
        None,
    )
    if target is None:
        exit_with_error(f"No worktree named {name} in {root}")

    try:
        ctx.git.worktrees.remove_worktree(root, target.path, force=force)
    except CommandError as e:
        exit_with_error(str(e))
    user_output(f"{click.style('✓', fg='green')} Deleted worktree {target.path}")
