"""Commands acting on the worktrees of the repository in the current directory."""

import click

from repotend.cli.alias import alias
from repotend.cli.commands.worktree.add_cmd import worktree_add
from repotend.cli.commands.worktree.delete_cmd import worktree_delete
from repotend.cli.commands.worktree.fetch_cmd import worktree_fetch
from repotend.cli.commands.worktree.pull_cmd import worktree_pull
from repotend.cli.commands.worktree.status_cmd import worktree_status


@alias("wt")
@click.group("worktree")
def worktree_group() -> None:
    """Manage the worktrees of the current repository."""
    pass


# Register subcommands
worktree_group.add_command(worktree_status)
worktree_group.add_command(worktree_add)
worktree_group.add_command(worktree_delete)
worktree_group.add_command(worktree_fetch)
worktree_group.add_command(worktree_pull)
