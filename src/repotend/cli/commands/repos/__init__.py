"""Repository management commands."""

import click

from repotend.cli.alias import register_with_aliases
from repotend.cli.commands.repos.find_cmd import repos_find
from repotend.cli.commands.repos.import_cmd import repos_import
from repotend.cli.commands.repos.status_cmd import repos_status
from repotend.cli.commands.repos.sync_cmd import repos_sync


@click.group("repos")
def repos_group() -> None:
    """Manage the repositories listed in a config file."""
    pass


# Register subcommands
register_with_aliases(repos_group, repos_sync)  # Has @alias("run")
repos_group.add_command(repos_status)
repos_group.add_command(repos_find)
repos_group.add_command(repos_import)
