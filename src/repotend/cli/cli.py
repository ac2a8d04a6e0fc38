import logging

import click

from repotend.cli.alias import register_with_aliases
from repotend.cli.commands.repos import repos_group
from repotend.cli.commands.worktree import worktree_group
from repotend.context import create_context

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])  # terse help flags


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="repotend")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, debug: bool) -> None:
    """Keep local git repositories, remotes and worktrees in line with a config file."""
    if debug:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s - %(levelname)s - %(message)s")

    # Only create context if not already provided (e.g., by tests)
    if ctx.obj is None:
        ctx.obj = create_context(dry_run=False)


cli.add_command(repos_group)
register_with_aliases(cli, worktree_group)  # Has @alias("wt")


def main() -> None:
    """CLI entry point used by the `repotend` console script."""
    cli()
