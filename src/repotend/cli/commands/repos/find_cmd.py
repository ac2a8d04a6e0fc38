"""Find command - generate a config file from repositories already on disk."""

from pathlib import Path

import click

from repotend.cli.commands.repos.common import exit_with_error
from repotend.config import TreeConfig, dump_config
from repotend.context import RepotendContext
from repotend.core.discovery import describe_tree
from repotend.core.errors import RepositoryUnreadableError
from repotend.output import machine_output


@click.command("find")
@click.argument(
    "path", type=click.Path(exists=True, file_okay=False, resolve_path=True, path_type=Path)
)
@click.option(
    "--format",
    "config_format",
    type=click.Choice(["toml", "yaml"]),
    default="toml",
    show_default=True,
    help="Output format",
)
@click.pass_obj
def repos_find(ctx: RepotendContext, path: Path, config_format: str) -> None:
    """Print a config describing every repository under PATH."""
    try:
        repositories = describe_tree(ctx.git, path)
    except RepositoryUnreadableError as e:
        exit_with_error(e.message)

    if not repositories:
        exit_with_error(f"No repositories found under {path}")

    # PATH itself is a repository: describe it relative to its parent.
    if repositories[0].path == path:
        tree = TreeConfig(root=path.parent, repositories=repositories)
    else:
        tree = TreeConfig(root=path, repositories=repositories)
    machine_output(dump_config([tree], "toml" if config_format == "toml" else "yaml"), nl=False)
