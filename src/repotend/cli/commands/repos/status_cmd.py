"""Status command - show what sync would change, without changing anything."""

from pathlib import Path

import click

from repotend.cli.commands.repos.common import (
    DEFAULT_CONFIG_PATH,
    expand_trees_or_exit,
    load_config_or_exit,
)
from repotend.cli.commands.worktree.status_cmd import show_current_repository
from repotend.cli.render import StatusRow, render_status
from repotend.context import RepotendContext
from repotend.core.errors import ConfigurationAmbiguousError, RepositoryUnreadableError
from repotend.core.planner import build_plan
from repotend.core.state_reader import read_repository_state
from repotend.core.types import RepositoryConfig
from repotend.gateway.git.abc import Git


def _status_row(git: Git, config: RepositoryConfig) -> StatusRow:
    try:
        state = read_repository_state(git, config.path)
        plan = build_plan(config, state)
    except (RepositoryUnreadableError, ConfigurationAmbiguousError) as e:
        return StatusRow(
            name=config.name,
            path=str(config.path),
            state=e.error_kind,
            head=None,
            pending=(),
            error=e.message,
        )

    if not state.exists:
        label = "missing"
    elif plan:
        label = "out of sync"
    else:
        label = "in sync"
    return StatusRow(
        name=config.name,
        path=str(config.path),
        state=label,
        head=state.head,
        pending=tuple(action.describe() for action in plan),
        error=None,
    )


@click.command("status")
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help=f"Configuration file [default: {DEFAULT_CONFIG_PATH} if present]",
)
@click.pass_obj
def repos_status(ctx: RepotendContext, config_path: Path | None) -> None:
    """Show each configured repository and its pending changes.

    Without --config and without config.toml in the current directory, shows
    the worktrees of the repository containing the current directory instead.

    Exits with status 1 when a repository cannot be read or its
    configuration is ambiguous.
    """
    if config_path is None:
        config_path = Path(DEFAULT_CONFIG_PATH)
        if not (ctx.cwd / config_path).exists():
            show_current_repository(ctx)
            return

    config = load_config_or_exit(ctx, config_path)
    trees = expand_trees_or_exit(ctx, config)

    rows = [_status_row(ctx.git, repo) for tree in trees for repo in tree.repositories]
    render_status(rows)

    if any(row.error is not None for row in rows):
        raise SystemExit(1)
