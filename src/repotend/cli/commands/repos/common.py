"""Helpers shared by the repos commands."""

from pathlib import Path
from typing import NoReturn

import click

from repotend.config import (
    Config,
    ConfigError,
    TreeConfig,
    load_config,
    validate_unique_paths,
)
from repotend.context import RepotendContext
from repotend.output import user_output
from repotend.providers.sources import expand_provider_sources
from repotend.providers.types import ProviderError
from repotend.subprocess_utils import CommandError

DEFAULT_CONFIG_PATH = "config.toml"

config_option = click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_CONFIG_PATH,
    show_default=True,
    help="Configuration file (.toml, .yaml or .yml)",
)


def exit_with_error(message: str) -> NoReturn:
    user_output(click.style("Error: ", fg="red") + message)
    raise SystemExit(1)


def load_config_or_exit(ctx: RepotendContext, config_path: Path) -> Config:
    path = config_path if config_path.is_absolute() else ctx.cwd / config_path
    try:
        return load_config(path)
    except ConfigError as e:
        exit_with_error(str(e))


def expand_trees_or_exit(ctx: RepotendContext, config: Config) -> tuple[TreeConfig, ...]:
    """Configured trees followed by one tree per provider source."""
    try:
        provider_trees = expand_provider_sources(
            config.providers, ctx.http, provider_factory=ctx.provider_factory
        )
    except (ProviderError, CommandError, ValueError) as e:
        exit_with_error(str(e))

    trees = (*config.trees, *provider_trees)
    try:
        validate_unique_paths([repo for tree in trees for repo in tree.repositories])
    except ConfigError as e:
        exit_with_error(str(e))
    return trees
