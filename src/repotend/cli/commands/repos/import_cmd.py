"""Import command - generate a config file from a provider's repository list."""

from pathlib import Path

import click

from repotend.cli.commands.repos.common import exit_with_error
from repotend.config import ProviderSource, dump_config, expand_path
from repotend.context import RepotendContext
from repotend.core.types import WorktreePolicy
from repotend.output import machine_output
from repotend.providers.sources import expand_provider_sources
from repotend.providers.types import PROVIDER_NAMES, ProviderError, ProviderParams
from repotend.subprocess_utils import CommandError


@click.command("import")
@click.option("--provider", type=click.Choice(PROVIDER_NAMES), required=True)
@click.option("--root", required=True, help="Directory the repositories are placed under")
@click.option("--token", default=None, envvar="REPOTEND_TOKEN", help="API token")
@click.option("--token-command", default=None, help="Shell command that prints the API token")
@click.option("--api-url", default=None, help="API base URL for self-hosted instances")
@click.option("--user", "users", multiple=True, help="Include repositories of this user")
@click.option("--group", "groups", multiple=True, help="Include repositories of this org/group")
@click.option("--owner", is_flag=True, help="Include repositories owned by the token's user")
@click.option("--force-ssh", is_flag=True, help="Use SSH clone URLs")
@click.option("--remote-name", default="origin", show_default=True)
@click.option(
    "--worktree-policy",
    type=click.Choice([policy.value for policy in WorktreePolicy]),
    default=WorktreePolicy.ADDITIVE.value,
    show_default=True,
)
@click.option(
    "--format",
    "config_format",
    type=click.Choice(["toml", "yaml"]),
    default="toml",
    show_default=True,
)
@click.pass_obj
def repos_import(
    ctx: RepotendContext,
    provider: str,
    root: str,
    token: str | None,
    token_command: str | None,
    api_url: str | None,
    users: tuple[str, ...],
    groups: tuple[str, ...],
    owner: bool,
    force_ssh: bool,
    remote_name: str,
    worktree_policy: str,
    config_format: str,
) -> None:
    """Print a config for the repositories a provider lists."""
    if not (users or groups or owner):
        exit_with_error("Select repositories with --user, --group or --owner")
    if token is not None and token_command is not None:
        exit_with_error("--token and --token-command are mutually exclusive")

    source = ProviderSource(
        params=ProviderParams(
            provider="github" if provider == "github" else "gitlab",
            token=token,
            api_url=api_url,
            users=users,
            groups=groups,
            owner=owner,
            force_ssh=force_ssh,
            worktree_policy=WorktreePolicy(worktree_policy),
        ),
        root=expand_path(root, base=ctx.cwd),
        token_command=token_command,
        remote_name=remote_name,
    )
    try:
        trees = expand_provider_sources([source], ctx.http, provider_factory=ctx.provider_factory)
    except (ProviderError, CommandError, ValueError) as e:
        exit_with_error(str(e))

    machine_output(dump_config(trees, "toml" if config_format == "toml" else "yaml"), nl=False)
