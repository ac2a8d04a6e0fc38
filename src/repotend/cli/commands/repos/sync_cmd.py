"""Sync command - converge repositories on disk with the config file."""

import threading
from pathlib import Path

import click

from repotend.cli.alias import alias
from repotend.cli.commands.repos.common import (
    config_option,
    expand_trees_or_exit,
    load_config_or_exit,
)
from repotend.cli.render import render_summary
from repotend.context import RepotendContext
from repotend.core.discovery import find_unmanaged_repositories
from repotend.core.reconciler import reconcile
from repotend.output import user_output


@alias("run")
@click.command("sync")
@config_option
@click.option(
    "-j",
    "--jobs",
    type=click.IntRange(min=1),
    default=1,
    show_default=True,
    help="Number of repositories to process in parallel",
)
@click.option("--dry-run", is_flag=True, help="Print git commands instead of running them")
@click.pass_obj
def repos_sync(ctx: RepotendContext, config_path: Path, jobs: int, dry_run: bool) -> None:
    """Clone missing repositories and set up their remotes and worktrees.

    Existing repositories are only extended: remotes that are not in the
    config are never removed, and worktrees are removed only for repositories
    with worktree_policy = "exclusive".
    """
    if dry_run:
        ctx = ctx.with_dry_run()

    config = load_config_or_exit(ctx, config_path)
    trees = expand_trees_or_exit(ctx, config)
    repositories = tuple(repo for tree in trees for repo in tree.repositories)

    stop_event = threading.Event()
    try:
        summary = reconcile(ctx.git, repositories, jobs=jobs, stop_event=stop_event)
    except KeyboardInterrupt:
        user_output(click.style("Interrupted", fg="yellow"))
        raise SystemExit(130) from None

    render_summary(summary)

    roots = sorted({tree.root for tree in trees})
    for root in roots:
        for path in find_unmanaged_repositories(ctx.git, root, repositories):
            user_output(click.style(f"Warning: found unmanaged repository at {path}", fg="yellow"))

    if not summary.success:
        raise SystemExit(1)
