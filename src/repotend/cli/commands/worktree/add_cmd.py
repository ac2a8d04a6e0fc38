"""Add command - create a worktree the same way sync would."""

import click

from repotend.cli.commands.repos.common import exit_with_error
from repotend.cli.commands.worktree.common import discover_repository_root
from repotend.cli.render import render_report_actions
from repotend.context import RepotendContext
from repotend.core.actions import CreateWorktree, RepositoryReport
from repotend.core.discovery import split_upstream
from repotend.core.errors import ConfigurationAmbiguousError, RepositoryUnreadableError
from repotend.core.executor import execute_plan
from repotend.core.planner import build_plan
from repotend.core.state_reader import read_repository_state
from repotend.core.types import (
    ActualRepositoryState,
    RepositoryConfig,
    TrackingRef,
    WorktreeSpec,
)


def default_tracking(name: str, state: ActualRepositoryState) -> TrackingRef | None:
    """Track <remote>/<name> when a remote has that branch, preferring origin."""
    candidates = sorted(
        remote for remote in state.remotes if f"{remote}/{name}" in state.remote_branches
    )
    if not candidates:
        return None
    remote = "origin" if "origin" in candidates else candidates[0]
    return TrackingRef(remote=remote, branch=name)


@click.command("add")
@click.argument("name")
@click.option(
    "-t",
    "--track",
    metavar="REMOTE/BRANCH",
    default=None,
    help="Remote branch the new branch tracks",
)
@click.option(
    "--no-track", is_flag=True, help="Do not track a remote branch, even one named NAME"
)
@click.pass_obj
def worktree_add(ctx: RepotendContext, name: str, track: str | None, no_track: bool) -> None:
    """Check out branch NAME in a new worktree at subdirectory NAME.

    The branch is created when it does not exist yet, starting from the
    tracked remote branch or else from the current HEAD.
    """
    if track is not None and no_track:
        exit_with_error("--track and --no-track cannot be combined")

    root = discover_repository_root(ctx)
    try:
        state = read_repository_state(ctx.git, root)
    except RepositoryUnreadableError as e:
        exit_with_error(e.message)

    tracking: TrackingRef | None = None
    if track is not None:
        tracking = split_upstream(track, list(state.remotes))
        if tracking is None or not tracking.branch:
            exit_with_error(f'"{track}" is not <remote>/<branch> for a configured remote')
    elif not no_track:
        tracking = default_tracking(name, state)

    config = RepositoryConfig(
        name=root.name,
        path=root,
        worktrees=(WorktreeSpec(branch=name, subdirectory=name, track=tracking),),
        default_branch=state.head,
    )
    try:
        plan = build_plan(config, state)
    except ConfigurationAmbiguousError as e:
        exit_with_error(e.message)

    if not any(isinstance(action, CreateWorktree) for action in plan):
        exit_with_error(f"Worktree {name} already exists")

    results = execute_plan(ctx.git, config, plan)
    report = RepositoryReport(name=config.name, path=root, plan=plan, results=results)
    render_report_actions(report)
    if not report.success:
        raise SystemExit(1)
