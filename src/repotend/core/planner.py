"""Diff desired against actual repository state into an ordered plan.

The planner is a pure function of (RepositoryConfig, ActualRepositoryState).
It never touches git. Plans are ordered so that each action's preconditions
are established by earlier ones:

    clone/init < remote add/update < fetch < worktree create/remove < tracking

Worktree actions are merged and sorted lexically by subdirectory, tracking
actions likewise, so identical inputs always produce identical plans.
"""

import logging

from repotend.core.actions import (
    AddRemote,
    CloneRepository,
    CreateWorktree,
    FetchRemote,
    InitRepository,
    PlannedAction,
    RemoveWorktree,
    SetTrackingBranch,
    UpdateRemoteUrl,
)
from repotend.core.errors import ConfigurationAmbiguousError
from repotend.core.types import (
    ActualRepositoryState,
    RepositoryConfig,
    WorktreePolicy,
    WorktreeSpec,
)

logger = logging.getLogger(__name__)


def _is_valid_subdirectory(subdirectory: str) -> bool:
    if subdirectory in ("", ".", "..") or subdirectory.startswith("/"):
        return False
    return not subdirectory.startswith("../")


def _validate(config: RepositoryConfig, state: ActualRepositoryState) -> None:
    """Reject configurations that cannot be classified unambiguously."""
    seen_remotes: set[str] = set()
    for remote in config.remotes:
        if remote.name in seen_remotes:
            raise ConfigurationAmbiguousError(
                f'{config.name}: remote "{remote.name}" is configured more than once'
            )
        seen_remotes.add(remote.name)

    by_subdirectory: dict[str, WorktreeSpec] = {}
    by_branch: dict[str, WorktreeSpec] = {}
    for spec in config.worktrees:
        subdirectory = spec.normalized_subdirectory
        if not _is_valid_subdirectory(subdirectory):
            raise ConfigurationAmbiguousError(
                f'{config.name}: worktree path "{spec.subdirectory}" must be a '
                "subdirectory of the repository"
            )
        if subdirectory in by_subdirectory:
            other = by_subdirectory[subdirectory]
            raise ConfigurationAmbiguousError(
                f'{config.name}: worktree path "{subdirectory}" matches both '
                f'"{other.subdirectory}" ({other.branch}) and '
                f'"{spec.subdirectory}" ({spec.branch})'
            )
        if spec.branch in by_branch:
            raise ConfigurationAmbiguousError(
                f'{config.name}: branch "{spec.branch}" is configured for two worktrees, '
                f'"{by_branch[spec.branch].subdirectory}" and "{spec.subdirectory}"'
            )
        if spec.track is not None and spec.track.remote not in seen_remotes:
            if spec.track.remote not in state.remotes:
                raise ConfigurationAmbiguousError(
                    f'{config.name}: worktree "{spec.subdirectory}" tracks unknown remote '
                    f'"{spec.track.remote}"'
                )
        by_subdirectory[subdirectory] = spec
        by_branch[spec.branch] = spec

    if not state.exists:
        return

    # A configured branch checked out somewhere else would make git refuse the
    # new worktree; that is a move, which this planner does not guess at.
    for spec in config.worktrees:
        subdirectory = spec.normalized_subdirectory
        if state.find_worktree(subdirectory) is not None:
            continue
        if spec.branch == state.head:
            raise ConfigurationAmbiguousError(
                f'{config.name}: branch "{spec.branch}" is checked out in the main working '
                f'tree and cannot also be checked out at "{subdirectory}"'
            )
        for observed in state.worktrees:
            if observed.branch == spec.branch:
                raise ConfigurationAmbiguousError(
                    f'{config.name}: branch "{spec.branch}" is checked out at '
                    f'"{observed.subdirectory}" but configured at "{subdirectory}"'
                )


def _plan_remotes(config: RepositoryConfig, state: ActualRepositoryState) -> list[PlannedAction]:
    actions: list[PlannedAction] = []
    for remote in config.remotes:
        current_url = state.remotes.get(remote.name)
        if current_url is None:
            actions.append(
                AddRemote(name=remote.name, url=remote.url, fetch_refspec=remote.fetch_refspec)
            )
        elif current_url != remote.url:
            actions.append(UpdateRemoteUrl(name=remote.name, url=remote.url))
    return actions


def _plan_create_worktree(
    config: RepositoryConfig, state: ActualRepositoryState, spec: WorktreeSpec
) -> CreateWorktree:
    create_branch = state.find_branch(spec.branch) is None
    start_point: str | None = None
    if create_branch:
        start_point = spec.track.ref if spec.track is not None else config.default_branch
    return CreateWorktree(
        branch=spec.branch,
        subdirectory=spec.normalized_subdirectory,
        create_branch=create_branch,
        start_point=start_point,
        fallback_start_point=config.default_branch,
    )


def _plan_worktrees(
    config: RepositoryConfig, state: ActualRepositoryState
) -> tuple[list[CreateWorktree], list[PlannedAction]]:
    """Return (creations, creations and removals sorted by subdirectory)."""
    creations = [
        _plan_create_worktree(config, state, spec)
        for spec in config.worktrees
        if state.find_worktree(spec.normalized_subdirectory) is None
    ]

    removals: list[RemoveWorktree] = []
    if config.worktree_policy is WorktreePolicy.EXCLUSIVE:
        configured = {spec.normalized_subdirectory for spec in config.worktrees}
        removals = [
            RemoveWorktree(subdirectory=observed.subdirectory, path=observed.path)
            for observed in state.worktrees
            if observed.subdirectory not in configured
        ]

    combined: list[CreateWorktree | RemoveWorktree] = [*creations, *removals]
    combined.sort(key=lambda action: action.subdirectory)
    return creations, list(combined)


def _plan_fetches(
    config: RepositoryConfig,
    state: ActualRepositoryState,
    creations: list[CreateWorktree],
) -> list[PlannedAction]:
    """Fetch remotes whose branches new worktrees start from but are not known locally."""
    needed: set[str] = set()
    specs = {spec.normalized_subdirectory: spec for spec in config.worktrees}
    for creation in creations:
        spec = specs[creation.subdirectory]
        if not creation.create_branch or spec.track is None:
            continue
        if spec.track.ref not in state.remote_branches:
            needed.add(spec.track.remote)

    configured_order = [remote.name for remote in config.remotes]
    ordered = [name for name in configured_order if name in needed]
    ordered.extend(sorted(needed - set(configured_order)))
    return [FetchRemote(name=name) for name in ordered]


def _plan_tracking(config: RepositoryConfig, state: ActualRepositoryState) -> list[PlannedAction]:
    actions: list[PlannedAction] = []
    for spec in sorted(config.worktrees, key=lambda s: s.normalized_subdirectory):
        if spec.track is None:
            continue
        observed = state.find_worktree(spec.normalized_subdirectory)
        if observed is not None and observed.branch != spec.branch:
            logger.warning(
                '%s: worktree "%s" has "%s" checked out, expected "%s"; not changing tracking',
                config.name,
                observed.subdirectory,
                observed.branch,
                spec.branch,
            )
            continue
        branch = state.find_branch(spec.branch)
        if branch is not None and branch.upstream == spec.track.ref:
            continue
        actions.append(
            SetTrackingBranch(
                branch=spec.branch, remote=spec.track.remote, remote_branch=spec.track.branch
            )
        )
    return actions


def build_plan(
    config: RepositoryConfig, state: ActualRepositoryState
) -> tuple[PlannedAction, ...]:
    """Compute the ordered actions that converge state towards config.

    A missing repository yields a single clone (or init, without remotes);
    everything else is deferred to the next pass, once the clone exists.
    Remotes and worktrees that are not configured are left alone, except
    worktrees under WorktreePolicy.EXCLUSIVE.

    Args:
        config: Desired state
        state: Freshly read actual state for config.path

    Returns:
        Actions in execution order; empty when already converged

    Raises:
        ConfigurationAmbiguousError: Before any plan is produced, if the
            configuration cannot be mapped onto the state unambiguously
    """
    _validate(config, state)

    if not state.exists:
        if not config.remotes:
            return (InitRepository(path=config.path),)
        first = config.remotes[0]
        return (
            CloneRepository(
                path=config.path,
                remote_name=first.name,
                url=first.url,
                branch=config.default_branch,
            ),
        )

    creations, worktree_actions = _plan_worktrees(config, state)
    plan: list[PlannedAction] = [
        *_plan_remotes(config, state),
        *_plan_fetches(config, state, creations),
        *worktree_actions,
        *_plan_tracking(config, state),
    ]
    logger.debug("%s: planned %d action(s)", config.name, len(plan))
    return tuple(plan)
