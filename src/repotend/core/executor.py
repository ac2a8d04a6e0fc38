"""Apply a repository's plan against the git gateway."""

import logging
from collections.abc import Sequence
from pathlib import Path

from repotend.core.actions import (
    ActionFailed,
    ActionResult,
    ActionSucceeded,
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
from repotend.core.errors import (
    BackendOperationFailedError,
    ExecutionError,
    FilesystemConflictError,
    NetworkFailureError,
)
from repotend.core.types import RepositoryConfig
from repotend.gateway.git.abc import Git
from repotend.subprocess_utils import CommandError

logger = logging.getLogger(__name__)

# Substrings of git's stderr that mean the remote could not be reached.
NETWORK_FAILURE_MARKERS = (
    "could not resolve host",
    "could not read from remote repository",
    "unable to access",
    "connection refused",
    "connection timed out",
    "connection reset",
    "network is unreachable",
    "operation timed out",
    "the remote end hung up unexpectedly",
    "early eof",
    "does not appear to be a git repository",
    "repository not found",
    "terminal prompts disabled",
)


def is_network_failure(stderr: str) -> bool:
    lowered = stderr.lower()
    return any(marker in lowered for marker in NETWORK_FAILURE_MARKERS)


def classify_command_error(action: PlannedAction, error: CommandError) -> ExecutionError:
    """Map a failed git command onto the execution error taxonomy.

    Only clone and fetch talk to remotes, so only they can fail with a
    NetworkFailureError; git rejecting anything else is a backend failure.
    """
    if isinstance(action, (CloneRepository, FetchRemote)) and is_network_failure(error.stderr):
        return NetworkFailureError(str(error))
    return BackendOperationFailedError(str(error))


def _ensure_target_free(git: Git, path: Path) -> None:
    if git.path_exists(path) and not git.is_empty_dir(path):
        raise FilesystemConflictError(f"{path} already exists and is not an empty directory")


def _resolve_start_point(git: Git, repo_root: Path, action: CreateWorktree) -> str | None:
    """Pick the ref a new branch starts from.

    A tracked remote branch may not exist (yet) on the remote; the branch then
    starts from the fallback and tracking is configured anyway, so the first
    push creates the remote branch.
    """
    if not action.create_branch or action.start_point is None:
        return action.start_point
    local = {branch.name for branch in git.branches.list_local_branches(repo_root)}
    if action.start_point in local:
        return action.start_point
    if action.start_point in git.branches.list_remote_branches(repo_root):
        return action.start_point
    logger.info(
        'Start point "%s" for branch "%s" does not exist, using %s',
        action.start_point,
        action.branch,
        action.fallback_start_point or "HEAD",
    )
    return action.fallback_start_point


def _apply(git: Git, config: RepositoryConfig, action: PlannedAction) -> None:
    repo_root = config.path
    if isinstance(action, InitRepository):
        _ensure_target_free(git, action.path)
        git.init_repository(action.path)
    elif isinstance(action, CloneRepository):
        _ensure_target_free(git, action.path)
        git.clone(action.url, action.path, origin=action.remote_name, branch=action.branch)
    elif isinstance(action, AddRemote):
        git.remotes.add_remote(
            repo_root, action.name, action.url, fetch_refspec=action.fetch_refspec
        )
    elif isinstance(action, UpdateRemoteUrl):
        git.remotes.set_remote_url(repo_root, action.name, action.url)
    elif isinstance(action, FetchRemote):
        git.remotes.fetch_remote(repo_root, action.name)
    elif isinstance(action, CreateWorktree):
        path = repo_root / action.subdirectory
        _ensure_target_free(git, path)
        git.worktrees.add_worktree(
            repo_root,
            path,
            branch=action.branch,
            ref=_resolve_start_point(git, repo_root, action),
            create_branch=action.create_branch,
        )
    elif isinstance(action, RemoveWorktree):
        git.worktrees.remove_worktree(repo_root, action.path, force=False)
    elif isinstance(action, SetTrackingBranch):
        git.branches.set_branch_upstream(
            repo_root, action.branch, remote=action.remote, remote_branch=action.remote_branch
        )
    else:
        raise TypeError(f"Unknown action: {action!r}")


def apply_action(git: Git, config: RepositoryConfig, action: PlannedAction) -> None:
    """Execute a single action.

    Raises:
        NetworkFailureError: A clone or fetch could not reach its remote
        FilesystemConflictError: The target path is occupied
        BackendOperationFailedError: Git rejected the operation
    """
    try:
        _apply(git, config, action)
    except CommandError as e:
        raise classify_command_error(action, e) from e
    except OSError as e:
        raise FilesystemConflictError(f"{action.describe()}: {e}") from e


def execute_plan(
    git: Git, config: RepositoryConfig, plan: Sequence[PlannedAction]
) -> tuple[ActionResult, ...]:
    """Run a repository's plan in order, stopping at the first failure.

    Later actions are assumed to depend on earlier ones, so nothing after a
    failure is attempted. Failures are returned, never raised.

    Args:
        git: Git gateway
        config: Repository the plan belongs to
        plan: Actions from build_plan(), in order

    Returns:
        One result per attempted action; shorter than plan after a failure
    """
    results: list[ActionResult] = []
    for action in plan:
        try:
            apply_action(git, config, action)
        except ExecutionError as e:
            logger.warning(
                "%s: %s failed (%s): %s", config.name, action.kind, e.error_kind, e.message
            )
            results.append(ActionFailed(action=action, error_kind=e.error_kind, message=e.message))
            break
        logger.info("%s: %s", config.name, action.describe())
        results.append(ActionSucceeded(action=action))
    return tuple(results)
