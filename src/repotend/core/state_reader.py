"""Read the actual state of a repository from disk."""

import logging
from pathlib import Path
from types import MappingProxyType

from repotend.core.errors import RepositoryUnreadableError
from repotend.core.types import ActualRepositoryState, BranchState, WorktreeState
from repotend.gateway.git.abc import Git
from repotend.subprocess_utils import CommandError

logger = logging.getLogger(__name__)


def _worktree_subdirectory(repo_path: Path, worktree_path: Path) -> str:
    """Express a worktree location relative to the repository when possible."""
    try:
        relative = worktree_path.resolve().relative_to(repo_path.resolve())
    except ValueError:
        return str(worktree_path)
    return relative.as_posix()


def read_repository_state(git: Git, path: Path) -> ActualRepositoryState:
    """Snapshot the repository at path.

    A missing path, or a path without git metadata, is reported as an absent
    repository rather than an error; the planner decides what to do about it.

    Args:
        git: Git gateway (read operations only are used)
        path: Configured repository location

    Returns:
        The observed state

    Raises:
        RepositoryUnreadableError: If git metadata is present but git cannot
            read it, or it belongs to a different working tree
    """
    try:
        if not git.path_exists(path) or not git.is_repository_path(path):
            logger.debug("No repository at %s", path)
            return ActualRepositoryState.absent(path)

        root = git.get_repository_root(path)
        if root.resolve() != path.resolve():
            raise RepositoryUnreadableError(
                f"{path} has git metadata but git resolves it to {root}"
            )
        remotes = git.remotes.list_remotes(path)
        branches = git.branches.list_local_branches(path)
        remote_branches = git.branches.list_remote_branches(path)
        worktrees = git.worktrees.list_worktrees(path)
        head = git.get_head_branch(path)
        # Registered worktrees whose directory was deleted are as good as absent
        present = [
            wt
            for wt in worktrees
            if not wt.is_root and not wt.prunable and git.path_exists(wt.path)
        ]
    except (CommandError, OSError, UnicodeError) as e:
        raise RepositoryUnreadableError(f"Unable to read repository at {path}: {e}") from e

    for wt in worktrees:
        if not wt.is_root and wt not in present:
            logger.info("Ignoring worktree %s of %s: its directory is gone", wt.path, path)

    linked = sorted(
        (
            WorktreeState(
                subdirectory=_worktree_subdirectory(path, wt.path),
                path=wt.path,
                branch=wt.branch,
            )
            for wt in present
        ),
        key=lambda wt: wt.subdirectory,
    )

    state = ActualRepositoryState(
        path=path,
        exists=True,
        remotes=MappingProxyType(dict(sorted(remotes.items()))),
        branches=tuple(
            sorted(
                (BranchState(name=b.name, upstream=b.upstream) for b in branches),
                key=lambda b: b.name,
            )
        ),
        remote_branches=tuple(sorted(remote_branches)),
        worktrees=tuple(linked),
        head=head,
    )
    logger.debug(
        "Read %s: %d remote(s), %d branch(es), %d linked worktree(s)",
        path,
        len(state.remotes),
        len(state.branches),
        len(state.worktrees),
    )
    return state
