"""Find repositories that already exist below a directory."""

import logging
from collections.abc import Iterator, Sequence
from pathlib import Path

from repotend.core.state_reader import read_repository_state
from repotend.core.types import (
    ActualRepositoryState,
    Remote,
    RepositoryConfig,
    TrackingRef,
    WorktreeSpec,
    detect_remote_type,
)
from repotend.gateway.git.abc import Git

logger = logging.getLogger(__name__)


def _walk(git: Git, directory: Path) -> Iterator[Path]:
    if git.is_repository_path(directory):
        yield directory
        return
    try:
        children = sorted(directory.iterdir())
    except PermissionError:
        logger.warning("Skipping %s: permission denied", directory)
        return
    for child in children:
        if child.is_symlink() or not child.is_dir():
            continue
        yield from _walk(git, child)


def find_repositories(git: Git, root: Path) -> list[Path]:
    """Return repository paths under root (root included), sorted lexically.

    Symlinks are not followed, and nothing below a repository is searched,
    so linked worktrees and nested checkouts are not reported separately.
    """
    if not root.is_dir():
        return []
    return sorted(_walk(git, root))


def split_upstream(upstream: str | None, remotes: Sequence[str]) -> TrackingRef | None:
    """Split "origin/feature/x" using the known remote names."""
    if upstream is None:
        return None
    for remote in sorted(remotes, key=len, reverse=True):
        prefix = f"{remote}/"
        if upstream.startswith(prefix):
            return TrackingRef(remote=remote, branch=upstream[len(prefix) :])
    return None


def _describe(name: str, state: ActualRepositoryState) -> RepositoryConfig:
    remotes = tuple(
        Remote(name=remote_name, url=url, remote_type=detect_remote_type(url))
        for remote_name, url in sorted(state.remotes.items())
    )
    worktrees: list[WorktreeSpec] = []
    for observed in state.worktrees:
        if observed.branch is None or Path(observed.subdirectory).is_absolute():
            logger.info("%s: not describing worktree at %s", name, observed.path)
            continue
        branch = state.find_branch(observed.branch)
        worktrees.append(
            WorktreeSpec(
                branch=observed.branch,
                subdirectory=observed.subdirectory,
                track=split_upstream(
                    branch.upstream if branch is not None else None, list(state.remotes)
                ),
            )
        )
    return RepositoryConfig(
        name=name,
        path=state.path,
        remotes=remotes,
        worktrees=tuple(worktrees),
        default_branch=state.head,
    )


def describe_tree(git: Git, root: Path) -> tuple[RepositoryConfig, ...]:
    """Generate configuration reproducing the repositories found under root.

    Raises:
        RepositoryUnreadableError: If a found repository cannot be read
    """
    configs: list[RepositoryConfig] = []
    for path in find_repositories(git, root):
        name = path.relative_to(root).as_posix() if path != root else path.name
        state = read_repository_state(git, path)
        configs.append(_describe(name, state))
    return tuple(configs)


def find_unmanaged_repositories(
    git: Git, root: Path, configs: Sequence[RepositoryConfig]
) -> list[Path]:
    """Repositories under root that no configuration entry points at."""
    managed = {config.path.absolute() for config in configs}
    return [path for path in find_repositories(git, root) if path.absolute() not in managed]
