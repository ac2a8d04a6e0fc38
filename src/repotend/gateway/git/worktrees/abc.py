"""Worktree sub-gateway: list, create and remove linked worktrees."""

from abc import ABC, abstractmethod
from pathlib import Path

from repotend.gateway.git.types import WorktreeInfo


class GitWorktrees(ABC):
    @abstractmethod
    def list_worktrees(self, repo_root: Path) -> list[WorktreeInfo]:
        """Every worktree of the repository, main working tree first (``is_root``)."""
        ...

    @abstractmethod
    def add_worktree(
        self,
        repo_root: Path,
        path: Path,
        *,
        branch: str,
        ref: str | None,
        create_branch: bool,
    ) -> None:
        """Check out branch in a new worktree at path.

        Args:
            repo_root: Repository owning the worktree
            path: Worktree location; must not exist or be an empty directory
            branch: Local branch to check out
            ref: Start point for a new branch; None means HEAD
            create_branch: Create branch from ref instead of checking out an
                existing local branch
        """
        ...

    @abstractmethod
    def remove_worktree(self, repo_root: Path, path: Path, *, force: bool) -> None:
        """Delete the worktree at path; force discards uncommitted changes."""
        ...

    @abstractmethod
    def pull_worktree(self, worktree_path: Path, *, rebase: bool) -> None:
        """Bring the branch checked out at worktree_path up to date with its upstream.

        Without rebase only fast-forwards are allowed.
        """
        ...
