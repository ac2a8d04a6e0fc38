"""Abstract interface for git branch operations."""

from abc import ABC, abstractmethod
from pathlib import Path

from repotend.gateway.git.types import BranchInfo


class GitBranches(ABC):
    """Abstract interface for git branch operations.

    All implementations (real, fake, dry-run) must implement this interface.
    """

    @abstractmethod
    def list_local_branches(self, repo_root: Path) -> list[BranchInfo]:
        """List local branches with their upstreams."""
        ...

    @abstractmethod
    def list_remote_branches(self, repo_root: Path) -> list[str]:
        """List remote-tracking branches as "remote/branch"."""
        ...

    @abstractmethod
    def set_branch_upstream(
        self, repo_root: Path, branch: str, *, remote: str, remote_branch: str
    ) -> None:
        """Configure ``branch`` to track ``remote/remote_branch``.

        Works even when the remote branch has not been fetched (or pushed) yet.
        """
        ...
