"""High-level git operations interface.

This module provides the capability surface the reconciliation engine needs
from its version-control backend, so the engine never shells out directly.

Architecture:
- Git: Abstract base class with repository-level operations and three
  sub-gateways (remotes, branches, worktrees)
- RealGit: Production implementation using subprocess
- FakeGit: In-memory, stateful implementation for tests
- DryRunGit: Delegates reads, prints instead of mutating
"""

from abc import ABC, abstractmethod
from pathlib import Path

from repotend.gateway.git.branches.abc import GitBranches
from repotend.gateway.git.remotes.abc import GitRemotes
from repotend.gateway.git.worktrees.abc import GitWorktrees


class Git(ABC):
    """Abstract interface for git operations.

    All implementations (real, fake, dry-run) must implement this interface.
    This interface contains ONLY runtime operations - no test setup methods.
    """

    @property
    @abstractmethod
    def remotes(self) -> GitRemotes:
        """Access remote operations subgateway."""
        ...

    @property
    @abstractmethod
    def branches(self) -> GitBranches:
        """Access branch operations subgateway."""
        ...

    @property
    @abstractmethod
    def worktrees(self) -> GitWorktrees:
        """Access worktree operations subgateway."""
        ...

    @abstractmethod
    def path_exists(self, path: Path) -> bool:
        """Check whether anything (file or directory) exists at path."""
        ...

    @abstractmethod
    def is_empty_dir(self, path: Path) -> bool:
        """Check whether path is an existing directory with no entries."""
        ...

    @abstractmethod
    def is_repository_path(self, path: Path) -> bool:
        """Check whether path carries git metadata (a .git file or directory)."""
        ...

    @abstractmethod
    def get_repository_root(self, path: Path) -> Path:
        """Return the top-level working tree directory git reports for path.

        Raises:
            CommandError: If git cannot read the repository
        """
        ...

    @abstractmethod
    def get_head_branch(self, repo_root: Path) -> str | None:
        """Return the branch HEAD points to, or None when detached or unborn.

        Raises:
            CommandError: If git cannot read HEAD
        """
        ...

    @abstractmethod
    def clone(self, url: str, path: Path, *, origin: str, branch: str | None) -> None:
        """Clone url into path, naming the remote ``origin``.

        Args:
            url: Remote URL to clone from
            path: Destination directory (must not exist or be empty)
            origin: Name to give the remote
            branch: Branch to check out, or None for the remote's HEAD

        Raises:
            CommandError: If git clone fails
        """
        ...

    @abstractmethod
    def init_repository(self, path: Path) -> None:
        """Create an empty repository at path.

        Raises:
            CommandError: If git init fails
        """
        ...
