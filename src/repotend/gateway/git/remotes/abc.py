"""Abstract interface for git remote operations."""

from abc import ABC, abstractmethod
from pathlib import Path


class GitRemotes(ABC):
    """Abstract interface for git remote operations.

    All implementations (real, fake, dry-run) must implement this interface.
    """

    @abstractmethod
    def list_remotes(self, repo_root: Path) -> dict[str, str]:
        """Return a mapping of remote name -> fetch URL."""
        ...

    @abstractmethod
    def add_remote(
        self, repo_root: Path, name: str, url: str, *, fetch_refspec: str | None
    ) -> None:
        """Add a remote, optionally replacing git's default fetch refspec."""
        ...

    @abstractmethod
    def set_remote_url(self, repo_root: Path, name: str, url: str) -> None:
        """Point an existing remote at a new URL."""
        ...

    @abstractmethod
    def fetch_remote(self, repo_root: Path, name: str) -> None:
        """Fetch all branches of a remote."""
        ...
