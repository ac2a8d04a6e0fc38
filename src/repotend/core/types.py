"""Desired and observed repository state.

The desired side (RepositoryConfig and friends) is built once per invocation
by the config loader. The observed side (ActualRepositoryState) is read fresh
from disk on every reconciliation pass and never cached.
"""

import posixpath
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Literal

RemoteType = Literal["ssh", "https", "file"]

_SCP_LIKE_URL = re.compile(r"^[\w.-]+@[\w.-]+:")


def detect_remote_type(url: str) -> RemoteType | None:
    """Classify a remote URL by transport.

    Returns None for URLs whose transport is not supported (e.g. plain http).
    """
    if url.startswith("ssh://") or _SCP_LIKE_URL.match(url):
        return "ssh"
    if url.startswith("https://"):
        return "https"
    if url.startswith("file://") or url.startswith("/"):
        return "file"
    return None


def normalize_subdirectory(subdirectory: str) -> str:
    """Normalize a worktree subdirectory to a canonical relative POSIX form.

    "./wt//feature/" and "wt/feature" normalize to the same value, which is
    what makes duplicate detection meaningful.
    """
    return posixpath.normpath(subdirectory.replace("\\", "/"))


class WorktreePolicy(Enum):
    """How worktrees that exist on disk but not in configuration are treated."""

    ADDITIVE = "additive"
    EXCLUSIVE = "exclusive"


@dataclass(frozen=True)
class Remote:
    """A configured git remote."""

    name: str
    url: str
    remote_type: RemoteType | None = None
    fetch_refspec: str | None = None


@dataclass(frozen=True)
class TrackingRef:
    """Remote branch a worktree's local branch should follow."""

    remote: str
    branch: str

    @property
    def ref(self) -> str:
        return f"{self.remote}/{self.branch}"


@dataclass(frozen=True)
class WorktreeSpec:
    """A worktree the configuration asks for.

    Attributes:
        branch: Local branch checked out in the worktree
        subdirectory: Location relative to the repository path
        track: Remote branch to set as upstream, or None for no tracking
    """

    branch: str
    subdirectory: str
    track: TrackingRef | None = None

    @property
    def normalized_subdirectory(self) -> str:
        return normalize_subdirectory(self.subdirectory)


@dataclass(frozen=True)
class RepositoryConfig:
    """Desired state of one repository.

    An empty ``remotes`` tuple means the repository is local-only and will
    be initialized rather than cloned.
    """

    name: str
    path: Path
    remotes: tuple[Remote, ...] = ()
    worktrees: tuple[WorktreeSpec, ...] = ()
    worktree_policy: WorktreePolicy = WorktreePolicy.ADDITIVE
    default_branch: str | None = None

    def find_remote(self, name: str) -> Remote | None:
        for remote in self.remotes:
            if remote.name == name:
                return remote
        return None


@dataclass(frozen=True)
class BranchState:
    """A local branch and its configured upstream (e.g. "origin/main")."""

    name: str
    upstream: str | None


@dataclass(frozen=True)
class WorktreeState:
    """A linked worktree observed on disk.

    ``subdirectory`` is relative to the repository path when the worktree
    lives inside it, otherwise the absolute path as a string.
    """

    subdirectory: str
    path: Path
    branch: str | None


def _empty_remotes() -> Mapping[str, str]:
    return MappingProxyType({})


@dataclass(frozen=True)
class ActualRepositoryState:
    """Snapshot of a repository as found on disk.

    Rebuilt for every pass. The main working tree is not listed in
    ``worktrees``; only linked worktrees are.
    """

    path: Path
    exists: bool
    remotes: Mapping[str, str] = field(default_factory=_empty_remotes)
    branches: tuple[BranchState, ...] = ()
    remote_branches: tuple[str, ...] = ()
    worktrees: tuple[WorktreeState, ...] = ()
    head: str | None = None

    @staticmethod
    def absent(path: Path) -> "ActualRepositoryState":
        """State for a path that holds no repository."""
        return ActualRepositoryState(path=path, exists=False)

    def find_branch(self, name: str) -> BranchState | None:
        for branch in self.branches:
            if branch.name == name:
                return branch
        return None

    def find_worktree(self, subdirectory: str) -> WorktreeState | None:
        for worktree in self.worktrees:
            if worktree.subdirectory == subdirectory:
                return worktree
        return None
