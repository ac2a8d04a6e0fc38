"""Value types returned by the git gateway."""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class WorktreeInfo:
    """Information about a single git worktree.

    ``prunable`` marks a registered worktree whose directory no longer exists.
    """

    path: Path
    branch: str | None
    is_root: bool = False
    prunable: bool = False


@dataclass(frozen=True)
class BranchInfo:
    """A local branch and its upstream in short form (e.g. "origin/main")."""

    name: str
    upstream: str | None
