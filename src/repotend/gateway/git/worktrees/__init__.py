"""Git worktree operations integration."""

from repotend.gateway.git.worktrees.abc import GitWorktrees
from repotend.gateway.git.worktrees.dry_run import DryRunGitWorktrees
from repotend.gateway.git.worktrees.fake import FakeGitWorktrees
from repotend.gateway.git.worktrees.real import RealGitWorktrees

__all__ = [
    "GitWorktrees",
    "DryRunGitWorktrees",
    "FakeGitWorktrees",
    "RealGitWorktrees",
]
