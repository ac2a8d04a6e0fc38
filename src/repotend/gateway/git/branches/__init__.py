"""Git branch operations integration."""

from repotend.gateway.git.branches.abc import GitBranches
from repotend.gateway.git.branches.dry_run import DryRunGitBranches
from repotend.gateway.git.branches.fake import FakeGitBranches
from repotend.gateway.git.branches.real import RealGitBranches

__all__ = [
    "GitBranches",
    "DryRunGitBranches",
    "FakeGitBranches",
    "RealGitBranches",
]
