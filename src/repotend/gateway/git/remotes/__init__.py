"""Git remote operations integration."""

from repotend.gateway.git.remotes.abc import GitRemotes
from repotend.gateway.git.remotes.dry_run import DryRunGitRemotes
from repotend.gateway.git.remotes.fake import FakeGitRemotes
from repotend.gateway.git.remotes.real import RealGitRemotes

__all__ = [
    "GitRemotes",
    "DryRunGitRemotes",
    "FakeGitRemotes",
    "RealGitRemotes",
]
