"""Mutable in-memory repository record shared by the fake git sub-gateways."""

from dataclasses import dataclass, field
from pathlib import Path

from repotend.gateway.git.types import WorktreeInfo
from repotend.subprocess_utils import CommandError


@dataclass
class FakeRepository:
    """What the fakes know about one repository.

    Attributes:
        remotes: remote name -> URL
        fetch_refspecs: remote name -> refspec, for remotes added with one
        local_branches: branch name -> upstream ("origin/main") or None
        remote_branches: remote-tracking branches as "remote/branch"
        linked_worktrees: worktrees other than the main working tree
        head: branch checked out in the main working tree, None when detached
    """

    remotes: dict[str, str] = field(default_factory=dict)
    fetch_refspecs: dict[str, str] = field(default_factory=dict)
    local_branches: dict[str, str | None] = field(default_factory=dict)
    remote_branches: list[str] = field(default_factory=list)
    linked_worktrees: list[WorktreeInfo] = field(default_factory=list)
    head: str | None = "main"


def fake_git_error(cmd: list[str], operation_context: str, stderr: str) -> CommandError:
    """Build the error real git would surface, so fakes fail the same way."""
    return CommandError(
        cmd=cmd,
        operation_context=operation_context,
        returncode=128,
        stdout="",
        stderr=f"fatal: {stderr}",
    )


class FakeRepositoryStore:
    """Repositories keyed by path, shared between FakeGit and its sub-gateways.

    ``unreadable`` holds paths that carry git metadata git refuses to read.
    ``remote_sources`` maps a remote URL to the branches it serves (the first
    is its default branch); clone and fetch read from it.
    """

    def __init__(
        self,
        *,
        repositories: dict[Path, FakeRepository],
        unreadable: set[Path],
        remote_sources: dict[str, list[str]],
    ) -> None:
        self.repositories = repositories
        self.unreadable = unreadable
        self.remote_sources = remote_sources

    def get(self, repo_root: Path, operation_context: str) -> FakeRepository:
        if repo_root in self.unreadable or repo_root not in self.repositories:
            raise fake_git_error(
                ["git"], operation_context, f"not a git repository: {repo_root}"
            )
        return self.repositories[repo_root]
