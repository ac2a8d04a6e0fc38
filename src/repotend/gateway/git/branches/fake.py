"""Fake git branch operations for testing."""

from pathlib import Path

from repotend.gateway.git.branches.abc import GitBranches
from repotend.gateway.git.fake_repository import FakeRepositoryStore, fake_git_error
from repotend.gateway.git.types import BranchInfo


class FakeGitBranches(GitBranches):
    """In-memory fake implementation of git branch operations.

    Mutation Tracking:
    - upstream_updates: list of (repo_root, branch, "remote/remote_branch")
    """

    def __init__(self, *, store: FakeRepositoryStore) -> None:
        self._store = store
        self._upstream_updates: list[tuple[Path, str, str]] = []

    def list_local_branches(self, repo_root: Path) -> list[BranchInfo]:
        repo = self._store.get(repo_root, "list local branches")
        return [
            BranchInfo(name=name, upstream=upstream)
            for name, upstream in sorted(repo.local_branches.items())
        ]

    def list_remote_branches(self, repo_root: Path) -> list[str]:
        return sorted(self._store.get(repo_root, "list remote branches").remote_branches)

    def set_branch_upstream(
        self, repo_root: Path, branch: str, *, remote: str, remote_branch: str
    ) -> None:
        repo = self._store.get(repo_root, f"set upstream of '{branch}'")
        if branch not in repo.local_branches:
            raise fake_git_error(
                ["git", "config", f"branch.{branch}.remote", remote],
                f"set upstream remote of '{branch}'",
                f"branch '{branch}' does not exist",
            )
        upstream = f"{remote}/{remote_branch}"
        repo.local_branches[branch] = upstream
        self._upstream_updates.append((repo_root, branch, upstream))

    @property
    def upstream_updates(self) -> list[tuple[Path, str, str]]:
        return list(self._upstream_updates)
