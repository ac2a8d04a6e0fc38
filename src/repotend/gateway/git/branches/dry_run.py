"""Dry-run branches: reads pass through, upstream changes are only announced."""

from pathlib import Path

from repotend.gateway.git.branches.abc import GitBranches
from repotend.gateway.git.types import BranchInfo
from repotend.output import user_output


class DryRunGitBranches(GitBranches):
    def __init__(self, wrapped: GitBranches) -> None:
        self._wrapped = wrapped

    def list_local_branches(self, repo_root: Path) -> list[BranchInfo]:
        return self._wrapped.list_local_branches(repo_root)

    def list_remote_branches(self, repo_root: Path) -> list[str]:
        return self._wrapped.list_remote_branches(repo_root)

    def set_branch_upstream(
        self, repo_root: Path, branch: str, *, remote: str, remote_branch: str
    ) -> None:
        user_output(
            f"[DRY RUN] Would run: git config branch.{branch}.remote {remote} "
            f"&& git config branch.{branch}.merge refs/heads/{remote_branch}"
        )
