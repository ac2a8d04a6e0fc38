"""No-op Git wrapper for dry-run mode."""

from pathlib import Path

from repotend.gateway.git.abc import Git
from repotend.gateway.git.branches.abc import GitBranches
from repotend.gateway.git.branches.dry_run import DryRunGitBranches
from repotend.gateway.git.remotes.abc import GitRemotes
from repotend.gateway.git.remotes.dry_run import DryRunGitRemotes
from repotend.gateway.git.worktrees.abc import GitWorktrees
from repotend.gateway.git.worktrees.dry_run import DryRunGitWorktrees
from repotend.output import user_output


class DryRunGit(Git):
    """No-op wrapper that prevents execution of destructive operations.

    Reads are delegated to the wrapped implementation so plans are computed
    against the real on-disk state; writes only print what would run.
    """

    def __init__(self, wrapped: Git) -> None:
        self._wrapped = wrapped
        self._remotes = DryRunGitRemotes(wrapped.remotes)
        self._branches = DryRunGitBranches(wrapped.branches)
        self._worktrees = DryRunGitWorktrees(wrapped.worktrees)

    @property
    def remotes(self) -> GitRemotes:
        return self._remotes

    @property
    def branches(self) -> GitBranches:
        return self._branches

    @property
    def worktrees(self) -> GitWorktrees:
        return self._worktrees

    # Read-only: delegate
    def path_exists(self, path: Path) -> bool:
        return self._wrapped.path_exists(path)

    def is_empty_dir(self, path: Path) -> bool:
        return self._wrapped.is_empty_dir(path)

    def is_repository_path(self, path: Path) -> bool:
        return self._wrapped.is_repository_path(path)

    def get_repository_root(self, path: Path) -> Path:
        return self._wrapped.get_repository_root(path)

    def get_head_branch(self, repo_root: Path) -> str | None:
        return self._wrapped.get_head_branch(repo_root)

    # Write operations: print dry-run message
    def clone(self, url: str, path: Path, *, origin: str, branch: str | None) -> None:
        branch_flag = f"--branch {branch} " if branch is not None else ""
        user_output(f"[DRY RUN] Would run: git clone --origin {origin} {branch_flag}{url} {path}")

    def init_repository(self, path: Path) -> None:
        user_output(f"[DRY RUN] Would run: git init {path}")
