"""Dry-run worktrees: reads pass through, writes are only announced."""

from pathlib import Path

from repotend.gateway.git.types import WorktreeInfo
from repotend.gateway.git.worktrees.abc import GitWorktrees
from repotend.output import user_output


class DryRunGitWorktrees(GitWorktrees):
    def __init__(self, wrapped: GitWorktrees) -> None:
        self._wrapped = wrapped

    def list_worktrees(self, repo_root: Path) -> list[WorktreeInfo]:
        return self._wrapped.list_worktrees(repo_root)

    def add_worktree(
        self,
        repo_root: Path,
        path: Path,
        *,
        branch: str,
        ref: str | None,
        create_branch: bool,
    ) -> None:
        args = ["-b", branch, str(path), ref or "HEAD"] if create_branch else [str(path), branch]
        user_output(f"[DRY RUN] Would run: git worktree add {' '.join(args)}")

    def remove_worktree(self, repo_root: Path, path: Path, *, force: bool) -> None:
        args = ["--force", str(path)] if force else [str(path)]
        user_output(f"[DRY RUN] Would run: git worktree remove {' '.join(args)}")

    def pull_worktree(self, worktree_path: Path, *, rebase: bool) -> None:
        mode = "--rebase" if rebase else "--ff-only"
        user_output(f"[DRY RUN] Would run: git pull {mode} (in {worktree_path})")
