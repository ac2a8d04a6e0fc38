"""Worktree operations backed by the git binary."""

import logging
from pathlib import Path

from repotend.gateway.git.types import WorktreeInfo
from repotend.gateway.git.worktrees.abc import GitWorktrees
from repotend.subprocess_utils import copied_env_for_git_subprocess, run_subprocess_with_context

logger = logging.getLogger(__name__)


def parse_worktree_porcelain(output: str) -> list[WorktreeInfo]:
    """Parse ``git worktree list --porcelain``.

    Records are separated by blank lines. A record without a ``branch`` line
    is detached (or bare) and gets ``branch=None``. A ``prunable`` line means the
    directory is gone. git always lists the main working tree first.
    """
    records: list[dict[str, str]] = []
    record: dict[str, str] = {}
    for raw in output.splitlines():
        if not raw.strip():
            if record:
                records.append(record)
            record = {}
            continue
        key, _, value = raw.strip().partition(" ")
        record[key] = value
    if record:
        records.append(record)

    parsed: list[WorktreeInfo] = []
    for position, fields in enumerate(entry for entry in records if "worktree" in entry):
        branch_ref = fields.get("branch")
        parsed.append(
            WorktreeInfo(
                path=Path(fields["worktree"]),
                branch=branch_ref.removeprefix("refs/heads/") if branch_ref else None,
                is_root=position == 0,
                prunable="prunable" in fields,
            )
        )
    return parsed


class RealGitWorktrees(GitWorktrees):
    def list_worktrees(self, repo_root: Path) -> list[WorktreeInfo]:
        result = run_subprocess_with_context(
            ["git", "worktree", "list", "--porcelain"],
            operation_context=f"list worktrees of {repo_root}",
            cwd=repo_root,
        )
        return parse_worktree_porcelain(result.stdout)

    def add_worktree(
        self,
        repo_root: Path,
        path: Path,
        *,
        branch: str,
        ref: str | None,
        create_branch: bool,
    ) -> None:
        # A registration left behind by a deleted directory blocks the path and branch
        run_subprocess_with_context(
            ["git", "worktree", "prune"],
            operation_context=f"prune stale worktrees of {repo_root}",
            cwd=repo_root,
        )
        if create_branch:
            start = ref if ref is not None else "HEAD"
            cmd = ["git", "worktree", "add", "-b", branch, str(path), start]
            context = f"create worktree {path} on new branch '{branch}' from {start}"
        else:
            cmd = ["git", "worktree", "add", str(path), branch]
            context = f"create worktree {path} on branch '{branch}'"
        logger.info("Creating worktree %s (branch %s)", path, branch)
        run_subprocess_with_context(cmd, operation_context=context, cwd=repo_root)

    def remove_worktree(self, repo_root: Path, path: Path, *, force: bool) -> None:
        """Remove the worktree, then prune metadata left by deleted directories."""
        flags = ["--force"] if force else []
        logger.info("Removing worktree %s", path)
        run_subprocess_with_context(
            ["git", "worktree", "remove", *flags, str(path)],
            operation_context=f"remove worktree {path}",
            cwd=repo_root,
        )
        run_subprocess_with_context(
            ["git", "worktree", "prune"],
            operation_context=f"prune stale worktrees of {repo_root}",
            cwd=repo_root,
        )

    def pull_worktree(self, worktree_path: Path, *, rebase: bool) -> None:
        mode = "--rebase" if rebase else "--ff-only"
        logger.info("Pulling %s (%s)", worktree_path, mode)
        run_subprocess_with_context(
            ["git", "pull", mode],
            operation_context=f"pull worktree {worktree_path}",
            cwd=worktree_path,
            env=copied_env_for_git_subprocess(),
        )
