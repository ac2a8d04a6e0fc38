"""Helpers shared by the worktree commands."""

from pathlib import Path

from repotend.cli.commands.repos.common import exit_with_error
from repotend.cli.render import WorktreeRow
from repotend.context import RepotendContext
from repotend.gateway.git.abc import Git
from repotend.subprocess_utils import CommandError


def discover_repository_root(ctx: RepotendContext) -> Path:
    """Main working tree of the repository containing the current directory.

    Called from inside a linked worktree this still returns the main one, so
    every worktree command sees the same set of worktrees.
    """
    try:
        toplevel = ctx.git.get_repository_root(ctx.cwd)
        worktrees = ctx.git.worktrees.list_worktrees(toplevel)
    except CommandError as e:
        exit_with_error(f"Not inside a git repository: {e}")
    for wt in worktrees:
        if wt.is_root:
            return wt.path
    return toplevel


def worktree_name(root: Path, path: Path) -> str:
    if path == root:
        return "."
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return str(path)


def collect_worktree_rows(git: Git, root: Path) -> list[WorktreeRow]:
    """Every worktree, main one first, with the upstream of its branch."""
    worktrees = git.worktrees.list_worktrees(root)
    upstreams = {branch.name: branch.upstream for branch in git.branches.list_local_branches(root)}
    rows: list[WorktreeRow] = []
    for wt in worktrees:
        missing = not wt.is_root and (wt.prunable or not git.path_exists(wt.path))
        rows.append(
            WorktreeRow(
                name=worktree_name(root, wt.path),
                path=wt.path,
                branch=wt.branch,
                upstream=upstreams.get(wt.branch) if wt.branch is not None else None,
                missing=missing,
            )
        )
    return rows
