"""Fake git worktree operations for testing."""

from pathlib import Path

from repotend.gateway.git.fake_repository import FakeRepositoryStore, fake_git_error
from repotend.gateway.git.types import WorktreeInfo
from repotend.gateway.git.worktrees.abc import GitWorktrees


class FakeGitWorktrees(GitWorktrees):
    """In-memory fake implementation of git worktree operations.

    Mimics the git checks that matter to reconciliation: a branch can only be
    checked out once, ``-b`` refuses existing branches, and the start point
    must exist. Creating a branch from a remote-tracking branch sets it as
    upstream, like git's default branch.autoSetupMerge.

    Constructor Injection:
    - add_worktree_raises: worktree path -> exception raised by add_worktree()
    - remove_worktree_raises: worktree path -> exception raised by remove_worktree()
    - pull_worktree_raises: worktree path -> exception raised by pull_worktree()

    Mutation Tracking:
    - added_worktrees: list of (path, branch)
    - removed_worktrees: list of paths
    - pulled_worktrees: list of (path, rebase)
    """

    def __init__(
        self,
        *,
        store: FakeRepositoryStore,
        add_worktree_raises: dict[Path, Exception] | None = None,
        remove_worktree_raises: dict[Path, Exception] | None = None,
        pull_worktree_raises: dict[Path, Exception] | None = None,
    ) -> None:
        self._store = store
        self._add_worktree_raises = add_worktree_raises or {}
        self._remove_worktree_raises = remove_worktree_raises or {}
        self._pull_worktree_raises = pull_worktree_raises or {}

        self._added_worktrees: list[tuple[Path, str]] = []
        self._removed_worktrees: list[Path] = []
        self._pulled_worktrees: list[tuple[Path, bool]] = []

    def list_worktrees(self, repo_root: Path) -> list[WorktreeInfo]:
        repo = self._store.get(repo_root, f"list worktrees of {repo_root}")
        root = WorktreeInfo(path=repo_root, branch=repo.head, is_root=True)
        return [root, *repo.linked_worktrees]

    def add_worktree(
        self,
        repo_root: Path,
        path: Path,
        *,
        branch: str,
        ref: str | None,
        create_branch: bool,
    ) -> None:
        context = f"create worktree {path} on branch '{branch}'"
        cmd = ["git", "worktree", "add", str(path), branch]
        repo = self._store.get(repo_root, context)
        if path in self._add_worktree_raises:
            raise self._add_worktree_raises[path]
        repo.linked_worktrees = [wt for wt in repo.linked_worktrees if not wt.prunable]

        checked_out = {wt.branch for wt in repo.linked_worktrees}
        checked_out.add(repo.head)
        if create_branch:
            if branch in repo.local_branches:
                raise fake_git_error(cmd, context, f"a branch named '{branch}' already exists")
            upstream: str | None = None
            if ref is not None:
                if ref in repo.remote_branches:
                    upstream = ref
                elif ref not in repo.local_branches:
                    raise fake_git_error(cmd, context, f"invalid reference: {ref}")
            repo.local_branches[branch] = upstream
        else:
            if branch not in repo.local_branches:
                raise fake_git_error(cmd, context, f"invalid reference: {branch}")
            if branch in checked_out:
                raise fake_git_error(cmd, context, f"'{branch}' is already checked out")

        repo.linked_worktrees.append(WorktreeInfo(path=path, branch=branch))
        self._added_worktrees.append((path, branch))

    def remove_worktree(self, repo_root: Path, path: Path, *, force: bool) -> None:
        context = f"remove worktree {path}"
        repo = self._store.get(repo_root, context)
        if path in self._remove_worktree_raises:
            raise self._remove_worktree_raises[path]
        remaining = [wt for wt in repo.linked_worktrees if wt.path != path]
        if len(remaining) == len(repo.linked_worktrees):
            raise fake_git_error(
                ["git", "worktree", "remove", str(path)], context, f"'{path}' is not a working tree"
            )
        repo.linked_worktrees = remaining
        self._removed_worktrees.append(path)

    def pull_worktree(self, worktree_path: Path, *, rebase: bool) -> None:
        if worktree_path in self._pull_worktree_raises:
            raise self._pull_worktree_raises[worktree_path]
        self._pulled_worktrees.append((worktree_path, rebase))

    @property
    def added_worktrees(self) -> list[tuple[Path, str]]:
        return list(self._added_worktrees)

    @property
    def removed_worktrees(self) -> list[Path]:
        return list(self._removed_worktrees)

    @property
    def pulled_worktrees(self) -> list[tuple[Path, bool]]:
        return list(self._pulled_worktrees)
