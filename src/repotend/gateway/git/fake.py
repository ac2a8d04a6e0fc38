"""Fake git operations for testing.

FakeGit is an in-memory implementation that accepts pre-configured state
in its constructor. Construct instances directly with keyword arguments.
"""

from pathlib import Path

from repotend.gateway.git.abc import Git
from repotend.gateway.git.branches.abc import GitBranches
from repotend.gateway.git.branches.fake import FakeGitBranches
from repotend.gateway.git.fake_repository import (
    FakeRepository,
    FakeRepositoryStore,
    fake_git_error,
)
from repotend.gateway.git.remotes.abc import GitRemotes
from repotend.gateway.git.remotes.fake import FakeGitRemotes
from repotend.gateway.git.worktrees.abc import GitWorktrees
from repotend.gateway.git.worktrees.fake import FakeGitWorktrees


class FakeGit(Git):
    """In-memory fake implementation of git operations.

    State Management:
    -----------------
    This fake maintains mutable state to simulate git's stateful behavior.
    Cloning, adding remotes and adding worktrees modify the shared
    FakeRepositoryStore, so a second reconciliation pass observes the effects
    of the first one, which is what convergence tests rely on.

    Constructor Injection:
    ---------------------
    All INITIAL state is provided via constructor. Runtime mutations occur
    through operation methods.

    Mutation Tracking:
    -----------------
    - cloned: (url, path, origin, branch) tuples from clone()
    - initialized: paths from init_repository()
    - added_remotes / updated_remote_urls / fetched_remotes
    - added_worktrees / removed_worktrees / pulled_worktrees
    - upstream_updates

    Examples:
    ---------
        git = FakeGit(
            repositories={repo: FakeRepository(remotes={"origin": "https://x/r.git"})},
            remote_sources={"https://x/r.git": ["main", "feature"]},
        )
        git.remotes.add_remote(repo, "fork", "https://y/r.git", fetch_refspec=None)
        assert git.remotes.list_remotes(repo)["fork"] == "https://y/r.git"
    """

    def __init__(
        self,
        *,
        repositories: dict[Path, FakeRepository] | None = None,
        unreadable_repositories: set[Path] | None = None,
        remote_sources: dict[str, list[str]] | None = None,
        existing_paths: set[Path] | None = None,
        empty_dirs: set[Path] | None = None,
        clone_raises: dict[Path, Exception] | None = None,
        fetch_raises: dict[tuple[Path, str], Exception] | None = None,
        add_remote_raises: dict[Path, Exception] | None = None,
        add_worktree_raises: dict[Path, Exception] | None = None,
        remove_worktree_raises: dict[Path, Exception] | None = None,
        pull_worktree_raises: dict[Path, Exception] | None = None,
    ) -> None:
        """Create FakeGit with pre-configured state.

        Args:
            repositories: Mapping of repo path -> FakeRepository
            unreadable_repositories: Paths with git metadata that fail every read
            remote_sources: Mapping of remote URL -> branches it serves (first is
                the default branch). URLs missing here clone with a single "main".
            existing_paths: Occupied non-repository paths (files or non-empty dirs)
            empty_dirs: Existing empty directories
            clone_raises: Mapping of destination path -> exception raised by clone()
            fetch_raises: Mapping of (repo path, remote) -> exception raised by fetch
            add_remote_raises: Mapping of repo path -> exception raised by add_remote
            add_worktree_raises: Mapping of worktree path -> exception raised by add
            remove_worktree_raises: Mapping of worktree path -> exception raised by remove
            pull_worktree_raises: Mapping of worktree path -> exception raised by pull
        """
        self._store = FakeRepositoryStore(
            repositories=repositories if repositories is not None else {},
            unreadable=unreadable_repositories or set(),
            remote_sources=remote_sources or {},
        )
        self._existing_paths = existing_paths or set()
        self._empty_dirs = set(empty_dirs or set())
        self._clone_raises = clone_raises or {}

        self._remotes = FakeGitRemotes(
            store=self._store, fetch_raises=fetch_raises, add_remote_raises=add_remote_raises
        )
        self._branches = FakeGitBranches(store=self._store)
        self._worktrees = FakeGitWorktrees(
            store=self._store,
            add_worktree_raises=add_worktree_raises,
            remove_worktree_raises=remove_worktree_raises,
            pull_worktree_raises=pull_worktree_raises,
        )

        self._cloned: list[tuple[str, Path, str, str | None]] = []
        self._initialized: list[Path] = []

    @property
    def remotes(self) -> GitRemotes:
        return self._remotes

    @property
    def branches(self) -> GitBranches:
        return self._branches

    @property
    def worktrees(self) -> GitWorktrees:
        return self._worktrees

    def _worktree_paths(self) -> set[Path]:
        return {
            wt.path
            for repo in self._store.repositories.values()
            for wt in repo.linked_worktrees
            if not wt.prunable
        }

    def path_exists(self, path: Path) -> bool:
        return (
            path in self._store.repositories
            or path in self._store.unreadable
            or path in self._existing_paths
            or path in self._empty_dirs
            or path in self._worktree_paths()
        )

    def is_empty_dir(self, path: Path) -> bool:
        return path in self._empty_dirs

    def is_repository_path(self, path: Path) -> bool:
        return path in self._store.repositories or path in self._store.unreadable

    def get_repository_root(self, path: Path) -> Path:
        self._store.get(path, f"read repository at {path}")
        return path

    def get_head_branch(self, repo_root: Path) -> str | None:
        return self._store.get(repo_root, f"read HEAD of {repo_root}").head

    def clone(self, url: str, path: Path, *, origin: str, branch: str | None) -> None:
        """Clone from remote_sources (mutates internal state)."""
        context = f"clone '{url}' into {path}"
        cmd = ["git", "clone", "--origin", origin, "--", url, str(path)]
        if path in self._clone_raises:
            raise self._clone_raises[path]
        if path in self._store.repositories or (
            path in self._existing_paths and path not in self._empty_dirs
        ):
            raise fake_git_error(
                cmd, context, f"destination path '{path}' already exists and is not empty"
            )

        served = self._store.remote_sources.get(url, ["main"])
        checkout = branch if branch is not None else served[0]
        if checkout not in served:
            raise fake_git_error(cmd, context, f"Remote branch {checkout} not found in upstream")

        self._store.repositories[path] = FakeRepository(
            remotes={origin: url},
            local_branches={checkout: f"{origin}/{checkout}"},
            remote_branches=[f"{origin}/{name}" for name in served],
            head=checkout,
        )
        self._empty_dirs.discard(path)
        self._cloned.append((url, path, origin, branch))

    def init_repository(self, path: Path) -> None:
        if path in self._store.repositories:
            raise fake_git_error(
                ["git", "init", str(path)], f"initialize repository at {path}", "already exists"
            )
        # Fresh repositories have an unborn HEAD
        self._store.repositories[path] = FakeRepository(head=None)
        self._empty_dirs.discard(path)
        self._initialized.append(path)

    # Read-only views for test assertions

    @property
    def repositories(self) -> dict[Path, FakeRepository]:
        return self._store.repositories

    @property
    def cloned(self) -> list[tuple[str, Path, str, str | None]]:
        return list(self._cloned)

    @property
    def initialized(self) -> list[Path]:
        return list(self._initialized)

    @property
    def added_remotes(self) -> list[tuple[Path, str, str]]:
        return self._remotes.added_remotes

    @property
    def updated_remote_urls(self) -> list[tuple[Path, str, str]]:
        return self._remotes.updated_remote_urls

    @property
    def fetched_remotes(self) -> list[tuple[Path, str]]:
        return self._remotes.fetched_remotes

    @property
    def added_worktrees(self) -> list[tuple[Path, str]]:
        return self._worktrees.added_worktrees

    @property
    def removed_worktrees(self) -> list[Path]:
        return self._worktrees.removed_worktrees

    @property
    def upstream_updates(self) -> list[tuple[Path, str, str]]:
        return self._branches.upstream_updates

    @property
    def pulled_worktrees(self) -> list[tuple[Path, bool]]:
        return self._worktrees.pulled_worktrees
