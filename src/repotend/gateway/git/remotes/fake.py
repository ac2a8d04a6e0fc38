"""Fake git remote operations for testing."""

from pathlib import Path

from repotend.gateway.git.fake_repository import FakeRepositoryStore, fake_git_error
from repotend.gateway.git.remotes.abc import GitRemotes


class FakeGitRemotes(GitRemotes):
    """In-memory fake implementation of git remote operations.

    State lives in the shared FakeRepositoryStore so that remotes added here
    are visible to every other fake gateway.

    Constructor Injection:
    - fetch_raises: (repo_root, remote) -> exception raised by fetch_remote()
    - add_remote_raises: repo_root -> exception raised by add_remote()

    Mutation Tracking:
    - added_remotes: list of (repo_root, name, url)
    - updated_remote_urls: list of (repo_root, name, url)
    - fetched_remotes: list of (repo_root, name)
    """

    def __init__(
        self,
        *,
        store: FakeRepositoryStore,
        fetch_raises: dict[tuple[Path, str], Exception] | None = None,
        add_remote_raises: dict[Path, Exception] | None = None,
    ) -> None:
        self._store = store
        self._fetch_raises = fetch_raises or {}
        self._add_remote_raises = add_remote_raises or {}

        self._added_remotes: list[tuple[Path, str, str]] = []
        self._updated_remote_urls: list[tuple[Path, str, str]] = []
        self._fetched_remotes: list[tuple[Path, str]] = []

    def list_remotes(self, repo_root: Path) -> dict[str, str]:
        return dict(self._store.get(repo_root, "list remotes").remotes)

    def add_remote(
        self, repo_root: Path, name: str, url: str, *, fetch_refspec: str | None
    ) -> None:
        repo = self._store.get(repo_root, f"add remote '{name}'")
        if repo_root in self._add_remote_raises:
            raise self._add_remote_raises[repo_root]
        if name in repo.remotes:
            raise fake_git_error(
                ["git", "remote", "add", name, url],
                f"add remote '{name}'",
                f"remote {name} already exists.",
            )
        repo.remotes[name] = url
        if fetch_refspec is not None:
            repo.fetch_refspecs[name] = fetch_refspec
        self._added_remotes.append((repo_root, name, url))

    def set_remote_url(self, repo_root: Path, name: str, url: str) -> None:
        repo = self._store.get(repo_root, f"set URL of remote '{name}'")
        if name not in repo.remotes:
            raise fake_git_error(
                ["git", "remote", "set-url", name, url],
                f"set URL of remote '{name}'",
                f"No such remote '{name}'",
            )
        repo.remotes[name] = url
        self._updated_remote_urls.append((repo_root, name, url))

    def fetch_remote(self, repo_root: Path, name: str) -> None:
        repo = self._store.get(repo_root, f"fetch remote '{name}'")
        self._fetched_remotes.append((repo_root, name))
        if (repo_root, name) in self._fetch_raises:
            raise self._fetch_raises[(repo_root, name)]
        if name not in repo.remotes:
            raise fake_git_error(
                ["git", "fetch", name],
                f"fetch remote '{name}'",
                f"'{name}' does not appear to be a git repository",
            )
        for branch in self._store.remote_sources.get(repo.remotes[name], []):
            ref = f"{name}/{branch}"
            if ref not in repo.remote_branches:
                repo.remote_branches.append(ref)

    @property
    def added_remotes(self) -> list[tuple[Path, str, str]]:
        return list(self._added_remotes)

    @property
    def updated_remote_urls(self) -> list[tuple[Path, str, str]]:
        return list(self._updated_remote_urls)

    @property
    def fetched_remotes(self) -> list[tuple[Path, str]]:
        return list(self._fetched_remotes)
