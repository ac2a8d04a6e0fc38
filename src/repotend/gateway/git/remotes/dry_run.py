"""Dry-run remotes: reads pass through, writes and fetches are only announced."""

from pathlib import Path

from repotend.gateway.git.remotes.abc import GitRemotes
from repotend.output import user_output


class DryRunGitRemotes(GitRemotes):
    def __init__(self, wrapped: GitRemotes) -> None:
        self._wrapped = wrapped

    def list_remotes(self, repo_root: Path) -> dict[str, str]:
        return self._wrapped.list_remotes(repo_root)

    def add_remote(
        self, repo_root: Path, name: str, url: str, *, fetch_refspec: str | None
    ) -> None:
        user_output(f"[DRY RUN] Would run: git remote add {name} {url}")
        if fetch_refspec is not None:
            user_output(f"[DRY RUN] Would run: git config remote.{name}.fetch {fetch_refspec}")

    def set_remote_url(self, repo_root: Path, name: str, url: str) -> None:
        user_output(f"[DRY RUN] Would run: git remote set-url {name} {url}")

    def fetch_remote(self, repo_root: Path, name: str) -> None:
        user_output(f"[DRY RUN] Would run: git fetch {name}")
