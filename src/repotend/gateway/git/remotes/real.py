"""Remote operations backed by the git binary."""

from pathlib import Path

from repotend.gateway.git.config_entries import read_config_entries, subsection
from repotend.gateway.git.remotes.abc import GitRemotes
from repotend.subprocess_utils import copied_env_for_git_subprocess, run_subprocess_with_context


class RealGitRemotes(GitRemotes):
    def list_remotes(self, repo_root: Path) -> dict[str, str]:
        """Configured URL of each remote, before ``url.<base>.insteadOf`` rewriting."""
        remotes: dict[str, str] = {}
        for key, url in read_config_entries(repo_root, r"^remote\..*\.url$"):
            name = subsection(key, section="remote", variable="url")
            if name is not None:
                remotes.setdefault(name, url)
        return remotes

    def add_remote(
        self, repo_root: Path, name: str, url: str, *, fetch_refspec: str | None
    ) -> None:
        run_subprocess_with_context(
            ["git", "remote", "add", name, url],
            operation_context=f"add remote '{name}'",
            cwd=repo_root,
        )
        if fetch_refspec is not None:
            run_subprocess_with_context(
                ["git", "config", "--replace-all", f"remote.{name}.fetch", fetch_refspec],
                operation_context=f"set fetch refspec of remote '{name}'",
                cwd=repo_root,
            )

    def set_remote_url(self, repo_root: Path, name: str, url: str) -> None:
        run_subprocess_with_context(
            ["git", "remote", "set-url", name, url],
            operation_context=f"set URL of remote '{name}'",
            cwd=repo_root,
        )

    def fetch_remote(self, repo_root: Path, name: str) -> None:
        run_subprocess_with_context(
            ["git", "fetch", "--quiet", name],
            operation_context=f"fetch remote '{name}'",
            cwd=repo_root,
            env=copied_env_for_git_subprocess(),
        )
