"""Production implementation of git operations using subprocess."""

from pathlib import Path

from repotend.gateway.git.abc import Git
from repotend.gateway.git.branches.abc import GitBranches
from repotend.gateway.git.branches.real import RealGitBranches
from repotend.gateway.git.remotes.abc import GitRemotes
from repotend.gateway.git.remotes.real import RealGitRemotes
from repotend.gateway.git.worktrees.abc import GitWorktrees
from repotend.gateway.git.worktrees.real import RealGitWorktrees
from repotend.subprocess_utils import (
    CommandError,
    copied_env_for_git_subprocess,
    run_subprocess_unchecked,
    run_subprocess_with_context,
)


class RealGit(Git):
    """Production implementation using subprocess."""

    def __init__(self) -> None:
        self._remotes = RealGitRemotes()
        self._branches = RealGitBranches()
        self._worktrees = RealGitWorktrees()

    @property
    def remotes(self) -> GitRemotes:
        return self._remotes

    @property
    def branches(self) -> GitBranches:
        return self._branches

    @property
    def worktrees(self) -> GitWorktrees:
        return self._worktrees

    def path_exists(self, path: Path) -> bool:
        return path.exists()

    def is_empty_dir(self, path: Path) -> bool:
        if not path.is_dir():
            return False
        return not any(path.iterdir())

    def is_repository_path(self, path: Path) -> bool:
        return (path / ".git").exists()

    def get_repository_root(self, path: Path) -> Path:
        """Get the top-level directory of the repository at path.

        GIT_CEILING_DIRECTORIES stops git from walking up into an enclosing
        repository when the metadata at path is broken.
        """
        result = run_subprocess_with_context(
            ["git", "rev-parse", "--show-toplevel"],
            operation_context=f"read repository at {path}",
            cwd=path,
            env=copied_env_for_git_subprocess({"GIT_CEILING_DIRECTORIES": str(path.parent)}),
        )
        return Path(result.stdout.strip())

    def get_head_branch(self, repo_root: Path) -> str | None:
        context = f"read HEAD of {repo_root}"
        cmd = ["git", "symbolic-ref", "--quiet", "--short", "HEAD"]
        result = run_subprocess_unchecked(cmd, operation_context=context, cwd=repo_root)
        # Exit status 1 means HEAD is detached; anything else is a real error
        if result.returncode == 1:
            return None
        if result.returncode != 0:
            raise CommandError(
                cmd=cmd,
                operation_context=context,
                returncode=result.returncode,
                stdout=result.stdout,
                stderr=result.stderr,
            )

        # A branch without commits (fresh `git init`) is unborn, not checked out
        born = run_subprocess_unchecked(
            ["git", "rev-parse", "--quiet", "--verify", "HEAD"],
            operation_context=context,
            cwd=repo_root,
        )
        if born.returncode != 0:
            return None
        return result.stdout.strip()

    def clone(self, url: str, path: Path, *, origin: str, branch: str | None) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        cmd = ["git", "clone", "--origin", origin]
        if branch is not None:
            cmd.extend(["--branch", branch])
        cmd.extend(["--", url, str(path)])
        run_subprocess_with_context(
            cmd,
            operation_context=f"clone '{url}' into {path}",
            cwd=path.parent,
            env=copied_env_for_git_subprocess(),
        )

    def init_repository(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        run_subprocess_with_context(
            ["git", "init", "--quiet", str(path)],
            operation_context=f"initialize repository at {path}",
            cwd=path.parent,
        )
