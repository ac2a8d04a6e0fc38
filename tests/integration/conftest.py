"""Helpers for tests that drive a real git binary."""

import shutil
import subprocess
from pathlib import Path

import pytest

GIT_IDENTITY = ["-c", "user.name=Test User", "-c", "user.email=test@example.com"]


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    if shutil.which("git") is not None:
        return
    skip = pytest.mark.skip(reason="git is not installed")
    for item in items:
        item.add_marker(skip)


def git(repo: Path, *args: str) -> str:
    result = subprocess.run(
        ["git", *GIT_IDENTITY, *args],
        cwd=repo,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout.strip()


def init_git_repo(repo: Path, default_branch: str) -> None:
    """Initialize a repository with one commit on default_branch."""
    repo.mkdir(parents=True, exist_ok=True)
    git(repo, "init", "--quiet", "--initial-branch", default_branch)
    (repo / "README.md").write_text("# test\n", encoding="utf-8")
    git(repo, "add", "README.md")
    git(repo, "commit", "--quiet", "-m", "Initial commit")


def make_upstream(tmp_path: Path, name: str, branches: list[str]) -> Path:
    """Create a bare repository serving branches, the first being its default.

    Returns:
        Path of the bare repository, usable as a clone URL
    """
    work = tmp_path / "work" / name
    init_git_repo(work, branches[0])
    for branch in branches[1:]:
        git(work, "branch", branch)
    bare = tmp_path / "upstream" / f"{name}.git"
    bare.parent.mkdir(parents=True, exist_ok=True)
    git(tmp_path, "clone", "--quiet", "--bare", str(work), str(bare))
    return bare
