"""Tests for `repotend repos status`."""

from pathlib import Path

from click.testing import CliRunner

from repotend.cli.cli import cli
from repotend.context import RepotendContext
from repotend.gateway.git.fake import FakeGit
from repotend.gateway.git.fake_repository import FakeRepository

CONFIG = """
[[trees]]
root = "/code"

[[trees.repos]]
name = "current"

[[trees.repos.remotes]]
name = "origin"
url = "https://forge.example/current.git"

[[trees.repos]]
name = "moved"

[[trees.repos.remotes]]
name = "origin"
url = "https://forge.example/moved.git"

[[trees.repos]]
name = "absent"

[[trees.repos.remotes]]
name = "origin"
url = "https://forge.example/absent.git"
"""


def test_status_shows_pending_changes_without_applying(tmp_path: Path) -> None:
    (tmp_path / "config.toml").write_text(CONFIG, encoding="utf-8")
    git = FakeGit(
        repositories={
            Path("/code/current"): FakeRepository(
                remotes={"origin": "https://forge.example/current.git"}
            ),
            Path("/code/moved"): FakeRepository(
                remotes={"origin": "https://old.example/moved.git"}
            ),
        }
    )
    ctx = RepotendContext.for_test(git=git, cwd=tmp_path)

    result = CliRunner().invoke(cli, ["repos", "status"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "in sync" in result.output
    assert "out of sync" in result.output
    assert "missing" in result.output
    assert 'Update remote "origin" to "https://forge.example/moved.git"' in result.output
    assert git.updated_remote_urls == []
    assert git.cloned == []


def test_status_exits_nonzero_for_unreadable_repository(tmp_path: Path) -> None:
    (tmp_path / "config.toml").write_text(CONFIG, encoding="utf-8")
    git = FakeGit(unreadable_repositories={Path("/code/current")})
    ctx = RepotendContext.for_test(git=git, cwd=tmp_path)

    result = CliRunner().invoke(cli, ["repos", "status"], obj=ctx)

    assert result.exit_code == 1
    assert "repository-unreadable" in result.output


def test_status_without_config_shows_current_repository(tmp_path: Path) -> None:
    git = FakeGit(repositories={tmp_path: FakeRepository(local_branches={"main": "origin/main"})})
    ctx = RepotendContext.for_test(git=git, cwd=tmp_path)

    result = CliRunner().invoke(cli, ["repos", "status"], obj=ctx)

    assert result.exit_code == 0, result.output
    assert "Worktree" in result.output
    assert "origin/main" in result.output


def test_status_with_explicit_missing_config_fails(tmp_path: Path) -> None:
    ctx = RepotendContext.for_test(cwd=tmp_path)

    result = CliRunner().invoke(cli, ["repos", "status", "-c", "missing.toml"], obj=ctx)

    assert result.exit_code == 1
    assert "configuration file not found" in result.output
