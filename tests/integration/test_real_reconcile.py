"""End-to-end reconciliation against real git repositories."""

from pathlib import Path

import pytest

from repotend.core.discovery import describe_tree
from repotend.core.reconciler import reconcile, reconcile_repository
from repotend.core.state_reader import read_repository_state
from repotend.core.types import (
    Remote,
    RepositoryConfig,
    TrackingRef,
    WorktreePolicy,
    WorktreeSpec,
)
from repotend.gateway.git.real import RealGit
from tests.integration.conftest import git, init_git_repo, make_upstream

pytestmark = pytest.mark.integration


def _kinds(report: object) -> list[str]:
    return [action.kind for action in report.plan]  # type: ignore[attr-defined]


def test_clone_then_worktree_then_nothing(tmp_path: Path) -> None:
    tmp_path = tmp_path.resolve()
    upstream = make_upstream(tmp_path, "project", ["main", "feature"])
    config = RepositoryConfig(
        name="project",
        path=tmp_path / "src" / "project",
        remotes=(Remote(name="origin", url=str(upstream)),),
        worktrees=(
            WorktreeSpec(
                branch="feature",
                subdirectory="wt/feature",
                track=TrackingRef(remote="origin", branch="feature"),
            ),
        ),
        default_branch="main",
    )
    real_git = RealGit()

    first = reconcile_repository(real_git, config)
    assert first.success, first.failed_result
    assert _kinds(first) == ["clone"]
    assert (config.path / "README.md").exists()

    second = reconcile_repository(real_git, config)
    assert second.success, second.failed_result
    assert _kinds(second) == ["create-worktree", "set-tracking-branch"]
    assert git(config.path / "wt" / "feature", "branch", "--show-current") == "feature"
    assert git(config.path, "config", "branch.feature.merge") == "refs/heads/feature"

    third = reconcile_repository(real_git, config)
    assert third.plan == ()


def test_existing_repository_gains_remote_and_tracked_worktree(tmp_path: Path) -> None:
    tmp_path = tmp_path.resolve()
    origin = make_upstream(tmp_path, "origin", ["main"])
    fork = make_upstream(tmp_path, "fork", ["main", "topic"])
    repo = tmp_path / "src" / "project"
    git(tmp_path, "clone", "--quiet", "--origin", "origin", str(origin), str(repo))
    git(repo, "remote", "add", "mine", "https://example.com/mine.git")
    config = RepositoryConfig(
        name="project",
        path=repo,
        remotes=(
            Remote(name="origin", url=str(origin)),
            Remote(name="fork", url=str(fork)),
        ),
        worktrees=(
            WorktreeSpec(branch="topic", subdirectory="topic", track=TrackingRef("fork", "topic")),
        ),
    )
    real_git = RealGit()

    report = reconcile_repository(real_git, config)

    assert report.success, report.failed_result
    assert "add-remote" in _kinds(report)
    state = read_repository_state(real_git, repo)
    assert dict(state.remotes) == {
        "fork": str(fork),
        "mine": "https://example.com/mine.git",
        "origin": str(origin),
    }
    assert state.find_branch("topic") is not None
    assert state.find_branch("topic").upstream == "fork/topic"  # type: ignore[union-attr]
    assert reconcile_repository(real_git, config).plan == ()


def test_exclusive_policy_removes_unconfigured_worktree(tmp_path: Path) -> None:
    tmp_path = tmp_path.resolve()
    repo = tmp_path / "project"
    init_git_repo(repo, "main")
    git(repo, "worktree", "add", "-b", "scratch", str(repo / "scratch"))
    config = RepositoryConfig(
        name="project",
        path=repo,
        worktree_policy=WorktreePolicy.EXCLUSIVE,
    )
    real_git = RealGit()

    report = reconcile_repository(real_git, config)

    assert report.success, report.failed_result
    assert _kinds(report) == ["remove-worktree"]
    assert not (repo / "scratch").exists()
    assert read_repository_state(real_git, repo).worktrees == ()


def test_update_remote_url(tmp_path: Path) -> None:
    tmp_path = tmp_path.resolve()
    old = make_upstream(tmp_path, "old", ["main"])
    new = make_upstream(tmp_path, "new", ["main"])
    repo = tmp_path / "src" / "project"
    git(tmp_path, "clone", "--quiet", str(old), str(repo))
    config = RepositoryConfig(
        name="project", path=repo, remotes=(Remote(name="origin", url=str(new)),)
    )

    report = reconcile_repository(RealGit(), config)

    assert report.success, report.failed_result
    assert _kinds(report) == ["update-remote-url"]
    assert git(repo, "remote", "get-url", "origin") == str(new)


def test_broken_metadata_is_reported_as_unreadable(tmp_path: Path) -> None:
    tmp_path = tmp_path.resolve()
    broken = tmp_path / "broken"
    (broken / ".git").mkdir(parents=True)
    fine = tmp_path / "fine"
    config_broken = RepositoryConfig(name="broken", path=broken)
    config_fine = RepositoryConfig(name="fine", path=fine)

    summary = reconcile(RealGit(), [config_broken, config_fine])

    broken_report, fine_report = summary.reports
    assert broken_report.error_kind == "repository-unreadable"
    assert fine_report.success
    assert (fine / ".git").is_dir()


def test_clone_into_occupied_path_fails_without_touching_it(tmp_path: Path) -> None:
    tmp_path = tmp_path.resolve()
    upstream = make_upstream(tmp_path, "project", ["main"])
    target = tmp_path / "src" / "project"
    target.mkdir(parents=True)
    (target / "notes.txt").write_text("keep me", encoding="utf-8")
    config = RepositoryConfig(
        name="project", path=target, remotes=(Remote(name="origin", url=str(upstream)),)
    )

    report = reconcile_repository(RealGit(), config)

    assert not report.success
    assert (target / "notes.txt").read_text(encoding="utf-8") == "keep me"


def test_describe_tree_reads_real_repositories(tmp_path: Path) -> None:
    tmp_path = tmp_path.resolve()
    upstream = make_upstream(tmp_path, "lib", ["main", "dev"])
    root = tmp_path / "code"
    repo = root / "team" / "lib"
    git(tmp_path, "clone", "--quiet", str(upstream), str(repo))
    git(repo, "worktree", "add", "--track", "-b", "dev", str(repo / "dev"), "origin/dev")

    (described,) = describe_tree(RealGit(), root)

    assert described.name == "team/lib"
    assert described.remotes == (Remote(name="origin", url=str(upstream), remote_type="file"),)
    assert described.default_branch == "main"
    assert described.worktrees == (
        WorktreeSpec(branch="dev", subdirectory="dev", track=TrackingRef("origin", "dev")),
    )
