"""Tests for reconcile() and reconcile_repository()."""

import threading
from pathlib import Path

import pytest

from repotend.core.actions import ActionFailed
from repotend.core.planner import build_plan
from repotend.core.reconciler import reconcile, reconcile_repository
from repotend.core.state_reader import read_repository_state
from repotend.core.types import (
    Remote,
    RepositoryConfig,
    TrackingRef,
    WorktreePolicy,
    WorktreeSpec,
)
from repotend.gateway.git.fake import FakeGit
from repotend.gateway.git.fake_repository import FakeRepository
from repotend.gateway.git.types import WorktreeInfo
from repotend.subprocess_utils import CommandError

ROOT = Path("/src")


def _config(name: str, **kwargs: object) -> RepositoryConfig:
    url = f"https://forge.example/{name}.git"
    return RepositoryConfig(
        name=name,
        path=ROOT / name,
        remotes=(Remote(name="origin", url=url),),
        **kwargs,  # type: ignore[arg-type]
    )


def _network_error() -> CommandError:
    return CommandError(
        cmd=["git", "clone"],
        operation_context="clone",
        returncode=128,
        stdout="",
        stderr="fatal: unable to access: Could not resolve host: forge.example",
    )


def test_clone_then_one_pass_converges() -> None:
    """After a successful clone, the next pass finishes and the one after is empty."""
    config = _config(
        "project",
        worktrees=(
            WorktreeSpec(
                branch="feature",
                subdirectory="wt/feature",
                track=TrackingRef(remote="origin", branch="feature"),
            ),
        ),
        default_branch="main",
    )
    git = FakeGit(remote_sources={"https://forge.example/project.git": ["main", "feature"]})

    first = reconcile_repository(git, config)
    assert [action.kind for action in first.plan] == ["clone"]
    assert first.success

    second = reconcile_repository(git, config)
    assert [action.kind for action in second.plan] == ["create-worktree", "set-tracking-branch"]
    assert second.success

    third = reconcile_repository(git, config)
    assert third.plan == ()
    assert third.success


def test_applied_plan_is_idempotent() -> None:
    path = ROOT / "project"
    git = FakeGit(
        repositories={
            path: FakeRepository(
                remotes={"origin": "https://old.example/project.git", "mine": "git@me:p.git"},
                local_branches={"main": "origin/main", "stale": None},
                remote_branches=["origin/main", "origin/feature"],
                linked_worktrees=[WorktreeInfo(path=path / "stale", branch="stale")],
            )
        },
        remote_sources={"https://fork.example/project.git": ["topic"]},
    )
    config = RepositoryConfig(
        name="project",
        path=path,
        remotes=(
            Remote(name="origin", url="https://forge.example/project.git"),
            Remote(name="fork", url="https://fork.example/project.git"),
        ),
        worktrees=(
            WorktreeSpec(
                branch="feature", subdirectory="feature", track=TrackingRef("origin", "feature")
            ),
            WorktreeSpec(branch="topic", subdirectory="topic", track=TrackingRef("fork", "topic")),
        ),
        worktree_policy=WorktreePolicy.EXCLUSIVE,
    )

    report = reconcile_repository(git, config)

    assert report.success, report.failed_result
    assert build_plan(config, read_repository_state(git, path)) == ()
    # The unconfigured remote survives.
    assert git.repositories[path].remotes["mine"] == "git@me:p.git"
    assert git.removed_worktrees == [path / "stale"]


def test_failure_in_one_repository_does_not_affect_another() -> None:
    good = _config("good")
    bad = _config("bad")

    alone = reconcile(FakeGit(), [good])
    together = reconcile(FakeGit(clone_raises={bad.path: _network_error()}), [bad, good])

    assert [report.name for report in together.reports] == ["bad", "good"]
    bad_report, good_report = together.reports
    assert isinstance(bad_report.results[0], ActionFailed)
    assert bad_report.results[0].error_kind == "network-failure"
    assert good_report.results == alone.reports[0].results
    assert together.success is False
    assert together.failed_reports == (bad_report,)


def test_unreadable_repository_is_reported_not_raised() -> None:
    broken = _config("broken")
    fine = _config("fine")
    git = FakeGit(unreadable_repositories={broken.path})

    summary = reconcile(git, [broken, fine])

    broken_report, fine_report = summary.reports
    assert broken_report.error_kind == "repository-unreadable"
    assert broken_report.plan == ()
    assert broken_report.success is False
    assert fine_report.success


def test_ambiguous_configuration_is_reported_not_raised() -> None:
    config = _config(
        "dup",
        worktrees=(
            WorktreeSpec(branch="a", subdirectory="x"),
            WorktreeSpec(branch="b", subdirectory="./x"),
        ),
    )

    summary = reconcile(FakeGit(), [config])

    (report,) = summary.reports
    assert report.error_kind == "configuration-ambiguous"
    assert report.message is not None
    assert summary.success is False


def test_parallel_reports_follow_configuration_order() -> None:
    configs = [_config(f"repo{index:02d}") for index in range(12)]

    summary = reconcile(FakeGit(), configs, jobs=4)

    assert [report.name for report in summary.reports] == [c.name for c in configs]
    assert summary.skipped == ()
    assert summary.success


def test_parallel_and_sequential_runs_agree() -> None:
    configs = [_config(f"repo{index}") for index in range(5)]
    failing = {configs[2].path: _network_error()}

    sequential = reconcile(FakeGit(clone_raises=failing), configs, jobs=1)
    parallel = reconcile(FakeGit(clone_raises=failing), configs, jobs=3)

    assert sequential == parallel


def test_stop_before_start_skips_everything() -> None:
    configs = [_config("a"), _config("b")]
    stop_event = threading.Event()
    stop_event.set()
    git = FakeGit()

    for jobs in (1, 2):
        summary = reconcile(git, configs, jobs=jobs, stop_event=stop_event)

        assert summary.reports == ()
        assert summary.skipped == ("a", "b")
        assert summary.success is False
    assert git.cloned == []


def test_jobs_must_be_positive() -> None:
    with pytest.raises(ValueError, match="jobs must be at least 1"):
        reconcile(FakeGit(), [], jobs=0)


def test_empty_configuration_succeeds() -> None:
    summary = reconcile(FakeGit(), [])

    assert summary.reports == ()
    assert summary.success


def test_worktree_with_deleted_directory_is_recreated() -> None:
    path = ROOT / "project"
    gone = path / "wt" / "feature"
    git = FakeGit(
        repositories={
            path: FakeRepository(
                remotes={"origin": "https://forge.example/project.git"},
                local_branches={"main": "origin/main", "feature": "origin/feature"},
                remote_branches=["origin/main", "origin/feature"],
                linked_worktrees=[WorktreeInfo(path=gone, branch="feature", prunable=True)],
            )
        }
    )
    config = _config(
        "project",
        worktrees=(
            WorktreeSpec(
                branch="feature", subdirectory="wt/feature", track=TrackingRef("origin", "feature")
            ),
        ),
    )

    report = reconcile_repository(git, config)

    assert report.success, report.failed_result
    assert [action.kind for action in report.plan] == ["create-worktree"]
    assert git.added_worktrees == [(gone, "feature")]
    assert reconcile_repository(git, config).plan == ()
