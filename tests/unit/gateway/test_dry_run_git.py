"""Tests for DryRunGit."""

from pathlib import Path

import pytest

from repotend.gateway.git.dry_run import DryRunGit
from repotend.gateway.git.fake import FakeGit
from repotend.gateway.git.fake_repository import FakeRepository

REPO = Path("/repos/project")


def test_reads_are_delegated() -> None:
    fake = FakeGit(repositories={REPO: FakeRepository(remotes={"origin": "https://x/p.git"})})
    git = DryRunGit(fake)

    assert git.is_repository_path(REPO)
    assert git.remotes.list_remotes(REPO) == {"origin": "https://x/p.git"}
    assert git.get_head_branch(REPO) == "main"


def test_writes_are_printed_not_executed(capsys: pytest.CaptureFixture[str]) -> None:
    fake = FakeGit(repositories={REPO: FakeRepository(local_branches={"main": None})})
    git = DryRunGit(fake)

    git.clone("https://x/new.git", Path("/repos/new"), origin="origin", branch="main")
    git.remotes.add_remote(REPO, "fork", "https://y/p.git", fetch_refspec=None)
    git.worktrees.add_worktree(REPO, REPO / "wt", branch="topic", ref=None, create_branch=True)
    git.branches.set_branch_upstream(REPO, "main", remote="fork", remote_branch="main")

    err = capsys.readouterr().err
    assert "[DRY RUN] Would run: git clone --origin origin --branch main" in err
    assert "[DRY RUN] Would run: git remote add fork https://y/p.git" in err
    assert "[DRY RUN] Would run: git worktree add -b topic /repos/project/wt HEAD" in err
    assert "branch.main.remote fork" in err
    assert fake.cloned == []
    assert fake.added_remotes == []
    assert fake.added_worktrees == []
    assert fake.upstream_updates == []


def test_pull_is_printed_not_executed(capsys: pytest.CaptureFixture[str]) -> None:
    fake = FakeGit(repositories={REPO: FakeRepository()})
    git = DryRunGit(fake)

    git.worktrees.pull_worktree(REPO, rebase=False)

    assert "[DRY RUN] Would run: git pull --ff-only (in /repos/project)" in capsys.readouterr().err
    assert fake.pulled_worktrees == []
