"""Tests for FakeGit, which the engine tests rely on behaving like git."""

from pathlib import Path

import pytest

from repotend.gateway.git.fake import FakeGit
from repotend.gateway.git.fake_repository import FakeRepository
from repotend.gateway.git.types import BranchInfo, WorktreeInfo
from repotend.subprocess_utils import CommandError

REPO = Path("/repos/project")


def test_clone_serves_remote_branches_and_checks_out_default() -> None:
    git = FakeGit(remote_sources={"https://x/p.git": ["trunk", "feature"]})

    git.clone("https://x/p.git", REPO, origin="upstream", branch=None)

    assert git.is_repository_path(REPO)
    assert git.remotes.list_remotes(REPO) == {"upstream": "https://x/p.git"}
    assert git.get_head_branch(REPO) == "trunk"
    assert git.branches.list_local_branches(REPO) == [
        BranchInfo(name="trunk", upstream="upstream/trunk")
    ]
    assert git.branches.list_remote_branches(REPO) == ["upstream/feature", "upstream/trunk"]
    assert git.cloned == [("https://x/p.git", REPO, "upstream", None)]


def test_clone_of_unknown_branch_fails() -> None:
    git = FakeGit()

    with pytest.raises(CommandError, match="Remote branch nope not found"):
        git.clone("https://x/p.git", REPO, origin="origin", branch="nope")

    assert not git.path_exists(REPO)


def test_clone_raises_configured_error() -> None:
    error = OSError("disk full")
    git = FakeGit(clone_raises={REPO: error})

    with pytest.raises(OSError, match="disk full"):
        git.clone("https://x/p.git", REPO, origin="origin", branch=None)


def test_adding_existing_remote_fails() -> None:
    git = FakeGit(repositories={REPO: FakeRepository(remotes={"origin": "https://x/p.git"})})

    with pytest.raises(CommandError, match="already exists"):
        git.remotes.add_remote(REPO, "origin", "https://y/p.git", fetch_refspec=None)


def test_fetch_adds_served_branches() -> None:
    git = FakeGit(
        repositories={REPO: FakeRepository(remotes={"fork": "https://y/p.git"})},
        remote_sources={"https://y/p.git": ["a", "b"]},
    )

    git.remotes.fetch_remote(REPO, "fork")

    assert git.branches.list_remote_branches(REPO) == ["fork/a", "fork/b"]
    assert git.fetched_remotes == [(REPO, "fork")]


def test_worktree_for_checked_out_branch_fails() -> None:
    git = FakeGit(repositories={REPO: FakeRepository(local_branches={"main": None})})

    with pytest.raises(CommandError, match="already checked out"):
        git.worktrees.add_worktree(
            REPO, REPO / "wt", branch="main", ref=None, create_branch=False
        )


def test_worktree_lists_main_tree_first() -> None:
    git = FakeGit(repositories={REPO: FakeRepository(local_branches={"main": None})})

    git.worktrees.add_worktree(REPO, REPO / "wt", branch="topic", ref="main", create_branch=True)

    assert git.worktrees.list_worktrees(REPO) == [
        WorktreeInfo(path=REPO, branch="main", is_root=True),
        WorktreeInfo(path=REPO / "wt", branch="topic"),
    ]
    assert git.path_exists(REPO / "wt")


def test_removing_unknown_worktree_fails() -> None:
    git = FakeGit(repositories={REPO: FakeRepository()})

    with pytest.raises(CommandError, match="is not a working tree"):
        git.worktrees.remove_worktree(REPO, REPO / "nope", force=False)


def test_reads_of_unreadable_repository_fail() -> None:
    git = FakeGit(unreadable_repositories={REPO})

    assert git.is_repository_path(REPO)
    with pytest.raises(CommandError, match="not a git repository"):
        git.get_repository_root(REPO)
