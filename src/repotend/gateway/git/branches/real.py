"""Branch operations backed by the git binary."""

from pathlib import Path

from repotend.gateway.git.branches.abc import GitBranches
from repotend.gateway.git.config_entries import read_config_entries, subsection
from repotend.gateway.git.types import BranchInfo
from repotend.subprocess_utils import run_subprocess_with_context


class RealGitBranches(GitBranches):
    def list_local_branches(self, repo_root: Path) -> list[BranchInfo]:
        """Local branches with the upstream recorded in ``branch.<name>.remote/merge``.

        The upstream is reported as "<remote>/<branch>" regardless of the
        remote's fetch refspec.
        """
        result = run_subprocess_with_context(
            ["git", "for-each-ref", "--format=%(refname)", "refs/heads/"],
            operation_context=f"list local branches of {repo_root}",
            cwd=repo_root,
        )
        remote_of: dict[str, str] = {}
        merge_of: dict[str, str] = {}
        for key, value in read_config_entries(repo_root, r"^branch\..*\.(remote|merge)$"):
            name = subsection(key, section="branch", variable="remote")
            if name is not None:
                remote_of[name] = value
                continue
            name = subsection(key, section="branch", variable="merge")
            if name is not None:
                merge_of[name] = value

        branches: list[BranchInfo] = []
        for line in result.stdout.splitlines():
            name = line.strip().removeprefix("refs/heads/")
            if not name:
                continue
            remote = remote_of.get(name)
            merge = merge_of.get(name, "")
            upstream = None
            if remote is not None and merge.startswith("refs/heads/"):
                upstream = f"{remote}/{merge.removeprefix('refs/heads/')}"
            branches.append(BranchInfo(name=name, upstream=upstream))
        return branches

    def list_remote_branches(self, repo_root: Path) -> list[str]:
        result = run_subprocess_with_context(
            ["git", "for-each-ref", "--format=%(refname)", "refs/remotes/"],
            operation_context="list remote branches",
            cwd=repo_root,
        )
        branches: list[str] = []
        for line in result.stdout.splitlines():
            ref = line.strip().removeprefix("refs/remotes/")
            # Symbolic refs/remotes/<remote>/HEAD is not a branch
            if not ref or ref.endswith("/HEAD"):
                continue
            branches.append(ref)
        return branches

    def set_branch_upstream(
        self, repo_root: Path, branch: str, *, remote: str, remote_branch: str
    ) -> None:
        # Written as config rather than `branch --set-upstream-to` so it also
        # works before the remote branch has been fetched or pushed.
        run_subprocess_with_context(
            ["git", "config", f"branch.{branch}.remote", remote],
            operation_context=f"set upstream remote of '{branch}'",
            cwd=repo_root,
        )
        run_subprocess_with_context(
            ["git", "config", f"branch.{branch}.merge", f"refs/heads/{remote_branch}"],
            operation_context=f"set upstream branch of '{branch}'",
            cwd=repo_root,
        )
