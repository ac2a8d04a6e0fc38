"""Planned actions and their outcomes.

PlannedAction is a discriminated union of frozen dataclasses. Each variant
carries only what is needed to execute it against the git gateway; the
repository path comes from the RepositoryConfig being executed.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from repotend.core.errors import ErrorKind, ExecutionErrorKind


@dataclass(frozen=True)
class InitRepository:
    """Create an empty repository for a configuration without remotes."""

    path: Path

    @property
    def kind(self) -> str:
        return "init"

    def describe(self) -> str:
        return f"Initialize new repository at {self.path}"


@dataclass(frozen=True)
class CloneRepository:
    """Clone from the first configured remote."""

    path: Path
    remote_name: str
    url: str
    branch: str | None

    @property
    def kind(self) -> str:
        return "clone"

    def describe(self) -> str:
        branch_note = f" (branch {self.branch})" if self.branch else ""
        return f'Clone "{self.url}" as remote "{self.remote_name}"{branch_note}'


@dataclass(frozen=True)
class AddRemote:
    name: str
    url: str
    fetch_refspec: str | None

    @property
    def kind(self) -> str:
        return "add-remote"

    def describe(self) -> str:
        return f'Set up new remote "{self.name}" to "{self.url}"'


@dataclass(frozen=True)
class UpdateRemoteUrl:
    name: str
    url: str

    @property
    def kind(self) -> str:
        return "update-remote-url"

    def describe(self) -> str:
        return f'Update remote "{self.name}" to "{self.url}"'


@dataclass(frozen=True)
class FetchRemote:
    """Fetch a remote so its branches can serve as worktree start points."""

    name: str

    @property
    def kind(self) -> str:
        return "fetch"

    def describe(self) -> str:
        return f'Fetch remote "{self.name}"'


@dataclass(frozen=True)
class CreateWorktree:
    """Add a linked worktree.

    Attributes:
        branch: Branch to check out
        subdirectory: Normalized location relative to the repository path
        create_branch: True when the branch does not exist locally yet
        start_point: Ref the new branch starts from (None means HEAD)
        fallback_start_point: Used instead of start_point when start_point
            is a remote branch that does not exist (None means HEAD)
    """

    branch: str
    subdirectory: str
    create_branch: bool
    start_point: str | None
    fallback_start_point: str | None

    @property
    def kind(self) -> str:
        return "create-worktree"

    def describe(self) -> str:
        return f'Create worktree "{self.subdirectory}" on branch "{self.branch}"'


@dataclass(frozen=True)
class RemoveWorktree:
    subdirectory: str
    path: Path

    @property
    def kind(self) -> str:
        return "remove-worktree"

    def describe(self) -> str:
        return f'Remove unmanaged worktree "{self.subdirectory}"'


@dataclass(frozen=True)
class SetTrackingBranch:
    branch: str
    remote: str
    remote_branch: str

    @property
    def kind(self) -> str:
        return "set-tracking-branch"

    def describe(self) -> str:
        return f'Set "{self.branch}" to track "{self.remote}/{self.remote_branch}"'


PlannedAction = (
    InitRepository
    | CloneRepository
    | AddRemote
    | UpdateRemoteUrl
    | FetchRemote
    | CreateWorktree
    | RemoveWorktree
    | SetTrackingBranch
)


@dataclass(frozen=True)
class ActionSucceeded:
    action: PlannedAction
    success: Literal[True] = True


@dataclass(frozen=True)
class ActionFailed:
    """An action that failed. Implements NonIdealState."""

    action: PlannedAction
    error_kind: ExecutionErrorKind
    message: str
    success: Literal[False] = False

    @property
    def error_type(self) -> str:
        return self.error_kind


ActionResult = ActionSucceeded | ActionFailed


@dataclass(frozen=True)
class RepositoryReport:
    """Everything that happened to one repository during a pass.

    ``error_kind``/``message`` are set when the repository failed before
    execution started (unreadable state or ambiguous configuration); in
    that case ``plan`` and ``results`` are empty.
    """

    name: str
    path: Path
    plan: tuple[PlannedAction, ...]
    results: tuple[ActionResult, ...]
    error_kind: ErrorKind | None = None
    message: str | None = None

    @property
    def success(self) -> bool:
        if self.error_kind is not None:
            return False
        return len(self.results) == len(self.plan) and all(r.success for r in self.results)

    @property
    def failed_result(self) -> ActionFailed | None:
        for result in self.results:
            if isinstance(result, ActionFailed):
                return result
        return None

    @property
    def skipped_actions(self) -> tuple[PlannedAction, ...]:
        """Planned actions that never ran because an earlier one failed."""
        return self.plan[len(self.results) :]


@dataclass(frozen=True)
class ReconcileSummary:
    """Aggregated outcome of one invocation, in configuration order."""

    reports: tuple[RepositoryReport, ...]
    skipped: tuple[str, ...] = ()

    @property
    def success(self) -> bool:
        return not self.skipped and all(report.success for report in self.reports)

    @property
    def failed_reports(self) -> tuple[RepositoryReport, ...]:
        return tuple(report for report in self.reports if not report.success)
