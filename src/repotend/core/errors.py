"""Error taxonomy for reconciliation.

Planning-time errors (ConfigurationAmbiguousError, RepositoryUnreadableError)
abort a single repository before anything runs. Execution-time errors
(NetworkFailureError, BackendOperationFailedError, FilesystemConflictError)
abort the remainder of a single repository's plan. Neither kind crosses
repository boundaries.
"""

from typing import Literal

ErrorKind = Literal[
    "configuration-ambiguous",
    "repository-unreadable",
    "network-failure",
    "backend-operation-failed",
    "filesystem-conflict",
]

ExecutionErrorKind = Literal[
    "network-failure",
    "backend-operation-failed",
    "filesystem-conflict",
]


class RepotendError(Exception):
    """Base class for reconciliation errors."""

    error_kind: ErrorKind

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigurationAmbiguousError(RepotendError):
    """Configuration cannot be classified into a single coherent plan."""

    error_kind: ErrorKind = "configuration-ambiguous"


class RepositoryUnreadableError(RepotendError):
    """A path looks like a repository but git cannot read it."""

    error_kind: ErrorKind = "repository-unreadable"


class ExecutionError(RepotendError):
    """Base class for failures while applying a planned action."""

    error_kind: ExecutionErrorKind


class NetworkFailureError(ExecutionError):
    """A clone or fetch could not reach its remote."""

    error_kind: ExecutionErrorKind = "network-failure"


class BackendOperationFailedError(ExecutionError):
    """Git rejected the operation."""

    error_kind: ExecutionErrorKind = "backend-operation-failed"


class FilesystemConflictError(ExecutionError):
    """The target path is occupied by something that is not ours to replace."""

    error_kind: ExecutionErrorKind = "filesystem-conflict"
