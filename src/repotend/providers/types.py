"""Types exchanged with remote repository providers."""

from dataclasses import dataclass
from typing import Literal

from repotend.core.types import WorktreePolicy

ProviderName = Literal["github", "gitlab"]

PROVIDER_NAMES: tuple[ProviderName, ...] = ("github", "gitlab")


@dataclass(frozen=True)
class ProviderParams:
    """What to list from a provider, and how to turn it into configuration.

    Attributes:
        provider: Which hosting API to talk to
        token: API token, or None for anonymous access (public data only)
        api_url: Override for self-hosted instances (None uses the public API)
        users: List repositories owned by these users
        groups: List repositories of these organizations / groups
        owner: Also list repositories owned by the token's user
        force_ssh: Prefer SSH clone URLs over HTTPS
        worktree_policy: Policy given to every generated repository
    """

    provider: ProviderName
    token: str | None
    api_url: str | None = None
    users: tuple[str, ...] = ()
    groups: tuple[str, ...] = ()
    owner: bool = False
    force_ssh: bool = False
    worktree_policy: WorktreePolicy = WorktreePolicy.ADDITIVE


@dataclass(frozen=True)
class RemoteRepositoryDescriptor:
    """A repository as reported by a provider."""

    name: str
    namespace: str
    clone_url: str
    ssh_url: str | None
    default_branch: str | None
    private: bool = False


class ProviderError(Exception):
    """The provider API rejected a request or returned something unusable."""

    def __init__(self, *, status_code: int | None, message: str) -> None:
        prefix = f"Provider API error ({status_code})" if status_code else "Provider API error"
        super().__init__(f"{prefix}: {message}")
        self.status_code = status_code
        self.message = message
