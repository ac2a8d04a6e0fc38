"""Provider construction by name."""

from repotend.gateway.http.abc import HttpClient
from repotend.providers.abc import RemoteProvider
from repotend.providers.github import GitHubProvider
from repotend.providers.gitlab import GitLabProvider
from repotend.providers.types import ProviderName


def create_provider(name: ProviderName, http: HttpClient) -> RemoteProvider:
    if name == "github":
        return GitHubProvider(http)
    if name == "gitlab":
        return GitLabProvider(http)
    raise ValueError(f"Unknown provider: {name}")
