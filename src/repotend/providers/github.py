"""GitHub REST API provider."""

from collections.abc import Iterator
from itertools import chain
from typing import Any
from urllib.parse import quote

from repotend.gateway.http.abc import HttpClient
from repotend.providers.abc import (
    RemoteProvider,
    iter_pages,
    require_field,
    unique_by_location,
)
from repotend.providers.types import (
    ProviderError,
    ProviderParams,
    RemoteRepositoryDescriptor,
)

GITHUB_API_URL = "https://api.github.com"
PAGE_SIZE = 100


def _descriptor(item: dict[str, Any], *, url: str) -> RemoteRepositoryDescriptor:
    owner = require_field(item, "owner", url=url)
    return RemoteRepositoryDescriptor(
        name=require_field(item, "name", url=url),
        namespace=require_field(owner, "login", url=url),
        clone_url=require_field(item, "clone_url", url=url),
        ssh_url=item.get("ssh_url"),
        default_branch=item.get("default_branch"),
        private=bool(item.get("private", False)),
    )


class GitHubProvider(RemoteProvider):
    def __init__(self, http: HttpClient) -> None:
        self._http = http

    def _headers(self, params: ProviderParams) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if params.token is not None:
            headers["Authorization"] = f"Bearer {params.token}"
        return headers

    def _list(self, params: ProviderParams, url: str) -> Iterator[RemoteRepositoryDescriptor]:
        for item in iter_pages(self._http, url, headers=self._headers(params)):
            yield _descriptor(item, url=url)

    def list_repositories(self, params: ProviderParams) -> Iterator[RemoteRepositoryDescriptor]:
        base = (params.api_url or GITHUB_API_URL).rstrip("/")
        urls = [f"{base}/users/{quote(user)}/repos?per_page={PAGE_SIZE}" for user in params.users]
        urls.extend(
            f"{base}/orgs/{quote(group)}/repos?per_page={PAGE_SIZE}" for group in params.groups
        )
        if params.owner:
            if params.token is None:
                raise ProviderError(
                    status_code=None,
                    message="listing the token owner's repositories needs a token",
                )
            urls.append(f"{base}/user/repos?affiliation=owner&per_page={PAGE_SIZE}")
        return unique_by_location(chain.from_iterable(self._list(params, url) for url in urls))
