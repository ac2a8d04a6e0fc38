"""GitLab REST API (v4) provider."""

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

GITLAB_URL = "https://gitlab.com"
PAGE_SIZE = 100


def _descriptor(item: dict[str, Any], *, url: str) -> RemoteRepositoryDescriptor:
    namespace = require_field(item, "namespace", url=url)
    return RemoteRepositoryDescriptor(
        name=require_field(item, "path", url=url),
        namespace=require_field(namespace, "full_path", url=url),
        clone_url=require_field(item, "http_url_to_repo", url=url),
        ssh_url=item.get("ssh_url_to_repo"),
        default_branch=item.get("default_branch"),
        private=item.get("visibility", "private") != "public",
    )


class GitLabProvider(RemoteProvider):
    """Lists projects; groups include their subgroups."""

    def __init__(self, http: HttpClient) -> None:
        self._http = http

    def _list(self, params: ProviderParams, url: str) -> Iterator[RemoteRepositoryDescriptor]:
        headers = {} if params.token is None else {"PRIVATE-TOKEN": params.token}
        for item in iter_pages(self._http, url, headers=headers):
            yield _descriptor(item, url=url)

    def list_repositories(self, params: ProviderParams) -> Iterator[RemoteRepositoryDescriptor]:
        base = f"{(params.api_url or GITLAB_URL).rstrip('/')}/api/v4"
        # Group paths contain slashes for subgroups and must be encoded as one segment.
        urls = [
            f"{base}/users/{quote(user, safe='')}/projects?per_page={PAGE_SIZE}"
            for user in params.users
        ]
        urls.extend(
            f"{base}/groups/{quote(group, safe='')}/projects"
            f"?include_subgroups=true&per_page={PAGE_SIZE}"
            for group in params.groups
        )
        if params.owner:
            if params.token is None:
                raise ProviderError(
                    status_code=None, message="listing the token owner's projects needs a token"
                )
            urls.append(f"{base}/projects?owned=true&per_page={PAGE_SIZE}")
        return unique_by_location(chain.from_iterable(self._list(params, url) for url in urls))
