"""Abstract remote provider and shared pagination."""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterator, Mapping
from typing import Any

from repotend.gateway.http.abc import HttpClient, HttpError
from repotend.providers.types import (
    ProviderError,
    ProviderParams,
    RemoteRepositoryDescriptor,
)

logger = logging.getLogger(__name__)


class RemoteProvider(ABC):
    """Lists repositories hosted on a forge."""

    @abstractmethod
    def list_repositories(self, params: ProviderParams) -> Iterator[RemoteRepositoryDescriptor]:
        """Yield every repository selected by params.

        Pages are fetched lazily, so a consumer that stops early never
        requests the remaining pages. Repositories reachable through more
        than one selector (e.g. a user and the token owner) are yielded once.

        Raises:
            ProviderError: If a request fails or returns an unexpected payload
        """
        ...


def iter_pages(
    http: HttpClient, url: str, *, headers: Mapping[str, str]
) -> Iterator[dict[str, Any]]:
    """Yield items of a paginated JSON list, following rel="next" links."""
    next_url: str | None = url
    while next_url is not None:
        try:
            response = http.get_json(next_url, headers=headers)
        except HttpError as e:
            message = e.message if e.status_code is not None else f"{e.url}: {e.message}"
            raise ProviderError(status_code=e.status_code, message=message) from e
        if not isinstance(response.data, list):
            raise ProviderError(
                status_code=None, message=f"{next_url}: expected a JSON list of repositories"
            )
        logger.debug("%s: %d item(s)", next_url, len(response.data))
        for item in response.data:
            if not isinstance(item, dict):
                raise ProviderError(
                    status_code=None, message=f"{next_url}: unexpected item {item!r}"
                )
            yield item
        next_url = response.next_url


def unique_by_location(
    descriptors: Iterator[RemoteRepositoryDescriptor],
) -> Iterator[RemoteRepositoryDescriptor]:
    seen: set[tuple[str, str]] = set()
    for descriptor in descriptors:
        key = (descriptor.namespace, descriptor.name)
        if key in seen:
            continue
        seen.add(key)
        yield descriptor


def require_field(item: Mapping[str, Any], key: str, *, url: str) -> Any:
    if key not in item or item[key] is None:
        raise ProviderError(status_code=None, message=f'{url}: repository without "{key}"')
    return item[key]
