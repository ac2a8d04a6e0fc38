"""Fake remote provider for testing."""

from collections.abc import Iterator, Sequence

from repotend.providers.abc import RemoteProvider
from repotend.providers.types import (
    ProviderError,
    ProviderParams,
    RemoteRepositoryDescriptor,
)


class FakeRemoteProvider(RemoteProvider):
    """Yields a fixed list of descriptors.

    Mutation Tracking:
    -----------------
    - list_calls: params passed to list_repositories()
    """

    def __init__(
        self,
        *,
        descriptors: Sequence[RemoteRepositoryDescriptor] = (),
        raises: ProviderError | None = None,
    ) -> None:
        self._descriptors = list(descriptors)
        self._raises = raises
        self._list_calls: list[ProviderParams] = []

    def list_repositories(self, params: ProviderParams) -> Iterator[RemoteRepositoryDescriptor]:
        self._list_calls.append(params)
        if self._raises is not None:
            raise self._raises
        return iter(self._descriptors)

    @property
    def list_calls(self) -> list[ProviderParams]:
        return list(self._list_calls)
