"""Expand provider sources from the configuration file into trees."""

import logging
from collections.abc import Callable, Sequence
from dataclasses import replace

from repotend.config import ProviderSource, TreeConfig
from repotend.gateway.http.abc import HttpClient
from repotend.providers.abc import RemoteProvider
from repotend.providers.auth import resolve_token
from repotend.providers.configs import build_repository_configs
from repotend.providers.factory import create_provider
from repotend.providers.types import ProviderName

logger = logging.getLogger(__name__)

ProviderFactory = Callable[[ProviderName, HttpClient], RemoteProvider]


def expand_provider_sources(
    sources: Sequence[ProviderSource],
    http: HttpClient,
    *,
    provider_factory: ProviderFactory = create_provider,
) -> tuple[TreeConfig, ...]:
    """Query each provider and return one tree per source.

    Raises:
        ProviderError: If a provider request fails
        CommandError: If a token_command fails
    """
    trees: list[TreeConfig] = []
    for source in sources:
        token = resolve_token(token=source.params.token, token_command=source.token_command)
        params = replace(source.params, token=token)
        provider = provider_factory(params.provider, http)
        repositories = build_repository_configs(
            provider.list_repositories(params),
            root=source.root,
            remote_name=source.remote_name,
            force_ssh=params.force_ssh,
            worktree_policy=params.worktree_policy,
        )
        logger.info(
            "%s: %d repositories for %s", params.provider, len(repositories), source.root
        )
        trees.append(TreeConfig(root=source.root, repositories=repositories))
    return tuple(trees)
