"""Turn provider descriptors into repository configuration."""

import logging
from collections.abc import Iterable
from pathlib import Path

from repotend.core.types import Remote, RepositoryConfig, WorktreePolicy, detect_remote_type
from repotend.providers.types import RemoteRepositoryDescriptor

logger = logging.getLogger(__name__)


def _remote_url(descriptor: RemoteRepositoryDescriptor, *, force_ssh: bool) -> str:
    if not force_ssh:
        return descriptor.clone_url
    if descriptor.ssh_url is None:
        logger.warning(
            "%s/%s has no SSH URL, using %s",
            descriptor.namespace,
            descriptor.name,
            descriptor.clone_url,
        )
        return descriptor.clone_url
    return descriptor.ssh_url


def build_repository_configs(
    descriptors: Iterable[RemoteRepositoryDescriptor],
    *,
    root: Path,
    remote_name: str,
    force_ssh: bool,
    worktree_policy: WorktreePolicy,
) -> tuple[RepositoryConfig, ...]:
    """Build one RepositoryConfig per descriptor, located at root/namespace/name.

    Args:
        descriptors: Repositories reported by a provider
        root: Directory the provider's repositories live under
        remote_name: Name given to the single configured remote
        force_ssh: Use SSH URLs where the provider reports one
        worktree_policy: Policy applied to every repository

    Returns:
        Configurations in descriptor order
    """
    configs: list[RepositoryConfig] = []
    for descriptor in descriptors:
        url = _remote_url(descriptor, force_ssh=force_ssh)
        configs.append(
            RepositoryConfig(
                name=f"{descriptor.namespace}/{descriptor.name}",
                path=root / descriptor.namespace / descriptor.name,
                remotes=(Remote(name=remote_name, url=url, remote_type=detect_remote_type(url)),),
                worktree_policy=worktree_policy,
                default_branch=descriptor.default_branch,
            )
        )
    return tuple(configs)
