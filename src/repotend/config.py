"""Load and dump repository configuration files.

Example config.toml:
  [[trees]]
  root = "~/src"

  [[trees.repos]]
  name = "project"
  default_branch = "main"
  worktree_policy = "exclusive"

  [[trees.repos.remotes]]
  name = "origin"
  url = "https://github.com/me/project.git"

  [[trees.repos.worktrees]]
  branch = "feature"
  path = "wt/feature"
  track = { remote = "origin", branch = "feature" }

  [[providers]]
  provider = "github"
  root = "~/src/github"
  token_command = "gh auth token"
  users = ["me"]

YAML files (.yaml / .yml) use the same structure.
"""

import logging
import os
import tomllib
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

import tomli_w
import yaml

from repotend.core.types import (
    Remote,
    RepositoryConfig,
    TrackingRef,
    WorktreePolicy,
    WorktreeSpec,
    detect_remote_type,
)
from repotend.providers.types import PROVIDER_NAMES, ProviderParams

logger = logging.getLogger(__name__)

ConfigFormat = Literal["toml", "yaml"]

_TREE_KEYS = frozenset({"root", "repos"})
_REPO_KEYS = frozenset({"name", "default_branch", "worktree_policy", "remotes", "worktrees"})
_REMOTE_KEYS = frozenset({"name", "url", "type", "fetch"})
_WORKTREE_KEYS = frozenset({"branch", "path", "track"})
_TRACK_KEYS = frozenset({"remote", "branch"})
_PROVIDER_KEYS = frozenset(
    {
        "provider",
        "root",
        "token",
        "token_command",
        "api_url",
        "users",
        "groups",
        "owner",
        "force_ssh",
        "remote_name",
        "worktree_policy",
    }
)


class ConfigError(Exception):
    """The configuration file cannot be read, parsed or validated."""


@dataclass(frozen=True)
class TreeConfig:
    """Repositories that live under a common root directory."""

    root: Path
    repositories: tuple[RepositoryConfig, ...]


@dataclass(frozen=True)
class ProviderSource:
    """A provider whose repositories are added to the configuration at sync time.

    ``params.token`` is only set when the file holds a literal token;
    ``token_command`` is run lazily, when the source is expanded.
    """

    params: ProviderParams
    root: Path
    token_command: str | None
    remote_name: str


@dataclass(frozen=True)
class Config:
    trees: tuple[TreeConfig, ...]
    providers: tuple[ProviderSource, ...] = ()

    @property
    def repositories(self) -> tuple[RepositoryConfig, ...]:
        return tuple(repo for tree in self.trees for repo in tree.repositories)


def expand_path(raw: str, *, base: Path | None = None) -> Path:
    """Expand ``~`` and ``$VARS``; relative results are resolved against base."""
    path = Path(os.path.expandvars(os.path.expanduser(raw)))
    if not path.is_absolute() and base is not None:
        path = base / path
    return path


def format_for_path(path: Path) -> ConfigFormat:
    if path.suffix in (".yaml", ".yml"):
        return "yaml"
    if path.suffix == ".toml":
        return "toml"
    raise ConfigError(f"{path}: unknown config format (expected .toml, .yaml or .yml)")


def _check_keys(data: Mapping[str, Any], allowed: frozenset[str], *, where: str) -> None:
    unknown = sorted(set(data) - allowed)
    if unknown:
        raise ConfigError(f"{where}: unknown key(s) {', '.join(unknown)}")


def _table(value: Any, *, where: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ConfigError(f"{where}: expected a table")
    return value


def _tables(data: Mapping[str, Any], key: str, *, where: str) -> list[Mapping[str, Any]]:
    value = data.get(key, [])
    if not isinstance(value, list):
        raise ConfigError(f"{where}: {key} must be a list")
    return [_table(item, where=f"{where}.{key}[{index}]") for index, item in enumerate(value)]


def _string(data: Mapping[str, Any], key: str, *, where: str, required: bool = True) -> Any:
    value = data.get(key)
    if value is None:
        if required:
            raise ConfigError(f"{where}: missing required key {key}")
        return None
    if not isinstance(value, str) or not value:
        raise ConfigError(f"{where}: {key} must be a non-empty string")
    return value


def _string_list(data: Mapping[str, Any], key: str, *, where: str) -> tuple[str, ...]:
    value = data.get(key, [])
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigError(f"{where}: {key} must be a list of strings")
    return tuple(value)


def _bool(data: Mapping[str, Any], key: str, *, where: str) -> bool:
    value = data.get(key, False)
    if not isinstance(value, bool):
        raise ConfigError(f"{where}: {key} must be true or false")
    return value


def _worktree_policy(data: Mapping[str, Any], *, where: str) -> WorktreePolicy:
    raw = _string(data, "worktree_policy", where=where, required=False)
    if raw is None:
        return WorktreePolicy.ADDITIVE
    try:
        return WorktreePolicy(raw)
    except ValueError:
        choices = ", ".join(policy.value for policy in WorktreePolicy)
        raise ConfigError(f"{where}: worktree_policy must be one of {choices}") from None


def _parse_remote(data: Mapping[str, Any], *, where: str) -> Remote:
    _check_keys(data, _REMOTE_KEYS, where=where)
    url = _string(data, "url", where=where)
    detected = detect_remote_type(url)
    declared = _string(data, "type", where=where, required=False)
    if detected is None:
        raise ConfigError(f"{where}: cannot determine remote type of {url!r}")
    if declared is not None and declared != detected:
        raise ConfigError(f"{where}: type {declared!r} does not match url {url!r} ({detected})")
    return Remote(
        name=_string(data, "name", where=where),
        url=url,
        remote_type=detected,
        fetch_refspec=_string(data, "fetch", where=where, required=False),
    )


def _parse_track(value: Any, *, branch: str, where: str) -> TrackingRef | None:
    if value is None:
        return None
    if isinstance(value, str) and value:
        return TrackingRef(remote=value, branch=branch)
    track = _table(value, where=f"{where}.track")
    _check_keys(track, _TRACK_KEYS, where=f"{where}.track")
    remote_branch = _string(track, "branch", where=f"{where}.track", required=False)
    return TrackingRef(
        remote=_string(track, "remote", where=f"{where}.track"),
        branch=remote_branch if remote_branch is not None else branch,
    )


def _parse_worktree(data: Mapping[str, Any], *, where: str) -> WorktreeSpec:
    _check_keys(data, _WORKTREE_KEYS, where=where)
    branch = _string(data, "branch", where=where)
    path = _string(data, "path", where=where, required=False)
    return WorktreeSpec(
        branch=branch,
        subdirectory=path if path is not None else branch,
        track=_parse_track(data.get("track"), branch=branch, where=where),
    )


def _parse_repository(data: Mapping[str, Any], *, root: Path, where: str) -> RepositoryConfig:
    _check_keys(data, _REPO_KEYS, where=where)
    name = _string(data, "name", where=where)
    remotes = tuple(
        _parse_remote(item, where=f"{where}.remotes[{index}]")
        for index, item in enumerate(_tables(data, "remotes", where=where))
    )
    seen: set[str] = set()
    for remote in remotes:
        if remote.name in seen:
            raise ConfigError(f"{where}: remote {remote.name!r} is configured more than once")
        seen.add(remote.name)
    worktrees = tuple(
        _parse_worktree(item, where=f"{where}.worktrees[{index}]")
        for index, item in enumerate(_tables(data, "worktrees", where=where))
    )
    return RepositoryConfig(
        name=name,
        path=root / name,
        remotes=remotes,
        worktrees=worktrees,
        worktree_policy=_worktree_policy(data, where=where),
        default_branch=_string(data, "default_branch", where=where, required=False),
    )


def _parse_tree(data: Mapping[str, Any], *, base: Path, where: str) -> TreeConfig:
    _check_keys(data, _TREE_KEYS, where=where)
    root = expand_path(_string(data, "root", where=where), base=base)
    repositories = tuple(
        _parse_repository(item, root=root, where=f"{where}.repos[{index}]")
        for index, item in enumerate(_tables(data, "repos", where=where))
    )
    return TreeConfig(root=root, repositories=repositories)


def _parse_provider(data: Mapping[str, Any], *, base: Path, where: str) -> ProviderSource:
    _check_keys(data, _PROVIDER_KEYS, where=where)
    provider = _string(data, "provider", where=where)
    if provider not in PROVIDER_NAMES:
        raise ConfigError(f"{where}: provider must be one of {', '.join(PROVIDER_NAMES)}")
    token = _string(data, "token", where=where, required=False)
    token_command = _string(data, "token_command", where=where, required=False)
    if token is not None and token_command is not None:
        raise ConfigError(f"{where}: token and token_command are mutually exclusive")
    params = ProviderParams(
        provider=provider,
        token=token,
        api_url=_string(data, "api_url", where=where, required=False),
        users=_string_list(data, "users", where=where),
        groups=_string_list(data, "groups", where=where),
        owner=_bool(data, "owner", where=where),
        force_ssh=_bool(data, "force_ssh", where=where),
        worktree_policy=_worktree_policy(data, where=where),
    )
    if not (params.users or params.groups or params.owner):
        raise ConfigError(f"{where}: select repositories with users, groups or owner")
    remote_name = _string(data, "remote_name", where=where, required=False)
    return ProviderSource(
        params=params,
        root=expand_path(_string(data, "root", where=where), base=base),
        token_command=token_command,
        remote_name=remote_name if remote_name is not None else "origin",
    )


def validate_unique_paths(repositories: Sequence[RepositoryConfig]) -> None:
    """Raise ConfigError if two repositories resolve to the same directory."""
    seen: dict[Path, str] = {}
    for repo in repositories:
        key = Path(os.path.normpath(repo.path))
        if key in seen:
            raise ConfigError(
                f"Repositories {seen[key]!r} and {repo.name!r} both live at {repo.path}"
            )
        seen[key] = repo.name


def parse_config(data: Mapping[str, Any], *, base: Path) -> Config:
    """Build a Config from already-decoded file contents.

    Args:
        data: Decoded TOML or YAML document
        base: Directory relative roots are resolved against

    Raises:
        ConfigError: On schema violations or duplicate repository paths
    """
    _check_keys(data, frozenset({"trees", "providers"}), where="config")
    trees = tuple(
        _parse_tree(item, base=base, where=f"trees[{index}]")
        for index, item in enumerate(_tables(data, "trees", where="config"))
    )
    providers = tuple(
        _parse_provider(item, base=base, where=f"providers[{index}]")
        for index, item in enumerate(_tables(data, "providers", where="config"))
    )
    config = Config(trees=trees, providers=providers)
    validate_unique_paths(config.repositories)
    return config


def load_config(path: Path) -> Config:
    """Read a TOML or YAML configuration file, chosen by suffix.

    Relative tree roots are resolved against the file's directory.

    Raises:
        ConfigError: If the file is missing, malformed or invalid
    """
    config_format = format_for_path(path)
    if not path.exists():
        raise ConfigError(f"{path}: configuration file not found")
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"{path}: {e.strerror}") from e
    try:
        if config_format == "toml":
            data: Any = tomllib.loads(text)
        else:
            data = yaml.safe_load(text)
    except (tomllib.TOMLDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f"{path}: {e}") from e
    if data is None:
        data = {}
    if not isinstance(data, Mapping):
        raise ConfigError(f"{path}: expected a table at the top level")
    logger.debug("Loaded %s configuration from %s", config_format, path)
    return parse_config(data, base=path.parent.absolute())


def _track_to_data(spec: WorktreeSpec) -> dict[str, str] | None:
    if spec.track is None:
        return None
    return {"remote": spec.track.remote, "branch": spec.track.branch}


def _repository_to_data(repo: RepositoryConfig) -> dict[str, Any]:
    data: dict[str, Any] = {"name": repo.name}
    if repo.default_branch is not None:
        data["default_branch"] = repo.default_branch
    if repo.worktree_policy is not WorktreePolicy.ADDITIVE:
        data["worktree_policy"] = repo.worktree_policy.value
    if repo.remotes:
        remotes: list[dict[str, Any]] = []
        for remote in repo.remotes:
            entry: dict[str, Any] = {"name": remote.name, "url": remote.url}
            if remote.remote_type is not None:
                entry["type"] = remote.remote_type
            if remote.fetch_refspec is not None:
                entry["fetch"] = remote.fetch_refspec
            remotes.append(entry)
        data["remotes"] = remotes
    if repo.worktrees:
        worktrees: list[dict[str, Any]] = []
        for spec in repo.worktrees:
            entry = {"branch": spec.branch, "path": spec.subdirectory}
            track = _track_to_data(spec)
            if track is not None:
                entry["track"] = track
            worktrees.append(entry)
        data["worktrees"] = worktrees
    return data


def config_to_data(trees: Sequence[TreeConfig]) -> dict[str, Any]:
    """Inverse of parse_config for trees (providers are not emitted)."""
    return {
        "trees": [
            {
                "root": str(tree.root),
                "repos": [_repository_to_data(repo) for repo in tree.repositories],
            }
            for tree in trees
        ]
    }


def dump_config(trees: Sequence[TreeConfig], config_format: ConfigFormat) -> str:
    data = config_to_data(trees)
    if config_format == "toml":
        return tomli_w.dumps(data)
    return yaml.safe_dump(data, sort_keys=False)
