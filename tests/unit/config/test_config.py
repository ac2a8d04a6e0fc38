"""Tests for loading and dumping configuration files."""

import tomllib
from pathlib import Path

import pytest
import yaml

from repotend.config import (
    ConfigError,
    TreeConfig,
    dump_config,
    expand_path,
    load_config,
    parse_config,
)
from repotend.core.types import (
    Remote,
    RepositoryConfig,
    TrackingRef,
    WorktreePolicy,
    WorktreeSpec,
)

FULL_TOML = """
[[trees]]
root = "src"

[[trees.repos]]
name = "project"
default_branch = "main"
worktree_policy = "exclusive"

[[trees.repos.remotes]]
name = "origin"
url = "https://forge.example/me/project.git"
type = "https"

[[trees.repos.remotes]]
name = "fork"
url = "git@forge.example:other/project.git"
fetch = "+refs/heads/*:refs/remotes/fork/*"

[[trees.repos.worktrees]]
branch = "feature"
path = "wt/feature"
track = { remote = "origin", branch = "feature" }

[[trees.repos.worktrees]]
branch = "hotfix"
track = "fork"

[[providers]]
provider = "github"
root = "~/github"
token_command = "echo secret"
users = ["me"]
force_ssh = true
"""


def _write(tmp_path: Path, name: str, content: str) -> Path:
    path = tmp_path / name
    path.write_text(content, encoding="utf-8")
    return path


def test_load_full_toml(tmp_path: Path) -> None:
    config = load_config(_write(tmp_path, "config.toml", FULL_TOML))

    (tree,) = config.trees
    assert tree.root == tmp_path / "src"
    (repo,) = tree.repositories
    assert repo == RepositoryConfig(
        name="project",
        path=tmp_path / "src" / "project",
        remotes=(
            Remote(name="origin", url="https://forge.example/me/project.git", remote_type="https"),
            Remote(
                name="fork",
                url="git@forge.example:other/project.git",
                remote_type="ssh",
                fetch_refspec="+refs/heads/*:refs/remotes/fork/*",
            ),
        ),
        worktrees=(
            WorktreeSpec(
                branch="feature",
                subdirectory="wt/feature",
                track=TrackingRef(remote="origin", branch="feature"),
            ),
            WorktreeSpec(
                branch="hotfix", subdirectory="hotfix", track=TrackingRef("fork", "hotfix")
            ),
        ),
        worktree_policy=WorktreePolicy.EXCLUSIVE,
        default_branch="main",
    )
    assert config.repositories == (repo,)

    (source,) = config.providers
    assert source.params.provider == "github"
    assert source.params.users == ("me",)
    assert source.params.force_ssh is True
    assert source.params.token is None
    assert source.token_command == "echo secret"
    assert source.remote_name == "origin"
    assert source.root == Path("~/github").expanduser()


def test_load_yaml(tmp_path: Path) -> None:
    content = """
trees:
  - root: /srv/code
    repos:
      - name: tool
        remotes:
          - name: origin
            url: https://forge.example/tool.git
"""
    config = load_config(_write(tmp_path, "config.yml", content))

    (repo,) = config.repositories
    assert repo.path == Path("/srv/code/tool")
    assert repo.remotes[0].remote_type == "https"
    assert repo.worktree_policy is WorktreePolicy.ADDITIVE


def test_root_expands_environment_variables(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("CODE_ROOT", "/data/code")

    config = parse_config({"trees": [{"root": "$CODE_ROOT/work", "repos": []}]}, base=tmp_path)

    assert config.trees[0].root == Path("/data/code/work")


def test_expand_path_keeps_absolute_paths() -> None:
    assert expand_path("/abs", base=Path("/elsewhere")) == Path("/abs")
    assert expand_path("rel", base=Path("/base")) == Path("/base/rel")


def test_duplicate_repository_paths_are_rejected(tmp_path: Path) -> None:
    data = {
        "trees": [
            {"root": "/code", "repos": [{"name": "a"}]},
            {"root": "/code/", "repos": [{"name": "a"}]},
        ]
    }

    with pytest.raises(ConfigError, match="both live at"):
        parse_config(data, base=tmp_path)


def test_duplicate_remote_names_are_rejected(tmp_path: Path) -> None:
    data = {
        "trees": [
            {
                "root": "/code",
                "repos": [
                    {
                        "name": "a",
                        "remotes": [
                            {"name": "origin", "url": "https://x/a.git"},
                            {"name": "origin", "url": "https://y/a.git"},
                        ],
                    }
                ],
            }
        ]
    }

    with pytest.raises(ConfigError, match="more than once"):
        parse_config(data, base=tmp_path)


@pytest.mark.parametrize(
    ("remote", "message"),
    [
        ({"name": "origin", "url": "http://insecure/a.git"}, "cannot determine remote type"),
        ({"name": "origin", "url": "https://x/a.git", "type": "ssh"}, "does not match"),
        ({"url": "https://x/a.git"}, "missing required key name"),
        ({"name": "origin", "url": "https://x/a.git", "push": "x"}, "unknown key"),
    ],
)
def test_invalid_remotes_are_rejected(
    tmp_path: Path, remote: dict[str, str], message: str
) -> None:
    data = {"trees": [{"root": "/code", "repos": [{"name": "a", "remotes": [remote]}]}]}

    with pytest.raises(ConfigError, match=message):
        parse_config(data, base=tmp_path)


def test_invalid_worktree_policy_is_rejected(tmp_path: Path) -> None:
    data = {"trees": [{"root": "/code", "repos": [{"name": "a", "worktree_policy": "purge"}]}]}

    with pytest.raises(ConfigError, match="worktree_policy must be one of"):
        parse_config(data, base=tmp_path)


def test_provider_needs_a_selection(tmp_path: Path) -> None:
    data = {"providers": [{"provider": "gitlab", "root": "/code"}]}

    with pytest.raises(ConfigError, match="users, groups or owner"):
        parse_config(data, base=tmp_path)


def test_provider_token_sources_are_exclusive(tmp_path: Path) -> None:
    data = {
        "providers": [
            {
                "provider": "gitlab",
                "root": "/code",
                "token": "t",
                "token_command": "echo t",
                "owner": True,
            }
        ]
    }

    with pytest.raises(ConfigError, match="mutually exclusive"):
        parse_config(data, base=tmp_path)


def test_unknown_provider_is_rejected(tmp_path: Path) -> None:
    data = {"providers": [{"provider": "bitbucket", "root": "/code", "owner": True}]}

    with pytest.raises(ConfigError, match="provider must be one of"):
        parse_config(data, base=tmp_path)


def test_malformed_toml_is_a_config_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        load_config(_write(tmp_path, "config.toml", "[[trees]\nroot = "))


def test_missing_file_is_a_config_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="not found"):
        load_config(tmp_path / "absent.toml")


def test_unknown_suffix_is_a_config_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="unknown config format"):
        load_config(_write(tmp_path, "config.json", "{}"))


def test_empty_yaml_is_an_empty_config(tmp_path: Path) -> None:
    config = load_config(_write(tmp_path, "config.yaml", ""))

    assert config.trees == ()
    assert config.providers == ()


def _sample_tree() -> TreeConfig:
    root = Path("/code")
    return TreeConfig(
        root=root,
        repositories=(
            RepositoryConfig(
                name="group/project",
                path=root / "group" / "project",
                remotes=(Remote(name="origin", url="https://x/p.git", remote_type="https"),),
                worktrees=(
                    WorktreeSpec(branch="f", subdirectory="wt/f", track=TrackingRef("origin", "f")),
                ),
                default_branch="main",
            ),
        ),
    )


def test_dumped_toml_loads_back(tmp_path: Path) -> None:
    text = dump_config([_sample_tree()], "toml")

    assert tomllib.loads(text)["trees"][0]["repos"][0]["name"] == "group/project"
    config = load_config(_write(tmp_path, "config.toml", text))
    assert config.trees == (_sample_tree(),)


def test_dumped_yaml_omits_defaults() -> None:
    data = yaml.safe_load(dump_config([_sample_tree()], "yaml"))

    (repo,) = data["trees"][0]["repos"]
    assert "worktree_policy" not in repo
    assert repo["worktrees"] == [
        {"branch": "f", "path": "wt/f", "track": {"remote": "origin", "branch": "f"}}
    ]
