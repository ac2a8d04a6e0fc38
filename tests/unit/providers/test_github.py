"""Tests for the GitHub provider."""

import pytest

from repotend.gateway.http.abc import HttpError, HttpResponse
from repotend.gateway.http.fake import FakeHttpClient
from repotend.providers.github import GitHubProvider
from repotend.providers.types import ProviderError, ProviderParams, RemoteRepositoryDescriptor


def _repo(owner: str, name: str, *, private: bool = False) -> dict[str, object]:
    return {
        "name": name,
        "owner": {"login": owner},
        "clone_url": f"https://github.com/{owner}/{name}.git",
        "ssh_url": f"git@github.com:{owner}/{name}.git",
        "default_branch": "main",
        "private": private,
    }


def test_follows_pagination_across_users_and_orgs() -> None:
    page1 = "https://api.github.com/users/alice/repos?per_page=100"
    page2 = "https://api.github.com/user/12/repos?page=2"
    org = "https://api.github.com/orgs/acme/repos?per_page=100"
    http = FakeHttpClient(
        responses={
            page1: HttpResponse(data=[_repo("alice", "one")], next_url=page2),
            page2: HttpResponse(data=[_repo("alice", "two", private=True)], next_url=None),
            org: HttpResponse(data=[_repo("acme", "tool")], next_url=None),
        }
    )
    params = ProviderParams(provider="github", token="t0k", users=("alice",), groups=("acme",))

    repos = list(GitHubProvider(http).list_repositories(params))

    assert [(r.namespace, r.name) for r in repos] == [
        ("alice", "one"),
        ("alice", "two"),
        ("acme", "tool"),
    ]
    assert repos[1] == RemoteRepositoryDescriptor(
        name="two",
        namespace="alice",
        clone_url="https://github.com/alice/two.git",
        ssh_url="git@github.com:alice/two.git",
        default_branch="main",
        private=True,
    )
    assert http.requested_urls == [page1, page2, org]
    assert all(headers["Authorization"] == "Bearer t0k" for _, headers in http.requests)


def test_pages_are_fetched_lazily() -> None:
    page1 = "https://api.github.com/users/alice/repos?per_page=100"
    http = FakeHttpClient(
        responses={
            page1: HttpResponse(
                data=[_repo("alice", "one")], next_url="https://api.github.com/never"
            )
        }
    )
    params = ProviderParams(provider="github", token=None, users=("alice",))

    repos = GitHubProvider(http).list_repositories(params)
    first = next(iter(repos))

    assert first.name == "one"
    assert http.requested_urls == [page1]


def test_owner_listing_deduplicates_and_uses_custom_api_url() -> None:
    user = "https://ghe.example/api/v3/users/alice/repos?per_page=100"
    owned = "https://ghe.example/api/v3/user/repos?affiliation=owner&per_page=100"
    http = FakeHttpClient(
        responses={
            user: HttpResponse(data=[_repo("alice", "one")], next_url=None),
            owned: HttpResponse(
                data=[_repo("alice", "one"), _repo("alice", "secret")], next_url=None
            ),
        }
    )
    params = ProviderParams(
        provider="github",
        token="t",
        api_url="https://ghe.example/api/v3/",
        users=("alice",),
        owner=True,
    )

    repos = list(GitHubProvider(http).list_repositories(params))

    assert [r.name for r in repos] == ["one", "secret"]


def test_owner_listing_requires_token() -> None:
    params = ProviderParams(provider="github", token=None, owner=True)

    with pytest.raises(ProviderError, match="needs a token"):
        GitHubProvider(FakeHttpClient()).list_repositories(params)


def test_http_errors_propagate() -> None:
    url = "https://api.github.com/orgs/acme/repos?per_page=100"
    http = FakeHttpClient(
        errors={url: HttpError(url=url, status_code=401, message="Bad credentials")}
    )
    params = ProviderParams(provider="github", token="bad", groups=("acme",))

    with pytest.raises(ProviderError) as exc_info:
        list(GitHubProvider(http).list_repositories(params))

    assert exc_info.value.status_code == 401
    assert "Bad credentials" in str(exc_info.value)


def test_non_list_payload_is_rejected() -> None:
    url = "https://api.github.com/orgs/acme/repos?per_page=100"
    http = FakeHttpClient(
        responses={url: HttpResponse(data={"message": "Not Found"}, next_url=None)}
    )
    params = ProviderParams(provider="github", token=None, groups=("acme",))

    with pytest.raises(ProviderError, match="expected a JSON list"):
        list(GitHubProvider(http).list_repositories(params))
