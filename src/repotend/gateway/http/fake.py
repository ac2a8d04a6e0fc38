"""Fake HTTP client for testing."""

from collections.abc import Mapping

from repotend.gateway.http.abc import HttpClient, HttpError, HttpResponse


class FakeHttpClient(HttpClient):
    """Serves canned responses keyed by exact URL.

    Unknown URLs raise HttpError with status 404, so a test fails loudly
    when a provider builds an unexpected URL.

    Mutation Tracking:
    -----------------
    - requests: (url, headers) tuples in request order
    """

    def __init__(
        self,
        *,
        responses: Mapping[str, HttpResponse] | None = None,
        errors: Mapping[str, HttpError] | None = None,
    ) -> None:
        self._responses = dict(responses or {})
        self._errors = dict(errors or {})
        self._requests: list[tuple[str, dict[str, str]]] = []

    def get_json(self, url: str, *, headers: Mapping[str, str]) -> HttpResponse:
        self._requests.append((url, dict(headers)))
        if url in self._errors:
            raise self._errors[url]
        if url not in self._responses:
            raise HttpError(url=url, status_code=404, message="no fake response")
        return self._responses[url]

    @property
    def requests(self) -> list[tuple[str, dict[str, str]]]:
        return list(self._requests)

    @property
    def requested_urls(self) -> list[str]:
        return [url for url, _ in self._requests]
