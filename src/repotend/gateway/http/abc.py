"""Abstract HTTP client used by remote providers."""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


class HttpError(Exception):
    """A request failed: an HTTP error status, an unreachable host or a bad body.

    ``status_code`` is None when no HTTP response was received.
    """

    def __init__(self, *, url: str, status_code: int | None, message: str) -> None:
        status = f" ({status_code})" if status_code is not None else ""
        super().__init__(f"GET {url} failed{status}: {message}")
        self.url = url
        self.status_code = status_code
        self.message = message


@dataclass(frozen=True)
class HttpResponse:
    """A decoded JSON response.

    Attributes:
        data: Parsed JSON body
        next_url: Target of the ``Link: <...>; rel="next"`` header, if any
    """

    data: Any
    next_url: str | None


class HttpClient(ABC):
    """Abstract interface for JSON-over-HTTP requests."""

    @abstractmethod
    def get_json(self, url: str, *, headers: Mapping[str, str]) -> HttpResponse:
        """GET url and decode the JSON body.

        Raises:
            HttpError: On HTTP errors, unreachable hosts or invalid JSON
        """
        ...
