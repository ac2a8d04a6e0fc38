"""HTTP gateway for provider APIs."""

from repotend.gateway.http.abc import HttpClient, HttpError, HttpResponse
from repotend.gateway.http.fake import FakeHttpClient
from repotend.gateway.http.real import RealHttpClient

__all__ = ["FakeHttpClient", "HttpClient", "HttpError", "HttpResponse", "RealHttpClient"]
