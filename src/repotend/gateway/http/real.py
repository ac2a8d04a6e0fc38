"""Production HTTP client using urllib."""

import json
import logging
import re
import urllib.error
import urllib.request
from collections.abc import Mapping

from repotend.gateway.http.abc import HttpClient, HttpError, HttpResponse

logger = logging.getLogger(__name__)

_LINK_NEXT = re.compile(r'<([^>]+)>\s*;\s*rel="?next"?')


def parse_next_link(header: str | None) -> str | None:
    """Extract the rel="next" target from an RFC 8288 Link header."""
    if not header:
        return None
    for part in header.split(","):
        match = _LINK_NEXT.search(part)
        if match is not None:
            return match.group(1)
    return None


def error_message(body: bytes, reason: str) -> str:
    """Message for a failed response: its body when there is one, else the reason."""
    text = body.decode("utf-8", errors="replace").strip()
    return text if text else reason


class RealHttpClient(HttpClient):
    def get_json(self, url: str, *, headers: Mapping[str, str]) -> HttpResponse:
        logger.debug("GET %s", url)
        request = urllib.request.Request(url, headers={"Accept": "application/json", **headers})
        try:
            with urllib.request.urlopen(request) as response:
                body = response.read()
                next_url = parse_next_link(response.headers.get("Link"))
        except urllib.error.HTTPError as e:
            raw = e.read() if e.fp else b""
            raise HttpError(
                url=url, status_code=e.code, message=error_message(raw, str(e.reason))
            ) from e
        except urllib.error.URLError as e:
            raise HttpError(url=url, status_code=None, message=str(e.reason)) from e

        try:
            data = json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise HttpError(url=url, status_code=None, message=f"invalid JSON ({e})") from e
        return HttpResponse(data=data, next_url=next_url)
