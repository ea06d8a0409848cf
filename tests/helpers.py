"""
Shared fakes for the test suite.
"""

import base64
import json
from typing import Any, Dict, Optional

import requests
from requests.structures import CaseInsensitiveDict

from sbom_analyzer.models import RepositoryRecord

REASONS = {200: "OK", 403: "Forbidden", 404: "Not Found", 500: "Internal Server Error", 502: "Bad Gateway"}


def make_response(
    status_code: int = 200,
    payload: Any = None,
    headers: Optional[Dict[str, str]] = None,
    url: str = ""
) -> requests.Response:
    """Build a real ``requests.Response`` without touching the network."""
    response = requests.Response()
    response.status_code = status_code
    response._content = json.dumps(payload if payload is not None else {}).encode("utf-8")
    response.headers = CaseInsensitiveDict(headers or {})
    response.reason = REASONS.get(status_code, "")
    response.url = url
    response.encoding = "utf-8"
    return response


def make_raw_response(status_code: int = 200, body: bytes = b"") -> requests.Response:
    """Like ``make_response`` but with an arbitrary, possibly non-JSON, body."""
    response = make_response(status_code)
    response._content = body
    return response


def content_payload(text: str) -> Dict[str, Any]:
    """GitHub contents API payload for a file."""
    return {
        "content": base64.b64encode(text.encode("utf-8")).decode("ascii"),
        "encoding": "base64",
        "size": len(text)
    }


class FakeSession(requests.Session):
    """
    Session that answers from a URL -> response table.

    Unknown URLs answer 404. Each call is recorded together with the headers
    the session would have sent.
    """

    def __init__(self, routes: Optional[Dict[str, Any]] = None, default_status: int = 404):
        super().__init__()
        self.routes = routes or {}
        self.default_status = default_status
        self.calls = []

    def request(self, method, url, **kwargs):
        self.calls.append({"method": method, "url": url, "headers": dict(self.headers), **kwargs})

        route = self.routes.get(url)
        if isinstance(route, BaseException):
            raise route
        if callable(route):
            return route()
        if route is None:
            return make_response(self.default_status, {"message": "Not Found"}, url=url)
        return route

    @property
    def requested_urls(self):
        return [call["url"] for call in self.calls]


class FailingSession(FakeSession):
    """Session whose every request fails at the transport level."""

    def request(self, method, url, **kwargs):
        self.calls.append({"method": method, "url": url, "headers": dict(self.headers), **kwargs})
        raise requests.exceptions.ConnectionError("network unreachable")


def make_record(full_name: str = "acme/widget", **overrides) -> RepositoryRecord:
    """RepositoryRecord with sensible defaults for tests."""
    owner, name = full_name.split("/", 1)
    values = {
        "id": full_name.replace("/", "_"),
        "url": f"https://github.com/{full_name}",
        "full_name": full_name,
        "name": name,
        "owner": owner,
    }
    values.update(overrides)
    return RepositoryRecord(**values)


class FixedSynthesizer:
    """Synthesizer returning a fixed list per (repository, tool)."""

    def __init__(self, outputs: Dict[Any, list]):
        self.outputs = outputs
        self.calls = []

    def synthesize(self, repo, tool):
        self.calls.append((repo.full_name, tool.value))
        return list(self.outputs.get((repo.full_name, tool.value), []))
