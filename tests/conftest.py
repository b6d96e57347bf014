"""Pytest configuration and fixtures."""

import httpx
import pytest

from couch_tools.client import CouchClient
from couch_tools.client.config import CouchConfig


class FakeCouch:
    """Scripted CouchDB server for ``httpx.MockTransport``.

    Responses are keyed by method and raw (still percent-encoded) path.
    Unscripted requests get a 404 envelope. Every request is recorded.
    """

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self._routes: dict[tuple[str, str], httpx.Response | Exception] = {}

    def route(self, method: str, path: str, status: int = 200, json=None, content=None):
        """Script the response for a method and path."""
        self._routes[(method, path)] = httpx.Response(status, json=json, content=content)

    def fail(self, method: str, path: str, error: Exception):
        """Make a method and path raise a transport error."""
        self._routes[(method, path)] = error

    def methods(self) -> list[str]:
        return [r.method for r in self.requests]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.raw_path.split(b"?")[0].decode("ascii")
        result = self._routes.get((request.method, path))
        if isinstance(result, Exception):
            raise result
        if result is None:
            return httpx.Response(404, json={"error": "not_found", "reason": "missing"})
        return result


@pytest.fixture
def config():
    """Create a test config."""
    return CouchConfig(
        uri="http://localhost:5984",
        db_prefix="test_",
        gzip=True,
        timeout=4,
    )


@pytest.fixture
def fake_couch():
    """Create an empty scripted server."""
    return FakeCouch()


@pytest.fixture
def client(config, fake_couch):
    """Create a client that talks to the scripted server."""
    with CouchClient(config=config, transport=httpx.MockTransport(fake_couch)) as client:
        yield client
