"""Shared fixtures: a stand-in for aiohttp.ClientSession."""

import json

import pytest


def _to_bytes(body):
    if isinstance(body, bytes):
        return body
    if isinstance(body, str):
        return body.encode("utf-8")
    return json.dumps(body).encode("utf-8")


class FakeResponse:
    """Holds the raw body as bytes and decodes it the way aiohttp.ClientResponse does."""

    def __init__(self, status, body):
        self.status = status
        self._body = _to_bytes(body)

    async def read(self):
        return self._body

    async def text(self, encoding="utf-8", errors="strict"):
        return self._body.decode(encoding, errors)

    async def json(self, content_type="application/json"):
        stripped = self._body.strip()
        if not stripped:
            return None
        # strict decode: UnicodeDecodeError and JSONDecodeError are both ValueError
        return json.loads(stripped.decode("utf-8"))

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        pass


class _RaisingContext:
    def __init__(self, exc):
        self._exc = exc

    async def __aenter__(self):
        raise self._exc

    async def __aexit__(self, *args):
        pass


class FakeHTTP:
    """Replaces aiohttp.ClientSession; hands out queued responses in call order.

    Each queued item is one of:
      - an Exception instance, raised when the request is made
      - a (status, body) tuple; str and bytes bodies are sent raw
      - anything else, sent as a 200 JSON body
    """

    def __init__(self, responses=(), routes=None):
        self._responses = list(responses)
        # url substring -> list of queued items, used instead of the shared queue
        self._routes = {k: list(v) for k, v in (routes or {}).items()}
        self.calls = []
        self.session_kwargs = []

    def __call__(self, *args, **kwargs):
        self.session_kwargs.append(kwargs)
        return _FakeSession(self)

    def _next(self, url, kwargs):
        self.calls.append({"url": url, **kwargs})
        queue = self._responses
        for fragment, routed in self._routes.items():
            if fragment in url:
                queue = routed
                break
        if not queue:
            raise AssertionError(f"unexpected request to {url}")
        item = queue.pop(0)
        if isinstance(item, BaseException):
            return _RaisingContext(item)
        if isinstance(item, tuple):
            return FakeResponse(*item)
        return FakeResponse(200, item)


class _FakeSession:
    def __init__(self, http):
        self._http = http

    def get(self, url, **kwargs):
        return self._http._next(url, kwargs)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        pass


@pytest.fixture
def fake_http():
    """Factory: fake_http(resp1, resp2, ...) -> FakeHTTP to patch over ClientSession."""
    return lambda *responses: FakeHTTP(responses)


@pytest.fixture
def routed_http():
    """Factory: routed_http({"host-fragment": [resp, ...], ...}) -> FakeHTTP."""
    return lambda routes: FakeHTTP(routes=routes)
