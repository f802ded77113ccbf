"""Shared HTTP plumbing for the count sources."""

import asyncio
from typing import Any, Dict, Optional

import aiohttp

from guildwatch.domain.models import DECODE, NETWORK, PROTOCOL, CountResult

DEFAULT_TIMEOUT_SECONDS = 10.0


class SourceError(Exception):
    """A classified failure inside a source; converted to CountResult at the boundary."""

    def __init__(self, kind: str, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message

    def to_result(self, source: str) -> CountResult:
        return CountResult.fail(self.message, kind=self.kind, source=source)


def client_timeout(seconds: float) -> aiohttp.ClientTimeout:
    return aiohttp.ClientTimeout(total=seconds)


async def get_json(
    session: aiohttp.ClientSession,
    url: str,
    headers: Optional[Dict[str, str]] = None,
    params: Optional[Dict[str, str]] = None,
) -> Any:
    """GET ``url`` and return the decoded JSON body.

    Raises SourceError classified as network, protocol or decode failure.
    """
    try:
        async with session.get(url, headers=headers, params=params) as resp:
            if resp.status < 200 or resp.status >= 300:
                # error bodies are only for the log line; never let their encoding fail the read
                body = await resp.text(errors="replace")
                raise SourceError(PROTOCOL, f"HTTP {resp.status}: {body[:200]}")
            try:
                # content_type=None: some endpoints serve JSON as text/plain
                return await resp.json(content_type=None)
            except ValueError as e:
                raise SourceError(DECODE, f"invalid JSON body: {e}")
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        raise SourceError(NETWORK, str(e) or type(e).__name__)
