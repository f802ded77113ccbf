"""Operator-controlled push endpoint that reports a bot's own server count."""

import aiohttp

from guildwatch.adapters.sources._http import (
    DEFAULT_TIMEOUT_SECONDS,
    SourceError,
    client_timeout,
    get_json,
)
from guildwatch.domain.decode import PUSH_COUNT_FIELDS, read_count
from guildwatch.domain.models import DECODE, SEMANTIC, BotCredentials, CountResult


class PushEndpointSource:
    """GET the per-bot URL and scan the body for a known count field."""

    name = "push_endpoint"

    def __init__(self, timeout: float = DEFAULT_TIMEOUT_SECONDS, fields=PUSH_COUNT_FIELDS):
        self._timeout = timeout
        self._fields = tuple(fields)

    def is_available(self, creds: BotCredentials) -> bool:
        return bool(creds.push_url)

    async def resolve(self, bot_id: str, creds: BotCredentials) -> CountResult:
        try:
            async with aiohttp.ClientSession(timeout=client_timeout(self._timeout)) as session:
                data = await get_json(session, creds.push_url)
        except SourceError as e:
            return e.to_result(self.name)

        if not isinstance(data, dict):
            return CountResult.fail(
                "push endpoint did not return a JSON object", kind=DECODE, source=self.name
            )
        count = read_count(data, self._fields, allow_strings=True)
        if count is None:
            return CountResult.fail(
                "could not find server count in push endpoint response",
                kind=SEMANTIC,
                source=self.name,
            )
        return CountResult.ok(count, source=self.name)
