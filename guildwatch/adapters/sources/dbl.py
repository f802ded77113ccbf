"""discordbotlist.com statistics — no authentication required."""

import aiohttp

from guildwatch.adapters.sources._http import (
    DEFAULT_TIMEOUT_SECONDS,
    SourceError,
    client_timeout,
    get_json,
)
from guildwatch.domain.decode import read_count
from guildwatch.domain.models import DECODE, SEMANTIC, BotCredentials, CountResult

DBL_API_BASE = "https://discordbotlist.com/api/v1"


class DiscordBotListSource:
    name = "discordbotlist"

    def __init__(self, timeout: float = DEFAULT_TIMEOUT_SECONDS, api_base: str = DBL_API_BASE):
        self._timeout = timeout
        self._api_base = api_base.rstrip("/")

    def is_available(self, creds: BotCredentials) -> bool:
        return True

    async def resolve(self, bot_id: str, creds: BotCredentials) -> CountResult:
        url = f"{self._api_base}/bots/{bot_id}/stats"
        try:
            async with aiohttp.ClientSession(timeout=client_timeout(self._timeout)) as session:
                data = await get_json(session, url)
        except SourceError as e:
            return e.to_result(self.name)

        if not isinstance(data, dict):
            return CountResult.fail(
                "discordbotlist returned a non-object body", kind=DECODE, source=self.name
            )
        # Only JSON numbers count here; "guilds": "12" is treated as absent
        count = read_count(data, ("guilds",))
        if count is None:
            return CountResult.fail(
                "could not parse guild count from discordbotlist response",
                kind=SEMANTIC,
                source=self.name,
            )
        return CountResult.ok(count, source=self.name)
