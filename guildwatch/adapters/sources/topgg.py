"""top.gg bot statistics (authenticated with the shared operator token)."""

import aiohttp

from guildwatch.adapters.sources._http import (
    DEFAULT_TIMEOUT_SECONDS,
    SourceError,
    client_timeout,
    get_json,
)
from guildwatch.domain.decode import read_count
from guildwatch.domain.models import DECODE, SEMANTIC, BotCredentials, CountResult

TOPGG_API_BASE = "https://top.gg/api"


class TopGGSource:
    name = "topgg"

    def __init__(self, timeout: float = DEFAULT_TIMEOUT_SECONDS, api_base: str = TOPGG_API_BASE):
        self._timeout = timeout
        self._api_base = api_base.rstrip("/")

    def is_available(self, creds: BotCredentials) -> bool:
        return bool(creds.topgg_token)

    async def resolve(self, bot_id: str, creds: BotCredentials) -> CountResult:
        url = f"{self._api_base}/bots/{bot_id}/stats"
        headers = {"Authorization": creds.topgg_token}
        try:
            async with aiohttp.ClientSession(timeout=client_timeout(self._timeout)) as session:
                data = await get_json(session, url, headers=headers)
        except SourceError as e:
            return e.to_result(self.name)

        if not isinstance(data, dict):
            return CountResult.fail("top.gg returned a non-object body", kind=DECODE, source=self.name)
        count = read_count(data, ("server_count",))
        if count is None:
            return CountResult.fail(
                "top.gg response has no server_count", kind=SEMANTIC, source=self.name
            )
        return CountResult.ok(count, source=self.name)
