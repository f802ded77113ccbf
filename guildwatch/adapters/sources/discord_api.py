"""Direct Discord REST lookup using the target bot's own token.

Walks ``GET /users/@me/guilds`` page by page. Discord caps a page at 100
entries and continues after the id of the last entry returned.
"""

import sys

import aiohttp

from guildwatch.adapters.sources._http import (
    DEFAULT_TIMEOUT_SECONDS,
    SourceError,
    client_timeout,
    get_json,
)
from guildwatch.domain.models import DECODE, PROTOCOL, BotCredentials, CountResult

DISCORD_API_BASE = "https://discord.com/api/v10"
PAGE_SIZE = 100


def _log(msg: str):
    print(msg, file=sys.stderr)


class DiscordApiSource:
    name = "discord_api"

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        api_base: str = DISCORD_API_BASE,
        page_size: int = PAGE_SIZE,
    ):
        self._timeout = timeout
        self._api_base = api_base.rstrip("/")
        self._page_size = page_size

    def is_available(self, creds: BotCredentials) -> bool:
        return bool(creds.api_token)

    async def resolve(self, bot_id: str, creds: BotCredentials) -> CountResult:
        try:
            total = await self._count_guilds(creds.api_token)
        except SourceError as e:
            return e.to_result(self.name)
        return CountResult.ok(total, source=self.name)

    async def _count_guilds(self, token: str) -> int:
        """Follow pagination to exhaustion. Any failing page fails the whole count."""
        url = f"{self._api_base}/users/@me/guilds"
        headers = {"Authorization": f"Bot {token}"}
        total = 0
        after = None
        pages = 0

        async with aiohttp.ClientSession(timeout=client_timeout(self._timeout)) as session:
            while True:
                params = {"limit": str(self._page_size)}
                if after is not None:
                    params["after"] = after
                page = await get_json(session, url, headers=headers, params=params)
                if not isinstance(page, list):
                    raise SourceError(DECODE, "guild listing is not a JSON array")
                pages += 1
                total += len(page)
                if len(page) < self._page_size:
                    break

                last = page[-1]
                last_id = last.get("id") if isinstance(last, dict) else None
                if not last_id:
                    raise SourceError(DECODE, "guild entry without an id")
                last_id = str(last_id)
                if last_id == after:
                    raise SourceError(PROTOCOL, f"pagination cursor did not advance past {after}")
                after = last_id

        _log(f"[discord_api] counted {total} guild(s) over {pages} page(s)")
        return total
