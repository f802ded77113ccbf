"""Runs the resolver for every configured bot."""

import asyncio
import sys
from typing import Callable, List, Optional, Sequence

from guildwatch.domain.models import BotCredentials, BotReport
from guildwatch.domain.resolver import CountResolver
from guildwatch.ports.outbound import NameLookupPort


def _log(msg: str):
    print(msg, file=sys.stderr)


class BatchCollector:
    """Produces one BotReport per configured bot id, in configuration order."""

    def __init__(
        self,
        bot_ids: Sequence[str],
        resolver: CountResolver,
        credentials_for: Callable[[str], BotCredentials],
        name_lookup: Optional[NameLookupPort] = None,
    ):
        self._bot_ids = list(bot_ids)
        self._resolver = resolver
        self._credentials_for = credentials_for
        self._name_lookup = name_lookup

    def set_name_lookup(self, name_lookup: Optional[NameLookupPort]) -> None:
        self._name_lookup = name_lookup

    async def collect(self) -> List[BotReport]:
        # gather keeps input order, so completion order never reorders reports
        reports = await asyncio.gather(*(self._report_for(bot_id) for bot_id in self._bot_ids))
        return list(reports)

    async def _report_for(self, bot_id: str) -> BotReport:
        name = await self._display_name(bot_id)
        result = await self._resolver.resolve(bot_id, self._credentials_for(bot_id))
        if not result.success:
            _log(f"[collector] error fetching server count for bot {bot_id}: {result.error}")
        return BotReport(bot_id=bot_id, name=name, result=result)

    async def _display_name(self, bot_id: str) -> str:
        if self._name_lookup is None:
            return bot_id
        try:
            name = await self._name_lookup.lookup_name(bot_id)
        except Exception as e:
            _log(f"[collector] name lookup failed for {bot_id}: {e}")
            return bot_id
        return name or bot_id
