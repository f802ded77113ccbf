"""Mutual-guild deduction from the monitoring client's own cache.

Only guilds shared with the monitoring bot are visible, so the number is a
lower bound. It is always reported as a failure carrying the partial count.
"""

from typing import Any, Callable, Iterable, Optional

from guildwatch.domain.models import PARTIAL, SEMANTIC, BotCredentials, CountResult

GuildProvider = Callable[[], Iterable[Any]]


def _has_member(guild: Any, bot_id: str) -> bool:
    for member in getattr(guild, "members", None) or ():
        if str(getattr(member, "id", "")) == bot_id:
            return True
    return False


class MutualGuildSource:
    name = "mutual_guilds"

    def __init__(self, guild_provider: Optional[GuildProvider] = None):
        self._guild_provider = guild_provider

    def wire(self, guild_provider: GuildProvider) -> None:
        """Attach the client's guild cache once it is connected."""
        self._guild_provider = guild_provider

    def is_available(self, creds: BotCredentials) -> bool:
        return self._guild_provider is not None

    async def resolve(self, bot_id: str, creds: BotCredentials) -> CountResult:
        if self._guild_provider is None:
            return CountResult.fail("no guild cache attached", kind=SEMANTIC, source=self.name)

        count = sum(1 for guild in self._guild_provider() if _has_member(guild, bot_id))
        if count == 0:
            return CountResult.fail(
                "target bot not found in any mutual servers", kind=SEMANTIC, source=self.name
            )
        return CountResult.fail(
            "only mutual servers counted (not total)",
            kind=PARTIAL,
            source=self.name,
            partial_count=count,
        )
