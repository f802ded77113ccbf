"""Count sources, one per external protocol."""

from typing import List, Optional

from guildwatch.adapters.sources._http import DEFAULT_TIMEOUT_SECONDS, SourceError
from guildwatch.adapters.sources.dbl import DiscordBotListSource
from guildwatch.adapters.sources.discord_api import DiscordApiSource
from guildwatch.adapters.sources.local import MutualGuildSource
from guildwatch.adapters.sources.push_endpoint import PushEndpointSource
from guildwatch.adapters.sources.topgg import TopGGSource
from guildwatch.ports.outbound import CountSource


def default_sources(
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    mutual: Optional[MutualGuildSource] = None,
) -> List[CountSource]:
    """Sources in resolution priority order."""
    return [
        PushEndpointSource(timeout=timeout),
        DiscordApiSource(timeout=timeout),
        TopGGSource(timeout=timeout),
        DiscordBotListSource(timeout=timeout),
        mutual if mutual is not None else MutualGuildSource(),
    ]


__all__ = [
    "DiscordApiSource",
    "DiscordBotListSource",
    "MutualGuildSource",
    "PushEndpointSource",
    "SourceError",
    "TopGGSource",
    "default_sources",
]
