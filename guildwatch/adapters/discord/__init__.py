"""Discord adapters."""

from guildwatch.adapters.discord.client import MonitorClient
from guildwatch.adapters.discord.notification import (
    DiscordNameLookup,
    DiscordNotificationAdapter,
    to_embed,
)

__all__ = [
    "DiscordNameLookup",
    "DiscordNotificationAdapter",
    "MonitorClient",
    "to_embed",
]
