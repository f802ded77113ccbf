"""Discord client that connects the monitoring bot and drives the monitor."""

import sys

import discord

from guildwatch.adapters.discord.notification import (
    DiscordNameLookup,
    DiscordNotificationAdapter,
)
from guildwatch.adapters.sources.local import MutualGuildSource
from guildwatch.domain.collector import BatchCollector
from guildwatch.domain.monitor import ServerCountMonitor
from guildwatch.domain.notifier import ReportNotifier


def _log(msg: str):
    print(msg, file=sys.stderr)


class MonitorClient(discord.Client):
    """Thin discord.Client that wires its session into the monitor on ready."""

    def __init__(
        self,
        monitor: ServerCountMonitor,
        collector: BatchCollector,
        channel_id: int,
        mutual_source: MutualGuildSource,
        **discord_kwargs,
    ):
        intents = discord.Intents.default()
        # guild member lists feed the mutual-guild fallback
        intents.members = True
        super().__init__(intents=intents, **discord_kwargs)
        self._monitor = monitor
        self._collector = collector
        self._channel_id = channel_id
        self._mutual_source = mutual_source
        self._started = False

    async def on_ready(self):
        _log(f"[client] logged in as {self.user}")
        # on_ready fires again after reconnects; only the first one starts the monitor
        if self._started:
            return
        self._started = True

        self._mutual_source.wire(lambda: list(self.guilds))
        self._collector.set_name_lookup(DiscordNameLookup(self))
        notifier = ReportNotifier(DiscordNotificationAdapter(self), self._channel_id)
        self._monitor.wire(notifier, self.is_closed)
        await self._monitor.start()
