"""Launcher for the server count monitor."""

import asyncio
import sys
from dataclasses import dataclass
from typing import Optional

import aiohttp
import discord

from guildwatch.adapters.discord.client import MonitorClient
from guildwatch.adapters.sources import MutualGuildSource, default_sources
from guildwatch.config import AppConfig, ConfigError
from guildwatch.domain.collector import BatchCollector
from guildwatch.domain.monitor import ServerCountMonitor
from guildwatch.domain.resolver import CountResolver
from guildwatch.domain.schedule import DailySchedule


def _log(msg: str):
    print(msg, file=sys.stderr)


@dataclass
class App:
    config: AppConfig
    monitor: ServerCountMonitor
    client: MonitorClient


def build_app(config: AppConfig) -> App:
    """Validate config and assemble the object graph. Raises ConfigError."""
    config.validate()
    try:
        schedule = DailySchedule.parse(config.notification_time, tz=config.notification_tz)
    except ValueError as e:
        raise ConfigError(f"NOTIFICATION_TIME/NOTIFICATION_TZ: {e}")

    mutual = MutualGuildSource()
    resolver = CountResolver(default_sources(timeout=config.request_timeout, mutual=mutual))
    collector = BatchCollector(
        config.target_bot_ids,
        resolver,
        credentials_for=config.credentials_for,
    )
    monitor = ServerCountMonitor(collector, schedule)
    client = MonitorClient(
        monitor=monitor,
        collector=collector,
        channel_id=config.channel_id,
        mutual_source=mutual,
    )
    return App(config=config, monitor=monitor, client=client)


async def run(app: App):
    _log(f"Monitoring {len(app.config.target_bot_ids)} bot(s), reporting to channel {app.config.channel_id}")
    async with app.client:
        await app.client.start(app.config.discord_token)


def main(config: Optional[AppConfig] = None) -> int:
    try:
        app = build_app(config or AppConfig.from_env())
    except ConfigError as e:
        _log(f"Configuration error: {e}")
        return 1

    try:
        asyncio.run(run(app))
    except (discord.DiscordException, aiohttp.ClientError) as e:
        # includes LoginFailure and PrivilegedIntentsRequired
        _log(f"Error opening Discord connection: {e}")
        return 1
    except KeyboardInterrupt:
        _log("Shutting down.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
