"""Discord implementations of the notification and name lookup ports."""

from typing import Optional

import discord

from guildwatch.domain.models import ReportMessage


def to_embed(message: ReportMessage) -> discord.Embed:
    embed = discord.Embed(
        title=message.title,
        description=message.description,
        color=message.color,
        timestamp=message.timestamp,
    )
    for f in message.fields:
        embed.add_field(name=f.name, value=f.value, inline=f.inline)
    if message.footer:
        embed.set_footer(text=message.footer)
    return embed


class DiscordNotificationAdapter:
    """NotificationPort implementation using discord.Client."""

    def __init__(self, client: discord.Client):
        self._client = client

    async def send_report(self, channel_id: int, message: ReportMessage) -> None:
        channel = self._client.get_channel(channel_id)
        if channel is None:
            # not cached yet, ask the API
            channel = await self._client.fetch_channel(channel_id)
        await channel.send(embed=to_embed(message))


class DiscordNameLookup:
    """NameLookupPort using the monitoring bot's own session."""

    def __init__(self, client: discord.Client):
        self._client = client

    async def lookup_name(self, bot_id: str) -> Optional[str]:
        try:
            user_id = int(bot_id)
        except ValueError:
            return None
        user = self._client.get_user(user_id)
        if user is None:
            user = await self._client.fetch_user(user_id)
        return user.name if user else None
