"""Outbound ports — interfaces for external system adapters."""

from typing import Optional, Protocol, runtime_checkable

from guildwatch.domain.models import BotCredentials, CountResult, ReportMessage


@runtime_checkable
class CountSource(Protocol):
    """One strategy for obtaining a bot's server count."""

    name: str

    def is_available(self, creds: BotCredentials) -> bool: ...

    async def resolve(self, bot_id: str, creds: BotCredentials) -> CountResult: ...


@runtime_checkable
class NameLookupPort(Protocol):
    """Best-effort display name lookup for a bot id."""

    async def lookup_name(self, bot_id: str) -> Optional[str]: ...


@runtime_checkable
class NotificationPort(Protocol):
    """Interface for delivering a rendered report to a channel."""

    async def send_report(self, channel_id: int, message: ReportMessage) -> None: ...
