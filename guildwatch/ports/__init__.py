"""Port interfaces (Hexagonal Architecture)."""

from guildwatch.ports.outbound import CountSource, NameLookupPort, NotificationPort

__all__ = [
    "CountSource",
    "NameLookupPort",
    "NotificationPort",
]
