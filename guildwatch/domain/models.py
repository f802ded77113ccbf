"""Domain data models — pure Python dataclasses."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Tuple

# Failure kinds carried by CountResult.kind
NETWORK = "network"  # unreachable or timed out
PROTOCOL = "protocol"  # non-success status
DECODE = "decode"  # malformed or wrongly shaped JSON
SEMANTIC = "semantic"  # expected field absent
PARTIAL = "partial"  # a count exists but is known to be incomplete
EXHAUSTED = "exhausted"  # every source tried, none succeeded


@dataclass(frozen=True)
class BotCredentials:
    """Per-bot optional credentials. Empty string means the method is unavailable."""

    push_url: str = ""
    api_token: str = ""
    topgg_token: str = ""


@dataclass(frozen=True)
class CountResult:
    """Outcome of one count resolution: a non-negative count or an error."""

    success: bool
    count: Optional[int] = None
    error: Optional[str] = None
    kind: str = ""
    source: str = ""
    partial_count: Optional[int] = None
    attempts: Tuple["CountResult", ...] = ()

    @classmethod
    def ok(cls, count: int, source: str = "") -> "CountResult":
        if isinstance(count, bool) or not isinstance(count, int) or count < 0:
            raise ValueError(f"count must be a non-negative int, got {count!r}")
        return cls(success=True, count=count, source=source)

    @classmethod
    def fail(
        cls,
        error: str,
        kind: str = "",
        source: str = "",
        partial_count: Optional[int] = None,
        attempts: Tuple["CountResult", ...] = (),
    ) -> "CountResult":
        return cls(
            success=False,
            error=error,
            kind=kind,
            source=source,
            partial_count=partial_count,
            attempts=tuple(attempts),
        )


@dataclass(frozen=True)
class BotReport:
    bot_id: str
    name: str
    result: CountResult


@dataclass(frozen=True)
class NotificationPayload:
    """Read-only view over one cycle's reports."""

    reports: Tuple[BotReport, ...]
    total: int
    has_errors: bool
    generated_at: datetime

    @property
    def show_total(self) -> bool:
        return len(self.reports) > 1


@dataclass(frozen=True)
class ReportField:
    name: str
    value: str
    inline: bool = False


@dataclass(frozen=True)
class ReportMessage:
    """Platform-neutral rendering of a payload (maps onto a Discord embed)."""

    title: str
    description: str
    color: int
    fields: Tuple[ReportField, ...] = field(default_factory=tuple)
    footer: str = ""
    timestamp: Optional[datetime] = None
