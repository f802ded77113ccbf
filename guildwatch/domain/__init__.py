"""Domain layer — pure Python, no framework dependencies."""

from guildwatch.domain.collector import BatchCollector
from guildwatch.domain.decode import PUSH_COUNT_FIELDS, coerce_count, read_count
from guildwatch.domain.models import (
    BotCredentials,
    BotReport,
    CountResult,
    NotificationPayload,
    ReportField,
    ReportMessage,
)
from guildwatch.domain.monitor import ServerCountMonitor
from guildwatch.domain.notifier import ReportNotifier
from guildwatch.domain.report import build_payload, render_message
from guildwatch.domain.resolver import NO_SOURCE_AVAILABLE, CountResolver
from guildwatch.domain.schedule import DailySchedule

__all__ = [
    "BatchCollector",
    "BotCredentials",
    "BotReport",
    "CountResolver",
    "CountResult",
    "DailySchedule",
    "NO_SOURCE_AVAILABLE",
    "NotificationPayload",
    "PUSH_COUNT_FIELDS",
    "ReportField",
    "ReportMessage",
    "ReportNotifier",
    "ServerCountMonitor",
    "build_payload",
    "coerce_count",
    "read_count",
    "render_message",
]
