"""guildwatch — daily server count reports for Discord bots."""

from guildwatch.config import AppConfig, ConfigError, __version__
from guildwatch.domain import (
    BatchCollector,
    BotCredentials,
    BotReport,
    CountResolver,
    CountResult,
    DailySchedule,
    NotificationPayload,
    ReportNotifier,
    ServerCountMonitor,
    build_payload,
    render_message,
)

__all__ = [
    "__version__",
    "AppConfig",
    "ConfigError",
    "BatchCollector",
    "BotCredentials",
    "BotReport",
    "CountResolver",
    "CountResult",
    "DailySchedule",
    "NotificationPayload",
    "ReportNotifier",
    "ServerCountMonitor",
    "build_payload",
    "render_message",
]
