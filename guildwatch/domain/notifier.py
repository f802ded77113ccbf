"""Turns a cycle's reports into one message and delivers it."""

import sys
from datetime import datetime
from typing import Optional, Sequence

from guildwatch.domain.models import BotReport, NotificationPayload
from guildwatch.domain.report import build_payload, render_message
from guildwatch.ports.outbound import NotificationPort


def _log(msg: str):
    print(msg, file=sys.stderr)


class ReportNotifier:
    def __init__(self, port: NotificationPort, channel_id: int):
        self._port = port
        self._channel_id = channel_id

    async def notify(
        self,
        reports: Sequence[BotReport],
        now: Optional[datetime] = None,
    ) -> bool:
        """Send one report message. Delivery failures are logged, never raised or retried."""
        payload = build_payload(reports, now=now)
        return await self.deliver(payload)

    async def deliver(self, payload: NotificationPayload) -> bool:
        message = render_message(payload)
        try:
            await self._port.send_report(self._channel_id, message)
        except Exception as e:
            _log(f"[notifier] error sending notification to {self._channel_id}: {e}")
            return False
        _log(f"[notifier] sent server count notification for {len(payload.reports)} bot(s)")
        return True
