"""Server count monitor — runs report cycles at startup and on schedule.

Holds no Discord dependency; the client adapter wires ports in once connected.
"""

import asyncio
import sys
from datetime import datetime, timezone
from typing import Callable, Optional

from guildwatch.domain.collector import BatchCollector
from guildwatch.domain.models import NotificationPayload
from guildwatch.domain.notifier import ReportNotifier
from guildwatch.domain.report import build_payload
from guildwatch.domain.schedule import DailySchedule

CHECK_INTERVAL_SECONDS = 30


def _log(msg: str):
    print(msg, file=sys.stderr)


def _log_task_failure(name: str):
    """Done-callback that logs a background task's exception instead of dropping it."""

    def callback(task: asyncio.Task):
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            _log(f"[monitor] {name} failed: {exc!r}")

    return callback


class ServerCountMonitor:
    """One cycle = collect every bot's count, then send one notification."""

    def __init__(
        self,
        collector: BatchCollector,
        schedule: DailySchedule,
        notifier: Optional[ReportNotifier] = None,
        check_interval: float = CHECK_INTERVAL_SECONDS,
    ):
        self._collector = collector
        self._schedule = schedule
        self._notifier = notifier
        self._check_interval = check_interval
        self._is_closed: Optional[Callable[[], bool]] = None
        self._cycle_lock = asyncio.Lock()
        self._loop_task: Optional[asyncio.Task] = None
        self._startup_task: Optional[asyncio.Task] = None
        self.last_run: Optional[datetime] = None

    @property
    def schedule(self) -> DailySchedule:
        return self._schedule

    def wire(self, notifier: ReportNotifier, is_closed: Callable[[], bool]):
        """Attach delivery and lifecycle callbacks from the platform adapter."""
        self._notifier = notifier
        self._is_closed = is_closed

    async def run_cycle(self) -> NotificationPayload:
        """Collect all reports and deliver one notification. Cycles never overlap."""
        async with self._cycle_lock:
            self.last_run = datetime.now(timezone.utc)
            reports = await self._collector.collect()
            payload = build_payload(reports)
            failed = sum(1 for r in reports if not r.result.success)
            _log(f"[monitor] cycle done: {len(reports)} bot(s), total={payload.total}, failed={failed}")
            if self._notifier is None:
                _log("[monitor] no notifier wired, report not sent")
            else:
                await self._notifier.deliver(payload)
            return payload

    async def start(self):
        """Run the startup cycle and start the schedule loop. Safe to call again."""
        if self._startup_task is None:
            self._startup_task = asyncio.create_task(self.run_cycle())
            self._startup_task.add_done_callback(_log_task_failure("startup cycle"))
        if not self._loop_task or self._loop_task.done():
            self._loop_task = asyncio.create_task(self._schedule_loop())
            self._loop_task.add_done_callback(_log_task_failure("schedule loop"))
            now = datetime.now(timezone.utc)
            _log(f"[monitor] notification scheduled {self._schedule.describe()}, next at {self._schedule.next_run(now).isoformat()}")

    async def tick(self, now_utc: datetime) -> bool:
        """Run a cycle if the schedule is due at ``now_utc``. Returns True if one ran."""
        if not self._schedule.is_due(now_utc, self.last_run):
            return False
        await self.run_cycle()
        return True

    async def _schedule_loop(self):
        is_closed = self._is_closed or (lambda: False)
        while not is_closed():
            await asyncio.sleep(self._check_interval)
            try:
                await self.tick(datetime.now(timezone.utc))
            except Exception as e:
                _log(f"[monitor] schedule loop error: {e}")
