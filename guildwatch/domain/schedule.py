"""Daily notification schedule — parsing and due-checking.

Pure domain logic, no framework dependencies.
"""

import re
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

# Schedule string patterns
_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})$")
_DAILY_RE = re.compile(r"^daily\s+(\d{1,2}):(\d{2})$", re.IGNORECASE)
_WEEKDAY_RE = re.compile(r"^weekday\s+(\d{1,2}):(\d{2})$", re.IGNORECASE)


@dataclass(frozen=True)
class DailySchedule:
    hour: int
    minute: int
    tz: str = "UTC"
    weekdays_only: bool = False

    @classmethod
    def parse(cls, schedule_str: str, tz: str = "UTC") -> "DailySchedule":
        """Parse ``HH:MM``, ``daily HH:MM`` or ``weekday HH:MM``."""
        s = schedule_str.strip()
        weekdays_only = False

        m = _TIME_RE.match(s) or _DAILY_RE.match(s)
        if not m:
            m = _WEEKDAY_RE.match(s)
            weekdays_only = bool(m)
        if not m:
            raise ValueError(
                f"invalid schedule format: {s!r}. supported: HH:MM, daily HH:MM, weekday HH:MM"
            )

        hour, minute = int(m.group(1)), int(m.group(2))
        if not (0 <= hour <= 23 and 0 <= minute <= 59):
            raise ValueError(f"invalid time: {s}")
        try:
            ZoneInfo(tz)
        except (ZoneInfoNotFoundError, KeyError, ValueError):
            raise ValueError(f"invalid timezone: {tz!r}")
        return cls(hour=hour, minute=minute, tz=tz, weekdays_only=weekdays_only)

    def describe(self) -> str:
        prefix = "weekdays" if self.weekdays_only else "daily"
        return f"{prefix} at {self.hour:02d}:{self.minute:02d} ({self.tz})"

    def _slot_on(self, now_utc: datetime) -> datetime:
        """Scheduled instant on the local calendar day of ``now_utc``."""
        now_local = now_utc.astimezone(ZoneInfo(self.tz))
        return now_local.replace(hour=self.hour, minute=self.minute, second=0, microsecond=0)

    def is_due(self, now_utc: datetime, last_run: Optional[datetime] = None) -> bool:
        """True once today's slot has passed and nothing has run since that slot."""
        scheduled = self._slot_on(now_utc)
        if self.weekdays_only and scheduled.weekday() >= 5:
            return False
        if now_utc < scheduled:
            return False
        if last_run is not None and last_run >= scheduled:
            return False
        return True

    def next_run(self, now_utc: datetime) -> datetime:
        """Next scheduled instant strictly after ``now_utc``."""
        candidate = self._slot_on(now_utc)
        while candidate <= now_utc or (self.weekdays_only and candidate.weekday() >= 5):
            candidate = (candidate + timedelta(days=1)).replace(hour=self.hour, minute=self.minute)
        return candidate
