"""Aggregation of bot reports and rendering into a report message."""

from datetime import datetime, timezone
from typing import Iterable, Optional

from guildwatch.domain.models import (
    BotReport,
    NotificationPayload,
    ReportField,
    ReportMessage,
)

COLOR_OK = 0x00FF00
COLOR_DEGRADED = 0xFFA500

REPORT_TITLE = "📊 Daily Server Count Report"
REPORT_FOOTER = "Daily Server Statistics"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

# Discord embed limits
MAX_EMBED_FIELDS = 25
FIELD_NAME_LIMIT = 256
FIELD_VALUE_LIMIT = 1024
# grouped bot lines share this much of the 6000 character embed budget
GROUPED_TEXT_BUDGET = 4000
BOT_LINE_LIMIT = 200


def build_payload(reports: Iterable[BotReport], now: Optional[datetime] = None) -> NotificationPayload:
    """Sum successful counts and flag partial failure. Failures never add to the total."""
    reports = tuple(reports)
    total = sum(r.result.count for r in reports if r.result.success)
    has_errors = any(not r.result.success for r in reports)
    return NotificationPayload(
        reports=reports,
        total=total,
        has_errors=has_errors,
        generated_at=now or datetime.now(timezone.utc),
    )


def format_result(report: BotReport) -> str:
    if report.result.success:
        return f"**{report.result.count}** servers"
    return f"❌ Error: {report.result.error}"


def _clip(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[: limit - 1] + "…"


def _bot_fields(reports) -> list:
    return [
        ReportField(
            name=_clip(f"🤖 {r.name or r.bot_id}", FIELD_NAME_LIMIT),
            value=_clip(format_result(r), FIELD_VALUE_LIMIT),
            inline=True,
        )
        for r in reports
    ]


def _grouped_fields(reports) -> list:
    """Pack one line per bot into as few fields as fit the embed budget.

    Bots that do not fit are summarised in a trailing "more" field.
    """
    chunks, current = [], []
    size = used = shown = 0
    for r in reports:
        line = _clip(f"🤖 {r.name or r.bot_id}: {format_result(r)}", BOT_LINE_LIMIT)
        if used + len(line) + 1 > GROUPED_TEXT_BUDGET:
            break
        if current and size + len(line) + 1 > FIELD_VALUE_LIMIT:
            chunks.append("\n".join(current))
            current, size = [], 0
        current.append(line)
        size += len(line) + 1
        used += len(line) + 1
        shown += 1
    if current:
        chunks.append("\n".join(current))

    fields = [
        ReportField(name="🤖 Bots" if i == 0 else "🤖 Bots (cont.)", value=chunk)
        for i, chunk in enumerate(chunks)
    ]
    hidden = len(reports) - shown
    if hidden:
        fields.append(ReportField(name="➕ More", value=f"and {hidden} more bot(s)"))
    return fields


def render_message(payload: NotificationPayload) -> ReportMessage:
    """Lay the payload out as an embed that stays within Discord's limits.

    One inline field per bot while they fit next to the timestamp and total
    fields; past that, bots are listed as lines in shared fields.
    """
    tail = [
        ReportField(
            name="⏰ Timestamp",
            value=payload.generated_at.strftime(TIMESTAMP_FORMAT),
        )
    ]
    if payload.show_total:
        tail.append(
            ReportField(
                name="📊 Total Servers",
                value=f"**{payload.total}** servers across all bots",
            )
        )

    if len(payload.reports) <= MAX_EMBED_FIELDS - len(tail):
        fields = _bot_fields(payload.reports)
    else:
        fields = _grouped_fields(payload.reports)
    fields.extend(tail)
    return ReportMessage(
        title=REPORT_TITLE,
        description=f"Monitoring {len(payload.reports)} bot(s)",
        color=COLOR_DEGRADED if payload.has_errors else COLOR_OK,
        fields=tuple(fields),
        footer=REPORT_FOOTER,
        timestamp=payload.generated_at,
    )
