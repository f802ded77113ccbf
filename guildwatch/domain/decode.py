"""Typed decode-with-fallback for count fields in loosely shaped JSON bodies."""

import math
import re
from typing import Any, Optional, Sequence

# Field names accepted from operator push endpoints, in priority order
PUSH_COUNT_FIELDS = (
    "server_count",
    "serverCount",
    "guilds",
    "guild_count",
    "guildCount",
    "servers",
)

_DIGITS_RE = re.compile(r"^\d+$")


def coerce_count(value: Any, allow_strings: bool = False) -> Optional[int]:
    """Return value as a non-negative int, or None if it is not a usable count.

    bool is rejected even though it subclasses int. Floats are truncated.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, float):
        if not math.isfinite(value) or value < 0:
            return None
        return int(value)
    if allow_strings and isinstance(value, str):
        text = value.strip()
        if _DIGITS_RE.match(text):
            return int(text)
    return None


def read_count(data: Any, fields: Sequence[str], allow_strings: bool = False) -> Optional[int]:
    """Scan ``fields`` in order and return the first usable count found in ``data``.

    The order of ``fields`` decides, not the order of keys in the document.
    Present-but-unusable values are skipped.
    """
    if not isinstance(data, dict):
        return None
    for name in fields:
        if name not in data:
            continue
        count = coerce_count(data[name], allow_strings=allow_strings)
        if count is not None:
            return count
    return None
