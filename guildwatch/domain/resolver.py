"""Ordered fallback chain over count sources."""

import sys
from typing import List, Optional, Sequence

from guildwatch.domain.models import EXHAUSTED, BotCredentials, CountResult
from guildwatch.ports.outbound import CountSource

NO_SOURCE_AVAILABLE = "no source available"


def _log(msg: str):
    print(msg, file=sys.stderr)


class CountResolver:
    """Try each source in order and return the first success.

    The order of ``sources`` is the priority order; reordering is a data change.
    Unavailable sources are skipped, failures are recorded and the chain continues.
    """

    def __init__(self, sources: Sequence[CountSource]):
        self._sources = list(sources)

    @property
    def sources(self) -> List[CountSource]:
        return list(self._sources)

    async def resolve(self, bot_id: str, creds: BotCredentials) -> CountResult:
        attempts: List[CountResult] = []
        for source in self._sources:
            if not source.is_available(creds):
                continue
            try:
                result = await source.resolve(bot_id, creds)
            except Exception as e:
                result = CountResult.fail(f"unexpected error: {e}", source=source.name)

            if result.success:
                _log(f"[resolver] {bot_id}: {result.count} via {source.name}")
                return result

            _log(f"[resolver] {bot_id}: {source.name} failed ({result.kind or 'error'}): {result.error}")
            attempts.append(result)

        partial = _best_partial(attempts)
        if partial is not None:
            _log(f"[resolver] {bot_id}: only a partial count of {partial} is known, not reported")
        return CountResult.fail(
            NO_SOURCE_AVAILABLE,
            kind=EXHAUSTED,
            partial_count=partial,
            attempts=tuple(attempts),
        )


def _best_partial(attempts: Sequence[CountResult]) -> Optional[int]:
    partials = [a.partial_count for a in attempts if a.partial_count is not None]
    return max(partials) if partials else None
