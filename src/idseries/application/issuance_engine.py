from __future__ import annotations

import logging
from datetime import date, datetime, timezone, tzinfo
from typing import Callable, Optional, Union
from zoneinfo import ZoneInfo

from idseries.application.ports.counter_store_port import CounterStorePort
from idseries.application.registries.series_registry import SeriesRegistry
from idseries.core.errors import IdSeriesError, Result, StorageError
from idseries.domain.series import CounterKey, SeriesDefinition

logger = logging.getLogger(__name__)

Moment = Union[datetime, date]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class IssuanceEngine:
    """
    Issue human-readable sequential identifiers.

    next(series_code) = registry lookup -> counter key -> atomic increment -> format.

    - No retries and no fallback numbering: every failure reaches the caller.
    - A number consumed by a successful increment stays consumed even if the
      caller never stores the identifier.
    """

    def __init__(
        self,
        registry: SeriesRegistry,
        store: CounterStorePort,
        *,
        tz: Union[str, tzinfo] = "UTC",
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.registry = registry
        self.store = store
        self.tz = ZoneInfo(tz) if isinstance(tz, str) else tz
        self._clock = clock or _utcnow

    def _local_now(self, now: Optional[Moment]) -> Moment:
        if now is None:
            return self._clock().astimezone(self.tz)
        if isinstance(now, datetime) and now.tzinfo is not None:
            return now.astimezone(self.tz)
        # naive datetimes and plain dates are taken as local already
        return now

    def counter_key(self, series_code: str, now: Optional[Moment] = None) -> CounterKey:
        desc = self.registry.resolve(series_code)
        return desc.counter_key(self._local_now(now))

    def next(self, series_code: str, now: Optional[Moment] = None) -> str:
        desc = self.registry.resolve(series_code)
        local = self._local_now(now)
        key = desc.counter_key(local)
        try:
            value = self.store.increment_and_fetch(key)
        except StorageError:
            logger.warning("Issuance failed for series %s (key %s); nothing consumed", series_code, key)
            raise
        identifier = desc.format(value, local.year)
        logger.info("Issued %s (series=%s key=%s value=%d)", identifier, series_code, key, value)
        return identifier

    def try_next(self, series_code: str, now: Optional[Moment] = None) -> Result[str, IdSeriesError]:
        try:
            return Result.ok(self.next(series_code, now))
        except IdSeriesError as exc:
            return Result.err(exc)

    def peek(self, series_code: str, now: Optional[Moment] = None) -> Optional[str]:
        """Most recently issued identifier for the current key, without mutation."""
        desc = self.registry.resolve(series_code)
        local = self._local_now(now)
        value = self.store.current_value(desc.counter_key(local))
        if not value:
            return None
        return desc.format(value, local.year)

    def seed(self, series_code: str, value: int, year: Optional[int] = None) -> int:
        """
        Raise a counter so the next issued value is above `value`.

        Used when importing identifiers that were issued outside this service.
        Counters are never lowered.
        """
        desc = self.registry.resolve(series_code)
        key = self._seed_key(desc, year)
        result = self.store.raise_to_at_least(key, value)
        logger.info("Seeded %s to %d (requested %d)", key, result, value)
        return result

    @staticmethod
    def _seed_key(desc: SeriesDefinition, year: Optional[int]) -> CounterKey:
        if desc.is_yearly:
            if year is None:
                raise ValueError(f"Series {desc.code!r} is yearly; a year is required")
            return CounterKey(desc.code, int(year))
        if year is not None:
            raise ValueError(f"Series {desc.code!r} is perpetual; it takes no year")
        return CounterKey(desc.code)
