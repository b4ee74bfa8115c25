from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Protocol, runtime_checkable

from idseries.domain.series import CounterKey


@dataclass(frozen=True)
class CounterRecord:
    series_code: str
    year: Optional[int]
    value: int

    @property
    def key(self) -> CounterKey:
        return CounterKey(self.series_code, self.year)


@runtime_checkable
class CounterStorePort(Protocol):
    """
    Durable counters keyed by CounterKey.

    increment_and_fetch() must be one atomic storage operation: concurrent
    callers on the same key each get a distinct value, and a failed call
    leaves the counter unchanged.
    """

    def increment_and_fetch(self, key: CounterKey) -> int:
        """Create-if-absent, increment and return the new value."""

    def current_value(self, key: CounterKey) -> Optional[int]:
        """Last issued value, or None if the key was never used."""

    def raise_to_at_least(self, key: CounterKey, value: int) -> int:
        """Set the counter to max(current, value); return the result."""

    def list_counters(self) -> List[CounterRecord]:
        """Snapshot of every counter row."""
