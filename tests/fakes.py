"""
In-memory CounterStorePort for engine unit tests.
"""

from __future__ import annotations

import threading
from typing import Dict, List, Optional

from idseries.application.ports.counter_store_port import CounterRecord
from idseries.core.errors import StorageError
from idseries.domain.series import CounterKey


class InMemoryCounterStore:
    def __init__(self) -> None:
        self.values: Dict[CounterKey, int] = {}
        self.calls: List[str] = []
        self.fail_next = False
        self._lock = threading.Lock()

    def increment_and_fetch(self, key: CounterKey) -> int:
        self.calls.append(f"increment:{key}")
        with self._lock:
            if self.fail_next:
                self.fail_next = False
                raise StorageError(message="simulated outage", context={"key": str(key)})
            self.values[key] = self.values.get(key, 0) + 1
            return self.values[key]

    def current_value(self, key: CounterKey) -> Optional[int]:
        self.calls.append(f"read:{key}")
        return self.values.get(key)

    def raise_to_at_least(self, key: CounterKey, value: int) -> int:
        self.calls.append(f"raise:{key}")
        if value < 0:
            raise ValueError(f"Counter floor must be >= 0, got {value}")
        with self._lock:
            if value == 0:
                return self.values.get(key) or 0
            self.values[key] = max(self.values.get(key, 0), value)
            return self.values[key]

    def list_counters(self) -> List[CounterRecord]:
        return [CounterRecord(k.series_code, k.year, v) for k, v in self.values.items()]
