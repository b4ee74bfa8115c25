"""
IssuanceEngine 单元测试（内存计数器）
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from idseries.application.issuance_engine import IssuanceEngine
from idseries.core.errors import StorageError, UnknownSeriesError
from idseries.domain.series import CounterKey
from tests.fakes import InMemoryCounterStore


@pytest.fixture
def fake_store():
    return InMemoryCounterStore()


@pytest.fixture
def mem_engine(registry, fake_store):
    return IssuanceEngine(registry, fake_store, tz="UTC")


def test_first_yearly_identifier(mem_engine):
    assert mem_engine.next("APP-MBR", datetime(2025, 5, 1)) == "APP-MBR-2025-0001"
    assert mem_engine.next("APP-MBR", datetime(2025, 5, 2)) == "APP-MBR-2025-0002"


def test_year_rollover_starts_a_new_counter(mem_engine, fake_store):
    for _ in range(3):
        mem_engine.next("APP-MBR", datetime(2025, 12, 31))
    assert mem_engine.next("APP-MBR", datetime(2026, 1, 1)) == "APP-MBR-2026-0001"
    assert fake_store.values[CounterKey("APP-MBR", 2025)] == 3


def test_perpetual_series_never_resets(mem_engine):
    assert mem_engine.next("MBR", datetime(2025, 12, 31)) == "MBR-0001"
    assert mem_engine.next("MBR", datetime(2026, 1, 1)) == "MBR-0002"


def test_unknown_series_touches_no_storage(mem_engine, fake_store):
    with pytest.raises(UnknownSeriesError):
        mem_engine.next("NOPE", datetime(2025, 1, 1))
    assert fake_store.calls == []
    assert fake_store.values == {}


def test_storage_error_propagates_without_fallback(mem_engine, fake_store):
    fake_store.fail_next = True
    with pytest.raises(StorageError):
        mem_engine.next("MBR")
    # nothing was consumed; the retry gets the first number
    assert mem_engine.next("MBR") == "MBR-0001"


def test_try_next_wraps_errors(mem_engine):
    ok = mem_engine.try_next("MBR")
    assert ok.unwrap() == "MBR-0001"
    err = mem_engine.try_next("NOPE")
    assert err.is_ok() is False
    assert isinstance(err.error, UnknownSeriesError)


def test_year_follows_configured_timezone(registry, fake_store):
    engine = IssuanceEngine(registry, fake_store, tz="Africa/Harare")  # UTC+2
    # 22:30 UTC on Dec 31 is already Jan 1 in Harare
    moment = datetime(2025, 12, 31, 22, 30, tzinfo=timezone.utc)
    assert engine.next("APP-MBR", moment) == "APP-MBR-2026-0001"


def test_naive_datetimes_and_dates_are_taken_as_local(mem_engine):
    assert mem_engine.next("APP-MBR", datetime(2024, 12, 31, 23, 59)) == "APP-MBR-2024-0001"
    assert mem_engine.next("APP-MBR", date(2024, 6, 1)) == "APP-MBR-2024-0002"


def test_default_now_comes_from_clock(registry, fake_store):
    moments = iter([datetime(2030, 1, 1, tzinfo=timezone.utc), datetime(2031, 1, 1, tzinfo=timezone.utc)])
    engine = IssuanceEngine(registry, fake_store, clock=lambda: next(moments))
    assert engine.next("APP-MBR") == "APP-MBR-2030-0001"
    assert engine.next("APP-MBR") == "APP-MBR-2031-0001"


def test_peek_does_not_mutate(mem_engine, fake_store):
    now = datetime(2025, 2, 2)
    assert mem_engine.peek("APP-MBR", now) is None
    mem_engine.next("APP-MBR", now)
    assert mem_engine.peek("APP-MBR", now) == "APP-MBR-2025-0001"
    assert mem_engine.peek("APP-MBR", now) == "APP-MBR-2025-0001"
    assert fake_store.values[CounterKey("APP-MBR", 2025)] == 1
    assert mem_engine.peek("APP-MBR", now + timedelta(days=365)) is None


def test_seed_requires_year_only_for_yearly_series(mem_engine):
    with pytest.raises(ValueError):
        mem_engine.seed("APP-MBR", 10)
    with pytest.raises(ValueError):
        mem_engine.seed("MBR", 10, year=2025)

    assert mem_engine.seed("APP-MBR", 10, year=2025) == 10
    assert mem_engine.next("APP-MBR", datetime(2025, 3, 3)) == "APP-MBR-2025-0011"


def test_seed_never_lowers_a_counter(mem_engine):
    for _ in range(5):
        mem_engine.next("MBR")
    assert mem_engine.seed("MBR", 2) == 5
    assert mem_engine.next("MBR") == "MBR-0006"


def test_counter_key_helper(mem_engine):
    assert mem_engine.counter_key("APP-ORG", datetime(2027, 7, 7)) == CounterKey("APP-ORG", 2027)
    assert mem_engine.counter_key("PAY", datetime(2027, 7, 7)) == CounterKey("PAY")


def test_seed_to_zero_creates_no_counter(mem_engine, fake_store):
    assert mem_engine.seed("MBR", 0) == 0
    assert mem_engine.seed("APP-MBR", 0, year=2025) == 0
    assert fake_store.list_counters() == []
    assert mem_engine.next("MBR") == "MBR-0001"
