from __future__ import annotations

from datetime import datetime

import pytest

from idseries.core.errors import UnknownSeriesError
from idseries.domain.series import CounterKey


def test_first_identifier_of_a_yearly_series(engine):
    assert engine.next("APP-MBR", datetime(2025, 3, 14)) == "APP-MBR-2025-0001"


def test_new_year_restarts_numbering_and_freezes_old_year(engine, store):
    for _ in range(7):
        engine.next("APP-MBR", datetime(2025, 6, 1))
    assert engine.next("APP-MBR", datetime(2026, 1, 1)) == "APP-MBR-2026-0001"
    assert engine.next("APP-MBR", datetime(2026, 1, 2)) == "APP-MBR-2026-0002"
    assert store.current_value(CounterKey("APP-MBR", 2025)) == 7


def test_series_do_not_share_counters(engine):
    now = datetime(2025, 1, 1)
    assert engine.next("APP-MBR", now) == "APP-MBR-2025-0001"
    assert engine.next("APP-ORG", now) == "APP-ORG-2025-0001"
    assert engine.next("MBR", now) == "MBR-0001"
    assert engine.next("PAY", now) == "PAY-000001"


def test_unknown_series_leaves_all_rows_unchanged(engine, store):
    engine.next("MBR", datetime(2025, 1, 1))
    engine.next("APP-MBR", datetime(2025, 1, 1))
    before = store.list_counters()
    with pytest.raises(UnknownSeriesError):
        engine.next("NOT-A-SERIES", datetime(2025, 1, 1))
    assert store.list_counters() == before


def test_ten_thousandth_identifier_widens_past_four_digits(engine):
    now = datetime(2025, 9, 9)
    engine.seed("APP-MBR", 9998, year=2025)
    assert engine.next("APP-MBR", now) == "APP-MBR-2025-9999"
    assert engine.next("APP-MBR", now) == "APP-MBR-2025-10000"
    assert engine.next("APP-MBR", now) == "APP-MBR-2025-10001"


def test_peek_reports_last_issued(engine):
    now = datetime(2025, 4, 4)
    assert engine.peek("APP-ORG", now) is None
    issued = engine.next("APP-ORG", now)
    assert engine.peek("APP-ORG", now) == issued


def test_restart_keeps_counting(registry, migrated_db_url):
    from idseries.application.issuance_engine import IssuanceEngine
    from idseries.infrastructure.stores.counter_store import SqlAlchemyCounterStore

    first = SqlAlchemyCounterStore(migrated_db_url)
    IssuanceEngine(registry, first).next("MBR")
    IssuanceEngine(registry, first).next("MBR")
    first.close()

    second = SqlAlchemyCounterStore(migrated_db_url)
    try:
        assert IssuanceEngine(registry, second).next("MBR") == "MBR-0003"
    finally:
        second.close()
