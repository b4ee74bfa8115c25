# tests/conftest.py
"""
Pytest configuration and fixtures.
Adds src/ to sys.path so `import idseries` works without installing.
"""

import sys
from pathlib import Path

import pytest

project_root = Path(__file__).parent.parent
src_root = project_root / "src"
if str(src_root) not in sys.path:
    sys.path.insert(0, str(src_root))

# Also add project root (config package, main.py)
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from idseries.application.issuance_engine import IssuanceEngine  # noqa: E402
from idseries.application.registries.series_registry import SeriesRegistry  # noqa: E402
from idseries.infrastructure.migrations import MigrationManager  # noqa: E402
from idseries.infrastructure.stores.counter_store import SqlAlchemyCounterStore  # noqa: E402


TEST_SERIES = [
    {"code": "MBR", "template": "MBR-{SEQ:4}", "scope": "perpetual"},
    {"code": "APP-MBR", "template": "APP-MBR-{YYYY}-{SEQ:4}", "scope": "yearly"},
    {"code": "APP-ORG", "template": "APP-ORG-{YYYY}-{SEQ:4}", "scope": "yearly"},
    {"code": "PAY", "template": "PAY-{SEQ}", "scope": "perpetual", "width": 6},
]


@pytest.fixture
def db_url(tmp_path) -> str:
    return f"sqlite:///{tmp_path / 'idseries_test.db'}"


@pytest.fixture
def migrated_db_url(db_url) -> str:
    manager = MigrationManager(db_url)
    try:
        manager.upgrade()
    finally:
        manager.close()
    return db_url


@pytest.fixture
def registry() -> SeriesRegistry:
    return SeriesRegistry.from_config(TEST_SERIES)


@pytest.fixture
def store(migrated_db_url):
    s = SqlAlchemyCounterStore(migrated_db_url)
    yield s
    s.close()


@pytest.fixture
def engine(registry, store) -> IssuanceEngine:
    return IssuanceEngine(registry, store, tz="UTC")
