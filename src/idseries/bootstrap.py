"""
Process-startup wiring: settings -> registry + counter store -> IssuanceEngine.

Configuration defects surface here, before the process serves any request.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from idseries.application.issuance_engine import IssuanceEngine
from idseries.application.registries.series_registry import SeriesRegistry
from idseries.core.errors import ConfigurationError
from idseries.infrastructure.stores.counter_store import SqlAlchemyCounterStore

logger = logging.getLogger(__name__)


def build_registry(settings: Any) -> SeriesRegistry:
    return SeriesRegistry.from_config(settings.series)


def build_issuance_engine(
    settings: Any,
    *,
    db_url: Optional[str] = None,
    registry: Optional[SeriesRegistry] = None,
) -> IssuanceEngine:
    registry = registry or build_registry(settings)
    store = SqlAlchemyCounterStore(
        db_url or settings.database.url or None,
        timeout=settings.database.timeout,
        pool_size=settings.database.pool_size,
    )
    try:
        engine = IssuanceEngine(registry, store, tz=settings.issuance.timezone)
    except (KeyError, ValueError) as exc:
        # zoneinfo raises ZoneInfoNotFoundError (a KeyError) or ValueError
        store.close()
        raise ConfigurationError(
            message=f"Unknown timezone {settings.issuance.timezone!r}",
            context={"timezone": settings.issuance.timezone},
        ) from exc
    logger.info("Issuance engine ready: %d series, db=%s", len(registry), store.engine.url)
    return engine
