from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, Type, Union

from sqlalchemy import case, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError

from idseries.application.ports.counter_store_port import CounterRecord
from idseries.core.errors import StorageError
from idseries.domain.series import CounterKey
from idseries.infrastructure.stores.models import Base, SeriesCounterModel, YearlySeriesCounterModel
from idseries.infrastructure.stores.sqlalchemy_db import SessionProvider, get_db_url

logger = logging.getLogger(__name__)

CounterModel = Union[Type[SeriesCounterModel], Type[YearlySeriesCounterModel]]

# Dialects with INSERT ... ON CONFLICT DO UPDATE ... RETURNING
_UPSERT_DIALECTS: Dict[str, Callable[..., Any]] = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class SqlAlchemyCounterStore:
    """
    Durable counters in SQL tables, shared by every server process.

    Notes:
    - increment_and_fetch() is one upsert statement with RETURNING, committed in its
      own transaction. The database serializes writers on the counter row, so no
      in-process lock or cached "next value" is involved.
    - Schema creation belongs to MigrationManager; auto_create_schema is a dev/test helper.
    """

    def __init__(
        self,
        db_url: Optional[str] = None,
        *,
        auto_create_schema: bool = False,
        timeout: int = 30,
        pool_size: Optional[int] = None,
    ):
        self.db_url = db_url or get_db_url()
        self._provider = SessionProvider(self.db_url, timeout=timeout, pool_size=pool_size)
        dialect = self._provider.engine.dialect.name
        if dialect not in _UPSERT_DIALECTS:
            self._provider.dispose()
            raise StorageError(
                message=f"Database dialect {dialect!r} has no atomic upsert support",
                context={"dialect": dialect, "supported": sorted(_UPSERT_DIALECTS)},
            )
        self._insert = _UPSERT_DIALECTS[dialect]
        if auto_create_schema:
            Base.metadata.create_all(self._provider.engine)

    @property
    def engine(self):
        return self._provider.engine

    @staticmethod
    def _model_for(key: CounterKey) -> CounterModel:
        return YearlySeriesCounterModel if key.is_yearly else SeriesCounterModel

    @staticmethod
    def _key_values(key: CounterKey) -> Dict[str, Any]:
        if key.is_yearly:
            return {"series_code": key.series_code, "year": key.year}
        return {"series_code": key.series_code}

    def increment_and_fetch(self, key: CounterKey) -> int:
        table = self._model_for(key).__table__
        stmt = self._insert(table).values(**self._key_values(key), counter=1)
        stmt = stmt.on_conflict_do_update(
            index_elements=[c.name for c in table.primary_key.columns],
            set_={"counter": table.c.counter + 1},
        ).returning(table.c.counter)

        value = self._execute_scalar(stmt, key, op="increment")
        logger.debug("Counter %s incremented to %d", key, value)
        return value

    def raise_to_at_least(self, key: CounterKey, value: int) -> int:
        if value < 0:
            raise ValueError(f"Counter floor must be >= 0, got {value}")
        if value == 0:
            return self.current_value(key) or 0

        table = self._model_for(key).__table__
        stmt = self._insert(table).values(**self._key_values(key), counter=value)
        stmt = stmt.on_conflict_do_update(
            index_elements=[c.name for c in table.primary_key.columns],
            set_={
                "counter": case(
                    (table.c.counter < stmt.excluded.counter, stmt.excluded.counter),
                    else_=table.c.counter,
                )
            },
        ).returning(table.c.counter)

        result = self._execute_scalar(stmt, key, op="raise")
        logger.info("Counter %s floor raised to %d (now %d)", key, value, result)
        return result

    def current_value(self, key: CounterKey) -> Optional[int]:
        model = self._model_for(key)
        stmt = select(model.counter).where(model.series_code == key.series_code)
        if key.is_yearly:
            stmt = stmt.where(YearlySeriesCounterModel.year == key.year)
        try:
            with self._provider.session() as session:
                return session.execute(stmt).scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise StorageError(
                message=f"Failed to read counter {key}: {exc}",
                context={"key": str(key)},
            ) from exc

    def list_counters(self) -> List[CounterRecord]:
        try:
            with self._provider.session() as session:
                perpetual = session.execute(
                    select(SeriesCounterModel).order_by(SeriesCounterModel.series_code)
                ).scalars().all()
                yearly = session.execute(
                    select(YearlySeriesCounterModel).order_by(
                        YearlySeriesCounterModel.series_code, YearlySeriesCounterModel.year
                    )
                ).scalars().all()
                records = [CounterRecord(r.series_code, None, int(r.counter)) for r in perpetual]
                records.extend(CounterRecord(r.series_code, int(r.year), int(r.counter)) for r in yearly)
                return records
        except SQLAlchemyError as exc:
            raise StorageError(message=f"Failed to list counters: {exc}") from exc

    def close(self) -> None:
        self._provider.dispose()

    def _execute_scalar(self, stmt, key: CounterKey, *, op: str) -> int:
        try:
            with self._provider.session() as session:
                value = session.execute(stmt).scalar_one()
                session.commit()
                return int(value)
        except SQLAlchemyError as exc:
            # Rolled back on session close: the counter keeps its previous value.
            logger.warning("Counter %s %s failed: %s", key, op, exc)
            raise StorageError(
                message=f"Counter {op} failed for {key}: {exc}",
                context={"key": str(key), "op": op},
            ) from exc
