"""
Schema bootstrap for the counter tables.

Invoked explicitly at deploy time (CLI `migrate`), never from the request path.
The Alembic scripts ship inside this package, so an installed copy migrates
the same way a source checkout does.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from importlib.resources import files
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from alembic.util import CommandError
from sqlalchemy import inspect, text
from sqlalchemy.exc import SQLAlchemyError

from idseries.core.errors import StorageError
from idseries.infrastructure.stores.models import COUNTER_TABLES, YearlySeriesCounterModel
from idseries.infrastructure.stores.sqlalchemy_db import create_db_engine, get_db_url

logger = logging.getLogger(__name__)

DEFAULT_SCRIPT_LOCATION = Path(str(files(__package__).joinpath("alembic")))

YEARLY_TABLE = YearlySeriesCounterModel.__tablename__


@contextmanager
def _storage_errors(op: str, **context: Any) -> Iterator[None]:
    """Database and Alembic failures leave the manager as StorageError."""
    try:
        yield
    except (SQLAlchemyError, CommandError) as exc:
        raise StorageError(
            message=f"Migration step {op!r} failed: {exc}",
            context={"op": op, **context},
        ) from exc


class MigrationManager:
    """
    Thin wrapper over Alembic plus the one-off legacy table replacement.

    - upgrade(): idempotent; a second run on a migrated database changes nothing.
    - replace_legacy_yearly_table(): destructive, drops the superseded
      naming_series_counters shape (id/series/current_value/prefix/updated_at).
    """

    def __init__(self, db_url: Optional[str] = None, *, script_location: Optional[Path] = None):
        self.db_url = db_url or get_db_url()
        self.script_location = Path(script_location or DEFAULT_SCRIPT_LOCATION)
        self.engine = create_db_engine(self.db_url)

    def _alembic_config(self) -> Config:
        cfg = Config()
        cfg.set_main_option("script_location", str(self.script_location))
        # ConfigParser interpolation: a literal "%" must be doubled.
        cfg.set_main_option("sqlalchemy.url", self.db_url.replace("%", "%%"))
        return cfg

    def upgrade(self, revision: str = "head") -> Optional[str]:
        with _storage_errors("upgrade", revision=revision):
            before = self.current_revision()
            command.upgrade(self._alembic_config(), revision)
            after = self.current_revision()
        if before == after:
            logger.info("Schema already at %s; nothing to do", after)
        else:
            logger.info("Schema upgraded %s -> %s", before or "<empty>", after)
        if self.has_legacy_yearly_table():
            logger.warning(
                "%s has the superseded layout; run replace_legacy_yearly_table() (CLI: migrate-legacy --yes)",
                YEARLY_TABLE,
            )
        return after

    def current_revision(self) -> Optional[str]:
        with _storage_errors("current_revision"):
            with self.engine.connect() as conn:
                return MigrationContext.configure(conn).get_current_revision()

    def head_revision(self) -> Optional[str]:
        with _storage_errors("head_revision", script_location=str(self.script_location)):
            return ScriptDirectory.from_config(self._alembic_config()).get_current_head()

    def existing_tables(self) -> Dict[str, bool]:
        with _storage_errors("existing_tables"):
            insp = inspect(self.engine)
            return {name: insp.has_table(name) for name in COUNTER_TABLES}

    def has_legacy_yearly_table(self) -> bool:
        with _storage_errors("has_legacy_yearly_table", table=YEARLY_TABLE):
            insp = inspect(self.engine)
            if not insp.has_table(YEARLY_TABLE):
                return False
            columns = {str(c.get("name") or "") for c in insp.get_columns(YEARLY_TABLE)}
            return "year" not in columns

    def status(self) -> Dict[str, Any]:
        current = self.current_revision()
        head = self.head_revision()
        return {
            "current_revision": current,
            "head_revision": head,
            "up_to_date": current == head,
            "tables": self.existing_tables(),
            "legacy_yearly_table": self.has_legacy_yearly_table(),
        }

    def replace_legacy_yearly_table(self, *, confirm: bool = False) -> bool:
        """
        Drop a naming_series_counters table in the superseded layout and recreate it
        with the (series_code, year) composite key.

        Old counter values are discarded: the old layout has no year to carry over.
        Returns True when a legacy table was replaced, False otherwise (the table is
        created if it was missing, and left untouched if it already has the current layout).
        """
        if not confirm:
            raise ValueError("replace_legacy_yearly_table() discards data; pass confirm=True")

        table = YearlySeriesCounterModel.__table__
        with _storage_errors("replace_legacy_yearly_table", table=YEARLY_TABLE):
            if not inspect(self.engine).has_table(YEARLY_TABLE):
                with self.engine.begin() as conn:
                    table.create(conn)
                logger.info("%s was missing; created with the current layout", YEARLY_TABLE)
                return False

            if not self.has_legacy_yearly_table():
                logger.info("%s already has the current layout; nothing to replace", YEARLY_TABLE)
                return False

            cascade = " CASCADE" if self.engine.dialect.name == "postgresql" else ""
            with self.engine.begin() as conn:
                conn.execute(text(f"DROP TABLE {YEARLY_TABLE}{cascade}"))
                table.create(conn)

        logger.warning("Dropped legacy %s and recreated it; previous counter values were discarded", YEARLY_TABLE)
        return True

    def close(self) -> None:
        self.engine.dispose()
