from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session


DEFAULT_DB_URL = "sqlite:///data/idseries.db"


def get_db_url() -> str:
    return os.getenv("IDSERIES_DB_URL") or DEFAULT_DB_URL


def ensure_sqlite_parent_dir(db_url: str) -> None:
    # sqlite:///relative/path.db or sqlite:////abs/path.db
    if not db_url.startswith("sqlite:"):
        return
    if db_url.startswith("sqlite:////"):
        path = db_url.replace("sqlite:////", "/", 1)
    elif db_url.startswith("sqlite:///"):
        path = db_url.replace("sqlite:///", "", 1)
    else:
        # sqlite:// (in-memory)
        return
    path = path.split("?", 1)[0]
    if path in (":memory:", ""):
        return
    Path(path).expanduser().resolve().parent.mkdir(parents=True, exist_ok=True)


def create_db_engine(db_url: Optional[str] = None, *, timeout: int = 30, pool_size: Optional[int] = None) -> Engine:
    url = db_url or get_db_url()
    ensure_sqlite_parent_dir(url)
    kwargs = {}
    connect_args = {}
    if url.startswith("sqlite:"):
        # Writers wait up to `timeout` seconds for the database lock.
        connect_args = {"check_same_thread": False, "timeout": timeout}
    elif pool_size:
        kwargs["pool_size"] = pool_size
    return create_engine(url, future=True, pool_pre_ping=True, connect_args=connect_args, **kwargs)


def create_session_factory(engine: Engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


class SessionProvider:
    """Light wrapper to create/close SQLAlchemy sessions."""

    def __init__(self, db_url: Optional[str] = None, *, timeout: int = 30, pool_size: Optional[int] = None):
        self.engine = create_db_engine(db_url, timeout=timeout, pool_size=pool_size)
        self._factory = create_session_factory(self.engine)

    def session(self) -> Session:
        return self._factory()

    def dispose(self) -> None:
        self.engine.dispose()
