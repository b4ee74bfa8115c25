from .models import Base, SeriesCounterModel, YearlySeriesCounterModel
from .sqlalchemy_db import SessionProvider, create_db_engine, get_db_url
from .counter_store import SqlAlchemyCounterStore

__all__ = [
    "Base",
    "SeriesCounterModel",
    "YearlySeriesCounterModel",
    "SessionProvider",
    "create_db_engine",
    "get_db_url",
    "SqlAlchemyCounterStore",
]
