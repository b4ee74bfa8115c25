from __future__ import annotations

from sqlalchemy import CheckConstraint, Integer, PrimaryKeyConstraint, String, text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class SeriesCounterModel(Base):
    """Counters of perpetual series, keyed by bare series code."""
    __tablename__ = "series_counters"
    __table_args__ = (CheckConstraint("counter >= 0", name="ck_series_counters_non_negative"),)

    series_code: Mapped[str] = mapped_column(String(64), primary_key=True)
    counter: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default=text("0"))


class YearlySeriesCounterModel(Base):
    """
    Counters of yearly series, keyed by (series_code, year).

    A new year gets a new row; rows of past years are never touched again.
    """
    __tablename__ = "naming_series_counters"
    __table_args__ = (
        PrimaryKeyConstraint("series_code", "year", name="pk_naming_series_counters"),
        CheckConstraint("counter >= 0", name="ck_naming_series_counters_non_negative"),
    )

    series_code: Mapped[str] = mapped_column(String(64))
    year: Mapped[int] = mapped_column(Integer, autoincrement=False)
    counter: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default=text("0"))


COUNTER_TABLES = (SeriesCounterModel.__tablename__, YearlySeriesCounterModel.__tablename__)
