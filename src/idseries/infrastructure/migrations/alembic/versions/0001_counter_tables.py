"""counter tables

Revision ID: 0001_counter_tables
Revises: None
Create Date: 2025-06-02

Creates the two counter tables used by the issuance engine:
- series_counters: perpetual series, keyed by series_code
- naming_series_counters: yearly series, keyed by (series_code, year)

Online upgrades skip tables that already exist, so re-running is a no-op.
A naming_series_counters table in the superseded shape (no `year` column) is
left alone here; MigrationManager.replace_legacy_yearly_table() handles it.
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import context, op

revision = "0001_counter_tables"
down_revision = None
branch_labels = None
depends_on = None


def _is_offline() -> bool:
    try:
        return bool(context.is_offline_mode())
    except Exception:
        return False


def _insp():
    return sa.inspect(op.get_bind())


def _has_table(name: str) -> bool:
    return _insp().has_table(name)


def upgrade() -> None:
    if _is_offline() or not _has_table("series_counters"):
        op.create_table(
            "series_counters",
            sa.Column("series_code", sa.String(length=64), primary_key=True),
            sa.Column("counter", sa.Integer(), server_default=sa.text("0"), nullable=False),
            sa.CheckConstraint("counter >= 0", name="ck_series_counters_non_negative"),
        )

    if _is_offline() or not _has_table("naming_series_counters"):
        op.create_table(
            "naming_series_counters",
            sa.Column("series_code", sa.String(length=64), nullable=False),
            sa.Column("year", sa.Integer(), autoincrement=False, nullable=False),
            sa.Column("counter", sa.Integer(), server_default=sa.text("0"), nullable=False),
            sa.PrimaryKeyConstraint("series_code", "year", name="pk_naming_series_counters"),
            sa.CheckConstraint("counter >= 0", name="ck_naming_series_counters_non_negative"),
        )


def downgrade() -> None:
    op.drop_table("naming_series_counters")
    op.drop_table("series_counters")
