from __future__ import annotations

import os
from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

# Alembic Config object
config = context.config

# Only an ini-driven run configures logging; programmatic runs keep the caller's setup.
if config.config_file_name is not None:
    fileConfig(config.config_file_name)


def _get_db_url() -> str:
    # MigrationManager passes the URL explicitly; the env var covers the alembic CLI.
    return (
        config.get_main_option("sqlalchemy.url")
        or os.getenv("IDSERIES_DB_URL")
        or "sqlite:///data/idseries.db"
    )


def get_target_metadata():
    # Import here so env.py doesn't import app code unless needed.
    from idseries.infrastructure.stores.models import Base  # noqa

    return Base.metadata


target_metadata = get_target_metadata()


def run_migrations_offline() -> None:
    url = _get_db_url()
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    from idseries.infrastructure.stores.sqlalchemy_db import ensure_sqlite_parent_dir

    configuration = config.get_section(config.config_ini_section) or {}
    configuration["sqlalchemy.url"] = _get_db_url()
    ensure_sqlite_parent_dir(configuration["sqlalchemy.url"])

    connectable = engine_from_config(
        configuration,
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
