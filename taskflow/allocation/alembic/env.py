"""Alembic environment for the allocation store.

The URL comes from ``TASKFLOW_DATABASE_URL``; migrations run synchronously
through psycopg3 on the same URL the async service uses.
"""

from __future__ import annotations

from logging.config import fileConfig
from typing import Any

from alembic import context
from sqlalchemy import create_engine, pool

from taskflow.allocation.db.tables import Base
from taskflow.allocation.settings import TaskflowSettings

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _database_url() -> str:
    url = TaskflowSettings().database_url
    if not url:
        msg = "TASKFLOW_DATABASE_URL is not set. Cannot run migrations."
        raise RuntimeError(msg)
    # Bare postgresql:// URLs would pick psycopg2, which is not installed.
    if url.startswith("postgresql://"):
        url = "postgresql+psycopg://" + url.removeprefix("postgresql://")
    return url


def _owned_by_store(obj: Any, name: str | None, type_: str, reflected: bool, compare_to: Any) -> bool:
    """Keep autogenerate away from tables this package does not model.

    The store may live in the same database as the account catalog, whose
    ``accounts`` table must never show up as a drop.
    """
    if type_ == "table":
        return name in target_metadata.tables
    return True


_COMMON_OPTIONS: dict[str, Any] = {
    "target_metadata": target_metadata,
    "include_object": _owned_by_store,
    "compare_type": True,
    "compare_server_default": True,
}


def run_migrations_offline() -> None:
    """Emit SQL to stdout without connecting."""
    context.configure(
        url=_database_url(),
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_COMMON_OPTIONS,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    engine = create_engine(_database_url(), poolclass=pool.NullPool)
    with engine.connect() as connection:
        context.configure(connection=connection, **_COMMON_OPTIONS)
        with context.begin_transaction():
            context.run_migrations()
    engine.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
