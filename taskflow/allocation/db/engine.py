"""Async SQLAlchemy engine and session factory.

Both the allocation store and the SQL account catalog go through here.  Uses
psycopg3, which supports sync and async with the same ``postgresql+psycopg://``
URL (Alembic reuses it synchronously).
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine


def create_engine(database_url: str, *, connect_timeout: int | None = None, **kwargs: object) -> AsyncEngine:
    """Create an async SQLAlchemy engine with production-ready pool settings.

    - **pool_size=5** / **max_overflow=10**: quota requests are short, a
      small pool covers a sales floor.
    - **pool_pre_ping=True**: survive PG restarts and idle disconnects.
    - **pool_recycle=3600**: recycle connections after 1 hour.
    - **connect_timeout**: forwarded to libpq so an unreachable server fails
      the request instead of hanging it.

    All defaults can be overridden via *kwargs*.
    """
    defaults: dict = {
        "echo": False,
        "pool_size": 5,
        "max_overflow": 10,
        "pool_pre_ping": True,
        "pool_recycle": 3600,
    }
    if connect_timeout is not None:
        defaults["connect_args"] = {"connect_timeout": connect_timeout}
    defaults.update(kwargs)
    return create_async_engine(database_url, **defaults)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create an async session factory bound to *engine*.

    ``expire_on_commit=False`` keeps allocation rows readable after commit
    without lazy loads (implicit IO is forbidden under asyncio).
    """
    return async_sessionmaker(engine, expire_on_commit=False)
