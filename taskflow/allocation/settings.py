"""Service configuration loaded from TASKFLOW_* environment variables."""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class TaskflowSettings(BaseSettings):
    """Taskflow quota allocation settings.

    All fields are read from environment variables with the ``TASKFLOW_`` prefix.
    For example, ``TASKFLOW_BASE_QUOTA=40`` maps to ``base_quota``.
    """

    model_config = SettingsConfigDict(
        env_prefix="TASKFLOW_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_parse_none_str="none",
    )

    # -- Logging ---------------------------------------------------------------
    log_level: str = "INFO"

    # -- Allocation store ------------------------------------------------------
    database_url: str | None = None
    """PostgreSQL connection string (psycopg).  Holds the ``daily_quotas`` table."""

    database_connect_timeout: int = 10
    """Seconds to wait for a new store connection before giving up."""

    # -- Account catalog -------------------------------------------------------
    catalog_backend: Literal["sql", "file"] = "sql"

    catalog_database_url: str | None = None
    """Connection string of the account directory.  Falls back to ``database_url``."""

    catalog_file: str = "./data/accounts.json"
    """JSON account list (only when catalog_backend = "file")."""

    catalog_timeout: float = 10.0
    """Upper bound in seconds for one "accounts owned by agent" query."""

    # -- Quota policy ----------------------------------------------------------
    base_quota: int = Field(default=35, ge=0)
    exclusion_window_days: int = Field(default=30, ge=0)
    rest_weekday: int | None = Field(default=6, ge=0, le=6)
    """Weekday (Monday=0 ... Sunday=6) on which no allocation is generated.

    Set ``TASKFLOW_REST_WEEKDAY=none`` to allocate every day of the week.
    """

    # -- Server ----------------------------------------------------------------
    host: str = "0.0.0.0"  # noqa: S104
    port: int = 8000

    # -- Helpers ---------------------------------------------------------------

    def resolve_catalog_url(self) -> str | None:
        """Return the catalog database URL, defaulting to the store database."""
        return self.catalog_database_url or self.database_url


def get_settings() -> TaskflowSettings:
    """Return a cached settings instance.

    Reads from environment variables and ``.env`` on first call, then returns
    the same object.  Call ``_get_settings_cached.cache_clear()`` in tests to force a
    re-read after overriding env vars.
    """
    return _get_settings_cached()


def _get_settings_cached() -> TaskflowSettings:
    """Inner function wrapped by lru_cache (allows type-safe cache_clear)."""
    return TaskflowSettings()


# Apply lru_cache at runtime so the function is only called once.
from functools import lru_cache  # noqa: E402

_get_settings_cached = lru_cache(maxsize=1)(_get_settings_cached)
