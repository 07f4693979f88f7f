from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.routing import APIRouter
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncEngine

from taskflow.allocation.catalog.base import AccountCatalog
from taskflow.allocation.catalog.file import JsonFileAccountCatalog
from taskflow.allocation.catalog.sql import SqlAccountCatalog
from taskflow.allocation.db.engine import create_engine, create_session_factory
from taskflow.allocation.log import setup_logging
from taskflow.allocation.managers.quota import QuotaAllocationService
from taskflow.allocation.settings import TaskflowSettings, get_settings


def create_catalog(
    settings: TaskflowSettings,
    store_engine: AsyncEngine | None,
) -> tuple[AccountCatalog | None, AsyncEngine | None]:
    """Create the account catalog backend based on configuration.

    Returns the catalog and, when a dedicated catalog engine had to be
    opened, that engine so the caller can dispose it on shutdown.
    """
    if settings.catalog_backend == "file":
        return JsonFileAccountCatalog(settings.catalog_file), None

    catalog_url = settings.resolve_catalog_url()
    if catalog_url and catalog_url != settings.database_url:
        engine = create_engine(catalog_url, connect_timeout=settings.database_connect_timeout)
        return SqlAccountCatalog(engine, timeout=settings.catalog_timeout), engine

    if store_engine is None:
        return None, None
    return SqlAccountCatalog(store_engine, timeout=settings.catalog_timeout), None


def create_quota_service(settings: TaskflowSettings, catalog: AccountCatalog) -> QuotaAllocationService:
    return QuotaAllocationService(
        catalog,
        base_quota=settings.base_quota,
        exclusion_window_days=settings.exclusion_window_days,
        rest_weekday=settings.rest_weekday,
    )


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    # -- Startup ---------------------------------------------------------------
    settings = get_settings()
    setup_logging(settings.log_level)

    logger.info("Quota service starting (host={}, port={})", settings.host, settings.port)
    logger.info(
        "Quota policy: base_quota={}, exclusion_window={}d, rest_weekday={}",
        settings.base_quota,
        settings.exclusion_window_days,
        settings.rest_weekday,
    )

    # -- Initialise state fields (always present, possibly None) ----------------
    _app.state.db_engine = None
    _app.state.db_session_factory = None
    _app.state.quota_service = None

    # -- Allocation store ------------------------------------------------------
    if settings.database_url:
        engine = create_engine(settings.database_url, connect_timeout=settings.database_connect_timeout)
        _app.state.db_engine = engine
        _app.state.db_session_factory = create_session_factory(engine)
        logger.info("PostgreSQL: connected (pool_size=5, max_overflow=10)")
    else:
        logger.warning("TASKFLOW_DATABASE_URL not set -- quota endpoints disabled")

    # -- Account catalog -------------------------------------------------------
    catalog, catalog_engine = create_catalog(settings, _app.state.db_engine)
    if catalog is not None:
        _app.state.quota_service = create_quota_service(settings, catalog)
        logger.info("Account catalog: {} backend", settings.catalog_backend)
    else:
        logger.warning("No account catalog configured -- quota generation disabled")

    yield

    # -- Shutdown --------------------------------------------------------------
    logger.info("Quota service shutting down")

    if catalog_engine is not None:
        await catalog_engine.dispose()
        logger.info("Catalog database: disposed")

    # Dispose DB engine (closes all pooled connections).
    if _app.state.db_engine is not None:
        await _app.state.db_engine.dispose()
        logger.info("PostgreSQL: disposed")


app = FastAPI(title="Taskflow Daily Quota", lifespan=lifespan)

# ---------------------------------------------------------------------------
# API router -- all backend endpoints live under /api
# ---------------------------------------------------------------------------
api = APIRouter(prefix="/api")


@api.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


from taskflow.allocation.routers.quota import router as quota_router  # noqa: E402
from taskflow.allocation.routers.skips import router as skips_router  # noqa: E402

api.include_router(quota_router)
api.include_router(skips_router)

app.include_router(api)
