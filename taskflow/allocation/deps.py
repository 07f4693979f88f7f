"""FastAPI dependency injection for DB sessions and the quota service.

Usage in route handlers::

    @router.get("/history")
    async def history(db: DbSession, service: QuotaService) -> list[DailyQuota]:
        ...

``DbSession`` / ``QuotaService`` raise HTTP 503 if the backing service was
not configured (TASKFLOW_DATABASE_URL unset).  The quota read/write routes
use the ``Optional*`` variants instead: they resolve to ``None`` so the
handler can validate the request first and still answer with the safe
default payload.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskflow.allocation.managers.quota import QuotaAllocationService


async def get_optional_db(request: Request) -> AsyncIterator[AsyncSession | None]:
    """Yield an async SQLAlchemy session (or ``None`` when no store is configured).

    Managers commit their own writes.  If the handler raises, the session is
    simply closed and the implicit transaction is rolled back.
    """
    session_factory = request.app.state.db_session_factory
    if session_factory is None:
        yield None
        return
    session: AsyncSession = session_factory()
    try:
        yield session
    finally:
        await session.close()


def get_optional_quota_service(request: Request) -> QuotaAllocationService | None:
    """Return the process-wide quota allocation service, if initialised."""
    return request.app.state.quota_service


OptionalDbSession = Annotated[AsyncSession | None, Depends(get_optional_db)]
OptionalQuotaService = Annotated[QuotaAllocationService | None, Depends(get_optional_quota_service)]


def get_db(db: OptionalDbSession) -> AsyncSession:
    if db is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database not configured (TASKFLOW_DATABASE_URL is unset).",
        )
    return db


def get_quota_service(service: OptionalQuotaService) -> QuotaAllocationService:
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Quota service not initialised (account catalog not configured).",
        )
    return service


# -- Annotated type aliases for concise route signatures ---------------------

DbSession = Annotated[AsyncSession, Depends(get_db)]
"""Annotated dependency: async SQLAlchemy session (auto-closed after request)."""

QuotaService = Annotated[QuotaAllocationService, Depends(get_quota_service)]
"""Annotated dependency: shared QuotaAllocationService."""
