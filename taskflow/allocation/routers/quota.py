"""Daily quota endpoints (RPC-style).

Thin HTTP adapter -- delegates to the quota allocation service.  ``/get`` and
``/update`` never fail with a bare error body: every failure answers with the
safe default payload (no companies, zero remaining) and an ``error`` code.
"""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, HTTPException, Query, Response, status
from loguru import logger

from taskflow.allocation.catalog.base import CatalogUnavailableError
from taskflow.allocation.deps import DbSession, OptionalDbSession, OptionalQuotaService, QuotaService
from taskflow.allocation.managers.allocations import AllocationNotFoundError, CompaniesExceedQuotaError
from taskflow.allocation.managers.quota import AllocationStoreUnavailableError
from taskflow.allocation.models.api import ConsumptionResponse, ConsumptionUpdate, DailyQuotaResponse
from taskflow.allocation.models.enums import QuotaErrorCode
from taskflow.allocation.models.quota import DailyQuota

router = APIRouter(prefix="/daily-quota", tags=["daily-quota"])

_UNCONFIGURED = "Quota service not configured (TASKFLOW_DATABASE_URL or account catalog missing)."


@router.get("/get", response_model=DailyQuotaResponse)
async def handle_get_quota(
    response: Response,
    db: OptionalDbSession,
    service: OptionalQuotaService,
    agent_id: str | None = Query(None, alias="referenceid", description="Agent reference id."),
    quota_date: date | None = Query(None, alias="date", description="Calendar day (YYYY-MM-DD)."),
) -> DailyQuotaResponse:
    """Fetch the agent's allocation for the day, creating it on first call."""
    if not agent_id or not agent_id.strip() or quota_date is None:
        response.status_code = status.HTTP_400_BAD_REQUEST
        return DailyQuotaResponse.degraded(
            QuotaErrorCode.INVALID_REQUEST,
            "Missing referenceid or date",
            agent_id=agent_id,
            quota_date=quota_date,
            retryable=False,
        )

    if db is None or service is None:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return DailyQuotaResponse.degraded(
            QuotaErrorCode.SERVICE_UNCONFIGURED,
            _UNCONFIGURED,
            agent_id=agent_id,
            quota_date=quota_date,
            retryable=False,
        )

    try:
        result = await service.fetch_or_create(db, agent_id, quota_date)
    except CatalogUnavailableError as exc:
        logger.warning("Daily quota for {} on {} failed: {}", agent_id, quota_date, exc)
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return DailyQuotaResponse.degraded(
            QuotaErrorCode.CATALOG_UNAVAILABLE, str(exc), agent_id=agent_id, quota_date=quota_date
        )
    except AllocationStoreUnavailableError as exc:
        logger.error("Daily quota for {} on {} failed: {}", agent_id, quota_date, exc)
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return DailyQuotaResponse.degraded(
            QuotaErrorCode.STORE_UNAVAILABLE, str(exc), agent_id=agent_id, quota_date=quota_date
        )

    return DailyQuotaResponse.from_result(result)


@router.post("/update", response_model=ConsumptionResponse)
async def handle_update_quota(
    body: ConsumptionUpdate,
    response: Response,
    db: OptionalDbSession,
    service: OptionalQuotaService,
) -> ConsumptionResponse:
    """Record consumption of the day's allocation (companies left, remaining quota)."""
    key = {"agent_id": body.agent_id, "quota_date": body.quota_date}

    if db is None or service is None:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return ConsumptionResponse.degraded(QuotaErrorCode.SERVICE_UNCONFIGURED, _UNCONFIGURED, retryable=False, **key)

    try:
        quota = await service.record_consumption(
            db,
            body.agent_id,
            body.quota_date,
            body.companies,
            body.remaining_quota,
        )
    except AllocationNotFoundError:
        response.status_code = status.HTTP_404_NOT_FOUND
        return ConsumptionResponse.degraded(
            QuotaErrorCode.NOT_FOUND,
            f"No daily quota for '{body.agent_id}' on {body.quota_date}; fetch it first.",
            retryable=False,
            **key,
        )
    except CompaniesExceedQuotaError as exc:
        response.status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
        return ConsumptionResponse.degraded(QuotaErrorCode.INVALID_REQUEST, str(exc), retryable=False, **key)
    except AllocationStoreUnavailableError as exc:
        logger.error("Quota update for {} on {} failed: {}", body.agent_id, body.quota_date, exc)
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return ConsumptionResponse.degraded(QuotaErrorCode.STORE_UNAVAILABLE, "Failed to update quota", **key)

    return ConsumptionResponse(
        agent_id=quota.agent_id,
        quota_date=quota.quota_date,
        companies=quota.companies,
        remaining_quota=quota.remaining_quota,
        total_quota=quota.total_quota,
        updated_at=quota.updated_at,
    )


@router.get("/history", response_model=list[DailyQuota])
async def handle_quota_history(
    db: DbSession,
    service: QuotaService,
    agent_id: str = Query(..., alias="referenceid", min_length=1),
    start: date = Query(..., description="First day included."),
    end: date = Query(..., description="First day excluded."),
) -> list[DailyQuota]:
    """List stored allocations for an agent within ``[start, end)``."""
    try:
        return await service.list_history(db, agent_id, start=start, end=end)
    except ValueError as exc:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, detail=str(exc)) from None
    except AllocationStoreUnavailableError:
        raise HTTPException(status.HTTP_503_SERVICE_UNAVAILABLE, detail="Allocation store unavailable") from None
