"""API request / response schemas for the daily quota endpoints.

The outreach UI speaks the legacy wire names (``referenceid``, ``date``,
``companies``, ``remaining_quota``); request schemas accept them as aliases
of the Python field names.

Every quota read answers with ``DailyQuotaResponse``, including failures:
degraded responses keep the safe default payload (no companies, zero
remaining) and add an ``error`` code so the UI can render an empty board
instead of crashing.
"""

from __future__ import annotations

from datetime import date, datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from taskflow.allocation.models.account import Account
from taskflow.allocation.models.enums import AllocationStatus, QuotaErrorCode
from taskflow.allocation.models.quota import AllocationResult

# ---------------------------------------------------------------------------
# Read
# ---------------------------------------------------------------------------


class DailyQuotaResponse(BaseModel):
    """Today's target list for an agent, or a degraded stand-in."""

    agent_id: str | None = None
    quota_date: date | None = None
    companies: list[Account] = Field(default_factory=list)
    remaining_quota: int = 0
    total_quota: int = 0
    status: AllocationStatus | None = None
    short_pool: bool = False
    pool_exhausted: bool = False
    warning: str | None = None
    error: QuotaErrorCode | None = None
    detail: str | None = None
    retryable: bool = False

    @classmethod
    def from_result(cls, result: AllocationResult) -> DailyQuotaResponse:
        quota = result.quota
        warning = None
        if quota.pool_exhausted:
            warning = "No companies available for this agent"
        elif quota.short_pool:
            warning = f"Only {quota.pool_size} eligible companies for a quota of {quota.total_quota}"
        return cls(
            agent_id=quota.agent_id,
            quota_date=quota.quota_date,
            companies=quota.companies,
            remaining_quota=quota.remaining_quota,
            total_quota=quota.total_quota,
            status=result.status,
            short_pool=quota.short_pool,
            pool_exhausted=quota.pool_exhausted,
            warning=warning,
        )

    @classmethod
    def degraded(
        cls,
        error: QuotaErrorCode,
        detail: str,
        *,
        agent_id: str | None = None,
        quota_date: date | None = None,
        retryable: bool = True,
    ) -> DailyQuotaResponse:
        return cls(
            agent_id=agent_id,
            quota_date=quota_date,
            error=error,
            detail=detail,
            retryable=retryable,
        )


# ---------------------------------------------------------------------------
# Write
# ---------------------------------------------------------------------------


class ConsumptionUpdate(BaseModel):
    """Consumption state pushed by the outreach UI as the agent works the list."""

    model_config = ConfigDict(populate_by_name=True)

    agent_id: str = Field(min_length=1, validation_alias=AliasChoices("referenceid", "agent_id"))
    quota_date: date = Field(validation_alias=AliasChoices("date", "quota_date"))
    companies: list[Account] = Field(default_factory=list)
    remaining_quota: int = Field(description="Clamped into [0, total_quota] before it is stored.")


class ConsumptionResponse(BaseModel):
    """Echo of the stored (clamped) consumption state, or a degraded stand-in."""

    success: bool = True
    agent_id: str | None = None
    quota_date: date | None = None
    companies: list[Account] = Field(default_factory=list)
    remaining_quota: int = 0
    total_quota: int = 0
    updated_at: datetime | None = None
    error: QuotaErrorCode | None = None
    detail: str | None = None
    retryable: bool = False

    @classmethod
    def degraded(
        cls,
        error: QuotaErrorCode,
        detail: str,
        *,
        agent_id: str | None = None,
        quota_date: date | None = None,
        retryable: bool = True,
    ) -> ConsumptionResponse:
        return cls(
            success=False,
            agent_id=agent_id,
            quota_date=quota_date,
            error=error,
            detail=detail,
            retryable=retryable,
        )
