"""Data models for the quota allocation service."""

from taskflow.allocation.models.account import Account
from taskflow.allocation.models.api import (
    ConsumptionResponse,
    ConsumptionUpdate,
    DailyQuotaResponse,
)
from taskflow.allocation.models.enums import AllocationStatus, QuotaErrorCode
from taskflow.allocation.models.quota import AllocationResult, DailyQuota
from taskflow.allocation.models.skip import SkipCreate, SkipPeriod

__all__ = [
    # Account
    "Account",
    # Quota
    "AllocationResult",
    # Enums
    "AllocationStatus",
    # API schemas
    "ConsumptionResponse",
    "ConsumptionUpdate",
    "DailyQuota",
    "DailyQuotaResponse",
    "QuotaErrorCode",
    # Skip periods
    "SkipCreate",
    "SkipPeriod",
]
