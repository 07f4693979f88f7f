"""Daily quota domain objects."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, computed_field

from taskflow.allocation.models.account import Account
from taskflow.allocation.models.enums import AllocationStatus


class DailyQuota(BaseModel):
    """One agent's allocation for one day, as stored (or as a rest-day stand-in)."""

    model_config = ConfigDict(from_attributes=True)

    agent_id: str
    quota_date: date
    companies: list[Account] = Field(default_factory=list)
    total_quota: int = 0
    remaining_quota: int = 0
    pool_size: int = Field(default=0, description="Eligible accounts found when the row was generated.")
    updated_at: datetime | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def short_pool(self) -> bool:
        """Fewer eligible accounts than the day's quota."""
        return self.pool_size < self.total_quota

    @computed_field  # type: ignore[prop-decorator]
    @property
    def pool_exhausted(self) -> bool:
        """A working day whose eligible pool was empty."""
        return self.total_quota > 0 and self.pool_size == 0


class AllocationResult(BaseModel):
    """Outcome of ``QuotaAllocationService.fetch_or_create``."""

    quota: DailyQuota
    status: AllocationStatus
