"""Quota allocation service -- the daily outreach list for each agent.

The service is a process-level singleton initialised in the app lifespan.
It composes four collaborators:

- **Allocation store** (PostgreSQL ``daily_quotas``): the canonical row per
  (agent, date), plus history for exclusion and carry-over.
- **Account catalog**: the agent's full account list (external system).
- **Exclusion window**: ids allocated within the trailing window.
- **Sampler**: bounded random pick from the eligible pool.

The calendar date is always an argument; nothing here reads the wall clock.
Methods accept an ``AsyncSession`` so that database access follows FastAPI's
per-request dependency injection pattern.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from datetime import date
from typing import TYPE_CHECKING

from loguru import logger
from sqlalchemy.exc import DBAPIError, IntegrityError

from taskflow.allocation.managers.allocations import (
    get_allocation,
    get_latest_before,
    insert_allocation_if_absent,
    list_allocations,
    update_consumption,
)
from taskflow.allocation.models.account import Account
from taskflow.allocation.models.enums import AllocationStatus
from taskflow.allocation.models.quota import AllocationResult, DailyQuota
from taskflow.allocation.quota.exclusion import DEFAULT_WINDOW_DAYS, load_exclusion_set
from taskflow.allocation.quota.sampler import QuotaSampler, build_candidate_pool

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from taskflow.allocation.catalog.base import AccountCatalog

DEFAULT_BASE_QUOTA = 35
SUNDAY = 6


class AllocationStoreUnavailableError(RuntimeError):
    """The allocation store could not serve the request (unreachable or unmigrated).  Retryable."""


@asynccontextmanager
async def _store_errors() -> AsyncIterator[None]:
    """Translate driver-level store failures into a domain error.

    Covers lost connections as well as a schema that was never migrated.
    Integrity violations are programming errors and propagate unchanged.
    """
    try:
        yield
    except IntegrityError:
        raise
    except DBAPIError as exc:
        msg = f"Allocation store unavailable: {exc.orig!r}"
        raise AllocationStoreUnavailableError(msg) from exc


def _require_key(agent_id: str | None, quota_date: date | None) -> None:
    if not agent_id or not agent_id.strip():
        msg = "agent_id is required"
        raise ValueError(msg)
    if quota_date is None:
        msg = "quota_date is required"
        raise ValueError(msg)


class QuotaAllocationService:
    """Answers "give me today's allocation" and "record what was consumed".

    Stateless beyond its collaborators: every fact lives in the store, so
    any number of workers can serve the same agent.
    """

    def __init__(
        self,
        catalog: AccountCatalog,
        *,
        base_quota: int = DEFAULT_BASE_QUOTA,
        exclusion_window_days: int = DEFAULT_WINDOW_DAYS,
        rest_weekday: int | None = SUNDAY,
        sampler: QuotaSampler | None = None,
    ) -> None:
        self._catalog = catalog
        self._base_quota = base_quota
        self._window_days = exclusion_window_days
        self._rest_weekday = rest_weekday
        self._sampler = sampler or QuotaSampler()

    def is_rest_day(self, quota_date: date) -> bool:
        return self._rest_weekday is not None and quota_date.weekday() == self._rest_weekday

    # -- Read / create ---------------------------------------------------------

    async def fetch_or_create(self, db: AsyncSession, agent_id: str, quota_date: date) -> AllocationResult:
        """Return the allocation for (agent, date), generating it on first call.

        Repeated and concurrent calls for one key all observe the same
        canonical row.  Raises ``ValueError`` on a missing key,
        ``CatalogUnavailableError`` when the pool cannot be fetched and
        ``AllocationStoreUnavailableError`` when the store is down.
        """
        _require_key(agent_id, quota_date)

        async with _store_errors():
            existing = await get_allocation(db, agent_id, quota_date)
        if existing is not None:
            return AllocationResult(quota=DailyQuota.model_validate(existing), status=AllocationStatus.EXISTING)

        if self.is_rest_day(quota_date):
            logger.info("Rest day: no allocation for agent {} on {}", agent_id, quota_date)
            return AllocationResult(
                quota=DailyQuota(agent_id=agent_id, quota_date=quota_date),
                status=AllocationStatus.REST_DAY,
            )

        return await self._generate(db, agent_id, quota_date)

    async def _generate(self, db: AsyncSession, agent_id: str, quota_date: date) -> AllocationResult:
        async with _store_errors():
            excluded = await load_exclusion_set(db, agent_id, quota_date, self._window_days)
            previous = await get_latest_before(db, agent_id, quota_date)

        # Catalog failures propagate: an unreachable catalog is not an empty pool.
        accounts = await self._catalog.list_accounts(agent_id)
        pool = build_candidate_pool(accounts, excluded)

        carry_over = previous.remaining_quota if previous is not None else 0
        total_quota = self._base_quota + carry_over
        sample = self._sampler.sample(pool, total_quota)

        async with _store_errors():
            row = await insert_allocation_if_absent(
                db,
                agent_id=agent_id,
                quota_date=quota_date,
                companies=[a.model_dump(mode="json") for a in sample.accounts],
                total_quota=total_quota,
                remaining_quota=len(sample.accounts),
                pool_size=sample.pool_size,
            )
            if row is None:
                # Lost the insert race: the winner's row is canonical.
                row = await get_allocation(db, agent_id, quota_date)
                if row is None:  # pragma: no cover
                    msg = f"Allocation {agent_id}@{quota_date} vanished after insert conflict"
                    raise AllocationStoreUnavailableError(msg)
                logger.info("Allocation race for agent {} on {}: using existing row", agent_id, quota_date)
                return AllocationResult(quota=DailyQuota.model_validate(row), status=AllocationStatus.EXISTING)

        if sample.short_pool:
            logger.warning(
                "Short pool for agent {} on {}: {} eligible for quota {} ({} excluded)",
                agent_id,
                quota_date,
                sample.pool_size,
                total_quota,
                len(excluded),
            )
        logger.info(
            "Allocation created: agent={} date={} companies={} total_quota={} (carry_over={})",
            agent_id,
            quota_date,
            len(sample.accounts),
            total_quota,
            carry_over,
        )
        return AllocationResult(quota=DailyQuota.model_validate(row), status=AllocationStatus.CREATED)

    # -- Consumption -----------------------------------------------------------

    async def record_consumption(
        self,
        db: AsyncSession,
        agent_id: str,
        quota_date: date,
        companies: Sequence[Account],
        remaining_quota: int,
    ) -> DailyQuota:
        """Store the UI's consumption state for an existing allocation.

        Raises ``AllocationNotFoundError`` if the allocation was never
        fetched and ``CompaniesExceedQuotaError`` (a ``ValueError``) if more
        companies are sent than the day's quota.  Out-of-range
        ``remaining_quota`` is clamped, not rejected.
        """
        _require_key(agent_id, quota_date)

        async with _store_errors():
            row = await update_consumption(
                db,
                agent_id,
                quota_date,
                companies=[a.model_dump(mode="json") for a in companies],
                remaining_quota=remaining_quota,
            )

        if row.remaining_quota != remaining_quota:
            logger.warning(
                "Consumption for agent {} on {}: remaining {} clamped to {}",
                agent_id,
                quota_date,
                remaining_quota,
                row.remaining_quota,
            )
        logger.info(
            "Consumption recorded: agent={} date={} companies={} remaining={}",
            agent_id,
            quota_date,
            len(row.companies),
            row.remaining_quota,
        )
        return DailyQuota.model_validate(row)

    # -- History ---------------------------------------------------------------

    async def list_history(self, db: AsyncSession, agent_id: str, *, start: date, end: date) -> list[DailyQuota]:
        """Stored allocations for *agent_id* in ``[start, end)``, oldest first."""
        if not agent_id or not agent_id.strip():
            msg = "agent_id is required"
            raise ValueError(msg)
        if end < start:
            msg = f"end ({end}) is before start ({start})"
            raise ValueError(msg)

        async with _store_errors():
            rows = await list_allocations(db, agent_id, start=start, end=end)
        return [DailyQuota.model_validate(row) for row in rows]
