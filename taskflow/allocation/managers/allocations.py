"""Allocation store: keyed persistence of ``daily_quotas`` rows.

Creation goes through a single ``INSERT ... ON CONFLICT DO NOTHING`` on the
``(agent_id, quota_date)`` primary key, never a check-then-insert pair, so
concurrent first requests cannot both commit a row.  Rows are never deleted
here; past days are read back as history by the exclusion window and the
carry-over lookup.
"""

from __future__ import annotations

from datetime import date

from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from taskflow.allocation.db.tables import DailyAllocation


class AllocationNotFoundError(LookupError):
    """Raised when no allocation exists for the (agent, date) key."""


class CompaniesExceedQuotaError(ValueError):
    """Raised when a consumption update carries more companies than the day's quota."""


async def get_allocation(db: AsyncSession, agent_id: str, quota_date: date) -> DailyAllocation | None:
    """Read the row for the key, bypassing any stale identity-map copy."""
    return await db.get(DailyAllocation, (agent_id, quota_date), populate_existing=True)


async def insert_allocation_if_absent(
    db: AsyncSession,
    *,
    agent_id: str,
    quota_date: date,
    companies: list[dict],
    total_quota: int,
    remaining_quota: int,
    pool_size: int,
) -> DailyAllocation | None:
    """Insert a new row and commit.

    Returns the inserted row, or ``None`` when another writer already owns
    the key (the caller must re-read the winner).
    """
    stmt = (
        pg_insert(DailyAllocation)
        .values(
            agent_id=agent_id,
            quota_date=quota_date,
            companies=companies,
            total_quota=total_quota,
            remaining_quota=remaining_quota,
            pool_size=pool_size,
        )
        .on_conflict_do_nothing(index_elements=[DailyAllocation.agent_id, DailyAllocation.quota_date])
        .returning(DailyAllocation)
    )
    result = await db.execute(stmt)
    row = result.scalars().first()
    await db.commit()
    return row


async def list_allocations(
    db: AsyncSession,
    agent_id: str,
    *,
    start: date,
    end: date,
) -> list[DailyAllocation]:
    """Rows for *agent_id* with ``start <= quota_date < end``, oldest first."""
    stmt = (
        select(DailyAllocation)
        .where(
            DailyAllocation.agent_id == agent_id,
            DailyAllocation.quota_date >= start,
            DailyAllocation.quota_date < end,
        )
        .order_by(DailyAllocation.quota_date.asc())
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_latest_before(db: AsyncSession, agent_id: str, quota_date: date) -> DailyAllocation | None:
    """Most recent row for *agent_id* strictly before *quota_date*."""
    stmt = (
        select(DailyAllocation)
        .where(DailyAllocation.agent_id == agent_id, DailyAllocation.quota_date < quota_date)
        .order_by(DailyAllocation.quota_date.desc())
        .limit(1)
    )
    result = await db.execute(stmt)
    return result.scalars().first()


async def update_consumption(
    db: AsyncSession,
    agent_id: str,
    quota_date: date,
    *,
    companies: list[dict],
    remaining_quota: int,
) -> DailyAllocation:
    """Overwrite the consumption state of an existing row (last writer wins).

    ``remaining_quota`` is clamped into ``[0, total_quota]``.  Raises
    ``AllocationNotFoundError`` if the key was never created and
    ``CompaniesExceedQuotaError`` if *companies* is longer than ``total_quota``
    (the list feeds later exclusion windows, so it cannot grow).
    """
    row = await get_allocation(db, agent_id, quota_date)
    if row is None:
        msg = f"{agent_id}@{quota_date.isoformat()}"
        raise AllocationNotFoundError(msg)
    if len(companies) > row.total_quota:
        msg = f"{len(companies)} companies exceed the total quota of {row.total_quota} for {agent_id}@{quota_date}"
        raise CompaniesExceedQuotaError(msg)

    row.companies = companies
    row.remaining_quota = clamp_remaining(remaining_quota, row.total_quota)
    row.updated_at = func.now()

    await db.commit()
    await db.refresh(row)
    return row


def clamp_remaining(remaining_quota: int, total_quota: int) -> int:
    return max(0, min(remaining_quota, total_quota))
