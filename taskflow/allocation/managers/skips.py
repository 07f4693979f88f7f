"""Skip period operations: record and list an agent's away periods.

Skip periods are informational for the outreach UI.  They do not change how
daily quotas are generated.
"""

from __future__ import annotations

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from taskflow.allocation.db.tables import QuotaSkip
from taskflow.allocation.models.skip import SkipCreate


async def create_skip(db: AsyncSession, body: SkipCreate) -> QuotaSkip:
    skip = QuotaSkip(
        skip_id=str(uuid.uuid4()),
        agent_id=body.agent_id,
        start_date=body.start_date,
        end_date=body.end_date,
        status=body.status,
    )
    db.add(skip)
    await db.commit()
    await db.refresh(skip)
    return skip


async def list_skips(db: AsyncSession, agent_id: str) -> list[QuotaSkip]:
    """Skip periods for *agent_id*, most recently recorded first."""
    stmt = (
        select(QuotaSkip)
        .where(QuotaSkip.agent_id == agent_id)
        .order_by(QuotaSkip.created_at.desc(), QuotaSkip.start_date.desc())
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())
