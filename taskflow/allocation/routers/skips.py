"""Skip period endpoints (RPC-style)."""

from __future__ import annotations

from fastapi import APIRouter, Query, status

from taskflow.allocation.deps import DbSession
from taskflow.allocation.managers import skips as skips_mgr
from taskflow.allocation.models.skip import SkipCreate, SkipPeriod

router = APIRouter(prefix="/daily-quota/skips", tags=["daily-quota"])


@router.post("/create", response_model=SkipPeriod, status_code=status.HTTP_201_CREATED)
async def create_skip(body: SkipCreate, db: DbSession) -> SkipPeriod:
    """Record a skip period for an agent."""
    skip = await skips_mgr.create_skip(db, body)
    return SkipPeriod.model_validate(skip)


@router.get("/list", response_model=list[SkipPeriod])
async def list_skips(
    db: DbSession,
    agent_id: str = Query(..., alias="referenceid", min_length=1),
) -> list[SkipPeriod]:
    """List an agent's skip periods, most recently recorded first."""
    rows = await skips_mgr.list_skips(db, agent_id)
    return [SkipPeriod.model_validate(r) for r in rows]
