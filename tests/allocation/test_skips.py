"""Tests for agent skip periods (model, manager, HTTP)."""

from __future__ import annotations

from collections.abc import AsyncIterator
from datetime import date

import pytest
from httpx import ASGITransport, AsyncClient
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from taskflow.allocation.app import app
from taskflow.allocation.db.tables import QuotaSkip
from taskflow.allocation.deps import get_optional_db
from taskflow.allocation.managers.skips import create_skip, list_skips
from taskflow.allocation.models.skip import SkipCreate

CREATE = "/api/daily-quota/skips/create"
LIST = "/api/daily-quota/skips/list"


def test_skip_accepts_legacy_field_names() -> None:
    body = SkipCreate.model_validate(
        {"referenceid": "A007", "startdate": "2025-06-02", "enddate": "2025-06-04", "status": "Leave"}
    )
    assert body.agent_id == "A007"
    assert body.start_date == date(2025, 6, 2)
    assert body.end_date == date(2025, 6, 4)


def test_single_day_skip_is_valid() -> None:
    body = SkipCreate(agent_id="A007", start_date=date(2025, 6, 2), end_date=date(2025, 6, 2), status="Leave")
    assert body.start_date == body.end_date


@pytest.mark.parametrize(
    "payload",
    [
        {"referenceid": "A007", "startdate": "2025-06-04", "enddate": "2025-06-02", "status": "Leave"},
        {"referenceid": "", "startdate": "2025-06-02", "enddate": "2025-06-04", "status": "Leave"},
        {"referenceid": "A007", "startdate": "2025-06-02", "enddate": "2025-06-04", "status": ""},
        {"referenceid": "A007", "enddate": "2025-06-04", "status": "Leave"},
    ],
)
def test_invalid_skip_rejected(payload: dict) -> None:
    with pytest.raises(ValidationError):
        SkipCreate.model_validate(payload)


@pytest.mark.integration
async def test_create_and_list_newest_first(db_session: AsyncSession) -> None:
    first = await create_skip(
        db_session, SkipCreate(agent_id="A007", start_date=date(2025, 6, 2), end_date=date(2025, 6, 3), status="Leave")
    )
    second = await create_skip(
        db_session, SkipCreate(agent_id="A007", start_date=date(2025, 6, 9), end_date=date(2025, 6, 9), status="Field")
    )
    await create_skip(
        db_session, SkipCreate(agent_id="B001", start_date=date(2025, 6, 2), end_date=date(2025, 6, 2), status="Leave")
    )

    rows = await list_skips(db_session, "A007")

    assert [r.skip_id for r in rows] == [second.skip_id, first.skip_id]
    assert rows[0].created_at is not None
    assert await list_skips(db_session, "nobody") == []


@pytest.mark.integration
async def test_check_constraint_rejects_reversed_range(db_session: AsyncSession) -> None:
    db_session.add(
        QuotaSkip(skip_id="s1", agent_id="A007", start_date=date(2025, 6, 4), end_date=date(2025, 6, 2), status="x")
    )
    with pytest.raises(IntegrityError):
        await db_session.flush()


@pytest.mark.integration
async def test_skip_routes(client: AsyncClient) -> None:
    resp = await client.post(
        CREATE,
        json={"referenceid": "A007", "startdate": "2025-06-02", "enddate": "2025-06-04", "status": "Leave"},
    )
    assert resp.status_code == 201
    created = resp.json()
    assert created["agent_id"] == "A007"
    assert created["start_date"] == "2025-06-02"
    assert created["skip_id"]

    listed = await client.get(LIST, params={"referenceid": "A007"})
    assert listed.status_code == 200
    assert [s["skip_id"] for s in listed.json()] == [created["skip_id"]]


@pytest.mark.integration
async def test_skip_does_not_change_allocation(client: AsyncClient) -> None:
    await client.post(
        CREATE,
        json={"referenceid": "A007", "startdate": "2025-06-02", "enddate": "2025-06-02", "status": "Leave"},
    )
    body = (await client.get("/api/daily-quota/get", params={"referenceid": "A007", "date": "2025-06-02"})).json()
    assert len(body["companies"]) == 35



@pytest.fixture
async def validation_client() -> AsyncIterator[AsyncClient]:
    """Client with a placeholder session; only request validation runs."""

    async def _placeholder_db() -> AsyncIterator[object]:
        yield object()

    app.dependency_overrides[get_optional_db] = _placeholder_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


async def test_skip_route_rejects_reversed_range(validation_client: AsyncClient) -> None:
    resp = await validation_client.post(
        CREATE,
        json={"referenceid": "A007", "startdate": "2025-06-04", "enddate": "2025-06-02", "status": "Leave"},
    )
    assert resp.status_code == 422


async def test_skip_list_requires_referenceid(validation_client: AsyncClient) -> None:
    resp = await validation_client.get(LIST)
    assert resp.status_code == 422
