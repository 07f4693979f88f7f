"""Shared fixtures for allocation tests."""

from __future__ import annotations

import random
from collections.abc import AsyncIterator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from taskflow.allocation.app import app
from taskflow.allocation.deps import get_optional_db
from taskflow.allocation.managers.quota import QuotaAllocationService
from taskflow.allocation.quota.sampler import QuotaSampler
from tests.allocation.helpers import StaticCatalog, make_accounts


@pytest.fixture
def catalog() -> StaticCatalog:
    return StaticCatalog({"A007": make_accounts(50)})


@pytest.fixture
def service(catalog: StaticCatalog) -> QuotaAllocationService:
    return QuotaAllocationService(catalog, sampler=QuotaSampler(random.Random(7)))


@pytest.fixture
async def client(db_session: AsyncSession, service: QuotaAllocationService) -> AsyncIterator[AsyncClient]:
    """Async HTTP client wired to the app with a test DB session.

    Overrides ``get_optional_db`` (which ``get_db`` builds on) so every
    request uses the savepoint-isolated ``db_session`` fixture from the root
    conftest.  The app lifespan does NOT run under ``ASGITransport``, so
    state fields are pre-set here.
    """

    async def _override_get_db() -> AsyncIterator[AsyncSession]:
        yield db_session

    app.dependency_overrides[get_optional_db] = _override_get_db

    app.state.db_engine = None
    app.state.db_session_factory = None
    app.state.quota_service = service

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
