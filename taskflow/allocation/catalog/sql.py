"""SQL account catalog.

Reads the external ``accounts`` table::

    SELECT id, companyname, ... FROM accounts WHERE referenceid = :agent_id

Each query runs on its own short-lived connection under ``anyio.fail_after``
so a slow catalog fails the allocation request instead of stalling it.
"""

from __future__ import annotations

import anyio
from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncEngine

from taskflow.allocation.catalog.base import CatalogUnavailableError
from taskflow.allocation.db.catalog import AccountRow
from taskflow.allocation.models.account import Account


class SqlAccountCatalog:
    """PostgreSQL implementation of the AccountCatalog protocol."""

    def __init__(self, engine: AsyncEngine, *, timeout: float = 10.0) -> None:
        self._engine = engine
        self._timeout = timeout

    async def list_accounts(self, agent_id: str) -> list[Account]:
        stmt = (
            select(
                AccountRow.id,
                AccountRow.companyname,
                AccountRow.contactperson,
                AccountRow.contactnumber,
                AccountRow.emailaddress,
                AccountRow.typeclient,
                AccountRow.address,
            )
            .where(AccountRow.referenceid == agent_id)
            .order_by(AccountRow.id)
        )
        try:
            with anyio.fail_after(self._timeout):
                async with self._engine.connect() as conn:
                    result = await conn.execute(stmt)
                    rows = result.all()
        except TimeoutError:
            msg = f"Account catalog timed out after {self._timeout}s (agent={agent_id})"
            raise CatalogUnavailableError(msg) from None
        except DBAPIError as exc:
            msg = f"Account catalog query failed (agent={agent_id}): {exc.orig!r}"
            raise CatalogUnavailableError(msg) from exc

        logger.debug("Catalog: {} accounts for agent {}", len(rows), agent_id)
        return [_row_to_account(row) for row in rows]


def _row_to_account(row) -> Account:
    """Map legacy catalog column names onto the Account model."""
    return Account(
        id=row.id,
        company_name=row.companyname,
        contact_person=row.contactperson,
        contact_number=row.contactnumber,
        email_address=row.emailaddress,
        type_client=row.typeclient,
        address=row.address,
    )
