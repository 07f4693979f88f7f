"""Test doubles and data builders for allocation tests."""

from __future__ import annotations

from datetime import date

from taskflow.allocation.catalog.base import CatalogUnavailableError
from taskflow.allocation.models.account import Account

MONDAY = date(2025, 6, 2)
SUNDAY = date(2025, 6, 8)


def make_accounts(count: int, *, start: int = 1) -> list[Account]:
    return [
        Account(
            id=i,
            company_name=f"Company {i}",
            contact_person=f"Contact {i}",
            contact_number=f"0917{i:07d}",
            email_address=f"buyer{i}@example.com",
            type_client="TOP 50" if i % 2 else "NEXT 30",
            address=f"{i} Rizal Ave",
        )
        for i in range(start, start + count)
    ]


class StaticCatalog:
    """In-memory catalog: agent_id -> accounts."""

    def __init__(self, accounts: dict[str, list[Account]] | None = None) -> None:
        self.accounts = accounts or {}
        self.calls = 0

    async def list_accounts(self, agent_id: str) -> list[Account]:
        self.calls += 1
        return list(self.accounts.get(agent_id, []))


class FailingCatalog:
    def __init__(self) -> None:
        self.calls = 0

    async def list_accounts(self, agent_id: str) -> list[Account]:
        self.calls += 1
        msg = f"catalog unreachable for {agent_id}"
        raise CatalogUnavailableError(msg)
