"""Account catalog interface.

The catalog is the source of record for accounts and is owned by another
system.  The allocation service needs exactly one query from it: "list the
accounts owned by agent X".  The interface is async so the SQL backend and
the file backend share one call shape.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from taskflow.allocation.models.account import Account


class CatalogUnavailableError(RuntimeError):
    """The catalog could not be queried (unreachable, timed out, unreadable).

    Always retryable.  Distinct from an empty result, which is a valid answer.
    """


@runtime_checkable
class AccountCatalog(Protocol):
    """Async read-only query surface over the account directory."""

    async def list_accounts(self, agent_id: str) -> list[Account]:
        """Return every account assigned to *agent_id*.

        Raises ``CatalogUnavailableError`` if the catalog cannot answer.
        """
        ...
