"""JSON file account catalog.

For development and offline demos: the whole directory is a single JSON
array of accounts, each tagged with its owning agent::

    [
      {"id": 1, "referenceid": "A007", "company_name": "Acme", ...},
      ...
    ]

Legacy catalog column names (``companyname``, ``contactperson``, ...) are
accepted as well.  The file is re-read on every query so edits show up
without a restart.  Uses ``anyio.to_thread.run_sync`` for non-blocking I/O.
"""

from __future__ import annotations

import json
from functools import partial
from pathlib import Path

from anyio import to_thread
from pydantic import ValidationError

from taskflow.allocation.catalog.base import CatalogUnavailableError
from taskflow.allocation.models.account import Account

_LEGACY_KEYS = {
    "companyname": "company_name",
    "contactperson": "contact_person",
    "contactnumber": "contact_number",
    "emailaddress": "email_address",
    "typeclient": "type_client",
}


class JsonFileAccountCatalog:
    """File-backed implementation of the AccountCatalog protocol."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    async def list_accounts(self, agent_id: str) -> list[Account]:
        try:
            raw = await to_thread.run_sync(partial(_read_file, self._path))
            entries = json.loads(raw)
        except (OSError, json.JSONDecodeError) as exc:
            msg = f"Account catalog file unreadable: {self._path} ({exc})"
            raise CatalogUnavailableError(msg) from exc

        if not isinstance(entries, list):
            msg = f"Account catalog file must hold a JSON array: {self._path}"
            raise CatalogUnavailableError(msg)

        accounts: list[Account] = []
        for entry in entries:
            if not isinstance(entry, dict) or entry.get("referenceid") != agent_id:
                continue
            data = {_LEGACY_KEYS.get(k, k): v for k, v in entry.items() if k != "referenceid"}
            try:
                accounts.append(Account.model_validate(data))
            except ValidationError as exc:
                msg = f"Malformed account in {self._path}: {exc}"
                raise CatalogUnavailableError(msg) from exc
        return accounts


def _read_file(path: Path) -> str:
    """Read file contents.  Raises ``FileNotFoundError`` if missing."""
    return path.read_text(encoding="utf-8")
