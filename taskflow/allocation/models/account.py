"""Account snapshot model.

Accounts are owned by the external catalog.  The allocation service copies
them into ``daily_quotas.companies`` at generation time and otherwise treats
them as opaque input.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Account(BaseModel):
    """A customer or prospect the agent may be asked to contact.

    Unknown keys are kept: the outreach UI annotates snapshots (call status,
    notes) and sends them back through consumption updates.
    """

    model_config = ConfigDict(extra="allow")

    id: int | str
    company_name: str | None = None
    contact_person: str | None = None
    contact_number: str | None = None
    email_address: str | None = None
    type_client: str | None = None
    address: str | None = None

    @property
    def key(self) -> str:
        """Identity used for exclusion and dedup (ids compare by string form)."""
        return str(self.id)
