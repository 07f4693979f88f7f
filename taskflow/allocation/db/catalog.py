"""Read-only mapping of the external account directory.

The ``accounts`` table belongs to the account catalog system; this service
only selects from it.  It sits on its own declarative base so Alembic never
generates migrations for it.
"""

from __future__ import annotations

from sqlalchemy import BigInteger, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class CatalogBase(DeclarativeBase):
    pass


class AccountRow(CatalogBase):
    __tablename__ = "accounts"

    id: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    referenceid: Mapped[str] = mapped_column(Text, index=True)
    companyname: Mapped[str | None] = mapped_column(Text)
    contactperson: Mapped[str | None] = mapped_column(Text)
    contactnumber: Mapped[str | None] = mapped_column(Text)
    emailaddress: Mapped[str | None] = mapped_column(Text)
    typeclient: Mapped[str | None] = mapped_column(Text)
    address: Mapped[str | None] = mapped_column(Text)
