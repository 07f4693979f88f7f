"""SQLAlchemy ORM models for the allocation store (PostgreSQL).

These are the single source of truth for the store schema.  Alembic reads
``Base.metadata`` to autogenerate migration scripts.  The account catalog is
owned by another system and lives on a separate base in ``db/catalog.py``.

Uses SQLAlchemy 2.0 declarative style with ``Mapped`` type annotations.
"""

from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import CheckConstraint, Date, DateTime, Text, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# Timezone-aware timestamp type for all datetime columns.
TimestampTZ = DateTime(timezone=True)


class Base(DeclarativeBase):
    """Declarative base with naming convention for constraints."""

    pass


# Apply naming convention to the metadata for deterministic constraint names.
Base.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class DailyAllocation(Base):
    """One agent's outreach allocation for one calendar day.

    The composite primary key is what makes creation idempotent: writers use
    ``INSERT ... ON CONFLICT DO NOTHING`` on ``(agent_id, quota_date)``.
    ``companies`` holds account snapshots, not references, so later catalog
    edits never rewrite what was offered on a past day.
    """

    __tablename__ = "daily_quotas"
    __table_args__ = (
        CheckConstraint(
            "remaining_quota >= 0 AND remaining_quota <= total_quota",
            name="remaining_within_total",
        ),
        CheckConstraint("jsonb_array_length(companies) <= total_quota", name="companies_within_total"),
    )

    agent_id: Mapped[str] = mapped_column(Text, primary_key=True)
    quota_date: Mapped[date] = mapped_column(Date, primary_key=True)
    companies: Mapped[list] = mapped_column(JSONB, nullable=False, server_default="[]")
    total_quota: Mapped[int] = mapped_column(nullable=False)
    remaining_quota: Mapped[int] = mapped_column(nullable=False)
    pool_size: Mapped[int] = mapped_column(nullable=False, server_default="0")
    created_at: Mapped[datetime] = mapped_column(TimestampTZ, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(TimestampTZ, server_default=func.now(), onupdate=func.now())


class QuotaSkip(Base):
    """A date range an agent marked as away from outreach."""

    __tablename__ = "quota_skips"
    __table_args__ = (CheckConstraint("end_date >= start_date", name="end_not_before_start"),)

    skip_id: Mapped[str] = mapped_column(Text, primary_key=True)
    agent_id: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(TimestampTZ, server_default=func.now())
