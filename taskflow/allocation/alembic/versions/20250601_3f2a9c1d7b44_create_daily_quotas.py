"""create daily_quotas

Revision ID: 3f2a9c1d7b44
Revises:
Create Date: 2025-06-01 09:00:00.000000

"""
from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "3f2a9c1d7b44"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "daily_quotas",
        sa.Column("agent_id", sa.Text(), nullable=False),
        sa.Column("quota_date", sa.Date(), nullable=False),
        sa.Column("companies", postgresql.JSONB(astext_type=sa.Text()), server_default="[]", nullable=False),
        sa.Column("total_quota", sa.Integer(), nullable=False),
        sa.Column("remaining_quota", sa.Integer(), nullable=False),
        sa.Column("pool_size", sa.Integer(), server_default="0", nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.CheckConstraint(
            "remaining_quota >= 0 AND remaining_quota <= total_quota",
            name=op.f("ck_daily_quotas_remaining_within_total"),
        ),
        sa.PrimaryKeyConstraint("agent_id", "quota_date", name=op.f("pk_daily_quotas")),
    )


def downgrade() -> None:
    op.drop_table("daily_quotas")
