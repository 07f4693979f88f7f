"""bound companies by total_quota, add quota_skips

Revision ID: 8c41e07b2d19
Revises: 3f2a9c1d7b44
Create Date: 2025-06-15 09:00:00.000000

"""
from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "8c41e07b2d19"
down_revision: str | None = "3f2a9c1d7b44"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_check_constraint(
        op.f("ck_daily_quotas_companies_within_total"),
        "daily_quotas",
        "jsonb_array_length(companies) <= total_quota",
    )
    op.create_table(
        "quota_skips",
        sa.Column("skip_id", sa.Text(), nullable=False),
        sa.Column("agent_id", sa.Text(), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("status", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.CheckConstraint("end_date >= start_date", name=op.f("ck_quota_skips_end_not_before_start")),
        sa.PrimaryKeyConstraint("skip_id", name=op.f("pk_quota_skips")),
    )
    op.create_index(op.f("ix_quota_skips_agent_id"), "quota_skips", ["agent_id"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_quota_skips_agent_id"), table_name="quota_skips")
    op.drop_table("quota_skips")
    op.drop_constraint(op.f("ck_daily_quotas_companies_within_total"), "daily_quotas", type_="check")
