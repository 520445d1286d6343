"""create portfolio_v2 ledger table

Revision ID: 0001
Revises:
Create Date: 2026-10-17
"""
from alembic import op
import sqlalchemy as sa

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Databases written by the first backend already have this table
    if sa.inspect(op.get_bind()).has_table("portfolio_v2"):
        return

    op.create_table(
        "portfolio_v2",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("asset_name", sa.Text, nullable=False),
        sa.Column("asset_value", sa.Float, nullable=False),

        # Reporting period: month 0-11, calendar year
        sa.Column("month", sa.Integer, nullable=False),
        sa.Column("year", sa.Integer, nullable=False),

        sa.Column("created_at", sa.DateTime, nullable=False),
        sa.Column("updated_at", sa.DateTime, nullable=False),
    )
    op.create_index("ix_portfolio_v2_id", "portfolio_v2", ["id"])


def downgrade() -> None:
    op.drop_index("ix_portfolio_v2_id", table_name="portfolio_v2")
    op.drop_table("portfolio_v2")
