"""copy rows from the legacy portfolio table

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-17
"""
from alembic import op

from app.services.migrations import copy_legacy_portfolio

revision = "0002"
down_revision = "0001"
branch_labels = None
depends_on = None


def upgrade() -> None:
    copy_legacy_portfolio(op.get_bind())


def downgrade() -> None:
    # Copied rows are ordinary ledger rows from here on
    pass
