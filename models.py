# models.py
# Role: SQLAlchemy ORM models for the portfolio tracker.
#       AssetRecord is one observation of an asset's value for a month/year.
#       The table is created by the Alembic revisions in migrations/.

from sqlalchemy import Column, Integer, Float, DateTime, Text
from db import Base


class AssetRecord(Base):
    """
    ORM model representing one asset observation in the ledger.

    Rows are keyed by the surrogate `id` only: several rows may share the
    same (asset_name, month, year). Months are stored 0-11 (0 = January),
    but rows written by older versions may hold out-of-range values, so
    readers normalize again (see app/services/ledger_store.py).
    """

    __tablename__ = "portfolio_v2"

    # Primary key
    id = Column(Integer, primary_key=True, index=True)

    # Free-text asset name, e.g. "Gold", "Brokerage account"
    asset_name = Column(Text, nullable=False)

    # Value at the reporting period (negative = liability / loss)
    asset_value = Column(Float, nullable=False)

    # Reporting period: month 0-11 and calendar year
    month = Column(Integer, nullable=False)
    year = Column(Integer, nullable=False)

    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)
