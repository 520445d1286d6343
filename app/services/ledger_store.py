# app/services/ledger_store.py
#
# Ledger Store
# Owns the asset ledger (table portfolio_v2): validated writes, month
# normalization, and the read-side aggregates the dashboard charts use
# (distinct months, distinct years, monthly totals for a year).

"""
Storage and aggregation for asset records.

Months are canonical 0-11 (0 = January). Out-of-range months are accepted
on write and folded into 0-11 before they are stored. Reads normalize again,
both in SQL (filters, DISTINCT, GROUP BY) and on every returned row, so rows
written before normalization existed still show up under the right month.

Every public method runs in its own session/transaction. SQLAlchemy
failures are rolled back, logged with the operation name and parameters,
and re-raised as StorageError.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Iterator, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from app.errors import NotFoundError, StorageError, ValidationError
from app.services.import_helpers import parse_timestamp
from models import AssetRecord

logger = logging.getLogger(__name__)

MONTHS_PER_YEAR = 12

# SQLite / Postgres BIGINT range
MIN_STORED_INT = -(2 ** 63)
MAX_STORED_INT = 2 ** 63 - 1

# Fields a client may change through update()
UPDATABLE_FIELDS = ("asset_name", "asset_value", "month", "year")


# -------------------------------------------------------------------
# Month normalization
# -------------------------------------------------------------------

def normalize_month(month: int) -> int:
    """
    Fold any integer month into 0-11, keeping it congruent mod 12.

    normalize_month(-1) == 11, normalize_month(12) == 0, normalize_month(13) == 1
    """
    # Python's % takes the sign of the divisor, so this is already in [0, 11]
    return int(month) % MONTHS_PER_YEAR


# Same fold in SQL. SQLite/Postgres % truncates toward zero, hence the +12.
NORMALIZED_MONTH = ((AssetRecord.month % MONTHS_PER_YEAR) + MONTHS_PER_YEAR) % MONTHS_PER_YEAR


# -------------------------------------------------------------------
# Value objects
# -------------------------------------------------------------------

@dataclass(frozen=True)
class AssetView:
    """Detached, read-only copy of one AssetRecord row."""

    id: int
    asset_name: str
    asset_value: float
    month: int
    year: int
    created_at: datetime
    updated_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "asset_name": self.asset_name,
            "asset_value": self.asset_value,
            "month": self.month,
            "year": self.year,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


def _to_view(record: AssetRecord) -> AssetView:
    month = normalize_month(record.month)
    if month != record.month:
        logger.warning(
            "Normalizing invalid month value in results: id=%s month=%s -> %s",
            record.id, record.month, month,
        )
    return AssetView(
        id=record.id,
        asset_name=record.asset_name,
        asset_value=record.asset_value,
        month=month,
        year=record.year,
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


# -------------------------------------------------------------------
# Input validation
# -------------------------------------------------------------------

def _clean_name(name: Any) -> str:
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("Asset name must be a non-empty string.")
    return name.strip()


def _clean_value(value: Any) -> float:
    # bool is an int subclass but never a meaningful asset value
    if value is None or isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError("Asset value must be a number.")
    f = float(value)
    if f != f or f in (float("inf"), float("-inf")):
        raise ValidationError("Asset value must be a finite number.")
    return f


def _clean_int(value: Any, field: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be an integer.")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    raise ValidationError(f"{field} must be an integer.")


def _clean_year(value: Any) -> int:
    # Years are stored as-is, so they must fit the 64-bit INTEGER column
    year = _clean_int(value, "year")
    if not MIN_STORED_INT <= year <= MAX_STORED_INT:
        raise ValidationError("year is out of range.")
    return year


def _parse_year(year: Any) -> int:
    """Accept an int, or a string made of an optional sign and digits."""
    if isinstance(year, str):
        s = year.strip()
        digits = s[1:] if s[:1] in ("+", "-") else s
        if not digits.isdigit():
            raise ValidationError("Invalid year parameter")
        year = int(s)
    try:
        return _clean_year(year)
    except ValidationError:
        raise ValidationError("Invalid year parameter") from None


def _naive(ts: datetime) -> datetime:
    # Stored timestamps are naive local time
    if ts.tzinfo is not None:
        return ts.astimezone().replace(tzinfo=None)
    return ts


def _parse_created_at(created_at: Any) -> datetime:
    try:
        return parse_timestamp(created_at)
    except ValueError:
        raise ValidationError("created_at must be an ISO-8601 timestamp.") from None


# -------------------------------------------------------------------
# Store
# -------------------------------------------------------------------

class LedgerStore:
    """
    The asset ledger.

    Usage:
        store = LedgerStore(SessionLocal)
        record = store.create("Gold", 5000)
        store.monthly_totals(record.year)
    """

    def __init__(
        self,
        session_factory: sessionmaker,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._session_factory = session_factory
        self._clock = clock

    # ---- helpers ----

    def _now(self) -> datetime:
        return _naive(self._clock())

    def _next_updated_at(self, previous: Optional[datetime]) -> datetime:
        now = self._now()
        # updated_at must move forward on every mutation
        if previous is not None and now <= previous:
            now = previous + timedelta(microseconds=1)
        return now

    @contextmanager
    def _session(self, operation: str, failure: str, **params: Any) -> Iterator[Session]:
        """
        Run one store operation in its own transaction.

        `failure` is the client-facing message used if the database fails.
        """
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            logger.exception("Storage failure in %s params=%r", operation, params)
            raise StorageError(failure) from exc
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    # ---- writes ----

    def create(
        self,
        asset_name: Any,
        asset_value: Any,
        month: Any = None,
        year: Any = None,
        created_at: Any = None,
    ) -> AssetView:
        """
        Add one asset observation.

        Missing month/year default to the current calendar month/year.
        `created_at` is only meant for imports of historical data; normally
        both timestamps are "now".
        """
        name = _clean_name(asset_name)
        value = _clean_value(asset_value)

        now = self._now()
        raw_month = now.month - 1 if month is None else _clean_int(month, "month")
        period_year = now.year if year is None else _clean_year(year)

        period_month = normalize_month(raw_month)
        if period_month != raw_month:
            logger.warning(
                "Invalid month value received: %s, normalizing to %s",
                raw_month, period_month,
            )

        created = now if created_at is None else _parse_created_at(created_at)

        with self._session(
            "create", "Failed to add asset.",
            asset_name=name, asset_value=value, month=period_month, year=period_year,
        ) as session:
            record = AssetRecord(
                asset_name=name,
                asset_value=value,
                month=period_month,
                year=period_year,
                created_at=created,
                updated_at=now,
            )
            session.add(record)
            session.flush()
            view = _to_view(record)

        logger.info("Asset added successfully with ID: %s", view.id)
        return view

    def update(self, asset_id: int, fields: Dict[str, Any]) -> AssetView:
        """
        Partially update a record. Only keys in UPDATABLE_FIELDS are
        considered; anything not given stays as it is.
        """
        changes = {k: v for k, v in (fields or {}).items() if k in UPDATABLE_FIELDS}
        if not changes:
            raise ValidationError("No fields to update.")

        cleaned: Dict[str, Any] = {}
        if "asset_name" in changes:
            cleaned["asset_name"] = _clean_name(changes["asset_name"])
        if "asset_value" in changes:
            cleaned["asset_value"] = _clean_value(changes["asset_value"])
        if "month" in changes:
            raw_month = _clean_int(changes["month"], "month")
            cleaned["month"] = normalize_month(raw_month)
            if cleaned["month"] != raw_month:
                logger.warning(
                    "Invalid month value received in update: %s, normalizing to %s",
                    raw_month, cleaned["month"],
                )
        if "year" in changes:
            cleaned["year"] = _clean_year(changes["year"])

        with self._session(
            "update", "Failed to update asset.", asset_id=asset_id, **cleaned
        ) as session:
            record = session.get(AssetRecord, asset_id)
            if record is None:
                raise NotFoundError("Asset not found.")

            for key, value in cleaned.items():
                setattr(record, key, value)
            record.updated_at = self._next_updated_at(record.updated_at)

            session.flush()
            view = _to_view(record)

        logger.info("Asset %s updated (%s)", asset_id, ", ".join(sorted(cleaned)))
        return view

    def delete(self, asset_id: int) -> None:
        with self._session("delete", "Failed to delete asset.", asset_id=asset_id) as session:
            record = session.get(AssetRecord, asset_id)
            if record is None:
                raise NotFoundError("Asset not found.")
            session.delete(record)

        logger.info("Asset %s deleted", asset_id)

    def repair_month_values(self) -> Dict[str, int]:
        """
        Fold stored out-of-range months back into 0-11.

        Only rows written before normalization existed can be affected, so
        on a clean ledger this finds nothing. Safe to call any time.
        """
        logger.info("Starting database month value fix...")

        with self._session("repair_month_values", "Failed to fix invalid month values.") as session:
            rows = (
                session.query(AssetRecord)
                .filter(or_(AssetRecord.month < 0, AssetRecord.month > MONTHS_PER_YEAR - 1))
                .order_by(AssetRecord.id)
                .all()
            )
            found = len(rows)
            fixed = 0

            for record in rows:
                normalized = normalize_month(record.month)
                logger.debug(
                    "Fixing record ID %s: month %s -> %s",
                    record.id, record.month, normalized,
                )
                record.month = normalized
                record.updated_at = self._next_updated_at(record.updated_at)
                fixed += 1

        if found:
            logger.info("Fixed %s of %s records with invalid month values", fixed, found)
        return {"found": found, "fixed": fixed}

    # ---- reads ----

    def get(self, asset_id: int) -> AssetView:
        with self._session("get", "Failed to fetch asset.", asset_id=asset_id) as session:
            record = session.get(AssetRecord, asset_id)
            if record is None:
                raise NotFoundError("Asset not found.")
            return _to_view(record)

    def list(self, month: Any = None, year: Any = None) -> List[AssetView]:
        """
        All records, optionally filtered by month and/or year (AND),
        ordered by asset name.
        """
        month_filter = None if month is None else normalize_month(_clean_int(month, "month"))
        year_filter = None if year is None else _clean_year(year)

        with self._session(
            "list", "Failed to fetch portfolio.", month=month_filter, year=year_filter
        ) as session:
            query = session.query(AssetRecord)
            if month_filter is not None:
                query = query.filter(NORMALIZED_MONTH == month_filter)
            if year_filter is not None:
                query = query.filter(AssetRecord.year == year_filter)

            rows = query.order_by(AssetRecord.asset_name, AssetRecord.id).all()
            return [_to_view(r) for r in rows]

    def distinct_months(self) -> List[Dict[str, int]]:
        """Unique {month, year} pairs, newest first."""
        month_col = NORMALIZED_MONTH.label("period_month")

        with self._session("distinct_months", "Failed to fetch available months.") as session:
            rows = (
                session.query(month_col, AssetRecord.year)
                .distinct()
                .order_by(AssetRecord.year.desc(), month_col.desc())
                .all()
            )

        return [{"month": normalize_month(m), "year": y} for m, y in rows]

    def distinct_years(self) -> List[int]:
        with self._session("distinct_years", "Failed to fetch available years.") as session:
            rows = (
                session.query(AssetRecord.year)
                .distinct()
                .order_by(AssetRecord.year.desc())
                .all()
            )

        return [row[0] for row in rows]

    def monthly_totals(self, year: Any) -> List[Optional[float]]:
        """
        Sum of asset values per month of `year`.

        Always 12 entries, index i = month i. A month without records is
        None, which is different from a month whose values add up to 0.
        """
        target_year = _parse_year(year)
        month_col = NORMALIZED_MONTH.label("period_month")

        with self._session(
            "monthly_totals", "Failed to fetch performance data.", year=target_year
        ) as session:
            rows = (
                session.query(month_col, func.sum(AssetRecord.asset_value))
                .filter(AssetRecord.year == target_year)
                .group_by(month_col)
                .all()
            )

        totals: List[Optional[float]] = [None] * MONTHS_PER_YEAR
        for month, total in rows:
            totals[normalize_month(month)] = float(total)
        return totals
