# app/services/csv_import.py
#
# Snapshot CSV import
# Reads monthly asset snapshots kept in spreadsheets and loads them into
# the ledger through LedgerStore.create, so the usual validation and month
# normalization apply.

import logging
from pathlib import Path
from typing import Dict, List

import pandas as pd

from app.services.import_helpers import month_year_from_timestamp, parse_decimal
from app.services.ledger_store import LedgerStore

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = {"asset_name", "asset_value"}


def _none_if_nan(x):
    if pd.isna(x):
        return None
    s = str(x).strip()
    return None if s == "" or s.lower() == "nan" else s


def _optional_int(value, field: str, where: str) -> int | None:
    raw = _none_if_nan(value)
    if raw is None:
        return None
    number = parse_decimal(raw)
    if number is None or not number.is_integer():
        raise ValueError(f"{where}: invalid {field} {raw!r}")
    return int(number)


def parse_snapshot_csv(file_path) -> List[Dict]:
    """
    Parse one snapshot CSV into dicts ready for LedgerStore.create.

    Columns (case-insensitive):
    - asset_name, asset_value    required
    - month (0-11), year         optional
    - date (YYYY-MM-DD)          optional, used for month/year when those are empty

    Rows without a name are skipped. Values may use decimal commas ('1.234,56').
    """
    file_path = Path(file_path)
    df = pd.read_csv(file_path, dtype=str, encoding="utf-8")

    # normalize headers
    df.columns = df.columns.str.strip().str.lower()

    missing = REQUIRED_COLUMNS - set(df.columns)
    if missing:
        raise ValueError(f"{file_path.name}: missing required columns: {sorted(missing)}")

    # optional
    for col in ("month", "year", "date"):
        if col not in df.columns:
            df[col] = None

    # drop fully empty rows
    df = df.dropna(how="all")

    rows: List[Dict] = []
    for idx, row in df.iterrows():
        # +2: header line and 1-based numbering
        where = f"{file_path.name} line {idx + 2}"

        name = _none_if_nan(row["asset_name"])
        if name is None:
            continue

        value = parse_decimal(_none_if_nan(row["asset_value"]))
        if value is None:
            raise ValueError(f"{where}: invalid asset_value {row['asset_value']!r}")

        month = _optional_int(row["month"], "month", where)
        year = _optional_int(row["year"], "year", where)

        date_raw = _none_if_nan(row["date"])
        if date_raw is not None and (month is None or year is None):
            date_month, date_year = month_year_from_timestamp(date_raw)
            month = date_month if month is None else month
            year = date_year if year is None else year

        rows.append(
            {
                "asset_name": name,
                "asset_value": value,
                "month": month,
                "year": year,
            }
        )

    return rows


def import_snapshot_csvs(store: LedgerStore, folder) -> int:
    """
    Import every *.csv in `folder` (sorted by name). Returns the number of
    records created.
    """
    folder = Path(folder)
    csv_files = sorted(folder.glob("*.csv"))
    if not csv_files:
        raise FileNotFoundError(f"No CSV files found in: {folder.resolve()}")

    total_inserted = 0
    for f in csv_files:
        rows = parse_snapshot_csv(f)
        for row in rows:
            store.create(**row)
        total_inserted += len(rows)
        logger.info("Imported %s rows from %s", len(rows), f.name)

    logger.info("Snapshot import done. Total inserted: %s", total_inserted)
    return total_inserted
