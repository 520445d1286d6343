# app/services/import_helpers.py
#
# Import Helper Functions
# Small parsing utilities shared by the snapshot CSV import and the
# legacy-table migration: decimal parsing and timestamp -> (month, year).

import math
from datetime import datetime, date


# ---- Number Parsing ----

def parse_decimal(value) -> float | None:
    """
    Convert a cell value into a float.

    Accepts plain numbers, '1234.56', '1,234.56', European formatted strings like
    '1.234,56' or '−50,00' (Unicode minus). Returns None for empty or
    unparseable input.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        f = float(value)
        return None if math.isnan(f) else f

    s = str(value).strip().replace(" ", "")
    if s == "" or s.lower() == "nan":
        return None

    # Replace Unicode minus with normal minus
    s = s.replace("−", "-")

    if "," in s and "." in s:
        # Whichever separator comes last is the decimal one
        if s.rfind(",") > s.rfind("."):
            s = s.replace(".", "").replace(",", ".")
        else:
            s = s.replace(",", "")
    elif "," in s:
        s = s.replace(",", ".")

    try:
        return float(s)
    except ValueError:
        return None


# ---- Period Utilities ----

def parse_timestamp(ts) -> datetime:
    """
    Parse a datetime/date or an ISO-8601 string such as
    '2023-04-01 10:00:00' (SQLite CURRENT_TIMESTAMP) or
    '2023-04-01T10:00:00.000Z' into a naive local datetime.
    Raises ValueError if it can't be parsed.
    """
    if isinstance(ts, datetime):
        parsed = ts
    elif isinstance(ts, date):
        parsed = datetime(ts.year, ts.month, ts.day)
    elif isinstance(ts, str) and ts.strip():
        s = ts.strip()
        if s.endswith("Z"):
            s = s[:-1] + "+00:00"
        parsed = datetime.fromisoformat(s)
    else:
        raise ValueError(f"Not a timestamp: {ts!r}")

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def month_year_from_timestamp(ts) -> tuple[int, int]:
    """Split a timestamp (see parse_timestamp) into (month 0-11, year)."""
    parsed = parse_timestamp(ts)
    return parsed.month - 1, parsed.year
