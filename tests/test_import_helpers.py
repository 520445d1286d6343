from datetime import date, datetime

import pytest

from app.services.import_helpers import (
    month_year_from_timestamp,
    parse_decimal,
    parse_timestamp,
)


class TestParseDecimal:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            (5000, 5000.0),
            (12.5, 12.5),
            ("1234.56", 1234.56),
            ("1.234,56", 1234.56),
            ("1,234.56", 1234.56),
            ("−50,00", -50.0),
            ("-7", -7.0),
            (" 1 000,5 ", 1000.5),
        ],
    )
    def test_valid(self, raw, expected):
        assert parse_decimal(raw) == pytest.approx(expected)

    @pytest.mark.parametrize("raw", [None, "", "  ", "nan", "abc", True, float("nan")])
    def test_invalid_returns_none(self, raw):
        assert parse_decimal(raw) is None


class TestTimestamps:
    def test_sqlite_current_timestamp(self):
        assert month_year_from_timestamp("2023-04-01 10:00:00") == (3, 2023)

    def test_iso_with_z_suffix(self):
        assert month_year_from_timestamp("2023-04-15T10:00:00.000Z") == (3, 2023)

    def test_date_only_string(self):
        assert month_year_from_timestamp("2022-12-31") == (11, 2022)

    def test_date_and_datetime_objects(self):
        assert month_year_from_timestamp(date(2021, 1, 5)) == (0, 2021)
        assert month_year_from_timestamp(datetime(2021, 7, 5, 8)) == (6, 2021)

    def test_parse_timestamp_returns_naive(self):
        parsed = parse_timestamp("2023-04-15T10:00:00+02:00")
        assert parsed.tzinfo is None

    @pytest.mark.parametrize("raw", [None, "", "not-a-date", 42])
    def test_invalid(self, raw):
        with pytest.raises(ValueError):
            month_year_from_timestamp(raw)
