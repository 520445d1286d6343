"""Snapshot CSV parsing and import into the ledger."""

import pytest

from app.services.csv_import import import_snapshot_csvs, parse_snapshot_csv


def _write(path, content: str):
    path.write_text(content, encoding="utf-8")
    return path


def test_parse_snapshot_csv(tmp_path):
    csv_file = _write(
        tmp_path / "2023.csv",
        " Asset_Name , Asset_Value ,month,year,date\n"
        'Gold,"1.234,50",3,2023,\n'
        "Cash,200,,,2023-05-10\n"
        ",,,,\n"
        "Stocks,-300,,,\n"
        ",5,1,2023,\n",
    )

    rows = parse_snapshot_csv(csv_file)

    assert rows == [
        {"asset_name": "Gold", "asset_value": 1234.5, "month": 3, "year": 2023},
        {"asset_name": "Cash", "asset_value": 200.0, "month": 4, "year": 2023},
        {"asset_name": "Stocks", "asset_value": -300.0, "month": None, "year": None},
    ]


def test_parse_requires_columns(tmp_path):
    csv_file = _write(tmp_path / "bad.csv", "name,value\nGold,1\n")
    with pytest.raises(ValueError, match="missing required columns"):
        parse_snapshot_csv(csv_file)


def test_parse_rejects_bad_value(tmp_path):
    csv_file = _write(tmp_path / "bad.csv", "asset_name,asset_value\nGold,lots\n")
    with pytest.raises(ValueError, match="line 2"):
        parse_snapshot_csv(csv_file)


def test_import_folder(tmp_path, store):
    _write(tmp_path / "a.csv", "asset_name,asset_value,month,year\nGold,100,13,2023\n")
    _write(tmp_path / "b.csv", "asset_name,asset_value\nCash,50\n")
    _write(tmp_path / "notes.txt", "ignored")

    assert import_snapshot_csvs(store, tmp_path) == 2

    rows = store.list()
    assert [(r.asset_name, r.month, r.year) for r in rows] == [
        ("Cash", 5, 2024),  # no period given: current month of the fixed clock
        ("Gold", 1, 2023),  # 13 folded into 0-11
    ]


def test_import_empty_folder(tmp_path, store):
    with pytest.raises(FileNotFoundError):
        import_snapshot_csvs(store, tmp_path)
