"""
This script loads monthly asset snapshots from CSV files into the
portfolio database.

Each CSV holds one or more snapshots (asset_name, asset_value and either
month/year columns or a date column). Rows go through the ledger store,
so month values are normalized exactly as they are for API writes.

Purpose:
- Seed the ledger with history kept in spreadsheets before the app existed
- Serve as a repeatable import step during development

Usage (from the project root, after `pip install -e .`):
    python data-migration/script.py [folder]   (default: data-migration/snapshots)
"""


from __future__ import annotations

import logging
import sys
from pathlib import Path

import config
from db import SessionLocal, engine
from app.logging_config import setup_logging
from app.services.csv_import import import_snapshot_csvs
from app.services.ledger_store import LedgerStore
from app.services.migrations import run_migrations


SNAPSHOT_DIR = Path("data-migration/snapshots")


def main(argv: list[str]) -> int:
    setup_logging(config.LOG_LEVEL)
    folder = Path(argv[1]) if len(argv) > 1 else SNAPSHOT_DIR

    run_migrations(engine)
    store = LedgerStore(SessionLocal)

    total = import_snapshot_csvs(store, folder)
    logging.getLogger(__name__).info("DONE. Total inserted: %s", total)
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
