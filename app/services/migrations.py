# app/services/migrations.py
#
# Schema migrations
# Revisions live in migrations/versions/ and are applied with Alembic;
# run_migrations() is called at startup and by the CSV import script.
# The legacy-table copy used by revision 0002 is defined here so it can
# log through the app's loggers.

import logging
import os
from datetime import datetime
from typing import List

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from sqlalchemy import func, inspect, select, text
from sqlalchemy.engine import Connection, Engine

from config import BASE_DIR
from models import AssetRecord
from app.services.import_helpers import month_year_from_timestamp, parse_timestamp

logger = logging.getLogger(__name__)

# Table used by the first version of the app (no month/year columns)
LEGACY_TABLE = "portfolio"

MIGRATIONS_DIR = os.path.join(BASE_DIR, "migrations")


# -------------------------------------------------------------------
# Legacy copy (revision 0002)
# -------------------------------------------------------------------

def copy_legacy_portfolio(connection: Connection) -> int:
    """
    Copy rows from the legacy `portfolio` table into portfolio_v2.

    The legacy table has no period columns, so month/year come from each
    row's created_at. Skipped when portfolio_v2 already holds data.
    Returns the number of rows copied.
    """
    if not inspect(connection).has_table(LEGACY_TABLE):
        logger.info("No legacy %s table, nothing to migrate", LEGACY_TABLE)
        return 0

    ledger = AssetRecord.__table__
    existing = connection.execute(select(func.count()).select_from(ledger)).scalar_one()
    if existing:
        logger.info("portfolio_v2 already has %s rows, skipping legacy copy", existing)
        return 0

    # Legacy schemas differ (some have no id column): no ORDER BY
    rows = connection.execute(
        text(f"SELECT asset_name, asset_value, created_at FROM {LEGACY_TABLE}")
    ).all()

    logger.info("Migrating %s rows from %s to portfolio_v2...", len(rows), LEGACY_TABLE)

    now = datetime.now()
    records = []
    for asset_name, asset_value, created_at in rows:
        try:
            created = parse_timestamp(created_at)
        except ValueError:
            logger.warning(
                "Skipping legacy row %r: unparseable created_at %r", asset_name, created_at
            )
            continue

        month, year = month_year_from_timestamp(created)
        records.append(
            {
                "asset_name": asset_name,
                "asset_value": asset_value,
                "month": month,
                "year": year,
                "created_at": created,
                "updated_at": now,
            }
        )

    if records:
        connection.execute(ledger.insert(), records)

    logger.info("Migrated %s assets to the new schema", len(records))
    return len(records)


# -------------------------------------------------------------------
# Runner
# -------------------------------------------------------------------

def alembic_config() -> Config:
    cfg = Config()
    cfg.set_main_option("script_location", MIGRATIONS_DIR)
    return cfg


def run_migrations(engine: Engine) -> List[str]:
    """
    Upgrade the database behind `engine` to the latest revision.

    Everything runs in one transaction on one connection, so a failed
    revision leaves the database at its previous revision. Returns the
    revision ids applied now, oldest first.
    """
    cfg = alembic_config()

    with engine.begin() as connection:
        previous = MigrationContext.configure(connection).get_current_revision()

        cfg.attributes["connection"] = connection
        command.upgrade(cfg, "head")

    # walk_revisions() goes head -> base
    script = ScriptDirectory.from_config(cfg)
    ordered = [rev.revision for rev in reversed(list(script.walk_revisions()))]
    applied = ordered[ordered.index(previous) + 1:] if previous in ordered else ordered

    if applied:
        logger.info("Applied migrations: %s", ", ".join(applied))
    else:
        logger.debug("Database schema is up to date")
    return applied
