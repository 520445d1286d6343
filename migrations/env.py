"""
Alembic environment for the portfolio database.

Normally driven from app/services/migrations.py::run_migrations, which
passes an open connection in `config.attributes["connection"]`. Without
one (plain `alembic` CLI use) the URL comes from config.DATABASE_URL.
"""

from alembic import context
from sqlalchemy import engine_from_config, pool

import config as app_config
import models  # noqa: F401  (registers tables on Base.metadata)
from db import Base

alembic_config = context.config
target_metadata = Base.metadata


def run_migrations_offline() -> None:
    context.configure(
        url=alembic_config.get_main_option("sqlalchemy.url") or app_config.DATABASE_URL,
        target_metadata=target_metadata,
        literal_binds=True,
        render_as_batch=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connection = alembic_config.attributes.get("connection")
    if connection is not None:
        context.configure(connection=connection, target_metadata=target_metadata, render_as_batch=True)
        with context.begin_transaction():
            context.run_migrations()
        return

    section = alembic_config.get_section(alembic_config.config_ini_section) or {}
    section.setdefault("sqlalchemy.url", app_config.DATABASE_URL)
    connectable = engine_from_config(section, prefix="sqlalchemy.", poolclass=pool.NullPool)
    with connectable.connect() as conn:
        context.configure(connection=conn, target_metadata=target_metadata, render_as_batch=True)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
