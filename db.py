# db.py
# Role: Database bootstrap for the portfolio tracker.
#       Builds the SQLAlchemy engine and session factory and defines the declarative Base.
#       File-backed SQLite databases get their directory created on first use.

"""
Database setup for the portfolio tracker.

- Default database: SQLite at <project_root>/database/portfolio.db
  (override with PORTFOLIO_DATABASE_URL, see config.py)
- `make_engine` / `make_session_factory` let tests and scripts build
  their own engine instead of the module-level default.
"""

import os

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

import config


def make_engine(url: str) -> Engine:
    """
    Create an engine for `url`.

    SQLite needs check_same_thread=False because FastAPI serves requests
    from a thread pool. In-memory SQLite also needs a StaticPool, otherwise
    every new connection would see its own empty database.
    """
    parsed = make_url(url)

    if parsed.get_backend_name() != "sqlite":
        return create_engine(url, pool_pre_ping=True)

    database = parsed.database
    if database in (None, "", ":memory:"):
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    # ensure folder exists for file-backed databases
    db_dir = os.path.dirname(os.path.abspath(database))
    os.makedirs(db_dir, exist_ok=True)

    return create_engine(
        url,
        connect_args={"check_same_thread": False},
    )


def make_session_factory(engine: Engine) -> sessionmaker:
    # expire_on_commit=False: records are read back after the commit
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        bind=engine,
    )


# Default engine + session factory used by the app and the CLI scripts
engine = make_engine(config.DATABASE_URL)
SessionLocal = make_session_factory(engine)

# Declarative base class for ORM models
Base = declarative_base()
