"""
Shared pytest fixtures.

Every test gets its own in-memory SQLite database and a fixed clock
(2024-06-15 12:00, i.e. month 5 of 2024).
"""

import os

# Must be set before config/db are imported anywhere
os.environ["PORTFOLIO_DATABASE_URL"] = "sqlite://"

from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from db import make_engine, make_session_factory
from main import create_app
from models import AssetRecord
from app.services.ledger_store import LedgerStore
from app.services.migrations import run_migrations


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def raw_engine():
    """Empty in-memory database, no tables."""
    engine = make_engine("sqlite://")
    yield engine
    engine.dispose()


@pytest.fixture
def engine(raw_engine):
    """In-memory database with all migrations applied."""
    run_migrations(raw_engine)
    return raw_engine


@pytest.fixture
def session_factory(engine):
    return make_session_factory(engine)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 6, 15, 12, 0, 0))


@pytest.fixture
def store(session_factory, clock) -> LedgerStore:
    return LedgerStore(session_factory, clock=clock)


@pytest.fixture
def client(store):
    with TestClient(create_app(store=store)) as c:
        yield c


@pytest.fixture
def insert_raw(session_factory):
    """
    Insert a row bypassing the store, e.g. a legacy out-of-range month.
    Returns the new id.
    """

    def _insert(asset_name: str, asset_value: float, month: int, year: int) -> int:
        ts = datetime(2020, 1, 1)
        with session_factory() as session:
            record = AssetRecord(
                asset_name=asset_name,
                asset_value=asset_value,
                month=month,
                year=year,
                created_at=ts,
                updated_at=ts,
            )
            session.add(record)
            session.commit()
            return record.id

    return _insert
