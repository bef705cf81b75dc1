"""Service test fixtures — in-memory ledgers, async DB, and FastAPI test client.

Invariants:
    - Every test gets a fresh store, a fresh in-memory SQLite database, and a
      ManualClock starting at NOW
    - registry/ledger fixtures come initialized with ADMIN as admin
    - get_db, get_clock and get_event_sink overridden for route tests

Design Decisions:
    - InMemoryKeyValueStore for service tests: exercises the same commit/rollback
      contract as the SQL store without a database
    - SQLite in-memory for route tests: fast, no external dependency
    - db_manager patched: the readiness check reads it directly
"""

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

import lifebank.infrastructure.database as db_module
from lifebank.api.dependencies import get_clock, get_event_sink
from lifebank.db.base import Base
from lifebank.infrastructure.clock import ManualClock
from lifebank.infrastructure.database import DatabaseSessionManager, get_db
from lifebank.infrastructure.event_sink import LoggingEventSink
from lifebank.infrastructure.kv_store import InMemoryKeyValueStore
from lifebank.main import app
from lifebank.services.request_ledger import RequestLedger
from lifebank.services.unit_registry import UnitRegistry

from tests.services.ledger_constants import ADMIN, NOW


# ─── In-memory ledgers ──────────────────────────────────────────

@pytest.fixture
def clock():
    return ManualClock(NOW)


@pytest.fixture
def store():
    return InMemoryKeyValueStore()


@pytest.fixture
def events():
    return LoggingEventSink(log_events=False)


@pytest.fixture
async def registry(store, clock, events):
    registry = UnitRegistry(store, clock, events)
    await registry.initialize(ADMIN, ADMIN)
    return registry


@pytest.fixture
async def ledger(store, clock, events):
    ledger = RequestLedger(store, clock, events)
    await ledger.initialize(ADMIN, ADMIN)
    return ledger


# ─── SQL database ───────────────────────────────────────────────

@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def client(test_engine, test_session_factory, clock, events):
    """FastAPI test client with DB, clock and event sink overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_event_sink] = lambda: events

    # Patch db_manager for the readiness check
    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager
