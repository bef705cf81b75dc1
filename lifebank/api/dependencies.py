"""Route Dependencies — wires services to the request-scoped DB session.

Invariants:
    - One SqlKeyValueStore per HTTP request: one session, one atomic operation
    - The caller identity comes ONLY from X-Caller-Address, which the gateway sets
      after verifying the caller's signature; a missing header is UNAUTHORIZED
    - Clock and event sink are process singletons, overridable in tests

Design Decisions:
    - FastAPI Depends over module globals in routes: tests swap the clock and the
      session through app.dependency_overrides
"""

from functools import lru_cache

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from lifebank.config import get_settings
from lifebank.core.domain_types import Address
from lifebank.core.errors import UnauthorizedError
from lifebank.core.repository_protocols import EventSink, LedgerClock
from lifebank.infrastructure.clock import SystemClock
from lifebank.infrastructure.database import get_db
from lifebank.infrastructure.event_sink import LoggingEventSink
from lifebank.infrastructure.kv_store import SqlKeyValueStore
from lifebank.services.request_ledger import RequestLedger
from lifebank.services.unit_registry import UnitRegistry


def get_caller(x_caller_address: str | None = Header(None)) -> Address:
    """Verified caller identity forwarded by the authenticating gateway."""
    if not x_caller_address or not x_caller_address.strip():
        raise UnauthorizedError("anonymous", "a verified caller identity")
    return Address(x_caller_address.strip())


@lru_cache
def get_clock() -> LedgerClock:
    return SystemClock()


@lru_cache
def get_event_sink() -> EventSink:
    return LoggingEventSink(log_events=get_settings().event_log_enabled)


async def get_store(db: AsyncSession = Depends(get_db)) -> SqlKeyValueStore:
    return SqlKeyValueStore(db)


async def get_unit_registry(
    store: SqlKeyValueStore = Depends(get_store),
    clock: LedgerClock = Depends(get_clock),
    events: EventSink = Depends(get_event_sink),
) -> UnitRegistry:
    return UnitRegistry(store, clock, events)


async def get_request_ledger(
    store: SqlKeyValueStore = Depends(get_store),
    clock: LedgerClock = Depends(get_clock),
    events: EventSink = Depends(get_event_sink),
) -> RequestLedger:
    return RequestLedger(store, clock, events)
