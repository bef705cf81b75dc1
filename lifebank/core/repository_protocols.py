"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - KeyValueStore is async because the SQL implementation does IO; LedgerClock and
      EventSink are sync (a clock read and a publish never suspend)
    - The store is an opaque point-lookup map: no range queries, no transactions —
      atomicity comes from the unit of work that wraps each public operation
"""

from typing import Any, Protocol

from lifebank.core.events import LedgerEvent


class KeyValueStore(Protocol):
    """Contract for the persistent key/value substrate."""
    async def get(self, key: str) -> Any | None: ...
    async def set(self, key: str, value: Any) -> None: ...
    async def has(self, key: str) -> bool: ...
    async def delete(self, key: str) -> None: ...


class TransactionalStore(KeyValueStore, Protocol):
    """KeyValueStore whose writes are staged until commit."""
    async def commit(self) -> None: ...
    async def rollback(self) -> None: ...


class LedgerClock(Protocol):
    """Single source of "now" (unix seconds) for every relative-time check."""
    def now(self) -> int: ...


class EventSink(Protocol):
    """Receives one event per committed state change."""
    def publish(self, event: LedgerEvent) -> None: ...
