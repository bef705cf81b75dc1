"""Key/Value Stores — the persistent substrate behind counters, records, and indexes.

Invariants:
    - Both stores satisfy core.repository_protocols.TransactionalStore
    - Writes become durable only on commit(); rollback() discards every write since the
      last commit (no partial operation is ever visible)
    - Reads see the operation's own uncommitted writes (read-your-writes)
    - Stored values are JSON-compatible; callers receive copies, never shared references

Design Decisions:
    - SqlKeyValueStore flushes after each write, so later reads in the same transaction
      see it
    - Every SQL read locks its row (SELECT ... FOR UPDATE) until commit/rollback. Each
      mutation reads its domain's admin row first, so concurrent mutations of one domain
      queue behind that lock and JSON bucket read-modify-writes never lose an update.
      SQLite drops FOR UPDATE and serializes writers on its own
    - Two transactions inserting the same new key: the loser's flush fails with
      IntegrityError, surfaced as DuplicateRecordError (409) and rolled back
    - InMemoryKeyValueStore stages writes in an overlay dict: used by service tests and
      single-process tooling where no database is configured
"""

import copy
import logging
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from lifebank.core.errors import DuplicateRecordError
from lifebank.models.ledger_entry import LedgerEntry

logger = logging.getLogger(__name__)

_DELETED = object()


class SqlKeyValueStore:
    """Key/value substrate over the ledger_entries table, scoped to one AsyncSession."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, key: str) -> Any | None:
        entry = await self._load(key)
        return copy.deepcopy(entry.value) if entry else None

    async def set(self, key: str, value: Any) -> None:
        entry = await self._load(key)
        if entry is None:
            self.db.add(LedgerEntry(key=key, value=copy.deepcopy(value)))
        else:
            entry.value = copy.deepcopy(value)
        try:
            await self.db.flush()
        except IntegrityError:
            logger.debug(f"Concurrent insert of ledger entry {key}")
            raise DuplicateRecordError("LedgerEntry", key)

    async def has(self, key: str) -> bool:
        return await self._load(key) is not None

    async def delete(self, key: str) -> None:
        entry = await self._load(key)
        if entry is not None:
            await self.db.delete(entry)
            await self.db.flush()

    async def commit(self) -> None:
        await self.db.commit()

    async def rollback(self) -> None:
        await self.db.rollback()

    async def _load(self, key: str) -> LedgerEntry | None:
        # FOR UPDATE: the row stays locked until commit/rollback
        return await self.db.get(LedgerEntry, key, with_for_update=True)


class InMemoryKeyValueStore:
    """Process-local key/value substrate with staged (transactional) writes."""

    def __init__(self):
        self._committed: dict[str, Any] = {}
        self._staged: dict[str, Any] = {}

    async def get(self, key: str) -> Any | None:
        if key in self._staged:
            value = self._staged[key]
            return None if value is _DELETED else copy.deepcopy(value)
        value = self._committed.get(key)
        return copy.deepcopy(value) if value is not None else None

    async def set(self, key: str, value: Any) -> None:
        self._staged[key] = copy.deepcopy(value)

    async def has(self, key: str) -> bool:
        return await self.get(key) is not None

    async def delete(self, key: str) -> None:
        self._staged[key] = _DELETED

    async def commit(self) -> None:
        for key, value in self._staged.items():
            if value is _DELETED:
                self._committed.pop(key, None)
            else:
                self._committed[key] = value
        self._staged.clear()

    async def rollback(self) -> None:
        if self._staged:
            logger.debug(f"Discarding {len(self._staged)} staged write(s)")
        self._staged.clear()

    def snapshot(self) -> dict[str, Any]:
        """Committed state only. Staged writes are not included."""
        return copy.deepcopy(self._committed)
