"""Key/Value Stores — tests for the in-memory and SQL substrates.

Tests cover:
    - read-your-writes before commit
    - rollback discards staged writes and deletes
    - commit makes writes durable across sessions (SQL)
    - values returned are copies
    - SQL reads lock rows; a concurrent insert of the same key → DuplicateRecordError
"""

import pytest

from lifebank.core.errors import DuplicateRecordError
from lifebank.infrastructure.kv_store import InMemoryKeyValueStore, SqlKeyValueStore


# ─── InMemoryKeyValueStore ───────────────────────────────────────

async def test_memory_read_your_writes():
    store = InMemoryKeyValueStore()
    await store.set("k", [1, 2])
    assert await store.get("k") == [1, 2]
    assert store.snapshot() == {}


async def test_memory_commit_and_rollback():
    store = InMemoryKeyValueStore()
    await store.set("k", 1)
    await store.commit()
    await store.set("k", 2)
    await store.rollback()
    assert await store.get("k") == 1


async def test_memory_delete_is_staged():
    store = InMemoryKeyValueStore()
    await store.set("k", True)
    await store.commit()
    await store.delete("k")
    assert not await store.has("k")
    await store.rollback()
    assert await store.has("k")


async def test_memory_values_are_copies():
    store = InMemoryKeyValueStore()
    bucket = [1]
    await store.set("k", bucket)
    bucket.append(2)
    (await store.get("k")).append(3)
    assert await store.get("k") == [1]


# ─── SqlKeyValueStore ────────────────────────────────────────────

@pytest.fixture
async def sql_store(test_db):
    return SqlKeyValueStore(test_db)


async def test_sql_missing_key(sql_store):
    assert await sql_store.get("nope") is None
    assert not await sql_store.has("nope")


async def test_sql_read_your_writes(sql_store):
    await sql_store.set("units:record:1", {"id": 1, "status": "available"})
    assert await sql_store.get("units:record:1") == {"id": 1, "status": "available"}


async def test_sql_update_existing(sql_store):
    await sql_store.set("units:counter", 1)
    await sql_store.set("units:counter", 2)
    assert await sql_store.get("units:counter") == 2


async def test_sql_commit_is_durable(sql_store, test_session_factory):
    await sql_store.set("units:index:bank:bank-1", [1, 2])
    await sql_store.commit()
    async with test_session_factory() as other:
        assert await SqlKeyValueStore(other).get("units:index:bank:bank-1") == [1, 2]


async def test_sql_rollback_discards(sql_store):
    await sql_store.set("units:counter", 1)
    await sql_store.commit()
    await sql_store.set("units:counter", 5)
    await sql_store.set("units:admin", "admin")
    await sql_store.rollback()
    assert await sql_store.get("units:counter") == 1
    assert not await sql_store.has("units:admin")


async def test_sql_delete(sql_store):
    await sql_store.set("units:authorized:bank-1", True)
    await sql_store.commit()
    await sql_store.delete("units:authorized:bank-1")
    assert not await sql_store.has("units:authorized:bank-1")
    await sql_store.commit()
    assert await sql_store.get("units:authorized:bank-1") is None


async def test_sql_reads_lock_their_rows(sql_store, test_db, monkeypatch):
    calls = []
    original_get = test_db.get

    async def recording_get(entity, ident, **kwargs):
        calls.append(kwargs)
        return await original_get(entity, ident, **kwargs)

    monkeypatch.setattr(test_db, "get", recording_get)
    await sql_store.set("requests:index:status:pending", [1])
    await sql_store.get("requests:index:status:pending")
    await sql_store.has("requests:index:status:pending")
    await sql_store.delete("requests:index:status:pending")
    assert len(calls) == 4
    assert all(call.get("with_for_update") is True for call in calls)


async def test_sql_locked_read_sees_own_flushed_write(sql_store):
    await sql_store.set("units:index:bank:bank-1", [1])
    await sql_store.set("units:index:bank:bank-1", [1, 2])
    assert await sql_store.get("units:index:bank:bank-1") == [1, 2]


async def test_sql_concurrent_insert_is_duplicate_record(
    sql_store, test_db, test_session_factory, monkeypatch,
):
    async with test_session_factory() as other:
        await SqlKeyValueStore(other).set("units:record:1", {"id": 1})
        await other.commit()

    # this session read the key before the other transaction committed it
    async def stale_get(entity, ident, **kwargs):
        return None

    monkeypatch.setattr(test_db, "get", stale_get)
    with pytest.raises(DuplicateRecordError) as exc_info:
        await sql_store.set("units:record:1", {"id": 1, "status": "available"})
    assert exc_info.value.context.entity_id == "units:record:1"
    await sql_store.rollback()
