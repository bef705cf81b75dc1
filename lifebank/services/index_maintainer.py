"""Index Maintainer — denormalized lookup buckets kept consistent with the Record Store.

Invariants:
    - add() appends the ID to every applicable bucket in the dimension order given
      at construction; a dimension whose value is None is skipped (anonymous donor)
    - Only the STATUS dimension is ever rewritten after creation (move_status)
    - After move_status the ID sits in exactly one status bucket
    - ids_for() on a never-used bucket returns [] (buckets are created on first use)

Design Decisions:
    - Extractors map an entity to its bucket value: the same maintainer serves both
      domains, each passing its own dimension table
    - Bucket arithmetic is delegated to core/index_buckets.py (pure, tested alone)
"""

from enum import Enum
from typing import Any, Callable

from lifebank.core.domain_types import Domain, IndexDimension
from lifebank.core.index_buckets import append_to_bucket, remove_from_bucket
from lifebank.core.repository_protocols import KeyValueStore
from lifebank.core.storage_keys import index_key

Extractor = Callable[[Any], str | None]


def _bucket_value(value: str | Enum) -> str:
    return value.value if isinstance(value, Enum) else value


class IndexMaintainer:
    """Secondary indexes for one domain."""

    def __init__(
        self,
        store: KeyValueStore,
        domain: Domain,
        extractors: dict[IndexDimension, Extractor],
    ):
        self.store = store
        self.domain = domain
        self.extractors = extractors

    @property
    def dimensions(self) -> list[IndexDimension]:
        return list(self.extractors)

    async def add(self, entity: Any) -> None:
        for dimension, extract in self.extractors.items():
            value = extract(entity)
            if value is None:
                continue
            key = index_key(self.domain, dimension, value)
            await self.store.set(key, append_to_bucket(await self._bucket(key), entity.id))

    async def move_status(
        self, record_id: int, old_status: str | Enum, new_status: str | Enum,
    ) -> None:
        old_key = self._key(IndexDimension.STATUS, old_status)
        new_key = self._key(IndexDimension.STATUS, new_status)
        await self.store.set(old_key, remove_from_bucket(await self._bucket(old_key), record_id))
        await self.store.set(new_key, append_to_bucket(await self._bucket(new_key), record_id))

    async def ids_for(self, dimension: IndexDimension, value: str | Enum) -> list[int]:
        return await self._bucket(self._key(dimension, value))

    def _key(self, dimension: IndexDimension, value: str | Enum) -> str:
        if dimension not in self.extractors:
            raise ValueError(
                f"{self.domain.value} has no '{dimension.value}' index",
            )
        return index_key(self.domain, dimension, _bucket_value(value))

    async def _bucket(self, key: str) -> list[int]:
        return await self.store.get(key) or []
