"""Record Store — canonical entity persistence keyed by immutable numeric ID.

Invariants:
    - Only key construction and (de)serialization live here: no business rules
    - insert() never overwrites: an occupied key raises DuplicateRecordError
    - require() converts absence into ResourceNotFoundError
"""

from typing import Callable, Generic, Protocol, TypeVar

from lifebank.core.domain_types import Domain
from lifebank.core.errors import DuplicateRecordError, ResourceNotFoundError
from lifebank.core.repository_protocols import KeyValueStore
from lifebank.core.storage_keys import record_key


class Record(Protocol):
    id: int

    def to_record(self) -> dict: ...


E = TypeVar("E", bound=Record)


class RecordStore(Generic[E]):
    """Persists one entity type for one domain."""

    def __init__(
        self,
        store: KeyValueStore,
        domain: Domain,
        resource_type: str,
        decode: Callable[[dict], E],
    ):
        self.store = store
        self.domain = domain
        self.resource_type = resource_type
        self.decode = decode

    async def put(self, entity: E) -> None:
        await self.store.set(record_key(self.domain, entity.id), entity.to_record())

    async def insert(self, entity: E) -> None:
        if await self.exists(entity.id):
            raise DuplicateRecordError(self.resource_type, entity.id)
        await self.put(entity)

    async def get(self, record_id: int) -> E | None:
        record = await self.store.get(record_key(self.domain, record_id))
        return self.decode(record) if record is not None else None

    async def exists(self, record_id: int) -> bool:
        return await self.store.has(record_key(self.domain, record_id))

    async def require(self, record_id: int) -> E:
        entity = await self.get(record_id)
        if entity is None:
            raise ResourceNotFoundError(self.resource_type, record_id)
        return entity
