"""Identity Allocator — strictly increasing IDs, one persisted counter per domain.

Invariants:
    - Counter reads as 0 until the first allocation; the first ID is 1
    - next_id() increments and persists before returning
    - Called only after input validation, inside ledger_operation: a rejected
      operation rolls the counter back with everything else
"""

from lifebank.core.domain_types import Domain
from lifebank.core.repository_protocols import KeyValueStore
from lifebank.core.storage_keys import counter_key


class IdentityAllocator:
    """Sequential ID source for one domain."""

    def __init__(self, store: KeyValueStore, domain: Domain):
        self.store = store
        self.key = counter_key(domain)

    async def current(self) -> int:
        """Last allocated ID (0 when none)."""
        return await self.store.get(self.key) or 0

    async def next_id(self) -> int:
        next_id = await self.current() + 1
        await self.store.set(self.key, next_id)
        return next_id
