"""Access Control — one-time admin bootstrap and the per-domain allow-list.

Invariants:
    - initialize() succeeds at most once per domain
    - Before initialize(), every read of admin or allow-list raises NotInitializedError
      (no zero-valued default)
    - The admin is always authorized; other addresses only while on the allow-list
    - Only the admin may change the allow-list

Design Decisions:
    - Thin wrapper over the key/value store: no caching, every check hits storage so a
      revoke takes effect for the very next operation
    - Callers wrap mutations in ledger_operation; this class never commits
"""

from lifebank.core.domain_types import Address, Domain
from lifebank.core.enforce_access import check_caller
from lifebank.core.errors import AlreadyInitializedError, NotInitializedError
from lifebank.core.repository_protocols import KeyValueStore
from lifebank.core.storage_keys import admin_key, allow_list_key


class AccessControl:
    """Admin and allow-list state for one domain."""

    def __init__(self, store: KeyValueStore, domain: Domain):
        self.store = store
        self.domain = domain

    async def is_initialized(self) -> bool:
        return await self.store.has(admin_key(self.domain))

    async def initialize(self, admin: Address, caller: Address) -> None:
        error = check_caller(caller, admin, "the admin being installed")
        if error:
            raise error
        if await self.is_initialized():
            raise AlreadyInitializedError(self.domain.value)
        await self.store.set(admin_key(self.domain), admin)

    async def get_admin(self) -> Address:
        admin = await self.store.get(admin_key(self.domain))
        if admin is None:
            raise NotInitializedError(self.domain.value)
        return Address(admin)

    async def require_admin(self, caller: Address) -> Address:
        admin = await self.get_admin()
        error = check_caller(caller, admin, "the admin")
        if error:
            raise error
        return admin

    async def authorize(self, address: Address, caller: Address) -> None:
        await self.require_admin(caller)
        await self.store.set(allow_list_key(self.domain, address), True)

    async def revoke(self, address: Address, caller: Address) -> None:
        await self.require_admin(caller)
        await self.store.delete(allow_list_key(self.domain, address))

    async def is_authorized(self, address: Address) -> bool:
        if address == await self.get_admin():
            return True
        return await self.store.has(allow_list_key(self.domain, address))
