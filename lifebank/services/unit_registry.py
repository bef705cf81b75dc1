"""Unit Registry — registration, lookup, and indexing of donated blood units.

Invariants:
    - register_unit order: authenticate -> initialized -> bank authorized -> validate inputs
      -> allocate ID -> construct -> validate entity -> insert -> index -> (commit) -> event
    - A rejected registration leaves counter, records, and indexes untouched
    - Units are indexed by blood type, bank, status, and donor (donor only when present)
    - Reads of records and buckets need no initialization; admin/allow-list/counter reads do

Design Decisions:
    - Clock read once per operation: every check in one call sees the same "now"
    - Event published after ledger_operation exits, i.e. after commit
"""

import logging

from lifebank.core.domain_types import (
    Address, BloodStatus, BloodType, Domain, IndexDimension,
)
from lifebank.core.enforce_access import check_caller
from lifebank.core.enforce_units import validate_unit, validate_unit_registration
from lifebank.core.entities import BloodUnit
from lifebank.core.errors import NotAuthorizedBloodBankError
from lifebank.core.events import BloodRegisteredEvent
from lifebank.core.repository_protocols import EventSink, LedgerClock, TransactionalStore
from lifebank.services.access_control import AccessControl
from lifebank.services.identity_allocator import IdentityAllocator
from lifebank.services.index_maintainer import IndexMaintainer
from lifebank.services.record_store import RecordStore
from lifebank.services.unit_of_work import ledger_operation

logger = logging.getLogger(__name__)

# Fixed bucket order on registration.
UNIT_INDEXES = {
    IndexDimension.BLOOD_TYPE: lambda unit: unit.blood_type.value,
    IndexDimension.BANK: lambda unit: unit.bank_id,
    IndexDimension.STATUS: lambda unit: unit.status.value,
    IndexDimension.DONOR: lambda unit: unit.donor_id,
}


class UnitRegistry:
    """Blood unit use cases over one transactional store."""

    def __init__(
        self, store: TransactionalStore, clock: LedgerClock, events: EventSink,
    ):
        self.store = store
        self.clock = clock
        self.events = events
        self.access = AccessControl(store, Domain.UNITS)
        self.ids = IdentityAllocator(store, Domain.UNITS)
        self.records: RecordStore[BloodUnit] = RecordStore(
            store, Domain.UNITS, "BloodUnit", BloodUnit.from_record,
        )
        self.indexes = IndexMaintainer(store, Domain.UNITS, UNIT_INDEXES)

    # ─── Bootstrap & allow-list ──────────────────────────────────

    async def initialize(self, admin: Address, caller: Address) -> None:
        async with ledger_operation(self.store, Domain.UNITS, "initialize"):
            await self.access.initialize(admin, caller)
        logger.info("Unit registry initialized", extra={"domain": Domain.UNITS.value})

    async def get_admin(self) -> Address:
        return await self.access.get_admin()

    async def authorize_bank(self, bank: Address, caller: Address) -> None:
        async with ledger_operation(self.store, Domain.UNITS, "authorize_bank"):
            await self.access.authorize(bank, caller)
        logger.info(f"Bank authorized: {bank}", extra={"domain": Domain.UNITS.value})

    async def revoke_bank(self, bank: Address, caller: Address) -> None:
        async with ledger_operation(self.store, Domain.UNITS, "revoke_bank"):
            await self.access.revoke(bank, caller)
        logger.info(f"Bank revoked: {bank}", extra={"domain": Domain.UNITS.value})

    async def is_bank_authorized(self, bank: Address) -> bool:
        return await self.access.is_authorized(bank)

    # ─── Registration ────────────────────────────────────────────

    async def register_unit(
        self,
        caller: Address,
        bank_id: Address,
        blood_type: BloodType,
        quantity_ml: int,
        expiration_timestamp: int,
        donor_id: Address | None = None,
        metadata: dict[str, str] | None = None,
    ) -> int:
        """Register a donation; returns the new unit ID."""
        now = self.clock.now()
        async with ledger_operation(self.store, Domain.UNITS, "register_unit"):
            error = check_caller(caller, bank_id, "the registering bank")
            if error:
                raise error
            await self.access.get_admin()
            if not await self.access.is_authorized(bank_id):
                raise NotAuthorizedBloodBankError(bank_id)

            error = validate_unit_registration(now, quantity_ml, expiration_timestamp)
            if error:
                raise error

            unit = BloodUnit(
                id=await self.ids.next_id(),
                blood_type=blood_type,
                quantity_ml=quantity_ml,
                bank_id=bank_id,
                donor_id=donor_id,
                donation_timestamp=now,
                expiration_timestamp=expiration_timestamp,
                status=BloodStatus.AVAILABLE,
                metadata=dict(metadata or {}),
            )
            error = validate_unit(unit, now)
            if error:
                raise error

            await self.records.insert(unit)
            await self.indexes.add(unit)

        logger.info(
            f"Blood unit registered: {unit.blood_type.value} {unit.quantity_ml}ml",
            extra={"domain": Domain.UNITS.value, "unit_id": unit.id, "caller": caller},
        )
        self.events.publish(BloodRegisteredEvent(
            blood_unit_id=unit.id,
            bank_id=bank_id,
            blood_type=blood_type,
            quantity_ml=quantity_ml,
            expiration_timestamp=expiration_timestamp,
            registered_at=now,
            donor_id=donor_id,
        ))
        return unit.id

    # ─── Reads ───────────────────────────────────────────────────

    async def get_unit(self, unit_id: int) -> BloodUnit:
        return await self.records.require(unit_id)

    async def unit_count(self) -> int:
        await self.access.get_admin()
        return await self.ids.current()

    async def list_by_bank(self, bank: Address) -> list[int]:
        return await self.indexes.ids_for(IndexDimension.BANK, bank)

    async def list_by_status(self, status: BloodStatus) -> list[int]:
        return await self.indexes.ids_for(IndexDimension.STATUS, status)

    async def list_by_blood_type(self, blood_type: BloodType) -> list[int]:
        return await self.indexes.ids_for(IndexDimension.BLOOD_TYPE, blood_type)

    async def list_by_donor(self, donor: Address) -> list[int]:
        return await self.indexes.ids_for(IndexDimension.DONOR, donor)
