"""Request Ledger — hospital blood requests, their status machine, and indexes.

Invariants:
    - create_request order: authenticate -> initialized -> hospital authorized ->
      validate inputs (quantity, address, urgency window) -> allocate ID -> construct
      -> validate entity -> insert -> index -> (commit) -> event
    - approve_request order: initialized -> caller is admin -> load -> transition legal
      -> deadline not passed -> mutate -> persist -> move status bucket -> (commit) -> event
    - cancel_request never checks the deadline; only owner or admin may cancel, and only
      from pending/approved
    - Status changes rewrite ONLY the status index; other dimensions are immutable

Design Decisions:
    - Transition legality is checked before expiry: an approved request re-approved after
      its deadline reports the transition error, a pending one reports ExpiredError
    - _change_status shared by approve/cancel: one place persists and re-indexes
"""

import logging

from lifebank.core.domain_types import (
    Address, BloodType, Domain, IndexDimension, RequestStatus, UrgencyLevel,
)
from lifebank.core.enforce_access import check_caller, check_owner_or_admin
from lifebank.core.enforce_requests import (
    check_not_expired, validate_request, validate_request_creation,
)
from lifebank.core.entities import BloodRequest
from lifebank.core.errors import NotAuthorizedHospitalError
from lifebank.core.events import RequestCreatedEvent, RequestStatusChangedEvent
from lifebank.core.repository_protocols import EventSink, LedgerClock, TransactionalStore
from lifebank.core.status_transitions import check_can_cancel, check_request_transition
from lifebank.services.access_control import AccessControl
from lifebank.services.identity_allocator import IdentityAllocator
from lifebank.services.index_maintainer import IndexMaintainer
from lifebank.services.record_store import RecordStore
from lifebank.services.unit_of_work import ledger_operation

logger = logging.getLogger(__name__)

# Fixed bucket order on creation.
REQUEST_INDEXES = {
    IndexDimension.HOSPITAL: lambda request: request.hospital_id,
    IndexDimension.BLOOD_TYPE: lambda request: request.blood_type.value,
    IndexDimension.STATUS: lambda request: request.status.value,
    IndexDimension.URGENCY: lambda request: request.urgency.value,
}


class RequestLedger:
    """Blood request use cases over one transactional store."""

    def __init__(
        self, store: TransactionalStore, clock: LedgerClock, events: EventSink,
    ):
        self.store = store
        self.clock = clock
        self.events = events
        self.access = AccessControl(store, Domain.REQUESTS)
        self.ids = IdentityAllocator(store, Domain.REQUESTS)
        self.records: RecordStore[BloodRequest] = RecordStore(
            store, Domain.REQUESTS, "BloodRequest", BloodRequest.from_record,
        )
        self.indexes = IndexMaintainer(store, Domain.REQUESTS, REQUEST_INDEXES)

    # ─── Bootstrap & allow-list ──────────────────────────────────

    async def initialize(self, admin: Address, caller: Address) -> None:
        async with ledger_operation(self.store, Domain.REQUESTS, "initialize"):
            await self.access.initialize(admin, caller)
        logger.info("Request ledger initialized", extra={"domain": Domain.REQUESTS.value})

    async def get_admin(self) -> Address:
        return await self.access.get_admin()

    async def authorize_hospital(self, hospital: Address, caller: Address) -> None:
        async with ledger_operation(self.store, Domain.REQUESTS, "authorize_hospital"):
            await self.access.authorize(hospital, caller)
        logger.info(
            f"Hospital authorized: {hospital}", extra={"domain": Domain.REQUESTS.value},
        )

    async def revoke_hospital(self, hospital: Address, caller: Address) -> None:
        async with ledger_operation(self.store, Domain.REQUESTS, "revoke_hospital"):
            await self.access.revoke(hospital, caller)
        logger.info(
            f"Hospital revoked: {hospital}", extra={"domain": Domain.REQUESTS.value},
        )

    async def is_hospital_authorized(self, hospital: Address) -> bool:
        return await self.access.is_authorized(hospital)

    # ─── Creation ────────────────────────────────────────────────

    async def create_request(
        self,
        caller: Address,
        hospital_id: Address,
        blood_type: BloodType,
        quantity_ml: int,
        urgency: UrgencyLevel,
        required_by: int,
        delivery_address: str,
        metadata: dict[str, str] | None = None,
    ) -> int:
        """Create a pending request; returns the new request ID."""
        now = self.clock.now()
        async with ledger_operation(self.store, Domain.REQUESTS, "create_request"):
            error = check_caller(caller, hospital_id, "the requesting hospital")
            if error:
                raise error
            await self.access.get_admin()
            if not await self.access.is_authorized(hospital_id):
                raise NotAuthorizedHospitalError(hospital_id)

            error = validate_request_creation(
                now, quantity_ml, urgency, required_by, delivery_address,
            )
            if error:
                raise error

            request = BloodRequest(
                id=await self.ids.next_id(),
                hospital_id=hospital_id,
                blood_type=blood_type,
                quantity_ml=quantity_ml,
                urgency=urgency,
                created_at=now,
                required_by=required_by,
                delivery_address=delivery_address,
                status=RequestStatus.PENDING,
                metadata=dict(metadata or {}),
            )
            error = validate_request(request, now)
            if error:
                raise error

            await self.records.insert(request)
            await self.indexes.add(request)

        logger.info(
            f"Blood request created: {blood_type.value} {quantity_ml}ml ({urgency.value})",
            extra={
                "domain": Domain.REQUESTS.value,
                "request_id": request.id, "caller": caller,
            },
        )
        self.events.publish(RequestCreatedEvent(
            request_id=request.id,
            hospital_id=hospital_id,
            blood_type=blood_type,
            quantity_ml=quantity_ml,
            urgency=urgency,
            required_by=required_by,
            created_at=now,
        ))
        return request.id

    # ─── Status changes ──────────────────────────────────────────

    async def approve_request(self, request_id: int, caller: Address) -> BloodRequest:
        """Admin approval of a pending request whose deadline has not passed."""
        now = self.clock.now()
        async with ledger_operation(self.store, Domain.REQUESTS, "approve_request"):
            await self.access.require_admin(caller)
            request = await self.records.require(request_id)

            error = check_request_transition(request.status, RequestStatus.APPROVED)
            if error:
                raise error
            error = check_not_expired(now, request.required_by)
            if error:
                raise error

            old_status = await self._change_status(request, RequestStatus.APPROVED)

        self._status_changed(request, old_status, now)
        return request

    async def cancel_request(self, request_id: int, caller: Address) -> BloodRequest:
        """Cancel by the owning hospital or the admin, from pending/approved only."""
        now = self.clock.now()
        async with ledger_operation(self.store, Domain.REQUESTS, "cancel_request"):
            admin = await self.access.get_admin()
            request = await self.records.require(request_id)

            error = check_owner_or_admin(caller, request.hospital_id, admin)
            if error:
                raise error
            error = check_can_cancel(request.status)
            if error:
                raise error

            old_status = await self._change_status(request, RequestStatus.CANCELLED)

        self._status_changed(request, old_status, now)
        return request

    async def _change_status(
        self, request: BloodRequest, new_status: RequestStatus,
    ) -> RequestStatus:
        old_status = request.status
        request.status = new_status
        await self.records.put(request)
        await self.indexes.move_status(request.id, old_status, new_status)
        return old_status

    def _status_changed(
        self, request: BloodRequest, old_status: RequestStatus, now: int,
    ) -> None:
        logger.info(
            f"Request {request.id} status changed",
            extra={
                "domain": Domain.REQUESTS.value, "request_id": request.id,
                "old_status": old_status.value, "new_status": request.status.value,
            },
        )
        self.events.publish(RequestStatusChangedEvent(
            request_id=request.id,
            old_status=old_status,
            new_status=request.status,
            changed_at=now,
        ))

    # ─── Reads ───────────────────────────────────────────────────

    async def get_request(self, request_id: int) -> BloodRequest:
        return await self.records.require(request_id)

    async def request_count(self) -> int:
        await self.access.get_admin()
        return await self.ids.current()

    async def list_by_hospital(self, hospital: Address) -> list[int]:
        return await self.indexes.ids_for(IndexDimension.HOSPITAL, hospital)

    async def list_by_status(self, status: RequestStatus) -> list[int]:
        return await self.indexes.ids_for(IndexDimension.STATUS, status)

    async def list_by_blood_type(self, blood_type: BloodType) -> list[int]:
        return await self.indexes.ids_for(IndexDimension.BLOOD_TYPE, blood_type)

    async def list_by_urgency(self, urgency: UrgencyLevel) -> list[int]:
        return await self.indexes.ids_for(IndexDimension.URGENCY, urgency)
