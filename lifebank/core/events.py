"""Ledger Events — structured notifications emitted after a committed mutation.

Invariants:
    - One event per committed state change; never emitted for a rejected operation
    - Events are immutable (frozen dataclasses) and carry every changed-state field
    - `name` is the stable topic used by the sink

Design Decisions:
    - Events are published by the services only after ledger_operation commits
"""

from dataclasses import asdict, dataclass, field
from enum import Enum

from lifebank.core.domain_types import BloodType, RequestStatus, UrgencyLevel


@dataclass(frozen=True)
class LedgerEvent:
    """Base for all ledger events."""
    name: str = field(init=False, default="ledger_event")

    def to_payload(self) -> dict:
        payload = asdict(self)
        return {
            key: (value.value if isinstance(value, Enum) else value)
            for key, value in payload.items()
        }


@dataclass(frozen=True)
class BloodRegisteredEvent(LedgerEvent):
    blood_unit_id: int
    bank_id: str
    blood_type: BloodType
    quantity_ml: int
    expiration_timestamp: int
    registered_at: int
    donor_id: str | None = None
    name: str = field(init=False, default="blood_registered")


@dataclass(frozen=True)
class RequestCreatedEvent(LedgerEvent):
    request_id: int
    hospital_id: str
    blood_type: BloodType
    quantity_ml: int
    urgency: UrgencyLevel
    required_by: int
    created_at: int
    name: str = field(init=False, default="request_created")


@dataclass(frozen=True)
class RequestStatusChangedEvent(LedgerEvent):
    request_id: int
    old_status: RequestStatus
    new_status: RequestStatus
    changed_at: int
    name: str = field(init=False, default="status_changed")

