"""Status State Machines — legal transitions for units and requests.

Invariants:
    - Transition tables are the single source of truth; every status has an entry
    - Terminal statuses map to an empty set
    - Unit transitions are a predicate only: no ledger operation moves a unit today
    - can_cancel (pending/approved only) is its own predicate with its own error,
      separate from general transition legality
    - No clock here: deadline checks belong to enforce_requests.check_not_expired

Design Decisions:
    - frozenset tables over if/elif chains: the table is readable as the diagram
    - check_* helpers return the error instance (not raise), matching the enforce_* modules
"""

from lifebank.core.domain_types import BloodStatus, RequestStatus
from lifebank.core.errors import (
    CannotCancelRequestError, InvalidStatusTransitionError, LifebankError,
)


UNIT_TRANSITIONS: dict[BloodStatus, frozenset[BloodStatus]] = {
    BloodStatus.AVAILABLE: frozenset({
        BloodStatus.RESERVED, BloodStatus.EXPIRED, BloodStatus.DISCARDED,
    }),
    BloodStatus.RESERVED: frozenset({
        BloodStatus.ISSUED, BloodStatus.AVAILABLE,
        BloodStatus.EXPIRED, BloodStatus.DISCARDED,
    }),
    BloodStatus.ISSUED: frozenset(),
    BloodStatus.EXPIRED: frozenset(),
    BloodStatus.DISCARDED: frozenset(),
}

REQUEST_TRANSITIONS: dict[RequestStatus, frozenset[RequestStatus]] = {
    RequestStatus.PENDING: frozenset({
        RequestStatus.APPROVED, RequestStatus.CANCELLED, RequestStatus.EXPIRED,
    }),
    RequestStatus.APPROVED: frozenset({
        RequestStatus.IN_DELIVERY, RequestStatus.CANCELLED, RequestStatus.EXPIRED,
    }),
    RequestStatus.IN_DELIVERY: frozenset({RequestStatus.COMPLETED}),
    RequestStatus.COMPLETED: frozenset(),
    RequestStatus.CANCELLED: frozenset(),
    RequestStatus.EXPIRED: frozenset(),
}

CANCELLABLE_STATUSES: frozenset[RequestStatus] = frozenset({
    RequestStatus.PENDING, RequestStatus.APPROVED,
})


def can_unit_transition(old: BloodStatus, new: BloodStatus) -> bool:
    return new in UNIT_TRANSITIONS[old]


def can_request_transition(old: RequestStatus, new: RequestStatus) -> bool:
    return new in REQUEST_TRANSITIONS[old]


def can_cancel(status: RequestStatus) -> bool:
    return status in CANCELLABLE_STATUSES


def check_request_transition(
    old: RequestStatus, new: RequestStatus,
) -> LifebankError | None:
    if not can_request_transition(old, new):
        return InvalidStatusTransitionError(old.value, new.value)
    return None


def check_can_cancel(status: RequestStatus) -> LifebankError | None:
    if not can_cancel(status):
        return CannotCancelRequestError(status.value)
    return None
