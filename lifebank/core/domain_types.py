"""Domain Types — rich types that replace bare primitives across the ledger.

Invariants:
    - Address wraps str — an opaque, host-verified identity (bank, hospital, donor, admin)
    - Times are plain int unix seconds as read from the ledger clock
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders (records are stored as JSON)
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

Address = NewType("Address", str)


# ─── Value Types ─────────────────────────────────────────────────

SECONDS_PER_HOUR: int = 3600
SECONDS_PER_DAY: int = 86_400


# ─── Enums ───────────────────────────────────────────────────────

class Domain(str, Enum):
    """The two record domains. Qualifies every storage key."""
    UNITS = "units"
    REQUESTS = "requests"


class BloodType(str, Enum):
    """The 8 ABO/Rh combinations."""
    A_POSITIVE = "A+"
    A_NEGATIVE = "A-"
    B_POSITIVE = "B+"
    B_NEGATIVE = "B-"
    AB_POSITIVE = "AB+"
    AB_NEGATIVE = "AB-"
    O_POSITIVE = "O+"
    O_NEGATIVE = "O-"


class BloodStatus(str, Enum):
    """Blood unit lifecycle. Registration only ever produces AVAILABLE."""
    AVAILABLE = "available"
    RESERVED = "reserved"
    ISSUED = "issued"
    EXPIRED = "expired"
    DISCARDED = "discarded"


class RequestStatus(str, Enum):
    """Blood request lifecycle. Transitions live in core/status_transitions.py."""
    PENDING = "pending"
    APPROVED = "approved"
    IN_DELIVERY = "in_delivery"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    EXPIRED = "expired"


class UrgencyLevel(str, Enum):
    """Request urgency; selects the allowed lead-time window."""
    CRITICAL = "critical"
    URGENT = "urgent"
    NORMAL = "normal"

    @property
    def priority_weight(self) -> int:
        return _PRIORITY_WEIGHTS[self]


_PRIORITY_WEIGHTS: dict[UrgencyLevel, int] = {
    UrgencyLevel.CRITICAL: 3,
    UrgencyLevel.URGENT: 2,
    UrgencyLevel.NORMAL: 1,
}


class IndexDimension(str, Enum):
    """Secondary index dimensions. Which ones apply depends on the domain."""
    BLOOD_TYPE = "blood_type"
    BANK = "bank"
    HOSPITAL = "hospital"
    STATUS = "status"
    DONOR = "donor"
    URGENCY = "urgency"
