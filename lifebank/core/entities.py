"""Ledger Entities — canonical BloodUnit and BloodRequest records.

Invariants:
    - Entities are constructed exactly once, after all input checks have passed
    - Only `status` mutates after creation (plus fulfilled_at/assigned_units on requests,
      which no current operation populates)
    - metadata is an opaque mapping: excluded from equality and never validated
    - to_record()/from_record() is the only serialization boundary (JSON-compatible dicts)

Design Decisions:
    - Plain dataclasses, not ORM models: the store is an opaque key/value map, so
      records travel as JSON and the core stays free of persistence concerns
    - donor_id is `Address | None`, never a sentinel: absence must skip the donor index
"""

from dataclasses import dataclass, field

from lifebank.core.domain_types import (
    Address, BloodStatus, BloodType, RequestStatus, UrgencyLevel,
)


@dataclass
class BloodUnit:
    """A donated blood volume registered by a bank."""
    id: int
    blood_type: BloodType
    quantity_ml: int
    bank_id: Address
    donor_id: Address | None
    donation_timestamp: int
    expiration_timestamp: int
    status: BloodStatus = BloodStatus.AVAILABLE
    metadata: dict[str, str] = field(default_factory=dict, compare=False)

    @property
    def shelf_life_seconds(self) -> int:
        return self.expiration_timestamp - self.donation_timestamp

    def to_record(self) -> dict:
        return {
            "id": self.id,
            "blood_type": self.blood_type.value,
            "quantity_ml": self.quantity_ml,
            "bank_id": self.bank_id,
            "donor_id": self.donor_id,
            "donation_timestamp": self.donation_timestamp,
            "expiration_timestamp": self.expiration_timestamp,
            "status": self.status.value,
            "metadata": dict(self.metadata),
        }

    @classmethod
    def from_record(cls, record: dict) -> "BloodUnit":
        donor = record.get("donor_id")
        return cls(
            id=record["id"],
            blood_type=BloodType(record["blood_type"]),
            quantity_ml=record["quantity_ml"],
            bank_id=Address(record["bank_id"]),
            donor_id=Address(donor) if donor is not None else None,
            donation_timestamp=record["donation_timestamp"],
            expiration_timestamp=record["expiration_timestamp"],
            status=BloodStatus(record["status"]),
            metadata=dict(record.get("metadata") or {}),
        )


@dataclass
class BloodRequest:
    """A hospital's ask for a blood type and quantity by a deadline."""
    id: int
    hospital_id: Address
    blood_type: BloodType
    quantity_ml: int
    urgency: UrgencyLevel
    created_at: int
    required_by: int
    delivery_address: str
    status: RequestStatus = RequestStatus.PENDING
    fulfilled_at: int | None = None
    assigned_units: list[int] = field(default_factory=list)
    metadata: dict[str, str] = field(default_factory=dict, compare=False)

    @property
    def lead_time_seconds(self) -> int:
        return self.required_by - self.created_at

    def to_record(self) -> dict:
        return {
            "id": self.id,
            "hospital_id": self.hospital_id,
            "blood_type": self.blood_type.value,
            "quantity_ml": self.quantity_ml,
            "urgency": self.urgency.value,
            "status": self.status.value,
            "created_at": self.created_at,
            "required_by": self.required_by,
            "fulfilled_at": self.fulfilled_at,
            "assigned_units": list(self.assigned_units),
            "delivery_address": self.delivery_address,
            "metadata": dict(self.metadata),
        }

    @classmethod
    def from_record(cls, record: dict) -> "BloodRequest":
        return cls(
            id=record["id"],
            hospital_id=Address(record["hospital_id"]),
            blood_type=BloodType(record["blood_type"]),
            quantity_ml=record["quantity_ml"],
            urgency=UrgencyLevel(record["urgency"]),
            created_at=record["created_at"],
            required_by=record["required_by"],
            delivery_address=record["delivery_address"],
            status=RequestStatus(record["status"]),
            fulfilled_at=record.get("fulfilled_at"),
            assigned_units=list(record.get("assigned_units") or []),
            metadata=dict(record.get("metadata") or {}),
        )
