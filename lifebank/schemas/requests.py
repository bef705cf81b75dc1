"""Request Schemas — Pydantic models for the hospital request ledger API.

Invariants:
    - hospital_id is stripped and non-empty
    - delivery_address is passed through untouched: blank addresses must reach core
      and fail with INVALID_DELIVERY_ADDRESS, not a generic validation error
"""

from pydantic import BaseModel, Field, field_validator

from lifebank.core.domain_types import BloodType, RequestStatus, UrgencyLevel
from lifebank.core.entities import BloodRequest
from lifebank.core.storage_keys import MAX_ADDRESS_LENGTH
from lifebank.schemas.common import strip_address


class RequestCreate(BaseModel):
    """Blood request creation payload."""
    hospital_id: str = Field(min_length=1, max_length=MAX_ADDRESS_LENGTH)
    blood_type: BloodType
    quantity_ml: int = Field(ge=0)
    urgency: UrgencyLevel
    required_by: int = Field(ge=0)
    delivery_address: str = Field(max_length=500)
    metadata: dict[str, str] = Field(default_factory=dict)

    @field_validator("hospital_id")
    @classmethod
    def strip_hospital(cls, v: str) -> str:
        return strip_address(v)


class RequestResponse(BaseModel):
    """Public view of a stored blood request."""
    id: int
    hospital_id: str
    blood_type: BloodType
    quantity_ml: int
    urgency: UrgencyLevel
    status: RequestStatus
    created_at: int
    required_by: int
    fulfilled_at: int | None
    assigned_units: list[int]
    delivery_address: str
    metadata: dict[str, str]

    @classmethod
    def from_entity(cls, request: BloodRequest) -> "RequestResponse":
        return cls(**request.to_record())
