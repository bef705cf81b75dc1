"""Unit Schemas — Pydantic models for the blood unit registry API.

Invariants:
    - Addresses are stripped and non-empty
    - blood_type must be one of the 8 BloodType values
    - quantity/expiration are only type-checked here (ranges enforced by core)
"""

from pydantic import BaseModel, Field, field_validator

from lifebank.core.domain_types import BloodStatus, BloodType
from lifebank.core.entities import BloodUnit
from lifebank.core.storage_keys import MAX_ADDRESS_LENGTH
from lifebank.schemas.common import strip_address


class UnitRegister(BaseModel):
    """Blood unit registration payload."""
    bank_id: str = Field(min_length=1, max_length=MAX_ADDRESS_LENGTH)
    blood_type: BloodType
    quantity_ml: int = Field(ge=0)
    expiration_timestamp: int = Field(ge=0)
    donor_id: str | None = Field(None, max_length=MAX_ADDRESS_LENGTH)
    metadata: dict[str, str] = Field(default_factory=dict)

    @field_validator("bank_id")
    @classmethod
    def strip_bank(cls, v: str) -> str:
        return strip_address(v)

    @field_validator("donor_id")
    @classmethod
    def strip_donor(cls, v: str | None) -> str | None:
        return strip_address(v) if v is not None else None


class UnitResponse(BaseModel):
    """Public view of a stored blood unit."""
    id: int
    blood_type: BloodType
    quantity_ml: int
    bank_id: str
    donor_id: str | None
    donation_timestamp: int
    expiration_timestamp: int
    status: BloodStatus
    metadata: dict[str, str]

    @classmethod
    def from_entity(cls, unit: BloodUnit) -> "UnitResponse":
        return cls(**unit.to_record())
