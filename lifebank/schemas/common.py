"""Common Schemas — envelopes shared by the unit and request APIs."""

from pydantic import BaseModel, Field, field_validator

from lifebank.core.storage_keys import MAX_ADDRESS_LENGTH


def strip_address(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("address cannot be empty or whitespace")
    return v


class LedgerInitialize(BaseModel):
    """One-time admin assignment."""
    admin: str = Field(min_length=1, max_length=MAX_ADDRESS_LENGTH)

    @field_validator("admin")
    @classmethod
    def strip_admin(cls, v: str) -> str:
        return strip_address(v)


class AdminResponse(BaseModel):
    admin: str


class CreatedResponse(BaseModel):
    id: int


class CountResponse(BaseModel):
    count: int


class AuthorizationResponse(BaseModel):
    address: str
    authorized: bool


class IdListResponse(BaseModel):
    """Ordered bucket contents (creation order)."""
    dimension: str
    key: str
    ids: list[int]
