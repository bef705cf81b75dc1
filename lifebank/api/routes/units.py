"""Unit Registry Routes — bootstrap, bank allow-list, registration, lookup, indexes.

Invariants:
    - Every mutating route takes the verified caller from get_caller
    - Index routes return IDs in creation order, [] for an unused bucket
    - Ledger errors surface through the global LifebankError handler

Design Decisions:
    - Index lookups are query-parameter routes (?blood_type=A%2B) so enum values with
      '+'/'-' never have to live in a path segment
"""

from fastapi import APIRouter, Depends, Path, Query, status

from lifebank.api.dependencies import get_caller, get_unit_registry
from lifebank.core.domain_types import Address, BloodStatus, BloodType
from lifebank.core.storage_keys import MAX_ADDRESS_LENGTH
from lifebank.schemas.common import (
    AdminResponse, AuthorizationResponse, CountResponse, CreatedResponse,
    IdListResponse, LedgerInitialize,
)
from lifebank.schemas.units import UnitRegister, UnitResponse
from lifebank.services.unit_registry import UnitRegistry

router = APIRouter(prefix="/api/v1/units", tags=["units"])


@router.post(
    "/initialize", response_model=AdminResponse,
    status_code=status.HTTP_201_CREATED,
)
async def initialize(
    body: LedgerInitialize,
    caller: Address = Depends(get_caller),
    registry: UnitRegistry = Depends(get_unit_registry),
):
    """One-time admin assignment for the unit registry."""
    await registry.initialize(Address(body.admin), caller)
    return AdminResponse(admin=body.admin)


@router.get("/admin", response_model=AdminResponse)
async def get_admin(registry: UnitRegistry = Depends(get_unit_registry)):
    return AdminResponse(admin=await registry.get_admin())


@router.get("/count", response_model=CountResponse)
async def unit_count(registry: UnitRegistry = Depends(get_unit_registry)):
    return CountResponse(count=await registry.unit_count())


# ─── Bank allow-list ────────────────────────────────────────────

@router.put("/banks/{bank}", response_model=AuthorizationResponse)
async def authorize_bank(
    bank: str = Path(min_length=1, max_length=MAX_ADDRESS_LENGTH),
    caller: Address = Depends(get_caller),
    registry: UnitRegistry = Depends(get_unit_registry),
):
    await registry.authorize_bank(Address(bank), caller)
    return AuthorizationResponse(address=bank, authorized=True)


@router.delete("/banks/{bank}", response_model=AuthorizationResponse)
async def revoke_bank(
    bank: str,
    caller: Address = Depends(get_caller),
    registry: UnitRegistry = Depends(get_unit_registry),
):
    await registry.revoke_bank(Address(bank), caller)
    return AuthorizationResponse(
        address=bank, authorized=await registry.is_bank_authorized(Address(bank)),
    )


@router.get("/banks/{bank}", response_model=AuthorizationResponse)
async def is_bank_authorized(
    bank: str, registry: UnitRegistry = Depends(get_unit_registry),
):
    return AuthorizationResponse(
        address=bank, authorized=await registry.is_bank_authorized(Address(bank)),
    )


# ─── Registration & lookup ──────────────────────────────────────

@router.post(
    "", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED,
)
async def register_unit(
    body: UnitRegister,
    caller: Address = Depends(get_caller),
    registry: UnitRegistry = Depends(get_unit_registry),
):
    """Register a donated blood unit. The caller must be the bank itself."""
    unit_id = await registry.register_unit(
        caller=caller,
        bank_id=Address(body.bank_id),
        blood_type=body.blood_type,
        quantity_ml=body.quantity_ml,
        expiration_timestamp=body.expiration_timestamp,
        donor_id=Address(body.donor_id) if body.donor_id else None,
        metadata=body.metadata,
    )
    return CreatedResponse(id=unit_id)


@router.get("/by-bank", response_model=IdListResponse)
async def list_by_bank(
    bank: str = Query(..., min_length=1),
    registry: UnitRegistry = Depends(get_unit_registry),
):
    ids = await registry.list_by_bank(Address(bank))
    return IdListResponse(dimension="bank", key=bank, ids=ids)


@router.get("/by-status", response_model=IdListResponse)
async def list_by_status(
    unit_status: BloodStatus = Query(..., alias="status"),
    registry: UnitRegistry = Depends(get_unit_registry),
):
    ids = await registry.list_by_status(unit_status)
    return IdListResponse(dimension="status", key=unit_status.value, ids=ids)


@router.get("/by-blood-type", response_model=IdListResponse)
async def list_by_blood_type(
    blood_type: BloodType = Query(...),
    registry: UnitRegistry = Depends(get_unit_registry),
):
    ids = await registry.list_by_blood_type(blood_type)
    return IdListResponse(dimension="blood_type", key=blood_type.value, ids=ids)


@router.get("/by-donor", response_model=IdListResponse)
async def list_by_donor(
    donor: str = Query(..., min_length=1),
    registry: UnitRegistry = Depends(get_unit_registry),
):
    ids = await registry.list_by_donor(Address(donor))
    return IdListResponse(dimension="donor", key=donor, ids=ids)


@router.get("/{unit_id}", response_model=UnitResponse)
async def get_unit(
    unit_id: int, registry: UnitRegistry = Depends(get_unit_registry),
):
    return UnitResponse.from_entity(await registry.get_unit(unit_id))
