"""Request Ledger Routes — bootstrap, hospital allow-list, request lifecycle, indexes.

Invariants:
    - approve is admin-only; cancel is owner-or-admin (enforced in RequestLedger)
    - Status-changing routes return the updated request
    - Index routes return IDs in creation order, [] for an unused bucket
"""

from fastapi import APIRouter, Depends, Path, Query, status

from lifebank.api.dependencies import get_caller, get_request_ledger
from lifebank.core.domain_types import Address, BloodType, RequestStatus, UrgencyLevel
from lifebank.core.storage_keys import MAX_ADDRESS_LENGTH
from lifebank.schemas.common import (
    AdminResponse, AuthorizationResponse, CountResponse, CreatedResponse,
    IdListResponse, LedgerInitialize,
)
from lifebank.schemas.requests import RequestCreate, RequestResponse
from lifebank.services.request_ledger import RequestLedger

router = APIRouter(prefix="/api/v1/requests", tags=["requests"])


@router.post(
    "/initialize", response_model=AdminResponse,
    status_code=status.HTTP_201_CREATED,
)
async def initialize(
    body: LedgerInitialize,
    caller: Address = Depends(get_caller),
    ledger: RequestLedger = Depends(get_request_ledger),
):
    """One-time admin assignment for the request ledger."""
    await ledger.initialize(Address(body.admin), caller)
    return AdminResponse(admin=body.admin)


@router.get("/admin", response_model=AdminResponse)
async def get_admin(ledger: RequestLedger = Depends(get_request_ledger)):
    return AdminResponse(admin=await ledger.get_admin())


@router.get("/count", response_model=CountResponse)
async def request_count(ledger: RequestLedger = Depends(get_request_ledger)):
    return CountResponse(count=await ledger.request_count())


# ─── Hospital allow-list ────────────────────────────────────────

@router.put("/hospitals/{hospital}", response_model=AuthorizationResponse)
async def authorize_hospital(
    hospital: str = Path(min_length=1, max_length=MAX_ADDRESS_LENGTH),
    caller: Address = Depends(get_caller),
    ledger: RequestLedger = Depends(get_request_ledger),
):
    await ledger.authorize_hospital(Address(hospital), caller)
    return AuthorizationResponse(address=hospital, authorized=True)


@router.delete("/hospitals/{hospital}", response_model=AuthorizationResponse)
async def revoke_hospital(
    hospital: str,
    caller: Address = Depends(get_caller),
    ledger: RequestLedger = Depends(get_request_ledger),
):
    await ledger.revoke_hospital(Address(hospital), caller)
    return AuthorizationResponse(
        address=hospital,
        authorized=await ledger.is_hospital_authorized(Address(hospital)),
    )


@router.get("/hospitals/{hospital}", response_model=AuthorizationResponse)
async def is_hospital_authorized(
    hospital: str, ledger: RequestLedger = Depends(get_request_ledger),
):
    return AuthorizationResponse(
        address=hospital,
        authorized=await ledger.is_hospital_authorized(Address(hospital)),
    )


# ─── Lifecycle ──────────────────────────────────────────────────

@router.post(
    "", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED,
)
async def create_request(
    body: RequestCreate,
    caller: Address = Depends(get_caller),
    ledger: RequestLedger = Depends(get_request_ledger),
):
    """Create a pending blood request. The caller must be the hospital itself."""
    request_id = await ledger.create_request(
        caller=caller,
        hospital_id=Address(body.hospital_id),
        blood_type=body.blood_type,
        quantity_ml=body.quantity_ml,
        urgency=body.urgency,
        required_by=body.required_by,
        delivery_address=body.delivery_address,
        metadata=body.metadata,
    )
    return CreatedResponse(id=request_id)


@router.post("/{request_id}/approve", response_model=RequestResponse)
async def approve_request(
    request_id: int,
    caller: Address = Depends(get_caller),
    ledger: RequestLedger = Depends(get_request_ledger),
):
    return RequestResponse.from_entity(
        await ledger.approve_request(request_id, caller),
    )


@router.post("/{request_id}/cancel", response_model=RequestResponse)
async def cancel_request(
    request_id: int,
    caller: Address = Depends(get_caller),
    ledger: RequestLedger = Depends(get_request_ledger),
):
    return RequestResponse.from_entity(
        await ledger.cancel_request(request_id, caller),
    )


# ─── Indexes ────────────────────────────────────────────────────

@router.get("/by-hospital", response_model=IdListResponse)
async def list_by_hospital(
    hospital: str = Query(..., min_length=1),
    ledger: RequestLedger = Depends(get_request_ledger),
):
    ids = await ledger.list_by_hospital(Address(hospital))
    return IdListResponse(dimension="hospital", key=hospital, ids=ids)


@router.get("/by-status", response_model=IdListResponse)
async def list_by_status(
    request_status: RequestStatus = Query(..., alias="status"),
    ledger: RequestLedger = Depends(get_request_ledger),
):
    ids = await ledger.list_by_status(request_status)
    return IdListResponse(dimension="status", key=request_status.value, ids=ids)


@router.get("/by-blood-type", response_model=IdListResponse)
async def list_by_blood_type(
    blood_type: BloodType = Query(...),
    ledger: RequestLedger = Depends(get_request_ledger),
):
    ids = await ledger.list_by_blood_type(blood_type)
    return IdListResponse(dimension="blood_type", key=blood_type.value, ids=ids)


@router.get("/by-urgency", response_model=IdListResponse)
async def list_by_urgency(
    urgency: UrgencyLevel = Query(...),
    ledger: RequestLedger = Depends(get_request_ledger),
):
    ids = await ledger.list_by_urgency(urgency)
    return IdListResponse(dimension="urgency", key=urgency.value, ids=ids)


@router.get("/{request_id}", response_model=RequestResponse)
async def get_request(
    request_id: int, ledger: RequestLedger = Depends(get_request_ledger),
):
    return RequestResponse.from_entity(await ledger.get_request(request_id))
