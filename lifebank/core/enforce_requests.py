"""Request Enforcement — validates blood request inputs, deadlines, and invariants.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no clock reads (now is an argument)
    - Return the error instance on violation, None on success
    - Creation checks run in a fixed order: quantity -> delivery address -> deadline
    - URGENCY_WINDOWS is the single source of truth for lead-time bounds
    - Expiry (check_not_expired) is a temporal fact, checked apart from status legality

Design Decisions:
    - Windows are (min, max) pairs per priority weight; all share the 30-day ceiling today,
      but the max is kept per level so a tighter ceiling is a one-line change
    - A deadline equal to `now` counts as passed: approval requires required_by to be
      strictly in the future
"""

from lifebank.core.domain_types import SECONDS_PER_DAY, SECONDS_PER_HOUR, UrgencyLevel
from lifebank.core.entities import BloodRequest
from lifebank.core.errors import (
    ExpiredError, InvalidDeliveryAddressError, InvalidQuantityError,
    InvalidRequiredByError, LifebankError,
)


MIN_REQUEST_QUANTITY_ML: int = 100
MAX_REQUEST_QUANTITY_ML: int = 10_000
MAX_LEAD_TIME_DAYS: int = 30
MAX_LEAD_TIME_SECONDS: int = MAX_LEAD_TIME_DAYS * SECONDS_PER_DAY

# Keyed by UrgencyLevel.priority_weight: higher weight, shorter minimum lead time
URGENCY_WINDOWS: dict[int, tuple[int, int]] = {
    UrgencyLevel.CRITICAL.priority_weight: (1 * SECONDS_PER_HOUR, MAX_LEAD_TIME_SECONDS),
    UrgencyLevel.URGENT.priority_weight: (4 * SECONDS_PER_HOUR, MAX_LEAD_TIME_SECONDS),
    UrgencyLevel.NORMAL.priority_weight: (24 * SECONDS_PER_HOUR, MAX_LEAD_TIME_SECONDS),
}


def check_quantity(quantity_ml: int) -> LifebankError | None:
    """Requests may ask for 100–10000 ml inclusive."""
    if quantity_ml < MIN_REQUEST_QUANTITY_ML or quantity_ml > MAX_REQUEST_QUANTITY_ML:
        return InvalidQuantityError(
            quantity_ml, MIN_REQUEST_QUANTITY_ML, MAX_REQUEST_QUANTITY_ML,
        )
    return None


def check_delivery_address(delivery_address: str) -> LifebankError | None:
    if not delivery_address or not delivery_address.strip():
        return InvalidDeliveryAddressError()
    return None


def check_required_by(
    now: int, required_by: int, urgency: UrgencyLevel,
) -> LifebankError | None:
    """Deadline must be in the future and inside the urgency window."""
    if required_by <= now:
        return InvalidRequiredByError(
            f"deadline {required_by} is not after current time {now}",
        )

    minimum, maximum = URGENCY_WINDOWS[urgency.priority_weight]
    lead_time = required_by - now
    if lead_time < minimum:
        return InvalidRequiredByError(
            f"{urgency.value} requests need at least {minimum}s of lead time, "
            f"got {lead_time}s",
        )
    if lead_time > maximum:
        return InvalidRequiredByError(
            f"lead time of {lead_time}s exceeds the {maximum}s maximum",
        )
    return None


def validate_request_creation(
    now: int,
    quantity_ml: int,
    urgency: UrgencyLevel,
    required_by: int,
    delivery_address: str,
) -> LifebankError | None:
    """Composite input check for create_request. First violation wins."""
    for error in (
        check_quantity(quantity_ml),
        check_delivery_address(delivery_address),
        check_required_by(now, required_by, urgency),
    ):
        if error:
            return error
    return None


def validate_request(request: BloodRequest, now: int) -> LifebankError | None:
    """Whole-entity invariants, run on the constructed request before persisting."""
    error = check_quantity(request.quantity_ml) or check_delivery_address(
        request.delivery_address,
    )
    if error:
        return error

    if request.required_by <= request.created_at:
        return InvalidRequiredByError("deadline is not after creation time")

    return check_required_by(now, request.required_by, request.urgency)


def check_not_expired(now: int, required_by: int) -> LifebankError | None:
    """Time-sensitive operations need required_by strictly in the future."""
    if now >= required_by:
        return ExpiredError(required_by, now)
    return None
