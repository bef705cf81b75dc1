"""Unit Registration Enforcement — validates blood unit inputs and invariants.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no clock reads (now is an argument)
    - Return the error instance on violation, None on success
    - Quantity is checked before expiration: callers see the first violated rule
    - Shelf life is ONE rule: MIN_SHELF_LIFE_SECONDS <= expiration - now <= MAX_SHELF_LIFE_SECONDS

Design Decisions:
    - The "expiration in the future" and "minimum shelf life" checks are unified into a
      single inclusive window so the boundary is stated once (now + 1 day is the first
      accepted expiration, now + 42 days the last)
    - Return errors (not raise): the service decides when to raise, keeping every
      check evaluable before any mutation
"""

from lifebank.core.domain_types import SECONDS_PER_DAY
from lifebank.core.entities import BloodUnit
from lifebank.core.errors import (
    InvalidExpirationError, InvalidQuantityError, LifebankError,
)


MIN_UNIT_QUANTITY_ML: int = 100
MAX_UNIT_QUANTITY_ML: int = 600
MAX_SHELF_LIFE_DAYS: int = 42
MAX_SHELF_LIFE_SECONDS: int = MAX_SHELF_LIFE_DAYS * SECONDS_PER_DAY
MIN_SHELF_LIFE_SECONDS: int = SECONDS_PER_DAY


def check_quantity(quantity_ml: int) -> LifebankError | None:
    """Whole-blood donations are 100–600 ml inclusive."""
    if quantity_ml < MIN_UNIT_QUANTITY_ML or quantity_ml > MAX_UNIT_QUANTITY_ML:
        return InvalidQuantityError(
            quantity_ml, MIN_UNIT_QUANTITY_ML, MAX_UNIT_QUANTITY_ML,
        )
    return None


def check_expiration(now: int, expiration_timestamp: int) -> LifebankError | None:
    """Remaining shelf life at registration must be between 1 and 42 days inclusive."""
    if expiration_timestamp <= now:
        return InvalidExpirationError(
            f"expiration {expiration_timestamp} is not after current time {now}",
        )

    remaining = expiration_timestamp - now
    if remaining > MAX_SHELF_LIFE_SECONDS:
        return InvalidExpirationError(
            f"shelf life of {remaining}s exceeds the {MAX_SHELF_LIFE_DAYS}-day maximum",
        )

    if remaining < MIN_SHELF_LIFE_SECONDS:
        return InvalidExpirationError(
            f"remaining shelf life of {remaining}s is below the "
            f"{MIN_SHELF_LIFE_SECONDS}s minimum",
        )

    return None


def validate_unit_registration(
    now: int, quantity_ml: int, expiration_timestamp: int,
) -> LifebankError | None:
    """Composite input check for register_unit. First violation wins."""
    for error in (
        check_quantity(quantity_ml),
        check_expiration(now, expiration_timestamp),
    ):
        if error:
            return error
    return None


def validate_unit(unit: BloodUnit, now: int) -> LifebankError | None:
    """Whole-entity invariants, run on the constructed unit before persisting."""
    error = check_quantity(unit.quantity_ml)
    if error:
        return error

    if unit.expiration_timestamp <= unit.donation_timestamp:
        return InvalidExpirationError("expiration is not after donation")

    if unit.shelf_life_seconds > MAX_SHELF_LIFE_SECONDS:
        return InvalidExpirationError(
            f"shelf life exceeds the {MAX_SHELF_LIFE_DAYS}-day maximum",
        )

    return check_expiration(now, unit.expiration_timestamp)
