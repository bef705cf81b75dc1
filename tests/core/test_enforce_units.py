"""Unit Enforcement — tests for pure blood unit validation.

Tests cover:
    - Quantity range 100..600 ml inclusive
    - Expiration must be after now
    - Shelf-life window: > 1 day and <= 42 days from now (both boundaries)
    - validate_unit_registration reports quantity before expiration
    - validate_unit checks the constructed entity
"""

from lifebank.core.domain_types import Address, BloodType
from lifebank.core.entities import BloodUnit
from lifebank.core.enforce_units import (
    MAX_SHELF_LIFE_SECONDS, MAX_UNIT_QUANTITY_ML, MIN_SHELF_LIFE_SECONDS,
    MIN_UNIT_QUANTITY_ML, check_expiration, check_quantity,
    validate_unit, validate_unit_registration,
)

NOW = 1_000_000
DAY = 86_400


# ─── check_quantity ──────────────────────────────────────────────

def test_quantity_bounds_are_inclusive():
    assert check_quantity(MIN_UNIT_QUANTITY_ML) is None
    assert check_quantity(MAX_UNIT_QUANTITY_ML) is None


def test_quantity_below_minimum_rejected():
    error = check_quantity(99)
    assert error.code == "INVALID_QUANTITY"


def test_quantity_above_maximum_rejected():
    assert check_quantity(601).code == "INVALID_QUANTITY"


def test_quantity_zero_rejected():
    assert check_quantity(0).code == "INVALID_QUANTITY"


# ─── check_expiration ────────────────────────────────────────────

def test_expiration_in_past_rejected():
    assert check_expiration(NOW, NOW - 1).code == "INVALID_EXPIRATION"


def test_expiration_equal_to_now_rejected():
    assert check_expiration(NOW, NOW).code == "INVALID_EXPIRATION"


def test_expiration_exactly_one_day_accepted():
    assert check_expiration(NOW, NOW + MIN_SHELF_LIFE_SECONDS) is None


def test_expiration_one_second_short_of_a_day_rejected():
    assert check_expiration(NOW, NOW + DAY - 1).code == "INVALID_EXPIRATION"


def test_expiration_just_over_one_day_accepted():
    assert check_expiration(NOW, NOW + DAY + 1) is None


def test_expiration_exactly_42_days_accepted():
    assert check_expiration(NOW, NOW + MAX_SHELF_LIFE_SECONDS) is None


def test_expiration_over_42_days_rejected():
    assert check_expiration(NOW, NOW + 42 * DAY + 1).code == "INVALID_EXPIRATION"


def test_expiration_typical_35_days_accepted():
    assert check_expiration(NOW, NOW + 35 * DAY) is None


# ─── validate_unit_registration ──────────────────────────────────

def test_registration_valid():
    assert validate_unit_registration(NOW, 450, NOW + 35 * DAY) is None


def test_registration_quantity_checked_first():
    error = validate_unit_registration(NOW, 50, NOW - 1)
    assert error.code == "INVALID_QUANTITY"


def test_registration_expiration_error():
    error = validate_unit_registration(NOW, 450, NOW + DAY // 2)
    assert error.code == "INVALID_EXPIRATION"


# ─── validate_unit ───────────────────────────────────────────────

def _unit(**overrides) -> BloodUnit:
    fields = dict(
        id=1, blood_type=BloodType.B_POSITIVE, quantity_ml=450,
        bank_id=Address("bank-1"), donor_id=None,
        donation_timestamp=NOW, expiration_timestamp=NOW + 35 * DAY,
    )
    fields.update(overrides)
    return BloodUnit(**fields)


def test_validate_unit_valid():
    assert validate_unit(_unit(), NOW) is None


def test_validate_unit_rejects_bad_quantity():
    assert validate_unit(_unit(quantity_ml=700), NOW).code == "INVALID_QUANTITY"


def test_validate_unit_rejects_expiration_before_donation():
    unit = _unit(donation_timestamp=NOW + 10, expiration_timestamp=NOW + 5)
    assert validate_unit(unit, NOW).code == "INVALID_EXPIRATION"


def test_validate_unit_rejects_long_shelf_life():
    unit = _unit(donation_timestamp=NOW - 2 * DAY, expiration_timestamp=NOW + 41 * DAY)
    assert validate_unit(unit, NOW).code == "INVALID_EXPIRATION"
