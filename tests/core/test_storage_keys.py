"""Storage Keys — tests for domain-qualified key construction.

Tests cover:
    - Each key kind has its documented shape
    - Units and requests never share a key for the same ID
    - Keys built from maximum-length addresses fit the key column
"""

from lifebank.core.domain_types import Domain, IndexDimension
from lifebank.core.storage_keys import (
    MAX_ADDRESS_LENGTH, admin_key, allow_list_key, counter_key, index_key, record_key,
)
from lifebank.models.ledger_entry import LedgerEntry


def test_admin_key():
    assert admin_key(Domain.UNITS) == "units:admin"


def test_counter_key():
    assert counter_key(Domain.REQUESTS) == "requests:counter"


def test_record_key():
    assert record_key(Domain.UNITS, 12) == "units:record:12"


def test_allow_list_key():
    assert allow_list_key(Domain.REQUESTS, "hospital-1") == "requests:authorized:hospital-1"


def test_index_key():
    assert index_key(Domain.UNITS, IndexDimension.BLOOD_TYPE, "O-") == "units:index:blood_type:O-"


def test_domains_never_collide():
    assert record_key(Domain.UNITS, 1) != record_key(Domain.REQUESTS, 1)
    assert counter_key(Domain.UNITS) != counter_key(Domain.REQUESTS)
    assert (
        index_key(Domain.UNITS, IndexDimension.STATUS, "expired")
        != index_key(Domain.REQUESTS, IndexDimension.STATUS, "expired")
    )


def test_longest_key_fits_the_key_column():
    address = "a" * MAX_ADDRESS_LENGTH
    keys = [allow_list_key(domain, address) for domain in Domain]
    keys += [
        index_key(domain, dimension, address)
        for domain in Domain for dimension in IndexDimension
    ]
    column_length = LedgerEntry.__table__.c.key.type.length
    assert max(len(key) for key in keys) <= column_length
