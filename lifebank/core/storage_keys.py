"""Storage Keys — domain-qualified key construction for the key/value substrate.

Invariants:
    - Every key starts with the domain value: units and requests never collide
    - Record keys are built from the numeric ID only
    - Index keys are "{domain}:index:{dimension}:{value}"
    - Addresses embedded in keys are at most MAX_ADDRESS_LENGTH characters, so the
      longest key fits the ledger_entries.key column
"""

from lifebank.core.domain_types import Domain, IndexDimension


MAX_ADDRESS_LENGTH: int = 200


def admin_key(domain: Domain) -> str:
    return f"{domain.value}:admin"


def counter_key(domain: Domain) -> str:
    return f"{domain.value}:counter"


def record_key(domain: Domain, record_id: int) -> str:
    return f"{domain.value}:record:{record_id}"


def allow_list_key(domain: Domain, address: str) -> str:
    return f"{domain.value}:authorized:{address}"


def index_key(domain: Domain, dimension: IndexDimension, value: str) -> str:
    return f"{domain.value}:index:{dimension.value}:{value}"
