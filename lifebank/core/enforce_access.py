"""Access Enforcement — pure checks on host-verified caller identities.

Invariants:
    - The host has already verified `caller`; these checks only compare identities
    - Return the error instance on violation, None on success
    - The admin always passes owner-or-admin checks
"""

from lifebank.core.domain_types import Address
from lifebank.core.errors import LifebankError, UnauthorizedError


def check_caller(caller: Address, required: Address, role: str) -> LifebankError | None:
    """The verified caller must BE the identity the operation acts for."""
    if caller != required:
        return UnauthorizedError(caller, role)
    return None


def check_owner_or_admin(
    caller: Address, owner: Address, admin: Address,
) -> LifebankError | None:
    if caller != owner and caller != admin:
        return UnauthorizedError(caller, "the owning hospital or the admin")
    return None
