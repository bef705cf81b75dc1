"""Access Control — tests for admin bootstrap and the allow-list.

Tests cover:
    - initialize succeeds once, requires the admin to be the caller
    - reads before initialization raise NOT_INITIALIZED
    - admin is implicitly authorized
    - only the admin may authorize/revoke; revoke takes effect immediately
"""

import pytest

from lifebank.core.domain_types import Address, Domain
from lifebank.core.errors import (
    AlreadyInitializedError, NotInitializedError, UnauthorizedError,
)
from lifebank.services.access_control import AccessControl

ADMIN = Address("admin")
BANK = Address("bank-1")


@pytest.fixture
async def access(store):
    access = AccessControl(store, Domain.UNITS)
    await access.initialize(ADMIN, ADMIN)
    return access


# ─── Bootstrap ──────────────────────────────────────────────────

async def test_uninitialized_admin_read_raises(store):
    with pytest.raises(NotInitializedError):
        await AccessControl(store, Domain.UNITS).get_admin()


async def test_uninitialized_allow_list_read_raises(store):
    with pytest.raises(NotInitializedError):
        await AccessControl(store, Domain.UNITS).is_authorized(BANK)


async def test_initialize_sets_admin(access):
    assert await access.get_admin() == ADMIN
    assert await access.is_initialized()


async def test_initialize_twice_rejected(access):
    with pytest.raises(AlreadyInitializedError):
        await access.initialize(Address("other"), Address("other"))


async def test_initialize_requires_admin_as_caller(store):
    with pytest.raises(UnauthorizedError):
        await AccessControl(store, Domain.UNITS).initialize(ADMIN, Address("mallory"))


async def test_domains_initialize_independently(access, store):
    assert not await AccessControl(store, Domain.REQUESTS).is_initialized()


# ─── Allow-list ─────────────────────────────────────────────────

async def test_admin_is_authorized(access):
    assert await access.is_authorized(ADMIN)


async def test_unknown_address_not_authorized(access):
    assert not await access.is_authorized(BANK)


async def test_authorize_then_revoke(access):
    await access.authorize(BANK, ADMIN)
    assert await access.is_authorized(BANK)
    await access.revoke(BANK, ADMIN)
    assert not await access.is_authorized(BANK)


async def test_non_admin_cannot_authorize(access):
    with pytest.raises(UnauthorizedError):
        await access.authorize(BANK, BANK)


async def test_require_admin(access):
    assert await access.require_admin(ADMIN) == ADMIN
    with pytest.raises(UnauthorizedError):
        await access.require_admin(BANK)
