"""Unit of Work — tests for ledger_operation commit/rollback discipline.

Tests cover:
    - success commits staged writes
    - a LifebankError rolls back and re-raises the same error
    - any other exception rolls back and re-raises
    - rollbacks log at DEBUG only
"""

import logging

import pytest

from lifebank.core.domain_types import Domain
from lifebank.core.errors import InvalidDeliveryAddressError
from lifebank.services.unit_of_work import ledger_operation


async def test_success_commits(store):
    async with ledger_operation(store, Domain.UNITS, "test"):
        await store.set("units:counter", 1)
    assert store.snapshot() == {"units:counter": 1}


async def test_ledger_error_rolls_back(store):
    error = InvalidDeliveryAddressError()
    with pytest.raises(InvalidDeliveryAddressError) as exc_info:
        async with ledger_operation(store, Domain.REQUESTS, "test"):
            await store.set("requests:counter", 1)
            raise error
    assert exc_info.value is error
    assert store.snapshot() == {}
    assert await store.get("requests:counter") is None


async def test_unexpected_error_rolls_back(store):
    with pytest.raises(RuntimeError):
        async with ledger_operation(store, Domain.UNITS, "test"):
            await store.set("units:counter", 1)
            raise RuntimeError("boom")
    assert await store.get("units:counter") is None


async def test_rollback_keeps_earlier_commits(store):
    async with ledger_operation(store, Domain.UNITS, "first"):
        await store.set("units:counter", 1)
    with pytest.raises(RuntimeError):
        async with ledger_operation(store, Domain.UNITS, "second"):
            await store.set("units:counter", 2)
            raise RuntimeError("boom")
    assert await store.get("units:counter") == 1


async def test_rejection_is_not_logged_above_debug(store, caplog):
    with caplog.at_level(logging.DEBUG, logger="lifebank.services.unit_of_work"):
        with pytest.raises(InvalidDeliveryAddressError):
            async with ledger_operation(store, Domain.REQUESTS, "create_request"):
                raise InvalidDeliveryAddressError()
    [record] = caplog.records
    assert record.levelno == logging.DEBUG
    assert record.error_code == "INVALID_DELIVERY_ADDRESS"
