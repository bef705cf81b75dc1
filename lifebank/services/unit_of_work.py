"""Unit of Work — one atomic ledger operation per public call.

Invariants:
    - Success commits every staged write; ANY exception rolls back every staged write
    - Nothing is swallowed: the caller always sees the original exception
    - Rollbacks are logged at DEBUG only; the caller owns reporting the failure
      (the HTTP error handlers log each rejected call once)

Design Decisions:
    - asynccontextmanager mirrors DatabaseSessionManager.session(): same rollback
      discipline, but scoped to the store a service was built with
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from lifebank.core.domain_types import Domain
from lifebank.core.errors import LifebankError
from lifebank.core.repository_protocols import TransactionalStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def ledger_operation(
    store: TransactionalStore, domain: Domain, operation: str,
) -> AsyncGenerator[TransactionalStore, None]:
    """Run the body atomically against `store`."""
    try:
        yield store
    except Exception as e:
        await store.rollback()
        code = e.code if isinstance(e, LifebankError) else type(e).__name__
        logger.debug(
            f"{operation} rolled back",
            extra={"domain": domain.value, "error_code": code},
        )
        raise
    else:
        await store.commit()
