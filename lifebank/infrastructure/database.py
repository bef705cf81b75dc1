"""Database Session Manager — async engine for the ledger store, rollback and readiness.

Invariants:
    - Every session auto-rolls-back on exception (no partial commits leak)
    - Connection pool uses pool_pre_ping for stale connection detection
    - SQLAlchemy failures surface as DatabaseError naming the ledger operation that failed;
      LifebankErrors raised inside a session (e.g. DuplicateRecordError) pass through as-is
    - Readiness means the ledger_entries table is reachable, not just the server

Design Decisions:
    - Singleton db_manager initialized on startup: FastAPI lifespan manages lifecycle
    - expire_on_commit=False: prevents lazy-load issues in async context
    - Pool sizing only for server databases: SQLite uses its own single-connection pools
    - Failure mapping is a table checked most-specific first
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import select
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.exc import (
    IntegrityError, OperationalError, DBAPIError, SQLAlchemyError,
)

from lifebank.core.errors import DatabaseError, ErrorContext
from lifebank.db.base import Base
from lifebank.models.ledger_entry import LedgerEntry

logger = logging.getLogger(__name__)

# (failure kind, ledger operation, message); first match wins
_FAILURE_MAP: tuple[tuple[type[SQLAlchemyError], str, str], ...] = (
    (IntegrityError, "commit", "ledger entry constraint violated"),
    (OperationalError, "execute", "ledger store unreachable"),
    (DBAPIError, "query", "ledger store driver error"),
    (SQLAlchemyError, "unknown", "ledger store operation failed"),
)


def to_database_error(exc: SQLAlchemyError) -> DatabaseError:
    """Map a SQLAlchemy failure to the ledger's DatabaseError."""
    for kind, operation, message in _FAILURE_MAP:
        if isinstance(exc, kind):
            break
    return DatabaseError(
        message, operation,
        ErrorContext(
            user_message="The ledger store is temporarily unavailable",
            debug_info={"table": LedgerEntry.__tablename__, "cause": type(exc).__name__},
        ),
    )


class DatabaseSessionManager:
    """Manages async database sessions with pooling, rollback, and readiness checks."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        engine_kwargs: dict = {"pool_pre_ping": True}
        if not database_url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_recycle=3600,
            )
        self.engine = create_async_engine(database_url, **engine_kwargs)
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide session with auto-rollback on exception."""
        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as e:
            await session.rollback()
            error = to_database_error(e)
            logger.error(
                f"Ledger store {error.operation} failed: {e}",
                extra={"error_code": error.code},
            )
            raise error from e
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """True when the ledger_entries table answers a query."""
        try:
            async with self.session() as db:
                await db.execute(select(LedgerEntry.key).limit(1))
            return True
        except Exception as e:
            logger.error(f"Ledger store health check failed: {e}")
            return False

    async def create_schema(self) -> None:
        """Create missing tables (local runs; production uses alembic)."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()


# Singleton (initialized on startup)
db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs):
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions."""
    if not db_manager:
        raise RuntimeError("Database not initialized")
    async with db_manager.session() as session:
        yield session
