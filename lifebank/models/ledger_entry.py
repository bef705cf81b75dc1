"""LedgerEntry ORM — one key/value pair of the persistent ledger substrate.

Invariants:
    - key is the primary key; built only by core/storage_keys.py
    - value is JSON: counters (int), admin/flags (str/bool), records (dict), buckets (list)
    - updated_at refreshed on every write

Design Decisions:
    - Single generic table over one table per entity: the ledger treats storage as an
      opaque point-lookup map, so records, counters and index buckets share one shape
"""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import String, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column

from lifebank.db.base import Base

# Room for the longest domain/index prefix plus a MAX_ADDRESS_LENGTH address
LEDGER_KEY_LENGTH = 512


class LedgerEntry(Base):
    """A single key -> JSON value pair."""
    __tablename__ = "ledger_entries"

    key: Mapped[str] = mapped_column(String(LEDGER_KEY_LENGTH), primary_key=True)
    value: Mapped[Any] = mapped_column(JSON, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
