"""Ledger Clocks — the single source of "now" for relative-time validation.

Invariants:
    - now() returns integer unix seconds (UTC)
    - Services read the clock once per operation and pass the value into pure checks

Design Decisions:
    - ManualClock is host-controlled time: tests and replay tooling set or advance it
      instead of patching datetime
"""

from datetime import datetime, timezone


class SystemClock:
    """Wall-clock time in UTC unix seconds."""

    def now(self) -> int:
        return int(datetime.now(timezone.utc).timestamp())


class ManualClock:
    """Clock whose time only moves when told to."""

    def __init__(self, start: int = 0):
        self._now = start

    def now(self) -> int:
        return self._now

    def set(self, timestamp: int) -> None:
        self._now = timestamp

    def advance(self, seconds: int) -> None:
        self._now += seconds
