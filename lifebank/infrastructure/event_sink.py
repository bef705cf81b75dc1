"""Event Sink — structured log of committed ledger events.

Invariants:
    - publish() is only called after a successful commit
    - events is append-only and preserves publish order

Design Decisions:
    - Logging-backed sink: delivery beyond the process (queues, webhooks) is the
      host's concern; the JSON log line carries the full payload for shipping
"""

import logging

from lifebank.core.events import LedgerEvent

logger = logging.getLogger(__name__)


class LoggingEventSink:
    """Logs each event and keeps an in-process, append-only history."""

    def __init__(self, log_events: bool = True):
        self.log_events = log_events
        self.events: list[LedgerEvent] = []

    def publish(self, event: LedgerEvent) -> None:
        self.events.append(event)
        if self.log_events:
            logger.info(
                f"Ledger event: {event.name}",
                extra={"event": event.name, "payload": event.to_payload()},
            )

    def of_kind(self, name: str) -> list[LedgerEvent]:
        return [event for event in self.events if event.name == name]
