"""Metrics protocol used by the dispatch middleware."""

from typing import Protocol

MESSAGE_EVENT_TYPE = "message"
INLINE_QUERY_EVENT_TYPE = "inline"


class BotMetrics(Protocol):
    """Counters recorded for every inbound event."""

    def inc_command(self, command: str) -> None:
        """Count a command that passed the allowlist."""
        ...

    def inc_incoming(self, event_type: str) -> None:
        """Count an inbound event before any filtering."""
        ...

    def inc_outgoing(self, event_type: str) -> None:
        """Count an event whose handler completed successfully."""
        ...
