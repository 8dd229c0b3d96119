# fundclient/runtime/state.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from fundclient.protocol.errors import EventIndexError
from fundclient.protocol.messages import EventListing


class ConnectionState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTED = "connected"
    RECONNECTING = "reconnecting"


@dataclass(frozen=True)
class ConnectionStatus:
    """
    Snapshot of the connection manager.
    """
    state: ConnectionState
    endpoint: str
    attempts: int = 0
    last_error: Optional[str] = None


@dataclass
class SessionState:
    """
    Client-local cache shared by all exchanges of one process run.

    last_known_event_count is written only by a successful LIST_EVENTS
    exchange. It may be stale relative to the server; index-bound requests are
    checked against it anyway.
    """
    last_known_event_count: int = 0
    last_listing: Optional[EventListing] = None

    def record_listing(self, listing: EventListing) -> None:
        self.last_known_event_count = listing.count
        self.last_listing = listing

    @property
    def has_events(self) -> bool:
        return self.last_known_event_count > 0

    def valid_positions(self) -> Tuple[int, int]:
        """1-based inclusive range accepted by prompts; (1, 0) when empty."""
        return 1, self.last_known_event_count

    def check_index(self, cmd: str, index: int) -> None:
        if not (0 <= index < self.last_known_event_count):
            raise EventIndexError(cmd, index, self.last_known_event_count)
