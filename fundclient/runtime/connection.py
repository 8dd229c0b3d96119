# fundclient/runtime/connection.py
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional, Protocol as TypingProtocol, TypeVar

from fundclient.core.errors import ProtocolCommunicationError, ServerDisconnectedError
from fundclient.interfaces.display_sink import DisplaySink
from fundclient.protocol.codec import WireReader
from fundclient.protocol.errors import DecodeError
from fundclient.runtime.state import ConnectionState, ConnectionStatus
from fundclient.transport.base import Transport
from fundclient.transport.errors import TransportError

T = TypeVar("T")

LOST_CONNECTION_NOTICE = "Lost connection to server. Trying to reconnect..."


class RetryPolicy(TypingProtocol):
    def delay_for(self, attempt: int) -> float: ...


@dataclass(frozen=True)
class FixedDelay:
    """Same delay before every reconnect attempt, forever."""
    seconds: float = 2.0

    def delay_for(self, attempt: int) -> float:
        return self.seconds


class ConnectionManager:
    """
    Owns the single connection to the server.

    States:
      - DISCONNECTED: nothing opened yet, or close() was called
      - CONNECTED: a transport is open and usable
      - RECONNECTING: last attempt or exchange failed at transport level;
        the next attempt waits retry_policy.delay_for(n) first

    Reconnecting never gives up on its own. Transport faults close the
    transport before the state changes, so no descriptor outlives its attempt.
    """

    def __init__(
        self,
        transport_factory: Callable[[], Transport],
        *,
        endpoint: str = "",
        retry_policy: Optional[RetryPolicy] = None,
        sleep: Callable[[float], None] = time.sleep,
        display: Optional[DisplaySink] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._factory = transport_factory
        self._endpoint = endpoint
        self._retry = retry_policy or FixedDelay()
        self._sleep = sleep
        self._display = display
        self._log = logger or logging.getLogger(__name__)

        self._transport: Optional[Transport] = None
        self._state = ConnectionState.DISCONNECTED
        self._attempts = 0
        self._last_error: Optional[str] = None

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def is_connected(self) -> bool:
        return self._state is ConnectionState.CONNECTED and self._transport is not None

    def status(self) -> ConnectionStatus:
        return ConnectionStatus(
            state=self._state,
            endpoint=self._endpoint,
            attempts=self._attempts,
            last_error=self._last_error,
        )

    # ---------------- lifecycle ----------------
    def ensure_connected(self) -> Transport:
        """Block until a transport is open, retrying forever."""
        while self._transport is None:
            if self._state is ConnectionState.RECONNECTING:
                delay = self._retry.delay_for(self._attempts)
                self._log.info("RECONNECT_WAIT delay_s=%.2f attempt=%d", delay, self._attempts + 1)
                if delay > 0:
                    self._sleep(delay)

            self._attempts += 1
            transport = self._factory()
            try:
                transport.open()
            except TransportError as e:
                self._close_quietly(transport)
                self._enter_reconnecting(str(e))
                continue

            self._transport = transport
            self._state = ConnectionState.CONNECTED
            self._log.info("CONNECT_OK endpoint=%s attempts=%d", transport.describe(), self._attempts)
            self._attempts = 0
            self._last_error = None

        return self._transport

    def close(self) -> None:
        if self._transport is not None:
            self._close_quietly(self._transport)
            self._transport = None
            self._log.info("CONNECTION_CLOSED endpoint=%s", self._endpoint)
        self._state = ConnectionState.DISCONNECTED

    def __enter__(self) -> "ConnectionManager":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ---------------- exchange ----------------
    def exchange(self, request: bytes, read_response: Callable[[WireReader], T], *, label: str = "request") -> T:
        """
        Write one request and read its full response.

        Transport faults drop the connection, reconnect (blocking) and raise
        ServerDisconnectedError; the request is not resent. Decode faults close
        the connection and raise ProtocolCommunicationError.
        """
        transport = self.ensure_connected()
        try:
            transport.write(request)
            return read_response(WireReader(transport))
        except TransportError as e:
            self._log.warning("TRANSPORT_FAULT cmd=%s err=%s", label, e)
            self._drop(transport)
            self._enter_reconnecting(str(e))
            self.ensure_connected()
            raise ServerDisconnectedError(
                f"Connection lost during {label}; the request was not completed.",
                hint="Reconnected. Repeat the action if needed.",
                details={"cmd": label, "error": str(e)},
            ) from None
        except DecodeError as e:
            self._log.exception("DECODE_FAILED cmd=%s", label)
            self._drop(transport)
            self._state = ConnectionState.DISCONNECTED
            self._last_error = str(e)
            raise ProtocolCommunicationError(
                f"Could not decode the server response to {label}.",
                hint=str(e),
                details={"cmd": label, "endpoint": self._endpoint},
            ) from None

    # ---------------- internals ----------------
    def _drop(self, transport: Transport) -> None:
        self._close_quietly(transport)
        if self._transport is transport:
            self._transport = None

    def _enter_reconnecting(self, reason: str) -> None:
        first = self._state is not ConnectionState.RECONNECTING
        self._state = ConnectionState.RECONNECTING
        self._last_error = reason
        level = logging.WARNING if first else logging.DEBUG
        self._log.log(level, "CONNECTION_DOWN endpoint=%s attempt=%d err=%s", self._endpoint, self._attempts, reason)
        if first and self._display is not None:
            self._display.show(LOST_CONNECTION_NOTICE)

    def _close_quietly(self, transport: Transport) -> None:
        try:
            transport.close()
        except Exception:
            self._log.exception("Failed to close transport")
