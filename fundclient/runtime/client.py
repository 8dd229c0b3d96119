from __future__ import annotations

import itertools
import logging
import math
import time
from datetime import date
from typing import Any, Callable, Optional, Protocol as TypingProtocol, TypeVar

from fundclient.core.errors import ProtocolCommunicationError, ServerDisconnectedError
from fundclient.interfaces.command_sink import CommandEvent, CommandSink
from fundclient.protocol.codec import WireReader
from fundclient.protocol.errors import EventIndexError
from fundclient.protocol.messages import (
    CheckDetailsRequest,
    CreateEventRequest,
    DonateRequest,
    EventDetails,
    EventListing,
    ListEventsRequest,
    Request,
)
from fundclient.runtime.state import SessionState

T = TypeVar("T")


class RequestChannel(TypingProtocol):
    """Minimal exchange interface for FundraiserClient."""
    def exchange(self, request: bytes, read_response: Callable[[WireReader], T], *, label: str = ...) -> T: ...


class FundraiserClient:
    """
    User-facing API over one request/response channel.

    Keeps the session cache: LIST_EVENTS refreshes it, DONATE and
    CHECK_DETAILS are checked against it before anything is written.
    """

    def __init__(
        self,
        channel: RequestChannel,
        *,
        state: Optional[SessionState] = None,
        cmd_sink: Optional[CommandSink] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._channel = channel
        self._state = state if state is not None else SessionState()
        self._cmd_sink = cmd_sink
        self._log = logger or logging.getLogger(__name__)
        self._seq = itertools.count(1)

    @property
    def state(self) -> SessionState:
        return self._state

    # ---------------- commands ----------------
    def create_event(self, name: str, target: float, deadline: date) -> str:
        if not name or not name.strip():
            raise ValueError("event name must not be empty")
        _require_positive("target", target)
        resp = self._send(CreateEventRequest(name=name, target=float(target), deadline=deadline))
        return resp.text

    def list_events(self) -> EventListing:
        listing = self._send(ListEventsRequest())
        self._state.record_listing(listing)
        self._log.info(
            "EVENTS_LISTED count=%d current=%d past=%d",
            listing.count, len(listing.current), len(listing.past),
        )
        return listing

    def donate(self, index: int, amount: float) -> str:
        self._check_index(DonateRequest.command, index)
        _require_positive("amount", amount)
        resp = self._send(DonateRequest(index=int(index), amount=float(amount)))
        return resp.text

    def check_details(self, index: int) -> EventDetails:
        self._check_index(CheckDetailsRequest.command, index)
        return self._send(CheckDetailsRequest(index=int(index)))

    # ---------------- internals ----------------
    def _check_index(self, cmd: str, index: int) -> None:
        try:
            self._state.check_index(cmd, index)
        except EventIndexError as e:
            self._log.warning("CMD_REJECTED_LOCAL cmd=%s index=%d count=%d", cmd, index, e.count)
            self._emit(cmd, "rejected_local", {"index": index, "count": e.count})
            raise

    def _send(self, request: Request) -> Any:
        cmd = request.command
        raw = request.encode()
        self._log.debug("SENDING_REQUEST cmd=%s len=%d", cmd, len(raw))

        t0 = time.perf_counter()
        try:
            resp = self._channel.exchange(raw, request.response.read_from, label=cmd)
        except ServerDisconnectedError as e:
            self._emit(cmd, "transport_error", {"args": request.args(), "error": str(e.details.get("error", e))}, t0)
            raise
        except ProtocolCommunicationError as e:
            self._emit(cmd, "decode_error", {"args": request.args(), "error": e.hint}, t0)
            raise

        self._emit(cmd, "ok", {"args": request.args()}, t0)
        return resp

    def _emit(self, cmd: str, kind: str, payload: dict, t0: Optional[float] = None) -> None:
        if self._cmd_sink is None:
            return

        payload = dict(payload)
        if t0 is not None:
            payload["rtt_ms"] = (time.perf_counter() - t0) * 1000.0

        try:
            self._cmd_sink.on_command(
                CommandEvent(name=cmd, kind=kind, payload=payload, request_id=str(next(self._seq)))
            )
        except Exception:
            self._log.exception("CMD_SINK_ERROR cmd=%s", cmd)


def _require_positive(field: str, value: float) -> None:
    if not (isinstance(value, (int, float)) and math.isfinite(value) and value > 0):
        raise ValueError(f"{field} must be a positive number, got {value!r}")
