"""
Request / response variants of the fundraiser protocol.

Every exchange is one request followed by exactly one response on the same
connection. A request starts with its command name as text, followed by the
fields listed in ``fields`` in order. Responses carry no tags, so the reader
has to know which variant it expects; each request names it in ``response``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import ClassVar, Dict, Tuple

from .codec import WireReader, WireWriter
from .errors import DecodeError
from .types import DATE, TEXT

Field = Tuple[str, str]  # (attribute name, wire type)

CREATE_EVENT = "CREATE_EVENT"
LIST_EVENTS = "LIST_EVENTS"
DONATE = "DONATE"
CHECK_DETAILS = "CHECK_DETAILS"
EXIT = "EXIT"  # local only, never sent


# ---------------------------
# Responses
# ---------------------------

@dataclass(frozen=True)
class MessageResponse:
    """Free-form confirmation or rejection text, shown verbatim."""
    text: str

    @classmethod
    def read_from(cls, reader: WireReader) -> "MessageResponse":
        return cls(text=reader.read_text())


@dataclass(frozen=True)
class EventSummary:
    position: int  # 1-based position in the listing stream
    is_current: bool
    name: str
    target: float
    raised: float
    deadline: date

    fields: ClassVar[Tuple[Field, ...]] = (
        ("is_current", "bool"),
        ("name", TEXT),
        ("target", "float64"),
        ("raised", "float64"),
        ("deadline", DATE),
    )

    @property
    def index(self) -> int:
        """Zero-based wire index."""
        return self.position - 1


@dataclass(frozen=True)
class EventListing:
    events: Tuple[EventSummary, ...] = ()

    @property
    def count(self) -> int:
        return len(self.events)

    @property
    def current(self) -> Tuple[EventSummary, ...]:
        return tuple(e for e in self.events if e.is_current)

    @property
    def past(self) -> Tuple[EventSummary, ...]:
        return tuple(e for e in self.events if not e.is_current)

    @classmethod
    def read_from(cls, reader: WireReader) -> "EventListing":
        count = reader.read_int32()
        if count < 0:
            raise DecodeError(f"negative event count {count}")

        events = []
        for position in range(1, count + 1):
            values = reader.read_fields(EventSummary.fields)
            events.append(EventSummary(position=position, **values))
        return cls(events=tuple(events))


@dataclass(frozen=True)
class EventDetails:
    name: str
    target: float
    raised: float
    deadline: date

    fields: ClassVar[Tuple[Field, ...]] = (
        ("name", TEXT),
        ("target", "float64"),
        ("raised", "float64"),
        ("deadline", DATE),
    )

    @classmethod
    def read_from(cls, reader: WireReader) -> "EventDetails":
        return cls(**reader.read_fields(cls.fields))


# ---------------------------
# Requests
# ---------------------------

@dataclass(frozen=True)
class Request:
    command: ClassVar[str]
    fields: ClassVar[Tuple[Field, ...]] = ()
    response: ClassVar[type]

    def encode(self) -> bytes:
        w = WireWriter().write_text(self.command)
        for name, ftype in self.fields:
            w.write_field(ftype, getattr(self, name))
        return w.getvalue()

    def args(self) -> Dict[str, object]:
        return {name: getattr(self, name) for name, _ in self.fields}


@dataclass(frozen=True)
class CreateEventRequest(Request):
    name: str
    target: float
    deadline: date

    command: ClassVar[str] = CREATE_EVENT
    fields: ClassVar[Tuple[Field, ...]] = (
        ("name", TEXT),
        ("target", "float64"),
        ("deadline", DATE),
    )
    response: ClassVar[type] = MessageResponse


@dataclass(frozen=True)
class ListEventsRequest(Request):
    command: ClassVar[str] = LIST_EVENTS
    response: ClassVar[type] = EventListing


@dataclass(frozen=True)
class DonateRequest(Request):
    index: int
    amount: float

    command: ClassVar[str] = DONATE
    fields: ClassVar[Tuple[Field, ...]] = (
        ("index", "int32"),
        ("amount", "float64"),
    )
    response: ClassVar[type] = MessageResponse


@dataclass(frozen=True)
class CheckDetailsRequest(Request):
    index: int

    command: ClassVar[str] = CHECK_DETAILS
    fields: ClassVar[Tuple[Field, ...]] = (("index", "int32"),)
    response: ClassVar[type] = EventDetails
