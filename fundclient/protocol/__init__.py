# protocol/__init__.py

from .codec import BufferSource, WireReader, WireWriter, date_to_epoch_ms, epoch_ms_to_date
from .errors import DecodeError, EncodeError, EventIndexError, ProtocolError
from .messages import (
    CheckDetailsRequest,
    CreateEventRequest,
    DonateRequest,
    EventDetails,
    EventListing,
    EventSummary,
    ListEventsRequest,
    MessageResponse,
    Request,
)

__all__ = [
    "WireWriter", "WireReader", "BufferSource", "date_to_epoch_ms", "epoch_ms_to_date",
    "ProtocolError", "EncodeError", "DecodeError", "EventIndexError",
    "Request", "CreateEventRequest", "ListEventsRequest", "DonateRequest", "CheckDetailsRequest",
    "MessageResponse", "EventListing", "EventSummary", "EventDetails",
]
