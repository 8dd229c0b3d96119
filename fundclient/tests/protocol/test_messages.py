from __future__ import annotations

import struct
from datetime import date

import pytest

from fundclient.protocol.codec import BufferSource, WireReader, WireWriter, date_to_epoch_ms
from fundclient.protocol.errors import DecodeError
from fundclient.protocol.messages import (
    CheckDetailsRequest,
    CreateEventRequest,
    DonateRequest,
    EventDetails,
    EventListing,
    ListEventsRequest,
    MessageResponse,
)


def _listing_bytes(entries) -> bytes:
    w = WireWriter().write_int32(len(entries))
    for is_current, name, target, raised, deadline in entries:
        w.write_bool(is_current).write_text(name).write_float64(target).write_float64(raised).write_date(deadline)
    return w.getvalue()


def test_create_event_request_field_order():
    raw = CreateEventRequest(name="Charity Run", target=500.0, deadline=date(2025, 12, 25)).encode()
    expected = (
        b"\x00\x0cCREATE_EVENT"
        + b"\x00\x0bCharity Run"
        + struct.pack(">d", 500.0)
        + struct.pack(">q", date_to_epoch_ms(date(2025, 12, 25)))
    )
    assert raw == expected


def test_list_events_request_is_name_only():
    assert ListEventsRequest().encode() == b"\x00\x0bLIST_EVENTS"


def test_donate_request_field_order():
    raw = DonateRequest(index=2, amount=10.0).encode()
    assert raw == b"\x00\x06DONATE" + struct.pack(">i", 2) + struct.pack(">d", 10.0)


def test_check_details_request_field_order():
    raw = CheckDetailsRequest(index=0).encode()
    assert raw == b"\x00\x0dCHECK_DETAILS" + struct.pack(">i", 0)


def test_each_request_names_its_response_type():
    assert CreateEventRequest.response is MessageResponse
    assert ListEventsRequest.response is EventListing
    assert DonateRequest.response is MessageResponse
    assert CheckDetailsRequest.response is EventDetails


def test_request_args_follow_fields():
    req = DonateRequest(index=1, amount=2.5)
    assert req.args() == {"index": 1, "amount": 2.5}
    assert ListEventsRequest().args() == {}


def test_listing_decodes_positions_in_arrival_order():
    raw = _listing_bytes(
        [
            (False, "Old Drive", 100.0, 100.0, date(2020, 1, 1)),
            (True, "Charity Run", 500.0, 0.0, date(2025, 12, 25)),
            (True, "Food Bank", 250.0, 30.5, date(2026, 3, 1)),
        ]
    )
    listing = EventListing.read_from(WireReader(BufferSource(raw)))

    assert listing.count == 3
    assert [e.position for e in listing.events] == [1, 2, 3]
    assert [e.name for e in listing.current] == ["Charity Run", "Food Bank"]
    assert [e.name for e in listing.past] == ["Old Drive"]
    assert listing.events[1].index == 1
    assert listing.events[2].raised == 30.5
    assert listing.events[1].deadline == date(2025, 12, 25)


def test_empty_listing():
    listing = EventListing.read_from(WireReader(BufferSource(b"\x00\x00\x00\x00")))
    assert listing.count == 0
    assert listing.current == () and listing.past == ()


def test_negative_count_is_decode_error():
    with pytest.raises(DecodeError):
        EventListing.read_from(WireReader(BufferSource(struct.pack(">i", -1))))


def test_listing_short_of_declared_count_fails():
    raw = _listing_bytes([(True, "Only", 1.0, 0.0, date(2025, 1, 1))])
    raw = struct.pack(">i", 2) + raw[4:]
    with pytest.raises(DecodeError):
        EventListing.read_from(WireReader(BufferSource(raw)))


def test_details_decode():
    raw = (
        WireWriter()
        .write_text("Food Bank")
        .write_float64(250.0)
        .write_float64(30.5)
        .write_date(date(2024, 2, 29))
        .getvalue()
    )
    details = EventDetails.read_from(WireReader(BufferSource(raw)))
    assert details == EventDetails(name="Food Bank", target=250.0, raised=30.5, deadline=date(2024, 2, 29))


def test_message_response_decode():
    raw = WireWriter().write_text("Donation successful.").getvalue()
    assert MessageResponse.read_from(WireReader(BufferSource(raw))).text == "Donation successful."
