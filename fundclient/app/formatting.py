from __future__ import annotations

from datetime import date
from typing import List

from fundclient.console.validators import DATE_FORMAT
from fundclient.protocol.messages import EventDetails, EventListing, EventSummary

SEPARATOR = "---------------------------------"
CURRENT_HEADER = "Current Fundraising Events:"
PAST_HEADER = "Past Fundraising Events:"

MENU = "\n".join(
    [
        "Choose an option:",
        "1. Create a new fundraising event",
        "2. List fundraising events",
        "3. Donate to an event",
        "4. Check event details",
        "5. Exit",
    ]
)


def format_date(d: date) -> str:
    return d.strftime(DATE_FORMAT)


def format_event_line(event: EventSummary) -> str:
    return (
        f"{event.position}. {event.name} "
        f"(Target: ${event.target:.2f}, Raised: ${event.raised:.2f}, "
        f"Deadline: {format_date(event.deadline)})"
    )


def format_listing(listing: EventListing) -> List[str]:
    """
    Current events in arrival order, then the past ones in arrival order.
    Every line keeps its position in the server listing.
    """
    lines = [CURRENT_HEADER]
    past: List[str] = []
    for event in listing.events:
        if event.is_current:
            lines.append(format_event_line(event))
        else:
            past.append(format_event_line(event))

    lines.append("")
    lines.append(PAST_HEADER)
    lines.extend(past)
    return lines


def format_details(details: EventDetails) -> str:
    return "\n".join(
        [
            "Event Details:",
            f"Name: {details.name}",
            f"Target Amount: ${details.target:.2f}",
            f"Amount Raised: ${details.raised:.2f}",
            f"Deadline: {format_date(details.deadline)}",
        ]
    )
