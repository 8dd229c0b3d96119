from __future__ import annotations

import logging
from typing import Callable, Dict, Optional

from fundclient.console.prompts import ConsolePrompter
from fundclient.console.validators import DATE_PATTERN_LABEL, range_error
from fundclient.core.errors import ServerDisconnectedError
from fundclient.interfaces.display_sink import DisplaySink
from fundclient.protocol.errors import EncodeError, EventIndexError
from fundclient.runtime.client import FundraiserClient

from .formatting import MENU, SEPARATOR, format_details, format_listing

NO_EVENTS_MESSAGE = "No events available. List fundraising events first."
ENCODE_FAILED_MESSAGE = "Could not send the request: {error}. Please try again."
EXIT_MESSAGE = "Exiting..."

CHOICE_CREATE = 1
CHOICE_LIST = 2
CHOICE_DONATE = 3
CHOICE_DETAILS = 4
CHOICE_EXIT = 5


class InteractionLoop:
    """
    One menu selection -> at most one request/response exchange.

    Ends on EXIT, or when the console reaches EOF / is interrupted.
    ProtocolCommunicationError is not handled here; it ends the run.
    """

    def __init__(
        self,
        client: FundraiserClient,
        prompter: ConsolePrompter,
        display: DisplaySink,
        *,
        logger: Optional[logging.Logger] = None,
    ):
        self._client = client
        self._prompter = prompter
        self._display = display
        self._log = logger or logging.getLogger(__name__)

        self._actions: Dict[int, Callable[[], None]] = {
            CHOICE_CREATE: self.create_event,
            CHOICE_LIST: self.list_events,
            CHOICE_DONATE: self.donate,
            CHOICE_DETAILS: self.check_details,
        }

    def run(self) -> None:
        self._log.info("LOOP_START")
        try:
            while True:
                self._display.show(SEPARATOR)
                self._display.show(MENU)
                choice = self._prompter.ask_int("Enter your choice: ", CHOICE_CREATE, CHOICE_EXIT)
                if not self.handle(choice):
                    break
        except (EOFError, KeyboardInterrupt):
            self._display.show("")
            self._display.show(EXIT_MESSAGE)
        self._log.info("LOOP_STOP")

    def handle(self, choice: int) -> bool:
        """Run one menu choice. Returns False when the loop should stop."""
        if choice == CHOICE_EXIT:
            self._display.show(EXIT_MESSAGE)
            return False

        action = self._actions.get(choice)
        if action is None:
            self._display.show("Invalid choice. Please try again.")
            return True

        self._display.show(SEPARATOR)
        try:
            action()
        except ServerDisconnectedError as e:
            self._display.show(e.message)
        except EventIndexError as e:
            self._log.warning("INDEX_REJECTED %s", e)
            self._display.show(NO_EVENTS_MESSAGE if e.count == 0 else range_error(1, e.count))
        except EncodeError as e:
            self._log.warning("ENCODE_FAILED choice=%d err=%s", choice, e)
            self._display.show(ENCODE_FAILED_MESSAGE.format(error=e))
        return True

    # ---------------- actions ----------------
    def create_event(self) -> None:
        name = self._prompter.ask_text("Enter event name: ")
        target = self._prompter.ask_amount("Enter target amount: ", 0)
        deadline = self._prompter.ask_date(f"Enter deadline (in format {DATE_PATTERN_LABEL}): ")
        self._display.show(self._client.create_event(name, target, deadline))

    def list_events(self) -> None:
        listing = self._client.list_events()
        for line in format_listing(listing):
            self._display.show(line)

    def donate(self) -> None:
        position = self._ask_position()
        if position is None:
            return
        amount = self._prompter.ask_amount("Enter donation amount: ", 0)
        self._display.show(self._client.donate(position - 1, amount))

    def check_details(self) -> None:
        position = self._ask_position()
        if position is None:
            return
        self._display.show(format_details(self._client.check_details(position - 1)))

    def _ask_position(self) -> Optional[int]:
        state = self._client.state
        if not state.has_events:
            self._display.show(NO_EVENTS_MESSAGE)
            return None
        lo, hi = state.valid_positions()
        return self._prompter.ask_int("Enter event index: ", lo, hi)
