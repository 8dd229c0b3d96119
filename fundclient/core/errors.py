# fundclient/core/errors.py
from __future__ import annotations


class FundClientError(Exception):
    """
    Base class for all expected operational errors in fundclient.
    """

    #: Stable machine-readable identifier (for CLI exit mapping, logs, etc.)
    code: str = "unknown"
    #: Process exit status used by the CLI when this error ends a run.
    exit_status: int = 1

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        details: dict | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.hint = hint
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Configuration / setup errors (no network access yet)
# ---------------------------------------------------------------------------

class ConfigError(FundClientError):
    """
    Client configuration is invalid.

    Examples:
      - config file missing or not a YAML mapping
      - unknown config key
      - port outside 1..65535, negative retry delay
    """
    code = "config_error"


# ---------------------------------------------------------------------------
# Connection lifecycle errors
# ---------------------------------------------------------------------------

class ServerDisconnectedError(FundClientError):
    """
    Connection dropped while a request was in flight.

    The request was not completed and is not resent; the connection manager
    has already re-established a fresh connection when this is raised.
    """
    code = "server_disconnected"


# ---------------------------------------------------------------------------
# Protocol / communication errors
# ---------------------------------------------------------------------------

class ProtocolCommunicationError(FundClientError):
    """
    Server response could not be decoded.

    Examples:
      - malformed length-prefixed text
      - negative event count
      - client / server protocol mismatch
    """
    code = "protocol_communication_error"
    exit_status = 2
