# transport/__init__.py

from .base import Transport
from .errors import TransportError, TransportIOError, TransportOpenError
from .tcp import TCPTransport

__all__ = [
    "Transport",
    "TCPTransport",
    "TransportError", "TransportOpenError", "TransportIOError",
]
