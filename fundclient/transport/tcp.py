# fundclient/transport/tcp.py
from __future__ import annotations

import socket
from typing import Optional

from .base import Transport
from .errors import TransportIOError, TransportOpenError


class TCPTransport(Transport):
    """
    Blocking TCP transport over a single socket.

    read_exact(n) loops on recv until n bytes arrived; an empty recv means the
    peer closed the stream and is reported as TransportIOError.
    """

    def __init__(self, host: str, port: int, timeout: Optional[float] = 5.0):
        self.host = host
        self.port = int(port)
        self.timeout = timeout
        self.sock: Optional[socket.socket] = None

    def open(self) -> None:
        if self.sock is not None:
            return
        try:
            sock = socket.create_connection((self.host, self.port), timeout=self.timeout)
        except OSError as e:
            self.sock = None
            raise TransportOpenError(f"connect to {self.host}:{self.port} failed: {e}") from None

        # Requests block until the server answers; the timeout only bounds connect.
        sock.settimeout(None)
        self.sock = sock

    def close(self) -> None:
        if self.sock is not None:
            try:
                self.sock.close()
            finally:
                self.sock = None

    def is_open(self) -> bool:
        return self.sock is not None

    def read_exact(self, n: int) -> bytes:
        if self.sock is None:
            raise TransportIOError("read while transport not open")

        buf = b""
        try:
            while len(buf) < n:
                chunk = self.sock.recv(n - len(buf))
                if not chunk:
                    raise TransportIOError(
                        f"connection closed by server ({len(buf)}/{n} bytes read)"
                    )
                buf += chunk
        except OSError as e:
            self.close()
            raise TransportIOError(f"TCP read failed: {e}") from None
        return buf

    def write(self, data: bytes) -> int:
        if self.sock is None:
            raise TransportIOError("write while transport not open")

        try:
            self.sock.sendall(data)
        except OSError as e:
            self.close()
            raise TransportIOError(f"TCP write failed: {e}") from None
        return len(data)

    def describe(self) -> str:
        return f"tcp://{self.host}:{self.port}"
