from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class Transport(ABC):
    """
    Abstract byte-stream transport.

    Contract:
      - open()/close() manage the underlying connection. close() is idempotent.
      - read_exact(n) returns exactly n bytes or raises TransportIOError
        (peer closed, reset, timeout). A short read is never returned.
      - write(data) sends all of data or raises TransportIOError.
    """

    @abstractmethod
    def open(self) -> None: ...

    @abstractmethod
    def close(self) -> None: ...

    @abstractmethod
    def is_open(self) -> bool: ...

    @abstractmethod
    def read_exact(self, n: int) -> bytes: ...

    @abstractmethod
    def write(self, data: bytes) -> int: ...

    def describe(self) -> str:
        return type(self).__name__

    def __enter__(self) -> "Transport":
        self.open()
        return self

    def __exit__(self, exc_type: type | None, exc_val: BaseException | None, exc_tb: Any) -> None:
        self.close()
