from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Protocol


@dataclass(frozen=True, slots=True)
class CommandEvent:
    """
    Per-exchange telemetry event (for tracing/debugging).
    Keep this small + stable; put details into payload.
    """
    name: str                   # e.g. "DONATE"
    kind: str                   # "ok" | "rejected_local" | "transport_error" | "decode_error"
    payload: Optional[Mapping[str, Any]] = None
    request_id: Optional[str] = None
    ts_utc: Optional[str] = None


class CommandSink(Protocol):
    def on_command(self, event: CommandEvent) -> None: ...
    def close(self) -> None: ...
