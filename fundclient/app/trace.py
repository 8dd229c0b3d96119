# fundclient/app/trace.py
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from pathlib import Path
from typing import IO, Any, Optional

from fundclient.interfaces.command_sink import CommandEvent, CommandSink


def _json_default(value: Any) -> Any:
    if isinstance(value, date):
        return value.isoformat()
    raise TypeError(f"not JSON serializable: {type(value).__name__}")


@dataclass
class CommandTraceLogger(CommandSink):
    """
    Appends one JSON line per command exchange to file_path and mirrors a
    short summary to logger at DEBUG.
    """
    logger: logging.Logger
    file_path: Optional[Path] = None

    def __post_init__(self) -> None:
        self._fh: Optional[IO[str]] = None
        if self.file_path is not None:
            self.file_path = Path(self.file_path)
            self.file_path.parent.mkdir(parents=True, exist_ok=True)
            self._fh = open(self.file_path, "a", encoding="utf-8")

    def close(self) -> None:
        if self._fh is not None:
            try:
                self._fh.close()
            finally:
                self._fh = None

    def on_command(self, event: CommandEvent) -> None:
        self.logger.debug("CMD name=%s kind=%s id=%s", event.name, event.kind, event.request_id)
        if self._fh is None:
            return

        ts_utc = event.ts_utc or datetime.now(timezone.utc).isoformat()

        out = {
            "name": event.name,
            "kind": event.kind,
            "request_id": event.request_id,
            "payload": dict(event.payload) if event.payload is not None else None,
            "ts_utc": ts_utc,
        }

        out = {k: v for k, v in out.items() if v is not None}

        self._fh.write(json.dumps(out, ensure_ascii=False, default=_json_default) + "\n")
        self._fh.flush()
