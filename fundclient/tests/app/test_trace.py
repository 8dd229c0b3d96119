from __future__ import annotations

import json
import logging
from datetime import date
from pathlib import Path

from fundclient.app.trace import CommandTraceLogger
from fundclient.interfaces.command_sink import CommandEvent


def test_writes_json_lines(tmp_path: Path):
    path = tmp_path / "sub" / "trace.jsonl"
    sink = CommandTraceLogger(logger=logging.getLogger("test"), file_path=path)

    sink.on_command(CommandEvent(name="LIST_EVENTS", kind="ok", payload={"args": {}, "rtt_ms": 1.5}, request_id="1"))
    sink.on_command(
        CommandEvent(
            name="CREATE_EVENT",
            kind="ok",
            payload={"args": {"deadline": date(2025, 12, 25)}},
            request_id="2",
            ts_utc="2025-01-01T00:00:00+00:00",
        )
    )
    sink.close()

    rows = [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]
    assert [r["name"] for r in rows] == ["LIST_EVENTS", "CREATE_EVENT"]
    assert rows[0]["payload"]["rtt_ms"] == 1.5
    assert "ts_utc" in rows[0]
    assert rows[1]["payload"]["args"]["deadline"] == "2025-12-25"
    assert rows[1]["ts_utc"] == "2025-01-01T00:00:00+00:00"


def test_without_file_only_logs(caplog):
    sink = CommandTraceLogger(logger=logging.getLogger("commands.test"))
    with caplog.at_level(logging.DEBUG, logger="commands.test"):
        sink.on_command(CommandEvent(name="DONATE", kind="rejected_local"))
    sink.close()

    assert "kind=rejected_local" in caplog.text
