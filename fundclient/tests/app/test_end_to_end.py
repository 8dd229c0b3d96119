from __future__ import annotations

import socketserver
import threading
from datetime import date

import pytest

import fundclient.cli.main as main_mod
from fundclient.app.config import ClientConfig
from fundclient.app.formatting import PAST_HEADER
from fundclient.app.runner import start_run
from fundclient.protocol.codec import WireReader, WireWriter
from fundclient.runtime.connection import LOST_CONNECTION_NOTICE


class _SocketSource:
    def __init__(self, sock):
        self._sock = sock

    def read_exact(self, n: int) -> bytes:
        buf = b""
        while len(buf) < n:
            chunk = self._sock.recv(n - len(buf))
            if not chunk:
                raise EOFError
            buf += chunk
        return buf


class _Handler(socketserver.BaseRequestHandler):
    def handle(self) -> None:
        srv: FakeFundraiserServer = self.server  # type: ignore[assignment]
        with srv.lock:
            srv.connections += 1
        reader = WireReader(_SocketSource(self.request))

        while True:
            try:
                cmd = reader.read_text()
                reply = self._dispatch(srv, cmd, reader)
            except EOFError:
                return
            with srv.lock:
                srv.received.append(cmd)
            self.request.sendall(reply)
            if srv.close_after_reply:
                srv.close_after_reply = False
                return

    @staticmethod
    def _dispatch(srv: "FakeFundraiserServer", cmd: str, reader: WireReader) -> bytes:
        w = WireWriter()
        if cmd == "CREATE_EVENT":
            name, target, deadline = reader.read_text(), reader.read_float64(), reader.read_date()
            srv.events.append({"name": name, "target": target, "raised": 0.0, "deadline": deadline})
            return w.write_text("Event created successfully.").getvalue()

        if cmd == "LIST_EVENTS":
            if srv.malformed:
                return w.write_int32(-1).getvalue()
            w.write_int32(len(srv.events))
            for ev in srv.events:
                w.write_bool(ev["deadline"] >= srv.today)
                w.write_text(ev["name"]).write_float64(ev["target"]).write_float64(ev["raised"])
                w.write_date(ev["deadline"])
            return w.getvalue()

        if cmd == "DONATE":
            index, amount = reader.read_int32(), reader.read_float64()
            if not (0 <= index < len(srv.events)):
                return w.write_text("Invalid event index.").getvalue()
            srv.events[index]["raised"] += amount
            return w.write_text("Thank you for your donation!").getvalue()

        if cmd == "CHECK_DETAILS":
            ev = srv.events[reader.read_int32()]
            return (
                w.write_text(ev["name"])
                .write_float64(ev["target"])
                .write_float64(ev["raised"])
                .write_date(ev["deadline"])
                .getvalue()
            )

        return w.write_text(f"Unknown command {cmd}").getvalue()


class FakeFundraiserServer(socketserver.ThreadingTCPServer):
    allow_reuse_address = True
    daemon_threads = True

    def __init__(self):
        super().__init__(("127.0.0.1", 0), _Handler)
        self.lock = threading.Lock()
        self.events: list[dict] = []
        self.received: list[str] = []
        self.today = date(2025, 6, 1)
        self.connections = 0
        self.close_after_reply = False
        self.malformed = False


class ScriptedInput:
    def __init__(self, lines):
        self._lines = list(lines)

    def __call__(self, prompt: str) -> str:
        if not self._lines:
            raise EOFError
        return self._lines.pop(0)


class RecordingDisplay:
    def __init__(self):
        self.lines: list[str] = []

    def show(self, text: str) -> None:
        self.lines.append(text)


@pytest.fixture
def server():
    srv = FakeFundraiserServer()
    thread = threading.Thread(target=srv.serve_forever, daemon=True)
    thread.start()
    try:
        yield srv
    finally:
        srv.shutdown()
        srv.server_close()
        thread.join(timeout=2)


def _run(srv, lines):
    host, port = srv.server_address
    cfg = ClientConfig(host=host, port=port, retry_delay_s=2.0, connect_timeout_s=2.0)
    display = RecordingDisplay()
    sleeps: list[float] = []
    run = start_run(cfg, display=display, read_line=ScriptedInput(lines), sleep=sleeps.append)
    try:
        run.connection.ensure_connected()
        run.loop.run()
    finally:
        run.close()
    return run, display, sleeps


def test_create_then_list_shows_current_event(server):
    server.events.append({"name": "Spring Drive", "target": 50.0, "raised": 50.0, "deadline": date(2025, 3, 1)})

    _, display, _ = _run(server, ["1", "Charity Run", "500.0", "12-25-2025", "2", "5"])

    assert "Event created successfully." in display.lines
    past_at = display.lines.index(PAST_HEADER)
    current_line = "2. Charity Run (Target: $500.00, Raised: $0.00, Deadline: 12-25-2025)"
    assert current_line in display.lines[:past_at]
    assert "1. Spring Drive (Target: $50.00, Raised: $50.00, Deadline: 03-01-2025)" in display.lines[past_at:]


def test_out_of_range_index_is_never_transmitted(server):
    for name in ("A", "B", "C"):
        server.events.append({"name": name, "target": 10.0, "raised": 0.0, "deadline": date(2030, 1, 1)})

    run, display, _ = _run(server, ["2", "4", "5", "3", "5"])

    assert "Invalid input. Please enter a number between 1 and 3." in display.lines
    assert server.received == ["LIST_EVENTS", "CHECK_DETAILS"]
    assert any(line.startswith("Event Details:\nName: C") for line in display.lines)
    assert run.client.state.last_known_event_count == 3


def test_reconnects_after_server_drops_connection(server):
    for name in ("A", "B", "C"):
        server.events.append({"name": name, "target": 10.0, "raised": 0.0, "deadline": date(2030, 1, 1)})
    server.close_after_reply = True

    run, display, sleeps = _run(server, ["2", "3", "1", "5", "3", "1", "5", "5"])

    assert LOST_CONNECTION_NOTICE in display.lines
    assert sleeps == [2.0]
    assert server.connections == 2
    assert "Thank you for your donation!" in display.lines
    # the interrupted donation was not replayed
    assert server.received == ["LIST_EVENTS", "DONATE"]
    assert server.events[0]["raised"] == 5.0
    assert run.client.state.last_known_event_count == 3


def test_cli_main_runs_against_server(server, monkeypatch, capsys):
    host, port = server.server_address
    monkeypatch.setattr(main_mod, "start_run", lambda cfg: start_run(cfg, read_line=ScriptedInput(["2", "5"])))

    rc = main_mod.main(["--host", host, "--port", str(port)])

    out = capsys.readouterr().out
    assert rc == 0
    assert "Current Fundraising Events:" in out
    assert "Exiting..." in out


def test_cli_main_decode_failure_exits_with_diagnostic(server, monkeypatch, capsys):
    server.malformed = True
    host, port = server.server_address
    monkeypatch.setattr(main_mod, "start_run", lambda cfg: start_run(cfg, read_line=ScriptedInput(["2", "5"])))

    rc = main_mod.main(["--host", host, "--port", str(port)])

    out = capsys.readouterr().out
    assert rc == 2
    assert "ERROR: Could not decode the server response to LIST_EVENTS." in out
    assert "Hint: negative event count -1" in out


def test_cli_main_bad_config_exits_1(tmp_path, capsys):
    rc = main_mod.main(["--config", str(tmp_path / "missing.yml")])
    assert rc == 1
    assert "ERROR: Config file not found" in capsys.readouterr().out
