# fundclient/app/runner.py
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from fundclient.app.config import ClientConfig
from fundclient.app.loop import InteractionLoop
from fundclient.app.trace import CommandTraceLogger
from fundclient.console.display import ConsoleDisplay
from fundclient.console.prompts import ConsolePrompter
from fundclient.interfaces.command_sink import CommandSink
from fundclient.interfaces.display_sink import DisplaySink
from fundclient.runtime.client import FundraiserClient
from fundclient.runtime.connection import ConnectionManager, FixedDelay
from fundclient.transport.base import Transport
from fundclient.transport.tcp import TCPTransport


@dataclass(frozen=True)
class AppRun:
    loop: InteractionLoop
    client: FundraiserClient
    connection: ConnectionManager
    cmd_sink: CommandSink

    def close(self) -> None:
        try:
            self.connection.close()
        finally:
            self.cmd_sink.close()


def tcp_transport_factory(cfg: ClientConfig) -> Callable[[], Transport]:
    def _create() -> Transport:
        return TCPTransport(cfg.host, cfg.port, timeout=cfg.connect_timeout_s)
    return _create


def start_run(
    cfg: ClientConfig,
    *,
    display: Optional[DisplaySink] = None,
    read_line: Callable[[str], str] = input,
    transport_factory: Optional[Callable[[], Transport]] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> AppRun:
    log = logging.getLogger(__name__)
    display = display or ConsoleDisplay()

    cmd_sink = CommandTraceLogger(
        logger=logging.getLogger("commands"),
        file_path=Path(cfg.trace_file) if cfg.trace_file else None,
    )

    connection = ConnectionManager(
        transport_factory or tcp_transport_factory(cfg),
        endpoint=cfg.endpoint,
        retry_policy=FixedDelay(cfg.retry_delay_s),
        sleep=sleep,
        display=display,
    )

    client = FundraiserClient(connection, cmd_sink=cmd_sink)
    loop = InteractionLoop(client, ConsolePrompter(read_line, display), display)

    log.info("RUN_START endpoint=%s retry_delay_s=%.2f", cfg.endpoint, cfg.retry_delay_s)
    return AppRun(loop=loop, client=client, connection=connection, cmd_sink=cmd_sink)
