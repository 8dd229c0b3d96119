# fundclient/cli/main.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from fundclient.app.runner import start_run
from fundclient.cli.args import parse_args
from fundclient.core.errors import FundClientError

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_file_logging(app_log_path: Path) -> None:
    """
    Add a file handler to the root logger (idempotent).
    """
    root = logging.getLogger()
    app_log_path.parent.mkdir(parents=True, exist_ok=True)
    target = str(app_log_path.resolve())

    for h in root.handlers:
        if isinstance(h, logging.FileHandler) and getattr(h, "baseFilename", None) == target:
            return

    fh = logging.FileHandler(app_log_path, encoding="utf-8", delay=True)
    fh.setLevel(logging.INFO)
    fh.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(fh)

    if root.level > logging.INFO:
        root.setLevel(logging.INFO)


def configure_console_logging(verbose: bool) -> None:
    # Console output belongs to the menu; only warnings (or everything with -v) go to stderr.
    level = logging.DEBUG if verbose else logging.WARNING
    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root = logging.getLogger()
    root.addHandler(handler)
    if root.level > level:
        root.setLevel(level)


def main(argv: Optional[list[str]] = None) -> int:
    try:
        args, cfg = parse_args(argv)
    except FundClientError as e:
        print(f"ERROR: {e.message}")
        if e.hint:
            print(f"Hint: {e.hint}")
        return e.exit_status

    configure_console_logging(args.verbose)
    if cfg.log_file:
        configure_file_logging(Path(cfg.log_file))

    run = start_run(cfg)
    try:
        run.connection.ensure_connected()
        run.loop.run()
        return 0
    except KeyboardInterrupt:
        print("\nExiting...")
        return 0
    except FundClientError as e:
        logging.getLogger(__name__).error("RUN_FAILED code=%s msg=%s", e.code, e.message)
        print(f"ERROR: {e.message}")
        if e.hint:
            print(f"Hint: {e.hint}")
        return e.exit_status
    finally:
        run.close()
