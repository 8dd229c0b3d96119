# fundclient/cli/args.py
from __future__ import annotations

import argparse
from typing import Optional

from fundclient import __version__
from fundclient.app.config import ClientConfig, load_config

DEFAULTS = ClientConfig()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fundclient",
        description="Interactive client for the fundraising-event server.",
    )
    parser.add_argument("--config", help="YAML config file (settings at top level or under 'client:').")
    parser.add_argument("--host", default=None, help=f"Server host (default: {DEFAULTS.host}).")
    parser.add_argument("--port", type=int, default=None, help=f"Server port (default: {DEFAULTS.port}).")
    parser.add_argument(
        "--retry-delay",
        dest="retry_delay_s",
        type=float,
        default=None,
        help=f"Seconds to wait before each reconnect attempt (default: {DEFAULTS.retry_delay_s}).",
    )
    parser.add_argument(
        "--connect-timeout",
        dest="connect_timeout_s",
        type=float,
        default=None,
        help=f"Connect timeout in seconds (default: {DEFAULTS.connect_timeout_s}).",
    )
    parser.add_argument("--log-file", dest="log_file", default=None, help="Append application log to this file.")
    parser.add_argument("--trace", dest="trace_file", default=None, help="Append JSON-lines command trace to this file.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log DEBUG to stderr.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def parse_args(argv: Optional[list[str]] = None) -> tuple[argparse.Namespace, ClientConfig]:
    """
    Returns: (args, config)

    Config file values are applied first, then any explicit CLI flag.
    """
    args = build_parser().parse_args(argv)

    base = load_config(args.config) if args.config else DEFAULTS
    cfg = base.with_overrides(
        host=args.host,
        port=args.port,
        retry_delay_s=args.retry_delay_s,
        connect_timeout_s=args.connect_timeout_s,
        log_file=args.log_file,
        trace_file=args.trace_file,
    )
    return args, cfg
