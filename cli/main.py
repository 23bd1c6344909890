#!/usr/bin/env python3
"""
Nogger CLI

Small command-line front end for the Nogger logging server and its log
directory.

Commands:

1) serve
   - Start the HTTP API + dashboard with uvicorn.

2) tail
   - Print the most recent entries of a stream, newest first:
       nogger tail --type error --limit 20

3) clear
   - Truncate one stream, or every stream when no --type is given.

The server can also be started directly, e.g.:

    uvicorn runtime.api.server:app --reload
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path

# Ensure project root is on sys.path when running as a script
ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from configs.logging_config import setup_logging
from configs.settings import settings
from runtime.models.log_models import (
    ClearSelector,
    Entry,
    Event,
    StreamSelector,
    SummaryLine,
    parse_event_type,
)
from runtime.store.log_store import LogStore


def _format_entry(entry: Entry) -> str:
    """Render one entry as a single terminal line (plus metadata for events)."""
    if isinstance(entry, Event):
        line = f"[{entry.timestamp}] [{entry.type.value.upper()}] {entry.title}"
        if entry.description:
            line += f" - {entry.description}"
        if entry.metadata:
            line += "\n    " + json.dumps(entry.metadata, ensure_ascii=False)
        return line
    if isinstance(entry, SummaryLine):
        if entry.timestamp is None:
            return entry.title
        line = f"[{entry.timestamp}] [{(entry.type or '').upper()}] {entry.title}"
        if entry.description:
            line += f" - {entry.description}"
        return line
    return entry


def _stream_from_arg(value: str | None) -> StreamSelector:
    if value is None or value in ("all", StreamSelector.AGGREGATE.value):
        return StreamSelector.AGGREGATE
    event_type = parse_event_type(value)
    if event_type is None:
        raise ValueError(f"Unknown log type: {value}")
    return StreamSelector.for_type(event_type)


def _clear_selector_from_arg(value: str | None) -> ClearSelector:
    if value is None or value == ClearSelector.ALL.value:
        return ClearSelector.ALL
    if value == ClearSelector.AGGREGATE.value:
        return ClearSelector.AGGREGATE
    event_type = parse_event_type(value)
    if event_type is None:
        raise ValueError(f"Unknown log type: {value}")
    return ClearSelector(event_type.value)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def cmd_serve(logs_dir: str, host: str, port: int, reload: bool) -> None:
    """Start the HTTP server."""
    import uvicorn

    from runtime.api.server import create_app

    setup_logging(settings.log_level, settings.service_log_dir)

    print(f"[Nogger] Logging API server starting on {host}:{port}")
    print(f"[Nogger] Logs are saved in: {Path(logs_dir).resolve()}")
    print("[Nogger] Available endpoints:")
    print("[Nogger]    POST /api/log            - Generic logging endpoint")
    print("[Nogger]    POST /api/log/api-failed - API failure logs")
    print("[Nogger]    POST /api/log/error      - Error logs")
    print("[Nogger]    POST /api/log/info       - Info logs")
    print("[Nogger]    GET /api/logs            - View logs")
    print("[Nogger]    GET /api/health          - Health check")
    print("[Nogger]    DELETE /api/logs         - Clear logs")
    print("[Nogger]    GET /logs                - Dashboard")

    if reload:
        # Reload needs an import string; the reloaded app reads NOGGER_LOGS_DIR.
        os.environ["NOGGER_LOGS_DIR"] = logs_dir
        uvicorn.run("runtime.api.server:app", host=host, port=port, reload=True)
    else:
        uvicorn.run(create_app(logs_dir=logs_dir), host=host, port=port)


def cmd_tail(logs_dir: str, log_type: str | None, limit: int) -> None:
    """Print the newest entries of a stream."""
    store = LogStore(logs_dir=logs_dir)
    stream = _stream_from_arg(log_type)
    entries = store.read(stream, limit)

    if not entries:
        print(f"[Nogger] No logs found in {stream.value} stream")
        return
    for entry in entries:
        print(_format_entry(entry))


def cmd_clear(logs_dir: str, log_type: str | None) -> None:
    """Truncate one stream or all of them."""
    store = LogStore(logs_dir=logs_dir)
    selector = _clear_selector_from_arg(log_type)
    store.clear(selector)
    if selector is ClearSelector.ALL:
        print("[Nogger] All logs cleared")
    else:
        print(f"[Nogger] {selector.value} logs cleared")


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError("must be a positive integer")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Nogger CLI")
    parser.add_argument(
        "--logs-dir",
        default=str(settings.logs_dir),
        help="Directory holding the log streams (default: NOGGER_LOGS_DIR or 'logs')",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # serve
    p_serve = subparsers.add_parser("serve", help="Run the HTTP API and dashboard")
    p_serve.add_argument("--host", default=settings.host, help="Bind address")
    p_serve.add_argument("--port", type=int, default=settings.port, help="Port (default: PORT or 3000)")
    p_serve.add_argument("--reload", action="store_true", help="Reload on code changes")

    # tail
    p_tail = subparsers.add_parser("tail", help="Show the most recent log entries")
    p_tail.add_argument(
        "--type",
        dest="log_type",
        default=None,
        help="Stream to read: all, info, error or api-failed (default: all)",
    )
    p_tail.add_argument(
        "--limit",
        type=_positive_int,
        default=settings.default_read_limit,
        help="Maximum number of entries to show",
    )

    # clear
    p_clear = subparsers.add_parser("clear", help="Clear one stream or all streams")
    p_clear.add_argument(
        "--type",
        dest="log_type",
        default=None,
        help="Stream to clear: all, aggregate, info, error or api-failed (default: all)",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    logs_dir: str = args.logs_dir
    command: str = args.command

    try:
        if command == "serve":
            cmd_serve(logs_dir=logs_dir, host=args.host, port=args.port, reload=args.reload)
        elif command == "tail":
            cmd_tail(logs_dir=logs_dir, log_type=args.log_type, limit=args.limit)
        elif command == "clear":
            cmd_clear(logs_dir=logs_dir, log_type=args.log_type)
        else:
            parser.error(f"Unknown command: {command}")
    except ValueError as e:
        parser.error(str(e))


if __name__ == "__main__":
    main()
