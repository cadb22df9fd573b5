"""Entry point: python -m ssefetch URL"""

from __future__ import annotations

import argparse
import asyncio
import dataclasses
import json
import sys
from typing import Any

from .client import DataEvent, EmptyEvent, ErrorEvent, SSEClient, SSEOptions, SSEvent
from .config import ClientConfig
from .logging_config import setup_logging


def _parse_header(value: str) -> tuple[str, str]:
    name, sep, header_value = value.partition(":")
    if not sep or not name.strip():
        raise argparse.ArgumentTypeError(f"expected 'Name: value', got {value!r}")
    return name.strip(), header_value.strip()


def build_options(args: argparse.Namespace) -> SSEOptions:
    """Per-request options from the parsed command line."""
    return SSEOptions(
        headers=dict(args.header),
        body=args.data,
        method=args.method.upper() if args.method else None,
    )


def event_to_dict(event: SSEvent) -> dict[str, Any]:
    """Render an event as a JSON-serializable dict."""
    if isinstance(event, DataEvent):
        return {"type": event.type, "record": dataclasses.asdict(event.record)}
    if isinstance(event, ErrorEvent):
        return {
            "type": event.type,
            "error": type(event.error).__name__,
            "message": str(event.error),
            "status": event.response.status_code if event.response is not None else None,
        }
    if isinstance(event, EmptyEvent):
        return {"type": event.type}
    raise TypeError(f"unknown event: {event!r}")


async def run(
    url: str,
    options: SSEOptions,
    config: ClientConfig,
    event_names: list[str],
    close_after: float | None = None,
) -> int:
    """Stream events from ``url`` to stdout; return the process exit status."""
    failed = False

    def print_event(event: SSEvent) -> None:
        print(json.dumps(event_to_dict(event)), flush=True)

    def on_error(event: ErrorEvent) -> None:
        nonlocal failed
        failed = True
        print_event(event)

    client = SSEClient(url, options, config=config)
    for name in ["message", "empty", *event_names]:
        client.add_event_listener(name, print_event)
    client.add_event_listener("error", on_error)

    client.start()
    try:
        await asyncio.wait_for(client.wait_closed(), timeout=close_after)
    except asyncio.TimeoutError:
        client.close()
        await client.wait_closed()
    return 1 if failed else 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Print Server-Sent Events from a URL as JSON lines")
    parser.add_argument("url", help="Event stream URL")
    parser.add_argument("-X", "--method", default=None, help="HTTP method (default: GET)")
    parser.add_argument(
        "-H", "--header", action="append", type=_parse_header, default=[],
        help="Extra request header 'Name: value' (repeatable)",
    )
    parser.add_argument("-d", "--data", default=None, help="Request body")
    parser.add_argument(
        "-e", "--event", action="append", default=[],
        help="Custom event name to print besides message/empty/error (repeatable)",
    )
    parser.add_argument("--close-after", type=float, default=None, help="Close the stream after N seconds")
    parser.add_argument("--log-level", default=None, help="Log level (default: INFO)")
    args = parser.parse_args()

    config = ClientConfig()
    if args.log_level:
        config.log_level = args.log_level
    setup_logging(config.log_level, config.log_file)

    options = build_options(args)
    sys.exit(asyncio.run(run(args.url, options, config, args.event, args.close_after)))


if __name__ == "__main__":
    main()
