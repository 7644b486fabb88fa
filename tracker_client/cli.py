"""
tracker-client

Command-line access to the tracker API for quick checks and scripting.

Examples:
  tracker-client tickets --active --client acme
  tracker-client start acme --type time
  tracker-client stop 42
  tracker-client find-hardware 012345678905
  tracker-client receive 012345678905 3 --note "PO 1182"

Auth precedence:
  1) --token <value> (CLI)
  2) env API_KEY / API_TOKEN / TRACKER_API_TOKEN (or .env)

Exit codes:
  0 = success
  1 = handled application error (validation, unrecognized payload)
  2 = network/HTTP error
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any, Optional, Sequence

from pydantic import BaseModel

from .client import TrackerClient
from .core.config import TrackerSettings
from .core.errors import HTTPError, NetworkFailure, TrackerError
from .core.logging import configure_logging
from .core.ticket_types import ENTRY_TYPE_TIME, SUPPORTED_ENTRY_TYPES


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="tracker-client", description="Time Tracker API client.")
    p.add_argument("--base-url", default=None, help="Base URL, e.g. https://tracker.example.com")
    p.add_argument("--token", default=None, help="API token (X-API-Key). Overrides env.")
    p.add_argument("--timeout", type=float, default=None, help="HTTP timeout in seconds")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging to stderr.")

    sub = p.add_subparsers(dest="command", required=True)

    tickets = sub.add_parser("tickets", help="List tickets.")
    tickets.add_argument("--active", action="store_true", help="Only open tickets.")
    tickets.add_argument("--client", default=None, help="client_key filter (with --active).")

    start = sub.add_parser("start", help="Start a new open ticket now.")
    start.add_argument("client_key")
    start.add_argument("--type", dest="entry_type", default=ENTRY_TYPE_TIME, choices=SUPPORTED_ENTRY_TYPES)

    for name, help_text in (
        ("stop", "Set end time to now."),
        ("complete", "Mark a ticket completed."),
        ("sent", "Mark a ticket sent."),
        ("delete", "Delete a ticket."),
        ("show", "Show one ticket."),
    ):
        action = sub.add_parser(name, help=help_text)
        action.add_argument("ticket_id", type=int)
        if name in {"complete", "sent"}:
            action.add_argument("--undo", action="store_true", help="Clear the flag instead.")

    sub.add_parser("clients", help="List clients sorted by name.")

    hardware = sub.add_parser("hardware", help="List hardware inventory.")
    hardware.add_argument("--limit", type=int, default=100)
    hardware.add_argument("--offset", type=int, default=0)

    find = sub.add_parser("find-hardware", help="Look up hardware by barcode.")
    find.add_argument("barcode")
    find.add_argument("--page-size", type=int, default=200)

    for name, help_text in (("receive", "Add stock for a barcode."), ("use", "Take stock for a barcode.")):
        adjust = sub.add_parser(name, help=help_text)
        adjust.add_argument("barcode")
        adjust.add_argument("quantity", type=int)
        adjust.add_argument("--note", default=None)
    return p


def resolve_settings(args: argparse.Namespace) -> TrackerSettings:
    overrides: dict[str, Any] = {}
    if args.base_url:
        overrides["BASE_URL"] = args.base_url
    if args.token:
        overrides["API_KEY"] = args.token
    if args.timeout is not None:
        overrides["TIMEOUT_SECONDS"] = args.timeout
    return TrackerSettings(**overrides)


def _jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, list):
        return [_jsonable(item) for item in value]
    return value


async def run(args: argparse.Namespace, tracker: TrackerClient) -> Any:
    tickets = tracker.tickets
    if args.command == "tickets":
        if args.active:
            return await tickets.list_active_tickets(args.client)
        return await tickets.list_tickets()
    if args.command == "show":
        return await tickets.get_ticket(args.ticket_id)
    if args.command == "start":
        return await tickets.start_new(args.client_key, args.entry_type)
    if args.command == "stop":
        return await tickets.stop_now(args.ticket_id)
    if args.command == "complete":
        return await tickets.mark_completed(args.ticket_id, not args.undo)
    if args.command == "sent":
        return await tickets.mark_sent(args.ticket_id, not args.undo)
    if args.command == "delete":
        await tickets.delete_ticket(args.ticket_id)
        return {"status": "deleted", "id": args.ticket_id}
    if args.command == "clients":
        return await tracker.directory.list_clients()
    if args.command == "hardware":
        return await tracker.directory.list_hardware(limit=args.limit, offset=args.offset)
    if args.command == "find-hardware":
        item = await tracker.directory.find_hardware(args.barcode, page_size=args.page_size)
        if item is None:
            return {"status": "not_found", "barcode": args.barcode}
        return {"status": "exists", "barcode": args.barcode, "record": _jsonable(item)}
    if args.command == "receive":
        return await tracker.directory.receive_inventory(args.quantity, barcode=args.barcode, note=args.note)
    if args.command == "use":
        return await tracker.directory.use_inventory(args.quantity, barcode=args.barcode, note=args.note)
    raise ValueError(f"unknown command {args.command!r}")


async def _main_async(args: argparse.Namespace, settings: TrackerSettings) -> Any:
    async with TrackerClient(settings) as tracker:
        return await run(args, tracker)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = resolve_settings(args)
    configure_logging("DEBUG" if args.verbose else settings.LOG_LEVEL)
    if not settings.API_KEY:
        print("WARNING: No API token supplied (use --token or env API_KEY).", file=sys.stderr)

    try:
        result = asyncio.run(_main_async(args, settings))
    except (NetworkFailure, HTTPError) as exc:
        print(json.dumps(exc.to_dict(), indent=2), file=sys.stderr)
        return 2
    except TrackerError as exc:
        print(json.dumps(exc.to_dict(), indent=2), file=sys.stderr)
        return 1

    print(json.dumps(_jsonable(result), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
