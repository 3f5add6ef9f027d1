"""Command line helpers for the status page.

Usage:
    uv run python -m statuspage.cli init-db
    uv run python -m statuspage.cli timeline --start-date 2024-06-10 [--auth]
    uv run python -m statuspage.cli rollover
    uv run python -m statuspage.cli serve --port 8000
"""

import argparse
import logging
import sqlite3
import sys
from zoneinfo import ZoneInfo

import uvicorn

from statuspage.actions.scheduler import rollover_actions
from statuspage.config import get_settings
from statuspage.dates import utc_now
from statuspage.store.db import get_initialized_connection
from statuspage.timeline.index import IndexPage, build_index

logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s: %(message)s",
)


def format_timeline(page: IndexPage, tz: ZoneInfo) -> str:
    """Render the timeline as plain text, one block per day."""
    lines: list[str] = []
    for day, incidents in page.all_incidents.items():
        lines.append(day)
        if not incidents:
            lines.append("  No incidents reported.")
        for incident in incidents:
            stamp = incident.timestamp.astimezone(tz).strftime("%H:%M")
            lines.append(f"  [{stamp}] {incident.name} ({incident.human_status})")
    nav: list[str] = []
    if page.can_page_backward:
        nav.append(f"older: --start-date {page.previous_date.isoformat()}")
    if page.can_page_forward:
        nav.append(f"newer: --start-date {page.next_date.isoformat()}")
    if nav:
        lines.append("")
        lines.extend(nav)
    return "\n".join(lines)


def _timeline(conn: sqlite3.Connection, args: argparse.Namespace) -> None:
    settings = get_settings()
    tz = ZoneInfo(settings.app_timezone)
    page = build_index(
        conn,
        now=utc_now(),
        tz=tz,
        configured_days=settings.app_incident_days,
        authenticated=args.auth,
        requested_start_date=args.start_date,
    )
    print(format_timeline(page, tz))


def _rollover(conn: sqlite3.Connection, args: argparse.Namespace) -> None:  # noqa: ARG001
    created = rollover_actions(conn, utc_now())
    print(f"Opened {created} timed-action instance(s)")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="statuspage", description="Status page utilities")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="Create the store schema")

    timeline = sub.add_parser("timeline", help="Print the incident timeline")
    timeline.add_argument("--start-date", default=None, help="Anchor date (YYYY-MM-DD)")
    timeline.add_argument("--auth", action="store_true", help="Include incidents hidden from anonymous callers")

    sub.add_parser("rollover", help="Open instances for due timed actions")

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)

    if args.command == "serve":
        uvicorn.run("statuspage.api.main:app", host=args.host, port=args.port, log_level="info")
        return

    try:
        conn = get_initialized_connection()
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        if args.command == "timeline":
            _timeline(conn, args)
        elif args.command == "rollover":
            _rollover(conn, args)
        else:
            print(f"Schema initialized at {get_settings().db_path}")
    finally:
        conn.close()


if __name__ == "__main__":
    main()
