from __future__ import annotations

import argparse
import logging
import os
import sys

from .commands import (
    cmd_add,
    cmd_clear,
    cmd_edit,
    cmd_end,
    cmd_months,
    cmd_remove,
    cmd_sessions,
    cmd_start,
    cmd_status,
    cmd_summary,
)
from .errors import WorklogError
from .storage import resolve_store

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="worklog", description="Track work sessions and summarize them by month.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", title="Available commands", metavar="")

    start = subparsers.add_parser("start", help="Start a work session")
    start.set_defaults(func=cmd_start)

    end = subparsers.add_parser("end", help="End the most recent open session of today")
    end.add_argument("--description", help="Optional description of the work done")
    end.add_argument("--tag", help="Optional tag, for example '#development'")
    end.set_defaults(func=cmd_end)

    status = subparsers.add_parser("status", help="Show the open session of today")
    status.set_defaults(func=cmd_status)

    sessions = subparsers.add_parser("sessions", help="List sessions grouped by date")
    sessions.add_argument("--month", help="Only show one month (YYYY-MM)")
    sessions.set_defaults(func=cmd_sessions)

    months = subparsers.add_parser("months", help="List months that have sessions")
    months.set_defaults(func=cmd_months)

    add = subparsers.add_parser("add", help="Add a session manually")
    add.add_argument("--date", help="Date of the session (YYYY-MM-DD)")
    add.add_argument("--from", dest="from_time", required=True, help="Start time (HH:mm)")
    add.add_argument("--to", dest="to_time", help="End time (HH:mm); omit to leave the session open")
    add.add_argument("--description")
    add.add_argument("--tag")
    add.set_defaults(func=cmd_add)

    edit = subparsers.add_parser("edit", help="Edit a session")
    edit.add_argument("--date", required=True, help="Date the session is stored under (YYYY-MM-DD)")
    edit.add_argument("--id", dest="session_id", type=int, required=True, help="Session id within that date")
    edit.add_argument("--new-date", help="Move the session to another date (YYYY-MM-DD)")
    edit.add_argument("--from", dest="from_time", help="New start time (HH:mm)")
    edit.add_argument("--to", dest="to_time", help="New end time (HH:mm); pass '' to reopen the session")
    edit.add_argument("--description")
    edit.add_argument("--tag")
    edit.set_defaults(func=cmd_edit)

    remove = subparsers.add_parser("remove", help="Remove a single session")
    remove.add_argument("--date", required=True, help="Date the session is stored under (YYYY-MM-DD)")
    remove.add_argument("--id", dest="session_id", type=int, required=True, help="Session id within that date")
    remove.set_defaults(func=cmd_remove)

    clear = subparsers.add_parser("clear", help="Remove all stored sessions")
    clear.add_argument("--yes", action="store_true", help="Do not ask for confirmation")
    clear.set_defaults(func=cmd_clear)

    summary = subparsers.add_parser("summary", help="Summarize one month")
    summary.add_argument("--month", help="Month number 1-12; defaults to the current month")
    summary.add_argument("--year", help="Four digit year; defaults to the current year")
    summary.add_argument("--format", choices=["tsv", "html"], default="tsv")
    summary.add_argument("--output", help="Output file path; tsv defaults to stdout, html to the report directory")
    summary.add_argument("--open", action="store_true", help="Open the html report in a browser")
    summary.set_defaults(func=cmd_summary)

    return parser


def configure_logging(verbose: bool) -> None:
    if verbose:
        level = logging.DEBUG
    else:
        level = getattr(logging, os.getenv("WORKLOG_LOG_LEVEL", "WARNING").upper(), None)
        if not isinstance(level, int):
            level = logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not getattr(args, "command", None):
        parser.print_help()
        return 0

    configure_logging(args.verbose)
    store = resolve_store()

    try:
        args.func(args, store)
    except WorklogError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0
