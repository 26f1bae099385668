from __future__ import annotations

import argparse
from datetime import timedelta
from pathlib import Path

from .errors import WorklogError
from .lifecycle import (
    add_session,
    available_months,
    edit_session,
    end_session,
    load_partitions,
    local_now,
    remove_all,
    remove_session,
    start_session,
    today_key,
)
from .models import WorkSession
from .parsing import fmt_clock, fmt_clock_padded, fmt_duration, parse_date, parse_month, parse_month_filter, parse_year
from .render import open_in_browser, render_html, render_tsv, report_path, write_report
from .storage import SessionStore
from .summary import aggregate


ELAPSED_UNITS = ((86400, "day"), (3600, "hour"), (60, "minute"))


def humanize_elapsed(delta: timedelta) -> str:
    seconds = max(0, int(delta.total_seconds()))
    for size, unit in ELAPSED_UNITS:
        count = seconds // size
        if count:
            return f"{count} {unit}" if count == 1 else f"{count} {unit}s"
    return "less than a minute"


def describe_session(item: WorkSession) -> str:
    start = fmt_clock_padded(item.start_time)
    end = fmt_clock_padded(item.end_time) if item.end_time else ""
    length = fmt_duration(item.duration) if item.duration is not None else "N/A"
    parts = [f"#{item.id}", f"{start} - {end:5}", f"Total: {length}"]
    if item.tag:
        parts.append(f"[{item.tag}]")
    if item.description:
        parts.append(item.description)
    return "  ".join(parts)


def cmd_start(_: argparse.Namespace, store: SessionStore) -> None:
    key, session = start_session(store)
    print(f"Work session #{session.id} started at {fmt_clock(session.start_time)} ({key}).")


def cmd_end(args: argparse.Namespace, store: SessionStore) -> None:
    session = end_session(store, description=args.description, tag=args.tag)
    print(
        f"Work session #{session.id} ended at {fmt_clock(session.end_time)} "
        f"({fmt_duration(session.duration)})."
    )


def cmd_status(_: argparse.Namespace, store: SessionStore) -> None:
    now = local_now()
    sessions = store.get(today_key(now))
    active = next((item for item in reversed(sessions) if item.is_open), None)
    if active is None:
        print("No active session.")
        return

    print(
        f"Session #{active.id} started {humanize_elapsed(now - active.start_time)} ago "
        f"(at {fmt_clock(active.start_time)})."
    )


def cmd_sessions(args: argparse.Namespace, store: SessionStore) -> None:
    month_filter = parse_month_filter(args.month) if args.month else None
    partitions = load_partitions(store, month_filter)
    if not partitions:
        print("No sessions found.")
        return

    print("Sessions")
    print("=" * 60)
    for key, sessions in partitions:
        day_total = sum((item.duration for item in sessions if item.duration is not None), timedelta())
        print(f"{key}  Sessions: {len(sessions)}, Total Hours: {fmt_duration(day_total)}")
        for item in sessions:
            print(f"  {describe_session(item)}")
        print("-" * 60)


def cmd_months(_: argparse.Namespace, store: SessionStore) -> None:
    months = available_months(store)
    if not months:
        print("No sessions found.")
        return
    for value in months:
        print(value)


def cmd_add(args: argparse.Namespace, store: SessionStore) -> None:
    day = parse_date(args.date) if args.date else None
    key, session = add_session(
        store,
        day,
        args.from_time,
        args.to_time,
        description=args.description,
        tag=args.tag,
    )
    print(f"Session #{session.id} added on {key}.")


def cmd_edit(args: argparse.Namespace, store: SessionStore) -> None:
    day = parse_date(args.new_date) if args.new_date else None
    key, session = edit_session(
        store,
        parse_date(args.date).isoformat(),
        args.session_id,
        day=day,
        start_text=args.from_time,
        end_text=args.to_time,
        description=args.description,
        tag=args.tag,
    )
    print(f"Session #{session.id} updated on {key}.")


def cmd_remove(args: argparse.Namespace, store: SessionStore) -> None:
    key = parse_date(args.date).isoformat()
    session = remove_session(store, key, args.session_id)
    print(f"Session #{session.id} removed from {key}.")


def cmd_clear(args: argparse.Namespace, store: SessionStore) -> None:
    if not args.yes:
        try:
            answer = input("Remove all stored sessions? This cannot be undone. [y/N] ")
        except EOFError:
            answer = ""
        if answer.strip().lower() not in ("y", "yes"):
            print("Aborted; nothing was removed.")
            return

    remove_all(store)
    print("All data removed.")


def cmd_summary(args: argparse.Namespace, store: SessionStore) -> None:
    now = local_now()
    month = parse_month(args.month) if args.month is not None else now.month
    year = parse_year(args.year) if args.year is not None else now.year
    summary = aggregate(store, month, year)

    if args.format == "tsv":
        rendered = render_tsv(summary)
        if args.output:
            output = write_report(Path(args.output), rendered + "\n")
            print(f"Summary for {month}/{year} written to {output}.")
        else:
            print(rendered)
        return

    output = Path(args.output) if args.output else report_path(year, month)
    write_report(output, render_html(summary))
    print(f"Summary for {month}/{year} written to {output} (total {summary.total:.2f} hours).")
    if args.open and not open_in_browser(output):
        raise WorklogError(f"Could not open {output} in a browser.")
