from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional, Sequence

from .api import api_state
from .bootstrap import configure_logging
from .core import calendar_grid
from .domain import CalendarDay, Event, LedgerError, NewEvent
from .domain.models import parse_date

logger = logging.getLogger(__name__)

_WEEKDAY_HEADER = " ".join(f" {name} " for name in ("Mo", "Tu", "We", "Th", "Fr", "Sa", "Su"))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="UniVerse event ledger command line interface.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    api_parser = subparsers.add_parser("api", help="Start the HTTP server exposing the ledger functions.")
    api_parser.add_argument("--host", default="127.0.0.1")
    api_parser.add_argument("--port", type=int, default=8000)

    subparsers.add_parser("events", help="List every event in the ledger.")

    create_parser = subparsers.add_parser("create", help="Create an event.")
    create_parser.add_argument("--name", required=True)
    create_parser.add_argument("--date", required=True, help="YYYY-MM-DD")
    create_parser.add_argument("--start", required=True, help="HH:MM (24-hour)")
    create_parser.add_argument("--end", required=True, help="HH:MM (24-hour)")
    create_parser.add_argument("--location", required=True)
    create_parser.add_argument("--capacity", type=int, required=True)
    create_parser.add_argument("--organizer", required=True)
    create_parser.add_argument("--description", default="")
    create_parser.add_argument(
        "--propose",
        action="store_true",
        help="Replace the description with a generated proposal when the LLM is available.",
    )

    register_parser = subparsers.add_parser("register", help="Register one participant for an event.")
    register_parser.add_argument("event_id")

    calendar_parser = subparsers.add_parser("calendar", help="Print the month grid.")
    calendar_parser.add_argument("--year", type=int)
    calendar_parser.add_argument("--month", type=int, choices=range(1, 13), metavar="1-12")

    return parser


def format_event(event: Event) -> str:
    seats = "Full" if event.is_full else f"{event.registered_participants}/{event.capacity}"
    return f"{event.id}  {event.date} {event.start_time}-{event.end_time}  {event.name} @ {event.location}  [{seats}]"


def _format_cell(cell: CalendarDay) -> str:
    # ">" marks today, "*" marks a day with events.
    if not cell.is_current_month:
        return "  . "
    marker = "*" if cell.events else " "
    return f"{'>' if cell.is_today else ' '}{cell.date.day:>2}{marker}"


def render_month(grid: List[CalendarDay], selected: CalendarDay) -> str:
    first = next(cell.date for cell in grid if cell.is_current_month)
    lines = [first.strftime("%B %Y"), _WEEKDAY_HEADER]
    for week in calendar_grid.weeks(grid):
        lines.append(" ".join(_format_cell(cell) for cell in week).rstrip())
    lines.append("")
    lines.append(f"Events on {selected.date.isoformat()}:")
    if selected.events:
        lines.extend(f"  {format_event(event)}" for event in selected.events)
    else:
        lines.append("  (none)")
    return "\n".join(lines)


def _run(args: argparse.Namespace) -> int:
    calendar = api_state.calendar
    if args.command == "events":
        for event in calendar.fetch_events():
            print(format_event(event))
    elif args.command == "create":
        candidate = NewEvent(
            name=args.name,
            description=args.description,
            date=parse_date(args.date),
            start_time=args.start,
            end_time=args.end,
            location=args.location,
            capacity=args.capacity,
            organizer=args.organizer,
        )
        event = calendar.create_event(candidate, enrich_description=args.propose)
        print(f"Created {format_event(event)}")
    elif args.command == "register":
        event = calendar.register_for_event(args.event_id)
        print(f"Registered: {format_event(event)}")
    elif args.command == "calendar":
        grid = calendar.month(args.year, args.month)
        print(render_month(grid, calendar.selected_day(grid)))
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    logger.debug("UniVerse CLI command: %s", args.command)

    if args.command == "api":
        from .services.http import run_local_server

        run_local_server(host=args.host, port=args.port)
        return 0
    try:
        return _run(args)
    except LedgerError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
