#!/usr/bin/env python3
"""
Span Calendar - month layout of date-ranged events from the command line.

Reads events from a JSON or iCalendar file and prints the month grid with
each week's spanning bars, "+N more" counts and busy days.
"""

import sys
import argparse
import calendar
from dataclasses import replace
from pathlib import Path

from calendar_engine.config import Config
from calendar_engine.debug import set_debug
from calendar_engine.event_model import CalendarMonth
from calendar_engine.event_source import EventSourceError, load_events
from calendar_engine.month_layout import LayoutContext, MonthLayout, compute_month_layout
from calendar_engine.timezone_utils import TimezoneMode, resolve_timezone, today


DAY_HEADERS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]


def parse_month(text: str) -> CalendarMonth:
    """Parse YYYY-MM into a CalendarMonth."""
    try:
        year_s, month_s = text.split('-', 1)
        return CalendarMonth(int(year_s), int(month_s) - 1)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Expected YYYY-MM, got {text!r}")


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Span Calendar - lay out events on a month grid"
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        help="Path to configuration file (default: auto-detect)"
    )
    parser.add_argument(
        "-e", "--events",
        type=Path,
        help="Event file (.json or .ics)"
    )
    parser.add_argument(
        "-m", "--month",
        type=parse_month,
        help="Month to show as YYYY-MM (default: current month)"
    )
    parser.add_argument(
        "--timezone",
        help="Effective timezone: 'local' or a zone name such as Europe/Amsterdam"
    )
    parser.add_argument(
        "--week-start",
        choices=["sunday", "monday"],
        help="First day of the week"
    )
    parser.add_argument(
        "--compact",
        action="store_true",
        help="Compact mode (more bars per week)"
    )
    parser.add_argument(
        "--daily",
        action="store_true",
        help="List events per day instead of spanning bars"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug output"
    )
    return parser.parse_args(argv)


def format_layout(layout: MonthLayout) -> str:
    """Render a month layout as plain text."""
    settings = layout.settings
    headers = DAY_HEADERS
    if settings.week_start_day == "monday":
        headers = DAY_HEADERS[1:] + DAY_HEADERS[:1]

    lines = [f"{calendar.month_name[layout.month.month_number]} {layout.month.year}"]
    prefix = "Wk  " if settings.show_week_numbers else ""
    lines.append(prefix + " ".join(f"{h:>3}" for h in headers))

    for week in layout.weeks:
        cells = []
        for col, day in enumerate(week.row.days):
            if day is not None:
                cells.append(f"{day:>3}")
            elif week.row.adjacent_days is not None:
                cells.append(f"({week.row.adjacent_days[col]})".rjust(3))
            else:
                cells.append("  .")
        row_prefix = f"{week.week_number:>2}  " if settings.show_week_numbers else ""
        lines.append(row_prefix + " ".join(cells))

        for placement, lane in zip(week.visible, week.lanes):
            left = "[" if placement.is_start else "<"
            right = "]" if placement.is_end else ">"
            lines.append(f"    {lane}: cols {placement.start_col}-{placement.end_col} "
                         f"{left}{placement.event.name}{right}")
        if week.hidden_count:
            lines.append(f"    +{week.hidden_count} more")

    for cell in layout.daily_cells:
        if not cell.total:
            continue
        names = ", ".join(event.name for event in cell.events)
        more = f" +{cell.hidden_count} more" if cell.hidden_count else ""
        lines.append(f"{cell.day:>2}: {names}{more}")

    if layout.expandable_days:
        busy = ", ".join(str(day) for day in layout.expandable_days)
        lines.append(f"Busy days: {busy}")
    if not any(layout.day_counts.values()):
        lines.append("No events this month")
    return "\n".join(lines)


def main(argv=None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    if args.debug:
        set_debug(True)

    try:
        config = Config.load(args.config)
    except FileNotFoundError as e:
        print(f"Error: {e}")
        print(f"\nDefault configuration location: {Config.get_default_config_path()}")
        return 1
    except Exception as e:
        print(f"Error loading configuration: {e}")
        return 1

    if config.debug:
        set_debug(True)

    timezone = args.timezone or config.timezone
    mode = TimezoneMode(timezone)
    try:
        resolve_timezone(mode)
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    settings = config.display
    if args.week_start:
        settings = replace(settings, week_start_day=args.week_start)
    if args.compact:
        settings = replace(settings, compact_mode=True)
    if args.daily:
        settings = replace(settings, event_display_style="daily")

    month = args.month or CalendarMonth.from_date(today(mode))

    events = []
    if args.events:
        try:
            events = load_events(args.events, month, mode)
        except EventSourceError as e:
            print(f"Error: {e}")
            return 1

    layout = compute_month_layout(LayoutContext(
        events=tuple(events), month=month, settings=settings,
        mode=mode, layout=config.layout,
    ))
    print(format_layout(layout))
    return 0


if __name__ == "__main__":
    sys.exit(main())
