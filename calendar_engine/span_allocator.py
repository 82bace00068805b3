"""
Spanning-bar placement for the month view.

For every week row, decides which events overlap the week, which columns
each one covers, and whether the bar is a true start/end or a continuation
from/into a neighbouring week.
"""

from datetime import date
from typing import Iterable, Optional

from .debug import debug_print
from .date_grid import MonthGrid, week_rows
from .event_model import CalendarMonth, Event, SpanningEvent, WeekRow
from .timezone_utils import TimezoneMode, project_event_dates


def _debug_print(message: str) -> None:
    debug_print("ALLOC", message)


def _project_all(events: Iterable[Event], mode: TimezoneMode) -> list[tuple[Event, date, date]]:
    projected = []
    for event in events:
        dates = project_event_dates(event, mode)
        if dates is not None:
            projected.append((event, dates[0], dates[1]))
    return projected


def _place(week_row: WeekRow, month: CalendarMonth, event: Event,
           event_start: date, event_end: date, clamp: bool) -> Optional[SpanningEvent]:
    first_day = week_row.first_day
    last_day = week_row.last_day
    if first_day is None:
        return None
    week_start = month.date_for(first_day)
    week_end = month.date_for(last_day)

    if event_end < week_start or event_start > week_end:
        return None

    start_col = 1
    end_col = 7
    is_start = False
    is_end = False
    for col, day in enumerate(week_row.days):
        if day is None:
            continue
        cell = month.date_for(day)
        if cell == event_start:
            start_col = col + 1
            is_start = True
        elif cell < event_start:
            # Event has not started yet at this cell
            start_col = col + 2
        if cell == event_end:
            end_col = col + 1
            is_end = True
        elif cell > event_end:
            end_col = col
            break

    if event_start < week_start:
        start_col = 1
        is_start = False
    if event_end > week_end:
        end_col = 7
        is_end = False

    if clamp:
        start_col = max(start_col, week_row.first_column)
        end_col = min(end_col, week_row.last_column)

    span = end_col - start_col + 1
    if span <= 0 or not 1 <= start_col <= 7:
        _debug_print(f"Dropping event {event.id} in week {week_row.week_index}: "
                     f"start_col={start_col} end_col={end_col}")
        return None
    return SpanningEvent(event=event, start_col=start_col, span=span,
                         is_start=is_start, is_end=is_end)


def _allocate_projected(week_row: WeekRow, projected: list[tuple[Event, date, date]],
                        month: CalendarMonth, clamp: bool) -> list[SpanningEvent]:
    placements = []
    for event, event_start, event_end in projected:
        placement = _place(week_row, month, event, event_start, event_end, clamp)
        if placement is not None:
            placements.append(placement)
    # Stable: equal (start_col, span) keep input order
    placements.sort(key=lambda p: (p.start_col, -p.span))
    return placements


def allocate(week_row: WeekRow, events: Iterable[Event], month: CalendarMonth,
             mode: TimezoneMode, clamp: bool = False) -> list[SpanningEvent]:
    """
    Place events onto one week row.

    The week's bounds are its first and last in-month days. Events that do
    not overlap the week, or that have unusable timestamps, are left out.
    The result is ordered by start column, longer bars first.

    With ``clamp`` set, bars are also kept inside the first/last in-month
    columns of the row, so continuations never cover an empty edge cell.
    """
    return _allocate_projected(week_row, _project_all(events, mode), month, clamp)


def build_week_rows(grid: MonthGrid, events: Iterable[Event], month: CalendarMonth,
                    mode: TimezoneMode, clamp: bool = False,
                    show_adjacent_months: bool = False) -> list[WeekRow]:
    """Week rows of a month with their spanning events filled in."""
    projected = _project_all(events, mode)
    rows = []
    for row in week_rows(grid, month, show_adjacent_months):
        spanning = _allocate_projected(row, projected, month, clamp)
        rows.append(WeekRow(week_index=row.week_index, days=row.days,
                            spanning_events=tuple(spanning),
                            adjacent_days=row.adjacent_days))
    _debug_print(f"{month}: {len(projected)} events over {grid.weeks_count} weeks")
    return rows


def sequential_lanes(spanning_events: list[SpanningEvent]) -> list[int]:
    """Stacking rows by list position (the default presentation order)."""
    return list(range(len(spanning_events)))


def assign_lanes(spanning_events: list[SpanningEvent]) -> list[int]:
    """
    Greedy lane assignment for one week's bars.

    Bars are taken in list order (already sorted by start column); each goes
    into the first lane whose last bar ends before it starts. Returns the
    lane index of every bar, aligned with the input list.
    """
    lane_ends: list[int] = []
    lanes = []
    for placement in spanning_events:
        for lane, end_col in enumerate(lane_ends):
            if end_col < placement.start_col:
                lane_ends[lane] = placement.end_col
                lanes.append(lane)
                break
        else:
            lane_ends.append(placement.end_col)
            lanes.append(len(lane_ends) - 1)
    return lanes
