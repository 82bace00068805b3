"""
Week/day skeleton of a month, independent of events.
"""

import calendar
import math
from dataclasses import dataclass
from typing import Optional

from .event_model import CalendarMonth, WeekRow
from .timezone_utils import TimezoneMode, today


@dataclass(frozen=True)
class MonthGrid:
    """Row-major cells of a month view; 7 cells per week."""
    days: tuple
    weeks_count: int
    first_day_offset: int
    days_in_month: int

    def row(self, week_index: int) -> tuple:
        return self.days[week_index * 7:(week_index + 1) * 7]


def days_in_month(year: int, month: int) -> int:
    """Number of days in a month (``month`` 0-based)."""
    return calendar.monthrange(year, month + 1)[1]


def weekday_column(sunday_based_weekday: int, week_start_day: str) -> int:
    """
    Column of a weekday (0=Sunday) for the given week start.

    For Monday-first weeks Monday moves to column 0 and Sunday to 6.
    """
    if week_start_day == "monday":
        return (sunday_based_weekday + 6) % 7
    return sunday_based_weekday


def build_grid(month: CalendarMonth, week_start_day: str = "sunday") -> MonthGrid:
    """
    Build the cell grid for a month.

    A cell holds its day number, or None when it lies outside the month.
    """
    count = days_in_month(month.year, month.month)
    # date.weekday() is 0=Monday; shift to 0=Sunday first
    sunday_based = (month.first_day.weekday() + 1) % 7
    offset = weekday_column(sunday_based, week_start_day)

    weeks_count = math.ceil((offset + count) / 7)
    days = tuple(
        i - offset + 1 if offset <= i < offset + count else None
        for i in range(weeks_count * 7)
    )
    return MonthGrid(days=days, weeks_count=weeks_count,
                     first_day_offset=offset, days_in_month=count)


def adjacent_day_numbers(month: CalendarMonth, grid: MonthGrid) -> tuple:
    """
    Day numbers of the previous/next month for the empty cells.

    Used only for showing adjacent months; in-month cells stay None here.
    """
    prev = month.shifted(-1)
    prev_count = days_in_month(prev.year, prev.month)
    cells = []
    next_day = 1
    for i, day in enumerate(grid.days):
        if day is not None:
            cells.append(None)
        elif i < grid.first_day_offset:
            cells.append(prev_count - grid.first_day_offset + i + 1)
        else:
            cells.append(next_day)
            next_day += 1
    return tuple(cells)


def week_rows(grid: MonthGrid, month: Optional[CalendarMonth] = None,
              show_adjacent_months: bool = False) -> list[WeekRow]:
    """Split a grid into week rows without any spanning events."""
    adjacent = None
    if show_adjacent_months and month is not None:
        adjacent = adjacent_day_numbers(month, grid)

    rows = []
    for week_index in range(grid.weeks_count):
        row_adjacent = None
        if adjacent is not None:
            row_adjacent = adjacent[week_index * 7:(week_index + 1) * 7]
        rows.append(WeekRow(week_index=week_index, days=grid.row(week_index),
                            adjacent_days=row_adjacent))
    return rows


def is_today(month: CalendarMonth, day: int, mode: TimezoneMode) -> bool:
    """True if ``day`` of ``month`` is today in the effective timezone."""
    return month.date_for(day) == today(mode)
