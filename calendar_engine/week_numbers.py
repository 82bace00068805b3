"""
ISO-8601 week numbers.
"""

import math
from datetime import date, timedelta

from .date_grid import MonthGrid
from .event_model import CalendarMonth


def iso_week_number(d: date) -> int:
    """
    ISO-8601 week number of a date.

    The date is moved to the Thursday of its week, so early January can
    belong to week 52/53 of the previous year and late December to week 1.
    """
    iso_weekday = d.isoweekday()  # Sunday is 7
    thursday = d + timedelta(days=4 - iso_weekday)
    days_since_jan1 = (thursday - date(thursday.year, 1, 1)).days
    return math.ceil((days_since_jan1 + 1) / 7)


def week_numbers_for_grid(month: CalendarMonth, grid: MonthGrid) -> list[int]:
    """
    Week number of each row.

    The number comes from the row's fourth cell, using its real calendar
    date even when that cell lies outside the month. In a Sunday-first row
    that is the Wednesday, which shares its ISO week with Monday through
    Saturday of the row.
    """
    row_start = month.first_day - timedelta(days=grid.first_day_offset)
    return [iso_week_number(row_start + timedelta(days=week_index * 7 + 3))
            for week_index in range(grid.weeks_count)]
