"""
Value types used by the calendar layout engine.

Events are owned by the caller and read-only to the engine. Week rows and
spanning placements are recomputed for every (events, month, settings,
timezone) combination and never modified afterwards.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional


@dataclass(frozen=True)
class Event:
    """
    A date-ranged event as supplied by the event store.

    Start and end are kept as given (aware datetime, ISO-8601 string or
    epoch milliseconds); they are parsed when the event is projected onto
    the calendar, so a malformed value only excludes this one event.
    """
    id: int
    name: str
    start_time_utc: Any
    end_time_utc: Any
    color_index: int = 0
    description: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> 'Event':
        """Build an event from the event store's JSON representation."""
        def pick(camel: str, snake: str, default=None):
            if camel in data:
                return data[camel]
            return data.get(snake, default)

        return cls(
            id=int(data.get('id', 0)),
            name=str(data.get('name', '')),
            start_time_utc=pick('startTimeUtc', 'start_time_utc'),
            end_time_utc=pick('endTimeUtc', 'end_time_utc'),
            color_index=int(pick('colorIndex', 'color_index', 0) or 0),
            description=str(data.get('description') or ''),
        )


@dataclass(frozen=True)
class CalendarMonth:
    """The displayed month. ``month`` is 0-based (0 = January)."""
    year: int
    month: int

    def __post_init__(self):
        if not 0 <= self.month <= 11:
            raise ValueError(f"Month must be 0-11, got {self.month}")

    @classmethod
    def from_date(cls, d: date) -> 'CalendarMonth':
        return cls(d.year, d.month - 1)

    @property
    def month_number(self) -> int:
        """1-based month number as used by ``datetime.date``."""
        return self.month + 1

    @property
    def first_day(self) -> date:
        return date(self.year, self.month_number, 1)

    def date_for(self, day: int) -> date:
        return date(self.year, self.month_number, day)

    def shifted(self, delta: int) -> 'CalendarMonth':
        """Month ``delta`` months away (negative for earlier months)."""
        index = self.year * 12 + self.month + delta
        return CalendarMonth(index // 12, index % 12)

    def __str__(self):
        return f"{self.year:04d}-{self.month_number:02d}"


@dataclass(frozen=True)
class SpanningEvent:
    """
    Placement of one event inside one week row.

    Columns are 1-based. ``is_start`` is False when the event began before
    this week, ``is_end`` is False when it continues after it.
    """
    event: Event
    start_col: int
    span: int
    is_start: bool
    is_end: bool

    @property
    def end_col(self) -> int:
        return self.start_col + self.span - 1


@dataclass(frozen=True)
class WeekRow:
    """One row of the month grid with its spanning bars."""
    week_index: int
    days: tuple  # 7 entries, day number or None
    spanning_events: tuple = ()
    # Neighbouring-month day numbers for the None cells (display only)
    adjacent_days: Optional[tuple] = field(default=None, compare=False)

    @property
    def first_day(self) -> Optional[int]:
        return next((d for d in self.days if d is not None), None)

    @property
    def last_day(self) -> Optional[int]:
        return next((d for d in reversed(self.days) if d is not None), None)

    @property
    def first_column(self) -> Optional[int]:
        """1-based column of the first in-month day."""
        for col, day in enumerate(self.days):
            if day is not None:
                return col + 1
        return None

    @property
    def last_column(self) -> Optional[int]:
        """1-based column of the last in-month day."""
        for col in range(len(self.days) - 1, -1, -1):
            if self.days[col] is not None:
                return col + 1
        return None
